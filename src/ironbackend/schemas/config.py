"""Configuration schemas for .ironbackend/config.json and exported configs."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ironbackend.errors import ConfigValidationError
from ironbackend.schemas.registry import (
    AuthorizationModel,
    AuthStrategy,
    RuleCategory,
    RuleSeverity,
)

VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")
VERSION_MESSAGE = "Version must be in format x.y.z (e.g., 1.0.0)"


class RulesConfig(BaseModel):
    """Enabled rule categories and per-rule severity overrides.

    ``enabled`` accepts any string here; only the exported config restricts
    it to known categories.
    """

    model_config = ConfigDict(strict=True)

    enabled: list[str]
    overrides: dict[str, RuleSeverity]


class LocalConfig(BaseModel):
    """Per-project config persisted at .ironbackend/config.json.

    Unknown top-level keys are accepted and dropped.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    version: str
    tool: str | None
    style: str | None
    stack: str | None
    rules: RulesConfig
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @field_validator("version")
    @classmethod
    def check_version_format(cls, v: str) -> str:
        if not VERSION_PATTERN.match(v):
            raise ValueError(VERSION_MESSAGE)
        return v

    def to_json_dict(self) -> dict[str, Any]:
        """Return the on-disk JSON shape (camelCase keys, unset timestamps omitted)."""
        data = self.model_dump(by_alias=True)
        for key in ("createdAt", "updatedAt"):
            if data[key] is None:
                del data[key]
        return data


# ── Exported config (strict categories) ──────────────────────────────


class StrictRulesConfig(BaseModel):
    model_config = ConfigDict(strict=True)

    enabled: list[RuleCategory]
    overrides: dict[str, RuleSeverity]


class SecurityConfig(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    auth_strategy: AuthStrategy | None = Field(default=None, alias="authStrategy")
    authorization_model: AuthorizationModel | None = Field(default=None, alias="authorizationModel")


class IronBackendConfig(BaseModel):
    """Shareable config written by ``ironbackend export config``."""

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    version: str
    style: str | None = None
    stack: str | None = None
    rules: StrictRulesConfig
    security: SecurityConfig | None = None


# ── Validation results ───────────────────────────────────────────────


@dataclass(frozen=True)
class ConfigIssue:
    """One field-level validation failure."""

    path: str
    message: str


@dataclass(frozen=True)
class ValidationSuccess:
    config: LocalConfig
    success: Literal[True] = True


@dataclass(frozen=True)
class ValidationFailure:
    issues: list[ConfigIssue] = field(default_factory=list)
    success: Literal[False] = False


ValidationResult = ValidationSuccess | ValidationFailure


def _issues_from(exc: ValidationError) -> list[ConfigIssue]:
    issues: list[ConfigIssue] = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"])
        message = err["msg"].removeprefix("Value error, ")
        issues.append(ConfigIssue(path=path, message=message))
    return issues


def safe_validate_local_config(raw: object) -> ValidationResult:
    """Validate ``raw`` without raising; branch on ``result.success``."""
    try:
        config = LocalConfig.model_validate(raw)
    except ValidationError as exc:
        return ValidationFailure(issues=_issues_from(exc))
    return ValidationSuccess(config=config)


def validate_local_config(raw: object) -> LocalConfig:
    """Validate ``raw`` and return the parsed config.

    Raises ``ConfigValidationError`` listing every violation.
    """
    result = safe_validate_local_config(raw)
    if not result.success:
        raise ConfigValidationError(result.issues)
    return result.config


def validate_config(raw: object) -> IronBackendConfig:
    """Validate an exported (strict) config."""
    try:
        return IronBackendConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(_issues_from(exc)) from exc


def format_validation_error(issues: list[ConfigIssue]) -> str:
    """Render issues as ``  - path: message`` lines for terminal output."""
    return "\n".join(f"  - {issue.path or '(root)'}: {issue.message}" for issue in issues)
