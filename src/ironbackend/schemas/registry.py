"""Pydantic models for the bundled knowledge base: styles, stacks, rules and security.

Every record is frozen and stores sequences as tuples, so the registry can
hand out the same instance to every caller without copying.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

RuleSeverity = Literal["ERROR", "WARN"]
RuleCategory = Literal[
    "API",
    "DOMAIN",
    "ERROR_HANDLING",
    "TRANSACTIONS",
    "DATA_ACCESS",
    "NAMING",
    "VALIDATION",
    "ASYNC",
]
AuthStrategy = Literal["JWT", "SESSION", "API_KEY", "OAUTH2", "MTLS"]
AuthorizationModel = Literal["RBAC", "ABAC"]

RULE_CATEGORIES: tuple[RuleCategory, ...] = (
    "API",
    "DOMAIN",
    "ERROR_HANDLING",
    "TRANSACTIONS",
    "DATA_ACCESS",
    "NAMING",
    "VALIDATION",
    "ASYNC",
)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ── Architecture styles ──────────────────────────────────────────────


class FolderNode(_Record):
    """One entry in a style's recommended project layout."""

    name: str
    type: Literal["folder", "file"]
    description: str | None = None
    children: tuple[FolderNode, ...] = ()


class ArchitectureStyle(_Record):
    id: str
    name: str
    description: str
    when_to_use: tuple[str, ...]
    when_not_to_use: tuple[str, ...]
    core_principles: tuple[str, ...]  # order is meaningful: rendered as 1..N
    folder_structure: FolderNode
    common_pitfalls: tuple[str, ...]
    ai_instructions: str


# ── Tech stacks ──────────────────────────────────────────────────────


class DatabaseConfig(_Record):
    type: str
    orm: str
    driver: str | None = None


class MessagingConfig(_Record):
    type: str
    provider: str


class TestingConfig(_Record):
    unit: str
    integration: str
    e2e: str | None = None
    coverage_target: int


class TechStack(_Record):
    id: str
    name: str
    language: str
    language_version: str
    framework: str
    framework_version: str
    database: DatabaseConfig
    messaging: MessagingConfig
    authentication: str
    logging: str
    testing: TestingConfig
    deployment: tuple[str, ...]
    conventions: tuple[str, ...]


# ── Design rules ─────────────────────────────────────────────────────


class RuleExample(_Record):
    type: Literal["good", "bad"]
    code: str
    explanation: str | None = None


class DesignRule(_Record):
    id: str
    category: RuleCategory
    rule: str
    severity: RuleSeverity
    rationale: str | None = None
    examples: tuple[RuleExample, ...] = ()


# ── Security playbook ────────────────────────────────────────────────


class AuthConfig(_Record):
    strategy: AuthStrategy
    use_when: tuple[str, ...]
    implementation: tuple[str, ...]


class AuthModelDescription(_Record):
    description: str
    check_pattern: str
    good_for: tuple[str, ...]


class DecisionMatrixRow(_Record):
    rbac: str
    abac: str


class AuthorizationDescription(_Record):
    rbac: AuthModelDescription
    abac: AuthModelDescription
    decision_matrix: dict[str, DecisionMatrixRow]


class RateLimitConfig(_Record):
    window_type: str
    default_limit: str
    anonymous_limit: str
    headers: tuple[str, ...]
    response_code: int


class IdempotencyConfig(_Record):
    header_name: str
    key_format: str
    storage_duration: str
    implementation: tuple[str, ...]


class RetryConfig(_Record):
    base_delay: str
    multiplier: int
    max_retries: int
    max_delay: str
    jitter: str
    retry_on: tuple[int, ...]
    do_not_retry_on: tuple[int, ...]


class CircuitBreakerConfig(_Record):
    states: tuple[str, ...]
    failure_threshold: int
    success_threshold: int
    timeout: str
    monitoring_window: str


class AuditConfig(_Record):
    required_events: tuple[str, ...]
    log_format: dict[str, str]


class SecurityPlaybook(_Record):
    authentication: tuple[AuthConfig, ...]
    authorization: AuthorizationDescription
    rate_limiting: RateLimitConfig
    idempotency: IdempotencyConfig
    retry_strategy: RetryConfig
    circuit_breaker: CircuitBreakerConfig
    audit_logging: AuditConfig
    failure_philosophy: tuple[str, ...]
