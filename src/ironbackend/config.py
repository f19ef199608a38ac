"""Reads and writes .ironbackend/config.json."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ironbackend.errors import ConfigFormatError, ConfigNotFoundError
from ironbackend.migrations import MigrationResult, get_latest_version, migrate_config
from ironbackend.schemas.config import LocalConfig, RulesConfig
from ironbackend.shared.clock import utc_timestamp

logger = logging.getLogger(__name__)

IRONBACKEND_DIR = ".ironbackend"
CONFIG_FILE = "config.json"
PROMPTS_DIR = "prompts"
VERSION = "1.0.0"

DEFAULT_RULE_CATEGORIES = [
    "API",
    "DOMAIN",
    "ERROR_HANDLING",
    "DATA_ACCESS",
    "NAMING",
    "VALIDATION",
    "ASYNC",
]


def ironbackend_dir(root: str | Path) -> Path:
    return Path(root) / IRONBACKEND_DIR


def config_path(root: str | Path) -> Path:
    return ironbackend_dir(root) / CONFIG_FILE


def prompts_dir(root: str | Path) -> Path:
    return ironbackend_dir(root) / PROMPTS_DIR


def new_local_config(tool: str | None, style: str | None, stack: str | None) -> LocalConfig:
    """Fresh config at the latest schema version with the default rule categories."""
    now = utc_timestamp()
    return LocalConfig(
        version=get_latest_version(),
        tool=tool,
        style=style,
        stack=stack,
        rules=RulesConfig(enabled=list(DEFAULT_RULE_CATEGORIES), overrides={}),
        created_at=now,
        updated_at=now,
    )


def load_raw_config(root: str | Path) -> dict[str, Any]:
    """Read config.json without validating it.

    Raises ``ConfigNotFoundError`` if the file doesn't exist and
    ``ConfigFormatError`` if it isn't a UTF-8 JSON object.
    """
    path = config_path(root)
    if not path.exists():
        raise ConfigNotFoundError(f"IronBackend not initialized ({path} not found). Run: ironbackend init")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigFormatError(f"{path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigFormatError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigFormatError(f"{path} must contain a JSON object, got {type(raw).__name__}")
    return raw


def load_local_config(root: str | Path, *, write_back: bool = True) -> MigrationResult:
    """Load, migrate and validate the project config.

    When a migration ran and ``write_back`` is set, the upgraded config
    replaces the file on disk.
    """
    raw = load_raw_config(root)
    result = migrate_config(raw)
    if result.migrated:
        for step in result.applied_migrations:
            logger.info("Applied config migration %s", step)
        if write_back:
            save_local_config(root, result.config)
    return result


def save_local_config(root: str | Path, config: LocalConfig) -> Path:
    """Write ``config`` to config.json, replacing the file atomically."""
    path = config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(config.to_json_dict(), indent=2) + "\n"

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".config-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s", path)
    return path


def touch_config(config: LocalConfig, **changes: Any) -> LocalConfig:
    """Copy of ``config`` with ``changes`` applied and ``updated_at`` refreshed."""
    return config.model_copy(update={**changes, "updated_at": utc_timestamp()})
