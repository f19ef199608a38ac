"""Input sanitizing for user-supplied CLI values."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ironbackend.errors import PathTraversalError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_IDENTIFIER = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")
_SLUG = r"^[a-z][a-z0-9-]*$"


def sanitize_file_path(user_path: str | Path, base_dir: str | Path) -> Path:
    """Resolve ``user_path`` against ``base_dir``; it must stay inside it.

    Raises ``PathTraversalError`` when the resolved path escapes.
    """
    base = Path(base_dir).resolve()
    resolved = (base / user_path).resolve()
    if resolved != base and base not in resolved.parents:
        raise PathTraversalError(f"Invalid file path: path traversal detected ({user_path})")
    return resolved


def sanitize_input(value: str) -> str:
    """Strip control characters and surrounding whitespace."""
    return _CONTROL_CHARS.sub("", value).strip()


def is_valid_identifier(value: str) -> bool:
    return bool(_IDENTIFIER.match(value))


def validate_directory(path: str | Path) -> bool:
    return Path(path).is_dir()


class CliArgs(BaseModel):
    """Shape check for ids and paths taken from the command line."""

    model_config = ConfigDict(strict=True)

    style_id: str | None = Field(default=None, pattern=_SLUG)
    stack_id: str | None = Field(default=None, pattern=_SLUG)
    tool_id: str | None = Field(default=None, pattern=_SLUG)
    output_path: str | None = None


def validate_cli_args(**kwargs: str | None) -> CliArgs:
    """Raises ``pydantic.ValidationError`` when an id is not a lowercase slug."""
    return CliArgs(**kwargs)


def format_cli_error(exc: ValidationError) -> str:
    lines = [f"  - {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return "Validation error:\n" + "\n".join(lines)
