"""Tests for CLI input sanitizing."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ironbackend.errors import PathTraversalError
from ironbackend.shared.validation import (
    format_cli_error,
    is_valid_identifier,
    sanitize_file_path,
    sanitize_input,
    validate_cli_args,
    validate_directory,
)


class TestSanitizeFilePath:
    def test_relative_path_inside_base(self, tmp_path: Path) -> None:
        assert sanitize_file_path("out/prompts", tmp_path) == (tmp_path / "out" / "prompts").resolve()

    def test_base_itself_allowed(self, tmp_path: Path) -> None:
        assert sanitize_file_path(".", tmp_path) == tmp_path.resolve()

    @pytest.mark.parametrize("path", ["../escape", "out/../../escape", "/etc/passwd"])
    def test_escape_rejected(self, tmp_path: Path, path: str) -> None:
        with pytest.raises(PathTraversalError, match="path traversal"):
            sanitize_file_path(path, tmp_path / "project")


class TestInputs:
    def test_sanitize_input(self) -> None:
        assert sanitize_input("  clean-\x00monolith\n") == "clean-monolith"

    @pytest.mark.parametrize(("value", "expected"), [("cqrs", True), ("my_style-2", True), ("2fast", False), ("", False)])
    def test_identifier(self, value: str, expected: bool) -> None:
        assert is_valid_identifier(value) is expected

    def test_validate_directory(self, tmp_path: Path) -> None:
        assert validate_directory(tmp_path)
        assert not validate_directory(tmp_path / "missing")


class TestCliArgs:
    def test_valid(self) -> None:
        args = validate_cli_args(style_id="clean-monolith", stack_id=None, tool_id="claude")
        assert args.style_id == "clean-monolith"

    def test_bad_slug(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_cli_args(style_id="Clean Monolith")
        message = format_cli_error(exc_info.value)
        assert message.startswith("Validation error:\n  - style_id: ")
