"""Tests for reading and writing .ironbackend/config.json."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest

from ironbackend.config import (
    DEFAULT_RULE_CATEGORIES,
    config_path,
    load_local_config,
    load_raw_config,
    new_local_config,
    prompts_dir,
    save_local_config,
    touch_config,
)
from ironbackend.errors import ConfigFormatError, ConfigNotFoundError, ConfigValidationError
from ironbackend.migrations import get_latest_version


class TestPaths:
    def test_layout(self, tmp_path: Path) -> None:
        assert config_path(tmp_path) == tmp_path / ".ironbackend" / "config.json"
        assert prompts_dir(tmp_path) == tmp_path / ".ironbackend" / "prompts"


class TestNewConfig:
    def test_defaults(self) -> None:
        config = new_local_config("cursor", None, "java-spring")
        assert config.version == get_latest_version()
        assert config.tool == "cursor"
        assert config.style is None
        assert config.rules.enabled == DEFAULT_RULE_CATEGORIES
        assert config.rules.overrides == {}
        assert config.created_at == config.updated_at
        assert config.created_at.endswith("Z")

    def test_default_categories_not_shared(self) -> None:
        config = new_local_config(None, None, None)
        config.rules.enabled.append("TRANSACTIONS")
        assert "TRANSACTIONS" not in DEFAULT_RULE_CATEGORIES


class TestLoad:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError, match="ironbackend init"):
            load_raw_config(tmp_path)

    def test_invalid_json(self, project: Path) -> None:
        path = config_path(project)
        path.parent.mkdir()
        path.write_text("{not json")
        with pytest.raises(ConfigFormatError, match="not valid JSON"):
            load_raw_config(project)

    def test_invalid_utf8(self, project: Path) -> None:
        path = config_path(project)
        path.parent.mkdir()
        path.write_bytes(b'{"version": "\xff\xfe"}')
        with pytest.raises(ConfigFormatError, match="not valid UTF-8"):
            load_raw_config(project)

    def test_not_an_object(self, write_config: Callable, project: Path) -> None:
        write_config([])  # type: ignore[arg-type]
        with pytest.raises(ConfigFormatError, match="JSON object"):
            load_raw_config(project)

    def test_current_config_not_rewritten(self, write_config: Callable, raw_config: dict, project: Path) -> None:
        path = write_config(raw_config)
        before = path.read_text()
        result = load_local_config(project)
        assert not result.migrated
        assert result.config.style == "clean-monolith"
        assert path.read_text() == before

    def test_legacy_config_written_back(self, write_config: Callable, legacy_config: dict, project: Path) -> None:
        path = write_config(legacy_config)
        result = load_local_config(project)
        assert result.migrated
        assert json.loads(path.read_text())["version"] == "1.0.1"

    def test_legacy_config_read_only(self, write_config: Callable, legacy_config: dict, project: Path) -> None:
        path = write_config(legacy_config)
        result = load_local_config(project, write_back=False)
        assert result.config.version == "1.0.1"
        assert json.loads(path.read_text())["version"] == "1.0.0"

    def test_invalid_config(self, write_config: Callable, raw_config: dict, project: Path) -> None:
        write_config({**raw_config, "rules": {"enabled": "API"}})
        with pytest.raises(ConfigValidationError) as exc_info:
            load_local_config(project)
        assert {issue.path for issue in exc_info.value.issues} == {"rules.enabled", "rules.overrides"}


class TestSave:
    def test_round_trip(self, tmp_path: Path) -> None:
        config = new_local_config("claude", "cqrs", "node-nestjs")
        path = save_local_config(tmp_path, config)
        assert path == config_path(tmp_path)
        assert load_local_config(tmp_path).config == config

    def test_pretty_json_with_camel_case(self, tmp_path: Path) -> None:
        path = save_local_config(tmp_path, new_local_config("claude", None, None))
        text = path.read_text()
        assert text.endswith("}\n")
        assert '\n  "createdAt": ' in text

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        save_local_config(tmp_path, new_local_config("claude", None, None))
        assert [p.name for p in config_path(tmp_path).parent.iterdir()] == ["config.json"]

    def test_touch(self) -> None:
        config = new_local_config("claude", None, None).model_copy(update={"updated_at": "2000-01-01T00:00:00.000Z"})
        touched = touch_config(config, style="hexagonal")
        assert touched.style == "hexagonal"
        assert touched.updated_at != "2000-01-01T00:00:00.000Z"
        assert config.style is None
