"""Shared test fixtures."""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any, Callable

import pytest

from ironbackend.registry import loader
from ironbackend.registry.loader import Registry, default_registry


@pytest.fixture
def registry() -> Registry:
    return default_registry()


@pytest.fixture
def raw_config() -> dict[str, Any]:
    """A valid config.json payload at the current version."""
    return {
        "version": "1.0.1",
        "tool": "claude",
        "style": "clean-monolith",
        "stack": "python-fastapi",
        "rules": {"enabled": ["API", "DOMAIN"], "overrides": {}},
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }


@pytest.fixture
def legacy_config(raw_config: dict[str, Any]) -> dict[str, Any]:
    """The same payload as written by a 1.0.0 CLI."""
    return {**raw_config, "version": "1.0.0"}


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty project directory that is also the working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def write_config(project: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a config.json payload into the project and return its path."""

    def _write(payload: dict[str, Any]) -> Path:
        path = project / ".ironbackend" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2))
        return path

    return _write


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A writable copy of the bundled registry data files."""
    target = tmp_path / "data"
    shutil.copytree(Path(loader.__file__).parent / "data", target)
    return target
