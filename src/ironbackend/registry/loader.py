"""Reads the bundled YAML knowledge base into frozen models."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from ironbackend.schemas.registry import (
    RULE_CATEGORIES,
    ArchitectureStyle,
    DesignRule,
    RuleCategory,
    SecurityPlaybook,
    TechStack,
)
from ironbackend.shared.cache import LookupCache

STYLES_FILE = "styles.yml"
STACKS_FILE = "stacks.yml"
RULES_FILE = "rules.yml"
SECURITY_FILE = "security.yml"

_DATA_DIR = Path(__file__).parent / "data"


def _parse(text: str, name: str) -> Any:
    raw = yaml.safe_load(text)
    if raw is None:
        raise ValueError(f"Registry data file is empty: {name}")
    return raw


def _index(records: list[Any], name: str) -> Mapping[str, Any]:
    table: dict[str, Any] = {}
    for record in records:
        if record.id in table:
            raise ValueError(f"Duplicate id {record.id!r} in {name}")
        table[record.id] = record
    return MappingProxyType(table)


class Registry:
    """Immutable, id-keyed tables for styles, stacks, rules and security.

    Enumeration order follows the order of the source data files.
    """

    def __init__(
        self,
        styles: list[ArchitectureStyle],
        stacks: list[TechStack],
        rules: list[DesignRule],
        security: SecurityPlaybook,
    ) -> None:
        self.styles: Mapping[str, ArchitectureStyle] = _index(styles, STYLES_FILE)
        self.stacks: Mapping[str, TechStack] = _index(stacks, STACKS_FILE)
        self.rules: Mapping[str, DesignRule] = _index(rules, RULES_FILE)
        self.security = security

        grouped: dict[RuleCategory, tuple[DesignRule, ...]] = {}
        for category in RULE_CATEGORIES:
            grouped[category] = tuple(r for r in rules if r.category == category)
        self.rules_by_category: Mapping[RuleCategory, tuple[DesignRule, ...]] = MappingProxyType(grouped)

        self.style_cache: LookupCache[str, ArchitectureStyle | None] = LookupCache(self.styles.get)
        self.stack_cache: LookupCache[str, TechStack | None] = LookupCache(self.stacks.get)
        self.rule_cache: LookupCache[str, DesignRule | None] = LookupCache(self.rules.get)

    @classmethod
    def from_texts(cls, texts: Mapping[str, str]) -> Registry:
        """Build a registry from the raw YAML text of the four data files."""
        raw_styles = _parse(texts[STYLES_FILE], STYLES_FILE)
        raw_stacks = _parse(texts[STACKS_FILE], STACKS_FILE)
        raw_rules = _parse(texts[RULES_FILE], RULES_FILE)
        raw_security = _parse(texts[SECURITY_FILE], SECURITY_FILE)

        if not isinstance(raw_rules, dict):
            raise ValueError(f"{RULES_FILE} must be a mapping of category to rules")

        rules: list[DesignRule] = []
        for category, entries in raw_rules.items():
            for entry in entries or []:
                rules.append(DesignRule.model_validate({**entry, "category": category}))

        return cls(
            styles=[ArchitectureStyle.model_validate(s) for s in raw_styles],
            stacks=[TechStack.model_validate(s) for s in raw_stacks],
            rules=rules,
            security=SecurityPlaybook.model_validate(raw_security),
        )

    @classmethod
    def load(cls) -> Registry:
        """Load the data files shipped inside the package."""
        return cls.from_directory(_DATA_DIR)

    @classmethod
    def from_directory(cls, path: str | Path) -> Registry:
        """Load data files from ``path`` instead of the package."""
        path = Path(path)
        if not path.is_dir():
            raise FileNotFoundError(f"Registry data directory not found: {path}")
        names = (STYLES_FILE, STACKS_FILE, RULES_FILE, SECURITY_FILE)
        return cls.from_texts({name: (path / name).read_text(encoding="utf-8") for name in names})


_default: Registry | None = None


def default_registry() -> Registry:
    """Return the process-wide registry, loading it on first use."""
    global _default
    if _default is None:
        _default = Registry.load()
    return _default
