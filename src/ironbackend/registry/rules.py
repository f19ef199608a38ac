"""Design rule lookups and the compact prompt formatter."""

from __future__ import annotations

from collections.abc import Iterable

from ironbackend.registry.loader import Registry, default_registry
from ironbackend.schemas.registry import DesignRule, RuleCategory


def get_rule(rule_id: str, registry: Registry | None = None) -> DesignRule | None:
    registry = registry or default_registry()
    return registry.rule_cache.get(rule_id)


def get_rules_by_category(category: str, registry: Registry | None = None) -> list[DesignRule]:
    """Rules in ``category`` in registration order; empty for unknown categories."""
    registry = registry or default_registry()
    return list(registry.rules_by_category.get(category, ()))  # type: ignore[call-overload]


def all_rules(registry: Registry | None = None) -> list[DesignRule]:
    registry = registry or default_registry()
    return list(registry.rules.values())


def rules_by_category(registry: Registry | None = None) -> dict[RuleCategory, list[DesignRule]]:
    registry = registry or default_registry()
    return {category: list(rules) for category, rules in registry.rules_by_category.items()}


def get_error_rules(registry: Registry | None = None) -> list[DesignRule]:
    return [r for r in all_rules(registry) if r.severity == "ERROR"]


def get_warn_rules(registry: Registry | None = None) -> list[DesignRule]:
    return [r for r in all_rules(registry) if r.severity == "WARN"]


def apply_overrides(rules: Iterable[DesignRule], overrides: dict[str, str] | None) -> list[DesignRule]:
    """Return copies of ``rules`` with severities replaced per ``overrides``.

    Registry records are never modified.
    """
    if not overrides:
        return list(rules)
    result: list[DesignRule] = []
    for rule in rules:
        severity = overrides.get(rule.id)
        if severity is not None and severity != rule.severity:
            rule = rule.model_copy(update={"severity": severity})
        result.append(rule)
    return result


def format_rules_for_prompt(rules: Iterable[DesignRule]) -> str:
    """One ``[SEVERITY] ID: rule`` line per rule."""
    return "\n".join(f"[{r.severity}] {r.id}: {r.rule}" for r in rules)
