"""Design rule enforcement prompt templates."""

from __future__ import annotations

from collections.abc import Sequence

from ironbackend.registry.loader import Registry
from ironbackend.registry.rules import (
    apply_overrides,
    format_rules_for_prompt,
    get_error_rules,
    get_rules_by_category,
)
from ironbackend.schemas.registry import DesignRule, RuleCategory

DEFAULT_ENFORCED_CATEGORIES: tuple[RuleCategory, ...] = ("API", "DOMAIN", "ERROR_HANDLING", "DATA_ACCESS")

CATEGORY_NAMES: dict[str, str] = {
    "API": "API Design",
    "DOMAIN": "Domain Modeling",
    "ERROR_HANDLING": "Error Handling",
    "TRANSACTIONS": "Transaction",
    "DATA_ACCESS": "Data Access",
    "NAMING": "Naming Convention",
    "VALIDATION": "Validation",
    "ASYNC": "Async/Concurrency",
}

SEVERITY_LEGEND = """\
# Design Rules Enforcement

## Severity Levels

- **ERROR**: MUST be followed. Reject code that violates these rules.
- **WARN**: SHOULD be followed. Recommend but allow exceptions with justification.

---"""

VALIDATION_CHECKLIST = """\
---

## Validation Checklist

Before completing any code generation, verify:

- [ ] All ERROR-severity rules are satisfied
- [ ] WARN-severity rules are considered (document exceptions)
- [ ] No anti-patterns present
- [ ] Proper error handling implemented
- [ ] Input validation at boundaries
- [ ] Logging included for observability
- [ ] Tests cover the new code"""


def format_category_name(category: str) -> str:
    return CATEGORY_NAMES.get(category, category)


def generate_rule_enforcement_prompt(
    categories: Sequence[str] | None = None,
    registry: Registry | None = None,
    overrides: dict[str, str] | None = None,
) -> str:
    """Severity legend, one section per requested category, then the checklist.

    Categories with no rules are skipped. ``overrides`` re-tags rule
    severities by id for this rendering only.
    """
    if categories is None:
        categories = DEFAULT_ENFORCED_CATEGORIES

    sections: list[str] = [SEVERITY_LEGEND]
    for category in categories:
        rules = apply_overrides(get_rules_by_category(category, registry), overrides)
        if rules:
            sections.append(f"## {format_category_name(category)} Rules\n\n{format_rules_for_prompt(rules)}\n")
    sections.append(VALIDATION_CHECKLIST)
    return "\n\n".join(sections)


def _rule_block(rule: DesignRule) -> str:
    block = f"### {rule.id}: {rule.rule}\n"
    if rule.rationale:
        block += f"*Rationale: {rule.rationale}*"
    return block


def generate_category_enforcement_prompt(category: str, registry: Registry | None = None) -> str:
    """MUST/SHOULD breakdown of a single category, with rationales."""
    rules = get_rules_by_category(category, registry)
    errors = [r for r in rules if r.severity == "ERROR"]
    warnings = [r for r in rules if r.severity == "WARN"]

    sections: list[str] = [
        f"# {format_category_name(category)} Rules",
        "## MUST Follow (ERROR severity)",
        "\n\n".join(_rule_block(r) for r in errors),
        "## SHOULD Follow (WARN severity)",
        "\n\n".join(_rule_block(r) for r in warnings),
    ]
    return "\n\n".join(sections)


def generate_compact_rules_prompt(registry: Registry | None = None) -> str:
    lines = [f"- {r.id}: {r.rule}" for r in get_error_rules(registry)]
    return "# Critical Design Rules (Must Follow)\n\n" + "\n".join(lines)


def generate_rule_examples_prompt(rules: Sequence[DesignRule]) -> str:
    """Bad/good code examples for each rule that has any; other rules are skipped."""
    blocks: list[str] = []
    for rule in rules:
        if not rule.examples:
            continue
        parts: list[str] = [f"## {rule.id}: {rule.rule}"]
        for kind, heading in (("bad", "### ❌ Bad"), ("good", "### ✅ Good")):
            example = next((e for e in rule.examples if e.type == kind), None)
            if example is None:
                continue
            lines = [heading, "```", example.code, "```"]
            if example.explanation:
                lines.append(f"*{example.explanation}*")
            parts.append("\n".join(lines))
        blocks.append("\n\n".join(parts))
    return "# Rule Examples\n\n" + "\n\n".join(blocks)
