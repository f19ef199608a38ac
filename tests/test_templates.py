"""Tests for the prompt section templates."""

from __future__ import annotations

import pytest

from ironbackend.prompts.templates.rules import (
    format_category_name,
    generate_category_enforcement_prompt,
    generate_compact_rules_prompt,
    generate_rule_enforcement_prompt,
    generate_rule_examples_prompt,
)
from ironbackend.prompts.templates.stack import (
    generate_stack_code_style,
    generate_stack_comparison_prompt,
    generate_stack_prompt,
)
from ironbackend.prompts.templates.style import generate_style_comparison_prompt, generate_style_prompt
from ironbackend.prompts.templates.system import (
    SystemPromptContext,
    generate_minimal_system_prompt,
    generate_system_prompt,
)
from ironbackend.registry.loader import Registry
from ironbackend.schemas.registry import DesignRule, RuleExample


@pytest.fixture
def monolith(registry: Registry):
    return registry.styles["clean-monolith"]


@pytest.fixture
def fastapi(registry: Registry):
    return registry.stacks["python-fastapi"]


class TestStylePrompt:
    def test_sections_in_order(self, monolith) -> None:
        text = generate_style_prompt(monolith)
        headings = [line for line in text.splitlines() if line.startswith("## ")]
        assert headings == [
            "## Description",
            "## When to Use This Style",
            "## When NOT to Use This Style",
            "## Core Principles",
            "## Project Structure",
            "## AI Behavior Instructions",
            "## Violations to Flag",
            "## Decision Making",
        ]

    def test_content(self, monolith) -> None:
        text = generate_style_prompt(monolith)
        assert text.startswith("# Architecture Style: Clean Monolith\n")
        assert f"✅ {monolith.when_to_use[0]}" in text
        assert f"❌ {monolith.when_not_to_use[0]}" in text
        assert f"1. {monolith.core_principles[0]}" in text
        assert f"⚠️ {monolith.common_pitfalls[0]}" in text
        assert "```\n📁 src" in text
        assert text.endswith("4. Create new folders only if they fit the pattern")

    def test_comparison_complexity(self, registry: Registry) -> None:
        styles = [registry.styles[i] for i in ("clean-monolith", "modular-monolith", "cqrs")]
        text = generate_style_comparison_prompt(styles)
        assert text.startswith("# Architecture Style Selection Guide")
        complexities = [line for line in text.splitlines() if line.startswith("**Complexity:**")]
        assert complexities == ["**Complexity:** 🟢 Low", "**Complexity:** 🟡 Medium", "**Complexity:** 🔴 High"]


class TestStackPrompt:
    def test_content(self, fastapi) -> None:
        text = generate_stack_prompt(fastapi)
        assert text.startswith("# Technology Stack: Python + FastAPI\n")
        assert "- **Language:** Python 3.11+" in text
        assert "- **Driver:** asyncpg" in text
        assert "| Unit | pytest | 80% coverage |" in text
        assert "| E2E | pytest-asyncio | Critical paths |" in text
        assert "1. Pydantic models for request/response schemas" in text
        assert text.endswith("Handle HTTP concerns only, delegate to services.")

    def test_driver_and_e2e_rows_are_optional(self, fastapi) -> None:
        bare = fastapi.model_copy(
            update={
                "database": fastapi.database.model_copy(update={"driver": None}),
                "testing": fastapi.testing.model_copy(update={"e2e": None}),
            }
        )
        text = generate_stack_prompt(bare)
        assert "**Driver:**" not in text
        assert "| E2E |" not in text

    def test_code_style(self, fastapi) -> None:
        assert generate_stack_code_style(fastapi).startswith("# FastAPI")
        other = fastapi.model_copy(update={"id": "elixir-phoenix"})
        assert generate_stack_code_style(other) == "// Follow stack conventions"

    def test_comparison(self, registry: Registry) -> None:
        text = generate_stack_comparison_prompt(list(registry.stacks.values()))
        assert text.startswith("# Technology Stack Selection Guide")
        assert "Data science, ML integration, rapid prototyping" in text
        assert "## Java + Spring Boot" in text


class TestRulesPrompt:
    def test_default_categories(self) -> None:
        text = generate_rule_enforcement_prompt()
        assert text.startswith("# Design Rules Enforcement")
        for heading in ("API Design", "Domain Modeling", "Error Handling", "Data Access"):
            assert f"## {heading} Rules" in text
        assert "## Naming Convention Rules" not in text
        assert text.endswith("- [ ] Tests cover the new code")

    def test_only_requested_categories(self) -> None:
        text = generate_rule_enforcement_prompt(["NAMING"])
        assert "NAM-001" in text
        assert "API-001" not in text
        assert "## API Design Rules" not in text

    def test_unknown_category_is_skipped(self) -> None:
        text = generate_rule_enforcement_prompt(["SORCERY"])
        assert "SORCERY" not in text
        assert "## Validation Checklist" in text

    def test_overrides(self) -> None:
        text = generate_rule_enforcement_prompt(["API"], overrides={"API-001": "WARN"})
        assert "[WARN] API-001:" in text
        assert "[ERROR] API-002:" in text

    def test_category_enforcement(self) -> None:
        text = generate_category_enforcement_prompt("TRANSACTIONS")
        assert text.startswith("# Transaction Rules\n\n## MUST Follow (ERROR severity)")
        assert "### TXN-001:" in text
        assert "*Rationale: " in text
        assert text.index("## MUST Follow") < text.index("## SHOULD Follow")

    def test_compact_lists_only_errors(self) -> None:
        text = generate_compact_rules_prompt()
        assert text.startswith("# Critical Design Rules (Must Follow)\n\n- API-001:")
        assert "- API-004:" not in text

    def test_category_names(self) -> None:
        assert format_category_name("ASYNC") == "Async/Concurrency"
        assert format_category_name("OTHER") == "OTHER"


class TestRuleExamples:
    def test_bad_and_good_blocks(self) -> None:
        rule = DesignRule(
            id="API-100",
            category="API",
            rule="Return typed responses",
            severity="ERROR",
            examples=(
                RuleExample(type="good", code="return UserDto(user)"),
                RuleExample(type="bad", code="return user.__dict__", explanation="Leaks internals"),
            ),
        )
        text = generate_rule_examples_prompt([rule])
        assert text == (
            "# Rule Examples\n\n"
            "## API-100: Return typed responses\n\n"
            "### ❌ Bad\n```\nreturn user.__dict__\n```\n*Leaks internals*\n\n"
            "### ✅ Good\n```\nreturn UserDto(user)\n```"
        )

    def test_rules_without_examples_are_skipped(self, registry: Registry) -> None:
        text = generate_rule_examples_prompt([registry.rules["API-001"]])
        assert text == "# Rule Examples\n\n"


class TestSystemPrompt:
    def test_full_prompt(self, monolith, fastapi) -> None:
        text = generate_system_prompt(SystemPromptContext(style=monolith, stack=fastapi))
        assert text.startswith("# IronBackend System Prompt\n\n")
        assert "Python with FastAPI" in text
        assert "---\n\n## Architecture: Clean Monolith" in text
        assert "---\n\n## Technology Stack" in text
        assert "| Database | PostgreSQL with SQLAlchemy 2.0 |" in text
        assert f"- ❌ {monolith.common_pitfalls[0]}" in text
        assert "## Enforced Design Rules" in text
        assert "[WARN]" not in text
        assert "## Security Requirements\n\n## Authentication" in text
        assert text.endswith("5. Add integration points last")

    def test_optional_sections(self, monolith, fastapi) -> None:
        text = generate_system_prompt(
            SystemPromptContext(style=monolith, stack=fastapi, include_rules=False, include_security=False)
        )
        assert "## Enforced Design Rules" not in text
        assert "## Security Requirements" not in text
        assert "## Code Generation Guidelines" in text

    def test_overrides_drop_rules_from_error_list(self, monolith, fastapi) -> None:
        text = generate_system_prompt(
            SystemPromptContext(style=monolith, stack=fastapi, rule_overrides={"API-001": "WARN", "API-004": "ERROR"})
        )
        assert "API-001:" not in text
        assert "[ERROR] API-004:" in text

    def test_minimal(self, monolith, fastapi) -> None:
        text = generate_minimal_system_prompt(SystemPromptContext(style=monolith, stack=fastapi))
        assert text.startswith("# IronBackend v1.0\n\n")
        assert "## Stack: PostgreSQL + SQLAlchemy 2.0, Celery (Redis) or arq" in text
        assert "## Enforced Design Rules" not in text
