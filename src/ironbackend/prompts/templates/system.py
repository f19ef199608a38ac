"""Main system prompt that sets the assistant's role for a style and stack."""

from __future__ import annotations

from dataclasses import dataclass, field

from ironbackend.prompts.tree import format_folder_structure
from ironbackend.registry.loader import Registry
from ironbackend.registry.rules import all_rules, apply_overrides, format_rules_for_prompt
from ironbackend.registry.security import format_security_for_prompt
from ironbackend.schemas.registry import ArchitectureStyle, TechStack

CODE_GENERATION_GUIDELINES = """\
## Code Generation Guidelines

When generating code, you MUST:
1. Follow the folder structure exactly as defined above
2. Apply all ERROR-severity rules without exception
3. Include proper error handling as per ERR-* rules
4. Add structured logging appropriate for the stack
5. Never skip input validation at API boundaries
6. Use the specified ORM and patterns for data access
7. Write tests for all public interfaces

When asked to create a new feature:
1. First, identify which layer(s) it belongs to
2. Create files in the correct locations
3. Define interfaces before implementations
4. Write unit tests alongside code
5. Add integration points last"""


@dataclass
class SystemPromptContext:
    style: ArchitectureStyle
    stack: TechStack
    include_rules: bool = True
    include_security: bool = True
    rule_overrides: dict[str, str] = field(default_factory=dict)
    registry: Registry | None = None


def generate_system_prompt(context: SystemPromptContext) -> str:
    """Assemble the full system prompt.

    Sections are separated by a blank line; every section except the final
    guidelines ends with a ``---`` rule. The rules section lists the rules
    whose effective severity is ERROR after overrides.
    """
    style, stack = context.style, context.stack
    sections: list[str] = []

    sections.append(
        "# IronBackend System Prompt\n\n"
        f"You are a senior backend engineer with 10+ years of experience in {style.name} architecture.\n"
        f"Your expertise includes {stack.language} with {stack.framework}, "
        "and you follow strict design principles.\n\n---"
    )

    principles = "\n".join(f"{i}. {p}" for i, p in enumerate(style.core_principles, start=1))
    pitfalls = "\n".join(f"- ❌ {p}" for p in style.common_pitfalls)
    sections.append(
        f"## Architecture: {style.name}\n\n"
        f"{style.description}\n\n"
        f"### Core Principles\n{principles}\n\n"
        f"### Project Structure\n```\n{format_folder_structure(style.folder_structure)}\n```\n\n"
        f"### Anti-Patterns to Avoid\n{pitfalls}\n\n---"
    )

    conventions = "\n".join(f"- {c}" for c in stack.conventions)
    sections.append(
        "## Technology Stack\n\n"
        "| Component | Choice |\n"
        "|-----------|--------|\n"
        f"| Language | {stack.language} {stack.language_version} |\n"
        f"| Framework | {stack.framework} {stack.framework_version} |\n"
        f"| Database | {stack.database.type} with {stack.database.orm} |\n"
        f"| Messaging | {stack.messaging.provider} |\n"
        f"| Auth | {stack.authentication} |\n"
        f"| Logging | {stack.logging} |\n"
        f"| Testing | {stack.testing.unit} (unit), {stack.testing.integration} (integration) |\n\n"
        f"### Conventions\n{conventions}\n\n---"
    )

    sections.append(f"## AI Behavior Instructions\n\n{style.ai_instructions}\n\n---")

    if context.include_rules:
        rules = apply_overrides(all_rules(context.registry), context.rule_overrides)
        errors = [r for r in rules if r.severity == "ERROR"]
        sections.append(
            "## Enforced Design Rules (ERROR severity = must follow)\n\n"
            f"{format_rules_for_prompt(errors)}\n\n---"
        )

    if context.include_security:
        sections.append(f"## Security Requirements\n\n{format_security_for_prompt(context.registry)}\n\n---")

    sections.append(CODE_GENERATION_GUIDELINES)
    return "\n\n".join(sections)


def generate_minimal_system_prompt(context: SystemPromptContext) -> str:
    """Short variant for small context windows."""
    style, stack = context.style, context.stack
    key_rules = "\n- ".join(style.core_principles[:3])
    anti_patterns = "\n- ".join(style.common_pitfalls[:3])
    instructions = "\n".join(style.ai_instructions.split("\n")[:10])
    return (
        "# IronBackend v1.0\n\n"
        f"You are a {style.name} architecture expert using {stack.language}/{stack.framework}.\n\n"
        f"## Key Rules\n- {key_rules}\n\n"
        f"## Anti-Patterns\n- {anti_patterns}\n\n"
        f"## Stack: {stack.database.type} + {stack.database.orm}, {stack.messaging.provider}\n\n"
        f"{instructions}"
    )
