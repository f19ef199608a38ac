"""Architecture style prompt templates."""

from __future__ import annotations

from collections.abc import Sequence

from ironbackend.prompts.tree import format_folder_structure
from ironbackend.schemas.registry import ArchitectureStyle

_LOW_COMPLEXITY = ("clean-monolith", "serverless", "automation")
_HIGH_COMPLEXITY = ("hexagonal", "event-driven", "cqrs", "microservices-async")

DECISION_MAKING = """\
## Decision Making

When asked where to put new code:
1. Identify the layer based on responsibilities
2. Check the folder structure above
3. Place code in the appropriate directory
4. Create new folders only if they fit the pattern"""


def style_complexity(style: ArchitectureStyle) -> str:
    if style.id in _LOW_COMPLEXITY:
        return "🟢 Low"
    if style.id in _HIGH_COMPLEXITY:
        return "🔴 High"
    return "🟡 Medium"


def generate_style_prompt(style: ArchitectureStyle) -> str:
    """Full prompt section describing one architecture style."""
    sections: list[str] = []

    sections.append(f"# Architecture Style: {style.name}\n")
    sections.append("## Description")
    sections.append(f"{style.description}\n")

    sections.append("## When to Use This Style")
    sections.extend(f"✅ {w}" for w in style.when_to_use)
    sections.append("")

    sections.append("## When NOT to Use This Style")
    sections.extend(f"❌ {w}" for w in style.when_not_to_use)
    sections.append("")

    sections.append("## Core Principles")
    sections.extend(f"{i}. {p}" for i, p in enumerate(style.core_principles, start=1))
    sections.append("")

    sections.append("## Project Structure")
    sections.append("Every file you create MUST follow this structure:\n")
    sections.append("```")
    sections.append(format_folder_structure(style.folder_structure))
    sections.append("```\n")

    sections.append("## AI Behavior Instructions\n")
    sections.append(f"{style.ai_instructions}\n")

    sections.append("## Violations to Flag\n")
    sections.append("If you generate or see code with these patterns, flag them as violations:")
    sections.extend(f"⚠️ {p}" for p in style.common_pitfalls)
    sections.append("")

    sections.append(DECISION_MAKING)
    return "\n".join(sections)


def generate_style_comparison_prompt(styles: Sequence[ArchitectureStyle]) -> str:
    """Side-by-side selection guide: best-for, avoid-when and complexity per style."""
    sections: list[str] = [
        "# Architecture Style Selection Guide\n",
        "Choose the right style based on your project needs:\n",
    ]
    for style in styles:
        sections.append(f"## {style.name}")
        sections.append(f"**Best for:** {', '.join(style.when_to_use[:2])}")
        sections.append(f"**Avoid when:** {', '.join(style.when_not_to_use[:2])}")
        sections.append(f"**Complexity:** {style_complexity(style)}\n")
    return "\n".join(sections)
