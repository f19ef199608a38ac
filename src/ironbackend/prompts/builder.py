"""Resolves a style and stack and composes the prompt sections."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ironbackend.errors import UnknownStackError, UnknownStyleError
from ironbackend.prompts.templates.rules import generate_rule_enforcement_prompt
from ironbackend.prompts.templates.stack import generate_stack_prompt
from ironbackend.prompts.templates.style import generate_style_prompt
from ironbackend.prompts.templates.system import SystemPromptContext, generate_system_prompt
from ironbackend.prompts.tree import format_folder_structure, format_folder_tree
from ironbackend.registry.loader import Registry, default_registry
from ironbackend.registry.stacks import get_stack
from ironbackend.registry.styles import get_style
from ironbackend.schemas.registry import ArchitectureStyle, TechStack

__all__ = [
    "PromptBuilderConfig",
    "build_prompt",
    "build_prompt_sections",
    "estimate_token_count",
    "format_folder_structure",
    "format_folder_tree",
    "quick_prompt",
    "truncate_prompt",
]

CHARS_PER_TOKEN = 4
TRUNCATION_MARKER = "\n\n[... truncated for token limit ...]"


@dataclass
class PromptBuilderConfig:
    style_id: str
    stack_id: str
    rule_categories: list[str] | None = None
    include_rules: bool = True
    include_security: bool = True
    rule_overrides: dict[str, str] = field(default_factory=dict)


def _resolve(config: PromptBuilderConfig, registry: Registry) -> tuple[ArchitectureStyle, TechStack]:
    style = get_style(config.style_id, registry)
    if style is None:
        raise UnknownStyleError(config.style_id, list(registry.styles))
    stack = get_stack(config.stack_id, registry)
    if stack is None:
        raise UnknownStackError(config.stack_id, list(registry.stacks))
    return style, stack


def _combined(
    config: PromptBuilderConfig, style: ArchitectureStyle, stack: TechStack, registry: Registry
) -> str:
    return generate_system_prompt(
        SystemPromptContext(
            style=style,
            stack=stack,
            include_rules=config.include_rules,
            include_security=config.include_security,
            rule_overrides=config.rule_overrides,
            registry=registry,
        )
    )


def build_prompt(config: PromptBuilderConfig, registry: Registry | None = None) -> str:
    """Render the combined system prompt for ``config``.

    Raises ``UnknownStyleError`` or ``UnknownStackError`` for ids missing
    from the registry.
    """
    registry = registry or default_registry()
    style, stack = _resolve(config, registry)
    return _combined(config, style, stack, registry)


def build_prompt_sections(config: PromptBuilderConfig, registry: Registry | None = None) -> dict[str, str]:
    """Render every section at once.

    Returns a dict with ``style``, ``stack``, ``rules`` and ``combined``.
    Nothing is rendered unless both ids resolve.
    """
    registry = registry or default_registry()
    style, stack = _resolve(config, registry)
    return {
        "style": generate_style_prompt(style),
        "stack": generate_stack_prompt(stack),
        "rules": generate_rule_enforcement_prompt(
            config.rule_categories, registry=registry, overrides=config.rule_overrides
        ),
        "combined": _combined(config, style, stack, registry),
    }


def quick_prompt(style_id: str, stack_id: str, registry: Registry | None = None) -> str:
    return build_prompt(PromptBuilderConfig(style_id=style_id, stack_id=stack_id), registry)


def estimate_token_count(text: str) -> int:
    # Rough: one token per four characters.
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def truncate_prompt(prompt: str, max_tokens: int) -> str:
    """Cut ``prompt`` to roughly ``max_tokens`` tokens and append a marker."""
    if estimate_token_count(prompt) <= max_tokens:
        return prompt
    return prompt[: max_tokens * CHARS_PER_TOKEN] + TRUNCATION_MARKER
