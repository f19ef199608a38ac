"""Request-scoped prompt context: resolved style/stack plus enabled rules."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ironbackend.registry.loader import Registry
from ironbackend.registry.stacks import get_stack
from ironbackend.registry.styles import get_style
from ironbackend.schemas.config import IronBackendConfig, LocalConfig
from ironbackend.schemas.registry import RULE_CATEGORIES, ArchitectureStyle, TechStack


@dataclass
class PromptContext:
    style: ArchitectureStyle | None
    stack: TechStack | None
    enabled_rules: list[str]
    security_enabled: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContextValidation:
    valid: bool
    errors: list[str]


def _lookup_style(style_id: str | None, registry: Registry | None) -> ArchitectureStyle | None:
    return get_style(style_id, registry) if style_id else None


def _lookup_stack(stack_id: str | None, registry: Registry | None) -> TechStack | None:
    return get_stack(stack_id, registry) if stack_id else None


def build_context(
    style_id: str | None = None,
    stack_id: str | None = None,
    rule_categories: list[str] | None = None,
    registry: Registry | None = None,
) -> PromptContext:
    """Resolve ids into a context. Unknown ids resolve to ``None``.

    With no ``rule_categories`` every category is enabled.
    """
    return PromptContext(
        style=_lookup_style(style_id, registry),
        stack=_lookup_stack(stack_id, registry),
        enabled_rules=list(rule_categories) if rule_categories is not None else list(RULE_CATEGORIES),
    )


def build_context_from_config(
    config: LocalConfig | IronBackendConfig, registry: Registry | None = None
) -> PromptContext:
    return PromptContext(
        style=_lookup_style(config.style, registry),
        stack=_lookup_stack(config.stack, registry),
        enabled_rules=list(config.rules.enabled),
    )


def validate_context(context: PromptContext) -> ContextValidation:
    errors: list[str] = []
    if context.style is None:
        errors.append("No architecture style selected")
    if context.stack is None:
        errors.append("No tech stack selected")
    if not context.enabled_rules:
        errors.append("No rule categories enabled")
    return ContextValidation(valid=not errors, errors=errors)


def get_context_summary(context: PromptContext) -> str:
    lines: list[str] = []
    if context.style is not None:
        lines.append(f"Style: {context.style.name}")
    if context.stack is not None:
        lines.append(f"Stack: {context.stack.name}")
    lines.append(f"Rules: {len(context.enabled_rules)} categories enabled")
    lines.append(f"Security: {'enabled' if context.security_enabled else 'disabled'}")
    return "\n".join(lines)


def serialize_context(context: PromptContext) -> str:
    """JSON form storing ids only; unresolved style/stack are written as null."""
    data = {
        "styleId": context.style.id if context.style else None,
        "stackId": context.stack.id if context.stack else None,
        "enabledRules": context.enabled_rules,
        "securityEnabled": context.security_enabled,
        "metadata": context.metadata,
    }
    return json.dumps(data, indent=2)


def deserialize_context(text: str, registry: Registry | None = None) -> PromptContext:
    """Inverse of ``serialize_context``; ids are re-resolved against the registry."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Serialized context must be a JSON object, got {type(data).__name__}")
    return PromptContext(
        style=_lookup_style(data.get("styleId"), registry),
        stack=_lookup_stack(data.get("stackId"), registry),
        enabled_rules=list(data.get("enabledRules") or []),
        security_enabled=data.get("securityEnabled", True),
        metadata=data.get("metadata") or {},
    )
