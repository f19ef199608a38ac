"""Tech stack lookups."""

from __future__ import annotations

from ironbackend.registry.loader import Registry, default_registry
from ironbackend.schemas.registry import TechStack


def get_stack(stack_id: str, registry: Registry | None = None) -> TechStack | None:
    """Return the stack with ``stack_id``, or ``None`` when it is unknown."""
    registry = registry or default_registry()
    return registry.stack_cache.get(stack_id)


def get_stack_ids(registry: Registry | None = None) -> list[str]:
    registry = registry or default_registry()
    return list(registry.stacks)


def find_stacks_by_language(language: str, registry: Registry | None = None) -> list[TechStack]:
    """Stacks whose language contains ``language``, case-insensitively."""
    registry = registry or default_registry()
    needle = language.lower()
    return [s for s in registry.stacks.values() if needle in s.language.lower()]
