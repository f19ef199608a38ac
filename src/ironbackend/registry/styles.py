"""Architecture style lookups."""

from __future__ import annotations

from typing import Literal

from ironbackend.registry.loader import Registry, default_registry
from ironbackend.schemas.registry import ArchitectureStyle

TeamSize = Literal["small", "medium", "large"]
Complexity = Literal["low", "medium", "high"]

# Heuristic buckets used by find_styles; checked in this order.
_SMALL_TEAM = ("clean-monolith", "serverless", "automation")
_LARGE_TEAM = ("modular-monolith", "microservices-sync", "microservices-async")
_LOW_COMPLEXITY = ("clean-monolith", "serverless")
_HIGH_COMPLEXITY = ("hexagonal", "event-driven", "cqrs")


def get_style(style_id: str, registry: Registry | None = None) -> ArchitectureStyle | None:
    """Return the style with ``style_id``, or ``None`` when it is unknown."""
    registry = registry or default_registry()
    return registry.style_cache.get(style_id)


def get_style_ids(registry: Registry | None = None) -> list[str]:
    registry = registry or default_registry()
    return list(registry.styles)


def find_styles(
    team_size: TeamSize | None = None,
    complexity: Complexity | None = None,
    registry: Registry | None = None,
) -> list[ArchitectureStyle]:
    """Suggest styles for a team size or complexity level.

    The first criterion that names a bucket wins; team size is checked
    before complexity. With no matching criterion every style is returned.
    """
    registry = registry or default_registry()
    if team_size == "small":
        wanted: tuple[str, ...] | None = _SMALL_TEAM
    elif team_size == "large":
        wanted = _LARGE_TEAM
    elif complexity == "low":
        wanted = _LOW_COMPLEXITY
    elif complexity == "high":
        wanted = _HIGH_COMPLEXITY
    else:
        wanted = None

    styles = list(registry.styles.values())
    if wanted is None:
        return styles
    return [s for s in styles if s.id in wanted]
