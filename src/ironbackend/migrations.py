"""Upgrades .ironbackend/config.json between versions.

Migrations are registered once in ``MIGRATIONS`` and chained by version:
each one's ``from_version`` is the previous one's ``to_version``. The chain
is checked when this module is imported.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ironbackend.errors import ConfigValidationError, MigrationChainError, MigrationGapError
from ironbackend.schemas.config import VERSION_PATTERN, LocalConfig, safe_validate_local_config
from ironbackend.shared.clock import utc_timestamp

BASE_VERSION = "1.0.0"

RawConfig = dict[str, Any]


@dataclass(frozen=True)
class Migration:
    from_version: str
    to_version: str
    description: str
    migrate: Callable[[RawConfig], RawConfig]

    def label(self) -> str:
        return f"{self.from_version} → {self.to_version}: {self.description}"


@dataclass(frozen=True)
class MigrationResult:
    config: LocalConfig
    migrated: bool
    applied_migrations: list[str] = field(default_factory=list)


def _add_security_support(config: RawConfig) -> RawConfig:
    return {**config, "version": "1.0.1", "updatedAt": utc_timestamp()}


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is lower than, equal to or higher than ``b``.

    Compares the first three dot-separated integer components; missing
    components count as 0. Raises ``ValueError`` on non-numeric components.
    """
    parts_a = [int(p) for p in a.split(".")]
    parts_b = [int(p) for p in b.split(".")]
    for i in range(3):
        val_a = parts_a[i] if i < len(parts_a) else 0
        val_b = parts_b[i] if i < len(parts_b) else 0
        if val_a < val_b:
            return -1
        if val_a > val_b:
            return 1
    return 0


def check_migration_chain(migrations: Sequence[Migration]) -> None:
    """Raise ``MigrationChainError`` unless ``migrations`` form one contiguous chain."""
    froms: set[str] = set()
    for m in migrations:
        if m.from_version in froms:
            raise MigrationChainError(f"Duplicate migration from version {m.from_version}")
        if compare_versions(m.from_version, m.to_version) >= 0:
            raise MigrationChainError(
                f"Migration {m.from_version} → {m.to_version} does not move to a higher version"
            )
        froms.add(m.from_version)

    tos = {m.to_version for m in migrations}
    dead_ends = sorted(tos - froms)
    if len(dead_ends) > 1:
        raise MigrationChainError(f"Migration chain is broken; no onward migration from: {', '.join(dead_ends)}")
    roots = froms - tos
    if len(roots) > 1:
        raise MigrationChainError(f"Migration chain has several starting versions: {', '.join(sorted(roots))}")


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        from_version="1.0.0",
        to_version="1.0.1",
        description="Add security section support",
        migrate=_add_security_support,
    ),
)

check_migration_chain(MIGRATIONS)


def get_latest_version(migrations: Sequence[Migration] = MIGRATIONS) -> str:
    if not migrations:
        return BASE_VERSION
    latest = migrations[0].to_version
    for m in migrations[1:]:
        if compare_versions(m.to_version, latest) > 0:
            latest = m.to_version
    return latest


def get_migration_path(
    from_version: str, to_version: str, migrations: Sequence[Migration] = MIGRATIONS
) -> list[Migration]:
    """Migrations leading from ``from_version`` toward ``to_version``, in order.

    Stops early, without error, when no migration starts at the current
    version.
    """
    by_from = {m.from_version: m for m in migrations}
    path: list[Migration] = []
    current = from_version
    while compare_versions(current, to_version) < 0:
        step = by_from.get(current)
        if step is None:
            break
        path.append(step)
        current = step.to_version
    return path


def _well_formed_version(raw: RawConfig) -> str | None:
    version = raw.get("version")
    if isinstance(version, str) and VERSION_PATTERN.match(version):
        return version
    return None


def needs_migration(raw: RawConfig, target: str | None = None) -> bool:
    """True when the config's version is well formed and below ``target``."""
    version = _well_formed_version(raw)
    if version is None:
        return False
    return compare_versions(version, target or get_latest_version()) < 0


def _validated(config: RawConfig, prefix: str) -> LocalConfig:
    result = safe_validate_local_config(config)
    if not result.success:
        raise ConfigValidationError(result.issues, prefix=prefix)
    return result.config


def migrate_config(
    raw: RawConfig,
    target: str | None = None,
    migrations: Sequence[Migration] = MIGRATIONS,
    allow_partial: bool = False,
) -> MigrationResult:
    """Upgrade ``raw`` to ``target`` (default: latest) and validate it.

    ``raw`` is never modified. A config already at or above ``target`` is
    only validated. A missing or malformed ``version`` skips migration and
    fails validation. When the chain ends before ``target`` this raises
    ``MigrationGapError``, unless ``allow_partial`` is set.
    """
    target = target or get_latest_version(migrations)
    current = _well_formed_version(raw)

    if current is None or compare_versions(current, target) >= 0:
        return MigrationResult(config=_validated(raw, "Config validation failed"), migrated=False)

    path = get_migration_path(current, target, migrations)
    reached = path[-1].to_version if path else current
    if compare_versions(reached, target) < 0 and not allow_partial:
        raise MigrationGapError(reached, target)

    config = copy.deepcopy(raw)
    applied: list[str] = []
    for migration in path:
        config = migration.migrate(config)
        applied.append(migration.label())

    return MigrationResult(
        config=_validated(config, "Migrated config validation failed"),
        migrated=bool(applied),
        applied_migrations=applied,
    )
