"""Tests for config version comparison and migrations."""

from __future__ import annotations

import copy
import itertools
from collections.abc import Callable

import pytest

from ironbackend.errors import ConfigValidationError, MigrationChainError, MigrationGapError
from ironbackend.migrations import (
    MIGRATIONS,
    Migration,
    check_migration_chain,
    compare_versions,
    get_latest_version,
    get_migration_path,
    migrate_config,
    needs_migration,
)


def _bump(version: str) -> Callable[[dict], dict]:
    def migrate(config: dict) -> dict:
        return {**config, "version": version}

    return migrate


def _migration(src: str, dst: str) -> Migration:
    return Migration(from_version=src, to_version=dst, description=f"to {dst}", migrate=_bump(dst))


class TestCompareVersions:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("1.0.0", "1.0.0", 0),
            ("1.0.0", "1.0.1", -1),
            ("1.0.10", "1.0.9", 1),
            ("2.0.0", "1.99.99", 1),
            ("1.2", "1.2.0", 0),
            ("0.9.0", "1.0.0", -1),
        ],
    )
    def test_ordering(self, a: str, b: str, expected: int) -> None:
        assert compare_versions(a, b) == expected
        assert compare_versions(b, a) == -expected

    def test_total_order_is_transitive(self) -> None:
        ordered = ["0.1.0", "0.9.9", "1.0.0", "1.0.9", "1.0.10", "1.1.0", "1.10.0", "2.0.0", "10.0.0"]
        for a, b in itertools.combinations(ordered, 2):
            assert compare_versions(a, b) < 0
        for a, b, c in itertools.permutations(ordered, 3):
            if compare_versions(a, b) < 0 and compare_versions(b, c) < 0:
                assert compare_versions(a, c) < 0

    def test_non_numeric(self) -> None:
        with pytest.raises(ValueError):
            compare_versions("1.x.0", "1.0.0")


class TestMigrationChain:
    def test_registered_chain(self) -> None:
        assert [(m.from_version, m.to_version) for m in MIGRATIONS] == [("1.0.0", "1.0.1")]
        assert get_latest_version() == "1.0.1"

    def test_latest_without_migrations(self) -> None:
        assert get_latest_version([]) == "1.0.0"

    def test_latest_below_base_version(self) -> None:
        assert get_latest_version([_migration("0.1.0", "0.2.0")]) == "0.2.0"

    def test_valid_chain(self) -> None:
        check_migration_chain([_migration("1.0.0", "1.0.1"), _migration("1.0.1", "1.1.0")])

    def test_duplicate_source(self) -> None:
        with pytest.raises(MigrationChainError, match="Duplicate"):
            check_migration_chain([_migration("1.0.0", "1.0.1"), _migration("1.0.0", "1.0.2")])

    def test_downgrade(self) -> None:
        with pytest.raises(MigrationChainError, match="higher version"):
            check_migration_chain([_migration("1.0.1", "1.0.0")])

    def test_gap(self) -> None:
        with pytest.raises(MigrationChainError):
            check_migration_chain([_migration("1.0.0", "1.0.1"), _migration("1.1.0", "1.2.0")])

    def test_path_stops_at_gap(self) -> None:
        migrations = [_migration("1.0.0", "1.0.1"), _migration("1.1.0", "1.2.0")]
        path = get_migration_path("1.0.0", "1.2.0", migrations)
        assert [m.to_version for m in path] == ["1.0.1"]

    def test_path_follows_chain(self) -> None:
        migrations = [_migration("1.0.1", "1.1.0"), _migration("1.0.0", "1.0.1")]
        path = get_migration_path("1.0.0", "1.1.0", migrations)
        assert [m.label() for m in path] == ["1.0.0 → 1.0.1: to 1.0.1", "1.0.1 → 1.1.0: to 1.1.0"]


class TestNeedsMigration:
    def test_old_version(self, legacy_config: dict) -> None:
        assert needs_migration(legacy_config)

    def test_current_version(self, raw_config: dict) -> None:
        assert not needs_migration(raw_config)

    def test_explicit_target(self, raw_config: dict) -> None:
        assert needs_migration(raw_config, "1.1.0")

    @pytest.mark.parametrize("version", [None, "abc", 7])
    def test_malformed_version(self, raw_config: dict, version: object) -> None:
        assert not needs_migration({**raw_config, "version": version})


class TestMigrateConfig:
    def test_upgrades_legacy_config(self, legacy_config: dict) -> None:
        result = migrate_config(legacy_config)
        assert result.migrated
        assert result.config.version == "1.0.1"
        assert result.applied_migrations == ["1.0.0 → 1.0.1: Add security section support"]
        assert result.config.updated_at != legacy_config["updatedAt"]
        assert result.config.created_at == legacy_config["createdAt"]

    def test_input_not_modified(self, legacy_config: dict) -> None:
        before = copy.deepcopy(legacy_config)
        migrate_config(legacy_config)
        assert legacy_config == before

    def test_idempotent(self, legacy_config: dict) -> None:
        first = migrate_config(legacy_config)
        second = migrate_config(first.config.to_json_dict())
        assert not second.migrated
        assert second.applied_migrations == []
        assert second.config == first.config

    def test_newer_version_only_validated(self, raw_config: dict) -> None:
        result = migrate_config({**raw_config, "version": "9.0.0"})
        assert not result.migrated
        assert result.config.version == "9.0.0"

    def test_invalid_config(self, raw_config: dict) -> None:
        with pytest.raises(ConfigValidationError, match="^Config validation failed"):
            migrate_config({**raw_config, "version": "latest"})

    def test_invalid_after_migration(self, legacy_config: dict) -> None:
        del legacy_config["rules"]
        with pytest.raises(ConfigValidationError, match="^Migrated config validation failed") as exc_info:
            migrate_config(legacy_config)
        assert [issue.path for issue in exc_info.value.issues] == ["rules"]

    def test_gap_raises(self, legacy_config: dict) -> None:
        with pytest.raises(MigrationGapError) as exc_info:
            migrate_config(legacy_config, target="1.1.0")
        assert exc_info.value.reached == "1.0.1"
        assert exc_info.value.target == "1.1.0"

    def test_partial_migration_allowed(self, legacy_config: dict) -> None:
        result = migrate_config(legacy_config, target="1.1.0", allow_partial=True)
        assert result.migrated
        assert result.config.version == "1.0.1"

    def test_custom_chain(self, legacy_config: dict) -> None:
        migrations = [_migration("1.0.0", "1.0.1"), _migration("1.0.1", "1.1.0")]
        result = migrate_config(legacy_config, migrations=migrations)
        assert result.config.version == "1.1.0"
        assert len(result.applied_migrations) == 2

    def test_pre_release_chain_reaches_its_own_latest(self, legacy_config: dict) -> None:
        migrations = [_migration("0.1.0", "0.2.0")]
        result = migrate_config({**legacy_config, "version": "0.1.0"}, migrations=migrations)
        assert result.migrated
        assert result.config.version == "0.2.0"
