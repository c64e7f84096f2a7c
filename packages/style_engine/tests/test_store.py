from __future__ import annotations

import json
import logging
import threading

import pytest
from style_engine import FailureKind, SettingsSnapshot
from style_engine.cache import CacheManager
from style_engine.errors import ImportFormatError
from style_engine.store import (
    EXPORT_FORMAT_VERSION,
    CommitState,
    InMemoryPersistence,
    SettingsStore,
    SQLitePersistence,
    parse_export,
)
from style_engine.telemetry import get_commit_id


def test_initial_snapshot_holds_defaults(store, options) -> None:
    snapshot = store.get_snapshot()
    assert snapshot.version == 0
    assert dict(snapshot.values) == options.defaults()
    assert store.state is CommitState.IDLE


def test_initial_snapshot_merges_persisted_values(options, pipeline, registry) -> None:
    persisted = SettingsSnapshot(version=7, values={"menu_width": 200}, updated_at="then")
    store = SettingsStore(options, pipeline, registry, InMemoryPersistence(persisted))

    assert store.version == 7
    assert store.get_snapshot().get("menu_width") == 200
    assert store.get_snapshot().get("admin_bar_background") == "#23282d"


def test_commit_increments_version_and_merges(store, persistence) -> None:
    before = store.get_snapshot()
    result = store.commit({"admin_bar_background": "#ff0000"})

    assert result.ok
    assert result.snapshot.version == before.version + 1
    assert store.get_snapshot().get("admin_bar_background") == "#ff0000"
    assert store.get_snapshot().get("menu_width") == 160
    assert before.get("admin_bar_background") == "#23282d"
    assert persistence.save_count == 1


def test_snapshot_values_are_read_only(store) -> None:
    with pytest.raises(TypeError):
        store.get_snapshot().values["menu_width"] = 1


def test_rejected_commit_leaves_snapshot_unchanged(store) -> None:
    before = store.get_snapshot()
    result = store.commit({"custom_css": "<script>alert(1)</script>"})

    assert not result.ok
    assert result.failure is FailureKind.SECURITY
    assert result.errors[0].reason.value == "threatPatternMatched"
    assert store.get_snapshot() is before

    invalid = store.commit({"menu_width": "wide"})
    assert invalid.failure is FailureKind.VALIDATION
    assert store.version == before.version


def test_persistence_failure_does_not_advance(options, pipeline, registry, failing_persistence) -> None:
    store = SettingsStore(options, pipeline, registry, failing_persistence)
    committed: list[SettingsSnapshot] = []
    registry.add_action("settings.afterCommit", committed.append)

    result = store.commit({"menu_width": 200})

    assert result.failure is FailureKind.PERSISTENCE
    assert "disk full" in result.message
    assert store.version == 0
    assert store.get_snapshot().get("menu_width") == 160
    assert committed == []

    failing_persistence.failing = False
    assert store.commit({"menu_width": 200}).snapshot.version == 1


def test_hooks_run_in_commit_order(store, registry) -> None:
    events: list[tuple[str, int, int]] = []
    registry.add_action(
        "settings.beforeCommit",
        lambda snapshot: events.append(("before", snapshot.version, store.version)),
    )
    registry.add_action(
        "settings.afterCommit",
        lambda snapshot: events.append(("after", snapshot.version, store.version)),
    )

    store.commit({"dark_mode": True})

    assert events == [("before", 1, 0), ("after", 1, 1)]


def test_commit_context_is_bound_during_hooks(store, registry) -> None:
    seen: list[str | None] = []
    registry.add_action("settings.afterCommit", lambda snapshot: seen.append(get_commit_id()))

    store.commit({"dark_mode": True})

    assert seen[0]
    assert get_commit_id() is None


def test_commit_invalidates_cached_artifacts(store, registry) -> None:
    cache = CacheManager(registry, lambda: store.version)
    store.attach_cache(cache)
    cache.put("stylesheet", b"old")
    assert cache.get("stylesheet") == b"old"

    store.commit({"primary_color": "#111111"})

    assert cache.get("stylesheet") is None
    assert cache.get_stats().invalidations == 1


def test_export_import_roundtrip(store, registry) -> None:
    store.commit({"admin_bar_background": "#ff0000", "menu_width": 220, "dark_mode": True})
    exported_values = dict(store.get_snapshot().values)
    blob = store.export_snapshot()

    imported: list[object] = []
    registry.add_action("settings.afterImport", lambda snapshot, document: imported.append(document))
    store.reset_to_defaults()
    result = store.import_snapshot(blob)

    assert result.ok
    assert dict(result.snapshot.values) == exported_values
    assert json.loads(blob)["formatVersion"] == EXPORT_FORMAT_VERSION
    assert len(imported) == 1


def test_unknown_format_version_is_rejected_before_validation(store, registry) -> None:
    blob = json.dumps({"formatVersion": 99, "exportedAt": "now", "values": {"menu_width": 200}})

    result = store.import_snapshot(blob)

    assert result.failure is FailureKind.IMPORT_FORMAT
    assert "99" in result.message
    assert store.version == 0
    assert "validate.extraKeys" not in registry.get_stats()


@pytest.mark.parametrize(
    "blob",
    ["not json", "[]", json.dumps({"values": {}}), json.dumps({"formatVersion": 1, "values": 3})],
)
def test_malformed_export_documents(blob: str) -> None:
    with pytest.raises(ImportFormatError):
        parse_export(blob)


def test_import_still_validates_values(store) -> None:
    blob = json.dumps(
        {"formatVersion": 1, "exportedAt": "now", "values": {"custom_css": "<script>x</script>"}}
    )
    result = store.import_snapshot(blob)
    assert result.failure is FailureKind.SECURITY
    assert store.version == 0


def test_reset_to_defaults(store, registry, options) -> None:
    resets: list[SettingsSnapshot] = []
    registry.add_action("settings.afterReset", resets.append)
    store.commit({"menu_width": 300})

    result = store.reset_to_defaults()

    assert result.ok
    assert result.snapshot.version == 2
    assert dict(result.snapshot.values) == options.defaults()
    assert resets == [result.snapshot]


def test_sqlite_persistence_survives_restart(tmp_path, options, pipeline, registry) -> None:
    db_path = tmp_path / "settings.db"
    first = SettingsStore(options, pipeline, registry, SQLitePersistence(db_path))
    first.commit({"menu_width": 240, "color_scheme": "dark"})

    second = SettingsStore(options, pipeline, registry, SQLitePersistence(db_path))

    assert second.version == 1
    assert second.get_snapshot().get("menu_width") == 240
    assert second.get_snapshot().get("color_scheme") == "dark"


def test_restart_drops_retired_keys(options, pipeline, registry, caplog) -> None:
    persisted = SettingsSnapshot(
        version=3, values={"menu_width": 200, "retired_option": "x"}, updated_at="then"
    )

    with caplog.at_level(logging.WARNING, logger="style_engine.store.store"):
        store = SettingsStore(options, pipeline, registry, InMemoryPersistence(persisted))

    assert "retired_option" not in store.get_snapshot().values
    assert store.get_snapshot().get("menu_width") == 200
    assert "retired_option" in caplog.text

    result = store.import_snapshot(store.export_snapshot())
    assert result.ok
    assert result.snapshot.version == 4


def test_restart_keeps_whitelisted_extras(options, pipeline, registry) -> None:
    registry.add_filter("validate.extraKeys", lambda keys, raw: [*keys, "theme_meta"])
    persisted = SettingsSnapshot(
        version=1, values={"theme_meta": {"author": "ops"}}, updated_at="then"
    )

    store = SettingsStore(options, pipeline, registry, InMemoryPersistence(persisted))

    assert store.get_snapshot().get("theme_meta") == {"author": "ops"}


class BrokenDiskPersistence(InMemoryPersistence):
    def save(self, snapshot: SettingsSnapshot) -> None:
        raise OSError("read-only file system")


def test_unexpected_save_error_is_a_persistence_failure(options, pipeline, registry) -> None:
    store = SettingsStore(options, pipeline, registry, BrokenDiskPersistence())

    result = store.commit({"menu_width": 200})

    assert result.failure is FailureKind.PERSISTENCE
    assert "read-only file system" in result.message
    assert store.version == 0
    assert store.state is CommitState.IDLE


def test_crashing_validator_is_reported_as_rejection(store, pipeline) -> None:
    def broken(descriptor, value):
        raise ValueError("boom")

    pipeline.register_validator("color", broken)

    result = store.commit({"admin_bar_background": "#fff"})

    assert result.failure is FailureKind.VALIDATION
    assert result.errors[0].key == "admin_bar_background"
    assert store.version == 0


def test_concurrent_commits_are_serialized(store, persistence) -> None:
    threads_count = 8
    commits_per_thread = 25
    versions: list[int] = []
    versions_lock = threading.Lock()
    start = threading.Barrier(threads_count)

    def writer(offset: int) -> None:
        start.wait()
        for index in range(commits_per_thread):
            result = store.commit({"menu_width": 100 + offset * commits_per_thread + index})
            assert result.ok
            with versions_lock:
                versions.append(result.snapshot.version)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    total = threads_count * commits_per_thread
    assert store.version == total
    assert sorted(versions) == list(range(1, total + 1))
    assert persistence.save_count == total
    assert persistence.load().version == total
