from __future__ import annotations

import pytest
from style_engine.extensions import (
    CORE_EXTENSION_POINTS,
    ExtensionPointKind,
    ExtensionRegistry,
    ExtensionRuntime,
)


def test_callbacks_run_in_priority_order_with_stable_ties() -> None:
    registry = ExtensionRegistry()
    calls: list[str] = []

    registry.add_action("demo", lambda: calls.append("late"), priority=20)
    registry.add_action("demo", lambda: calls.append("first-10"))
    registry.add_action("demo", lambda: calls.append("early"), priority=1)
    registry.add_action("demo", lambda: calls.append("second-10"))

    registry.invoke_action("demo")
    assert calls == ["early", "first-10", "second-10", "late"]


def test_clear_empties_point_but_keeps_it_listed() -> None:
    registry = ExtensionRegistry()
    registry.add_filter("demo", lambda value: value + 1)

    registry.clear("demo")

    assert registry.has_callbacks("demo") is False
    assert "demo" in registry.point_names()
    assert registry.apply_filter("demo", 1) == 1


def test_failing_action_does_not_stop_later_callbacks() -> None:
    registry = ExtensionRegistry()
    calls: list[int] = []

    def boom(value: int) -> None:
        raise RuntimeError("boom")

    registry.add_action("demo", boom, priority=1)
    registry.add_action("demo", calls.append, priority=2)

    assert registry.invoke_action("demo", 7) is None
    assert calls == [7]
    assert registry.errors[0].message == "boom"
    assert registry.errors[0].extension_point_name == "demo"
    assert registry.errors[0].handler_name.endswith("boom")


def test_filter_without_callbacks_is_identity() -> None:
    registry = ExtensionRegistry()
    value = {"a": 1}
    assert registry.apply_filter("nothing", value) is value


def test_filter_threads_value_and_skips_failures() -> None:
    registry = ExtensionRegistry()

    def broken(value: int, _extra: int) -> int:
        raise ValueError("bad")

    registry.add_filter("math", lambda value, extra: value + extra, priority=1)
    registry.add_filter("math", broken, priority=2)
    registry.add_filter("math", lambda value, extra: value * 10, priority=3)

    assert registry.apply_filter("math", 1, 2) == 30
    assert len(registry.errors) == 1


def test_unregister_reports_whether_callback_existed() -> None:
    registry = ExtensionRegistry()
    callback_id = registry.add_action("demo", lambda: None)

    assert registry.unregister("demo", callback_id) is True
    assert registry.unregister("demo", callback_id) is False
    assert registry.unregister("missing", callback_id) is False
    assert registry.has_callbacks("demo") is False
    assert "demo" in registry.point_names()


def test_stats_count_every_invocation() -> None:
    registry = ExtensionRegistry()
    registry.add_action("demo", lambda: None)

    registry.invoke_action("demo")
    registry.invoke_action("demo")
    registry.apply_filter("empty", 1)

    stats = registry.get_stats()
    assert stats["demo"].invocation_count == 2
    assert stats["demo"].total_duration_nanos >= 0
    assert stats["demo"].last_invoked_at
    assert stats["empty"].invocation_count == 1

    summary = registry.stats_summary()
    assert summary["total_executions"] == 3
    assert summary["most_used"] == "demo"

    registry.clear_stats()
    assert registry.get_stats() == {}
    assert registry.stats_summary()["most_used"] is None


def test_kind_mismatch_is_rejected() -> None:
    registry = ExtensionRegistry(CORE_EXTENSION_POINTS)
    with pytest.raises(ValueError, match="filter"):
        registry.add_action("settings.beforeSave", lambda values, current: None)

    registry.add_action("custom", lambda: None)
    with pytest.raises(ValueError):
        registry.register("custom", ExtensionPointKind.FILTER, lambda value: value)


def test_describe_documents_declared_points() -> None:
    registry = ExtensionRegistry(CORE_EXTENSION_POINTS)

    def audit(snapshot) -> None:
        return None

    registry.add_action("settings.afterCommit", audit, priority=5)

    docs = registry.describe()
    entry = docs["settings.afterCommit"]
    assert entry["kind"] == "action"
    assert entry["declared"] is True
    assert entry["has_callbacks"] is True
    assert entry["parameters"] == ["snapshot"]
    assert entry["callbacks"][0]["priority"] == 5
    assert entry["callbacks"][0]["handler"].endswith("audit")
    assert docs["security.threatPatterns"]["has_callbacks"] is False


def test_runtime_rolls_back_failed_extension() -> None:
    registry = ExtensionRegistry()
    runtime = ExtensionRuntime(registry)

    def good(api) -> None:
        api.add_filter("title", lambda value: value.upper())

    def bad(api) -> None:
        api.add_filter("title", lambda value: value + "!")
        raise RuntimeError("cannot load")

    runtime.load_extensions([("good", good), ("bad", bad)])

    assert runtime.loaded == ["good"]
    assert registry.apply_filter("title", "hi") == "HI"
    assert registry.errors[-1].handler_name == "bad"
    assert registry.errors[-1].extension_point_name == "<load>"


def test_runtime_unload_detaches_callbacks() -> None:
    registry = ExtensionRegistry()
    runtime = ExtensionRuntime(registry)
    runtime.load_extensions([("ext", lambda api: api.add_action("demo", lambda: None))])

    assert registry.get_callbacks("demo")[0]["owner"] == "ext"
    assert runtime.unload("ext") is True
    assert registry.has_callbacks("demo") is False
    assert runtime.unload("ext") is False
