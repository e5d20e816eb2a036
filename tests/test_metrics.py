import math

import pytest

from resilience.core.metrics import (
    get_counters,
    get_last_runs,
    get_metrics,
    inc_counter,
    metrics_registry,
    set_instrumentation_enabled,
    timeit,
    timer,
)


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics_registry.reset()
    set_instrumentation_enabled(True)
    yield
    metrics_registry.reset()
    set_instrumentation_enabled(True)


def test_timer_records_last_run_metadata():
    with timer("metrics.test.timer", metadata={"questions": 4}):
        pass
    payload = get_last_runs()["metrics.test.timer"]
    assert payload["duration_ms"] >= 0.0
    assert payload["questions"] == 4
    assert "timestamp" in payload


def test_timeit_records_and_returns():
    @timeit("metrics.test.decorator")
    def _double(value: int) -> int:
        return value * 2

    assert _double(6) == 12
    assert get_metrics()["metrics.test.decorator"]["count"] == 1.0


def test_metrics_registry_tracks_variance_and_stddev():
    metrics_registry.record("metrics.var", 10.0)
    metrics_registry.record("metrics.var", 30.0)

    entry = get_metrics()["metrics.var"]
    assert entry["count"] == 2.0
    assert entry["avg_ms"] == pytest.approx(20.0, rel=1e-3)
    assert entry["variance_ms"] == pytest.approx(200.0, rel=1e-3)
    assert entry["stddev_ms"] == pytest.approx(math.sqrt(200.0), rel=1e-3)
    assert entry["max_ms"] == 30.0


def test_snapshot_reset_clears_timings():
    metrics_registry.record("metrics.reset", 1.0)
    assert "metrics.reset" in get_metrics(reset=True)
    assert get_metrics() == {}


def test_blank_labels_are_ignored():
    metrics_registry.record("", 1.0)
    metrics_registry.inc("")
    assert get_metrics() == {}
    assert get_counters() == {}


def test_instrumentation_toggle_guards_timer_and_counters():
    set_instrumentation_enabled(False)
    with timer("tests.timer.disabled"):
        pass
    inc_counter("tests.counter.disabled")
    assert "tests.timer.disabled" not in get_metrics()
    assert get_counters() == {}

    set_instrumentation_enabled(True)
    with timer("tests.timer.enabled"):
        pass
    inc_counter("tests.counter.enabled", 3)
    assert "tests.timer.enabled" in get_metrics()
    assert get_counters()["tests.counter.enabled"] == 3.0
