"""Unit tests for Prometheus metrics collector."""

import pytest
from prometheus_client import REGISTRY

from command_relay import metrics


# Use a module-level fixture that runs once to create the collector
@pytest.fixture(scope="module")
def metrics_collector():
    """Get or create a metrics collector for testing.

    Prometheus metrics are registered globally and cannot be re-registered,
    so the singleton is shared across all tests.
    """
    if metrics._metrics is not None:
        return metrics._metrics
    return metrics.get_metrics()


def _sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricsCollector:
    """Test MetricsCollector class."""

    def test_record_registration(self, metrics_collector):
        """Test registration attempts are counted by result."""
        before = _sample("relay_registrations_total", {"result": "accepted"})
        metrics_collector.record_registration("accepted")
        metrics_collector.record_registration("rejected")
        assert _sample("relay_registrations_total", {"result": "accepted"}) == before + 1

    def test_record_enqueue(self, metrics_collector):
        """Test queued commands increment the enqueue counter."""
        before = _sample("relay_commands_enqueued_total")
        metrics_collector.record_enqueue()
        metrics_collector.record_enqueue()
        assert _sample("relay_commands_enqueued_total") == before + 2

    def test_record_poll(self, metrics_collector):
        """Test polls are counted and delivered commands accumulated."""
        polls_before = _sample("relay_polls_total", {"outcome": "known"})
        delivered_before = _sample("relay_commands_delivered_total")

        metrics_collector.record_poll("known", 3)
        metrics_collector.record_poll("known", 0)

        assert _sample("relay_polls_total", {"outcome": "known"}) == polls_before + 2
        assert _sample("relay_commands_delivered_total") == delivered_before + 3

    def test_record_sweep(self, metrics_collector):
        """Test sweep runs observe duration and count evictions."""
        runs_before = _sample("relay_sweep_duration_seconds_count")
        evicted_before = _sample("relay_devices_evicted_total")

        metrics_collector.record_sweep(0.002, 2)
        metrics_collector.record_sweep(0.001, 0)

        assert _sample("relay_sweep_duration_seconds_count") == runs_before + 2
        assert _sample("relay_devices_evicted_total") == evicted_before + 2

    def test_update_state(self, metrics_collector):
        """Test state gauges reflect the latest snapshot."""
        metrics_collector.update_state(registered=5, online=3, pending=7)
        assert _sample("relay_devices_registered") == 5
        assert _sample("relay_devices_online") == 3
        assert _sample("relay_commands_pending") == 7

        metrics_collector.update_state(registered=0, online=0, pending=0)
        assert _sample("relay_devices_registered") == 0

    def test_record_error(self, metrics_collector):
        """Test errors are counted per component and type."""
        labels = {"component": "sweeper", "error_type": "sweep_failed"}
        before = _sample("relay_errors_total", labels)
        metrics_collector.record_error(component="sweeper", error_type="sweep_failed")
        assert _sample("relay_errors_total", labels) == before + 1


class TestGetMetrics:
    """Test get_metrics function."""

    def test_get_metrics_returns_collector(self, metrics_collector):
        """Test get_metrics returns a collector."""
        assert isinstance(metrics.get_metrics(), metrics.MetricsCollector)

    def test_get_metrics_is_singleton(self, metrics_collector):
        """Test metrics collector follows singleton pattern."""
        collector = metrics.get_metrics()
        assert collector is metrics.get_metrics()
        assert collector is metrics._metrics
