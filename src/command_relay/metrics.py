"""Prometheus metrics collector."""

import logging

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Collects and exposes Prometheus metrics."""

    def __init__(self):
        """Initialize metrics."""

        # Traffic counters
        self.registrations_total = Counter(
            "relay_registrations_total", "Device registration attempts", ["result"]
        )

        self.commands_enqueued_total = Counter(
            "relay_commands_enqueued_total", "Commands queued for devices"
        )

        self.commands_delivered_total = Counter(
            "relay_commands_delivered_total", "Commands handed to polling devices"
        )

        self.polls_total = Counter(
            "relay_polls_total", "Command polls received", ["outcome"]
        )

        # Expiry sweep
        self.devices_evicted_total = Counter(
            "relay_devices_evicted_total", "Devices evicted after the eviction window"
        )

        self.sweep_duration_seconds = Histogram(
            "relay_sweep_duration_seconds",
            "Duration of expiry sweep runs in seconds",
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )

        # State gauges
        self.devices_registered = Gauge(
            "relay_devices_registered", "Devices currently registered"
        )

        self.devices_online = Gauge(
            "relay_devices_online", "Devices heard from within the online window"
        )

        self.commands_pending = Gauge(
            "relay_commands_pending", "Commands waiting to be polled"
        )

        # Application health
        self.errors_total = Counter(
            "relay_errors_total", "Total errors encountered", ["component", "error_type"]
        )

    def record_registration(self, result: str) -> None:
        """Record a registration attempt."""
        self.registrations_total.labels(result=result).inc()

    def record_enqueue(self) -> None:
        """Record a queued command."""
        self.commands_enqueued_total.inc()

    def record_poll(self, outcome: str, delivered: int) -> None:
        """Record a poll (known or unknown device) and the commands it delivered."""
        self.polls_total.labels(outcome=outcome).inc()
        if delivered:
            self.commands_delivered_total.inc(delivered)

    def record_sweep(self, duration_seconds: float, evicted: int) -> None:
        """Record a completed sweep run."""
        self.sweep_duration_seconds.observe(duration_seconds)
        if evicted:
            self.devices_evicted_total.inc(evicted)

    def update_state(self, registered: int, online: int, pending: int) -> None:
        """Update the state gauges."""
        self.devices_registered.set(registered)
        self.devices_online.set(online)
        self.commands_pending.set(pending)

    def record_error(self, component: str, error_type: str) -> None:
        """Record an error."""
        self.errors_total.labels(component=component, error_type=error_type).inc()


# Global metrics collector instance
_metrics: MetricsCollector = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
