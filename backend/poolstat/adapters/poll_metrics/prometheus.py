"""Prometheus implementation of the PollMetrics protocol.

Uses a dedicated CollectorRegistry so poll metrics never mix with the
default global registry.  ``start_server`` exposes that registry over HTTP
for long-running ``poolstat`` processes.
"""

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server

from poolstat.core.protocols.poll_metrics import PollMetrics

_DURATION_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class PrometheusPollMetrics(PollMetrics):
    """Prometheus-backed poll loop metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._polls_total = Counter(
            "poolstat_polls_total",
            "Reports successfully collected and rendered",
            registry=self._registry,
        )

        self._failures_total = Counter(
            "poolstat_poll_failures_total",
            "Collections that failed against the registry",
            registry=self._registry,
        )

        self._duration = Histogram(
            "poolstat_collect_duration_seconds",
            "Time spent collecting a snapshot from the registry",
            buckets=_DURATION_BUCKETS,
            registry=self._registry,
        )

        self._pools = Gauge(
            "poolstat_pools",
            "Connection pools seen in the latest snapshot",
            registry=self._registry,
        )

        self._connections = Gauge(
            "poolstat_in_use_connections",
            "In-use connections across all pools in the latest snapshot",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def start_server(self, port: int, addr: str = "0.0.0.0") -> None:
        """Serve the registry on ``addr:port`` from a background thread."""
        start_http_server(port, addr=addr, registry=self._registry)

    # -- PollMetrics protocol methods --

    def observe_poll(self, *, pools: int, connections: int, duration_seconds: float) -> None:
        self._polls_total.inc()
        self._duration.observe(duration_seconds)
        self._pools.set(pools)
        self._connections.set(connections)

    def observe_failure(self) -> None:
        self._failures_total.inc()
