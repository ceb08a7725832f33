"""PollMetrics protocol for instrumenting the poll loop itself.

Counts what the poller does (reports emitted, failures, collection
latency, pools seen) so a long-running ``poolstat`` can be scraped.
Production uses Prometheus; tests inject a fake.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PollMetrics(Protocol):
    """Protocol for poll loop metrics collection."""

    def observe_poll(self, *, pools: int, connections: int, duration_seconds: float) -> None:
        """Record one successful collect-and-render cycle.

        Args:
            pools: Number of pools in the snapshot.
            connections: Total in-use connections across all pools.
            duration_seconds: Wall time spent collecting from the registry.
        """
        ...

    def observe_failure(self) -> None:
        """Record a cycle that failed during collection."""
        ...
