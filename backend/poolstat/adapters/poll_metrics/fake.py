"""Fake PollMetrics for testing.

Records every observation so tests can assert on what the poller did
without reaching into prometheus-client internals.
"""

from poolstat.core.protocols.poll_metrics import PollMetrics


class FakePollMetrics(PollMetrics):
    """In-memory spy implementing the PollMetrics protocol.

    Usage:
        fake = FakePollMetrics()
        fake.observe_poll(pools=2, connections=1, duration_seconds=0.01)
        assert fake.polls == 1
    """

    def __init__(self) -> None:
        self.observations: list[dict] = []
        self.failures: int = 0

    @property
    def polls(self) -> int:
        return len(self.observations)

    @property
    def last(self) -> dict | None:
        return self.observations[-1] if self.observations else None

    def observe_poll(self, *, pools: int, connections: int, duration_seconds: float) -> None:
        self.observations.append(
            {"pools": pools, "connections": connections, "duration_seconds": duration_seconds}
        )

    def observe_failure(self) -> None:
        self.failures += 1

    # -- test helpers --

    def clear(self) -> None:
        """Reset all recorded state."""
        self.observations = []
        self.failures = 0
