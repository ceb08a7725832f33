"""Polling driver: collect, render and emit a report on every tick.

Runs in a single task.  Between iterations the poller waits on a stop
event rather than sleeping, so ``stop()`` (or cancelling the task) ends
the loop without waiting out the interval.  A failed collection is
counted, logged and re-raised; the run is not retried.
"""

import asyncio
import sys
import time
from collections.abc import Callable, Sequence

from poolstat.core.collector import SnapshotCollector, count_connections
from poolstat.core.logging import logger
from poolstat.core.protocols.poll_metrics import PollMetrics
from poolstat.core.renderer import render_report
from poolstat.schemas.snapshot import PoolSnapshot

ReportSink = Callable[[str], None]
Renderer = Callable[[Sequence[PoolSnapshot]], str]

# Iteration count used when the caller asks to run forever.
UNBOUNDED = sys.maxsize


async def collect_report(collector: SnapshotCollector) -> str:
    """Collect once and return the rendered report."""
    return render_report(await collector.collect())


class Poller:
    """Repeatedly collect pool snapshots and emit the rendered report.

    Args:
        collector: Snapshot source.
        sink: Called with each rendered report.
        iterations: Number of reports to emit; ``0`` means run until stopped.
        interval: Seconds to wait between reports. Not applied after the last one.
        metrics: Optional ``PollMetrics`` implementation.
        renderer: Function turning snapshots into report text.
    """

    def __init__(
        self,
        collector: SnapshotCollector,
        sink: ReportSink,
        *,
        iterations: int = 0,
        interval: float = 1.0,
        metrics: PollMetrics | None = None,
        renderer: Renderer = render_report,
    ) -> None:
        if iterations < 0:
            raise ValueError("iterations must be >= 0")
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self._collector = collector
        self._sink = sink
        self._iterations = iterations or UNBOUNDED
        self._interval = interval
        self._metrics = metrics
        self._renderer = renderer
        self._stop = asyncio.Event()
        self._logger = logger.with_context(component="poller")

    @property
    def iterations(self) -> int:
        return self._iterations

    def stop(self) -> None:
        """Ask the loop to finish; takes effect before the next report."""
        self._stop.set()

    async def run(self) -> int:
        """Run until the iteration count is reached or ``stop()`` is called.

        Returns:
            The number of reports emitted.

        Raises:
            RegistryError: If a collection fails. Reports already emitted stay emitted.
        """
        emitted = 0
        for i in range(self._iterations):
            if self._stop.is_set():
                break
            self._logger.debug(f"Starting iteration {i + 1}")
            self._sink(await self._poll_once(i))
            emitted += 1
            if i != self._iterations - 1 and await self._wait():
                break
        self._logger.debug(f"Poller finished after {emitted} report(s)")
        return emitted

    async def _poll_once(self, iteration: int) -> str:
        start = time.monotonic()
        try:
            snapshots = await self._collector.collect()
        except Exception as e:
            self._logger.error(f"Collection failed on iteration {iteration + 1}: {e}")
            if self._metrics:
                self._metrics.observe_failure()
            raise
        if self._metrics:
            self._metrics.observe_poll(
                pools=len(snapshots),
                connections=count_connections(snapshots),
                duration_seconds=time.monotonic() - start,
            )
        return self._renderer(snapshots)

    async def _wait(self) -> bool:
        """Wait out the interval. Returns True if stopped meanwhile."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
        except asyncio.TimeoutError:
            return False
        return True
