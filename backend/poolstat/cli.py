"""Command-line interface for poolstat.

Prints live connection pool statistics read from a remote Jolokia agent,
once per SLEEP_TIME seconds.
"""

import asyncio
from typing import Optional

import click

from poolstat.adapters.poll_metrics import PrometheusPollMetrics
from poolstat.adapters.registry import JolokiaRegistryClient
from poolstat.core.collector import SnapshotCollector
from poolstat.core.config import settings
from poolstat.core.exceptions import ArgumentError, RegistryError
from poolstat.core.logging import configure_logging, logger
from poolstat.core.poller import Poller
from poolstat.core.protocols.poll_metrics import PollMetrics

FIELDS_HELP = """\b
Fields
  objectName                     - name of the instrument for this connection pool
  host                           - host of the mongod/mongos server
  port                           - port of the mongod/mongos server
  size                           - max # of connections allowed
  total                          - # of connections allocated
  everCreated                    - # of connections ever created by the pool
  inUse                          - # of connections in use
  inUseConnections               - list of all in use connections
  inUseConnections.namespace     - namespace on which connection is operating
  inUseConnections.opCode        - operation connection is executing
  inUseConnections.query         - query the connection is executing (for query/update/remove)
  inUseConnections.numDocuments  - # of documents in the message (mostly relevant for batch inserts)
  inUseConnections.threadName    - name of thread on which connection is executing
  inUseConnections.durationMS    - duration that the operation has been executing so far
  inUseConnections.localPort     - local port of the connection
"""


def resolve_target(host: str, port: Optional[int]) -> str:
    """Return ``host:port`` for the registry.

    Raises:
        ArgumentError: If no port is given and ``host`` does not carry one.
    """
    if port is None:
        if ":" not in host:
            raise ArgumentError("port is required")
        return host
    return f"{host}:{port}"


def open_registry(target: str) -> JolokiaRegistryClient:
    """Registry client for ``target``; not yet opened."""
    return JolokiaRegistryClient.for_target(
        target, path=settings.JOLOKIA_PATH, timeout=settings.REQUEST_TIMEOUT
    )


async def run(
    target: str,
    *,
    iterations: int,
    interval: float,
    metrics: Optional[PollMetrics] = None,
) -> int:
    """Connect to the registry and print reports until done.

    The registry connection is held for the whole run and closed on the
    way out, including when a collection fails.

    Returns:
        The number of reports printed.
    """
    async with open_registry(target) as registry:
        collector = SnapshotCollector(registry, settings.POOL_PATTERN)
        poller = Poller(
            collector, click.echo, iterations=iterations, interval=interval, metrics=metrics
        )
        return await poller.run()


@click.command(epilog=FIELDS_HELP)
@click.option(
    "-h",
    "--host",
    default=settings.HOST,
    show_default=True,
    help="Registry host. Can also be given as hostname:port.",
)
@click.option(
    "--port",
    type=int,
    default=settings.PORT,
    help="Jolokia agent port. Required unless --host includes it.",
)
@click.option(
    "-n",
    "--rowcount",
    "row_count",
    type=click.IntRange(min=0),
    default=settings.ROW_COUNT,
    show_default=True,
    help="Number of times to print stats (0 for indefinite).",
)
@click.option(
    "--metrics-port",
    type=int,
    default=settings.METRICS_PORT,
    help="Expose poll metrics for Prometheus on this port.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=settings.LOG_LEVEL,
    show_default=True,
    help="Logging level (logs go to stderr).",
)
@click.argument(
    "sleep_time", type=click.IntRange(min=0), required=False, default=settings.SLEEP_SECONDS
)
def main(
    host: str,
    port: Optional[int],
    row_count: int,
    metrics_port: Optional[int],
    log_level: str,
    sleep_time: int,
) -> None:
    """View live connection pool statistics from a remote instrumentation registry.

    SLEEP_TIME is the time to wait (in seconds) between reports (default 1).
    """
    configure_logging(log_level)

    try:
        target = resolve_target(host, port)
    except ArgumentError as e:
        raise click.UsageError(str(e))

    metrics: Optional[PrometheusPollMetrics] = None
    if metrics_port is not None:
        metrics = PrometheusPollMetrics()
        metrics.start_server(metrics_port)
        logger.info(f"Serving poll metrics on port {metrics_port}")

    try:
        asyncio.run(run(target, iterations=row_count, interval=sleep_time, metrics=metrics))
    except RegistryError as e:
        raise click.ClickException(str(e))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")


if __name__ == "__main__":
    main()
