"""Snapshot collection from the instrumentation registry.

Every call to ``collect()`` discovers the pools afresh and reads each
attribute independently.  Nothing is cached between calls, and a failed
read aborts the whole collection; partial snapshots are never returned.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import ValidationError

from poolstat.core.config import DEFAULT_POOL_PATTERN
from poolstat.core.exceptions import RegistryError
from poolstat.core.logging import logger
from poolstat.core.protocols.registry import Record, RegistryClient
from poolstat.schemas.snapshot import (
    CONNECTION_FIELDS,
    IN_USE_CONNECTIONS_ATTRIBUTE,
    POOL_SCALAR_ATTRIBUTES,
    ConnectionSnapshot,
    PoolSnapshot,
)


class AttributeKind(str, Enum):
    """Shape of a pool attribute as exposed by the registry."""

    SCALAR = "scalar"
    RECORD_ARRAY = "record_array"


POOL_ATTRIBUTE_KINDS: dict[str, AttributeKind] = {
    **{name: AttributeKind.SCALAR for name, _ in POOL_SCALAR_ATTRIBUTES},
    IN_USE_CONNECTIONS_ATTRIBUTE: AttributeKind.RECORD_ARRAY,
}


class SnapshotCollector:
    """Build ``PoolSnapshot`` objects from a registry.

    Args:
        registry: Any object satisfying the ``RegistryClient`` protocol.
        pattern: Name pattern matching every connection pool instrument.
    """

    def __init__(self, registry: RegistryClient, pattern: str = DEFAULT_POOL_PATTERN) -> None:
        self._registry = registry
        self._pattern = pattern
        self._logger = logger.with_context(component="collector", pattern=pattern)

    async def collect(self) -> list[PoolSnapshot]:
        """Snapshot every pool currently registered.

        Returns:
            One snapshot per pool, in registry order.

        Raises:
            RegistryError: If discovery or any attribute read fails.
        """
        identities = await self._registry.find_by_pattern(self._pattern)
        self._logger.debug(f"Discovered {len(identities)} connection pool(s)")
        return [await self._collect_pool(identity) for identity in identities]

    async def _collect_pool(self, identity: str) -> PoolSnapshot:
        values: dict[str, Any] = {}
        for attribute, field in POOL_SCALAR_ATTRIBUTES:
            values[field] = await self._read(identity, attribute)
        connections = await self._read(identity, IN_USE_CONNECTIONS_ATTRIBUTE)
        try:
            return PoolSnapshot(
                identity=identity,
                in_use_connections=tuple(_connection_snapshot(record) for record in connections),
                **values,
            )
        except (ValidationError, AttributeError, TypeError) as e:
            raise RegistryError(
                f"Unexpected attribute value for pool {identity}: {e}", identity=identity
            ) from e

    async def _read(self, identity: str, attribute: str) -> Any:
        """Read ``attribute`` using the accessor for its known shape."""
        kind = POOL_ATTRIBUTE_KINDS[attribute]
        if kind is AttributeKind.RECORD_ARRAY:
            records = await self._registry.get_array_attribute(identity, attribute)
            return records or []
        return await self._registry.get_attribute(identity, attribute)


def _connection_snapshot(record: Record) -> ConnectionSnapshot:
    return ConnectionSnapshot(**{field: record.get(name) for name, field in CONNECTION_FIELDS})


def count_connections(snapshots: Sequence[PoolSnapshot]) -> int:
    """Total in-use connection records across ``snapshots``."""
    return sum(len(snapshot.in_use_connections) for snapshot in snapshots)
