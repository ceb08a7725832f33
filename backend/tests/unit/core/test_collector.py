"""Unit tests for the snapshot collector."""

import pytest

from poolstat.adapters.registry import FakeRegistryClient
from poolstat.core.collector import SnapshotCollector, count_connections
from poolstat.core.config import DEFAULT_POOL_PATTERN
from poolstat.core.exceptions import RegistryError
from poolstat.schemas.snapshot import ConnectionSnapshot

POOL_A = "com.mongodb:type=ConnectionPool,host=h1,port=27017"
POOL_B = "com.mongodb:type=ConnectionPool,host=h2"

CONNECTION_RECORD = {
    "namespace": "db.coll",
    "opCode": "query",
    "query": "{ }",
    "numDocuments": 1,
    "threadName": "t1",
    "durationMS": 5,
    "localPort": 54000,
}


@pytest.fixture
def registry() -> FakeRegistryClient:
    fake = FakeRegistryClient()
    fake.register(
        POOL_A,
        Host="h1",
        Port=27017,
        Size=10,
        Total=3,
        EverCreated=7,
        InUse=1,
        InUseConnections=[CONNECTION_RECORD],
    )
    fake.register(POOL_B, Size=5, Total=0, InUse=0)
    fake.register("com.mongodb:type=Other,name=x", Size=99)
    return fake


class TestSnapshotCollector:
    """Tests for SnapshotCollector.collect()."""

    @pytest.mark.asyncio
    async def test_collects_matching_pools_in_registry_order(self, registry):
        snapshots = await SnapshotCollector(registry).collect()

        assert [s.identity for s in snapshots] == [POOL_A, POOL_B]
        assert registry.search_calls == [DEFAULT_POOL_PATTERN]

    @pytest.mark.asyncio
    async def test_reads_scalars_and_connections(self, registry):
        pool_a, _ = await SnapshotCollector(registry).collect()

        assert pool_a.host == "h1"
        assert pool_a.port == 27017
        assert pool_a.size == 10
        assert pool_a.total == 3
        assert pool_a.ever_created == 7
        assert pool_a.in_use == 1
        assert pool_a.in_use_connections == (
            ConnectionSnapshot(
                namespace="db.coll",
                op_code="query",
                query="{ }",
                num_documents=1,
                thread_name="t1",
                duration_ms=5,
                local_port=54000,
            ),
        )

    @pytest.mark.asyncio
    async def test_absent_attributes_are_none(self, registry):
        _, pool_b = await SnapshotCollector(registry).collect()

        assert pool_b.host is None
        assert pool_b.port is None
        assert pool_b.ever_created is None
        assert pool_b.in_use_connections == ()

    @pytest.mark.asyncio
    async def test_keeps_connection_order(self, registry):
        records = [dict(CONNECTION_RECORD, localPort=port) for port in (3, 1, 2)]
        registry.register(POOL_A, InUseConnections=records)

        pool_a, _ = await SnapshotCollector(registry).collect()
        assert [c.local_port for c in pool_a.in_use_connections] == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_missing_record_fields_are_none(self, registry):
        registry.register(POOL_A, InUseConnections=[{"opCode": "insert", "numDocuments": 10}])

        pool_a, _ = await SnapshotCollector(registry).collect()
        connection = pool_a.in_use_connections[0]
        assert connection.op_code == "insert"
        assert connection.namespace is None
        assert connection.local_port is None

    @pytest.mark.asyncio
    async def test_value_types_are_preserved(self, registry):
        registry.register(POOL_A, Port="27017", Size=10)

        pool_a, _ = await SnapshotCollector(registry).collect()
        assert pool_a.port == "27017"
        assert isinstance(pool_a.size, int)

    @pytest.mark.asyncio
    async def test_custom_pattern(self, registry):
        snapshots = await SnapshotCollector(registry, "com.mongodb:type=Other,*").collect()
        assert [s.size for s in snapshots] == [99]

    @pytest.mark.asyncio
    async def test_discovery_failure_propagates(self, registry):
        registry.fail_search()

        with pytest.raises(RegistryError):
            await SnapshotCollector(registry).collect()

    @pytest.mark.asyncio
    async def test_attribute_failure_fails_whole_collection(self, registry):
        registry.fail_read(POOL_B, "Total")

        with pytest.raises(RegistryError):
            await SnapshotCollector(registry).collect()

    @pytest.mark.asyncio
    async def test_unexpected_value_shape_is_a_registry_error(self, registry):
        registry.register(POOL_B, Size={"nested": True})

        with pytest.raises(RegistryError) as exc_info:
            await SnapshotCollector(registry).collect()
        assert exc_info.value.identity == POOL_B

    @pytest.mark.asyncio
    async def test_nothing_is_cached_between_collections(self, registry):
        collector = SnapshotCollector(registry)
        await collector.collect()
        registry.unregister(POOL_B)
        registry.register(POOL_A, Size=20)

        snapshots = await collector.collect()
        assert [(s.identity, s.size) for s in snapshots] == [(POOL_A, 20)]
        assert len(registry.search_calls) == 2

    @pytest.mark.asyncio
    async def test_every_attribute_is_read_on_every_collection(self, registry):
        collector = SnapshotCollector(registry)
        attributes = ["Host", "Port", "Size", "Total", "EverCreated", "InUse", "InUseConnections"]

        await collector.collect()
        await collector.collect()

        per_collection = [(pool, key) for pool in (POOL_A, POOL_B) for key in attributes]
        assert registry.read_calls == per_collection * 2

    @pytest.mark.asyncio
    async def test_count_connections(self, registry):
        snapshots = await SnapshotCollector(registry).collect()
        assert count_connections(snapshots) == 1
