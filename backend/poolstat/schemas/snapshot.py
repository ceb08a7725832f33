"""Point-in-time snapshots of connection pools and their in-use connections.

Scalars keep the type the registry reported: the renderer quotes ``str``
values and prints everything else as-is, so a port reported as ``"27017"``
and one reported as ``27017`` render differently.  ``None`` means the
registry had no value and the field is left out of the report.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr

ScalarValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]

# Registry attribute name -> model field, in report order.
POOL_SCALAR_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("Host", "host"),
    ("Port", "port"),
    ("Size", "size"),
    ("Total", "total"),
    ("EverCreated", "ever_created"),
    ("InUse", "in_use"),
)
IN_USE_CONNECTIONS_ATTRIBUTE = "InUseConnections"

CONNECTION_FIELDS: tuple[tuple[str, str], ...] = (
    ("namespace", "namespace"),
    ("opCode", "op_code"),
    ("query", "query"),
    ("numDocuments", "num_documents"),
    ("threadName", "thread_name"),
    ("durationMS", "duration_ms"),
    ("localPort", "local_port"),
)


class ConnectionSnapshot(BaseModel):
    """One connection checked out of a pool."""

    model_config = ConfigDict(frozen=True)

    namespace: ScalarValue = None
    op_code: ScalarValue = None
    query: ScalarValue = None
    num_documents: ScalarValue = None
    thread_name: ScalarValue = None
    duration_ms: ScalarValue = None
    local_port: ScalarValue = None


class PoolSnapshot(BaseModel):
    """One connection pool as reported by the registry."""

    model_config = ConfigDict(frozen=True)

    identity: str
    host: ScalarValue = None
    port: ScalarValue = None
    size: ScalarValue = None
    total: ScalarValue = None
    ever_created: ScalarValue = None
    in_use: ScalarValue = None
    in_use_connections: tuple[ConnectionSnapshot, ...] = ()
