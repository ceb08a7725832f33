"""Render pool snapshots as the poolstat text report.

The layout is consumed by existing tooling, so it is reproduced exactly::

    { pools : [
       { objectName: 'com.mongodb:type=ConnectionPool,host=h1',
         host: 'h1', port: 27017, size: 10, total: 3, everCreated: 7, inUse: 1,
         inUseConnections: [
          { namespace: 'db.coll', opCode: 'query', query: {}, localPort: 54000 }
         ]
       }
      ]
    }

Keys are attribute names with a lower-cased first character.  Strings are
single-quoted except ``query``, which the registry already serialized.
Absent values produce neither a key nor a separator.
"""

import math
from collections.abc import Iterator, Sequence
from decimal import Decimal
from enum import Enum

from poolstat.schemas.snapshot import (
    CONNECTION_FIELDS,
    IN_USE_CONNECTIONS_ATTRIBUTE,
    POOL_SCALAR_ATTRIBUTES,
    ConnectionSnapshot,
    PoolSnapshot,
    ScalarValue,
)

OBJECT_NAME_ATTRIBUTE = "ObjectName"

_POOL_INDENT = "   "
_FIELD_INDENT = "     "
_CONNECTION_INDENT = "      "


class StringStyle(str, Enum):
    """How a ``str`` value is written."""

    QUOTED = "quoted"
    VERBATIM = "verbatim"


# Connection fields whose string values are already structured data.
_VERBATIM_FIELDS = frozenset({"query"})


def key_string(attribute: str) -> str:
    """Report key for ``attribute``: ``ObjectName`` -> ``objectName``."""
    return attribute[:1].lower() + attribute[1:]


def value_string(value: ScalarValue, style: StringStyle = StringStyle.QUOTED) -> str:
    """Textual form of a present value."""
    if isinstance(value, str):
        return f"'{value}'" if style is StringStyle.QUOTED else value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return double_string(value)
    return str(value)


def double_string(value: float) -> str:
    """Format a float the way the JVM prints a ``double``.

    Plain decimal for magnitudes in ``[1e-3, 1e7)``, otherwise
    ``d.dddE<exponent>``: ``1e-05`` -> ``1.0E-5``, ``12345678.0`` -> ``1.2345678E7``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0 or 1e-3 <= abs(value) < 1e7:
        return repr(value)

    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    significant = "".join(map(str, digits)).rstrip("0")
    exponent += len(digits) - 1
    mantissa = f"{significant[0]}.{significant[1:] or '0'}"
    return f"{'-' if sign else ''}{mantissa}E{exponent}"


def _field(attribute: str, value: ScalarValue, style: StringStyle = StringStyle.QUOTED) -> str:
    return f"{key_string(attribute)}: {value_string(value, style)}"


def _is_last(index: int, length: int) -> bool:
    return index == length - 1


def _pool_scalars(snapshot: PoolSnapshot) -> Iterator[str]:
    for attribute, field in POOL_SCALAR_ATTRIBUTES:
        value = getattr(snapshot, field)
        if value is not None:
            yield _field(attribute, value)


def _connection_fields(connection: ConnectionSnapshot) -> Iterator[str]:
    for name, field in CONNECTION_FIELDS:
        value = getattr(connection, field)
        if value is None:
            continue
        style = StringStyle.VERBATIM if name in _VERBATIM_FIELDS else StringStyle.QUOTED
        yield _field(name, value, style)


def _render_connections(connections: Sequence[ConnectionSnapshot]) -> list[str]:
    lines = [f"{_FIELD_INDENT}{key_string(IN_USE_CONNECTIONS_ATTRIBUTE)}: ["]
    for index, connection in enumerate(connections):
        separator = "" if _is_last(index, len(connections)) else ", "
        body = ", ".join(_connection_fields(connection))
        lines.append(f"{_CONNECTION_INDENT}{{ {body} }}{separator}")
    lines.append(f"{_FIELD_INDENT}]")
    return lines


def _render_pool(snapshot: PoolSnapshot, *, last: bool) -> list[str]:
    # inUseConnections always follows, so every pool-level field carries a separator.
    scalars = "".join(f"{field}, " for field in _pool_scalars(snapshot))
    return [
        f"{_POOL_INDENT}{{ {_field(OBJECT_NAME_ATTRIBUTE, snapshot.identity)}, ",
        f"{_FIELD_INDENT}{scalars}",
        *_render_connections(snapshot.in_use_connections),
        f"{_POOL_INDENT}}}" + ("" if last else ","),
    ]


def render_report(snapshots: Sequence[PoolSnapshot]) -> str:
    """Render ``snapshots`` as one report.

    Pure and deterministic: the same snapshots always give the same text.
    The result ends with a newline.
    """
    lines = ["{ pools : ["]
    for index, snapshot in enumerate(snapshots):
        lines.extend(_render_pool(snapshot, last=_is_last(index, len(snapshots))))
    lines.append("  ]")
    lines.append("}")
    return "\n".join(lines) + "\n"
