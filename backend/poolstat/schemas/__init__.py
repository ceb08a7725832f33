"""Schemas for pool snapshots."""

from poolstat.schemas.snapshot import ConnectionSnapshot, PoolSnapshot, ScalarValue

__all__ = ["ConnectionSnapshot", "PoolSnapshot", "ScalarValue"]
