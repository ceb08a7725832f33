"""Protocols the core depends on.

Concrete implementations live under ``poolstat.adapters``; tests inject the
in-memory fakes from the same package.
"""

from poolstat.core.protocols.command import CommandSession, WriteBinding
from poolstat.core.protocols.poll_metrics import PollMetrics
from poolstat.core.protocols.registry import Record, RegistryClient

__all__ = [
    "CommandSession",
    "PollMetrics",
    "Record",
    "RegistryClient",
    "WriteBinding",
]
