"""Database command operations."""

from poolstat.operations.create_collection import CreateCollectionOperation, CreateCollectionOptions
from poolstat.operations.helpers import execute_wrapped_command, execute_wrapped_command_async

__all__ = [
    "CreateCollectionOperation",
    "CreateCollectionOptions",
    "execute_wrapped_command",
    "execute_wrapped_command_async",
]
