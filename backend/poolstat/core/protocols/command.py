"""Protocols for sending database commands.

``WriteBinding`` is the blocking path, ``CommandSession`` the async one.
Both return the server's reply document; interpreting it is left to
``poolstat.operations.helpers``.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WriteBinding(Protocol):
    """Blocking connection binding able to run write commands."""

    def command(self, database: str, command: dict[str, Any]) -> dict[str, Any]:
        """Run ``command`` against ``database`` and return the reply."""
        ...


@runtime_checkable
class CommandSession(Protocol):
    """Async session able to run commands."""

    async def command(self, database: str, command: dict[str, Any]) -> dict[str, Any]:
        """Run ``command`` against ``database`` and return the reply."""
        ...
