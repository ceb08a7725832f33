"""Exceptions raised by poolstat."""

from typing import Any, Optional


class PoolStatError(Exception):
    """Base class for all poolstat errors."""


class ArgumentError(PoolStatError):
    """Invalid or missing command-line input."""


class RegistryError(PoolStatError):
    """Discovery or attribute read against the instrumentation registry failed."""

    def __init__(self, message: str, *, identity: Optional[str] = None) -> None:
        super().__init__(message)
        self.identity = identity


class CommandError(PoolStatError):
    """A database command did not complete successfully.

    Args:
        message: Human-readable description of the failure.
        code: Server error code when the reply carried one.
        reply: The raw reply document, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        reply: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.reply = reply or {}

    @property
    def error_message(self) -> str:
        return str(self)
