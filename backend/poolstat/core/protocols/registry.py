"""RegistryClient protocol for reading instrumented objects.

The collector only needs three reads: discover instrument names by
pattern, read a scalar attribute, and read an attribute holding an array
of records.  Production talks to a Jolokia agent over HTTP; tests use an
in-memory fake.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

Record = Mapping[str, Any]


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol for a remote instrumentation registry."""

    async def find_by_pattern(self, pattern: str) -> list[str]:
        """Return the identities of all instruments matching ``pattern``.

        Order is whatever the registry reports.

        Raises:
            RegistryError: If the query fails.
        """
        ...

    async def get_attribute(self, identity: str, key: str) -> Any:
        """Return the current value of a scalar attribute.

        Returns:
            The value, or ``None`` when the registry has no value for ``key``.

        Raises:
            RegistryError: If the instrument is gone or the read fails.
        """
        ...

    async def get_array_attribute(self, identity: str, key: str) -> list[Record]:
        """Return an attribute holding an ordered array of records.

        Raises:
            RegistryError: If the instrument is gone or the read fails.
        """
        ...
