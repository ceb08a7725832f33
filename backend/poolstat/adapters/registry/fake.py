"""Fake RegistryClient for testing.

Holds instruments as plain dicts so tests can build registry state,
change it between polls, and inject failures without an HTTP agent.
"""

import fnmatch
from typing import Any, Optional

from poolstat.core.exceptions import RegistryError
from poolstat.core.protocols.registry import Record, RegistryClient


def _key_properties(properties: str) -> dict[str, str]:
    return dict(item.split("=", 1) for item in properties.split(",") if "=" in item)


def matches_pattern(name: str, pattern: str) -> bool:
    """Whether the object name ``name`` matches the JMX name ``pattern``.

    The domain may use ``*`` and ``?`` wildcards, as may property values.
    Key properties match regardless of order.  A trailing ``*`` in the
    property list lets the name carry properties the pattern does not list.
    """
    name_domain, _, name_properties = name.partition(":")
    pattern_domain, _, pattern_properties = pattern.partition(":")
    if not fnmatch.fnmatchcase(name_domain, pattern_domain):
        return False

    items = [item for item in pattern_properties.split(",") if item]
    open_ended = "*" in items
    wanted = _key_properties(",".join(item for item in items if item != "*"))
    actual = _key_properties(name_properties)
    if not open_ended and wanted.keys() != actual.keys():
        return False
    return all(
        key in actual and fnmatch.fnmatchcase(actual[key], value) for key, value in wanted.items()
    )


class FakeRegistryClient(RegistryClient):
    """In-memory registry implementing the RegistryClient protocol.

    Patterns follow JMX object name rules (see ``matches_pattern``).  Attributes that
    were never set read as ``None``.

    Usage:
        fake = FakeRegistryClient()
        fake.register("com.mongodb:type=ConnectionPool,host=h1", Host="h1", Size=10)
        assert await fake.get_attribute("com.mongodb:type=ConnectionPool,host=h1", "Size") == 10
    """

    def __init__(self) -> None:
        self.instruments: dict[str, dict[str, Any]] = {}
        self.search_calls: list[str] = []
        self.read_calls: list[tuple[str, str]] = []
        self.opened: bool = False
        self.closed: bool = False
        self._search_error: Optional[BaseException] = None
        self._fail_searches_after: Optional[int] = None
        self._read_errors: dict[tuple[str, str], Exception] = {}

    async def __aenter__(self) -> "FakeRegistryClient":
        self.opened = True
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.closed = True

    # -- RegistryClient protocol methods --

    async def find_by_pattern(self, pattern: str) -> list[str]:
        self.search_calls.append(pattern)
        if self._search_error is not None:
            raise self._search_error
        limit = self._fail_searches_after
        if limit is not None and len(self.search_calls) > limit:
            raise RegistryError(f"search for {pattern} failed")
        return [name for name in self.instruments if matches_pattern(name, pattern)]

    async def get_attribute(self, identity: str, key: str) -> Any:
        return self._read(identity, key)

    async def get_array_attribute(self, identity: str, key: str) -> list[Record]:
        return list(self._read(identity, key) or [])

    # -- test helpers --

    def register(self, identity: str, **attributes: Any) -> None:
        """Add or replace an instrument with the given attributes."""
        self.instruments[identity] = dict(attributes)

    def unregister(self, identity: str) -> None:
        """Remove an instrument."""
        self.instruments.pop(identity, None)

    def fail_search(self, exc: Optional[BaseException] = None, *, after: Optional[int] = None) -> None:
        """Make discovery raise.

        Args:
            exc: Exception to raise on every search.
            after: Instead, let this many searches succeed and fail the rest.
        """
        if after is not None:
            self._fail_searches_after = after
        else:
            self._search_error = exc or RegistryError("search failed")

    def fail_read(self, identity: str, key: str, exc: Optional[Exception] = None) -> None:
        """Make reading ``key`` on ``identity`` raise."""
        self._read_errors[(identity, key)] = exc or RegistryError(
            f"read of {key} failed", identity=identity
        )

    def _read(self, identity: str, key: str) -> Any:
        self.read_calls.append((identity, key))
        if (identity, key) in self._read_errors:
            raise self._read_errors[(identity, key)]
        if identity not in self.instruments:
            raise RegistryError(f"Instance not found: {identity}", identity=identity)
        return self.instruments[identity].get(key)
