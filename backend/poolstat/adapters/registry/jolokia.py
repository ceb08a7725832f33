"""Jolokia implementation of the RegistryClient protocol.

Jolokia exposes a JMX MBean server over HTTP/JSON.  Each call is a POST of
one request object (``search``, ``read`` or ``version``) and the reply
carries ``status`` plus either ``value`` or ``error``/``error_type``.

The client owns a single ``aiohttp.ClientSession`` for its whole lifetime;
use it as an async context manager so the session is closed on every exit
path::

    async with JolokiaRegistryClient.for_target("db-host:8778") as registry:
        pools = await registry.find_by_pattern("com.mongodb:type=ConnectionPool,*")
"""

import asyncio
from typing import Any, Optional

import aiohttp

from poolstat.core.exceptions import RegistryError
from poolstat.core.logging import logger
from poolstat.core.protocols.registry import Record, RegistryClient

_ATTRIBUTE_NOT_FOUND = "AttributeNotFoundException"


class JolokiaRegistryClient(RegistryClient):
    """Read connection pool instruments through a Jolokia agent."""

    def __init__(self, base_url: str, *, timeout: float = 10.0) -> None:
        """Initialize the client.

        Args:
            base_url: Full URL of the agent, e.g. ``http://db-host:8778/jolokia/``.
            timeout: Total timeout in seconds for each request.
        """
        self.base_url = base_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = logger.with_context(component="jolokia", base_url=base_url)

    @classmethod
    def for_target(
        cls, host_and_port: str, *, path: str = "/jolokia/", timeout: float = 10.0
    ) -> "JolokiaRegistryClient":
        """Build a client for an agent reachable at ``host:port``."""
        if not path.startswith("/"):
            path = f"/{path}"
        return cls(f"http://{host_and_port}{path}", timeout=timeout)

    async def __aenter__(self) -> "JolokiaRegistryClient":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def open(self) -> None:
        """Open the HTTP session and check that the agent answers.

        Raises:
            RegistryError: If the agent cannot be reached.
        """
        self._session = aiohttp.ClientSession(timeout=self._timeout)
        try:
            version = await self._request({"type": "version"})
        except BaseException:
            await self.close()
            raise
        agent = version.get("agent") if isinstance(version, dict) else None
        self.logger.info(f"Connected to Jolokia agent {agent or 'unknown'}")

    async def close(self) -> None:
        """Close the HTTP session. Safe to call more than once."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            self.logger.info("Closed registry connection")

    # -- RegistryClient protocol methods --

    async def find_by_pattern(self, pattern: str) -> list[str]:
        # Names as registered, not canonical (alphabetically sorted keys).
        value = await self._request(
            {"type": "search", "mbean": pattern, "config": {"canonicalNaming": False}}
        )
        if value is None:
            return []
        if not isinstance(value, list):
            raise RegistryError(f"Unexpected search result for {pattern}: {value!r}")
        return [str(name) for name in value]

    async def get_attribute(self, identity: str, key: str) -> Any:
        return await self._read(identity, key)

    async def get_array_attribute(self, identity: str, key: str) -> list[Record]:
        value = await self._read(identity, key)
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
            raise RegistryError(
                f"Attribute {key} of {identity} is not an array of records", identity=identity
            )
        return value

    # -- internals --

    async def _read(self, identity: str, key: str) -> Any:
        return await self._request(
            {"type": "read", "mbean": identity, "attribute": key},
            identity=identity,
            missing_ok=True,
        )

    async def _request(
        self,
        body: dict[str, Any],
        *,
        identity: Optional[str] = None,
        missing_ok: bool = False,
    ) -> Any:
        """POST one Jolokia request and return its ``value``.

        Args:
            body: The Jolokia request object.
            identity: Instrument the request targets, for error reporting.
            missing_ok: Return ``None`` instead of raising when the attribute
                does not exist on the instrument.
        """
        if self._session is None:
            raise RegistryError("Registry connection is not open", identity=identity)

        try:
            async with self._session.post(self.base_url, json=body) as response:
                if response.status != 200:
                    raise RegistryError(
                        f"Jolokia agent returned HTTP {response.status} for {body['type']} request",
                        identity=identity,
                    )
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise RegistryError(
                f"{body['type']} request to {self.base_url} failed: {str(e) or type(e).__name__}",
                identity=identity,
            ) from e

        if not isinstance(payload, dict):
            raise RegistryError(f"Malformed Jolokia reply: {payload!r}", identity=identity)

        status = payload.get("status")
        if status == 200:
            return payload.get("value")

        error_type = str(payload.get("error_type") or "")
        if missing_ok and error_type.endswith(_ATTRIBUTE_NOT_FOUND):
            return None
        raise RegistryError(
            f"{body['type']} request failed with status {status}: "
            f"{payload.get('error') or error_type or 'unknown error'}",
            identity=identity,
        )
