"""Registry client adapters."""

from poolstat.adapters.registry.fake import FakeRegistryClient
from poolstat.adapters.registry.jolokia import JolokiaRegistryClient

__all__ = ["FakeRegistryClient", "JolokiaRegistryClient"]
