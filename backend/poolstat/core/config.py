"""Runtime configuration.

Values come from ``POOLSTAT_*`` environment variables (or a ``.env`` file)
and serve as defaults for the command-line flags.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_POOL_PATTERN = "com.mongodb:type=ConnectionPool,*"


class Settings(BaseSettings):
    """Poolstat settings.

    Attributes:
        HOST: Registry host, optionally ``host:port``.
        PORT: Registry port. Required unless HOST carries one.
        ROW_COUNT: Number of reports to print; 0 runs until interrupted.
        SLEEP_SECONDS: Delay between reports.
        POOL_PATTERN: Name pattern matching every connection pool instrument.
        JOLOKIA_PATH: HTTP path of the Jolokia agent on the registry host.
        REQUEST_TIMEOUT: Timeout in seconds for a single registry request.
        LOG_LEVEL: Log level for stderr logging.
        METRICS_PORT: When set, expose poll metrics for Prometheus on this port.
    """

    model_config = SettingsConfigDict(
        env_prefix="POOLSTAT_",
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
    )

    HOST: str = "localhost"
    PORT: Optional[int] = None
    ROW_COUNT: int = Field(default=0, ge=0)
    SLEEP_SECONDS: int = Field(default=1, ge=0)
    POOL_PATTERN: str = DEFAULT_POOL_PATTERN
    JOLOKIA_PATH: str = "/jolokia/"
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0)
    LOG_LEVEL: str = "WARNING"
    METRICS_PORT: Optional[int] = None


settings = Settings()
