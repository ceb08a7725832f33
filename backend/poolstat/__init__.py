"""Live connection pool statistics from a remote instrumentation registry."""

__version__ = "0.1.0"
