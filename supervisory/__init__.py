"""TCP telemetry server, producer and consumer sharing an in-memory measurement store."""

__version__ = "0.1.0"