"""metserve - local telemetry bridge for Apple Silicon hosts."""

__version__ = "0.1.0"
