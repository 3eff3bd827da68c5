"""Consolidated domain enums for metserve."""

from enum import StrEnum


class MemoryPressure(StrEnum):
    """System-wide memory pressure as reported by memory_pressure."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    UNKNOWN = "unknown"


class ThermalPressure(StrEnum):
    """Thermal pressure level reported by pmset / powermetrics."""

    NOMINAL = "nominal"
    MODERATE = "moderate"
    HEAVY = "heavy"
    CRITICAL = "critical"
    UNKNOWN = "unknown"
