"""Metric parsers.

Every parser is a total function: any input text produces a fully populated
structure, with None (or an ``unknown`` level) where nothing matched.
"""

from metserve.parsers.base import NumericPattern, extract_number, pattern
from metserve.parsers.gpu import parse_gpu
from metserve.parsers.memory import classify_pressure, parse_memory, parse_swap_used_gb
from metserve.parsers.sensors import apply_sensor_fallback, parse_sensor_readings
from metserve.parsers.thermal import (
    DieTemperatures,
    ThermalLimits,
    parse_die_temperatures,
    parse_thermal_limits,
    parse_thermal_pressure,
)

__all__ = [
    "NumericPattern",
    "extract_number",
    "pattern",
    "parse_gpu",
    "classify_pressure",
    "parse_memory",
    "parse_swap_used_gb",
    "apply_sensor_fallback",
    "parse_sensor_readings",
    "DieTemperatures",
    "ThermalLimits",
    "parse_die_temperatures",
    "parse_thermal_limits",
    "parse_thermal_pressure",
]
