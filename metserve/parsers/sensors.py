"""Sensor helper output parser and die-temperature fallback.

The helper prints a flat JSON object mapping HID sensor names (e.g.
"PMU tdie3") to Celsius readings. Those sensors do not map onto CPU, GPU
and SoC regions, so the fallback reports the hottest reading for all three.
"""

import math

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from metserve.parsers.thermal import DieTemperatures

_READINGS = TypeAdapter(dict[str, float])


def parse_sensor_readings(text: str) -> dict[str, float]:
    """Parse helper stdout into sensor readings; empty on anything malformed."""
    if not text.strip():
        return {}
    try:
        readings = _READINGS.validate_json(text)
    except ValidationError as e:
        logger.debug(f"Sensor helper output is not a flat JSON object: {e.error_count()} errors")
        return {}
    return {name: value for name, value in readings.items() if math.isfinite(value)}


def apply_sensor_fallback(
    temps: DieTemperatures, helper_ok: bool, helper_stdout: str
) -> DieTemperatures:
    """Fill die temperatures from the helper when the primary source had none.

    Only applies when every primary temperature is missing and the helper
    exited successfully; otherwise *temps* is returned unchanged.
    """
    if not temps.is_empty or not helper_ok:
        return temps

    readings = parse_sensor_readings(helper_stdout)
    if not readings:
        return temps

    hottest = max(readings.values())
    return DieTemperatures(cpu_temp_c=hottest, gpu_temp_c=hottest, soc_temp_c=hottest)
