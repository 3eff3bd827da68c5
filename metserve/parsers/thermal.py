"""pmset -g therm and powermetrics smc/thermal sampler parsers."""

import re
from dataclasses import dataclass

from metserve.models import ThermalPressure
from metserve.parsers.base import extract_number, pattern

CPU_LIMIT_PATTERNS = (pattern(r"CPU_Speed_Limit\s*=\s*([0-9.]+)"),)
GPU_LIMIT_PATTERNS = (pattern(r"GPU_Speed_Limit\s*=\s*([0-9.]+)"),)

# pmset, older powermetrics and newer powermetrics phrasings respectively
PRESSURE_PHRASES = (
    re.compile(r"ThermalPressure\s*=\s*([A-Za-z]+)", re.IGNORECASE),
    re.compile(r"Thermal Pressure:\s*([A-Za-z]+)", re.IGNORECASE),
    re.compile(r"Current pressure level:\s*([A-Za-z]+)", re.IGNORECASE),
)
PRESSURE_LEVELS = (
    ThermalPressure.NOMINAL,
    ThermalPressure.MODERATE,
    ThermalPressure.HEAVY,
    ThermalPressure.CRITICAL,
)
# Case-sensitive, as printed by pmset when nothing has happened yet
NO_THERMAL_EVENT_MARKERS = ("No thermal warning level has been recorded", "Nominal")
NO_CPU_POWER_EVENT_MARKER = "No CPU power status has been recorded"
UNTHROTTLED_PCT = 100.0

CPU_TEMP_PATTERNS = (
    pattern(r"CPU die temperature:\s*([0-9.]+)\s*C"),
    pattern(r"CPU temperature:\s*([0-9.]+)\s*C"),
)
GPU_TEMP_PATTERNS = (
    pattern(r"GPU die temperature:\s*([0-9.]+)\s*C"),
    pattern(r"GPU temperature:\s*([0-9.]+)\s*C"),
)
SOC_TEMP_PATTERNS = (
    pattern(r"SoC die temperature:\s*([0-9.]+)\s*C"),
    pattern(r"SOC die temperature:\s*([0-9.]+)\s*C"),
    pattern(r"PMU die temperature:\s*([0-9.]+)\s*C"),
)


@dataclass(frozen=True, slots=True)
class ThermalLimits:
    cpu_speed_limit_pct: float | None
    gpu_speed_limit_pct: float | None
    thermal_pressure: ThermalPressure


@dataclass(frozen=True, slots=True)
class DieTemperatures:
    cpu_temp_c: float | None = None
    gpu_temp_c: float | None = None
    soc_temp_c: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.cpu_temp_c is None and self.gpu_temp_c is None and self.soc_temp_c is None


def parse_thermal_pressure(text: str) -> ThermalPressure:
    """Read the thermal pressure word, whichever tool printed it."""
    for phrase in PRESSURE_PHRASES:
        m = phrase.search(text)
        if m is None:
            continue
        word = m.group(1).lower()
        for level in PRESSURE_LEVELS:
            if level.value in word:
                return level
        break

    if any(marker in text for marker in NO_THERMAL_EVENT_MARKERS):
        return ThermalPressure.NOMINAL
    return ThermalPressure.UNKNOWN


def parse_thermal_limits(text: str) -> ThermalLimits:
    """Extract CPU/GPU speed limits and thermal pressure.

    A machine that never throttled prints no limit at all; the CPU limit is
    then reported as 100 when pmset says so explicitly, the GPU limit always.
    """
    cpu_limit = extract_number(text, CPU_LIMIT_PATTERNS)
    if cpu_limit is None and NO_CPU_POWER_EVENT_MARKER in text:
        cpu_limit = UNTHROTTLED_PCT

    gpu_limit = extract_number(text, GPU_LIMIT_PATTERNS)
    if gpu_limit is None:
        gpu_limit = UNTHROTTLED_PCT

    return ThermalLimits(
        cpu_speed_limit_pct=cpu_limit,
        gpu_speed_limit_pct=gpu_limit,
        thermal_pressure=parse_thermal_pressure(text),
    )


def parse_die_temperatures(text: str) -> DieTemperatures:
    """Extract CPU/GPU/SoC die temperatures (Celsius) from powermetrics smc output."""
    return DieTemperatures(
        cpu_temp_c=extract_number(text, CPU_TEMP_PATTERNS),
        gpu_temp_c=extract_number(text, GPU_TEMP_PATTERNS),
        soc_temp_c=extract_number(text, SOC_TEMP_PATTERNS),
    )
