"""powermetrics gpu_power sampler output parser."""

from metserve.models import GPUStats
from metserve.parsers.base import extract_number, pattern

FREQ_PATTERNS = (pattern(r"GPU HW active frequency:\s*([0-9.]+)\s*MHz"),)
ACTIVE_PATTERNS = (pattern(r"GPU HW active residency:\s*([0-9.]+)\s*%"),)
IDLE_PATTERNS = (pattern(r"GPU idle residency:\s*([0-9.]+)\s*%"),)
POWER_PATTERNS = (pattern(r"GPU Power:\s*([0-9.]+)\s*mW"),)


def parse_gpu(text: str) -> GPUStats:
    """Extract frequency, residency and power from powermetrics text."""
    return GPUStats(
        freq_mhz=extract_number(text, FREQ_PATTERNS),
        active_pct=extract_number(text, ACTIVE_PATTERNS),
        idle_pct=extract_number(text, IDLE_PATTERNS),
        power_mw=extract_number(text, POWER_PATTERNS),
    )
