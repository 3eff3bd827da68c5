"""memory_pressure and sysctl vm.swapusage parsers."""

from metserve.models import MemoryPressure, MemoryStats
from metserve.parsers.base import extract_number, pattern

# Checked top to bottom, first hit wins. "77%" is the free percentage
# memory_pressure -Q prints on an idle machine and is read as green.
PRESSURE_MARKERS: tuple[tuple[MemoryPressure, tuple[str, ...]], ...] = (
    (MemoryPressure.RED, ("critical", "red")),
    (MemoryPressure.YELLOW, ("warn", "warning", "yellow")),
    (MemoryPressure.GREEN, ("normal", "green", "77%")),
    (MemoryPressure.GREEN, ("memory free percentage",)),
)


def _megabytes_to_gb(value: float) -> float:
    return value / 1024


SWAP_USED_PATTERNS = (
    pattern(r"used\s*=\s*([0-9.]+)G\b"),
    pattern(r"used\s*=\s*([0-9.]+)M\b", _megabytes_to_gb),
)


def classify_pressure(text: str) -> MemoryPressure:
    """Classify memory_pressure output by substring priority."""
    lower = text.lower()
    for level, markers in PRESSURE_MARKERS:
        if any(marker in lower for marker in markers):
            return level
    return MemoryPressure.UNKNOWN


def parse_swap_used_gb(text: str) -> float | None:
    """Return swap in use (GB) from ``used = 512.00M`` style output."""
    return extract_number(text, SWAP_USED_PATTERNS)


def parse_memory(pressure_text: str, swap_text: str) -> MemoryStats:
    return MemoryStats(
        pressure=classify_pressure(pressure_text),
        swap_gb=parse_swap_used_gb(swap_text),
    )
