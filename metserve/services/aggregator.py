"""Combine probe results into the MetricsSnapshot served by /metrics."""

from datetime import UTC, datetime

from metserve.models import (
    DerivedMetrics,
    GPUStats,
    MemoryStats,
    MetricsSnapshot,
    PerfStats,
    ThermalStats,
)

GPU_PINNED_MIN_ACTIVE_PCT = 95.0
GPU_PINNED_MAX_IDLE_PCT = 2.0

WARN_GPU_PRIVILEGES = "GPU stats missing: powermetrics likely needs sudo."
WARN_PMSET_FAILED = "Thermal stats missing: pmset -g therm failed."
WARN_NO_TEMPERATURE_SENSORS = (
    "Temperature sensors (CPU/GPU) are not available via powermetrics or the "
    "sensor helper on this platform/OS combination."
)


def is_gpu_pinned(gpu: GPUStats) -> bool:
    """True when the GPU is saturated: >= 95% active and <= 2% idle."""
    if gpu.active_pct is None or gpu.idle_pct is None:
        return False
    return gpu.active_pct >= GPU_PINNED_MIN_ACTIVE_PCT and gpu.idle_pct <= GPU_PINNED_MAX_IDLE_PCT


def collect_warnings(gpu: GPUStats, thermal: ThermalStats) -> list[str]:
    """Build the advisory list, always in the same order."""
    warnings: list[str] = []
    if gpu.freq_mhz is None and gpu.power_mw is None:
        warnings.append(WARN_GPU_PRIVILEGES)
    if not thermal.source.pmset_ok:
        warnings.append(WARN_PMSET_FAILED)
    if not thermal.source.smc_ok and not thermal.source.sensor_helper_ok:
        warnings.append(WARN_NO_TEMPERATURE_SENSORS)
    return warnings


def build_snapshot(
    gpu: GPUStats,
    memory: MemoryStats,
    thermal: ThermalStats,
    perf: PerfStats,
    timestamp: datetime | None = None,
) -> MetricsSnapshot:
    """Assemble a snapshot; never fails, whatever the probes returned."""
    return MetricsSnapshot(
        timestamp=timestamp or datetime.now(UTC),
        gpu=gpu,
        memory=memory,
        thermal=thermal,
        perf=perf,
        derived=DerivedMetrics(gpu_pinned=is_gpu_pinned(gpu)),
        warnings=tuple(collect_warnings(gpu, thermal)),
    )
