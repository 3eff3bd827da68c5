"""Metric DTOs - per-family stats, probe results and the response snapshot.

Every model is frozen. Unknown values are explicit ``None`` (or ``unknown``)
and are always serialized, never dropped.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from metserve.models.enums import MemoryPressure, ThermalPressure

__all__ = [
    "GPUStats",
    "MemoryStats",
    "ThermalSources",
    "ThermalStats",
    "PerfStats",
    "DerivedMetrics",
    "MetricsSnapshot",
    "ProbeResult",
]

StatsT = TypeVar("StatsT", bound=BaseModel)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GPUStats(_Frozen):
    """GPU frequency, residency and power from powermetrics."""

    freq_mhz: float | None = None
    active_pct: float | None = None
    idle_pct: float | None = None
    power_mw: float | None = None


class MemoryStats(_Frozen):
    """Memory pressure level and swap usage."""

    pressure: MemoryPressure = MemoryPressure.UNKNOWN
    swap_gb: float | None = None


class ThermalSources(_Frozen):
    """Which thermal sub-commands exited successfully."""

    pmset_ok: bool = False
    smc_ok: bool = False
    sensor_helper_ok: bool = False


class ThermalStats(_Frozen):
    """Speed limits, thermal pressure and die temperatures."""

    cpu_speed_limit_pct: float | None = None
    gpu_speed_limit_pct: float | None = None
    thermal_pressure: ThermalPressure = ThermalPressure.UNKNOWN
    cpu_temp_c: float | None = None
    gpu_temp_c: float | None = None
    soc_temp_c: float | None = None
    source: ThermalSources = Field(default_factory=ThermalSources)


class PerfStats(_Frozen):
    """Workload performance counters (not instrumented yet, always null)."""

    ms_per_step: float | None = None
    tokens_per_s: float | None = None


class DerivedMetrics(_Frozen):
    """Signals computed from the raw stats."""

    gpu_pinned: bool = False


class MetricsSnapshot(_Frozen):
    """The complete document returned by GET /metrics."""

    timestamp: datetime
    gpu: GPUStats
    memory: MemoryStats
    thermal: ThermalStats
    perf: PerfStats
    derived: DerivedMetrics
    warnings: tuple[str, ...] = ()


class ProbeResult(_Frozen, Generic[StatsT]):
    """Outcome of one probe.

    ``ok`` reflects the exit status of the underlying command(s) only; a
    command can succeed and still yield all-null ``stats``.
    """

    ok: bool
    raw: str = ""
    stats: StatsT
