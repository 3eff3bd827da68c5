"""Probe orchestration: run the diagnostic commands and parse their output.

Each probe launches its commands concurrently and never raises; degraded
sources show up as null fields and ``ok=False``.

Nothing is cached between calls. Every /metrics request spawns its own set
of subprocesses (six per request), so concurrent clients multiply process
launches linearly. Putting a single-flight or TTL cache in front of
ProbeCollector would change the freshness contract of the snapshot.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from metserve.models import (
    GPUStats,
    MemoryStats,
    MetricsSnapshot,
    PerfStats,
    ProbeResult,
    ThermalSources,
    ThermalStats,
)
from metserve.parsers import (
    apply_sensor_fallback,
    parse_die_temperatures,
    parse_gpu,
    parse_memory,
    parse_thermal_limits,
)
from metserve.services.aggregator import build_snapshot
from metserve.services.runner import CommandResult, run_command

Runner = Callable[[Sequence[str], float], Awaitable[CommandResult]]


@dataclass(frozen=True, slots=True)
class ProbeCommand:
    """A diagnostic command with its raw-section label and time budget."""

    label: str
    argv: tuple[str, ...]
    timeout: float


GPU_SAMPLER = ProbeCommand(
    "powermetrics (gpu_power)",
    ("powermetrics", "--samplers", "gpu_power", "-n", "1", "-i", "1000"),
    8.0,
)
MEMORY_PRESSURE = ProbeCommand("memory_pressure -Q", ("memory_pressure", "-Q"), 4.0)
SWAP_USAGE = ProbeCommand("sysctl vm.swapusage", ("sysctl", "vm.swapusage"), 3.0)
PMSET_THERM = ProbeCommand("pmset -g therm", ("pmset", "-g", "therm"), 3.0)
SMC_SAMPLER = ProbeCommand(
    "powermetrics (smc)",
    ("powermetrics", "--samplers", "smc,thermal", "-n", "1", "-i", "1000"),
    8.0,
)
SENSOR_HELPER_LABEL = "sensor helper (HID)"
SENSOR_HELPER_TIMEOUT = 4.0


def raw_section(label: str, text: str) -> str:
    return f"=== {label} ===\n{text}\n"


class ProbeCollector:
    """Runs every metric probe for one request.

    Holds configuration only; each call starts from scratch, so one
    instance can serve concurrent requests.
    """

    def __init__(self, sensor_helper: Sequence[str], runner: Runner = run_command):
        self.sensor_helper = ProbeCommand(
            SENSOR_HELPER_LABEL, tuple(sensor_helper), SENSOR_HELPER_TIMEOUT
        )
        self._runner = runner

    async def _run(self, command: ProbeCommand) -> CommandResult:
        if not command.argv:
            return CommandResult(ok=False)
        return await self._runner(command.argv, command.timeout)

    async def probe_gpu(self) -> ProbeResult[GPUStats]:
        """Sample GPU frequency, residency and power."""
        result = await self._run(GPU_SAMPLER)
        raw = result.combined
        stats = parse_gpu(raw)
        if not result.ok:
            logger.debug("GPU probe degraded: powermetrics failed")
        return ProbeResult[GPUStats](ok=result.ok, raw=raw, stats=stats)

    async def probe_memory(self) -> ProbeResult[MemoryStats]:
        """Query memory pressure and swap usage.

        ok is the AND of both commands: one failing marks the probe degraded
        even though the other value is still reported.
        """
        pressure, swap = await asyncio.gather(self._run(MEMORY_PRESSURE), self._run(SWAP_USAGE))
        pressure_raw = pressure.combined
        swap_raw = swap.combined
        raw = (
            raw_section(MEMORY_PRESSURE.label, pressure_raw)
            + "\n"
            + raw_section(SWAP_USAGE.label, swap_raw)
        )
        return ProbeResult[MemoryStats](
            ok=pressure.ok and swap.ok,
            raw=raw,
            stats=parse_memory(pressure_raw, swap_raw),
        )

    async def probe_thermal(self) -> ProbeResult[ThermalStats]:
        """Query throttling state and die temperatures.

        The three sources are alternatives for the same signal, so ok is
        their OR.
        """
        pmset, smc, helper = await asyncio.gather(
            self._run(PMSET_THERM),
            self._run(SMC_SAMPLER),
            self._run(self.sensor_helper),
        )
        pmset_raw = pmset.combined
        smc_raw = smc.combined
        helper_raw = helper.combined

        limits = parse_thermal_limits(pmset_raw + "\n" + smc_raw)
        temps = apply_sensor_fallback(parse_die_temperatures(smc_raw), helper.ok, helper.stdout)

        stats = ThermalStats(
            cpu_speed_limit_pct=limits.cpu_speed_limit_pct,
            gpu_speed_limit_pct=limits.gpu_speed_limit_pct,
            thermal_pressure=limits.thermal_pressure,
            cpu_temp_c=temps.cpu_temp_c,
            gpu_temp_c=temps.gpu_temp_c,
            soc_temp_c=temps.soc_temp_c,
            source=ThermalSources(pmset_ok=pmset.ok, smc_ok=smc.ok, sensor_helper_ok=helper.ok),
        )
        raw = (
            raw_section(PMSET_THERM.label, pmset_raw)
            + "\n"
            + raw_section(SMC_SAMPLER.label, smc_raw)
            + "\n"
            + raw_section(self.sensor_helper.label, helper_raw)
        )
        return ProbeResult[ThermalStats](ok=pmset.ok or smc.ok or helper.ok, raw=raw, stats=stats)

    async def probe_perf(self) -> ProbeResult[PerfStats]:
        """Workload counters are not instrumented yet."""
        return ProbeResult[PerfStats](ok=True, stats=PerfStats())

    async def collect(self) -> MetricsSnapshot:
        """Run all probes concurrently and aggregate them into a snapshot."""
        gpu, memory, thermal, perf = await asyncio.gather(
            self.probe_gpu(), self.probe_memory(), self.probe_thermal(), self.probe_perf()
        )
        logger.debug(f"Probes finished: gpu={gpu.ok} memory={memory.ok} thermal={thermal.ok}")
        return build_snapshot(gpu.stats, memory.stats, thermal.stats, perf.stats)

    async def collect_raw(self) -> str:
        """Run the command-backed probes and return their labeled raw output."""
        gpu, memory, thermal = await asyncio.gather(
            self.probe_gpu(), self.probe_memory(), self.probe_thermal()
        )
        return raw_section(GPU_SAMPLER.label, gpu.raw) + "\n" + memory.raw + "\n" + thermal.raw
