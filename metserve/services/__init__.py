"""Probe services."""

from metserve.services.aggregator import build_snapshot, collect_warnings, is_gpu_pinned
from metserve.services.probes import ProbeCollector
from metserve.services.runner import CommandResult, run_command

__all__ = [
    "CommandResult",
    "ProbeCollector",
    "build_snapshot",
    "collect_warnings",
    "is_gpu_pinned",
    "run_command",
]
