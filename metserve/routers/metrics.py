"""Metrics API router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from metserve.dependencies import get_collector
from metserve.models import MetricsSnapshot
from metserve.responses import NoStoreTextResponse
from metserve.services.probes import ProbeCollector

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_model=MetricsSnapshot)
async def get_metrics(
    collector: Annotated[ProbeCollector, Depends(get_collector)],
) -> MetricsSnapshot:
    """Probe GPU, memory and thermal state. Always 200, degraded fields are null."""
    return await collector.collect()


@router.get("/raw", response_class=NoStoreTextResponse)
async def get_raw(
    collector: Annotated[ProbeCollector, Depends(get_collector)],
) -> str:
    """Raw command output, labeled by source, for debugging the parsers."""
    return await collector.collect_raw()


@router.get("/health")
async def health() -> dict[str, bool]:
    """Health check endpoint."""
    return {"ok": True}


@router.options("/{full_path:path}")
async def preflight(full_path: str) -> dict[str, bool]:
    """Answer CORS preflight for any path."""
    return {"ok": True}
