"""API routers."""

from metserve.routers.dashboard import router as dashboard_router
from metserve.routers.metrics import router as metrics_router

__all__ = ["dashboard_router", "metrics_router"]
