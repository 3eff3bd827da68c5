"""metserve - FastAPI Application."""

# Configure Loguru FIRST (before any other imports)
from metserve.logging_config import intercept_standard_logging, setup_logging

setup_logging()
intercept_standard_logging()

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from loguru import logger

from metserve import __version__
from metserve.config import Settings, get_settings
from metserve.errors import register_error_handlers
from metserve.responses import MetricsJSONResponse
from metserve.routers import dashboard_router, metrics_router
from metserve.services.probes import ProbeCollector

__all__ = ["create_app"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings
    helper = " ".join(settings.sensor_helper) or "<none>"
    logger.info(
        f"metserve {__version__} ready "
        f"(dashboard={settings.dashboard_path}, sensor helper={helper})"
    )

    yield

    logger.info("metserve stopped")
    # Complete any pending log writes before shutdown
    await logger.complete()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the metserve FastAPI application.

    Args:
        settings: Configuration for this app instance. Defaults to the
            environment-derived settings.

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()

    if settings.logfire_enabled:
        from metserve.observability.logfire_config import configure_logfire

        configure_logfire(service_version=__version__)

    app_instance = FastAPI(
        title="metserve",
        description="Local telemetry bridge for Apple Silicon GPU, memory and thermal metrics",
        version=__version__,
        lifespan=lifespan,
        default_response_class=MetricsJSONResponse,
        # Only the documented routes exist; everything else is "Not found"
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app_instance.state.settings = settings
    app_instance.state.collector = ProbeCollector(sensor_helper=settings.sensor_helper)

    register_error_handlers(app_instance)

    app_instance.include_router(metrics_router)
    app_instance.include_router(dashboard_router)

    if settings.logfire_enabled:
        from metserve.observability.logfire_config import instrument_fastapi

        instrument_fastapi(app_instance)

    return app_instance


# Lazy initialization so `uvicorn metserve.main:app` works without building
# an app (and reading the environment) at import time
_app: FastAPI | None = None


def _get_default_app() -> FastAPI:
    """Get or create the environment-configured app instance."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> Any:
    """Lazy attribute access for module-level app."""
    if name == "app":
        return _get_default_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


if __name__ == "__main__":
    import uvicorn

    default_settings = get_settings()
    uvicorn.run(_get_default_app(), host=default_settings.host, port=default_settings.port)
