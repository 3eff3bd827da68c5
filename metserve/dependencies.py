"""FastAPI dependencies resolving per-app state."""

from fastapi import Request

from metserve.config import Settings
from metserve.services.probes import ProbeCollector


def get_settings_from_app(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings  # type: ignore[no-any-return]


def get_collector(request: Request) -> ProbeCollector:
    """The app's ProbeCollector."""
    return request.app.state.collector  # type: ignore[no-any-return]
