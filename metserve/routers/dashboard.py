"""Dashboard document router."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, Response

from metserve.config import Settings
from metserve.dependencies import get_settings_from_app
from metserve.responses import NoStoreTextResponse

router = APIRouter(tags=["dashboard"])


@router.get("/", include_in_schema=False)
@router.get("/index.html", include_in_schema=False)
async def serve_dashboard(
    settings: Annotated[Settings, Depends(get_settings_from_app)],
) -> Response:
    """Serve the dashboard document if it exists at the configured path."""
    path = settings.dashboard_path
    if path.is_file():
        return FileResponse(path, media_type="text/html; charset=utf-8")
    return NoStoreTextResponse(f"Place {path.name} next to the server\n", status_code=404)
