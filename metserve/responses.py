"""Response classes carrying the no-store and permissive CORS headers.

The dashboard may be opened from any origin (file://, another port), so
every response allows all origins and is never cached.
"""

import json
from typing import Any

from fastapi.responses import JSONResponse, PlainTextResponse

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, OPTIONS",
    "access-control-allow-headers": "content-type",
}
NO_STORE = {"cache-control": "no-store"}


class MetricsJSONResponse(JSONResponse):
    """Pretty-printed JSON with explicit charset, no-store and CORS headers."""

    media_type = "application/json; charset=utf-8"

    def __init__(
        self,
        content: Any,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            content,
            status_code=status_code,
            headers={**CORS_HEADERS, **NO_STORE, **(headers or {})},
            **kwargs,
        )

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, allow_nan=False, indent=2).encode("utf-8")


class NoStoreTextResponse(PlainTextResponse):
    """text/plain; charset=utf-8 with no-store and an open origin."""

    def __init__(
        self,
        content: Any = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            content,
            status_code=status_code,
            headers={"access-control-allow-origin": "*", **NO_STORE, **(headers or {})},
            **kwargs,
        )
