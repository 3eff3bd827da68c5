"""Exception handlers.

Probe failures never reach this layer; only routing misses and programming
errors do. Unknown paths answer 404 "Not found" in plain text, unexpected
exceptions are logged with a request id and answered with a bare 500.
"""

import uuid

from fastapi import FastAPI, Request
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from metserve.responses import NoStoreTextResponse

NOT_FOUND_BODY = "Not found\n"


def generate_request_id() -> str:
    """Generate unique request ID for log correlation."""
    return f"req_{uuid.uuid4().hex[:12]}"


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> NoStoreTextResponse:
    """Answer routing misses (404, and 405 on a known path) with 404 Not found."""
    if exc.status_code in (404, 405):
        logger.debug(f"No route for {request.method} {request.url.path}")
        return NoStoreTextResponse(NOT_FOUND_BODY, status_code=404)

    return NoStoreTextResponse(f"{exc.detail}\n", status_code=exc.status_code)


async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> NoStoreTextResponse:
    """Handle unexpected exceptions without exposing internals."""
    request_id = generate_request_id()

    logger.opt(exception=exc).error(
        f"Unhandled exception {type(exc).__name__} on {request.url.path} ({request_id})"
    )

    return NoStoreTextResponse(
        "Internal server error\n",
        status_code=500,
        headers={"X-Request-ID": request_id},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(
        StarletteHTTPException, http_exception_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, generic_exception_handler)
