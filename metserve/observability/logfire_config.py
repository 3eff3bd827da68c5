"""LogFire configuration for metserve.

Off unless METSERVE_LOGFIRE_ENABLED is set. When on, request traces come
from the FastAPI instrumentation and the loguru records (including the
``command`` context bound by the runner) are forwarded as Logfire logs, so
a slow /metrics span can be read next to the command that was killed.
Set LOGFIRE_CONSOLE_VERBOSE=true to also print spans on the console.
"""

import os
from typing import TYPE_CHECKING

import logfire
from loguru import logger

if TYPE_CHECKING:
    from fastapi import FastAPI

_configured = False


def configure_logfire(
    service_name: str = "metserve",
    service_version: str | None = None,
) -> None:
    """Configure LogFire and forward loguru records to it.

    Nothing leaves the machine without a token
    (send_to_logfire='if-token-present').
    """
    global _configured
    if _configured:
        return

    verbose = os.environ.get("LOGFIRE_CONSOLE_VERBOSE", "").lower() in ("true", "1", "yes")

    logfire.configure(
        service_name=service_name,
        service_version=service_version,
        send_to_logfire="if-token-present",
        console=logfire.ConsoleOptions(verbose=verbose) if verbose else False,
    )
    logger.add(**logfire.loguru_handler())
    _configured = True
    logger.info(f"LogFire configured for {service_name} (loguru forwarding on)")


def instrument_fastapi(app: "FastAPI") -> None:
    """Trace every request to the metrics surface."""
    logfire.instrument_fastapi(app)
    logger.info("LogFire FastAPI instrumentation enabled")
