"""Application configuration.

Environment Variables:
    METSERVE_HOST: Host to bind to (default: 127.0.0.1)
    METSERVE_PORT: Port to bind to (default: 8787)
    METSERVE_DASHBOARD_PATH: Dashboard document served at / (default: ./dashboard.html)
    METSERVE_SENSOR_HELPER: JSON list with the sensor helper argv
        (default: ["swift", "M4Temp.swift"])
    METSERVE_LOGFIRE_ENABLED: Enable LogFire instrumentation (default: false)
    METSERVE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
    METSERVE_COMMAND_LOG_LEVEL: Level of the commands.log trace (default: DEBUG)
    METSERVE_LOG_DIR: Log directory path (default: logs/)
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Port constant, single source of truth
DEFAULT_PORT = 8787
DEFAULT_HOST = "127.0.0.1"


class Settings(BaseSettings):
    """metserve settings.

    All settings can be configured via environment variables with the
    METSERVE_ prefix. A Settings instance is handed to create_app(); nothing
    reads configuration from module state at request time.

    Logging is configured separately via METSERVE_LOG_LEVEL and
    METSERVE_LOG_DIR environment variables (see logging_config.py).
    """

    model_config = SettingsConfigDict(env_prefix="METSERVE_", extra="ignore")

    # Server
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, gt=0, le=65535)

    # Dashboard document served at / and /index.html
    dashboard_path: Path = Path("dashboard.html")

    # Sensor helper: prints a flat JSON object of sensor label -> Celsius
    sensor_helper: list[str] = Field(
        default_factory=lambda: ["swift", "M4Temp.swift"],
        description="argv of the die-temperature helper executable",
    )

    # Observability
    logfire_enabled: bool = Field(
        default=False,
        description="Enable LogFire instrumentation",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance (CLI and uvicorn factory entry only)."""
    return Settings()
