# ABOUTME: Loads immutable application settings from the environment and a .env file.
# ABOUTME: Also configures process-wide logging at startup.

import logging
import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

from src.errors import ConfigError

REQUIRED_ENV_VARS = ("MENTRAOS_PACKAGE_NAME", "MENTRAOS_API_KEY", "OPENWEATHER_API_KEY")

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Startup configuration; read once and never mutated."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    mentraos_api_key: str
    openweather_api_key: str
    port: int = 3000
    require_explicit_city: bool = False
    location_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from ``env`` (default: the process environment after loading .env).

    Raises ConfigError naming every missing required variable.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
    if missing:
        raise ConfigError(missing)

    try:
        return Settings(
            package_name=env["MENTRAOS_PACKAGE_NAME"],
            mentraos_api_key=env["MENTRAOS_API_KEY"],
            openweather_api_key=env["OPENWEATHER_API_KEY"],
            port=env.get("PORT") or 3000,
            require_explicit_city=env.get("REQUIRE_EXPLICIT_CITY", "").strip().lower() in _TRUE_VALUES,
            location_timeout_seconds=env.get("LOCATION_TIMEOUT_SECONDS") or 10.0,
            http_timeout_seconds=env.get("HTTP_TIMEOUT_SECONDS") or 10.0,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
    except ValidationError as e:
        raise ConfigError(message=f"Invalid configuration: {e}") from e


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
