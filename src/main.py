# ABOUTME: Process entry point: validates configuration, sets up logging and builds the WeatherApp.
# ABOUTME: Missing configuration is fatal and exits before any session can start.

import logging
import sys

from src.app import WeatherApp, create_app
from src.config import configure_logging, load_settings
from src.errors import ConfigError

logger = logging.getLogger(__name__)


def build() -> WeatherApp:
    """Load settings and return a ready app, or exit with status 1 on bad configuration."""
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging()
        logger.error("%s. Please check your .env file.", e)
        sys.exit(1)

    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("WeatherToday! ready: package=%s port=%s", settings.package_name, settings.port)
    return app


if __name__ == "__main__":
    build()
