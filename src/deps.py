# ABOUTME: Dependency container for the weather resolver using Pydantic BaseModel.
# ABOUTME: Holds the httpx.AsyncClient and OpenWeatherMap API key used for geocoding and weather calls.

import httpx
from pydantic import BaseModel, ConfigDict

DEFAULT_HTTP_TIMEOUT = 10.0


class WeatherDeps(BaseModel):
    """Dependencies shared by every session's weather lookups."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    api_key: str


def create_http_client(timeout: float = DEFAULT_HTTP_TIMEOUT) -> httpx.AsyncClient:
    """Create an httpx client with a request timeout.

    No retry transport is installed: a failed geocoding or weather request is
    reported to the user immediately.
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout))
