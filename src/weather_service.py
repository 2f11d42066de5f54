# ABOUTME: Service layer for OpenWeatherMap geocoding and current-weather calls and response parsing.
# ABOUTME: Resolves a city or coordinates to a normalized WeatherRecord and formats it for speech and display.

import logging
import math

import httpx

from src.errors import CityNotFound, WeatherFetchFailed
from src.models import DisplayCard, GeoLocation, LocationCoordinates, WeatherRecord

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://api.openweathermap.org/geo/1.0/direct"
WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

# Fahrenheit and mph; not user-configurable.
UNITS = "imperial"


async def geocode(client: httpx.AsyncClient, api_key: str, query: str, limit: int = 1) -> list[GeoLocation]:
    """Look up a free-text place name. An empty list means no match."""
    resp = await client.get(GEOCODING_URL, params={"q": query, "limit": limit, "appid": api_key})
    resp.raise_for_status()
    data = resp.json() or []

    return [
        GeoLocation(
            name=r["name"],
            latitude=r["lat"],
            longitude=r["lon"],
            country=r.get("country"),
            state=r.get("state"),
        )
        for r in data
    ]


async def get_current_weather(client: httpx.AsyncClient, api_key: str, latitude: float, longitude: float) -> dict:
    """Fetch the raw current-weather payload for a coordinate pair."""
    resp = await client.get(
        WEATHER_URL,
        params={
            "lat": latitude,
            "lon": longitude,
            "appid": api_key,
            "units": UNITS,
        },
    )
    resp.raise_for_status()
    return resp.json()


def transform_weather_data(data: dict) -> WeatherRecord:
    """Convert an OpenWeatherMap current-weather payload into a WeatherRecord."""
    main = data["main"]
    wind = data.get("wind", {})
    visibility = data.get("visibility")

    return WeatherRecord(
        location=f"{data['name']}, {data['sys']['country']}",
        temperature_f=_round(main["temp"]),
        feels_like_f=_round(main["feels_like"]),
        description=capitalize_description(data["weather"][0]["description"]),
        humidity_pct=int(main["humidity"]),
        wind_speed_mph=_round(wind.get("speed", 0)),
        wind_direction_deg=_optional_int(wind.get("deg")),
        pressure_hpa=_optional_int(main.get("pressure")),
        visibility_km=int(visibility // 1000) if visibility is not None else None,
    )


def capitalize_description(description: str) -> str:
    """Upper-case the first letter of each word: "light rain" -> "Light Rain"."""
    return " ".join(word[:1].upper() + word[1:] for word in description.split())


def format_weather_summary(weather: WeatherRecord) -> str:
    """One spoken sentence summarizing the reading."""
    return (
        f"Current weather in {weather.location}: {weather.temperature_f}°F, {weather.description}. "
        f"Humidity {weather.humidity_pct}%, wind {weather.wind_speed_mph} mph."
    )


def format_weather_display(weather: WeatherRecord) -> DisplayCard:
    """Title and multi-line body for the glasses reference card."""
    content = (
        f"{weather.temperature_f}°F • {weather.description}\n"
        f"Feels like {weather.feels_like_f}°F\n"
        f"Humidity: {weather.humidity_pct}%\n"
        f"Wind: {weather.wind_speed_mph} mph"
    )
    return DisplayCard(title=weather.location, content=content)


def _round(value: float) -> int:
    """Round half up, so 72.5 becomes 73 rather than Python's banker's 72."""
    return int(math.floor(value + 0.5))


def _optional_int(value):
    return int(value) if value is not None else None


class WeatherResolver:
    """Resolve a city name or coordinates to a WeatherRecord.

    Geocoding takes the first match only. Transport and HTTP status errors at
    either step surface as WeatherFetchFailed; an empty geocoding result surfaces
    as CityNotFound and is never wrapped.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        self.client = client
        self.api_key = api_key

    async def fetch_by_city(self, city: str) -> WeatherRecord:
        try:
            matches = await geocode(self.client, self.api_key, city, limit=1)
        except httpx.HTTPError as e:
            logger.error("Geocoding request failed for %r: %s", city, e)
            raise WeatherFetchFailed(f"Geocoding failed for {city!r}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise WeatherFetchFailed(f"Malformed geocoding response for {city!r}: {e}") from e

        if not matches:
            raise CityNotFound(city)

        match = matches[0]
        logger.info("Geocoded %r to %s (%s, %s)", city, match.name, match.latitude, match.longitude)
        return await self.fetch_by_coordinates(LocationCoordinates(latitude=match.latitude, longitude=match.longitude))

    async def fetch_by_coordinates(self, coords: LocationCoordinates) -> WeatherRecord:
        try:
            data = await get_current_weather(self.client, self.api_key, coords.latitude, coords.longitude)
        except httpx.HTTPError as e:
            logger.error("Weather request failed for (%s, %s): %s", coords.latitude, coords.longitude, e)
            raise WeatherFetchFailed(f"Weather request failed: {e}") from e
        except ValueError as e:
            raise WeatherFetchFailed(f"Weather response was not JSON: {e}") from e

        try:
            return transform_weather_data(data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Failed to parse weather response: %s", e)
            raise WeatherFetchFailed(f"Malformed weather response: {e}") from e
