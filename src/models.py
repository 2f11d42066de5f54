# ABOUTME: Pydantic BaseModels for geocoding results, weather records, parsed commands and session state.
# ABOUTME: Defines the structured types passed between the parser, resolver, cache and host adapter.

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class GeoLocation(BaseModel):
    """One result from the OpenWeatherMap direct geocoding endpoint."""

    name: str
    latitude: float
    longitude: float
    country: str | None = None
    state: str | None = None


class LocationCoordinates(BaseModel):
    """A position reported by the glasses, or derived from geocoding."""

    latitude: float
    longitude: float
    accuracy: float | None = None


class WeatherRecord(BaseModel):
    """Normalized current weather, ready for display and speech."""

    model_config = ConfigDict(frozen=True)

    location: str
    temperature_f: int
    feels_like_f: int
    description: str
    humidity_pct: int
    wind_speed_mph: int
    wind_direction_deg: int | None = None
    pressure_hpa: int | None = None
    visibility_km: int | None = None


class CommandKind(str, Enum):
    CURRENT_LOCATION = "current_location"
    CITY_LOOKUP = "city_lookup"


class ParsedCommand(BaseModel):
    """Intent extracted from a voice transcript."""

    model_config = ConfigDict(frozen=True)

    kind: CommandKind
    city: str | None = None

    @model_validator(mode="after")
    def _city_matches_kind(self) -> "ParsedCommand":
        if self.kind is CommandKind.CITY_LOOKUP and not (self.city and self.city.strip()):
            raise ValueError("city lookups need a non-empty city")
        if self.kind is CommandKind.CURRENT_LOCATION and self.city is not None:
            raise ValueError("current location commands carry no city")
        return self

    @classmethod
    def city_lookup(cls, city: str) -> "ParsedCommand":
        return cls(kind=CommandKind.CITY_LOOKUP, city=city)

    @classmethod
    def current_location(cls) -> "ParsedCommand":
        return cls(kind=CommandKind.CURRENT_LOCATION)


class SessionState(BaseModel):
    """Per-session cache entry: last coordinates, last reading and when it was taken."""

    last_location: LocationCoordinates | None = None
    last_weather: WeatherRecord | None = None
    last_update: datetime | None = None


class DisplayCard(BaseModel):
    title: str
    content: str


class TranscriptionEvent(BaseModel):
    text: str
    is_final: bool = False


class ButtonPressEvent(BaseModel):
    button: str
    action: str


class LocationUpdate(BaseModel):
    """Location stream payload as delivered by the host runtime."""

    lat: float
    lng: float
    accuracy: float | None = None

    def to_coordinates(self) -> LocationCoordinates:
        return LocationCoordinates(latitude=self.lat, longitude=self.lng, accuracy=self.accuracy)


class Effect(BaseModel):
    """Outputs produced by handling one command.

    The host adapter renders `card` (or `text_wall`), writes `dashboard`, speaks
    `speech`, and returns to the welcome screen after `revert_after` seconds when set.
    """

    card: DisplayCard | None = None
    text_wall: str | None = None
    speech: str | None = None
    dashboard: str | None = None
    revert_after: float | None = None
