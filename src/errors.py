# ABOUTME: Exception types raised by the parser, resolver, location wait and config loader.
# ABOUTME: Command-level errors share a base class so the controller can handle them uniformly.


class WeatherAppError(Exception):
    """Base class for failures of a single voice command. Never fatal to a session."""

    user_message = "Sorry, something went wrong getting the weather."


class UnrecognizedCommand(WeatherAppError):
    """No command pattern matched, or only a generic location was captured."""

    def __init__(self, text: str, require_city: bool = False):
        self.text = text
        self.require_city = require_city
        super().__init__(f"Could not understand command: {text!r}")

    @property
    def user_message(self) -> str:
        if self.require_city:
            return 'Sorry, I need a city name. Try saying "weather in [city name]" like "weather in New York".'
        return 'Sorry, I didn\'t catch that. Try "what\'s the weather" or "weather in [city name]".'


class CityNotFound(WeatherAppError):
    """Geocoding returned no results for the requested city."""

    def __init__(self, city: str):
        self.city = city
        super().__init__(f'City "{city}" not found')

    @property
    def user_message(self) -> str:
        return f"Sorry, I couldn't find a city called {self.city}."


class LocationTimeout(WeatherAppError):
    """The host location stream did not deliver an update in time."""

    user_message = "I couldn't get your location. Try saying \"weather in\" followed by a city name."

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"No location update within {timeout:g} seconds")


class WeatherFetchFailed(WeatherAppError):
    """A geocoding or weather request failed. The underlying error is chained as __cause__."""

    user_message = "Sorry, I couldn't get the weather right now. Please try again."


class ConfigError(Exception):
    """Required configuration is missing or invalid at startup."""

    def __init__(self, missing: list[str] | None = None, message: str | None = None):
        self.missing = missing or []
        if message is None:
            message = "Missing required environment variables: " + ", ".join(self.missing)
        super().__init__(message)
