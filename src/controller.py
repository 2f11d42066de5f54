# ABOUTME: Per-command orchestration: parse, serve from cache or fetch, and describe the outputs as an Effect.
# ABOUTME: Converts every command-level error into a spoken and displayed message; never ends a session.

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from src.command_parser import CommandParser
from src.errors import WeatherAppError
from src.host import HostSession
from src.location import LOCATION_TIMEOUT_SECONDS, wait_for_location
from src.models import CommandKind, DisplayCard, Effect, ParsedCommand, WeatherRecord
from src.session_cache import SessionCache, is_fresh
from src.weather_service import WeatherResolver, format_weather_display, format_weather_summary

logger = logging.getLogger(__name__)

ERROR_DISPLAY_SECONDS = 3.0
WELCOME_DASHBOARD = "🌤️ WeatherToday!"
ERROR_DASHBOARD = "❌ Error"
GENERIC_ERROR_MESSAGE = "Sorry, something went wrong getting the weather."


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class WeatherController:
    """Turns transcriptions and button presses into Effects for one or more sessions.

    Commands within a session are expected to arrive one at a time; different
    sessions share only the SessionCache.
    """

    def __init__(
        self,
        resolver: WeatherResolver,
        cache: SessionCache,
        parser: CommandParser,
        location_timeout: float = LOCATION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.resolver = resolver
        self.cache = cache
        self.parser = parser
        self.location_timeout = location_timeout
        self.clock = clock
        self._hosts: dict[str, HostSession] = {}

    def start_session(self, session_id: str, host: HostSession) -> None:
        self.cache.create(session_id)
        self._hosts[session_id] = host

    def end_session(self, session_id: str) -> None:
        self.cache.clear(session_id)
        self._hosts.pop(session_id, None)

    def welcome(self) -> Effect:
        if self.parser.require_explicit_city:
            content = (
                'Say:\n• "Weather in [city]"\n• "New York weather"\n• "What\'s the weather in London?"\n\n'
                "Just tell me any city name!"
            )
            speech = (
                "Welcome to Weather Today! Ask me about the weather in any city by saying "
                '"weather in" followed by the city name.'
            )
        else:
            content = 'Say:\n• "What\'s the weather?"\n• "Weather in [city]"\n• "New York weather"'
            speech = 'Welcome to Weather Today! Ask "what\'s the weather", or say "weather in" followed by a city name.'
        return Effect(
            card=DisplayCard(title="WeatherToday! 🌤️", content=content),
            speech=speech,
            dashboard=WELCOME_DASHBOARD,
        )

    async def handle_transcription(self, session_id: str, text: str, is_final: bool = True) -> Effect | None:
        if not is_final:
            return None
        logger.info("Voice command received in session %s: %r", session_id, text)

        try:
            command = self.parser.parse(text)
            record = await self.resolve(session_id, command)
        except WeatherAppError as e:
            logger.warning("Command failed in session %s: %s", session_id, e)
            return self.error_effect(e.user_message)
        except Exception:
            logger.exception("Unexpected error handling command in session %s", session_id)
            return self.error_effect(GENERIC_ERROR_MESSAGE)

        logger.info("Weather ready for session %s: %s %s°F", session_id, record.location, record.temperature_f)
        return self.weather_effect(record)

    async def handle_button(self, session_id: str, button: str, action: str) -> Effect | None:
        if action == "press" and button == "back":
            return self.welcome()
        logger.debug("Ignoring button %s/%s in session %s", button, action, session_id)
        return None

    async def resolve(self, session_id: str, command: ParsedCommand) -> WeatherRecord:
        """Produce a record for a parsed command and update the session's cache entry."""
        if command.kind is CommandKind.CITY_LOOKUP:
            logger.info("Fetching weather for city %r (session %s)", command.city, session_id)
            record = await self.resolver.fetch_by_city(command.city)
            self.cache.put(session_id, record=record, timestamp=self.clock())
            return record

        state = self.cache.get(session_id)
        if is_fresh(state, self.clock()):
            logger.info("Serving cached weather for session %s", session_id)
            return state.last_weather

        host = self._hosts.get(session_id)
        if host is None:
            raise WeatherAppError(f"Session {session_id} is not active")
        coords = await wait_for_location(host, timeout=self.location_timeout)
        logger.info("Fetching weather at (%s, %s) for session %s", coords.latitude, coords.longitude, session_id)
        record = await self.resolver.fetch_by_coordinates(coords)
        self.cache.put(session_id, coords=coords, record=record, timestamp=self.clock())
        return record

    def weather_effect(self, record: WeatherRecord) -> Effect:
        return Effect(
            card=format_weather_display(record),
            speech=format_weather_summary(record),
            dashboard=f"🌤️ {record.temperature_f}°F {record.description}",
        )

    def error_effect(self, message: str) -> Effect:
        return Effect(
            text_wall=f"❌ {message}",
            speech=message,
            dashboard=ERROR_DASHBOARD,
            revert_after=ERROR_DISPLAY_SECONDS,
        )
