# ABOUTME: Regex-based intent parser for transcribed voice commands.
# ABOUTME: Maps free-form speech to a city lookup or a current-location lookup.

import logging
import re
from collections.abc import Callable

from src.errors import UnrecognizedCommand
from src.models import ParsedCommand

logger = logging.getLogger(__name__)

GENERIC_LOCATIONS = frozenset({"here", "there", "this place", "my location", "current location"})

_TRAILING_PUNCTUATION = "?.!, "


# Whole-prefix lead-ins of general questions; "the hague weather" is still a city.
_QUESTION_LEAD_IN = re.compile(
    r"(?:(?:what|how)(?:'?s| is)(?: the)?|(?:tell|give) me the|the|current|today'?s)"
)


def _group(match: re.Match) -> str:
    return match.group(1).strip().rstrip(_TRAILING_PUNCTUATION)


def _city_before_weather(match: re.Match) -> str:
    city = _group(match)
    if _QUESTION_LEAD_IN.fullmatch(city):
        return ""
    return city


# Ordered: the first matching pattern wins, so "weather in X" is tried before "X weather".
LOCATION_PATTERNS: list[tuple[re.Pattern, Callable[[re.Match], str]]] = [
    (re.compile(r"weather in (.+)"), _group),
    (re.compile(r"^(.+) weather"), _city_before_weather),
    (re.compile(r"what'?s the weather in (.+)"), _group),
    (re.compile(r"how'?s the weather in (.+)"), _group),
    (re.compile(r"weather for (.+)"), _group),
    (re.compile(r"tell me the weather in (.+)"), _group),
]

CURRENT_LOCATION_PATTERNS: list[re.Pattern] = [
    re.compile(r"what(?:'?s| is) the weather"),
    re.compile(r"current weather"),
    re.compile(r"weather conditions"),
    re.compile(r"how(?:'?s| is) the weather"),
    re.compile(r"weather today"),
    re.compile(r"today'?s weather"),
]


def is_generic_location(location: str) -> bool:
    """Return True for phrases like "here" that refer to the user's own position."""
    return location.strip().lower() in GENERIC_LOCATIONS


class CommandParser:
    """Turn a transcript into a ParsedCommand.

    With ``require_explicit_city`` set, every command must name a city; otherwise
    general phrases such as "what's the weather" resolve to the current location.
    """

    def __init__(self, require_explicit_city: bool = False):
        self.require_explicit_city = require_explicit_city

    def parse(self, text: str) -> ParsedCommand:
        normalized = text.lower().strip()
        saw_generic = False

        for pattern, extract in LOCATION_PATTERNS:
            match = pattern.search(normalized)
            if not match:
                continue
            city = extract(match)
            if not city:
                continue
            if is_generic_location(city):
                saw_generic = True
                continue
            return ParsedCommand.city_lookup(city)

        if not self.require_explicit_city:
            if saw_generic or any(p.search(normalized) for p in CURRENT_LOCATION_PATTERNS):
                return ParsedCommand.current_location()

        logger.debug("No command pattern matched %r", normalized)
        raise UnrecognizedCommand(text, require_city=self.require_explicit_city)
