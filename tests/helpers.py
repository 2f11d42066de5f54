# ABOUTME: Shared helpers for the WeatherToday! test suite.
# ABOUTME: Provides mock HTTP clients, sample OpenWeatherMap payloads and a fake host session.

from unittest.mock import AsyncMock

import httpx

from src.host import HostSession


def make_response(json_data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=json_data, request=httpx.Request("GET", "https://test"))


def mock_client(*json_payloads, status_code: int = 200) -> AsyncMock:
    """Create a mock httpx.AsyncClient returning the given JSON payloads in order."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    responses = [make_response(p, status_code) for p in json_payloads]
    if len(responses) == 1:
        mock.get.return_value = responses[0]
    else:
        mock.get.side_effect = responses
    return mock


TOKYO_GEOCODE = [{"lat": 35.68, "lon": 139.69, "name": "Tokyo", "country": "JP"}]

TOKYO_WEATHER = {
    "main": {"temp": 72.4, "feels_like": 70.1, "humidity": 55, "pressure": 1012},
    "weather": [{"main": "Clear", "description": "clear sky"}],
    "wind": {"speed": 5.2},
    "name": "Tokyo",
    "sys": {"country": "JP"},
}


class FakeHostSession(HostSession):
    """Records everything rendered and lets tests drive the location stream."""

    def __init__(self, location=None):
        self.cards = []
        self.text_walls = []
        self.spoken = []
        self.dashboard = []
        self.location = location
        self.subscriptions = 0
        self.unsubscribed = 0
        self.transcription_handler = None
        self.button_handler = None

    def show_reference_card(self, title, content):
        self.cards.append((title, content))

    def show_text_wall(self, text):
        self.text_walls.append(text)

    async def play_tts(self, text):
        self.spoken.append(text)

    def write_dashboard(self, text):
        self.dashboard.append(text)

    def subscribe_location(self, accuracy, callback):
        self.subscriptions += 1
        if self.location is not None:
            callback(self.location)

        def unsubscribe():
            self.unsubscribed += 1

        return unsubscribe

    def on_transcription(self, handler):
        self.transcription_handler = handler

    def on_button_press(self, handler):
        self.button_handler = handler
