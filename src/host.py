# ABOUTME: Abstract interface for the smart-glasses host runtime session.
# ABOUTME: The adapter renders effects through it and the location wait subscribes to its location stream.

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from src.models import ButtonPressEvent, LocationUpdate, TranscriptionEvent

TranscriptionHandler = Callable[[TranscriptionEvent], Awaitable[None]]
ButtonHandler = Callable[[ButtonPressEvent], Awaitable[None]]
LocationCallback = Callable[[LocationUpdate], None]
Unsubscribe = Callable[[], None]


class HostSession(ABC):
    """One user's connection to the host runtime, supplied by the platform SDK binding."""

    @abstractmethod
    def show_reference_card(self, title: str, content: str) -> None:
        """Show a titled card on the glasses."""

    @abstractmethod
    def show_text_wall(self, text: str) -> None:
        """Show a plain block of text on the glasses."""

    @abstractmethod
    async def play_tts(self, text: str) -> None:
        """Speak text through the glasses' audio output."""

    @abstractmethod
    def write_dashboard(self, text: str) -> None:
        """Write the one-line dashboard entry."""

    @abstractmethod
    def subscribe_location(self, accuracy: str, callback: LocationCallback) -> Unsubscribe:
        """Stream location updates to callback until the returned function is called."""

    @abstractmethod
    def on_transcription(self, handler: TranscriptionHandler) -> None:
        pass

    @abstractmethod
    def on_button_press(self, handler: ButtonHandler) -> None:
        pass
