# ABOUTME: Thin adapter between host runtime session callbacks and the WeatherController.
# ABOUTME: Registers transcription and button handlers and renders Effects to the glasses display, audio and dashboard.

import asyncio
import logging

import httpx

from src.command_parser import CommandParser
from src.config import Settings
from src.controller import WeatherController
from src.deps import WeatherDeps, create_http_client
from src.host import HostSession
from src.models import ButtonPressEvent, Effect, TranscriptionEvent
from src.session_cache import SessionCache
from src.weather_service import WeatherResolver

logger = logging.getLogger(__name__)


class WeatherApp:
    """Composes the controller with host sessions; never extends host types."""

    def __init__(self, controller: WeatherController, http_client: httpx.AsyncClient | None = None):
        self.controller = controller
        self.http_client = http_client
        self._sessions: dict[str, HostSession] = {}
        self._revert_tasks: dict[str, set[asyncio.Task]] = {}

    async def on_session(self, session: HostSession, session_id: str, user_id: str) -> None:
        logger.info("WeatherToday! session started: session=%s user=%s", session_id, user_id)
        self._sessions[session_id] = session
        self._revert_tasks[session_id] = set()
        self.controller.start_session(session_id, session)

        async def on_transcription(event: TranscriptionEvent) -> None:
            effect = await self.controller.handle_transcription(session_id, event.text, event.is_final)
            if effect is not None:
                await self.apply_effect(session_id, effect)

        async def on_button_press(event: ButtonPressEvent) -> None:
            effect = await self.controller.handle_button(session_id, event.button, event.action)
            if effect is not None:
                await self.apply_effect(session_id, effect)

        session.on_transcription(on_transcription)
        session.on_button_press(on_button_press)
        await self.apply_effect(session_id, self.controller.welcome())

    async def on_stop(self, session_id: str, user_id: str, reason: str) -> None:
        logger.info("WeatherToday! session ended: session=%s user=%s reason=%s", session_id, user_id, reason)
        for task in self._revert_tasks.pop(session_id, set()):
            task.cancel()
        self._sessions.pop(session_id, None)
        self.controller.end_session(session_id)

    async def apply_effect(self, session_id: str, effect: Effect) -> None:
        session = self._sessions.get(session_id)
        if session is None:
            logger.debug("Dropping effect for inactive session %s", session_id)
            return

        # A newer effect supersedes any pending return to the welcome screen.
        self._cancel_reverts(session_id)

        if effect.card is not None:
            session.show_reference_card(effect.card.title, effect.card.content)
        elif effect.text_wall is not None:
            session.show_text_wall(effect.text_wall)
        if effect.dashboard is not None:
            session.write_dashboard(effect.dashboard)
        if effect.speech is not None:
            await session.play_tts(effect.speech)
        if effect.revert_after is not None:
            self._schedule_welcome(session_id, effect.revert_after)

    async def aclose(self) -> None:
        """Cancel pending reverts and close the HTTP client. Call once at shutdown."""
        for session_id in list(self._revert_tasks):
            self._cancel_reverts(session_id)
        if self.http_client is not None:
            await self.http_client.aclose()

    def _cancel_reverts(self, session_id: str) -> None:
        tasks = self._revert_tasks.get(session_id)
        if not tasks:
            return
        current = asyncio.current_task()
        for task in list(tasks):
            if task is not current:
                task.cancel()
                tasks.discard(task)

    def _schedule_welcome(self, session_id: str, delay: float) -> None:
        tasks = self._revert_tasks.get(session_id)
        if tasks is None:
            return

        async def revert() -> None:
            await asyncio.sleep(delay)
            await self.apply_effect(session_id, self.controller.welcome())

        task = asyncio.create_task(revert())
        tasks.add(task)
        task.add_done_callback(tasks.discard)


def create_app(settings: Settings, client: httpx.AsyncClient | None = None) -> WeatherApp:
    """Wire the resolver, cache, parser and controller from settings."""
    deps = WeatherDeps(
        http_client=client or create_http_client(settings.http_timeout_seconds),
        api_key=settings.openweather_api_key,
    )
    controller = WeatherController(
        resolver=WeatherResolver(deps.http_client, deps.api_key),
        cache=SessionCache(),
        parser=CommandParser(require_explicit_city=settings.require_explicit_city),
        location_timeout=settings.location_timeout_seconds,
    )
    return WeatherApp(controller, http_client=deps.http_client)
