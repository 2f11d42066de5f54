# ABOUTME: In-memory, session-keyed store of the last location and weather reading.
# ABOUTME: Provides the five-minute freshness check the controller applies before re-fetching.

import threading
from datetime import datetime, timedelta

from src.models import LocationCoordinates, SessionState, WeatherRecord

FRESHNESS_WINDOW = timedelta(minutes=5)


def is_fresh(state: SessionState | None, now: datetime, window: timedelta = FRESHNESS_WINDOW) -> bool:
    """True when the cached reading may be served for a current-location request without a fetch."""
    if state is None or state.last_update is None:
        return False
    if state.last_location is None or state.last_weather is None:
        return False
    return now - state.last_update < window


class SessionCache:
    """One SessionState per active session, guarded by a lock.

    Entries are created when a session starts and removed when it ends; nothing
    is persisted.
    """

    def __init__(self):
        self._states: dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def create(self, session_id: str) -> SessionState:
        state = SessionState()
        with self._lock:
            self._states[session_id] = state
        return state

    def get(self, session_id: str) -> SessionState | None:
        with self._lock:
            return self._states.get(session_id)

    def put(
        self,
        session_id: str,
        coords: LocationCoordinates | None = None,
        record: WeatherRecord | None = None,
        timestamp: datetime | None = None,
    ) -> SessionState:
        """Replace the session's entry. Fields left as None are stored as absent."""
        state = SessionState(last_location=coords, last_weather=record, last_update=timestamp)
        with self._lock:
            self._states[session_id] = state
        return state

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._states.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._states

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
