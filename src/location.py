# ABOUTME: Single-shot wait for the first location update from the host, with a timeout.
# ABOUTME: Always unsubscribes from the host location stream, whichever way the wait ends.

import asyncio
import logging

from src.errors import LocationTimeout
from src.host import HostSession
from src.models import LocationCoordinates, LocationUpdate

logger = logging.getLogger(__name__)

LOCATION_TIMEOUT_SECONDS = 10.0


async def wait_for_location(
    session: HostSession,
    timeout: float = LOCATION_TIMEOUT_SECONDS,
    accuracy: str = "standard",
) -> LocationCoordinates:
    """Subscribe to the location stream and return the first reported position.

    Raises LocationTimeout if nothing arrives within ``timeout`` seconds. Updates
    may be delivered from another thread, so they are handed to the event loop.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[LocationCoordinates] = loop.create_future()

    def _resolve(update: LocationUpdate) -> None:
        if not future.done():
            future.set_result(update.to_coordinates())

    def on_update(update: LocationUpdate) -> None:
        loop.call_soon_threadsafe(_resolve, update)

    unsubscribe = session.subscribe_location(accuracy, on_update)
    try:
        return await asyncio.wait_for(future, timeout)
    except asyncio.TimeoutError:
        logger.warning("No location update within %ss", timeout)
        raise LocationTimeout(timeout) from None
    finally:
        unsubscribe()
