# amc_portal/client/realtime.py
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import urlencode

import websockets

from amc_portal.config import ClientSettings, get_client_settings

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Any], Union[None, Awaitable[None]]]


class RealtimeClient:
    """Joins the user's room and hands every server event to ``on_event``.

    After a dropped connection it reconnects with exponential backoff
    (base delay, doubling) and re-joins the room. Missed events are not
    replayed; callers re-fetch through the normal read path. Once the
    attempts run out it stops quietly.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        connect: Callable = websockets.connect,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = settings or get_client_settings()
        self.ws_url = settings.ws_url
        self.max_attempts = settings.max_reconnect_attempts
        self.base_delay = settings.reconnect_delay
        self._connect = connect
        self._sleep = sleep
        self._websocket = None
        self._stopped = False
        self.reconnect_attempts = 0
        self.connected = False

    def backoff_delay(self, attempt: int) -> float:
        return self.base_delay * 2 ** (attempt - 1)

    def _url(self, token: Optional[str]) -> str:
        if not token:
            return self.ws_url
        return f"{self.ws_url}?{urlencode({'token': token})}"

    async def _dispatch(self, on_event: EventHandler, raw: str) -> None:
        try:
            frame = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed realtime frame: {raw[:80]!r}")
            return
        result = on_event(frame.get("event"), frame.get("data"))
        if asyncio.iscoroutine(result):
            await result

    async def run(self, user_id: str, on_event: EventHandler, token: Optional[str] = None) -> None:
        self._stopped = False
        self.reconnect_attempts = 0

        while not self._stopped:
            try:
                async with self._connect(self._url(token)) as websocket:
                    self._websocket = websocket
                    self.connected = True
                    self.reconnect_attempts = 0
                    await websocket.send(json.dumps({"event": "join-user-room", "data": {"userId": user_id}}))
                    logger.info(f"Realtime connected, joined room {user_id}")

                    async for raw in websocket:
                        await self._dispatch(on_event, raw)
            except (OSError, websockets.exceptions.WebSocketException) as e:
                logger.warning(f"Realtime connection lost: {e}")
            finally:
                self.connected = False
                self._websocket = None

            if self._stopped:
                break

            self.reconnect_attempts += 1
            if self.reconnect_attempts > self.max_attempts:
                logger.info("Realtime reconnect attempts exhausted, giving up")
                break
            delay = self.backoff_delay(self.reconnect_attempts)
            logger.info(f"Reconnecting in {delay:.1f}s (attempt {self.reconnect_attempts}/{self.max_attempts})")
            await self._sleep(delay)

    async def stop(self) -> None:
        self._stopped = True
        if self._websocket is not None:
            await self._websocket.close()
