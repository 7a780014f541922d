"""WebSocket push channel for draft update notifications.

The server pushes ``{"type": "update", "channel": ..., "data": ...}``. The
payload is treated as a hint only: subscribers re-fetch full state, so
duplicate or out-of-order notifications are harmless.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

logger = logging.getLogger(__name__)

PushCallback = Callable[[Any], Union[None, Awaitable[None]]]

CHANNEL_PREFIX = "draft:"


def draft_channel(draft_id: str) -> str:
    return f"{CHANNEL_PREFIX}{draft_id}"


def _wire_channel(channel: str) -> str:
    return channel[len(CHANNEL_PREFIX):] if channel.startswith(CHANNEL_PREFIX) else channel


class PushChannel:
    """Subscription registry plus a reconnecting receive loop."""

    def __init__(
        self,
        url: str,
        max_reconnect_attempts: int = 5,
        reconnect_delay_s: float = 1.0,
        max_reconnect_delay_s: float = 30.0,
        connector: Optional[Callable[[str], Awaitable[Any]]] = None,
    ):
        self.url = url
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_delay_s = reconnect_delay_s
        self.max_reconnect_delay_s = max_reconnect_delay_s
        self._connector = connector or websockets.connect
        self._subscribers: Dict[str, List[PushCallback]] = {}
        self._ws: Any = None
        self._task: Optional[asyncio.Task] = None
        self._closed = False
        self.reconnect_attempts = 0
        self.gave_up = False

    @property
    def connected(self) -> bool:
        return self._ws is not None

    def backoff_delay(self, attempt: int) -> float:
        """Delay before reconnect attempt ``attempt`` (1-based)."""
        return min(self.max_reconnect_delay_s, self.reconnect_delay_s * (2 ** (attempt - 1)))

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._closed = False
            self.gave_up = False
            self._task = asyncio.create_task(self.run())

    async def run(self) -> None:
        while not self._closed:
            try:
                ws = await self._connector(self.url)
            except (OSError, WebSocketException, asyncio.TimeoutError) as exc:
                logger.warning(f"WebSocket connect failed: {exc}")
            else:
                logger.info("WebSocket connected")
                self.reconnect_attempts = 0
                self._ws = ws
                try:
                    await self._resubscribe()
                    async for message in ws:
                        await self._handle_message(message)
                except ConnectionClosed as exc:
                    logger.info(f"WebSocket disconnected: {exc}")
                finally:
                    self._ws = None

            if self._closed:
                break
            self.reconnect_attempts += 1
            if self.reconnect_attempts > self.max_reconnect_attempts:
                self.gave_up = True
                logger.warning(
                    f"WebSocket gave up after {self.max_reconnect_attempts} attempts; "
                    "falling back to polling"
                )
                break
            delay = self.backoff_delay(self.reconnect_attempts)
            logger.info(
                f"Attempting to reconnect ({self.reconnect_attempts}/{self.max_reconnect_attempts}) "
                f"in {delay:.1f}s"
            )
            await asyncio.sleep(delay)

    async def _send(self, payload: Dict[str, Any]) -> None:
        if self._ws is None:
            return
        try:
            await self._ws.send(json.dumps(payload))
        except ConnectionClosed as exc:
            logger.debug(f"Send skipped, socket closed: {exc}")

    async def _resubscribe(self) -> None:
        for channel in list(self._subscribers):
            await self._send({"type": "subscribe", "channel": _wire_channel(channel)})

    async def _handle_message(self, raw: Union[str, bytes]) -> None:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed to parse WebSocket message: {exc}")
            return
        if not isinstance(data, dict) or data.get("type") != "update" or not data.get("channel"):
            return

        channel = str(data["channel"])
        callbacks = self._subscribers.get(channel) or self._subscribers.get(draft_channel(channel)) or []
        for callback in list(callbacks):
            try:
                result = callback(data.get("data"))
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(f"Push subscriber for {channel} failed")

    async def subscribe(self, channel: str, callback: PushCallback) -> None:
        callbacks = self._subscribers.setdefault(channel, [])
        if callback not in callbacks:
            callbacks.append(callback)
        await self._send({"type": "subscribe", "channel": _wire_channel(channel)})

    async def unsubscribe(self, channel: str, callback: PushCallback) -> None:
        callbacks = self._subscribers.get(channel)
        if not callbacks:
            return
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            del self._subscribers[channel]
            await self._send({"type": "unsubscribe", "channel": _wire_channel(channel)})

    def subscribed(self, channel: str) -> bool:
        return bool(self._subscribers.get(channel))

    async def close(self) -> None:
        self._closed = True
        ws, self._ws = self._ws, None
        if ws is not None:
            with suppress(WebSocketException, OSError):
                await ws.close()
        if self._task is not None:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._subscribers.clear()
