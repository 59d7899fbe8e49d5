"""Server-Sent-Events channel bound to a single subscriber."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any

from taskflow.domain.errors import DeliveryError

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keep-alive\n\n"


@dataclass(frozen=True)
class ServerSentEvent:
    """A named event with a JSON payload."""

    event: str
    data: str

    @classmethod
    def build(cls, event: str, payload: Any) -> "ServerSentEvent":
        return cls(event=event, data=json.dumps(payload, default=str))

    def encode(self) -> str:
        lines = [f"event: {self.event}"]
        lines.extend(f"data: {line}" for line in self.data.splitlines() or [""])
        return "\n".join(lines) + "\n\n"


class LiveChannel:
    """Queue of events waiting to be streamed to one connected client.

    ``send`` may be called from any thread; events are handed over to the
    event loop that owns the channel. Closing the channel ends the stream and
    runs the close callbacks exactly once.
    """

    def __init__(
        self,
        user_id: int,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        keepalive_seconds: float | None = None,
    ) -> None:
        self.user_id = user_id
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[ServerSentEvent | None] = asyncio.Queue()
        self._keepalive_seconds = keepalive_seconds
        self._closed = False
        self._close_callbacks: list[Callable[["LiveChannel"], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    def add_close_callback(self, callback: Callable[["LiveChannel"], None]) -> None:
        self._close_callbacks.append(callback)

    def send(self, event: str, payload: Any) -> None:
        """Queue ``event`` for the client or raise :class:`DeliveryError`."""

        if self._closed:
            raise DeliveryError(f"Channel for user {self.user_id} is closed")
        try:
            message = ServerSentEvent.build(event, payload)
        except (TypeError, ValueError) as exc:
            raise DeliveryError(f"Payload for '{event}' is not serializable") from exc
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, message)
        except RuntimeError as exc:
            raise DeliveryError(f"Event loop for user {self.user_id} is closed") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, None)
        except RuntimeError:
            logger.debug("Event loop already closed for user %s channel", self.user_id)
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            callback(self)

    async def stream(self) -> AsyncIterator[str]:
        """Yield encoded SSE frames until the channel is closed or abandoned."""

        try:
            while True:
                try:
                    message = await asyncio.wait_for(
                        self._queue.get(), timeout=self._keepalive_seconds
                    )
                except asyncio.TimeoutError:
                    yield KEEPALIVE_FRAME
                    continue
                if message is None:
                    break
                yield message.encode()
        finally:
            self.close()


__all__ = ["KEEPALIVE_FRAME", "LiveChannel", "ServerSentEvent"]
