"""Registry of live notification channels, one per user."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from .channel import LiveChannel

logger = logging.getLogger(__name__)

CONNECTED_EVENT = "connected"

MembershipResolver = Callable[[int], Iterable[int]]

LOCK_STRIPES = 64


class ConnectionRegistry:
    """Track the active channel of each user and deliver events best-effort.

    A user holds at most one channel: subscribing again closes the previous
    one. Delivery failures evict the channel and are never raised to callers.
    Each user id maps onto one of a fixed pool of locks, so memory stays
    bounded and most users never contend.
    """

    def __init__(
        self,
        membership_resolver: MembershipResolver | None = None,
        *,
        keepalive_seconds: float | None = None,
    ) -> None:
        self._membership_resolver = membership_resolver
        self._keepalive_seconds = keepalive_seconds
        self._channels: dict[int, LiveChannel] = {}
        self._locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))

    def _lock_for(self, user_id: int) -> threading.Lock:
        return self._locks[hash(user_id) % LOCK_STRIPES]

    def subscribe(
        self, user_id: int, *, loop: asyncio.AbstractEventLoop | None = None
    ) -> LiveChannel:
        """Open a channel for ``user_id``, replacing any previous one."""

        channel = LiveChannel(
            user_id, loop=loop, keepalive_seconds=self._keepalive_seconds
        )
        channel.add_close_callback(self._release)
        with self._lock_for(user_id):
            previous = self._channels.get(user_id)
            self._channels[user_id] = channel
        if previous is not None:
            logger.info("Replacing live channel for user %s", user_id)
            previous.close()

        self.send_to_user(user_id, CONNECTED_EVENT, {"user_id": user_id, "status": "connected"})
        logger.info("Live channel opened for user %s", user_id)
        return channel

    def unsubscribe(self, user_id: int) -> None:
        channel = self._channels.get(user_id)
        if channel is not None:
            channel.close()

    def is_connected(self, user_id: int) -> bool:
        return user_id in self._channels

    def connected_user_ids(self) -> list[int]:
        return list(self._channels)

    def send_to_user(self, user_id: int, event: str, payload: Any) -> bool:
        """Hand ``event`` to the channel of ``user_id``.

        Returns ``False`` when the user has no channel or the channel failed;
        a failed channel is closed and removed.
        """

        channel = self._channels.get(user_id)
        if channel is None:
            return False
        try:
            channel.send(event, payload)
        except Exception as exc:
            logger.warning(
                "Dropping live channel for user %s after '%s' failed: %s",
                user_id,
                event,
                exc,
            )
            channel.close()
            return False
        logger.debug("Event '%s' queued for user %s", event, user_id)
        return True

    def broadcast_to_project(self, project_id: int, event: str, payload: Any) -> int:
        """Send ``event`` to every accepted member of ``project_id``.

        Returns the number of members the event was handed to.
        """

        if self._membership_resolver is None:
            logger.warning("No membership resolver configured; skipping '%s'", event)
            return 0
        try:
            member_ids = list(dict.fromkeys(self._membership_resolver(project_id)))
        except Exception:
            logger.exception("Could not resolve members of project %s", project_id)
            return 0

        delivered = 0
        for user_id in member_ids:
            if self.send_to_user(user_id, event, payload):
                delivered += 1
        logger.debug(
            "Event '%s' for project %s delivered to %s of %s members",
            event,
            project_id,
            delivered,
            len(member_ids),
        )
        return delivered

    def close_all(self) -> None:
        """Close every channel; used when the application shuts down."""

        for channel in list(self._channels.values()):
            channel.close()

    def _release(self, channel: LiveChannel) -> None:
        with self._lock_for(channel.user_id):
            if self._channels.get(channel.user_id) is channel:
                del self._channels[channel.user_id]
                logger.info("Live channel closed for user %s", channel.user_id)


__all__ = ["CONNECTED_EVENT", "LOCK_STRIPES", "ConnectionRegistry", "MembershipResolver"]
