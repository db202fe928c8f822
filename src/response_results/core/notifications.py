"""Unauthorized broadcast published when an envelope carries code 401."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

UNAUTHORIZED_CODE = 401
logger = logging.getLogger("response_results")

UnauthorizedListener = Callable[[], None]


class UnauthorizedNotifier(Protocol):
    def publish(self) -> None:
        """Announce that the server rejected the current credentials."""


class UnauthorizedBroadcast:
    """Fire-and-forget fan-out to every subscribed listener.

    Listeners take no arguments. A listener that raises is logged and the
    remaining listeners still run.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: list[UnauthorizedListener] = []

    def subscribe(self, listener: UnauthorizedListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: UnauthorizedListener) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                return

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self) -> None:
        with self._lock:
            listeners = tuple(self._listeners)
        logger.debug("unauthorized broadcast listeners=%s", len(listeners))
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("unauthorized listener failed listener=%r", listener)


_default_broadcast = UnauthorizedBroadcast()


def default_broadcast() -> UnauthorizedBroadcast:
    """Process-wide broadcast for hosts that want a single shared channel."""

    return _default_broadcast


__all__ = [
    "UNAUTHORIZED_CODE",
    "UnauthorizedListener",
    "UnauthorizedNotifier",
    "UnauthorizedBroadcast",
    "default_broadcast",
]
