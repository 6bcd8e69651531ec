"""
Change Notification Channel

Carries full session snapshots between stores that share one storage
namespace (one per open tab). Subscribers never hear their own publishes.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A snapshot written under `key` by the context identified by `origin`."""
    key: str
    data: Dict[str, Any]
    origin: str


ChangeCallback = Callable[[ChangeEvent], None]


class ChangeChannel(ABC):
    """Publish/subscribe contract for cross-context change notifications."""

    @abstractmethod
    def publish(self, event: ChangeEvent) -> None:
        ...

    @abstractmethod
    def subscribe(self, origin: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register `callback` for events from other origins; returns an unsubscribe function."""
        ...


class InProcessChannel(ChangeChannel):
    """
    In-process event bus.

    With an event loop, delivery is scheduled via `loop.call_soon`, so a
    publish interleaves with local work the way browser storage events do.
    Without one, subscribers are called before `publish` returns.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop
        self._subscribers: List[tuple] = []

    def subscribe(self, origin: str, callback: ChangeCallback) -> Callable[[], None]:
        entry = (origin, callback)
        self._subscribers.append(entry)

        def unsubscribe():
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        for origin, callback in list(self._subscribers):
            if origin == event.origin:
                continue
            if self.loop is not None:
                self.loop.call_soon(self._deliver, callback, event)
            else:
                self._deliver(callback, event)

    def _deliver(self, callback: ChangeCallback, event: ChangeEvent) -> None:
        try:
            callback(event)
        except Exception as e:
            logger.error(f"❌ [InProcessChannel] Subscriber failed for key {event.key!r}: {e}", exc_info=True)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
