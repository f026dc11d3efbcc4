import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Any, Callable, DefaultDict, Dict, Iterable, List

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    ATTACK = "attack"
    DEFEND = "defend"
    PICKUP_COIN = "pickup-coin"
    PICKUP_ITEM = "pickup-item"
    KILL_ENEMY = "kill-enemy"
    PLAYER_DEATH = "player-death"
    ASCEND = "ascend"
    DESCEND = "descend"
    HALLS_ESCAPED = "halls-escaped"
    ARTIFACT_TAKEN = "artifact-taken"


@dataclass(frozen=True)
class Event:
    """One thing that happened while resolving an action.

    Attributes:
        kind: What happened.
        payload: Plain data describing it (ids, points as [x, y], amounts).
    """

    kind: EventKind
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "payload": dict(self.payload)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(EventKind(data["kind"]), dict(data.get("payload", {})))


Handler = Callable[[Event], None]

# Subscribing to this key receives every event.
ALL_EVENTS = "*"


class EventBus:
    """A lightweight thread-safe publish/subscribe hub for turn events.

    Handlers registered for a kind run in registration order, followed by the
    handlers registered for ``ALL_EVENTS``. A failing handler is logged and the
    remaining handlers still run.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Handler]] = defaultdict(list)
        self._lock = RLock()

    @staticmethod
    def _key(kind) -> str:
        return kind.value if isinstance(kind, EventKind) else str(kind)

    def subscribe(self, kind, callback: Handler) -> None:
        if not callable(callback):
            raise TypeError("callback must be callable")
        key = self._key(kind)
        with self._lock:
            self._subs[key].append(callback)
        logger.debug("Subscribed %s to '%s'", getattr(callback, "__name__", str(callback)), key)

    def unsubscribe(self, kind, callback: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        key = self._key(kind)
        with self._lock:
            if callback in self._subs.get(key, []):
                self._subs[key].remove(callback)
                logger.debug("Unsubscribed %s from '%s'", getattr(callback, "__name__", str(callback)), key)

    def publish(self, event: Event) -> None:
        with self._lock:
            subs = list(self._subs.get(event.kind.value, [])) + list(self._subs.get(ALL_EVENTS, []))
        logger.debug("Publishing '%s' to %d subscribers: %s", event.kind.value, len(subs), event.payload)
        for cb in subs:
            try:
                cb(event)
            except Exception:
                logger.exception("Unhandled exception in event subscriber for '%s'", event.kind.value)

    def publish_all(self, events: Iterable[Event]) -> None:
        for event in events:
            self.publish(event)


__all__ = ["ALL_EVENTS", "Event", "EventBus", "EventKind", "Handler"]
