from __future__ import annotations

import logging
import time
from collections import deque
from typing import Deque, List, Optional

from ..events import Event, EventBus
from ..state.actions import Action
from ..state.explore import explore_step
from ..state.turn import apply_action
from ..state.world import World

logger = logging.getLogger(__name__)


class Session:
    """Paces actions against a world and republishes their events.

    An external loop calls ``update(dt)``; at most one action is resolved per
    elapsed ``tick_seconds``. Queued actions go first; with ``auto_explore``
    on and an empty queue, one explore step is taken instead.
    """

    def __init__(
        self,
        world: World,
        bus: Optional[EventBus] = None,
        auto_explore: bool = False,
        max_steps: Optional[int] = None,
    ) -> None:
        self.world = world
        self.bus = bus or EventBus()
        self.auto_explore = auto_explore
        self.max_steps = max_steps
        self._queue: Deque[Action] = deque()
        self._running: bool = False
        self._step: int = 0
        self._elapsed: float = 0.0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    @property
    def pending(self) -> int:
        return len(self._queue)

    def submit(self, action: Action) -> None:
        self._queue.append(action)

    def start(self) -> None:
        """Start the session. Calling it again while running is a no-op."""
        if self._running:
            logger.debug("Session.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._elapsed = 0.0
        self._last_time = time.perf_counter()
        logger.info("Session started (tick_seconds=%s, auto_explore=%s)", self.world.config.tick_seconds, self.auto_explore)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("Session stopped at step=%s", self._step)

    def _next_action(self) -> Optional[Action]:
        if self._queue:
            return self._queue.popleft()
        if self.auto_explore:
            return explore_step(self.world)
        return None

    def update(self, dt: float) -> List[Event]:
        """Advance the clock by ``dt`` seconds and resolve at most one action.

        Returns the events of the resolved action, or [] when nothing ran.
        """
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return []
        self._elapsed += dt
        if self._elapsed < self.world.config.tick_seconds:
            return []
        self._elapsed -= self.world.config.tick_seconds

        action = self._next_action()
        if action is None:
            if self.auto_explore and not self._queue:
                logger.info("Nothing left to explore on depth %d", self.world.depth)
                self.stop()
            return []
        self._step += 1
        _, events = apply_action(action, self.world)
        logger.debug("Step #%d %r -> %d events", self._step, action, len(events))
        self.bus.publish_all(events)

        if self.world.terminal:
            self.stop()
        elif self.max_steps is not None and self._step >= self.max_steps:
            self.stop()
        return events

    def run(self) -> None:
        """Blocking headless loop until stopped, paced by the tick cadence."""
        self.start()
        target_dt = float(self.world.config.tick_seconds)
        while self._running:
            now = time.perf_counter()
            dt = 0.0 if self._last_time is None else now - self._last_time
            self._last_time = now
            self.update(max(dt, target_dt))
            if not self._queue and not self.auto_explore:
                self.stop()
            if target_dt > 0:
                remaining = target_dt - (time.perf_counter() - now)
                if remaining > 0:
                    time.sleep(remaining)
        logger.info("Session loop complete (steps=%d)", self._step)


__all__ = ["Session"]
