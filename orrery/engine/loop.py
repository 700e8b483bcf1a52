"""Fixed step frame loop."""
from __future__ import annotations

import time
from typing import Callable


class FrameLoop:
    """Advances animation time by a fixed step each frame, then sleeps."""

    def __init__(
        self,
        step: Callable[[float], None],
        process_events: Callable[[], None],
        time_step: float = 0.016,
        frame_delay: float = 0.016,
    ) -> None:
        self.step = step
        self.process_events = process_events
        self.time_step = time_step
        self.frame_delay = frame_delay
        self.time = 0.0
        self.frames = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def run(self) -> None:
        self._running = True
        while self._running:
            self.process_events()
            if not self._running:
                break
            self.time += self.time_step
            self.step(self.time)
            self.frames += 1
            if self.frame_delay > 0.0:
                time.sleep(self.frame_delay)


__all__ = ["FrameLoop"]
