"""Simulated display clock for running animations offline.

The driver plays the part of ``requestAnimationFrame``: callbacks requested
during one tick run on the next, all with the same timestamp, and a callback
that returns False is not rescheduled. Progress comes from timestamps, not
from counting frames, so the frame rate only changes how many frames are
captured.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from PIL import Image

from flourish.page import PageGeometry
from flourish.session import LifecycleController, NetworkAnimation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResizeEvent:
    at_ms: float
    page: PageGeometry


class FrameDriver:
    def __init__(self, animation: NetworkAnimation, fps: float = 60.0, start_ms: float = 0.0) -> None:
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.animation = animation
        self.controller = LifecycleController(animation)
        self.interval_ms = 1000.0 / fps
        self.start_ms = start_ms

    def run(
        self, page: PageGeometry, resizes: Iterable[ResizeEvent] = ()
    ) -> Iterator[tuple[float, Image.Image]]:
        """Fire load (and any resizes) and yield (timestamp, frame) per painted tick.

        Stops once every callback chain has finished and no rebuild or resize
        is outstanding. Yields nothing if the page lacks the animation's
        elements.
        """
        events = sorted(resizes, key=lambda e: e.at_ms)
        now = self.start_ms
        chains = 1 if self.controller.on_load(now, page) else 0
        painted = 0

        while True:
            now += self.interval_ms

            if chains:
                # Every live chain runs this tick; stale ones read the new session.
                chains = sum(1 for _ in range(chains) if self.animation.frame(now))
                painted += 1
                yield now, self.animation.canvas.snapshot()

            while events and events[0].at_ms <= now:
                event = events.pop(0)
                logger.debug("resize at %.0fms to %.0fx%.0f", now, event.page.width, event.page.height)
                if self.controller.on_resize(now, event.page):
                    chains += 1
            if self.controller.poll(now):
                chains += 1

            if not chains and not events and not self.controller.pending:
                break

        logger.info("%s network: painted %d frames", self.animation.kind, painted)


def render_at(animation: NetworkAnimation, page: PageGeometry, at_ms: float) -> Image.Image | None:
    """Render the single frame ``at_ms`` after the first frame of a fresh session."""
    if animation.setup(page) is None:
        return None
    animation.frame(0.0)
    animation.frame(at_ms)
    return animation.canvas.snapshot()
