"""Animation sessions and the load/resize lifecycle.

A session bundles one generated layout with its timeline. Sessions are never
patched: every load or resize builds a fresh one that replaces the previous.
Frame callbacks always read the controller's current session, so a callback
chain started before a resize converges onto the new state on its next tick.
"""

import abc
import logging
import random
from dataclasses import dataclass

from flourish.config import Config
from flourish.layout import generate_edge_network, generate_hero_network
from flourish.models import EdgeNetworkLayout, HeroNetworkLayout
from flourish.page import PageGeometry
from flourish.render import Canvas, draw_edge_frame, draw_hero_frame
from flourish.stages import build_stages
from flourish.timeline import AnimationState, FrameState, Timeline

logger = logging.getLogger(__name__)


@dataclass
class AnimationSession:
    layout: EdgeNetworkLayout | HeroNetworkLayout
    timeline: Timeline
    page: PageGeometry
    generation: int


class NetworkAnimation(abc.ABC):
    """One decorative network bound to one canvas."""

    kind: str = ""

    def __init__(
        self,
        config: Config | None = None,
        canvas: Canvas | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or Config()
        self.canvas = canvas or Canvas(0, 0, background=self.config.render.background)
        self.rng = rng or random.Random()
        self.session: AnimationSession | None = None
        self.generation = 0

    @property
    @abc.abstractmethod
    def duration_ms(self) -> float: ...

    @property
    @abc.abstractmethod
    def resize_delay_ms(self) -> float: ...

    @abc.abstractmethod
    def required_elements(self) -> tuple[str, ...]:
        """Element ids the page must contain for this animation to run."""
        ...

    @abc.abstractmethod
    def canvas_size(self, page: PageGeometry) -> tuple[float, float]: ...

    @abc.abstractmethod
    def build_layout(self, page: PageGeometry) -> EdgeNetworkLayout | HeroNetworkLayout: ...

    @abc.abstractmethod
    def draw(self, progress: float) -> object:
        """Clear the canvas and draw the current session at ``progress``."""
        ...

    def setup(self, page: PageGeometry) -> AnimationSession | None:
        """Measure the page and start a new session, replacing any old one.

        Returns None, without touching the canvas, when the page lacks the
        elements this animation decorates.
        """
        missing = [e for e in self.required_elements() if not page.has(e)]
        if missing:
            logger.debug("%s network: page has no %s, skipping", self.kind, ", ".join(missing))
            self.session = None
            return None

        width, height = self.canvas_size(page)
        self.canvas.resize(width, height, page.device_pixel_ratio)
        self.generation += 1
        self.session = AnimationSession(
            layout=self.build_layout(page),
            timeline=Timeline(self.duration_ms),
            page=page,
            generation=self.generation,
        )
        logger.info(
            "%s network: session %d at %.0fx%.0f (dpr %s)",
            self.kind, self.generation, width, height, page.device_pixel_ratio,
        )
        return self.session

    def frame(self, now: float) -> bool:
        """Frame callback. Returns True when another frame should be requested."""
        if self.session is None:
            return False
        state, more = self.step(now)
        self.draw(state.progress)
        if not more:
            # Terminal frame, in case the last tick landed short of 1.
            self.draw(1.0)
        return more

    def step(self, now: float) -> tuple[FrameState, bool]:
        if self.session is None:
            return FrameState(0.0, AnimationState.IDLE, 0.0), False
        return self.session.timeline.step(now)

    @property
    def state(self) -> AnimationState:
        if self.session is None:
            return AnimationState.IDLE
        return self.session.timeline.state


class EdgeNetworkAnimation(NetworkAnimation):
    kind = "edge"

    def __init__(
        self,
        config: Config | None = None,
        canvas: Canvas | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(config, canvas, rng)
        self.stages = build_stages(self.config.edge.stage_boundaries)

    @property
    def duration_ms(self) -> float:
        return self.config.edge.duration_ms

    @property
    def resize_delay_ms(self) -> float:
        return self.config.edge.resize_delay_ms

    def required_elements(self) -> tuple[str, ...]:
        return (self.config.edge.canvas_id,)

    def canvas_size(self, page: PageGeometry) -> tuple[float, float]:
        # Full-window overlay
        return page.width, page.height

    def build_layout(self, page: PageGeometry) -> EdgeNetworkLayout:
        return generate_edge_network(page.width, page.height, self.config.edge, self.rng)

    def draw(self, progress: float) -> object:
        if self.session is None:
            return None
        return draw_edge_frame(
            self.canvas,
            self.session.layout,
            progress,
            self.stages,
            self.config.edge,
            self.config.render.gradient_segments,
        )


class HeroNetworkAnimation(NetworkAnimation):
    kind = "hero"

    @property
    def duration_ms(self) -> float:
        return self.config.hero.duration_ms

    @property
    def resize_delay_ms(self) -> float:
        return self.config.hero.resize_delay_ms

    def required_elements(self) -> tuple[str, ...]:
        h = self.config.hero
        return (h.container_id, h.title_id, h.quote_id, h.canvas_id)

    def canvas_size(self, page: PageGeometry) -> tuple[float, float]:
        container = page.rect(self.config.hero.container_id)
        return container.width, container.height

    def build_layout(self, page: PageGeometry) -> HeroNetworkLayout:
        h = self.config.hero
        return generate_hero_network(
            page.rect(h.container_id), page.rect(h.title_id), page.rect(h.quote_id), h, self.rng,
        )

    def draw(self, progress: float) -> object:
        if self.session is None:
            return None
        return draw_hero_frame(self.canvas, self.session.layout, progress, self.config.hero)


ANIMATIONS: dict[str, type[NetworkAnimation]] = {
    "edge": EdgeNetworkAnimation,
    "hero": HeroNetworkAnimation,
}


def make_animation(
    kind: str,
    config: Config | None = None,
    canvas: Canvas | None = None,
    rng: random.Random | None = None,
) -> NetworkAnimation:
    try:
        cls = ANIMATIONS[kind]
    except KeyError:
        raise ValueError(f"Unknown network {kind!r}, expected one of {sorted(ANIMATIONS)}") from None
    return cls(config, canvas, rng)


class LifecycleController:
    """Reacts to page load and resize by rebuilding the animation session.

    Rebuilds wait ``resize_delay_ms`` so layout can settle; a newer event
    replaces a pending one. Completed rebuilds ask the caller to request a
    fresh frame; earlier callback chains are left running.
    """

    def __init__(self, animation: NetworkAnimation) -> None:
        self.animation = animation
        self._pending: tuple[float, PageGeometry] | None = None

    def on_load(self, now: float, page: PageGeometry) -> bool:
        return self._schedule(now, page)

    def on_resize(self, now: float, page: PageGeometry) -> bool:
        return self._schedule(now, page)

    def _schedule(self, now: float, page: PageGeometry) -> bool:
        self._pending = (now + self.animation.resize_delay_ms, page)
        return self.poll(now)

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def poll(self, now: float) -> bool:
        """Run a due rebuild. Returns True if a new frame chain should start."""
        if self._pending is None or now < self._pending[0]:
            return False
        _, page = self._pending
        self._pending = None
        return self.animation.setup(page) is not None
