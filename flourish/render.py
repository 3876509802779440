"""Frame rendering onto a Pillow-backed canvas.

Coordinates passed to the canvas are CSS pixels; the canvas scales them by
the device pixel ratio into its backing image. Every frame is a full clear
followed by a full redraw, so rendering the same state twice gives identical
pixels.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from PIL import Image, ImageColor, ImageDraw

from flourish.config import EdgeNetworkConfig, HeroNetworkConfig
from flourish.models import EdgeNetworkLayout, HeroNetworkLayout, HeroNode, LayerRank, Node
from flourish.stages import Stage, clamp, ease_out_quad, lerp, stage_progress

Point = tuple[float, float]
RGBA = tuple[int, int, int, int]


def _rgba(color: str | tuple[int, int, int], alpha: float) -> RGBA:
    if isinstance(color, str):
        r, g, b = ImageColor.getrgb(color)[:3]
    else:
        r, g, b = color
    return (r, g, b, round(clamp(alpha) * 255))


class Canvas:
    """An RGBA backing store with a CSS-pixel drawing transform."""

    def __init__(
        self,
        width: float,
        height: float,
        dpr: float = 1.0,
        background: RGBA = (0, 0, 0, 0),
    ) -> None:
        self.background = background
        self.resize(width, height, dpr)

    def resize(self, width: float, height: float, dpr: float = 1.0) -> None:
        """Reset the backing resolution. Drops whatever was drawn."""
        self.width = width
        self.height = height
        self.dpr = dpr or 1.0
        size = (max(0, round(width * self.dpr)), max(0, round(height * self.dpr)))
        self.image = Image.new("RGBA", size, self.background)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def _px(self, p: Point) -> Point:
        return (p[0] * self.dpr, p[1] * self.dpr)

    @property
    def empty(self) -> bool:
        return self.image.width == 0 or self.image.height == 0

    def clear(self) -> None:
        if self.empty:
            return
        self.image.paste(self.background, (0, 0, *self.image.size))

    @contextmanager
    def _group(self) -> Iterator[ImageDraw.ImageDraw]:
        # Shapes within a group share one overlay, composited onto the canvas
        # when the group closes.
        overlay = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        yield ImageDraw.Draw(overlay)
        self.image.alpha_composite(overlay)

    def fill_circles(
        self, centers: list[Point], radius: float, color: str, alpha: float = 1.0
    ) -> None:
        if alpha <= 0 or not centers or self.empty:
            return
        fill = _rgba(color, alpha)
        r = radius * self.dpr
        with self._group() as draw:
            for c in centers:
                x, y = self._px(c)
                draw.ellipse((x - r, y - r, x + r, y + r), fill=fill)

    def stroke_lines(
        self, segments: list[tuple[Point, Point]], width: float, color: str, alpha: float = 1.0
    ) -> None:
        if alpha <= 0 or not segments or self.empty:
            return
        fill = _rgba(color, alpha)
        w = max(1, round(width * self.dpr))
        with self._group() as draw:
            for a, b in segments:
                draw.line([self._px(a), self._px(b)], fill=fill, width=w)

    def stroke_gradient_lines(
        self,
        segments: list[tuple[Point, Point]],
        width: float,
        rgb: tuple[int, int, int],
        alpha_from: float,
        alpha_to: float,
        steps: int = 12,
    ) -> None:
        """Stroke lines whose opacity runs linearly from one end to the other.

        The two-stop gradient is approximated by ``steps`` sub-segments, each
        drawn at the opacity of its midpoint.
        """
        if (alpha_from <= 0 and alpha_to <= 0) or not segments or self.empty:
            return
        w = max(1, round(width * self.dpr))
        steps = max(1, steps)
        with self._group() as draw:
            for a, b in segments:
                ax, ay = self._px(a)
                bx, by = self._px(b)
                for k in range(steps):
                    t0, t1 = k / steps, (k + 1) / steps
                    alpha = lerp(alpha_from, alpha_to, (t0 + t1) / 2)
                    draw.line(
                        [(lerp(ax, bx, t0), lerp(ay, by, t0)), (lerp(ax, bx, t1), lerp(ay, by, t1))],
                        fill=_rgba(rgb, alpha),
                        width=w,
                    )

    def snapshot(self) -> Image.Image:
        return self.image.copy()


# --- Edge network ---


@dataclass(frozen=True)
class EdgeFrame:
    """Visual state of the edge network at one instant."""

    dot_alpha: dict[LayerRank, float]
    lines12: float
    lines23: float


def edge_frame_state(
    progress: float, layout: EdgeNetworkLayout, stages: dict[str, Stage]
) -> EdgeFrame:
    local = stage_progress(clamp(progress), stages)
    max_alpha = {rank: layout.left[rank].max_alpha for rank in LayerRank}
    return EdgeFrame(
        dot_alpha={
            LayerRank.OUTER: local["dots1"] * max_alpha[LayerRank.OUTER],
            LayerRank.MIDDLE: local["dots2"] * max_alpha[LayerRank.MIDDLE],
            LayerRank.INNER: local["dots3"] * max_alpha[LayerRank.INNER],
        },
        lines12=local["lines12"],
        lines23=local["lines23"],
    )


def partial_segment(source: Node, target: Node, progress: float) -> tuple[Point, Point]:
    """Segment from source toward target, cut at ``progress`` of its length."""
    t = clamp(progress)
    tip = (lerp(source.x, target.x, t), lerp(source.y, target.y, t))
    return (source.x, source.y), tip


def _draw_links(
    canvas: Canvas,
    edges: list,
    progress: float,
    alpha_from: float,
    alpha_to: float,
    config: EdgeNetworkConfig,
    gradient_steps: int,
) -> None:
    if progress <= 0:
        return
    canvas.stroke_gradient_lines(
        [partial_segment(e.source, e.target, progress) for e in edges],
        config.line_width,
        config.line_color,
        alpha_from,
        alpha_to,
        gradient_steps,
    )


def draw_edge_frame(
    canvas: Canvas,
    layout: EdgeNetworkLayout,
    progress: float,
    stages: dict[str, Stage],
    config: EdgeNetworkConfig | None = None,
    gradient_steps: int = 12,
) -> EdgeFrame:
    """Clear and redraw the edge network, back to front."""
    config = config or EdgeNetworkConfig()
    frame = edge_frame_state(progress, layout, stages)
    max_alpha = {rank: layout.left[rank].max_alpha for rank in LayerRank}

    def dots(rank: LayerRank) -> None:
        points = [(n.x, n.y) for n in layout.layer_nodes(rank)]
        canvas.fill_circles(points, config.dot_radius, config.dot_color, frame.dot_alpha[rank])

    canvas.clear()
    dots(LayerRank.OUTER)
    dots(LayerRank.MIDDLE)
    _draw_links(
        canvas, layout.lines12, frame.lines12,
        max_alpha[LayerRank.OUTER], max_alpha[LayerRank.MIDDLE], config, gradient_steps,
    )
    dots(LayerRank.INNER)
    _draw_links(
        canvas, layout.lines23, frame.lines23,
        max_alpha[LayerRank.MIDDLE], max_alpha[LayerRank.INNER], config, gradient_steps,
    )
    return frame


# --- Hero network ---


@dataclass(frozen=True)
class HeroFrame:
    positions: dict[HeroNode, Point]
    alpha: float


def hero_frame_state(
    progress: float, layout: HeroNetworkLayout, config: HeroNetworkConfig
) -> HeroFrame:
    t = clamp(progress)
    eased = ease_out_quad(t)
    # Opacity fades on linear time, position moves on eased time.
    return HeroFrame(
        positions={node: node.position(eased) for node in layout.nodes},
        alpha=lerp(config.alpha_start, config.alpha_end, t),
    )


def draw_hero_frame(
    canvas: Canvas,
    layout: HeroNetworkLayout,
    progress: float,
    config: HeroNetworkConfig | None = None,
) -> HeroFrame:
    """Clear and redraw the hero network: all links first, then all nodes."""
    config = config or HeroNetworkConfig()
    frame = hero_frame_state(progress, layout, config)
    pos = frame.positions

    canvas.clear()
    canvas.stroke_lines(
        [(pos[e.source], pos[e.target]) for e in layout.edges],
        config.line_width,
        config.line_color,
        frame.alpha,
    )
    canvas.fill_circles(list(pos.values()), config.node_radius, config.node_color, frame.alpha)
    return frame
