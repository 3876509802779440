"""Geometry and layout data structures for flourish."""

from dataclasses import dataclass, field
from enum import Enum


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class LayerRank(int, Enum):
    OUTER = 1
    MIDDLE = 2
    INNER = 3


# --- Geometry ---


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in CSS pixels, same shape as a DOMRect."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            left=min(self.left, other.left),
            top=min(self.top, other.top),
            right=max(self.right, other.right),
            bottom=max(self.bottom, other.bottom),
        )

    def relative_to(self, origin: "Rect") -> "Rect":
        """Translate into the coordinate space whose top-left is origin's."""
        return Rect(
            left=self.left - origin.left,
            top=self.top - origin.top,
            right=self.right - origin.left,
            bottom=self.bottom - origin.top,
        )


# --- Graph elements ---
# Nodes compare and hash by identity so edges can reference them structurally.


@dataclass(eq=False)
class Node:
    x: float
    y: float


@dataclass(eq=False)
class HeroNode:
    """A particle that travels from an off-screen origin to its resting spot."""

    start_x: float
    start_y: float
    end_x: float
    end_y: float

    def position(self, eased: float) -> tuple[float, float]:
        x = self.start_x + (self.end_x - self.start_x) * eased
        y = self.start_y + (self.end_y - self.start_y) * eased
        return x, y


@dataclass(frozen=True)
class Edge:
    """Connection between two nodes. Direction only orients the gradient."""

    source: Node | HeroNode
    target: Node | HeroNode


# --- Layouts ---


@dataclass
class Layer:
    rank: LayerRank
    nodes: list[Node]
    max_alpha: float


@dataclass
class LayerSet:
    """Outer, middle and inner layers for one side of the page."""

    side: Side
    layers: dict[LayerRank, Layer]

    def __getitem__(self, rank: LayerRank) -> Layer:
        return self.layers[rank]


@dataclass
class EdgeNetworkLayout:
    width: float
    height: float
    left: LayerSet
    right: LayerSet
    lines12: list[Edge] = field(default_factory=list)
    lines23: list[Edge] = field(default_factory=list)

    @property
    def sides(self) -> tuple[LayerSet, LayerSet]:
        return self.left, self.right

    def layer_nodes(self, rank: LayerRank) -> list[Node]:
        """Nodes of one rank across both sides (they animate in lockstep)."""
        return self.left[rank].nodes + self.right[rank].nodes

    def nodes(self) -> list[Node]:
        return [n for s in self.sides for layer in s.layers.values() for n in layer.nodes]


@dataclass
class HeroNetworkLayout:
    width: float
    height: float
    content: Rect  # union of the title and quote boxes, container-relative
    nodes: list[HeroNode] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
