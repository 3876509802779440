"""Layout generation for the edge and hero networks.

Both generators are pure functions of geometry plus a random source. The
randomness only picks neighbours and start/end jitter; node counts and the
layer structure depend on the geometry alone.
"""

import logging
import random

from flourish.config import EdgeNetworkConfig, HeroNetworkConfig
from flourish.models import (
    Edge,
    EdgeNetworkLayout,
    HeroNetworkLayout,
    HeroNode,
    Layer,
    LayerRank,
    LayerSet,
    Node,
    Rect,
    Side,
)

logger = logging.getLogger(__name__)


# --- Edge network ---


def row_positions(height: float, num_nodes: int, margin: float) -> list[float]:
    """Evenly spaced y values between the top and bottom margins."""
    y_start = margin
    y_end = height - margin
    step = (y_end - y_start) / (num_nodes - 1)
    return [y_start + step * i for i in range(num_nodes)]


def connect_layers(
    layer_from: list[Node],
    layer_to: list[Node],
    rng: random.Random,
    max_links: int = 3,
) -> list[Edge]:
    """Link each node to 1..max_links of its row neighbours in the next layer.

    Candidates are the same row plus the rows directly above and below,
    clamped at the ends. A node whose candidate set is empty stays isolated.
    """
    edges: list[Edge] = []
    for i, source in enumerate(layer_from):
        candidates = [j for j in (i, i - 1, i + 1) if 0 <= j < len(layer_to)]
        rng.shuffle(candidates)
        count = min(rng.randint(1, max_links), len(candidates))
        for j in candidates[:count]:
            edges.append(Edge(source, layer_to[j]))
    return edges


def _build_side(
    side: Side, xs: list[float], ys: list[float], alphas: tuple[float, float, float]
) -> LayerSet:
    layers = {
        rank: Layer(rank=rank, nodes=[Node(x, y) for y in ys], max_alpha=alpha)
        for rank, x, alpha in zip(LayerRank, xs, alphas)
    }
    return LayerSet(side=side, layers=layers)


def generate_edge_network(
    width: float,
    height: float,
    config: EdgeNetworkConfig | None = None,
    rng: random.Random | None = None,
) -> EdgeNetworkLayout:
    """Build three mirrored layers per side plus the 1->2 and 2->3 links."""
    config = config or EdgeNetworkConfig()
    rng = rng or random.Random()

    band = width * config.band_fraction
    ys = row_positions(height, config.num_nodes, config.margin_y)

    left_xs = [band * f for f in config.layer_offsets]
    right_xs = [width - band * f for f in config.layer_offsets]

    left = _build_side(Side.LEFT, left_xs, ys, config.layer_alphas)
    right = _build_side(Side.RIGHT, right_xs, ys, config.layer_alphas)

    layout = EdgeNetworkLayout(width=width, height=height, left=left, right=right)
    for layers in (left, right):
        layout.lines12 += connect_layers(
            layers[LayerRank.OUTER].nodes, layers[LayerRank.MIDDLE].nodes, rng, config.max_links,
        )
        layout.lines23 += connect_layers(
            layers[LayerRank.MIDDLE].nodes, layers[LayerRank.INNER].nodes, rng, config.max_links,
        )

    logger.debug(
        "Edge network %.0fx%.0f: %d nodes, %d+%d links",
        width, height, len(layout.nodes()), len(layout.lines12), len(layout.lines23),
    )
    return layout


# --- Hero network ---


def content_box(container: Rect, title: Rect, quote: Rect) -> Rect:
    """Union of the two text boxes, relative to the container's top-left."""
    return title.union(quote).relative_to(container)


def _hero_side(
    side: Side,
    count: int,
    width: float,
    height: float,
    content: Rect,
    config: HeroNetworkConfig,
    rng: random.Random,
) -> list[HeroNode]:
    m = config.margin
    if side is Side.LEFT:
        end_x_range = (content.left - m * 1.4, content.left - m * 0.7)
    else:
        end_x_range = (content.right + m * 0.7, content.right + m * 1.4)

    nodes = []
    for _ in range(count):
        offset = rng.uniform(width * config.offscreen_min, width * config.offscreen_max)
        if side is Side.LEFT:
            start_x = -offset - config.offscreen_pad
        else:
            start_x = width + offset + config.offscreen_pad
        start_y = rng.uniform(0, height)
        end_x = rng.uniform(*end_x_range)
        end_y = rng.uniform(content.top - m, content.bottom + m)
        nodes.append(HeroNode(start_x, start_y, end_x, end_y))
    return nodes


def successor_edges(nodes: list[HeroNode], rng: random.Random, max_step: int = 3) -> list[Edge]:
    """Connect node i to node (i + step) mod n, step drawn from 1..max_step."""
    n = len(nodes)
    edges = []
    for i, node in enumerate(nodes):
        step = rng.randint(1, max_step)
        edges.append(Edge(node, nodes[(i + step) % n]))
    return edges


def generate_hero_network(
    container: Rect,
    title: Rect,
    quote: Rect,
    config: HeroNetworkConfig | None = None,
    rng: random.Random | None = None,
) -> HeroNetworkLayout:
    """Particles that fly in from both sides and settle flanking the text."""
    config = config or HeroNetworkConfig()
    rng = rng or random.Random()

    width, height = container.width, container.height
    content = content_box(container, title, quote)

    nodes = _hero_side(Side.LEFT, config.nodes_per_side, width, height, content, config, rng)
    nodes += _hero_side(Side.RIGHT, config.nodes_per_side, width, height, content, config, rng)

    layout = HeroNetworkLayout(
        width=width,
        height=height,
        content=content,
        nodes=nodes,
        edges=successor_edges(nodes, rng, config.max_step),
    )
    logger.debug("Hero network %.0fx%.0f: %d nodes around %s", width, height, len(nodes), content)
    return layout


def describe_layout(layout: EdgeNetworkLayout | HeroNetworkLayout) -> dict[str, object]:
    """JSON-ready dump of a layout; edges refer to nodes by index."""
    if isinstance(layout, EdgeNetworkLayout):
        nodes = layout.nodes()
        index = {node: i for i, node in enumerate(nodes)}
        return {
            "kind": "edge",
            "width": layout.width,
            "height": layout.height,
            "nodes": [{"x": n.x, "y": n.y} for n in nodes],
            "layers": {
                side.side.value: {
                    rank.name.lower(): [index[n] for n in layer.nodes]
                    for rank, layer in side.layers.items()
                }
                for side in layout.sides
            },
            "lines12": [[index[e.source], index[e.target]] for e in layout.lines12],
            "lines23": [[index[e.source], index[e.target]] for e in layout.lines23],
        }

    index = {node: i for i, node in enumerate(layout.nodes)}
    return {
        "kind": "hero",
        "width": layout.width,
        "height": layout.height,
        "content": {
            "left": layout.content.left,
            "top": layout.content.top,
            "right": layout.content.right,
            "bottom": layout.content.bottom,
        },
        "nodes": [
            {"start": [n.start_x, n.start_y], "end": [n.end_x, n.end_y]} for n in layout.nodes
        ],
        "edges": [[index[e.source], index[e.target]] for e in layout.edges],
    }
