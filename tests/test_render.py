"""Tests for the canvas surface and the two frame renderers."""

import math

import pytest

from flourish.config import EdgeNetworkConfig, HeroNetworkConfig
from flourish.models import HeroNetworkLayout, HeroNode, LayerRank, Node, Rect, Edge
from flourish.render import (
    Canvas,
    draw_edge_frame,
    draw_hero_frame,
    edge_frame_state,
    hero_frame_state,
    partial_segment,
)


def _alpha(canvas: Canvas, x: float, y: float) -> int:
    px = canvas.image.getpixel((round(x * canvas.dpr), round(y * canvas.dpr)))
    return px[3]


class TestCanvas:
    def test_backing_store_scales_with_dpr(self):
        canvas = Canvas(300, 200, dpr=2)
        assert canvas.size == (600, 400)
        assert canvas.width == 300

    def test_resize_resets_content(self):
        canvas = Canvas(100, 100)
        canvas.fill_circles([(50, 50)], 5, "#ffffff")
        canvas.resize(80, 60, 1.5)
        assert canvas.size == (120, 90)
        assert canvas.image.getextrema()[3] == (0, 0)

    def test_clear_restores_background(self):
        canvas = Canvas(50, 50)
        canvas.stroke_lines([((0, 0), (50, 50))], 2, "#ffffff")
        assert canvas.image.getextrema()[3][1] > 0
        canvas.clear()
        assert canvas.image.getextrema()[3] == (0, 0)

    def test_circle_drawn_at_css_coordinates(self):
        canvas = Canvas(100, 100, dpr=2)
        canvas.fill_circles([(25, 25)], 3, "#f9fafb", alpha=1.0)
        assert canvas.image.getpixel((50, 50)) == (249, 250, 251, 255)
        assert _alpha(canvas, 75, 75) == 0

    def test_zero_alpha_draws_nothing(self):
        canvas = Canvas(50, 50)
        canvas.fill_circles([(25, 25)], 5, "#ffffff", alpha=0)
        canvas.stroke_gradient_lines([((0, 0), (50, 50))], 1, (255, 255, 255), 0, 0)
        assert canvas.image.getextrema()[3] == (0, 0)

    def test_gradient_runs_from_source_to_tip(self):
        canvas = Canvas(200, 20)
        canvas.stroke_gradient_lines([((0, 10), (200, 10))], 4, (229, 231, 235), 0.9, 0.1, steps=10)
        near = _alpha(canvas, 5, 10)
        far = _alpha(canvas, 195, 10)
        assert near > far > 0

    def test_zero_size_canvas_is_harmless(self):
        canvas = Canvas(0, 0)
        canvas.clear()
        canvas.fill_circles([(1, 1)], 3, "#ffffff")
        assert canvas.size == (0, 0)


class TestEdgeFrame:
    def test_state_at_point_four(self, edge_layout, edge_stages):
        frame = edge_frame_state(0.4, edge_layout, edge_stages)
        assert frame.dot_alpha[LayerRank.OUTER] == pytest.approx(0.9)
        assert frame.dot_alpha[LayerRank.MIDDLE] == pytest.approx(0.6)
        assert frame.dot_alpha[LayerRank.INNER] == 0.0
        assert frame.lines12 == 0.0
        assert frame.lines23 == 0.0

    def test_state_is_bounded_for_wild_progress(self, edge_layout, edge_stages):
        for p in (-10.0, -0.1, 1.1, 50.0, math.inf):
            frame = edge_frame_state(p, edge_layout, edge_stages)
            for rank in LayerRank:
                assert 0.0 <= frame.dot_alpha[rank] <= edge_layout.left[rank].max_alpha
            assert 0.0 <= frame.lines12 <= 1.0
            assert 0.0 <= frame.lines23 <= 1.0

    def test_partial_segment_grows_toward_target(self):
        a, b = Node(0, 0), Node(100, 50)
        assert partial_segment(a, b, 0.5) == ((0, 0), (50, 25))
        assert partial_segment(a, b, 2.0) == ((0, 0), (100, 50))
        assert partial_segment(a, b, -1.0) == ((0, 0), (0, 0))

    def test_blank_at_start(self, edge_layout, edge_stages):
        canvas = Canvas(1200, 800)
        draw_edge_frame(canvas, edge_layout, 0.0, edge_stages, EdgeNetworkConfig(), 4)
        assert canvas.image.getextrema()[3] == (0, 0)

    def test_layers_appear_in_order(self, edge_layout, edge_stages):
        canvas = Canvas(1200, 800)
        outer = edge_layout.left[LayerRank.OUTER].nodes[3]
        inner = edge_layout.left[LayerRank.INNER].nodes[3]

        draw_edge_frame(canvas, edge_layout, 0.4, edge_stages, EdgeNetworkConfig(), 4)
        assert _alpha(canvas, outer.x, outer.y) == round(0.9 * 255)
        assert _alpha(canvas, inner.x, inner.y) == 0

        draw_edge_frame(canvas, edge_layout, 1.0, edge_stages, EdgeNetworkConfig(), 4)
        assert _alpha(canvas, inner.x, inner.y) > 0

    def test_middle_of_page_stays_empty(self, edge_layout, edge_stages):
        canvas = Canvas(1200, 800)
        draw_edge_frame(canvas, edge_layout, 1.0, edge_stages, EdgeNetworkConfig(), 4)
        assert _alpha(canvas, 600, 400) == 0

    def test_terminal_frame_is_idempotent(self, edge_layout, edge_stages):
        canvas = Canvas(600, 400, dpr=2)
        draw_edge_frame(canvas, edge_layout, 1.0, edge_stages)
        first = canvas.snapshot().tobytes()
        draw_edge_frame(canvas, edge_layout, 1.0, edge_stages)
        assert canvas.snapshot().tobytes() == first


class TestHeroFrame:
    def test_position_example(self):
        node = HeroNode(-200, 300, 50, 300)
        assert node.position(0.5) == (-75, 300)

    def test_state_uses_eased_position_and_linear_alpha(self):
        node = HeroNode(-200, 300, 50, 300)
        layout = HeroNetworkLayout(width=400, height=400, content=Rect(100, 100, 300, 300), nodes=[node])
        t = 1 - math.sqrt(0.5)  # eases to 0.5
        frame = hero_frame_state(t, layout, HeroNetworkConfig())
        assert frame.positions[node] == (pytest.approx(-75), 300)
        assert frame.alpha == pytest.approx(0.8 * (1 - t) + 0.2 * t)

    def test_alpha_endpoints_and_bounds(self, hero_layout):
        config = HeroNetworkConfig()
        assert hero_frame_state(0.0, hero_layout, config).alpha == pytest.approx(0.8)
        assert hero_frame_state(1.0, hero_layout, config).alpha == pytest.approx(0.2)
        assert hero_frame_state(7.0, hero_layout, config).alpha == pytest.approx(0.2)
        assert hero_frame_state(-3.0, hero_layout, config).alpha == pytest.approx(0.8)

    def test_settled_positions_are_end_points(self, hero_layout):
        frame = hero_frame_state(1.0, hero_layout, HeroNetworkConfig())
        for node in hero_layout.nodes:
            assert frame.positions[node] == (pytest.approx(node.end_x), pytest.approx(node.end_y))

    def test_nodes_start_off_canvas(self, hero_layout):
        canvas = Canvas(hero_layout.width, hero_layout.height)
        draw_hero_frame(canvas, hero_layout, 0.0)
        # Only links that cross the viewport can be visible; no node is.
        frame = hero_frame_state(0.0, hero_layout, HeroNetworkConfig())
        for x, _ in frame.positions.values():
            assert x < 0 or x > hero_layout.width

    def test_draws_links_between_settled_nodes(self):
        a, b = HeroNode(-50, 10, 10, 10), HeroNode(150, 10, 90, 10)
        layout = HeroNetworkLayout(
            width=100, height=20, content=Rect(20, 0, 80, 20), nodes=[a, b], edges=[Edge(a, b)],
        )
        canvas = Canvas(100, 20)
        draw_hero_frame(canvas, layout, 1.0)
        assert _alpha(canvas, 50, 10) == round(0.2 * 255)
        assert _alpha(canvas, 10, 10) > 0

    def test_terminal_frame_is_idempotent(self, hero_layout):
        canvas = Canvas(hero_layout.width, hero_layout.height)
        draw_hero_frame(canvas, hero_layout, 1.0)
        first = canvas.snapshot().tobytes()
        draw_hero_frame(canvas, hero_layout, 1.0)
        assert canvas.snapshot().tobytes() == first
