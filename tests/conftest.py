"""Shared test fixtures for flourish tests."""

import random

import pytest

from flourish.config import Config, EdgeNetworkConfig, HeroNetworkConfig, RenderConfig
from flourish.layout import generate_edge_network, generate_hero_network
from flourish.models import Rect
from flourish.page import PageGeometry, default_page
from flourish.stages import build_stages


@pytest.fixture()
def rng():
    """Seeded random source so layouts are reproducible."""
    return random.Random(1234)


@pytest.fixture()
def config():
    return Config(
        edge=EdgeNetworkConfig(),
        hero=HeroNetworkConfig(),
        render=RenderConfig(),
    )


@pytest.fixture()
def fast_config():
    """One-second animations, immediate rebuilds apart from the hero's settle delay."""
    return Config(
        edge=EdgeNetworkConfig(duration_ms=1000),
        hero=HeroNetworkConfig(duration_ms=1000, resize_delay_ms=200),
        render=RenderConfig(gradient_segments=4),
    )


@pytest.fixture()
def page(config):
    """1200x800 landing page with every decorated element present."""
    return default_page(1200, 800, 1.0, config)


@pytest.fixture()
def small_page(config):
    return default_page(300, 200, 1.0, config)


@pytest.fixture()
def bare_page():
    """A page with none of the decorated elements."""
    return PageGeometry(width=1200, height=800)


@pytest.fixture()
def edge_stages():
    return build_stages([0.0, 0.2, 0.4, 0.7, 0.8, 1.0])


@pytest.fixture()
def edge_layout(rng):
    return generate_edge_network(1200, 800, EdgeNetworkConfig(), rng)


@pytest.fixture()
def hero_rects():
    """Container, title and quote boxes in viewport coordinates."""
    container = Rect(0, 100, 1000, 700)
    title = Rect(350, 300, 650, 380)
    quote = Rect(380, 380, 620, 440)
    return container, title, quote


@pytest.fixture()
def hero_layout(hero_rects, rng):
    container, title, quote = hero_rects
    return generate_hero_network(container, title, quote, HeroNetworkConfig(), rng)
