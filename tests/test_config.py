"""Tests for config and page geometry loading."""

import pytest
from pydantic import ValidationError

from flourish.config import Config, EdgeNetworkConfig, HeroNetworkConfig, load_config
from flourish.models import Rect
from flourish.page import load_page


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.yaml")
        assert config == Config()
        assert config.edge.num_nodes == 8
        assert config.edge.duration_ms == 10_000
        assert config.hero.nodes_per_side == 16
        assert config.hero.resize_delay_ms == 200

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "edge:\n"
            "  num_nodes: 5\n"
            "  layer_alphas: [1.0, 0.5, 0.25]\n"
            "hero:\n"
            "  duration_ms: 2500\n"
            "render:\n"
            "  fps: 24\n"
        )
        config = load_config(path)
        assert config.edge.num_nodes == 5
        assert config.edge.layer_alphas == (1.0, 0.5, 0.25)
        assert config.hero.duration_ms == 2500
        assert config.render.fps == 24
        assert config.edge.duration_ms == 10_000

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == Config()

    def test_relative_output_dir_resolves_under_project(self):
        config = Config()
        assert config.resolved_output_dir.name == "output"
        assert config.resolved_output_dir.is_absolute()


class TestValidation:
    def test_non_monotonic_stages_rejected(self):
        with pytest.raises(ValidationError):
            EdgeNetworkConfig(stage_boundaries=[0.0, 0.5, 0.4, 0.7, 0.8, 1.0])

    def test_wrong_stage_count_rejected(self):
        with pytest.raises(ValidationError):
            EdgeNetworkConfig(stage_boundaries=[0.0, 0.5, 1.0])

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            EdgeNetworkConfig(duration_ms=0)
        with pytest.raises(ValidationError):
            HeroNetworkConfig(duration_ms=-5)

    def test_single_row_rejected(self):
        with pytest.raises(ValidationError):
            EdgeNetworkConfig(num_nodes=1)

    def test_offscreen_range_ordered(self):
        with pytest.raises(ValidationError):
            HeroNetworkConfig(offscreen_min=0.5, offscreen_max=0.1)


class TestLoadPage:
    def test_yaml_page(self, tmp_path):
        path = tmp_path / "page.yaml"
        path.write_text(
            "width: 1440\n"
            "height: 900\n"
            "device_pixel_ratio: 2\n"
            "elements:\n"
            "  hero: {left: 0, top: 64, width: 1440, height: 700}\n"
            "  heroTitle: {left: 420, top: 300, width: 600, height: 90}\n"
        )
        page = load_page(path)
        assert page.device_pixel_ratio == 2
        assert page.has("hero", "heroTitle")
        assert not page.has("heroQuote")
        assert page.rect("hero") == Rect(0, 64, 1440, 764)

    def test_missing_page_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_page(tmp_path / "missing.yaml")
