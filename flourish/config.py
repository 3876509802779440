"""Configuration loading for flourish."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from flourish.stages import check_boundaries


class EdgeNetworkConfig(BaseModel):
    num_nodes: int = 8
    duration_ms: float = 10_000
    margin_y: float = 40
    band_fraction: float = 1 / 6  # share of viewport width each side occupies
    layer_offsets: tuple[float, float, float] = (0.3, 0.6, 0.9)
    # outer -> inner; decreasing so the eye reads depth
    layer_alphas: tuple[float, float, float] = (0.9, 0.6, 0.35)
    # dots-1, dots-2, lines-1->2, dots-3, lines-2->3
    stage_boundaries: list[float] = Field(default_factory=lambda: [0.0, 0.2, 0.4, 0.7, 0.8, 1.0])
    max_links: int = 3
    dot_radius: float = 3
    dot_color: str = "#f9fafb"
    line_width: float = 1.2
    line_color: tuple[int, int, int] = (229, 231, 235)
    canvas_id: str = "edgeNetwork"
    resize_delay_ms: float = 0

    @field_validator("duration_ms")
    @classmethod
    def _positive_duration(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("duration_ms must be positive")
        return v

    @field_validator("stage_boundaries")
    @classmethod
    def _five_stages(cls, v: list[float]) -> list[float]:
        if len(v) != 6:
            raise ValueError("edge network needs 6 stage boundaries (5 stages)")
        check_boundaries(v)
        return v

    @field_validator("num_nodes")
    @classmethod
    def _enough_rows(cls, v: int) -> int:
        if v < 2:
            raise ValueError("num_nodes must be at least 2")
        return v


class HeroNetworkConfig(BaseModel):
    nodes_per_side: int = 16
    duration_ms: float = 5_000
    margin: float = 32  # how far from the text block edges nodes stop
    offscreen_min: float = 0.2  # start offset range, as a share of container width
    offscreen_max: float = 0.4
    offscreen_pad: float = 40
    max_step: int = 3
    alpha_start: float = 0.8
    alpha_end: float = 0.2
    node_radius: float = 2.5
    node_color: str = "#f9fafb"
    line_width: float = 0.8
    line_color: str = "#e5e7eb"
    container_id: str = "hero"
    title_id: str = "heroTitle"
    quote_id: str = "heroQuote"
    canvas_id: str = "heroNetwork"
    resize_delay_ms: float = 200  # let fonts and layout settle before measuring

    @field_validator("duration_ms")
    @classmethod
    def _positive_duration(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("duration_ms must be positive")
        return v

    @model_validator(mode="after")
    def _offscreen_range(self) -> "HeroNetworkConfig":
        if self.offscreen_min > self.offscreen_max:
            raise ValueError("offscreen_min must not exceed offscreen_max")
        return self


class RenderConfig(BaseModel):
    fps: float = 60
    gradient_segments: int = 12
    background: tuple[int, int, int, int] = (0, 0, 0, 0)
    gif_background: tuple[int, int, int] = (15, 23, 42)
    output_dir: str = "output"


class Config(BaseModel):
    edge: EdgeNetworkConfig = Field(default_factory=EdgeNetworkConfig)
    hero: HeroNetworkConfig = Field(default_factory=HeroNetworkConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @property
    def resolved_output_dir(self) -> Path:
        """Resolve output_dir relative to project root."""
        p = Path(self.render.output_dir)
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the flourish project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
