"""Host page geometry: viewport size, pixel ratio and element boxes."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from flourish.config import Config
from flourish.models import Rect


class ElementBox(BaseModel):
    """Bounding box of a page element in viewport CSS pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.left, self.top, self.left + self.width, self.top + self.height)


class PageGeometry(BaseModel):
    width: float
    height: float
    device_pixel_ratio: float = 1.0
    elements: dict[str, ElementBox] = Field(default_factory=dict)

    def has(self, *element_ids: str) -> bool:
        return all(e in self.elements for e in element_ids)

    def rect(self, element_id: str) -> Rect | None:
        box = self.elements.get(element_id)
        return box.rect if box else None


def default_page(
    width: float,
    height: float,
    dpr: float = 1.0,
    config: Config | None = None,
) -> PageGeometry:
    """A landing page with both canvases and a centred hero title and quote.

    The hero section fills the first viewport; the title and quote are
    stacked in its middle third.
    """
    config = config or Config()
    text_w = width / 3
    text_left = (width - text_w) / 2
    title_h = height * 0.12
    quote_h = height * 0.08
    title_top = height / 2 - (title_h + quote_h) / 2
    return PageGeometry(
        width=width,
        height=height,
        device_pixel_ratio=dpr,
        elements={
            config.edge.canvas_id: ElementBox(left=0, top=0, width=width, height=height),
            config.hero.container_id: ElementBox(left=0, top=0, width=width, height=height),
            config.hero.canvas_id: ElementBox(left=0, top=0, width=width, height=height),
            config.hero.title_id: ElementBox(
                left=text_left, top=title_top, width=text_w, height=title_h,
            ),
            config.hero.quote_id: ElementBox(
                left=text_left + text_w * 0.1, top=title_top + title_h,
                width=text_w * 0.8, height=quote_h,
            ),
        },
    )


def load_page(path: Path) -> PageGeometry:
    """Load page geometry from a YAML document."""
    raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
    return PageGeometry(**raw)
