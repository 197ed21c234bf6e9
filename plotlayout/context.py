from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
import math
from typing import Any, Callable, Iterator, Mapping

from plotlayout.config import StyleConfig, default_config
from plotlayout.geometry import AffineTransformation, BoundingBox
from plotlayout.projection import Projection, plot_fraction_projection
from plotlayout.renderer import Renderer


def size_relative(relsize: float, bbox: BoundingBox) -> float:
    """Convert a percentage of the yardstick of `bbox` into device units."""
    w = bbox.width
    h = bbox.height
    if w + h <= 0:
        return 0.0
    yardstick = math.sqrt(8.0) * w * h / (w + h)
    return (relsize / 100.0) * yardstick


def fontsize_relative(relsize: float, bbox: BoundingBox, device_bbox: BoundingBox, fontsize_min: float = 0.0) -> float:
    return max(size_relative(relsize, bbox), size_relative(fontsize_min, device_bbox))


@dataclass(frozen=True)
class PlotContext:
    draw: Renderer
    dev_bbox: BoundingBox
    data_bbox: BoundingBox
    geom: Projection
    xlog: bool = False
    ylog: bool = False
    config: StyleConfig = field(default_factory=default_config)
    plot_geom: AffineTransformation = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "plot_geom", plot_fraction_projection(self.dev_bbox))

    @property
    def fontsize_min(self) -> float:
        return float(self.config.config_value("PlotContext", "fontsize_min", 0.0))

    def size_relative(self, relsize: float) -> float:
        return size_relative(relsize, self.dev_bbox)

    def fontsize_relative(self, relsize: float) -> float:
        return fontsize_relative(relsize, self.dev_bbox, self.draw.bbox, self.fontsize_min)

    def push_style(self, style: Mapping[str, Any] | None) -> None:
        self.draw.save_state()
        if not style:
            return
        try:
            for key, value in style.items():
                convert = _UNIT_CONVERTERS.get(key)
                self.draw.set(key, convert(self, value) if convert is not None else value)
        except Exception:
            self.draw.restore_state()
            raise

    def pop_style(self) -> None:
        self.draw.restore_state()

    @contextmanager
    def styled(self, style: Mapping[str, Any] | None) -> Iterator[PlotContext]:
        self.push_style(style)
        try:
            yield self
        finally:
            self.pop_style()


_UNIT_CONVERTERS: dict[str, Callable[[PlotContext, Any], float]] = {
    "fontsize": lambda ctx, value: ctx.fontsize_relative(float(value)),
    "linewidth": lambda ctx, value: ctx.size_relative(float(value) / 10.0),
    "symbolsize": lambda ctx, value: ctx.size_relative(float(value)),
}
