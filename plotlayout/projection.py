from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Protocol

import numpy as np

from plotlayout.errors import DomainError
from plotlayout.geometry import AffineTransformation, BoundingBox, Point


class Projection(Protocol):
    @property
    def xflipped(self) -> bool:
        ...

    @property
    def yflipped(self) -> bool:
        ...

    def project(self, x: Any, y: Any) -> tuple[Any, Any]:
        ...

    def project_point(self, p: Point | tuple[float, float]) -> Point:
        ...


def _log10(value: Any, axis: str) -> Any:
    # NaN marks a gap in a series and passes through unchanged
    if np.ndim(value) == 0:
        v = float(value)
        if math.isnan(v):
            return v
        if not v > 0:
            raise DomainError(f"{axis} must be > 0 on a log axis, got {v!r}")
        return float(np.log10(v))
    arr = np.asarray(value, dtype=np.float64)
    bad = ~np.isnan(arr) & ~(arr > 0)
    if np.any(bad):
        raise DomainError(f"{axis} must be > 0 on a log axis, got {arr[bad][0]!r}")
    return np.log10(arr)


@dataclass(frozen=True)
class LogAwareProjection:
    aff: AffineTransformation
    dest: BoundingBox
    xlog: bool = False
    ylog: bool = False

    @classmethod
    def from_limits(
        cls,
        x0: float,
        x1: float,
        y0: float,
        y1: float,
        dest: BoundingBox,
        xlog: bool = False,
        ylog: bool = False,
    ) -> LogAwareProjection:
        if xlog:
            x0 = _log10(x0, "x")
            x1 = _log10(x1, "x")
        if ylog:
            y0 = _log10(y0, "y")
            y1 = _log10(y1, "y")
        return cls(
            aff=AffineTransformation.from_rect(x0, x1, y0, y1, dest),
            dest=dest,
            xlog=bool(xlog),
            ylog=bool(ylog),
        )

    @property
    def xflipped(self) -> bool:
        return self.aff.xflipped

    @property
    def yflipped(self) -> bool:
        return self.aff.yflipped

    def project(self, x: Any, y: Any) -> tuple[Any, Any]:
        u = _log10(x, "x") if self.xlog else x
        v = _log10(y, "y") if self.ylog else y
        return self.aff.project(u, v)

    def project_point(self, p: Point | tuple[float, float]) -> Point:
        u, v = self.project(p[0], p[1])
        return Point(u, v)


@dataclass(frozen=True)
class ComposedProjection:
    outer: Projection
    inner: Projection

    @property
    def xflipped(self) -> bool:
        return self.outer.xflipped != self.inner.xflipped

    @property
    def yflipped(self) -> bool:
        return self.outer.yflipped != self.inner.yflipped

    def project(self, x: Any, y: Any) -> tuple[Any, Any]:
        u, v = self.inner.project(x, y)
        return self.outer.project(u, v)

    def project_point(self, p: Point | tuple[float, float]) -> Point:
        u, v = self.project(p[0], p[1])
        return Point(u, v)


def compose(outer: Projection, inner: Projection) -> Projection:
    """Projection equal to ``outer.project(*inner.project(x, y))``."""
    if isinstance(outer, AffineTransformation) and isinstance(inner, AffineTransformation):
        return outer.compose(inner)
    return ComposedProjection(outer=outer, inner=inner)


def plot_fraction_projection(dest: BoundingBox) -> AffineTransformation:
    return AffineTransformation.from_rect(0.0, 1.0, 0.0, 1.0, dest)
