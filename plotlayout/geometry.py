from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterable, Iterator

import numpy as np


INF = math.inf


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def __add__(self, other: Point | tuple[float, float]) -> Point:
        ox, oy = other
        return Point(self.x + ox, self.y + oy)

    def __sub__(self, other: Point | tuple[float, float]) -> Point:
        ox, oy = other
        return Point(self.x - ox, self.y - oy)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> Point:
        return Point(self.x / factor, self.y / factor)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def rotate(self, angle: float, pivot: Point | tuple[float, float] = (0.0, 0.0)) -> Point:
        """Rotate counter-clockwise by `angle` radians about `pivot`."""
        px, py = pivot
        c = math.cos(angle)
        s = math.sin(angle)
        dx = self.x - px
        dy = self.y - py
        return Point(px + c * dx - s * dy, py + s * dx + c * dy)


Vec2 = Point


def as_point(value: Point | tuple[float, float] | Iterable[float]) -> Point:
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in device or data space.

    An axis with no extent is stored as ``(+inf, -inf)`` so that union is a
    per-axis min/max and the empty box is its identity.
    """

    xmin: float = INF
    xmax: float = -INF
    ymin: float = INF
    ymax: float = -INF

    def __post_init__(self) -> None:
        for lo, hi, axis in ((self.xmin, self.xmax, "x"), (self.ymin, self.ymax, "y")):
            if math.isnan(lo) or math.isnan(hi):
                raise ValueError(f"{axis} bounds must not be NaN")
            if lo > hi and not (lo == INF and hi == -INF):
                raise ValueError(f"{axis}min must be <= {axis}max")

    @classmethod
    def empty(cls) -> BoundingBox:
        return cls()

    @classmethod
    def from_points(cls, *points: Point | tuple[float, float]) -> BoundingBox:
        xs = [float(p[0]) for p in points if not math.isnan(p[0])]
        ys = [float(p[1]) for p in points if not math.isnan(p[1])]
        return cls(
            xmin=min(xs, default=INF),
            xmax=max(xs, default=-INF),
            ymin=min(ys, default=INF),
            ymax=max(ys, default=-INF),
        )

    @classmethod
    def from_arrays(cls, x: Any, y: Any) -> BoundingBox:
        xa = np.asarray(x, dtype=np.float64).ravel()
        ya = np.asarray(y, dtype=np.float64).ravel()
        xa = xa[np.isfinite(xa)]
        ya = ya[np.isfinite(ya)]
        return cls(
            xmin=float(xa.min()) if xa.size else INF,
            xmax=float(xa.max()) if xa.size else -INF,
            ymin=float(ya.min()) if ya.size else INF,
            ymax=float(ya.max()) if ya.size else -INF,
        )

    @property
    def is_empty(self) -> bool:
        return self.xmin > self.xmax or self.ymin > self.ymax

    @property
    def width(self) -> float:
        return self.xmax - self.xmin if self.xmin <= self.xmax else 0.0

    @property
    def height(self) -> float:
        return self.ymax - self.ymin if self.ymin <= self.ymax else 0.0

    @property
    def center(self) -> Point:
        return Point(0.5 * (self.xmin + self.xmax), 0.5 * (self.ymin + self.ymax))

    @property
    def lowerleft(self) -> Point:
        return Point(self.xmin, self.ymin)

    @property
    def lowerright(self) -> Point:
        return Point(self.xmax, self.ymin)

    @property
    def upperleft(self) -> Point:
        return Point(self.xmin, self.ymax)

    @property
    def upperright(self) -> Point:
        return Point(self.xmax, self.ymax)

    def xrange(self) -> tuple[float, float]:
        return (self.xmin, self.xmax)

    def yrange(self) -> tuple[float, float]:
        return (self.ymin, self.ymax)

    def union(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox(
            xmin=min(self.xmin, other.xmin),
            xmax=max(self.xmax, other.xmax),
            ymin=min(self.ymin, other.ymin),
            ymax=max(self.ymax, other.ymax),
        )

    def __add__(self, other: BoundingBox) -> BoundingBox:
        return self.union(other)

    def contains(self, x: float, y: float) -> bool:
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax

    def diagonal(self) -> float:
        if self.is_empty:
            return 0.0
        return math.hypot(self.width, self.height)

    def scale(self, factor: float) -> BoundingBox:
        if self.is_empty:
            return self
        c = self.center
        hw = 0.5 * factor * self.width
        hh = 0.5 * factor * self.height
        return BoundingBox(c.x - hw, c.x + hw, c.y - hh, c.y + hh)

    def shift(self, dx: float, dy: float) -> BoundingBox:
        return BoundingBox(self.xmin + dx, self.xmax + dx, self.ymin + dy, self.ymax + dy)

    def rotate(self, angle: float, pivot: Point | tuple[float, float]) -> BoundingBox:
        if self.is_empty or angle == 0:
            return self
        corners = (self.lowerleft, self.lowerright, self.upperleft, self.upperright)
        return BoundingBox.from_points(*(p.rotate(angle, pivot) for p in corners))

    def deform(self, top: float = 0.0, bottom: float = 0.0, left: float = 0.0, right: float = 0.0) -> BoundingBox:
        """Move each side outward by the given amount; negative values shrink."""
        return BoundingBox(self.xmin - left, self.xmax + right, self.ymin - bottom, self.ymax + top)

    def make_aspect_ratio(self, ratio: float) -> BoundingBox:
        if ratio <= 0:
            raise ValueError("aspect ratio must be > 0")
        if self.is_empty or self.width == 0:
            return self
        c = self.center
        w = self.width
        h = self.height
        if h / w > ratio:
            h = ratio * w
        else:
            w = h / ratio
        return BoundingBox(c.x - 0.5 * w, c.x + 0.5 * w, c.y - 0.5 * h, c.y + 0.5 * h)


@dataclass(frozen=True)
class AffineTransformation:
    t: tuple[float, float]
    m: tuple[tuple[float, float], tuple[float, float]]

    @classmethod
    def from_rect(cls, x0: float, x1: float, y0: float, y1: float, dest: BoundingBox) -> AffineTransformation:
        if x0 == x1 or y0 == y1:
            raise ValueError("source rectangle must have non-zero width and height")
        sx = dest.width / (x1 - x0)
        sy = dest.height / (y1 - y0)
        tx = dest.xmin - sx * x0
        ty = dest.ymin - sy * y0
        return cls(t=(tx, ty), m=((sx, 0.0), (0.0, sy)))

    @classmethod
    def identity(cls) -> AffineTransformation:
        return cls(t=(0.0, 0.0), m=((1.0, 0.0), (0.0, 1.0)))

    @property
    def xflipped(self) -> bool:
        return self.m[0][0] < 0

    @property
    def yflipped(self) -> bool:
        return self.m[1][1] < 0

    def project(self, x: Any, y: Any) -> tuple[Any, Any]:
        (a, b), (c, d) = self.m
        if np.ndim(x) == 0 and np.ndim(y) == 0:
            fx = float(x)
            fy = float(y)
            return (self.t[0] + a * fx + b * fy, self.t[1] + c * fx + d * fy)
        xa = np.asarray(x, dtype=np.float64)
        ya = np.asarray(y, dtype=np.float64)
        return (self.t[0] + a * xa + b * ya, self.t[1] + c * xa + d * ya)

    def project_point(self, p: Point | tuple[float, float]) -> Point:
        u, v = self.project(p[0], p[1])
        return Point(u, v)

    def compose(self, other: AffineTransformation) -> AffineTransformation:
        """Return the map that applies `other` first, then `self`."""
        ms = np.asarray(self.m, dtype=np.float64)
        mo = np.asarray(other.m, dtype=np.float64)
        m = ms @ mo
        t = ms @ np.asarray(other.t, dtype=np.float64) + np.asarray(self.t, dtype=np.float64)
        return AffineTransformation(
            t=(float(t[0]), float(t[1])),
            m=((float(m[0, 0]), float(m[0, 1])), (float(m[1, 0]), float(m[1, 1]))),
        )
