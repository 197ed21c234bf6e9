from __future__ import annotations

import math
from typing import Mapping

import numpy as np

from plotlayout.raster.canvas import RGBA, draw_pixel


# on/off run lengths in multiples of the line width
DASH_PATTERNS: Mapping[str, tuple[int, ...]] = {
    "solid": (),
    "dot": (1, 3),
    "dotted": (1, 3),
    "dash": (4, 4),
    "dashed": (4, 4),
    "longdash": (8, 4),
    "dotdash": (1, 3, 4, 3),
    "dotdashed": (1, 3, 4, 3),
    "dotdotdash": (1, 3, 1, 3, 4, 3),
    "dotdotdashed": (1, 3, 1, 3, 4, 3),
}


def dash_pattern(linetype: str | None, width: int = 1) -> tuple[int, ...]:
    if linetype is None:
        return ()
    try:
        runs = DASH_PATTERNS[linetype]
    except KeyError as exc:
        raise ValueError(f"unsupported linetype: {linetype!r}") from exc
    scale = max(1, width)
    return tuple(run * scale for run in runs)


class _Dasher:
    """Tracks the position inside a dash pattern across consecutive segments."""

    def __init__(self, pattern: tuple[int, ...]) -> None:
        self.pattern = pattern
        self.index = 0
        self.remaining = pattern[0] if pattern else 0

    def step(self) -> bool:
        if not self.pattern:
            return True
        on = self.index % 2 == 0
        self.remaining -= 1
        if self.remaining <= 0:
            self.index = (self.index + 1) % len(self.pattern)
            self.remaining = self.pattern[self.index]
        return on


def draw_polyline(
    dst: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    color: RGBA,
    width: int = 1,
    pattern: tuple[int, ...] = (),
) -> None:
    """Draw connected segments through pixel positions; a non-finite vertex breaks the line."""
    if xs.size < 2:
        return
    dasher = _Dasher(pattern)
    for i in range(xs.size - 1):
        x0, y0, x1, y1 = float(xs[i]), float(ys[i]), float(xs[i + 1]), float(ys[i + 1])
        if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
            continue
        _draw_line_segment(dst, round(x0), round(y0), round(x1), round(y1), color, width, dasher)


def _draw_line_segment(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: RGBA,
    width: int,
    dasher: _Dasher,
) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        if dasher.step():
            _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    for yy in range(y - radius, y + radius + 1):
        for xx in range(x - radius, x + radius + 1):
            draw_pixel(dst, xx, yy, color)
