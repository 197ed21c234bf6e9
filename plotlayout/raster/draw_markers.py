from __future__ import annotations

from functools import lru_cache
import math

import numpy as np

from plotlayout.raster.canvas import RGBA, draw_pixel


MARKER_KINDS = frozenset(
    {
        "asterisk",
        "circle",
        "cross",
        "diamond",
        "dot",
        "filled circle",
        "filled diamond",
        "filled square",
        "filled triangle",
        "plus",
        "square",
        "triangle",
    }
)


def draw_markers(
    dst: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    color: RGBA,
    size: int = 1,
    kind: str = "filled square",
) -> None:
    offsets = marker_offsets(kind, max(0, size // 2))
    for x, y in zip(xs.tolist(), ys.tolist(), strict=False):
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        cx = round(x)
        cy = round(y)
        for dx, dy in offsets:
            draw_pixel(dst, cx + dx, cy + dy, color)


@lru_cache(maxsize=64)
def marker_offsets(kind: str, radius: int) -> tuple[tuple[int, int], ...]:
    """Pixel offsets covered by a marker, rows growing downward."""
    if kind not in MARKER_KINDS:
        raise ValueError(f"unsupported symboltype: {kind!r}")
    if kind == "dot" or radius == 0:
        return ((0, 0),)
    r = radius
    dy, dx = np.mgrid[-r : r + 1, -r : r + 1]
    filled = kind.startswith("filled ")
    shape = kind.removeprefix("filled ")

    if shape == "circle":
        mask = dx * dx + dy * dy <= (r + 0.5) ** 2
    elif shape == "square":
        mask = np.ones_like(dx, dtype=bool)
    elif shape == "diamond":
        mask = np.abs(dx) + np.abs(dy) <= r
    elif shape == "triangle":
        # apex up; half width grows linearly down to the base row
        mask = 2 * np.abs(dx) <= dy + r
    elif shape == "plus":
        mask = (dx == 0) | (dy == 0)
    elif shape == "cross":
        mask = np.abs(dx) == np.abs(dy)
    else:
        mask = (dx == 0) | (dy == 0) | (np.abs(dx) == np.abs(dy))

    if shape in ("circle", "square", "diamond", "triangle") and not filled:
        mask = mask & ~_interior(mask)
    return tuple(zip(dx[mask].tolist(), dy[mask].tolist()))


def _interior(mask: np.ndarray) -> np.ndarray:
    padded = np.pad(mask, 1, constant_values=False)
    return (
        mask
        & padded[:-2, 1:-1]
        & padded[2:, 1:-1]
        & padded[1:-1, :-2]
        & padded[1:-1, 2:]
    )
