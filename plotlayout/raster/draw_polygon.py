from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from PIL import Image, ImageDraw

from plotlayout.raster.canvas import RGBA, blend_mask


def fill_polygon(dst: np.ndarray, points: Sequence[tuple[float, float]], color: RGBA) -> None:
    """Fill the polygon through pixel positions ``(column, row)``."""
    pts = [(float(x), float(y)) for x, y in points if math.isfinite(x) and math.isfinite(y)]
    if len(pts) < 3:
        return
    h, w = dst.shape[:2]
    mask = Image.new("L", (w, h), 0)
    ImageDraw.Draw(mask).polygon(pts, fill=255)
    blend_mask(dst, 0, 0, np.asarray(mask, dtype=np.uint8), color)
