from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np
from PIL import Image, ImageColor

from plotlayout.geometry import Point, as_point
from plotlayout.raster.canvas import RGBA, blit, new_canvas
from plotlayout.raster.draw_lines import dash_pattern, draw_polyline
from plotlayout.raster.draw_markers import draw_markers
from plotlayout.raster.draw_polygon import fill_polygon
from plotlayout.raster.draw_text import DEFAULT_FONT_FACE, DEFAULT_FONT_SIZE_PX, draw_text, text_size
from plotlayout.renderer import RendererState


WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)


def parse_color(value: Any) -> RGBA:
    """Accept ``0xRRGGBB`` ints, Pillow color names / hex strings, or RGB(A) tuples."""
    if isinstance(value, bool):
        raise ValueError(f"unsupported color: {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"color out of range: {value:#x}")
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, 255)
    if isinstance(value, str):
        rgb = ImageColor.getrgb(value)
        return (rgb[0], rgb[1], rgb[2], rgb[3] if len(rgb) > 3 else 255)
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        parts = [int(v) for v in value]
        return (parts[0], parts[1], parts[2], parts[3] if len(parts) > 3 else 255)
    raise ValueError(f"unsupported color: {value!r}")


class RasterRenderer(RendererState):
    """Renderer that draws onto an RGBA numpy canvas.

    Device units are pixels with the origin at the lower-left corner.
    Setting ``color`` also sets ``linecolor`` and ``fillcolor``; lines use
    ``linecolor``, polygons ``fillcolor``, and text and symbols ``color``.
    """

    def __init__(self, width: int, height: int, *, background: RGBA = WHITE) -> None:
        super().__init__(width, height)
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self.canvas = new_canvas(self.width, self.height, background)

    def open(self) -> None:
        super().open()
        self.canvas = new_canvas(self.width, self.height, self.background)

    def set(self, key: str, value: Any) -> None:
        if key == "color":
            self._state["linecolor"] = value
            self._state["fillcolor"] = value
        super().set(key, value)

    def to_rgba(self) -> np.ndarray:
        return self.canvas.copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.canvas)

    # coordinates

    def _target(self) -> tuple[np.ndarray, int, int]:
        """Canvas view limited to the clip rectangle, with its column and row offsets."""
        clip = self.clip_rect
        if clip is None:
            return self.canvas, 0, 0
        xmin, xmax, ymin, ymax = clip
        c0 = max(0, math.floor(xmin))
        c1 = min(self.width, math.ceil(xmax) + 1)
        r0 = max(0, self.height - 1 - math.ceil(ymax))
        r1 = min(self.height, self.height - math.floor(ymin))
        if c1 <= c0 or r1 <= r0:
            return self.canvas[0:0, 0:0], 0, 0
        return self.canvas[r0:r1, c0:c1], c0, r0

    def _pixels(self, x: Any, y: Any, c0: int, r0: int) -> tuple[np.ndarray, np.ndarray]:
        xs = np.asarray(x, dtype=np.float64) - c0
        ys = (self.height - 1) - np.asarray(y, dtype=np.float64) - r0
        return xs, ys

    # attributes

    def _color(self, key: str) -> RGBA:
        return parse_color(self.get(key, self.get("color", 0x000000)))

    def _linewidth(self) -> int:
        return max(1, int(round(float(self.get("linewidth", 1.0)))))

    def _fontsize(self) -> float:
        return float(self.get("fontsize", DEFAULT_FONT_SIZE_PX))

    def _fontface(self) -> str:
        return str(self.get("fontface", DEFAULT_FONT_FACE))

    # primitives

    def line(self, p: Point | tuple[float, float], q: Point | tuple[float, float]) -> None:
        p = as_point(p)
        q = as_point(q)
        self.curve([p.x, q.x], [p.y, q.y])

    def curve(self, x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> None:
        dst, c0, r0 = self._target()
        xs, ys = self._pixels(x, y, c0, r0)
        width = self._linewidth()
        pattern = dash_pattern(self.get("linetype", "solid"), width)
        draw_polyline(dst, xs, ys, self._color("linecolor"), width=width, pattern=pattern)

    def polygon(self, points: Sequence[Point | tuple[float, float]]) -> None:
        if not points:
            return
        dst, c0, r0 = self._target()
        pts = [as_point(p) for p in points]
        xs, ys = self._pixels([p.x for p in pts], [p.y for p in pts], c0, r0)
        fill_polygon(dst, list(zip(xs.tolist(), ys.tolist())), self._color("fillcolor"))

    def text(self, x: float, y: float, s: str) -> None:
        dst, c0, r0 = self._target()
        xs, ys = self._pixels(x, y, c0, r0)
        draw_text(
            dst,
            float(xs),
            float(ys),
            s,
            self._color("color"),
            font_face=self._fontface(),
            font_size_px=self._fontsize(),
            angle_deg=float(self.get("textangle", 0.0)),
            halign=str(self.get("texthalign", "center")),
            valign=str(self.get("textvalign", "center")),
        )

    def textwidth(self, s: str) -> float:
        return float(text_size(s, font_face=self._fontface(), font_size_px=self._fontsize())[0])

    def textheight(self, s: str) -> float:
        return float(text_size(s, font_face=self._fontface(), font_size_px=self._fontsize())[1])

    def symbol(self, x: float, y: float) -> None:
        self.symbols([x], [y])

    def symbols(self, x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> None:
        dst, c0, r0 = self._target()
        xs, ys = self._pixels(x, y, c0, r0)
        size = max(1, int(round(float(self.get("symbolsize", 1.0)))))
        kind = str(self.get("symboltype", "filled square"))
        draw_markers(dst, xs, ys, self._color("color"), size=size, kind=kind)

    def image(self, img: Any, x: float, y: float, w: float, h: float) -> None:
        width = max(1, int(round(w)))
        height = max(1, int(round(h)))
        source = img if isinstance(img, Image.Image) else Image.fromarray(np.asarray(img))
        patch = np.asarray(source.convert("RGBA").resize((width, height)), dtype=np.uint8)
        dst, c0, r0 = self._target()
        # the image's top row sits at device y + h
        left, top = self._pixels(x, y + h, c0, r0)
        blit(dst, patch, int(round(float(left))), int(round(float(top))) + 1)
