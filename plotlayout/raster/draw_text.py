from __future__ import annotations

from functools import lru_cache
import math
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from plotlayout.raster.canvas import RGBA, blend_mask


DEFAULT_FONT_FACE = "sans"
DEFAULT_FONT_SIZE_PX = 12.0
FONT_FACE_PATTERNS: dict[str, tuple[str, ...]] = {
    "sans": ("dejavusans", "liberationsans", "arial", "helvetica"),
    "serif": ("dejavuserif", "liberationserif", "times new roman", "times"),
    "mono": ("dejavusansmono", "liberationmono", "menlo", "courier new", "courier"),
}
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

# fraction of the text box left of / above the anchor
HALIGN_FRACTION = {"left": 0.0, "center": 0.5, "right": 1.0}
VALIGN_FRACTION = {"top": 0.0, "center": 0.5, "bottom": 1.0}

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_face: str = DEFAULT_FONT_FACE,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    angle_deg: float = 0.0,
    halign: str = "center",
    valign: str = "center",
) -> None:
    """Draw `text` so that its alignment point lands on pixel column `x`, row `y`.

    The box is rotated counter-clockwise by `angle_deg` about that point.
    """
    if not text:
        return
    try:
        fx = HALIGN_FRACTION[halign]
        fy = VALIGN_FRACTION[valign]
    except KeyError as exc:
        raise ValueError(f"unsupported text alignment: {exc.args[0]!r}") from exc

    font = _load_font(font_face, font_size_px)
    mask = _render_mask(text, font)
    h, w = mask.shape
    ax = fx * w
    ay = fy * h
    if angle_deg % 360 != 0:
        image = Image.fromarray(mask)
        rotated = image.rotate(angle_deg, resample=Image.Resampling.BICUBIC, expand=True)
        ax, ay = _rotate_anchor(ax - 0.5 * w, ay - 0.5 * h, angle_deg)
        ax += 0.5 * rotated.width
        ay += 0.5 * rotated.height
        mask = np.asarray(rotated, dtype=np.uint8)
    blend_mask(dst, round(x - ax), round(y - ay), mask, color)


def text_size(text: str, *, font_face: str = DEFAULT_FONT_FACE, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[int, int]:
    """Unrotated ``(width, height)`` of `text`; the height is the font's line height."""
    font = _load_font(font_face, font_size_px)
    height = _line_height(font)
    if not text:
        return (0, height)
    return (max(1, math.ceil(font.getlength(text))), height)


def _rotate_anchor(dx: float, dy: float, angle_deg: float) -> tuple[float, float]:
    # rows grow downward, so a counter-clockwise turn negates the usual sine terms
    a = math.radians(angle_deg)
    c = math.cos(a)
    s = math.sin(a)
    return (c * dx + s * dy, -s * dx + c * dy)


def _line_height(font: Font) -> int:
    if isinstance(font, ImageFont.FreeTypeFont):
        ascent, descent = font.getmetrics()
        return max(1, int(ascent + descent))
    # bitmap fonts have no metrics table
    _, top, _, bottom = font.getbbox("Ag")
    return max(1, int(bottom - top))


@lru_cache(maxsize=128)
def _render_mask(text: str, font: Font) -> np.ndarray:
    width = max(1, math.ceil(font.getlength(text)))
    height = _line_height(font)
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((0, 0), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(font_face: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_face)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(font_face: str) -> Path | None:
    wanted = font_face.strip().lower() or DEFAULT_FONT_FACE
    patterns = FONT_FACE_PATTERNS.get(wanted, (wanted,))

    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(base.rglob(ext))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if stem == p or stem.startswith(p + "-") or stem == p + "regular":
                return path
    return None
