from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from plotlayout.containers import PlotContainer
from plotlayout.errors import UnsupportedFormatError
from plotlayout.raster.renderer import RasterRenderer


LOGGER = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("png",)


def to_rgba(container: PlotContainer, width: int, height: int) -> np.ndarray:
    device = RasterRenderer(width, height)
    container.page_compose(device)
    return device.to_rgba()


def write_png(container: PlotContainer, path: str | Path, width: int, height: int) -> Path:
    out = Path(path)
    rgba = to_rgba(container, width, height)
    Image.fromarray(rgba).save(out, format="PNG")
    LOGGER.info("wrote %dx%d png to %s", width, height, out)
    return out


def write_file(
    container: PlotContainer,
    filename: str | Path,
    width: int | None = None,
    height: int | None = None,
) -> Path:
    """Write `container` to `filename`, picking the format from the extension."""
    path = Path(filename)
    fmt = path.suffix.lower().lstrip(".")
    if fmt not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(f"unsupported output format: {fmt or str(path)!r}")
    w = int(width if width is not None else container.config.config_value("window", "width", 512))
    h = int(height if height is not None else container.config.config_value("window", "height", 384))
    return write_png(container, path, w, h)
