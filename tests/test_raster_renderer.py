from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from plotlayout.components import Curve, Points
from plotlayout.containers import FramedPlot, Plot
from plotlayout.errors import UnsupportedFormatError
from plotlayout.export import to_rgba, write_file
from plotlayout.raster.draw_lines import dash_pattern
from plotlayout.raster.draw_markers import marker_offsets
from plotlayout.raster.renderer import RasterRenderer, parse_color


WHITE = [255, 255, 255]
BLACK = [0, 0, 0]


class ParseColorTests(unittest.TestCase):
    def test_accepted_forms(self) -> None:
        self.assertEqual(parse_color(0xFF0000), (255, 0, 0, 255))
        self.assertEqual(parse_color("red"), (255, 0, 0, 255))
        self.assertEqual(parse_color("#00ff00"), (0, 255, 0, 255))
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))
        self.assertEqual(parse_color((1, 2, 3, 4)), (1, 2, 3, 4))

    def test_rejected_forms(self) -> None:
        for value in (True, 0x1000000, -1, "no-such-color", (1, 2), None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_color(value)


class RasterPrimitiveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.r = RasterRenderer(20, 10)
        self.r.open()

    def test_canvas_starts_white(self) -> None:
        rgba = self.r.to_rgba()
        self.assertEqual(rgba.shape, (10, 20, 4))
        self.assertTrue(np.all(rgba[:, :, :3] == 255))

    def test_line_uses_lower_left_origin(self) -> None:
        self.r.set("linecolor", 0x000000)
        self.r.line((0.0, 5.0), (19.0, 5.0))
        canvas = self.r.canvas
        self.assertEqual(canvas[4, 10, :3].tolist(), BLACK)
        self.assertEqual(canvas[0, 10, :3].tolist(), WHITE)

    def test_clip_rect_limits_drawing(self) -> None:
        self.r.set_clip_rect(0.0, 9.0, 0.0, 9.0)
        self.r.line((0.0, 5.0), (19.0, 5.0))
        canvas = self.r.canvas
        self.assertEqual(canvas[4, 5, :3].tolist(), BLACK)
        self.assertEqual(canvas[4, 15, :3].tolist(), WHITE)

    def test_color_sets_fill_for_polygons(self) -> None:
        self.r.set("color", 0x00FF00)
        self.assertEqual(self.r.get("fillcolor"), 0x00FF00)
        self.r.polygon([(2.0, 2.0), (8.0, 2.0), (8.0, 8.0), (2.0, 8.0)])
        self.assertEqual(self.r.canvas[4, 5, :3].tolist(), [0, 255, 0])
        self.assertEqual(self.r.canvas[4, 15, :3].tolist(), WHITE)

    def test_symbols_mark_their_centres(self) -> None:
        self.r.set("symboltype", "filled square")
        self.r.set("symbolsize", 3.0)
        self.r.symbols([10.0], [5.0])
        self.assertEqual(self.r.canvas[4, 10, :3].tolist(), BLACK)
        self.assertEqual(self.r.canvas[4, 11, :3].tolist(), BLACK)
        self.assertEqual(self.r.canvas[4, 13, :3].tolist(), WHITE)

    def test_image_top_sits_at_y_plus_height(self) -> None:
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[:, :, 0] = 255
        self.r.image(img, 0.0, 0.0, 4.0, 4.0)
        canvas = self.r.canvas
        self.assertEqual(canvas[9, 0, :3].tolist(), [255, 0, 0])
        self.assertEqual(canvas[6, 3, :3].tolist(), [255, 0, 0])
        self.assertEqual(canvas[5, 0, :3].tolist(), WHITE)

    def test_text_is_measured_and_drawn(self) -> None:
        r = RasterRenderer(80, 40)
        r.open()
        r.set("fontsize", 16.0)
        self.assertGreater(r.textwidth("Hello"), r.textwidth("H"))
        self.assertGreater(r.textheight("H"), 0.0)
        r.text(40.0, 20.0, "H")
        self.assertTrue(np.any(r.canvas[:, :, :3] < 128))

    def test_unknown_linetype_and_marker(self) -> None:
        with self.assertRaises(ValueError):
            dash_pattern("wavy")
        with self.assertRaises(ValueError):
            marker_offsets("star", 2)
        self.assertEqual(dash_pattern("dash", 2), (8, 8))


class ExportTests(unittest.TestCase):
    def _plot(self) -> FramedPlot:
        plot = FramedPlot(title="export")
        plot.add(Curve([0.0, 1.0, 2.0], [0.0, 1.0, 4.0], color="blue"))
        plot.add(Points([0.0, 1.0, 2.0], [0.0, 1.0, 4.0], type="filled circle"))
        return plot

    def test_to_rgba_draws_something(self) -> None:
        rgba = to_rgba(self._plot(), 160, 120)
        self.assertEqual(rgba.shape, (120, 160, 4))
        self.assertTrue(np.any(rgba[:, :, :3] != 255))

    def test_write_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = write_file(self._plot(), Path(tmp) / "plot.png", 160, 120)
            self.assertTrue(out.exists())
            with Image.open(out) as img:
                self.assertEqual(img.size, (160, 120))

    def test_default_size_comes_from_config(self) -> None:
        plot = Plot()
        plot.add(Points([0.0], [0.0]))
        with tempfile.TemporaryDirectory() as tmp:
            out = write_file(plot, Path(tmp) / "plot.PNG")
            with Image.open(out) as img:
                self.assertEqual(img.size, (512, 384))

    def test_unsupported_format(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "plot.svg"
            with self.assertRaises(UnsupportedFormatError):
                write_file(self._plot(), path)
            self.assertFalse(path.exists())


if __name__ == "__main__":
    unittest.main()
