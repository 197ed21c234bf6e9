from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from plotlayout.config import (
    StyleConfig,
    config_value,
    default_config,
    load_config,
    load_packaged_defaults,
    set_default_config,
)
from plotlayout.context import PlotContext, size_relative
from plotlayout.errors import AttributeNotFound
from plotlayout.geometry import AffineTransformation, BoundingBox
from plotlayout.renderer import RecordingRenderer
from plotlayout.style import LINE_RENAME, HasAttr, HasStyle, broadcast_attr, normalize_style


class _Line(HasStyle):
    default_layers = ("PlotComponent", "LineComponent")
    style_rename = LINE_RENAME

    def __init__(self, config: StyleConfig | None = None, **kw: object) -> None:
        super().__init__()
        self.configure(config, **kw)


class _Axis(HasAttr):
    default_layers = ("HalfAxis",)
    attr_map = {"major_ticks": "ticks"}


def _context(width: float = 400.0, height: float = 300.0) -> PlotContext:
    device = RecordingRenderer(width, height)
    dev = device.bbox
    return PlotContext(device, dev, dev, AffineTransformation.identity())


class ConfigTests(unittest.TestCase):
    def tearDown(self) -> None:
        set_default_config(None)

    def test_packaged_defaults_convert_sentinels_and_hex(self) -> None:
        cfg = load_packaged_defaults()
        self.assertIsNone(cfg.config_value("HalfAxis", "ticks"))
        self.assertEqual(cfg.config_value("HalfAxis", "grid_style"), {"linetype": "dot", "linecolor": 0xCCCCCC})
        self.assertEqual(cfg.config_value("defaults", "fillcolor"), 0xAAAAAA)
        self.assertEqual(cfg.config_value("window", "width"), 512)

    def test_missing_option_returns_default(self) -> None:
        cfg = default_config()
        self.assertIsNone(cfg.config_value("NoSuchSection", "x"))
        self.assertEqual(cfg.config_value("Plot", "nope", 3), 3)
        self.assertEqual(cfg.config_options("NoSuchSection"), {})

    def test_config_values_are_copies(self) -> None:
        cfg = default_config()
        style = cfg.config_value("HalfAxis", "grid_style")
        style["linetype"] = "solid"
        self.assertEqual(cfg.config_value("HalfAxis", "grid_style")["linetype"], "dot")

    def test_load_config_from_file_and_activate(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "style.toml"
            path.write_text('[Plot]\ngutter = 0.5\nxrange = "none"\n[LineComponent]\nkw_defaults = { linecolor = "0xff0000" }\n')
            cfg = load_config(path)
        self.assertEqual(cfg.config_value("Plot", "gutter"), 0.5)
        self.assertIsNone(cfg.config_value("Plot", "xrange"))
        set_default_config(cfg)
        self.assertEqual(config_value("Plot", "gutter"), 0.5)
        line = _Line()
        self.assertEqual(line.kw_get("linecolor"), 0xFF0000)

    def test_load_config_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/style.toml")

    def test_merged_overrides_single_options(self) -> None:
        cfg = default_config().merged({"Plot": {"gutter": 0.0}})
        self.assertEqual(cfg.config_value("Plot", "gutter"), 0.0)
        self.assertEqual(cfg.config_value("Plot", "xlog"), False)


class HasStyleTests(unittest.TestCase):
    def test_layers_apply_in_order(self) -> None:
        line = _Line()
        self.assertEqual(line.kw_get("linetype"), "solid")
        self.assertEqual(line.kw_get("linewidth"), 1.0)

    def test_kwargs_split_into_style_and_attributes(self) -> None:
        line = _Line(color="red", width=3, label="data")
        self.assertEqual(line.kw_get("linecolor"), "red")
        self.assertEqual(line.kw_get("linewidth"), 3)
        self.assertEqual(line.get_attr("label"), "data")
        self.assertNotIn("label", line.get_attr("style"))

    def test_unknown_style_key_is_rejected(self) -> None:
        line = _Line()
        with self.assertRaises(ValueError):
            line.kw_set("blink", True)
        with self.assertRaises(ValueError):
            normalize_style({"blink": True})

    def test_missing_attribute_raises(self) -> None:
        line = _Line()
        with self.assertRaises(AttributeNotFound) as ctx:
            line.get_attr("nope")
        self.assertIn("nope", str(ctx.exception))
        self.assertEqual(line.get_attr("nope", 7), 7)

    def test_attr_map_aliases(self) -> None:
        axis = _Axis()
        axis.iniattr()
        self.assertIsNone(axis.get_attr("major_ticks"))
        axis.set_attr("major_ticks", 5)
        self.assertEqual(axis.get_attr("ticks"), 5)
        self.assertTrue(axis.has_attr("major_ticks"))

    def test_broadcast_attr(self) -> None:
        a, b = _Axis(), _Axis()
        broadcast_attr((a, b), "tickdir", -1)
        self.assertEqual(a.get_attr("tickdir"), -1)
        self.assertEqual(b.get_attr("tickdir"), -1)


class PlotContextStyleTests(unittest.TestCase):
    def test_relative_sizes_use_the_yardstick(self) -> None:
        bbox = BoundingBox(0.0, 100.0, 0.0, 100.0)
        # sqrt(8) * w * h / (w + h) for a square of side 100
        self.assertAlmostEqual(size_relative(100.0, bbox), 100.0 * 2**0.5)
        self.assertEqual(size_relative(5.0, BoundingBox.empty()), 0.0)

    def test_push_pop_restores_state(self) -> None:
        context = _context()
        device = context.draw
        device.set("linecolor", 1)
        before = device.snapshot()
        depth = device.depth
        context.push_style({"linecolor": 2, "linewidth": 10.0})
        context.push_style({"fontsize": 3.0})
        self.assertEqual(device.get("linecolor"), 2)
        self.assertAlmostEqual(device.get("linewidth"), context.size_relative(1.0))
        context.pop_style()
        context.pop_style()
        self.assertEqual(device.depth, depth)
        self.assertEqual(device.snapshot(), before)

    def test_fontsize_has_a_floor(self) -> None:
        context = _context()
        with context.styled({"fontsize": 0.0}):
            floor = context.size_relative(context.fontsize_min)
            self.assertAlmostEqual(context.draw.get("fontsize"), floor)

    def test_styled_pops_on_error(self) -> None:
        context = _context()
        with self.assertRaises(RuntimeError):
            with context.styled({"linecolor": 5}):
                raise RuntimeError("boom")
        self.assertEqual(context.draw.depth, 0)
        self.assertIsNone(context.draw.get("linecolor"))

    def test_push_style_failure_leaves_stack_balanced(self) -> None:
        context = _context()
        with self.assertRaises(ValueError):
            context.push_style({"linewidth": "thick"})
        self.assertEqual(context.draw.depth, 0)

    def test_restore_without_save_is_an_error(self) -> None:
        with self.assertRaises(RuntimeError):
            RecordingRenderer().restore_state()


if __name__ == "__main__":
    unittest.main()
