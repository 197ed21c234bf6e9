from __future__ import annotations

import unittest

import numpy as np

from plotlayout.components import Curve, Points
from plotlayout.containers import FramedArray, FramedPlot, Grid, Plot, Table, limits_axis
from plotlayout.errors import DomainError, EmptyContainerError
from plotlayout.geometry import BoundingBox
from plotlayout.renderer import RecordingRenderer


INF = float("inf")


class LimitsAxisTests(unittest.TestCase):
    def test_gutter_pads_both_ends(self) -> None:
        self.assertEqual(limits_axis((0.0, 10.0), 0.1, None, False), (-0.5, 10.5))

    def test_log_gutter_never_reaches_zero(self) -> None:
        lo, hi = limits_axis((1.0, 100.0), 0.1, None, True)
        self.assertEqual(lo, 1.0)
        self.assertAlmostEqual(hi, 104.95)

    def test_user_range_overrides_one_end(self) -> None:
        self.assertEqual(limits_axis((0.0, 10.0), 0.1, (None, 20.0), False), (-0.5, 20.0))

    def test_reversed_user_range_is_kept(self) -> None:
        self.assertEqual(limits_axis((0.0, 10.0), None, (10.0, 0.0), False), (10.0, 0.0))

    def test_unknown_extent_defaults_to_unit_range(self) -> None:
        self.assertEqual(limits_axis((INF, -INF), None, None, False), (0.0, 1.0))
        self.assertEqual(limits_axis(None, None, None, False), (0.0, 1.0))

    def test_degenerate_range_is_widened(self) -> None:
        self.assertEqual(limits_axis((5.0, 5.0), 0.1, None, False), (4.0, 6.0))

    def test_degenerate_log_range_is_widened_linearly(self) -> None:
        self.assertEqual(limits_axis((5.0, 5.0), 0.1, None, True), (4.0, 6.0))
        self.assertEqual(limits_axis((1.0, 1.0), None, None, True), (0.0, 2.0))


class PlotTests(unittest.TestCase):
    def test_empty_plot_cannot_be_composed(self) -> None:
        with self.assertRaises(EmptyContainerError):
            Plot().page_compose(RecordingRenderer())

    def test_plot_clips_content_to_the_page(self) -> None:
        device = RecordingRenderer(400.0, 300.0)
        plot = Plot()
        plot.add(Points([0.0, 1.0], [0.0, 1.0]))
        plot.page_compose(device)
        (cmd,) = device.calls("symbols")
        np.testing.assert_allclose(cmd.state["cliprect"], (20.0, 380.0, 15.0, 285.0))
        self.assertFalse(device.is_open)
        self.assertEqual(device.depth, 0)

    def test_page_defaults_are_applied(self) -> None:
        device = RecordingRenderer()
        plot = Plot()
        plot.add(Points([0.0], [0.0]))
        plot.page_compose(device, close_after=False)
        self.assertTrue(device.is_open)
        self.assertEqual(device.get("fontface"), "sans")
        self.assertEqual(device.get("linetype"), "solid")

    def test_title_is_drawn_above_the_interior(self) -> None:
        device = RecordingRenderer(400.0, 300.0)
        plot = Plot(title="Hello")
        plot.add(Points([0.0, 1.0], [0.0, 1.0]))
        plot.page_compose(device)
        (cmd,) = device.calls("text")
        self.assertEqual(cmd.args[2], "Hello")
        self.assertAlmostEqual(cmd.args[0], 200.0)
        self.assertLess(cmd.args[1], 285.0)
        self.assertEqual(cmd.state["textvalign"], "bottom")
        (symbols,) = device.calls("symbols")
        self.assertLess(symbols.state["cliprect"][3], cmd.args[1])

    def test_limits_use_gutter_and_ranges(self) -> None:
        plot = Plot(gutter=0.0, yrange=(None, 50.0))
        plot.add(Curve([0.0, 10.0], [0.0, 20.0]))
        self.assertEqual(plot.limits(), BoundingBox(0.0, 10.0, 0.0, 50.0))


class FramedPlotTests(unittest.TestCase):
    def _plot(self, **kw: object) -> FramedPlot:
        plot = FramedPlot(gutter=0.0, **kw)
        plot.add(Curve([0.0, 5.0, 10.0], [0.0, 40.0, 100.0]))
        return plot

    def test_projection_maps_limits_onto_interior_corners(self) -> None:
        device = RecordingRenderer(400.0, 300.0)
        plot = self._plot()
        region = device.bbox.scale(0.9)
        interior = plot.interior(device, region)
        context = plot._context1(device, interior)
        lo = context.geom.project_point((0.0, 0.0))
        hi = context.geom.project_point((10.0, 100.0))
        self.assertAlmostEqual(lo.x, interior.xmin)
        self.assertAlmostEqual(lo.y, interior.ymin)
        self.assertAlmostEqual(hi.x, interior.xmax)
        self.assertAlmostEqual(hi.y, interior.ymax)

    def test_interior_leaves_room_for_tick_labels(self) -> None:
        device = RecordingRenderer(400.0, 300.0)
        plot = self._plot()
        region = device.bbox.scale(0.9)
        interior = plot.interior(device, region)
        self.assertGreater(interior.xmin, region.xmin)
        self.assertGreater(interior.ymin, region.ymin)
        self.assertLessEqual(interior.xmax, region.xmax)
        ext = plot.exterior(device, interior)
        self.assertLess(abs(ext.xmin - region.xmin), 0.005 * region.diagonal())

    def test_compose_draws_content_and_axes(self) -> None:
        device = RecordingRenderer(400.0, 300.0)
        plot = self._plot(xlabel="time", ylabel="value")
        self.assertEqual(plot.x1.get_attr("label"), "time")
        self.assertEqual(plot.get_attr("ylabel"), "value")
        plot.page_compose(device)
        texts = [cmd.args[2] for cmd in device.calls("text")]
        self.assertIn("time", texts)
        self.assertIn("value", texts)
        self.assertIn("100", texts)
        self.assertEqual(len(device.calls("curve")), 1)
        self.assertEqual(device.depth, 0)

    def test_secondary_content_uses_the_top_and_right_axes(self) -> None:
        device = RecordingRenderer(400.0, 300.0)
        plot = self._plot()
        plot.add2(Curve([0.0, 1.0], [0.0, 1.0]))
        interior = BoundingBox(50.0, 350.0, 50.0, 250.0)
        hi = plot._context2(device, interior).geom.project_point((1.0, 1.0))
        self.assertAlmostEqual(hi.x, 350.0)
        self.assertAlmostEqual(hi.y, 250.0)

    def test_log_axis_rejects_non_positive_limits(self) -> None:
        plot = self._plot(ylog=True)
        self.assertTrue(plot.y1.get_attr("log"))
        with self.assertRaises(DomainError):
            plot.page_compose(RecordingRenderer())

    def test_single_point_on_a_log_axis(self) -> None:
        plot = FramedPlot(ylog=True)
        plot.add(Points([5.0], [5.0]))
        device = RecordingRenderer(400.0, 300.0)
        self.assertEqual(plot._context1(device, device.bbox).data_bbox.yrange(), (4.0, 6.0))
        plot.page_compose(device)
        self.assertEqual(len(device.calls("symbols")), 1)

        # a unit point widens down to zero, which a log axis cannot show
        at_one = FramedPlot(ylog=True)
        at_one.add(Points([1.0], [1.0]))
        with self.assertRaises(DomainError):
            at_one.page_compose(RecordingRenderer())

    def test_frame_groups_share_settings(self) -> None:
        plot = FramedPlot()
        self.assertEqual(plot.x2.get_attr("tickdir"), -1)
        self.assertFalse(plot.x1.get_attr("draw_grid"))
        self.assertEqual(len(plot.frame), 4)


class GridTests(unittest.TestCase):
    def test_row_zero_is_the_top_row(self) -> None:
        g = Grid.from_bbox(2, 1, BoundingBox(0.0, 100.0, 0.0, 210.0), 0.0, 0.0)
        self.assertEqual(g.cellbb(0, 0), BoundingBox(0.0, 100.0, 105.0, 210.0))
        self.assertEqual(g.cellbb(1, 0), BoundingBox(0.0, 100.0, 0.0, 105.0))


class TableTests(unittest.TestCase):
    def test_cells_are_composed_independently(self) -> None:
        table = Table(1, 2)
        self.assertTrue(table.is_empty())
        left = Plot()
        left.add(Points([0.0], [0.0]))
        table[0, 0] = left
        self.assertIs(table[0, 0], left)
        self.assertIsNone(table[0, 1])

        device = RecordingRenderer(400.0, 300.0)
        table.page_compose(device)
        (cmd,) = device.calls("symbols")
        self.assertLess(cmd.state["cliprect"][1], 200.0)
        self.assertEqual(device.depth, 0)

    def test_bad_shape_and_index(self) -> None:
        with self.assertRaises(ValueError):
            Table(0, 1)
        table = Table(1, 1)
        with self.assertRaises(IndexError):
            table[1, 0]
        with self.assertRaises(IndexError):
            table[0, -1] = Plot()


class FramedArrayTests(unittest.TestCase):
    def test_distributed_attributes_reach_every_plot(self) -> None:
        array = FramedArray(2, 2, gutter=0.0)
        self.assertEqual(array[1, 1].get_attr("gutter"), 0.0)
        array.set_attr("xlog", True)
        self.assertTrue(array[0, 1].get_attr("xlog"))

    def test_uniform_limits_are_shared(self) -> None:
        array = FramedArray(2, 2, gutter=0.0)
        array[0, 0].add(Curve([0.0, 10.0], [0.0, 1.0]))
        array[1, 1].add(Curve([-5.0, 5.0], [0.0, 3.0]))
        self.assertEqual(array._limits(0, 0), array._limits(1, 1))
        self.assertEqual(array._limits(0, 0).xrange(), (-5.0, 10.0))

    def test_nonuniform_limits_follow_rows_and_columns(self) -> None:
        array = FramedArray(2, 2, gutter=0.0, uniform_limits=False)
        array[0, 0].add(Curve([0.0, 10.0], [0.0, 5.0]))
        array[1, 0].add(Curve([0.0, 20.0], [0.0, 5.0]))
        array[0, 1].add(Curve([0.0, 1.0], [0.0, 5.0]))
        array[1, 1].add(Curve([0.0, 1.0], [0.0, 5.0]))
        self.assertEqual(array._limits(0, 0).xrange(), (0.0, 20.0))
        self.assertEqual(array._limits(0, 1).xrange(), (0.0, 1.0))

    def test_empty_array_cannot_be_composed(self) -> None:
        with self.assertRaises(EmptyContainerError):
            FramedArray(1, 2).page_compose(RecordingRenderer())

    def test_compose_draws_shared_labels(self) -> None:
        array = FramedArray(2, 2, xlabel="time", ylabel="value")
        array.add(Curve([0.0, 10.0], [0.0, 5.0]))
        device = RecordingRenderer(400.0, 300.0)
        array.page_compose(device)
        self.assertEqual(len(device.calls("curve")), 4)
        labels = {cmd.args[2]: cmd for cmd in device.calls("text") if cmd.args[2] in ("time", "value")}
        self.assertEqual(set(labels), {"time", "value"})
        self.assertEqual(labels["value"].state["textangle"], 90.0)
        self.assertEqual(device.depth, 0)


if __name__ == "__main__":
    unittest.main()
