from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from plotlayout import render_objects as ro
from plotlayout import ticks as tk
from plotlayout.config import StyleConfig
from plotlayout.components import BoxLabel, Drawable, LineX, LineY, PlotComponent, PlotComposite
from plotlayout.context import PlotContext
from plotlayout.geometry import Point


class HalfAxis(PlotComponent):
    """One side of a frame: spine, ticks, tick labels, grid and title.

    ``ticks`` and ``subticks`` are ``None`` (automatic), an int (that many,
    evenly spaced) or explicit positions in data units.
    """

    default_layers = ("PlotComponent", "HalfAxis")
    attr_map = {
        "labeloffset": "label_offset",
        "major_ticklabels": "ticklabels",
        "major_ticks": "ticks",
        "minor_ticks": "subticks",
    }

    # per-axis geometry, implemented by HalfAxisX / HalfAxisY

    def _pos(self, context: PlotContext, a: float, db: float = 0.0) -> Point:
        raise NotImplementedError

    def _dpos(self, d: float) -> Point:
        raise NotImplementedError

    def _align(self) -> tuple[str, str]:
        raise NotImplementedError

    def _intercept(self, context: PlotContext) -> float:
        raise NotImplementedError

    def _log(self, context: PlotContext) -> bool:
        raise NotImplementedError

    def _side(self) -> str:
        raise NotImplementedError

    def _range(self, context: PlotContext) -> tuple[float, float]:
        raise NotImplementedError

    def _make_grid(self, context: PlotContext, ticks: np.ndarray) -> list[Drawable]:
        raise NotImplementedError

    def _ticks(self, context: PlotContext) -> np.ndarray:
        log = self._log(context)
        r = self._range(context)
        ticks = self.get_attr("ticks")
        if ticks is None:
            return tk.ticks_default_log(r) if log else tk.ticks_default_linear(r)
        if isinstance(ticks, int) and not isinstance(ticks, bool):
            return tk.ticks_num_log(r, ticks) if log else tk.ticks_num_linear(r, ticks)
        return np.asarray(ticks, dtype=np.float64)

    def _subticks(self, context: PlotContext, ticks: np.ndarray) -> np.ndarray:
        log = self._log(context)
        r = self._range(context)
        subticks = self.get_attr("subticks")
        if subticks is None:
            return tk.subticks_log(r, ticks) if log else tk.subticks_linear(r, ticks)
        if isinstance(subticks, int) and not isinstance(subticks, bool):
            return tk.subticks_log(r, ticks, subticks) if log else tk.subticks_linear(r, ticks, subticks)
        return np.asarray(subticks, dtype=np.float64)

    def _ticklabels(self, ticks: np.ndarray) -> Sequence[str]:
        ticklabels = self.get_attr("ticklabels")
        if ticklabels is not None:
            return [str(label) for label in ticklabels]
        return tk.format_ticklabels(ticks)

    def _make_ticklabels(self, context: PlotContext, ticks: np.ndarray, labels: Sequence[str]) -> ro.LabelsObject | None:
        if not len(labels):
            return None
        direction = self.get_attr("ticklabels_dir")
        offset = context.size_relative(self.get_attr("ticklabels_offset"))
        if self.get_attr("draw_ticks") and self.get_attr("tickdir") > 0:
            offset += context.size_relative(self.get_attr("ticks_size"))
        positions = [self._pos(context, tick, direction * offset) for tick in ticks.tolist()[: len(labels)]]

        halign, valign = self._align()
        style: dict[str, Any] = {"texthalign": halign, "textvalign": valign}
        style.update(self.get_attr("ticklabels_style") or {})
        return ro.LabelsObject(positions, list(labels)[: len(positions)], style)

    def _make_spine(self, context: PlotContext) -> ro.LineObject:
        a, b = self._range(context)
        return ro.LineObject(self._pos(context, a), self._pos(context, b), self.get_attr("spine_style") or {})

    def _make_ticks(
        self,
        context: PlotContext,
        ticks: np.ndarray,
        size: float,
        style: dict[str, Any] | None,
    ) -> ro.CombObject | None:
        if ticks.size == 0:
            return None
        direction = self.get_attr("tickdir") * self.get_attr("ticklabels_dir")
        ticklen = self._dpos(direction * context.size_relative(size))
        positions = [self._pos(context, tick) for tick in ticks.tolist()]
        return ro.CombObject(positions, ticklen, style or {})

    def make(self, context: PlotContext) -> list[Drawable]:
        if self.get_attr("draw_nothing"):
            return []

        ticks = self._ticks(context)
        subticks = self._subticks(context, ticks)
        ticklabels = self._ticklabels(ticks)
        draw_ticks = self.get_attr("draw_ticks")
        draw_subticks = self.get_attr("draw_subticks")
        draw_ticklabels = self.get_attr("draw_ticklabels")

        implicit_subticks = draw_subticks is None and bool(draw_ticks)
        implicit_ticklabels = draw_ticklabels is None and (
            self.get_attr("range") is not None or self.get_attr("ticklabels") is not None
        )

        objs: list[Drawable | None] = []
        if self.get_attr("draw_grid"):
            objs.extend(self._make_grid(context, ticks))

        if self.get_attr("draw_axis"):
            if draw_subticks or implicit_subticks:
                objs.append(
                    self._make_ticks(context, subticks, self.get_attr("subticks_size"), self.get_attr("subticks_style"))
                )
            if draw_ticks:
                objs.append(self._make_ticks(context, ticks, self.get_attr("ticks_size"), self.get_attr("ticks_style")))
            if self.get_attr("draw_spine"):
                objs.append(self._make_spine(context))

        if draw_ticklabels or implicit_ticklabels:
            objs.append(self._make_ticklabels(context, ticks, ticklabels))

        made: list[Drawable] = [obj for obj in objs if obj is not None]

        # the title measures everything above, so it goes last
        label = self.get_attr("label", None)
        if label is not None:
            made.append(
                BoxLabel(
                    list(made),
                    str(label),
                    self._side(),
                    self.get_attr("label_offset"),
                    **(self.get_attr("label_style") or {}),
                )
            )
        return made


class HalfAxisX(HalfAxis):
    def _pos(self, context: PlotContext, a: float, db: float = 0.0) -> Point:
        p = context.geom.project_point((a, self._intercept(context)))
        return Point(p.x, p.y + db)

    def _dpos(self, d: float) -> Point:
        return Point(0.0, d)

    def _align(self) -> tuple[str, str]:
        if self.get_attr("ticklabels_dir") < 0:
            return "center", "top"
        return "center", "bottom"

    def _intercept(self, context: PlotContext) -> float:
        intercept = self.get_attr("intercept")
        if intercept is not None:
            return float(intercept)
        ymin, ymax = context.data_bbox.yrange()
        if (self.get_attr("ticklabels_dir") < 0) != context.geom.yflipped:
            return ymin
        return ymax

    def _log(self, context: PlotContext) -> bool:
        log = self.get_attr("log")
        if log is None:
            return context.xlog
        return bool(log)

    def _side(self) -> str:
        return "bottom" if self.get_attr("ticklabels_dir") < 0 else "top"

    def _range(self, context: PlotContext) -> tuple[float, float]:
        return _fill_range(self.get_attr("range"), context.data_bbox.xrange())

    def _make_grid(self, context: PlotContext, ticks: np.ndarray) -> list[Drawable]:
        style = self.get_attr("grid_style") or {}
        return [LineX(tick, **style) for tick in ticks.tolist()]


class HalfAxisY(HalfAxis):
    def _pos(self, context: PlotContext, a: float, db: float = 0.0) -> Point:
        p = context.geom.project_point((self._intercept(context), a))
        return Point(p.x + db, p.y)

    def _dpos(self, d: float) -> Point:
        return Point(d, 0.0)

    def _align(self) -> tuple[str, str]:
        if self.get_attr("ticklabels_dir") > 0:
            return "left", "center"
        return "right", "center"

    def _intercept(self, context: PlotContext) -> float:
        intercept = self.get_attr("intercept")
        if intercept is not None:
            return float(intercept)
        xmin, xmax = context.data_bbox.xrange()
        if (self.get_attr("ticklabels_dir") > 0) != context.geom.xflipped:
            return xmax
        return xmin

    def _log(self, context: PlotContext) -> bool:
        log = self.get_attr("log")
        if log is None:
            return context.ylog
        return bool(log)

    def _side(self) -> str:
        return "right" if self.get_attr("ticklabels_dir") > 0 else "left"

    def _range(self, context: PlotContext) -> tuple[float, float]:
        return _fill_range(self.get_attr("range"), context.data_bbox.yrange())

    def _make_grid(self, context: PlotContext, ticks: np.ndarray) -> list[Drawable]:
        style = self.get_attr("grid_style") or {}
        return [LineY(tick, **style) for tick in ticks.tolist()]


def _fill_range(user: Sequence[float | None] | None, data: tuple[float, float]) -> tuple[float, float]:
    if user is None:
        return data
    a, b = user
    return (data[0] if a is None else float(a), data[1] if b is None else float(b))


def frame(
    labelticks: Sequence[bool] = (False, True, True, False),
    *,
    config: StyleConfig | None = None,
    **kw: Any,
) -> PlotComposite:
    """Four half axes around a plot; `labelticks` flags the top, bottom, left and right labels."""
    top, bottom, left, right = (bool(flag) for flag in labelticks)
    x2 = HalfAxisX(config, draw_ticklabels=top, ticklabels_dir=1)
    x1 = HalfAxisX(config, draw_ticklabels=bottom, ticklabels_dir=-1)
    y1 = HalfAxisY(config, draw_ticklabels=left, ticklabels_dir=-1)
    y2 = HalfAxisY(config, draw_ticklabels=right, ticklabels_dir=1)
    composite = PlotComposite(x1, x2, y1, y2, config=config, **kw)
    composite.set_attr("dont_clip", True)
    return composite
