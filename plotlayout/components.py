from __future__ import annotations

import math
from typing import Any, Iterable, Protocol, Sequence, TypeAlias

import numpy as np

from plotlayout import render_objects as ro
from plotlayout.adapters.normalize import coerce_1d, normalize_values, normalize_xy
from plotlayout.config import StyleConfig
from plotlayout.context import PlotContext
from plotlayout.errors import PlotDataError
from plotlayout.geometry import INF, BoundingBox, Point, as_point
from plotlayout.projection import Projection, compose, plot_fraction_projection
from plotlayout.style import LINE_RENAME, SYMBOL_RENAME, TEXT_RENAME, HasStyle


class PlotComponent(HasStyle):
    default_layers = ("PlotComponent",)

    def __init__(self, config: StyleConfig | None = None, **kw: Any) -> None:
        super().__init__()
        self.configure(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox.empty()

    def make(self, context: PlotContext) -> list[Drawable]:
        return []

    def make_key(self, bbox: BoundingBox) -> ro.RenderObject | None:
        return None

    def bounding_box(self, context: PlotContext) -> BoundingBox:
        return group_bounding_box(self.make(context), context)

    def render(self, context: PlotContext) -> None:
        items = self.make(context)
        with context.styled(self.get_attr("style")):
            for item in items:
                render_item(item, context)


Drawable: TypeAlias = "ro.RenderObject | PlotComponent"


def item_bounding_box(item: Drawable, context: PlotContext) -> BoundingBox:
    if isinstance(item, PlotComponent):
        return item.bounding_box(context)
    return ro.bounding_box(item, context)


def group_bounding_box(items: Iterable[Drawable], context: PlotContext) -> BoundingBox:
    bb = BoundingBox.empty()
    for item in items:
        bb += item_bounding_box(item, context)
    return bb


def render_item(item: Drawable, context: PlotContext) -> None:
    if isinstance(item, PlotComponent):
        item.render(context)
    else:
        ro.render(item, context)


# line components


class LineComponent(PlotComponent):
    default_layers = ("PlotComponent", "LineComponent")
    style_rename = LINE_RENAME

    def make_key(self, bbox: BoundingBox) -> ro.RenderObject | None:
        y = bbox.center.y
        return ro.LineObject((bbox.xmin, y), (bbox.xmax, y), self.get_attr("style"))


class Curve(LineComponent):
    default_layers = ("PlotComponent", "LineComponent", "Curve")

    def __init__(self, x: Any, y: Any, *, data: Any = None, config: StyleConfig | None = None, **kw: Any) -> None:
        self.series = normalize_xy(y, x=x, data=data)
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        m = self.series.mask
        return BoundingBox.from_arrays(self.series.x[m], self.series.y[m])

    def make(self, context: PlotContext) -> list[Drawable]:
        objs: list[Drawable] = []
        for xs, ys in self.series.segments():
            u, v = context.geom.project(xs, ys)
            objs.append(ro.PathObject(u, v))
        return objs


class Slope(LineComponent):
    default_layers = ("PlotComponent", "LineComponent", "Slope")

    def __init__(
        self,
        slope: float,
        intercept: tuple[float, float] = (0.0, 0.0),
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        self.slope = float(slope)
        self.intercept = (float(intercept[0]), float(intercept[1]))
        super().__init__(config, **kw)

    def _x(self, y: float) -> float:
        x0, y0 = self.intercept
        return x0 + (y - y0) / self.slope

    def _y(self, x: float) -> float:
        x0, y0 = self.intercept
        return y0 + (x - x0) * self.slope

    def make(self, context: PlotContext) -> list[Drawable]:
        xr = context.data_bbox.xrange()
        yr = context.data_bbox.yrange()
        if self.slope == 0:
            candidates = [(xr[0], self.intercept[1]), (xr[1], self.intercept[1])]
        else:
            candidates = [
                (xr[0], self._y(xr[0])),
                (xr[1], self._y(xr[1])),
                (self._x(yr[0]), yr[0]),
                (self._x(yr[1]), yr[1]),
            ]
        inside = [p for p in candidates if context.data_bbox.contains(*p)]
        if len(inside) < 2:
            return []
        a = context.geom.project_point(inside[0])
        b = context.geom.project_point(inside[-1])
        return [ro.LineObject(a, b)]


class Histogram(LineComponent):
    default_layers = ("PlotComponent", "LineComponent", "Histogram")

    def __init__(
        self,
        values: Any,
        binsize: float,
        x0: float = 0.0,
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        self.values = coerce_1d(values, label="values")
        if self.values.size == 0:
            raise PlotDataError("empty series")
        if binsize <= 0:
            raise PlotDataError("binsize must be > 0")
        self.binsize = float(binsize)
        self.x0 = float(x0)
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        lo = float(np.nanmin(self.values))
        hi = float(np.nanmax(self.values))
        if self.get_attr("drop_to_zero"):
            lo = min(0.0, lo)
        return BoundingBox(self.x0, self.x0 + self.values.size * self.binsize, lo, hi)

    def make(self, context: PlotContext) -> list[Drawable]:
        n = self.values.size
        edges = self.x0 + self.binsize * np.arange(n + 1, dtype=np.float64)
        x = np.repeat(edges, 2)[1:-1]
        y = np.repeat(self.values, 2)
        if self.get_attr("drop_to_zero"):
            x = np.concatenate(([edges[0]], x, [edges[-1]]))
            y = np.concatenate(([0.0], y, [0.0]))
        u, v = context.geom.project(x, y)
        return [ro.PathObject(u, v)]


class LineX(LineComponent):
    default_layers = ("PlotComponent", "LineComponent", "LineX")

    def __init__(self, x: float, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.x = float(x)
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox(self.x, self.x, INF, -INF)

    def make(self, context: PlotContext) -> list[Drawable]:
        yr = context.data_bbox.yrange()
        a = context.geom.project_point((self.x, yr[0]))
        b = context.geom.project_point((self.x, yr[1]))
        return [ro.LineObject(a, b)]


class LineY(LineComponent):
    default_layers = ("PlotComponent", "LineComponent", "LineY")

    def __init__(self, y: float, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.y = float(y)
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox(INF, -INF, self.y, self.y)

    def make(self, context: PlotContext) -> list[Drawable]:
        xr = context.data_bbox.xrange()
        a = context.geom.project_point((xr[0], self.y))
        b = context.geom.project_point((xr[1], self.y))
        return [ro.LineObject(a, b)]


# error bars


def _all_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


class ErrorBar(PlotComponent):
    default_layers = ("PlotComponent", "ErrorBar")
    style_rename = LINE_RENAME


class ErrorBarsX(ErrorBar):
    default_layers = ("PlotComponent", "ErrorBar", "ErrorBarsX")

    def __init__(self, y: Any, lo: Any, hi: Any, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.y, self.lo, self.hi = normalize_values(("y", y), ("lo", lo), ("hi", hi))
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox.from_arrays(np.concatenate((self.lo, self.hi)), self.y)

    def make(self, context: PlotContext) -> list[Drawable]:
        cap = context.size_relative(self.get_attr("barsize"))
        objs: list[Drawable] = []
        for y, lo, hi in zip(self.y.tolist(), self.lo.tolist(), self.hi.tolist()):
            if not _all_finite(y, lo, hi):
                continue
            p = context.geom.project_point((lo, y))
            q = context.geom.project_point((hi, y))
            objs.append(ro.LineObject(p, q))
            objs.append(ro.LineObject((p.x, p.y - cap), (p.x, p.y + cap)))
            objs.append(ro.LineObject((q.x, q.y - cap), (q.x, q.y + cap)))
        return objs


class ErrorBarsY(ErrorBar):
    default_layers = ("PlotComponent", "ErrorBar", "ErrorBarsY")

    def __init__(self, x: Any, lo: Any, hi: Any, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.x, self.lo, self.hi = normalize_values(("x", x), ("lo", lo), ("hi", hi))
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox.from_arrays(self.x, np.concatenate((self.lo, self.hi)))

    def make(self, context: PlotContext) -> list[Drawable]:
        cap = context.size_relative(self.get_attr("barsize"))
        objs: list[Drawable] = []
        for x, lo, hi in zip(self.x.tolist(), self.lo.tolist(), self.hi.tolist()):
            if not _all_finite(x, lo, hi):
                continue
            p = context.geom.project_point((x, lo))
            q = context.geom.project_point((x, hi))
            objs.append(ro.LineObject(p, q))
            objs.append(ro.LineObject((p.x - cap, p.y), (p.x + cap, p.y)))
            objs.append(ro.LineObject((q.x - cap, q.y), (q.x + cap, q.y)))
        return objs


def SymmetricErrorBarsX(x: Any, y: Any, err: Any, **kw: Any) -> ErrorBarsX:
    xa, ya, ea = normalize_values(("x", x), ("y", y), ("err", err))
    return ErrorBarsX(ya, xa - ea, xa + ea, **kw)


def SymmetricErrorBarsY(x: Any, y: Any, err: Any, **kw: Any) -> ErrorBarsY:
    xa, ya, ea = normalize_values(("x", x), ("y", y), ("err", err))
    return ErrorBarsY(xa, ya - ea, ya + ea, **kw)


# fills


class FillComponent(PlotComponent):
    default_layers = ("PlotComponent", "FillComponent")

    def make_key(self, bbox: BoundingBox) -> ro.RenderObject | None:
        return ro.box_object(bbox.lowerleft, bbox.upperright, self.get_attr("style"))


class FillAbove(FillComponent):
    default_layers = ("PlotComponent", "FillComponent", "FillAbove")

    def __init__(self, x: Any, y: Any, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.x, self.y = normalize_values(("x", x), ("y", y))
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox.from_arrays(self.x, self.y)

    def make(self, context: PlotContext) -> list[Drawable]:
        top = context.data_bbox.ymax
        xs = np.concatenate((self.x, [self.x[-1], self.x[0]]))
        ys = np.concatenate((self.y, [top, top]))
        u, v = context.geom.project(xs, ys)
        return [ro.PolygonObject(list(zip(u.tolist(), v.tolist())))]


class FillBelow(FillComponent):
    default_layers = ("PlotComponent", "FillComponent", "FillBelow")

    def __init__(self, x: Any, y: Any, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.x, self.y = normalize_values(("x", x), ("y", y))
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox.from_arrays(self.x, self.y)

    def make(self, context: PlotContext) -> list[Drawable]:
        bottom = context.data_bbox.ymin
        xs = np.concatenate((self.x, [self.x[-1], self.x[0]]))
        ys = np.concatenate((self.y, [bottom, bottom]))
        u, v = context.geom.project(xs, ys)
        return [ro.PolygonObject(list(zip(u.tolist(), v.tolist())))]


class FillBetween(FillComponent):
    default_layers = ("PlotComponent", "FillComponent", "FillBetween")

    def __init__(
        self,
        x1: Any,
        y1: Any,
        x2: Any,
        y2: Any,
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        self.x1, self.y1 = normalize_values(("x1", x1), ("y1", y1))
        self.x2, self.y2 = normalize_values(("x2", x2), ("y2", y2))
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox.from_arrays(np.concatenate((self.x1, self.x2)), np.concatenate((self.y1, self.y2)))

    def make(self, context: PlotContext) -> list[Drawable]:
        xs = np.concatenate((self.x1, self.x2[::-1]))
        ys = np.concatenate((self.y1, self.y2[::-1]))
        u, v = context.geom.project(xs, ys)
        return [ro.PolygonObject(list(zip(u.tolist(), v.tolist())))]


# images


class Image(PlotComponent):
    default_layers = ("PlotComponent", "Image")

    def __init__(
        self,
        xrange: tuple[float, float],
        yrange: tuple[float, float],
        img: Any,
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        self.img = img
        self.x = float(min(xrange))
        self.y = float(min(yrange))
        self.w = float(abs(xrange[1] - xrange[0]))
        self.h = float(abs(yrange[1] - yrange[0]))
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        return BoundingBox(self.x, self.x + self.w, self.y, self.y + self.h)

    def make(self, context: PlotContext) -> list[Drawable]:
        a = context.geom.project_point((self.x, self.y))
        b = context.geom.project_point((self.x + self.w, self.y + self.h))
        return [ro.ImageObject(self.img, BoundingBox.from_points(a, b))]


# symbols


class SymbolDataComponent(PlotComponent):
    default_layers = ("PlotComponent", "SymbolDataComponent")
    style_rename = SYMBOL_RENAME

    def make_key(self, bbox: BoundingBox) -> ro.RenderObject | None:
        return ro.SymbolObject(bbox.center, self.get_attr("style"))


class Points(SymbolDataComponent):
    default_layers = ("PlotComponent", "SymbolDataComponent", "Points")

    def __init__(self, x: Any, y: Any, *, data: Any = None, config: StyleConfig | None = None, **kw: Any) -> None:
        self.series = normalize_xy(y, x=x, data=data)
        super().__init__(config, **kw)

    def limits(self) -> BoundingBox:
        m = self.series.mask
        return BoundingBox.from_arrays(self.series.x[m], self.series.y[m])

    def make(self, context: PlotContext) -> list[Drawable]:
        m = self.series.mask
        u, v = context.geom.project(self.series.x[m], self.series.y[m])
        return [ro.SymbolsObject(u, v)]


def point(x: float, y: float, **kw: Any) -> Points:
    return Points([x], [y], **kw)


# labels


class LabelComponent(PlotComponent):
    default_layers = ("PlotComponent", "LabelComponent")
    style_rename = TEXT_RENAME


class DataLabel(LabelComponent):
    default_layers = ("PlotComponent", "LabelComponent", "DataLabel")

    def __init__(self, x: float, y: float, text: str, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.pos = Point(float(x), float(y))
        self.text = text
        super().__init__(config, **kw)

    def make(self, context: PlotContext) -> list[Drawable]:
        pos = context.geom.project_point(self.pos)
        return [ro.TextObject(pos, self.text, self.get_attr("style"))]


class PlotLabel(LabelComponent):
    default_layers = ("PlotComponent", "LabelComponent", "PlotLabel")

    def __init__(self, x: float, y: float, text: str, *, config: StyleConfig | None = None, **kw: Any) -> None:
        self.pos = Point(float(x), float(y))
        self.text = text
        super().__init__(config, **kw)

    def make(self, context: PlotContext) -> list[Drawable]:
        pos = context.plot_geom.project_point(self.pos)
        return [ro.TextObject(pos, self.text, self.get_attr("style"))]


class BoxLabel(PlotComponent):
    default_layers = ("PlotComponent", "BoxLabel")
    style_rename = {"face": "fontface", "size": "fontsize"}

    def __init__(
        self,
        objs: Sequence[Drawable],
        text: str,
        side: str,
        offset: float,
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        if text is None:
            raise ValueError("box label text is required")
        if side not in ("top", "bottom", "left", "right"):
            raise ValueError(f"unsupported box label side: {side!r}")
        self.objs = list(objs)
        self.text = text
        self.side = side
        self.offset = float(offset)
        super().__init__(config, **kw)

    def make(self, context: PlotContext) -> list[Drawable]:
        bb = group_bounding_box(self.objs, context)
        if bb.is_empty:
            return []
        offset = context.size_relative(self.offset)
        if self.side == "top":
            p, q = bb.upperleft, bb.upperright
        elif self.side == "bottom":
            p, q = bb.lowerleft, bb.lowerright
            offset = -offset
        elif self.side == "left":
            p, q = bb.lowerleft, bb.upperleft
        else:
            p, q = bb.upperright, bb.lowerright
        return [ro.line_text_object(p, q, self.text, offset, self.get_attr("style"))]


class Legend(PlotComponent):
    default_layers = ("PlotComponent", "Legend")
    style_rename = TEXT_RENAME

    def __init__(
        self,
        x: float,
        y: float,
        components: Sequence[PlotComponent],
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        self.x = float(x)
        self.y = float(y)
        self.components = list(components)
        super().__init__(config, **kw)

    def make(self, context: PlotContext) -> list[Drawable]:
        key_pos = context.plot_geom.project_point((self.x, self.y))
        key_width = context.size_relative(self.get_attr("key_width"))
        key_height = context.size_relative(self.get_attr("key_height"))
        key_hsep = context.size_relative(self.get_attr("key_hsep"))
        key_vsep = context.size_relative(self.get_attr("key_vsep"))

        if self.kw_get("texthalign") == "left":
            text_pos = Point(key_pos.x + 0.5 * key_width + key_hsep, key_pos.y)
        else:
            text_pos = Point(key_pos.x - 0.5 * key_width - key_hsep, key_pos.y)
        bbox = BoundingBox(
            key_pos.x - 0.5 * key_width,
            key_pos.x + 0.5 * key_width,
            key_pos.y - 0.5 * key_height,
            key_pos.y + 0.5 * key_height,
        )
        dp = Point(0.0, -(key_vsep + key_height))

        objs: list[Drawable] = []
        for comp in self.components:
            objs.append(ro.TextObject(text_pos, str(comp.get_attr("label", "")), self.get_attr("style")))
            key = comp.make_key(bbox)
            if key is not None:
                objs.append(key)
            text_pos = text_pos + dp
            bbox = bbox.shift(dp.x, dp.y)
        return objs


# composites


class PlotComposite(PlotComponent):
    default_layers = ("PlotComposite",)

    def __init__(self, *items: Drawable, config: StyleConfig | None = None, **kw: Any) -> None:
        self.components: list[Drawable] = list(items)
        super().__init__(config, **kw)

    @property
    def dont_clip(self) -> bool:
        return bool(self.get_attr("dont_clip", False))

    def add(self, *items: Drawable) -> None:
        self.components.extend(items)

    def clear(self) -> None:
        self.components = []

    def is_empty(self) -> bool:
        return not self.components

    def limits(self) -> BoundingBox:
        bb = BoundingBox.empty()
        for item in self.components:
            if isinstance(item, PlotComponent):
                bb += item.limits()
        return bb

    def make(self, context: PlotContext) -> list[Drawable]:
        return list(self.components)

    def render(self, context: PlotContext) -> None:
        with context.styled(self.get_attr("style")):
            if not self.dont_clip:
                dev = context.dev_bbox
                context.draw.set_clip_rect(dev.xmin, dev.xmax, dev.ymin, dev.ymax)
            for item in self.components:
                render_item(item, context)


# insets


class InsetPlot(Protocol):
    def compose_interior(self, device: Any, region: BoundingBox) -> None:
        ...


class Inset(PlotComponent):
    def __init__(
        self,
        p: Point | tuple[float, float],
        q: Point | tuple[float, float],
        plot: InsetPlot,
        *,
        config: StyleConfig | None = None,
        **kw: Any,
    ) -> None:
        self.plot_limits = BoundingBox.from_points(as_point(p), as_point(q))
        self.plot = plot
        super().__init__(config, **kw)

    def outer_projection(self, context: PlotContext) -> Projection:
        raise NotImplementedError

    def projection(self, context: PlotContext) -> Projection:
        """Map the inset's unit square onto the device through the parent's projection."""
        return compose(self.outer_projection(context), plot_fraction_projection(self.plot_limits))

    def region(self, context: PlotContext) -> BoundingBox:
        proj = self.projection(context)
        return BoundingBox.from_points(proj.project_point((0.0, 0.0)), proj.project_point((1.0, 1.0)))

    def bounding_box(self, context: PlotContext) -> BoundingBox:
        return self.region(context)

    def render(self, context: PlotContext) -> None:
        self.plot.compose_interior(context.draw, self.region(context))


class DataInset(Inset):
    default_layers = ("PlotComponent", "DataInset")

    def limits(self) -> BoundingBox:
        return self.plot_limits

    def outer_projection(self, context: PlotContext) -> Projection:
        return context.geom


class PlotInset(Inset):
    default_layers = ("PlotComponent", "PlotInset")

    def outer_projection(self, context: PlotContext) -> Projection:
        return context.plot_geom


def first_not_none(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None
