from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterator, Sequence

from plotlayout.axis import HalfAxis, HalfAxisX, HalfAxisY, frame
from plotlayout.components import Drawable, PlotComposite, first_not_none
from plotlayout.config import StyleConfig, default_config
from plotlayout.context import PlotContext, fontsize_relative, size_relative
from plotlayout.errors import EmptyContainerError
from plotlayout.geometry import BoundingBox, Point
from plotlayout.layout import solve_interior
from plotlayout.projection import LogAwareProjection
from plotlayout.renderer import Renderer, draw_text
from plotlayout.style import TEXT_RENAME, HasAttr, broadcast_attr, normalize_style


Range = tuple[float, float]


def limits_axis(
    content_range: Sequence[float | None] | None,
    gutter: float | None,
    user_range: Sequence[float | None] | None,
    is_log: bool,
) -> Range:
    """Axis limits from the content extent, padded by `gutter` and overridden by `user_range`.

    An unknown content extent defaults to ``(0, 1)``; a degenerate result is
    widened to ``(lo - 1, lo + 1)`` on linear and log axes alike.
    """
    r0, r1 = 0.0, 1.0
    if content_range is not None:
        a, b = content_range
        # an axis with no extent is stored as (inf, -inf)
        if a is not None and math.isfinite(a):
            r0 = float(a)
        if b is not None and math.isfinite(b):
            r1 = float(b)

    if gutter is not None:
        dx = 0.5 * float(gutter) * (r1 - r0)
        a = r0 - dx
        if not is_log or a > 0:
            r0 = a
        r1 = r1 + dx

    if user_range is not None:
        a, b = user_range
        if a is not None:
            r0 = float(a)
        if b is not None:
            r1 = float(b)

    if r0 == r1:
        r0, r1 = r0 - 1.0, r1 + 1.0
    return r0, r1


def _make_context(
    device: Renderer,
    region: BoundingBox,
    xr: Range,
    yr: Range,
    xlog: bool,
    ylog: bool,
    config: StyleConfig,
) -> PlotContext:
    # xr/yr keep their order so a reversed user range flips the projection
    geom = LogAwareProjection.from_limits(xr[0], xr[1], yr[0], yr[1], region, xlog, ylog)
    data_bbox = BoundingBox.from_points((xr[0], yr[0]), (xr[1], yr[1]))
    return PlotContext(device, region, data_bbox, geom, xlog=xlog, ylog=ylog, config=config)


class PlotContainer(HasAttr):
    """Something that can be laid out inside a region of a renderer."""

    default_layers = ("PlotContainer",)

    def __init__(self, config: StyleConfig | None = None, **kw: Any) -> None:
        super().__init__()
        self.config = config if config is not None else default_config()
        self.iniattr(self.config, **kw)

    @property
    def fontsize_min(self) -> float:
        return float(self.config.config_value("PlotContext", "fontsize_min", 0.0))

    def is_empty(self) -> bool:
        raise NotImplementedError

    def exterior(self, device: Renderer, interior: BoundingBox) -> BoundingBox:
        return interior

    def interior(self, device: Renderer, exterior: BoundingBox) -> BoundingBox:
        solution = solve_interior(
            lambda bb: self.exterior(device, bb),
            exterior,
            aspect_ratio=self.get_attr("aspect_ratio", None),
        )
        return solution.interior

    def _title(self) -> str | None:
        title = self.get_attr("title", None)
        return None if title is None else str(title)

    def _title_fontsize(self, device: Renderer, bbox: BoundingBox) -> float:
        style = self.get_attr("title_style", None) or {}
        relsize = normalize_style(style, TEXT_RENAME).get("fontsize", 3.0)
        return fontsize_relative(float(relsize), bbox, device.bbox, self.fontsize_min)

    def compose_interior(self, device: Renderer, interior: BoundingBox) -> None:
        title = self._title()
        if title is None:
            return
        offset = size_relative(self.get_attr("title_offset"), interior)
        ext_bbox = self.exterior(device, interior)
        style = normalize_style(self.get_attr("title_style", None), TEXT_RENAME)
        style["fontsize"] = self._title_fontsize(device, interior)
        style["texthalign"] = "center"
        style["textvalign"] = "bottom"
        draw_text(device, interior.center.x, ext_bbox.ymax + offset, title, style)

    def compose(self, device: Renderer, region: BoundingBox) -> None:
        if self.is_empty():
            raise EmptyContainerError(f"{type(self).__name__} has no content")
        ext_bbox = region
        if self._title() is not None:
            offset = size_relative(self.get_attr("title_offset"), ext_bbox)
            fontsize = self._title_fontsize(device, ext_bbox)
            ext_bbox = ext_bbox.deform(top=-(offset + fontsize))
        self.compose_interior(device, self.interior(device, ext_bbox))

    def page_compose(self, device: Renderer, close_after: bool = True) -> None:
        device.open()
        for key, value in self.config.config_options("defaults").items():
            device.set(key, value)
        bb = device.bbox.scale(1.0 - float(self.get_attr("page_margin")))
        self.compose(device, bb)
        if close_after:
            device.close()


class Plot(PlotContainer):
    """A composite of components with no frame around it."""

    default_layers = ("PlotContainer", "Plot")

    def __init__(self, config: StyleConfig | None = None, **kw: Any) -> None:
        self.content = PlotComposite(config=config)
        super().__init__(config, **kw)

    def is_empty(self) -> bool:
        return self.content.is_empty()

    def add(self, *items: Drawable) -> None:
        self.content.add(*items)

    def _ranges(self) -> tuple[Range, Range]:
        content = self.content.limits()
        gutter = self.get_attr("gutter")
        xr = limits_axis(content.xrange(), gutter, self.get_attr("xrange"), bool(self.get_attr("xlog")))
        yr = limits_axis(content.yrange(), gutter, self.get_attr("yrange"), bool(self.get_attr("ylog")))
        return xr, yr

    def limits(self) -> BoundingBox:
        xr, yr = self._ranges()
        return BoundingBox.from_points((xr[0], yr[0]), (xr[1], yr[1]))

    def compose_interior(self, device: Renderer, interior: BoundingBox, limits: BoundingBox | None = None) -> None:
        super().compose_interior(device, interior)
        if limits is None:
            xr, yr = self._ranges()
        else:
            xr, yr = limits.xrange(), limits.yrange()
        context = _make_context(
            device,
            interior,
            xr,
            yr,
            bool(self.get_attr("xlog")),
            bool(self.get_attr("ylog")),
            self.config,
        )
        self.content.render(context)


class FramedPlot(PlotContainer):
    """A plot inside four half axes, with optional secondary content on the top/right axes."""

    default_layers = ("PlotContainer", "FramedPlot")

    def __init__(self, config: StyleConfig | None = None, **kw: Any) -> None:
        self.content1 = PlotComposite(config=config)
        self.content2 = PlotComposite(config=config)
        self.x1 = HalfAxisX(config, ticklabels_dir=-1)
        self.y1 = HalfAxisY(config, ticklabels_dir=-1)
        self.x2 = HalfAxisX(config, draw_ticklabels=None)
        self.y2 = HalfAxisY(config, draw_ticklabels=None)

        self.frame: tuple[HalfAxis, ...] = (self.x1, self.x2, self.y1, self.y2)
        self.frame1: tuple[HalfAxis, ...] = (self.x1, self.y1)
        self.frame2: tuple[HalfAxis, ...] = (self.x2, self.y2)
        self.x: tuple[HalfAxis, ...] = (self.x1, self.x2)
        self.y: tuple[HalfAxis, ...] = (self.y1, self.y2)

        broadcast_attr(self.frame, "grid_style", {"linetype": "dot"})
        broadcast_attr(self.frame, "tickdir", -1)
        broadcast_attr(self.frame1, "draw_grid", False)
        super().__init__(config, **kw)

    def _route(self, name: str) -> tuple[HalfAxis, str] | None:
        routes = {
            "xlabel": (self.x1, "label"),
            "ylabel": (self.y1, "label"),
            "xlog": (self.x1, "log"),
            "ylog": (self.y1, "log"),
            "xrange": (self.x1, "range"),
            "yrange": (self.y1, "range"),
            "xtitle": (self.x1, "label"),
            "ytitle": (self.y1, "label"),
        }
        return routes.get(name)

    def has_attr(self, name: str) -> bool:
        route = self._route(name)
        if route is not None:
            return route[0].has_attr(route[1])
        return super().has_attr(name)

    def get_attr(self, name: str, *default: Any) -> Any:
        route = self._route(name)
        if route is not None:
            return route[0].get_attr(route[1], *default)
        return super().get_attr(name, *default)

    def set_attr(self, name: str, value: Any) -> None:
        route = self._route(name)
        if route is not None:
            route[0].set_attr(route[1], value)
        else:
            super().set_attr(name, value)

    def is_empty(self) -> bool:
        return self.content1.is_empty() and self.content2.is_empty()

    def add(self, *items: Drawable) -> None:
        self.content1.add(*items)

    def add2(self, *items: Drawable) -> None:
        self.content2.add(*items)

    def _context1(self, device: Renderer, region: BoundingBox) -> PlotContext:
        xlog = bool(self.x1.get_attr("log"))
        ylog = bool(self.y1.get_attr("log"))
        gutter = self.get_attr("gutter")
        l1 = self.content1.limits()
        xr = limits_axis(l1.xrange(), gutter, self.x1.get_attr("range"), xlog)
        yr = limits_axis(l1.yrange(), gutter, self.y1.get_attr("range"), ylog)
        return _make_context(device, region, xr, yr, xlog, ylog, self.config)

    def _context2(self, device: Renderer, region: BoundingBox) -> PlotContext:
        xlog = bool(first_not_none(self.x2.get_attr("log"), self.x1.get_attr("log")))
        ylog = bool(first_not_none(self.y2.get_attr("log"), self.y1.get_attr("log")))
        gutter = self.get_attr("gutter")
        l2 = self.content1.limits() if self.content2.is_empty() else self.content2.limits()
        xr = first_not_none(self.x2.get_attr("range"), self.x1.get_attr("range"))
        yr = first_not_none(self.y2.get_attr("range"), self.y1.get_attr("range"))
        xr = limits_axis(l2.xrange(), gutter, xr, xlog)
        yr = limits_axis(l2.yrange(), gutter, yr, ylog)
        return _make_context(device, region, xr, yr, xlog, ylog, self.config)

    def exterior(self, device: Renderer, interior: BoundingBox) -> BoundingBox:
        bb = interior
        context1 = self._context1(device, interior)
        bb += self.x1.bounding_box(context1) + self.y1.bounding_box(context1)
        context2 = self._context2(device, interior)
        bb += self.x2.bounding_box(context2) + self.y2.bounding_box(context2)
        return bb

    def compose_interior(self, device: Renderer, interior: BoundingBox) -> None:
        super().compose_interior(device, interior)
        context1 = self._context1(device, interior)
        context2 = self._context2(device, interior)

        self.content1.render(context1)
        self.content2.render(context2)

        self.y2.render(context2)
        self.x2.render(context2)
        self.y1.render(context1)
        self.x1.render(context1)


@dataclass(frozen=True)
class Grid:
    """Cell boxes of a rows x cols layout; row 0 is the top row."""

    nrows: int
    ncols: int
    origin: Point
    step_x: float
    step_y: float
    cell_width: float
    cell_height: float

    @classmethod
    def from_bbox(cls, nrows: int, ncols: int, bbox: BoundingBox, cellpadding: float, cellspacing: float) -> Grid:
        cp = size_relative(cellpadding, bbox)
        cs = size_relative(cellspacing, bbox)
        step_x = (bbox.width + cs) / ncols
        step_y = (bbox.height + cs) / nrows
        return cls(
            nrows=nrows,
            ncols=ncols,
            origin=bbox.lowerleft + Point(cp, cp),
            step_x=step_x,
            step_y=step_y,
            cell_width=step_x - cs - 2 * cp,
            cell_height=step_y - cs - 2 * cp,
        )

    def cellbb(self, i: int, j: int) -> BoundingBox:
        p = self.origin + Point(j * self.step_x, (self.nrows - 1 - i) * self.step_y)
        return BoundingBox.from_points(p, (p.x + self.cell_width, p.y + self.cell_height))


def _check_shape(rows: int, cols: int) -> None:
    if rows < 1 or cols < 1:
        raise ValueError("rows and cols must be >= 1")


def _check_index(key: tuple[int, int], rows: int, cols: int) -> tuple[int, int]:
    i, j = key
    if not (0 <= i < rows and 0 <= j < cols):
        raise IndexError(f"cell ({i}, {j}) out of range for {rows}x{cols} grid")
    return i, j


class Table(PlotContainer):
    """Grid of independent containers, indexed ``table[row, col]`` from the top left."""

    default_layers = ("PlotContainer", "Table")

    def __init__(self, rows: int, cols: int, config: StyleConfig | None = None, **kw: Any) -> None:
        _check_shape(rows, cols)
        self.rows = rows
        self.cols = cols
        self.content: list[list[PlotContainer | None]] = [[None] * cols for _ in range(rows)]
        super().__init__(config, **kw)

    def __getitem__(self, key: tuple[int, int]) -> PlotContainer | None:
        i, j = _check_index(key, self.rows, self.cols)
        return self.content[i][j]

    def __setitem__(self, key: tuple[int, int], obj: PlotContainer) -> None:
        i, j = _check_index(key, self.rows, self.cols)
        self.content[i][j] = obj

    def is_empty(self) -> bool:
        return all(obj is None for row in self.content for obj in row)

    def _cells(self, interior: BoundingBox) -> Iterator[tuple[PlotContainer, BoundingBox]]:
        g = Grid.from_bbox(self.rows, self.cols, interior, self.get_attr("cellpadding"), self.get_attr("cellspacing"))
        for i in range(self.rows):
            for j in range(self.cols):
                obj = self.content[i][j]
                if obj is not None:
                    yield obj, g.cellbb(i, j)

    def exterior(self, device: Renderer, interior: BoundingBox) -> BoundingBox:
        ext = interior
        if self.get_attr("align_interiors"):
            for obj, subregion in self._cells(interior):
                ext += obj.exterior(device, subregion)
        return ext

    def compose_interior(self, device: Renderer, interior: BoundingBox) -> None:
        super().compose_interior(device, interior)
        align = self.get_attr("align_interiors")
        for obj, subregion in self._cells(interior):
            if align:
                obj.compose_interior(device, subregion)
            else:
                obj.compose(device, subregion)


def _range_union(a: Range, b: Range) -> Range:
    return min(a[0], b[0]), max(a[1], b[1])


class FramedArray(PlotContainer):
    """Grid of plots drawn inside shared frames, with one x and one y label for the whole array."""

    default_layers = ("PlotContainer", "FramedArray")
    distributed_attrs = frozenset({"gutter", "xlog", "ylog", "xrange", "yrange"})

    def __init__(self, nrows: int, ncols: int, config: StyleConfig | None = None, **kw: Any) -> None:
        _check_shape(nrows, ncols)
        self.nrows = nrows
        self.ncols = ncols
        self.content = [[Plot(config) for _ in range(ncols)] for _ in range(nrows)]
        super().__init__(config, **kw)

    def __getitem__(self, key: tuple[int, int]) -> Plot:
        i, j = _check_index(key, self.nrows, self.ncols)
        return self.content[i][j]

    def set_attr(self, name: str, value: Any) -> None:
        if name in self.distributed_attrs:
            for row in self.content:
                for plot in row:
                    plot.set_attr(name, value)
        else:
            super().set_attr(name, value)

    def is_empty(self) -> bool:
        return all(plot.is_empty() for row in self.content for plot in row)

    def add(self, *items: Drawable) -> None:
        for row in self.content:
            for plot in row:
                plot.add(*items)

    def _limits(self, i: int, j: int) -> BoundingBox:
        if self.get_attr("uniform_limits"):
            return self._limits_uniform()
        return self._limits_nonuniform(i, j)

    def _limits_uniform(self) -> BoundingBox:
        lmts = BoundingBox.empty()
        for row in self.content:
            for plot in row:
                lmts += plot.limits()
        return lmts

    def _limits_nonuniform(self, i: int, j: int) -> BoundingBox:
        lx = self.content[0][j].limits().xrange()
        for k in range(1, self.nrows):
            lx = _range_union(self.content[k][j].limits().xrange(), lx)
        ly = self.content[i][0].limits().yrange()
        for k in range(1, self.ncols):
            ly = _range_union(self.content[i][k].limits().yrange(), ly)
        return BoundingBox(lx[0], lx[1], ly[0], ly[1])

    def _grid(self, interior: BoundingBox) -> Grid:
        return Grid.from_bbox(self.nrows, self.ncols, interior, 0.0, self.get_attr("cellspacing"))

    def _labelticks(self, i: int, j: int) -> tuple[bool, bool, bool, bool]:
        return (False, i == self.nrows - 1, j == 0, False)

    def _frame_context(self, plot: Plot, device: Renderer, region: BoundingBox, limits: BoundingBox) -> PlotContext:
        return _make_context(
            device,
            region,
            limits.xrange(),
            limits.yrange(),
            bool(plot.get_attr("xlog")),
            bool(plot.get_attr("ylog")),
            self.config,
        )

    def _frames_bbox(self, device: Renderer, interior: BoundingBox) -> BoundingBox:
        bb = BoundingBox.empty()
        g = self._grid(interior)
        for i, j in ((0, 0), (self.nrows - 1, self.ncols - 1)):
            context = self._frame_context(self.content[i][j], device, g.cellbb(i, j), self._limits(i, j))
            bb += frame(self._labelticks(i, j), config=self.config).bounding_box(context)
        return bb

    def _label_metrics(self, device: Renderer, interior: BoundingBox) -> tuple[float, float]:
        offset = size_relative(self.get_attr("label_offset"), interior)
        size = fontsize_relative(self.get_attr("label_size"), interior, device.bbox, self.fontsize_min)
        return offset, size

    def exterior(self, device: Renderer, interior: BoundingBox) -> BoundingBox:
        bb = self._frames_bbox(device, interior)
        offset, size = self._label_metrics(device, interior)
        margin = offset + size
        if self.get_attr("xlabel") is not None:
            bb = bb.deform(bottom=margin)
        if self.get_attr("ylabel") is not None:
            bb = bb.deform(left=margin)
        return bb

    def _frames_draw(self, device: Renderer, interior: BoundingBox) -> None:
        g = self._grid(interior)
        for i in range(self.nrows):
            for j in range(self.ncols):
                context = self._frame_context(self.content[i][j], device, g.cellbb(i, j), self._limits(i, j))
                frame(self._labelticks(i, j), config=self.config).render(context)

    def _data_draw(self, device: Renderer, interior: BoundingBox) -> None:
        g = self._grid(interior)
        for i in range(self.nrows):
            for j in range(self.ncols):
                self.content[i][j].compose_interior(device, g.cellbb(i, j), self._limits(i, j))

    def _labels_draw(self, device: Renderer, interior: BoundingBox) -> None:
        bb = self._frames_bbox(device, interior)
        offset, size = self._label_metrics(device, interior)
        xlabel = self.get_attr("xlabel")
        ylabel = self.get_attr("ylabel")
        if xlabel is not None:
            draw_text(
                device,
                interior.center.x,
                bb.ymin - offset,
                str(xlabel),
                {"fontsize": size, "texthalign": "center", "textvalign": "top"},
            )
        if ylabel is not None:
            draw_text(
                device,
                bb.xmin - offset,
                interior.center.y,
                str(ylabel),
                {"fontsize": size, "texthalign": "center", "textvalign": "bottom", "textangle": 90.0},
            )

    def compose_interior(self, device: Renderer, interior: BoundingBox) -> None:
        super().compose_interior(device, interior)
        self._data_draw(device, interior)
        self._frames_draw(device, interior)
        self._labels_draw(device, interior)
