from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, ClassVar, Mapping, Sequence, TypeAlias

import numpy as np

from plotlayout.context import PlotContext
from plotlayout.geometry import BoundingBox, Point, Vec2, as_point
from plotlayout.style import (
    STROKE_RENAME,
    SYMBOL_RENAME,
    TEXT_DEFAULTS,
    TEXT_RENAME,
    normalize_style,
)


HALIGN_OFFSET: Mapping[str, tuple[float, float]] = {
    "right": (-1.0, 0.0),
    "center": (-0.5, 0.5),
    "left": (0.0, 1.0),
}

VALIGN_OFFSET: Mapping[str, tuple[float, float]] = {
    "top": (-1.0, 0.0),
    "center": (-0.5, 0.5),
    "bottom": (0.0, 1.0),
}


def _init_style(
    defaults: Mapping[str, Any],
    style: Mapping[str, Any] | None,
    rename: Mapping[str, str],
) -> dict[str, Any]:
    out = dict(defaults)
    out.update(normalize_style(style, rename))
    return out


@dataclass(eq=False)
class LineObject:
    p: Point
    q: Point
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = STROKE_RENAME

    def __post_init__(self) -> None:
        self.p = as_point(self.p)
        self.q = as_point(self.q)
        self.style = _init_style({}, self.style, self.rename)


@dataclass(eq=False)
class PathObject:
    x: np.ndarray
    y: np.ndarray
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = STROKE_RENAME

    def __post_init__(self) -> None:
        self.x = np.asarray(self.x, dtype=np.float64)
        self.y = np.asarray(self.y, dtype=np.float64)
        if self.x.shape != self.y.shape:
            raise ValueError(f"path x and y length mismatch: {self.x.size} != {self.y.size}")
        self.style = _init_style({}, self.style, self.rename)


@dataclass(eq=False)
class PolygonObject:
    points: Sequence[Point]
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = STROKE_RENAME

    def __post_init__(self) -> None:
        self.points = tuple(as_point(p) for p in self.points)
        self.style = _init_style({}, self.style, self.rename)


@dataclass(eq=False)
class SymbolObject:
    pos: Point
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = SYMBOL_RENAME

    def __post_init__(self) -> None:
        self.pos = as_point(self.pos)
        self.style = _init_style({}, self.style, self.rename)


@dataclass(eq=False)
class SymbolsObject:
    x: np.ndarray
    y: np.ndarray
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = SYMBOL_RENAME

    def __post_init__(self) -> None:
        self.x = np.asarray(self.x, dtype=np.float64)
        self.y = np.asarray(self.y, dtype=np.float64)
        self.style = _init_style({}, self.style, self.rename)


@dataclass(eq=False)
class TextObject:
    pos: Point
    text: str
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = TEXT_RENAME

    def __post_init__(self) -> None:
        self.pos = as_point(self.pos)
        self.style = _init_style(TEXT_DEFAULTS, self.style, self.rename)


@dataclass(eq=False)
class LabelsObject:
    points: Sequence[Point]
    labels: Sequence[str]
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = TEXT_RENAME

    def __post_init__(self) -> None:
        self.points = tuple(as_point(p) for p in self.points)
        self.labels = tuple(self.labels)
        if len(self.points) != len(self.labels):
            raise ValueError(f"labels and positions length mismatch: {len(self.labels)} != {len(self.points)}")
        self.style = _init_style(TEXT_DEFAULTS, self.style, self.rename)


@dataclass(eq=False)
class CombObject:
    points: Sequence[Point]
    dp: Vec2
    style: dict[str, Any] = field(default_factory=dict)

    rename: ClassVar[Mapping[str, str]] = STROKE_RENAME

    def __post_init__(self) -> None:
        self.points = tuple(as_point(p) for p in self.points)
        self.dp = as_point(self.dp)
        self.style = _init_style({}, self.style, self.rename)


@dataclass(eq=False)
class ImageObject:
    img: Any
    bbox: BoundingBox
    style: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.style = _init_style({}, self.style, {})


RenderObject: TypeAlias = (
    LineObject
    | PathObject
    | PolygonObject
    | SymbolObject
    | SymbolsObject
    | TextObject
    | LabelsObject
    | CombObject
    | ImageObject
)


def _align_offsets(halign: str, valign: str) -> tuple[tuple[float, float], tuple[float, float]]:
    try:
        return HALIGN_OFFSET[halign], VALIGN_OFFSET[valign]
    except KeyError as exc:
        raise ValueError(f"unsupported text alignment: {exc.args[0]!r}") from exc


def _text_box(pos: Point, width: float, height: float, halign: str, valign: str) -> BoundingBox:
    ho, vo = _align_offsets(halign, valign)
    return BoundingBox(pos.x + width * ho[0], pos.x + width * ho[1], pos.y + height * vo[0], pos.y + height * vo[1])


def _text_bounding_box(obj: TextObject, context: PlotContext) -> BoundingBox:
    with context.styled(obj.style):
        draw = context.draw
        angle = math.radians(float(draw.get("textangle", 0.0)))
        halign = draw.get("texthalign", "center")
        valign = draw.get("textvalign", "center")
        width = draw.textwidth(obj.text)
        height = draw.textheight(obj.text)
    return _text_box(obj.pos, width, height, halign, valign).rotate(angle, obj.pos)


def _labels_bounding_box(obj: LabelsObject, context: PlotContext) -> BoundingBox:
    bb = BoundingBox.empty()
    if not obj.labels:
        return bb
    with context.styled(obj.style):
        draw = context.draw
        angle = math.radians(float(draw.get("textangle", 0.0)))
        halign = draw.get("texthalign", "center")
        valign = draw.get("textvalign", "center")
        height = draw.textheight(obj.labels[0])
        for pos, label in zip(obj.points, obj.labels):
            box = _text_box(pos, draw.textwidth(label), height, halign, valign)
            bb += box.rotate(angle, pos)
    return bb


def _symbol_bounding_box(obj: SymbolObject, context: PlotContext) -> BoundingBox:
    with context.styled(obj.style):
        size = float(context.draw.get("symbolsize", 0.0))
    d = 0.5 * size
    return BoundingBox(obj.pos.x - d, obj.pos.x + d, obj.pos.y - d, obj.pos.y + d)


def bounding_box(obj: RenderObject, context: PlotContext) -> BoundingBox:
    if isinstance(obj, LineObject):
        return BoundingBox.from_points(obj.p, obj.q)
    if isinstance(obj, (PathObject, SymbolsObject)):
        return BoundingBox.from_arrays(obj.x, obj.y)
    if isinstance(obj, PolygonObject):
        return BoundingBox.from_points(*obj.points)
    if isinstance(obj, SymbolObject):
        return _symbol_bounding_box(obj, context)
    if isinstance(obj, TextObject):
        return _text_bounding_box(obj, context)
    if isinstance(obj, LabelsObject):
        return _labels_bounding_box(obj, context)
    if isinstance(obj, CombObject):
        return BoundingBox.from_points(*obj.points, *(p + obj.dp for p in obj.points))
    if isinstance(obj, ImageObject):
        return obj.bbox
    raise TypeError(f"Unsupported render object: {type(obj)!r}")


def draw(obj: RenderObject, context: PlotContext) -> None:
    device = context.draw
    if isinstance(obj, LineObject):
        device.line(obj.p, obj.q)
    elif isinstance(obj, PathObject):
        device.curve(obj.x, obj.y)
    elif isinstance(obj, PolygonObject):
        device.polygon(obj.points)
    elif isinstance(obj, SymbolObject):
        device.symbol(obj.pos.x, obj.pos.y)
    elif isinstance(obj, SymbolsObject):
        device.symbols(obj.x, obj.y)
    elif isinstance(obj, TextObject):
        device.text(obj.pos.x, obj.pos.y, obj.text)
    elif isinstance(obj, LabelsObject):
        for pos, label in zip(obj.points, obj.labels):
            device.text(pos.x, pos.y, label)
    elif isinstance(obj, CombObject):
        for p in obj.points:
            device.move(p)
            device.linetorel(obj.dp)
        device.stroke()
    elif isinstance(obj, ImageObject):
        device.image(obj.img, obj.bbox.xmin, obj.bbox.ymin, obj.bbox.width, obj.bbox.height)
    else:
        raise TypeError(f"Unsupported render object: {type(obj)!r}")


def render(obj: RenderObject, context: PlotContext) -> None:
    with context.styled(obj.style):
        draw(obj, context)


def line_text_object(
    p: Point | tuple[float, float],
    q: Point | tuple[float, float],
    text: str,
    offset: float,
    style: Mapping[str, Any] | None = None,
) -> TextObject:
    """Text centred on segment `pq`, parallel to it, `offset` units to its left."""
    p = as_point(p)
    q = as_point(q)
    midpoint = 0.5 * (p + q)
    direction = q - p
    length = direction.norm()
    if length == 0:
        raise ValueError("line text needs two distinct points")
    direction = direction / length
    angle = math.atan2(direction.y, direction.x)
    pos = midpoint + offset * direction.rotate(0.5 * math.pi)
    kw = dict(normalize_style(style, TEXT_RENAME))
    kw["textangle"] = math.degrees(angle)
    kw["texthalign"] = "center"
    kw["textvalign"] = "bottom" if offset > 0 else "top"
    return TextObject(pos, text, kw)


def box_object(
    p: Point | tuple[float, float],
    q: Point | tuple[float, float],
    style: Mapping[str, Any] | None = None,
) -> PolygonObject:
    bb = BoundingBox.from_points(p, q)
    corners = (bb.lowerleft, bb.lowerright, bb.upperright, bb.upperleft)
    return PolygonObject(corners, dict(style or {}))
