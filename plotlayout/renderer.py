from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence

import numpy as np

from plotlayout.geometry import BoundingBox, Point, as_point


class Renderer(Protocol):
    bbox: BoundingBox

    def open(self) -> None:
        ...

    def close(self) -> None:
        ...

    def save_state(self) -> None:
        ...

    def restore_state(self) -> None:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set_clip_rect(self, xmin: float, xmax: float, ymin: float, ymax: float) -> None:
        ...

    def line(self, p: Point | tuple[float, float], q: Point | tuple[float, float]) -> None:
        ...

    def curve(self, x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> None:
        ...

    def polygon(self, points: Sequence[Point | tuple[float, float]]) -> None:
        ...

    def text(self, x: float, y: float, s: str) -> None:
        ...

    def textwidth(self, s: str) -> float:
        ...

    def textheight(self, s: str) -> float:
        ...

    def symbol(self, x: float, y: float) -> None:
        ...

    def symbols(self, x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> None:
        ...

    def image(self, img: Any, x: float, y: float, w: float, h: float) -> None:
        ...

    def move(self, p: Point | tuple[float, float]) -> None:
        ...

    def linetorel(self, dp: Point | tuple[float, float]) -> None:
        ...

    def stroke(self) -> None:
        ...


class RendererState:
    """Drawing-attribute stack and pen path shared by concrete renderers."""

    def __init__(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.bbox = BoundingBox(0.0, float(width), 0.0, float(height))
        self._state: dict[str, Any] = {}
        self._stack: list[dict[str, Any]] = []
        self._pen: Point | None = None
        self._segments: list[tuple[Point, Point]] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def clip_rect(self) -> tuple[float, float, float, float] | None:
        return self._state.get("cliprect")

    def open(self) -> None:
        self._state = {}
        self._stack = []

    def close(self) -> None:
        if self._stack:
            raise RuntimeError(f"renderer closed with {len(self._stack)} unrestored state(s)")

    def save_state(self) -> None:
        self._stack.append(dict(self._state))

    def restore_state(self) -> None:
        if not self._stack:
            raise RuntimeError("restore_state called without matching save_state")
        self._state = self._stack.pop()

    def set(self, key: str, value: Any) -> None:
        if key == "cliprect":
            self.set_clip_rect(*value)
            return
        self._state[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._state)

    def set_clip_rect(self, xmin: float, xmax: float, ymin: float, ymax: float) -> None:
        self._state["cliprect"] = (float(xmin), float(xmax), float(ymin), float(ymax))

    def move(self, p: Point | tuple[float, float]) -> None:
        self._pen = as_point(p)

    def linetorel(self, dp: Point | tuple[float, float]) -> None:
        if self._pen is None:
            raise RuntimeError("linetorel called before move")
        q = self._pen + as_point(dp)
        self._segments.append((self._pen, q))
        self._pen = q

    def stroke(self) -> None:
        segments = self._segments
        self._segments = []
        self._pen = None
        for p, q in segments:
            self.line(p, q)

    def line(self, p: Point | tuple[float, float], q: Point | tuple[float, float]) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class DrawCommand:
    name: str
    args: tuple[Any, ...]
    state: Mapping[str, Any] = field(default_factory=dict)


class RecordingRenderer(RendererState):
    """Renderer that records primitives instead of drawing them.

    Text metrics are a fixed fraction of the current font size, so layouts
    computed against it are deterministic.
    """

    def __init__(
        self,
        width: float = 400.0,
        height: float = 300.0,
        *,
        char_width: float = 0.6,
        line_height: float = 1.0,
        default_fontsize: float = 12.0,
    ) -> None:
        super().__init__(width, height)
        self.char_width = char_width
        self.line_height = line_height
        self.default_fontsize = default_fontsize
        self.commands: list[DrawCommand] = []
        self.is_open = False

    def open(self) -> None:
        super().open()
        self.commands = []
        self.is_open = True

    def close(self) -> None:
        super().close()
        self.is_open = False

    def calls(self, name: str) -> list[DrawCommand]:
        return [cmd for cmd in self.commands if cmd.name == name]

    def _record(self, name: str, *args: Any) -> None:
        self.commands.append(DrawCommand(name=name, args=args, state=self.snapshot()))

    def _fontsize(self) -> float:
        return float(self.get("fontsize", self.default_fontsize))

    def textwidth(self, s: str) -> float:
        return len(s) * self._fontsize() * self.char_width

    def textheight(self, s: str) -> float:
        return self._fontsize() * self.line_height

    def line(self, p: Point | tuple[float, float], q: Point | tuple[float, float]) -> None:
        self._record("line", as_point(p), as_point(q))

    def curve(self, x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> None:
        self._record("curve", np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))

    def polygon(self, points: Sequence[Point | tuple[float, float]]) -> None:
        self._record("polygon", tuple(as_point(p) for p in points))

    def text(self, x: float, y: float, s: str) -> None:
        self._record("text", float(x), float(y), s)

    def symbol(self, x: float, y: float) -> None:
        self._record("symbol", float(x), float(y))

    def symbols(self, x: Sequence[float] | np.ndarray, y: Sequence[float] | np.ndarray) -> None:
        self._record("symbols", np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))

    def image(self, img: Any, x: float, y: float, w: float, h: float) -> None:
        self._record("image", img, float(x), float(y), float(w), float(h))


def draw_text(device: Renderer, x: float, y: float, s: str, style: Mapping[str, Any] | None = None) -> None:
    device.save_state()
    try:
        for key, value in (style or {}).items():
            device.set(key, value)
        device.text(x, y, s)
    finally:
        device.restore_state()
