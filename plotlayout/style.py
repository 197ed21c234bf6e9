from __future__ import annotations

from typing import Any, ClassVar, Iterable, Mapping

from plotlayout.config import StyleConfig, default_config
from plotlayout.errors import AttributeNotFound


STYLE_KEYS = frozenset(
    {
        "color",
        "fillcolor",
        "filltype",
        "fontface",
        "fontsize",
        "linecolor",
        "linetype",
        "linewidth",
        "symbolsize",
        "symboltype",
        "textangle",
        "texthalign",
        "textvalign",
    }
)

LINE_RENAME: Mapping[str, str] = {
    "color": "linecolor",
    "width": "linewidth",
    "type": "linetype",
}

STROKE_RENAME: Mapping[str, str] = {
    "width": "linewidth",
    "type": "linetype",
}

TEXT_RENAME: Mapping[str, str] = {
    "face": "fontface",
    "size": "fontsize",
    "angle": "textangle",
    "halign": "texthalign",
    "valign": "textvalign",
}

SYMBOL_RENAME: Mapping[str, str] = {
    "type": "symboltype",
    "size": "symbolsize",
}

TEXT_DEFAULTS: Mapping[str, Any] = {
    "textangle": 0.0,
    "texthalign": "center",
    "textvalign": "center",
}

_MISSING = object()


def normalize_style(style: Mapping[str, Any] | None, rename: Mapping[str, str] | None = None) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if not style:
        return out
    table = rename or {}
    for name, value in style.items():
        key = table.get(name, name)
        if key not in STYLE_KEYS:
            raise ValueError(f"unknown style key `{name}`")
        out[key] = value
    return out


class HasAttr:
    default_layers: ClassVar[tuple[str, ...]] = ()
    attr_map: ClassVar[Mapping[str, str]] = {}

    def __init__(self) -> None:
        self.attr: dict[str, Any] = {}

    def _attr_key(self, name: str) -> str:
        return self.attr_map.get(name, name)

    def has_attr(self, name: str) -> bool:
        return self._attr_key(name) in self.attr

    def get_attr(self, name: str, default: Any = _MISSING) -> Any:
        key = self._attr_key(name)
        if key in self.attr:
            return self.attr[key]
        if default is _MISSING:
            raise AttributeNotFound(type(self).__name__, name)
        return default

    def set_attr(self, name: str, value: Any) -> None:
        self.attr[self._attr_key(name)] = value

    def iniattr(self, config: StyleConfig | None = None, **overrides: Any) -> None:
        cfg = config if config is not None else default_config()
        for layer in self.default_layers:
            for key, value in cfg.config_options(layer).items():
                self.set_attr(key, value)
        for key, value in overrides.items():
            self.set_attr(key, value)


class HasStyle(HasAttr):
    style_rename: ClassVar[Mapping[str, str]] = {}
    style_defaults: ClassVar[Mapping[str, Any]] = {}

    def configure(self, config: StyleConfig | None = None, **kw: Any) -> None:
        """Apply configured defaults, then split `kw` into style keys and attributes."""
        self.iniattr(config)
        style_kw: dict[str, Any] = {}
        for name, value in kw.items():
            if self.style_rename.get(name, name) in STYLE_KEYS:
                style_kw[name] = value
            else:
                self.set_attr(name, value)
        self.kw_init(**style_kw)

    def kw_init(self, **kw: Any) -> None:
        sty: dict[str, Any] = dict(self.style_defaults)
        configured = self.get_attr("kw_defaults", None)
        if configured:
            sty.update(normalize_style(configured))
        self.set_attr("style", sty)
        for name, value in kw.items():
            self.kw_set(name, value)

    def kw_set(self, name: str, value: Any) -> None:
        key = self.style_rename.get(name, name)
        if key not in STYLE_KEYS:
            raise ValueError(f"unknown style key `{name}` for {type(self).__name__}")
        self.get_attr("style")[key] = value

    def style(self, **kw: Any) -> None:
        for name, value in kw.items():
            self.kw_set(name, value)

    def kw_get(self, key: str, default: Any = None) -> Any:
        return self.get_attr("style").get(key, default)


def broadcast_attr(targets: Iterable[HasAttr], name: str, value: Any) -> None:
    for target in targets:
        target.set_attr(name, value)
