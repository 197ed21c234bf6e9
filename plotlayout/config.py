from __future__ import annotations

import copy
from dataclasses import dataclass, field
from importlib import resources
import logging
from pathlib import Path
import tomllib
from typing import Any, Mapping


LOGGER = logging.getLogger(__name__)

NONE_SENTINEL = "none"
DEFAULTS_RESOURCE = "defaults.toml"


@dataclass(frozen=True)
class StyleConfig:
    sections: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    source: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source: str | None = None) -> StyleConfig:
        sections: dict[str, dict[str, Any]] = {}
        for name, table in raw.items():
            if not isinstance(table, Mapping):
                raise ValueError(f"config section `{name}` must be a table")
            sections[name] = {key: _convert(value) for key, value in table.items()}
        return cls(sections=sections, source=source)

    def has_section(self, section: str) -> bool:
        return section in self.sections

    def config_value(self, section: str, option: str, default: Any = None) -> Any:
        table = self.sections.get(section)
        if table is None or option not in table:
            return default
        return copy.deepcopy(table[option])

    def config_options(self, section: str) -> dict[str, Any]:
        return copy.deepcopy(dict(self.sections.get(section, {})))

    def merged(self, overrides: Mapping[str, Mapping[str, Any]]) -> StyleConfig:
        sections = {name: dict(table) for name, table in self.sections.items()}
        for name, table in overrides.items():
            sections.setdefault(name, {}).update({key: _convert(value) for key, value in table.items()})
        return StyleConfig(sections=sections, source=self.source)


def load_config(path: str | Path) -> StyleConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"style config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    LOGGER.debug("loaded style config from %s", config_path)
    return StyleConfig.from_mapping(raw, source=str(config_path))


def load_packaged_defaults() -> StyleConfig:
    ref = resources.files("plotlayout").joinpath(DEFAULTS_RESOURCE)
    with ref.open("rb") as f:
        raw = tomllib.load(f)
    LOGGER.debug("loaded packaged style defaults")
    return StyleConfig.from_mapping(raw, source=DEFAULTS_RESOURCE)


_active_config: StyleConfig | None = None


def default_config() -> StyleConfig:
    global _active_config
    if _active_config is None:
        _active_config = load_packaged_defaults()
    return _active_config


def set_default_config(config: StyleConfig | None) -> None:
    """Replace the active configuration; `None` restores the packaged defaults."""
    global _active_config
    _active_config = config


def config_value(section: str, option: str, default: Any = None) -> Any:
    return default_config().config_value(section, option, default)


def config_options(section: str) -> dict[str, Any]:
    return default_config().config_options(section)


def _convert(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if text.lower() == NONE_SENTINEL:
            return None
        if len(text) > 2 and text[:2].lower() == "0x":
            try:
                return int(text[2:], 16)
            except ValueError:
                return value
        return value
    if isinstance(value, Mapping):
        return {key: _convert(item) for key, item in value.items()}
    if isinstance(value, list):
        return tuple(_convert(item) for item in value)
    return value
