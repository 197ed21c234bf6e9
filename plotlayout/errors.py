from __future__ import annotations


class PlotLayoutError(Exception):
    pass


class PlotDataError(PlotLayoutError, ValueError):
    pass


class DomainError(PlotLayoutError, ValueError):
    pass


class AttributeNotFound(PlotLayoutError, KeyError):
    def __init__(self, owner: str, name: str) -> None:
        super().__init__(f"{owner} has no attribute `{name}`")
        self.owner = owner
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class EmptyContainerError(PlotLayoutError):
    pass


class UnsupportedFormatError(PlotLayoutError):
    pass
