from plotlayout.axis import HalfAxisX, HalfAxisY, frame
from plotlayout.components import (
    BoxLabel,
    Curve,
    DataInset,
    DataLabel,
    ErrorBarsX,
    ErrorBarsY,
    FillAbove,
    FillBelow,
    FillBetween,
    Histogram,
    Image,
    Legend,
    LineX,
    LineY,
    PlotComponent,
    PlotComposite,
    PlotInset,
    PlotLabel,
    Points,
    Slope,
    SymmetricErrorBarsX,
    SymmetricErrorBarsY,
    point,
)
from plotlayout.config import StyleConfig, default_config, load_config, set_default_config
from plotlayout.containers import FramedArray, FramedPlot, Plot, PlotContainer, Table, limits_axis
from plotlayout.errors import (
    AttributeNotFound,
    DomainError,
    EmptyContainerError,
    PlotDataError,
    PlotLayoutError,
    UnsupportedFormatError,
)
from plotlayout.export import to_rgba, write_file, write_png
from plotlayout.geometry import AffineTransformation, BoundingBox, Point
from plotlayout.layout import LayoutSolution, solve_interior
from plotlayout.renderer import RecordingRenderer, Renderer

__all__ = [
    "AffineTransformation",
    "AttributeNotFound",
    "BoundingBox",
    "BoxLabel",
    "Curve",
    "DataInset",
    "DataLabel",
    "DomainError",
    "EmptyContainerError",
    "ErrorBarsX",
    "ErrorBarsY",
    "FillAbove",
    "FillBelow",
    "FillBetween",
    "FramedArray",
    "FramedPlot",
    "HalfAxisX",
    "HalfAxisY",
    "Histogram",
    "Image",
    "LayoutSolution",
    "Legend",
    "LineX",
    "LineY",
    "Plot",
    "PlotComponent",
    "PlotComposite",
    "PlotContainer",
    "PlotDataError",
    "PlotInset",
    "PlotLabel",
    "PlotLayoutError",
    "Point",
    "Points",
    "RecordingRenderer",
    "Renderer",
    "Slope",
    "StyleConfig",
    "SymmetricErrorBarsX",
    "SymmetricErrorBarsY",
    "Table",
    "UnsupportedFormatError",
    "default_config",
    "frame",
    "limits_axis",
    "load_config",
    "point",
    "set_default_config",
    "solve_interior",
    "to_rgba",
    "write_file",
    "write_png",
]
