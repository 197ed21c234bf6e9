from .canvas import blend_mask, blit, new_canvas
from .draw_lines import dash_pattern, draw_polyline
from .draw_markers import draw_markers
from .draw_polygon import fill_polygon
from .draw_text import draw_text, text_size
from .renderer import RasterRenderer, parse_color

__all__ = [
    "RasterRenderer",
    "blend_mask",
    "blit",
    "dash_pattern",
    "draw_markers",
    "draw_polyline",
    "draw_text",
    "fill_polygon",
    "new_canvas",
    "parse_color",
    "text_size",
]
