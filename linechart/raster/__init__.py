from .canvas import blend, draw_hline, fill_rect, new_canvas, with_opacity
from .draw_lines import draw_polyline
from .draw_markers import draw_disk
from .draw_text import draw_text
from .fill import fill_polygons

__all__ = [
    "blend",
    "draw_disk",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "fill_polygons",
    "fill_rect",
    "new_canvas",
    "with_opacity",
]
