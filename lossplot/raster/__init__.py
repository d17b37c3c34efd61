from .canvas import blend_mask, draw_hline, draw_vline, fill, fill_rect, new_canvas, stroke_rect
from .draw_lines import draw_line, draw_polyline
from .draw_text import draw_text, text_size

__all__ = [
    "blend_mask",
    "draw_hline",
    "draw_line",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill",
    "fill_rect",
    "new_canvas",
    "stroke_rect",
    "text_size",
]
