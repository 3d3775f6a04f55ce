from __future__ import annotations

import numpy as np

from linechart.raster.canvas import RGBA, draw_hline


def draw_disk(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    if radius <= 0:
        return
    top = int(np.floor(cy - radius))
    bottom = int(np.ceil(cy + radius))
    for yy in range(top, bottom + 1):
        dy = yy - cy
        if abs(dy) > radius:
            continue
        half = float(np.sqrt(radius * radius - dy * dy))
        draw_hline(dst, int(round(cx - half)), int(round(cx + half)), yy, color)
