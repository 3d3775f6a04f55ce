from __future__ import annotations

from typing import Sequence

import numpy as np

from linechart.raster.canvas import RGBA, draw_hline


def fill_polygons(dst: np.ndarray, polygons: Sequence[np.ndarray], color: RGBA) -> None:
    """Even-odd scanline fill over all rings at once."""

    edges: list[tuple[float, float, float, float]] = []
    for ring in polygons:
        pts = np.asarray(ring, dtype=np.float64)
        if pts.shape[0] < 3:
            continue
        for (x0, y0), (x1, y1) in zip(pts.tolist(), np.roll(pts, -1, axis=0).tolist()):
            if y0 != y1:
                edges.append((x0, y0, x1, y1))
    if not edges:
        return
    min_y = max(0, int(np.floor(min(min(e[1], e[3]) for e in edges))))
    max_y = min(dst.shape[0] - 1, int(np.ceil(max(max(e[1], e[3]) for e in edges))))
    for y in range(min_y, max_y + 1):
        sample_y = y + 0.5
        intersections: list[float] = []
        for x0, y0, x1, y1 in edges:
            if min(y0, y1) <= sample_y < max(y0, y1):
                intersections.append(x0 + (sample_y - y0) * (x1 - x0) / (y1 - y0))
        intersections.sort()
        for xa, xb in zip(intersections[0::2], intersections[1::2]):
            draw_hline(dst, int(round(xa)), int(round(xb)) - 1, y, color)
