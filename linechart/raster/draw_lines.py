from __future__ import annotations

import numpy as np

from linechart.raster.canvas import RGBA, blend


def draw_polyline(dst: np.ndarray, points: np.ndarray, color: RGBA, width: float = 1.0) -> None:
    """Stroke a polyline with a square brush of roughly `width` pixels."""

    pts = np.rint(np.asarray(points, dtype=np.float64)).astype(np.int64)
    if pts.shape[0] < 2:
        return
    # A translucent stroke must blend once per pixel, so joints are deduplicated first.
    covered: set[tuple[int, int]] = set()
    for (x0, y0), (x1, y1) in zip(pts[:-1].tolist(), pts[1:].tolist()):
        covered.update(_segment_pixels(x0, y0, x1, y1))
    half = max(0, int(round(width)) // 2)
    if half:
        covered = {(x + dx, y + dy) for x, y in covered for dx in range(-half, half + 1) for dy in range(-half, half + 1)}
    _paint(dst, covered, color)


def _segment_pixels(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    out = [(x0, y0)]
    while (x0, y0) != (x1, y1):
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
        out.append((x0, y0))
    return out


def _paint(dst: np.ndarray, pixels: set[tuple[int, int]], color: RGBA) -> None:
    if not pixels:
        return
    coords = np.asarray(sorted(pixels), dtype=np.int64)
    xs, ys = coords[:, 0], coords[:, 1]
    inside = (xs >= 0) & (xs < dst.shape[1]) & (ys >= 0) & (ys < dst.shape[0])
    xs, ys = xs[inside], ys[inside]
    if xs.size == 0:
        return
    patch = dst[ys, xs]
    blend(patch, color)
    dst[ys, xs] = patch
