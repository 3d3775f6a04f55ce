from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def with_opacity(color: RGBA, opacity: float) -> RGBA:
    """Scale the alpha channel by a layer opacity in [0, 1]."""

    if opacity >= 1.0:
        return color
    r, g, b, a = color
    return (r, g, b, int(round(a * max(0.0, opacity))))


def blend(patch: np.ndarray, color: RGBA, coverage: np.ndarray | float = 1.0) -> None:
    """Source-over `color` onto a canvas view in place; `coverage` scales alpha per pixel."""

    alpha = np.asarray(coverage, dtype=np.float32) * np.float32(color[3] / 255.0)
    if not np.any(alpha > 0):
        return
    if alpha.ndim:
        alpha = alpha[..., None]
    src = np.asarray(color[:3], dtype=np.float32)
    rgb = patch[..., :3].astype(np.float32)
    patch[..., :3] = np.clip(np.rint(src * alpha + rgb * (1.0 - alpha)), 0, 255).astype(np.uint8)
    patch[..., 3] = 255


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa <= xb:
        blend(dst[y, xa : xb + 1], color)


def fill_rect(dst: np.ndarray, x: int, y: int, width: int, height: int, color: RGBA) -> None:
    if width <= 0 or height <= 0:
        return
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + width), min(dst.shape[0], y + height)
    if x0 < x1 and y0 < y1:
        blend(dst[y0:y1, x0:x1], color)
