from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from linechart.palette import parse_color
from linechart.paths import PathProperties, dash_polylines
from linechart.raster import (
    draw_disk,
    draw_polyline,
    draw_text,
    fill_polygons,
    fill_rect,
    new_canvas,
    with_opacity,
)
from linechart.raster.canvas import RGBA
from linechart.scene import CircleNode, GroupNode, LineNode, PathNode, RectNode, Scene, TextNode

LOGGER = logging.getLogger(__name__)


def rasterize(scene: Scene, *, background: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    """Draw a scene into a fresh (H, W, 4) uint8 RGBA canvas."""

    width = max(1, int(math.ceil(scene.width)))
    height = max(1, int(math.ceil(scene.height)))
    canvas = new_canvas(width, height, color=background)
    _draw(canvas, scene.root, 0.0, 0.0)
    return canvas


class RasterSceneRenderer:
    """Scene renderer keeping the last rasterized frame."""

    def __init__(self, *, background: RGBA = (255, 255, 255, 255)) -> None:
        self.background = background
        self.frame: np.ndarray | None = None

    def draw_scene(self, scene: Scene) -> None:
        self.frame = rasterize(scene, background=self.background)


def _draw(canvas: np.ndarray, node: Any, ox: float, oy: float) -> None:
    if isinstance(node, GroupNode):
        for child in node.children:
            _draw(canvas, child, ox + node.x, oy + node.y)
    elif isinstance(node, PathNode):
        _draw_path(canvas, node, ox, oy)
    elif isinstance(node, RectNode):
        # Zero or negative extents are not painted, matching SVG.
        if node.fill is None or node.width <= 0 or node.height <= 0:
            return
        fill_rect(
            canvas,
            int(round(ox + node.x)),
            int(round(oy + node.y)),
            int(round(node.width)),
            int(round(node.height)),
            with_opacity(node.fill, node.fill_opacity),
        )
    elif isinstance(node, CircleNode):
        if node.fill is not None:
            draw_disk(canvas, ox + node.cx, oy + node.cy, node.r, with_opacity(node.fill, node.fill_opacity))
    elif isinstance(node, LineNode):
        if node.stroke is not None:
            points = np.asarray([[ox + node.x1, oy + node.y1], [ox + node.x2, oy + node.y2]], dtype=np.float64)
            draw_polyline(canvas, points, node.stroke, width=node.stroke_width)
    elif isinstance(node, TextNode):
        color = parse_color(node.style.fill) or (0, 0, 0, 255)
        draw_text(
            canvas,
            ox + node.x,
            oy + node.y,
            node.text,
            color,
            font_family=node.style.font_family,
            font_size_px=node.style.font_size,
            bold=node.style.font_weight == "bold",
            italic=node.style.font_style == "italic",
            anchor=node.anchor,
        )
    else:
        LOGGER.debug("raster renderer skips node type %s", type(node).__name__)


def _draw_path(canvas: np.ndarray, node: PathNode, ox: float, oy: float) -> None:
    offset = np.asarray([ox, oy], dtype=np.float64)
    polylines = [(points + offset, closed) for points, closed in PathProperties(node.d).polylines()]
    if node.fill is not None:
        fill_polygons(canvas, [points for points, _ in polylines], with_opacity(node.fill, node.fill_opacity))
    if node.stroke is None or node.stroke_width <= 0:
        return
    for points, _ in polylines:
        if node.dash_array is None:
            runs = [points]
        else:
            runs = dash_polylines(points, node.dash_array, node.resolved_dash_offset() or 0.0)
        for run in runs:
            draw_polyline(canvas, run, node.stroke, width=node.stroke_width)
