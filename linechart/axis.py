from __future__ import annotations

from typing import Any, Callable

import numpy as np

from linechart.options import AxisOptions, TextStyle
from linechart.palette import parse_color
from linechart.scales import AxisArea, ChartArea, format_ticks, nice_ticks
from linechart.scene import GroupNode, LineNode, TextNode

TICK_SIZE = 5.0
LABEL_GAP = 3.0

ScaleFn = Callable[[float], Any]


def axis_ticks(axis: AxisArea, options: AxisOptions) -> np.ndarray:
    if options.tick_values is not None:
        return np.asarray(options.tick_values, dtype=np.float64)
    if axis.empty:
        return np.asarray([], dtype=np.float64)
    assert axis.min_value is not None and axis.max_value is not None
    return nice_ticks(axis.min_value, axis.max_value, options.tick_count)


def tick_labels(ticks: np.ndarray, options: AxisOptions) -> list[str]:
    if options.label_function is not None:
        return [str(options.label_function(float(t))) for t in ticks]
    return format_ticks(ticks)


def build_grid(
    xscale: ScaleFn,
    yscale: ScaleFn,
    area: ChartArea,
    axis_x: AxisOptions,
    axis_y: AxisOptions,
) -> GroupNode:
    if area.empty:
        return GroupNode(key="grid")
    vertical = []
    if axis_x.show_lines:
        color = parse_color(axis_x.grid_color)
        for i, tick in enumerate(axis_ticks(area.x, axis_x)):
            px = float(xscale(float(tick)))
            vertical.append(LineNode(f"grid-x{i}", px, area.y.min, px, area.y.max, stroke=color, stroke_width=axis_x.stroke_width))
    horizontal = []
    if axis_y.show_lines:
        color = parse_color(axis_y.grid_color)
        for i, tick in enumerate(axis_ticks(area.y, axis_y)):
            py = float(yscale(float(tick)))
            horizontal.append(LineNode(f"grid-y{i}", area.x.min, py, area.x.max, py, stroke=color, stroke_width=axis_y.stroke_width))
    return GroupNode(
        key="grid",
        children=(GroupNode(key="grid-x", children=tuple(vertical)), GroupNode(key="grid-y", children=tuple(horizontal))),
    )


def build_axes(
    xscale: ScaleFn,
    yscale: ScaleFn,
    area: ChartArea,
    axis_x: AxisOptions,
    axis_y: AxisOptions,
    label_style: TextStyle,
) -> GroupNode:
    if area.empty:
        return GroupNode(key="axes")
    return GroupNode(
        key="axes",
        children=(
            _horizontal_axis(xscale, yscale, area, axis_x, axis_x.label or label_style),
            _vertical_axis(xscale, yscale, area, axis_y, axis_y.label or label_style),
        ),
    )


def _spans_zero(axis: AxisArea) -> bool:
    return axis.min_value is not None and axis.max_value is not None and axis.min_value <= 0.0 <= axis.max_value


def _horizontal_axis(xscale: ScaleFn, yscale: ScaleFn, area: ChartArea, opts: AxisOptions, style: TextStyle) -> GroupNode:
    top = opts.orient == "top"
    y = area.y.max if top else area.y.min
    if opts.zero_axis and _spans_zero(area.y):
        y = float(yscale(0.0))
    assert y is not None
    direction = -1.0 if top else 1.0
    color = parse_color(opts.color)

    children: list[Any] = []
    if opts.show_axis:
        children.append(LineNode("axis-x", area.x.min, y, area.x.max, y, stroke=color, stroke_width=opts.stroke_width))
    ticks = axis_ticks(area.x, opts)
    for i, (tick, text) in enumerate(zip(ticks, tick_labels(ticks, opts))):
        px = float(xscale(float(tick)))
        if opts.show_ticks:
            children.append(LineNode(f"tick-x{i}", px, y, px, y + direction * TICK_SIZE, stroke=color, stroke_width=opts.stroke_width))
        if opts.show_labels:
            label_y = y + TICK_SIZE + LABEL_GAP + style.font_size if not top else y - TICK_SIZE - LABEL_GAP
            children.append(TextNode(f"label-x{i}", px, label_y, text, style=style, anchor="middle"))
    return GroupNode(key="axis-x", children=tuple(children))


def _vertical_axis(xscale: ScaleFn, yscale: ScaleFn, area: ChartArea, opts: AxisOptions, style: TextStyle) -> GroupNode:
    right = opts.orient == "right"
    x = area.x.max if right else area.x.min
    if opts.zero_axis and _spans_zero(area.x):
        x = float(xscale(0.0))
    assert x is not None
    direction = 1.0 if right else -1.0
    color = parse_color(opts.color)

    children: list[Any] = []
    if opts.show_axis:
        children.append(LineNode("axis-y", x, area.y.min, x, area.y.max, stroke=color, stroke_width=opts.stroke_width))
    ticks = axis_ticks(area.y, opts)
    for i, (tick, text) in enumerate(zip(ticks, tick_labels(ticks, opts))):
        py = float(yscale(float(tick)))
        if opts.show_ticks:
            children.append(LineNode(f"tick-y{i}", x, py, x + direction * TICK_SIZE, py, stroke=color, stroke_width=opts.stroke_width))
        if opts.show_labels:
            label_x = x + direction * (TICK_SIZE + LABEL_GAP)
            children.append(
                TextNode(f"label-y{i}", label_x, py + style.font_size / 3.0, text, style=style, anchor="start" if right else "end")
            )
    return GroupNode(key="axis-y", children=tuple(children))
