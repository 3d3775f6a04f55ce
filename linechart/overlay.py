from __future__ import annotations

from typing import Any, Callable, Sequence

from linechart.options import (
    DECORATIVE_DASH,
    DEFAULT_REGION_FILL_OPACITY,
    DEFAULT_REGION_LABEL_LEFT,
    DEFAULT_REGION_LABEL_TOP,
    ChartOptions,
    Gate,
    Region,
    RegionStyling,
    TextStyle,
    resolve,
)
from linechart.palette import Palette, parse_color
from linechart.reveal import RevealAnimator
from linechart.scales import ChartArea
from linechart.scene import CircleNode, GroupNode, PathNode, RectNode, TextNode
from linechart.strategies import Curve


def build_lines(
    curves: Sequence[Curve],
    palette: Palette,
    options: ChartOptions,
    *,
    reveal: RevealAnimator | None = None,
) -> GroupNode:
    """One stroked path per series.

    Series admitted by `options.reveal_series` are bound to the shared reveal (when one is
    passed); the rest carry the fixed decorative dash and never animate.
    """

    nodes = []
    for i, curve in enumerate(curves):
        dash_array: tuple[float, ...] | None = None
        bound: RevealAnimator | None = None
        if not options.reveal_series.allows(i):
            dash_array = DECORATIVE_DASH
        elif reveal is not None:
            dash_array = (reveal.max_length,)
            bound = reveal
        nodes.append(
            PathNode(
                key=f"lines{i}",
                d=curve.line.path.print(),
                stroke=palette.color(i),
                stroke_width=options.stroke_width,
                fill=None,
                stroke_linecap="round",
                stroke_linejoin="round",
                dash_array=dash_array,
                reveal=bound,
            )
        )
    return GroupNode(key="lines", children=tuple(nodes))


def build_areas(curves: Sequence[Curve], palette: Palette, show_areas: Gate) -> GroupNode:
    if show_areas.is_never:
        return GroupNode(key="areas")
    nodes = [
        PathNode(
            key=f"areas{i}",
            d=curve.area.path.print(),
            fill=palette.color(i),
            fill_opacity=0.5,
            stroke=None,
        )
        for i, curve in enumerate(curves)
        if show_areas.allows(curve, i)
    ]
    return GroupNode(key="areas", children=tuple(nodes))


def build_points(
    curves: Sequence[Curve],
    palette: Palette,
    show_points: Gate,
    *,
    radius: float = 5.0,
    render_point: Callable[[int, int], Any] | None = None,
) -> GroupNode:
    """Point markers translated onto each sampled line vertex.

    `render_point(series_index, point_index)` replaces the default filled circle verbatim.
    """

    if show_points.is_never:
        return GroupNode(key="points")
    series_groups = []
    for graph_index, curve in enumerate(curves):
        markers = []
        for point_index, (x, y) in enumerate(curve.line.path.points()):
            if not show_points.allows(graph_index, point_index):
                continue
            if render_point is not None:
                content = render_point(graph_index, point_index)
            else:
                content = CircleNode(
                    key="marker",
                    cx=0.0,
                    cy=0.0,
                    r=radius,
                    fill=palette.color(graph_index),
                    fill_opacity=1.0,
                )
            children = (content,) if content is not None else ()
            markers.append(GroupNode(key=f"k{point_index}", children=children, x=x, y=y))
        series_groups.append(GroupNode(key=f"points{graph_index}", children=tuple(markers)))
    return GroupNode(key="points", children=tuple(series_groups))


def build_regions(
    regions: Sequence[Region],
    styling: RegionStyling,
    yscale: Callable[[float], float] | None,
    area: ChartArea,
    label_style: TextStyle,
) -> GroupNode:
    # y = scale(from), height = scale(to) - scale(from): bands given in the wrong order come out
    # with a negative height and are left that way.
    if yscale is None or area.x.empty or area.x.max is None:
        return GroupNode(key="regions")
    groups = []
    for i, region in enumerate(regions):
        label_left = resolve(region.label_offset.left, styling.label_offset.left, default=DEFAULT_REGION_LABEL_LEFT)
        label_top = resolve(region.label_offset.top, styling.label_offset.top, default=DEFAULT_REGION_LABEL_TOP)
        fill_opacity = resolve(region.fill_opacity, styling.fill_opacity, default=DEFAULT_REGION_FILL_OPACITY)

        y1 = float(yscale(region.from_value))
        y2 = float(yscale(region.to_value))
        children: list[Any] = [
            RectNode(
                key=f"region{i}",
                x=0.0,
                y=y1,
                width=area.x.max,
                height=y2 - y1,
                fill=parse_color(region.fill),
                fill_opacity=fill_opacity,
            )
        ]
        if region.label is not None:
            children.append(
                TextNode(
                    key=f"region-label{i}",
                    x=label_left,
                    y=y2 + label_top,
                    text=region.label,
                    style=label_style,
                    anchor="middle",
                )
            )
        groups.append(GroupNode(key=f"region{i}", children=tuple(children)))
    return GroupNode(key="regions", children=tuple(groups))
