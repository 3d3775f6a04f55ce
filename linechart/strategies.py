from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

import numpy as np

from linechart.adapters.normalize import normalize_data, numeric
from linechart.paths import Path, Point
from linechart.scales import LinearScale, pad_degenerate


Accessor = Callable[[Any], Any]


@dataclass(frozen=True)
class Shape:
    path: Path
    centroid: Point


@dataclass(frozen=True)
class Curve:
    item: tuple[Any, ...]
    line: Shape
    area: Shape


@dataclass(frozen=True)
class ChartLayout:
    curves: tuple[Curve, ...]
    xscale: LinearScale
    yscale: LinearScale


class ChartType(Protocol):
    """Curve strategy: groups points into series and fits one line + area path per series."""

    def __call__(
        self,
        *,
        data: Any,
        xaccessor: Accessor,
        yaccessor: Accessor,
        width: float,
        height: float,
        closed: bool = False,
        min: float | None = None,
        max: float | None = None,
    ) -> ChartLayout:
        ...


LineTracer = Callable[[Path, list[Point]], None]


def _trace_straight(path: Path, points: list[Point]) -> None:
    for x, y in points[1:]:
        path.lineto(x, y)


def _trace_step(path: Path, points: list[Point]) -> None:
    for x, y in points[1:]:
        path.hlineto(x, vertex=False)
        path.vlineto(y)


def _smooth_tracer(tension: float) -> LineTracer:
    def trace(path: Path, points: list[Point]) -> None:
        if len(points) <= 2:
            _trace_straight(path, points)
            return
        pts = np.asarray(points, dtype=np.float64)
        last = len(pts) - 1
        for i in range(last):
            prev_pt = pts[max(i - 1, 0)]
            next_pt = pts[min(i + 2, last)]
            c1 = pts[i] + tension * (pts[i + 1] - prev_pt)
            c2 = pts[i + 1] - tension * (next_pt - pts[i])
            path.curveto(c1[0], c1[1], c2[0], c2[1], pts[i + 1][0], pts[i + 1][1])

    return trace


def _centroid(points: list[Point]) -> Point:
    if not points:
        return (0.0, 0.0)
    arr = np.asarray(points, dtype=np.float64)
    return (float(arr[:, 0].mean()), float(arr[:, 1].mean()))


def _layout(
    tracer: LineTracer,
    *,
    data: Any,
    xaccessor: Accessor,
    yaccessor: Accessor,
    width: float,
    height: float,
    closed: bool,
    min: float | None,
    max: float | None,
) -> ChartLayout:
    series = normalize_data(data)
    arranged = [
        [(numeric(xaccessor(item), label="x"), numeric(yaccessor(item), label="y")) for item in items]
        for items in series
    ]
    xs = [x for points in arranged for x, _ in points]
    ys = [y for points in arranged for _, y in points]
    if xs:
        xmin, xmax = pad_degenerate(float(np.min(xs)), float(np.max(xs)))
        ymin, ymax = float(np.min(ys)), float(np.max(ys))
    else:
        xmin, xmax, ymin, ymax = 0.0, 1.0, 0.0, 1.0
    if min is not None:
        ymin = float(np.minimum(ymin, min))
    if max is not None:
        ymax = float(np.maximum(ymax, max))
    if closed:
        ymin = float(np.minimum(ymin, 0.0))
        ymax = float(np.maximum(ymax, 0.0))
    ymin, ymax = pad_degenerate(ymin, ymax)
    base = 0.0 if closed else ymin

    xscale = LinearScale(domain=(xmin, xmax), range=(0.0, float(width)))
    yscale = LinearScale(domain=(ymin, ymax), range=(float(height), 0.0))

    base_y = float(yscale(base))

    curves: list[Curve] = []
    for items, points in zip(series, arranged):
        scaled = [(float(xscale(x)), float(yscale(y))) for x, y in points]
        line = Path()
        area = Path()
        area_points: list[Point] = []
        if scaled:
            line.moveto(*scaled[0])
            tracer(line, scaled)
            area.moveto(*scaled[0])
            tracer(area, scaled)
            area.lineto(scaled[-1][0], base_y, vertex=False)
            area.lineto(scaled[0][0], base_y, vertex=False)
            area.closepath()
            area_points = scaled + [(scaled[-1][0], base_y), (scaled[0][0], base_y)]
        curves.append(
            Curve(
                item=tuple(items),
                line=Shape(path=line, centroid=_centroid(scaled)),
                area=Shape(path=area, centroid=_centroid(area_points)),
            )
        )
    return ChartLayout(curves=tuple(curves), xscale=xscale, yscale=yscale)


def _strategy(tracer: LineTracer) -> ChartType:
    def chart_type(
        *,
        data: Any,
        xaccessor: Accessor,
        yaccessor: Accessor,
        width: float,
        height: float,
        closed: bool = False,
        min: float | None = None,
        max: float | None = None,
    ) -> ChartLayout:
        return _layout(
            tracer,
            data=data,
            xaccessor=xaccessor,
            yaccessor=yaccessor,
            width=width,
            height=height,
            closed=closed,
            min=min,
            max=max,
        )

    return chart_type


stock: ChartType = _strategy(_trace_straight)
step_line: ChartType = _strategy(_trace_step)


def smooth_line_with(tension: float = 0.3) -> ChartType:
    return _strategy(_smooth_tracer(tension))


smooth_line: ChartType = smooth_line_with()

STRATEGIES: dict[str, ChartType] = {
    "stock": stock,
    "smooth": smooth_line,
    "step": step_line,
}


def strategy_for(name: str | ChartType) -> ChartType:
    if callable(name):
        return name
    try:
        return STRATEGIES[name]
    except KeyError as exc:
        raise ValueError(f"unknown chart type: {name!r}") from exc
