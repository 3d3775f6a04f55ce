from __future__ import annotations

from typing import Any

from linechart.adapters.normalize import field_accessor, normalize_data
from linechart.strategies import ChartLayout, ChartType


def build_curves(
    chart_type: ChartType,
    data: Any,
    x_key: Any,
    y_key: Any,
    width: float,
    height: float,
    domain_min: float | None = None,
    domain_max: float | None = None,
    *,
    series_key: Any = None,
) -> ChartLayout:
    """Hand points, accessors and plot geometry to the chart-type strategy.

    Grouping and curve fitting belong to the strategy; this call only fixes the argument
    contract so strategies stay interchangeable.
    """

    return chart_type(
        data=normalize_data(data, series_key=series_key),
        xaccessor=field_accessor(x_key),
        yaccessor=field_accessor(y_key),
        width=width,
        height=height,
        closed=False,
        min=domain_min,
        max=domain_max,
    )
