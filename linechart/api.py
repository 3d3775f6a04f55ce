from __future__ import annotations

from typing import Any, Mapping

from linechart.chart import LineChart
from linechart.options import ChartConfig
from linechart.reveal import Clock, Easing, RevealAnimator, ease_in_out
from linechart.strategies import ChartType, strategy_for


def line_chart(
    config: ChartConfig | Mapping[str, Any] | None = None,
    *,
    chart_type: str | ChartType = "stock",
    clock: Clock | None = None,
    easing: Easing = ease_in_out,
    **props: Any,
) -> LineChart:
    if config is None:
        config = props
    elif props:
        if isinstance(config, ChartConfig):
            raise ValueError("keyword options cannot be combined with a ChartConfig")
        config = {**config, **props}
    reveal = RevealAnimator(easing=easing) if clock is None else RevealAnimator(clock=clock, easing=easing)
    return LineChart(config, strategy_for(chart_type), reveal=reveal)
