from __future__ import annotations

import logging
from typing import Any, Mapping

from linechart.axis import build_axes, build_grid
from linechart.curves import build_curves
from linechart.options import ChartConfig, resolve_chart_config
from linechart.overlay import build_areas, build_lines, build_points, build_regions
from linechart.palette import Color, Palette
from linechart.paths import measure_length
from linechart.reveal import DEFAULT_DURATION, RevealAnimator, RevealHandle
from linechart.scales import ChartArea, derive_area
from linechart.scene import Scene, compose_scene, placeholder_scene
from linechart.strategies import ChartLayout, ChartType, stock

LOGGER = logging.getLogger(__name__)


class LineChart:
    """Multi-series line chart: data + options in, layered scene out.

    The chart owns one `RevealAnimator`; every revealable line of a render is bound to it, so all
    series draw in together.
    """

    def __init__(
        self,
        config: ChartConfig | Mapping[str, Any],
        chart_type: ChartType = stock,
        *,
        reveal: RevealAnimator | None = None,
    ) -> None:
        self.chart_type = chart_type
        self.reveal = reveal if reveal is not None else RevealAnimator()
        self.config = _coerce_config(config)
        self.palette = Palette.from_config(self.config.palette, self.config.options.color)
        self.layout: ChartLayout | None = None
        self.chart_area: ChartArea | None = None

    def update(self, config: ChartConfig | Mapping[str, Any]) -> Scene:
        """Swap in new data/options, snap the reveal back to hidden and re-render."""

        self.config = _coerce_config(config)
        self.palette = Palette.from_config(self.config.palette, self.config.options.color)
        scene = self.render()
        self.reset()
        return scene

    def color(self, index: int) -> Color:
        return self.palette.color(index)

    def animate(self, delay: float = 0.0, duration: float = DEFAULT_DURATION, **kwargs: Any) -> RevealHandle:
        return self.reveal.animate(delay, duration, **kwargs)

    def reset(self) -> None:
        self.reveal.reset()

    def tick(self, now: float | None = None) -> float:
        return self.reveal.tick(now)

    def render(self) -> Scene:
        config = self.config
        options = config.options
        if config.data is None:
            LOGGER.debug("no data; rendering placeholder")
            return placeholder_scene(options.width, options.height, config.no_data_message, options.label)

        layout = build_curves(
            self.chart_type,
            config.data,
            config.x_key,
            config.y_key,
            options.chart_width,
            options.chart_height,
            options.min,
            options.max,
            series_key=config.series_key,
        )
        area = ChartArea(
            x=derive_area(layout.curves, config.x_key, layout.xscale),
            y=derive_area(layout.curves, config.y_key, layout.yscale, options.min, options.max),
            margin=options.margin,
        )
        self.layout = layout
        self.chart_area = area

        reveal: RevealAnimator | None = None
        if config.animatable:
            lengths = [measure_length(curve.line.path.print()) for curve in layout.curves]
            self.reveal.set_max_length(max(lengths, default=0.0))
            reveal = self.reveal

        LOGGER.debug("rendering %d series (animatable=%s)", len(layout.curves), config.animatable)
        return compose_scene(
            width=options.width,
            height=options.height,
            margin_left=options.margin.left,
            margin_top=options.margin.top,
            grid=build_grid(layout.xscale, layout.yscale, area, options.axis_x, options.axis_y),
            regions=build_regions(config.regions, config.region_styling, layout.yscale, area, options.label),
            areas=build_areas(layout.curves, self.palette, options.show_areas),
            lines=build_lines(layout.curves, self.palette, options, reveal=reveal),
            points=build_points(
                layout.curves,
                self.palette,
                options.show_points,
                radius=options.point_radius,
                render_point=options.render_point,
            ),
            axes=build_axes(layout.xscale, layout.yscale, area, options.axis_x, options.axis_y, options.label),
        )


def _coerce_config(config: ChartConfig | Mapping[str, Any]) -> ChartConfig:
    if isinstance(config, ChartConfig):
        return config
    return resolve_chart_config(config)
