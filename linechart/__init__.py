from linechart.api import line_chart
from linechart.chart import LineChart
from linechart.errors import ChartDataError
from linechart.options import ChartConfig, ChartOptions, Gate, Region, RegionStyling, resolve, resolve_chart_config
from linechart.paths import Path, PathProperties, measure_length
from linechart.reveal import RevealAnimator, RevealPhase
from linechart.scales import ChartArea, LinearScale, derive_area
from linechart.scene import Scene
from linechart.strategies import smooth_line, step_line, stock

__all__ = [
    "ChartArea",
    "ChartConfig",
    "ChartDataError",
    "ChartOptions",
    "Gate",
    "LineChart",
    "LinearScale",
    "Path",
    "PathProperties",
    "Region",
    "RegionStyling",
    "RevealAnimator",
    "RevealPhase",
    "Scene",
    "derive_area",
    "line_chart",
    "measure_length",
    "resolve",
    "resolve_chart_config",
    "smooth_line",
    "step_line",
    "stock",
]
