from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import logging
from typing import Any, Callable, Literal, Mapping, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_WIDTH = 600.0
DEFAULT_HEIGHT = 600.0
DEFAULT_NO_DATA_MESSAGE = "No data available"
DEFAULT_REGION_FILL_OPACITY = 0.5
DEFAULT_REGION_LABEL_LEFT = 20.0
DEFAULT_REGION_LABEL_TOP = 0.0
DECORATIVE_DASH = (8.0, 12.0)
REVEAL_SERIES_LIMIT = 3

AxisOrient = Literal["bottom", "top", "left", "right"]


def resolve(*candidates: T | None, default: T) -> T:
    """Return the first candidate that is set, most specific first."""

    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


class GateKind(Enum):
    ALWAYS = "always"
    NEVER = "never"
    PREDICATE = "predicate"


@dataclass(frozen=True)
class Gate:
    """Boolean-or-predicate switch for per-series / per-point visibility."""

    kind: GateKind
    predicate: Callable[..., Any] | None = None

    def __post_init__(self) -> None:
        if self.kind is GateKind.PREDICATE and self.predicate is None:
            raise ValueError("predicate gate requires a callable")

    @classmethod
    def always(cls) -> "Gate":
        return cls(GateKind.ALWAYS)

    @classmethod
    def never(cls) -> "Gate":
        return cls(GateKind.NEVER)

    @classmethod
    def when(cls, predicate: Callable[..., Any]) -> "Gate":
        return cls(GateKind.PREDICATE, predicate)

    @classmethod
    def coerce(cls, value: Any, default: "Gate") -> "Gate":
        if value is None:
            return default
        if isinstance(value, Gate):
            return value
        if isinstance(value, bool):
            return cls.always() if value else cls.never()
        if callable(value):
            return cls.when(value)
        raise ValueError(f"expected a bool or a callable, got {value!r}")

    @classmethod
    def for_indexes(cls, value: Any, default: "Gate") -> "Gate":
        """Like `coerce`, but also accepts a collection of series indexes."""

        if isinstance(value, (list, tuple, set, frozenset)):
            indexes = frozenset(int(v) for v in value)
            return cls.when(lambda index: index in indexes)
        return cls.coerce(value, default)

    @property
    def is_never(self) -> bool:
        return self.kind is GateKind.NEVER

    def allows(self, *args: Any) -> bool:
        if self.kind is GateKind.ALWAYS:
            return True
        if self.kind is GateKind.NEVER:
            return False
        assert self.predicate is not None
        return bool(self.predicate(*args))


@dataclass(frozen=True)
class Margin:
    top: float = 0.0
    left: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "Margin":
        raw = raw or {}
        return cls(
            top=float(raw.get("top") or 0.0),
            left=float(raw.get("left") or 0.0),
            right=float(raw.get("right") or 0.0),
            bottom=float(raw.get("bottom") or 0.0),
        )


@dataclass(frozen=True)
class TextStyle:
    font_family: str = "Arial"
    font_size: float = 14.0
    font_weight: str = "normal"
    font_style: str = "normal"
    fill: str = "#000000"

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError("font_size must be > 0")


def font_adapt(raw: Mapping[str, Any] | None, base: TextStyle | None = None) -> TextStyle:
    """Merge a font spec mapping (`fontFamily`, `fontSize`, `bold`, `italic`, `fill`/`color`) onto `base`."""

    base = base or TextStyle()
    if not raw:
        return base
    weight = raw.get("fontWeight")
    if weight is None and "bold" in raw:
        weight = "bold" if raw["bold"] else "normal"
    style = raw.get("fontStyle")
    if style is None and "italic" in raw:
        style = "italic" if raw["italic"] else "normal"
    size = raw.get("fontSize")
    return TextStyle(
        font_family=str(resolve(raw.get("fontFamily"), default=base.font_family)),
        font_size=float(size) if size is not None else base.font_size,
        font_weight=str(resolve(weight, default=base.font_weight)),
        font_style=str(resolve(style, default=base.font_style)),
        fill=str(resolve(raw.get("fill"), raw.get("color"), default=base.fill)),
    )


@dataclass(frozen=True)
class AxisOptions:
    orient: AxisOrient = "bottom"
    show_axis: bool = True
    show_lines: bool = True
    show_labels: bool = True
    show_ticks: bool = True
    zero_axis: bool = False
    color: str = "#000000"
    grid_color: str = "#d5d5d5"
    stroke_width: float = 1.0
    tick_values: tuple[float, ...] | None = None
    tick_count: int = 5
    label_function: Callable[[float], Any] | None = None
    label: TextStyle | None = None

    def __post_init__(self) -> None:
        if self.orient not in ("bottom", "top", "left", "right"):
            raise ValueError(f"unknown axis orient: {self.orient}")
        if self.tick_count <= 0:
            raise ValueError("tick_count must be > 0")

    @property
    def horizontal(self) -> bool:
        return self.orient in ("bottom", "top")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None, *, orient: AxisOrient) -> "AxisOptions":
        raw = raw or {}
        tick_values = raw.get("tickValues")
        if tick_values:
            tick_values = tuple(
                float(v["value"]) if isinstance(v, Mapping) else float(v) for v in tick_values
            )
        else:
            tick_values = None
        return cls(
            orient=raw.get("orient", orient),
            show_axis=bool(raw.get("showAxis", True)),
            show_lines=bool(raw.get("showLines", True)),
            show_labels=bool(raw.get("showLabels", True)),
            show_ticks=bool(raw.get("showTicks", True)),
            zero_axis=bool(raw.get("zeroAxis", False)),
            color=str(raw.get("color", "#000000")),
            grid_color=str(raw.get("gridColor", "#d5d5d5")),
            stroke_width=float(raw.get("strokeWidth", 1.0)),
            tick_values=tick_values,
            tick_count=int(raw.get("tickCount", 5)),
            label_function=raw.get("labelFunction"),
            label=font_adapt(raw["label"]) if raw.get("label") else None,
        )


@dataclass(frozen=True)
class LabelOffset:
    left: float | None = None
    top: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "LabelOffset":
        raw = raw or {}
        left = raw.get("left")
        top = raw.get("top")
        return cls(
            left=float(left) if left is not None else None,
            top=float(top) if top is not None else None,
        )


@dataclass(frozen=True)
class Region:
    """Horizontal background band between two y-domain values."""

    from_value: float
    to_value: float
    fill: Any = None
    label: str | None = None
    fill_opacity: float | None = None
    label_offset: LabelOffset = field(default_factory=LabelOffset)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Region":
        if raw.get("from") is None or raw.get("to") is None:
            raise ValueError(f"region needs 'from' and 'to': {raw!r}")
        opacity = raw.get("fillOpacity")
        label = raw.get("label")
        return cls(
            from_value=float(raw["from"]),
            to_value=float(raw["to"]),
            fill=raw.get("fill"),
            label=str(label) if label is not None else None,
            fill_opacity=float(opacity) if opacity is not None else None,
            label_offset=LabelOffset.from_mapping(raw.get("labelOffset")),
        )


@dataclass(frozen=True)
class RegionStyling:
    fill_opacity: float | None = None
    label_offset: LabelOffset = field(default_factory=LabelOffset)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "RegionStyling":
        raw = raw or {}
        opacity = raw.get("fillOpacity")
        return cls(
            fill_opacity=float(opacity) if opacity is not None else None,
            label_offset=LabelOffset.from_mapping(raw.get("labelOffset")),
        )


def _default_reveal_series() -> Gate:
    return Gate.when(lambda index: index <= REVEAL_SERIES_LIMIT)


@dataclass(frozen=True)
class ChartOptions:
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    margin: Margin = field(default_factory=Margin)
    color: Any = None
    show_areas: Gate = field(default_factory=Gate.always)
    show_points: Gate = field(default_factory=Gate.never)
    reveal_series: Gate = field(default_factory=_default_reveal_series)
    stroke_width: float = 1.0
    point_radius: float = 5.0
    render_point: Callable[[int, int], Any] | None = None
    axis_x: AxisOptions = field(default_factory=lambda: AxisOptions(orient="bottom"))
    axis_y: AxisOptions = field(default_factory=lambda: AxisOptions(orient="left"))
    label: TextStyle = field(default_factory=TextStyle)
    min: float | None = None
    max: float | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("chart width/height must be > 0")
        if self.stroke_width < 0:
            raise ValueError("stroke_width must be >= 0")
        if self.point_radius < 0:
            raise ValueError("point_radius must be >= 0")

    @property
    def chart_width(self) -> float:
        return max(0.0, self.width - self.margin.left - self.margin.right)

    @property
    def chart_height(self) -> float:
        return max(0.0, self.height - self.margin.top - self.margin.bottom)


@dataclass(frozen=True)
class ChartConfig:
    data: Any = None
    x_key: Any = "x"
    y_key: Any = "y"
    options: ChartOptions = field(default_factory=ChartOptions)
    regions: tuple[Region, ...] = ()
    region_styling: RegionStyling = field(default_factory=RegionStyling)
    palette: tuple[Any, ...] | None = None
    animatable: bool = False
    no_data_message: str = DEFAULT_NO_DATA_MESSAGE
    series_key: Any = None


_CONFIG_KEYS = frozenset(
    {
        "data",
        "xKey",
        "yKey",
        "width",
        "height",
        "options",
        "regions",
        "regionStyling",
        "pallete",
        "palette",
        "animatable",
        "noDataMessage",
        "seriesKey",
    }
)

_OPTION_KEYS = frozenset(
    {
        "width",
        "height",
        "margin",
        "color",
        "showAreas",
        "showPoints",
        "revealSeries",
        "strokeWidth",
        "pointRadius",
        "renderPoint",
        "axisX",
        "axisY",
        "label",
        "min",
        "max",
    }
)


def resolve_chart_options(raw: Mapping[str, Any] | None, *, width: Any = None, height: Any = None) -> ChartOptions:
    raw = raw or {}
    _warn_unknown(raw, _OPTION_KEYS, "options")
    label = font_adapt(raw.get("label"))
    axis_x = AxisOptions.from_mapping(raw.get("axisX"), orient="bottom")
    axis_y = AxisOptions.from_mapping(raw.get("axisY"), orient="left")
    chart_min = raw.get("min")
    chart_max = raw.get("max")
    return ChartOptions(
        width=float(resolve(width, raw.get("width"), default=DEFAULT_WIDTH)),
        height=float(resolve(height, raw.get("height"), default=DEFAULT_HEIGHT)),
        margin=Margin.from_mapping(raw.get("margin")),
        color=raw.get("color"),
        show_areas=Gate.coerce(raw.get("showAreas"), Gate.always()),
        show_points=Gate.coerce(raw.get("showPoints"), Gate.never()),
        reveal_series=Gate.for_indexes(raw.get("revealSeries"), _default_reveal_series()),
        stroke_width=float(resolve(raw.get("strokeWidth"), default=1.0)),
        point_radius=float(raw.get("pointRadius") or 5.0),
        render_point=raw.get("renderPoint") if callable(raw.get("renderPoint")) else None,
        axis_x=replace(axis_x, label=axis_x.label or label),
        axis_y=replace(axis_y, label=axis_y.label or label),
        label=label,
        min=float(chart_min) if chart_min is not None else None,
        max=float(chart_max) if chart_max is not None else None,
    )


def resolve_chart_config(props: Mapping[str, Any]) -> ChartConfig:
    """Build a `ChartConfig` from the external option mapping.

    Absent keys fall back to defaults; unknown keys are logged and ignored.
    """

    _warn_unknown(props, _CONFIG_KEYS, "chart config")
    palette = resolve(props.get("pallete"), props.get("palette"), default=None)
    return ChartConfig(
        data=props.get("data"),
        x_key=resolve(props.get("xKey"), default="x"),
        y_key=resolve(props.get("yKey"), default="y"),
        options=resolve_chart_options(props.get("options"), width=props.get("width"), height=props.get("height")),
        regions=tuple(Region.from_mapping(r) for r in props.get("regions") or ()),
        region_styling=RegionStyling.from_mapping(props.get("regionStyling")),
        palette=tuple(palette) if palette else None,
        animatable=bool(props.get("animatable", False)),
        no_data_message=str(props.get("noDataMessage") or DEFAULT_NO_DATA_MESSAGE),
        series_key=props.get("seriesKey"),
    )


def _warn_unknown(raw: Mapping[str, Any], known: frozenset[str], where: str) -> None:
    for key in raw:
        if key not in known:
            LOGGER.warning("ignoring unknown %s key: %s", where, key)
