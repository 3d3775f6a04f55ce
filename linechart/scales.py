from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Protocol, Sequence

import numpy as np

from linechart.adapters.normalize import field_accessor


class Scale(Protocol):
    """Monotonic domain -> pixel mapping with a queryable domain."""

    def __call__(self, value: Any) -> Any:
        ...

    def bounds(self) -> tuple[float, float]:
        ...


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: Any) -> Any:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            mid = (r0 + r1) / 2.0
            if isinstance(value, np.ndarray):
                return np.full(value.shape, mid, dtype=np.float64)
            return mid
        if isinstance(value, np.ndarray):
            t = (value.astype(np.float64) - d0) / (d1 - d0)
        else:
            t = (float(value) - d0) / (d1 - d0)
        # Weighted form keeps both domain end points exact.
        return r0 * (1.0 - t) + r1 * t

    def inverse(self, pixel: Any) -> Any:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return (d0 + d1) / 2.0
        if isinstance(pixel, np.ndarray):
            t = (pixel.astype(np.float64) - r0) / (r1 - r0)
        else:
            t = (float(pixel) - r0) / (r1 - r0)
        return d0 * (1.0 - t) + d1 * t

    def bounds(self) -> tuple[float, float]:
        return (min(self.domain), max(self.domain))


@dataclass(frozen=True)
class AxisArea:
    """Domain bounds of one axis and their pixel images; all None when no series exist."""

    min_value: float | None = None
    max_value: float | None = None
    min: float | None = None
    max: float | None = None

    @property
    def empty(self) -> bool:
        return self.min_value is None or self.max_value is None


@dataclass(frozen=True)
class ChartArea:
    x: AxisArea
    y: AxisArea
    margin: Any = None

    @property
    def empty(self) -> bool:
        return self.x.empty or self.y.empty


def derive_area(
    curves: Sequence[Any],
    key: Any,
    scale: Callable[[float], float],
    configured_min: float | None = None,
    configured_max: float | None = None,
) -> AxisArea:
    """Extrema of `key` across every series, widened (never narrowed) by configured bounds."""

    value_of = field_accessor(key)
    min_value: float | None = None
    max_value: float | None = None
    for curve in curves:
        values = [value_of(item) for item in curve.item]
        if not values:
            continue
        series_max = max(values)
        series_min = min(values)
        if max_value is None or series_max > max_value:
            max_value = series_max
        if min_value is None or series_min < min_value:
            min_value = series_min
    if min_value is None or max_value is None:
        return AxisArea()
    if configured_max is not None and configured_max > max_value:
        max_value = float(configured_max)
    if configured_min is not None and configured_min < min_value:
        min_value = float(configured_min)
    return AxisArea(
        min_value=min_value,
        max_value=max_value,
        min=float(scale(min_value)),
        max=float(scale(max_value)),
    )


def pad_degenerate(vmin: float, vmax: float) -> tuple[float, float]:
    if vmin == vmax:
        return vmin - 1.0, vmax + 1.0
    return vmin, vmax


def nice_ticks(lo: float, hi: float, count: int) -> np.ndarray:
    """Round-numbered ticks inside ``[lo, hi]``, roughly ``count`` of them."""

    if count <= 0:
        raise ValueError("count must be > 0")
    if lo == hi:
        return np.asarray([lo], dtype=np.float64)

    step = _nice(_nice(hi - lo, rounded=False) / max(count - 1, 1), rounded=True)
    # Integer multiples of the step keep ticks on the grid without accumulated drift.
    multiples = np.arange(np.ceil(lo / step), np.floor(hi / step) + 1.0, dtype=np.float64)
    ticks = multiples * step
    ticks[ticks == 0.0] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    finite_step = step is not None and bool(np.isfinite(step)) and step > 0
    if finite_step and abs(value) <= step * 1e-9:
        value = 0.0
    if value != 0.0 and (abs(value) >= 1e6 or abs(value) < 1e-6 or (finite_step and step < 1e-4)):
        return f"{value:.4e}"

    text = f"{value:.{_step_places(step if finite_step else None)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks(ticks: Sequence[float] | np.ndarray) -> list[str]:
    """Label every tick with the precision the spacing between the first two needs."""

    values = [float(v) for v in np.asarray(ticks, dtype=np.float64).ravel()]
    step = abs(values[1] - values[0]) if len(values) > 1 else None
    return [format_tick(v, step=step) for v in values]


# (exclusive upper bound on the mantissa, replacement) when rounding a step.
_ROUNDED_MANTISSAS = ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0))


def _nice(value: float, *, rounded: bool) -> float:
    magnitude = 10.0 ** np.floor(np.log10(value))
    mantissa = value / magnitude
    if rounded:
        nice = next((m for bound, m in _ROUNDED_MANTISSAS if mantissa < bound), 10.0)
    else:
        nice = next((m for m in (1.0, 2.0, 5.0) if mantissa <= m), 10.0)
    return float(nice * magnitude)


def _step_places(step: float | None) -> int:
    if step is None:
        return 6
    exponent = Decimal(repr(float(step))).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
