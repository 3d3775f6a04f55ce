from __future__ import annotations

import math
import unittest

import numpy as np

from linechart.scales import (
    AxisArea,
    LinearScale,
    derive_area,
    format_tick,
    format_ticks,
    nice_ticks,
    pad_degenerate,
)
from linechart.strategies import Curve, Shape
from linechart.paths import Path


def _curve(items: list[dict[str, float]]) -> Curve:
    empty = Shape(path=Path(), centroid=(0.0, 0.0))
    return Curve(item=tuple(items), line=empty, area=empty)


def _identity(value: float) -> float:
    return float(value)


class LinearScaleTests(unittest.TestCase):
    def test_domain_end_points_map_exactly(self) -> None:
        scale = LinearScale(domain=(0.1, 0.7), range=(600.0, 0.0))
        self.assertEqual(scale(0.1), 600.0)
        self.assertEqual(scale(0.7), 0.0)

    def test_maps_numpy_arrays(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), range=(0.0, 100.0))
        out = scale(np.asarray([0.0, 2.5, 10.0]))
        self.assertEqual(out.tolist(), [0.0, 25.0, 100.0])

    def test_inverse_round_trips_interior_value(self) -> None:
        scale = LinearScale(domain=(-5.0, 10.0), range=(300.0, 0.0))
        self.assertAlmostEqual(scale.inverse(scale(3.25)), 3.25)

    def test_degenerate_domain_maps_to_range_midpoint(self) -> None:
        scale = LinearScale(domain=(4.0, 4.0), range=(0.0, 200.0))
        self.assertEqual(scale(4.0), 100.0)
        self.assertEqual(scale.bounds(), (4.0, 4.0))

    def test_pad_degenerate(self) -> None:
        self.assertEqual(pad_degenerate(3.0, 3.0), (2.0, 4.0))
        self.assertEqual(pad_degenerate(1.0, 2.0), (1.0, 2.0))


class DeriveAreaTests(unittest.TestCase):
    def test_extrema_span_every_series(self) -> None:
        curves = [
            _curve([{"x": 0, "y": 2}, {"x": 1, "y": 8}]),
            _curve([{"x": 0, "y": 0}, {"x": 1, "y": 10}]),
        ]
        area = derive_area(curves, "y", _identity)
        self.assertEqual((area.min_value, area.max_value), (0.0, 10.0))
        self.assertEqual((area.min, area.max), (0.0, 10.0))

    def test_configured_bounds_widen_but_never_narrow(self) -> None:
        curves = [
            _curve([{"x": 0, "y": 2}, {"x": 1, "y": 8}]),
            _curve([{"x": 0, "y": 0}, {"x": 1, "y": 10}]),
        ]
        widened = derive_area(curves, "y", _identity, configured_min=-5.0)
        self.assertEqual((widened.min_value, widened.max_value), (-5.0, 10.0))

        narrowed = derive_area(curves, "y", _identity, configured_min=3.0, configured_max=4.0)
        self.assertEqual((narrowed.min_value, narrowed.max_value), (0.0, 10.0))

    def test_empty_series_are_skipped(self) -> None:
        curves = [_curve([]), _curve([{"x": 3, "y": 1}])]
        area = derive_area(curves, "x", _identity)
        self.assertEqual((area.min_value, area.max_value), (3.0, 3.0))

    def test_no_series_yields_empty_area(self) -> None:
        area = derive_area([], "y", _identity, configured_min=-1.0)
        self.assertEqual(area, AxisArea())
        self.assertTrue(area.empty)

    def test_min_and_max_are_pixel_images_of_bounds(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), range=(200.0, 0.0))
        area = derive_area([_curve([{"y": 0}, {"y": 10}])], "y", scale)
        self.assertEqual((area.min, area.max), (200.0, 0.0))


class TickTests(unittest.TestCase):
    def test_nice_ticks_stay_inside_domain(self) -> None:
        ticks = nice_ticks(-0.3, 9.7, 5)
        self.assertGreaterEqual(float(ticks[0]), -0.3)
        self.assertLessEqual(float(ticks[-1]), 9.7)
        self.assertEqual(ticks.tolist(), [0.0, 2.0, 4.0, 6.0, 8.0])

    def test_nice_ticks_snap_zero(self) -> None:
        ticks = nice_ticks(-1.0, 1.0, 5)
        self.assertEqual(ticks.tolist(), [-1.0, -0.5, 0.0, 0.5, 1.0])
        self.assertEqual(math.copysign(1.0, float(ticks[2])), 1.0)

    def test_nice_ticks_rejects_nonpositive_count(self) -> None:
        with self.assertRaises(ValueError):
            nice_ticks(0.0, 1.0, 0)

    def test_format_ticks_use_step_precision(self) -> None:
        self.assertEqual(format_ticks(np.asarray([0.0, 0.5, 1.0])), ["0", "0.5", "1"])
        self.assertEqual(format_ticks(np.asarray([10.0, 20.0, 30.0])), ["10", "20", "30"])
        self.assertEqual(format_ticks(np.asarray([], dtype=np.float64)), [])

    def test_format_tick_switches_to_scientific_for_large_values(self) -> None:
        self.assertEqual(format_tick(2.5e7, step=1e7), "2.5000e+07")


if __name__ == "__main__":
    unittest.main()
