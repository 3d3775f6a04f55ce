from __future__ import annotations

import unittest

import numpy as np

from linechart import ChartDataError
from linechart.adapters.normalize import field_accessor, normalize_data, numeric
from linechart.curves import build_curves
from linechart.strategies import ChartLayout, smooth_line, step_line, stock, strategy_for
from linechart.scales import LinearScale


SERIES = [
    [{"x": 0, "y": 0}, {"x": 1, "y": 5}, {"x": 2, "y": 10}],
    [{"x": 0, "y": 10}, {"x": 2, "y": 0}],
]


class NormalizeTests(unittest.TestCase):
    def test_list_of_series_passes_through(self) -> None:
        series = normalize_data(SERIES)
        self.assertEqual(len(series), 2)
        self.assertEqual(series[1][0], {"x": 0, "y": 10})

    def test_flat_records_form_one_series(self) -> None:
        series = normalize_data([{"x": 0, "y": 1}, {"x": 1, "y": 2}])
        self.assertEqual(len(series), 1)
        self.assertEqual(len(series[0]), 2)

    def test_flat_records_group_by_series_key_in_first_seen_order(self) -> None:
        records = [
            {"k": "b", "x": 0, "y": 1},
            {"k": "a", "x": 0, "y": 2},
            {"k": "b", "x": 1, "y": 3},
        ]
        series = normalize_data(records, series_key="k")
        self.assertEqual([[r["y"] for r in s] for s in series], [[1, 3], [2]])

    def test_missing_series_key_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            normalize_data([{"x": 0, "y": 1}], series_key="k")

    def test_numpy_rows_become_records(self) -> None:
        series = normalize_data(np.asarray([[0.0, 1.0], [1.0, 3.0]]))
        self.assertEqual(series, (([0.0, 1.0], [1.0, 3.0]),))

    def test_none_and_empty(self) -> None:
        self.assertEqual(normalize_data(None), ())
        self.assertEqual(normalize_data([]), ())

    def test_unsupported_type_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            normalize_data("0,1,2")

    def test_pandas_dataframe_rows(self) -> None:
        try:
            import pandas as pd
        except ImportError:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"x": [0, 1, 2], "y": [3.0, 4.0, 5.0]})
        series = normalize_data(df)
        self.assertEqual(len(series), 1)
        self.assertEqual([field_accessor("y")(r) for r in series[0]], [3.0, 4.0, 5.0])

    def test_torch_scalars_are_numeric(self) -> None:
        try:
            import torch
        except ImportError:
            self.skipTest("torch is not installed")

        self.assertEqual(numeric(torch.tensor(2.5)), 2.5)
        with self.assertRaises(ChartDataError):
            numeric(torch.tensor([1.0, 2.0]))

    def test_numeric_and_accessor_errors(self) -> None:
        self.assertEqual(numeric(np.int32(4)), 4.0)
        with self.assertRaises(ChartDataError):
            numeric("4")
        with self.assertRaises(ChartDataError):
            field_accessor("y")({"x": 1})

    def test_non_finite_values_are_rejected(self) -> None:
        for value in (float("nan"), float("inf"), np.float64("-inf")):
            with self.subTest(value=value):
                with self.assertRaises(ChartDataError):
                    numeric(value, label="y")


class StrategyContractTests(unittest.TestCase):
    def test_custom_strategy_receives_keyword_contract(self) -> None:
        calls: list[dict] = []

        def capture(**kwargs) -> ChartLayout:
            calls.append(kwargs)
            scale = LinearScale(domain=(0.0, 1.0), range=(0.0, 1.0))
            return ChartLayout(curves=(), xscale=scale, yscale=scale)

        build_curves(capture, SERIES, "x", "y", 400.0, 300.0, -5.0, None)
        self.assertEqual(len(calls), 1)
        kwargs = calls[0]
        self.assertEqual(
            sorted(kwargs),
            ["closed", "data", "height", "max", "min", "width", "xaccessor", "yaccessor"],
        )
        self.assertFalse(kwargs["closed"])
        self.assertEqual((kwargs["width"], kwargs["height"]), (400.0, 300.0))
        self.assertEqual((kwargs["min"], kwargs["max"]), (-5.0, None))
        self.assertEqual(kwargs["xaccessor"]({"x": 7, "y": 1}), 7.0)
        self.assertEqual(kwargs["yaccessor"]({"x": 7, "y": 1}), 1.0)

    def test_strategy_lookup(self) -> None:
        self.assertIs(strategy_for("stock"), stock)
        self.assertIs(strategy_for("step"), step_line)
        self.assertIs(strategy_for(smooth_line), smooth_line)
        with self.assertRaises(ValueError):
            strategy_for("pie")


class StockStrategyTests(unittest.TestCase):
    def test_one_curve_per_series_in_pixel_space(self) -> None:
        layout = build_curves(stock, SERIES, "x", "y", 200.0, 100.0)
        self.assertEqual(len(layout.curves), 2)
        first = layout.curves[0]
        self.assertEqual(first.line.path.print(), "M 0 100 L 100 50 L 200 0")
        self.assertEqual(first.line.path.points(), [(0.0, 100.0), (100.0, 50.0), (200.0, 0.0)])
        self.assertEqual(first.item, tuple(SERIES[0]))

    def test_area_closes_down_to_domain_floor(self) -> None:
        layout = build_curves(stock, SERIES, "x", "y", 200.0, 100.0)
        area = layout.curves[1].area.path
        self.assertEqual(area.print(), "M 0 0 L 200 100 L 200 100 L 0 100 Z")
        self.assertEqual(area.points(), layout.curves[1].line.path.points())

    def test_configured_bounds_widen_y_domain(self) -> None:
        layout = build_curves(stock, SERIES, "x", "y", 200.0, 100.0, -10.0, 20.0)
        self.assertEqual(layout.yscale.domain, (-10.0, 20.0))
        self.assertEqual(layout.xscale.domain, (0.0, 2.0))

    def test_series_key_grouping(self) -> None:
        records = [
            {"s": "a", "x": 0, "y": 1},
            {"s": "b", "x": 0, "y": 2},
            {"s": "a", "x": 1, "y": 3},
        ]
        layout = build_curves(stock, records, "x", "y", 100.0, 100.0, series_key="s")
        self.assertEqual([len(c.line.path.points()) for c in layout.curves], [2, 1])

    def test_empty_series_gets_empty_paths(self) -> None:
        layout = build_curves(stock, [[], [{"x": 0, "y": 1}, {"x": 1, "y": 2}]], "x", "y", 100.0, 100.0)
        self.assertEqual(layout.curves[0].line.path.print(), "")
        self.assertEqual(layout.curves[0].area.path.print(), "")

    def test_no_data_uses_unit_domain(self) -> None:
        layout = build_curves(stock, [], "x", "y", 100.0, 100.0)
        self.assertEqual(layout.curves, ())
        self.assertEqual(layout.xscale.domain, (0.0, 1.0))

    def test_single_point_pads_degenerate_domains(self) -> None:
        layout = build_curves(stock, [[{"x": 3, "y": 3}]], "x", "y", 100.0, 100.0)
        self.assertEqual(layout.xscale.domain, (2.0, 4.0))
        self.assertEqual(layout.curves[0].line.path.points(), [(50.0, 50.0)])

    def test_non_numeric_value_raises(self) -> None:
        with self.assertRaises(ChartDataError):
            build_curves(stock, [[{"x": 0, "y": "high"}]], "x", "y", 100.0, 100.0)


class ShapedStrategyTests(unittest.TestCase):
    def test_step_line_marks_only_data_vertices(self) -> None:
        layout = build_curves(step_line, SERIES, "x", "y", 200.0, 100.0)
        line = layout.curves[0].line.path
        self.assertEqual(line.print(), "M 0 100 H 100 V 50 H 200 V 0")
        self.assertEqual(line.points(), [(0.0, 100.0), (100.0, 50.0), (200.0, 0.0)])

    def test_smooth_line_passes_through_data_points(self) -> None:
        layout = build_curves(smooth_line, SERIES, "x", "y", 200.0, 100.0)
        line = layout.curves[0].line.path
        self.assertTrue(line.print().startswith("M 0 100 C "))
        self.assertEqual(line.points(), [(0.0, 100.0), (100.0, 50.0), (200.0, 0.0)])

    def test_smooth_line_with_two_points_is_straight(self) -> None:
        layout = build_curves(smooth_line, SERIES, "x", "y", 200.0, 100.0)
        self.assertEqual(layout.curves[1].line.path.print(), "M 0 0 L 200 100")


if __name__ == "__main__":
    unittest.main()
