from __future__ import annotations

import unittest

from linechart.reveal import (
    RevealAnimator,
    RevealPhase,
    cubic_bezier,
    ease_in_out,
    in_out,
    linear,
)


class _FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class EasingTests(unittest.TestCase):
    def test_easing_end_points(self) -> None:
        for easing in (linear, ease_in_out, cubic_bezier(0.25, 0.1, 0.25, 1.0)):
            with self.subTest(easing=easing):
                self.assertEqual(easing(0.0), 0.0)
                self.assertEqual(easing(1.0), 1.0)

    def test_in_out_is_symmetric(self) -> None:
        symmetric = in_out(cubic_bezier(0.42, 0.0, 1.0, 1.0))
        self.assertAlmostEqual(symmetric(0.5), 0.5, places=6)
        self.assertAlmostEqual(symmetric(0.2) + symmetric(0.8), 1.0, places=6)

    def test_linear_bezier_is_identity(self) -> None:
        easing = cubic_bezier(1.0 / 3.0, 1.0 / 3.0, 2.0 / 3.0, 2.0 / 3.0)
        self.assertAlmostEqual(easing(0.3), 0.3, places=5)


class RevealAnimatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _FakeClock()
        self.reveal = RevealAnimator(clock=self.clock, easing=linear)
        self.reveal.set_max_length(100.0)

    def test_idle_value_tracks_max_length(self) -> None:
        self.assertEqual(self.reveal.phase, RevealPhase.IDLE)
        self.assertEqual(self.reveal.value, 100.0)
        self.reveal.set_max_length(120.0)
        self.assertEqual(self.reveal.value, 120.0)

    def test_animation_reaches_zero(self) -> None:
        self.reveal.animate(duration=0.5)
        self.assertEqual(self.reveal.phase, RevealPhase.ANIMATING)
        self.clock.now = 0.25
        self.assertAlmostEqual(self.reveal.tick(), 50.0)
        self.clock.now = 0.5
        self.assertEqual(self.reveal.tick(), 0.0)
        self.assertEqual(self.reveal.phase, RevealPhase.REVEALED)
        self.clock.now = 10.0
        self.assertEqual(self.reveal.tick(), 0.0)

    def test_value_is_monotone_non_increasing(self) -> None:
        reveal = RevealAnimator(clock=self.clock)
        reveal.set_max_length(80.0)
        reveal.animate(duration=1.0)
        values = []
        for step in range(11):
            self.clock.now = step / 10.0
            values.append(reveal.tick())
        self.assertEqual(values[-1], 0.0)
        self.assertTrue(all(a >= b for a, b in zip(values, values[1:])))

    def test_delay_holds_value(self) -> None:
        self.reveal.animate(delay=1.0, duration=1.0)
        self.clock.now = 0.5
        self.assertEqual(self.reveal.tick(), 100.0)
        self.clock.now = 1.5
        self.assertAlmostEqual(self.reveal.tick(), 50.0)

    def test_zero_duration_completes_immediately(self) -> None:
        done: list[bool] = []
        self.reveal.animate(duration=0.0, on_complete=lambda: done.append(True))
        self.assertEqual(self.reveal.value, 0.0)
        self.assertEqual(done, [True])

    def test_reset_is_idempotent(self) -> None:
        self.reveal.animate(duration=1.0)
        self.clock.now = 2.0
        self.reveal.tick()
        self.reveal.reset()
        self.reveal.reset()
        self.assertEqual(self.reveal.value, 100.0)
        self.assertEqual(self.reveal.phase, RevealPhase.IDLE)
        self.assertIsNone(self.reveal.handle)

    def test_retrigger_while_animating_keeps_running_handle(self) -> None:
        first = self.reveal.animate(duration=1.0)
        self.clock.now = 0.5
        second = self.reveal.animate(duration=10.0)
        self.assertIs(first, second)
        self.clock.now = 1.0
        self.assertEqual(self.reveal.tick(), 0.0)

    def test_reset_cancels_pending_completion(self) -> None:
        done: list[bool] = []
        self.reveal.animate(duration=1.0, on_complete=lambda: done.append(True))
        self.clock.now = 0.5
        self.reveal.tick()
        self.reveal.reset()
        self.clock.now = 5.0
        self.assertEqual(self.reveal.tick(), 100.0)
        self.assertEqual(done, [])

    def test_animate_after_reveal_replays(self) -> None:
        self.reveal.animate(duration=0.0)
        self.reveal.reset()
        self.clock.now = 3.0
        self.reveal.animate(duration=1.0)
        self.clock.now = 3.5
        self.assertAlmostEqual(self.reveal.tick(), 50.0)

    def test_max_length_change_while_animating_keeps_value(self) -> None:
        self.reveal.animate(duration=1.0)
        self.clock.now = 0.5
        value = self.reveal.tick()
        self.reveal.set_max_length(400.0)
        self.assertEqual(self.reveal.value, value)
        self.assertEqual(self.reveal.max_length, 400.0)

    def test_rejects_negative_inputs(self) -> None:
        with self.assertRaises(ValueError):
            self.reveal.animate(delay=-1.0)
        with self.assertRaises(ValueError):
            self.reveal.animate(duration=-0.5)
        with self.assertRaises(ValueError):
            self.reveal.set_max_length(-1.0)


if __name__ == "__main__":
    unittest.main()
