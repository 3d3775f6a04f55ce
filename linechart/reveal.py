from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import time
from typing import Callable

LOGGER = logging.getLogger(__name__)

Easing = Callable[[float], float]
Clock = Callable[[], float]

DEFAULT_DURATION = 0.5


def linear(t: float) -> float:
    return t


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> Easing:
    """CSS-style timing curve through (0, 0), (x1, y1), (x2, y2), (1, 1)."""

    def coord(t: float, p1: float, p2: float) -> float:
        mt = 1.0 - t
        return 3 * mt * mt * t * p1 + 3 * mt * t * t * p2 + t * t * t

    def slope(t: float, p1: float, p2: float) -> float:
        mt = 1.0 - t
        return 3 * mt * mt * p1 + 6 * mt * t * (p2 - p1) + 3 * t * t * (1.0 - p2)

    def ease(x: float) -> float:
        if x <= 0.0:
            return 0.0
        if x >= 1.0:
            return 1.0
        t = x
        for _ in range(8):
            err = coord(t, x1, x2) - x
            d = slope(t, x1, x2)
            if abs(err) < 1e-7:
                return coord(t, y1, y2)
            if abs(d) < 1e-6:
                break
            t -= err / d
        lo, hi = 0.0, 1.0
        t = x
        for _ in range(50):
            if coord(t, x1, x2) < x:
                lo = t
            else:
                hi = t
            t = (lo + hi) / 2.0
        return coord(t, y1, y2)

    return ease


def in_out(easing: Easing) -> Easing:
    def symmetric(t: float) -> float:
        if t < 0.5:
            return easing(t * 2.0) / 2.0
        return 1.0 - easing((1.0 - t) * 2.0) / 2.0

    return symmetric


ease = cubic_bezier(0.42, 0.0, 1.0, 1.0)
ease_in_out = in_out(ease)


class RevealPhase(Enum):
    IDLE = "idle"
    ANIMATING = "animating"
    REVEALED = "revealed"


@dataclass(frozen=True)
class RevealHandle:
    generation: int
    start_at: float
    duration: float
    from_value: float
    on_complete: Callable[[], None] | None = None


class RevealAnimator:
    """Shared dash-offset value driving the draw-in of every line of one chart.

    The value is the length of stroke still hidden: `max_length` when idle, 0 when revealed.
    The host advances it by calling `tick()` from its frame loop; `reset()` invalidates any
    interpolation in flight so a stale completion can never land.
    """

    def __init__(self, *, clock: Clock = time.monotonic, easing: Easing = ease_in_out) -> None:
        self._clock = clock
        self._easing = easing
        self._max_length = 0.0
        self._value = 0.0
        self._phase = RevealPhase.IDLE
        self._generation = 0
        self._handle: RevealHandle | None = None

    @property
    def value(self) -> float:
        return self._value

    @property
    def max_length(self) -> float:
        return self._max_length

    @property
    def phase(self) -> RevealPhase:
        return self._phase

    @property
    def handle(self) -> RevealHandle | None:
        return self._handle

    def set_max_length(self, length: float) -> None:
        if length < 0:
            raise ValueError("max_length must be >= 0")
        self._max_length = float(length)
        if self._phase is RevealPhase.IDLE:
            self._value = self._max_length
        LOGGER.debug("reveal max length %.3f (%s)", self._max_length, self._phase.value)

    def animate(
        self,
        delay: float = 0.0,
        duration: float = DEFAULT_DURATION,
        *,
        now: float | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> RevealHandle:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        if duration < 0:
            raise ValueError("duration must be >= 0")
        if self._phase is RevealPhase.ANIMATING and self._handle is not None:
            LOGGER.debug("reveal already animating; call reset() before re-triggering")
            return self._handle
        now = self._clock() if now is None else now
        self._generation += 1
        handle = RevealHandle(
            generation=self._generation,
            start_at=now + delay,
            duration=duration,
            from_value=self._value,
            on_complete=on_complete,
        )
        self._handle = handle
        self._phase = RevealPhase.ANIMATING
        LOGGER.debug("reveal start gen=%d from=%.3f delay=%.3f duration=%.3f", handle.generation, self._value, delay, duration)
        self.tick(now)
        return handle

    def reset(self) -> None:
        if self._handle is not None:
            LOGGER.debug("reveal reset cancels gen=%d", self._handle.generation)
        self._generation += 1
        self._handle = None
        self._value = self._max_length
        self._phase = RevealPhase.IDLE

    def tick(self, now: float | None = None) -> float:
        handle = self._handle
        if handle is None:
            return self._value
        now = self._clock() if now is None else now
        self._advance(handle, now)
        return self._value

    def _advance(self, handle: RevealHandle, now: float) -> None:
        if handle.generation != self._generation:
            LOGGER.debug("dropping stale reveal gen=%d", handle.generation)
            return
        elapsed = now - handle.start_at
        if elapsed < 0:
            self._value = handle.from_value
            return
        if handle.duration == 0 or elapsed >= handle.duration:
            self._value = 0.0
            self._phase = RevealPhase.REVEALED
            self._handle = None
            if handle.on_complete is not None:
                handle.on_complete()
            return
        progress = self._easing(elapsed / handle.duration)
        self._value = handle.from_value * (1.0 - progress)
