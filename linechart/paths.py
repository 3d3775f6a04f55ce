from __future__ import annotations

from dataclasses import dataclass, field
import math
import re
from typing import Sequence

import numpy as np

from linechart.errors import ChartDataError


Point = tuple[float, float]

_GL_NODES, _GL_WEIGHTS = np.polynomial.legendre.leggauss(24)
_COMMANDS = frozenset("MmLlHhVvCcSsQqTtAaZz")
_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_SEPARATORS = " \t\r\n,"


def _fmt(value: float) -> str:
    out = f"{value:.10g}"
    return "0" if out == "-0" else out


class Path:
    """Printable path builder.

    `print()` serializes to the SVG path mini-language; `points()` lists the end points of the
    commands that mark data vertices (step corners and other construction points are left out).
    """

    def __init__(self) -> None:
        self._commands: list[str] = []
        self._points: list[Point] = []
        self._current: Point = (0.0, 0.0)
        self._start: Point = (0.0, 0.0)

    def _append(self, command: str, values: Sequence[float], end: Point, vertex: bool) -> "Path":
        self._commands.append(" ".join([command, *(_fmt(v) for v in values)]))
        self._current = end
        if vertex:
            self._points.append(end)
        return self

    def moveto(self, x: float, y: float) -> "Path":
        self._start = (float(x), float(y))
        return self._append("M", (x, y), self._start, True)

    def lineto(self, x: float, y: float, *, vertex: bool = True) -> "Path":
        return self._append("L", (x, y), (float(x), float(y)), vertex)

    def hlineto(self, x: float, *, vertex: bool = True) -> "Path":
        return self._append("H", (x,), (float(x), self._current[1]), vertex)

    def vlineto(self, y: float, *, vertex: bool = True) -> "Path":
        return self._append("V", (y,), (self._current[0], float(y)), vertex)

    def curveto(self, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> "Path":
        return self._append("C", (x1, y1, x2, y2, x, y), (float(x), float(y)), True)

    def qcurveto(self, x1: float, y1: float, x: float, y: float) -> "Path":
        return self._append("Q", (x1, y1, x, y), (float(x), float(y)), True)

    def arc(
        self,
        rx: float,
        ry: float,
        x: float,
        y: float,
        *,
        rotation: float = 0.0,
        large_arc: bool = False,
        sweep: bool = False,
    ) -> "Path":
        values = (rx, ry, rotation, int(large_arc), int(sweep), x, y)
        return self._append("A", values, (float(x), float(y)), True)

    def closepath(self) -> "Path":
        self._commands.append("Z")
        self._current = self._start
        return self

    def print(self) -> str:
        return " ".join(self._commands)

    def points(self) -> list[Point]:
        return list(self._points)

    def __str__(self) -> str:
        return self.print()


class _Segment:
    start: Point
    end: Point

    def speed(self, t: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def point_at(self, t: float) -> Point:
        raise NotImplementedError

    def length_to(self, t: float) -> float:
        if t <= 0.0:
            return 0.0
        return _integrate(self.speed, 0.0, min(1.0, t))

    @property
    def length(self) -> float:
        return self.length_to(1.0)

    def sample_count(self) -> int:
        return max(4, min(256, int(math.ceil(self.length / 2.0))))

    def sample(self) -> np.ndarray:
        ts = np.linspace(0.0, 1.0, self.sample_count() + 1)
        return np.asarray([self.point_at(float(t)) for t in ts], dtype=np.float64)

    def t_at_length(self, distance: float) -> float:
        total = self.length
        if distance <= 0.0 or total <= 0.0:
            return 0.0
        if distance >= total:
            return 1.0
        lo, hi = 0.0, 1.0
        for _ in range(40):
            mid = (lo + hi) / 2.0
            if self.length_to(mid) < distance:
                lo = mid
            else:
                hi = mid
        return (lo + hi) / 2.0


@dataclass(frozen=True)
class LineSegment(_Segment):
    start: Point
    end: Point

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    def length_to(self, t: float) -> float:
        return self.length * max(0.0, min(1.0, t))

    def speed(self, t: np.ndarray) -> np.ndarray:
        return np.full(np.shape(t), self.length, dtype=np.float64)

    def point_at(self, t: float) -> Point:
        return (
            self.start[0] + (self.end[0] - self.start[0]) * t,
            self.start[1] + (self.end[1] - self.start[1]) * t,
        )

    def sample(self) -> np.ndarray:
        return np.asarray([self.start, self.end], dtype=np.float64)

    def t_at_length(self, distance: float) -> float:
        total = self.length
        if total <= 0.0:
            return 0.0
        return max(0.0, min(1.0, distance / total))


@dataclass(frozen=True)
class CubicSegment(_Segment):
    start: Point
    c1: Point
    c2: Point
    end: Point

    def speed(self, t: np.ndarray) -> np.ndarray:
        p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (self.start, self.c1, self.c2, self.end))
        t = np.asarray(t, dtype=np.float64)[..., None]
        mt = 1.0 - t
        d = 3.0 * mt * mt * (p1 - p0) + 6.0 * mt * t * (p2 - p1) + 3.0 * t * t * (p3 - p2)
        return np.hypot(d[..., 0], d[..., 1])

    def point_at(self, t: float) -> Point:
        mt = 1.0 - t
        a, b, c, d = mt**3, 3 * mt * mt * t, 3 * mt * t * t, t**3
        return (
            a * self.start[0] + b * self.c1[0] + c * self.c2[0] + d * self.end[0],
            a * self.start[1] + b * self.c1[1] + c * self.c2[1] + d * self.end[1],
        )


@dataclass(frozen=True)
class QuadSegment(_Segment):
    start: Point
    control: Point
    end: Point

    def speed(self, t: np.ndarray) -> np.ndarray:
        p0, p1, p2 = (np.asarray(p, dtype=np.float64) for p in (self.start, self.control, self.end))
        t = np.asarray(t, dtype=np.float64)[..., None]
        d = 2.0 * (1.0 - t) * (p1 - p0) + 2.0 * t * (p2 - p1)
        return np.hypot(d[..., 0], d[..., 1])

    def point_at(self, t: float) -> Point:
        mt = 1.0 - t
        return (
            mt * mt * self.start[0] + 2 * mt * t * self.control[0] + t * t * self.end[0],
            mt * mt * self.start[1] + 2 * mt * t * self.control[1] + t * t * self.end[1],
        )


@dataclass(frozen=True)
class ArcSegment(_Segment):
    """Elliptical arc in endpoint form, evaluated through its center parameterization."""

    start: Point
    rx: float
    ry: float
    rotation: float
    large_arc: bool
    sweep: bool
    end: Point
    _center: Point = field(init=False, repr=False)
    _radii: tuple[float, float] = field(init=False, repr=False)
    _theta: tuple[float, float] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        phi = math.radians(self.rotation)
        cos_phi, sin_phi = math.cos(phi), math.sin(phi)
        x1, y1 = self.start
        x2, y2 = self.end
        dx, dy = (x1 - x2) / 2.0, (y1 - y2) / 2.0
        x1p = cos_phi * dx + sin_phi * dy
        y1p = -sin_phi * dx + cos_phi * dy
        rx, ry = abs(self.rx), abs(self.ry)
        if rx > 0 and ry > 0:
            lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
            if lam > 1.0:
                rx *= math.sqrt(lam)
                ry *= math.sqrt(lam)
            num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
            den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
            coef = math.sqrt(max(0.0, num / den)) if den > 0 else 0.0
            if self.large_arc == self.sweep:
                coef = -coef
            cxp = coef * rx * y1p / ry
            cyp = -coef * ry * x1p / rx
            cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2.0
            cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2.0
            theta1 = _angle(1.0, 0.0, (x1p - cxp) / rx, (y1p - cyp) / ry)
            dtheta = _angle((x1p - cxp) / rx, (y1p - cyp) / ry, (-x1p - cxp) / rx, (-y1p - cyp) / ry)
            if not self.sweep and dtheta > 0:
                dtheta -= 2.0 * math.pi
            elif self.sweep and dtheta < 0:
                dtheta += 2.0 * math.pi
        else:
            cx, cy, theta1, dtheta = (x1 + x2) / 2.0, (y1 + y2) / 2.0, 0.0, 0.0
        object.__setattr__(self, "_center", (cx, cy))
        object.__setattr__(self, "_radii", (rx, ry))
        object.__setattr__(self, "_theta", (theta1, dtheta))

    @property
    def degenerate(self) -> bool:
        rx, ry = self._radii
        return rx == 0 or ry == 0 or self.start == self.end

    def speed(self, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t, dtype=np.float64)
        if self.degenerate:
            chord = math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])
            return np.full(t.shape, chord, dtype=np.float64)
        rx, ry = self._radii
        theta1, dtheta = self._theta
        theta = theta1 + t * dtheta
        return abs(dtheta) * np.hypot(rx * np.sin(theta), ry * np.cos(theta))

    def point_at(self, t: float) -> Point:
        if self.degenerate:
            return (
                self.start[0] + (self.end[0] - self.start[0]) * t,
                self.start[1] + (self.end[1] - self.start[1]) * t,
            )
        if t >= 1.0:
            return self.end
        cx, cy = self._center
        rx, ry = self._radii
        theta1, dtheta = self._theta
        phi = math.radians(self.rotation)
        theta = theta1 + t * dtheta
        return (
            cx + rx * math.cos(phi) * math.cos(theta) - ry * math.sin(phi) * math.sin(theta),
            cy + rx * math.sin(phi) * math.cos(theta) + ry * math.cos(phi) * math.sin(theta),
        )


@dataclass
class Subpath:
    start: Point
    segments: list[_Segment] = field(default_factory=list)
    closed: bool = False

    @property
    def length(self) -> float:
        return sum(segment.length for segment in self.segments)

    def polyline(self) -> np.ndarray:
        if not self.segments:
            return np.asarray([self.start], dtype=np.float64)
        parts = [self.segments[0].sample()]
        for segment in self.segments[1:]:
            parts.append(segment.sample()[1:])
        return np.concatenate(parts, axis=0)


class PathProperties:
    """Geometry queries over a serialized SVG path."""

    def __init__(self, d: str) -> None:
        self.d = d
        self.subpaths = parse_path(d)
        self._lengths = [segment.length for sub in self.subpaths for segment in sub.segments]

    @property
    def total_length(self) -> float:
        return float(sum(self._lengths))

    def point_at_length(self, distance: float) -> Point:
        segments = [segment for sub in self.subpaths for segment in sub.segments]
        if not segments:
            if self.subpaths:
                return self.subpaths[0].start
            return (0.0, 0.0)
        remaining = max(0.0, distance)
        for segment, length in zip(segments, self._lengths):
            if remaining <= length:
                return segment.point_at(segment.t_at_length(remaining))
            remaining -= length
        return segments[-1].end

    def polylines(self) -> list[tuple[np.ndarray, bool]]:
        return [(sub.polyline(), sub.closed) for sub in self.subpaths]


def measure_length(d: str) -> float:
    return PathProperties(d).total_length


def parse_path(d: str) -> list[Subpath]:
    scanner = _Scanner(d)
    subpaths: list[Subpath] = []
    current: Point = (0.0, 0.0)
    start: Point = (0.0, 0.0)
    command: str | None = None
    last_upper: str | None = None
    last_control: Point | None = None
    active: Subpath | None = None

    def ensure_subpath() -> Subpath:
        nonlocal active
        if active is None:
            active = Subpath(start=current)
            subpaths.append(active)
        return active

    while True:
        explicit = scanner.command()
        if explicit is not None:
            command = explicit
        elif scanner.at_end():
            break
        elif command is None or command in "Zz":
            raise ChartDataError(f"path data has coordinates without a command at {scanner.pos}: {d!r}")
        assert command is not None
        upper = command.upper()
        relative = command.islower()
        ox, oy = current if relative else (0.0, 0.0)

        if upper == "M":
            x, y = scanner.number() + ox, scanner.number() + oy
            current = start = (x, y)
            active = Subpath(start=current)
            subpaths.append(active)
            command = "l" if relative else "L"
            last_control = None
        elif upper == "Z":
            sub = ensure_subpath()
            if current != start:
                sub.segments.append(LineSegment(current, start))
            sub.closed = True
            current = start
            active = None
            last_control = None
        elif upper in ("L", "H", "V"):
            if upper == "L":
                end = (scanner.number() + ox, scanner.number() + oy)
            elif upper == "H":
                end = (scanner.number() + ox, current[1])
            else:
                end = (current[0], scanner.number() + oy)
            ensure_subpath().segments.append(LineSegment(current, end))
            current = end
            last_control = None
        elif upper in ("C", "S"):
            if upper == "C":
                c1 = (scanner.number() + ox, scanner.number() + oy)
            elif last_upper in ("C", "S") and last_control is not None:
                c1 = (2 * current[0] - last_control[0], 2 * current[1] - last_control[1])
            else:
                c1 = current
            c2 = (scanner.number() + ox, scanner.number() + oy)
            end = (scanner.number() + ox, scanner.number() + oy)
            ensure_subpath().segments.append(CubicSegment(current, c1, c2, end))
            current = end
            last_control = c2
        elif upper in ("Q", "T"):
            if upper == "Q":
                control = (scanner.number() + ox, scanner.number() + oy)
            elif last_upper in ("Q", "T") and last_control is not None:
                control = (2 * current[0] - last_control[0], 2 * current[1] - last_control[1])
            else:
                control = current
            end = (scanner.number() + ox, scanner.number() + oy)
            ensure_subpath().segments.append(QuadSegment(current, control, end))
            current = end
            last_control = control
        elif upper == "A":
            rx, ry, rotation = scanner.number(), scanner.number(), scanner.number()
            large_arc, sweep = scanner.flag(), scanner.flag()
            end = (scanner.number() + ox, scanner.number() + oy)
            ensure_subpath().segments.append(ArcSegment(current, rx, ry, rotation, large_arc, sweep, end))
            current = end
            last_control = None
        last_upper = upper
    return subpaths


def dash_polylines(points: np.ndarray, dash_array: Sequence[float], dash_offset: float = 0.0) -> list[np.ndarray]:
    """Split a polyline into its visible dash runs."""

    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[0] < 2:
        return []
    pattern = [max(0.0, float(v)) for v in dash_array]
    if len(pattern) % 2 == 1:
        pattern = pattern * 2
    period = sum(pattern)
    if not pattern or period <= 0:
        return [pts]

    steps = np.hypot(np.diff(pts[:, 0]), np.diff(pts[:, 1]))
    cumulative = np.concatenate([[0.0], np.cumsum(steps)])
    total = float(cumulative[-1])

    runs: list[np.ndarray] = []
    pos = -(float(dash_offset) % period)
    index = 0
    while pos < total:
        length = pattern[index % len(pattern)]
        if index % 2 == 0:
            a = max(pos, 0.0)
            b = min(pos + length, total)
            if b - a > 1e-9:
                runs.append(_slice_polyline(pts, cumulative, a, b))
        pos += length
        index += 1
    return runs


def _slice_polyline(pts: np.ndarray, cumulative: np.ndarray, a: float, b: float) -> np.ndarray:
    def point_at(distance: float) -> np.ndarray:
        i = int(np.searchsorted(cumulative, distance, side="right")) - 1
        i = max(0, min(i, pts.shape[0] - 2))
        span = cumulative[i + 1] - cumulative[i]
        t = 0.0 if span <= 0 else (distance - cumulative[i]) / span
        return pts[i] + (pts[i + 1] - pts[i]) * t

    inner = (cumulative > a) & (cumulative < b)
    return np.vstack([point_at(a), pts[inner], point_at(b)])


def _integrate(speed, a: float, b: float, pieces: int = 4) -> float:
    edges = np.linspace(a, b, pieces + 1)
    total = 0.0
    for lo, hi in zip(edges[:-1], edges[1:]):
        half = (hi - lo) / 2.0
        t = half * _GL_NODES + (hi + lo) / 2.0
        total += float(np.sum(_GL_WEIGHTS * speed(t)) * half)
    return total


def _angle(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _skip(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _SEPARATORS:
            self.pos += 1

    def at_end(self) -> bool:
        self._skip()
        return self.pos >= len(self.text)

    def command(self) -> str | None:
        self._skip()
        if self.pos < len(self.text) and self.text[self.pos] in _COMMANDS:
            self.pos += 1
            return self.text[self.pos - 1]
        return None

    def number(self) -> float:
        self._skip()
        match = _NUMBER.match(self.text, self.pos)
        if match is None:
            raise ChartDataError(f"expected a number at {self.pos} in path data: {self.text!r}")
        self.pos = match.end()
        return float(match.group(0))

    def flag(self) -> bool:
        self._skip()
        if self.pos >= len(self.text) or self.text[self.pos] not in "01":
            raise ChartDataError(f"expected an arc flag at {self.pos} in path data: {self.text!r}")
        self.pos += 1
        return self.text[self.pos - 1] == "1"
