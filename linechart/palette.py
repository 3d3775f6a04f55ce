from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, TypeVar


Color = tuple[int, int, int, int]
T = TypeVar("T")

DEFAULT_BASE_COLOR = "#9ac7f7"

_NAMED_COLORS: dict[str, Color] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 128, 0, 255),
    "blue": (0, 0, 255, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
    "orange": (255, 165, 0, 255),
    "yellow": (255, 255, 0, 255),
    "transparent": (0, 0, 0, 0),
}


def cyclic(values: Sequence[T], index: int) -> T:
    if not values:
        raise ValueError("cyclic lookup on an empty sequence")
    return values[index % len(values)]


def parse_color(value: Any) -> Color | None:
    """Parse a CSS-ish color into an RGBA tuple; returns None for `none` or unparsable input."""

    if value is None:
        return None
    if isinstance(value, (tuple, list)):
        if len(value) == 3:
            r, g, b = value
            return (_clamp(r), _clamp(g), _clamp(b), 255)
        if len(value) == 4:
            r, g, b, a = value
            return (_clamp(r), _clamp(g), _clamp(b), _clamp(a))
        return None
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    if not text or text == "none":
        return None
    if text in _NAMED_COLORS:
        return _NAMED_COLORS[text]
    if text.startswith("#"):
        hex_value = text[1:]
        try:
            if len(hex_value) in (3, 4):
                parts = [int(ch * 2, 16) for ch in hex_value]
            elif len(hex_value) in (6, 8):
                parts = [int(hex_value[i : i + 2], 16) for i in range(0, len(hex_value), 2)]
            else:
                return None
        except ValueError:
            return None
        if len(parts) == 3:
            parts.append(255)
        return (parts[0], parts[1], parts[2], parts[3])
    if text.startswith("rgb"):
        numbers = text[text.find("(") + 1 : text.find(")")].split(",")
        if len(numbers) < 3:
            return None
        try:
            r, g, b = (int(float(n)) for n in numbers[:3])
            a = 255
            if len(numbers) >= 4:
                a = int(round(float(numbers[3]) * 255))
        except ValueError:
            return None
        return (_clamp(r), _clamp(g), _clamp(b), _clamp(a))
    return None


def color_string(color: Color) -> str:
    r, g, b, a = color
    if a >= 255:
        return f"rgb({r}, {g}, {b})"
    return f"rgba({r}, {g}, {b}, {a / 255.0:.3g})"


def lighten(color: Color, amount: float) -> Color:
    r, g, b, a = color
    return (
        _clamp(r + (255 - r) * amount),
        _clamp(g + (255 - g) * amount),
        _clamp(b + (255 - b) * amount),
        a,
    )


def darken(color: Color, amount: float) -> Color:
    r, g, b, a = color
    return (_clamp(r * (1.0 - amount)), _clamp(g * (1.0 - amount)), _clamp(b * (1.0 - amount)), a)


def mix(base: Any = DEFAULT_BASE_COLOR) -> tuple[Color, ...]:
    """Derive a five-shade palette from one base color."""

    rgba = parse_color(base) or parse_color(DEFAULT_BASE_COLOR)
    assert rgba is not None
    return (
        rgba,
        lighten(rgba, 0.25),
        darken(rgba, 0.25),
        lighten(rgba, 0.5),
        darken(rgba, 0.5),
    )


@dataclass(frozen=True)
class Palette:
    colors: tuple[Color, ...]

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("Palette must contain at least one color")

    @classmethod
    def from_config(cls, palette: Sequence[Any] | None, base_color: Any = None) -> "Palette":
        if isinstance(base_color, Mapping):
            base_color = base_color.get("color")
        if palette:
            parsed = tuple(c for c in (parse_color(v) for v in palette) if c is not None)
            if parsed:
                return cls(colors=parsed)
        return cls(colors=mix(base_color or DEFAULT_BASE_COLOR))

    def __len__(self) -> int:
        return len(self.colors)

    def color(self, index: int) -> Color:
        return cyclic(self.colors, index)


def _clamp(value: float) -> int:
    return max(0, min(255, int(round(value))))
