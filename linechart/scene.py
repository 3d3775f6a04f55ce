from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Literal, Protocol

from linechart.options import TextStyle
from linechart.palette import Color
from linechart.reveal import RevealAnimator


LAYER_ORDER = ("grid", "regions", "areas", "lines", "points", "axes")

TextAnchor = Literal["start", "middle", "end"]


@dataclass(frozen=True)
class PathNode:
    key: str
    d: str
    stroke: Color | None = None
    stroke_width: float = 1.0
    fill: Color | None = None
    fill_opacity: float = 1.0
    stroke_linecap: str | None = None
    stroke_linejoin: str | None = None
    dash_array: tuple[float, ...] | None = None
    dash_offset: float | None = None
    reveal: RevealAnimator | None = None

    def resolved_dash_offset(self) -> float | None:
        if self.reveal is not None:
            return self.reveal.value
        return self.dash_offset


@dataclass(frozen=True)
class RectNode:
    key: str
    x: float
    y: float
    width: float
    height: float
    fill: Color | None = None
    fill_opacity: float = 1.0


@dataclass(frozen=True)
class CircleNode:
    key: str
    cx: float
    cy: float
    r: float
    fill: Color | None = None
    fill_opacity: float = 1.0


@dataclass(frozen=True)
class LineNode:
    key: str
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: Color | None = None
    stroke_width: float = 1.0


@dataclass(frozen=True)
class TextNode:
    key: str
    x: float
    y: float
    text: str
    style: TextStyle = field(default_factory=TextStyle)
    anchor: TextAnchor = "start"


@dataclass(frozen=True)
class GroupNode:
    key: str
    children: tuple[Any, ...] = ()
    x: float = 0.0
    y: float = 0.0

    def walk(self) -> Iterator[Any]:
        for child in self.children:
            yield child
            if isinstance(child, GroupNode):
                yield from child.walk()


@dataclass(frozen=True)
class Scene:
    width: float
    height: float
    root: GroupNode
    message: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.message is not None

    def layer(self, name: str) -> GroupNode:
        for child in self.root.children:
            if isinstance(child, GroupNode) and child.key == name:
                return child
        raise KeyError(name)

    def layer_names(self) -> tuple[str, ...]:
        return tuple(child.key for child in self.root.children if isinstance(child, GroupNode))


class SceneRenderer(Protocol):
    """External drawing surface consuming a composed scene."""

    def draw_scene(self, scene: Scene) -> None:
        ...


def placeholder_scene(width: float, height: float, message: str, style: TextStyle) -> Scene:
    text = TextNode(key="no-data", x=0.0, y=style.font_size, text=message, style=style)
    return Scene(width=width, height=height, root=GroupNode(key="chart", children=(text,)), message=message)


def compose_scene(
    *,
    width: float,
    height: float,
    margin_left: float,
    margin_top: float,
    grid: GroupNode,
    regions: GroupNode,
    areas: GroupNode,
    lines: GroupNode,
    points: GroupNode,
    axes: GroupNode,
) -> Scene:
    """Stack the layers bottom to top: grid, regions, areas, lines, points, axes."""

    layers = (grid, regions, areas, lines, points, axes)
    for layer, name in zip(layers, LAYER_ORDER):
        if layer.key != name:
            raise ValueError(f"layer {layer.key!r} passed in the {name!r} slot")
    root = GroupNode(key="chart", children=layers, x=margin_left, y=margin_top)
    return Scene(width=width, height=height, root=root)
