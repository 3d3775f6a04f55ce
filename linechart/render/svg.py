from __future__ import annotations

import logging
from typing import Any
import xml.etree.ElementTree as ET

from linechart.palette import Color
from linechart.scene import CircleNode, GroupNode, LineNode, PathNode, RectNode, Scene, TextNode

LOGGER = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


def _num(value: float) -> str:
    out = f"{float(value):.6g}"
    return "0" if out == "-0" else out


def _paint(attrs: dict[str, str], name: str, color: Color | None, opacity: float = 1.0) -> None:
    if color is None:
        attrs[name] = "none"
        return
    r, g, b, a = color
    attrs[name] = f"#{r:02x}{g:02x}{b:02x}"
    alpha = (a / 255.0) * opacity
    if alpha < 1.0:
        attrs[f"{name}-opacity"] = _num(alpha)


def render_svg(scene: Scene) -> str:
    """Serialize a scene to standalone SVG markup, reading reveal offsets at call time."""

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": _num(scene.width),
            "height": _num(scene.height),
            "viewBox": f"0 0 {_num(scene.width)} {_num(scene.height)}",
        },
    )
    root.append(_element(scene.root))
    return ET.tostring(root, encoding="unicode")


class SvgSceneRenderer:
    """Scene renderer keeping the markup of the last drawn scene."""

    def __init__(self) -> None:
        self.markup: str | None = None

    def draw_scene(self, scene: Scene) -> None:
        self.markup = render_svg(scene)


def _element(node: Any) -> ET.Element:
    if isinstance(node, GroupNode):
        attrs = {"id": node.key}
        if node.x or node.y:
            attrs["transform"] = f"translate({_num(node.x)},{_num(node.y)})"
        group = ET.Element("g", attrs)
        for child in node.children:
            group.append(_element(child))
        return group
    if isinstance(node, PathNode):
        attrs = {"d": node.d}
        _paint(attrs, "stroke", node.stroke)
        if node.stroke is not None:
            attrs["stroke-width"] = _num(node.stroke_width)
        _paint(attrs, "fill", node.fill, node.fill_opacity)
        if node.stroke_linecap:
            attrs["stroke-linecap"] = node.stroke_linecap
        if node.stroke_linejoin:
            attrs["stroke-linejoin"] = node.stroke_linejoin
        if node.dash_array is not None:
            attrs["stroke-dasharray"] = ",".join(_num(v) for v in node.dash_array)
        offset = node.resolved_dash_offset()
        if offset is not None:
            attrs["stroke-dashoffset"] = _num(offset)
        return ET.Element("path", attrs)
    if isinstance(node, RectNode):
        attrs = {"x": _num(node.x), "y": _num(node.y), "width": _num(node.width), "height": _num(node.height)}
        _paint(attrs, "fill", node.fill, node.fill_opacity)
        return ET.Element("rect", attrs)
    if isinstance(node, CircleNode):
        attrs = {"cx": _num(node.cx), "cy": _num(node.cy), "r": _num(node.r)}
        _paint(attrs, "fill", node.fill, node.fill_opacity)
        return ET.Element("circle", attrs)
    if isinstance(node, LineNode):
        attrs = {"x1": _num(node.x1), "y1": _num(node.y1), "x2": _num(node.x2), "y2": _num(node.y2)}
        _paint(attrs, "stroke", node.stroke)
        attrs["stroke-width"] = _num(node.stroke_width)
        return ET.Element("line", attrs)
    if isinstance(node, TextNode):
        style = node.style
        text = ET.Element(
            "text",
            {
                "x": _num(node.x),
                "y": _num(node.y),
                "font-family": style.font_family,
                "font-size": _num(style.font_size),
                "font-weight": style.font_weight,
                "font-style": style.font_style,
                "fill": style.fill,
                "text-anchor": node.anchor,
            },
        )
        text.text = node.text
        return text
    if isinstance(node, str):
        # Custom point renderings may hand back raw SVG markup.
        return ET.fromstring(node)
    if isinstance(node, ET.Element):
        return node
    LOGGER.debug("rendering unknown node type %s as text", type(node).__name__)
    fallback = ET.Element("text")
    fallback.text = str(node)
    return fallback
