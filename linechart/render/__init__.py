"""Reference renderers turning a composed scene into SVG markup or RGBA pixels."""

from .raster import RasterSceneRenderer, rasterize
from .svg import SvgSceneRenderer, render_svg

__all__ = ["RasterSceneRenderer", "SvgSceneRenderer", "rasterize", "render_svg"]
