from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from linechart.raster.canvas import RGBA, blend


Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE_PX = 14.0
FALLBACK_FAMILIES = ("arial", "helvetica", "liberationsans", "dejavusans")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

_BOLD_MARKERS = ("bold", "bd")
_ITALIC_MARKERS = ("italic", "oblique", "it")


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    bold: bool = False,
    italic: bool = False,
    anchor: Literal["start", "middle", "end"] = "start",
) -> None:
    """Draw `text` with its baseline at `y`, aligned on `x` by `anchor` like SVG `text-anchor`."""

    if not text:
        return
    font, synthetic_bold = _load_font(font_family, font_size_px, bold, italic)
    mask = _glyph_mask(text, font)
    if synthetic_bold:
        mask = _thicken(mask)
    left, top, _, _ = font.getbbox(text)
    width = mask.shape[1]
    offset = {"middle": width / 2.0, "end": float(width)}.get(anchor, -float(left))
    x0 = int(round(x - offset))
    y0 = int(round(y - _ascent(font) + top))

    h, w = mask.shape
    cx0, cy0 = max(0, x0), max(0, y0)
    cx1, cy1 = min(dst.shape[1], x0 + w), min(dst.shape[0], y0 + h)
    if cx0 >= cx1 or cy0 >= cy1:
        return
    coverage = mask[cy0 - y0 : cy1 - y0, cx0 - x0 : cx1 - x0].astype(np.float32) / 255.0
    blend(dst[cy0:cy1, cx0:cx1], color, coverage)



def _ascent(font: Font) -> int:
    if isinstance(font, ImageFont.FreeTypeFont):
        return int(font.getmetrics()[0])
    # Bitmap fonts draw from the top of their bounding box.
    return int(font.getbbox("Ag")[3])


def _thicken(mask: np.ndarray) -> np.ndarray:
    out = mask.copy()
    np.maximum(out[:, 1:], mask[:, :-1], out=out[:, 1:])
    return out


@lru_cache(maxsize=128)
def _glyph_mask(text: str, font: Font) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(family: str, size_px: float, bold: bool, italic: bool) -> tuple[Font, bool]:
    """Return the closest face for the request and whether bold must be synthesised."""

    size = max(1, int(round(size_px)))
    path, has_bold = _find_face(family.strip().lower() or DEFAULT_FONT_FAMILY.lower(), bold, italic)
    if path is None:
        return ImageFont.load_default(), bold
    try:
        return ImageFont.truetype(str(path), size=size), bold and not has_bold
    except OSError:
        return ImageFont.load_default(), bold


@lru_cache(maxsize=1)
def _font_files() -> tuple[Path, ...]:
    files: list[Path] = []
    for base in FONT_DIRS:
        if base.exists():
            for pattern in ("*.ttf", "*.otf", "*.ttc"):
                files.extend(base.rglob(pattern))
    return tuple(sorted(files))


@lru_cache(maxsize=64)
def _find_face(family: str, bold: bool, italic: bool) -> tuple[Path | None, bool]:
    stems = [(path, _normalize(path.stem)) for path in _font_files()]
    for wanted in (_normalize(family),) + FALLBACK_FAMILIES:
        # Style markers follow the family name in the file stem, e.g. "arialbd" or "DejaVuSans-BoldOblique".
        faces = [(path, stem.split(wanted, 1)[1]) for path, stem in stems if wanted in stem]
        if not faces:
            continue
        path, suffix = min(faces, key=lambda face: _face_distance(face[1], bold, italic))
        return path, _has_marker(suffix, _BOLD_MARKERS)
    return None, False


def _face_distance(suffix: str, bold: bool, italic: bool) -> tuple[int, int]:
    mismatches = int(_has_marker(suffix, _BOLD_MARKERS) != bold) + int(_has_marker(suffix, _ITALIC_MARKERS) != italic)
    return (mismatches, len(suffix))


def _has_marker(suffix: str, markers: tuple[str, ...]) -> bool:
    return any(marker in suffix for marker in markers)


def _normalize(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())
