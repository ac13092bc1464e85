"""
Raster Compositor

Paints a laid-out style onto a transparent RGBA canvas with PIL, back to front:
- Shadow: fill geometry in the shadow color, offset, then Gaussian blurred
- Outline: glyph contour stroked to `stroke_width` on both sides
- Fill: glyphs in the text color

Opacity scales either the whole composite (default) or the fill pass only.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from .colors import RGBA
from .errors import RenderError
from .layout import LayoutResult
from .logging_config import get_logger
from .styles import StyleConfig

logger = get_logger('compositor')

MAX_CANVAS_DIMENSION = int(os.getenv('TEXT_STYLE_MAX_CANVAS_DIMENSION', '8192'))

OPACITY_SCOPES = ('composite', 'fill')
OPACITY_SCOPE = os.getenv('TEXT_STYLE_OPACITY_SCOPE', 'composite')


@dataclass(frozen=True)
class RasterImage:
    """Straight-alpha RGBA pixels shaped (height, width, 4)."""
    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_pil(cls, image: Image.Image) -> 'RasterImage':
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return cls(width=image.width, height=image.height, pixels=np.array(image, dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[..., 3]

    def content_bbox(self) -> Optional[Tuple[int, int, int, int]]:
        """(left, top, right, bottom) of non-transparent pixels, None if fully transparent."""
        ys, xs = np.nonzero(self.alpha)
        if len(xs) == 0:
            return None
        return int(xs.min()), int(ys.min()), int(xs.max()) + 1, int(ys.max()) + 1


def _glyph_mask(
    layout: LayoutResult,
    stroke: float = 0,
    dx: float = 0,
    dy: float = 0
) -> Image.Image:
    """
    Draw every glyph into an 'L' mask.

    Args:
        layout: Laid-out text
        stroke: Extra outline radius around each glyph contour (may be fractional)
        dx, dy: Displacement of all glyphs (shadow offset)
    """
    size = (layout.canvas_width, layout.canvas_height)
    face = layout.face
    mask = Image.new('L', size, 0)

    for run in layout.lines:
        target = Image.new('L', size, 0) if face.slant else mask
        draw = ImageDraw.Draw(target)
        baseline = run.baseline + dy

        for glyph in run.glyphs:
            if glyph.char.isspace():
                continue
            draw.text(
                (glyph.x + dx, baseline),
                glyph.char,
                fill=255,
                font=face.font,
                anchor='ls',
                stroke_width=face.embolden + stroke,
                stroke_fill=255
            )

        if face.slant:
            # Output (x, y) samples input (x + slant * (y - baseline), y)
            sheared = target.transform(
                size,
                Image.Transform.AFFINE,
                (1, face.slant, -face.slant * baseline, 0, 1, 0),
                resample=Image.Resampling.BILINEAR
            )
            mask = ImageChops.lighter(mask, sheared)

    return mask


def _colorize(mask: Image.Image, color: RGBA, scale: float = 1.0) -> Image.Image:
    """Solid-color RGBA layer whose alpha is the mask times the color's alpha."""
    alpha = np.asarray(mask, dtype=np.float32) * (color[3] / 255.0) * scale
    pixels = np.empty((mask.height, mask.width, 4), dtype=np.uint8)
    pixels[..., :3] = color[:3]
    pixels[..., 3] = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)
    return Image.fromarray(pixels)


def render_passes(
    config: StyleConfig,
    layout: LayoutResult,
    opacity_scope: str = 'composite'
) -> Dict[str, Image.Image]:
    """
    Render each enabled pass as its own full-canvas RGBA layer.

    Returns:
        Ordered dict of pass name ('shadow', 'stroke', 'fill') to layer,
        back to front
    """
    passes = {}

    if config.show_shadow:
        shadow = _glyph_mask(layout, dx=config.shadow_offset_x, dy=config.shadow_offset_y)
        if config.shadow_blur > 0:
            shadow = shadow.filter(ImageFilter.GaussianBlur(config.shadow_blur))
        passes['shadow'] = _colorize(shadow, config.shadow_color)

    if config.show_stroke and config.stroke_width > 0:
        # Exact width; layout.stroke_radius only rounds the padding up
        outline = _glyph_mask(layout, stroke=config.stroke_width)
        passes['stroke'] = _colorize(outline, config.stroke_color)

    fill_scale = config.opacity / 100.0 if opacity_scope == 'fill' else 1.0
    passes['fill'] = _colorize(_glyph_mask(layout), config.color, fill_scale)

    return passes


def composite(
    config: StyleConfig,
    layout: LayoutResult,
    opacity_scope: Optional[str] = None,
    max_dimension: Optional[int] = None
) -> RasterImage:
    """
    Composite shadow, stroke and fill passes onto a transparent canvas.

    Args:
        config: Resolved style
        layout: Layout of that style
        opacity_scope: 'composite' scales the finished image's alpha,
            'fill' scales only the fill pass (default: OPACITY_SCOPE)
        max_dimension: Largest allowed canvas side (default: MAX_CANVAS_DIMENSION)

    Returns:
        RasterImage sized canvas_width x canvas_height

    Raises:
        RenderError: if the canvas is empty or too large
    """
    scope = opacity_scope or OPACITY_SCOPE
    if scope not in OPACITY_SCOPES:
        raise RenderError(f"Unknown opacity scope {scope!r} (expected one of {', '.join(OPACITY_SCOPES)})")

    limit = max_dimension or MAX_CANVAS_DIMENSION
    width, height = layout.canvas_width, layout.canvas_height
    if width <= 0 or height <= 0:
        raise RenderError(f"Canvas is empty: {width}x{height}")
    if width > limit or height > limit:
        raise RenderError(f"Canvas {width}x{height} exceeds maximum dimension {limit}")

    try:
        canvas = Image.new('RGBA', (width, height), (0, 0, 0, 0))
        for layer in render_passes(config, layout, scope).values():
            canvas = Image.alpha_composite(canvas, layer)
    except (MemoryError, ValueError, OSError) as e:
        raise RenderError(f"Compositing failed on {width}x{height} canvas: {e}") from e

    pixels = np.array(canvas, dtype=np.uint8)

    if scope == 'composite' and config.opacity < 100:
        scaled = pixels[..., 3].astype(np.float32) * (config.opacity / 100.0)
        pixels[..., 3] = np.rint(scaled).astype(np.uint8)

    logger.debug(f"Composited {width}x{height} canvas (opacity={config.opacity}, scope={scope})")

    return RasterImage(width=width, height=height, pixels=pixels)
