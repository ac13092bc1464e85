"""
Text Layout Engine

Places every glyph of the content on a canvas sized to hold the text plus its
stroke and shadow:
- One output line per input line (no word wrap)
- Letter spacing is added once per glyph boundary and never reverses glyph order
- Baselines are (line height + line spacing) apart
- Lines align left/center/right against the widest line
"""

import math
import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .errors import LayoutError
from .fonts import FontFace, FontLoadError, load_face, slant_extent
from .logging_config import get_logger
from .styles import StyleConfig

logger = get_logger('layout')

LINE_BREAK = re.compile(r'\r\n|\r|\n')

# Pillow's GaussianBlur radius is the sigma; the blur reaches about 3 sigma
SHADOW_BLUR_EXTENT = float(os.getenv('TEXT_STYLE_SHADOW_BLUR_EXTENT', '3'))

Box = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Glyph:
    """A character and its pen origin (canvas x)."""
    char: str
    x: float


@dataclass(frozen=True)
class GlyphRun:
    """One laid-out line."""
    text: str
    glyphs: Tuple[Glyph, ...]
    x: float
    baseline: float
    width: float


@dataclass(frozen=True)
class LayoutResult:
    lines: Tuple[GlyphRun, ...]
    canvas_width: int
    canvas_height: int
    baseline_offsets: Tuple[float, ...]
    content_box: Tuple[int, int, int, int]
    padding: Tuple[int, int, int, int]
    face: FontFace
    stroke_radius: int


def split_lines(content: str) -> List[str]:
    """Split on explicit line breaks only."""
    return LINE_BREAK.split(content)


def stroke_radius(config: StyleConfig) -> int:
    """Stroke reach beyond the glyph contour, in whole pixels."""
    if not config.show_stroke:
        return 0
    return int(math.ceil(config.stroke_width))


def shadow_extent(config: StyleConfig, blur_extent: float) -> int:
    """How far the blurred shadow spreads beyond its source, in whole pixels."""
    if not config.show_shadow:
        return 0
    return int(math.ceil(blur_extent * config.shadow_blur))


def _advances(face: FontFace, text: str, lengths: Dict[str, float]) -> List[float]:
    """
    Advance width of each glyph, including the kerning towards the next one.

    Measures single glyphs and neighbour pairs only, so a line costs linear
    time. `lengths` caches getlength() results across lines.
    """
    def length(s: str) -> float:
        if s not in lengths:
            lengths[s] = face.font.getlength(s)
        return lengths[s]

    advances = []
    for i, char in enumerate(text):
        advance = length(char) + face.embolden
        if i + 1 < len(text):
            following = text[i + 1]
            advance += length(char + following) - length(char) - length(following)
        advances.append(advance)
    return advances


def _pen_positions(
    face: FontFace,
    text: str,
    letter_spacing: float,
    lengths: Optional[Dict[str, float]] = None
) -> Tuple[List[float], float]:
    """
    Pen origins for each glyph of a line (relative to the line start) and the
    line's advance width.
    """
    if not text:
        return [], 0.0

    advances = _advances(face, text, {} if lengths is None else lengths)

    pens = [0.0]
    for advance in advances[:-1]:
        pens.append(pens[-1] + max(0.0, advance + letter_spacing))
    width = pens[-1] + max(0.0, advances[-1])
    return pens, width


def _glyph_box(face: FontFace, char: str, cache: Dict[str, Optional[Box]]) -> Optional[Box]:
    """Ink box of a glyph relative to its pen origin on the baseline."""
    if char in cache:
        return cache[char]

    box = None
    if not char.isspace():
        left, top, right, bottom = face.font.getbbox(char, anchor='ls', stroke_width=face.embolden)
        if right > left and bottom > top:
            if face.slant:
                # Shear around the baseline: points above lean right, below lean left
                left, right = left - face.slant * bottom, right - face.slant * top
            box = (left, top, right, bottom)
    cache[char] = box
    return box


def _union(a: Optional[Box], b: Box) -> Box:
    if a is None:
        return b
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def layout(config: StyleConfig, blur_extent: Optional[float] = None) -> LayoutResult:
    """
    Lay out a resolved style.

    Args:
        config: Resolved style
        blur_extent: Multiple of shadow_blur reserved around the shadow
            (defaults to SHADOW_BLUR_EXTENT)

    Returns:
        LayoutResult in canvas coordinates

    Raises:
        LayoutError: if the font cannot be found or there is no content
    """
    if blur_extent is None:
        blur_extent = SHADOW_BLUR_EXTENT

    lines = split_lines(config.content)
    if not any(lines):
        raise LayoutError("content is empty")

    try:
        face = load_face(config.font_family, config.font_size, config.bold, config.italic)
    except FontLoadError as e:
        raise LayoutError(str(e)) from e

    step = face.line_height + config.line_spacing

    # Line-local placement: pens relative to line start, baseline relative to first
    measured = []
    lengths: Dict[str, float] = {}
    for i, text in enumerate(lines):
        pens, width = _pen_positions(face, text, config.letter_spacing, lengths)
        measured.append((text, pens, width, i * step))

    widest = max(width for _, _, width, _ in measured)

    placed = []
    ink = None
    glyph_boxes: Dict[str, Optional[Box]] = {}
    for text, pens, width, baseline in measured:
        if config.align == 'center':
            line_x = (widest - width) / 2
        elif config.align == 'right':
            line_x = widest - width
        else:
            line_x = 0.0

        for char, pen in zip(text, pens):
            box = _glyph_box(face, char, glyph_boxes)
            if box is not None:
                x = line_x + pen
                ink = _union(ink, (x + box[0], baseline + box[1], x + box[2], baseline + box[3]))
        placed.append((text, pens, width, baseline, line_x))

    if ink is None:
        # Whitespace only: fall back to the advance box
        baselines = [b for _, _, _, b, _ in placed]
        ink = (0.0, min(baselines) - face.ascent, widest, max(baselines) + face.descent)

    left, top = int(math.floor(ink[0])), int(math.floor(ink[1]))
    right, bottom = int(math.ceil(ink[2])), int(math.ceil(ink[3]))

    radius = stroke_radius(config)
    pad_left = pad_top = pad_right = pad_bottom = radius
    if radius and face.slant:
        # Stroke above/below the ink is sheared sideways too
        drift = slant_extent(face, radius)
        pad_left += drift
        pad_right += drift

    if config.show_shadow:
        spread = shadow_extent(config, blur_extent)
        ox, oy = config.shadow_offset_x, config.shadow_offset_y
        pad_left += spread + int(math.ceil(max(0.0, -ox)))
        pad_right += spread + int(math.ceil(max(0.0, ox)))
        pad_top += spread + int(math.ceil(max(0.0, -oy)))
        pad_bottom += spread + int(math.ceil(max(0.0, oy)))

    shift_x = pad_left - left
    shift_y = pad_top - top

    runs = tuple(
        GlyphRun(
            text=text,
            glyphs=tuple(Glyph(char, line_x + pen + shift_x) for char, pen in zip(text, pens)),
            x=line_x + shift_x,
            baseline=baseline + shift_y,
            width=width,
        )
        for text, pens, width, baseline, line_x in placed
    )

    canvas_width = (right - left) + pad_left + pad_right
    canvas_height = (bottom - top) + pad_top + pad_bottom

    logger.debug(
        f"Laid out {len(runs)} line(s) in {face.family}: canvas={canvas_width}x{canvas_height}, "
        f"padding=({pad_left}, {pad_top}, {pad_right}, {pad_bottom})"
    )

    return LayoutResult(
        lines=runs,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        baseline_offsets=tuple(run.baseline for run in runs),
        content_box=(pad_left, pad_top, pad_left + right - left, pad_top + bottom - top),
        padding=(pad_left, pad_top, pad_right, pad_bottom),
        face=face,
        stroke_radius=radius,
    )
