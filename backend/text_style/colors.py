"""
Color parsing for style values.

Accepts the forms the editor stores: hex (#rgb, #rgba, #rrggbb, #rrggbbaa),
CSS rgb()/rgba() and CSS color names. Everything is sRGB; values resolve to
straight RGBA tuples of 0-255 ints.
"""

import re
from typing import Tuple

from PIL import ImageColor

RGBA = Tuple[int, int, int, int]

_NUMBER = r'\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)%?)\s*'

# CSS alpha is 0-1 (or a percentage), unlike PIL's rgba() which expects 0-255
CSS_RGB_PATTERN = re.compile(
    r'^rgba?\(' + _NUMBER + ',' + _NUMBER + ',' + _NUMBER + r'(?:,' + _NUMBER + r')?\)$',
    re.IGNORECASE
)
HEX_PATTERN = re.compile(r'^#(?:[0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$', re.IGNORECASE)
NAME_PATTERN = re.compile(r'^[a-z]+$', re.IGNORECASE)


def _channel(token: str) -> int:
    if token.endswith('%'):
        value = float(token[:-1]) * 255 / 100
    else:
        value = float(token)
    if not 0 <= value <= 255:
        raise ValueError(f"color channel out of range: {token}")
    return int(round(value))


def _alpha(token: str) -> int:
    if token.endswith('%'):
        value = float(token[:-1]) / 100
    else:
        value = float(token)
    if not 0 <= value <= 1:
        raise ValueError(f"alpha out of range: {token}")
    return int(round(value * 255))


def parse_color(value) -> RGBA:
    """
    Parse a color value into an RGBA tuple.

    Args:
        value: Color string, or an existing 3/4-tuple of ints

    Returns:
        (r, g, b, a) with every channel 0-255

    Raises:
        ValueError: if the value is not a recognised color
    """
    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4) or not all(
            isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value
        ):
            raise ValueError(f"invalid color tuple: {value!r}")
        return tuple(value) + (255,) if len(value) == 3 else tuple(value)

    if not isinstance(value, str):
        raise ValueError(f"color must be a string, got {type(value).__name__}")

    text = value.strip()

    match = CSS_RGB_PATTERN.match(text)
    if match:
        r, g, b, a = match.groups()
        if text.lower().startswith('rgba(') and a is None:
            raise ValueError(f"rgba() needs four components: {value!r}")
        if text.lower().startswith('rgb(') and a is not None:
            raise ValueError(f"rgb() takes three components: {value!r}")
        return (_channel(r), _channel(g), _channel(b), _alpha(a) if a is not None else 255)

    if HEX_PATTERN.match(text) or NAME_PATTERN.match(text):
        rgb = ImageColor.getrgb(text)
        return rgb + (255,) if len(rgb) == 3 else rgb

    raise ValueError(f"unrecognised color: {value!r}")


def format_color(rgba: RGBA) -> str:
    """Format an RGBA tuple as #rrggbbaa."""
    return '#{:02x}{:02x}{:02x}{:02x}'.format(*rgba)
