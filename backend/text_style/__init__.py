"""
Text Style Package

Renders text style presets (font, color, stroke, shadow, alignment) to
transparent PNG images for previews and text layers.
"""

from .catalog import TEXT_PRESETS, TextPreset, get_preset, list_all_presets
from .compositor import RasterImage, composite
from .encoder import decode, encode
from .errors import EncodeError, LayoutError, RenderError, TextStyleError, ValidationError
from .layout import LayoutResult, layout
from .renderer import BatchResult, render_image, render_presets, render_preview
from .styles import DEFAULT_STYLE, ResolvedStyleConfig, StyleConfig, normalize, normalize_style

__all__ = [
    'TEXT_PRESETS', 'TextPreset', 'get_preset', 'list_all_presets',
    'RasterImage', 'composite',
    'decode', 'encode',
    'EncodeError', 'LayoutError', 'RenderError', 'TextStyleError', 'ValidationError',
    'LayoutResult', 'layout',
    'BatchResult', 'render_image', 'render_presets', 'render_preview',
    'DEFAULT_STYLE', 'ResolvedStyleConfig', 'StyleConfig', 'normalize', 'normalize_style',
]
