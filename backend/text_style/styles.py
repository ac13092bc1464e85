"""
Style Normalizer

Overlays a preset's partial style on the documented defaults and validates
every field, producing a fully resolved StyleConfig. Layout and compositing
never see partial data.
"""

import math
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .colors import RGBA, format_color, parse_color
from .errors import ValidationError

ALIGNMENTS = ('left', 'center', 'right')


@dataclass(frozen=True)
class StyleConfig:
    """Fully resolved text style. Colors are RGBA tuples."""
    content: str
    font_size: float
    font_family: str
    bold: bool
    italic: bool
    color: RGBA
    opacity: float
    line_spacing: float
    letter_spacing: float
    align: str
    show_shadow: bool
    shadow_color: RGBA
    shadow_blur: float
    shadow_offset_x: float
    shadow_offset_y: float
    show_stroke: bool
    stroke_color: RGBA
    stroke_width: float

    def as_preset_style(self) -> Dict[str, Any]:
        """Return this config as a complete style mapping (colors as hex)."""
        style = {}
        for f in fields(self):
            value = getattr(self, f.name)
            style[f.name] = format_color(value) if f.name in COLOR_FIELDS else value
        return style


# Every StyleConfig produced by normalize() is resolved
ResolvedStyleConfig = StyleConfig


# Fields that must come from the preset itself
REQUIRED_FIELDS = ('content', 'font_size', 'font_family', 'color', 'opacity', 'align')

DEFAULT_STYLE: Mapping[str, Any] = MappingProxyType({
    'bold': False,
    'italic': False,
    'line_spacing': 0,
    'letter_spacing': 0,
    'show_stroke': False,
    'stroke_color': '#ffffff',
    'stroke_width': 0,
    'show_shadow': False,
    'shadow_color': '#ffffff',
    'shadow_blur': 0,
    'shadow_offset_x': 0,
    'shadow_offset_y': 0,
})

# camelCase keys used by the editor's preset records
FIELD_ALIASES: Mapping[str, str] = MappingProxyType({
    'fontSize': 'font_size',
    'fontFamily': 'font_family',
    'lineSpacing': 'line_spacing',
    'letterSpacing': 'letter_spacing',
    'showShadow': 'show_shadow',
    'shadowColor': 'shadow_color',
    'shadowBlur': 'shadow_blur',
    'shadowOffsetX': 'shadow_offset_x',
    'shadowOffsetY': 'shadow_offset_y',
    'showStroke': 'show_stroke',
    'strokeColor': 'stroke_color',
    'strokeWidth': 'stroke_width',
})

COLOR_FIELDS = frozenset({'color', 'shadow_color', 'stroke_color'})
BOOL_FIELDS = frozenset({'bold', 'italic', 'show_shadow', 'show_stroke'})
NON_NEGATIVE_FIELDS = frozenset({'shadow_blur', 'stroke_width'})
SIGNED_FIELDS = frozenset({'line_spacing', 'letter_spacing', 'shadow_offset_x', 'shadow_offset_y'})

STYLE_FIELDS = tuple(f.name for f in fields(StyleConfig))


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _validate_field(name: str, value, preset: Optional[str]):
    """Check a single value against its domain and return the stored form."""
    if name in COLOR_FIELDS:
        try:
            return parse_color(value)
        except ValueError as e:
            raise ValidationError(str(e), field=name, preset=preset) from e

    if name in BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ValidationError(f"expected true/false, got {value!r}", field=name, preset=preset)
        return value

    if name == 'content':
        if not isinstance(value, str):
            raise ValidationError(f"expected text, got {type(value).__name__}", field=name, preset=preset)
        return value

    if name == 'font_family':
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("font family must be a non-empty name", field=name, preset=preset)
        return value.strip()

    if name == 'align':
        if value not in ALIGNMENTS:
            raise ValidationError(
                f"must be one of {', '.join(ALIGNMENTS)}, got {value!r}", field=name, preset=preset
            )
        return value

    if not _is_number(value):
        raise ValidationError(f"expected a finite number, got {value!r}", field=name, preset=preset)

    if name == 'font_size' and value <= 0:
        raise ValidationError(f"must be greater than 0, got {value}", field=name, preset=preset)
    if name == 'opacity' and not 0 <= value <= 100:
        raise ValidationError(f"must be within [0, 100], got {value}", field=name, preset=preset)
    if name in NON_NEGATIVE_FIELDS and value < 0:
        raise ValidationError(f"must not be negative, got {value}", field=name, preset=preset)

    return value


def _canonical_key(key: str, preset: Optional[str]) -> str:
    name = FIELD_ALIASES.get(key, key)
    if name not in STYLE_FIELDS:
        raise ValidationError(f"unknown style field {key!r}", field=key, preset=preset)
    return name


def normalize_style(style: Mapping[str, Any], name: Optional[str] = None) -> StyleConfig:
    """
    Overlay a partial style on DEFAULT_STYLE and validate the result.

    Args:
        style: Partial style keyed by snake_case or camelCase field names
        name: Preset name used in error messages

    Returns:
        Fully resolved StyleConfig

    Raises:
        ValidationError: on unknown fields, missing required fields or
            out-of-domain values
    """
    if not isinstance(style, Mapping):
        raise ValidationError(f"style must be a mapping, got {type(style).__name__}", preset=name)

    overlay = {}
    for key, value in style.items():
        field_name = _canonical_key(key, name)
        if field_name in overlay:
            raise ValidationError(f"given twice (as {key!r})", field=field_name, preset=name)
        overlay[field_name] = value

    merged = dict(DEFAULT_STYLE)
    merged.update(overlay)

    missing = [f for f in REQUIRED_FIELDS if f not in merged]
    if missing:
        message = "required field missing from preset"
        if len(missing) > 1:
            message += f" (also missing: {', '.join(missing[1:])})"
        raise ValidationError(message, field=missing[0], preset=name)

    resolved = {f: _validate_field(f, merged[f], name) for f in STYLE_FIELDS}
    return StyleConfig(**resolved)


def normalize(preset) -> StyleConfig:
    """
    Resolve a TextPreset (or anything with .style/.name, or a plain style
    mapping) into a complete StyleConfig.
    """
    if isinstance(preset, StyleConfig):
        return preset
    if isinstance(preset, Mapping):
        return normalize_style(preset)
    return normalize_style(preset.style, getattr(preset, 'name', None))
