"""
Text Preset Definitions

Named, partial text styles offered by the editor. Each preset is overlaid on
the default style by styles.normalize() before rendering.

When adding a preset, render its preview with generate_previews.py and point
`preview` at the generated asset.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TextPreset:
    """A named partial style plus the asset key of its preview image."""
    name: str
    preview: str
    style: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only copy so the catalog cannot be mutated through a preset
        object.__setattr__(self, 'style', MappingProxyType(dict(self.style)))

    @property
    def slug(self) -> str:
        """URL-friendly name, e.g. 'outline-title'."""
        return re.sub(r'[^a-z0-9]+', '-', self.name.lower()).strip('-')

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TextPreset':
        """Build a preset from an editor record {preview, name, style}."""
        return cls(
            name=data.get('name', ''),
            preview=data.get('preview', ''),
            style=data.get('style') or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'slug': self.slug,
            'preview': self.preview,
            'style': dict(self.style),
        }


TEXT_PRESETS: Tuple[TextPreset, ...] = (
    TextPreset(
        name='Outline Title',
        preview='text/1.png',
        style={
            'content': 'Outlined Text Effect',
            'fontSize': 48,
            'fontFamily': 'Microsoft YaHei',
            'bold': True,
            'italic': False,
            'color': '#FFFFFF',
            'opacity': 100,
            'lineSpacing': 0,
            'letterSpacing': 0,
            'align': 'center',
            'showShadow': False,
            'shadowColor': '#000000',
            'shadowBlur': 0,
            'shadowOffsetX': 0,
            'shadowOffsetY': 0,
            'showStroke': True,
            'strokeColor': 'red',
            'strokeWidth': 3,
        },
    ),
    TextPreset(
        name='Shadow Title',
        preview='text/2.png',
        style={
            'content': 'Shadow Text Effect',
            'fontSize': 52,
            'fontFamily': 'Microsoft YaHei',
            'bold': True,
            'italic': False,
            'color': '#FFD93D',
            'opacity': 100,
            'lineSpacing': 0,
            'letterSpacing': 0,
            'align': 'center',
            'showShadow': True,
            'shadowColor': 'rgba(59, 59, 59, 1)',
            'shadowBlur': 10,
            'shadowOffsetX': 4,
            'shadowOffsetY': 4,
            'showStroke': False,
            'strokeColor': '#000000',
            'strokeWidth': 0,
        },
    ),
)

# Lookup by name and by slug
PRESETS: Mapping[str, TextPreset] = MappingProxyType(
    {**{p.name: p for p in TEXT_PRESETS}, **{p.slug: p for p in TEXT_PRESETS}}
)


def get_preset(name: str) -> Optional[TextPreset]:
    """
    Get a preset by name or slug.

    Args:
        name: Preset name (e.g., 'Outline Title') or slug ('outline-title')

    Returns:
        TextPreset or None if not found
    """
    return PRESETS.get(name)


def list_all_presets() -> List[Dict]:
    """
    Get list of all presets for API response.

    Returns:
        List of preset summaries in catalog order
    """
    result = []

    for preset in TEXT_PRESETS:
        style = preset.style
        result.append({
            'name': preset.name,
            'slug': preset.slug,
            'preview': preset.preview,
            'font_family': style.get('fontFamily'),
            'has_stroke': bool(style.get('showStroke')),
            'has_shadow': bool(style.get('showShadow')),
        })

    return result
