"""
Font Backend

Resolves a font family plus weight/slant to a loaded Pillow face.

Lookup order for a family:
1. A direct path to a .ttf/.otf/.ttc file
2. Known file stems for the family (FONT_FILES) in the font directories
3. Generic stems derived from the family name
4. The family's fallbacks (FONT_FALLBACKS), ending at Pillow's built-in face

When a family only ships a regular face, bold and italic are synthesized:
bold by emboldening the outline with a self-colored stroke, italic by
shearing each line around its baseline.
"""

import math
import os
import platform
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from .logging_config import get_logger

logger = get_logger('fonts')

FONT_EXTENSIONS = ('.ttf', '.otf', '.ttc')

# Pillow's bundled scalable face (needs FreeType)
BUILTIN_FAMILY = 'Pillow Default'

# Bundled font directory (relative to this file)
PACKAGE_FONTS_DIR = os.path.join(os.path.dirname(__file__), 'fonts')

# Extra font directories, separated by os.pathsep
FONT_DIRS = [d for d in os.getenv('TEXT_STYLE_FONT_DIRS', '').split(os.pathsep) if d]

SYSTEM_FONT_DIRS = {
    'Windows': [
        os.path.join(os.environ.get('WINDIR', r'C:\Windows'), 'Fonts'),
        os.path.join(os.environ.get('LOCALAPPDATA', ''), 'Microsoft', 'Windows', 'Fonts'),
    ],
    'Linux': [
        '/usr/share/fonts',
        '/usr/local/share/fonts',
        os.path.expanduser('~/.local/share/fonts'),
        os.path.expanduser('~/.fonts'),
    ],
    'Darwin': [
        '/System/Library/Fonts',
        '/Library/Fonts',
        os.path.expanduser('~/Library/Fonts'),
    ],
}

# Shear factor for synthetic italics (about 12 degrees)
SYNTHETIC_SLANT = 0.21

# Family (lower) -> variant -> candidate file stems (lower, no extension)
FONT_FILES: Dict[str, Dict[str, List[str]]] = {
    'microsoft yahei': {
        'regular': ['msyh', 'microsoftyahei'],
        'bold': ['msyhbd', 'microsoftyahei-bold'],
    },
    'noto sans cjk sc': {
        'regular': ['notosanscjksc-regular', 'notosanscjk-regular'],
        'bold': ['notosanscjksc-bold', 'notosanscjk-bold'],
    },
    'dejavu sans': {
        'regular': ['dejavusans'],
        'bold': ['dejavusans-bold'],
        'italic': ['dejavusans-oblique'],
        'bold_italic': ['dejavusans-boldoblique'],
    },
    'liberation sans': {
        'regular': ['liberationsans-regular', 'liberationsans'],
        'bold': ['liberationsans-bold'],
        'italic': ['liberationsans-italic'],
        'bold_italic': ['liberationsans-bolditalic'],
    },
    'arial': {
        'regular': ['arial', 'arialmt'],
        'bold': ['arialbd', 'arial-bold', 'arial-boldmt'],
        'italic': ['ariali', 'arial-italic', 'arial-italicmt'],
        'bold_italic': ['arialbi', 'arial-bolditalic', 'arial-bolditalicmt'],
    },
}

# Family (lower) -> families to try when it is not installed
FONT_FALLBACKS: Dict[str, List[str]] = {
    'microsoft yahei': ['Noto Sans CJK SC', 'DejaVu Sans', BUILTIN_FAMILY],
    'noto sans cjk sc': ['DejaVu Sans', BUILTIN_FAMILY],
    'arial': ['Liberation Sans', 'DejaVu Sans', BUILTIN_FAMILY],
}


class FontLoadError(LookupError):
    """A face could not be loaded at the requested size."""


class FontNotFoundError(FontLoadError):
    """No face could be located for a family (including its fallbacks)."""


@dataclass(frozen=True)
class FontFace:
    """A loaded face plus the synthetic styling needed to match the request."""
    family: str
    requested_family: str
    path: Optional[str]
    font: ImageFont.FreeTypeFont
    size: float
    embolden: int = 0
    slant: float = 0.0

    @property
    def ascent(self) -> int:
        return self.font.getmetrics()[0]

    @property
    def descent(self) -> int:
        return self.font.getmetrics()[1]

    @property
    def line_height(self) -> int:
        ascent, descent = self.font.getmetrics()
        return ascent + descent

    @property
    def is_fallback(self) -> bool:
        return self.family.lower() != self.requested_family.lower()


_index: Optional[Dict[str, str]] = None
_index_lock = threading.Lock()

_face_cache: Dict[Tuple[str, float, bool, bool], FontFace] = {}
_key_locks: Dict[Tuple[str, float, bool, bool], threading.Lock] = {}
_cache_lock = threading.Lock()


def font_dirs() -> List[str]:
    """All directories searched for font files, in priority order."""
    return FONT_DIRS + [PACKAGE_FONTS_DIR] + SYSTEM_FONT_DIRS.get(platform.system(), [])


def _collapse(name: str) -> str:
    return name.lower().replace(' ', '').replace('-', '').replace('_', '')


def _build_index() -> Dict[str, str]:
    """Walk the font directories and index every font file by lower-cased stem."""
    index = {}
    for font_dir in font_dirs():
        if not os.path.isdir(font_dir):
            continue
        for root, _, files in os.walk(font_dir):
            for fname in sorted(files):
                stem, ext = os.path.splitext(fname)
                if ext.lower() in FONT_EXTENSIONS:
                    # First file found wins
                    index.setdefault(stem.lower(), os.path.join(root, fname))
    logger.debug(f"Indexed {len(index)} font files")
    return index


def font_index() -> Dict[str, str]:
    """Font file index, built once per process (or after reset_font_cache)."""
    global _index
    if _index is None:
        with _index_lock:
            if _index is None:
                _index = _build_index()
    return _index


def reset_font_cache():
    """Forget indexed files and loaded faces (e.g. after changing FONT_DIRS)."""
    global _index
    with _index_lock:
        _index = None
    with _cache_lock:
        _face_cache.clear()
        _key_locks.clear()


def _variant(bold: bool, italic: bool) -> str:
    if bold and italic:
        return 'bold_italic'
    if bold:
        return 'bold'
    if italic:
        return 'italic'
    return 'regular'


def _candidate_stems(family: str, variant: str) -> List[str]:
    known = FONT_FILES.get(family.lower(), {}).get(variant, [])
    base = _collapse(family)
    suffix = {
        'regular': ['', '-regular'],
        'bold': ['-bold', 'bd', '-bd'],
        'italic': ['-italic', '-oblique', 'i'],
        'bold_italic': ['-bolditalic', '-boldoblique', 'bi'],
    }[variant]
    return known + [base + s for s in suffix]


def _find_file(family: str, variant: str) -> Optional[str]:
    index = font_index()
    collapsed = {_collapse(stem): path for stem, path in index.items()}
    for stem in _candidate_stems(family, variant):
        if stem in index:
            return index[stem]
        path = collapsed.get(_collapse(stem))
        if path:
            return path
    return None


def embolden_width(size: float) -> int:
    """Outline growth used for synthetic bold at this size."""
    return max(1, int(round(size / 48)))


def _load_builtin(requested: str, size: float, bold: bool, italic: bool) -> FontFace:
    try:
        font = ImageFont.load_default(size=size)
    except OSError as e:
        # FreeType rejects sizes below one pixel per em
        raise FontLoadError(f"{BUILTIN_FAMILY} cannot be loaded at size {size}: {e}") from e
    if not isinstance(font, ImageFont.FreeTypeFont):
        raise FontNotFoundError("Pillow was built without FreeType; no scalable built-in face")
    return FontFace(
        family=BUILTIN_FAMILY,
        requested_family=requested,
        path=None,
        font=font,
        size=size,
        embolden=embolden_width(size) if bold else 0,
        slant=SYNTHETIC_SLANT if italic else 0.0,
    )


def _open(path: str, size: float) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(path, size)
    except OSError as e:
        raise FontLoadError(f"Cannot open font file {path} at size {size}: {e}") from e


def _load_family(family: str, requested: str, size: float, bold: bool, italic: bool) -> Optional[FontFace]:
    """Load a family without fallbacks; None if it is not installed."""
    if family == BUILTIN_FAMILY:
        return _load_builtin(requested, size, bold, italic)

    # Direct file path
    if family.lower().endswith(FONT_EXTENSIONS):
        if not os.path.isfile(family):
            return None
        return FontFace(
            family=family, requested_family=requested, path=family,
            font=_open(family, size), size=size,
            embolden=embolden_width(size) if bold else 0,
            slant=SYNTHETIC_SLANT if italic else 0.0,
        )

    wanted = _variant(bold, italic)

    # Real face first, then the closest face plus synthesis
    attempts = [(wanted, False, False)]
    if wanted == 'bold_italic':
        attempts += [('bold', False, True), ('italic', True, False)]
    if wanted != 'regular':
        attempts.append(('regular', bold, italic))

    for variant, synth_bold, synth_italic in attempts:
        path = _find_file(family, variant)
        if path:
            if synth_bold or synth_italic:
                logger.debug(f"Synthesizing {wanted} for {family} from {variant} face")
            return FontFace(
                family=family, requested_family=requested, path=path,
                font=_open(path, size), size=size,
                embolden=embolden_width(size) if synth_bold else 0,
                slant=SYNTHETIC_SLANT if synth_italic else 0.0,
            )
    return None


def _resolve(family: str, size: float, bold: bool, italic: bool) -> FontFace:
    chain = [family] + FONT_FALLBACKS.get(family.lower(), [])
    for candidate in chain:
        face = _load_family(candidate, family, size, bold, italic)
        if face is not None:
            if face.is_fallback:
                logger.warning(f"Font '{family}' not installed, using '{face.family}'")
            return face
    raise FontNotFoundError(f"Font family not found: {family}")


def load_face(family: str, size: float, bold: bool = False, italic: bool = False) -> FontFace:
    """
    Load (or reuse) the face for a family at a pixel size.

    Safe for concurrent use: each (family, size, bold, italic) is loaded at
    most once; concurrent first callers wait for the same load.

    Raises:
        FontNotFoundError: if neither the family nor its fallbacks exist
        FontLoadError: if the face exists but cannot be loaded at this size
    """
    key = (family.lower(), size, bold, italic)

    face = _face_cache.get(key)
    if face is not None:
        return face

    with _cache_lock:
        key_lock = _key_locks.setdefault(key, threading.Lock())

    with key_lock:
        face = _face_cache.get(key)
        if face is None:
            face = _resolve(family, size, bold, italic)
            _face_cache[key] = face
            logger.debug(
                f"Loaded font {face.family} size={size} bold={bold} italic={italic} "
                f"(embolden={face.embolden}, slant={face.slant})"
            )
    return face


def slant_extent(face: FontFace, pixels: float) -> int:
    """Horizontal drift of a point `pixels` above/below the baseline after shearing."""
    return int(math.ceil(face.slant * pixels)) if face.slant else 0
