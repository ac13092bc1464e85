"""
Text Style Renderer

Main entry points:
- render_preview(preset) -> PNG bytes (normalize -> layout -> composite -> encode)
- render_image(preset) -> RasterImage, stopping before encoding
- render_presets(presets) -> batch over a thread pool

Every stage is a pure function of its input; concurrent renders only share
the font cache.
"""

import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from .compositor import RasterImage, composite
from .encoder import encode
from .errors import TextStyleError
from .layout import layout
from .logging_config import get_request_logger
from .styles import normalize

RENDER_WORKERS = int(os.getenv('TEXT_STYLE_RENDER_WORKERS', '4'))


def _preset_name(preset) -> Optional[str]:
    return getattr(preset, 'name', None) or None


def _report(e: TextStyleError, preset):
    """Attach the preset name to a stage error and log it."""
    name = _preset_name(preset)
    if e.preset is None:
        e.preset = name
    log = get_request_logger('renderer', name or 'adhoc', stage=e.stage)
    log.error(f"Render failed: {e.message}")


def render_image(
    preset,
    opacity_scope: Optional[str] = None,
    max_dimension: Optional[int] = None
) -> RasterImage:
    """
    Render a preset (or style mapping / StyleConfig) to an RGBA raster.

    Raises:
        ValidationError, LayoutError, RenderError
    """
    log = get_request_logger('renderer', _preset_name(preset) or 'adhoc')
    try:
        config = normalize(preset)
        text_layout = layout(config)
        log.for_stage('layout').debug(
            f"{len(text_layout.lines)} line(s) in {text_layout.face.family}, "
            f"canvas {text_layout.canvas_width}x{text_layout.canvas_height}"
        )
        image = composite(config, text_layout, opacity_scope=opacity_scope, max_dimension=max_dimension)
    except TextStyleError as e:
        _report(e, preset)
        raise

    log.for_stage('composite').debug(f"Rendered {image.width}x{image.height} image")
    return image


def render_preview(
    preset,
    opacity_scope: Optional[str] = None,
    max_dimension: Optional[int] = None
) -> bytes:
    """
    Render a preset to PNG bytes.

    Args:
        preset: TextPreset, a partial style mapping, or a resolved StyleConfig
        opacity_scope: 'composite' or 'fill' (see compositor.OPACITY_SCOPE)
        max_dimension: Largest allowed canvas side

    Returns:
        PNG bytes with a transparent background

    Raises:
        ValidationError, LayoutError, RenderError, EncodeError
    """
    image = render_image(preset, opacity_scope=opacity_scope, max_dimension=max_dimension)

    try:
        return encode(image)
    except TextStyleError as e:
        _report(e, preset)
        raise


@dataclass
class BatchResult:
    """Outcome of a batch render, keyed by preset name."""
    rendered: Dict[str, bytes] = field(default_factory=dict)
    errors: Dict[str, TextStyleError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def render_presets(
    presets: Iterable,
    max_workers: Optional[int] = None,
    fail_fast: bool = False,
    opacity_scope: Optional[str] = None
) -> BatchResult:
    """
    Render many presets concurrently.

    Args:
        presets: TextPresets (or anything render_preview accepts with a .name)
        max_workers: Thread pool size (default: RENDER_WORKERS)
        fail_fast: Raise the first error instead of collecting errors
        opacity_scope: Passed through to every render

    Returns:
        BatchResult with PNG bytes per preset name and the errors of failed ones

    Raises:
        TextStyleError: first failure, only when fail_fast is set
    """
    log = get_request_logger('renderer', 'batch')
    presets = list(presets)
    result = BatchResult()
    start = time.time()

    with ThreadPoolExecutor(max_workers=max_workers or RENDER_WORKERS) as executor:
        futures = {
            executor.submit(render_preview, preset, opacity_scope): (index, preset)
            for index, preset in enumerate(presets)
        }
        for future in as_completed(futures):
            index, preset = futures[future]
            # Unnamed styles are keyed by their position in the batch
            name = _preset_name(preset) or f'#{index}'
            try:
                result.rendered[name] = future.result()
            except TextStyleError as e:
                if fail_fast:
                    for pending in futures:
                        pending.cancel()
                    raise
                result.errors[name] = e

    log.info(
        f"Rendered {len(result.rendered)}/{len(presets)} presets "
        f"in {time.time() - start:.2f}s ({len(result.errors)} failed)"
    )
    return result
