"""
Text Preset API Routes

Endpoints for listing text presets and rendering previews.
"""

from flask import Blueprint, Response, jsonify, request

from text_style import (
    LayoutError, RenderError, EncodeError, ValidationError,
    TextPreset, get_preset, list_all_presets, render_preview
)
from text_style.logging_config import get_logger

logger = get_logger('preset_routes')

preset_bp = Blueprint('text_presets', __name__, url_prefix='/api/text-presets')


def _error_response(error, status):
    body = error.to_dict()
    body['error'] = str(error)
    return jsonify(body), status


def _render_png(preset):
    try:
        data = render_preview(preset)
    except ValidationError as e:
        return _error_response(e, 400)
    except (LayoutError, RenderError, EncodeError) as e:
        return _error_response(e, 422)
    return Response(data, mimetype='image/png')


@preset_bp.route('', methods=['GET'])
def list_presets():
    """
    List all text presets.

    Returns:
        JSON with the presets in catalog order
    """
    return jsonify({'presets': list_all_presets()})


@preset_bp.route('/<name>', methods=['GET'])
def get_single_preset(name: str):
    """
    Get a preset's full record.

    Args:
        name: Preset name or slug (e.g., 'outline-title')
    """
    preset = get_preset(name)
    if preset is None:
        return jsonify({'error': f'Preset not found: {name}'}), 404

    return jsonify(preset.to_dict())


@preset_bp.route('/<name>/preview.png', methods=['GET'])
def preset_preview(name: str):
    """Render a catalog preset to PNG."""
    preset = get_preset(name)
    if preset is None:
        return jsonify({'error': f'Preset not found: {name}'}), 404

    return _render_png(preset)


@preset_bp.route('/preview', methods=['POST'])
def style_preview():
    """
    Render an ad hoc style to PNG.

    Body:
        {"name": optional label, "style": {...partial style...}}
        or the style object itself
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    style = data.get('style', data)
    if not isinstance(style, dict):
        return jsonify({'error': 'style must be a JSON object'}), 400

    preset = TextPreset(name=data.get('name') or 'custom', preview='', style=style)
    logger.info(f"Rendering ad hoc style '{preset.name}'")
    return _render_png(preset)
