"""
Shared pytest fixtures for Text Style Renderer tests.
"""
import os
import sys
import pytest

# Add backend directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(scope='session')
def app():
    """Create Flask application for testing."""
    # Set test environment variables before importing app
    os.environ['TESTING'] = 'true'

    from app import app as flask_app
    flask_app.config['TESTING'] = True

    yield flask_app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()


@pytest.fixture
def base_style():
    """Complete required fields, rendered with Pillow's built-in face."""
    return {
        'content': 'Hello',
        'fontSize': 40,
        'fontFamily': 'Pillow Default',
        'color': '#FF0000',
        'opacity': 100,
        'align': 'left',
    }


@pytest.fixture
def make_config(base_style):
    """Build a resolved StyleConfig from base_style plus overrides."""
    from text_style.styles import normalize_style

    def _make(**overrides):
        style = dict(base_style)
        style.update(overrides)
        return normalize_style(style, name='test')

    return _make


@pytest.fixture
def outline_preset():
    """'Outline Title' catalog preset on the built-in face."""
    from text_style.catalog import TextPreset, get_preset
    preset = get_preset('Outline Title')
    return TextPreset(
        name=preset.name,
        preview=preset.preview,
        style={**preset.style, 'fontFamily': 'Pillow Default'}
    )


@pytest.fixture
def shadow_preset():
    """'Shadow Title' catalog preset on the built-in face."""
    from text_style.catalog import TextPreset, get_preset
    preset = get_preset('Shadow Title')
    return TextPreset(
        name=preset.name,
        preview=preset.preview,
        style={**preset.style, 'fontFamily': 'Pillow Default'}
    )


@pytest.fixture
def preset_names():
    """All catalog preset names."""
    return ['Outline Title', 'Shadow Title']


@pytest.fixture
def temp_output_dir(tmp_path):
    """Create temporary output directory."""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return str(output_dir)
