"""
Unit tests for the render entry points.
"""
import numpy as np
import pytest

from text_style import (
    LayoutError, RenderError, TextPreset, ValidationError,
    decode, render_image, render_presets, render_preview
)
from text_style.encoder import PNG_SIGNATURE


class TestRenderPreview:
    """Tests for render_preview function."""

    def test_returns_png(self, outline_preset):
        """render_preview() should return PNG bytes."""
        data = render_preview(outline_preset)
        assert data.startswith(PNG_SIGNATURE)

    def test_matches_render_image(self, shadow_preset):
        """The PNG should decode to exactly the rendered raster."""
        image = render_image(shadow_preset)
        decoded = decode(render_preview(shadow_preset))
        assert (decoded.width, decoded.height) == (image.width, image.height)
        assert np.array_equal(decoded.pixels, image.pixels)

    def test_accepts_style_mapping(self, base_style):
        """A plain style mapping should render."""
        assert render_preview(base_style).startswith(PNG_SIGNATURE)

    def test_multiline(self, base_style):
        """Multiline content should render taller than one line."""
        one = render_image(base_style)
        three = render_image(dict(base_style, content='Hello\nHello\nHello'))
        assert three.height > 2 * one.height

    def test_validation_error_names_preset(self, base_style):
        """Validation failures should carry the preset and field."""
        preset = TextPreset(name='Broken', preview='', style=dict(base_style, opacity=-1))
        with pytest.raises(ValidationError) as exc:
            render_preview(preset)
        assert exc.value.preset == 'Broken'
        assert exc.value.field == 'opacity'

    def test_layout_error_names_preset(self, base_style):
        """Layout failures should be tagged with the preset name."""
        preset = TextPreset(name='Empty', preview='', style=dict(base_style, content=''))
        with pytest.raises(LayoutError) as exc:
            render_preview(preset)
        assert exc.value.preset == 'Empty'
        assert 'Empty' in str(exc.value)

    def test_render_error_on_huge_canvas(self, base_style):
        """Oversized canvases should fail the whole call."""
        with pytest.raises(RenderError):
            render_preview(dict(base_style, fontSize=400, content='W' * 30), max_dimension=2000)


class TestRenderPresets:
    """Tests for the batch driver."""

    def test_renders_all(self, outline_preset, shadow_preset):
        """Every preset should be rendered and keyed by name."""
        result = render_presets([outline_preset, shadow_preset], max_workers=2)
        assert result.ok
        assert set(result.rendered) == {'Outline Title', 'Shadow Title'}
        assert all(data.startswith(PNG_SIGNATURE) for data in result.rendered.values())

    def test_skip_and_continue(self, outline_preset, base_style):
        """Failures should be collected while the rest still render."""
        broken = TextPreset(name='Broken', preview='', style=dict(base_style, align='middle'))
        result = render_presets([outline_preset, broken])
        assert not result.ok
        assert 'Outline Title' in result.rendered
        assert isinstance(result.errors['Broken'], ValidationError)

    def test_fail_fast(self, outline_preset, base_style):
        """fail_fast should raise the first error."""
        broken = TextPreset(name='Broken', preview='', style=dict(base_style, fontFamily='Nope Sans 9000'))
        with pytest.raises(LayoutError):
            render_presets([broken, outline_preset], max_workers=1, fail_fast=True)

    def test_unnamed_styles_keyed_by_position(self, base_style):
        """Plain style mappings should be keyed by their batch index."""
        result = render_presets([base_style, dict(base_style, content='Other')])
        assert set(result.rendered) == {'#0', '#1'}

    def test_concurrent_renders_are_deterministic(self, shadow_preset):
        """The same preset rendered concurrently should give identical bytes."""
        presets = [
            TextPreset(name=f'copy-{i}', preview='', style=shadow_preset.style)
            for i in range(6)
        ]
        result = render_presets(presets, max_workers=6)
        assert len(set(result.rendered.values())) == 1


class TestRenderErrorsAreTyped:
    """Library failures surface as stage errors."""

    def test_sub_pixel_font_size(self, base_style):
        """A font size FreeType rejects should raise LayoutError, not OSError."""
        preset = TextPreset(name='Tiny', preview='', style=dict(base_style, fontSize=0.4))
        with pytest.raises(LayoutError) as exc:
            render_preview(preset)
        assert exc.value.preset == 'Tiny'
        assert '0.4' in exc.value.message
