"""
Unit tests for the image encoder.
"""
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from text_style.compositor import RasterImage
from text_style.encoder import PNG_SIGNATURE, decode, encode
from text_style.errors import EncodeError


def _gradient(width=7, height=5):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = np.arange(width, dtype=np.uint8) * 30
    pixels[..., 1] = 200
    pixels[..., 3] = np.arange(height, dtype=np.uint8)[:, None] * 60
    return RasterImage(width, height, pixels)


class TestEncode:
    """Tests for encode function."""

    def test_produces_png(self):
        """encode() should return PNG bytes."""
        data = encode(_gradient())
        assert data.startswith(PNG_SIGNATURE)
        with Image.open(BytesIO(data)) as image:
            assert image.format == 'PNG'
            assert image.mode == 'RGBA'
            assert image.size == (7, 5)

    def test_alpha_preserved_exactly(self):
        """Decoding should give back identical pixels, alpha included."""
        image = _gradient()
        assert np.array_equal(decode(encode(image)).pixels, image.pixels)

    def test_shape_mismatch(self):
        """A buffer not matching width/height should raise EncodeError."""
        pixels = np.zeros((5, 7, 4), dtype=np.uint8)
        with pytest.raises(EncodeError):
            encode(RasterImage(8, 5, pixels))

    def test_wrong_channel_count(self):
        """An RGB buffer should raise EncodeError."""
        with pytest.raises(EncodeError):
            encode(RasterImage(2, 2, np.zeros((2, 2, 3), dtype=np.uint8)))

    def test_wrong_dtype(self):
        """A float buffer should raise EncodeError."""
        with pytest.raises(EncodeError):
            encode(RasterImage(2, 2, np.zeros((2, 2, 4), dtype=np.float32)))

    def test_empty_image(self):
        """A zero-sized image should raise EncodeError."""
        with pytest.raises(EncodeError):
            encode(RasterImage(0, 0, np.zeros((0, 0, 4), dtype=np.uint8)))


class TestDecode:
    """Tests for decode function."""

    def test_rejects_non_png(self):
        """decode() should reject data that is not a PNG."""
        with pytest.raises(EncodeError):
            decode(b'GIF89a...')

    def test_rejects_truncated_png(self):
        """decode() should reject a truncated PNG."""
        data = encode(_gradient())
        with pytest.raises(EncodeError):
            decode(data[:40])
