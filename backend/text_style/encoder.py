"""
Image Encoder

Serializes a RasterImage to PNG. PNG is lossless and keeps the alpha channel
exactly, so the output works as a compositable text layer.
"""

from io import BytesIO

import numpy as np
from PIL import Image

from .compositor import RasterImage
from .errors import EncodeError

IMAGE_FORMAT = 'PNG'
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


def encode(image: RasterImage) -> bytes:
    """
    Encode an RGBA raster as PNG bytes.

    Raises:
        EncodeError: if the pixel buffer does not match the declared size
    """
    pixels = np.asarray(image.pixels)

    if image.width <= 0 or image.height <= 0:
        raise EncodeError(f"Invalid image size {image.width}x{image.height}")
    if pixels.dtype != np.uint8:
        raise EncodeError(f"Pixel buffer must be uint8, got {pixels.dtype}")
    if pixels.shape != (image.height, image.width, 4):
        raise EncodeError(
            f"Pixel buffer shape {pixels.shape} does not match "
            f"{image.width}x{image.height} RGBA"
        )

    buffer = BytesIO()
    try:
        Image.fromarray(np.ascontiguousarray(pixels)).save(buffer, format=IMAGE_FORMAT)
    except (OSError, ValueError) as e:
        raise EncodeError(f"PNG encoding failed: {e}") from e

    return buffer.getvalue()


def decode(data: bytes) -> RasterImage:
    """
    Read PNG bytes back into a RasterImage.

    Raises:
        EncodeError: if the bytes are not a PNG image
    """
    if not data.startswith(PNG_SIGNATURE):
        raise EncodeError("Data is not a PNG image")
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            return RasterImage.from_pil(image)
    except (OSError, ValueError, SyntaxError) as e:
        raise EncodeError(f"PNG decoding failed: {e}") from e
