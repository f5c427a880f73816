"""Image sizing, scaling and encoding utilities for the thumbnail pipeline."""

import io
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from .exceptions import (
    CorruptImage,
    EncodingFailure,
    InvalidDimensions,
    UnsupportedFormat,
)
from .models import ImageBuffer, ImageType

JPEG_SIGNATURE = b"\xff\xd8\xff"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
# MPO is how Pillow reports multi-picture JPEGs from cameras
SUPPORTED_FORMATS = ("JPEG", "MPO", "PNG")
JPEG_MODES = ("RGB", "L")
PNG_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")


def has_supported_signature(data: bytes) -> bool:
    """Check whether the bytes start like a JPEG or PNG file."""
    return data.startswith(JPEG_SIGNATURE) or data.startswith(PNG_SIGNATURE)


def probe_image(data: bytes) -> ImageBuffer:
    """
    Decode image bytes and report their intrinsic size.

    The format is read from the bytes themselves, not from any file name.

    Args:
        data: Raw image bytes

    Returns:
        ImageBuffer holding the bytes, width, height and detected format

    Raises:
        UnsupportedFormat: If the bytes are not a JPEG or PNG image
        CorruptImage: If the bytes look like JPEG/PNG but fail to decode
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except UnidentifiedImageError as e:
        if has_supported_signature(data):
            raise CorruptImage(f"Malformed image payload: {e}") from e
        raise UnsupportedFormat("Bytes are not a JPEG or PNG image") from e
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        # Pillow reports truncated and broken streams as OSError/SyntaxError
        raise CorruptImage(f"Malformed image payload: {e}") from e

    if image.format not in SUPPORTED_FORMATS:
        raise UnsupportedFormat(f"Unsupported image format: {image.format}")

    return ImageBuffer(
        data=data, width=image.width, height=image.height, format=image.format
    )


def compute_target_size(
    intrinsic_width: float,
    intrinsic_height: float,
    max_width: float,
    max_height: float,
) -> Tuple[float, float]:
    """
    Scale an image uniformly so it fits inside a bounding box.

    A single factor, min(max_width / width, max_height / height), is applied
    to both axes. Factors above 1 are allowed, so small images are enlarged
    until one axis touches the box.

    Args:
        intrinsic_width: Source image width
        intrinsic_height: Source image height
        max_width: Bounding box width
        max_height: Bounding box height

    Returns:
        Target (width, height), unrounded

    Raises:
        InvalidDimensions: If any dimension is zero or negative
    """
    if intrinsic_width <= 0 or intrinsic_height <= 0:
        raise InvalidDimensions(
            f"Image has unusable size {intrinsic_width}x{intrinsic_height}"
        )
    if max_width <= 0 or max_height <= 0:
        raise InvalidDimensions(f"Bounding box {max_width}x{max_height} is empty")

    scale = min(max_width / intrinsic_width, max_height / intrinsic_height)
    return scale * intrinsic_width, scale * intrinsic_height


def to_pixels(width: float, height: float) -> Tuple[int, int]:
    """Round a target size to whole pixels, never below 1x1."""
    return max(1, round(width)), max(1, round(height))


def resize_image(
    buffer: ImageBuffer,
    target_width: float,
    target_height: float,
    output_type: ImageType,
    quality: int = 95,
) -> bytes:
    """
    Resize an image and encode it as output_type.

    When output_type differs from the detected format the image is converted.

    Raises:
        EncodingFailure: If Pillow cannot resize or encode the image
    """
    size = to_pixels(target_width, target_height)
    try:
        image = Image.open(io.BytesIO(buffer.data))
        resized = image.resize(size, Image.Resampling.LANCZOS)

        save_kwargs = {}
        if output_type is ImageType.JPG:
            if resized.mode not in JPEG_MODES:
                resized = resized.convert("RGB")
            save_kwargs["quality"] = quality
        elif resized.mode not in PNG_MODES:
            # PNG cannot store CMYK, YCbCr, LAB or HSV pixels
            has_alpha = "A" in resized.getbands()
            resized = resized.convert("RGBA" if has_alpha else "RGB")

        output_stream = io.BytesIO()
        resized.save(output_stream, format=output_type.pil_format, **save_kwargs)
    except (OSError, ValueError, SyntaxError) as e:
        raise EncodingFailure(
            f"Could not encode {size[0]}x{size[1]} {output_type.pil_format}: {e}"
        ) from e

    return output_stream.getvalue()
