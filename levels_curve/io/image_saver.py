# Export functionality using Pillow
import base64
import binascii
import io
import os

from PIL import Image, UnidentifiedImageError

from ..config import settings
from ..utils.errors import ErrorCategory, ProcessingError, handle_errors
from ..utils.imaging import PixelBuffer
from ..utils.logger import get_logger
from .image_loader import image_to_pixel_buffer

logger = get_logger(__name__)

DATA_URI_MIME = {
    'PNG': 'image/png',
    'JPEG': 'image/jpeg',
    'WEBP': 'image/webp',
}

# Formats that cannot carry an alpha channel
_OPAQUE_FORMATS = ('JPEG',)


def _to_image(buffer: PixelBuffer, fmt: str):
    img = Image.fromarray(buffer.as_array())
    if fmt in _OPAQUE_FORMATS:
        img = img.convert('RGB')
    return img


def save_pixel_buffer(
    buffer: PixelBuffer,
    file_path: str,
    quality: int = settings.EXPORT_DEFAULTS["default_jpeg_quality"],
    png_compression: int = settings.EXPORT_DEFAULTS["default_png_compression"],
) -> bool:
    """Saves the given RGBA buffer to the specified file path using Pillow.

    The format follows the file extension. Formats without alpha support
    (JPEG) drop the alpha channel.

    Args:
        buffer (PixelBuffer): The pixels to save.
        file_path (str): Destination path including the extension.
        quality (int): The quality setting for JPEG/WebP (1-100).
        png_compression (int): Compression level for PNG (0-9).

    Returns:
        bool: True if saving was successful, False otherwise.
    """
    if buffer is None or buffer.pixel_count == 0:
        logger.error("Cannot save an empty image.")
        return False

    if not isinstance(file_path, (str, os.PathLike)) or not str(file_path):
        logger.error("Invalid file path provided for saving.")
        return False
    file_path = os.fspath(file_path)

    output_dir = os.path.dirname(file_path)
    if output_dir and not os.path.exists(output_dir):
        try:
            os.makedirs(output_dir)
            logger.info("Created output directory: %s", output_dir)
        except OSError:
            logger.exception("Could not create directory '%s'", output_dir)
            return False

    save_kwargs = {}
    ext = os.path.splitext(file_path)[1].lower()
    fmt = 'PNG'
    if ext in ['.jpg', '.jpeg']:
        fmt = 'JPEG'
        save_kwargs['quality'] = max(1, min(100, quality))
        save_kwargs['optimize'] = True
    elif ext == '.png':
        save_kwargs['compress_level'] = max(0, min(9, png_compression))
    elif ext == '.webp':
        fmt = 'WEBP'
        save_kwargs['quality'] = max(0, min(100, quality))
    elif ext in ['.tif', '.tiff']:
        fmt = 'TIFF'
        save_kwargs['compression'] = 'tiff_lzw'
    elif ext == '.bmp':
        fmt = 'BMP'

    try:
        img = _to_image(buffer, fmt)
        img.save(file_path, format=fmt, **save_kwargs)
        logger.info("Successfully saved image to: '%s'", file_path)
        return True
    except (OSError, ValueError):
        logger.exception("Error saving image '%s'", file_path)
        return False


@handle_errors(category=ErrorCategory.PROCESSING, log_level="error",
               user_message="Could not encode the corrected image.")
def encode_data_uri(buffer: PixelBuffer, fmt: str = settings.EXPORT_DEFAULTS["data_uri_format"]) -> str:
    """Encodes ``buffer`` as a ``data:`` URI (PNG by default, like a canvas export)."""
    fmt = fmt.upper()
    if fmt not in DATA_URI_MIME:
        raise ProcessingError(f"Unsupported data URI format '{fmt}'", step="encode")
    if buffer.pixel_count == 0:
        raise ProcessingError("Cannot encode an empty image", step="encode")

    stream = io.BytesIO()
    _to_image(buffer, fmt).save(stream, format=fmt)
    payload = base64.b64encode(stream.getvalue()).decode('ascii')
    return f"data:{DATA_URI_MIME[fmt]};base64,{payload}"


def decode_data_uri(data_uri: str) -> PixelBuffer:
    """Decodes a base64 ``data:image/...`` URI back into an RGBA buffer.

    Raises:
        ProcessingError: If the URI is malformed or the payload is not an image.
    """
    header, sep, payload = data_uri.partition(',')
    if not sep or not header.startswith('data:image/') or not header.endswith(';base64'):
        raise ProcessingError("Not a base64 image data URI", step="decode")
    try:
        raw = base64.b64decode(payload, validate=True)
        with Image.open(io.BytesIO(raw)) as img:
            return image_to_pixel_buffer(img)
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise ProcessingError("Could not decode data URI payload", step="decode", original_error=e) from e
