# Image import functionality using Pillow
import os
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..utils.imaging import PixelBuffer
from ..utils.logger import get_logger

logger = get_logger(__name__)


def image_to_pixel_buffer(img) -> PixelBuffer:
    """Converts a Pillow image of any mode to an RGBA PixelBuffer."""
    if img.mode != 'RGBA':
        logger.debug("Converting image from mode '%s' to 'RGBA'.", img.mode)
        img = img.convert('RGBA')
    return PixelBuffer.from_array(np.array(img))


def load_pixel_buffer(file_path) -> Optional[PixelBuffer]:
    """Loads an image from the specified file path as an RGBA pixel buffer.

    Handles EXIF orientation automatically. Images without alpha get an
    opaque alpha channel.

    Args:
        file_path (str): The path to the image file.

    Returns:
        PixelBuffer: The loaded pixels, or None if loading fails.
    """
    if not isinstance(file_path, (str, os.PathLike)) or not str(file_path):
        logger.error("Invalid file path provided.")
        return None

    if not os.path.isfile(file_path):
        logger.error("File not found at '%s'", file_path)
        return None

    try:
        with Image.open(file_path) as img:
            img_oriented = ImageOps.exif_transpose(img)
            buffer = image_to_pixel_buffer(img_oriented)
        logger.info("Loaded '%s' (%dx%d)", file_path, buffer.width, buffer.height)
        return buffer
    except UnidentifiedImageError:
        logger.error("Cannot identify image file format for '%s'. It might be corrupt or unsupported.", file_path)
        return None
    except OSError:
        logger.exception("OS error loading image '%s'", file_path)
        return None
