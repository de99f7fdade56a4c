# IO package initialization
from .image_loader import (
    load_pixel_buffer,
    image_to_pixel_buffer,
)
from .image_saver import (
    save_pixel_buffer,
    encode_data_uri,
    decode_data_uri,
)

__all__ = [
    'load_pixel_buffer',
    'image_to_pixel_buffer',
    'save_pixel_buffer',
    'encode_data_uri',
    'decode_data_uri',
]
