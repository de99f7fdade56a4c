"""Pixel buffer container and helpers shared by the processing modules.

A pixel buffer is the flat RGBA byte layout produced by canvas APIs: four
8-bit channels per pixel, rows stored top to bottom.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import PixelBufferError

CHANNELS = 4  # R, G, B, A
RGB_CHANNELS = ("red", "green", "blue")


def validate_buffer_length(length, width=None, height=None):
    """Checks that ``length`` bytes can hold ``width x height`` RGBA pixels.

    Raises:
        PixelBufferError: If the length is not a multiple of 4, or does not
            match the given dimensions.
    """
    if length % CHANNELS != 0:
        raise PixelBufferError(
            f"Pixel buffer length {length} is not a multiple of {CHANNELS}",
            length=length, width=width, height=height,
        )
    if (width is None) != (height is None):
        raise PixelBufferError(
            f"Both dimensions are required, got width={width} height={height}",
            length=length, width=width, height=height,
        )
    if width is None or height is None:
        return
    if width < 0 or height < 0:
        raise PixelBufferError(
            f"Invalid buffer dimensions {width}x{height}",
            length=length, width=width, height=height,
        )
    if length != width * height * CHANNELS:
        raise PixelBufferError(
            f"Pixel buffer length {length} does not match {width}x{height} RGBA "
            f"(expected {width * height * CHANNELS})",
            length=length, width=width, height=height,
        )


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable RGBA pixel buffer.

    ``data`` is always stored as a flat, read-only ``uint8`` array owned by
    the buffer, so callers can keep the source around for before/after
    comparison without worrying about aliasing.
    """
    data: np.ndarray
    width: int
    height: int

    def __post_init__(self):
        raw = self.data
        if isinstance(raw, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(raw, dtype=np.uint8).copy()
        else:
            arr = np.asarray(raw)
            if arr.dtype != np.uint8:
                raise PixelBufferError(
                    f"Pixel buffer must be uint8, got {arr.dtype}",
                    width=self.width, height=self.height,
                )
            flat = arr.reshape(-1).copy()

        validate_buffer_length(flat.size, self.width, self.height)
        flat.flags.writeable = False
        object.__setattr__(self, "data", flat)

    @classmethod
    def from_bytes(cls, data, width, height):
        """Wraps raw RGBA bytes (``bytes``, ``bytearray`` or a uint8 array)."""
        return cls(data, int(width), int(height))

    @classmethod
    def from_array(cls, rgba):
        """Builds a buffer from an ``(height, width, 4)`` uint8 array."""
        arr = np.asarray(rgba)
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise PixelBufferError(f"Expected an HxWx{CHANNELS} array, got shape {arr.shape}")
        height, width = arr.shape[:2]
        return cls(arr, width, height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def shape(self):
        return (self.height, self.width, CHANNELS)

    def __len__(self):
        return int(self.data.size)

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and np.array_equal(self.data, other.data))

    __hash__ = None

    def as_array(self) -> np.ndarray:
        """Read-only ``(height, width, 4)`` view of the pixels."""
        return self.data.reshape(self.shape)

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def __repr__(self):
        return f"PixelBuffer(width={self.width}, height={self.height})"


def coerce_buffer(buffer, width: Optional[int] = None, height: Optional[int] = None) -> PixelBuffer:
    """Accepts a PixelBuffer or raw RGBA data and returns a PixelBuffer.

    Raw data without dimensions is treated as a single row of pixels, which
    is all the histogram needs. Passing only one dimension is an error. The
    length check happens before any copy.
    """
    if isinstance(buffer, PixelBuffer):
        return buffer
    if buffer is None:
        raise PixelBufferError("No pixel buffer supplied")

    if isinstance(buffer, (bytes, bytearray, memoryview)):
        length = len(buffer)
    else:
        length = int(np.asarray(buffer).size)
    validate_buffer_length(length, width, height)

    if width is None:
        width, height = length // CHANNELS, 1
    return PixelBuffer(buffer, int(width), int(height))
