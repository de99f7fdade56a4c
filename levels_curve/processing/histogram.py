# Per-channel histogram computation
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from ..config import settings
from ..utils.imaging import CHANNELS, RGB_CHANNELS, coerce_buffer
from ..utils.logger import get_logger

logger = get_logger(__name__)

LEVELS = settings.HISTOGRAM_DEFAULTS["levels"]


@dataclass(frozen=True, eq=False)
class Histogram:
    """Dense per-channel frequency tables.

    Each table has one slot per intensity level; a zero count means the level
    was not observed. Tables are read-only once built.
    """
    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray

    def __post_init__(self):
        for name in RGB_CHANNELS:
            table = np.array(getattr(self, name), dtype=np.int64).reshape(-1)
            if table.size != LEVELS:
                raise ValueError(f"{name} table must have {LEVELS} slots, got {table.size}")
            table.flags.writeable = False
            object.__setattr__(self, name, table)

    def channel(self, name: str) -> np.ndarray:
        if name not in RGB_CHANNELS:
            raise KeyError(f"Unknown channel '{name}'")
        return getattr(self, name)

    def channels(self) -> Iterator[Tuple[str, np.ndarray]]:
        for name in RGB_CHANNELS:
            yield name, getattr(self, name)

    @property
    def pixel_count(self) -> int:
        # Every pixel lands in exactly one red slot
        return int(self.red.sum())

    def max_count(self) -> int:
        """Largest single-level count across all three channels."""
        return int(max(self.red.max(), self.green.max(), self.blue.max()))

    def bar_heights(self, scale: Optional[int] = None) -> Dict[str, np.ndarray]:
        """Scales every channel against the shared maximum.

        Using one maximum for all channels keeps the overlaid bars on a
        comparable vertical scale. An all-zero histogram yields zero heights.
        """
        if scale is None:
            scale = settings.HISTOGRAM_DEFAULTS["bar_scale"]
        max_count = self.max_count()
        if max_count == 0:
            return {name: np.zeros(LEVELS, dtype=np.int64) for name in RGB_CHANNELS}
        return {name: (table * int(scale)) // max_count for name, table in self.channels()}

    def as_dict(self) -> Dict[str, Dict[int, int]]:
        """Sparse view: only the levels that actually occur."""
        return {
            name: {int(level): int(table[level]) for level in np.flatnonzero(table)}
            for name, table in self.channels()
        }


class HistogramBuilder:
    """Counts R, G and B intensities of an RGBA pixel buffer in one pass."""

    def build(self, buffer, width: Optional[int] = None, height: Optional[int] = None) -> Histogram:
        """Builds the histogram of ``buffer``.

        ``buffer`` may be a PixelBuffer or raw RGBA bytes; raw data is checked
        for a whole number of pixels first. Alpha is never counted.

        Raises:
            PixelBufferError: If the buffer length is not a multiple of 4 or
                does not match the given dimensions.
        """
        pixels = coerce_buffer(buffer, width, height)
        quads = pixels.data.reshape(-1, CHANNELS)

        tables = [np.bincount(quads[:, idx], minlength=LEVELS) for idx in range(3)]
        logger.debug("Built histogram for %dx%d buffer (%d pixels)",
                     pixels.width, pixels.height, pixels.pixel_count)
        return Histogram(*tables)


def build_histogram(buffer, width=None, height=None) -> Histogram:
    """Convenience wrapper around ``HistogramBuilder().build``."""
    return HistogramBuilder().build(buffer, width, height)
