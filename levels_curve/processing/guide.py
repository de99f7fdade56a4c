# Histogram + curve guide rendering
from typing import Optional

import cv2
import numpy as np

from ..config import settings
from ..utils.imaging import PixelBuffer
from ..utils.logger import get_logger
from .histogram import LEVELS, Histogram
from .tone_curve import CurveState

logger = get_logger(__name__)


def _overlay_bars(canvas, heights, color, alpha):
    """Blends one channel's bars (growing up from the bottom) into ``canvas``."""
    rows = np.arange(LEVELS)[:, None]
    mask = rows >= (LEVELS - heights)[None, :]
    if not mask.any():
        return canvas
    overlay = canvas.copy()
    overlay[mask, :3] = color
    return cv2.addWeighted(overlay, alpha, canvas, 1.0 - alpha, 0)


def _to_canvas(level):
    # Canvas rows grow downwards, intensity grows upwards
    return LEVELS - 1 - int(level)


def render_guide(histogram: Histogram, curve: Optional[CurveState] = None,
                 size: Optional[int] = None) -> PixelBuffer:
    """Renders the histogram bars with the identity reference and the curve on top.

    The picture is drawn on a 256x256 canvas (one column per level) and
    resized with nearest-neighbour sampling when another ``size`` is asked for.
    """
    hist_cfg = settings.HISTOGRAM_DEFAULTS
    guide_cfg = settings.GUIDE_DEFAULTS
    size = guide_cfg["size"] if size is None else int(size)
    if size <= 0:
        raise ValueError(f"Guide size must be positive, got {size}")
    curve = curve if curve is not None else CurveState.default()

    canvas = np.empty((LEVELS, LEVELS, 4), dtype=np.uint8)
    canvas[:] = guide_cfg["background"]

    heights = histogram.bar_heights(LEVELS)
    for name, color in hist_cfg["channel_colors"].items():
        canvas = _overlay_bars(canvas, heights[name], color, hist_cfg["bar_alpha"])

    top = LEVELS - 1
    cv2.line(canvas, (0, top), (top, 0), guide_cfg["reference_color"],
             guide_cfg["reference_width"])

    enter = (curve.enter.in_level, _to_canvas(curve.enter.out_level))
    exit_ = (curve.exit.in_level, _to_canvas(curve.exit.out_level))
    polyline = np.array([(0, enter[1]), enter, exit_, (top, exit_[1])], dtype=np.int32)
    cv2.polylines(canvas, [polyline], False, guide_cfg["curve_color"], guide_cfg["curve_width"])
    for anchor in (enter, exit_):
        cv2.circle(canvas, anchor, guide_cfg["point_radius"], guide_cfg["curve_color"],
                   guide_cfg["curve_width"])

    if size != LEVELS:
        canvas = cv2.resize(canvas, (size, size), interpolation=cv2.INTER_NEAREST)

    logger.debug("Rendered %dx%d curve guide", size, size)
    return PixelBuffer.from_array(canvas)
