# Curves editing session: the caller that ties histogram, curve and sinks together
from enum import Enum
from typing import Callable, Optional

from ..io.image_saver import encode_data_uri
from ..utils.imaging import PixelBuffer, coerce_buffer
from ..utils.logger import get_logger
from .guide import render_guide
from .histogram import Histogram, HistogramBuilder
from .tone_curve import CurveState, LinearMap, ToneCurveMapper

logger = get_logger(__name__)


class SessionState(Enum):
    IDLE = "idle"              # Default curve, nothing edited yet
    EDITING = "editing"        # Curve changed, no preview shown
    PREVIEWING = "previewing"  # Remapped buffer shown but not committed
    COMMITTED = "committed"    # Remapped buffer handed to the host


class CurvesSession:
    """
    One curves-editing session over a single source image.

    Every accepted edit goes through ``on_curve_changed``, which re-derives the
    mapping and, if preview is on, re-renders the preview. Preview and commit
    share the same remap; they differ only in where the result goes.

    Args:
        source: The pixels being edited (PixelBuffer or raw RGBA bytes).
        on_gamma_correction_change: Called with the encoded data URI on commit.
        display: Called with each preview/commit buffer.
        width, height: Dimensions when ``source`` is raw bytes.
    """

    def __init__(
        self,
        source,
        on_gamma_correction_change: Optional[Callable[[str], None]] = None,
        display: Optional[Callable[[PixelBuffer], None]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ):
        self.source = coerce_buffer(source, width, height)
        self.on_gamma_correction_change = on_gamma_correction_change
        self.display = display

        self.mapper = ToneCurveMapper()
        self.histogram: Histogram = HistogramBuilder().build(self.source)
        self.mapping: LinearMap = self.mapper.derive_mapping()
        self.preview_enabled = False
        self.last_output: Optional[PixelBuffer] = None
        self.state = SessionState.IDLE

    @property
    def curve(self) -> CurveState:
        return self.mapper.state

    def set_control_point(self, point, point_field, value) -> Optional[CurveState]:
        """Forwards an edit to the mapper; returns None when it is rejected."""
        new_state = self.mapper.set_control_point(point, point_field, value)
        if new_state is None:
            return None
        self.on_curve_changed()
        return new_state

    def reset(self) -> CurveState:
        state = self.mapper.reset()
        self.on_curve_changed()
        return state

    def on_curve_changed(self) -> LinearMap:
        self.mapping = self.mapper.derive_mapping()
        if self.preview_enabled:
            self.preview()
        else:
            self.state = SessionState.IDLE if self.curve.is_identity else SessionState.EDITING
        return self.mapping

    def set_preview(self, enabled: bool) -> Optional[PixelBuffer]:
        """Turns live preview on or off. Turning it on renders immediately."""
        self.preview_enabled = bool(enabled)
        if self.preview_enabled:
            return self.preview()
        self.state = SessionState.IDLE if self.curve.is_identity else SessionState.EDITING
        return None

    def toggle_preview(self) -> Optional[PixelBuffer]:
        return self.set_preview(not self.preview_enabled)

    def render(self) -> PixelBuffer:
        """Remaps the source with the current curve without touching any sink."""
        return self.mapper.apply(self.source, self.mapping)

    def preview(self) -> PixelBuffer:
        output = self.render()
        self.last_output = output
        if self.display is not None:
            self.display(output)
        self.state = SessionState.PREVIEWING
        return output

    def commit(self) -> str:
        """Remaps the source, hands it to the display and reports the data URI.

        Returns:
            The encoded image passed to ``on_gamma_correction_change``.
        """
        output = self.render()
        self.last_output = output
        if self.display is not None:
            self.display(output)

        data_uri = encode_data_uri(output)
        logger.info("Committing curve %s (%d byte data URI)", self.curve.as_dict(), len(data_uri))
        if self.on_gamma_correction_change is not None:
            self.on_gamma_correction_change(data_uri)
        self.state = SessionState.COMMITTED
        return data_uri

    def guide(self, size: Optional[int] = None) -> PixelBuffer:
        """Histogram bars with the current curve drawn on top."""
        return render_guide(self.histogram, self.curve, size=size)
