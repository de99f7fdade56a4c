import numpy as np
import pytest

from levels_curve.processing.guide import render_guide
from levels_curve.processing.histogram import HistogramBuilder
from levels_curve.processing.tone_curve import ControlPoint, CurveState

WHITE = [255, 255, 255, 255]


class TestRenderGuide:
    """Tests for the histogram/curve guide image."""

    def test_default_size(self, sample_buffer):
        guide = render_guide(HistogramBuilder().build(sample_buffer))
        assert guide.shape == (256, 256, 4)

    def test_custom_size(self, sample_buffer):
        guide = render_guide(HistogramBuilder().build(sample_buffer), size=128)
        assert guide.shape == (128, 128, 4)

    def test_invalid_size(self, sample_buffer):
        with pytest.raises(ValueError):
            render_guide(HistogramBuilder().build(sample_buffer), size=0)

    def test_bars_drawn_from_bottom(self, sample_buffer):
        """Occupied levels get coloured columns; empty levels stay background."""
        canvas = render_guide(HistogramBuilder().build(sample_buffer)).as_array()
        assert canvas[100, 0].tolist() != WHITE
        assert canvas[100, 0, 3] == 255
        assert canvas[5, 128].tolist() == WHITE

    def test_empty_histogram_draws_only_lines(self):
        canvas = render_guide(HistogramBuilder().build(b"")).as_array()
        assert canvas[40, 200].tolist() == WHITE
        # Identity reference runs through the centre
        assert canvas[128, 127].tolist() != WHITE

    def test_curve_points_marked(self, sample_buffer):
        """The flat segment left of enter.in is drawn at enter.out."""
        curve = CurveState(ControlPoint(60, 200), ControlPoint(180, 220))
        canvas = render_guide(HistogramBuilder().build(b""), curve).as_array()
        assert canvas[255 - 200, 20].tolist() == [0, 0, 0, 255]
        assert canvas[255 - 220, 230].tolist() == [0, 0, 0, 255]
