# Processing package initialization
from .histogram import Histogram, HistogramBuilder, build_histogram
from .tone_curve import (
    ControlPoint, CurvePoint, CurveState, LinearMap, PointField, ToneCurveMapper,
    apply_mapping, derive_mapping,
)
from .guide import render_guide
from .session import CurvesSession, SessionState
