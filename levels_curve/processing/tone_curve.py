# Two-point tone curve ("levels") editing and remapping
"""
Tone curve model and remapping.

The curve is anchored by two control points, ``enter`` and ``exit``. Below
``enter.in`` every level maps to ``enter.out``, above ``exit.in`` every level
maps to ``exit.out``, and levels in between follow the straight line joining
the two points. Alpha is never remapped.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from numbers import Integral, Real
from typing import Optional, Union

import cv2
import numpy as np

from ..config import settings
from ..utils.errors import ErrorCategory, log_and_continue
from ..utils.imaging import CHANNELS, PixelBuffer, coerce_buffer
from ..utils.logger import get_logger

logger = get_logger(__name__)

LEVEL_MIN = settings.CURVE_DEFAULTS["level_min"]
LEVEL_MAX = settings.CURVE_DEFAULTS["level_max"]


class CurvePoint(Enum):
    """Which control point an edit targets."""
    ENTER = "enter"
    EXIT = "exit"


class PointField(Enum):
    """Which half of a control point an edit targets."""
    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class ControlPoint:
    """An (input level, output level) pair anchoring one end of the curve."""
    in_level: int
    out_level: int


def _default_point(name):
    return ControlPoint(*settings.CURVE_DEFAULTS[name])


@dataclass(frozen=True)
class CurveState:
    """Both control points of the curve. ``enter.in_level <= exit.in_level`` always holds."""
    enter: ControlPoint = field(default_factory=lambda: _default_point("enter"))
    exit: ControlPoint = field(default_factory=lambda: _default_point("exit"))

    @classmethod
    def default(cls) -> "CurveState":
        return cls()

    @classmethod
    def from_levels(cls, enter_in, enter_out, exit_in, exit_out) -> "CurveState":
        if enter_in > exit_in:
            raise ValueError(f"enter.in ({enter_in}) must not exceed exit.in ({exit_in})")
        return cls(ControlPoint(enter_in, enter_out), ControlPoint(exit_in, exit_out))

    def point(self, which: CurvePoint) -> ControlPoint:
        return self.enter if which is CurvePoint.ENTER else self.exit

    def with_value(self, which: CurvePoint, point_field: PointField, value: int) -> "CurveState":
        target = self.point(which)
        if point_field is PointField.IN:
            target = replace(target, in_level=value)
        else:
            target = replace(target, out_level=value)
        return replace(self, **{which.value: target})

    @property
    def is_identity(self) -> bool:
        return self == CurveState()

    def as_dict(self):
        return {
            "enter": {"in": self.enter.in_level, "out": self.enter.out_level},
            "exit": {"in": self.exit.in_level, "out": self.exit.out_level},
        }


@dataclass(frozen=True)
class LinearMap:
    """The remapping function derived from a CurveState.

    ``lut`` holds the result for every input level, so applying the map is a
    table lookup per channel.
    """
    x1: int
    y1: int
    x2: int
    y2: int
    _lut: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_lut", self._build_lut())

    @property
    def is_step(self) -> bool:
        """True when both input levels coincide and the curve is a hard step at x1."""
        return self.x1 == self.x2

    @property
    def slope(self) -> float:
        if self.is_step:
            return 0.0
        return (self.y2 - self.y1) / (self.x2 - self.x1)

    @property
    def intercept(self) -> float:
        if self.is_step:
            return float(self.y1)
        return self.y1 - self.slope * self.x1

    def _build_lut(self) -> np.ndarray:
        levels = np.arange(LEVEL_MAX + 1, dtype=np.float64)
        if self.is_step:
            lut = np.where(levels <= self.x1, self.y1, self.y2).astype(np.float64)
        else:
            # Point-slope form, so exact halves (50 * 255 / 100 == 127.5) stay exact
            inner = self.y1 + (levels - self.x1) * (self.y2 - self.y1) / (self.x2 - self.x1)
            lut = np.where(levels <= self.x1, self.y1,
                           np.where(levels >= self.x2, self.y2, np.rint(inner)))
        lut = np.clip(lut, LEVEL_MIN, LEVEL_MAX).astype(np.uint8)
        lut.flags.writeable = False
        return lut

    def lut(self) -> np.ndarray:
        """Read-only 256-entry uint8 lookup table."""
        return self._lut

    def __call__(self, level: int) -> int:
        level = int(level)
        if not LEVEL_MIN <= level <= LEVEL_MAX:
            raise ValueError(f"Level {level} outside [{LEVEL_MIN}, {LEVEL_MAX}]")
        return int(self._lut[level])


def derive_mapping(curve: CurveState) -> LinearMap:
    """Derives the linear map for ``curve``.

    When ``enter.in == exit.in`` the slope is undefined; the map then becomes
    a hard step at that level (the level itself maps to ``enter.out``,
    anything above to ``exit.out``).
    """
    x1, y1 = curve.enter.in_level, curve.enter.out_level
    x2, y2 = curve.exit.in_level, curve.exit.out_level
    if x1 > x2:
        raise ValueError(f"Curve control points out of order: enter.in={x1} > exit.in={x2}")
    mapping = LinearMap(x1, y1, x2, y2)
    if mapping.is_step:
        logger.debug("Degenerate curve at level %d: using hard step %d -> %d", x1, y1, y2)
    return mapping


def apply_mapping(buffer, mapping: LinearMap, width=None, height=None) -> PixelBuffer:
    """Remaps the R, G and B channels of every pixel through ``mapping``.

    Alpha is copied unchanged. The input is never modified; a new buffer of
    the same dimensions is returned.
    """
    pixels = coerce_buffer(buffer, width, height)
    if pixels.pixel_count == 0:
        return PixelBuffer(pixels.data, pixels.width, pixels.height)

    # One table per channel; the alpha table is the identity
    lut = mapping.lut()
    identity = np.arange(LEVEL_MAX + 1, dtype=np.uint8)
    lut_rgba = np.stack([lut, lut, lut, identity], axis=-1).reshape(1, LEVEL_MAX + 1, CHANNELS)

    remapped = cv2.LUT(pixels.as_array(), lut_rgba)
    return PixelBuffer(remapped, pixels.width, pixels.height)


def _coerce_level(value) -> Optional[int]:
    """Interprets a control-surface value as an intensity level, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        level = int(value)
    elif isinstance(value, Real):
        if not float(value).is_integer():
            return None
        level = int(value)
    elif isinstance(value, str):
        try:
            level = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not LEVEL_MIN <= level <= LEVEL_MAX:
        return None
    return level


class ToneCurveMapper:
    """
    Holds the editable curve and turns it into remapped pixel buffers.

    Edits are validated before they touch the state: ``enter.in`` may never
    move above ``exit.in`` and ``exit.in`` never below ``enter.in``. A
    rejected edit is not an error; ``set_control_point`` just returns None.
    The mapper expects a single writer; hosts driving it from several
    threads must serialise the edits themselves.
    """

    def __init__(self, state: Optional[CurveState] = None):
        self._state = state if state is not None else CurveState.default()
        if self._state.enter.in_level > self._state.exit.in_level:
            raise ValueError("Initial curve violates enter.in <= exit.in")

    @property
    def state(self) -> CurveState:
        return self._state

    def set_control_point(
        self,
        point: Union[CurvePoint, str],
        point_field: Union[PointField, str],
        value,
    ) -> Optional[CurveState]:
        """Sets one field of one control point.

        Returns:
            The new CurveState, or None if the edit was rejected (the state is
            left untouched).

        Raises:
            ValueError: If ``point`` or ``point_field`` is not a known name.
        """
        which = CurvePoint(point)
        part = PointField(point_field)

        level = _coerce_level(value)
        if level is None:
            log_and_continue(
                f"Rejected {which.value}.{part.value}={value!r}: not a level in "
                f"[{LEVEL_MIN}, {LEVEL_MAX}]",
                category=ErrorCategory.USER_INPUT, level="debug",
            )
            return None

        if part is PointField.IN:
            if which is CurvePoint.ENTER and level > self._state.exit.in_level:
                log_and_continue(
                    f"Rejected enter.in={level}: above exit.in={self._state.exit.in_level}",
                    category=ErrorCategory.USER_INPUT, level="debug",
                )
                return None
            if which is CurvePoint.EXIT and level < self._state.enter.in_level:
                log_and_continue(
                    f"Rejected exit.in={level}: below enter.in={self._state.enter.in_level}",
                    category=ErrorCategory.USER_INPUT, level="debug",
                )
                return None

        self._state = self._state.with_value(which, part, level)
        logger.debug("Curve updated: %s", self._state.as_dict())
        return self._state

    def reset(self) -> CurveState:
        """Restores the identity curve."""
        self._state = CurveState.default()
        return self._state

    def derive_mapping(self, curve: Optional[CurveState] = None) -> LinearMap:
        return derive_mapping(curve if curve is not None else self._state)

    def apply(self, buffer, mapping: Optional[LinearMap] = None, width=None, height=None) -> PixelBuffer:
        """Applies ``mapping`` (or the map of the current curve) to ``buffer``."""
        if mapping is None:
            mapping = self.derive_mapping()
        return apply_mapping(buffer, mapping, width, height)
