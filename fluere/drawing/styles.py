"""
Field styles: one scalar-field formula per style, evaluated for many pixels at once.
Every knot contributes to every pixel; the sum is reduced to a byte value.
"""
from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Callable

import numpy as np

from ..errors import InvalidParameterError

if TYPE_CHECKING:
    from .knots import KnotField

# Flow/Wave sums are scaled by FLOW_SCALE // num_knots (integer division), which
# is 0 above FLOW_SCALE knots.
FLOW_SCALE = 100


class FieldStyle(enum.Enum):
    """The five drawing styles, in the order random scene choices index them."""
    FLOW = "flow"
    WAVE = "wave"
    SPIN = "spin"
    LEAF = "leaf"
    RAYS = "rays"

    @classmethod
    def coerce(cls, value: "FieldStyle | str") -> "FieldStyle":
        """Accept a FieldStyle or its name ("flow", "Spin", ...); reject anything else."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidParameterError(
            f"unknown field style {value!r} (expected one of: {', '.join(s.value for s in cls)})",
            name="style",
            value=value,
        )


def to_byte(values: np.ndarray) -> np.ndarray:
    """
    Truncate toward zero, then reduce modulo 256 into [0, 255].
    numpy's % on integers takes the sign of the divisor, so negative sums
    land in range: same as ((v % 256) + 256) % 256 with a C-style modulo.
    """
    return (np.trunc(values).astype(np.int64) % 256).astype(np.uint8)


def _log_distance2(d2: np.ndarray) -> np.ndarray:
    # ln(0) is undefined; a pixel sitting exactly on a knot gets 0 from that knot
    return np.log(np.where(d2 > 0, d2, 1.0))


def flow_values(field: KnotField, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Sources and sinks: log of the squared distance to each knot."""
    total = np.zeros(np.shape(xs), dtype=np.float64)
    for knot in field.knots:
        dx = xs - knot.x
        dy = ys - knot.y
        total += knot.flow_sign * _log_distance2(dx * dx + dy * dy)
    total *= FLOW_SCALE // field.num_knots
    return to_byte(total)


def wave_values(field: KnotField, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Like flow, but through a sine so colors reflect back and forth."""
    total = np.zeros(np.shape(xs), dtype=np.float64)
    for knot in field.knots:
        dx = xs - knot.x
        dy = ys - knot.y
        total += knot.wave_sign * np.sin(1.5 * _log_distance2(dx * dx + dy * dy))
    total *= FLOW_SCALE // field.num_knots
    return to_byte(total)


def spin_values(field: KnotField, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """
    Angle to each knot, folded into the knot's spoke sector.
    A sine twist that decays exponentially with distance makes the spokes spiral
    (no twist when the knot's amplitude is 0).
    """
    total = np.zeros(np.shape(xs), dtype=np.float64)
    for knot in field.knots:
        dx = xs - knot.x
        dy = ys - knot.y
        d2 = dx * dx + dy * dy
        r = np.sqrt(d2)
        a = np.where(d2 > 0, np.arctan2(dy, dx), 0.0)
        a = a + knot.amplitude * knot.sectors * np.sin(r / knot.frequency) * np.exp(-r / knot.decay)
        a = knot.sectors * np.mod(a, 1.0 / knot.sectors)
        total += knot.spin_sign * a
    return to_byte(256 * total)


def _ratio_values(
    field: KnotField,
    xs: np.ndarray,
    ys: np.ndarray,
    sign_attr: str,
    discrete: int,
) -> np.ndarray:
    total = np.zeros(np.shape(xs), dtype=np.int64)
    for knot in field.knots:
        adx = np.abs(xs - knot.x)
        ady = np.abs(ys - knot.y)
        big = np.maximum(adx, ady)
        small = np.minimum(adx, ady)
        ratio = small / np.where(big > 0, big, 1.0)
        a = np.where(big > 0, getattr(knot, sign_attr) * 75 * ratio * ratio, 0.0)
        # quantize: integer division truncating toward zero, then scale back
        ai = np.trunc(a).astype(np.int64)
        total += np.sign(ai) * (np.abs(ai) // discrete) * discrete
    return (total % 256).astype(np.uint8)


def leaf_values(field: KnotField, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Squared ratio of the short to the long axis offset; discrete steps when leaf_discrete > 1."""
    return _ratio_values(field, xs, ys, "leaf_sign", field.leaf_discrete)


def rays_values(field: KnotField, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Same geometry as leaf, with its own signs and quantization."""
    return _ratio_values(field, xs, ys, "rays_sign", field.rays_discrete)


StyleFunc = Callable[["KnotField", np.ndarray, np.ndarray], np.ndarray]

STYLE_EVALUATORS: dict[FieldStyle, StyleFunc] = {
    FieldStyle.FLOW: flow_values,
    FieldStyle.WAVE: wave_values,
    FieldStyle.SPIN: spin_values,
    FieldStyle.LEAF: leaf_values,
    FieldStyle.RAYS: rays_values,
}
