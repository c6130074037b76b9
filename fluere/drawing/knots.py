"""
Knots and knot fields. A knot field is built once per scene from an injected
RandomSource and never changes afterwards.
"""
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass

from ..errors import InvalidParameterError
from ..random_utils import RandomSource
from .styles import FLOW_SCALE, FieldStyle

logger = logging.getLogger(__name__)

# Knots are placed over an area this much larger than the image, so some fall
# outside the frame and the edges look less pinned down.
ZOOM = 1.1

MAX_SPOKES = 7
# Possible leaf/rays quantization steps (1 = smooth)
DISCRETE_STEPS = (1, 4, 7)


@dataclass(frozen=True)
class Knot:
    """One control point. Signs are +1/-1; the spin parameters shape the spokes and their twist."""
    x: float
    y: float
    flow_sign: int = 1
    spin_sign: int = 1
    leaf_sign: int = 1
    rays_sign: int = 1
    wave_sign: int = 1
    sectors: float = 1 / (2 * math.pi)  # spokes / (2 pi)
    amplitude: float = 0.0
    frequency: float = 3.0
    decay: float = 20.0

    def __post_init__(self) -> None:
        for name in ("flow_sign", "spin_sign", "leaf_sign", "rays_sign", "wave_sign"):
            if getattr(self, name) not in (1, -1):
                raise InvalidParameterError(f"{name} must be +1 or -1", name=name, value=getattr(self, name))
        for name in ("sectors", "frequency", "decay"):
            if not getattr(self, name) > 0:
                raise InvalidParameterError(f"{name} must be positive", name=name, value=getattr(self, name))


@dataclass(frozen=True)
class KnotField:
    """
    Everything needed to evaluate a drawing: the knots, two styles shown in a
    checkerboard, the leaf/rays quantization, and the target size.
    """
    width: int
    height: int
    knots: tuple[Knot, ...]
    style1: FieldStyle
    style2: FieldStyle
    leaf_discrete: int = 1
    rays_discrete: int = 1

    def __post_init__(self) -> None:
        check_dimensions(self.width, self.height)
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "knots", tuple(self.knots))
        if not self.knots:
            raise InvalidParameterError("a knot field needs at least one knot", name="knots", value=0)
        object.__setattr__(self, "style1", FieldStyle.coerce(self.style1))
        object.__setattr__(self, "style2", FieldStyle.coerce(self.style2))
        for name in ("leaf_discrete", "rays_discrete"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise InvalidParameterError(f"{name} must be a positive integer", name=name, value=value)

    @property
    def num_knots(self) -> int:
        return len(self.knots)


def _is_integer(value) -> bool:
    # numpy integers count; bools do not
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if not _is_integer(value) or value <= 0:
            raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}", name=name, value=value)


def check_num_knots(num_knots: int) -> None:
    if not _is_integer(num_knots) or num_knots < 1:
        raise InvalidParameterError(
            f"number of knots must be an integer >= 1, got {num_knots!r}",
            name="num_knots",
            value=num_knots,
        )


def random_knot(rng: RandomSource, width: int, height: int) -> Knot:
    """Draw one knot. Draw order is fixed so a seeded source always gives the same knot."""
    origin_x = 0.5 * (ZOOM - 1.0) * width
    origin_y = 0.5 * (ZOOM - 1.0) * height
    x = ZOOM * width * rng.uniform() - origin_x
    y = ZOOM * height * rng.uniform() - origin_y

    flow_sign = rng.sign()
    spin_sign = rng.sign()
    leaf_sign = rng.sign()
    rays_sign = rng.sign()
    wave_sign = rng.sign()

    spokes = rng.randint(1, MAX_SPOKES)
    frequency = 6 * rng.uniform() + 3  # 3 to 9
    # half the knots get no twist at all
    amplitude = 0.0 if rng.coinflip() else 8 * frequency / (spokes * spokes)
    decay = 20 + 30 * rng.uniform()  # 20 to 50

    return Knot(
        x=x,
        y=y,
        flow_sign=flow_sign,
        spin_sign=spin_sign,
        leaf_sign=leaf_sign,
        rays_sign=rays_sign,
        wave_sign=wave_sign,
        sectors=spokes / (2 * math.pi),
        amplitude=amplitude,
        frequency=frequency,
        decay=decay,
    )


def build_knot_field(
    width: int,
    height: int,
    num_knots: int,
    style1: FieldStyle | str,
    style2: FieldStyle | str,
    rng: RandomSource,
) -> KnotField:
    """
    Make a new knot field. Size, knot count and styles come from the caller;
    quantization and every knot are drawn from rng.
    Raises InvalidParameterError before drawing anything if an input is bad.

    Flow and Wave scale their sums by 100 // num_knots, so with more than 100
    knots those styles are flat (every pixel 0). Such counts are accepted with
    a warning.
    """
    check_dimensions(width, height)
    check_num_knots(num_knots)
    width, height, num_knots = int(width), int(height), int(num_knots)
    s1 = FieldStyle.coerce(style1)
    s2 = FieldStyle.coerce(style2)
    if num_knots > FLOW_SCALE:
        logger.warning(
            "%d knots: flow and wave styles will be flat above %d knots", num_knots, FLOW_SCALE
        )

    leaf_discrete = DISCRETE_STEPS[rng.randrange(len(DISCRETE_STEPS))]
    rays_discrete = DISCRETE_STEPS[rng.randrange(len(DISCRETE_STEPS))]
    knots = tuple(random_knot(rng, width, height) for _ in range(num_knots))

    logger.debug(
        "Knot field %dx%d: %d knots, styles %s/%s, leaf_discrete=%d rays_discrete=%d",
        width, height, num_knots, s1.value, s2.value, leaf_discrete, rays_discrete,
    )
    return KnotField(
        width=width,
        height=height,
        knots=knots,
        style1=s1,
        style2=s2,
        leaf_discrete=leaf_discrete,
        rays_discrete=rays_discrete,
    )
