"""
Palette → cyclic color table. The 256-entry table is stored twice (512 entries,
1536 bytes) so any 256-entry window starting at 0..256 is a valid rotated table:
color cycling is just moving the window start.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..errors import InvalidParameterError
from ..random_utils import RandomSource
from .store import RGB, Palette

logger = logging.getLogger(__name__)

TABLE_SIZE = 256
BLACK: RGB = (0, 0, 0)


def _to_byte(value: float) -> int:
    if value > 255:
        value = 255
    if value < 0:
        value = 0
    return int(value)


def blend(start: RGB, end: RGB, t: float) -> RGB:
    """
    Linear mix per channel, rounded (+0.5 then truncate) and clamped to 0-255.
    t=0 gives start, t=1 gives end; t outside [0, 1] extrapolates but stays in range.
    """
    return (
        _to_byte(start[0] * (1.0 - t) + end[0] * t + 0.5),
        _to_byte(start[1] * (1.0 - t) + end[1] * t + 0.5),
        _to_byte(start[2] * (1.0 - t) + end[2] * t + 0.5),
    )


def choose_band_count(
    palette: Palette,
    *,
    randomize: bool = False,
    stripes: bool = False,
    rng: RandomSource | None = None,
) -> int:
    """
    How many color bands the table gets.
    In order: every palette color; random 5-10; or random 3-5 with stripes.
    Stripes then double the count (a black band after each color).
    """
    if randomize:
        if rng is None:
            raise InvalidParameterError("a randomized color table needs a RandomSource", name="rng")
        # 3-5 colors become 6-10 bands once the black stripes go in
        count = rng.randint(3, 5) if stripes else rng.randint(5, 10)
    else:
        count = len(palette.colors)
    if stripes:
        count *= 2
    return count


def choose_band_colors(
    palette: Palette,
    band_count: int,
    *,
    randomize: bool = False,
    stripes: bool = False,
    rng: RandomSource | None = None,
) -> list[RGB]:
    """Start color of each band: black on odd bands with stripes; else random picks or palette order."""
    if randomize and rng is None:
        raise InvalidParameterError("a randomized color table needs a RandomSource", name="rng")
    colors: list[RGB] = []
    next_color = 0
    for band in range(band_count):
        if stripes and band % 2:
            colors.append(BLACK)
        elif randomize:
            colors.append(rng.choice(palette.colors))
        else:
            colors.append(palette.colors[next_color])
            next_color += 1
    return colors


@dataclass(frozen=True, eq=False)
class ColorTable:
    """
    512 RGB entries (rows of a (512, 3) uint8 array); rows 256-511 repeat rows 0-255.
    bands holds the start color of each band.
    """
    rgb: np.ndarray
    bands: tuple[RGB, ...]
    palette_name: str
    randomize: bool = False
    stripes: bool = False

    def __len__(self) -> int:
        return len(self.rgb)

    def __getitem__(self, index: int) -> RGB:
        r, g, b = self.rgb[index]
        return (int(r), int(g), int(b))

    @property
    def band_count(self) -> int:
        return len(self.bands)

    def to_bytes(self) -> bytes:
        """1536 bytes: R,G,B for entries 0..255, then the same 768 bytes again."""
        return self.rgb.tobytes()

    def window(self, offset: int) -> np.ndarray:
        """The 256-entry table rotated by offset (taken modulo 256); a read-only view, no copy."""
        start = offset % TABLE_SIZE
        return self.rgb[start:start + TABLE_SIZE]


def build_color_table(
    palette: Palette,
    *,
    randomize: bool = False,
    stripes: bool = False,
    rng: RandomSource | None = None,
) -> ColorTable:
    """
    Blend between band start colors across the 256 entries; the last band blends
    back to the first so the table wraps seamlessly. Then double it.
    """
    band_count = choose_band_count(palette, randomize=randomize, stripes=stripes, rng=rng)
    bands = choose_band_colors(palette, band_count, randomize=randomize, stripes=stripes, rng=rng)

    rgb = np.zeros((2 * TABLE_SIZE, 3), dtype=np.uint8)
    for band, start_color in enumerate(bands):
        end_color = bands[(band + 1) % band_count]
        first = band * TABLE_SIZE // band_count
        last = (band + 1) * TABLE_SIZE // band_count
        for idx in range(first, last):
            t = band_count / 256.0 * (idx - first)
            rgb[idx] = rgb[idx + TABLE_SIZE] = blend(start_color, end_color, t)
    rgb.flags.writeable = False

    logger.debug(
        "Color table from %r: %d bands (randomize=%s, stripes=%s)",
        palette.name, band_count, randomize, stripes,
    )
    return ColorTable(
        rgb=rgb,
        bands=tuple(bands),
        palette_name=palette.name,
        randomize=randomize,
        stripes=stripes,
    )
