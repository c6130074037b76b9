"""
Palettes (named, ordered lists of RGB colors) and the store that holds them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from ..errors import InvalidParameterError
from ..random_utils import RandomSource

RGB = tuple[int, int, int]

# Longest palette name the text format allows
MAX_NAME_LENGTH = 19


def hex_to_rgb(value: int) -> RGB:
    """0xRRGGBB → (r, g, b)."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFFFFFF:
        raise InvalidParameterError(f"color must be an integer in 0x000000..0xFFFFFF, got {value!r}", name="color", value=value)
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def rgb_to_hex(color: RGB) -> str:
    r, g, b = color
    return f"0x{r:02x}{g:02x}{b:02x}"


def _check_color(color) -> RGB:
    try:
        r, g, b = color
    except (TypeError, ValueError):
        raise InvalidParameterError(f"color must be an (r, g, b) triple, got {color!r}", name="color", value=color) from None
    for c in (r, g, b):
        if isinstance(c, bool) or not isinstance(c, int) or not 0 <= c <= 255:
            raise InvalidParameterError(f"color components must be integers 0-255, got {color!r}", name="color", value=color)
    return (r, g, b)


@dataclass(frozen=True)
class Palette:
    """A name (one word) and at least one color."""
    name: str
    colors: tuple[RGB, ...]

    def __post_init__(self) -> None:
        if not self.name or len(self.name) > MAX_NAME_LENGTH or any(ch.isspace() for ch in self.name):
            raise InvalidParameterError(
                f"palette name must be one word of 1-{MAX_NAME_LENGTH} characters, got {self.name!r}",
                name="name",
                value=self.name,
            )
        colors = tuple(_check_color(c) for c in self.colors)
        if not colors:
            raise InvalidParameterError(f"palette {self.name!r} has no colors", name="colors", value=0)
        object.__setattr__(self, "colors", colors)

    @classmethod
    def from_hex(cls, name: str, values: Iterable[int]) -> "Palette":
        return cls(name, tuple(hex_to_rgb(v) for v in values))

    def __len__(self) -> int:
        return len(self.colors)

    def to_line(self) -> str:
        """One line of the palette text format."""
        return " ".join([self.name, str(len(self.colors))] + [rgb_to_hex(c) for c in self.colors])


@dataclass(frozen=True)
class PaletteStore:
    """Palettes in file order, indexable by position or looked up by name."""
    palettes: tuple[Palette, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "palettes", tuple(self.palettes))

    def __len__(self) -> int:
        return len(self.palettes)

    def __iter__(self) -> Iterator[Palette]:
        return iter(self.palettes)

    def __getitem__(self, index: int) -> Palette:
        return self.palettes[index]

    def names(self) -> list[str]:
        return [p.name for p in self.palettes]

    def get(self, name: str) -> Palette | None:
        """First palette with this name (case-insensitive), or None."""
        key = name.lower()
        for p in self.palettes:
            if p.name.lower() == key:
                return p
        return None

    def pick(self, rng: RandomSource) -> Palette:
        """Uniformly random palette."""
        if not self.palettes:
            raise InvalidParameterError("palette store is empty", name="palettes", value=0)
        return self.palettes[rng.randrange(len(self.palettes))]

    def to_text(self) -> str:
        """Serialize in the palette text format."""
        lines = [f"Number_of_palettes {len(self.palettes)}"]
        lines.extend(p.to_line() for p in self.palettes)
        return "\n".join(lines) + "\n"
