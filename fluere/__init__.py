# Fluere: knot-field drawings animated by cycling a color table

from .drawing import FieldStyle, Knot, KnotField, build_knot_field, fill_pixels, pixel_value
from .palettes import ColorTable, Palette, PaletteStore, blend, build_color_table, parse_palette_text
from .random_utils import RandomSource
from .scene import Scene, SceneBuilder, ScenePlayer

__all__ = [
    "FieldStyle",
    "Knot",
    "KnotField",
    "build_knot_field",
    "fill_pixels",
    "pixel_value",
    "ColorTable",
    "Palette",
    "PaletteStore",
    "blend",
    "build_color_table",
    "parse_palette_text",
    "RandomSource",
    "Scene",
    "SceneBuilder",
    "ScenePlayer",
]
