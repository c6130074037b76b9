# Palettes and the cyclic color tables built from them

from .store import MAX_NAME_LENGTH, RGB, Palette, PaletteStore, hex_to_rgb, rgb_to_hex
from .parser import load_default_palettes, load_palette_file, parse_palette_text
from .colortable import TABLE_SIZE, ColorTable, blend, build_color_table

__all__ = [
    "MAX_NAME_LENGTH",
    "RGB",
    "Palette",
    "PaletteStore",
    "hex_to_rgb",
    "rgb_to_hex",
    "load_default_palettes",
    "load_palette_file",
    "parse_palette_text",
    "TABLE_SIZE",
    "ColorTable",
    "blend",
    "build_color_table",
]
