# Knot-field drawings: random knots → per-pixel byte index image

from .styles import FieldStyle
from .knots import Knot, KnotField, build_knot_field
from .evaluator import evaluate, fill_pixels, pixel_value

__all__ = [
    "FieldStyle",
    "Knot",
    "KnotField",
    "build_knot_field",
    "evaluate",
    "fill_pixels",
    "pixel_value",
]
