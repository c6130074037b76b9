"""
Color tables: blending, band selection in each mode, doubling, windows.
"""
import sys
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fluere.errors import InvalidParameterError
from fluere.palettes import Palette, blend, build_color_table
from fluere.random_utils import RandomSource

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLACK = (0, 0, 0)

HOT = Palette.from_hex("Hot", [0xFFFF33, 0xFFCC00, 0xFF6600, 0xBB0033, 0xFF3300])


class TestBlend(unittest.TestCase):

    def test_endpoints_are_exact(self):
        colors = [(0, 0, 0), (255, 255, 255), (12, 200, 99), (254, 1, 128), RED, GREEN]
        for c1 in colors:
            for c2 in colors:
                self.assertEqual(blend(c1, c2, 0), c1)
                self.assertEqual(blend(c1, c2, 1), c2)

    def test_midpoint_rounds_half_up(self):
        self.assertEqual(blend(BLACK, (255, 255, 255), 0.5), (128, 128, 128))
        self.assertEqual(blend((10, 20, 30), (11, 21, 31), 0.5), (11, 21, 31))

    def test_extrapolation_is_clamped(self):
        for t in (-3.0, -0.5, 1.5, 10.0):
            for c in blend((250, 5, 128), (3, 252, 40), t):
                self.assertTrue(0 <= c <= 255)
        self.assertEqual(blend(BLACK, (255, 255, 255), 2.0), (255, 255, 255))
        self.assertEqual(blend(BLACK, (255, 255, 255), -1.0), (0, 0, 0))


class TestDeterministicTable(unittest.TestCase):

    def test_red_green(self):
        """Two colors: red at 0, green at the midpoint, nearly red again at 255."""
        table = build_color_table(Palette.from_hex("Test", [0xFF0000, 0x00FF00]))
        self.assertEqual(len(table), 512)
        self.assertEqual(len(table.to_bytes()), 1536)
        self.assertEqual(table.band_count, 2)
        self.assertEqual(table[0], RED)
        self.assertEqual(table[64], (128, 128, 0))
        self.assertEqual(table[128], GREEN)
        self.assertEqual(table[255], (253, 2, 0))
        self.assertEqual(table[256], RED)

    def test_band_count_equals_palette_size(self):
        colors = [0x33CCFF, 0x0099FF, 0x0033CC, 0x0033FF, 0xFFFFFF, 0x123456]
        for k in range(1, len(colors) + 1):
            palette = Palette.from_hex("P", colors[:k])
            table = build_color_table(palette)
            self.assertEqual(table.band_count, k)
            self.assertEqual(table.bands, palette.colors)
            self.assertEqual(table[0], palette.colors[0])
            self.assertEqual(table[256 * 1 // k if k > 1 else 0], palette.colors[1 % k])

    def test_single_color_fills_whole_table(self):
        table = build_color_table(Palette("One", ((10, 20, 30),)))
        np.testing.assert_array_equal(table.rgb, np.tile([10, 20, 30], (512, 1)))

    def test_deterministic_stripes_alternate_black(self):
        table = build_color_table(HOT, stripes=True)
        self.assertEqual(table.band_count, 10)
        self.assertEqual(table.bands[0::2], HOT.colors)
        self.assertTrue(all(c == BLACK for c in table.bands[1::2]))
        self.assertEqual(table[0], HOT.colors[0])

    def test_table_is_read_only(self):
        table = build_color_table(HOT)
        self.assertFalse(table.rgb.flags.writeable)


class TestRandomizedTable(unittest.TestCase):

    def test_band_count_ranges(self):
        seen_plain, seen_striped = set(), set()
        for seed in range(60):
            plain = build_color_table(HOT, randomize=True, rng=RandomSource(seed))
            striped = build_color_table(HOT, randomize=True, stripes=True, rng=RandomSource(seed))
            seen_plain.add(plain.band_count)
            seen_striped.add(striped.band_count)
            self.assertTrue(all(c in HOT.colors for c in plain.bands))
            self.assertTrue(all(c in HOT.colors for c in striped.bands[0::2]))
            self.assertTrue(all(c == BLACK for c in striped.bands[1::2]))
        self.assertTrue(seen_plain <= set(range(5, 11)))
        self.assertTrue(seen_striped <= {6, 8, 10})
        self.assertGreater(len(seen_plain), 1)

    def test_same_seed_same_table(self):
        a = build_color_table(HOT, randomize=True, stripes=True, rng=RandomSource(4))
        b = build_color_table(HOT, randomize=True, stripes=True, rng=RandomSource(4))
        self.assertEqual(a.to_bytes(), b.to_bytes())

    def test_randomize_needs_rng(self):
        with self.assertRaises(InvalidParameterError):
            build_color_table(HOT, randomize=True)


class TestDoubledLayout(unittest.TestCase):

    def test_second_half_repeats_first(self):
        for seed in range(10):
            for randomize in (False, True):
                for stripes in (False, True):
                    table = build_color_table(HOT, randomize=randomize, stripes=stripes, rng=RandomSource(seed))
                    np.testing.assert_array_equal(table.rgb[:256], table.rgb[256:])
                    raw = table.to_bytes()
                    self.assertEqual(raw[:768], raw[768:])

    def test_window_rotates(self):
        table = build_color_table(HOT, stripes=True)
        w = table.window(250)
        self.assertEqual(w.shape, (256, 3))
        self.assertEqual(tuple(w[0]), table[250])
        self.assertEqual(tuple(w[10]), table[4])
        np.testing.assert_array_equal(table.window(256 + 10), table.window(10))
        np.testing.assert_array_equal(table.window(0), table.rgb[:256])


if __name__ == "__main__":
    unittest.main()
