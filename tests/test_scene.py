"""
Scene building (random styles, field, image, color table), supersede-cancel, and the player loop.
"""
import sys
import threading
import unittest
from pathlib import Path
from unittest import mock

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fluere.animation import AnimationSettings, ViewState
from fluere.drawing import FieldStyle, evaluator
from fluere.errors import InvalidParameterError, RenderCancelled
from fluere.palettes import parse_palette_text
from fluere.random_utils import RandomSource
from fluere.scene import SceneBuilder, ScenePlayer

PALETTES = parse_palette_text(
    "Number_of_palettes 2\n"
    "Cold 4 0x33ccff 0x0099ff 0x0033cc 0x0033ff\n"
    "Hot 5 0xffff33 0xffcc00 0xff6600 0xbb0033 0xff3300\n"
)


def make_builder(seed=0, **kwargs):
    args = {"width": 16, "height": 12, "num_knots": 3, "workers": 2, "rng": RandomSource(seed)}
    args.update(kwargs)
    return SceneBuilder(PALETTES, **args)


class TestSceneBuilder(unittest.TestCase):

    def test_new_scene(self):
        scene = make_builder().new_scene()
        self.assertEqual(scene.index_image.shape, (12, 16))
        self.assertEqual(scene.index_image.dtype, np.uint8)
        self.assertEqual(scene.field.num_knots, 3)
        self.assertIn(scene.color_table.palette_name, PALETTES.names())
        self.assertEqual(scene.frame(5).shape, (12, 16, 3))
        summary = scene.summary()
        self.assertEqual(summary["width"], 16)
        self.assertIn(summary["style1"], [s.value for s in FieldStyle])

    def test_same_seed_same_scene(self):
        a = make_builder(seed=21).new_scene()
        b = make_builder(seed=21).new_scene()
        self.assertEqual(a.field, b.field)
        np.testing.assert_array_equal(a.index_image, b.index_image)
        self.assertEqual(a.color_table.to_bytes(), b.color_table.to_bytes())

    def test_fixed_styles_and_palette(self):
        builder = make_builder(palette_name="hot")
        scene = builder.new_scene("spin", FieldStyle.LEAF)
        self.assertIs(scene.field.style1, FieldStyle.SPIN)
        self.assertIs(scene.field.style2, FieldStyle.LEAF)
        self.assertEqual(scene.color_table.palette_name, "Hot")

    def test_rejects_bad_parameters(self):
        with self.assertRaises(InvalidParameterError):
            make_builder(palette_name="Nope")
        with self.assertRaises(InvalidParameterError):
            make_builder(num_knots=0)
        with self.assertRaises(InvalidParameterError):
            make_builder(width=0)
        with self.assertRaises(InvalidParameterError):
            make_builder().new_scene("checkers")

    def test_recolor_keeps_image(self):
        builder = make_builder(seed=3)
        scene = builder.new_scene()
        recolored = builder.recolor(scene)
        self.assertIs(recolored.index_image, scene.index_image)
        self.assertIs(recolored.field, scene.field)
        self.assertIsNot(recolored.color_table, scene.color_table)

    def test_new_request_cancels_fill_in_flight(self):
        builder = make_builder()

        def superseded(field, *, workers, cancel_event):
            builder.cancel()
            self.assertTrue(cancel_event.is_set())
            raise RenderCancelled("superseded")

        with mock.patch("fluere.scene.fill_pixels", side_effect=superseded):
            with self.assertRaises(RenderCancelled):
                builder.new_scene()
        self.assertIsNone(builder._in_flight)
        # the builder is still usable afterwards
        self.assertEqual(builder.new_scene().index_image.shape, (12, 16))

    def run_interrupted_fill(self, builder, interrupt):
        """
        Start a real fill on a worker thread, hold it after its first row until
        interrupt() has run, then let it continue. Returns (outcome, rows the
        worker filled, result of interrupt()).
        """
        real_evaluate = evaluator.evaluate
        first_row_done = threading.Event()
        resume = threading.Event()
        worker_rows = []
        outcome = {}

        def gated_evaluate(field, xs, ys):
            values = real_evaluate(field, xs, ys)
            if threading.current_thread() is worker:
                worker_rows.append(int(ys))
                if len(worker_rows) == 1:
                    first_row_done.set()
                    resume.wait(10)
            return values

        def first_request():
            try:
                outcome["scene"] = builder.new_scene()
            except RenderCancelled as e:
                outcome["error"] = e

        worker = threading.Thread(target=first_request)
        with mock.patch("fluere.drawing.evaluator.evaluate", side_effect=gated_evaluate):
            worker.start()
            self.assertTrue(first_row_done.wait(10))
            result = interrupt()
            resume.set()
            worker.join(10)
        self.assertFalse(worker.is_alive())
        return outcome, worker_rows, result

    def test_new_request_supersedes_running_fill(self):
        builder = make_builder(height=40, workers=1)
        outcome, rows, second = self.run_interrupted_fill(builder, builder.new_scene)
        self.assertIsInstance(outcome.get("error"), RenderCancelled)
        self.assertNotIn("scene", outcome)
        self.assertEqual(rows, [0])
        self.assertEqual(second.index_image.shape, (40, 16))
        self.assertIsNone(builder._in_flight)

    def test_cancel_stops_running_fill(self):
        builder = make_builder(height=40, workers=1)
        outcome, rows, _ = self.run_interrupted_fill(builder, builder.cancel)
        self.assertIsInstance(outcome.get("error"), RenderCancelled)
        self.assertEqual(rows, [0])
        self.assertIsNone(builder._in_flight)

    def test_from_config(self):
        config = {
            "scene": {"width": 8, "height": 6, "num_knots": 99},
            "render": {"workers": 1},
            "seed": 5,
        }
        a = SceneBuilder.from_config(config, palettes=PALETTES)
        b = SceneBuilder.from_config(config, palettes=PALETTES)
        self.assertEqual(a.num_knots, 50)
        np.testing.assert_array_equal(a.new_scene().index_image, b.new_scene().index_image)

    def test_from_config_uses_bundled_palettes(self):
        builder = SceneBuilder.from_config({"scene": {"width": 4, "height": 4}}, rng=RandomSource(1))
        self.assertGreaterEqual(len(builder.palettes), 3)


class TestScenePlayer(unittest.TestCase):

    def test_player_loop(self):
        player = ScenePlayer(make_builder(seed=9), AnimationSettings(fade_step=0.25))
        first = player.advance()
        self.assertIs(player.state, ViewState.FADE_IN)
        self.assertEqual(first.shape, (12, 16, 3))
        self.assertFalse(first.any())  # fade is still 0
        for _ in range(5):
            frame = player.advance()
        self.assertIs(player.state, ViewState.NORMAL)
        np.testing.assert_array_equal(frame, player.scene.frame(player.animator.color_offset))

    def test_skip_and_recolor(self):
        player = ScenePlayer(make_builder(seed=9), AnimationSettings(fade_step=0.5))
        for _ in range(4):
            player.advance()
        scene = player.scene
        self.assertTrue(player.recolor())
        self.assertIs(player.scene.index_image, scene.index_image)
        player.skip()
        player.advance()
        self.assertIsNot(player.scene, scene)
        self.assertEqual(player.animator.scenes, 2)


if __name__ == "__main__":
    unittest.main()
