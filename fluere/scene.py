"""
Scenes: one knot-field drawing + its index image + a color table.
SceneBuilder draws everything random from one injected RandomSource;
ScenePlayer drives the Animator and composes frames.
"""
from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Any

import numpy as np

from .animation import AnimationSettings, Animator, ViewState, compose_frame
from .config import get_palette_path, resolve_scene_config
from .drawing import FieldStyle, KnotField, build_knot_field, fill_pixels
from .drawing.knots import check_dimensions, check_num_knots
from .errors import InvalidParameterError
from .palettes import ColorTable, PaletteStore, build_color_table, load_default_palettes, load_palette_file
from .random_utils import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Scene:
    """A finished drawing. Safe to share read-only between threads."""
    field: KnotField
    index_image: np.ndarray
    color_table: ColorTable

    @property
    def width(self) -> int:
        return self.field.width

    @property
    def height(self) -> int:
        return self.field.height

    def frame(self, offset: int = 0, fade: float = 1.0) -> np.ndarray:
        return compose_frame(self.index_image, self.color_table, offset, fade)

    def with_color_table(self, table: ColorTable) -> "Scene":
        return dataclasses.replace(self, color_table=table)

    def summary(self) -> dict[str, Any]:
        """Serialize the scene parameters for logging."""
        return {
            "width": self.width,
            "height": self.height,
            "num_knots": self.field.num_knots,
            "style1": self.field.style1.value,
            "style2": self.field.style2.value,
            "leaf_discrete": self.field.leaf_discrete,
            "rays_discrete": self.field.rays_discrete,
            "palette": self.color_table.palette_name,
            "bands": self.color_table.band_count,
            "randomize": self.color_table.randomize,
            "stripes": self.color_table.stripes,
            "distinct_values": int(np.unique(self.index_image).size),
        }


class SceneBuilder:
    """
    Builds scenes: random styles (unless fixed), a knot field, the index image,
    then a color table (random randomize/stripes flags and palette, unless the
    palette is fixed). A new_scene() call cancels any fill still in flight
    from an earlier call.
    """

    def __init__(
        self,
        palettes: PaletteStore,
        *,
        width: int,
        height: int,
        num_knots: int = 4,
        workers: int = 1,
        rng: RandomSource | None = None,
        palette_name: str | None = None,
    ):
        check_dimensions(width, height)
        check_num_knots(num_knots)
        if len(palettes) == 0:
            raise InvalidParameterError("need at least one palette", name="palettes", value=0)
        if palette_name is not None and palettes.get(palette_name) is None:
            raise InvalidParameterError(
                f"no palette named {palette_name!r} (have: {', '.join(palettes.names())})",
                name="palette_name",
                value=palette_name,
            )
        self.palettes = palettes
        self.width = width
        self.height = height
        self.num_knots = num_knots
        self.workers = workers
        self.rng = rng or RandomSource.from_entropy()
        self.palette_name = palette_name
        self._lock = threading.Lock()
        self._in_flight: threading.Event | None = None

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        *,
        palettes: PaletteStore | None = None,
        rng: RandomSource | None = None,
        palette_name: str | None = None,
    ) -> "SceneBuilder":
        scene = resolve_scene_config(config)
        if palettes is None:
            path = get_palette_path(config)
            palettes = load_palette_file(path) if path else load_default_palettes()
        if rng is None:
            rng = RandomSource(config.get("seed"))
        return cls(
            palettes,
            width=scene["width"],
            height=scene["height"],
            num_knots=scene["num_knots"],
            workers=int(config.get("render", {}).get("workers", 1)),
            rng=rng,
            palette_name=palette_name,
        )

    def cancel(self) -> None:
        """Stop the fill in flight, if any (it raises RenderCancelled in its caller)."""
        with self._lock:
            if self._in_flight is not None:
                self._in_flight.set()

    def _draw_style(self, style: FieldStyle | str | None) -> FieldStyle:
        if style is not None:
            return FieldStyle.coerce(style)
        styles = list(FieldStyle)
        return styles[self.rng.randrange(len(styles))]

    def make_color_table(self) -> ColorTable:
        """Random randomize/stripes flags and palette (draw order fixed)."""
        with self._lock:
            randomize = self.rng.coinflip()
            stripes = self.rng.coinflip()
            if self.palette_name is not None:
                palette = self.palettes.get(self.palette_name)
            else:
                palette = self.palettes.pick(self.rng)
            return build_color_table(palette, randomize=randomize, stripes=stripes, rng=self.rng)

    def new_scene(
        self,
        style1: FieldStyle | str | None = None,
        style2: FieldStyle | str | None = None,
    ) -> Scene:
        cancel_event = threading.Event()
        with self._lock:
            if self._in_flight is not None:
                self._in_flight.set()
            self._in_flight = cancel_event
            s1 = self._draw_style(style1)
            s2 = self._draw_style(style2)
            field = build_knot_field(self.width, self.height, self.num_knots, s1, s2, self.rng)
        try:
            image = fill_pixels(field, workers=self.workers, cancel_event=cancel_event)
        finally:
            with self._lock:
                if self._in_flight is cancel_event:
                    self._in_flight = None
        scene = Scene(field=field, index_image=image, color_table=self.make_color_table())
        logger.info(
            "New scene %dx%d: %d knots, %s/%s, palette %s",
            self.width, self.height, self.num_knots, s1.value, s2.value, scene.color_table.palette_name,
        )
        return scene

    def recolor(self, scene: Scene) -> Scene:
        """Same drawing, new color table."""
        return scene.with_color_table(self.make_color_table())


class ScenePlayer:
    """
    Runs the animation loop over scenes from a builder: each advance() steps the
    Animator and returns the frame to show (black while a drawing is computed).
    """

    def __init__(self, builder: SceneBuilder, settings: AnimationSettings | None = None):
        self.builder = builder
        self.scene: Scene | None = None
        self.animator = Animator(settings, on_new_scene=self._new_scene, on_recolor=self._recolor)

    def _new_scene(self) -> None:
        self.scene = self.builder.new_scene()

    def _recolor(self) -> None:
        if self.scene is not None:
            self.scene = self.builder.recolor(self.scene)

    @property
    def state(self) -> ViewState:
        return self.animator.state

    def skip(self) -> None:
        self.animator.skip()

    def recolor(self) -> bool:
        return self.animator.recolor()

    def advance(self) -> np.ndarray:
        state = self.animator.step()
        if self.scene is None or state is ViewState.CALC:
            return np.zeros((self.builder.height, self.builder.width, 3), dtype=np.uint8)
        fade = 1.0 if state is ViewState.NORMAL else self.animator.fade
        return self.scene.frame(self.animator.color_offset, fade)
