"""
Animation: the fade-in → cycle → fade-out loop, and composing a frame from an
index image and a window of the doubled color table.
The image never changes while it is shown; only the color window moves.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

if TYPE_CHECKING:
    from .palettes import ColorTable

logger = logging.getLogger(__name__)


class ViewState(enum.Enum):
    CALC = "calc"          # compute a new drawing (black screen)
    FADE_IN = "fade_in"
    NORMAL = "normal"
    FADE_OUT = "fade_out"


@dataclass(frozen=True)
class AnimationSettings:
    fps: int = 30
    ticks_per_frame: int = 2
    hold_seconds: float = 12
    fade_step: float = 0.05

    @property
    def reset_value(self) -> int:
        """Counter value after which the drawing fades out (720 at the defaults)."""
        return int(self.hold_seconds * self.fps * self.ticks_per_frame)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "AnimationSettings":
        a = config.get("animation", {})
        defaults = cls()
        return cls(
            fps=int(a.get("fps", defaults.fps)),
            ticks_per_frame=int(a.get("ticks_per_frame", defaults.ticks_per_frame)),
            hold_seconds=float(a.get("hold_seconds", defaults.hold_seconds)),
            fade_step=float(a.get("fade_step", defaults.fade_step)),
        )


class Animator:
    """
    Frame-by-frame state machine. on_new_scene is called whenever a new drawing
    is needed (first frame, after fading out, after skip()); on_recolor when
    only the color table should change. Both are expected to finish synchronously.
    """

    def __init__(
        self,
        settings: AnimationSettings | None = None,
        *,
        on_new_scene: Callable[[], None],
        on_recolor: Callable[[], None] | None = None,
    ):
        self.settings = settings or AnimationSettings()
        self._on_new_scene = on_new_scene
        self._on_recolor = on_recolor
        self.state = ViewState.CALC
        self.fade = 0.0
        self.counter = 0
        self.frames = 0
        self.scenes = 0
        self._needs_scene = True

    @property
    def color_offset(self) -> int:
        """Start of the 256-entry window into the doubled color table."""
        return self.counter % 256

    def _start_scene(self) -> None:
        self._on_new_scene()
        self.scenes += 1
        self.counter = 0
        self.state = ViewState.FADE_IN
        logger.debug("Scene %d ready, fading in", self.scenes)

    def step(self) -> ViewState:
        """Advance one frame; returns the state to draw."""
        self.frames += 1
        if self.state is ViewState.CALC:
            if self._needs_scene:
                # stays set if the build raises, so the next step asks again
                self._start_scene()
                self._needs_scene = False
            return self.state

        s = self.settings
        if self.state is ViewState.FADE_IN:
            self.fade += s.fade_step
            if self.fade >= 1:
                self.fade = 1.0
                self.state = ViewState.NORMAL
        elif self.state is ViewState.FADE_OUT:
            self.fade -= s.fade_step
            if self.fade <= 0:
                self.fade = 0.0
                self._start_scene()
        elif self.state is ViewState.NORMAL:
            if self.counter > s.reset_value:
                self.state = ViewState.FADE_OUT

        self.counter += s.ticks_per_frame
        return self.state

    def skip(self) -> None:
        """Drop the current drawing; the next step() computes a new one."""
        self.state = ViewState.CALC
        self._needs_scene = True
        self.fade = 0.0

    def recolor(self) -> bool:
        """New color table for the current drawing (only while fully shown). True if applied."""
        if self.state is not ViewState.NORMAL or self._on_recolor is None:
            return False
        self._on_recolor()
        self.counter = 0
        return True


def compose_frame(
    index_image: np.ndarray,
    table: ColorTable,
    offset: int = 0,
    fade: float = 1.0,
) -> np.ndarray:
    """
    RGB frame (H, W, 3) uint8: pixel value i shows table entry offset + i,
    then everything is scaled by fade (0 = black, 1 = full).
    """
    frame = table.window(offset)[index_image]
    if fade >= 1.0:
        return frame
    frame = frame.astype(np.float64) * max(0.0, fade)
    return np.clip(frame, 0, 255).astype(np.uint8)
