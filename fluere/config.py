"""
Load and expose app config (YAML). Used by the scene builder and the CLI to get
scene size, knot count, palette file, render workers and animation timing.
"""
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Sane range for the knot count coming from config / command line
MIN_KNOTS = 1
MAX_KNOTS = 50


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML. Path is optional; defaults to config/default.yaml."""
    if config_path is None:
        config_path = _project_root() / "config" / "default.yaml"
    path = Path(config_path)
    if not path.exists():
        return _defaults()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config must be a mapping, got {type(data).__name__}")
    return _merge(_defaults(), data)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Section-wise merge: keys missing from an overridden section keep their defaults."""
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = {**out[key], **value}
        else:
            out[key] = value
    return out


def _defaults() -> dict[str, Any]:
    return {
        "scene": {
            "width": 640,
            "height": 480,
            "num_knots": 4,
        },
        "palettes": {"file": None},
        "render": {"workers": 4},
        "animation": {
            "fps": 30,
            "ticks_per_frame": 2,
            "hold_seconds": 12,
            "fade_step": 0.05,
        },
        "seed": None,
    }


def resolve_scene_config(config: dict[str, Any]) -> dict[str, Any]:
    """
    Scene settings with the knot count clamped to [MIN_KNOTS, MAX_KNOTS]
    and sizes coerced to int. The drawing engine itself rejects bad values;
    this is the forgiving layer in front of it.
    """
    scene = {**_defaults()["scene"], **config.get("scene", {})}
    scene["width"] = int(scene["width"])
    scene["height"] = int(scene["height"])
    n = int(scene["num_knots"])
    clamped = max(MIN_KNOTS, min(MAX_KNOTS, n))
    if clamped != n:
        logger.warning("num_knots=%d out of range, using %d", n, clamped)
    scene["num_knots"] = clamped
    return scene


def get_palette_path(config: dict[str, Any]) -> Path | None:
    """Palette file from config (relative to project root if needed); None = bundled palettes."""
    f = config.get("palettes", {}).get("file")
    if not f:
        return None
    p = Path(f)
    if not p.is_absolute():
        p = _project_root() / p
    return p
