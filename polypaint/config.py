from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import math
from pathlib import Path
import tomllib
from typing import Any

from .animation import Animation
from .coordinates import DEFAULT_MAX_DEPTH
from .errors import SceneConfigError
from .frame_rate import DEFAULT_FALLBACK_FPS
from .raster import RGBA, TRANSPARENT, RasterSink, parse_color


LOGGER = logging.getLogger(__name__)

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 360


@dataclass(frozen=True)
class RenderSettings:
    fps: int = DEFAULT_FALLBACK_FPS
    max_reference_depth: int = DEFAULT_MAX_DEPTH
    preserve_aspect_ratio: bool = True


@dataclass(frozen=True)
class Scene:
    name: str
    width: int
    height: int
    background: RGBA
    shapes: list[Any]
    animation: Animation | None = None
    settings: RenderSettings = field(default_factory=RenderSettings)

    def new_sink(self) -> RasterSink:
        return RasterSink(width=self.width, height=self.height, background=self.background)


def load_scene(path: str | Path) -> Scene:
    scene_path = Path(path)
    if not scene_path.exists():
        raise FileNotFoundError(f"scene file not found: {scene_path}")
    suffix = scene_path.suffix.lower()
    if suffix == ".json":
        try:
            raw = json.loads(scene_path.read_text())
        except json.JSONDecodeError as exc:
            raise SceneConfigError(f"{scene_path}: invalid JSON: {exc}") from exc
    elif suffix == ".toml":
        try:
            with scene_path.open("rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise SceneConfigError(f"{scene_path}: invalid TOML: {exc}") from exc
    else:
        raise SceneConfigError(f"unsupported scene format: {scene_path.suffix or '<none>'}")
    LOGGER.debug("loaded scene document %s", scene_path)
    return scene_from_dict(raw, default_name=scene_path.stem)


def scene_from_dict(raw: Any, *, default_name: str = "scene") -> Scene:
    if isinstance(raw, list):
        raw = {"shapes": raw}
    if not isinstance(raw, dict):
        raise SceneConfigError("scene document must be an object or a list of shapes")
    viewport = _expect_obj(raw.get("viewport", {}), "viewport")
    width = _positive_int(viewport.get("width", DEFAULT_WIDTH), "viewport.width")
    height = _positive_int(viewport.get("height", DEFAULT_HEIGHT), "viewport.height")

    background = TRANSPARENT
    if raw.get("background") is not None:
        color = parse_color(raw["background"])
        if color is None:
            raise SceneConfigError(f"background is not a color: {raw['background']!r}")
        background = color

    shapes = raw.get("shapes", [])
    if isinstance(shapes, dict):
        shapes = [shapes]
    if not isinstance(shapes, list):
        raise SceneConfigError("shapes must be a list or an object")

    animation = None
    if raw.get("animate") is not None:
        animation = Animation.from_descriptor(_expect_obj(raw["animate"], "animate"))

    render = _expect_obj(raw.get("render", {}), "render")
    settings = RenderSettings(
        fps=_positive_int(render.get("fps", DEFAULT_FALLBACK_FPS), "render.fps"),
        max_reference_depth=_positive_int(
            render.get("max_reference_depth", DEFAULT_MAX_DEPTH), "render.max_reference_depth"
        ),
        preserve_aspect_ratio=bool(render.get("preserve_aspect_ratio", True)),
    )
    return Scene(
        name=str(raw.get("name", default_name)),
        width=width,
        height=height,
        background=background,
        shapes=shapes,
        animation=animation,
        settings=settings,
    )


def _expect_obj(value: Any, label: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SceneConfigError(f"{label} must be an object")
    return value


def _positive_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value != int(value):
        raise SceneConfigError(f"{label} must be an integer, got {value!r}")
    if value <= 0:
        raise SceneConfigError(f"{label} must be > 0")
    return int(value)
