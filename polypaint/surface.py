from __future__ import annotations

from typing import Any

import numpy as np

from .errors import NoDrawableSurface
from .raster import RasterSink
from .sink import DrawingSink


class SurfaceRegistry:
    """Named drawing surfaces, looked up by identifier at paint time."""

    _surfaces: dict[str, DrawingSink] = {}

    @classmethod
    def register(cls, name: str, sink: DrawingSink) -> None:
        if not name or not isinstance(name, str):
            raise ValueError("surface name must be a non-empty string")
        cls._surfaces[name] = sink

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._surfaces.pop(name, None)

    @classmethod
    def get(cls, name: str) -> DrawingSink | None:
        return cls._surfaces.get(name)

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._surfaces)


def acquire_sink(target: Any) -> DrawingSink:
    """Resolves a paint target to a drawing sink.

    Accepts a sink, an ``H x W x 4`` uint8 numpy canvas, or the name of a
    registered surface. Closed sinks count as missing.
    """
    sink: Any
    if isinstance(target, str):
        sink = SurfaceRegistry.get(target)
        if sink is None:
            raise NoDrawableSurface(f"no surface registered as {target!r}")
    elif isinstance(target, np.ndarray):
        try:
            sink = RasterSink.wrap(target)
        except ValueError as exc:
            raise NoDrawableSurface(str(exc)) from exc
    else:
        sink = target
    if sink is None or not isinstance(sink, DrawingSink):
        raise NoDrawableSurface(f"paint target is not a drawing surface: {target!r}")
    if getattr(sink, "closed", False):
        raise NoDrawableSurface("drawing surface has been closed")
    return sink
