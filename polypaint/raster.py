from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np
import torch
from PIL import Image, ImageColor


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]
TRANSPARENT: RGBA = (0, 0, 0, 0)
_MAX_ARC_SEGMENTS = 720


def new_canvas(width: int, height: int, color: RGBA = TRANSPARENT) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas dimensions must be > 0")
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def parse_color(value: Any) -> RGBA | None:
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        r, g, b = (int(c) for c in value[:3])
        a = int(value[3]) if len(value) == 4 else 255
        return (r, g, b, a)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value == "none":
        return None
    try:
        r, g, b, a = ImageColor.getcolor(value, "RGBA")
    except ValueError:
        return None
    return (r, g, b, a)


def blend_span(dst: np.ndarray, y: int, x0: int, x1: int, color: RGBA) -> None:
    """Source-over blends ``color`` into row ``y`` for columns ``x0..x1`` inclusive."""
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    a = color[3] / 255.0
    if a <= 0.0:
        return
    segment = dst[y, xa : xb + 1]
    inv = 1.0 - a
    src = np.asarray(color[0:3], dtype=np.float32)
    dst_a = segment[:, 3:4].astype(np.float32) / 255.0
    out_a = a + dst_a * inv
    rgb = (src * a + segment[:, :3].astype(np.float32) * dst_a * inv) / np.maximum(out_a, 1e-6)
    segment[:, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    segment[:, 3] = np.clip(np.rint(out_a[:, 0] * 255.0), 0, 255).astype(np.uint8)


def fill_polygons(dst: np.ndarray, polygons: list[list[tuple[float, float]]], color: RGBA) -> None:
    """Even-odd scanline fill sampled at pixel centres; every polygon is implicitly closed."""
    edges: list[tuple[float, float, float, float]] = []
    for pts in polygons:
        if len(pts) < 3:
            continue
        for (x0, y0), (x1, y1) in zip(pts, pts[1:] + pts[:1]):
            if y0 != y1:
                edges.append((x0, y0, x1, y1))
    if not edges:
        return
    min_y = max(0, int(math.floor(min(min(e[1], e[3]) for e in edges))))
    max_y = min(dst.shape[0] - 1, int(math.ceil(max(max(e[1], e[3]) for e in edges))))
    for y in range(min_y, max_y + 1):
        sy = y + 0.5
        xs: list[float] = []
        for x0, y0, x1, y1 in edges:
            if min(y0, y1) <= sy < max(y0, y1):
                xs.append(x0 + (sy - y0) * (x1 - x0) / (y1 - y0))
        xs.sort()
        for xa, xb in zip(xs[0::2], xs[1::2]):
            start = int(math.ceil(xa - 0.5))
            end = int(math.floor(xb - 0.5))
            if end >= start:
                blend_span(dst, y, start, end, color)


def draw_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    radius = max(0, width // 2)
    while True:
        for yy in range(y0 - radius, y0 + radius + 1):
            blend_span(dst, yy, x0 - radius, x0 + radius, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def arc_points(
    cx: float,
    cy: float,
    radius: float,
    start_angle: float,
    end_angle: float,
    anticlockwise: bool,
) -> list[tuple[float, float]]:
    full = 2.0 * math.pi
    sweep = (start_angle - end_angle) if anticlockwise else (end_angle - start_angle)
    if sweep >= full:
        sweep = full
    else:
        sweep %= full
    if anticlockwise:
        sweep = -sweep
    steps = max(8, min(_MAX_ARC_SEGMENTS, int(math.ceil(abs(sweep) * max(radius, 1.0) / 2.0))))
    return [
        (cx + radius * math.cos(start_angle + sweep * i / steps), cy + radius * math.sin(start_angle + sweep * i / steps))
        for i in range(steps + 1)
    ]


@dataclass
class RasterSink:
    """Drawing sink backed by an ``H x W x 4`` uint8 RGBA canvas."""

    width: int
    height: int
    background: RGBA = TRANSPARENT
    canvas: np.ndarray | None = None
    closed: bool = False
    _properties: dict[str, Any] = field(default_factory=dict)
    _subpaths: list[list[tuple[float, float]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.canvas is None:
            self.canvas = new_canvas(self.width, self.height, self.background)
        else:
            if self.canvas.ndim != 3 or self.canvas.shape[2] != 4 or self.canvas.dtype != np.uint8:
                raise ValueError("canvas must be an H x W x 4 uint8 array")
            self.height, self.width = int(self.canvas.shape[0]), int(self.canvas.shape[1])
        self._properties.update(
            {"fillStyle": (0, 0, 0, 255), "strokeStyle": (0, 0, 0, 255), "lineWidth": 1.0, "globalAlpha": 1.0}
        )

    @classmethod
    def wrap(cls, canvas: np.ndarray) -> "RasterSink":
        if canvas.ndim != 3:
            raise ValueError("canvas must be an H x W x 4 uint8 array")
        return cls(width=int(canvas.shape[1]), height=int(canvas.shape[0]), canvas=canvas)

    def set_property(self, name: str, value: Any) -> None:
        if name in ("fillStyle", "strokeStyle"):
            color = parse_color(value)
            if color is None:
                LOGGER.warning("ignoring unparseable %s: %r", name, value)
                return
            self._properties[name] = color
        elif name in ("lineWidth", "globalAlpha"):
            try:
                number = float(value)
            except (TypeError, ValueError):
                LOGGER.warning("ignoring non-numeric %s: %r", name, value)
                return
            if name == "globalAlpha":
                number = min(1.0, max(0.0, number))
            self._properties[name] = number
        else:
            self._properties[name] = value

    def get_property(self, name: str) -> Any:
        return self._properties.get(name)

    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([(x, y)])

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((x, y))

    def arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        if radius < 0:
            raise ValueError("arc radius must be >= 0")
        pts = arc_points(cx, cy, radius, start_angle, end_angle, anticlockwise)
        if not self._subpaths:
            self._subpaths.append([])
        self._subpaths[-1].extend(pts)

    def fill(self) -> None:
        assert self.canvas is not None
        fill_polygons(self.canvas, self._subpaths, self._paint_color("fillStyle"))

    def stroke(self) -> None:
        assert self.canvas is not None
        color = self._paint_color("strokeStyle")
        width = max(1, int(round(float(self._properties["lineWidth"]))))
        for pts in self._subpaths:
            ipts = [(int(round(x)), int(round(y))) for x, y in pts]
            for (x0, y0), (x1, y1) in zip(ipts, ipts[1:]):
                draw_segment(self.canvas, x0, y0, x1, y1, color, width)

    def clear(self, width: int, height: int) -> None:
        if width > 0 and height > 0 and (width != self.width or height != self.height):
            self.width = width
            self.height = height
            self.canvas = new_canvas(width, height, self.background)
        else:
            assert self.canvas is not None
            self.canvas[:, :] = self.background
        self._subpaths = []

    def to_image(self) -> Image.Image:
        assert self.canvas is not None
        return Image.fromarray(self.canvas)

    def to_tensor(self) -> torch.Tensor:
        assert self.canvas is not None
        return torch.from_numpy(self.canvas.copy())

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        self.to_image().save(out, format="PNG")
        return out

    def _paint_color(self, name: str) -> RGBA:
        r, g, b, a = self._properties[name]
        alpha = float(self._properties["globalAlpha"])
        return (r, g, b, max(0, min(255, int(round(a * alpha)))))
