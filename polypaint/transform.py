from __future__ import annotations

import math
from typing import Any, Mapping

from .coordinates import Point


DEG_TO_RAD = math.pi / 180.0


def angle_of(attrs: Mapping[str, Any], prop: str, default: float = 0.0) -> float:
    """Reads an angle in radians from ``prop`` or, failing that, degrees from ``prop + 'Deg'``."""
    if prop in attrs:
        return float(attrs[prop])
    deg_prop = prop + "Deg"
    if deg_prop in attrs:
        return DEG_TO_RAD * float(attrs[deg_prop])
    return default


def scale_factors(attrs: Mapping[str, Any]) -> tuple[float, float]:
    uniform = float(attrs.get("scale", 1.0))
    sx = float(attrs.get("scaleX", uniform))
    sy = float(attrs.get("scaleY", uniform))
    return sx, sy


def scale_factor(attrs: Mapping[str, Any]) -> float:
    sx, sy = scale_factors(attrs)
    return (abs(sx) + abs(sy)) / 2.0


def rotate_about(x: float, y: float, cx: float, cy: float, angle: float) -> tuple[float, float]:
    # Polar form: the angle is subtracted from the point's polar angle around the pivot.
    dx = x - cx
    dy = y - cy
    h = math.hypot(dx, dy)
    a = math.atan2(dy, dx) - angle
    return cx + h * math.cos(a), cy + h * math.sin(a)


def transform_point(point: Point, attrs: Mapping[str, Any]) -> Point:
    """Maps a resolved point to device coordinates.

    Scale then rotation, both about ``(refPointX, refPointY)``, then translation
    by ``(offsetX, offsetY)``. Missing keys are identity.
    """
    x = point.x
    y = point.y
    sx, sy = scale_factors(attrs)
    rx = float(attrs.get("refPointX", 0.0))
    ry = float(attrs.get("refPointY", 0.0))
    rot = angle_of(attrs, "rotation")

    if sx != 1.0:
        x = rx + (x - rx) * sx
    if sy != 1.0:
        y = ry + (y - ry) * sy

    if rot:
        x, y = rotate_about(x, y, rx, ry, rot)

    x += float(attrs.get("offsetX", 0.0))
    y += float(attrs.get("offsetY", 0.0))
    return Point(x, y)
