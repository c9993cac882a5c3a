from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Mapping, Sequence

from .errors import BadCoordinate, BadReference, NoReferencePoint, ReferenceDepthExceeded


CLOSE_TOKEN = "close"
RELATIVE_MARKER = "@"
DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def axis(self, name: str) -> float:
        if name == "x":
            return self.x
        if name == "y":
            return self.y
        raise ValueError(f"unknown axis: {name}")

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_pair(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 2


class PointResolver:
    """Turns point/coordinate references into concrete points for one paint pass.

    ``ref_points`` is the pass-wide anchor table. Named sources are recorded in
    it as soon as they resolve, so later references in the same pass, in any
    subtree, can use them. Entries are never removed.
    """

    def __init__(self, ref_points: dict[str, Point] | None = None, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        self.ref_points: dict[str, Point] = ref_points if ref_points is not None else {}
        self.max_depth = max_depth
        self._depth = 0

    def resolve_points(self, refs: Sequence[Any], prior: list[Point] | None = None) -> list[Point]:
        resolved: list[Point] = [] if prior is None else prior
        for ref in refs:
            point = self.resolve_point(ref, resolved)
            resolved.append(point)
            self.record(ref, point)
        return resolved

    def resolve_anchors(self, anchors: Any) -> None:
        """Resolves a ``refPoints`` declaration: a list of named sources or a name -> source mapping."""
        if isinstance(anchors, Mapping):
            for name, ref in anchors.items():
                self.ref_points[str(name)] = self.resolve_point(ref, [])
        elif isinstance(anchors, (list, tuple)):
            self.resolve_points(anchors)
        else:
            raise BadReference(f"refPoints must be a list or mapping, got {anchors!r}")

    def record(self, ref: Any, point: Point) -> None:
        if isinstance(ref, Mapping):
            name = ref.get("name")
            if isinstance(name, str) and name:
                self.ref_points[name] = point

    def resolve_point(self, ref: Any, prior: list[Point] | None = None) -> Point:
        self._enter(ref)
        try:
            return self._resolve_point(ref, prior)
        finally:
            self._depth -= 1

    def resolve_coord(self, ref: Any, axis: str, last: Point | None) -> float:
        self._enter(ref)
        try:
            return self._resolve_coord(ref, axis, last)
        finally:
            self._depth -= 1

    def _enter(self, ref: Any) -> None:
        if self._depth >= self.max_depth:
            raise ReferenceDepthExceeded(f"reference nesting deeper than {self.max_depth}: {ref!r}")
        self._depth += 1

    def _resolve_point(self, ref: Any, prior: list[Point] | None) -> Point:
        if isinstance(ref, str):
            if ref == CLOSE_TOKEN:
                if not prior:
                    raise NoReferencePoint("'close' requires a previous point in the same shape")
                return prior[0]
            if ref in self.ref_points:
                return self.ref_points[ref]
            raise BadReference(f"Bad point: unknown reference point {ref!r}")
        if callable(ref):
            raise BadReference("Bad point: computed coordinates are not supported")
        last = prior[-1] if prior else None
        if _is_pair(ref):
            return Point(self.resolve_coord(ref[0], "x", last), self.resolve_coord(ref[1], "y", last))
        if isinstance(ref, Mapping):
            return Point(self.resolve_coord(ref, "x", last), self.resolve_coord(ref, "y", last))
        raise BadReference(f"Bad point: {ref!r}")

    def _resolve_coord(self, ref: Any, axis: str, last: Point | None) -> float:
        if _is_number(ref):
            value = float(ref)
            if not math.isfinite(value):
                raise BadCoordinate(f"Bad coordinate: {ref!r}")
            return value
        if isinstance(ref, str):
            return _parse_coord(ref, axis, last)
        if callable(ref):
            raise BadReference("Bad coordinate: computed coordinates are not supported")
        if isinstance(ref, Mapping):
            if axis in ref:
                return self.resolve_coord(ref[axis], axis, last)
            delta_key = "d" + axis
            if delta_key in ref:
                base = self.resolve_point(ref["ref"], None) if "ref" in ref else last
                if base is None:
                    raise NoReferencePoint(f"{delta_key} requires a reference point")
                return base.axis(axis) + self.resolve_coord(ref[delta_key], axis, base)
        raise BadCoordinate(f"Bad coordinate: {ref!r}")


def _parse_coord(text: str, axis: str, last: Point | None) -> float:
    base = 0.0
    body = text.strip()
    if body.startswith(RELATIVE_MARKER):
        if last is None:
            raise NoReferencePoint(f"relative coordinate {text!r} requires a previous point")
        base = last.axis(axis)
        body = body[len(RELATIVE_MARKER):].strip()
        if not body:
            return base
    try:
        value = float(body)
    except ValueError as exc:
        raise BadCoordinate(f"Bad coordinate: {text!r}") from exc
    if not math.isfinite(value):
        raise BadCoordinate(f"Bad coordinate: {text!r}")
    return base + value
