from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from .attributes import AttributeContext
from .coordinates import DEFAULT_MAX_DEPTH, Point, PointResolver
from .sink import ALPHA_PROPERTY, FILL_PROPERTY, DrawingSink, backend_attribute
from .surface import acquire_sink
from .transform import angle_of, scale_factor, transform_point


LOGGER = logging.getLogger(__name__)

PathOp = tuple[Any, ...]
SHAPES = ("polygon", "rect", "circle", "arc")
DEFAULT_ALPHA = 1.0


def _positive(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return float(value)


def _is_composite(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping))


def has_fill(attrs: Mapping[str, Any]) -> bool:
    return any(backend_attribute(key) == FILL_PROPERTY and value for key, value in attrs.items())


class Polygons:
    """Evaluates shape trees and paints them on a drawing sink.

    Each call to ``paint`` (or ``begin_pass``) starts a pass with its own empty
    reference-point table.
    """

    def __init__(self, figures: Iterable[Any] | None = None, *, max_reference_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.figures: list[Any] = list(figures or [])
        self.max_reference_depth = max_reference_depth
        self.sink: DrawingSink | None = None
        self.resolver = PointResolver(max_depth=max_reference_depth)
        self._alpha: float = DEFAULT_ALPHA

    @property
    def ref_points(self) -> dict[str, Point]:
        return self.resolver.ref_points

    def add(self, node: Any) -> "Polygons":
        self.figures.append(node)
        return self

    def paint(self, target: Any, data: Any = None, context: AttributeContext | None = None) -> None:
        if data is None:
            data = self.figures
        self.begin_pass(acquire_sink(target))
        self.evaluate(data, context if context is not None else AttributeContext())

    def begin_pass(self, sink: DrawingSink) -> None:
        self.sink = sink
        self.resolver = PointResolver(max_depth=self.max_reference_depth)
        self._alpha = DEFAULT_ALPHA

    def evaluate(self, data: Any, context: AttributeContext) -> None:
        if isinstance(data, (list, tuple)):
            for item in data:
                self.evaluate(item, context.sibling_copy())
        elif isinstance(data, Mapping):
            context.fold(data)
            self.paint_shape(context)
            childs = data.get("childs")
            if childs:
                self.evaluate(childs, context)

    def paint_shape(self, attrs: Mapping[str, Any]) -> None:
        if self.sink is None:
            raise RuntimeError("begin_pass must be called before paint_shape")
        # Geometry resolves fully before any sink call so a bad reference emits nothing.
        path = self.build_path(attrs)
        sink = self.sink

        for name, value in attrs.items():
            backend = backend_attribute(name)
            if backend is not None and value is not None and not _is_composite(value):
                sink.set_property(backend, value)
        # A sibling without alpha paints opaque, not with the previous sibling's alpha.
        alpha = attrs.get("alpha", DEFAULT_ALPHA)
        if alpha is None or _is_composite(alpha):
            alpha = DEFAULT_ALPHA
        if alpha != self._alpha:
            sink.set_property(ALPHA_PROPERTY, alpha)
            self._alpha = alpha

        sink.begin_path()
        for op in path:
            getattr(sink, op[0])(*op[1:])
        if has_fill(attrs):
            sink.fill()
        sink.stroke()

    def build_path(self, attrs: Mapping[str, Any]) -> list[PathOp]:
        anchors = attrs.get("refPoints")
        if anchors:
            self.resolver.resolve_anchors(anchors)

        shape = attrs.get("shape")
        if shape == "rect":
            return self._rect_path(attrs)
        if shape == "polygon":
            refs = attrs.get("points")
            if refs is None:
                refs = attrs.get("polygon")
            return self._polygon_path(attrs, refs or [])
        if shape in ("circle", "arc"):
            return self._arc_path(attrs, full_circle=shape == "circle")
        if shape is not None:
            LOGGER.debug("no geometry for shape %r", shape)
        return []

    def _rect_path(self, attrs: Mapping[str, Any]) -> list[PathOp]:
        position = attrs.get("position")
        width = _positive(attrs.get("width"))
        height = _positive(attrs.get("height"))
        if not position or width is None or height is None:
            return []
        origin = self.resolver.resolve_points([position])[0]
        x, y = origin.x, origin.y
        corners = [
            [x, y],
            [x + width, y],
            [x + width, y + height],
            [x, y + height],
            [x, y],
        ]
        return self._polygon_path(attrs, corners)

    def _polygon_path(self, attrs: Mapping[str, Any], refs: Any) -> list[PathOp]:
        if not isinstance(refs, (list, tuple)):
            refs = [refs]
        ops: list[PathOp] = []
        for i, point in enumerate(self.resolver.resolve_points(refs)):
            pt = transform_point(point, attrs)
            ops.append(("move_to" if i == 0 else "line_to", pt.x, pt.y))
        return ops

    def _arc_path(self, attrs: Mapping[str, Any], *, full_circle: bool) -> list[PathOp]:
        position = attrs.get("position")
        radius = _positive(attrs.get("radius"))
        if not position or radius is None:
            return []
        centre = transform_point(self.resolver.resolve_points([position])[0], attrs)
        if full_circle:
            start, end = 0.0, 2.0 * math.pi
        else:
            start = angle_of(attrs, "startAngle")
            end = angle_of(attrs, "endAngle")
        rot = angle_of(attrs, "rotation")
        return [("arc", centre.x, centre.y, radius * scale_factor(attrs), -start - rot, -end - rot, True)]
