from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
import math
from typing import Any, Callable, Iterator, Mapping

from .errors import BadCoordinate
from .transform import DEG_TO_RAD, rotate_about


Accumulator = Callable[["AttributeContext", str, Any], None]
AnimValue = float | tuple[float, ...]


@dataclass(frozen=True)
class AttrSpec:
    """Registry entry for one transform/behavior key.

    ``components`` is 0 for keys that cannot be animated, 1 for scalars and 2
    for vectors.
    """

    propagates: bool = True
    accumulate: Accumulator | None = None
    order: int = 3
    default_from: AnimValue | None = None
    default_to: AnimValue | None = None
    components: int = 0

    @property
    def animatable(self) -> bool:
        return self.components > 0


def _numeric(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise BadCoordinate(f"{key} must be numeric, got {value!r}")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise BadCoordinate(f"{key} must be numeric, got {value!r}") from exc
    if not math.isfinite(out):
        raise BadCoordinate(f"{key} must be finite, got {value!r}")
    return out


def _vector(value: Any, key: str) -> tuple[float, float]:
    if isinstance(value, Mapping):
        return _numeric(value.get("x", 0.0), key), _numeric(value.get("y", 0.0), key)
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return _numeric(value[0], key), _numeric(value[1], key)
    raise BadCoordinate(f"{key} must be a 2-element vector, got {value!r}")


def _scale(ctx: "AttributeContext", key: str, value: Any) -> None:
    v = _numeric(value, key)
    for name in ("offsetX", "offsetY", "scaleX", "scaleY"):
        if name in ctx:
            ctx[name] = ctx[name] * v
    ctx["scale"] = ctx.get("scale", 1.0) * v


def _scale_axis(ctx: "AttributeContext", key: str, value: Any) -> None:
    v = _numeric(value, key)
    offset = "offsetX" if key == "scaleX" else "offsetY"
    if offset in ctx:
        ctx[offset] = ctx[offset] * v
    ctx[key] = ctx.get(key, ctx.get("scale", 1.0)) * v


def _rotate(ctx: "AttributeContext", key: str, value: Any) -> None:
    angle = _numeric(value, key)
    if key == "rotationDeg":
        angle *= DEG_TO_RAD
    if "offsetX" in ctx or "offsetY" in ctx:
        ox, oy = rotate_about(ctx.get("offsetX", 0.0), ctx.get("offsetY", 0.0), 0.0, 0.0, angle)
        ctx["offsetX"] = ox
        ctx["offsetY"] = oy
    ctx["rotation"] = ctx.get("rotation", 0.0) + angle


def _offset(ctx: "AttributeContext", key: str, value: Any) -> None:
    ctx[key] = ctx.get(key, 0.0) + _numeric(value, key)


def _pivot(ctx: "AttributeContext", key: str, value: Any) -> None:
    ctx[key] = _numeric(value, key)


def _shift(ctx: "AttributeContext", key: str, value: Any) -> None:
    dx, dy = _vector(value, key)
    ctx["offsetX"] = ctx.get("offsetX", 0.0) + dx
    ctx["offsetY"] = ctx.get("offsetY", 0.0) + dy


POLYGON_ATTR: dict[str, AttrSpec] = {
    "scale": AttrSpec(accumulate=_scale, order=0, default_from=1.0, default_to=1.0, components=1),
    "scaleX": AttrSpec(accumulate=_scale_axis, order=0, default_from=1.0, default_to=1.0, components=1),
    "scaleY": AttrSpec(accumulate=_scale_axis, order=0, default_from=1.0, default_to=1.0, components=1),
    "rotation": AttrSpec(accumulate=_rotate, order=1, default_from=0.0, default_to=0.0, components=1),
    "rotationDeg": AttrSpec(accumulate=_rotate, order=1, default_from=0.0, default_to=0.0, components=1),
    "offsetX": AttrSpec(accumulate=_offset, order=2, default_from=0.0, default_to=0.0, components=1),
    "offsetY": AttrSpec(accumulate=_offset, order=2, default_from=0.0, default_to=0.0, components=1),
    "shift": AttrSpec(accumulate=_shift, order=2, default_from=(0.0, 0.0), default_to=(0.0, 0.0), components=2),
    "refPointX": AttrSpec(accumulate=_pivot),
    "refPointY": AttrSpec(accumulate=_pivot),
    "alpha": AttrSpec(default_from=1.0, default_to=1.0, components=1),
    "refPoints": AttrSpec(propagates=False),
    "points": AttrSpec(propagates=False),
    "polygon": AttrSpec(propagates=False),
    "childs": AttrSpec(propagates=False),
}

_DEFAULT_SPEC = AttrSpec()


def attr_spec(key: str) -> AttrSpec:
    return POLYGON_ATTR.get(key, _DEFAULT_SPEC)


def propagates(key: str) -> bool:
    return attr_spec(key).propagates


class AttributeContext(MutableMapping[str, Any]):
    """Inherited attribute set visible at one node of the shape tree.

    Siblings get independent copies (``sibling_copy``); a node and its children
    share one instance that ``fold`` mutates in place.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"AttributeContext({self._values!r})"

    def apply(self, key: str, value: Any) -> None:
        spec = attr_spec(key)
        if spec.accumulate is None:
            self._values[key] = value
        else:
            spec.accumulate(self, key, value)

    def fold(self, node: Mapping[str, Any]) -> None:
        # Scale, then rotation, then offsets; other keys keep declaration order.
        for key in sorted(node, key=lambda k: attr_spec(k).order):
            self.apply(key, node[key])

    def sibling_copy(self) -> "AttributeContext":
        return AttributeContext({k: v for k, v in self._values.items() if propagates(k)})

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)
