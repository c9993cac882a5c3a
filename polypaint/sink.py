from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


BACKEND_ATTRIBUTES: dict[str, str] = {
    "fillStyle": "fillStyle",
    "fill": "fillStyle",
    "strokeStyle": "strokeStyle",
    "stroke": "strokeStyle",
    "lineWidth": "lineWidth",
    "lineCap": "lineCap",
    "lineJoin": "lineJoin",
    "miterLimit": "miterLimit",
    "lineDashOffset": "lineDashOffset",
    "globalCompositeOperation": "globalCompositeOperation",
    "shadowBlur": "shadowBlur",
    "shadowColor": "shadowColor",
    "shadowOffsetX": "shadowOffsetX",
    "shadowOffsetY": "shadowOffsetY",
}

ALPHA_PROPERTY = "globalAlpha"
FILL_PROPERTY = "fillStyle"


def backend_attribute(name: str) -> str | None:
    """Backend property name for a painting key, or None when the key is not a backend attribute."""
    return BACKEND_ATTRIBUTES.get(name)


@runtime_checkable
class DrawingSink(Protocol):
    """Path and paint operations consumed by the shape painter."""

    width: int
    height: int

    def set_property(self, name: str, value: Any) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        ...

    def fill(self) -> None:
        ...

    def stroke(self) -> None:
        ...

    def clear(self, width: int, height: int) -> None:
        ...


@dataclass(frozen=True)
class Primitive:
    name: str
    args: tuple[float, ...] = ()
    style: tuple[tuple[str, Any], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"op": self.name}
        if self.args:
            out["args"] = list(self.args)
        if self.style:
            out["style"] = dict(self.style)
        return out


@dataclass
class RecordingSink:
    """Drawing sink that keeps an ordered log instead of drawing.

    Property assignments are state, not operations: ``fill`` and ``stroke``
    primitives carry a snapshot of the properties in effect.
    """

    width: int = 0
    height: int = 0
    operations: list[Primitive] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    closed: bool = False

    def set_property(self, name: str, value: Any) -> None:
        self.properties[name] = value

    def begin_path(self) -> None:
        self.operations.append(Primitive("begin_path"))

    def move_to(self, x: float, y: float) -> None:
        self.operations.append(Primitive("move_to", (x, y)))

    def line_to(self, x: float, y: float) -> None:
        self.operations.append(Primitive("line_to", (x, y)))

    def arc(
        self,
        cx: float,
        cy: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        anticlockwise: bool = False,
    ) -> None:
        self.operations.append(
            Primitive("arc", (cx, cy, radius, start_angle, end_angle, 1.0 if anticlockwise else 0.0))
        )

    def fill(self) -> None:
        self.operations.append(Primitive("fill", style=self._style()))

    def stroke(self) -> None:
        self.operations.append(Primitive("stroke", style=self._style()))

    def clear(self, width: int, height: int) -> None:
        self.operations.append(Primitive("clear", (width, height)))

    def names(self) -> list[str]:
        return [op.name for op in self.operations]

    def to_list(self) -> list[dict[str, Any]]:
        return [op.to_dict() for op in self.operations]

    def _style(self) -> tuple[tuple[str, Any], ...]:
        return tuple(sorted(self.properties.items()))
