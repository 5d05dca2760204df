"""
Renderer contract the blobs draw through, plus an in-memory scene that keeps
the current shapes and labels so a frame can be sampled without a canvas.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

Point = Tuple[float, float]


class Renderer(Protocol):
    def size(self) -> Tuple[float, float]:
        ...

    def create_shape(self, points: Sequence[Point], color: str) -> int:
        ...

    def update_shape(
        self,
        handle: int,
        points: Optional[Sequence[Point]] = None,
        alpha: Optional[float] = None,
    ) -> None:
        ...

    def create_label(
        self, text: str, position: Point, font_size: float, color: str
    ) -> int:
        ...

    def update_label(
        self,
        handle: int,
        position: Optional[Point] = None,
        alpha: Optional[float] = None,
        opacity: Optional[float] = None,
    ) -> None:
        ...

    def bring_to_front(self, handle: int) -> None:
        ...

    def remove(self, handle: int) -> None:
        ...


@dataclass
class SceneItem:
    kind: str  # "shape" or "label"
    color: str
    alpha: float = 1.0
    opacity: float = 1.0
    points: Tuple[Point, ...] = ()
    position: Point = (0.0, 0.0)
    text: str = ""
    font_size: float = 16.0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind, "color": self.color, "alpha": self.alpha}
        if self.kind == "shape":
            data["points"] = [list(p) for p in self.points]
        else:
            data.update(
                text=self.text,
                position=list(self.position),
                opacity=self.opacity,
                fontSize=self.font_size,
            )
        return data


class Scene:
    """
    Renderer backed by a dict of items. Draw order is the insertion order of
    ``order``; ``bring_to_front`` moves a handle to the end.
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)
        self.items: Dict[int, SceneItem] = {}
        self.order: List[int] = []
        self._ids = itertools.count()

    def size(self) -> Tuple[float, float]:
        return self.width, self.height

    def resize(self, width: float, height: float) -> None:
        self.width = float(width)
        self.height = float(height)

    def _add(self, item: SceneItem) -> int:
        handle = next(self._ids)
        self.items[handle] = item
        self.order.append(handle)
        return handle

    def create_shape(self, points: Sequence[Point], color: str) -> int:
        return self._add(SceneItem(kind="shape", color=color, points=tuple(points)))

    def update_shape(self, handle, points=None, alpha=None) -> None:
        item = self.items.get(handle)
        if item is None:
            return
        if points is not None:
            item.points = tuple(points)
        if alpha is not None:
            item.alpha = float(alpha)

    def create_label(self, text, position, font_size, color) -> int:
        return self._add(
            SceneItem(
                kind="label",
                color=color,
                text=text,
                position=tuple(position),
                font_size=float(font_size),
            )
        )

    def update_label(self, handle, position=None, alpha=None, opacity=None) -> None:
        item = self.items.get(handle)
        if item is None:
            return
        if position is not None:
            item.position = tuple(position)
        if alpha is not None:
            item.alpha = float(alpha)
        if opacity is not None:
            item.opacity = float(opacity)

    def bring_to_front(self, handle: int) -> None:
        if handle in self.items:
            self.order.remove(handle)
            self.order.append(handle)

    def remove(self, handle: int) -> None:
        if self.items.pop(handle, None) is not None:
            self.order.remove(handle)

    def contains(self, handle: int) -> bool:
        return handle in self.items

    def snapshot(self) -> List[Dict[str, Any]]:
        return [self.items[handle].to_dict() for handle in self.order]
