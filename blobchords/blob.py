"""
Animated chord blob: a soft wobbling shape that drifts, bounces off the
canvas edges and its neighbours, and when tapped grows over the whole canvas
before fading away.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from .config import (
    COLLISION_PUSH,
    EXPAND_SPEED,
    EXPAND_TARGET_SCALE,
    FADE_SPEED,
    FRICTION,
    LABEL_COLOR,
    OUTLINE_POINTS,
    PALETTE,
    RESTITUTION,
    WANDER_AMPLITUDE,
    WOBBLE_AMPLITUDE,
)
from .music.functions import speed_multiplier
from .render import Renderer

# Progress accumulates in float steps; 100 x 0.01 lands just under 1.0.
_PROGRESS_EPS = 1e-9

_ANGLES = np.arange(OUTLINE_POINTS) * (2.0 * math.pi / OUTLINE_POINTS)


class BlobState(Enum):
    NORMAL = "normal"
    EXPANDING = "expanding"
    FADING_OUT = "fading_out"
    REMOVED = "removed"


class OneShot:
    """Callback slot that is emptied before it fires, so it fires at most once."""

    def __init__(self, callback: Optional[Callable[[], None]] = None) -> None:
        self._callback = callback

    def __bool__(self) -> bool:
        return self._callback is not None

    def set(self, callback: Optional[Callable[[], None]]) -> None:
        self._callback = callback

    def clear(self) -> None:
        self._callback = None

    def fire(self) -> bool:
        callback, self._callback = self._callback, None
        if callback is None:
            return False
        callback()
        return True


@dataclass
class BlobConfig:
    x: float
    y: float
    radius: float
    label: str
    canvas_width: float
    canvas_height: float
    color: str = PALETTE[0]
    gravity: float = 0.0
    on_tap: Optional[Callable[[], None]] = None
    on_bottom_collision: Optional[Callable[[], None]] = None
    # None derives the multiplier from the chord function of ``label``.
    speed_multiplier: Optional[float] = None


def circle_points(center: np.ndarray, radii) -> np.ndarray:
    """Outline vertices around ``center``; ``radii`` is a scalar or one per vertex."""
    radii = np.broadcast_to(np.asarray(radii, dtype=float), _ANGLES.shape)
    return np.column_stack(
        (center[0] + np.cos(_ANGLES) * radii, center[1] + np.sin(_ANGLES) * radii)
    )


def _as_points(points: np.ndarray):
    return [(float(px), float(py)) for px, py in points]


class AnimatedBlob:
    def __init__(
        self,
        config: BlobConfig,
        renderer: Renderer,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        rng = rng if rng is not None else np.random.default_rng()
        self.renderer = renderer
        self.label = config.label
        self.color = config.color
        self.base_radius = float(config.radius)
        self.position = np.array([config.x, config.y], dtype=float)
        self.velocity = np.zeros(2, dtype=float)
        self.gravity = float(config.gravity)
        self.canvas_width = float(config.canvas_width)
        self.canvas_height = float(config.canvas_height)

        multiplier = config.speed_multiplier
        if multiplier is None:
            multiplier = speed_multiplier(config.label)
        self.phase = float(rng.uniform(0.0, 2.0 * math.pi))
        self.speed = float(rng.uniform(0.02, 0.05)) * multiplier

        self.state = BlobState.NORMAL
        self.expand_progress = 0.0
        self.expand_speed = EXPAND_SPEED
        self.fade_progress = 0.0
        self.fade_speed = FADE_SPEED

        self.on_tap = config.on_tap
        self.on_bottom_collision = OneShot(config.on_bottom_collision)
        self.on_expand_complete = OneShot()

        # Irregular starting outline; the wobble takes over on the first tick.
        radii = self.base_radius + rng.uniform(-10.0, 10.0, OUTLINE_POINTS)
        self.shape = renderer.create_shape(
            _as_points(circle_points(self.position, radii)), config.color
        )
        self.text = renderer.create_label(
            config.label,
            (config.x, config.y),
            max(16.0, self.base_radius * 0.4),
            LABEL_COLOR,
        )

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    @property
    def is_active(self) -> bool:
        return self.state is BlobState.NORMAL

    @property
    def is_removed(self) -> bool:
        return self.state is BlobState.REMOVED

    @property
    def hoverable(self) -> bool:
        """True when the pointer cursor should show over this blob."""
        return self.is_active and self.on_tap is not None

    def tap(self) -> bool:
        """Forward a tap to ``on_tap``; ignored unless the blob is idle."""
        if not self.is_active or self.on_tap is None:
            return False
        self.on_tap()
        return True

    def drawn_center(self) -> Tuple[float, float]:
        """Where the outline is drawn: the physics position plus the wander."""
        dx, dy = self.wander_offset()
        return self.x + dx, self.y + dy

    def contains(self, x: float, y: float) -> bool:
        cx, cy = self.drawn_center()
        return math.hypot(x - cx, y - cy) <= self.base_radius

    def start_expanding(self, on_complete: Optional[Callable[[], None]] = None) -> None:
        if not self.is_active:
            return
        self.state = BlobState.EXPANDING
        self.expand_progress = 0.0
        self.on_expand_complete.set(on_complete)
        self.gravity = 0.0
        self.velocity[:] = 0.0
        self.renderer.bring_to_front(self.shape)
        self.renderer.bring_to_front(self.text)

    def update(self) -> None:
        """Advance one frame."""
        if self.state is BlobState.FADING_OUT:
            self._update_fade_out()
        elif self.state is BlobState.EXPANDING:
            self._update_expanding()
        elif self.state is BlobState.NORMAL:
            self._integrate()
            self._resolve_boundaries()
            self._update_wobble()

    def _update_fade_out(self) -> None:
        self.fade_progress += self.fade_speed
        if self.fade_progress >= 1.0 - _PROGRESS_EPS:
            self.fade_progress = 1.0
            self.remove()
            return
        opacity = 1.0 - self.fade_progress
        self.renderer.update_shape(self.shape, alpha=opacity)
        self.renderer.update_label(self.text, alpha=opacity)

    def _update_expanding(self) -> None:
        self.expand_progress += self.expand_speed
        if self.expand_progress >= 1.0 - _PROGRESS_EPS:
            self.expand_progress = 1.0
            self.state = BlobState.FADING_OUT
            self.on_expand_complete.fire()
            if self.is_removed:
                return

        target = max(self.canvas_width, self.canvas_height) * EXPAND_TARGET_SCALE
        eased = self.expand_progress * self.expand_progress
        radius = self.base_radius + (target - self.base_radius) * eased
        self.renderer.update_shape(self.shape, points=_as_points(circle_points(self.position, radius)))
        self.renderer.update_label(
            self.text,
            position=(self.x, self.y),
            opacity=1.0 - self.expand_progress,
        )

    def _integrate(self) -> None:
        self.phase += self.speed
        self.velocity[1] += self.gravity
        self.velocity *= FRICTION
        self.position += self.velocity

    def _resolve_boundaries(self) -> None:
        margin = self.base_radius
        if self.position[0] - margin < 0:
            self.position[0] = margin
            self.velocity[0] *= RESTITUTION
        if self.position[0] + margin > self.canvas_width:
            self.position[0] = self.canvas_width - margin
            self.velocity[0] *= RESTITUTION
        if self.position[1] - margin < 0:
            self.position[1] = margin
            self.velocity[1] *= RESTITUTION
        if self.position[1] + margin > self.canvas_height:
            self.position[1] = self.canvas_height - margin
            self.velocity[1] *= RESTITUTION
            self.on_bottom_collision.fire()

    def wander_offset(self) -> Tuple[float, float]:
        return (
            math.sin(self.phase) * WANDER_AMPLITUDE,
            math.cos(self.phase * 1.3) * WANDER_AMPLITUDE,
        )

    def _update_wobble(self) -> None:
        center = self.position + np.array(self.wander_offset())
        wave = np.sin(self.phase * 2.0 + np.arange(OUTLINE_POINTS)) * WOBBLE_AMPLITUDE
        self.renderer.update_shape(self.shape, points=_as_points(circle_points(center, self.base_radius + wave)))
        self.renderer.update_label(self.text, position=(float(center[0]), float(center[1])))

    def check_collision(self, other: AnimatedBlob) -> None:
        """Nudge two overlapping idle blobs apart through their velocities."""
        if not (self.is_active and other.is_active):
            return
        offset = other.position - self.position
        distance = float(np.linalg.norm(offset))
        min_distance = self.base_radius + other.base_radius
        if distance >= min_distance:
            return
        if distance == 0:
            direction = np.array([1.0, 0.0])  # Collocated; push along x.
        else:
            direction = offset / distance
        target = self.position + direction * min_distance
        push = (target - other.position) * COLLISION_PUSH
        self.velocity -= push
        other.velocity += push

    def remove(self) -> None:
        """Detach the shape and label. Safe to call more than once."""
        if self.state is BlobState.REMOVED:
            return
        self.state = BlobState.REMOVED
        self.on_expand_complete.clear()
        self.on_bottom_collision.clear()
        self.renderer.remove(self.shape)
        self.renderer.remove(self.text)
