"""
The live set of blobs on a canvas and the per-frame step that drives them,
plus frame-clocked timers for delayed effects.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from fastquadtree import QuadTree

from .blob import AnimatedBlob

logger = logging.getLogger(__name__)


class BlobField:
    """
    Owns the live blobs between batch rebuilds. ``step`` updates every blob
    and then resolves collisions once for each unordered pair.
    """

    def __init__(self, blobs: Optional[Iterable[AnimatedBlob]] = None) -> None:
        self.blobs: List[AnimatedBlob] = list(blobs or [])

    def __len__(self) -> int:
        return len(self.blobs)

    def add(self, blob: AnimatedBlob) -> AnimatedBlob:
        self.blobs.append(blob)
        return blob

    def replace(self, blobs: Iterable[AnimatedBlob], keep: Optional[AnimatedBlob] = None) -> None:
        """Remove every current blob except ``keep`` and adopt ``blobs``."""
        for blob in self.blobs:
            if blob is not keep:
                blob.remove()
        self.blobs = list(blobs)
        if keep is not None and not keep.is_removed:
            self.blobs.append(keep)

    def clear(self) -> None:
        for blob in self.blobs:
            blob.remove()
        self.blobs = []

    def step(self, collide: bool = True) -> None:
        # Callbacks fired during updates may rebuild the batch, so iterate a copy.
        for blob in list(self.blobs):
            blob.update()

        if collide:
            live = [blob for blob in self.blobs if not blob.is_removed]
            for first, second in itertools.combinations(live, 2):
                first.check_collision(second)
        self.blobs = [blob for blob in self.blobs if not blob.is_removed]

    def blob_at(self, x: float, y: float) -> Optional[AnimatedBlob]:
        """
        Topmost idle blob under a point. Candidates come from a QuadTree query
        around the point, then the exact radius check decides.
        """
        active = [blob for blob in self.blobs if blob.is_active]
        if not active:
            return None

        reach = max(blob.base_radius for blob in active)
        centers = [blob.drawn_center() for blob in active]
        xs = [cx for cx, _ in centers] + [x]
        ys = [cy for _, cy in centers] + [y]
        bounds = (min(xs) - reach, min(ys) - reach, max(xs) + reach, max(ys) + reach)
        quadtree = QuadTree(bounds, 8)
        for center in centers:
            quadtree.insert(center)

        candidates = quadtree.query((x - reach, y - reach, x + reach, y + reach))
        hits = [active[candidate_id] for candidate_id, _, _ in candidates]
        hits = [blob for blob in hits if blob.contains(x, y)]
        if not hits:
            return None
        # Later blobs are drawn on top.
        return max(hits, key=lambda blob: active.index(blob))

    def tap(self, x: float, y: float) -> bool:
        blob = self.blob_at(x, y)
        if blob is None:
            return False
        return blob.tap()


@dataclass
class _Timer:
    due_ms: float
    callback: Callable[[], None]


class FrameTimers:
    """
    Delayed callbacks measured in elapsed milliseconds and advanced from the
    frame loop. Every timer can be cancelled; ``cancel_all`` runs on teardown
    so nothing fires against removed blobs.
    """

    def __init__(self) -> None:
        self.elapsed_ms = 0.0
        self._timers: Dict[int, _Timer] = {}
        self._ids = itertools.count()

    def __len__(self) -> int:
        return len(self._timers)

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> int:
        timer_id = next(self._ids)
        self._timers[timer_id] = _Timer(self.elapsed_ms + max(0.0, delay_ms), callback)
        return timer_id

    def cancel(self, timer_id: int) -> bool:
        return self._timers.pop(timer_id, None) is not None

    def cancel_all(self) -> None:
        if self._timers:
            logger.debug("Cancelling %d pending timers", len(self._timers))
        self._timers.clear()

    def advance(self, dt_ms: float) -> int:
        """Move the clock forward and fire due timers in schedule order."""
        self.elapsed_ms += dt_ms
        due = sorted(
            (timer.due_ms, timer_id)
            for timer_id, timer in self._timers.items()
            if timer.due_ms <= self.elapsed_ms
        )
        fired = 0
        for _, timer_id in due:
            timer = self._timers.pop(timer_id, None)
            if timer is None:  # cancelled by an earlier callback
                continue
            timer.callback()
            fired += 1
        return fired
