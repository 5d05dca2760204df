"""
Rejection sampling of blob positions so a batch of option blobs starts out
without overlapping.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from .config import BLOB_SPACING, MAX_PLACEMENT_ATTEMPTS


class SpatialPositioner:
    """
    Keeps the placements accepted for the current batch. Call
    ``add_position`` after placing each blob and ``reset`` before a new batch.
    """

    def __init__(
        self,
        width: float,
        height: float,
        margin: float,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.margin = float(margin)
        self.rng = rng if rng is not None else np.random.default_rng()
        self._positions: List[Tuple[float, float, float]] = []

    @property
    def positions(self) -> List[Tuple[float, float, float]]:
        return list(self._positions)

    def find_non_overlapping(
        self,
        radius: float,
        spacing: float = BLOB_SPACING,
        max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
    ) -> Tuple[float, float]:
        """
        Return the first random position that keeps ``spacing`` clear of every
        recorded placement. After ``max_attempts`` misses a random position is
        returned anyway, so overlap is possible but the call never blocks.
        """
        for _ in range(max_attempts):
            x, y = self._random_position()
            if not self._is_overlapping(x, y, radius, spacing):
                return x, y
        return self._random_position()

    def _is_overlapping(self, x: float, y: float, radius: float, spacing: float) -> bool:
        for px, py, pradius in self._positions:
            if math.hypot(x - px, y - py) < radius + pradius + spacing:
                return True
        return False

    def _random_position(self) -> Tuple[float, float]:
        # A canvas smaller than two margins pins that axis to the margin.
        low_x, high_x = self.margin, max(self.margin, self.width - self.margin)
        low_y, high_y = self.margin, max(self.margin, self.height - self.margin)
        return float(self.rng.uniform(low_x, high_x)), float(self.rng.uniform(low_y, high_y))

    def add_position(self, x: float, y: float, radius: float) -> None:
        self._positions.append((float(x), float(y), float(radius)))

    def reset(self) -> None:
        self._positions = []
