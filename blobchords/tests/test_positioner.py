import itertools
import math

import numpy as np

from blobchords.positioner import SpatialPositioner


def test_positions_stay_inside_margins():
    positioner = SpatialPositioner(800, 600, margin=120, rng=np.random.default_rng(1))
    for _ in range(200):
        x, y = positioner.find_non_overlapping(50, max_attempts=5)
        assert 120 <= x <= 680
        assert 120 <= y <= 480


def test_accepted_positions_keep_spacing():
    positioner = SpatialPositioner(2000, 2000, margin=120, rng=np.random.default_rng(7))
    radii = [40, 55, 70, 85, 100, 60]
    for radius in radii:
        x, y = positioner.find_non_overlapping(radius, spacing=30, max_attempts=1000)
        positioner.add_position(x, y, radius)

    for (x1, y1, r1), (x2, y2, r2) in itertools.combinations(positioner.positions, 2):
        assert math.hypot(x1 - x2, y1 - y2) >= r1 + r2 + 30


def test_zero_attempts_falls_back_to_any_position():
    positioner = SpatialPositioner(300, 300, margin=100, rng=np.random.default_rng(3))
    positioner.add_position(150, 150, 500)
    x, y = positioner.find_non_overlapping(80, max_attempts=0)
    assert 100 <= x <= 200
    assert 100 <= y <= 200


def test_reset_clears_the_batch():
    positioner = SpatialPositioner(500, 500, margin=50)
    positioner.add_position(100, 100, 40)
    positioner.reset()
    assert positioner.positions == []
