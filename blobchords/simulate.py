"""
Headless run of the falling replay. Produces per-frame blob positions and
the note events the synthesizer received, so a front end can animate and
sound the replay without running the physics itself.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import debug_enabled
from .music.player import ChordPlayer, EventSynth
from .render import Scene
from .session import PlaybackSession

logger = logging.getLogger(__name__)


def _blob_sample(blob) -> List[float]:
    return [round(blob.x, 3), round(blob.y, 3)]


def samples_for_playback(
    chords: Sequence[str],
    width: float,
    height: float,
    duration_sec: float,
    fps: float = 60.0,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    if fps <= 0:
        raise ValueError("fps must be positive")
    if duration_sec <= 0:
        raise ValueError("duration_sec must be positive")
    if width <= 0 or height <= 0:
        raise ValueError("canvas size must be positive")

    clock = {"t": 0.0}
    synth = EventSynth(clock=lambda: clock["t"])
    player = ChordPlayer(synth)
    scene = Scene(width, height)
    completed_at: List[float] = []
    session = PlaybackSession(
        chords,
        scene,
        player,
        rng=np.random.default_rng(seed),
        on_complete=lambda: completed_at.append(clock["t"]),
    )

    blob_metadata = [
        {"label": blob.label, "color": blob.color, "radius": blob.base_radius}
        for blob in session.field.blobs
    ]
    blobs = list(session.field.blobs)
    dt_ms = 1000.0 / fps
    steps = max(1, math.ceil(duration_sec * fps))

    samples: List[Dict[str, Any]] = []
    try:
        session.start()
        for idx in range(1, steps + 1):
            clock["t"] = idx / fps
            session.tick(dt_ms)
            samples.append(
                {"t": clock["t"], "positions": [_blob_sample(blob) for blob in blobs]}
            )
            if completed_at:
                break
    finally:
        session.teardown()

    if player.last_error:
        logger.warning("Playback simulation audio error: %s", player.last_error)

    events = sorted(synth.events, key=lambda e: e["t"])
    if debug_enabled():
        with open("playback_events.json", "w") as f:
            json.dump(events, f, indent=2)

    return {
        "blobMetadata": blob_metadata,
        "samples": samples,
        "events": events,
        "completedAt": completed_at[0] if completed_at else None,
    }
