"""
Tunable constants for blob sizing, playback timing and the progression
length, plus the few environment overrides the app reads at startup.
"""

import logging
import os
from pathlib import Path

PALETTE = ("#FD6F00", "#FF2C62", "#6842FF", "#00D9FF", "#FFD700")
LABEL_COLOR = "#FFFFFF"

# Blob sizing for the play screen; edge weight scales between min and max.
BLOB_MIN_RADIUS = 40.0
BLOB_MAX_RADIUS = 100.0
BLOB_SPACING = 30.0
MAX_PLACEMENT_ATTEMPTS = 50
BLOB_MARGIN = BLOB_MAX_RADIUS + 20.0

# Per-tick animation rates and physics factors
OUTLINE_POINTS = 8
EXPAND_SPEED = 0.01
FADE_SPEED = 0.01
FRICTION = 0.98
RESTITUTION = -0.8
COLLISION_PUSH = 0.05
EXPAND_TARGET_SCALE = 1.5  # times the longer canvas side
WANDER_AMPLITUDE = 10.0
WOBBLE_AMPLITUDE = 5.0

# Falling replay
PLAYBACK_BLOB_RADIUS = 60.0
PLAYBACK_DROP_INTERVAL_MS = 500.0
PLAYBACK_COMPLETION_DELAY_MS = 500.0
PLAYBACK_GRAVITY = 0.2
PLAYBACK_START_Y = -100.0

CHORD_DURATION = "8n"
TONIC_FALLBACK_WEIGHT = 0.5

DEFAULT_GRAPH_PATH = Path(__file__).parent / "data" / "jazz.json"


def max_chord_count() -> int:
    """Progression length after which a tonic ends the progression."""
    return int(os.getenv("BLOBCHORDS_MAX_CHORDS", "7"))


def graph_path() -> Path:
    configured = os.getenv("BLOBCHORDS_GRAPH")
    if configured:
        return Path(configured).expanduser()
    return DEFAULT_GRAPH_PATH


def debug_enabled() -> bool:
    return os.getenv("BLOBCHORDS_DEBUG", "false").lower() == "true"


def configure_logging() -> None:
    level_name = os.getenv("BLOBCHORDS_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
