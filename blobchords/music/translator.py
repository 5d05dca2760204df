"""
Turn chord symbols into the pitches handed to the synthesizer.

Degree notation ("ii7", "V7", "viiø7") is read against C major and rewritten
to a plain chord name before the quality suffix is looked up.
"""

from __future__ import annotations

import logging
import re
from typing import List, Tuple

from .constants import (
    BASE_OCTAVE,
    CHORD_INTERVALS,
    DEGREE_ROOTS,
    MAJOR_TRIAD,
    MIDDLE_C,
    NOTE_NAMES,
    ROOT_PITCH_CLASSES,
)
from .functions import extract_degree

logger = logging.getLogger(__name__)

_ROOT_RE = re.compile(r"^([A-G][#b]?)")


def degree_to_chord_name(chord: str) -> str:
    """
    Rewrite a degree symbol as a C major chord name. Symbols that do not start
    with a degree are returned unchanged.
    """
    degree = extract_degree(chord)
    if not degree:
        return chord

    root = DEGREE_ROOTS[degree]
    quality = chord[len(degree):]
    is_minor = degree == degree.lower()

    if is_minor and quality == "":
        return root + "m"
    if quality == "°":
        return root + "dim"
    if quality == "ø7":
        return root + "m7b5"
    if is_minor and "7" in quality and "maj" not in quality:
        # ii7 -> Dm7; other extensions such as vi9 keep their own quality
        return root + "m" + quality
    return root + quality


def split_chord_name(chord_name: str) -> Tuple[str, str]:
    """Return (root, quality suffix); root is empty when none can be parsed."""
    match = _ROOT_RE.match(chord_name)
    if not match:
        return "", chord_name
    root = match.group(1)
    return root, chord_name[len(root):]


def chord_intervals(quality: str) -> Tuple[int, ...]:
    # Unknown qualities sound as a plain major triad.
    return CHORD_INTERVALS.get(quality, MAJOR_TRIAD)


def chord_to_midi(chord: str) -> List[int]:
    """MIDI note numbers for a chord voiced upward from its root in octave 4."""
    root, quality = split_chord_name(degree_to_chord_name(chord))
    if not root:
        logger.debug("Could not parse a root from chord %r", chord)
        return []
    pitch_class = ROOT_PITCH_CLASSES[root]
    return [MIDDLE_C + pitch_class + interval for interval in chord_intervals(quality)]


def midi_to_pitch_name(midi: int) -> str:
    octave = BASE_OCTAVE + (midi - MIDDLE_C) // 12
    return f"{NOTE_NAMES[midi % 12]}{octave}"


def chord_to_pitches(chord: str) -> List[str]:
    """
    Pitch names such as ["D4", "F4", "A4", "C5"] for "ii7". Never raises:
    anything without a recognizable root yields an empty list.
    """
    return [midi_to_pitch_name(midi) for midi in chord_to_midi(chord)]
