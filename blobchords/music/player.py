"""
Binding between chord symbols and an external synthesizer.

The synthesizer is opaque: it gets pitch names and a duration and makes
sound. Playback is fire-and-forget and a failing audio backend must never
stop the animation, so ChordPlayer catches and logs everything the
synthesizer raises.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from .constants import NOTE_NAMES
from .translator import chord_to_pitches

logger = logging.getLogger(__name__)

# Note lengths in quarter notes for the duration names the front end uses.
_DURATION_BEATS = {"1n": 4.0, "2n": 2.0, "4n": 1.0, "8n": 0.5, "16n": 0.25}


class Synthesizer(Protocol):
    def start(self) -> None:
        ...

    def play_chord(self, pitches: List[str], duration: str) -> None:
        ...


def pitch_name_to_midi(pitch: str) -> int:
    name, octave = pitch[:-1], int(pitch[-1])
    return 12 * (octave + 1) + NOTE_NAMES.index(name)


def duration_seconds(duration: str, bpm: float = 120.0) -> float:
    return _DURATION_BEATS.get(duration, 0.5) * 60.0 / bpm


class EventSynth:
    """
    Synthesizer that records note_on/note_off events instead of making
    sound. Times come from ``clock`` (seconds), so a headless simulation can
    hand the events to a browser-side instrument afterwards.
    """

    def __init__(self, clock: Callable[[], float], bpm: float = 120.0) -> None:
        self.clock = clock
        self.bpm = bpm
        self.started = False
        self.events: List[Dict[str, Any]] = []

    def start(self) -> None:
        self.started = True

    def play_chord(self, pitches: List[str], duration: str) -> None:
        if not pitches:
            return
        t = float(self.clock())
        length = duration_seconds(duration, self.bpm)
        for pitch in pitches:
            midi = pitch_name_to_midi(pitch)
            self.events.append(
                {"t": t, "type": "note_on", "pitch": pitch, "midi": midi, "vel": 90}
            )
            self.events.append(
                {"t": t + length, "type": "note_off", "pitch": pitch, "midi": midi}
            )


class ChordPlayer:
    """Plays chord symbols on a synthesizer without ever raising."""

    def __init__(self, synth: Synthesizer, duration: str = "8n") -> None:
        self.synth = synth
        self.duration = duration
        self.started = False
        self.last_error: Optional[str] = None

    def start(self) -> bool:
        """
        Activate the audio backend. Must follow a user gesture; the result is
        remembered so later calls are free.
        """
        if self.started:
            return True
        try:
            self.synth.start()
        except Exception as exc:  # audio backend failures stay at this boundary
            logger.exception("Could not start audio")
            self.last_error = f"Could not start audio: {exc}"
            return False
        self.started = True
        return True

    def play(self, chord: str, duration: Optional[str] = None) -> List[str]:
        """Sound a chord and return the pitches sent to the synthesizer."""
        if not self.start():
            return []
        pitches = chord_to_pitches(chord)
        if not pitches:
            logger.warning("No notes to play for chord %r", chord)
            return []
        try:
            self.synth.play_chord(pitches, duration or self.duration)
        except Exception as exc:
            logger.exception("Error playing chord %r", chord)
            self.last_error = f"Error playing chord {chord}: {exc}"
            return []
        return pitches
