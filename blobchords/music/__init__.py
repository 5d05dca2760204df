from .functions import ChordFunction, classify, extract_degree, is_tonic
from .player import ChordPlayer, EventSynth
from .translator import chord_to_midi, chord_to_pitches, degree_to_chord_name

__all__ = [
    "ChordFunction",
    "ChordPlayer",
    "EventSynth",
    "chord_to_midi",
    "chord_to_pitches",
    "classify",
    "degree_to_chord_name",
    "extract_degree",
    "is_tonic",
]
