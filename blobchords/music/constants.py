NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Pitch class for every root spelling we accept
ROOT_PITCH_CLASSES = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
}

# Scale degrees of C major; degree case only affects chord quality.
DEGREE_ROOTS = {
    "I": "C",
    "i": "C",
    "II": "D",
    "ii": "D",
    "III": "E",
    "iii": "E",
    "IV": "F",
    "iv": "F",
    "V": "G",
    "v": "G",
    "VI": "A",
    "vi": "A",
    "VII": "B",
    "vii": "B",
}

MAJOR_TRIAD = (0, 4, 7)

# Semitone offsets from the root keyed by quality suffix
CHORD_INTERVALS = {
    "": MAJOR_TRIAD,
    "maj": MAJOR_TRIAD,
    "M": MAJOR_TRIAD,
    "m": (0, 3, 7),
    "min": (0, 3, 7),
    "6": (0, 4, 7, 9),
    "m6": (0, 3, 7, 9),
    "min6": (0, 3, 7, 9),
    "7": (0, 4, 7, 10),
    "maj7": (0, 4, 7, 11),
    "M7": (0, 4, 7, 11),
    "m7": (0, 3, 7, 10),
    "min7": (0, 3, 7, 10),
    "m7b5": (0, 3, 6, 10),
    "dim": (0, 3, 6),
    "°": (0, 3, 6),
    "dim7": (0, 3, 6),
    "aug": (0, 4, 8),
    "+": (0, 4, 8),
    "9": (0, 4, 7, 10, 14),
    "maj9": (0, 4, 7, 11, 14),
    "M9": (0, 4, 7, 11, 14),
    "m9": (0, 3, 7, 10, 14),
    "min9": (0, 3, 7, 10, 14),
}

BASE_OCTAVE = 4
MIDDLE_C = 60

# Animation speed multiplier per harmonic function: tonic drifts, dominant jitters.
FUNCTION_SPEED = {"T": 0.7, "SD": 1.0, "D": 1.4}
