"""
Harmonic function of a chord in a major key.

Tonic chords (I, iii, vi) sound settled and may end a progression,
subdominants (ii, IV) move away from home and dominants (V, vii) pull back
towards it.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from .constants import FUNCTION_SPEED

# Longest forms first so "iii7" is read as iii, not ii.
_DEGREE_RE = re.compile(r"^(VII|III|vii|iii|II|IV|VI|ii|iv|vi|I|V|i|v)")


class ChordFunction(str, Enum):
    TONIC = "T"
    SUBDOMINANT = "SD"
    DOMINANT = "D"


_FUNCTION_BY_DEGREE = {
    "I": ChordFunction.TONIC,
    "iii": ChordFunction.TONIC,
    "vi": ChordFunction.TONIC,
    "ii": ChordFunction.SUBDOMINANT,
    "IV": ChordFunction.SUBDOMINANT,
    "V": ChordFunction.DOMINANT,
    "vii": ChordFunction.DOMINANT,
}


def extract_degree(chord: str) -> str:
    """
    Return the leading Roman numeral of a chord symbol without its quality or
    tensions, e.g. "Imaj7" -> "I", "ii9" -> "ii", "viiø7" -> "vii".
    Returns an empty string for symbols that do not start with a degree.
    """
    match = _DEGREE_RE.match(chord or "")
    return match.group(1) if match else ""


def classify(chord: str) -> Optional[ChordFunction]:
    return _FUNCTION_BY_DEGREE.get(extract_degree(chord))


def is_tonic(chord: str) -> bool:
    return classify(chord) is ChordFunction.TONIC


def is_subdominant(chord: str) -> bool:
    return classify(chord) is ChordFunction.SUBDOMINANT


def is_dominant(chord: str) -> bool:
    return classify(chord) is ChordFunction.DOMINANT


def speed_multiplier(chord: str) -> float:
    """Animation speed scale for a blob labelled with this chord."""
    function = classify(chord)
    if function is None:
        return 1.0
    return FUNCTION_SPEED[function.value]
