"""
Walking the chord graph: the engine tracks where the progression is, the
log records what was played, and the resolution policy makes sure a
progression can always end on a tonic within the configured length.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .config import TONIC_FALLBACK_WEIGHT
from .graph import ChordGraph
from .music.functions import extract_degree, is_tonic

logger = logging.getLogger(__name__)

TONIC_PREFIXES = ("I", "iii", "vi")


@dataclass(frozen=True)
class ChordOption:
    chord: str
    weight: float


class ProgressionEngine:
    """
    Current position in a chord graph. Selection is driven by the user, so
    edge weights are only handed through for sizing the option blobs.

    Tonic membership goes by the parsed degree, not the raw name prefix:
    the start chord's degree must be exactly ``I``, and ``all_tonic_options``
    also requires ``is_tonic``, so ``IV`` or ``viiø7`` never slip in.
    """

    def __init__(
        self,
        graph: ChordGraph,
        rng: Optional[np.random.Generator] = None,
        start: Optional[str] = None,
    ) -> None:
        self.graph = graph
        self.rng = rng if rng is not None else np.random.default_rng()
        self._current = start if start is not None else self._random_tonic()

    def _random_tonic(self) -> str:
        candidates = [node for node in self.graph.nodes if extract_degree(node) == "I"]
        if not candidates:
            if not self.graph.nodes:
                raise ValueError("Chord graph has no nodes")
            logger.warning("Graph %r has no I chords; starting on %r", self.graph.name, self.graph.nodes[0])
            return self.graph.nodes[0]
        return candidates[int(self.rng.integers(len(candidates)))]

    def current_chord(self) -> str:
        return self._current

    def next_options(self) -> List[ChordOption]:
        return [
            ChordOption(link.target, link.weight)
            for link in self.graph.links_from(self._current)
        ]

    def all_tonic_options(self) -> List[ChordOption]:
        return [
            ChordOption(node, TONIC_FALLBACK_WEIGHT)
            for node in self.graph.nodes
            if node.startswith(TONIC_PREFIXES) and is_tonic(node)
        ]

    def transition_to(self, chord: str) -> None:
        self._current = chord


class ProgressionLog:
    """Ordered record of the chords played so far; no legality checks."""

    def __init__(self) -> None:
        self._chords: List[str] = []

    def append(self, chord: str) -> None:
        self._chords.append(chord)

    def reset(self) -> None:
        self._chords = []

    @property
    def sequence(self) -> List[str]:
        return list(self._chords)

    def __len__(self) -> int:
        return len(self._chords)


@dataclass
class StepResult:
    complete: bool
    options: List[ChordOption]


class ResolutionPolicy:
    """
    After ``max_chords`` taps a tonic ends the progression. One tap before
    that, only tonic options are offered so the next tap can end it.
    """

    def __init__(self, max_chords: int) -> None:
        if max_chords < 1:
            raise ValueError("max_chords must be at least 1")
        self.max_chords = max_chords

    def after_transition(self, engine: ProgressionEngine, chord: str, count: int) -> StepResult:
        if count >= self.max_chords and is_tonic(chord):
            return StepResult(complete=True, options=[])

        options = engine.next_options()
        if count == self.max_chords - 1:
            tonic_options = [opt for opt in options if is_tonic(opt.chord)]
            options = tonic_options or engine.all_tonic_options()
        return StepResult(complete=False, options=options)


def options_after_sequence(
    graph: ChordGraph, chords: List[str], max_chords: int
) -> StepResult:
    """
    Replay an already played sequence (first chord is the starting tonic) and
    return what the play screen would offer next.
    """
    if not chords:
        raise ValueError("Sequence must contain at least the starting chord")
    engine = ProgressionEngine(graph, start=chords[0])
    policy = ResolutionPolicy(max_chords)
    result = StepResult(complete=False, options=engine.next_options())
    for count, chord in enumerate(chords[1:], start=1):
        engine.transition_to(chord)
        result = policy.after_transition(engine, chord, count)
        if result.complete:
            break
    return result
