"""
Orchestration of the two screens: picking chords by tapping option blobs,
and replaying the finished progression as falling blobs.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

import numpy as np

from . import config
from .blob import AnimatedBlob, BlobConfig
from .field import BlobField, FrameTimers
from .music.player import ChordPlayer
from .positioner import SpatialPositioner
from .progression import (
    ChordOption,
    ProgressionEngine,
    ProgressionLog,
    ResolutionPolicy,
)
from .render import Renderer

logger = logging.getLogger(__name__)


def option_radius(weight: float) -> float:
    """Heavier edges get bigger blobs."""
    return config.BLOB_MIN_RADIUS + weight * (config.BLOB_MAX_RADIUS - config.BLOB_MIN_RADIUS)


class PlaySession:
    """
    The chord-picking screen. Each tap plays the chord right away; once the
    tapped blob has finished expanding the engine moves on and the next batch
    of options replaces the old one.
    """

    def __init__(
        self,
        engine: ProgressionEngine,
        renderer: Renderer,
        player: ChordPlayer,
        log: Optional[ProgressionLog] = None,
        max_chords: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        on_complete: Optional[Callable[[List[str]], None]] = None,
    ) -> None:
        self.engine = engine
        self.renderer = renderer
        self.player = player
        self.log = log if log is not None else ProgressionLog()
        self.policy = ResolutionPolicy(max_chords or config.max_chord_count())
        self.rng = rng if rng is not None else np.random.default_rng()
        self.on_complete = on_complete
        self.field = BlobField()
        self.tap_count = 0
        self.complete = False

    def start(self) -> None:
        self.log.reset()
        self.log.append(self.engine.current_chord())
        self.tap_count = 0
        self.complete = False
        self.create_blobs(self.engine.next_options())

    def create_blobs(
        self,
        options: Sequence[ChordOption],
        expanding: Optional[AnimatedBlob] = None,
    ) -> List[AnimatedBlob]:
        width, height = self.renderer.size()
        positioner = SpatialPositioner(width, height, config.BLOB_MARGIN, rng=self.rng)
        if not options:
            logger.warning("No options after %r", self.engine.current_chord())

        blobs: List[AnimatedBlob] = []
        for i, option in enumerate(options):
            radius = option_radius(option.weight)
            x, y = positioner.find_non_overlapping(radius)
            positioner.add_position(x, y, radius)
            blob = AnimatedBlob(
                BlobConfig(
                    x=x,
                    y=y,
                    radius=radius,
                    label=option.chord,
                    canvas_width=width,
                    canvas_height=height,
                    color=config.PALETTE[i % len(config.PALETTE)],
                ),
                self.renderer,
                rng=self.rng,
            )
            blob.on_tap = self._tap_handler(option, blob)
            blobs.append(blob)

        self.field.replace(blobs, keep=expanding)
        return blobs

    def _tap_handler(self, option: ChordOption, blob: AnimatedBlob) -> Callable[[], None]:
        def handle_tap() -> None:
            self.player.play(option.chord)
            blob.start_expanding(lambda: self._advance(option, blob))

        return handle_tap

    def _advance(self, option: ChordOption, blob: AnimatedBlob) -> None:
        self.engine.transition_to(option.chord)
        self.log.append(option.chord)
        self.tap_count += 1

        result = self.policy.after_transition(self.engine, option.chord, self.tap_count)
        if result.complete:
            logger.info("Progression complete: %s", " - ".join(self.log.sequence))
            self.complete = True
            if self.on_complete is not None:
                self.on_complete(self.log.sequence)
            return
        self.create_blobs(result.options, expanding=blob)

    def tap(self, x: float, y: float) -> bool:
        if self.complete:
            return False
        return self.field.tap(x, y)

    def tick(self) -> None:
        self.field.step()

    def teardown(self) -> None:
        self.field.clear()


class PlaybackSession:
    """
    Replays a progression: one blob per chord waits above the canvas, they
    drop one after another once started, and each sounds its chord when it
    first hits the floor.
    """

    def __init__(
        self,
        chords: Sequence[str],
        renderer: Renderer,
        player: ChordPlayer,
        rng: Optional[np.random.Generator] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        if not chords:
            raise ValueError("Nothing to play back: chord sequence is empty")
        self.chords = list(chords)
        self.renderer = renderer
        self.player = player
        self.rng = rng if rng is not None else np.random.default_rng()
        self.on_complete = on_complete
        self.timers = FrameTimers()
        self.field = BlobField()
        self.started = False
        self.complete = False
        self._build()

    def _build(self) -> None:
        width, height = self.renderer.size()
        last = len(self.chords) - 1
        for index, chord in enumerate(self.chords):
            self.field.add(
                AnimatedBlob(
                    BlobConfig(
                        x=width / 2,
                        y=config.PLAYBACK_START_Y,
                        radius=config.PLAYBACK_BLOB_RADIUS,
                        label=chord,
                        canvas_width=width,
                        canvas_height=height,
                        color=config.PALETTE[index % len(config.PALETTE)],
                        on_bottom_collision=self._landing_handler(chord, index == last),
                    ),
                    self.renderer,
                    rng=self.rng,
                )
            )

    def _landing_handler(self, chord: str, is_last: bool) -> Callable[[], None]:
        def handle_landing() -> None:
            self.player.play(chord)
            if is_last:
                self.timers.schedule(config.PLAYBACK_COMPLETION_DELAY_MS, self._finish)

        return handle_landing

    def _finish(self) -> None:
        self.complete = True
        if self.on_complete is not None:
            self.on_complete()

    def start(self) -> bool:
        """
        Called from the start prompt's user gesture: activates audio and
        schedules each blob's drop.
        """
        if self.started:
            return True
        if not self.player.start():
            return False
        self.started = True
        for index, blob in enumerate(self.field.blobs):
            self.timers.schedule(
                index * config.PLAYBACK_DROP_INTERVAL_MS, self._release(blob)
            )
        return True

    @staticmethod
    def _release(blob: AnimatedBlob) -> Callable[[], None]:
        def release() -> None:
            blob.gravity = config.PLAYBACK_GRAVITY

        return release

    def tick(self, dt_ms: float) -> None:
        self.timers.advance(dt_ms)
        # Replayed blobs fall through each other.
        self.field.step(collide=False)

    def teardown(self) -> None:
        self.timers.cancel_all()
        self.field.clear()
