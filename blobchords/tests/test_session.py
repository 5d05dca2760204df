import numpy as np
import pytest

from blobchords.graph import ChordGraph
from blobchords.music.player import ChordPlayer
from blobchords.progression import ProgressionEngine
from blobchords.render import Scene
from blobchords.session import PlaybackSession, PlaySession, option_radius
from blobchords.simulate import samples_for_playback


class RecordingSynth:
    def __init__(self, fail_start=False):
        self.fail_start = fail_start
        self.played = []

    def start(self):
        if self.fail_start:
            raise RuntimeError("audio context blocked")

    def play_chord(self, pitches, duration):
        self.played.append(list(pitches))


GRAPH = ChordGraph.from_dict(
    {
        "name": "small",
        "description": "",
        "nodes": [{"id": "I"}, {"id": "ii"}, {"id": "V"}, {"id": "vi"}],
        "links": [
            {"source": "I", "target": "ii", "weight": 0.5},
            {"source": "I", "target": "V", "weight": 1.0},
            {"source": "ii", "target": "V", "weight": 1.0},
            {"source": "ii", "target": "vi", "weight": 0.4},
            {"source": "V", "target": "I", "weight": 0.9},
        ],
    }
)


def make_play_session(max_chords=2, on_complete=None):
    synth = RecordingSynth()
    session = PlaySession(
        ProgressionEngine(GRAPH, start="I"),
        Scene(1000, 800),
        ChordPlayer(synth),
        max_chords=max_chords,
        rng=np.random.default_rng(5),
        on_complete=on_complete,
    )
    return session, synth


def active_blob(session, label):
    return next(blob for blob in session.field.blobs if blob.is_active and blob.label == label)


def test_option_radius_scales_with_weight():
    assert option_radius(0.0) == 40.0
    assert option_radius(1.0) == 100.0
    assert option_radius(0.5) == 70.0


def test_play_session_start_builds_first_batch():
    session, _ = make_play_session()
    session.start()
    assert session.log.sequence == ["I"]
    assert [blob.label for blob in session.field.blobs] == ["ii", "V"]
    assert [blob.base_radius for blob in session.field.blobs] == [70.0, 100.0]
    for blob in session.field.blobs:
        assert 120 <= blob.x <= 880
        assert 120 <= blob.y <= 680


def test_tap_plays_then_advances_after_expanding():
    session, synth = make_play_session(max_chords=7)
    session.start()
    tapped = active_blob(session, "ii")
    assert tapped.tap()
    assert synth.played == [["D4", "F4", "A4"]]
    assert session.log.sequence == ["I"]

    for _ in range(100):
        session.tick()
    assert session.engine.current_chord() == "ii"
    assert session.log.sequence == ["I", "ii"]
    assert tapped in session.field.blobs
    assert sorted(blob.label for blob in session.field.blobs if blob.is_active) == ["V", "vi"]

    for _ in range(100):
        session.tick()
    assert tapped not in session.field.blobs


def test_progression_resolves_to_tonic_and_completes():
    finished = []
    session, synth = make_play_session(max_chords=2, on_complete=finished.append)
    session.start()
    active_blob(session, "ii").tap()
    for _ in range(100):
        session.tick()
    # One step before the limit only tonic targets are offered.
    assert [blob.label for blob in session.field.blobs if blob.is_active] == ["vi"]

    resolution = active_blob(session, "vi")
    assert session.tap(resolution.x, resolution.y)
    for _ in range(100):
        session.tick()
    assert session.complete
    assert finished == [["I", "ii", "vi"]]
    assert len(synth.played) == 2
    assert not session.tap(resolution.x, resolution.y)


def test_play_session_teardown_clears_scene():
    session, _ = make_play_session()
    session.start()
    session.teardown()
    assert len(session.field) == 0
    assert session.renderer.items == {}


def make_playback(chords, synth=None, on_complete=None):
    synth = synth or RecordingSynth()
    session = PlaybackSession(
        chords,
        Scene(400, 300),
        ChordPlayer(synth),
        rng=np.random.default_rng(2),
        on_complete=on_complete,
    )
    return session, synth


def test_playback_waits_for_start():
    session, synth = make_playback(["Imaj7", "V7"])
    for _ in range(60):
        session.tick(1000 / 60)
    assert synth.played == []
    assert all(blob.y == 60.0 for blob in session.field.blobs)


def test_playback_drops_each_blob_and_completes():
    done = []
    session, synth = make_playback(["Imaj7", "V7", "Imaj7"], on_complete=lambda: done.append(True))
    assert session.start()
    for _ in range(1000):
        session.tick(1000 / 60)
        if session.complete:
            break
    assert session.complete
    assert done == [True]
    assert synth.played == [
        ["C4", "E4", "G4", "B4"],
        ["G4", "B4", "D5", "F5"],
        ["C4", "E4", "G4", "B4"],
    ]


def test_playback_teardown_cancels_pending_drops():
    session, synth = make_playback(["Imaj7", "V7", "Imaj7"])
    session.start()
    session.tick(1000 / 60)
    session.teardown()
    assert len(session.timers) == 0
    assert session.renderer.items == {}
    for _ in range(300):
        session.tick(1000 / 60)
    assert synth.played == []


def test_playback_start_reports_audio_failure():
    session, _ = make_playback(["I"], synth=RecordingSynth(fail_start=True))
    assert session.start() is False
    assert not session.started
    assert len(session.timers) == 0
    assert "audio context blocked" in session.player.last_error


def test_playback_needs_chords():
    with pytest.raises(ValueError):
        make_playback([])


def test_samples_for_playback():
    result = samples_for_playback(["Imaj7", "V7"], 400, 300, duration_sec=5.0, fps=60, seed=1)
    assert [meta["label"] for meta in result["blobMetadata"]] == ["Imaj7", "V7"]
    assert result["completedAt"] is not None
    assert len(result["events"]) == 16
    assert [e["t"] for e in result["events"]] == sorted(e["t"] for e in result["events"])
    assert all(len(sample["positions"]) == 2 for sample in result["samples"])
    assert result["samples"][-1]["t"] == pytest.approx(result["completedAt"])


def test_samples_for_playback_validates_input():
    with pytest.raises(ValueError):
        samples_for_playback(["I"], 400, 300, duration_sec=5.0, fps=0)
    with pytest.raises(ValueError):
        samples_for_playback(["I"], 0, 300, duration_sec=5.0)
