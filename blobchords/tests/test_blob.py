import numpy as np
import pytest

from blobchords.blob import AnimatedBlob, BlobConfig, BlobState, OneShot
from blobchords.render import Scene


def make_blob(scene=None, **overrides):
    scene = scene or Scene(800, 600)
    width, height = scene.size()
    params = dict(x=400.0, y=300.0, radius=50.0, label="V7", canvas_width=width, canvas_height=height)
    params.update(overrides)
    return AnimatedBlob(BlobConfig(**params), scene, rng=np.random.default_rng(0)), scene


def test_new_blob_draws_shape_and_label():
    blob, scene = make_blob()
    assert blob.state is BlobState.NORMAL
    assert scene.contains(blob.shape) and scene.contains(blob.text)
    assert len(scene.items[blob.shape].points) == 8
    assert scene.items[blob.text].text == "V7"


def test_expand_fade_remove_lifecycle():
    blob, scene = make_blob()
    completed = []
    blob.velocity[:] = [3.0, -2.0]
    blob.gravity = 0.5
    blob.start_expanding(lambda: completed.append(True))
    assert blob.state is BlobState.EXPANDING
    assert blob.gravity == 0.0
    assert np.all(blob.velocity == 0.0)

    for _ in range(99):
        blob.update()
    assert blob.state is BlobState.EXPANDING
    blob.update()
    assert blob.state is BlobState.FADING_OUT
    assert completed == [True]

    for _ in range(99):
        blob.update()
    assert blob.state is BlobState.FADING_OUT
    blob.update()
    assert blob.state is BlobState.REMOVED
    assert not scene.contains(blob.shape)
    assert not scene.contains(blob.text)
    assert completed == [True]


def test_expanding_grows_past_the_canvas_and_fades_label():
    blob, scene = make_blob()
    blob.start_expanding()
    for _ in range(100):
        blob.update()
    x, y = scene.items[blob.shape].points[0]
    assert x - blob.x == pytest.approx(800 * 1.5)
    assert scene.items[blob.text].opacity == pytest.approx(0.0)


def test_fade_out_lowers_alpha():
    blob, scene = make_blob()
    blob.start_expanding()
    for _ in range(150):
        blob.update()
    assert scene.items[blob.shape].alpha == pytest.approx(0.5, abs=0.02)
    assert scene.items[blob.text].alpha == pytest.approx(0.5, abs=0.02)


def test_expanding_moves_blob_to_front():
    scene = Scene(800, 600)
    blob, _ = make_blob(scene)
    other, _ = make_blob(scene, x=100.0)
    blob.start_expanding()
    assert scene.order[-2:] == [blob.shape, blob.text]


def test_taps_only_reach_idle_blobs():
    taps = []
    blob, _ = make_blob(on_tap=lambda: taps.append(1))
    assert blob.hoverable
    assert blob.tap() is True
    blob.start_expanding()
    assert not blob.hoverable
    assert blob.tap() is False
    for _ in range(120):
        blob.update()
    assert blob.state is BlobState.FADING_OUT
    assert blob.tap() is False
    assert taps == [1]


def test_tap_without_handler_is_ignored():
    blob, _ = make_blob()
    assert not blob.hoverable
    assert blob.tap() is False


def test_wall_bounce_clamps_and_reverses():
    blob, _ = make_blob(x=5.0, radius=40.0)
    blob.velocity[:] = [-10.0, 0.0]
    blob.update()
    assert blob.x == 40.0
    assert blob.velocity[0] == pytest.approx(10.0 * 0.98 * 0.8)


def test_bottom_collision_fires_once():
    hits = []
    scene = Scene(400, 400)
    blob, _ = make_blob(scene, x=200.0, y=370.0, radius=20.0, gravity=1.0, on_bottom_collision=lambda: hits.append(1))
    for _ in range(200):
        blob.update()
    assert hits == [1]
    assert blob.y <= 380.0


def test_falling_blob_accelerates():
    blob, _ = make_blob(gravity=0.2)
    blob.update()
    first = blob.velocity[1]
    blob.update()
    assert blob.velocity[1] > first > 0


def test_overlapping_blobs_push_apart():
    scene = Scene(800, 600)
    a, _ = make_blob(scene, x=100.0, y=100.0, radius=20.0)
    b, _ = make_blob(scene, x=130.0, y=100.0, radius=20.0)
    a.check_collision(b)
    assert a.velocity[0] == pytest.approx(-0.5)
    assert b.velocity[0] == pytest.approx(0.5)
    assert a.velocity[1] == pytest.approx(0.0)


def test_separated_blobs_do_not_interact():
    scene = Scene(800, 600)
    a, _ = make_blob(scene, x=100.0, y=100.0, radius=20.0)
    b, _ = make_blob(scene, x=200.0, y=100.0, radius=20.0)
    a.check_collision(b)
    assert np.all(a.velocity == 0.0) and np.all(b.velocity == 0.0)


def test_collision_skipped_while_expanding():
    scene = Scene(800, 600)
    a, _ = make_blob(scene, x=100.0, y=100.0, radius=20.0)
    b, _ = make_blob(scene, x=110.0, y=100.0, radius=20.0)
    b.start_expanding()
    a.check_collision(b)
    b.check_collision(a)
    assert np.all(a.velocity == 0.0)


def test_remove_is_idempotent():
    blob, scene = make_blob()
    blob.remove()
    blob.remove()
    assert blob.is_removed
    assert scene.items == {}
    blob.update()
    blob.start_expanding()
    assert blob.state is BlobState.REMOVED


def test_one_shot_fires_once():
    calls = []
    slot = OneShot(lambda: calls.append(1))
    assert slot
    assert slot.fire() is True
    assert slot.fire() is False
    assert not slot
    assert calls == [1]


def test_tonic_blobs_move_slower_than_dominants():
    tonic, _ = make_blob(label="Imaj7")
    dominant, _ = make_blob(label="V7")
    # Same seed, so only the chord function differs.
    assert tonic.speed < dominant.speed
