import pytest

from birthday_site.effects.celebration import (
    CELEBRATION_SECONDS,
    CONFETTI_COLORS,
    EDGE_BURSTS,
    ConfettiCannon,
)
from birthday_site.effects.launch import (
    CONFIRMATION_ID,
    LAUNCHED_WISH_ID,
    RISE_DISTANCE,
    WISH_ENTRY_ID,
    WishLaunch,
    add_launch_elements,
)
from birthday_site.presentation.stage import Stage
from birthday_site.scene.renderer import SceneRenderer


def run(engine, clock, seconds: float, step: float = 0.1):
    for _ in range(int(round(seconds / step))):
        clock.advance(step)
        engine.tick()


# ── Confetti ────────────────────────────────────────────────


def test_edge_bursts_match_palette():
    left, right = EDGE_BURSTS
    assert (left.angle, left.origin_x) == (60, 0.0)
    assert (right.angle, right.origin_x) == (120, 1.0)
    for burst in EDGE_BURSTS:
        assert burst.particle_count == 2
        assert burst.spread == 55
        assert burst.colors == CONFETTI_COLORS


def test_run_emits_until_deadline():
    sink = []
    cannon = ConfettiCannon(sink.append)
    cannon.fire(now=0.0)
    t = 0.0
    frames = 0
    while cannon.active_runs:
        t += 1 / 60
        cannon.tick(t)
        frames += 1
    assert t == pytest.approx(CELEBRATION_SECONDS, abs=1 / 60)
    assert len(sink) == frames
    assert all(len(bursts) == 2 for bursts in sink)


def test_overlapping_runs_are_independent():
    cannon = ConfettiCannon()
    cannon.fire(now=0.0)
    cannon.fire(now=2.0)
    assert len(cannon.tick(3.0)) == 4
    cannon.tick(5.5)
    assert cannon.active_runs == 1
    assert len(cannon.tick(6.0)) == 2
    cannon.tick(7.5)
    assert cannon.active_runs == 0


def test_clear_stops_everything():
    sink = []
    cannon = ConfettiCannon(sink.append)
    cannon.fire(now=0.0)
    cannon.clear()
    assert cannon.tick(0.1) == []
    assert sink == []


def test_burst_serializes_colors_as_list():
    data = EDGE_BURSTS[0].to_dict()
    assert data["colors"] == list(CONFETTI_COLORS)
    assert data["particle_count"] == 2


# ── Wish launch ─────────────────────────────────────────────


def make_launch(engine, rng):
    stage = Stage()
    add_launch_elements(stage)
    renderer = SceneRenderer(engine, shape_count=6, star_count=10, rng=rng)
    renderer.activate(800, 600)
    return WishLaunch(engine, stage, renderer), stage, renderer


def test_launch_choreography(engine, clock, rng):
    launch, stage, renderer = make_launch(engine, rng)
    entry = stage.element(WISH_ENTRY_ID)
    text = stage.element(LAUNCHED_WISH_ID)
    confirmation = stage.element(CONFIRMATION_ID)

    assert launch.start("see the world")
    assert launch.is_running

    run(engine, clock, 0.6)
    assert not entry.visible
    assert text.visible

    run(engine, clock, 3.0)
    assert not text.visible
    assert text.y == RISE_DISTANCE
    assert confirmation.visible

    run(engine, clock, 1.0)
    assert confirmation.opacity == 1.0
    assert launch.is_complete
    # Shapes scattered alongside
    assert all(shape.opacity == 0.0 for shape in renderer.shapes)


def test_launch_runs_once(engine, clock, rng):
    launch, _, _ = make_launch(engine, rng)
    assert launch.start("first")
    assert not launch.start("second")
    run(engine, clock, 5.0)
    assert not launch.start("third")
    assert launch.wish_text == "first"


def test_launch_creates_missing_elements(engine, clock, rng):
    renderer = SceneRenderer(engine, shape_count=0, star_count=0, rng=rng)
    renderer.activate(800, 600)
    stage = Stage()
    launch = WishLaunch(engine, stage, renderer)
    assert launch.start("wish")
    run(engine, clock, 5.0)
    assert stage.element(CONFIRMATION_ID).opacity == 1.0
