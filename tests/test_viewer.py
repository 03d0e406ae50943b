import pytest

from birthday_site.animation.tween import TweenEngine
from birthday_site.document.schema import BirthdayConfig
from birthday_site.media.controller import EmbedState, PlayerState, ReadinessNotifier
from birthday_site.presentation.stage import Rect
from birthday_site.presentation.steps import Step, panel_id
from birthday_site.viewer import BirthdayViewer
from birthday_site.wishes.ledger import COPY_FAILURE, COPY_SUCCESS

from conftest import FakeClipboard, FakePlayerFactory


class Harness:
    """A mounted viewer with a manual clock and fake browser resources."""

    def __init__(self, config, store, clock, rng, clipboard=None):
        self.clock = clock
        self.factory = FakePlayerFactory()
        self.clipboard = clipboard or FakeClipboard()
        self.notifier = ReadinessNotifier()
        self.bursts = []
        self.start_over_calls = 0
        self.viewer = BirthdayViewer(
            config,
            store=store,
            clipboard=self.clipboard,
            player_factory=self.factory,
            notifier=self.notifier,
            on_start_over=self._on_start_over,
            engine=TweenEngine(clock=clock),
            shape_count=9,
            star_count=50,
            rng=rng,
            wall_clock=clock,
            burst_sink=self.bursts.append,
        )
        self.viewer.mount(1280, 720, start_loops=False)

    def _on_start_over(self):
        self.start_over_calls += 1

    def run(self, seconds: float, step: float = 0.05):
        """Advance time, driving everything through the frame loop."""
        for _ in range(int(round(seconds / step))):
            self.clock.advance(step)
            self.viewer.renderer.render_frame()

    async def ready_music(self):
        self.notifier.notify()
        await self.viewer.media.initialize()
        self.factory.last.fire_ready()


@pytest.fixture
def harness(config, store, clock, rng):
    h = Harness(config, store, clock, rng)
    yield h
    h.viewer.unmount()


# ── Mount / unmount ─────────────────────────────────────────


def test_mount_shows_welcome(harness):
    viewer = harness.viewer
    assert viewer.is_mounted
    assert viewer.current_step == Step.WELCOME
    assert viewer.stage.visible_panels() == [panel_id(Step.WELCOME)]
    assert viewer.renderer.shape_count == 9


def test_panels_cover_every_step(harness):
    panels = harness.viewer.panels()
    assert [p["step"] for p in panels] == list(range(1, 9))
    reasons = panels[Step.REASONS - 1]
    assert [item["col_span"] for item in reasons["items"]] == [1, 1, 2]
    videos = panels[Step.VIDEOS - 1]
    assert videos["videos"][0]["src"] == "https://www.youtube.com/embed/dQw4w9WgXcQ"


def test_empty_collections_render_empty(store, clock, rng):
    h = Harness(BirthdayConfig(recipient_name="Sam", photos=None, bento_items=None), store, clock, rng)
    panels = h.viewer.panels()
    assert panels[Step.REASONS - 1]["items"] == []
    assert panels[Step.GALLERY - 1]["photos"] == []
    assert panels[Step.PLAYLIST - 1]["tracks"] == []
    h.viewer.go_to_step(Step.GALLERY)
    h.run(1.2)
    assert h.viewer.current_step == Step.GALLERY
    h.viewer.unmount()


def test_unmount_tears_everything_down(harness):
    viewer = harness.viewer
    viewer.go_to_step(Step.GALLERY)
    harness.run(1.2)
    viewer.unmount()
    assert not viewer.is_mounted
    assert viewer.renderer.is_disposed
    assert viewer.engine.active_count == 0
    assert viewer.stage.gallery_container.listener_count() == 0
    viewer.unmount()


def test_remount_restores_wishes(config, store, clock, rng):
    first = Harness(config, store, clock, rng)
    first.viewer.add_wish("keep me")
    first.viewer.unmount()
    second = Harness(config, store, clock, rng)
    assert second.viewer.ledger.entries == ["keep me"]
    second.viewer.unmount()


# ── Navigation ──────────────────────────────────────────────


def test_walk_through_all_steps(harness):
    viewer = harness.viewer
    harness.run(1.6)  # intro
    while viewer.advance():
        harness.run(1.1)
        assert len(viewer.stage.visible_panels()) == 1
    assert viewer.current_step == Step.WISH
    assert viewer.snapshot()["progress"] == 1.0


def test_go_to_current_step_is_noop(harness):
    assert not harness.viewer.go_to_step(Step.WELCOME)


def test_go_home_recalls_shapes(harness):
    viewer = harness.viewer
    viewer.go_to_step(Step.LETTER)
    harness.run(1.2)
    viewer.celebrate()
    harness.run(2.0)
    assert not all(shape.at_rest() for shape in viewer.renderer.shapes)
    assert viewer.go_home()
    harness.run(1.2)
    assert viewer.current_step == Step.WELCOME
    assert all(shape.at_rest() for shape in viewer.renderer.shapes)


def test_start_over_notifies_host(harness):
    harness.viewer.start_over()
    assert harness.start_over_calls == 1


# ── Celebration ─────────────────────────────────────────────


def test_celebrate_fires_confetti_for_five_seconds(harness):
    harness.viewer.celebrate()
    harness.run(1.0)
    assert harness.bursts
    assert harness.viewer.confetti.active_runs == 1
    harness.run(4.2)
    assert harness.viewer.confetti.active_runs == 0
    count = len(harness.bursts)
    harness.run(1.0)
    assert len(harness.bursts) == count


def test_celebrate_twice_keeps_shape_count(harness):
    viewer = harness.viewer
    viewer.celebrate()
    harness.run(0.5)
    viewer.celebrate()
    assert viewer.renderer.shape_count == 9
    assert viewer.confetti.active_runs == 2
    # The second celebration restarted the shapes from rest
    harness.run(5.2)
    assert viewer.confetti.active_runs == 0
    assert viewer.renderer.shape_count == 9
    assert all(shape.opacity == 0.0 for shape in viewer.renderer.shapes)


# ── Gallery ─────────────────────────────────────────────────


def test_gallery_listeners_follow_step(harness):
    viewer = harness.viewer
    container = viewer.stage.gallery_container
    assert container.listener_count() == 0

    viewer.go_to_step(Step.GALLERY)
    harness.run(1.2)
    assert container.listener_count("mousemove") == 1
    assert viewer.stage.gallery_strip.listener_count("wheel") == 1

    viewer.advance()
    harness.run(1.2)
    assert container.listener_count() == 0
    assert viewer.stage.gallery_strip.listener_count() == 0


def test_gallery_input_while_visible(harness):
    viewer = harness.viewer
    viewer.go_to_step(Step.GALLERY)
    harness.run(1.2)
    viewer.set_gallery_layout(Rect(0, 0, 400, 300), scroll_width=1200, client_width=400)
    assert viewer.pointer_move(0, 0) == 1
    harness.run(0.6)
    assert viewer.gallery.cards[0].rotate_x == pytest.approx(10.0)
    event = viewer.wheel(0, 100)
    assert event.default_prevented
    assert viewer.snapshot()["gallery"]["scroll_left"] == 100
    viewer.pointer_leave()
    harness.run(0.6)
    assert viewer.gallery.cards[0].rotate_x == 0.0


def test_gallery_input_ignored_elsewhere(harness):
    viewer = harness.viewer
    assert viewer.pointer_move(10, 10) == 0
    assert not viewer.wheel(0, 100).default_prevented


# ── Music ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_begin_plays_music_when_ready(harness):
    await harness.ready_music()
    harness.viewer.begin()
    assert harness.factory.last.calls == [("play",)]
    assert harness.viewer.sequencer.target_step == Step.BIRTHDAY


def test_begin_before_ready_still_navigates(harness):
    assert harness.viewer.begin()
    assert harness.factory.players == []
    assert harness.viewer.media.state == PlayerState.UNINITIALIZED


@pytest.mark.asyncio
async def test_music_state_in_snapshot(harness):
    await harness.ready_music()
    harness.viewer.toggle_music()
    harness.factory.last.fire_state(EmbedState.PLAYING)
    music = harness.viewer.snapshot()["music"]
    assert music["is_playing"] is True
    assert music["state"] == "playing"
    harness.viewer.play_track(1)
    assert harness.viewer.snapshot()["music"]["current_track"] == 1


@pytest.mark.asyncio
async def test_unmount_destroys_player(harness):
    await harness.ready_music()
    player = harness.factory.last
    harness.viewer.unmount()
    assert player.destroyed


# ── Wishes ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_copy_wishes_status(harness):
    viewer = harness.viewer
    viewer.add_wish("one")
    viewer.add_wish("two")
    assert await viewer.copy_wishes() == COPY_SUCCESS
    assert harness.clipboard.writes == ["one\ntwo"]
    assert viewer.snapshot()["wishes"]["status"] == COPY_SUCCESS
    harness.run(2.1)
    assert viewer.snapshot()["wishes"]["status"] is None


@pytest.mark.asyncio
async def test_copy_wishes_failure(config, store, clock, rng):
    h = Harness(config, store, clock, rng, clipboard=FakeClipboard(fail=True))
    h.viewer.add_wish("one")
    h.viewer.add_wish("two")
    assert await h.viewer.copy_wishes() == COPY_FAILURE
    assert h.viewer.snapshot()["wishes"]["status"] == COPY_FAILURE
    h.run(2.1)
    wishes = h.viewer.snapshot()["wishes"]
    assert wishes["status"] is None
    assert wishes["entries"] == ["one", "two"]
    h.viewer.unmount()


def test_launch_wish_once(harness):
    viewer = harness.viewer
    viewer.add_wish("fly")
    assert viewer.launch_wish()
    assert not viewer.launch_wish()
    harness.run(5.0)
    wishes = viewer.snapshot()["wishes"]
    assert wishes["is_launched"]
    assert wishes["launched_wish"] == "fly"
    assert viewer.launcher.is_complete


def test_remove_wish(harness):
    viewer = harness.viewer
    viewer.add_wish("a")
    viewer.add_wish("b")
    assert viewer.remove_wish(0)
    assert viewer.snapshot()["wishes"]["entries"] == ["b"]
