import pytest

from birthday_site.overlay.gallery import (
    MAX_TILT,
    TILT_DURATION,
    GalleryOverlay,
    PointerEvent,
    WheelEvent,
    cards_for,
)
from birthday_site.presentation.stage import EventTarget, Rect


def make_overlay(engine, photos=3):
    container = EventTarget("photo-gallery-wrapper")
    strip = EventTarget("photo-gallery")
    overlay = GalleryOverlay(engine, container, strip, cards_for(photos))
    overlay.set_layout(Rect(0, 0, 200, 100), scroll_width=1000, client_width=200)
    return overlay, container, strip


def settle(engine, clock):
    clock.advance(TILT_DURATION + 0.1)
    engine.tick()


# ── Cards ───────────────────────────────────────────────────


def test_cards_alternate_rotation():
    cards = cards_for(4)
    assert [c.base_rotation for c in cards] == [-2, 3, -4, 5]


def test_empty_gallery_has_no_cards(engine):
    overlay, container, _ = make_overlay(engine, photos=0)
    overlay.attach()
    container.dispatch("mousemove", PointerEvent(100, 50))
    assert overlay.cards == []
    assert engine.active_count == 0


# ── Listener lifecycle ──────────────────────────────────────


def test_attach_and_detach(engine):
    overlay, container, strip = make_overlay(engine)
    overlay.attach()
    overlay.attach()
    assert container.listener_count("mousemove") == 1
    assert container.listener_count("mouseleave") == 1
    assert strip.listener_count("wheel") == 1

    overlay.detach()
    overlay.detach()
    assert container.listener_count() == 0
    assert strip.listener_count() == 0
    assert not overlay.is_attached


def test_detached_overlay_ignores_input(engine):
    overlay, container, strip = make_overlay(engine)
    container.dispatch("mousemove", PointerEvent(0, 0))
    event = WheelEvent(0, 50)
    strip.dispatch("wheel", event)
    assert engine.active_count == 0
    assert not event.default_prevented
    assert overlay.strip.scroll_left == 0


def test_detach_kills_card_tweens(engine, clock):
    overlay, container, _ = make_overlay(engine)
    overlay.attach()
    container.dispatch("mousemove", PointerEvent(0, 0))
    assert engine.active_count == 3
    overlay.detach()
    assert engine.active_count == 0


# ── Tilt ────────────────────────────────────────────────────


def test_pointer_corner_tilts_fully(engine, clock):
    overlay, container, _ = make_overlay(engine)
    overlay.attach()
    container.dispatch("mousemove", PointerEvent(0, 0))
    settle(engine, clock)
    for card in overlay.cards:
        assert card.rotate_x == pytest.approx(MAX_TILT)
        assert card.rotate_y == pytest.approx(-MAX_TILT)


def test_pointer_centre_is_flat(engine, clock):
    overlay, container, _ = make_overlay(engine)
    overlay.attach()
    container.dispatch("mousemove", PointerEvent(100, 50))
    settle(engine, clock)
    assert overlay.cards[0].rotate_x == pytest.approx(0.0)
    assert overlay.cards[0].rotate_y == pytest.approx(0.0)


def test_pointer_uses_container_offset(engine, clock):
    overlay, container, _ = make_overlay(engine)
    overlay.set_layout(Rect(left=50, top=20, width=200, height=100), 1000, 200)
    overlay.attach()
    container.dispatch("mousemove", PointerEvent(250, 120))
    settle(engine, clock)
    assert overlay.cards[0].rotate_x == pytest.approx(-MAX_TILT)
    assert overlay.cards[0].rotate_y == pytest.approx(MAX_TILT)


def test_leave_returns_to_flat(engine, clock):
    overlay, container, _ = make_overlay(engine)
    overlay.attach()
    container.dispatch("mousemove", PointerEvent(0, 0))
    settle(engine, clock)
    container.dispatch("mouseleave", None)
    settle(engine, clock)
    assert all(c.rotate_x == 0.0 and c.rotate_y == 0.0 for c in overlay.cards)


def test_rapid_moves_leave_one_tween_per_card(engine, clock):
    overlay, container, _ = make_overlay(engine)
    overlay.attach()
    for x in range(0, 200, 20):
        container.dispatch("mousemove", PointerEvent(x, 10))
    assert engine.active_count == len(overlay.cards)


# ── Wheel ───────────────────────────────────────────────────


def test_vertical_wheel_scrolls_horizontally(engine):
    overlay, _, strip = make_overlay(engine)
    overlay.attach()
    event = WheelEvent(delta_x=0, delta_y=120)
    strip.dispatch("wheel", event)
    assert event.default_prevented
    assert overlay.strip.scroll_left == 120


def test_horizontal_wheel_keeps_native_behaviour(engine):
    overlay, _, strip = make_overlay(engine)
    overlay.attach()
    event = WheelEvent(delta_x=80, delta_y=10)
    strip.dispatch("wheel", event)
    assert not event.default_prevented
    assert overlay.strip.scroll_left == 0


def test_scroll_is_clamped(engine):
    overlay, _, strip = make_overlay(engine)
    overlay.attach()
    strip.dispatch("wheel", WheelEvent(0, -50))
    assert overlay.strip.scroll_left == 0
    strip.dispatch("wheel", WheelEvent(0, 5000))
    assert overlay.strip.scroll_left == 800
