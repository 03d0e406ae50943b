import asyncio

import pytest

from birthday_site.media.controller import PlayerEvents
from birthday_site.server.remote import RemoteClipboard, RemotePlayerFactory


def make_factory():
    sent = []
    return RemotePlayerFactory(sent.append), sent


def noop_events(log=None):
    log = log if log is not None else []
    return PlayerEvents(on_ready=lambda: log.append("ready"), on_state_change=log.append)


# ── Remote players ──────────────────────────────────────────


def test_destroyed_players_are_forgotten():
    factory, _ = make_factory()
    for _ in range(100):
        player = factory("jfKfPfyJRdk", noop_events())
        assert factory.live_count == 1
        player.destroy()
    assert factory.live_count == 0


def test_destroy_sends_one_command():
    factory, sent = make_factory()
    player = factory("jfKfPfyJRdk", noop_events())
    player.destroy()
    player.destroy()
    assert [m.command for m in sent] == ["create", "destroy"]


def test_events_for_destroyed_player_are_dropped():
    factory, _ = make_factory()
    log = []
    player = factory("jfKfPfyJRdk", noop_events(log))
    factory.dispatch(player.player_id, "ready")
    player.destroy()
    factory.dispatch(player.player_id, "state_change", state=1)
    assert log == ["ready"]


def test_state_change_updates_player():
    factory, _ = make_factory()
    log = []
    player = factory("jfKfPfyJRdk", noop_events(log))
    factory.dispatch(player.player_id, "state_change", state=1)
    assert player.get_player_state() == 1
    assert log == [1]


# ── Remote clipboard ────────────────────────────────────────


@pytest.mark.asyncio
async def test_clipboard_resolves_from_client_reply():
    sent = []
    clipboard = RemoteClipboard(sent.append, timeout=1.0)
    task = asyncio.create_task(clipboard.write_text("hello"))
    await asyncio.sleep(0)
    clipboard.resolve(sent[0].request_id, ok=True)
    await task
    assert sent[0].text == "hello"


@pytest.mark.asyncio
async def test_clipboard_timeout_raises():
    clipboard = RemoteClipboard(lambda msg: None, timeout=0.01)
    with pytest.raises(RuntimeError, match="timed out"):
        await clipboard.write_text("hello")
