from typing import Optional

import numpy as np
import pytest

from birthday_site.animation.tween import TweenEngine
from birthday_site.document.schema import BirthdayConfig
from birthday_site.media.controller import EmbedState, PlayerEvents
from birthday_site.wishes.store import LocalStore


class ManualClock:
    """Engine clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> float:
        self.t += seconds
        return self.t


class FakePlayer:
    """Records commands like the real embed; state changes come from the test."""

    def __init__(self, video_id: str, events: PlayerEvents):
        self.video_id = video_id
        self.events = events
        self.calls: list[tuple] = []
        self.state = int(EmbedState.UNSTARTED)
        self.volume: Optional[int] = None
        self.destroyed = False

    def play_video(self) -> None:
        self.calls.append(("play",))

    def pause_video(self) -> None:
        self.calls.append(("pause",))

    def load_video_by_id(self, video_id: str) -> None:
        self.calls.append(("load", video_id))
        self.video_id = video_id

    def set_volume(self, volume: int) -> None:
        self.volume = volume

    def get_player_state(self) -> int:
        return self.state

    def destroy(self) -> None:
        self.destroyed = True

    # Test helpers: act like the embed reporting back
    def fire_ready(self) -> None:
        self.events.on_ready()

    def fire_state(self, state: EmbedState) -> None:
        self.state = int(state)
        self.events.on_state_change(int(state))


class FakePlayerFactory:
    def __init__(self):
        self.players: list[FakePlayer] = []

    def __call__(self, video_id: str, events: PlayerEvents) -> FakePlayer:
        player = FakePlayer(video_id, events)
        self.players.append(player)
        return player

    @property
    def last(self) -> FakePlayer:
        return self.players[-1]


class FakeClipboard:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.writes: list[str] = []

    async def write_text(self, text: str) -> None:
        if self.fail:
            raise PermissionError("clipboard denied")
        self.writes.append(text)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def engine(clock):
    return TweenEngine(clock=clock)


@pytest.fixture
def store():
    s = LocalStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def config():
    return BirthdayConfig.model_validate({
        "recipientName": "Ava",
        "welcomeMessage": "I built a little world for you...",
        "birthdayMessage": "Happy birthday!",
        "bentoItems": [
            {"icon": "✨", "title": "Kindness", "text": "Rare and beautiful."},
            {"icon": "😊", "title": "That Smile", "text": "A work of art."},
            {"icon": "🌟", "title": "Spirit", "text": "Infectious."},
        ],
        "galleryTitle": "Memories",
        "photos": [
            {"url": "https://example.com/a.jpg", "caption": "A"},
            {"url": "https://example.com/b.jpg", "caption": "B"},
            {"url": "https://example.com/c.jpg", "caption": "C"},
        ],
        "videos": [
            {"caption": "Beach", "processed": {"type": "youtube", "id": "dQw4w9WgXcQ"}},
        ],
        "playlist": [
            {"title": "Track one", "type": "youtube", "id": "jfKfPfyJRdk"},
            {"title": "Track two", "type": "youtube", "id": "5qap5aO4i9A"},
        ],
        "letter": "Dear Ava,",
        "wishMessage": "May the next year...",
        "finalMessage": "Happy Birthday! ❤️",
    })
