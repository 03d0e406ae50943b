"""Background music controller wrapping a streaming embed player."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Optional, Protocol, Sequence

from ..document.schema import PlaylistItem

logger = logging.getLogger(__name__)


class PlayerState(str, Enum):
    """Controller lifecycle."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"


class EmbedState(IntEnum):
    """State codes reported by the embed (YouTube iframe API values)."""

    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


class EmbedPlayer(Protocol):
    """The subset of the embed player API the controller drives."""

    def play_video(self) -> None: ...

    def pause_video(self) -> None: ...

    def load_video_by_id(self, video_id: str) -> None: ...

    def set_volume(self, volume: int) -> None: ...

    def get_player_state(self) -> int: ...

    def destroy(self) -> None: ...


@dataclass
class PlayerEvents:
    """Callbacks the embed invokes."""

    on_ready: Callable[[], None]
    on_state_change: Callable[[int], None]


PlayerFactory = Callable[[str, PlayerEvents], EmbedPlayer]


class ReadinessNotifier:
    """Signals that the embed API has finished loading.

    One per viewer, injected, so several viewers never share a global hook.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def is_ready(self) -> bool:
        return self._event.is_set()

    def notify(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class MediaController:
    """Play/pause/track control over one embed instance.

    Nothing here raises before the player is ready: every control is a
    no-op until the embed reports ready. ``is_playing`` only changes when the
    embed says so, since autoplay blocking or buffering can make actual
    playback differ from what was requested.
    """

    def __init__(
        self,
        player_factory: PlayerFactory,
        notifier: ReadinessNotifier,
        playlist: Sequence[PlaylistItem] = (),
        default_volume: int = 30,
    ):
        self._player_factory = player_factory
        self._notifier = notifier
        self._playlist: list[PlaylistItem] = list(playlist)
        self._default_volume = default_volume
        self._player: Optional[EmbedPlayer] = None
        self._state = PlayerState.UNINITIALIZED
        self._is_playing = False
        self._current_track = 0
        self._initial_track_id: Optional[str] = self._playlist[0].id if self._playlist else None
        self._init_task: Optional[asyncio.Task] = None
        self._generation = 0  # bumps on every player (re)creation

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state in (PlayerState.READY, PlayerState.PLAYING, PlayerState.PAUSED)

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def current_track(self) -> int:
        return self._current_track

    @property
    def playlist(self) -> list[PlaylistItem]:
        return list(self._playlist)

    def start(self) -> Optional[asyncio.Task]:
        """Begin initialization in the background."""
        if self._init_task is None or self._init_task.done():
            self._init_task = asyncio.create_task(self.initialize())
        return self._init_task

    async def initialize(self) -> None:
        """Wait for the embed API, then create the player."""
        if self._initial_track_id is None:
            logger.info("No playlist; music controls stay inert")
            return

        self._state = PlayerState.INITIALIZING
        if not self._notifier.is_ready:
            logger.debug("Embed API not loaded yet, waiting")
        await self._notifier.wait()
        self._create_player(self._initial_track_id)

    def set_initial_track(self, track_id: Optional[str]) -> None:
        """Swap the initially loaded track, recreating the player if it changed."""
        if track_id == self._initial_track_id:
            return
        self._initial_track_id = track_id
        self._current_track = 0
        if self._player is None:
            return
        logger.info(f"Initial track changed to {track_id}; recreating player")
        self._destroy_player()
        if track_id is not None:
            self._create_player(track_id)

    def toggle_music(self) -> None:
        if not self._can_control():
            return
        if self._player.get_player_state() == EmbedState.PLAYING:
            self._player.pause_video()
        else:
            self._player.play_video()

    def play(self) -> None:
        if not self._can_control():
            return
        self._player.play_video()

    def pause(self) -> None:
        if not self._can_control():
            return
        self._player.pause_video()

    def play_track(self, index: int) -> None:
        """Load track ``index``, or toggle play/pause if it is already loaded."""
        if not self._can_control():
            return
        if not 0 <= index < len(self._playlist):
            logger.debug(f"Ignoring play_track({index}), playlist has {len(self._playlist)} tracks")
            return
        if index == self._current_track:
            self.toggle_music()
            return
        track = self._playlist[index]
        self._player.load_video_by_id(track.id)
        self._current_track = index
        logger.info(f"Loaded track {index}: {track.title or track.id}")

    def teardown(self) -> None:
        """Cancel pending initialization and destroy the player."""
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()
        self._init_task = None
        self._destroy_player()

    def _can_control(self) -> bool:
        return self.is_ready and self._player is not None

    def _create_player(self, track_id: str) -> None:
        self._generation += 1
        generation = self._generation
        events = PlayerEvents(
            on_ready=lambda: self._handle_ready(generation),
            on_state_change=lambda code: self._handle_state_change(generation, code),
        )
        self._state = PlayerState.INITIALIZING
        self._player = self._player_factory(track_id, events)
        logger.debug(f"Created embed player for {track_id}")

    def _destroy_player(self) -> None:
        if self._player is not None:
            try:
                self._player.destroy()
            except Exception as e:
                logger.warning(f"Embed player destroy failed: {e}")
        self._player = None
        self._generation += 1
        self._is_playing = False
        self._state = PlayerState.UNINITIALIZED

    def _handle_ready(self, generation: int) -> None:
        # Events from a player we already replaced are ignored
        if generation != self._generation or self._player is None:
            return
        self._player.set_volume(self._default_volume)
        self._state = PlayerState.READY
        logger.info("Music player ready")

    def _handle_state_change(self, generation: int, code: int) -> None:
        if generation != self._generation or not self.is_ready:
            return
        if code == EmbedState.PLAYING:
            self._is_playing = True
            self._state = PlayerState.PLAYING
        elif code in (EmbedState.PAUSED, EmbedState.ENDED):
            self._is_playing = False
            self._state = PlayerState.PAUSED
        logger.debug(f"Embed state {code}, playing={self._is_playing}")
