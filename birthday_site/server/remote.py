"""Server-side proxies for browser-only resources (embed player, clipboard).

The real player and clipboard live in the client. These proxies turn engine
calls into outgoing messages and feed the client's replies back in.
"""

import asyncio
import itertools
import logging
from typing import Callable, Optional

from pydantic import BaseModel

from ..media.controller import EmbedState, PlayerEvents
from .protocol import ClipboardWriteMessage, PlayerCommandMessage

logger = logging.getLogger(__name__)

Send = Callable[[BaseModel], None]


class RemoteEmbedPlayer:
    """Proxy for one embed player instance in the client."""

    def __init__(
        self,
        player_id: int,
        send: Send,
        events: PlayerEvents,
        on_destroy: Optional[Callable[[int], None]] = None,
    ):
        self.player_id = player_id
        self.events = events
        self._send = send
        self._on_destroy = on_destroy
        self._state = int(EmbedState.UNSTARTED)
        self.destroyed = False

    def _command(self, command: str, **args) -> None:
        if self.destroyed:
            return
        self._send(PlayerCommandMessage(player_id=self.player_id, command=command, args=args))

    def play_video(self) -> None:
        self._command("playVideo")

    def pause_video(self) -> None:
        self._command("pauseVideo")

    def load_video_by_id(self, video_id: str) -> None:
        self._command("loadVideoById", video_id=video_id)

    def set_volume(self, volume: int) -> None:
        self._command("setVolume", volume=volume)

    def get_player_state(self) -> int:
        return self._state

    def destroy(self) -> None:
        if self.destroyed:
            return
        self._command("destroy")
        self.destroyed = True
        if self._on_destroy is not None:
            self._on_destroy(self.player_id)

    def report_state(self, state: int) -> None:
        self._state = state


class RemotePlayerFactory:
    """Creates remote players and routes client player events to them."""

    def __init__(self, send: Send):
        self._send = send
        self._ids = itertools.count(1)
        self._players: dict[int, RemoteEmbedPlayer] = {}

    def __call__(self, video_id: str, events: PlayerEvents) -> RemoteEmbedPlayer:
        player = RemoteEmbedPlayer(next(self._ids), self._send, events, on_destroy=self._forget)
        self._players[player.player_id] = player
        self._send(PlayerCommandMessage(
            player_id=player.player_id,
            command="create",
            args={"video_id": video_id, "autoplay": 0, "controls": 0, "loop": 1},
        ))
        return player

    @property
    def live_count(self) -> int:
        return len(self._players)

    def _forget(self, player_id: int) -> None:
        self._players.pop(player_id, None)

    def dispatch(self, player_id: int, event: str, state: Optional[int] = None) -> None:
        player = self._players.get(player_id)
        if player is None or player.destroyed:
            logger.debug(f"Dropping {event} for stale player {player_id}")
            return
        if event == "ready":
            player.events.on_ready()
        elif event == "state_change" and state is not None:
            player.report_state(state)
            player.events.on_state_change(state)


class RemoteClipboard:
    """Asks the client to write text and waits for its answer."""

    def __init__(self, send: Send, timeout: float = 5.0):
        self._send = send
        self._timeout = timeout
        self._ids = itertools.count(1)
        self._pending: dict[int, asyncio.Future] = {}

    async def write_text(self, text: str) -> None:
        request_id = next(self._ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        self._send(ClipboardWriteMessage(request_id=request_id, text=text))
        try:
            ok, error = await asyncio.wait_for(future, self._timeout)
        except asyncio.TimeoutError:
            raise RuntimeError("Clipboard write timed out") from None
        finally:
            self._pending.pop(request_id, None)
        if not ok:
            raise RuntimeError(error or "Clipboard write rejected")

    def resolve(self, request_id: int, ok: bool, error: Optional[str] = None) -> None:
        future = self._pending.get(request_id)
        if future is not None and not future.done():
            future.set_result((ok, error))

    def cancel_all(self) -> None:
        for future in self._pending.values():
            if not future.done():
                future.cancel()
        self._pending.clear()
