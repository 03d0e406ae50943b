"""WebSocket endpoint and viewer session management."""

import asyncio
import json
import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from .protocol import (
    AddWishMessage,
    ConfettiMessage,
    DocumentMessage,
    ErrorMessage,
    GalleryLayoutMessage,
    GoToStepMessage,
    MountMessage,
    PlayerEventMessage,
    PlayTrackMessage,
    PointerMessage,
    RemoveWishMessage,
    ResizeMessage,
    SceneFrameMessage,
    StarFieldMessage,
    StartOverMessage,
    StatusMessage,
    ViewStateMessage,
    WheelMessage,
    ClipboardResultMessage,
    SIMPLE_ACTIONS,
)
from .remote import RemoteClipboard, RemotePlayerFactory
from ..api.storage import ConfigNotFound, ConfigRepository, StorageError
from ..config import Settings, settings as default_settings
from ..document.schema import BirthdayConfig
from ..effects.celebration import ConfettiBurst
from ..media.controller import ReadinessNotifier
from ..presentation.stage import Rect
from ..presentation.steps import TOTAL_STEPS
from ..viewer import BirthdayViewer
from ..wishes.store import LocalStore

logger = logging.getLogger(__name__)


class ViewerSession:
    """Manages a single client's viewer session.

    Outgoing messages go through a queue drained by one sender task, so
    engine callbacks (which are synchronous) can emit messages without
    awaiting the socket.
    """

    def __init__(
        self,
        websocket: WebSocket,
        repository: ConfigRepository,
        store: LocalStore,
        settings: Optional[Settings] = None,
    ):
        self.websocket = websocket
        self.repository = repository
        self.store = store
        self.settings = settings or default_settings
        self.viewer: Optional[BirthdayViewer] = None

        self._outbox: asyncio.Queue[BaseModel] = asyncio.Queue()
        self._sender_task: Optional[asyncio.Task] = None
        self._stream_task: Optional[asyncio.Task] = None
        self._background: set[asyncio.Task] = set()

        # The embed API loads once per page, not once per viewer
        self.notifier = ReadinessNotifier()
        self.players = RemotePlayerFactory(self.send)
        self.clipboard = RemoteClipboard(self.send, timeout=self.settings.clipboard_timeout_seconds)

        self._last_state: Optional[dict] = None
        self._last_frame = 0

    def start(self) -> None:
        if self._sender_task is None:
            self._sender_task = asyncio.create_task(self._sender())

    def send(self, message: BaseModel) -> None:
        self._outbox.put_nowait(message)

    async def _sender(self) -> None:
        while True:
            message = await self._outbox.get()
            try:
                await self.websocket.send_text(message.model_dump_json())
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug(f"Dropping outgoing {getattr(message, 'type', '?')}: {e}")
                return

    async def handle_message(self, data: str) -> None:
        """Process an incoming WebSocket message."""
        try:
            msg = json.loads(data)
            msg_type = msg.get("type")

            if msg_type == "mount":
                await self._handle_mount(msg)
            elif msg_type == "embed_api_ready":
                self.notifier.notify()
            elif msg_type == "player_event":
                event = PlayerEventMessage(**msg)
                self.players.dispatch(event.player_id, event.event, event.state)
            elif msg_type == "clipboard_result":
                result = ClipboardResultMessage(**msg)
                self.clipboard.resolve(result.request_id, result.ok, result.error)
            elif msg_type == "unmount":
                self._unmount()
                self._send_status("unmounted")
            elif msg_type in SIMPLE_ACTIONS:
                self._handle_action(msg_type)
            elif msg_type in ("go_to_step", "play_track", "add_wish", "remove_wish",
                              "resize", "pointer", "wheel", "gallery_layout"):
                self._handle_input(msg_type, msg)
            else:
                self._send_error(f"Unknown message type: {msg_type}")
                return

            if self.viewer is not None:
                self._send_view_state()

        except json.JSONDecodeError as e:
            self._send_error(f"Invalid JSON: {e}")
        except ValidationError as e:
            self._send_error(f"Validation error: {e}")
        except _NotMounted:
            self._send_error("No birthday site is mounted", code="not_mounted")
        except Exception as e:
            logger.exception("Error handling message")
            self._send_error(f"Internal error: {e}")

    async def _handle_mount(self, msg: dict) -> None:
        """Load the document and start a fresh viewer."""
        mount = MountMessage(**msg)

        if mount.site_id:
            try:
                raw = await self.repository.load(mount.site_id)
            except ConfigNotFound:
                self._send_error("Birthday site not found.", code="not_found")
                return
            except StorageError as e:
                logger.error(f"Could not load site {mount.site_id}: {e}")
                self._send_error("Failed to load birthday data.", code="storage_error")
                return
            config = BirthdayConfig.model_validate(raw)
        elif mount.config is not None:
            config = mount.config
        else:
            self._send_error("Mount needs a site_id or a config", code="bad_request")
            return

        self._unmount()

        self.viewer = BirthdayViewer(
            config,
            store=self.store,
            clipboard=self.clipboard,
            player_factory=self.players,
            notifier=self.notifier,
            on_start_over=lambda: self.send(StartOverMessage()),
            shape_count=self.settings.shape_count,
            star_count=self.settings.star_count,
            fps=self.settings.render_fps,
            default_volume=self.settings.default_volume,
            burst_sink=self._send_bursts,
        )
        self.viewer.mount(mount.width, mount.height)

        self.send(DocumentMessage(
            config=config.to_json_dict(),
            panels=self.viewer.panels(),
            total_steps=TOTAL_STEPS,
        ))
        stars = self.viewer.renderer.star_field
        if stars is not None:
            self.send(StarFieldMessage(points=stars.points.round(3).tolist()))
        self._send_status("mounted", f"Viewing the site for {config.recipient_name}")

        self._last_state = None
        self._last_frame = 0
        self._stream_task = asyncio.create_task(self._stream())
        logger.info(f"Mounted viewer (site_id={mount.site_id or 'inline'})")

    def _handle_action(self, action: str) -> None:
        viewer = self._require_viewer()

        if action == "begin":
            viewer.begin()
        elif action == "next":
            viewer.advance()
        elif action == "go_home":
            viewer.go_home()
        elif action == "celebrate":
            viewer.celebrate()
        elif action == "launch_wish":
            viewer.launch_wish()
        elif action == "toggle_music":
            viewer.toggle_music()
        elif action == "start_over":
            viewer.start_over()
        elif action == "copy_wishes":
            # Awaits a clipboard_result, which only this receive loop can deliver
            task = asyncio.create_task(self._copy_wishes(viewer))
            self._background.add(task)
            task.add_done_callback(self._background.discard)

    def _handle_input(self, msg_type: str, msg: dict) -> None:
        viewer = self._require_viewer()

        if msg_type == "go_to_step":
            viewer.go_to_step(GoToStepMessage(**msg).step)
        elif msg_type == "play_track":
            viewer.play_track(PlayTrackMessage(**msg).index)
        elif msg_type == "add_wish":
            viewer.add_wish(AddWishMessage(**msg).text)
        elif msg_type == "remove_wish":
            viewer.remove_wish(RemoveWishMessage(**msg).index)
        elif msg_type == "resize":
            resize = ResizeMessage(**msg)
            viewer.resize(resize.width, resize.height)
        elif msg_type == "pointer":
            pointer = PointerMessage(**msg)
            if pointer.event == "mousemove":
                viewer.pointer_move(pointer.x, pointer.y)
            else:
                viewer.pointer_leave()
        elif msg_type == "wheel":
            wheel = WheelMessage(**msg)
            viewer.wheel(wheel.delta_x, wheel.delta_y)
        elif msg_type == "gallery_layout":
            layout = GalleryLayoutMessage(**msg)
            rect = Rect(layout.rect.left, layout.rect.top, layout.rect.width, layout.rect.height)
            viewer.set_gallery_layout(rect, layout.scroll_width, layout.client_width)

    async def _copy_wishes(self, viewer: BirthdayViewer) -> None:
        await viewer.copy_wishes()
        if viewer is self.viewer:
            self._send_view_state()

    async def _stream(self) -> None:
        """Push scene frames and changed view state at the stream rate."""
        interval = 1.0 / self.settings.scene_stream_fps
        try:
            while self.viewer is not None and self.viewer.is_mounted:
                frame = self.viewer.renderer.last_frame
                if frame is not None and frame.frame != self._last_frame:
                    self._last_frame = frame.frame
                    self.send(SceneFrameMessage(frame=frame.to_dict()))
                self._send_view_state()
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Error in scene stream")

    def _send_view_state(self) -> None:
        if self.viewer is None:
            return
        state = self.viewer.snapshot()
        if state != self._last_state:
            self._last_state = state
            self.send(ViewStateMessage(state=state))

    def _send_bursts(self, bursts: list[ConfettiBurst]) -> None:
        if bursts:
            self.send(ConfettiMessage(bursts=[burst.to_dict() for burst in bursts]))

    def _send_status(self, status: str, message: Optional[str] = None) -> None:
        self.send(StatusMessage(status=status, message=message))

    def _send_error(self, error: str, code: Optional[str] = None) -> None:
        """Send error message to client."""
        self.send(ErrorMessage(error=error, code=code))

    def _require_viewer(self) -> BirthdayViewer:
        if self.viewer is None:
            raise _NotMounted()
        return self.viewer

    def _unmount(self) -> None:
        if self._stream_task:
            self._stream_task.cancel()
            self._stream_task = None
        if self.viewer is not None:
            self.viewer.unmount()
            self.viewer = None

    async def cleanup(self) -> None:
        """Clean up session resources."""
        stream_task = self._stream_task
        self._unmount()
        if stream_task:
            try:
                await stream_task
            except asyncio.CancelledError:
                pass

        self.clipboard.cancel_all()
        for task in list(self._background):
            task.cancel()

        if self._sender_task:
            self._sender_task.cancel()
            try:
                await self._sender_task
            except asyncio.CancelledError:
                pass
            self._sender_task = None


class _NotMounted(Exception):
    pass


async def websocket_endpoint(
    websocket: WebSocket,
    repository: ConfigRepository,
    store: LocalStore,
    settings: Optional[Settings] = None,
) -> None:
    """WebSocket endpoint handler."""
    await websocket.accept()
    logger.info(f"Client connected: {websocket.client}")

    session = ViewerSession(websocket, repository, store, settings)
    session.start()
    session._send_status("connected", "Send a mount message to open a birthday site")

    try:
        while True:
            data = await websocket.receive_text()
            await session.handle_message(data)

    except WebSocketDisconnect:
        logger.info(f"Client disconnected: {websocket.client}")
    except Exception as e:
        logger.exception(f"WebSocket error: {e}")
    finally:
        await session.cleanup()
