"""The wish ledger: free-text wishes captured on the final step."""

import json
import logging
from typing import Optional, Protocol

from ..animation.tween import Tween, TweenEngine
from .store import LocalStore

logger = logging.getLogger(__name__)

FALLBACK_WISH = "May all your dreams come true ✨"
COPY_SUCCESS = "Copied to clipboard!"
COPY_FAILURE = "Failed to copy"
STATUS_SECONDS = 2.0


class Clipboard(Protocol):
    """Write-only text clipboard. Raises on failure."""

    async def write_text(self, text: str) -> None: ...


def storage_key(recipient_name: str) -> str:
    """Key a recipient's ledger is stored under."""
    return f"wishes:{recipient_name}"


class WishLedger:
    """Ordered list of wishes, persisted on every change."""

    def __init__(
        self,
        recipient_name: str,
        store: LocalStore,
        clipboard: Clipboard,
        engine: TweenEngine,
    ):
        self.recipient_name = recipient_name
        self._store = store
        self._clipboard = clipboard
        self._engine = engine
        self._entries: list[str] = []
        self._status: Optional[str] = None
        self._status_timer: Optional[Tween] = None
        self.is_launched = False
        self.launched_wish: Optional[str] = None

    @property
    def key(self) -> str:
        return storage_key(self.recipient_name)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def status(self) -> Optional[str]:
        """Transient copy status, None when nothing to show."""
        return self._status

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> list[str]:
        """Read the saved ledger. Missing or malformed data means empty."""
        raw = self._store.get(self.key)
        if raw is None:
            self._entries = []
            return self.entries
        try:
            data = json.loads(raw)
            if not isinstance(data, list) or not all(isinstance(w, str) for w in data):
                raise ValueError("expected a JSON array of strings")
            self._entries = data
        except ValueError as e:
            logger.warning(f"Discarding malformed wishes for {self.recipient_name!r}: {e}")
            self._entries = []
        return self.entries

    def add(self, text: str) -> bool:
        wish = (text or "").strip()
        if not wish:
            return False
        self._entries.append(wish)
        self._save()
        return True

    def remove(self, index: int) -> bool:
        if not 0 <= index < len(self._entries):
            return False
        del self._entries[index]
        self._save()
        return True

    async def export_as_text(self) -> str:
        """Copy every wish to the clipboard, one per line."""
        text = "\n".join(self._entries)
        try:
            await self._clipboard.write_text(text)
            status = COPY_SUCCESS
        except Exception as e:
            logger.warning(f"Clipboard write failed: {e}")
            status = COPY_FAILURE
        self._show_status(status)
        return status

    def launch(self) -> Optional[str]:
        """Pick the wish to send off. None if one is already launched."""
        if self.is_launched:
            return None
        self.launched_wish = self._entries[-1] if self._entries else FALLBACK_WISH
        self.is_launched = True
        return self.launched_wish

    def _save(self) -> None:
        self._store.set(self.key, json.dumps(self._entries, ensure_ascii=False))

    def _show_status(self, status: str) -> None:
        if self._status_timer is not None:
            self._status_timer.kill()
        self._status = status
        self._status_timer = self._engine.delayed_call(STATUS_SECONDS, self._clear_status)

    def _clear_status(self) -> None:
        self._status = None
        self._status_timer = None
