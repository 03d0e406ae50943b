"""Wishes module - the persisted wish ledger."""

from .ledger import COPY_FAILURE, COPY_SUCCESS, FALLBACK_WISH, Clipboard, WishLedger, storage_key
from .store import LocalStore

__all__ = [
    "COPY_FAILURE",
    "COPY_SUCCESS",
    "FALLBACK_WISH",
    "Clipboard",
    "WishLedger",
    "storage_key",
    "LocalStore",
]
