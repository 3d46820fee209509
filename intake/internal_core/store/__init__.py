from __future__ import annotations

from .base import DRAFT_ID_FIELD, DraftStore, DuplicateDraftError, StorageError
from .memory import InMemoryDraftStore
from .mongo import MongoDraftStore

__all__ = [
    "DRAFT_ID_FIELD",
    "DraftStore",
    "DuplicateDraftError",
    "StorageError",
    "InMemoryDraftStore",
    "MongoDraftStore",
]
