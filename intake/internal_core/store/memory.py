from __future__ import annotations

import copy
from threading import RLock
from typing import Any, Dict, Mapping, Optional

from .base import DRAFT_ID_FIELD, DraftStore, DuplicateDraftError, StorageError


def _matches(document: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:
    return all(key in document and document[key] == value for key, value in filter.items())


class InMemoryDraftStore(DraftStore):
    def __init__(self) -> None:
        self._lock = RLock()
        self._drafts: Dict[str, Dict[str, Any]] = {}

    async def ensure_indexes(self) -> None:
        # Uniqueness on uuid is the dict key itself.
        return None

    async def insert(self, document: Mapping[str, Any]) -> None:
        draft_id = document.get(DRAFT_ID_FIELD)
        if not isinstance(draft_id, str) or not draft_id:
            raise StorageError("missing_id", f"Document has no {DRAFT_ID_FIELD!r} field", self.name())
        with self._lock:
            if draft_id in self._drafts:
                raise DuplicateDraftError(
                    "duplicate_id", f"Duplicate draft id: {draft_id}", self.name()
                )
            self._drafts[draft_id] = copy.deepcopy(dict(document))

    async def find_by_id(self, draft_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            found = self._drafts.get(draft_id)
            return copy.deepcopy(found) if found is not None else None

    def _first_match(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        draft_id = filter.get(DRAFT_ID_FIELD)
        if isinstance(draft_id, str):
            candidate = self._drafts.get(draft_id)
            return candidate if candidate is not None and _matches(candidate, filter) else None
        for candidate in self._drafts.values():
            if _matches(candidate, filter):
                return candidate
        return None

    async def find_one_and_update(
        self, filter: Mapping[str, Any], fields: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        with self._lock:
            target = self._first_match(filter)
            if target is None:
                return None
            target.update(copy.deepcopy(dict(fields)))
            return copy.deepcopy(target)

    async def close(self) -> None:
        return None

    def name(self) -> str:
        return "memory"
