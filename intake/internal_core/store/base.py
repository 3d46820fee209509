from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

DRAFT_ID_FIELD = "uuid"


class StorageError(RuntimeError):
    def __init__(self, code: str, message: str, store_name: str):
        super().__init__(message)
        self.code = code
        self.message = message
        self.store_name = store_name


class DuplicateDraftError(StorageError):
    pass


class DraftStore(ABC):
    """Document persistence for drafts.

    Documents are plain dicts keyed by ``uuid``; filters are field-equality
    mappings. Update methods only ``$set`` the given fields.
    """

    @abstractmethod
    async def ensure_indexes(self) -> None: ...

    @abstractmethod
    async def insert(self, document: Mapping[str, Any]) -> None: ...

    @abstractmethod
    async def find_by_id(self, draft_id: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def find_one_and_update(
        self, filter: Mapping[str, Any], fields: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Atomically apply ``fields`` and return the updated document, or None."""

    @abstractmethod
    async def close(self) -> None: ...

    @abstractmethod
    def name(self) -> str: ...
