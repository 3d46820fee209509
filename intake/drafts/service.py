from __future__ import annotations

"""
Draft lifecycle for the intake form.

Design intent:
- A draft is created empty, saved many times while `status == "draft"`,
  then submitted once; `submitted` is terminal.
- Saves replace `data` wholesale and only touch `step` when supplied.
- Saving a submitted draft is ignored rather than rejected; callers that
  care read `PatchResult.applied`.
- All state lives in the injected store; the service holds none.
"""

import datetime as _dt
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from intake.internal_core.contracts import (
    STATUS_DRAFT,
    STATUS_SUBMITTED,
    DraftOut,
    NewDraftResponse,
)
from intake.internal_core.store import DRAFT_ID_FIELD, DraftStore

from .conversion import document_to_json, json_to_document

logger = logging.getLogger(__name__)


class DraftNotFoundError(LookupError):
    def __init__(self, draft_id: str):
        super().__init__(f"Draft not found: {draft_id}")
        self.draft_id = draft_id


@dataclass(frozen=True)
class PatchResult:
    draft: DraftOut
    applied: bool


def _ts_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat()


def build_resume_url(public_base: str, draft_id: str) -> str:
    return f"{public_base.rstrip('/')}/form/{draft_id}"


def to_draft_out(document: Mapping[str, Any]) -> DraftOut:
    status = document.get("status")
    step = document.get("step")
    return DraftOut(
        id=str(document.get(DRAFT_ID_FIELD, "")),
        data=document_to_json(document.get("data")),
        step=int(step) if isinstance(step, int) and not isinstance(step, bool) else 0,
        status=status if status in (STATUS_DRAFT, STATUS_SUBMITTED) else STATUS_DRAFT,
        created_at=str(document.get("created_at") or ""),
        updated_at=str(document.get("updated_at") or ""),
    )


class DraftService:
    def __init__(
        self,
        store: DraftStore,
        public_base: str,
        clock: Optional[Callable[[], str]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._store = store
        self._public_base = public_base
        self._clock = clock or _ts_iso
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def resume_url(self, draft_id: str) -> str:
        return build_resume_url(self._public_base, draft_id)

    async def create(self) -> NewDraftResponse:
        draft_id = self._id_factory()
        now = self._clock()
        document: Dict[str, Any] = {
            DRAFT_ID_FIELD: draft_id,
            "data": {},
            "step": 0,
            "status": STATUS_DRAFT,
            "created_at": now,
            "updated_at": now,
        }
        await self._store.insert(document)
        logger.info("draft_created draft_id=%s store=%s", draft_id, self._store.name())
        return NewDraftResponse(id=draft_id, resume_url=self.resume_url(draft_id))

    async def get(self, draft_id: str) -> DraftOut:
        found = await self._store.find_by_id(draft_id)
        if found is None:
            raise DraftNotFoundError(draft_id)
        return to_draft_out(found)

    async def patch(self, draft_id: str, data: Any, step: Optional[int] = None) -> PatchResult:
        fields: Dict[str, Any] = {
            "data": json_to_document(data),
            "updated_at": self._clock(),
        }
        if step is not None:
            fields["step"] = int(step)

        updated = await self._store.find_one_and_update(
            {DRAFT_ID_FIELD: draft_id, "status": STATUS_DRAFT}, fields
        )
        if updated is not None:
            logger.info("draft_saved draft_id=%s step=%s", draft_id, updated.get("step"))
            return PatchResult(draft=to_draft_out(updated), applied=True)

        # Miss: either unknown id or no longer a draft.
        current = await self.get(draft_id)
        logger.warning("draft_save_ignored draft_id=%s status=%s", draft_id, current.status)
        return PatchResult(draft=current, applied=False)

    async def submit(self, draft_id: str) -> DraftOut:
        updated = await self._store.find_one_and_update(
            {DRAFT_ID_FIELD: draft_id},
            {"status": STATUS_SUBMITTED, "updated_at": self._clock()},
        )
        if updated is None:
            raise DraftNotFoundError(draft_id)
        logger.info("draft_submitted draft_id=%s", draft_id)
        return to_draft_out(updated)
