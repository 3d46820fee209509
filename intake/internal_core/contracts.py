from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

DraftStatus = Literal["draft", "submitted"]

STATUS_DRAFT: DraftStatus = "draft"
STATUS_SUBMITTED: DraftStatus = "submitted"


class DraftOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    data: Dict[str, Any] = Field(default_factory=dict)
    step: int = 0
    status: DraftStatus = STATUS_DRAFT
    created_at: str = ""
    updated_at: str = ""


class NewDraftResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    resume_url: str


class PatchDraftRequest(BaseModel):
    # Non-object payloads are accepted here and degrade to {} on storage.
    data: Any
    step: Optional[StrictInt] = Field(default=None, ge=-(2**63), le=2**63 - 1)


class HelloResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hello: str
