from .conversion import document_to_json, json_to_document
from .service import DraftNotFoundError, DraftService, PatchResult

__all__ = [
    "DraftNotFoundError",
    "DraftService",
    "PatchResult",
    "document_to_json",
    "json_to_document",
]
