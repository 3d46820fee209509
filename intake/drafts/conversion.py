from __future__ import annotations

"""
Two-way mapping between form JSON payloads and stored BSON documents.

Design intent:
- Keep `data` schemaless: any JSON object round-trips unchanged.
- Never fail a save because of payload shape; unrepresentable input
  (top-level non-object, out-of-range integers, non-string keys) becomes {}.
- Render BSON-only values (ObjectId, datetime, Int64) as relaxed Extended JSON.
"""

import json
import logging
from typing import Any, Dict, Mapping

import bson
from bson import json_util
from bson.errors import BSONError

logger = logging.getLogger(__name__)


def json_to_document(value: Any) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        if value is not None:
            logger.debug("json_to_document_fallback reason=non_object type=%s", type(value).__name__)
        return {}
    try:
        return bson.decode(bson.encode(dict(value)))
    except (BSONError, OverflowError, TypeError, ValueError) as exc:
        logger.debug("json_to_document_fallback reason=%s", type(exc).__name__)
        return {}


def document_to_json(document: Any) -> Dict[str, Any]:
    if not isinstance(document, Mapping):
        return {}
    try:
        decoded = json.loads(
            json_util.dumps(dict(document), json_options=json_util.RELAXED_JSON_OPTIONS)
        )
    except (BSONError, OverflowError, TypeError, ValueError) as exc:
        logger.debug("document_to_json_fallback reason=%s", type(exc).__name__)
        return {}
    return decoded if isinstance(decoded, dict) else {}
