"""
Helpers for moving between request ids and stored documents.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

from common.utils.exceptions import NotFoundException


def utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_object_id(value: str, resource: str = "Resource") -> ObjectId:
    """
    Convert a path/body id to ObjectId.

    A malformed id can never match a document, so it is reported as missing.

    Raises:
        NotFoundException: If value is not a valid ObjectId
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundException(
            message=f"{resource} not found",
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
        )


def serialize_doc(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Make a document JSON friendly.

    `_id` becomes `id` and ObjectIds (nested included) become strings.
    Sensitive fields such as passwordHash are dropped.
    """
    if doc is None:
        return None
    return {
        ("id" if key == "_id" else key): _serialize_value(value)
        for key, value in doc.items()
        if key != "passwordHash"
    }


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return serialize_doc(value)
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value
