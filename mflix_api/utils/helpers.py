# mflix_api/utils/helpers.py

import base64
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.decimal128 import Decimal128
from fastapi.encoders import jsonable_encoder


# --- Identifier Helpers ---

def parse_object_id(value: str) -> ObjectId:
    """
    Converts a 24-character hex string into an ObjectId.

    Args:
        value: The external representation of the identifier.

    Returns:
        The parsed ObjectId.

    Raises:
        InvalidId: If the string is not exactly 24 hex characters.
    """
    return ObjectId(value)


# --- BSON -> JSON ---

def _encode_bytes(data: bytes) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def _encode_datetime(dt: datetime) -> str:
    # BSON dates are UTC; the driver hands them back naive unless tz_aware is set
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


BSON_ENCODERS = {
    ObjectId: str,
    Decimal128: str,
    datetime: _encode_datetime,
    bytes: _encode_bytes,
}


def to_json_compatible(document: Any) -> Any:
    """
    Renders a BSON document (or list of documents) into JSON-safe values.

    ObjectId becomes its hex string, datetimes UTC ISO-8601 with a Z suffix,
    Decimal128 its decimal string and binary data base64. Every key is kept,
    in the order returned by the driver.
    """
    return jsonable_encoder(document, custom_encoder=BSON_ENCODERS, sqlalchemy_safe=False)


def to_json_list(documents: Optional[List[Dict[str, Any]]]) -> List[Any]:
    """Same as to_json_compatible, but always returns a list (never null)."""
    if not documents:
        return []
    return to_json_compatible(documents)
