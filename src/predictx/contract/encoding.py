"""JSON <-> base64 encoding for smart queries and execute messages."""

from __future__ import annotations

import base64
import json
from typing import Any

from pydantic import BaseModel

from predictx.errors import EncodingError


def _to_json_obj(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        to_msg = getattr(obj, "to_msg", None)
        return to_msg() if callable(to_msg) else obj.model_dump(mode="json")
    return obj


def to_json_bytes(obj: Any) -> bytes:
    """Compact UTF-8 JSON. Cyclic or non-serializable input raises EncodingError."""
    try:
        return json.dumps(_to_json_obj(obj), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode {type(obj).__name__} as JSON: {e}") from e


def encode_query(query: Any) -> str:
    """Query object -> URL-safe base64 of its JSON, for the `smart/<encoded>` path segment."""
    return base64.urlsafe_b64encode(to_json_bytes(query)).decode("ascii")


def encode_msg(msg: Any) -> str:
    """Execute message -> standard base64 of its JSON (MsgExecuteContract.msg)."""
    return base64.b64encode(to_json_bytes(msg)).decode("ascii")


def decode_b64_json(encoded: str) -> Any:
    """Inverse of encode_query / encode_msg. Accepts both base64 alphabets."""
    try:
        raw = base64.b64decode(encoded.replace("-", "+").replace("_", "/"), validate=True)
        return json.loads(raw.decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        raise EncodingError(f"Not base64 JSON: {e}") from e


decode_query = decode_b64_json
