"""Response encoding shared by success replies and fault bodies."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from jsonwire.codec.converter import to_wire
from jsonwire.codec.signature import VOID, TypeDescriptor
from jsonwire.utils.exceptions import UnsupportedShape

JSON_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class WireMessage:
    """Bytes plus status and media type, ready for the transport to write."""
    body: bytes
    status_code: int = 200
    media_type: str | None = JSON_MEDIA_TYPE

    @classmethod
    def empty(cls, status_code: int = 200) -> WireMessage:
        """Reply of a VOID operation: no body, no content type."""
        return cls(body=b"", status_code=status_code, media_type=None)

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": self.media_type} if self.media_type else {}


def dump_bytes(value: Any) -> bytes:
    """Compact UTF-8 JSON with enums written as member names."""
    return json.dumps(to_wire(value), separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


def encode(value: Any, return_type: TypeDescriptor = Any, status_code: int = 200) -> WireMessage:
    """Encode one result value. VOID operations have no reply body and must not get here."""
    if return_type is VOID:
        raise UnsupportedShape("Operations returning nothing have no reply body to encode.")
    return WireMessage(body=dump_bytes(value), status_code=status_code)
