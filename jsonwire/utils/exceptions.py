"""
Exception hierarchy and error classification for jsonwire.

Provides:
- Decode-time payload errors (malformed JSON, wrong shape, bad enum or value)
- Setup-time shape errors raised while registering operations
- DeclaredFault, the handler-raised error carrying its own status code
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from starlette.exceptions import HTTPException


class ErrorKind(Enum):
    """Error kinds reported by the marshaling layer."""
    MALFORMED_PAYLOAD = "malformed_payload"
    SHAPE_MISMATCH = "shape_mismatch"
    UNSUPPORTED_SHAPE = "unsupported_shape"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_VALUE = "invalid_value"
    DECLARED_FAULT = "declared_fault"
    UNHANDLED_FAULT = "unhandled_fault"


class JsonWireError(Exception):
    """Base exception for all jsonwire errors."""

    kind: ErrorKind = ErrorKind.UNHANDLED_FAULT

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "kind": self.kind.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return self.message


class PayloadError(JsonWireError):
    """Request body could not be turned into operation arguments."""

    def __init__(
        self,
        message: str,
        code: str,
        parameter: str | None = None,
        path: str | None = None,
    ):
        details: dict[str, Any] = {}
        if path:
            details["path"] = path
        super().__init__(message, code=code, details=details)
        self.parameter: str | None = None
        if parameter:
            self.bind_parameter(parameter)

    def bind_parameter(self, name: str) -> None:
        """Attach the failing parameter name; the first binding wins."""
        if self.parameter is not None:
            return
        self.parameter = name
        self.details["parameter"] = name
        self.message = f"parameter '{name}': {self.message}"
        self.args = (self.message,)


class MalformedPayload(PayloadError):
    """Body is not valid JSON text."""

    kind = ErrorKind.MALFORMED_PAYLOAD

    def __init__(self, message: str, parameter: str | None = None, position: int | None = None):
        super().__init__(message, code="MALFORMED_PAYLOAD", parameter=parameter)
        if position is not None:
            self.details["position"] = position


class ShapeMismatch(PayloadError):
    """Multi-parameter body is not a JSON object."""

    kind = ErrorKind.SHAPE_MISMATCH

    def __init__(self, message: str = "Input needs to be wrapped in an object"):
        super().__init__(message, code="SHAPE_MISMATCH")


class InvalidEnumValue(PayloadError):
    """Enum given as anything but one of its declared member names."""

    kind = ErrorKind.INVALID_ENUM_VALUE

    def __init__(self, enum_type: type, value: Any, path: str | None = None):
        super().__init__(
            f"{value!r} is not a valid {enum_type.__name__} name",
            code="INVALID_ENUM_VALUE",
            path=path,
        )
        self.details["enum"] = enum_type.__name__


class InvalidParameterValue(PayloadError):
    """JSON value does not convert to the declared type."""

    kind = ErrorKind.INVALID_VALUE

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, code="INVALID_VALUE", path=path)


class UnsupportedShape(JsonWireError):
    """Call shape this layer does not implement (wrapped single parameter, wrapped reply)."""

    kind = ErrorKind.UNSUPPORTED_SHAPE

    def __init__(self, message: str, operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, code="UNSUPPORTED_SHAPE", details=details)


class DeclaredFault(JsonWireError):
    """Handler failure that chooses its own response status code."""

    kind = ErrorKind.DECLARED_FAULT

    def __init__(self, message: str, status_code: int = 500, code: str = "DECLARED_FAULT"):
        super().__init__(message, code=code, details={"status_code": status_code})
        self.status_code = status_code


def declared_status(exc: BaseException) -> int | None:
    """Explicit status code carried by a declared fault or an HTTP exception."""
    if isinstance(exc, DeclaredFault):
        return exc.status_code
    if isinstance(exc, HTTPException):
        return exc.status_code
    return None


def classify_failure(exc: BaseException) -> ErrorKind:
    """Map any exception to the error kind used for logging and fault reporting."""
    if isinstance(exc, JsonWireError):
        return exc.kind
    if declared_status(exc) is not None:
        return ErrorKind.DECLARED_FAULT
    return ErrorKind.UNHANDLED_FAULT


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized
