"""Utility functions for jsonwire."""

from jsonwire.utils.exceptions import (
    JsonWireError,
    PayloadError,
    MalformedPayload,
    ShapeMismatch,
    InvalidEnumValue,
    InvalidParameterValue,
    UnsupportedShape,
    DeclaredFault,
    ErrorKind,
    classify_failure,
    declared_status,
    sanitize_error_message,
)
from jsonwire.utils.logging_utils import configure_logging

__all__ = [
    "JsonWireError",
    "PayloadError",
    "MalformedPayload",
    "ShapeMismatch",
    "InvalidEnumValue",
    "InvalidParameterValue",
    "UnsupportedShape",
    "DeclaredFault",
    "ErrorKind",
    "classify_failure",
    "declared_status",
    "sanitize_error_message",
    "configure_logging",
]
