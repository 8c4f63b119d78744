"""Request decoding: raw body bytes to the ordered argument list of an operation."""

from __future__ import annotations

import json
from typing import Any, Callable, Union

from loguru import logger

from jsonwire.codec.converter import from_wire
from jsonwire.codec.reader import ObjectReader
from jsonwire.codec.signature import OperationSignature
from jsonwire.utils.exceptions import (
    MalformedPayload,
    PayloadError,
    ShapeMismatch,
    UnsupportedShape,
)


RawBody = Union[bytes, bytearray, memoryview, str]


def _body_text(raw: RawBody) -> str:
    if isinstance(raw, str):
        return raw
    data = bytes(raw)
    try:
        return data.decode(json.detect_encoding(data))
    except UnicodeDecodeError as e:
        raise MalformedPayload(f"Request body is not valid text: {e.reason}", position=e.start) from e


def _malformed(exc: json.JSONDecodeError, parameter: str | None = None) -> MalformedPayload:
    return MalformedPayload(
        f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
        parameter=parameter,
        position=exc.pos,
    )


def _decode_none(raw: RawBody, signature: OperationSignature) -> list[Any]:
    return []


def _decode_bare(raw: RawBody, signature: OperationSignature) -> list[Any]:
    param = signature.parameters[0]
    if signature.body_style.wraps_request:
        raise UnsupportedShape(
            "Wrapped body style for single parameters not implemented.",
            operation=signature.name,
        )
    text = _body_text(raw)
    if not text.strip():
        return [param.default]
    try:
        reader = ObjectReader(text)
        value = reader.read_value()
        reader.finish()
    except json.JSONDecodeError as e:
        raise _malformed(e, param.name) from e
    except RecursionError as e:
        raise MalformedPayload("JSON nesting too deep", parameter=param.name) from e
    try:
        return [from_wire(value, param.type)]
    except PayloadError as e:
        e.bind_parameter(param.name)
        raise


def _decode_wrapped(raw: RawBody, signature: OperationSignature) -> list[Any]:
    text = _body_text(raw)
    arguments = signature.defaults()
    index = signature.parameter_index
    reader = ObjectReader(text)
    current: str | None = None
    try:
        if not reader.at_object():
            if reader.at_end():
                raise ShapeMismatch()
            reader.skip_value()
            reader.finish()
            raise ShapeMismatch()
        for key in reader.members():
            position = index.get(key)
            if position is None:
                logger.debug("Skipping unknown field '{}' for operation {}", key, signature.name)
                reader.skip_value()
                continue
            current = key
            param = signature.parameters[position]
            arguments[position] = from_wire(reader.read_value(), param.type)
            current = None
        reader.finish()
    except json.JSONDecodeError as e:
        raise _malformed(e, current) from e
    except RecursionError as e:
        raise MalformedPayload("JSON nesting too deep", parameter=current) from e
    except PayloadError as e:
        if current is not None:
            e.bind_parameter(current)
        raise
    return arguments


_Strategy = Callable[[RawBody, OperationSignature], list[Any]]


def select_strategy(signature: OperationSignature) -> _Strategy:
    """Pick the decode strategy for an operation once, from its arity."""
    if not signature.parameters:
        return _decode_none
    if signature.expects_wrapper:
        return _decode_wrapped
    return _decode_bare


class RequestDecoder:
    """Decoder bound to one operation; the strategy is chosen at construction."""

    def __init__(self, signature: OperationSignature) -> None:
        self.signature = signature
        self._strategy = select_strategy(signature)

    def decode(self, raw: RawBody) -> list[Any]:
        try:
            return self._strategy(raw, self.signature)
        except PayloadError as e:
            logger.debug("Failed to decode request for {}: {}", self.signature.name, e.message)
            raise


def decode(raw: RawBody, signature: OperationSignature) -> list[Any]:
    """
    Turn a request body into one argument per declared parameter.

    Single-parameter operations take the whole body as a bare value. Operations
    with more parameters take a JSON object keyed by parameter name: unknown
    keys are skipped, missing keys keep the parameter default.

    Raises:
        MalformedPayload: body is not valid JSON.
        ShapeMismatch: multi-parameter body is not a JSON object.
        InvalidEnumValue: an enum was not given by member name.
        InvalidParameterValue: a value does not fit its declared type.
        UnsupportedShape: a wrapped single-parameter request was declared.
    """
    return RequestDecoder(signature).decode(raw)
