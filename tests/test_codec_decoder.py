from __future__ import annotations

import json
from enum import Enum
from typing import Optional

import pytest
from pydantic import BaseModel

from jsonwire.codec.decoder import RequestDecoder, decode, select_strategy
from jsonwire.codec.encoder import dump_bytes
from jsonwire.codec.signature import VOID, BodyStyle, OperationSignature, Parameter
from jsonwire.utils.exceptions import (
    InvalidEnumValue,
    InvalidParameterValue,
    MalformedPayload,
    ShapeMismatch,
    UnsupportedShape,
)


class Status(Enum):
    Active = 1
    Inactive = 2


class Item(BaseModel):
    sku: str
    status: Status = Status.Active


PAIR = OperationSignature("add", (Parameter("a", int), Parameter("b", int)), int)
ECHO = OperationSignature("echo", (Parameter("x", str),), str)


def test_unknown_fields_are_skipped():
    assert decode(b'{"a":1,"unknown":{"x":[1,2,3]},"b":2}', PAIR) == [1, 2]


def test_key_order_is_irrelevant():
    assert decode(b'{"b": 2, "a": 1}', PAIR) == [1, 2]


def test_missing_keys_keep_defaults():
    sig = OperationSignature(
        "page",
        (Parameter("query", str), Parameter("limit", int, default=20), Parameter("cursor", Optional[str])),
        list,
    )
    assert decode(b'{"query": "x"}', sig) == ["x", 20, None]


def test_duplicate_keys_last_wins():
    assert decode(b'{"a": 1, "a": 5, "b": 2}', PAIR) == [5, 2]


@pytest.mark.parametrize("body", [b"[1, 2]", b"1", b'"a"', b"null", b"true", b""])
def test_multi_parameter_requires_object(body):
    with pytest.raises(ShapeMismatch, match="wrapped in an object"):
        decode(body, PAIR)


def test_non_json_multi_parameter_body_is_malformed():
    with pytest.raises(MalformedPayload):
        decode(b"not json", PAIR)


def test_single_parameter_is_bare():
    assert decode(b'"hello"', ECHO) == ["hello"]


def test_single_parameter_wrapped_object_is_not_silently_accepted():
    with pytest.raises(InvalidParameterValue) as exc:
        decode(b'{"x": "hello"}', ECHO)
    assert exc.value.parameter == "x"


def test_single_parameter_declared_wrapped_is_unsupported():
    sig = OperationSignature("echo", (Parameter("x", str),), str, BodyStyle.WRAPPED_REQUEST)
    with pytest.raises(UnsupportedShape):
        decode(b'{"x": "hello"}', sig)


def test_single_parameter_model_body():
    sig = OperationSignature("put", (Parameter("item", Item),), VOID)
    [item] = decode(b'{"sku": "A", "status": "Inactive"}', sig)
    assert item == Item(sku="A", status=Status.Inactive)


def test_single_parameter_empty_body_uses_default():
    sig = OperationSignature("echo", (Parameter("x", str, default="fallback"),), str)
    assert decode(b"  ", sig) == ["fallback"]


def test_zero_parameters_ignore_body():
    sig = OperationSignature("ping", (), VOID)
    assert decode(b"\xff not even text", sig) == []


def test_enum_by_name():
    sig = OperationSignature("set", (Parameter("id", int), Parameter("status", Status)), VOID)
    assert decode(b'{"id": 1, "status": "Active"}', sig) == [1, Status.Active]


@pytest.mark.parametrize("raw", [b'{"id": 1, "status": 5}', b'{"id": 1, "status": "active"}'])
def test_enum_strictness(raw):
    sig = OperationSignature("set", (Parameter("id", int), Parameter("status", Status)), VOID)
    with pytest.raises(InvalidEnumValue) as exc:
        decode(raw, sig)
    assert exc.value.parameter == "status"
    assert "parameter 'status'" in str(exc.value)


def test_bare_enum_rejects_number():
    sig = OperationSignature("set", (Parameter("status", Status),), VOID)
    with pytest.raises(InvalidEnumValue):
        decode(b"5", sig)


def test_malformed_element_names_parameter():
    with pytest.raises(MalformedPayload) as exc:
        decode(b'{"a": 1, "b": [1,}', PAIR)
    assert exc.value.parameter == "b"
    assert "position" in exc.value.details


def test_malformed_unknown_field_aborts():
    with pytest.raises(MalformedPayload) as exc:
        decode(b'{"a": 1, "zzz": {"x": }, "b": 2}', PAIR)
    assert exc.value.parameter is None


def test_type_mismatch_names_parameter():
    with pytest.raises(InvalidParameterValue) as exc:
        decode(b'{"a": "one", "b": 2}', PAIR)
    assert exc.value.parameter == "a"


def test_trailing_data_is_malformed():
    with pytest.raises(MalformedPayload):
        decode(b'{"a": 1, "b": 2} x', PAIR)
    with pytest.raises(MalformedPayload):
        decode(b'"hello" "again"', ECHO)


def test_invalid_utf8_is_malformed():
    with pytest.raises(MalformedPayload):
        decode(b'"\xff\xfe\xfa"', ECHO)


def test_utf8_bom_and_str_input():
    assert decode(b'\xef\xbb\xbf{"a": 1, "b": 2}', PAIR) == [1, 2]
    assert decode('{"a": 1, "b": 2}', PAIR) == [1, 2]


def test_round_trip_wrapped_arguments():
    sig = OperationSignature(
        "mixed",
        (
            Parameter("name", str),
            Parameter("status", Status),
            Parameter("items", list[Item]),
            Parameter("weights", dict[str, float]),
        ),
        VOID,
    )
    args = ["n", Status.Inactive, [Item(sku="A"), Item(sku="B", status=Status.Inactive)], {"x": 0.5}]
    wrapped = dump_bytes({p.name: v for p, v in zip(sig.parameters, args)})
    assert decode(wrapped, sig) == args


def test_decoder_strategy_is_selected_once():
    decoder = RequestDecoder(PAIR)
    assert decoder._strategy is select_strategy(PAIR)
    assert decoder.decode(json.dumps({"a": 3, "b": 4}).encode()) == [3, 4]


@pytest.mark.parametrize(
    ("body", "sig", "parameter"),
    [
        (b"NaN", OperationSignature("scale", (Parameter("factor", float),), float), "factor"),
        (b'{"a": Infinity, "b": 2}', PAIR, "a"),
        (b'{"a": 1, "extra": -Infinity, "b": 2}', PAIR, None),
    ],
)
def test_non_standard_constants_are_malformed(body, sig, parameter):
    with pytest.raises(MalformedPayload) as exc:
        decode(body, sig)
    assert exc.value.parameter == parameter
