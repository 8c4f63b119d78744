"""Typed conversion between decoded JSON values and Python values.

``from_wire`` walks a declared type annotation alongside a value produced by
``json``, building enums, dataclasses, pydantic models and containers with the
strict enum policy applied at every depth. Leaf types go through pydantic's
``TypeAdapter`` in lax mode. ``to_wire`` is the reverse walk used by the
encoder.
"""

from __future__ import annotations

import collections.abc as abc
import dataclasses
import math
import types
import typing
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Union

from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from jsonwire.codec.enums import decode_enum, encode_enum, is_enum_type
from jsonwire.utils.exceptions import InvalidParameterValue, PayloadError

_LIST_ORIGINS = {list, abc.Sequence, abc.MutableSequence, abc.Collection, abc.Iterable}
_SET_ORIGINS = {set, frozenset, abc.Set, abc.MutableSet}
_MAPPING_ORIGINS = {dict, abc.Mapping, abc.MutableMapping}
_UNION_ORIGINS = {Union, types.UnionType}


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


@lru_cache(maxsize=None)
def _dataclass_hints(tp: type) -> dict[str, Any]:
    return typing.get_type_hints(tp)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def _is_model(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _is_structural(tp: Any) -> bool:
    """True when the type needs the walk in ``from_wire`` rather than a plain TypeAdapter."""
    if is_enum_type(tp) or _is_model(tp) or _is_dataclass_type(tp):
        return True
    origin = typing.get_origin(tp)
    if origin is Annotated:
        return _is_structural(typing.get_args(tp)[0])
    if origin is not None:
        return any(_is_structural(arg) for arg in typing.get_args(tp) if arg is not Ellipsis)
    return False


def from_wire(value: Any, tp: Any, path: str = "$") -> Any:
    """Convert a decoded JSON value to ``tp``. Raises PayloadError subclasses."""
    if tp is Any or tp is object:
        return value
    if is_enum_type(tp):
        return decode_enum(value, tp, path=path)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Annotated:
        if _is_structural(args[0]):
            return from_wire(value, args[0], path)
        return _validate_leaf(value, tp, path)
    if origin in _UNION_ORIGINS:
        return _from_union(value, tp, args, path)
    if tp in _LIST_ORIGINS or origin in _LIST_ORIGINS:
        item_type = args[0] if args else Any
        return [from_wire(v, item_type, f"{path}[{i}]") for i, v in enumerate(_require_array(value, tp, path))]
    if tp in _SET_ORIGINS or origin in _SET_ORIGINS:
        item_type = args[0] if args else Any
        items = (from_wire(v, item_type, f"{path}[{i}]") for i, v in enumerate(_require_array(value, tp, path)))
        return frozenset(items) if (origin or tp) is frozenset else set(items)
    if tp is tuple or origin is tuple:
        return _from_tuple(value, tp, args, path)
    if tp in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        if not isinstance(value, dict):
            raise InvalidParameterValue(f"expected an object for {_type_name(tp)}", path=path)
        return {
            _key_from_wire(k, key_type, path): from_wire(v, value_type, f"{path}.{k}")
            for k, v in value.items()
        }
    if _is_model(tp):
        return _from_model(value, tp, path)
    if _is_dataclass_type(tp):
        return _from_dataclass(value, tp, path)
    return _validate_leaf(value, tp, path)


def _validate_leaf(value: Any, tp: Any, path: str) -> Any:
    try:
        return _adapter(tp).validate_python(value)
    except ValidationError as e:
        raise InvalidParameterValue(f"invalid {_type_name(tp)}: {_summarize(e)}", path=path) from e


def _require_array(value: Any, tp: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise InvalidParameterValue(f"expected an array for {_type_name(tp)}", path=path)
    return value


def _from_union(value: Any, tp: Any, args: tuple[Any, ...], path: str) -> Any:
    if value is None and type(None) in args:
        return None
    members = [a for a in args if a is not type(None)]
    if not any(_is_structural(a) for a in members):
        return _validate_leaf(value, tp, path)
    last_error: PayloadError | None = None
    for member in members:
        try:
            return from_wire(value, member, path)
        except PayloadError as e:
            last_error = e
    if last_error is None:
        raise InvalidParameterValue(f"null is not allowed for {_type_name(tp)}", path=path)
    raise last_error


def _from_tuple(value: Any, tp: Any, args: tuple[Any, ...], path: str) -> tuple[Any, ...]:
    items = _require_array(value, tp, path)
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0] if args else Any
        return tuple(from_wire(v, item_type, f"{path}[{i}]") for i, v in enumerate(items))
    if len(items) != len(args):
        raise InvalidParameterValue(f"expected {len(args)} items, got {len(items)}", path=path)
    return tuple(from_wire(v, t, f"{path}[{i}]") for i, (v, t) in enumerate(zip(items, args)))


def _key_from_wire(key: str, key_type: Any, path: str) -> Any:
    if key_type is Any or key_type is str:
        return key
    if is_enum_type(key_type):
        return decode_enum(key, key_type, path=f"{path}.{key}")
    return _validate_leaf(key, key_type, f"{path}.{key}")


def _from_model(value: Any, tp: type[BaseModel], path: str) -> BaseModel:
    if not isinstance(value, dict):
        raise InvalidParameterValue(f"expected an object for {tp.__name__}", path=path)
    fields: dict[str, Any] = {}
    for name, info in tp.model_fields.items():
        fields[name] = info.annotation
        if isinstance(info.alias, str):
            fields[info.alias] = info.annotation
    data = {
        key: from_wire(item, fields[key], f"{path}.{key}") if key in fields else item
        for key, item in value.items()
    }
    try:
        return tp.model_validate(data)
    except ValidationError as e:
        raise InvalidParameterValue(f"invalid {tp.__name__}: {_summarize(e)}", path=path) from e


def _from_dataclass(value: Any, tp: type, path: str) -> Any:
    if not isinstance(value, dict):
        raise InvalidParameterValue(f"expected an object for {tp.__name__}", path=path)
    hints = _dataclass_hints(tp)
    kwargs = {
        f.name: from_wire(value[f.name], hints.get(f.name, Any), f"{path}.{f.name}")
        for f in dataclasses.fields(tp)
        if f.init and f.name in value
    }
    try:
        return tp(**kwargs)
    except TypeError as e:
        raise InvalidParameterValue(f"invalid {tp.__name__}: {e}", path=path) from e


def to_wire(value: Any) -> Any:
    """
    Reduce a Python value to plain JSON-compatible data, enums as member names.

    Models are dumped by pydantic in python mode so enum members survive the
    dump and can be renamed here; computed fields and field serializers apply.
    Every other leaf is dumped in JSON mode by a TypeAdapter for its own type.
    """
    if isinstance(value, Enum):
        return encode_enum(value)
    if value is None or isinstance(value, (str, int, bool)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Out of range float value {value!r} is not valid JSON")
        return value
    if isinstance(value, BaseModel):
        return to_wire(value.model_dump(mode="python", by_alias=True))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_wire(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, abc.Mapping):
        return {_key_to_wire(k): to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_wire(v) for v in value]
    try:
        return to_wire(_adapter(type(value)).dump_python(value, mode="json", by_alias=True))
    except (PydanticSchemaGenerationError, PydanticSerializationError) as e:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable") from e


def _key_to_wire(key: Any) -> str:
    if isinstance(key, str) and not isinstance(key, Enum):
        return key
    return str(to_wire(key))
