"""Strict string-only enum codec: members travel as their declared names."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from jsonwire.utils.exceptions import InvalidEnumValue

E = TypeVar("E", bound=Enum)


def is_enum_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, Enum)


def encode_enum(member: Enum) -> str:
    """Wire form of an enum member: its declared name, casing untouched."""
    return member.name


def decode_enum(value: Any, enum_type: type[E], path: str | None = None) -> E:
    """
    Look up a member by exact declared name.

    Integers (and bools, which are integers) are refused even when they match
    a member value, and so is any name differing only in case.
    """
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        raise InvalidEnumValue(enum_type, value, path=path)
    member = enum_type.__members__.get(value)
    if member is None:
        raise InvalidEnumValue(enum_type, value, path=path)
    return member
