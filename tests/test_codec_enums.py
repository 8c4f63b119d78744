from enum import Enum, IntEnum

import pytest

from jsonwire.codec.enums import decode_enum, encode_enum, is_enum_type
from jsonwire.utils.exceptions import InvalidEnumValue


class Status(Enum):
    Active = 1
    Inactive = 2
    Legacy = 1  # alias of Active


class Level(IntEnum):
    LOW = 0
    HIGH = 5


def test_encode_uses_declared_name():
    assert encode_enum(Status.Active) == "Active"
    assert encode_enum(Level.HIGH) == "HIGH"


def test_decode_exact_name():
    assert decode_enum("Active", Status) is Status.Active
    assert decode_enum("HIGH", Level) is Level.HIGH


def test_decode_alias_name():
    assert decode_enum("Legacy", Status) is Status.Active


@pytest.mark.parametrize("value", ["active", "ACTIVE", "Unknown", ""])
def test_decode_rejects_wrong_names(value):
    with pytest.raises(InvalidEnumValue):
        decode_enum(value, Status)


@pytest.mark.parametrize("value", [5, 1, 0, True, 1.0, None, ["Active"]])
def test_decode_rejects_non_strings(value):
    with pytest.raises(InvalidEnumValue):
        decode_enum(value, Level if value in (5, 0) else Status)


def test_decode_error_carries_path():
    with pytest.raises(InvalidEnumValue) as exc:
        decode_enum(5, Level, path="$.level")
    assert exc.value.details["path"] == "$.level"


def test_is_enum_type():
    assert is_enum_type(Status)
    assert not is_enum_type(Status.Active)
    assert not is_enum_type(int)
