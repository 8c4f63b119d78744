"""Incremental reader over the members of one top-level JSON object."""

from __future__ import annotations

import json
import re
from json.decoder import scanstring
from json.scanner import NUMBER_RE
from typing import Any, Iterator

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_LITERALS = ("true", "false", "null")


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


class ObjectReader:
    """
    Walks a JSON document member by member without building the whole object.

    ``members()`` yields each key in document order. For every key the caller
    either ``read_value()`` (materialize it) or ``skip_value()`` (check its
    syntax and move past it); a value left untouched is skipped automatically.
    Syntax errors raise ``json.JSONDecodeError`` with the offending position.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._decoder = json.JSONDecoder(parse_constant=_reject_constant)

    @property
    def position(self) -> int:
        return self._pos

    def _error(self, msg: str) -> json.JSONDecodeError:
        return json.JSONDecodeError(msg, self._text, self._pos)

    def _peek(self) -> str:
        self._pos = _WHITESPACE.match(self._text, self._pos).end()
        return self._text[self._pos:self._pos + 1]

    def at_object(self) -> bool:
        return self._peek() == "{"

    def at_end(self) -> bool:
        return self._peek() == ""

    def members(self) -> Iterator[str]:
        if self._peek() != "{":
            raise self._error("Expecting '{'")
        self._pos += 1
        if self._peek() == "}":
            self._pos += 1
            return
        while True:
            if self._peek() != '"':
                raise self._error("Expecting property name enclosed in double quotes")
            key, self._pos = scanstring(self._text, self._pos + 1)
            if self._peek() != ":":
                raise self._error("Expecting ':' delimiter")
            self._pos += 1
            self._peek()
            value_start = self._pos
            yield key
            if self._pos == value_start:
                self.skip_value()
            ch = self._peek()
            if ch == "}":
                self._pos += 1
                return
            if ch != ",":
                raise self._error("Expecting ',' delimiter")
            self._pos += 1

    def read_value(self) -> Any:
        """Decode the value at the cursor. NaN and Infinity are not JSON and are refused."""
        self._peek()
        try:
            value, self._pos = self._decoder.raw_decode(self._text, self._pos)
        except _NonStandardConstant as e:
            raise self._error(f"{e} is not a valid JSON value") from None
        return value

    def skip_value(self) -> None:
        ch = self._peek()
        if ch == "{":
            for _ in self.members():
                pass
        elif ch == "[":
            self._pos += 1
            if self._peek() == "]":
                self._pos += 1
                return
            while True:
                self.skip_value()
                ch = self._peek()
                if ch == "]":
                    self._pos += 1
                    return
                if ch != ",":
                    raise self._error("Expecting ',' delimiter")
                self._pos += 1
        elif ch == '"':
            _, self._pos = scanstring(self._text, self._pos + 1)
        else:
            match = NUMBER_RE.match(self._text, self._pos)
            if match is not None:
                self._pos = match.end()
                return
            for literal in _LITERALS:
                if self._text.startswith(literal, self._pos):
                    self._pos += len(literal)
                    return
            raise self._error("Expecting value")

    def finish(self) -> None:
        """Require nothing but whitespace after the consumed value."""
        if not self.at_end():
            raise self._error("Extra data")
