"""Error tree: a chained exception reduced to nested {message, stackTrace, inner} nodes."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from jsonwire.utils.exceptions import ErrorKind, classify_failure, declared_status

DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class Failure:
    """
    One level of a failure chain, detached from Python's exception objects.

    ``from_exception`` captures the message and formatted traceback of each
    exception and follows the explicit ``raise ... from`` chain (``__cause__``)
    down to ``max_depth`` levels. An exception that was only being handled
    when this one was raised (``__context__``) is not part of the chain.
    """

    message: str
    trace: str | None = None
    cause: Failure | None = None
    status_code: int | None = None
    kind: ErrorKind = ErrorKind.UNHANDLED_FAULT

    @classmethod
    def from_exception(cls, exc: BaseException, max_depth: int = DEFAULT_MAX_DEPTH) -> Failure:
        chain = [exc]
        current = _next_cause(exc)
        while current is not None and len(chain) < max_depth and all(current is not seen for seen in chain):
            chain.append(current)
            current = _next_cause(current)

        failure = cls._level(chain[-1], None)
        for item in reversed(chain[:-1]):
            failure = cls._level(item, failure)
        return failure

    @classmethod
    def _level(cls, exc: BaseException, cause: Failure | None) -> Failure:
        return cls(
            message=_message_of(exc),
            trace=_trace_of(exc),
            cause=cause,
            status_code=declared_status(exc),
            kind=classify_failure(exc),
        )


def _next_cause(exc: BaseException) -> BaseException | None:
    return exc.__cause__


def _message_of(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if not isinstance(message, str):
        detail = getattr(exc, "detail", None)
        message = detail if isinstance(detail, str) else str(exc)
    return message or type(exc).__name__


def _trace_of(exc: BaseException) -> str | None:
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_tb(exc.__traceback__)).rstrip("\n") or None


class ErrorNode(BaseModel):
    """Serializable error level; absent fields are left off the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    stack_trace: str | None = Field(default=None, alias="stackTrace")
    inner: ErrorNode | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FaultEnvelope(BaseModel):
    """Exact wire shape of every fault response: {"error": {...}}."""

    model_config = ConfigDict(frozen=True)

    error: ErrorNode

    def to_wire(self) -> dict[str, Any]:
        return {"error": self.error.to_wire()}


def build(
    failure: Failure | BaseException,
    include_detail: bool,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ErrorNode:
    """
    Convert a failure chain into an ErrorNode tree.

    Without detail only the outermost message is kept: no trace and no inner
    causes leave the process. With detail every level of the chain becomes a
    node carrying its own message and trace, up to ``max_depth`` levels.
    """
    if isinstance(failure, BaseException):
        failure = Failure.from_exception(failure, max_depth=max_depth)
    if not include_detail:
        return ErrorNode(message=failure.message)
    inner = None
    if failure.cause is not None and max_depth > 1:
        inner = build(failure.cause, include_detail, max_depth - 1)
    return ErrorNode(message=failure.message, stack_trace=failure.trace, inner=inner)
