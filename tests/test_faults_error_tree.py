import pytest
from fastapi import HTTPException

from jsonwire.faults.error_tree import ErrorNode, Failure, FaultEnvelope, build
from jsonwire.utils.exceptions import DeclaredFault, ErrorKind


def _raise_chain(depth: int) -> BaseException:
    """Raise a chain of `depth` exceptions linked with `raise ... from ...`."""

    def _level(n: int) -> None:
        if n == 0:
            raise KeyError("root cause")
        try:
            _level(n - 1)
        except Exception as e:
            raise RuntimeError(f"level {n}") from e

    try:
        _level(depth - 1)
    except Exception as e:
        return e
    raise AssertionError("unreachable")


def test_failure_from_exception_follows_cause():
    failure = Failure.from_exception(_raise_chain(3))
    assert failure.message == "level 2"
    assert failure.cause.message == "level 1"
    assert failure.cause.cause.message == "'root cause'"
    assert failure.cause.cause.cause is None
    assert failure.trace and "_level" in failure.trace
    assert failure.kind is ErrorKind.UNHANDLED_FAULT


def test_failure_ignores_exception_being_handled():
    try:
        try:
            raise ValueError("unrelated")
        except ValueError:
            raise RuntimeError("outer")
    except RuntimeError as e:
        assert e.__context__ is not None
        failure = Failure.from_exception(e)
    assert failure.message == "outer"
    assert failure.cause is None


def test_failure_respects_suppressed_context():
    try:
        try:
            raise ValueError("inner")
        except ValueError:
            raise RuntimeError("outer") from None
    except RuntimeError as e:
        failure = Failure.from_exception(e)
    assert failure.cause is None


def test_failure_never_raised_has_no_trace():
    failure = Failure.from_exception(ValueError("x"))
    assert failure.trace is None


def test_failure_empty_message_uses_type_name():
    assert Failure.from_exception(RuntimeError()).message == "RuntimeError"


def test_failure_status_from_declared_fault_and_http_exception():
    assert Failure.from_exception(DeclaredFault("gone", 410)).status_code == 410
    failure = Failure.from_exception(HTTPException(status_code=404, detail="no such order"))
    assert failure.status_code == 404
    assert failure.message == "no such order"


def test_failure_depth_cap():
    failure = Failure.from_exception(_raise_chain(10), max_depth=3)
    depth = 0
    while failure is not None:
        depth += 1
        failure = failure.cause
    assert depth == 3


def test_build_without_detail_keeps_only_outer_message():
    node = build(_raise_chain(5), include_detail=False)
    assert node == ErrorNode(message="level 4")
    assert node.to_wire() == {"message": "level 4"}


def test_build_with_detail_nests_inner_causes():
    node = build(_raise_chain(2), include_detail=True)
    assert node.message == "level 1"
    assert node.stack_trace
    assert node.inner.message == "'root cause'"
    assert node.inner.inner is None
    wire = node.to_wire()
    assert set(wire) == {"message", "stackTrace", "inner"}
    assert "inner" not in wire["inner"]


def test_build_accepts_failure_values():
    failure = Failure("outer", trace="t1", cause=Failure("inner"))
    node = build(failure, include_detail=True)
    assert node.to_wire() == {"message": "outer", "stackTrace": "t1", "inner": {"message": "inner"}}


@pytest.mark.parametrize("max_depth,expected", [(1, 1), (2, 2), (64, 4)])
def test_build_depth_cap(max_depth, expected):
    failure = Failure("a", cause=Failure("b", cause=Failure("c", cause=Failure("d"))))
    node = build(failure, include_detail=True, max_depth=max_depth)
    levels = 0
    while node is not None:
        levels += 1
        node = node.inner
    assert levels == expected


def test_envelope_has_single_error_key():
    envelope = FaultEnvelope(error=ErrorNode(message="boom"))
    assert envelope.to_wire() == {"error": {"message": "boom"}}
