"""Fault adapter: the last boundary turning any failure into a JSON fault response."""

from __future__ import annotations

import dataclasses

from loguru import logger

from jsonwire.codec.encoder import WireMessage, dump_bytes
from jsonwire.config.schema import Config
from jsonwire.faults.error_tree import DEFAULT_MAX_DEPTH, Failure, FaultEnvelope, build
from jsonwire.utils.exceptions import ErrorKind, sanitize_error_message

_PAYLOAD_KINDS = {
    ErrorKind.MALFORMED_PAYLOAD,
    ErrorKind.SHAPE_MISMATCH,
    ErrorKind.INVALID_ENUM_VALUE,
    ErrorKind.INVALID_VALUE,
}


def _redact(failure: Failure) -> Failure:
    cause = _redact(failure.cause) if failure.cause is not None else None
    return dataclasses.replace(failure, message=sanitize_error_message(failure.message), cause=cause)


class FaultAdapter:
    """Holds the deployment's fault settings and produces fault responses."""

    def __init__(
        self,
        include_detail: bool = False,
        default_status: int = 500,
        max_depth: int = DEFAULT_MAX_DEPTH,
        redact_messages: bool = False,
    ):
        self.include_detail = include_detail
        self.default_status = default_status
        self.max_depth = max_depth
        self.redact_messages = redact_messages

    @classmethod
    def from_config(cls, config: Config) -> FaultAdapter:
        faults = config.faults
        return cls(
            include_detail=faults.include_exception_detail_in_faults,
            default_status=faults.default_status,
            max_depth=faults.max_depth,
            redact_messages=faults.redact_messages,
        )

    def status_for(self, failure: Failure) -> int:
        if failure.status_code is not None:
            return failure.status_code
        return self.default_status

    def adapt(self, failure: Failure | BaseException, operation: str | None = None) -> WireMessage:
        """Build the fault response. Never raises."""
        try:
            if isinstance(failure, BaseException):
                exc = failure
                failure = Failure.from_exception(exc, max_depth=self.max_depth)
                self._log(exc, failure, operation)
            if self.redact_messages:
                failure = _redact(failure)
            envelope = FaultEnvelope(error=build(failure, self.include_detail, self.max_depth))
            return WireMessage(body=dump_bytes(envelope.to_wire()), status_code=self.status_for(failure))
        except Exception:
            logger.exception("Failed to build fault response for {}", operation or "operation")
            return WireMessage(body=dump_bytes({"error": {"message": "Internal error"}}), status_code=500)

    def _log(self, exc: BaseException, failure: Failure, operation: str | None) -> None:
        name = operation or "operation"
        status = self.status_for(failure)
        message = sanitize_error_message(failure.message)
        if failure.kind in _PAYLOAD_KINDS:
            logger.info("Rejected request for {} [{}] status={}: {}", name, failure.kind.value, status, message)
        elif failure.kind is ErrorKind.UNHANDLED_FAULT:
            logger.opt(exception=exc).error("Operation {} failed status={}: {}", name, status, message)
        else:
            logger.warning("Operation {} faulted [{}] status={}: {}", name, failure.kind.value, status, message)


def adapt(
    failure: Failure | BaseException,
    include_detail: bool,
    default_status: int = 500,
) -> WireMessage:
    """Fault response for ``failure``: declared status if any, else ``default_status``."""
    return FaultAdapter(include_detail=include_detail, default_status=default_status).adapt(failure)
