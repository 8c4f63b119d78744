"""Static operation metadata: ordered parameters, return type, body style."""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Callable

from jsonwire.utils.exceptions import UnsupportedShape

TypeDescriptor = Any


class _Void:
    """Return type of operations without a reply body."""

    _instance: _Void | None = None

    def __new__(cls) -> _Void:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "VOID"

    def __reduce__(self) -> str:
        return "VOID"


VOID = _Void()


class BodyStyle(Enum):
    """Declared message body style of an operation."""
    BARE = "bare"
    WRAPPED = "wrapped"
    WRAPPED_REQUEST = "wrapped_request"
    WRAPPED_RESPONSE = "wrapped_response"

    @property
    def wraps_request(self) -> bool:
        return self in (BodyStyle.WRAPPED, BodyStyle.WRAPPED_REQUEST)

    @property
    def wraps_response(self) -> bool:
        return self in (BodyStyle.WRAPPED, BodyStyle.WRAPPED_RESPONSE)


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeDescriptor = Any
    default: Any = None
    keyword_only: bool = False
    variadic: bool = False


@dataclass(frozen=True)
class OperationSignature:
    """
    One operation's ordered parameters and return type.

    Built once when the operation is registered and shared read-only by every
    call. ``parameter_index`` is computed on first use and only for operations
    taking more than one parameter.
    """

    name: str
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeDescriptor = VOID
    body_style: BodyStyle = BodyStyle.BARE
    expects_wrapper: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "expects_wrapper", len(self.parameters) > 1)

    @property
    def is_void(self) -> bool:
        return self.return_type is VOID

    @cached_property
    def parameter_index(self) -> dict[str, int]:
        if not self.expects_wrapper:
            return {}
        return {p.name: i for i, p in enumerate(self.parameters)}

    def defaults(self) -> list[Any]:
        """Fresh argument slots holding each parameter's default."""
        return [p.default for p in self.parameters]

    def split_arguments(self, arguments: list[Any]) -> tuple[list[Any], dict[str, Any]]:
        """Split decoded slots into positional and keyword-only call arguments."""
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for param, value in zip(self.parameters, arguments):
            if param.keyword_only:
                kwargs[param.name] = value
            else:
                args.append(value)
        return args, kwargs

    @classmethod
    def from_callable(
        cls,
        func: Callable[..., Any],
        *,
        name: str | None = None,
        body_style: BodyStyle = BodyStyle.BARE,
    ) -> OperationSignature:
        """Describe a Python callable. ``-> None`` means VOID; missing hints mean Any."""
        sig = inspect.signature(func)
        try:
            hints = typing.get_type_hints(func)
        except (NameError, TypeError):
            hints = {}
        params: list[Parameter] = []
        for p in sig.parameters.values():
            default = None if p.default is inspect.Parameter.empty else p.default
            params.append(
                Parameter(
                    name=p.name,
                    type=hints.get(p.name, Any),
                    default=default,
                    keyword_only=p.kind is inspect.Parameter.KEYWORD_ONLY,
                    variadic=p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD),
                )
            )
        if sig.return_annotation is inspect.Signature.empty:
            return_type: TypeDescriptor = Any
        else:
            return_type = hints.get("return", sig.return_annotation)
            if return_type is None or return_type is type(None):
                return_type = VOID
        return cls(
            name=name or getattr(func, "__name__", "operation"),
            parameters=tuple(params),
            return_type=return_type,
            body_style=body_style,
        )


def validate_signature(signature: OperationSignature) -> None:
    """Reject call shapes the marshaling layer does not implement. Run once at registration."""
    seen: set[str] = set()
    for param in signature.parameters:
        if param.variadic:
            raise UnsupportedShape("Operations cannot have variadic parameters.", operation=signature.name)
        if param.name in seen:
            raise UnsupportedShape(f"Duplicate parameter name '{param.name}'.", operation=signature.name)
        seen.add(param.name)

    if len(signature.parameters) == 1 and signature.body_style.wraps_request:
        raise UnsupportedShape(
            "Wrapped body style for single parameters not implemented.",
            operation=signature.name,
        )
    if not signature.is_void and signature.body_style.wraps_response:
        raise UnsupportedShape("Wrapped response not implemented.", operation=signature.name)
