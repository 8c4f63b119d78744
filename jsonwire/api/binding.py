"""FastAPI binding: mounts Python callables as JSON operations.

Each route reads the raw request body whatever its content type, decodes it
against the operation signature, calls the handler and writes either the
encoded result or a fault envelope. Decode errors and handler errors share the
same fault path.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Iterable, Mapping

from fastapi import APIRouter, FastAPI, Request, Response
from loguru import logger
from starlette.concurrency import run_in_threadpool

from jsonwire.codec.decoder import RequestDecoder
from jsonwire.codec.encoder import WireMessage, encode
from jsonwire.codec.signature import BodyStyle, OperationSignature, validate_signature
from jsonwire.config.access import get_config, get_fault_adapter
from jsonwire.config.schema import Config
from jsonwire.faults.adapter import FaultAdapter
from jsonwire.utils.logging_utils import configure_logging


class JsonOperation:
    """A handler with its validated signature, decoder and fault adapter."""

    def __init__(
        self,
        handler: Callable[..., Any],
        signature: OperationSignature,
        adapter: FaultAdapter,
    ):
        validate_signature(signature)
        self.handler = handler
        self.signature = signature
        self.adapter = adapter
        self._decoder = RequestDecoder(signature)
        self._is_async = inspect.iscoroutinefunction(handler)

    @classmethod
    def from_callable(
        cls,
        handler: Callable[..., Any],
        *,
        adapter: FaultAdapter,
        name: str | None = None,
        body_style: BodyStyle = BodyStyle.BARE,
    ) -> JsonOperation:
        signature = OperationSignature.from_callable(handler, name=name, body_style=body_style)
        return cls(handler, signature, adapter)

    async def invoke(self, raw: bytes) -> WireMessage:
        """Decode, call, encode. Every failure becomes a fault response."""
        try:
            args, kwargs = self.signature.split_arguments(self._decoder.decode(raw))
            if self._is_async:
                result = await self.handler(*args, **kwargs)
            else:
                result = await run_in_threadpool(self.handler, *args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result
            if self.signature.is_void:
                return WireMessage.empty()
            return encode(result, self.signature.return_type)
        except Exception as exc:
            return self.adapter.adapt(exc, operation=self.signature.name)


def _to_response(message: WireMessage) -> Response:
    return Response(content=message.body, status_code=message.status_code, media_type=message.media_type)


def register_operation(
    router: APIRouter | FastAPI,
    path: str,
    handler: Callable[..., Any],
    *,
    methods: Iterable[str] = ("POST",),
    body_style: BodyStyle = BodyStyle.BARE,
    name: str | None = None,
    adapter: FaultAdapter | None = None,
) -> JsonOperation:
    """
    Validate ``handler`` as an operation and add its route.

    Without an explicit ``adapter`` the process-wide one from ``get_fault_adapter`` is used.
    Raises UnsupportedShape at registration.
    """
    operation = JsonOperation.from_callable(
        handler,
        adapter=adapter or get_fault_adapter(),
        name=name,
        body_style=body_style,
    )

    async def endpoint(request: Request) -> Response:
        return _to_response(await operation.invoke(await request.body()))

    router.add_api_route(path, endpoint, methods=list(methods), name=operation.signature.name)
    logger.debug(
        "Registered operation {} at {} ({} parameters)",
        operation.signature.name,
        path,
        len(operation.signature.parameters),
    )
    return operation


def create_app(
    operations: Mapping[str, Callable[..., Any]] | None = None,
    *,
    config: Config | None = None,
    title: str = "jsonwire",
) -> FastAPI:
    """Build a FastAPI app serving each ``path -> handler`` pair as a POST operation."""
    if config is None:
        config, adapter = get_config(), get_fault_adapter()
    else:
        adapter = FaultAdapter.from_config(config)
    configure_logging(config.logging.enabled, config.logging.level)
    app = FastAPI(title=title)
    for path, handler in (operations or {}).items():
        register_operation(app, path, handler, adapter=adapter)
    return app
