"""Layer abstraction for the request pipeline.

A layer is a pure ASGI app wrapping an inner ASGI app. It may look at the
request before forwarding and adjust response headers when the response
starts. Stacks are written outermost first, the same convention as
Starlette's ``middleware=[...]`` argument: in ``[A, B, C]`` layer A sees the
raw request first and the final response last.

Pure ASGI instead of BaseHTTPMiddleware so the response hooks also run on
error paths. A layer never touches the body; it has already been forwarded
by the time headers are seen.
"""

import time
from dataclasses import dataclass

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from devserver.api.errors import internal_error_response

REQUEST_ID_STATE_KEY = "request_id"


@dataclass
class RequestContext:
    """Snapshot of one request plus the response in progress."""

    method: str
    path: str
    headers: Headers
    received_at: float
    request_id: str | None = None
    status_code: int | None = None
    response_headers: MutableHeaders | None = None

    @classmethod
    def from_scope(cls, scope: Scope) -> "RequestContext":
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(raw=list(scope["headers"])),
            received_at=time.perf_counter(),
            request_id=scope.get("state", {}).get(REQUEST_ID_STATE_KEY),
        )

    @property
    def response_started(self) -> bool:
        return self.status_code is not None

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.received_at) * 1000


class Layer:
    """Base class for request pipeline layers.

    Subclasses override any of the hooks:

    ``before(ctx, scope)``
        Runs once before the inner app is called.
    ``after(ctx)``
        Runs when the response starts; ``ctx.response_headers`` is mutable.
    ``on_error(ctx, exc)``
        Runs when the inner app raises.

    When the inner app raises before a response started and
    ``handles_errors`` is set, the failure is turned into a generic 500 that
    is sent through this layer, so ``after`` still runs. Otherwise the
    exception propagates.
    """

    handles_errors = False

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = RequestContext.from_scope(scope)
        self.before(ctx, scope)

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                ctx.status_code = message["status"]
                ctx.response_headers = MutableHeaders(scope=message)
                self.after(ctx)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            self.on_error(ctx, exc)
            if ctx.response_started or not self.handles_errors:
                raise
            await internal_error_response()(scope, receive, send_wrapper)

    def before(self, ctx: RequestContext, scope: Scope) -> None:
        pass

    def after(self, ctx: RequestContext) -> None:
        pass

    def on_error(self, ctx: RequestContext, exc: Exception) -> None:
        pass
