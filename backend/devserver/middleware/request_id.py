"""Request ID layer. Attaches one unique ID to every request/response pair.

A fresh ID is generated for every request; a client-supplied
``x-request-id`` is overwritten. The ID is written into the request headers
for downstream handlers, stored on ``request.state.request_id``, bound to a
context variable for log records, and set on the response. Failures escaping
the inner stack are turned into a 500 here so that response carries the ID
as well.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.datastructures import MutableHeaders
from starlette.types import Receive, Scope, Send

from devserver.middleware.base import REQUEST_ID_STATE_KEY, Layer, RequestContext

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"

current_request_id: ContextVar[str] = ContextVar("current_request_id", default="-")


def new_request_id() -> str:
    return str(uuid.uuid4())


class RequestIdLayer(Layer):
    handles_errors = True

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        # Already stamped by an outer request ID layer (e.g. a mounted sub-app)
        if REQUEST_ID_STATE_KEY in state:
            await self.app(scope, receive, send)
            return

        request_id = new_request_id()
        state[REQUEST_ID_STATE_KEY] = request_id
        MutableHeaders(scope=scope)[REQUEST_ID_HEADER] = request_id

        token = current_request_id.set(request_id)
        try:
            await super().__call__(scope, receive, send)
        finally:
            current_request_id.reset(token)

    def after(self, ctx: RequestContext) -> None:
        ctx.response_headers[REQUEST_ID_HEADER] = ctx.request_id

    def on_error(self, ctx: RequestContext, exc: Exception) -> None:
        logger.error("Unhandled exception on %s %s", ctx.method, ctx.path, exc_info=exc)
