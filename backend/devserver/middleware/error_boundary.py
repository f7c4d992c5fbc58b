"""Innermost layer: unexpected handler failures become a generic 500.

Sitting inside the rest of the stack means the 500 flows back out through
CORS, compression, tracing and the request ID layer like any other response.
"""

import logging

from devserver.middleware.base import Layer, RequestContext

logger = logging.getLogger(__name__)


class ErrorBoundaryLayer(Layer):
    handles_errors = True

    def on_error(self, ctx: RequestContext, exc: Exception) -> None:
        logger.error("Unhandled exception on %s %s", ctx.method, ctx.path, exc_info=exc)
