"""Request tracing layer: one log line per request with status and latency."""

import logging

from starlette.types import Scope

from devserver.middleware.base import Layer, RequestContext

logger = logging.getLogger(__name__)


class TraceLayer(Layer):
    def before(self, ctx: RequestContext, scope: Scope) -> None:
        logger.debug("Started processing request %s %s", ctx.method, ctx.path)

    def after(self, ctx: RequestContext) -> None:
        level = logging.WARNING if ctx.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %d in %.1fms",
            ctx.method,
            ctx.path,
            ctx.status_code,
            ctx.elapsed_ms,
        )

    def on_error(self, ctx: RequestContext, exc: Exception) -> None:
        logger.warning(
            "%s %s failed after %.1fms: %s",
            ctx.method,
            ctx.path,
            ctx.elapsed_ms,
            type(exc).__name__,
        )
