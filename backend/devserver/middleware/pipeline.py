"""Request pipeline assembly.

The layer stack, outermost first::

    request ID -> trace -> gzip -> CORS -> error boundary -> router

Observability and policy layers wrap the business layers so their guarantees
hold for responses produced deeper in the stack, including CORS preflight
short-circuits and static-file 404s.
"""

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from devserver.middleware.error_boundary import ErrorBoundaryLayer
from devserver.middleware.request_id import REQUEST_ID_HEADER, RequestIdLayer
from devserver.middleware.trace import TraceLayer

# Bodies smaller than this are sent uncompressed
GZIP_MINIMUM_SIZE = 500


def build_middleware() -> list[Middleware]:
    """Return the ordered layer stack for ``Starlette(middleware=...)``.

    CORS is fully permissive, which suits local development only.
    """
    return [
        Middleware(RequestIdLayer),
        Middleware(TraceLayer),
        Middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE),
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        ),
        Middleware(ErrorBoundaryLayer),
    ]
