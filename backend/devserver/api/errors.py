"""Exception handlers and the error envelope responses they produce."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from devserver.models.envelope import ApiError, error_response

INTERNAL_ERROR_MESSAGE = "Internal server error"

_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def internal_error_response() -> JSONResponse:
    """Generic 500 envelope; the underlying detail is only ever logged."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response([ApiError(code="INTERNAL_ERROR", message=INTERNAL_ERROR_MESSAGE)]),
    )


def _field_name(err: dict) -> str | None:
    # ("body", "message") -> "message"; a body that fails to parse has no field
    if err.get("type") == "json_invalid":
        return None
    parts = [str(part) for part in err.get("loc", ()) if part != "body"]
    return ".".join(parts) or None


async def _validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        ApiError(
            code="BAD_REQUEST",
            message=err.get("msg", "Invalid request"),
            field=_field_name(err),
        )
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_response(errors))


async def _http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response([ApiError(code=code, message=str(exc.detail))]),
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Translate client and routing errors into the error envelope.

    Unexpected exceptions are not registered here: Starlette would route them
    to the outermost ServerErrorMiddleware, outside the layer stack, and the
    response would miss the correlation header. The error boundary layer
    handles them instead.
    """
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
