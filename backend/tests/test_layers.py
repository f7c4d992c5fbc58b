"""Tests for the layer abstraction and the assembled pipeline."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from devserver.middleware.base import Layer, RequestContext
from devserver.middleware.error_boundary import ErrorBoundaryLayer
from devserver.middleware.request_id import RequestIdLayer


class RecordingLayer(Layer):
    """Appends hook calls to a shared event list."""

    def __init__(self, app, name: str, events: list) -> None:
        super().__init__(app)
        self.name = name
        self.events = events

    def before(self, ctx: RequestContext, scope) -> None:
        self.events.append(f"{self.name}.before")

    def after(self, ctx: RequestContext) -> None:
        self.events.append(f"{self.name}.after:{ctx.status_code}")
        ctx.response_headers[f"x-{self.name}"] = "seen"

    def on_error(self, ctx: RequestContext, exc: Exception) -> None:
        self.events.append(f"{self.name}.error:{type(exc).__name__}")


def _build(events: list, middleware: list[Middleware]) -> Starlette:
    async def ok(request: Request) -> PlainTextResponse:
        events.append("handler")
        return PlainTextResponse("ok")

    async def boom(request: Request) -> PlainTextResponse:
        events.append("handler")
        raise RuntimeError("boom")

    return Starlette(
        routes=[Route("/ok", ok), Route("/boom", boom)],
        middleware=middleware,
    )


@pytest_asyncio.fixture
async def make_client():
    clients = []

    async def _make(app) -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _make
    for ac in clients:
        await ac.aclose()


# -------------------------------------------------------------------
# Ordering
# -------------------------------------------------------------------


async def test_first_layer_is_outermost(make_client):
    events: list[str] = []
    app = _build(events, [
        Middleware(RecordingLayer, name="outer", events=events),
        Middleware(RecordingLayer, name="inner", events=events),
    ])
    client = await make_client(app)

    response = await client.get("/ok")

    assert response.status_code == 200
    assert events == [
        "outer.before",
        "inner.before",
        "handler",
        "inner.after:200",
        "outer.after:200",
    ]
    assert response.headers["x-outer"] == "seen"
    assert response.headers["x-inner"] == "seen"


async def test_inner_app_called_once(make_client):
    events: list[str] = []
    app = _build(events, [Middleware(RecordingLayer, name="only", events=events)])
    client = await make_client(app)

    await client.get("/ok")

    assert events.count("handler") == 1


# -------------------------------------------------------------------
# Failure path
# -------------------------------------------------------------------


async def test_after_hooks_run_when_handler_fails(make_client):
    events: list[str] = []
    app = _build(events, [
        Middleware(RecordingLayer, name="outer", events=events),
        Middleware(ErrorBoundaryLayer),
    ])
    client = await make_client(app)

    response = await client.get("/boom")

    assert response.status_code == 500
    assert response.headers["x-outer"] == "seen"
    assert events[-1] == "outer.after:500"
    body = response.json()
    assert body["errors"][0]["code"] == "INTERNAL_ERROR"
    assert "boom" not in response.text


async def test_non_handling_layer_observes_error_then_propagates(make_client):
    events: list[str] = []
    app = _build(events, [
        Middleware(RequestIdLayer),
        Middleware(RecordingLayer, name="observer", events=events),
    ])
    client = await make_client(app)

    response = await client.get("/boom")

    assert "observer.error:RuntimeError" in events
    assert response.status_code == 500
    assert response.headers["x-request-id"]


async def test_request_id_layer_alone_is_an_error_boundary(make_client):
    events: list[str] = []
    app = _build(events, [Middleware(RequestIdLayer)])
    client = await make_client(app)

    response = await client.get("/boom")

    assert response.status_code == 500
    assert response.headers["x-request-id"]


async def test_non_http_scopes_pass_through():
    seen = []

    async def inner(scope, receive, send):
        seen.append(scope["type"])

    layer = RecordingLayer(inner, name="l", events=[])
    await layer({"type": "lifespan"}, None, None)

    assert seen == ["lifespan"]


def test_request_context_snapshot_is_case_insensitive():
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/x",
        "headers": [(b"accept", b"text/plain"), (b"x-multi", b"1"), (b"x-multi", b"2")],
    }
    ctx = RequestContext.from_scope(scope)

    assert ctx.headers["Accept"] == "text/plain"
    assert ctx.headers.getlist("X-Multi") == ["1", "2"]
    assert not ctx.response_started


@pytest.mark.parametrize("status_code", [200, 404])
async def test_response_headers_mutable_for_any_status(make_client, status_code):
    events: list[str] = []
    app = _build(events, [Middleware(RecordingLayer, name="tag", events=events)])
    client = await make_client(app)

    response = await client.get("/ok" if status_code == 200 else "/missing")

    assert response.status_code == status_code
    assert response.headers["x-tag"] == "seen"
