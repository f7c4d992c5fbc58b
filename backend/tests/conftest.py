"""Shared test fixtures for dev-server tests."""

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from devserver.config import Settings
from devserver.core.item_store import ItemStore
from devserver.main import create_app


@pytest.fixture
def static_dir(tmp_path):
    """A static root with an index page, a stylesheet and a docs/ directory."""
    root = tmp_path / "public"
    (root / "docs").mkdir(parents=True)
    (root / "index.html").write_text("<h1>home</h1>")
    (root / "style.css").write_text("body { color: black; }")
    (root / "docs" / "index.html").write_text("<h1>docs</h1>")
    return root


@pytest.fixture
def settings(static_dir) -> Settings:
    return Settings(_env_file=None, static_dir=str(static_dir), environment="test")


@pytest.fixture
def item_store() -> ItemStore:
    return ItemStore()


@pytest.fixture
def app(settings: Settings, item_store: ItemStore) -> FastAPI:
    return create_app(settings, item_store)


@pytest_asyncio.fixture
async def client(app: FastAPI):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
