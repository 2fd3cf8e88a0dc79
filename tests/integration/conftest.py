"""Shared fixtures for integration tests.

Every test gets its own application bound to a fresh SQLite file, started
through its lifespan so the store bootstrap runs exactly as in production.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from products_api.api.main import create_app
from products_api.core.config import Settings

FRONTEND_URL = "http://localhost:5173"


@pytest.fixture
def make_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[Path], Settings]:
    """Build settings pointing the store at the given SQLite file."""

    def factory(db_path: Path) -> Settings:
        monkeypatch.setenv(
            "DATABASE_CONFIG__DATABASE_URL", f"sqlite+aiosqlite:///{db_path}"
        )
        monkeypatch.setenv("FRONTEND_URL", FRONTEND_URL)
        return Settings(_env_file=None)

    return factory


@pytest.fixture
def test_settings(
    make_settings: Callable[[Path], Settings], tmp_path: Path
) -> Settings:
    """Settings backed by a reachable store."""
    return make_settings(tmp_path / "products.db")


@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    """Application with its lifespan running."""
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client for the running application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def unsafe_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client that returns 500 responses instead of raising."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_product(
    client: AsyncClient,
) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Create a product through the API and return its JSON."""

    async def factory(
        name: str = "Monitor Curvo", price: object = 300
    ) -> dict[str, Any]:
        response = await client.post(
            "/api/products", json={"name": name, "price": price}
        )
        assert response.status_code == 201
        data: dict[str, Any] = response.json()["data"]
        return data

    return factory
