"""Unit tests for the single-origin gate."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from products_api.api.middleware.origin_gate import (
    ORIGIN_REJECTED_MESSAGE,
    OriginGateMiddleware,
    is_origin_allowed,
)

FRONTEND = "http://localhost:5173"


@pytest.mark.unit
class TestIsOriginAllowed:
    """Test the origin predicate."""

    @pytest.mark.parametrize(
        ("origin", "allowed_origin", "expected"),
        [
            (FRONTEND, FRONTEND, True),
            ("http://evil.example", FRONTEND, False),
            ("http://localhost:5173/", FRONTEND, False),
            ("http://LOCALHOST:5173", FRONTEND, False),
            (FRONTEND, None, False),
        ],
    )
    def test_exact_match_only(
        self, origin: str, allowed_origin: str | None, expected: bool
    ) -> None:
        """Only an exact match with a configured origin is allowed."""
        assert is_origin_allowed(origin, allowed_origin) is expected


def _gated_app(allowed_origin: str | None) -> FastAPI:
    app = FastAPI()
    app.add_middleware(OriginGateMiddleware, allowed_origin=allowed_origin)

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"status": "ok"}

    return app


@pytest.mark.unit
class TestOriginGateMiddleware:
    """Test the middleware in front of a minimal application."""

    async def test_allowed_origin_passes(self) -> None:
        """The configured origin reaches the route."""
        transport = ASGITransport(app=_gated_app(FRONTEND))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/ping", headers={"Origin": FRONTEND})

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_foreign_origin_is_rejected(self) -> None:
        """Any other origin gets a plain-text 403."""
        transport = ASGITransport(app=_gated_app(FRONTEND))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(
                "/ping", headers={"Origin": "http://evil.example"}
            )

        assert response.status_code == 403
        assert response.text == ORIGIN_REJECTED_MESSAGE
        assert response.headers["content-type"].startswith("text/plain")

    async def test_request_without_origin_passes(self) -> None:
        """Requests that are not cross-origin are not gated."""
        transport = ASGITransport(app=_gated_app(FRONTEND))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/ping")

        assert response.status_code == 200

    async def test_unconfigured_origin_rejects_every_origin(self) -> None:
        """Without a configured origin every cross-origin request is refused."""
        transport = ASGITransport(app=_gated_app(None))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/ping", headers={"Origin": FRONTEND})

        assert response.status_code == 403
