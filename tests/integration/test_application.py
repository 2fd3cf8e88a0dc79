"""Integration tests for application wiring: lifespan, middleware and errors."""

from collections.abc import Callable
from pathlib import Path

import pytest
import pytest_check
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.api.constants import CORRELATION_ID_HEADER
from products_api.api.main import create_app
from products_api.core.config import Settings
from products_api.infrastructure.database import ConnectionStatus, ProductRepository

FRONTEND_URL = "http://localhost:5173"


@pytest.mark.integration
class TestLifespan:
    """Test startup and shutdown."""

    async def test_bootstrap_status_is_kept(self, app: FastAPI) -> None:
        """A reachable store is reported as connected."""
        assert app.state.database_status == ConnectionStatus(connected=True)

    async def test_engine_disposed_on_shutdown(self, test_settings: Settings) -> None:
        """Leaving the lifespan releases the engine."""
        application = create_app(test_settings)

        async with application.router.lifespan_context(application):
            assert application.state.database._engine is not None

        assert application.state.database._engine is None


@pytest.mark.integration
class TestUnreachableStore:
    """The listener keeps serving when the store cannot be reached."""

    @pytest.fixture
    def broken_settings(
        self, make_settings: Callable[[Path], Settings], tmp_path: Path
    ) -> Settings:
        """Settings pointing at a SQLite file that cannot be created."""
        return make_settings(tmp_path / "missing" / "products.db")

    async def test_fail_open(self, broken_settings: Settings) -> None:
        """Validation and health still answer, store access fails with 500."""
        application = create_app(broken_settings)
        transport = ASGITransport(app=application, raise_app_exceptions=False)

        async with (
            application.router.lifespan_context(application),
            AsyncClient(transport=transport, base_url="http://test") as client,
        ):
            status = application.state.database_status
            invalid = await client.get("/api/products/abc")
            health = await client.get("/health")
            listing = await client.get("/api/products")

        with pytest_check.check:
            assert status.connected is False
        with pytest_check.check:
            assert invalid.status_code == 400
        with pytest_check.check:
            assert health.json() == {"status": "degraded", "database": False}
        with pytest_check.check:
            assert listing.status_code == 500
        with pytest_check.check:
            assert listing.json()["error"] == "Error interno del servidor."


@pytest.mark.integration
class TestHealthAndDocs:
    """Health probe and API documentation."""

    async def test_health(self, client: AsyncClient) -> None:
        """A connected store reports healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": True}

    async def test_openapi_schema(self, client: AsyncClient) -> None:
        """The schema documents every product operation."""
        response = await client.get("/openapi.json")

        assert response.status_code == 200
        schema = response.json()
        with pytest_check.check:
            assert schema["info"]["title"] == "REST API FastAPI / Python"
        with pytest_check.check:
            assert schema["tags"][0]["name"] == "Products"
        with pytest_check.check:
            assert set(schema["paths"]["/api/products"]) == {"get", "post"}
        with pytest_check.check:
            assert set(schema["paths"]["/api/products/{id}"]) == {
                "get",
                "put",
                "patch",
                "delete",
            }
        with pytest_check.check:
            assert "/health" not in schema["paths"]

        get_by_id = schema["paths"]["/api/products/{id}"]["get"]
        assert get_by_id["parameters"][0]["name"] == "id"
        assert {"200", "400", "404"} <= set(get_by_id["responses"])

    async def test_swagger_ui(self, client: AsyncClient) -> None:
        """The interactive documentation is served."""
        response = await client.get("/docs")

        assert response.status_code == 200
        assert "swagger-ui" in response.text.lower()


@pytest.mark.integration
class TestOriginHandling:
    """Cross-origin requests."""

    async def test_allowed_origin_gets_cors_headers(self, client: AsyncClient) -> None:
        """The frontend origin is served with CORS headers."""
        response = await client.get("/api/products", headers={"Origin": FRONTEND_URL})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == FRONTEND_URL

    async def test_preflight_from_allowed_origin(self, client: AsyncClient) -> None:
        """Preflight requests from the frontend are answered."""
        response = await client.options(
            "/api/products",
            headers={
                "Origin": FRONTEND_URL,
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == FRONTEND_URL

    async def test_foreign_origin_is_rejected(self, client: AsyncClient) -> None:
        """Any other origin is refused before routing."""
        response = await client.get(
            "/api/products", headers={"Origin": "http://evil.example"}
        )

        assert response.status_code == 403
        assert response.text == "CORS Error"


@pytest.mark.integration
class TestCorrelationId:
    """Correlation id propagation."""

    async def test_generated_when_missing(self, client: AsyncClient) -> None:
        """Every response carries a correlation id."""
        response = await client.get("/api/products")

        assert response.headers[CORRELATION_ID_HEADER]

    async def test_echoed_when_provided(self, client: AsyncClient) -> None:
        """A caller-supplied id is echoed back."""
        response = await client.get(
            "/api/products", headers={CORRELATION_ID_HEADER: "trace-1234"}
        )

        assert response.headers[CORRELATION_ID_HEADER] == "trace-1234"


@pytest.mark.integration
class TestErrorResponses:
    """Errors outside the validation and not-found paths."""

    async def test_unexpected_error_is_500(
        self, unsafe_client: AsyncClient, mocker: MockerFixture
    ) -> None:
        """An unexpected store failure becomes a generic 500."""
        mocker.patch.object(
            ProductRepository,
            "get_all",
            mocker.AsyncMock(side_effect=RuntimeError("store exploded")),
        )

        response = await unsafe_client.get("/api/products")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Error interno del servidor."
        assert body["detail"] == {"type": "RuntimeError", "message": "store exploded"}

    async def test_detail_hidden_in_production(
        self, test_settings: Settings, mocker: MockerFixture
    ) -> None:
        """An app built with production settings does not reveal the exception."""
        production = test_settings.model_copy(update={"environment": "production"})
        application = create_app(production)
        transport = ASGITransport(app=application, raise_app_exceptions=False)
        mocker.patch.object(
            ProductRepository,
            "get_all",
            mocker.AsyncMock(side_effect=RuntimeError("store exploded")),
        )

        async with (
            application.router.lifespan_context(application),
            AsyncClient(transport=transport, base_url="http://test") as client,
        ):
            response = await client.get("/api/products")

        assert response.status_code == 500
        assert "detail" not in response.json()

    async def test_failed_commit_is_500(
        self,
        unsafe_client: AsyncClient,
        client: AsyncClient,
        mocker: MockerFixture,
    ) -> None:
        """A write that cannot be committed is never reported as a success."""
        mocker.patch.object(
            AsyncSession,
            "commit",
            mocker.AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception())),
        )

        response = await unsafe_client.post(
            "/api/products", json={"name": "Monitor", "price": 300}
        )
        mocker.stopall()
        listing = await client.get("/api/products")

        assert response.status_code == 500
        assert response.json()["error"] == "Error interno del servidor."
        assert listing.json() == {"data": []}

    async def test_unknown_route(self, client: AsyncClient) -> None:
        """Unknown routes answer with the error envelope."""
        response = await client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_wrong_method(self, client: AsyncClient) -> None:
        """Unsupported methods answer with the error envelope."""
        response = await client.post("/api/products/1")

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
