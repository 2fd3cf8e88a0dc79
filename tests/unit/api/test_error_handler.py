"""Unit tests for the global exception handlers."""

from typing import cast

import orjson
import pytest
from fastapi import Request
from pytest_mock import MockerFixture
from starlette.exceptions import HTTPException

from products_api.api.middleware.error_handler import (
    SERVER_ERROR_MESSAGE,
    generic_exception_handler,
    http_exception_handler,
    products_api_error_handler,
)
from products_api.api.validation import Violation
from products_api.core.config import Settings
from products_api.core.context import RequestContext
from products_api.core.exceptions import (
    NotFoundError,
    RequestValidationFailed,
    StoreConnectionError,
)


@pytest.fixture
def request_stub(mocker: MockerFixture) -> Request:
    """Provide a request with just what the handlers log."""
    request = mocker.Mock()
    request.method = "GET"
    request.url.path = "/api/products/1"
    request.app.state.settings = Settings(_env_file=None)
    return cast("Request", request)


@pytest.mark.unit
class TestProductsAPIErrorHandler:
    """Test mapping of application errors."""

    async def test_validation_failed_is_400(self, request_stub: Request) -> None:
        """Violations are returned under ``errors``."""
        exc = RequestValidationFailed([Violation("bad", "price", "body", "x")])

        response = await products_api_error_handler(request_stub, exc)

        assert response.status_code == 400
        assert orjson.loads(response.body) == {
            "errors": [
                {
                    "type": "field",
                    "value": "x",
                    "msg": "bad",
                    "path": "price",
                    "location": "body",
                }
            ]
        }

    async def test_not_found_is_404(self, request_stub: Request) -> None:
        """Missing products return the fixed message."""
        exc = NotFoundError(context={"product_id": 2000})

        response = await products_api_error_handler(request_stub, exc)

        assert response.status_code == 404
        assert orjson.loads(response.body) == {"error": "Producto no econtrado."}

    async def test_other_errors_are_500(self, request_stub: Request) -> None:
        """Any other application error is a server error."""
        RequestContext.set_correlation_id("corr-1")
        exc = StoreConnectionError("connection refused")

        response = await products_api_error_handler(request_stub, exc)

        body = orjson.loads(response.body)
        assert response.status_code == 500
        assert body["error"] == SERVER_ERROR_MESSAGE
        assert body["correlation_id"] == "corr-1"

    async def test_rejects_foreign_exceptions(self, request_stub: Request) -> None:
        """The handler only accepts ProductsAPIError."""
        with pytest.raises(TypeError, match="Expected ProductsAPIError"):
            await products_api_error_handler(request_stub, ValueError("x"))


@pytest.mark.unit
class TestFrameworkErrorHandlers:
    """Test mapping of framework and unexpected errors."""

    async def test_http_exception(self, request_stub: Request) -> None:
        """HTTP exceptions keep their status and detail."""
        exc = HTTPException(status_code=405, detail="Method Not Allowed")

        response = await http_exception_handler(request_stub, exc)

        assert response.status_code == 405
        assert orjson.loads(response.body) == {"error": "Method Not Allowed"}

    async def test_generic_exception_is_500(self, request_stub: Request) -> None:
        """Unexpected exceptions hide behind the generic message."""
        response = await generic_exception_handler(
            request_stub, RuntimeError("boom")
        )

        body = orjson.loads(response.body)
        assert response.status_code == 500
        assert body["error"] == SERVER_ERROR_MESSAGE
        assert body["detail"] == {"type": "RuntimeError", "message": "boom"}

    async def test_production_app_hides_detail(self, request_stub: Request) -> None:
        """The serving application's settings decide whether detail is shown."""
        request_stub.app.state.settings = Settings(
            _env_file=None, environment="production"
        )

        response = await generic_exception_handler(
            request_stub, RuntimeError("boom")
        )

        assert response.status_code == 500
        assert "detail" not in orjson.loads(response.body)
