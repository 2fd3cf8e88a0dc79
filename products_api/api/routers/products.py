"""Product resource handlers.

Every handler follows the same sequence: validate, locate, act. Validation
runs as a dependency declared before the database session, so a request
with violations is answered with 400 before the store is touched and an
invalid id can never produce a 404.
"""

from typing import Annotated, Any, Final

from fastapi import APIRouter, Depends, status
from loguru import logger

from products_api.api.constants import (
    API_PREFIX,
    PRODUCT_DELETED_MESSAGE,
    PRODUCTS_TAG,
)
from products_api.api.schemas.errors import NotFoundResponse, ValidationErrorResponse
from products_api.api.schemas.products import (
    AvailabilityBody,
    ProductBody,
    ProductDeletedResponse,
    ProductListResponse,
    ProductRead,
    ProductReplaceBody,
    ProductResponse,
)
from products_api.api.validation import (
    CREATE_CHECKS,
    ID_CHECKS,
    REPLACE_CHECKS,
    Valid,
    as_text,
    is_boolean,
    to_bool,
    validated_input,
)
from products_api.core.exceptions import NotFoundError
from products_api.infrastructure.database import (
    DatabaseSession,
    Product,
    ProductRepository,
)

router = APIRouter(prefix=API_PREFIX, tags=[PRODUCTS_TAG])

# Route annotations for the OpenAPI document. Path and body are read by the
# validators rather than declared as typed parameters, so they are described
# here explicitly.
ID_PARAMETER: Final[dict[str, Any]] = {
    "in": "path",
    "name": "id",
    "description": "The Id of the product",
    "required": True,
    "schema": {"type": "integer"},
}

BAD_REQUEST: Final = {"model": ValidationErrorResponse, "description": "Bad Request"}
NOT_FOUND: Final = {"model": NotFoundResponse, "description": "Product not found"}


def _json_body(model: type[Any]) -> dict[str, Any]:
    return {
        "required": True,
        "content": {"application/json": {"schema": model.model_json_schema()}},
    }


async def _get_product_or_404(
    repository: ProductRepository, product_id: int
) -> Product:
    """Locate a product or raise NotFoundError."""
    product = await repository.get_by_id(product_id)
    if product is None:
        raise NotFoundError(context={"product_id": product_id})
    return product


def _respond(product: Product) -> ProductResponse:
    return ProductResponse(data=ProductRead.model_validate(product))


@router.get(
    "",
    response_model=ProductListResponse,
    summary="Get a list of products",
    description="Return a list of products",
)
async def get_products(db: DatabaseSession) -> ProductListResponse:
    """List every product ordered by id."""
    products = await ProductRepository(db).get_all()
    return ProductListResponse(
        data=[ProductRead.model_validate(product) for product in products]
    )


@router.get(
    "/{id}",
    response_model=ProductResponse,
    summary="Get a product by ID",
    description="Return a product based on its unique ID",
    responses={400: BAD_REQUEST, 404: NOT_FOUND},
    openapi_extra={"parameters": [ID_PARAMETER]},
)
async def get_product_by_id(
    payload: Annotated[Valid, Depends(validated_input(*ID_CHECKS))],
    db: DatabaseSession,
) -> ProductResponse:
    """Return a single product."""
    product = await _get_product_or_404(ProductRepository(db), payload.product_id)
    return _respond(product)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creates a new Product",
    description="Returns a new record in the database",
    responses={400: BAD_REQUEST},
    openapi_extra={"requestBody": _json_body(ProductBody)},
)
async def create_product(
    payload: Annotated[Valid, Depends(validated_input(*CREATE_CHECKS))],
    db: DatabaseSession,
) -> ProductResponse:
    """Create a product; new products are always available."""
    product = await ProductRepository(db).add(
        name=as_text(payload.body["name"]),
        price=float(as_text(payload.body["price"])),
    )
    return _respond(product)


@router.put(
    "/{id}",
    response_model=ProductResponse,
    summary="Updates a product with user input",
    description="Return the updated product",
    responses={400: BAD_REQUEST, 404: NOT_FOUND},
    openapi_extra={
        "parameters": [ID_PARAMETER],
        "requestBody": _json_body(ProductReplaceBody),
    },
)
async def update_product(
    payload: Annotated[Valid, Depends(validated_input(*REPLACE_CHECKS))],
    db: DatabaseSession,
) -> ProductResponse:
    """Overwrite name, price and availability of a product."""
    repository = ProductRepository(db)
    product = await _get_product_or_404(repository, payload.product_id)
    product = await repository.replace(
        product,
        name=as_text(payload.body["name"]),
        price=float(as_text(payload.body["price"])),
        availability=to_bool(payload.body["availability"]),
    )
    return _respond(product)


@router.patch(
    "/{id}",
    response_model=ProductResponse,
    summary="Update product availability",
    description="Returns the updated availability",
    responses={400: BAD_REQUEST, 404: NOT_FOUND},
    openapi_extra={
        "parameters": [ID_PARAMETER],
        "requestBody": {**_json_body(AvailabilityBody), "required": False},
    },
)
async def update_availability(
    payload: Annotated[Valid, Depends(validated_input(*ID_CHECKS))],
    db: DatabaseSession,
) -> ProductResponse:
    """Set availability from the body, or toggle it when the body has none."""
    repository = ProductRepository(db)
    product = await _get_product_or_404(repository, payload.product_id)

    requested = payload.body.get("availability")
    availability = to_bool(requested) if is_boolean(requested) else None
    if availability is None:
        logger.debug("No availability in body, toggling product {}", product.id)

    product = await repository.set_availability(product, availability)
    return _respond(product)


@router.delete(
    "/{id}",
    response_model=ProductDeletedResponse,
    summary="Deletes a product by a given ID",
    description="Delete a record from the database",
    responses={400: BAD_REQUEST, 404: NOT_FOUND},
    openapi_extra={"parameters": [ID_PARAMETER]},
)
async def delete_product(
    payload: Annotated[Valid, Depends(validated_input(*ID_CHECKS))],
    db: DatabaseSession,
) -> ProductDeletedResponse:
    """Remove a product."""
    repository = ProductRepository(db)
    product = await _get_product_or_404(repository, payload.product_id)
    await repository.remove(product)
    return ProductDeletedResponse(data=PRODUCT_DELETED_MESSAGE)
