"""Product request and response schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProductRead(BaseModel):
    """JSON representation of a product."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="The product ID", examples=[1])
    name: str = Field(
        ..., description="The product name", examples=["Monitor Curvo de 49 Pulgadas"]
    )
    price: float = Field(..., description="The product price", examples=[300])
    availability: bool = Field(
        ..., description="The product availability", examples=[True]
    )
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )


class ProductResponse(BaseModel):
    """Envelope for a single product."""

    data: ProductRead


class ProductListResponse(BaseModel):
    """Envelope for every product."""

    data: list[ProductRead]


class ProductDeletedResponse(BaseModel):
    """Confirmation of a deletion."""

    data: str = Field(..., examples=["Producto Eliminado."])


class ProductBody(BaseModel):
    """Documented body of a create request."""

    name: str = Field(..., examples=["Monitor Curvo 49 Pulgadas"])
    price: float = Field(..., examples=[300])


class ProductReplaceBody(ProductBody):
    """Documented body of a replace request."""

    availability: bool = Field(..., examples=[True])


class AvailabilityBody(BaseModel):
    """Documented body of an availability update."""

    availability: bool = Field(..., examples=[False])
