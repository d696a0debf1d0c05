"""Pydantic request/response schemas for the Catalogue API."""

from datetime import datetime

from pydantic import ConfigDict, Field

from catalogue.product.product import Category, Gender
from shared.schemas import ApiModel


class CreateProductRequest(ApiModel):
    name: str = Field(min_length=1)
    description: str = ""
    brand: str = ""
    category: Category
    gender: Gender
    price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0, le=90)
    stock: int = Field(ge=0)
    sizes: list[str] = []
    colors: list[str] = []
    images: list[str] = []
    is_active: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Linen Shirt",
                    "category": "Apparel",
                    "gender": "Unisex",
                    "price": 1200,
                    "discount": 10,
                    "stock": 25,
                    "sizes": ["S", "M", "L"],
                    "colors": ["White"],
                    "images": ["https://cdn.example.com/linen.jpg"],
                }
            ]
        }
    )


class UpdateProductRequest(ApiModel):
    """Allow-listed product fields. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str | None = None
    brand: str | None = None
    category: Category | None = None
    gender: Gender | None = None
    price: float | None = None
    discount: float | None = None
    sizes: list[str] | None = None
    colors: list[str] | None = None
    images: list[str] | None = None
    is_active: bool | None = None


class ProductSchema(ApiModel):
    id: str
    name: str
    description: str
    brand: str
    category: str
    gender: str
    price: float
    discount: float
    unit_price: float
    stock: int
    sizes: list[str]
    colors: list[str]
    images: list[str]
    author: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductResponse(ApiModel):
    success: bool = True
    message: str
    data: ProductSchema
