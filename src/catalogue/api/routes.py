"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    CreateProductRequest,
    ProductResponse,
    ProductSchema,
    UpdateProductRequest,
)
from catalogue.product.management import CreateProduct, UpdateProduct
from catalogue.product.product import Product
from identity.account.account import User
from identity.api.dependencies import require_seller

product_router = APIRouter(prefix="/products", tags=["products"])


def _product_schema(product: Product) -> ProductSchema:
    return ProductSchema(**product.to_dict(), unit_price=float(product.unit_price))


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest, user: User = Depends(require_seller)) -> ProductResponse:
    command = CreateProduct(**body.model_dump(mode="json"), author_id=user.id)
    product = current_domain.process(command, asynchronous=False)
    return ProductResponse(message="Product created", data=_product_schema(product))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return ProductResponse(message="Product retrieved", data=_product_schema(product))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, user: User = Depends(require_seller)
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        actor_id=user.id,
        changes=body.model_dump(exclude_unset=True, mode="json"),
    )
    product = current_domain.process(command, asynchronous=False)
    return ProductResponse(message="Product updated", data=_product_schema(product))
