"""Inventory reservation engine: backs orders with catalogue stock.

Reservation is two-phase:

1. ``validate`` reads every product in the batch and checks existence,
   availability, size/color and stock. Nothing is written. Quantities for
   the same product on several lines are summed before the stock check.
2. ``apply`` takes the stock with one conditional atomic decrement per line
   (``stock >= quantity``). A decrement that loses a race against another
   reservation fails; every decrement already taken for the batch is then
   given back and the whole batch fails.

``release`` is the inverse of ``apply`` and is invoked at most once per
order by the order lifecycle, which gates it on a status compare-and-set.
"""

from collections import defaultdict

import structlog
from pydantic import BaseModel, Field

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.product.repository import ProductRepository
from shared.errors import StockError, StockFailure
from shared.money import as_number

logger = structlog.get_logger(__name__)


class StockRequest(BaseModel):
    """One requested line: how many units of which product, in which size/color."""

    product_id: str
    quantity: int = Field(ge=1)
    size: str | None = None
    color: str | None = None


class ReservedLine(BaseModel):
    """A validated line with product data snapshotted at reservation time."""

    product_id: str
    name: str
    quantity: int
    size: str | None = None
    color: str | None = None
    unit_price: float
    image: str | None = None


class StockRelease(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class InventoryReservationEngine:
    def __init__(self, products: ProductRepository | None = None):
        self.products = products or catalogue.repository_for(Product)

    # -------------------------------------------------------------------
    # Phase 1: validate everything, write nothing
    # -------------------------------------------------------------------
    def validate(self, requests: list[StockRequest]) -> list[ReservedLine]:
        found = self.products.find_many(request.product_id for request in requests)
        wanted: dict[str, int] = defaultdict(int)
        reserved = []

        for request in requests:
            product = found.get(request.product_id)
            self._check_line(request, product)
            wanted[product.id] += request.quantity
            if wanted[product.id] > product.stock:
                raise StockError(
                    StockFailure.INSUFFICIENT_STOCK,
                    product.id,
                    f"Insufficient stock for {product.name}. Only {product.stock} available",
                )

            reserved.append(
                ReservedLine(
                    product_id=product.id,
                    name=product.name,
                    quantity=request.quantity,
                    size=request.size,
                    color=request.color,
                    unit_price=as_number(product.unit_price),
                    image=product.primary_image,
                )
            )

        return reserved

    def _check_line(self, request: StockRequest, product: Product | None):
        if product is None:
            raise StockError(StockFailure.NOT_FOUND, request.product_id, f"Product {request.product_id} not found")
        if not product.is_active:
            raise StockError(StockFailure.INACTIVE, product.id, f"Product {product.name} is not available")
        if product.sizes and not request.size:
            raise StockError(StockFailure.SIZE_REQUIRED, product.id, f"Size is required for {product.name}")
        if request.size and request.size not in product.sizes:
            raise StockError(StockFailure.INVALID_SIZE, product.id, f"Size {request.size} is not available")
        if request.color and request.color not in product.colors:
            raise StockError(StockFailure.INVALID_COLOR, product.id, f"Color {request.color} is not available")

    # -------------------------------------------------------------------
    # Phase 2: take the stock, all or nothing
    # -------------------------------------------------------------------
    def apply(self, lines: list[ReservedLine]) -> None:
        taken: list[ReservedLine] = []
        for line in lines:
            if not self.products.decrement_stock_if_available(line.product_id, line.quantity):
                logger.warning(
                    "stock_reservation_lost_race",
                    product_id=line.product_id,
                    quantity=line.quantity,
                    compensated_lines=len(taken),
                )
                self.release([StockRelease(product_id=t.product_id, quantity=t.quantity) for t in taken])
                raise StockError(
                    StockFailure.INSUFFICIENT_STOCK,
                    line.product_id,
                    f"Insufficient stock for {line.name}",
                )
            taken.append(line)

    def reserve(self, requests: list[StockRequest]) -> list[ReservedLine]:
        """Validate the whole batch, then take its stock."""
        lines = self.validate(requests)
        self.apply(lines)
        logger.info(
            "stock_reserved",
            lines=len(lines),
            units=sum(line.quantity for line in lines),
        )
        return lines

    def release(self, lines: list[StockRelease]) -> None:
        """Give stock back, one atomic increment per line."""
        for line in lines:
            if not self.products.increment_stock(line.product_id, line.quantity):
                logger.warning("stock_release_product_missing", product_id=line.product_id, quantity=line.quantity)
        if lines:
            logger.info("stock_released", lines=len(lines), units=sum(line.quantity for line in lines))
