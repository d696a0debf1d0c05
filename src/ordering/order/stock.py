"""Bridges between ordering aggregates and the inventory reservation engine."""

import structlog

from inventory.stock.reservation import InventoryReservationEngine, StockRelease, StockRequest
from ordering.cart.cart import Cart
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def reservation_requests(cart: Cart) -> list[StockRequest]:
    return [
        StockRequest(product_id=line.product_id, quantity=line.quantity, size=line.size, color=line.color)
        for line in cart.items
    ]


def release_order_stock(engine: InventoryReservationEngine, order: Order) -> None:
    """Give back exactly the quantities on the order's snapshot lines."""
    engine.release([StockRelease(product_id=pid, quantity=qty) for pid, qty in order.stock_lines()])
    logger.info("order_stock_released", order_id=order.id, order_number=order.order_number)
