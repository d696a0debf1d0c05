"""FastAPI routes for the Ordering domain: carts and orders."""

from fastapi import APIRouter, Body, Depends, Query
from protean.utils.globals import current_domain

from identity.account.account import User
from identity.api.dependencies import current_user, require_admin
from ordering.api.schemas import (
    AddToCartRequest,
    AdminOrderListResponse,
    CancelOrderRequest,
    CartResponse,
    CartSchema,
    CreateOrderRequest,
    DeleteOrderRequest,
    OrderListResponse,
    OrderResponse,
    OrderSchema,
    PaginationSchema,
    RemoveFromCartRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
)
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartItem
from ordering.cart.management import ClearCart, get_cart as load_cart
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.deletion import DeleteOrder
from ordering.order.order import Order
from ordering.order.queries import OrderListQuery, OrderQueries
from ordering.order.status import UpdateOrderStatus
from shared.schemas import StatusResponse


def _cart_schema(cart: Cart) -> CartSchema:
    return CartSchema(**cart.to_dict())


def _order_schema(order: Order) -> OrderSchema:
    return OrderSchema(**order.to_dict())


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(user: User = Depends(current_user)) -> CartResponse:
    cart = load_cart(user.id)
    return CartResponse(message="Cart retrieved", data=_cart_schema(cart))


@cart_router.post("/add", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, user: User = Depends(current_user)) -> CartResponse:
    command = AddToCart(
        user_id=user.id,
        product_id=body.product_id,
        quantity=body.quantity,
        size=body.size,
        color=body.color,
    )
    cart = current_domain.process(command, asynchronous=False)
    return CartResponse(message="Item added to cart", data=_cart_schema(cart))


@cart_router.put("/update", response_model=CartResponse)
async def update_cart_item(body: UpdateCartItemRequest, user: User = Depends(current_user)) -> CartResponse:
    command = UpdateCartItem(user_id=user.id, item_id=body.item_id, quantity=body.quantity)
    cart = current_domain.process(command, asynchronous=False)
    return CartResponse(message="Cart updated", data=_cart_schema(cart))


@cart_router.delete("/remove", response_model=CartResponse)
async def remove_from_cart(body: RemoveFromCartRequest, user: User = Depends(current_user)) -> CartResponse:
    command = RemoveFromCart(user_id=user.id, product_id=body.product_id, size=body.size, color=body.color)
    cart = current_domain.process(command, asynchronous=False)
    return CartResponse(message="Item removed from cart", data=_cart_schema(cart))


@cart_router.delete("/clear", response_model=CartResponse)
async def clear_cart(user: User = Depends(current_user)) -> CartResponse:
    cart = current_domain.process(ClearCart(user_id=user.id), asynchronous=False)
    return CartResponse(message="Cart cleared", data=_cart_schema(cart))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/create", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, user: User = Depends(current_user)) -> OrderResponse:
    command = PlaceOrder(
        user_id=user.id,
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method.value,
        notes=body.order_notes,
    )
    order = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order placed successfully", data=_order_schema(order))


@order_router.get("", response_model=OrderListResponse)
async def list_orders(user: User = Depends(current_user)) -> OrderListResponse:
    orders = OrderQueries().list_orders(user.id)
    return OrderListResponse(message="Orders retrieved", data=[_order_schema(o) for o in orders])


# Admin routes are declared before /{order_id} so "admin" is never read as an id.
@order_router.get("/admin/all", response_model=AdminOrderListResponse)
async def admin_list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status: str | None = None,
    search: str | None = None,
    sort_by: str = Query(default="created_at", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder", pattern="^(asc|desc)$"),
    _: User = Depends(require_admin),
) -> AdminOrderListResponse:
    query = OrderListQuery(
        page=page, limit=limit, status=status, search=search, sort_by=sort_by, sort_order=sort_order
    )
    orders, pagination = OrderQueries().admin_list_orders(query)
    return AdminOrderListResponse(
        message="Orders retrieved",
        data=[_order_schema(o) for o in orders],
        pagination=PaginationSchema(**pagination),
    )


@order_router.get("/admin/{order_id}", response_model=OrderResponse)
async def admin_get_order(order_id: str, _: User = Depends(require_admin)) -> OrderResponse:
    order = OrderQueries().admin_get_order(order_id)
    return OrderResponse(message="Order retrieved", data=_order_schema(order))


@order_router.put("/admin/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, _: User = Depends(require_admin)
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
        tracking_number=body.tracking_number,
    )
    order = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order status updated", data=_order_schema(order))


@order_router.delete("/admin/{order_id}")
async def delete_order(
    order_id: str,
    body: DeleteOrderRequest | None = Body(default=None),
    _: User = Depends(require_admin),
):
    hard_delete = body.hard_delete if body else False
    order = current_domain.process(DeleteOrder(order_id=order_id, hard_delete=hard_delete), asynchronous=False)
    if order is None:
        return StatusResponse(message="Order permanently deleted")
    return OrderResponse(message="Order cancelled and marked as deleted", data=_order_schema(order))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: User = Depends(current_user)) -> OrderResponse:
    order = OrderQueries().get_order(order_id, user.id)
    return OrderResponse(message="Order retrieved", data=_order_schema(order))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str, body: CancelOrderRequest | None = Body(default=None), user: User = Depends(current_user)
) -> OrderResponse:
    command = CancelOrder(order_id=order_id, user_id=user.id, reason=body.reason if body else None)
    order = current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order cancelled successfully", data=_order_schema(order))
