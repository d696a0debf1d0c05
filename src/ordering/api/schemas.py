"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the internal commands: field
names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from ordering.order.order import PaymentMethod
from shared.schemas import ApiModel


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(ApiModel):
    full_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: str = Field(min_length=3)
    address_line1: str = Field(min_length=1)
    address_line2: str | None = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    pincode: str = Field(min_length=1)
    country: str = "India"


class CartLineSchema(ApiModel):
    id: str
    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None
    price: float


class OrderLineSchema(ApiModel):
    product_id: str
    name: str
    quantity: int
    size: str | None = None
    color: str | None = None
    price: float
    image: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(ApiModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)
    size: str | None = None
    color: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"productId": "prod-001", "quantity": 2, "size": "M", "color": "Blue"}]
        }
    )


class UpdateCartItemRequest(ApiModel):
    item_id: str
    quantity: int


class RemoveFromCartRequest(ApiModel):
    product_id: str
    size: str | None = None
    color: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(ApiModel):
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethod
    order_notes: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "shippingAddress": {
                        "fullName": "Asha Rao",
                        "phone": "9876543210",
                        "email": "asha@example.com",
                        "addressLine1": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                    },
                    "paymentMethod": "COD",
                    "orderNotes": "Leave at the door",
                }
            ]
        }
    )


class CancelOrderRequest(ApiModel):
    reason: str | None = None


class UpdateOrderStatusRequest(ApiModel):
    status: str | None = None
    notes: str | None = None
    tracking_number: str | None = None


class DeleteOrderRequest(ApiModel):
    hard_delete: bool = False


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartSchema(ApiModel):
    id: str
    user_id: str
    items: list[CartLineSchema]
    total_items: int
    total_price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CartResponse(ApiModel):
    success: bool = True
    message: str
    data: CartSchema


class OrderSchema(ApiModel):
    id: str
    order_number: str
    user_id: str
    items: list[OrderLineSchema]
    shipping_address: ShippingAddressSchema
    payment_method: str
    payment_status: str
    order_status: str
    subtotal: float
    tax: float
    shipping_charge: float
    total_amount: float
    tracking_number: str | None = None
    order_notes: str | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderResponse(ApiModel):
    success: bool = True
    message: str
    data: OrderSchema


class OrderListResponse(ApiModel):
    success: bool = True
    message: str
    data: list[OrderSchema]


class PaginationSchema(ApiModel):
    current_page: int
    total_pages: int
    total_orders: int
    has_next_page: bool
    has_prev_page: bool


class AdminOrderListResponse(ApiModel):
    success: bool = True
    message: str
    data: list[OrderSchema]
    pagination: PaginationSchema
