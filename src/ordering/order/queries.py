"""Read side for orders: customer history and the admin listing."""

from math import ceil

from pydantic import BaseModel, Field

from ordering.domain import ordering
from ordering.order.order import Order, parse_status


class OrderListQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    status: str | None = None
    search: str | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"


class OrderQueries:
    def __init__(self):
        self.orders = ordering.repository_for(Order)

    def list_orders(self, user_id) -> list[Order]:
        """The user's orders, newest first."""
        return self.orders.list_for_user(user_id)

    def get_order(self, order_id, user_id) -> Order:
        return self.orders.get_for_user(order_id, user_id)

    def admin_get_order(self, order_id) -> Order:
        return self.orders.get(order_id)

    def admin_list_orders(self, query: OrderListQuery) -> tuple[list[Order], dict]:
        status = parse_status(query.status).value if query.status else None
        orders, total = self.orders.search(
            page=query.page,
            limit=query.limit,
            status=status,
            search=query.search,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
        )
        pages = ceil(total / query.limit) if total else 0
        pagination = {
            "current_page": query.page,
            "total_pages": pages,
            "total_orders": total,
            "has_next_page": query.page < pages,
            "has_prev_page": query.page > 1,
        }
        return orders, pagination
