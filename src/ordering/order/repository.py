"""Order persistence.

Writes that change an order's status are compare-and-set on the status the
caller read, so two concurrent transitions of the same order cannot both win.
"""

import re

from pymongo import ASCENDING, DESCENDING
from ordering.domain import ordering
from ordering.order.order import Order
from shared.database import ORDERS, get_database
from shared.errors import InvalidTransition, NotFoundError
from shared.model import from_document, to_document

SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "totalAmount": "total_amount",
    "total_amount": "total_amount",
    "orderNumber": "order_number",
    "order_number": "order_number",
    "orderStatus": "order_status",
    "order_status": "order_status",
}


@ordering.repository(part_of=Order)
class OrderRepository:
    @property
    def collection(self):
        return get_database()[ORDERS]

    def add(self, order: Order) -> Order:
        self.collection.insert_one(to_document(order))
        return order

    def find(self, order_id) -> Order | None:
        document = self.collection.find_one({"_id": str(order_id)})
        return from_document(Order, document) if document else None

    def get(self, order_id) -> Order:
        order = self.find(order_id)
        if order is None:
            raise NotFoundError("Order", str(order_id))
        return order

    def get_for_user(self, order_id, user_id) -> Order:
        document = self.collection.find_one({"_id": str(order_id), "user_id": str(user_id)})
        if document is None:
            raise NotFoundError("Order", str(order_id))
        return from_document(Order, document)

    def list_for_user(self, user_id) -> list[Order]:
        cursor = self.collection.find({"user_id": str(user_id)}).sort("created_at", DESCENDING)
        return [from_document(Order, document) for document in cursor]

    def save_transition(self, order: Order, expected_status: str) -> None:
        """Persist ``order`` only if the stored status is still ``expected_status``."""
        result = self.collection.replace_one(
            {"_id": order.id, "order_status": expected_status},
            to_document(order),
        )
        if result.matched_count != 1:
            raise InvalidTransition(
                "Order was modified concurrently; reload and retry",
                {"status": [f"Order is no longer {expected_status}"]},
            )

    def delete_transition(self, order: Order) -> None:
        """Remove ``order`` only if its stored status is still the one that was read."""
        result = self.collection.delete_one({"_id": order.id, "order_status": order.order_status})
        if result.deleted_count != 1:
            raise InvalidTransition(
                "Order was modified concurrently; reload and retry",
                {"status": [f"Order is no longer {order.order_status}"]},
            )

    def search(
        self,
        page: int = 1,
        limit: int = 20,
        status: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> tuple[list[Order], int]:
        """Filter, sort and paginate orders. Returns (page of orders, total matching)."""
        query: dict = {}
        if status:
            query["order_status"] = status
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [
                {"order_number": pattern},
                {"shipping_address.full_name": pattern},
                {"shipping_address.email": pattern},
            ]

        sort_field = SORTABLE_FIELDS.get(sort_by, "created_at")
        direction = DESCENDING if sort_order == "desc" else ASCENDING

        total = self.collection.count_documents(query)
        cursor = self.collection.find(query).sort(sort_field, direction).skip((page - 1) * limit).limit(limit)
        return [from_document(Order, document) for document in cursor], total
