"""Product persistence, including the atomic stock primitives."""

from pymongo import ReturnDocument

from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.database import PRODUCTS, get_database
from shared.errors import NotFoundError
from shared.model import from_document, to_document


@catalogue.repository(part_of=Product)
class ProductRepository:
    """Product documents in MongoDB.

    Stock only moves through ``decrement_stock_if_available`` and
    ``increment_stock``, which are single conditional updates on the store.
    """

    @property
    def collection(self):
        return get_database()[PRODUCTS]

    def add(self, product: Product) -> Product:
        self.collection.insert_one(to_document(product))
        return product

    def save(self, product: Product) -> Product:
        """Persist catalogue fields. Stock is left to the atomic primitives below."""
        document = to_document(product)
        document.pop("_id")
        document.pop("stock")
        self.collection.update_one({"_id": product.id}, {"$set": document})
        return product

    def find(self, product_id: str) -> Product | None:
        document = self.collection.find_one({"_id": str(product_id)})
        return from_document(Product, document) if document else None

    def get(self, product_id: str) -> Product:
        product = self.find(product_id)
        if product is None:
            raise NotFoundError("Product", str(product_id))
        return product

    def find_many(self, product_ids) -> dict[str, Product]:
        ids = list({str(pid) for pid in product_ids})
        return {doc["_id"]: from_document(Product, doc) for doc in self.collection.find({"_id": {"$in": ids}})}

    def decrement_stock_if_available(self, product_id: str, quantity: int) -> bool:
        """Atomically take ``quantity`` units, only if at least that many remain."""
        document = self.collection.find_one_and_update(
            {"_id": str(product_id), "stock": {"$gte": quantity}},
            {"$inc": {"stock": -quantity}},
            return_document=ReturnDocument.AFTER,
        )
        return document is not None

    def increment_stock(self, product_id: str, quantity: int) -> bool:
        """Atomically give back ``quantity`` units. Returns False if the product is gone."""
        result = self.collection.update_one({"_id": str(product_id)}, {"$inc": {"stock": quantity}})
        return result.matched_count == 1

    def stock_of(self, product_id: str) -> int | None:
        document = self.collection.find_one({"_id": str(product_id)}, {"stock": 1})
        return document["stock"] if document else None
