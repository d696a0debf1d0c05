"""Cart item management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String

from catalogue.domain import catalogue
from catalogue.product.product import Product
from ordering.cart.cart import Cart
from ordering.cart.repository import CartEditor
from ordering.domain import ordering
from shared.errors import StockError, StockFailure, ValidationError
from shared.money import as_number

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)
    size = String(max_length=10)
    color = String(max_length=50, sanitize=False)


@ordering.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(max_length=10)
    color = String(max_length=50, sanitize=False)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = catalogue.repository_for(Product).find(command.product_id)
        if product is None:
            raise StockError(StockFailure.NOT_FOUND, command.product_id, "Product not found")
        self._check_selection(product, command.size, command.color)

        editor = CartEditor(command.user_id)
        existing = editor.cart.find_line(product.id, command.size, command.color)
        new_quantity = command.quantity + (existing.quantity if existing else 0)
        if new_quantity > product.stock:
            raise StockError(
                StockFailure.INSUFFICIENT_STOCK,
                product.id,
                f"Only {product.stock} items available in stock",
            )

        editor.cart.add_item(
            product_id=product.id,
            quantity=command.quantity,
            price=as_number(product.unit_price),
            size=command.size,
            color=command.color,
        )
        cart = editor.commit()
        logger.info("cart_item_added", user_id=command.user_id, product_id=product.id, quantity=command.quantity)
        return cart

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        if command.quantity < 1:
            raise ValidationError("Quantity must be at least 1", {"quantity": ["Quantity must be at least 1"]})

        editor = CartEditor(command.user_id)
        line = editor.cart.get_line(command.item_id)
        product = catalogue.repository_for(Product).find(line.product_id)
        if product is None:
            raise StockError(StockFailure.NOT_FOUND, line.product_id, "Product not found")
        if command.quantity > product.stock:
            raise StockError(
                StockFailure.INSUFFICIENT_STOCK,
                product.id,
                f"Only {product.stock} items available in stock",
            )

        editor.cart.update_item_quantity(command.item_id, command.quantity)
        return editor.commit()

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        editor = CartEditor(command.user_id)
        editor.cart.remove_item(command.product_id, command.size, command.color)
        return editor.commit()

    @staticmethod
    def _check_selection(product: Product, size, color):
        if not product.is_active:
            raise StockError(StockFailure.INACTIVE, product.id, "Product is not available")
        if product.sizes and not size:
            raise StockError(StockFailure.SIZE_REQUIRED, product.id, "Size is required for this product")
        if size and size not in product.sizes:
            raise StockError(StockFailure.INVALID_SIZE, product.id, f"Size {size} is not available")
        if color and color not in product.colors:
            raise StockError(StockFailure.INVALID_COLOR, product.id, f"Color {color} is not available")
