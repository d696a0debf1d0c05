"""Product publishing and editing: commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Dict, Float, Identifier, Integer, List, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Category, Gender, Product, ProductUpdate
from identity.account.account import User
from identity.domain import identity
from shared.errors import NotFoundError, PermissionDeniedError

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class CreateProduct:
    author_id: Identifier(required=True)
    name: String(required=True, max_length=200, sanitize=False)
    description: Text(default="", sanitize=False)
    brand: String(default="", max_length=100, sanitize=False)
    category: String(choices=Category, required=True)
    gender: String(choices=Gender, required=True)
    price: Float(required=True, min_value=0)
    discount: Float(default=0.0, min_value=0, max_value=90)
    stock: Integer(required=True, min_value=0)
    sizes: List(content_type=String(max_length=10))
    colors: List(content_type=String(max_length=50, sanitize=False))
    images: List(content_type=String(max_length=500, sanitize=False))
    is_active: Boolean(default=True)


@catalogue.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    changes: Dict()


@catalogue.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        data = dict(command.payload)
        author = data.pop("author_id")
        product = Product.create(**data, author=author)
        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=product.id, author=author)
        return product

    @handle(UpdateProduct)
    def update_product(self, command):
        actor = identity.repository_for(User).find(command.actor_id)
        if actor is None:
            raise NotFoundError("User", command.actor_id)

        products = current_domain.repository_for(Product)
        product = products.get(command.product_id)
        if not actor.is_admin and product.author != actor.id:
            raise PermissionDeniedError("Only the owning partner or an admin may edit this product")

        changes = ProductUpdate(**command.changes).changes()
        product.apply_update(changes)
        products.save(product)
        logger.info("product_updated", product_id=product.id, actor=actor.id, fields=sorted(changes))
        return product
