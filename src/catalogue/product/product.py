"""Product aggregate: the catalogue record that backs carts and orders.

Sizes are constrained per category. A product may only offer sizes from its
category's allowed table, and the rule is re-checked after every mutation.
Stock is never edited here; it moves only through the inventory
reservation engine's atomic primitives.
"""

from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, List, String, Text
from protean.utils.reflection import declared_fields
from pydantic import BaseModel, ConfigDict

from catalogue.domain import catalogue
from shared.model import utcnow
from shared.money import discounted_price


class Category(Enum):
    APPAREL = "Apparel"
    ELECTRONICS = "Electronics"
    FOOTWEAR = "Footwear"
    ACCESSORIES = "Accessories"


class Gender(Enum):
    MALE = "Male"
    FEMALE = "Female"
    UNISEX = "Unisex"


CATEGORY_SIZES: dict[str, tuple[str, ...]] = {
    Category.APPAREL.value: ("XS", "S", "M", "L", "XL", "XXL"),
    Category.FOOTWEAR.value: ("6", "7", "8", "9", "10", "11", "12"),
    Category.ACCESSORIES.value: ("S", "M", "L"),
    Category.ELECTRONICS.value: (),
}


@catalogue.aggregate
class Product:
    """Product aggregate root."""

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
    author: Identifier(required=True)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def sizes_must_belong_to_category(self):
        allowed = CATEGORY_SIZES.get(self.category, ())
        invalid = [size for size in self.sizes if size not in allowed]
        if invalid:
            raise ValidationError({"sizes": [f"Invalid size(s) {', '.join(invalid)} for category {self.category}"]})

    @classmethod
    def create(cls, **data):
        now = utcnow()
        return cls(**data, created_at=now, updated_at=now)

    @property
    def unit_price(self):
        """Selling price after discount, as a ``Decimal``."""
        return discounted_price(self.price, self.discount)

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None

    def apply_update(self, changes: dict):
        """Apply allow-listed field changes, validating the result as a whole."""
        if not changes:
            return
        candidate = {name: getattr(self, name) for name in declared_fields(self)}
        candidate.update(changes)
        type(self)(**candidate)

        with atomic_change(self):
            for name, value in changes.items():
                setattr(self, name, value)
            self.updated_at = utcnow()


class ProductUpdate(BaseModel):
    """The only product fields a client may change. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str | None = None
    brand: str | None = None
    category: Category | None = None
    gender: Gender | None = None
    price: float | None = None
    discount: float | None = None
    sizes: list[str] | None = None
    colors: list[str] | None = None
    images: list[str] | None = None
    is_active: bool | None = None

    def changes(self) -> dict:
        """Explicitly set fields, with enums reduced to their stored values."""
        return self.model_dump(exclude_unset=True, mode="json")
