"""User account: the identity every cart, order and product is attributed to.

Registration and credentials live upstream; this record only carries what the
storefront needs to authorise a caller: who they are and which role they hold.
"""

from enum import Enum

from protean.fields import DateTime, String

from identity.domain import identity
from shared.model import utcnow


class Role(Enum):
    CUSTOMER = "Customer"
    PARTNER = "Partner"
    ADMIN = "Admin"


@identity.aggregate
class User:
    email: String(required=True, min_length=3, max_length=254)
    name: String(default="", max_length=200, sanitize=False)
    role: String(choices=Role, default=Role.CUSTOMER.value)
    created_at: DateTime()

    @classmethod
    def register(cls, email, name="", role=Role.CUSTOMER):
        return cls(email=email.strip().lower(), name=name, role=Role(role).value, created_at=utcnow())

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_partner(self) -> bool:
        return self.role == Role.PARTNER.value
