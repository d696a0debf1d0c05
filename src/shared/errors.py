"""Exception taxonomy shared by every Storefront context.

Every error is a Protean exception, so the framework's FastAPI handlers and
``pytest.raises(protean.exceptions.ValidationError)`` treat them like any
other domain failure. Each one also carries a stable machine-readable
``kind`` and a human-readable message. ``messages`` follows Protean's
field -> [messages] shape so API clients can highlight offending fields.
"""

from enum import Enum

from protean.exceptions import (
    InvalidOperationError,
    InvalidStateError,
    ObjectNotFoundError,
    ProteanException,
    SendError,
)
from protean.exceptions import ValidationError as DomainValidationError


class StorefrontError(ProteanException):
    """Base exception for all Storefront errors."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, messages: dict | None = None):
        super().__init__(message)
        # Assigned after the Protean initialisers, which set ``messages`` themselves
        self.message = message
        self.messages = messages or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {
            "success": False,
            "kind": self.kind,
            "message": self.message,
            "errors": self.messages,
        }


class ValidationError(StorefrontError, DomainValidationError):
    """Missing or malformed input."""

    kind = "ValidationError"
    status_code = 400


class EmptyCartError(ValidationError):
    kind = "EmptyCart"


class InvalidStatusError(ValidationError):
    kind = "InvalidStatus"


class NotFoundError(StorefrontError, ObjectNotFoundError):
    kind = "NotFound"
    status_code = 404

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found", {"id": [f"{entity} {identifier} does not exist"]})


class StockFailure(Enum):
    NOT_FOUND = "NotFound"
    INACTIVE = "Inactive"
    SIZE_REQUIRED = "SizeRequired"
    INVALID_SIZE = "InvalidSize"
    INVALID_COLOR = "InvalidColor"
    INSUFFICIENT_STOCK = "InsufficientStock"


class StockError(StorefrontError):
    """A product cannot back the requested quantity, size or color."""

    def __init__(self, reason: StockFailure, product_id: str, message: str):
        self.reason = reason
        self.product_id = product_id
        super().__init__(message, {"product_id": [product_id]})

    @property
    def kind(self) -> str:
        return self.reason.value

    @property
    def status_code(self) -> int:
        return 404 if self.reason == StockFailure.NOT_FOUND else 400


class InvalidTransition(StorefrontError, InvalidStateError):
    """The order's current status does not allow the requested change."""

    kind = "InvalidTransition"
    status_code = 400


class ForbiddenError(StorefrontError, InvalidOperationError):
    """The operation is blocked by business policy."""

    kind = "Forbidden"
    status_code = 400


class AuthenticationError(StorefrontError):
    kind = "Unauthenticated"
    status_code = 401


class PermissionDeniedError(StorefrontError):
    kind = "PermissionDenied"
    status_code = 403


class InternalError(StorefrontError):
    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str = "Internal server error", debug: str | None = None):
        self.debug = debug
        super().__init__(message)


class NotificationError(StorefrontError, SendError):
    """An email channel reported a failed delivery."""

    kind = "NotificationFailed"
