# storefront/domain/errors.py
"""
Domain errors raised by the services.

Routers translate them to HTTP responses (see storefront.api.errors);
services never build HTTP errors themselves.
"""


class StorefrontError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError, LookupError):
    """The entity does not exist at all."""


class ForbiddenError(StorefrontError, PermissionError):
    """The entity exists but belongs to somebody else."""


class OutOfStockError(StorefrontError, ValueError):
    pass


class InsufficientStockError(StorefrontError, ValueError):
    def __init__(self, message: str, available: int):
        super().__init__(message)
        self.available = available


class EmptyCartError(StorefrontError, ValueError):
    pass


class CartInvalidError(StorefrontError, ValueError):
    def __init__(self, issues: list[dict]):
        super().__init__("Some items in your cart are unavailable")
        self.issues = issues


class PaymentMethodUnavailableError(StorefrontError, ValueError):
    def __init__(self, method: str):
        super().__init__(
            f"{method.upper()} is coming soon! Only Cash on Delivery is available now."
        )
        self.method = method


class InvalidTransitionError(StorefrontError, ValueError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested


class CannotCancelError(StorefrontError, ValueError):
    pass


class CartConflictError(StorefrontError, RuntimeError):
    """A concurrent write to the same cart line won; the add is retried."""


class CheckoutConflictError(StorefrontError, RuntimeError):
    """The order could not get a unique order number; the client may retry."""
