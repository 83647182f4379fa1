from typing import Optional


class ShopError(Exception):
    """Base class for errors surfaced to the storefront UI layer."""


class EmptyCartError(ShopError):
    def __init__(self, message: str = "cart is empty") -> None:
        super().__init__(message)


class ValidationError(ShopError):
    """A shipping form field is missing or malformed."""

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        self.message = message or f"{field} is required"
        super().__init__(self.message)


class TransportError(ShopError):
    """Network or server failure talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CheckoutInProgressError(ShopError):
    def __init__(self, message: str = "checkout already submitting") -> None:
        super().__init__(message)
