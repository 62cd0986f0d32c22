"""Failures surfaced at the request boundary as a status code and a message."""
from typing import Optional


class MarketplaceError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class DuplicateAccount(MarketplaceError):
    status_code = 400
    message = "User already exists"


class AccountNotFound(MarketplaceError):
    status_code = 404
    message = "User not found"


class InvalidCredential(MarketplaceError):
    status_code = 401
    message = "Invalid password"


class InvalidToken(MarketplaceError):
    # Same message for bad signature, malformed payload and expiry.
    status_code = 401
    message = "Invalid token"


class AccessDenied(MarketplaceError):
    status_code = 403
    message = "Access denied"


class NotFoundOrNotOwned(MarketplaceError):
    status_code = 404
    message = "Product not found or not yours"


class NotFoundInCart(MarketplaceError):
    status_code = 404
    message = "Item not found in cart"


class ProductNotFound(MarketplaceError):
    status_code = 404
    message = "Product not found"


class InvalidIdentifier(MarketplaceError):
    status_code = 400
    message = "Invalid product id"
