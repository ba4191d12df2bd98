"""
Domain exceptions for the customer image service.

Each error carries the HTTP status it maps to and the message shown to the
caller. Client errors (400/404) expose their message as-is since the caller
caused them; server errors (500) show a generic message. Errors are logged
where they are handled, not where they are built.
"""
from fastapi import status

GENERIC_SERVER_MESSAGE = "An internal error occurred. Please try again later."


class CustomerImageError(Exception):
    """Base class for every error raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class ValidationError(CustomerImageError):
    """Malformed or quota-violating input. Never retried."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CustomerImageError):
    """Referenced customer or image does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    @classmethod
    def customer(cls) -> "NotFoundError":
        return cls("Customer not found.")

    @classmethod
    def image(cls) -> "NotFoundError":
        return cls("Image not found.")


class DecodeError(CustomerImageError):
    """
    Stored text could not be decoded back to bytes.

    Only the single-item accessor decodes, so a corrupted row fails that one
    request and never a list response.
    """

    @property
    def public_message(self) -> str:
        return GENERIC_SERVER_MESSAGE


class StoreError(CustomerImageError):
    """Transaction or connection failure. Not retried by the service."""

    @property
    def public_message(self) -> str:
        return GENERIC_SERVER_MESSAGE
