"""
Service-level errors raised by the gallery ordering engine.
Each error carries a machine-readable code and an HTTP status for the transport layer.
"""
from typing import Any, List, Optional

from fastapi import status

from product_gallery.constants import NOT_FOUND


class ServiceError(Exception):
    """
    Error raised by service functions.

    Args:
        code: Machine-readable error code (e.g. NOT_FOUND)
        message: Human readable message
        status_code: HTTP status the transport layer should answer with
        details: Optional structured details (per-field errors for validation)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details


class NotFoundError(ServiceError):
    """Raised when an operation references a product image id that does not exist."""

    def __init__(self, message: str = "Product image not found"):
        super().__init__(NOT_FOUND, message, status.HTTP_404_NOT_FOUND)

