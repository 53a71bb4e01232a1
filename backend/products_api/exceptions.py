"""
Products API - Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for the failures a request can hit.
How:   Each exception carries a message, an optional context dict and the
       HTTP status it maps to. Global handlers registered in main.py turn
       them into JSON responses.
Who:   Raised by the store and the request dependencies.

Exception Hierarchy:
    ProductsAPIError (base)   → 500 Internal Server Error
    ├── ValidationError       → 400 Bad Request
    ├── NotFoundError         → 404 Not Found (record or route)
    └── UnauthorizedError     → 401 Unauthorized (own response shape)
"""

from typing import Any, Dict, Optional


class ProductsAPIError(Exception):
    """
    Base exception for all Products API errors.

    Attributes:
        message:     User-facing error description (returned in the envelope)
        context:     Additional debug info (logged, never returned)
        status_code: HTTP status used by the error translator
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProductsAPIError):
    """
    Raised when client input fails validation.

    When:    Missing name/price/category, non-positive price, empty search query.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ProductsAPIError):
    """
    Raised when a requested product or endpoint does not exist.

    HTTP:    404 Not Found
    Message: "<Resource> not found", e.g. "Product not found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class UnauthorizedError(ProductsAPIError):
    """
    Raised when a mutating request lacks the shared secret or presents a wrong one.

    HTTP:    401 Unauthorized
    Response: {"message": "Unauthorized"}, not the standard error envelope.
    """

    status_code = 401

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Unauthorized", context=context)
