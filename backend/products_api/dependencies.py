"""
Products API - Request Dependencies
===================================

What:  Per-route pipeline stages injected with FastAPI's Depends().
How:   FastAPI runs route-level dependencies before it reads the body
       dependency, so on mutating routes the order is:
           require_api_key → validate_product_payload → handler

    get_store / get_settings:   hand out the objects owned by the app
    require_api_key:            shared-secret check (POST, PUT, DELETE)
    validate_product_payload:   body rules for products (POST, PUT)
"""

import hmac
import math
from typing import Any, Optional

from fastapi import Body, Request
from pydantic import ValidationError as SchemaValidationError

from products_api.config import Settings
from products_api.exceptions import UnauthorizedError, ValidationError
from products_api.schemas.product import ProductCreate
from products_api.services.product_store import ProductStore

REQUIRED_FIELDS = ("name", "price", "category")


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_api_key(request: Request) -> None:
    """
    Reject the request unless it carries the configured shared secret.

    The header name comes from settings (default X-API-Key). An unset
    secret never matches, so writes stay closed until API_KEY is configured.

    Raises:
        UnauthorizedError: header missing, wrong, or no secret configured
    """
    settings = get_settings(request)
    supplied = request.headers.get(settings.api_key_header)

    if not supplied or not settings.api_key or not hmac.compare_digest(
        supplied.encode("utf-8"), settings.api_key.encode("utf-8")
    ):
        raise UnauthorizedError(
            context={
                "method": request.method,
                "path": request.url.path,
                "header_present": supplied is not None,
            }
        )


def check_product_payload(payload: Any) -> None:
    """
    Apply the product body rules.

    Raises:
        ValidationError: body is not an object, a required field is missing
            or falsy, or price is not a positive number
    """
    if not isinstance(payload, dict) or any(not payload.get(f) for f in REQUIRED_FIELDS):
        raise ValidationError(
            "Name, price, and category are required",
            context={"required": list(REQUIRED_FIELDS)},
        )

    if not _is_positive_number(payload["price"]):
        raise ValidationError("Price must be a positive number", field="price")


def _is_positive_number(value: Any) -> bool:
    # bool is an int subclass but `true` is not a price
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # The JSON parser yields NaN/Infinity for NaN, Infinity and 1e400
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        return False


async def validate_product_payload(
    payload: Optional[Any] = Body(default=None),
) -> ProductCreate:
    """
    Validate a product body and load it into ProductCreate.

    Type errors the rule check does not cover (for example a numeric name
    or a string inStock) are reported with the offending field.
    """
    check_product_payload(payload)

    try:
        return ProductCreate.model_validate(payload)
    except SchemaValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ValidationError(
            f"Invalid value for '{field}': {first['msg']}",
            field=field,
        ) from e
