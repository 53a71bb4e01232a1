"""
Products API - Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the API contract for product records.
How:   FastAPI uses these models to serialize responses and to document the
       endpoints in OpenAPI. Request bodies are checked by the product
       validator dependency and then loaded into ProductCreate.

Wire format:
    JSON keys are camelCase where they differ from Python names
    (`inStock` ↔ `in_stock`). Responses are serialized by alias.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Domain Model
# ══════════════════════════════════════════════════════════════════════════


class Product(BaseModel):
    """A single catalogue record as held by the store and returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Unique product identifier (UUID4 string)")
    name: str = Field(description="Product name")
    description: Optional[str] = Field(default=None, description="Free-text description")
    price: float = Field(gt=0, description="Unit price, always positive")
    category: str = Field(description="Grouping key, compared case-insensitively")
    in_stock: bool = Field(default=True, alias="inStock", description="Availability flag")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """
    What:  Validated body of POST /api/products and PUT /api/products/{id}.
    Who:   Produced by the validate_product_payload dependency.

    Unknown keys (including `id`) are dropped. `in_stock` stays None when
    the client omitted `inStock`, so the store can tell omission apart from
    an explicit false.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: StrictStr
    description: Optional[StrictStr] = None
    price: float
    category: StrictStr
    in_stock: Optional[StrictBool] = Field(default=None, alias="inStock")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductListResponse(BaseModel):
    """Page of products plus the number of records matching the filter."""

    total: int = Field(description="Number of products matching the category filter")
    page: int = Field(description="1-based page number that was requested")
    limit: int = Field(description="Page size that was requested")
    products: List[Product] = Field(description="Products on this page, in insertion order")


CategoryStats = Dict[str, int]


class ErrorDetail(BaseModel):
    message: str = Field(description="Human-readable error description")
    status: int = Field(description="HTTP status code")
    timestamp: datetime = Field(description="When the error was produced (UTC)")


class ErrorResponse(BaseModel):
    """
    Standard error envelope returned for every translated failure.

    Example:
        {
            "error": {
                "message": "Product not found",
                "status": 404,
                "timestamp": "2024-01-15T12:00:00.000000Z"
            }
        }
    """

    error: ErrorDetail


class UnauthorizedResponse(BaseModel):
    """Body of the 401 short-circuit: {"message": "Unauthorized"}."""

    message: str = "Unauthorized"


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    products: int = Field(description="Number of records currently in the store")
    uptime_seconds: float = Field(description="Seconds since the app was created")
