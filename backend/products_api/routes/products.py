"""
Products API - Product Route Handlers
=====================================

What:  The /api/products endpoints: list, search, stats, get, create,
       update, delete.
How:   Extracts query/path parameters, delegates to ProductStore, returns
       JSON. Failures are raised and formatted by the global handlers.

Route order:
    /products/search and /products/stats are declared before
    /products/{product_id}; otherwise "search" would be read as an ID.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from products_api.dependencies import get_store, require_api_key, validate_product_payload
from products_api.schemas.product import (
    CategoryStats,
    ErrorResponse,
    Product,
    ProductCreate,
    ProductListResponse,
    UnauthorizedResponse,
)
from products_api.services.product_store import ProductStore

router = APIRouter(prefix="/api/products", tags=["Products"])

_AUTH_RESPONSES = {401: {"description": "Missing or wrong API key", "model": UnauthorizedResponse}}


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"description": "Invalid page or limit", "model": ErrorResponse}},
    summary="List products with optional category filter and pagination",
)
async def list_products(
    request: Request,
    category: Optional[str] = Query(
        default=None,
        description="Only products in this category (case-insensitive)",
    ),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        description="Items per page (default 10, capped by MAX_PAGE_LIMIT)",
    ),
    store: ProductStore = Depends(get_store),
) -> ProductListResponse:
    """
    Example:
        GET /api/products?category=electronics&page=1&limit=1
        → {"total": 2, "page": 1, "limit": 1, "products": [<Laptop>]}
    """
    settings = request.app.state.settings
    if limit is None:
        limit = settings.default_page_limit
    limit = min(limit, settings.max_page_limit)

    total, products = store.list(category=category, page=page, limit=limit)
    return ProductListResponse(total=total, page=page, limit=limit, products=products)


@router.get(
    "/search",
    response_model=List[Product],
    responses={400: {"description": "Missing search query", "model": ErrorResponse}},
    summary="Search products by name or description",
)
async def search_products(
    q: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    store: ProductStore = Depends(get_store),
) -> List[Product]:
    return store.search(q)


@router.get(
    "/stats",
    response_model=CategoryStats,
    summary="Count products per category",
)
async def product_stats(store: ProductStore = Depends(get_store)) -> CategoryStats:
    return store.stats()


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Get a single product by ID",
)
async def get_product(product_id: str, store: ProductStore = Depends(get_store)) -> Product:
    return store.get(product_id)


@router.post(
    "",
    status_code=201,
    response_model=Product,
    dependencies=[Depends(require_api_key)],
    responses={
        **_AUTH_RESPONSES,
        400: {"description": "Invalid product body", "model": ErrorResponse},
    },
    summary="Create a product",
)
async def create_product(
    payload: ProductCreate = Depends(validate_product_payload),
    store: ProductStore = Depends(get_store),
) -> Product:
    """
    Requires the API key header. Body: name, price and category; optional
    description and inStock (defaults to true when omitted).
    """
    return store.create(payload)


@router.put(
    "/{product_id}",
    response_model=Product,
    dependencies=[Depends(require_api_key)],
    responses={
        **_AUTH_RESPONSES,
        400: {"description": "Invalid product body", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Update a product",
)
async def update_product(
    product_id: str,
    payload: ProductCreate = Depends(validate_product_payload),
    store: ProductStore = Depends(get_store),
) -> Product:
    """
    Same body rules as create. Fields the client sent overwrite the stored
    ones; description and inStock are left alone when absent. An `id` in
    the body is ignored.
    """
    return store.update(product_id, payload.model_dump(exclude_unset=True))


@router.delete(
    "/{product_id}",
    status_code=204,
    response_class=Response,
    dependencies=[Depends(require_api_key)],
    responses={
        **_AUTH_RESPONSES,
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Delete a product",
)
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)) -> Response:
    store.delete(product_id)
    return Response(status_code=204)
