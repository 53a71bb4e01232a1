"""
Products API - Product Store
===========================

What:  Owns the ordered, in-memory sequence of products and every read/write
       primitive the routes need (list, search, stats, get, create, update,
       delete).
How:   A plain Python list scanned linearly. Insertion order is the listing
       and pagination order. Mutations hold a lock so the find-index step
       and the write step cannot interleave with another writer.
Who:   One instance per application, built by create_app() and stored on
       `app.state.store`. Routes receive it through the get_store dependency.
When:  Seeded once at startup; contents vanish with the process.
"""

import logging
import threading
import uuid
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from products_api.exceptions import NotFoundError, ValidationError
from products_api.schemas.product import Product, ProductCreate

logger = logging.getLogger(__name__)

# Fields an update payload may overwrite; anything else (notably `id`) is ignored
MERGEABLE_FIELDS = ("name", "description", "price", "category", "in_stock")

SAMPLE_PRODUCTS: Tuple[Dict[str, Any], ...] = (
    {
        "name": "Laptop",
        "description": "High performance laptop",
        "price": 999.99,
        "category": "Electronics",
        "in_stock": True,
    },
    {
        "name": "Smartphone",
        "description": "Latest model smartphone",
        "price": 699.99,
        "category": "Electronics",
        "in_stock": True,
    },
    {
        "name": "Desk Chair",
        "description": "Ergonomic office chair",
        "price": 199.99,
        "category": "Furniture",
        "in_stock": False,
    },
)


def _new_id() -> str:
    return str(uuid.uuid4())


class ProductStore:
    """
    In-memory product repository.

    Responsibilities:
        - list():   category filter + page/limit slicing
        - search(): case-insensitive substring match on name or description
        - stats():  record count per category, first-seen order
        - get(), create(), update(), delete(): single-record CRUD

    Error Handling Strategy:
        Lookups that miss raise NotFoundError; an empty search query raises
        ValidationError. Callers never receive None for a missing record.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: List[Product] = list(products or [])
        self._lock = threading.Lock()

    @classmethod
    def with_sample_data(cls) -> "ProductStore":
        """Build a store holding the three fixed sample records with fresh ids."""
        return cls(Product(id=_new_id(), **fields) for fields in SAMPLE_PRODUCTS)

    def __len__(self) -> int:
        return len(self._products)

    # ── Queries ───────────────────────────────────────────────────────────

    def list(
        self,
        category: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[int, List[Product]]:
        """
        Filter by category (case-insensitive exact match) and return one page.

        Args:
            category: Category to keep; None or "" keeps everything
            page:     1-based page number
            limit:    Page size

        Returns:
            (number of matching records, records on the requested page).
            A page past the end is an empty list.
        """
        matching = self._products
        if category:
            wanted = category.lower()
            matching = [p for p in matching if p.category.lower() == wanted]

        start = (page - 1) * limit
        return len(matching), matching[start:start + limit]

    def search(self, query: Optional[str]) -> List[Product]:
        """
        Return every product whose name or description contains `query`.

        Raises:
            ValidationError: query is None or empty
        """
        if not query:
            raise ValidationError("Search query is required", field="q")

        needle = query.lower()
        return [
            p for p in self._products
            if needle in p.name.lower() or needle in (p.description or "").lower()
        ]

    def stats(self) -> Dict[str, int]:
        """Count products per category; keys appear in first-seen order."""
        return dict(Counter(p.category for p in self._products))

    def get(self, product_id: str) -> Product:
        """
        Raises:
            NotFoundError: no product has this id
        """
        return self._products[self._index_of(product_id)]

    # ── Mutations ─────────────────────────────────────────────────────────

    def create(self, payload: ProductCreate) -> Product:
        """
        Append a new product built from an already-validated payload.

        `in_stock` defaults to True only when the client omitted it.
        """
        product = Product(
            id=_new_id(),
            name=payload.name,
            description=payload.description,
            price=payload.price,
            category=payload.category,
            in_stock=True if payload.in_stock is None else payload.in_stock,
        )
        with self._lock:
            self._products.append(product)
        logger.info("Product created: %s (%s)", product.id, product.name)
        return product

    def update(self, product_id: str, fields: Mapping[str, Any]) -> Product:
        """
        Shallow-merge `fields` over an existing product.

        Only MERGEABLE_FIELDS are applied, so an `id` key cannot rewrite the
        record's identity. A None `in_stock` counts as omitted. The merged
        record keeps its position in the list.

        Raises:
            NotFoundError: no product has this id
        """
        changes = {
            k: v for k, v in fields.items()
            if k in MERGEABLE_FIELDS and not (k == "in_stock" and v is None)
        }
        with self._lock:
            index = self._index_of(product_id)
            updated = self._products[index].model_copy(update=changes)
            self._products[index] = updated
        logger.info("Product updated: %s fields=%s", product_id, sorted(changes))
        return updated

    def delete(self, product_id: str) -> None:
        """
        Remove a product; the remaining records keep their relative order.

        Raises:
            NotFoundError: no product has this id
        """
        with self._lock:
            del self._products[self._index_of(product_id)]
        logger.info("Product deleted: %s", product_id)

    def _index_of(self, product_id: str) -> int:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        raise NotFoundError(resource="Product", resource_id=product_id)
