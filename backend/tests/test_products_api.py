"""
Products API - Endpoint Tests
=============================

What:  HTTP-level tests for every route, the auth and validation stages,
       and the error envelope.
How:   HTTPX AsyncClient over ASGITransport; each test gets a fresh app
       and a freshly seeded store (see conftest.py).
"""

import pytest
from httpx import ASGITransport, AsyncClient

from products_api.main import create_app


def _assert_envelope(response, status, message=None):
    assert response.status_code == status
    error = response.json()["error"]
    assert error["status"] == status
    assert error["timestamp"]
    if message is not None:
        assert error["message"] == message


class TestRoot:

    @pytest.mark.asyncio
    async def test_welcome_text(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Welcome to the Products API"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["products"] == 3

    @pytest.mark.asyncio
    async def test_unmatched_route_returns_envelope(self, test_client):
        response = await test_client.get("/api/unknown")
        _assert_envelope(response, 404, "Endpoint not found")

    @pytest.mark.asyncio
    async def test_unsupported_method_returns_endpoint_not_found(self, test_client):
        response = await test_client.patch("/api/products/anything", json={})
        _assert_envelope(response, 404, "Endpoint not found")

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestListProducts:

    @pytest.mark.asyncio
    async def test_defaults(self, test_client):
        response = await test_client.get("/api/products")
        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 3
        assert body["page"] == 1
        assert body["limit"] == 10
        assert [p["name"] for p in body["products"]] == ["Laptop", "Smartphone", "Desk Chair"]

    @pytest.mark.asyncio
    async def test_products_use_camel_case_in_stock(self, test_client):
        response = await test_client.get("/api/products")
        chair = response.json()["products"][2]
        assert chair["inStock"] is False
        assert "in_stock" not in chair

    @pytest.mark.asyncio
    async def test_category_and_pagination(self, test_client):
        response = await test_client.get(
            "/api/products", params={"category": "Electronics", "page": 1, "limit": 1}
        )
        body = response.json()
        assert body["total"] == 2
        assert body["limit"] == 1
        assert [p["name"] for p in body["products"]] == ["Laptop"]

    @pytest.mark.asyncio
    async def test_category_filter_ignores_case(self, test_client):
        response = await test_client.get("/api/products", params={"category": "electronics"})
        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 2
        assert [p["name"] for p in body["products"]] == ["Laptop", "Smartphone"]

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, test_client):
        response = await test_client.get("/api/products", params={"page": 9})
        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 3
        assert body["products"] == []

    @pytest.mark.asyncio
    async def test_limit_is_capped(self, test_client):
        response = await test_client.get("/api/products", params={"limit": 5000})
        assert response.json()["limit"] == 100

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "abc"}, {"limit": -3}])
    async def test_invalid_paging_is_400(self, test_client, params):
        response = await test_client.get("/api/products", params=params)
        _assert_envelope(response, 400)


class TestSearchAndStats:

    @pytest.mark.asyncio
    async def test_search_matches_name(self, test_client):
        response = await test_client.get("/api/products/search", params={"q": "phone"})
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Smartphone"]

    @pytest.mark.asyncio
    async def test_search_matches_description(self, test_client):
        response = await test_client.get("/api/products/search", params={"q": "ERGONOMIC"})
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Desk Chair"]

    @pytest.mark.asyncio
    async def test_search_without_query_is_400(self, test_client):
        response = await test_client.get("/api/products/search")
        _assert_envelope(response, 400, "Search query is required")

    @pytest.mark.asyncio
    async def test_search_with_empty_query_is_400(self, test_client):
        response = await test_client.get("/api/products/search", params={"q": ""})
        _assert_envelope(response, 400, "Search query is required")

    @pytest.mark.asyncio
    async def test_stats(self, test_client):
        response = await test_client.get("/api/products/stats")
        assert response.status_code == 200
        assert response.json() == {"Electronics": 2, "Furniture": 1}


class TestGetProduct:

    @pytest.mark.asyncio
    async def test_get_existing(self, test_client, store):
        laptop = store.list()[1][0]
        response = await test_client.get(f"/api/products/{laptop.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Laptop"
        assert response.json()["id"] == laptop.id

    @pytest.mark.asyncio
    async def test_get_missing(self, test_client):
        response = await test_client.get("/api/products/no-such-id")
        _assert_envelope(response, 404, "Product not found")


class TestCreateProduct:

    @pytest.mark.asyncio
    async def test_create(self, test_client, auth_headers, new_product_body, store):
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        body = response.json()
        assert response.status_code == 201
        assert body["name"] == "Standing Desk"
        assert body["price"] == 349.5
        assert body["inStock"] is True
        assert body["id"]

        fetched = await test_client.get(f"/api/products/{body['id']}")
        assert fetched.json() == body
        assert len(store) == 4

    @pytest.mark.asyncio
    async def test_explicit_false_in_stock_is_kept(self, test_client, auth_headers, new_product_body):
        new_product_body["inStock"] = False
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        assert response.json()["inStock"] is False

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_ignored(self, test_client, auth_headers, new_product_body):
        new_product_body["id"] = "my-own-id"
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        assert response.json()["id"] != "my-own-id"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}])
    async def test_requires_api_key(self, test_client, store, new_product_body, headers):
        response = await test_client.post("/api/products", json=new_product_body, headers=headers)
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}
        assert len(store) == 3

    @pytest.mark.asyncio
    async def test_auth_runs_before_validation(self, test_client):
        response = await test_client.post("/api/products", json={"price": -1})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_negative_price_is_400(self, test_client, auth_headers, store, new_product_body):
        new_product_body["price"] = -5
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        _assert_envelope(response, 400, "Price must be a positive number")
        assert len(store) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["10", True])
    async def test_non_numeric_price_is_400(self, test_client, auth_headers, new_product_body, price):
        new_product_body["price"] = price
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        _assert_envelope(response, 400, "Price must be a positive number")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_price", ["NaN", "Infinity", "-Infinity", "1e400"])
    async def test_non_finite_price_is_400(self, test_client, auth_headers, store, raw_price):
        response = await test_client.post(
            "/api/products",
            content='{"name": "X", "price": %s, "category": "Y"}' % raw_price,
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        _assert_envelope(response, 400, "Price must be a positive number")
        assert len(store) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "price", "category"])
    async def test_missing_required_field_is_400(
        self, test_client, auth_headers, store, new_product_body, missing
    ):
        del new_product_body[missing]
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        _assert_envelope(response, 400, "Name, price, and category are required")
        assert len(store) == 3

    @pytest.mark.asyncio
    async def test_empty_body_is_400(self, test_client, auth_headers):
        response = await test_client.post("/api/products", headers=auth_headers)
        _assert_envelope(response, 400, "Name, price, and category are required")

    @pytest.mark.asyncio
    async def test_wrong_field_type_is_400(self, test_client, auth_headers, new_product_body):
        new_product_body["inStock"] = "yes"
        response = await test_client.post(
            "/api/products", json=new_product_body, headers=auth_headers
        )
        _assert_envelope(response, 400)
        assert "inStock" in response.json()["error"]["message"]


class TestUpdateProduct:

    @pytest.mark.asyncio
    async def test_update(self, test_client, auth_headers, store):
        laptop = store.list()[1][0]
        response = await test_client.put(
            f"/api/products/{laptop.id}",
            json={"name": "Laptop", "price": 50, "category": "Electronics"},
            headers=auth_headers,
        )
        body = response.json()
        assert response.status_code == 200
        assert body["price"] == 50
        assert body["description"] == "High performance laptop"
        assert body["inStock"] is True
        assert store.get(laptop.id).price == 50

    @pytest.mark.asyncio
    async def test_id_in_body_does_not_change_identity(self, test_client, auth_headers, store):
        laptop = store.list()[1][0]
        response = await test_client.put(
            f"/api/products/{laptop.id}",
            json={"id": "new-id", "name": "Laptop", "price": 10, "category": "Electronics"},
            headers=auth_headers,
        )
        assert response.json()["id"] == laptop.id

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, test_client, auth_headers):
        response = await test_client.put(
            "/api/products/no-such-id",
            json={"name": "X", "price": 1, "category": "Y"},
            headers=auth_headers,
        )
        _assert_envelope(response, 404, "Product not found")

    @pytest.mark.asyncio
    async def test_update_requires_api_key(self, test_client, store):
        laptop = store.list()[1][0]
        response = await test_client.put(
            f"/api/products/{laptop.id}",
            json={"name": "Cheap", "price": 1, "category": "Electronics"},
        )
        assert response.status_code == 401
        assert store.get(laptop.id).name == "Laptop"

    @pytest.mark.asyncio
    async def test_update_is_validated(self, test_client, auth_headers, store):
        laptop = store.list()[1][0]
        response = await test_client.put(
            f"/api/products/{laptop.id}", json={"price": 0}, headers=auth_headers
        )
        _assert_envelope(response, 400)
        assert store.get(laptop.id).price == 999.99


class TestDeleteProduct:

    @pytest.mark.asyncio
    async def test_delete(self, test_client, auth_headers, store):
        smartphone = store.list()[1][1]
        response = await test_client.delete(
            f"/api/products/{smartphone.id}", headers=auth_headers
        )
        assert response.status_code == 204
        assert response.content == b""

        fetched = await test_client.get(f"/api/products/{smartphone.id}")
        assert fetched.status_code == 404
        assert [p.name for p in store.list()[1]] == ["Laptop", "Desk Chair"]

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, test_client, auth_headers):
        response = await test_client.delete("/api/products/no-such-id", headers=auth_headers)
        _assert_envelope(response, 404, "Product not found")

    @pytest.mark.asyncio
    async def test_delete_requires_api_key(self, test_client, store):
        laptop = store.list()[1][0]
        response = await test_client.delete(f"/api/products/{laptop.id}")
        assert response.status_code == 401
        assert len(store) == 3


class TestAuthConfiguration:

    @pytest.mark.asyncio
    async def test_unset_secret_rejects_every_write(self, test_settings, new_product_body):
        settings = test_settings.model_copy(update={"api_key": ""})
        app = create_app(app_settings=settings)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(
                "/api/products", json=new_product_body, headers={"X-API-Key": ""}
            )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_custom_header_name(self, test_settings, new_product_body):
        settings = test_settings.model_copy(update={"api_key_header": "X-Secret"})
        app = create_app(app_settings=settings)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(
                "/api/products",
                json=new_product_body,
                headers={"X-Secret": test_settings.api_key},
            )
        assert response.status_code == 201


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_unhandled_exception_becomes_500_envelope(self, test_settings):
        app = create_app(app_settings=test_settings)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/boom", headers={"X-Request-ID": "rid-500"})

        _assert_envelope(response, 500, "Internal Server Error")
        assert "kaboom" not in response.text
        assert response.headers["X-Request-ID"] == "rid-500"
