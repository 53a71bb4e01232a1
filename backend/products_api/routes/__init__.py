# Routes package init
"""
Products API - API Routes Package
=================================

Route Inventory:
    - root.py:      GET /                      (welcome text)
                    GET /health                (service health check)
    - products.py:  GET    /api/products            (list, filter, paginate)
                    GET    /api/products/search     (substring search)
                    GET    /api/products/stats      (count per category)
                    GET    /api/products/{id}       (single product)
                    POST   /api/products            (create, API key)
                    PUT    /api/products/{id}       (update, API key)
                    DELETE /api/products/{id}       (delete, API key)

Routes stay thin: pull parameters out of the request, call the store,
return the result. Business rules live in services/.
"""
