"""
Products API - Application Package
==================================

What: In-memory product catalogue served over HTTP with FastAPI.
How:  The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Dependencies (auth, validation)  │  ← Per-route pipeline stages
    ├─────────────────────────────────────┤
    │        Services (ProductStore)      │  ← Filtering, paging, CRUD
    ├─────────────────────────────────────┤
    │          Schemas (Pydantic)         │  ← API contracts
    └─────────────────────────────────────┘

    Records live only in process memory and are re-seeded on every start.
"""

__version__ = "1.0.0"
