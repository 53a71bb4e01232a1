# Services package init
"""
Products API - Services Layer
=============================

What:  Business logic sitting between the routes (HTTP) and the data.
How:   Services accept validated schemas, apply the catalogue rules and
       return domain objects. They know nothing about requests or responses.

Service Inventory:
    - ProductStore: in-memory product collection with query and CRUD operations
"""
