# Schemas package init
"""
Products API - Schemas Package
==============================

Pydantic models for the product record, request bodies and the JSON
envelopes returned by the API. See product.py.
"""
