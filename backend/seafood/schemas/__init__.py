"""
SeaFood Delivery Backend — API Schemas
=======================================

Pydantic request/response models, one module per resource. Field names are
snake_case in Python and camelCase on the wire (the mobile apps were built
against camelCase JSON).
"""
