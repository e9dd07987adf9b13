"""
SeaFood Delivery Backend — Services Layer
==========================================

What:  Business logic between routes (HTTP) and the DataStore (persistence).
Why:   Routes handle HTTP; services enforce the rules and can be tested with
       an in-memory store.

Service Inventory:
    - DataStore (abstract) / SqlAlchemyStore: persistence collaborator
    - OrderLifecycleManager: status transitions and driver assignment
    - DriverLedger: earnings, balance and withdrawals
    - CatalogService: products and order creation
    - DriverService: driver registration and online status

All services are stateless singletons; the store is passed on every call.
"""
