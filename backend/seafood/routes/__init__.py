"""
SeaFood Delivery Backend — API Routes Package
==============================================

Route Inventory:
    - orders.py:   POST /create-order, GET /track-order/{id}, GET /my-orders/{email}
    - products.py: GET /products, POST /admin/add-product
    - driver.py:   /driver/* (register, status, orders, accept,
                   update-order-status, stats, balance, withdrawals, withdraw)
    - admin.py:    /admin/* (orders, drivers, withdrawals, order-status, assign-driver)
    - health.py:   GET /health

Routes stay thin: parse the body, call one service, wrap the result in the
envelope. Errors propagate to the handlers registered in main.py.
"""
