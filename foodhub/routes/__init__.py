# Routes package init
"""
FoodHub Backend - API Routes Package
=====================================

Route Inventory:
    - orders.py:           /api/orders            (customer)
    - provider_orders.py:  /api/provider/orders   (provider)
    - admin_orders.py:     /api/admin/orders      (admin)
    - reviews.py:          /api/reviews           (customer)
    - meals.py:            /api/meals             (public)
    - provider_meals.py:   /api/provider/meals    (provider)
    - admin_users.py:      /api/admin/users       (admin)
    - health.py:           /health                (public)

Routes stay thin: they resolve the principal, let FastAPI validate the body,
call one service method, and return its response model.
"""
