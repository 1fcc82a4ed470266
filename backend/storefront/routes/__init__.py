# Routes package init
"""
Storefront Gateway: API Routes Package
=========================================

Route Inventory:
    - uploads.py:   POST   /api/upload-image
    - products.py:  GET    /api/products
                    POST   /api/products
                    PUT    /api/products/{id}
                    DELETE /api/products/{id}
    - payments.py:  POST   /api/create-order   (404 unless Razorpay is configured)
    - health.py:    GET    /health

Routes stay THIN: read the request, call one collaborator adapter from the
GatewayContext, return the result. Errors are raised, not returned; the
global handlers in main.py format them.
"""
