# Services package init
"""
Storefront Gateway: Collaborator Adapters
============================================

What:  Thin wrappers around the three managed services the gateway calls.
Why:   Routes stay free of SDK details, and SDK errors are translated into
       the application's exception hierarchy in one place per collaborator.

Service Inventory:
    - ProductService: Firestore "products" collection (async client)
    - MediaService:   Cloudinary image uploads with a format allow-list
    - PaymentService: Razorpay order creation (optional)
"""
