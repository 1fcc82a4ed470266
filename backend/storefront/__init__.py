"""
Storefront Gateway: Application Package Initializer
====================================================

What: Marks the `storefront` directory as a Python package.
Who:  Used by uvicorn (storefront.main:app), pytest, and the console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Middleware (origin policy, ids)   │  ← runs before any route
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (collaborator adapters)  │  ← Firestore, Cloudinary, Razorpay
    ├─────────────────────────────────────┤
    │  GatewayContext (handles at startup)│  ← injected into every route
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
