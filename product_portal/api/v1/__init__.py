"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- auth: Admin passcode login
- products: Product catalog (public browsing, admin CRUD)
- code: Code import/export (admin)

==============================================================================
"""

from . import health, auth, products, code

__all__ = ["health", "auth", "products", "code"]
