"""
==============================================================================
Catalog Package - Product Management
==============================================================================

Product records, the catalog store, its backing collaborators and the code
interchange codec.

Classes:
--------
- Product / ProductFormData: Pydantic models for products
- CatalogStore: Authoritative collection with capacity enforcement
- MemoryBackend / KeyValueBackend / RemoteBackend: persistence options
- CodeCodec: Text import/export of the product list

==============================================================================
"""

from .models import REQUIRED_FIELDS, Product, ProductFormData
from .backends import CatalogBackend, KeyValueBackend, MemoryBackend, RemoteBackend
from .codec import CodeCodec
from .seed import seed_products
from .store import CatalogStore

__all__ = [
    "REQUIRED_FIELDS",
    "Product",
    "ProductFormData",
    "CatalogBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "RemoteBackend",
    "CodeCodec",
    "seed_products",
    "CatalogStore",
]
