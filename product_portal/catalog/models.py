"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog records.

Field names are snake_case in Python and camelCase on the wire
(``usageInstructions``, ``externalLink``, ``createdAt``, ``updatedAt``),
which is also the shape of the code interchange format.

==============================================================================
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


REQUIRED_FIELDS = ("id", "name", "description", "usageInstructions", "externalLink")


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ProductFormData(BaseModel):
    """
    Caller-supplied product fields.

    Everything except ``id`` and the timestamps, which the store assigns.

    Attributes:
        name: Product display name
        description: What the product is
        usage_instructions: How to use it
        external_link: URL of the external resource
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: str = Field(..., min_length=1, description="Product description")
    usage_instructions: str = Field(..., min_length=1, description="Usage instructions")
    external_link: str = Field(..., min_length=1, max_length=2048, description="External link")


class Product(BaseModel):
    """
    Product model for catalog items.

    Unknown fields are kept as-is so records pasted through the code
    importer come back out of the exporter unchanged.

    Attributes:
        id: Opaque unique identifier, immutable once assigned
        name: Product display name
        description: What the product is
        usage_instructions: How to use it
        external_link: URL of the external resource
        created_at: ISO-8601 creation timestamp
        updated_at: ISO-8601 timestamp of the last mutation
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(..., min_length=1, description="Product identifier")
    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field(..., min_length=1, description="Product description")
    usage_instructions: str = Field(..., min_length=1, description="Usage instructions")
    external_link: str = Field(..., min_length=1, description="External link")
    created_at: Optional[str] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[str] = Field(default=None, description="Last update timestamp")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id cannot be blank")
        return v

    @classmethod
    def create(cls, product_id: str, data: ProductFormData) -> "Product":
        """Build a new record with ``createdAt == updatedAt == now``."""
        now = utc_now_iso()
        return cls(
            id=product_id,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )

    def apply(self, data: ProductFormData) -> "Product":
        """
        Return a copy with every form field replaced and ``updatedAt`` refreshed.

        ``id`` and ``createdAt`` are carried over. The new ``updatedAt`` never
        sorts before ``createdAt`` or the previous ``updatedAt``.
        """
        now = utc_now_iso()
        floor = max(filter(None, (self.created_at, self.updated_at)), default=now)
        return self.model_copy(
            update={**data.model_dump(), "updated_at": max(now, floor)}
        )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, leaving out timestamps that were never set."""
        return self.model_dump(by_alias=True, exclude_unset=True)
