"""
==============================================================================
Code Interchange Codec
==============================================================================

Moves the product list in and out of a copy/paste friendly text form.

Accepted input grammar:
----------------------
    bare array:    [ {...}, ... ]
    declaration:   [export] (const|let|var) NAME : Product[] = [ {...}, ... ] [;]

The array itself is JSON. Anything else is rejected with a FormatError that
names the rule that failed; nothing is scraped out of surrounding text.

Export produces the declaration form by default, pretty-printed with a
two-space indent, so the output can be pasted straight back in or into a
TypeScript source file.

==============================================================================
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from product_portal.core.exceptions import FormatError

from .models import REQUIRED_FIELDS, Product


# Module logger
logger = logging.getLogger(__name__)


DECLARATION_PATTERN = re.compile(
    r"""
    \A\s*
    (?:export\s+)?
    (?:const|let|var)\s+
    (?P<name>[A-Za-z_$][A-Za-z0-9_$]*)\s*
    :\s*Product\s*\[\s*\]\s*
    =\s*
    (?P<body>\[.*\])
    \s*;?\s*\Z
    """,
    re.VERBOSE | re.DOTALL,
)

MODULE_TEMPLATE = """import {{ Product }} from '@/types/product';

// Hardcoded product storage - can hold up to {max_products} products
// This array is stored directly in the code and will be available on all devices
{declaration}

// Maximum number of products that can be stored
export const MAX_PRODUCTS = {max_products};
"""


class CodeCodec:
    """
    Text <-> product list transform for manual data interchange.

    Attributes:
        max_products: Upper bound shared with the catalog store
        declared_name: Variable name used by the declaration form

    Example:
        >>> codec = CodeCodec(max_products=150)
        >>> text = codec.export(products)
        >>> codec.parse(text) == products
        True
    """

    INDENT = 2

    def __init__(self, max_products: int, declared_name: str = "HARDCODED_PRODUCTS") -> None:
        self.max_products = max_products
        self.declared_name = declared_name

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export(self, products: Iterable[Product], declared: bool = True) -> str:
        """
        Serialize products as a JSON array, optionally wrapped in a declaration.

        Args:
            products: Records to serialize, in order
            declared: Wrap as ``export const NAME: Product[] = [...];``

        Returns:
            Pretty-printed text accepted by ``parse``
        """
        array = json.dumps(
            [product.to_wire() for product in products],
            indent=self.INDENT,
            ensure_ascii=False,
        )

        if not declared:
            return array

        return f"export const {self.declared_name}: Product[] = {array};"

    def export_module(self, products: Iterable[Product]) -> str:
        """Render a complete ``hardcodedProducts.ts`` source module."""
        return MODULE_TEMPLATE.format(
            declaration=self.export(products, declared=True),
            max_products=self.max_products,
        )

    # =========================================================================
    # IMPORT
    # =========================================================================

    def parse(self, text: Optional[str]) -> List[Product]:
        """
        Parse pasted code back into validated product records.

        Args:
            text: Bare JSON array or a ``Product[]`` declaration

        Returns:
            The records in input order, without coercion or default filling

        Raises:
            FormatError: with one of "no code provided", "not parseable",
                "not an array", "missing required field: <field>",
                "exceeds maximum", "invalid product at index <i>",
                "duplicate id: <id>"
        """
        if text is None or not text.strip():
            raise FormatError("no code provided")

        body = self._extract_array(text)

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise FormatError(
                "not parseable",
                {"reason": e.msg, "line": e.lineno, "column": e.colno}
            ) from e

        if not isinstance(data, list):
            raise FormatError("not an array", {"type": type(data).__name__})

        for index, item in enumerate(data):
            self._check_required(index, item)

        if len(data) > self.max_products:
            raise FormatError(
                "exceeds maximum",
                {"count": len(data), "max_products": self.max_products}
            )

        products = [self._to_product(index, item) for index, item in enumerate(data)]
        self._check_unique(products)

        logger.debug(f"Parsed {len(products)} products from code")
        return products

    def _extract_array(self, text: str) -> str:
        """Return the JSON array text from either accepted form."""
        stripped = text.strip()

        if stripped.startswith("["):
            return stripped

        match = DECLARATION_PATTERN.match(stripped)
        if not match:
            raise FormatError(
                "not parseable",
                {"reason": "expected a JSON array or a 'const NAME: Product[] = [...]' declaration"}
            )

        return match.group("body")

    @staticmethod
    def _check_required(index: int, item: Any) -> None:
        """Every element needs a truthy value for each required field."""
        if not isinstance(item, dict):
            raise FormatError(
                f"missing required field: {REQUIRED_FIELDS[0]}",
                {"index": index, "field": REQUIRED_FIELDS[0]}
            )

        for field in REQUIRED_FIELDS:
            if not item.get(field):
                raise FormatError(
                    f"missing required field: {field}",
                    {"index": index, "field": field}
                )

    @staticmethod
    def _to_product(index: int, item: dict) -> Product:
        try:
            return Product.model_validate(item, strict=True)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            raise FormatError(
                f"invalid product at index {index}",
                {"index": index, "fields": fields}
            ) from e

    @staticmethod
    def _check_unique(products: List[Product]) -> None:
        seen = set()
        for product in products:
            if product.id in seen:
                raise FormatError(f"duplicate id: {product.id}", {"id": product.id})
            seen.add(product.id)
