"""
Hardcoded starter catalog.

Loaded by the memory backend on startup when ``seed_catalog`` is enabled.
Replace this list with the output of the code exporter to ship a new
default catalog.
"""

from typing import List

from .models import Product


SEED_PRODUCTS = [
    {
        "id": "product-1",
        "name": "Focus Timer",
        "description": "A browser-based pomodoro timer with session history.",
        "usageInstructions": "Open the link, pick a session length and press start.",
        "externalLink": "https://example.com/focus-timer",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    },
    {
        "id": "product-2",
        "name": "Markdown Notes",
        "description": "Lightweight notes app that stores everything as plain markdown.",
        "usageInstructions": "Create a notebook, then add notes with the + button.",
        "externalLink": "https://example.com/markdown-notes",
        "createdAt": "2024-01-02T00:00:00.000Z",
        "updatedAt": "2024-01-02T00:00:00.000Z",
    },
    {
        "id": "product-3",
        "name": "Palette Picker",
        "description": "Generates accessible color palettes from a single base color.",
        "usageInstructions": "Enter a hex color and copy the generated palette.",
        "externalLink": "https://example.com/palette-picker",
        "createdAt": "2024-01-03T00:00:00.000Z",
        "updatedAt": "2024-01-03T00:00:00.000Z",
    },
]


def seed_products() -> List[Product]:
    """Fresh Product instances for the starter catalog."""
    return [Product.model_validate(item) for item in SEED_PRODUCTS]
