from __future__ import annotations

from typing import Optional

DEFAULT_IMAGE_URL = "https://images.unsplash.com/photo-1546069901-ba9599a7e63c"

_PASTA = "https://images.unsplash.com/photo-1621996346565-e3dbc646d9a9"
_ASIAN = "https://images.unsplash.com/photo-1617093727343-374698b1b08d"
_GREENS = "https://images.unsplash.com/photo-1512621776951-a57141f2eefd"

CATEGORY_IMAGES: dict[str, str] = {
    "italian": _PASTA,
    "pasta": _PASTA,
    "asian": _ASIAN,
    "japanese": _ASIAN,
    "chinese": "https://images.unsplash.com/photo-1585032226651-759b368d7246",
    "mexican": "https://images.unsplash.com/photo-1565299585323-38d6b0865b47",
    "french": "https://images.unsplash.com/photo-1467003909585-2f8a72700288",
    "american": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd",
    "dessert": "https://images.unsplash.com/photo-1551024506-0bccd828d307",
    "breakfast": "https://images.unsplash.com/photo-1533089860892-a7c6f0a88666",
    "salad": _GREENS,
    "soup": "https://images.unsplash.com/photo-1547592166-23ac45744acd",
    "seafood": "https://images.unsplash.com/photo-1559737558-2f5a70f5775c",
    "meat": "https://images.unsplash.com/photo-1529692236671-f1f6cf9683ba",
    "vegetarian": _GREENS,
    "vegan": _GREENS,
    "indian": "https://images.unsplash.com/photo-1585937421612-70a008356fbe",
    "thai": "https://images.unsplash.com/photo-1562565652-a0d8f0c59eb4",
    "mediterranean": "https://images.unsplash.com/photo-1529042410759-befb1204b468",
}


def category_image(category: Optional[str]) -> str:
    """Pick the cover image for a category, falling back to a generic dish."""
    if not category:
        return DEFAULT_IMAGE_URL
    return CATEGORY_IMAGES.get(category.strip().lower(), DEFAULT_IMAGE_URL)
