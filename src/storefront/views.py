"""Presentation filters applied by clients to the unfiltered catalog."""

from typing import Iterable, List

from .schemas import ProductOut

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/seed/{product_id}/{width}/{height}"

DASHBOARD_IMAGE_SIZE = (400, 400)
STOREFRONT_IMAGE_SIZE = (600, 800)


def display_image_url(product: ProductOut, size=DASHBOARD_IMAGE_SIZE) -> str:
    """Return the product image, or a placeholder seeded by the product id."""
    if product.image_url:
        return product.image_url
    width, height = size
    return PLACEHOLDER_IMAGE_URL.format(product_id=product.id, width=width, height=height)


def merchant_products(products: Iterable[ProductOut], merchant_id: int) -> List[ProductOut]:
    return [p for p in products if p.merchant_id == merchant_id]


def search_products(products: Iterable[ProductOut], query: str) -> List[ProductOut]:
    """Case-insensitive substring match over name and description."""
    needle = query.lower()
    return [
        p
        for p in products
        if needle in p.name.lower() or needle in (p.description or "").lower()
    ]
