"""Derived views over the product list: discovery feed, seller listings, sales."""
from datetime import datetime
from typing import Any, Dict, Iterable, List

from suq.models.product import SALE_STATUSES, ProductStatus, to_object_id

FEED_SIZE = 6

Document = Dict[str, Any]


def _created_at(product: Document) -> datetime:
    return product.get("createdAt") or datetime.min


def discover(products: Iterable[Document], limit: int = FEED_SIZE) -> Dict[str, List[Document]]:
    """
    Build the home page feed.

    - newArrivals: newest products first
    - topRanked: available products, most expensive first
    - topSellers: sold or reserved products, newest first
    """
    products = list(products)

    new_arrivals = sorted(products, key=_created_at, reverse=True)
    top_ranked = sorted(
        (p for p in products if p.get("status") == ProductStatus.AVAILABLE.value),
        key=lambda p: p.get("price", 0),
        reverse=True,
    )
    top_sellers = sorted(
        (p for p in products if p.get("status") in SALE_STATUSES),
        key=_created_at,
        reverse=True,
    )

    return {
        "newArrivals": new_arrivals[:limit],
        "topRanked": top_ranked[:limit],
        "topSellers": top_sellers[:limit],
    }


def seller_listings(products: Iterable[Document], seller_id: Any) -> List[Document]:
    """Products listed by one seller."""
    # Older listings may hold sellerId as text
    seller = str(to_object_id(seller_id, "Invalid seller id"))
    return [p for p in products if str(p.get("sellerId")) == seller]


def seller_sales(products: Iterable[Document], seller_id: Any) -> List[Document]:
    """A seller's orders: their reserved or sold products."""
    return [p for p in seller_listings(products, seller_id) if p.get("status") in SALE_STATUSES]


def sales_stats(sales: Iterable[Document]) -> Dict[str, Any]:
    """Counts per status and revenue from sold items only."""
    sales = list(sales)
    sold = [p for p in sales if p.get("status") == ProductStatus.SOLD.value]
    reserved = [p for p in sales if p.get("status") == ProductStatus.RESERVED.value]
    return {
        "soldCount": len(sold),
        "reservedCount": len(reserved),
        "revenue": sum(p.get("price") or 0 for p in sold),
    }
