"""
Catalog transforms: filtering, sorting and stock bucketing over the in-memory
product list. Everything here is a pure function of its inputs.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

Product = Dict[str, Any]

# (low, high) inclusive; None means unbounded
PRICE_BANDS = {
    "0-50": (None, 50),
    "50-100": (50, 100),
    "100-200": (100, 200),
    "200+": (200, None),
}

SORT_OPTIONS = ("featured", "price-low", "price-high", "newest")

IN_STOCK = "in stock"
LIMITED = "limited"
LOW = "low"


@dataclass
class CatalogFilters:
    channel: List[str] = field(default_factory=list)
    team: List[str] = field(default_factory=list)
    category: List[str] = field(default_factory=list)
    price: Optional[str] = None


def find_product(products: List[Product], product_id: str) -> Optional[Product]:
    return next((p for p in products if p.get("id") == product_id), None)


def in_price_band(price: float, band: Optional[str]) -> bool:
    if not band or band not in PRICE_BANDS:
        return True
    low, high = PRICE_BANDS[band]
    if low is not None and price < low:
        return False
    if high is not None and price > high:
        return False
    return True


def filter_products(products: List[Product], filters: CatalogFilters) -> List[Product]:
    """Keep products matching every selected facet, in their original order."""
    result = []
    for p in products:
        if filters.channel and p.get("vendor_type") not in filters.channel:
            continue
        if filters.team and p.get("team") not in filters.team:
            continue
        if filters.category and p.get("category") not in filters.category:
            continue
        if not in_price_band(p.get("price") or 0, filters.price):
            continue
        result.append(p)
    return result


def _release_key(product: Product) -> datetime:
    value = product.get("release_date")
    if not value:
        return datetime.min
    try:
        return datetime.fromisoformat(str(value)).replace(tzinfo=None)
    except ValueError:
        return datetime.min


def sort_products(products: List[Product], sort_by: Optional[str] = None) -> List[Product]:
    if sort_by == "price-low":
        return sorted(products, key=lambda p: p.get("price") or 0)
    if sort_by == "price-high":
        return sorted(products, key=lambda p: p.get("price") or 0, reverse=True)
    if sort_by == "newest":
        return sorted(products, key=_release_key, reverse=True)
    return sorted(products, key=lambda p: p.get("stock_total") or 0, reverse=True)


def stock_status(stock_total: Optional[int]) -> str:
    stock = stock_total or 0
    if stock > 20:
        return IN_STOCK
    if stock > 5:
        return LIMITED
    return LOW


def badges(product: Product) -> List[str]:
    labels = ["Official" if product.get("vendor_type") == "official" else "Creator"]
    tags = product.get("badges") or []
    if "limited" in tags:
        labels.append("Limited")
    if "new" in tags:
        labels.append("New")
    return labels


def vendor_name(product: Product) -> str:
    if product.get("vendor_type") == "official":
        return product.get("team") or ""
    return product.get("creator_name") or ""


def _slug(value: str) -> str:
    return re.sub(r"\s+", "-", value.lower())


def vendor_id(product: Product) -> str:
    if product.get("vendor_type") == "official":
        return f"{_slug(product.get('team') or '')}-official"
    creator = product.get("creator_name")
    return _slug(creator) if creator else "creator"


def team_options(products: List[Product]) -> List[str]:
    seen = []
    for p in products:
        team = p.get("team")
        if team and team not in seen:
            seen.append(team)
    return seen


def related_products(products: List[Product], product: Product, limit: int = 4) -> List[Product]:
    related = [
        p for p in products
        if p.get("id") != product.get("id")
        and (p.get("team") == product.get("team") or p.get("category") == product.get("category"))
    ]
    return related[:limit]


def featured_products(products: List[Product], limit: int = 6) -> List[Product]:
    return products[:limit]
