"""
Shopping cart held on the client and persisted to local storage.

The cart stores product references only. Prices are looked up in the current
product list whenever a total is needed, so an item whose product has since
disappeared is worth nothing.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from catalog import find_product
from storage import LocalStorage

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "f1-cart"
MAX_QUANTITY = 10

Notifier = Callable[[str, str], None]


def log_notice(message: str, level: str = "info") -> None:
    logger.log(logging.ERROR if level == "error" else logging.INFO, message)


class CartItem(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    productId: str
    quantity: int = 1
    addedAt: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class Cart:
    def __init__(self, storage: LocalStorage, notify: Optional[Notifier] = None):
        self.storage = storage
        self.notify = notify or log_notice
        self.items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        raw = self.storage.get_json(CART_STORAGE_KEY, default=[])
        if not isinstance(raw, list):
            return []
        try:
            return [CartItem(**item) for item in raw]
        except (TypeError, ValidationError):
            logger.warning("Stored cart is malformed, starting with an empty cart")
            return []

    def save(self) -> None:
        self.storage.set_json(CART_STORAGE_KEY, self.to_list())

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.model_dump() for item in self.items]

    def get(self, cart_item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == cart_item_id), None)

    def add(self, product_id: str, products: List[Dict[str, Any]], quantity: int = 1) -> Optional[CartItem]:
        product = find_product(products, product_id)
        if product is None or quantity < 1:
            return None

        item = next((i for i in self.items if i.productId == product_id), None)
        if item is not None:
            # merging does not clamp; only set_quantity enforces MAX_QUANTITY
            item.quantity += quantity
        else:
            item = CartItem(productId=product_id, quantity=quantity)
            self.items.append(item)

        self.save()
        self.notify(f"{product.get('title', product_id)} added to cart!", "success")
        return item

    def set_quantity(self, cart_item_id: str, quantity: int) -> bool:
        item = self.get(cart_item_id)
        if item is None:
            return False
        quantity = int(quantity)
        if quantity < 1:
            return self.remove(cart_item_id)
        if quantity > MAX_QUANTITY:
            self.notify(f"Maximum quantity per item is {MAX_QUANTITY}", "error")
            return False
        item.quantity = quantity
        self.save()
        return True

    def remove(self, cart_item_id: str) -> bool:
        before = len(self.items)
        self.items = [item for item in self.items if item.id != cart_item_id]
        if len(self.items) == before:
            return False
        self.save()
        self.notify("Item removed from cart", "info")
        return True

    def clear(self) -> None:
        self.items = []
        self.save()

    def total(self, products: List[Dict[str, Any]]) -> float:
        total = 0.0
        for item in self.items:
            product = find_product(products, item.productId)
            if product is not None:
                total += (product.get("price") or 0) * item.quantity
        return total

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def __len__(self):
        return len(self.items)
