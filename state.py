from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from api_client import StoreClient, load_catalog
from cart import Cart, Notifier
from catalog import find_product
from storage import LocalStorage


@dataclass
class StoreState:
    """Everything the storefront renders from: the loaded catalog and the cart."""
    cart: Cart
    products: List[Dict[str, Any]] = field(default_factory=list)

    def product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return find_product(self.products, product_id)

    def cart_total(self) -> float:
        return self.cart.total(self.products)

    def add_to_cart(self, product_id: str, quantity: int = 1):
        return self.cart.add(product_id, self.products, quantity)


def load_state(client: StoreClient, storage: Optional[LocalStorage] = None, notify: Optional[Notifier] = None) -> StoreState:
    cart = Cart(storage or LocalStorage(), notify=notify)
    return StoreState(cart=cart, products=load_catalog(client))
