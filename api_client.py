import json
import logging
import os
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"
FALLBACK_PRODUCTS = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "products.json")


class StoreClient:
    def __init__(self, base_url: Optional[str] = None, timeout: int = 10):
        self.base_url = (base_url or os.getenv("STOREFRONT_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    # Products
    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/api/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_product(self, product: Dict[str, Any], image_path: Optional[str] = None) -> Dict[str, Any]:
        data = {"productData": json.dumps(product)}
        if image_path:
            with open(image_path, "rb") as fh:
                files = {"image": (os.path.basename(image_path), fh)}
                r = self.session.post(f"{self.base_url}/api/products", data=data, files=files, timeout=self.timeout)
        else:
            r = self.session.post(f"{self.base_url}/api/products", data=data, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.delete(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def seed(self, products: List[Dict[str, Any]], orders: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        payload: Any = products if orders is None else {"products": products, "orders": orders}
        r = self.session.post(f"{self.base_url}/api/seed", json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Orders
    def create_order(self, order: Dict[str, Any], idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else {}
        r = self.session.post(f"{self.base_url}/api/orders", json=order, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def list_orders(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/api/orders", timeout=self.timeout)
        r.raise_for_status()
        return r.json()


def load_fallback_products(path: str = FALLBACK_PRODUCTS) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def load_catalog(client: StoreClient, fallback_path: str = FALLBACK_PRODUCTS) -> List[Dict[str, Any]]:
    """Fetch products from the API, or from the bundled JSON when the API is down or empty."""
    try:
        products = client.list_products()
        if not products:
            raise ValueError("backend connected but returned no products")
        logger.info("Loaded %d products from %s", len(products), client.base_url)
        return products
    except (requests.RequestException, ValueError) as e:
        logger.warning("Backend unavailable (%s), using local catalog %s", e, fallback_path)
        return load_fallback_products(fallback_path)
