import json

import requests

from api_client import FALLBACK_PRODUCTS, StoreClient, load_catalog


def offline(*args, **kwargs):
    raise requests.ConnectionError("connection refused")


def test_catalog_falls_back_when_backend_is_down(monkeypatch):
    client = StoreClient(base_url="http://127.0.0.1:9")
    monkeypatch.setattr(client.session, "get", offline)

    products = load_catalog(client)

    with open(FALLBACK_PRODUCTS, encoding="utf-8") as fh:
        assert products == json.load(fh)


def test_catalog_falls_back_when_backend_is_empty(monkeypatch, tmp_path):
    fallback = tmp_path / "products.json"
    fallback.write_text(json.dumps([{"id": "local"}]))
    client = StoreClient(base_url="http://api")
    monkeypatch.setattr(client, "list_products", lambda: [])

    assert load_catalog(client, fallback_path=str(fallback)) == [{"id": "local"}]


def test_catalog_prefers_backend(monkeypatch):
    client = StoreClient(base_url="http://api")
    monkeypatch.setattr(client, "list_products", lambda: [{"id": "remote"}])
    assert load_catalog(client) == [{"id": "remote"}]


def test_client_covers_product_routes(client, tmp_path):
    store_client = StoreClient(base_url="http://testserver")
    store_client.session = client

    assert "1 products" in store_client.seed([{"id": "a", "title": "Cap"}])["message"]

    image = tmp_path / "wing.png"
    image.write_bytes(b"png")
    product_file = {"id": "wing", "title": "Front Wing Replica", "price": 500}
    created = store_client.create_product(product_file, image_path=str(image))
    assert created["images"][0].endswith("-wing.png")

    assert sorted(p["id"] for p in store_client.list_products()) == ["a", "wing"]
    assert store_client.delete_product("a") == {"message": "Product deleted successfully"}
    assert [p["id"] for p in store_client.list_products()] == ["wing"]
