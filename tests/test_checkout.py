import requests

from api_client import StoreClient
from cart import CART_STORAGE_KEY, Cart
from checkout import CheckoutFlow, build_order_payload, order_summary, validate_field, validate_required
from state import StoreState

FORM = {
    "email": "fan@example.com",
    "phone": "0812345678901",
    "full-name": "Kimi Fan",
    "address": "1 Pit Lane",
    "city": "Monza",
    "zip": "20900",
    "state": "",
    "country": "IT",
    "payment": "card",
    "shipping": "",
}


class RecordingClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_order(self, order, idempotency_key=None):
        self.calls.append((order, idempotency_key))
        if self.fail:
            raise requests.ConnectionError("backend down")
        return {"orderNumber": order["orderNumber"], "totalAmount": order["totalAmount"], "status": "Pending"}


def make_state(storage, products):
    state = StoreState(cart=Cart(storage, notify=lambda m, l: None), products=products)
    state.add_to_cart("a", 2)
    state.add_to_cart("b", 1)
    return state


def test_successful_checkout_clears_cart(storage, products):
    state = make_state(storage, products)
    client = RecordingClient()

    result = CheckoutFlow(state, client).submit(dict(FORM))

    assert result.ok
    assert len(client.calls) == 1
    order, key = client.calls[0]
    assert order["totalAmount"] == 55
    assert key == order["orderNumber"]
    assert state.cart.items == []
    assert storage.get_json(CART_STORAGE_KEY) == []
    assert result.confirmation.order_number == order["orderNumber"]
    assert result.confirmation.total_paid == 55
    assert result.confirmation.tracking_number.startswith("TRK")
    assert len(result.confirmation.tracking_number) == 12


def test_missing_required_field_makes_no_call(storage, products):
    state = make_state(storage, products)
    client = RecordingClient()
    form = dict(FORM, city="  ")

    result = CheckoutFlow(state, client).submit(form)

    assert not result.ok
    assert result.missing == ["city"]
    assert client.calls == []
    assert state.cart.item_count() == 3


def test_network_failure_leaves_cart(storage, products):
    state = make_state(storage, products)
    result = CheckoutFlow(state, RecordingClient(fail=True)).submit(dict(FORM))

    assert not result.ok
    assert "backend down" in result.error
    assert state.cart.item_count() == 3
    assert len(storage.get_json(CART_STORAGE_KEY)) == 2


def test_payload_defaults(storage, products):
    state = make_state(storage, products)
    payload = build_order_payload(dict(FORM), state, order_number="F1M-1")

    assert payload["orderNumber"] == "F1M-1"
    assert payload["customer"]["state"] == "NA"
    assert payload["customer"]["fullName"] == "Kimi Fan"
    assert payload["shippingMethod"] == "standard"
    assert payload["paymentMethod"] == "card"
    assert [i["productId"] for i in payload["items"]] == ["a", "b"]
    assert build_order_payload(dict(FORM), state)["orderNumber"].startswith("F1M-")


def test_field_checks_are_separate_from_submission():
    assert validate_field("email", "fan@example.com")
    assert not validate_field("email", "not-an-email")
    assert not validate_field("phone", "12345")
    assert validate_field("phone", "0812345678")
    assert not validate_field("city", "")
    # a malformed email still passes the submission gate
    assert validate_required(dict(FORM, email="nope")) == []


def test_order_summary(storage, products):
    state = make_state(storage, products)
    assert order_summary(state) == {"subtotal": 55.0, "shipping": 9.99, "tax": 4.4, "total": 69.39}

    state.add_to_cart("c", 1)
    summary = order_summary(state)
    assert summary["shipping"] == 0.0
    assert summary["subtotal"] == 175.0


def test_checkout_against_api(client, storage, products):
    client.post("/api/seed", json=products)
    store_client = StoreClient(base_url="http://testserver")
    store_client.session = client
    state = make_state(storage, store_client.list_products())

    result = CheckoutFlow(state, store_client).submit(dict(FORM))

    assert result.ok
    assert storage.get_json(CART_STORAGE_KEY) == []
    orders = store_client.list_orders()
    assert len(orders) == 1
    assert orders[0]["totalAmount"] == 55
    assert orders[0]["customer"]["state"] == "NA"
    assert orders[0]["status"] == "Pending"
