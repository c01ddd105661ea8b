"""
Checkout: form validation, order payload assembly and submission.

Each call to CheckoutFlow.submit generates a fresh order number, so submitting
again after a failure creates a separate order. Nothing is retried.
"""
import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from pydantic import EmailStr, TypeAdapter, ValidationError

from api_client import StoreClient
from state import StoreState

logger = logging.getLogger(__name__)

ORDER_PREFIX = "F1M-"
TRACKING_PREFIX = "TRK"
REQUIRED_FIELDS = ("email", "phone", "full-name", "address", "city", "zip", "country", "payment")
DEFAULT_SHIPPING = "standard"
MISSING_STATE = "NA"

FREE_SHIPPING_OVER = 100
SHIPPING_FEE = 9.99
TAX_RATE = 0.08

_email_adapter = TypeAdapter(EmailStr)


def validate_field(name: str, value: Optional[str]) -> bool:
    """Field-level check used while filling in the form; submission only checks presence."""
    value = (value or "").strip()
    if not value:
        return False
    if name == "email":
        try:
            _email_adapter.validate_python(value)
        except ValidationError:
            return False
    elif name == "phone":
        return len(value) >= 10
    return True


def validate_required(form: Dict[str, str]) -> List[str]:
    return [name for name in REQUIRED_FIELDS if not (form.get(name) or "").strip()]


def generate_order_number() -> str:
    return f"{ORDER_PREFIX}{int(time.time() * 1000)}"


def generate_tracking_number() -> str:
    return TRACKING_PREFIX + "".join(random.choices(string.ascii_uppercase + string.digits, k=9))


def build_order_payload(form: Dict[str, str], state: StoreState, order_number: Optional[str] = None) -> Dict[str, Any]:
    return {
        "orderNumber": order_number or generate_order_number(),
        "customer": {
            "email": form.get("email", ""),
            "phone": form.get("phone", ""),
            "fullName": form.get("full-name", ""),
            "address": form.get("address", ""),
            "city": form.get("city", ""),
            "zip": form.get("zip", ""),
            "state": form.get("state") or MISSING_STATE,
            "country": form.get("country", ""),
        },
        "items": state.cart.to_list(),
        "paymentMethod": form.get("payment"),
        "shippingMethod": form.get("shipping") or DEFAULT_SHIPPING,
        "totalAmount": state.cart_total(),
    }


def order_summary(state: StoreState) -> Dict[str, float]:
    subtotal = state.cart_total()
    shipping = 0.0 if subtotal > FREE_SHIPPING_OVER else SHIPPING_FEE
    tax = subtotal * TAX_RATE
    return {
        "subtotal": round(subtotal, 2),
        "shipping": shipping,
        "tax": round(tax, 2),
        "total": round(subtotal + shipping + tax, 2),
    }


@dataclass
class Confirmation:
    order_number: str
    tracking_number: str
    total_paid: float


@dataclass
class CheckoutResult:
    ok: bool
    confirmation: Optional[Confirmation] = None
    missing: List[str] = field(default_factory=list)
    error: Optional[str] = None


class CheckoutFlow:
    def __init__(self, state: StoreState, client: StoreClient):
        self.state = state
        self.client = client

    def submit(self, form: Dict[str, str]) -> CheckoutResult:
        missing = validate_required(form)
        if missing:
            self.state.cart.notify("Please fill in all required fields correctly", "error")
            return CheckoutResult(ok=False, missing=missing)

        payload = build_order_payload(form, self.state)
        try:
            # the order number doubles as the idempotency key for this one submission
            result = self.client.create_order(payload, idempotency_key=payload["orderNumber"])
        except requests.RequestException as e:
            logger.error("Checkout failed for %s: %s", payload["orderNumber"], e)
            self.state.cart.notify("Failed to process the order. Make sure the backend server is running.", "error")
            return CheckoutResult(ok=False, error=str(e))

        self.state.cart.clear()
        confirmation = Confirmation(
            order_number=result.get("orderNumber", payload["orderNumber"]),
            tracking_number=generate_tracking_number(),
            total_paid=result.get("totalAmount", payload["totalAmount"]),
        )
        logger.info("Order %s placed", confirmation.order_number)
        return CheckoutResult(ok=True, confirmation=confirmation)
