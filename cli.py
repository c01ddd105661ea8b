#!/usr/bin/env python
"""Terminal storefront: browse the catalog, manage the cart and check out."""
import argparse
import json
import logging
import sys

import requests
from rich.prompt import Prompt

import render
from api_client import StoreClient, load_fallback_products
from catalog import PRICE_BANDS, SORT_OPTIONS, CatalogFilters, filter_products, sort_products
from checkout import REQUIRED_FIELDS, CheckoutFlow, validate_field
from state import load_state
from storage import LocalStorage

CHECKOUT_FIELDS = ("email", "phone", "full-name", "address", "city", "zip", "state", "country", "payment", "shipping")
PAYMENT_METHODS = ["card", "paypal", "crypto"]
SHIPPING_METHODS = ["standard", "express"]


def cmd_catalog(args, state, client):
    filters = CatalogFilters(
        channel=args.channel or [],
        team=args.team or [],
        category=args.category or [],
        price=args.price,
    )
    products = state.products
    if args.sort:
        products = sort_products(products, args.sort)
    render.show_products(filter_products(products, filters))


def cmd_product(args, state, client):
    product = state.product(args.product_id)
    if product is None:
        render.show_notice(f"Product {args.product_id} not found", "error")
        return 1
    render.show_product_detail(product, state.products)


def cmd_add(args, state, client):
    if args.quantity < 1:
        render.show_notice("Quantity must be at least 1", "error")
        return 1
    if state.add_to_cart(args.product_id, args.quantity) is None:
        render.show_notice(f"Product {args.product_id} not found", "error")
        return 1
    render.show_cart(state)


def cmd_set(args, state, client):
    state.cart.set_quantity(args.cart_item_id, args.quantity)
    render.show_cart(state)


def cmd_remove(args, state, client):
    state.cart.remove(args.cart_item_id)
    render.show_cart(state)


def cmd_cart(args, state, client):
    render.show_cart(state)


def _ask(name: str) -> str:
    if name == "payment":
        return Prompt.ask("Payment method", choices=PAYMENT_METHODS, default=PAYMENT_METHODS[0])
    if name == "shipping":
        return Prompt.ask("Shipping method", choices=SHIPPING_METHODS, default=SHIPPING_METHODS[0])
    label = name.replace("-", " ").title() + ("" if name in REQUIRED_FIELDS else " (optional)")
    value = Prompt.ask(label, default="", show_default=False)
    if value and not validate_field(name, value):
        render.console.print(f"[yellow]{label} looks invalid[/yellow]")
    return value


def cmd_checkout(args, state, client):
    if not state.cart.items:
        render.show_notice("Your cart is empty", "info")
        return 1
    render.show_cart(state)
    form = {name: _ask(name) for name in CHECKOUT_FIELDS}
    with render.console.status("Placing order..."):
        result = CheckoutFlow(state, client).submit(form)
    if not result.ok:
        return 1
    render.show_confirmation(result.confirmation)


def cmd_orders(args, state, client):
    render.show_orders(client.list_orders())


def cmd_seed(args, state, client):
    products = load_fallback_products(args.file) if args.file else load_fallback_products()
    render.show_notice(client.seed(products)["message"], "success")


def cmd_create(args, state, client):
    with open(args.file, "r", encoding="utf-8") as fh:
        product = json.load(fh)
    created = client.create_product(product, image_path=args.image)
    render.show_notice(f"Created product {created.get('id')}", "success")


def cmd_delete(args, state, client):
    render.show_notice(client.delete_product(args.product_id)["message"], "success")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="f1-store", description=__doc__)
    parser.add_argument("--api", help="Storefront API base URL (default: $STOREFRONT_API_URL)")
    parser.add_argument("--storage", help="Local storage file (default: $STOREFRONT_STORAGE)")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("catalog", help="List products")
    p.add_argument("--channel", action="append", choices=["official", "creator"])
    p.add_argument("--team", action="append")
    p.add_argument("--category", action="append")
    p.add_argument("--price", choices=list(PRICE_BANDS))
    p.add_argument("--sort", choices=SORT_OPTIONS)
    p.set_defaults(func=cmd_catalog)

    p = sub.add_parser("product", help="Show product details")
    p.add_argument("product_id")
    p.set_defaults(func=cmd_product)

    p = sub.add_parser("add", help="Add a product to the cart")
    p.add_argument("product_id")
    p.add_argument("quantity", nargs="?", type=int, default=1)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("set", help="Change a cart item's quantity")
    p.add_argument("cart_item_id")
    p.add_argument("quantity", type=int)
    p.set_defaults(func=cmd_set)

    p = sub.add_parser("remove", help="Remove a cart item")
    p.add_argument("cart_item_id")
    p.set_defaults(func=cmd_remove)

    sub.add_parser("cart", help="Show the cart").set_defaults(func=cmd_cart)
    sub.add_parser("checkout", help="Place an order for the cart").set_defaults(func=cmd_checkout)
    sub.add_parser("orders", help="List orders").set_defaults(func=cmd_orders)

    p = sub.add_parser("seed", help="Replace the catalog with a JSON file of products")
    p.add_argument("file", nargs="?")
    p.set_defaults(func=cmd_seed)

    p = sub.add_parser("create", help="Create a product from a JSON file")
    p.add_argument("file")
    p.add_argument("--image")
    p.set_defaults(func=cmd_create)

    p = sub.add_parser("delete", help="Delete a product by id")
    p.add_argument("product_id")
    p.set_defaults(func=cmd_delete)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    client = StoreClient(base_url=args.api)
    state = load_state(client, LocalStorage(args.storage), notify=render.show_notice)
    try:
        return args.func(args, state, client) or 0
    except requests.RequestException as e:
        render.show_notice(f"Request failed: {e}", "error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
