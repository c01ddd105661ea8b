from typing import Any, Dict, List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from catalog import IN_STOCK, LIMITED, badges, related_products, stock_status, vendor_name
from checkout import Confirmation, order_summary
from state import StoreState

console = Console()

STOCK_STYLES = {IN_STOCK: "green", LIMITED: "yellow"}
NOTICE_STYLES = {"success": "green", "error": "red", "info": "blue"}


def format_price(price: Any) -> str:
    return f"${(price or 0):,.2f}"


def show_notice(message: str, level: str = "info") -> None:
    console.print(Panel.fit(message, border_style=NOTICE_STYLES.get(level, "blue")))


def show_products(products: List[Dict[str, Any]], title: str = "🏎️  Catalog") -> None:
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=f"{title} ({len(products)})",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True,
    )
    table.add_column("ID", style="dim", width=18)
    table.add_column("Title", style="bold", width=32)
    table.add_column("Vendor", width=16)
    table.add_column("Badges", width=18)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", width=10)

    for p in products:
        status = stock_status(p.get("stock_total"))
        table.add_row(
            p.get("id", "N/A"),
            p.get("title", "N/A"),
            vendor_name(p),
            ", ".join(badges(p)),
            format_price(p.get("price")),
            f"[{STOCK_STYLES.get(status, 'red')}]{status}[/]",
        )
    console.print(table)


def show_product_detail(product: Dict[str, Any], products: List[Dict[str, Any]]) -> None:
    status = stock_status(product.get("stock_total"))
    body = Text()
    body.append(f"{vendor_name(product)}\n", style="italic")
    body.append(f"{format_price(product.get('price'))} {product.get('currency') or ''}\n", style="bold green")
    body.append(f"{status}\n", style=STOCK_STYLES.get(status, "red"))
    body.append(f"SKU {product.get('sku') or '-'} · {', '.join(badges(product))}\n\n", style="dim")
    body.append(product.get("description") or "")

    variants = product.get("variants") or []
    if variants:
        body.append("\n\nSizes: ")
        body.append(", ".join(f"{v.get('label')} ({v.get('stock', 0)})" for v in variants))

    console.print(Panel(body, title=product.get("title", "Product"), border_style="magenta"))

    related = related_products(products, product)
    if related:
        show_products(related, title="You may also like")


def show_cart(state: StoreState) -> None:
    if not state.cart.items:
        console.print(Panel("Your cart is empty 🛍️", title="🛒 Cart", style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("Cart ID", style="dim", width=34)
    table.add_column("Product", style="bold", width=30)
    table.add_column("Qty", justify="right", width=5)
    table.add_column("Line total", justify="right", width=12)

    for item in state.cart.items:
        product = state.product(item.productId)
        if product is None:
            # product was removed from the catalog; keep the row blank
            table.add_row(item.id, "", str(item.quantity), "")
            continue
        table.add_row(item.id, product.get("title", ""), str(item.quantity), format_price((product.get("price") or 0) * item.quantity))

    summary = order_summary(state)
    title = Text()
    title.append(f"🛒 Cart ({state.cart.item_count()} items) - ", style="bold")
    title.append(f"Total: {format_price(summary['total'])}", style="bold green")
    console.print(Panel(table, title=title, border_style="blue"))
    shipping = "Free" if summary["shipping"] == 0 else format_price(summary["shipping"])
    console.print(
        f"Subtotal {format_price(summary['subtotal'])} · Shipping {shipping} · Tax {format_price(summary['tax'])}"
    )


def show_confirmation(confirmation: Confirmation) -> None:
    console.print(
        Panel.fit(
            f"[bold]Order number:[/bold] {confirmation.order_number}\n"
            f"[bold]Tracking:[/bold] {confirmation.tracking_number}\n"
            f"[bold]Total paid:[/bold] [green]{format_price(confirmation.total_paid)}[/green]",
            title="✅ Order placed",
            border_style="green",
        )
    )


def show_orders(orders: List[Dict[str, Any]]) -> None:
    if not orders:
        console.print("[italic yellow]No orders found[/italic yellow]")
        return

    table = Table(title="📋 Orders", box=box.ROUNDED, header_style="bold yellow", title_style="bold yellow")
    table.add_column("Order", style="dim", width=18)
    table.add_column("Customer", width=24)
    table.add_column("Items", justify="right", width=6)
    table.add_column("Status", width=10)
    table.add_column("Total", justify="right", width=12)
    table.add_column("Date", width=26)

    for order in orders:
        customer = order.get("customer") or {}
        items = order.get("items") or []
        table.add_row(
            order.get("orderNumber") or "-",
            customer.get("fullName") or customer.get("email") or "-",
            str(sum(i.get("quantity", 1) for i in items if isinstance(i, dict))),
            order.get("status", "-"),
            format_price(order.get("totalAmount")),
            order.get("orderDate", "-"),
        )
    console.print(table)
