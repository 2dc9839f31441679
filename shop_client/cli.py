"""
Boutique en ligne de commande.

Usage:
    python -m shop_client products
    python -m shop_client browse
    python -m shop_client --backend-url http://localhost:5000 browse
"""
import logging
from typing import Optional

import click

from .api import StorefrontAPI
from .cart import format_price
from .checkout import CheckoutFlow, CheckoutState

HELP = {
    CheckoutState.BROWSING: "add <id> | cart | checkout | quit",
    CheckoutState.REVIEWING: "+ <id> | - <id> | qty <id> <n> | remove <id> | pay | back | quit",
}


def _alert(message: str) -> None:
    click.secho(message, fg="yellow", err=True)


def print_products(flow: CheckoutFlow) -> None:
    if not flow.products:
        click.echo("Loading products or no products available...")
        return
    for p in flow.products:
        click.echo(f"  {p.id:<12} {p.name:<28} ${format_price(p.price)}")


def print_cart(flow: CheckoutFlow) -> None:
    cart = flow.cart
    click.echo(f"Cart ({cart.item_count()} items) - Total: ${format_price(cart.total())}")
    for it in cart.items:
        click.echo(f"  {it.id:<12} {it.name} (x{it.quantity})  ${format_price(it.subtotal)}")


def _handle(flow: CheckoutFlow, command: str, args: list) -> bool:
    """Exécute une commande; retourne False pour quitter."""
    if command in ("quit", "exit", "q"):
        return False
    if command == "cart":
        print_cart(flow)
    elif command == "products":
        print_products(flow)
    elif command in ("add", "+") and args:
        product = flow.find_product(args[0])
        if product is None:
            _alert(f"Unknown product {args[0]}")
        else:
            flow.add(product)
            print_cart(flow)
    elif command == "-" and args:
        item = flow.cart.get(args[0])
        if item is not None:
            flow.set_quantity(item.id, item.quantity - 1)
        print_cart(flow)
    elif command == "qty" and len(args) == 2 and args[1].lstrip("-").isdigit():
        flow.set_quantity(args[0], int(args[1]))
        print_cart(flow)
    elif command == "remove" and args:
        flow.remove(args[0])
        print_cart(flow)
    elif command == "checkout":
        if flow.proceed_to_checkout():
            click.echo("Your Shopping Cart")
            print_cart(flow)
    elif command == "back":
        flow.back_to_shopping()
        print_products(flow)
    elif command == "pay":
        session = flow.pay()
        if session is not None:
            click.echo(f"Redirected to Stripe Checkout ({session.id}).")
            return False
    else:
        _alert(f"Commands: {HELP[flow.state]}")
    return True


@click.group()
@click.option("--backend-url", envvar="SHOP_BACKEND_URL", default=None, help="Storefront backend base URL.")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP calls.")
@click.pass_context
def cli(ctx: click.Context, backend_url: Optional[str], verbose: bool) -> None:
    """Storefront shop client."""
    logging.basicConfig(level=logging.INFO if verbose else logging.ERROR)
    ctx.obj = StorefrontAPI(backend_url)
    ctx.call_on_close(ctx.obj.close)


@cli.command()
@click.pass_obj
def products(api: StorefrontAPI) -> None:
    """List the catalogue."""
    flow = CheckoutFlow(api, notify=_alert)
    flow.load_products()
    print_products(flow)


@cli.command()
@click.pass_obj
def browse(api: StorefrontAPI) -> None:
    """Interactive shop: build a cart then pay on Stripe Checkout."""
    flow = CheckoutFlow(api, notify=_alert)
    flow.load_products()
    print_products(flow)
    click.echo(f"Commands: {HELP[flow.state]}")
    while True:
        line = click.prompt(f"[{flow.state.value}]", default="", show_default=False).strip()
        if not line:
            continue
        command, *args = line.split()
        if not _handle(flow, command.lower(), args):
            break


def main() -> None:
    cli(prog_name="shop")
