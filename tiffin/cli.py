"""
TiffinBuddy Command Line Storefront

Drives the storefront views from a terminal. The session persists between
invocations (see SESSION_FILE); the cart lives for a single ``order``
command.

Usage:
    tiffin register "Asha Rao" asha@tiffinbuddy.in
    tiffin login asha@tiffinbuddy.in
    tiffin menu
    tiffin order <food-id>:2 <food-id>
    tiffin orders
    tiffin admin foods
    tiffin admin add --name "Veg Thali" --description "..." --price 150 --category Thali
    tiffin admin delete <food-id>
    tiffin mock-api
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional, Sequence

import uvicorn

from tiffin import __version__
from tiffin.context import AppContext, build_context
from tiffin.core.config import get_settings, setup_logging
from tiffin.mock_api import create_app
from tiffin.navigation import ADMIN, HOME, LOGIN, ORDERS
from tiffin.rendering import render
from tiffin.schemas import Role
from tiffin.services.location import FixedLocationProvider
from tiffin.views import AdminView, Header, HomeView, LoginView, OrdersView

logger = logging.getLogger(__name__)


def _print(text: str) -> None:
    print(text, end="" if text.endswith("\n") else "\n")


def _render_header(ctx: AppContext) -> None:
    header = Header(ctx)
    _print(render(
        "header.txt.j2",
        user=ctx.auth.user,
        show_cart=header.show_cart,
        cart_count=header.cart_count,
    ))


def _require(ctx: AppContext, route: str) -> bool:
    """Apply the route guard; explain where the user was sent instead."""
    landed = ctx.navigator.navigate(route)
    if landed == route:
        return True
    if landed == LOGIN:
        print("Please sign in first: tiffin login <email>")
    else:
        print("This section is only available to admins.")
    return False


def _password(args: argparse.Namespace) -> str:
    return args.password if args.password is not None else getpass.getpass("Password: ")


def _parse_selection(token: str) -> tuple[str, int]:
    """``FOOD_ID`` or ``FOOD_ID:QTY``."""
    food_id, _, qty = token.partition(":")
    try:
        quantity = int(qty) if qty else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid quantity in {token!r}")
    if quantity <= 0:
        raise argparse.ArgumentTypeError(f"Quantity must be positive in {token!r}")
    return food_id, quantity


# =============================================================================
# ACCOUNT COMMANDS
# =============================================================================

async def cmd_login(ctx: AppContext, args: argparse.Namespace) -> int:
    ok = await LoginView(ctx).login(args.email, _password(args))
    if ok:
        _render_header(ctx)
    return 0 if ok else 1


async def cmd_register(ctx: AppContext, args: argparse.Namespace) -> int:
    role = Role.ADMIN if args.admin else Role.CUSTOMER
    ok = await LoginView(ctx).register(args.name, args.email, _password(args), role)
    if ok:
        _render_header(ctx)
    return 0 if ok else 1


async def cmd_logout(ctx: AppContext, args: argparse.Namespace) -> int:
    Header(ctx).logout()
    ctx.notifier.notify("Signed out", "See you soon!")
    return 0


async def cmd_whoami(ctx: AppContext, args: argparse.Namespace) -> int:
    _render_header(ctx)
    return 0 if ctx.auth.is_authenticated else 1


# =============================================================================
# CUSTOMER COMMANDS
# =============================================================================

async def cmd_menu(ctx: AppContext, args: argparse.Namespace) -> int:
    if not _require(ctx, HOME):
        return 1
    view = HomeView(ctx)
    await view.load()
    _render_header(ctx)
    _print(render("menu.txt.j2", foods=view.foods, cart_quantities={}))
    return 0


async def cmd_order(ctx: AppContext, args: argparse.Namespace) -> int:
    if not _require(ctx, HOME):
        return 1

    view = HomeView(ctx)
    await view.load()
    if not view.foods:
        return 1

    for food_id, quantity in args.items:
        food = view.find(food_id)
        if food is None:
            ctx.notifier.error("Unknown item", f"{food_id} is not on today's menu")
            return 1
        view.add_to_cart(food, quantity)

    _print(render(
        "cart.txt.j2",
        lines=view.cart_lines,
        total_amount=view.total_amount,
        total_items=view.total_items,
        min_items=ctx.settings.min_order_items,
    ))

    order = await view.place_order()
    if order is None:
        return 1

    _print(render("orders.txt.j2", orders=[order]))
    return 0


async def cmd_orders(ctx: AppContext, args: argparse.Namespace) -> int:
    if not _require(ctx, ORDERS):
        return 1
    view = OrdersView(ctx)
    if not await view.load():
        return 1
    _print(render("orders.txt.j2", orders=view.orders))
    return 0


# =============================================================================
# ADMIN COMMANDS
# =============================================================================

async def cmd_admin(ctx: AppContext, args: argparse.Namespace) -> int:
    if not _require(ctx, ADMIN):
        return 1

    view = AdminView(ctx)
    if not await view.load():
        return 1

    if args.admin_command == "foods":
        _print(render("admin_foods.txt.j2", foods=view.foods))
        return 0

    if args.admin_command == "orders":
        _print(render("admin_orders.txt.j2", orders=view.orders))
        return 0

    if args.admin_command == "add":
        view.start_create()
        view.form.name = args.name
        view.form.description = args.description
        view.form.price = args.price
        view.form.category = args.category
        view.form.image = args.image or ""
        view.form.available = args.available
        return 0 if await view.submit() else 1

    food = view.find(args.food_id)
    if food is None:
        ctx.notifier.error("Not found", f"No food item with id {args.food_id}")
        return 1

    if args.admin_command == "edit":
        view.start_edit(food)
        for field in ("name", "description", "price", "category", "image"):
            value = getattr(args, field)
            if value is not None:
                setattr(view.form, field, value)
        if args.available is not None:
            view.form.available = args.available
        return 0 if await view.submit() else 1

    if args.admin_command == "delete":
        def confirm(prompt: str) -> bool:
            if args.yes:
                return True
            return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")

        return 0 if await view.delete(food, confirm) else 1

    return 2


# =============================================================================
# DEVELOPMENT API
# =============================================================================

def cmd_mock_api(args: argparse.Namespace) -> int:
    settings = get_settings()
    app = create_app(settings, seed=not args.no_seed)
    uvicorn.run(
        app,
        host=args.host or settings.mock_api_host,
        port=args.port or settings.mock_api_port,
        log_level="debug" if settings.debug else "info",
    )
    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================

COMMANDS = {
    "login": cmd_login,
    "register": cmd_register,
    "logout": cmd_logout,
    "whoami": cmd_whoami,
    "menu": cmd_menu,
    "order": cmd_order,
    "orders": cmd_orders,
    "admin": cmd_admin,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tiffin", description="TiffinBuddy storefront")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show log output")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in")
    p.add_argument("email")
    p.add_argument("--password", help="Prompted for when omitted")

    p = sub.add_parser("register", help="Create an account and sign in")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--password", help="Prompted for when omitted")
    p.add_argument("--admin", action="store_true", help="Register an admin account")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("whoami", help="Show the signed-in user")
    sub.add_parser("menu", help="Show today's menu")

    p = sub.add_parser("order", help="Order items: FOOD_ID[:QTY] ...")
    p.add_argument("items", nargs="+", type=_parse_selection, metavar="FOOD_ID[:QTY]")
    p.add_argument("--lat", type=float, help="Deliver to this latitude instead of the detected one")
    p.add_argument("--lng", type=float, help="Deliver to this longitude instead of the detected one")

    sub.add_parser("orders", help="Show your orders")

    admin = sub.add_parser("admin", help="Catalog administration")
    admin_sub = admin.add_subparsers(dest="admin_command", required=True)
    admin_sub.add_parser("foods", help="List all food items")
    admin_sub.add_parser("orders", help="List all orders")

    p = admin_sub.add_parser("add", help="Add a food item")
    p.add_argument("--name", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--price", required=True)
    p.add_argument("--category", required=True)
    p.add_argument("--image")
    p.add_argument("--unavailable", dest="available", action="store_false")

    p = admin_sub.add_parser("edit", help="Edit a food item")
    p.add_argument("food_id")
    p.add_argument("--name")
    p.add_argument("--description")
    p.add_argument("--price")
    p.add_argument("--category")
    p.add_argument("--image")
    availability = p.add_mutually_exclusive_group()
    availability.add_argument("--available", dest="available", action="store_true", default=None)
    availability.add_argument("--unavailable", dest="available", action="store_false")

    p = admin_sub.add_parser("delete", help="Delete a food item")
    p.add_argument("food_id")
    p.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")

    p = sub.add_parser("mock-api", help="Run the in-memory development API")
    p.add_argument("--host")
    p.add_argument("--port", type=int)
    p.add_argument("--no-seed", action="store_true", help="Start without the demo admin and menu")

    return parser


async def run(args: argparse.Namespace, ctx: Optional[AppContext] = None) -> int:
    """Execute a parsed command against ``ctx`` (built from settings if omitted)."""
    if ctx is None:
        location = None
        if getattr(args, "lat", None) is not None and getattr(args, "lng", None) is not None:
            settings = get_settings()
            location = FixedLocationProvider(
                args.lat,
                args.lng,
                timeout=settings.geolocation_timeout_seconds,
                maximum_age=settings.geolocation_maximum_age_seconds,
            )
        ctx = build_context(location=location)

    async with ctx:
        return await COMMANDS[args.command](ctx, args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "order" and (args.lat is None) != (args.lng is None):
        parser.error("--lat and --lng must be given together")

    setup_logging(logging.INFO if args.verbose else logging.WARNING)

    if args.command == "mock-api":
        return cmd_mock_api(args)

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nCancelled.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
