"""Command-line interface for ordertrack."""

import argparse
import getpass
import json
import sys

from . import __version__
from .errors import OrderNotFoundError, OrderTrackError
from .logging_setup import setup_logging
from .models import Order, OrderFields, User
from .services import Services, build_services
from .utils import format_order, parse_due_date


def get_services() -> Services:
    """Build services over the configured data directory."""
    return build_services()


def _read_password(value: str | None, prompt: str) -> str:
    if value is not None:
        return value
    return getpass.getpass(prompt)


def find_owned_order(services: Services, user: User, order_id: str) -> Order:
    """
    Find one of the user's orders by ID (supports partial ID matching).

    Raises:
        OrderNotFoundError: If no order (or more than one) matches.
    """
    if not order_id:
        raise OrderNotFoundError("(empty ID)")

    orders = services.orders.list_orders(user.id)
    matches = [o for o in orders if o.id.startswith(order_id)]

    if not matches:
        raise OrderNotFoundError(order_id)
    if len(matches) > 1:
        raise OrderNotFoundError(f"{order_id} (ambiguous, matches {len(matches)} orders)")

    return matches[0]


def cmd_register(args: argparse.Namespace) -> int:
    """Register a new account."""
    try:
        services = get_services()
        password = _read_password(args.password, "Password: ")
        confirm = _read_password(args.confirm, "Confirm password: ")

        user = services.accounts.register(args.username, password, confirm)

        print(f"Registered user: {user.username}")
        print("Log in with: ordertrack login " + user.username)
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_login(args: argparse.Namespace) -> int:
    """Log in."""
    try:
        services = get_services()
        password = _read_password(args.password, "Password: ")

        user = services.accounts.login(args.username, password, remember=args.remember)

        print(f"Logged in as {user.username}")
        if not args.remember:
            print("Note: without --remember the login lasts for this command only.")
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_logout(args: argparse.Namespace) -> int:
    """Log out."""
    try:
        services = get_services()
        services.accounts.logout()
        print("Logged out.")
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_whoami(args: argparse.Namespace) -> int:
    """Show the current user."""
    try:
        services = get_services()
        user = services.session.resolve_current_user()

        if user is None:
            print("Not logged in.")
            return 1

        print(user.username)
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_orders_list(args: argparse.Namespace) -> int:
    """List the current user's orders."""
    try:
        services = get_services()
        user = services.accounts.require_user()
        orders = services.orders.list_orders(user.id)

        if args.json:
            print(json.dumps([o.to_dict() for o in orders], indent=2))
            return 0

        if not orders:
            print("No orders found.")
            print("Add one with: ordertrack orders add --number ...")
            return 0

        print(f"Orders ({len(orders)}):")
        print()
        for order in orders:
            print(format_order(order, verbose=args.verbose))

        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_orders_add(args: argparse.Namespace) -> int:
    """Create an order for the current user."""
    try:
        services = get_services()
        user = services.accounts.require_user()

        fields = OrderFields(
            order_number=args.number,
            buyer_name=args.buyer,
            address=args.address,
            phone=args.phone,
            total=args.total,
            due_date=parse_due_date(args.due),
        )
        order = services.orders.create_order(user.id, fields)

        print(f"Added order: {order.id[:8]}")
        print(f"  {format_order(order)}")
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_orders_update(args: argparse.Namespace) -> int:
    """Edit one of the current user's orders. Omitted options keep their value."""
    try:
        services = get_services()
        user = services.accounts.require_user()
        existing = find_owned_order(services, user, args.order_id)

        if args.clear_due:
            due_date = None
        elif args.due is not None:
            due_date = parse_due_date(args.due)
        else:
            due_date = existing.due_date

        fields = OrderFields(
            order_number=args.number if args.number is not None else existing.order_number,
            buyer_name=args.buyer if args.buyer is not None else existing.buyer_name,
            address=args.address if args.address is not None else existing.address,
            phone=args.phone if args.phone is not None else existing.phone,
            total=args.total if args.total is not None else existing.total,
            due_date=due_date,
        )
        order = services.orders.update_order(existing.id, fields)

        print(f"Updated order: {order.id[:8]}")
        print(f"  {format_order(order)}")
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_orders_remove(args: argparse.Namespace) -> int:
    """Delete one of the current user's orders."""
    try:
        services = get_services()
        user = services.accounts.require_user()
        order = find_owned_order(services, user, args.order_id)

        services.orders.delete_order(order.id)

        print(f"Removed order: {order.id[:8]} (#{order.order_number})")
        return 0

    except OrderTrackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn

        print("Starting ordertrack API server...")
        print(f"API docs: http://{args.host}:{args.port}/docs")
        print()

        # When reload is enabled, uvicorn requires the app as an import string
        app_target = "ordertrack.api:app" if args.reload else None
        if app_target is None:
            from .api import app
            app_target = app

        uvicorn.run(
            app_target,
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=1,  # Single worker: one session, one writer
        )
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _add_order_field_options(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--number", "-n", required=required, help="Order number")
    parser.add_argument("--buyer", "-b", required=required, help="Customer name")
    parser.add_argument("--address", "-a", required=required, help="Customer address")
    parser.add_argument(
        "--phone", "-p", required=required, help="Customer phone (10-15 digits, optional leading +)"
    )
    parser.add_argument("--total", "-t", required=required, help="Order total (greater than 0)")
    parser.add_argument("--due", "-d", help="Due date (YYYY-MM-DD or MM/DD/YYYY)")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ordertrack",
        description="Track customer orders for your account.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # register
    register_parser = subparsers.add_parser("register", help="Create an account")
    register_parser.add_argument("username", help="Username (at least 3 characters)")
    register_parser.add_argument("--password", help="Password (prompted if omitted)")
    register_parser.add_argument("--confirm", help="Password confirmation (prompted if omitted)")

    # login
    login_parser = subparsers.add_parser("login", help="Log in")
    login_parser.add_argument("username", help="Username")
    login_parser.add_argument("--password", help="Password (prompted if omitted)")
    login_parser.add_argument(
        "--remember", "-r", action="store_true",
        help="Stay logged in for later commands"
    )

    # logout
    subparsers.add_parser("logout", help="Log out")

    # whoami
    subparsers.add_parser("whoami", help="Show the logged-in user")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # orders
    orders_parser = subparsers.add_parser("orders", help="Manage your orders")
    orders_subparsers = orders_parser.add_subparsers(dest="orders_command")

    orders_list_parser = orders_subparsers.add_parser("list", help="List orders by due date")
    orders_list_parser.add_argument("--json", action="store_true", help="Output as JSON")
    orders_list_parser.add_argument("--verbose", "-v", action="store_true", help="Show details")

    orders_add_parser = orders_subparsers.add_parser("add", help="Add an order")
    _add_order_field_options(orders_add_parser, required=True)

    orders_update_parser = orders_subparsers.add_parser("update", help="Edit an order")
    orders_update_parser.add_argument("order_id", help="Order ID (or prefix)")
    _add_order_field_options(orders_update_parser, required=False)
    orders_update_parser.add_argument(
        "--clear-due", action="store_true", help="Remove the due date"
    )

    orders_remove_parser = orders_subparsers.add_parser("remove", help="Delete an order")
    orders_remove_parser.add_argument("order_id", help="Order ID (or prefix)")

    return parser


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    setup_logging()

    # Handle orders subcommands
    if args.command == "orders":
        if not args.orders_command:
            parser.parse_args(["orders", "--help"])
            return 0
        orders_commands = {
            "list": cmd_orders_list,
            "add": cmd_orders_add,
            "update": cmd_orders_update,
            "remove": cmd_orders_remove,
        }
        return orders_commands[args.orders_command](args)

    commands = {
        "register": cmd_register,
        "login": cmd_login,
        "logout": cmd_logout,
        "whoami": cmd_whoami,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
