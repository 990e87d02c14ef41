"""Input validation for accounts and orders.

Every predicate takes the raw string a user typed and returns a bool. None of
them raise; callers turn a failed check into a message.
"""

import math
import re

from .models import OrderFields

PHONE_PATTERN = re.compile(r"^[0-9+]{10,15}$")
DECIMAL_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

# Message shown for the first failing order field
FIELD_MESSAGES: dict[str, str] = {
    "order_number": "Order Number cannot be empty.",
    "buyer_name": "Customer Name cannot be empty.",
    "address": "Customer Address cannot be empty.",
    "phone": "Customer Phone must be 10 to 15 digits (a leading + is allowed).",
    "total": "Order Total must be a number greater than 0.",
}


def is_valid_username(username: str) -> bool:
    return bool(username) and len(username) >= MIN_USERNAME_LENGTH


def is_valid_password(password: str) -> bool:
    return bool(password) and len(password) >= MIN_PASSWORD_LENGTH


def passwords_match(password: str, confirm_password: str) -> bool:
    return password == confirm_password


def is_valid_order_number(order_number: str) -> bool:
    return bool(order_number)


def is_valid_customer_name(name: str) -> bool:
    return bool(name)


def is_valid_address(address: str) -> bool:
    return bool(address)


def is_valid_phone_number(phone: str) -> bool:
    """Check for 10-15 characters, each a digit or '+'."""
    return PHONE_PATTERN.fullmatch(phone) is not None


def parse_total(total: str | float) -> float | None:
    """
    Parse an order total.

    Returns:
        The parsed value, or None if it is not a finite number. Strings must
        be plain ASCII decimals (no underscores, no other digit scripts).
    """
    if isinstance(total, bool):
        return None
    if isinstance(total, str) and DECIMAL_PATTERN.fullmatch(total) is None:
        return None
    try:
        value = float(total)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def is_valid_order_total(total: str | float) -> bool:
    """Check that total parses as a number strictly greater than 0."""
    value = parse_total(total)
    return value is not None and value > 0


def validate_order_fields(fields: OrderFields) -> str | None:
    """
    Check order fields in display order.

    Returns:
        Name of the first failing field, or None if every field is valid.
    """
    checks = [
        ("order_number", is_valid_order_number(fields.order_number)),
        ("buyer_name", is_valid_customer_name(fields.buyer_name)),
        ("address", is_valid_address(fields.address)),
        ("phone", is_valid_phone_number(fields.phone)),
        ("total", is_valid_order_total(fields.total)),
    ]
    for name, ok in checks:
        if not ok:
            return name
    return None
