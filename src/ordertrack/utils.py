"""Utility functions for ordertrack."""

import json
import os
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .errors import ValidationError
from .models import Order

# Centralized storage location
# Can be overridden via ORDERTRACK_DATA_DIR environment variable
_default_data_dir = Path(__file__).parent.parent.parent / "data"


def data_dir() -> Path:
    """Return the configured data directory."""
    return Path(os.environ.get("ORDERTRACK_DATA_DIR", _default_data_dir))


def atomic_write_json(path: Path, data: Any, prefix: str) -> None:
    """
    Write JSON to path atomically.

    Uses write-to-temp-then-rename, so readers see either the old file or the
    new one and a failed write leaves the old file untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=prefix, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")  # trailing newline
        os.replace(temp_path, path)
    except Exception:
        # Clean up temp file on failure (ignore errors if already removed)
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def format_order(order: Order, verbose: bool = False) -> str:
    """Format an order for display."""
    due = order.due_date.strftime("%m/%d/%Y") if order.due_date else "no due date"
    line = f"{order.id[:8]}  #{order.order_number}  {due}  {order.buyer_name}  ${order.total:.2f}"

    if verbose:
        line += f"\n         Address: {order.address}"
        line += f"\n         Phone: {order.phone}"
        line += f"\n         Updated: {order.updated_at}"

    return line


DUE_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


def parse_due_date(value: str | None) -> date | None:
    """
    Parse a due date in YYYY-MM-DD or MM/DD/YYYY form.

    An empty value means no due date.

    Raises:
        ValidationError: If the value matches neither format.
    """
    if value is None or not value.strip():
        return None

    for fmt in DUE_DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue

    raise ValidationError("due_date", f"Invalid due date: {value} (expected YYYY-MM-DD)")
