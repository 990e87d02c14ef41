"""User and order storage for ordertrack."""

import fcntl
import json
import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Iterator

from .errors import (
    InvalidSchemaVersionError,
    OrderNotFoundError,
    StoreError,
    UserNotFoundError,
    UsernameTakenError,
)
from .models import Order, User, _utc_now
from .utils import atomic_write_json, data_dir

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
STORE_FILE = "store.json"
LOCK_FILE = ".store.lock"


def _due_date_key(order: Order) -> tuple[bool, date]:
    """Sort key: ascending due date, orders without one last."""
    return (order.due_date is None, order.due_date or date.min)


class DataStore:
    """
    Durable storage for users and orders.

    All records live in one JSON document. Every write is a locked
    read-modify-write that replaces the file atomically, so a failed call
    leaves the previous state on disk.
    """

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize DataStore.

        Args:
            config_dir: Override data directory (for testing).
        """
        self.config_dir = config_dir or data_dir()
        self.store_path = self.config_dir / STORE_FILE

    def _empty(self) -> dict[str, Any]:
        return {"schema_version": SCHEMA_VERSION, "users": [], "orders": []}

    def _load_data(self) -> dict[str, Any]:
        """Load the store document from disk."""
        if not self.store_path.exists():
            return self._empty()

        try:
            with open(self.store_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read %s: %s", self.store_path, e)
            raise StoreError(f"Failed to read data store: {e}", str(self.store_path)) from e

        if not isinstance(data, dict):
            raise StoreError("Malformed data store", str(self.store_path))

        version = data.get("schema_version", 0)
        if version != SCHEMA_VERSION:
            raise InvalidSchemaVersionError(version, SCHEMA_VERSION)

        for key in ("users", "orders"):
            records = data.get(key)
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise StoreError("Malformed data store", str(self.store_path))

        return data

    def _save_data(self, data: dict[str, Any]) -> None:
        """Save the store document atomically."""
        try:
            atomic_write_json(self.store_path, data, prefix=".store_")
        except OSError as e:
            logger.error("Failed to write %s: %s", self.store_path, e)
            raise StoreError(f"Failed to write data store: {e}", str(self.store_path)) from e

    @contextmanager
    def _lock(self) -> Iterator[None]:
        """Acquire exclusive lock on the store for read-modify-write operations."""
        lock_path = self.config_dir / LOCK_FILE
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            lock_file = open(lock_path, "w")
        except OSError as e:
            raise StoreError(f"Failed to lock data store: {e}", str(lock_path)) from e

        with lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    @contextmanager
    def _transaction(self) -> Iterator[dict[str, Any]]:
        """Yield the loaded document and save it if the block succeeds."""
        with self._lock():
            data = self._load_data()
            yield data
            self._save_data(data)

    # Users

    def insert_user(self, user: User) -> str:
        """
        Insert a new user.

        Returns:
            The user's ID.

        Raises:
            UsernameTakenError: If another user already has this username.
        """
        with self._transaction() as data:
            if any(u["username"] == user.username for u in data["users"]):
                raise UsernameTakenError(user.username)
            data["users"].append(user.to_dict())

        logger.info("Created user %s (%s)", user.username, user.id[:8])
        return user.id

    def update_user(self, user: User) -> None:
        """
        Replace a stored user.

        Raises:
            UserNotFoundError: If the user doesn't exist.
        """
        with self._transaction() as data:
            for i, existing in enumerate(data["users"]):
                if existing["id"] == user.id:
                    data["users"][i] = user.to_dict()
                    break
            else:
                raise UserNotFoundError(user.id)

    def get_user(self, user_id: str) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If the user doesn't exist.
        """
        for u in self._load_data()["users"]:
            if u["id"] == user_id:
                return User.from_dict(u)
        raise UserNotFoundError(user_id)

    def find_by_username(self, username: str) -> User | None:
        """Find a user by exact (case-sensitive) username."""
        for u in self._load_data()["users"]:
            if u["username"] == username:
                return User.from_dict(u)
        return None

    def find_by_credentials(self, username: str, password: str) -> User | None:
        """Find the user whose username and password both match exactly."""
        for u in self._load_data()["users"]:
            if u["username"] == username and u["password"] == password:
                return User.from_dict(u)
        return None

    def count_by_username(self, username: str) -> int:
        """Count users with this exact username (0 or 1)."""
        return sum(1 for u in self._load_data()["users"] if u["username"] == username)

    # Orders

    def insert_order(self, order: Order) -> str:
        """
        Insert a new order.

        Returns:
            The order's ID.

        Raises:
            UserNotFoundError: If the owning user doesn't exist.
        """
        with self._transaction() as data:
            if not any(u["id"] == order.owner_id for u in data["users"]):
                raise UserNotFoundError(order.owner_id)
            data["orders"].append(order.to_dict())

        logger.info("Created order %s for user %s", order.id[:8], order.owner_id[:8])
        return order.id

    def update_order(self, order: Order) -> None:
        """
        Replace a stored order, stamping updated_at.

        Raises:
            OrderNotFoundError: If the order doesn't exist.
        """
        stamped = replace(order, updated_at=_utc_now())
        with self._transaction() as data:
            for i, existing in enumerate(data["orders"]):
                if existing["id"] == order.id:
                    data["orders"][i] = stamped.to_dict()
                    break
            else:
                raise OrderNotFoundError(order.id)

        order.updated_at = stamped.updated_at
        logger.info("Updated order %s", order.id[:8])

    def delete_order(self, order_id: str) -> None:
        """
        Delete an order.

        Raises:
            OrderNotFoundError: If the order doesn't exist.
        """
        with self._transaction() as data:
            for i, existing in enumerate(data["orders"]):
                if existing["id"] == order_id:
                    data["orders"].pop(i)
                    break
            else:
                raise OrderNotFoundError(order_id)

        logger.info("Deleted order %s", order_id[:8])

    def get_order(self, order_id: str) -> Order:
        """
        Get an order by ID.

        Raises:
            OrderNotFoundError: If the order doesn't exist.
        """
        for o in self._load_data()["orders"]:
            if o["id"] == order_id:
                return Order.from_dict(o)
        raise OrderNotFoundError(order_id)

    def find_orders_by_owner(self, owner_id: str) -> list[Order]:
        """List an owner's orders by due date, those without one last."""
        orders = [
            Order.from_dict(o) for o in self._load_data()["orders"] if o["owner_id"] == owner_id
        ]
        orders.sort(key=_due_date_key)
        return orders
