"""Data models for ordertrack."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any
import uuid


def _utc_now() -> str:
    """Return current UTC time as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _generate_id() -> str:
    """Generate a new record ID."""
    return str(uuid.uuid4())


def _date_to_str(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _date_from_str(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


@dataclass
class User:
    """A registered account. Owns zero or more orders."""

    id: str
    username: str
    password: str  # plain text, see DESIGN.md
    remember_me: bool = False
    created_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "remember_me": self.remember_me,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            username=data["username"],
            password=data["password"],
            remember_me=data.get("remember_me", False),
            created_at=data.get("created_at", ""),
        )

    @classmethod
    def create(cls, username: str, password: str) -> "User":
        """Create a new user with generated ID and timestamp."""
        return cls(
            id=_generate_id(),
            username=username,
            password=password,
            remember_me=False,
            created_at=_utc_now(),
        )


@dataclass
class Order:
    """A customer order belonging to exactly one user."""

    id: str
    owner_id: str
    order_number: str
    buyer_name: str
    address: str
    phone: str
    total: float
    due_date: date | None = None
    created_at: str = field(default_factory=_utc_now)
    updated_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "order_number": self.order_number,
            "due_date": _date_to_str(self.due_date),
            "buyer_name": self.buyer_name,
            "address": self.address,
            "phone": self.phone,
            "total": self.total,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            order_number=data["order_number"],
            due_date=_date_from_str(data.get("due_date")),
            buyer_name=data["buyer_name"],
            address=data["address"],
            phone=data["phone"],
            total=float(data["total"]),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )

    @classmethod
    def create(
        cls,
        owner_id: str,
        order_number: str,
        buyer_name: str,
        address: str,
        phone: str,
        total: float,
        due_date: date | None = None,
    ) -> "Order":
        """Create a new order with generated ID and timestamps."""
        now = _utc_now()
        return cls(
            id=_generate_id(),
            owner_id=owner_id,
            order_number=order_number,
            buyer_name=buyer_name,
            address=address,
            phone=phone,
            total=total,
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )


@dataclass
class OrderFields:
    """Raw, unvalidated input for creating or updating an order."""

    order_number: str
    buyer_name: str
    address: str
    phone: str
    total: str | float
    due_date: date | None = None

    def normalized(self) -> "OrderFields":
        """Return a copy with surrounding whitespace stripped from text fields."""
        total = self.total.strip() if isinstance(self.total, str) else self.total
        return OrderFields(
            order_number=self.order_number.strip(),
            buyer_name=self.buyer_name.strip(),
            address=self.address.strip(),
            phone=self.phone.strip(),
            total=total,
            due_date=self.due_date,
        )


@dataclass
class Preferences:
    """Persisted session flags that survive process restarts."""

    is_logged_in: bool = False
    remembered_username: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"is_logged_in": self.is_logged_in}
        if self.remembered_username is not None:
            result["remembered_username"] = self.remembered_username
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Preferences":
        return cls(
            is_logged_in=bool(data.get("is_logged_in", False)),
            remembered_username=data.get("remembered_username"),
        )
