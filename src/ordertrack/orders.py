"""Owner-scoped order operations for ordertrack."""

import logging

from .data_store import DataStore
from .errors import ValidationError
from .models import Order, OrderFields
from .validator import FIELD_MESSAGES, parse_total, validate_order_fields

logger = logging.getLogger(__name__)


class OrderRepository:
    """Validates order input and reads/writes orders for their owner."""

    def __init__(self, store: DataStore):
        self.store = store

    def _validated(self, fields: OrderFields) -> OrderFields:
        """
        Normalize and validate fields.

        Raises:
            ValidationError: For the first failing field, in display order.
        """
        fields = fields.normalized()
        failed = validate_order_fields(fields)
        if failed is not None:
            raise ValidationError(failed, FIELD_MESSAGES[failed])
        return fields

    def create_order(self, owner_id: str, fields: OrderFields) -> Order:
        """
        Create an order owned by owner_id.

        Raises:
            ValidationError: If any field is invalid. Nothing is written.
        """
        fields = self._validated(fields)
        order = Order.create(
            owner_id=owner_id,
            order_number=fields.order_number,
            buyer_name=fields.buyer_name,
            address=fields.address,
            phone=fields.phone,
            total=parse_total(fields.total),
            due_date=fields.due_date,
        )
        self.store.insert_order(order)
        return order

    def update_order(self, order_id: str, fields: OrderFields) -> Order:
        """
        Overwrite every editable field of an order. id and owner are kept.

        Raises:
            ValidationError: If any field is invalid. Nothing is written.
            OrderNotFoundError: If the order doesn't exist.
        """
        fields = self._validated(fields)
        order = self.store.get_order(order_id)
        order.order_number = fields.order_number
        order.due_date = fields.due_date
        order.buyer_name = fields.buyer_name
        order.address = fields.address
        order.phone = fields.phone
        order.total = parse_total(fields.total)
        self.store.update_order(order)
        return order

    def delete_order(self, order_id: str) -> None:
        # Ownership is not re-checked here; callers only hold orders they listed.
        self.store.delete_order(order_id)

    def get_order(self, order_id: str) -> Order:
        return self.store.get_order(order_id)

    def list_orders(self, owner_id: str) -> list[Order]:
        """All orders of owner_id by due date, undated last. Read fresh each call."""
        return self.store.find_orders_by_owner(owner_id)
