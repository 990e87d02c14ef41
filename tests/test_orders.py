"""Tests for OrderRepository."""

from datetime import date

import pytest

from ordertrack.errors import OrderNotFoundError, ValidationError

from .conftest import make_fields


class TestCreateOrder:
    def test_create_and_list(self, services, alice):
        order = services.orders.create_order(alice.id, make_fields())

        assert order.owner_id == alice.id
        assert order.total == 10.5
        assert services.orders.list_orders(alice.id) == [order]

    def test_strips_whitespace(self, services, alice):
        order = services.orders.create_order(
            alice.id, make_fields(order_number="  A1 ", buyer_name="Bob\n", total=" 3 ")
        )
        assert order.order_number == "A1"
        assert order.buyer_name == "Bob"
        assert order.total == 3.0

    def test_blank_field_is_invalid(self, services, alice):
        with pytest.raises(ValidationError) as exc_info:
            services.orders.create_order(alice.id, make_fields(address="   "))
        assert exc_info.value.field == "address"

    def test_validation_failure_writes_nothing(self, services, alice):
        with pytest.raises(ValidationError) as exc_info:
            services.orders.create_order(alice.id, make_fields(phone="12345", total="0"))

        assert exc_info.value.field == "phone"
        assert services.orders.list_orders(alice.id) == []

    def test_zero_total_rejected(self, services, alice):
        with pytest.raises(ValidationError) as exc_info:
            services.orders.create_order(alice.id, make_fields(total="0"))
        assert exc_info.value.field == "total"

    def test_duplicate_order_numbers_allowed(self, services, alice):
        services.orders.create_order(alice.id, make_fields())
        services.orders.create_order(alice.id, make_fields())
        assert len(services.orders.list_orders(alice.id)) == 2

    def test_past_due_date_allowed(self, services, alice):
        order = services.orders.create_order(alice.id, make_fields(due_date=date(2000, 1, 1)))
        assert order.due_date == date(2000, 1, 1)


class TestListOrders:
    def test_only_owner_orders(self, services, alice):
        mine = services.orders.create_order(alice.id, make_fields(order_number="A1"))
        services.accounts.register("bob", "secret2", "secret2")
        bob = services.accounts.login("bob", "secret2")
        theirs = services.orders.create_order(bob.id, make_fields(order_number="B1"))

        assert services.orders.list_orders(alice.id) == [mine]
        assert services.orders.list_orders(bob.id) == [theirs]

    def test_sorted_by_due_date(self, services, alice):
        services.orders.create_order(alice.id, make_fields(order_number="undated", due_date=None))
        services.orders.create_order(alice.id, make_fields(order_number="b", due_date=date(2031, 1, 1)))
        services.orders.create_order(alice.id, make_fields(order_number="a", due_date=date(2030, 1, 1)))

        numbers = [o.order_number for o in services.orders.list_orders(alice.id)]
        assert numbers == ["a", "b", "undated"]

    def test_reflects_changes_immediately(self, services, alice):
        assert services.orders.list_orders(alice.id) == []
        services.orders.create_order(alice.id, make_fields())
        assert len(services.orders.list_orders(alice.id)) == 1


class TestUpdateOrder:
    def test_overwrites_fields_keeps_identity(self, services, alice):
        order = services.orders.create_order(alice.id, make_fields())

        updated = services.orders.update_order(
            order.id,
            make_fields(order_number="A2", buyer_name="Carol", total="20", due_date=None),
        )

        assert updated.id == order.id
        assert updated.owner_id == alice.id
        assert updated.order_number == "A2"
        assert updated.buyer_name == "Carol"
        assert updated.total == 20.0
        assert updated.due_date is None
        assert services.orders.get_order(order.id) == updated

    def test_invalid_update_changes_nothing(self, services, alice):
        order = services.orders.create_order(alice.id, make_fields())

        with pytest.raises(ValidationError):
            services.orders.update_order(order.id, make_fields(order_number=""))

        assert services.orders.get_order(order.id) == order

    def test_missing_order(self, services, alice):
        with pytest.raises(OrderNotFoundError):
            services.orders.update_order("nope", make_fields())


class TestDeleteOrder:
    def test_scenario(self, services):
        services.accounts.register("alice", "secret1", "secret1")
        alice = services.accounts.login("alice", "secret1")
        due = date(2030, 5, 1)

        order = services.orders.create_order(
            alice.id,
            make_fields(
                order_number="A1",
                buyer_name="Bob",
                address="1 Main St",
                phone="1234567890",
                total=10.5,
                due_date=due,
            ),
        )
        assert services.orders.list_orders(alice.id) == [order]

        services.orders.delete_order(order.id)
        assert services.orders.list_orders(alice.id) == []

    def test_missing_order(self, services, alice):
        with pytest.raises(OrderNotFoundError):
            services.orders.delete_order("nope")
