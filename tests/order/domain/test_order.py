import json

import pytest
from backoffice.order.order import LineItem, Order, OrderStatus, parse_status
from protean.exceptions import ValidationError


def _lines():
    return [
        LineItem(product_id="p-milk", product_name="Milk", quantity=2, unit_price=24.99),
        LineItem(product_id="p-bread", product_name="Bread", quantity=1, unit_price=15.50),
    ]


class TestLineItem:
    def test_subtotal(self):
        assert LineItem(product_id="p", product_name="P", quantity=3, unit_price=2.5).subtotal == 7.5

    def test_quantity_at_least_one(self):
        with pytest.raises(ValidationError):
            LineItem(product_id="p", product_name="P", quantity=0, unit_price=2.5)

    def test_to_dict_keys(self):
        item = LineItem(product_id="p", product_name="P", quantity=1, unit_price=2.5)
        assert item.to_dict() == {"product_id": "p", "product_name": "P", "quantity": 1, "unit_price": 2.5}


class TestPlace:
    def test_total_computed_from_lines(self):
        order = Order.place(customer_id="c1", lines=_lines())
        assert order.total == pytest.approx(65.48)

    def test_partition_is_customer(self):
        assert Order.place(customer_id="c1", lines=_lines()).partition_id == "CUSTOMER-c1"

    def test_default_status_pending(self):
        assert Order.place(customer_id="c1", lines=_lines()).status == "Pending"

    def test_status_override(self):
        assert Order.place(customer_id="c1", lines=_lines(), status="Processing").status == "Processing"

    def test_blank_status_means_pending(self):
        assert Order.place(customer_id="c1", lines=_lines(), status="  ").status == "Pending"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(customer_id="c1", lines=_lines(), status="Shipped")
        assert "status" in exc.value.messages

    def test_lines_snapshot_round_trips(self):
        order = Order.place(customer_id="c1", lines=_lines())
        assert [line.product_name for line in order.lines] == ["Milk", "Bread"]
        assert json.loads(order.items_json)[0]["unit_price"] == 24.99

    def test_no_lines_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(customer_id="c1", lines=[])
        assert "items" in exc.value.messages


class TestInvariants:
    def test_total_must_match_lines(self):
        with pytest.raises(ValidationError) as exc:
            Order(
                partition_id="CUSTOMER-c1",
                unique_id="o1",
                customer_id="c1",
                items_json=json.dumps([line.to_dict() for line in _lines()]),
                total=1.0,
            )
        assert "total" in exc.value.messages

    def test_partition_must_belong_to_customer(self):
        with pytest.raises(ValidationError) as exc:
            Order(
                partition_id="CUSTOMER-c2",
                unique_id="o1",
                customer_id="c1",
                items_json=json.dumps([line.to_dict() for line in _lines()]),
                total=65.48,
            )
        assert "partition_id" in exc.value.messages


class TestStatus:
    def test_change_status(self):
        order = Order.place(customer_id="c1", lines=_lines())
        order.change_status("Completed")
        assert order.status == OrderStatus.COMPLETED.value

    def test_blank_status_keeps_current(self):
        order = Order.place(customer_id="c1", lines=_lines(), status="Processing")
        order.change_status("")
        assert order.status == "Processing"

    @pytest.mark.parametrize("status", ["Pending", "Processing", "Completed", "Cancelled"])
    def test_known_statuses_parse(self, status):
        assert parse_status(status).value == status

    def test_none_parses_to_none(self):
        assert parse_status(None) is None
