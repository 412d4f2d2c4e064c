import json

from backoffice.config import reset_settings
from backoffice.customer.registration import register_customer
from backoffice.customer.repository import CustomerRepository
from backoffice.events import reset_publisher
from backoffice.events.contracts import OrderCreated, ProductDeleted
from backoffice.events.dispatch import publish_all, publish_event


class TestPublishEvent:
    async def test_publishes_under_event_type(self, publisher):
        assert await publish_event(ProductDeleted(product_id="p1", partition_key="CATEGORY-GROCERY")) is True
        [(name, payload)] = publisher.messages
        assert name == "product-deleted"
        assert payload["productId"] == "p1"

    async def test_failure_is_swallowed(self, publisher):
        publisher.configure(should_succeed=False, failure_reason="queue down")
        assert await publish_event(OrderCreated(order_id="o", customer_id="c", total=1.0)) is False
        assert publisher.messages == []

    async def test_misconfigured_publisher_does_not_raise(self, monkeypatch):
        monkeypatch.setenv("EVENT_PUBLISHER", "kafka")
        reset_settings()
        reset_publisher()
        assert await publish_event(OrderCreated(order_id="o", customer_id="c", total=1.0)) is False

    async def test_unexpected_adapter_error_does_not_undo_write(self, monkeypatch, publisher):
        async def broken(event_name, payload):
            raise ConnectionResetError("socket closed")

        monkeypatch.setattr(publisher, "publish", broken)
        customer = await register_customer(first_name="Jane", last_name="Doe", email="jane@example.com", city="Durban")
        assert await CustomerRepository().get(customer.partition_id, customer.unique_id) is not None


class TestPublishAll:
    async def test_counts_accepted(self, publisher):
        events = [OrderCreated(order_id=str(i), customer_id="c", total=1.0) for i in range(3)]
        assert await publish_all(*events) == 3
        assert [payload["orderId"] for _, payload in publisher.messages] == ["0", "1", "2"]

    async def test_continues_after_failure(self, publisher):
        publisher.configure(should_succeed=False)
        assert await publish_all(OrderCreated(order_id="o", customer_id="c", total=1.0)) == 0


class TestPeek:
    async def test_peek_returns_json_bodies_oldest_first(self, publisher):
        await publish_all(*(OrderCreated(order_id=str(i), customer_id="c", total=1.0) for i in range(3)))
        bodies = await publisher.peek(2)
        assert [json.loads(body)["orderId"] for body in bodies] == ["0", "1"]
