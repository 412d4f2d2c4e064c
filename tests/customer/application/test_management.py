import pytest
from backoffice.customer.management import delete_customer, list_customers, load_customer, update_customer
from backoffice.customer.registration import register_customer
from backoffice.customer.repository import CustomerRepository
from backoffice.exceptions import ConcurrencyConflict
from protean.exceptions import ObjectNotFoundError


async def _register(first="Jane", email="jane@example.com", city="Durban"):
    return await register_customer(first_name=first, last_name="Doe", email=email, city=city)


async def _update(customer, **overrides):
    fields = {
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "email": customer.email,
        "phone": customer.phone,
        "city": customer.city,
    }
    fields.update(overrides)
    return await update_customer(customer.partition_id, customer.unique_id, **fields)


class TestLoadCustomer:
    async def test_missing_customer_raises(self):
        with pytest.raises(ObjectNotFoundError):
            await load_customer(CustomerRepository(), "CITY-DURBAN", "missing")


class TestUpdateCustomer:
    async def test_updates_fields_in_place(self):
        jane = await _register()
        updated = await _update(jane, last_name="Smith")

        stored = await CustomerRepository().get("CITY-DURBAN", jane.unique_id)
        assert stored.last_name == "Smith"
        assert updated.etag == stored.etag
        assert updated.etag != jane.etag

    async def test_city_change_relocates(self):
        jane = await _register()
        await _update(jane, city="Cape Town")

        repository = CustomerRepository()
        assert await repository.get("CITY-DURBAN", jane.unique_id) is None
        moved = await repository.get("CITY-CAPE TOWN", jane.unique_id)
        assert moved.city == "Cape Town"

    async def test_same_city_different_case_keeps_partition(self):
        jane = await _register()
        updated = await _update(jane, city="durban")

        assert updated.partition_id == "CITY-DURBAN"
        assert [c.unique_id async for c in CustomerRepository().in_city("Durban")] == [jane.unique_id]

    async def test_stale_etag_rejected(self):
        jane = await _register()
        stale_etag = jane.etag
        await _update(jane, first_name="Janet")

        with pytest.raises(ConcurrencyConflict):
            await update_customer(
                "CITY-DURBAN",
                jane.unique_id,
                first_name="Jay",
                last_name="Doe",
                email="jane@example.com",
                city="Durban",
                etag=stale_etag,
            )
        assert (await CustomerRepository().get("CITY-DURBAN", jane.unique_id)).first_name == "Janet"

    async def test_stale_etag_blocks_relocation(self):
        jane = await _register()
        stale_etag = jane.etag
        await _update(jane, first_name="Janet")

        with pytest.raises(ConcurrencyConflict):
            await update_customer(
                "CITY-DURBAN",
                jane.unique_id,
                first_name="Janet",
                last_name="Doe",
                email="jane@example.com",
                city="Cape Town",
                etag=stale_etag,
            )
        assert await CustomerRepository().get("CITY-DURBAN", jane.unique_id) is not None

    async def test_missing_customer(self):
        with pytest.raises(ObjectNotFoundError):
            await update_customer(
                "CITY-DURBAN", "missing", first_name="A", last_name="B", email="a@example.com", city="Durban"
            )


class TestDeleteCustomer:
    async def test_delete_publishes_event(self, publisher):
        jane = await _register()
        assert await delete_customer(jane.partition_id, jane.unique_id) is True

        [event] = publisher.of_type("customer-deleted")
        assert event["customerId"] == jane.unique_id
        assert event["partitionKey"] == "CITY-DURBAN"

    async def test_delete_twice_is_harmless(self, publisher):
        jane = await _register()
        await delete_customer(jane.partition_id, jane.unique_id)

        assert await delete_customer(jane.partition_id, jane.unique_id) is False
        assert len(publisher.of_type("customer-deleted")) == 1


class TestListCustomers:
    async def test_filter_by_city(self):
        await _register(email="a@example.com")
        await _register(email="b@example.com", city="Cape Town")

        listed = await list_customers(city="durban")
        assert [c.email for c in listed] == ["a@example.com"]

    async def test_blank_city_lists_everyone(self):
        await _register(email="a@example.com")
        await _register(email="b@example.com", city="Cape Town")

        assert len(await list_customers(city="  ")) == 2

    async def test_most_recently_modified_first(self):
        first = await _register(first="First", email="a@example.com")
        await _register(first="Second", email="b@example.com")
        await _update(first, last_name="Touched")

        listed = await list_customers()
        assert [c.first_name for c in listed] == ["First", "Second"]
