import re

import pytest
from backoffice.customer.customer import Customer
from protean.exceptions import ValidationError


def _register(**overrides):
    fields = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.com",
        "city": "Durban",
    }
    fields.update(overrides)
    return Customer.register(**fields)


class TestRegistration:
    def test_partition_derived_from_city(self):
        assert _register().partition_id == "CITY-DURBAN"

    def test_unique_id_generated(self):
        assert re.fullmatch(r"[0-9a-f]{32}", _register().unique_id)

    def test_no_version_before_storage(self):
        customer = _register()
        assert customer.etag is None
        assert customer.last_modified is None

    def test_blank_phone_is_none(self):
        assert _register(phone="").phone is None

    def test_full_name(self):
        assert _register().full_name == "Jane Doe"

    @pytest.mark.parametrize("field", ["first_name", "last_name", "email", "city"])
    def test_required_fields(self, field):
        with pytest.raises(ValidationError):
            _register(**{field: ""})

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _register(email="not-an-email")
        assert "email" in exc.value.messages

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _register(phone="phone me")
        assert "phone" in exc.value.messages


class TestPartitionInvariant:
    def test_mismatched_partition_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Customer(
                partition_id="CITY-PRETORIA",
                unique_id="abc",
                first_name="Jane",
                last_name="Doe",
                email="jane@example.com",
                city="Durban",
            )
        assert "partition_id" in exc.value.messages

    def test_partition_compared_case_insensitively(self):
        customer = Customer(
            partition_id="city-durban",
            unique_id="abc",
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            city="Durban",
        )
        assert customer.partition_id == "city-durban"

    def test_changing_city_alone_is_rejected(self):
        customer = _register()
        with pytest.raises(ValidationError):
            customer.city = "Cape Town"


class TestUpdateDetails:
    def test_new_city_moves_partition(self):
        customer = _register()
        customer.update_details(first_name="Jane", last_name="Doe", email="jane@example.com", city="Cape Town")
        assert customer.partition_id == "CITY-CAPE TOWN"
        assert customer.city == "Cape Town"

    def test_unique_id_unchanged(self):
        customer = _register()
        unique_id = customer.unique_id
        customer.update_details(first_name="J", last_name="D", email="j@example.com", city="Pretoria")
        assert customer.unique_id == unique_id

    def test_invalid_update_rejected(self):
        customer = _register()
        with pytest.raises(ValidationError):
            customer.update_details(first_name="Jane", last_name="Doe", email="bad", city="Durban")
