import pytest
from backoffice.shared.email import EmailAddress
from backoffice.shared.phone import PhoneNumber
from protean.exceptions import ValidationError


def test_email_address_element_type():
    from protean.utils import DomainObjects

    assert EmailAddress.element_type == DomainObjects.VALUE_OBJECT


def test_email_address_requires_address():
    with pytest.raises(ValidationError):
        EmailAddress()


@pytest.mark.parametrize(
    "email",
    ["user@example.com", "user.name@example.com", "user+tag@example.com", "user@sub.domain.co.za", "a@b.cc"],
)
def test_valid_email_addresses(email):
    assert EmailAddress(address=email).address == email


@pytest.mark.parametrize(
    "email",
    [
        "plainaddress",
        "two@@example.com",
        "@example.com",
        "user@",
        "user@localhost",
        ".user@example.com",
        "user.@example.com",
        "us..er@example.com",
        "user@-example.com",
        "user name@example.com",
        "user;x@example.com",
        "user<x>@example.com",
    ],
)
def test_invalid_email_addresses(email):
    with pytest.raises(ValidationError) as exc:
        EmailAddress(address=email)
    assert "email" in exc.value.messages


def test_email_normalized_for_comparison():
    assert EmailAddress(address="Jane.Doe@Example.COM").normalized == "jane.doe@example.com"


@pytest.mark.parametrize("number", ["+27 31 555 0123", "(031) 555-0123", "0315550123"])
def test_valid_phone_numbers(number):
    assert PhoneNumber(number=number).number == number


@pytest.mark.parametrize("number", ["call me", "+-()", "031#555", "++27 31"])
def test_invalid_phone_numbers(number):
    with pytest.raises(ValidationError) as exc:
        PhoneNumber(number=number)
    assert "phone" in exc.value.messages
