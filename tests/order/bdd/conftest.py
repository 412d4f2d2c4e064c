"""Shared BDD fixtures and step definitions for ordering."""

import asyncio

import pytest
from backoffice.customer.registration import register_customer
from backoffice.product.creation import create_product
from pytest_bdd import given, parsers


@pytest.fixture()
def world():
    """Container for entities created by the steps."""
    return {"products": {}, "customer": None, "order": None, "exc": None}


@given(parsers.cfparse('a customer "{first}" "{last}" living in "{city}"'))
def customer_living_in(world, first, last, city):
    world["customer"] = asyncio.run(
        register_customer(first_name=first, last_name=last, email=f"{first.lower()}@example.com", city=city)
    )
    world["original_id"] = world["customer"].unique_id


@given(parsers.cfparse('a product "{name}" priced {price:f}'))
def product_priced(world, name, price):
    world["products"][name] = asyncio.run(create_product(category="Grocery", name=name, price=price))
