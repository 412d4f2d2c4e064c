import re

from backoffice.keys import (
    CATEGORY_PREFIX,
    CUSTOMER_PREFIX,
    attribute_of,
    category_partition,
    city_partition,
    customer_partition,
    new_unique_id,
    same_partition,
)


class TestPartitionKeys:
    def test_city_partition_is_uppercased(self):
        assert city_partition("Durban") == "CITY-DURBAN"

    def test_city_partition_keeps_inner_spaces(self):
        assert city_partition("Cape Town") == "CITY-CAPE TOWN"

    def test_category_partition(self):
        assert category_partition("Grocery") == "CATEGORY-GROCERY"

    def test_customer_partition_uses_id_verbatim(self):
        assert customer_partition("abc123") == "CUSTOMER-abc123"


class TestAttributeOf:
    def test_recovers_suffix(self):
        assert attribute_of("CATEGORY-GROCERY", CATEGORY_PREFIX) == "GROCERY"

    def test_customer_id_round_trips(self):
        assert attribute_of(customer_partition("abc123"), CUSTOMER_PREFIX) == "abc123"

    def test_other_prefix_gives_none(self):
        assert attribute_of("CITY-DURBAN", CATEGORY_PREFIX) is None

    def test_empty_partition_gives_none(self):
        assert attribute_of("", CATEGORY_PREFIX) is None


class TestSamePartition:
    def test_case_insensitive(self):
        assert same_partition("CITY-DURBAN", "city-durban")

    def test_different_partitions(self):
        assert not same_partition("CITY-DURBAN", "CITY-CAPE TOWN")

    def test_none_is_empty(self):
        assert same_partition(None, "")


class TestUniqueIds:
    def test_is_32_lowercase_hex_chars(self):
        assert re.fullmatch(r"[0-9a-f]{32}", new_unique_id())

    def test_ids_differ(self):
        assert len({new_unique_id() for _ in range(100)}) == 100
