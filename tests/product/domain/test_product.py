import pytest
from backoffice.product.product import Product
from protean.exceptions import ValidationError


def _create(**overrides):
    fields = {"category": "Grocery", "name": "Milk", "price": 24.99, "stock_quantity": 10}
    fields.update(overrides)
    return Product.create(**fields)


class TestCreate:
    def test_partition_derived_from_category(self):
        assert _create().partition_id == "CATEGORY-GROCERY"

    def test_defaults(self):
        product = Product.create(category="Grocery", name="Milk", price=1.0)
        assert product.stock_quantity == 0
        assert product.image_url is None
        assert product.has_image is False

    @pytest.mark.parametrize("price", [0, -1.5])
    def test_price_must_be_positive(self, price):
        with pytest.raises(ValidationError) as exc:
            _create(price=price)
        assert "price" in exc.value.messages

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
    def test_price_must_be_finite(self, price):
        with pytest.raises(ValidationError) as exc:
            _create(price=price)
        assert "price" in exc.value.messages

    def test_stock_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            _create(stock_quantity=-1)

    @pytest.mark.parametrize("field", ["category", "name"])
    def test_required_fields(self, field):
        with pytest.raises(ValidationError):
            _create(**{field: ""})


class TestRevise:
    def test_revise_keeps_partition_without_category(self):
        product = _create()
        product.revise(name="Low-fat Milk", price=26.0, stock_quantity=3)
        assert product.partition_id == "CATEGORY-GROCERY"
        assert product.name == "Low-fat Milk"

    def test_revise_with_category_moves_partition(self):
        product = _create()
        product.revise(name="Milk", price=24.99, stock_quantity=3, category="Dairy")
        assert product.partition_id == "CATEGORY-DAIRY"

    def test_revise_validates_price(self):
        product = _create()
        with pytest.raises(ValidationError):
            product.revise(name="Milk", price=0, stock_quantity=3)

    def test_revise_rejects_nan_price(self):
        product = _create()
        with pytest.raises(ValidationError):
            product.revise(name="Milk", price=float("nan"), stock_quantity=3)

    def test_partition_cannot_drift_from_category(self):
        product = _create()
        with pytest.raises(ValidationError):
            product.category = "Dairy"


class TestImage:
    def test_attach_image(self):
        product = _create()
        product.attach_image("memory://attachments/x.png")
        assert product.has_image

    def test_blank_locator_is_no_image(self):
        product = _create()
        product.attach_image("   ")
        assert product.has_image is False
