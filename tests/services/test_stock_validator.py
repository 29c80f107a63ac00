# tests/services/test_stock_validator.py
import pytest

from app.data.models.product import ProductModel
from app.domain.errors import InsufficientStock
from app.domain.lines import ResolvedLine
from app.services.stock_validator import check_stock, has_stock


@pytest.mark.parametrize(
    "stock, quantity, expected",
    [
        (None, 1, True),
        (None, 1000, True),
        (5, 5, True),
        (5, 4, True),
        (5, 6, False),
        (0, 1, False),
    ],
)
def test_has_stock(stock, quantity, expected):
    assert has_stock(stock, quantity) is expected


def test_check_stock_passes_for_unlimited_product():
    product = ProductModel(id=1, name="p", price=1, stock=None, sold=0)

    check_stock(ResolvedLine(product_id=1, quantity=10_000), product)


def test_check_stock_raises_with_product_id():
    product = ProductModel(id=7, name="p", price=1, stock=2, sold=0)

    with pytest.raises(InsufficientStock) as exc:
        check_stock(ResolvedLine(product_id=7, quantity=3), product)

    assert exc.value.product_id == 7
    assert exc.value.kind == "insufficient_stock"


def test_check_stock_uses_requested_total_for_product():
    product = ProductModel(id=7, name="p", price=1, stock=5, sold=0)

    with pytest.raises(InsufficientStock):
        check_stock(ResolvedLine(product_id=7, quantity=3), product, requested=6)
