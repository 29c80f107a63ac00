# app/services/stock_validator.py
from app.data.models.product import ProductModel
from app.domain.errors import InsufficientStock
from app.domain.lines import ResolvedLine


def has_stock(stock: int | None, quantity: int) -> bool:
    #NULL = bez limitu
    if stock is None:
        return True
    return stock >= quantity


def check_stock(line: ResolvedLine, product: ProductModel, requested: int | None = None) -> None:
    """
    Szybki, nieautorytatywny pre-check na snapshocie produktu.
    Autorytatywny check to warunkowy update w ProductRepo.decrement_if_available.

    `requested` to laczna ilosc produktu w calym zamowieniu (kilka linii
    tego samego produktu), domyslnie ilosc z linii.
    """
    quantity = requested if requested is not None else line.quantity
    if not has_stock(product.stock, quantity):
        raise InsufficientStock(line.product_id)
