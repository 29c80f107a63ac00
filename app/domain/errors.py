# app/domain/errors.py
"""
Bledy domeny zamowien.

Serwisy je rzucaja, router tlumaczy je na odpowiedzi HTTP.
Zaden z nich nie jest automatycznie ponawiany.
"""


class OrderError(Exception):
    kind = "order_error"

    def __init__(self, message: str, ref=None):
        super().__init__(message)
        self.message = message
        self.ref = ref

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "ref": self.ref}


class ValidationError(OrderError):
    """Niepoprawne zadanie, odrzucone przed jakimkolwiek odczytem z bazy."""

    kind = "validation_error"


class NotFound(OrderError):
    """Produkt albo wiersz koszyka nie istnieje lub nie nalezy do uzytkownika."""

    kind = "not_found"

    def __init__(self, ref, message: str | None = None):
        super().__init__(message or f"Not found or not owned by user: {ref}", ref=ref)


class InsufficientStock(OrderError):
    """Pre-check: za maly stan, nic jeszcze nie zostalo zapisane."""

    kind = "insufficient_stock"

    def __init__(self, product_id: int, message: str | None = None):
        super().__init__(message or f"Insufficient stock for product {product_id}", ref=product_id)
        self.product_id = product_id


class InsufficientStockRace(InsufficientStock):
    """
    Warunkowy update w transakcji nie trafil w zaden wiersz -
    rownolegle zamowienie wykupilo towar. Zawsze po wykonanym rollbacku.
    """

    kind = "insufficient_stock_race"

    def __init__(self, product_id: int):
        super().__init__(
            product_id,
            f"Insufficient stock when committing product {product_id}",
        )


class StorageFault(OrderError):
    kind = "storage_fault"

    def __init__(self, message: str, rollback_failed: bool = False):
        super().__init__(message)
        self.rollback_failed = rollback_failed

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["rollback_failed"] = self.rollback_failed
        return data


class OrderNotCancellable(OrderError):
    """Zamowienie istnieje, ale jego status nie pozwala na anulowanie."""

    kind = "not_cancellable"

    def __init__(self, order_id: int, status: str):
        super().__init__(f"Order {order_id} cannot be cancelled (status: {status})", ref=order_id)
        self.status = status
