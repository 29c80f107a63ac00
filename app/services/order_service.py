# app/services/order_service.py
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.enums import OrderMode, OrderStatus, RefKind
from app.domain.errors import (
    InsufficientStockRace,
    NotFound,
    OrderError,
    OrderNotCancellable,
    StorageFault,
    ValidationError,
)
from app.domain.lines import LineRef, LineRequest, ResolvedLine
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.line_resolver import LineResolver
from app.services.stock_validator import check_stock
from app.utils.logging import get_logger

logger = get_logger(__name__)

CANCELLABLE_STATUSES = (OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value)


class OrderService:
    """
    Koordynator transakcji skladania zamowienia.

    Jedyne miejsce ktore zapisuje razem Order, OrderItem, stan produktu
    i usuwa wiersze koszyka. Albo zwraca order_id, albo nic sie nie zmienilo.
    """

    def __init__(self, db: Session, notifier=None):
        self.db = db
        self.repo = OrderRepo(db)
        self.product_repo = ProductRepo(db)
        self.cart_repo = CartRepo(db)
        self.resolver = LineResolver(db)
        self.notifier = notifier

    def place_order(
        self,
        user_id: int,
        mode: OrderMode | str,
        lines: list[LineRequest],
        shipping_address: dict | None = None,
        payment_method: str | None = None,
        payment_details: dict | None = None,
        declared_total: Decimal | float | int | None = None,
    ) -> int:
        """
        Use Case: Zlozenie zamowienia (Command).

        1. Walidacja zadania (bez odczytow)
        2. Rozwiazanie linii + pre-check stanu (bez transakcji)
        3. Transakcja: order -> pozycje -> warunkowy update stanu -> czyszczenie koszyka
        4. Commit albo pelny rollback
        5. Powiadomienie po commicie
        """
        mode = self._validate_request(mode, lines)

        resolved = self._resolve_and_precheck(user_id, mode, lines)

        logger.info(f"Placing {mode.value} order for user {user_id} with {len(resolved)} line(s)")

        with self._transaction():
            order_id, computed_total = self._write_order(
                user_id=user_id,
                mode=mode,
                resolved=resolved,
                shipping_address=shipping_address,
                payment_method=payment_method,
                payment_details=payment_details,
                declared_total=declared_total,
            )

        logger.info(f"Order {order_id} committed for user {user_id}")

        if declared_total is not None and Decimal(str(declared_total)) != computed_total:
            logger.warning(
                f"Order {order_id}: declared total {declared_total} differs from catalog total {computed_total}"
            )

        self._notify(user_id, order_id, item_count=len(resolved), total=computed_total)
        return order_id

    def cancel_order(self, order_id: int, user_id: int) -> None:
        """
        Use Case: Anulowanie zamowienia (Command).
        Tylko pending/confirmed, warunkowy update statusu. Stan magazynu nie jest przywracany.
        """
        with self._transaction():
            rowcount = self.repo.cancel_if_cancellable(order_id, user_id, CANCELLABLE_STATUSES)
            if rowcount == 0:
                order = self.repo.get_order(order_id, user_id)
                if order is None:
                    raise NotFound(order_id, "Order not found")
                raise OrderNotCancellable(order_id, order.status)

        logger.info(f"Order {order_id} cancelled by user {user_id}")

    def reorder(self, order_id: int, user_id: int) -> int:
        """
        Use Case: Ponowienie zamowienia (Command).
        Pozycje starego zamowienia ida jako linie direct przez place_order,
        wiec przechodza pre-check i warunkowy update stanu. Ceny z aktualnego katalogu.
        """
        try:
            order = self.repo.get_order(order_id, user_id)
            if order is None:
                raise NotFound(order_id, "Order not found")

            lines = [
                LineRequest(ref=LineRef(RefKind.PRODUCT, item.product_id), quantity=item.quantity)
                for item in self.repo.get_items(order.id)
            ]
            shipping_address = order.shipping_address
            payment_method = order.payment_method
            payment_details = order.payment_details
        except SQLAlchemyError as e:
            logger.error(f"Storage failure while loading order {order_id} for reorder: {e}")
            raise StorageFault("Could not load order") from e
        finally:
            self.db.rollback()

        if not lines:
            raise ValidationError("No items to reorder", ref=order_id)

        logger.info(f"Reordering order {order_id} for user {user_id}")

        return self.place_order(
            user_id=user_id,
            mode=OrderMode.DIRECT,
            lines=lines,
            shipping_address=shipping_address,
            payment_method=payment_method,
            payment_details=payment_details,
        )

    # =====================================================
    # WALIDACJA I PRE-CHECK
    # =====================================================
    @staticmethod
    def _validate_request(mode, lines: list[LineRequest]) -> OrderMode:
        try:
            mode = OrderMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown order mode: {mode}")

        if not lines:
            raise ValidationError("No items provided")

        for line in lines:
            if line.ref is None:
                raise ValidationError("Every line must reference a product or a cart row")
            if line.ref.id is None or line.ref.id <= 0:
                raise ValidationError(f"Invalid reference id: {line.ref.id}", ref=line.ref.id)
            if line.quantity is not None and line.quantity <= 0:
                raise ValidationError(f"Invalid quantity for {line.ref.id}", ref=line.ref.id)

        return mode

    def _resolve_and_precheck(self, user_id: int, mode: OrderMode, lines: list[LineRequest]) -> list[ResolvedLine]:
        try:
            resolved = self.resolver.resolve(user_id, mode, lines)

            for line in resolved:
                #ilosc z wiersza koszyka tez musi byc > 0
                if line.quantity <= 0:
                    raise ValidationError(f"Invalid quantity for product {line.product_id}", ref=line.product_id)

            products = self.product_repo.get_products(line.product_id for line in resolved)
            requested: dict[int, int] = {}
            for line in resolved:
                product = products.get(line.product_id)
                if product is None:
                    raise NotFound(line.product_id, f"Product not found: {line.product_id}")
                #duplikaty produktu sumujemy, inaczej przeszlyby pre-check i padly dopiero w transakcji
                requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
                check_stock(line, product, requested=requested[line.product_id])

            return resolved
        except SQLAlchemyError as e:
            logger.error(f"Storage failure during order pre-check: {e}")
            raise StorageFault("Could not validate order") from e
        finally:
            #snapshot z pre-checku nie jest autorytatywny, zamykamy go przed transakcja zapisu
            self.db.rollback()

    # =====================================================
    # TRANSAKCJA
    # =====================================================
    @contextmanager
    def _transaction(self):
        self.db.begin()
        try:
            yield
            self.db.commit()
        except Exception as e:
            try:
                self.db.rollback()
            except Exception as rollback_error:
                logger.critical(
                    f"Rollback failed after order error ({e!r}): {rollback_error!r}. "
                    f"Order data may be inconsistent",
                    exc_info=True,
                )
                raise StorageFault("Order transaction failed, rollback failed", rollback_failed=True) from rollback_error

            if isinstance(e, OrderError):
                logger.info(f"Order transaction rolled back: {e.kind} ({e.ref})")
                raise
            if isinstance(e, SQLAlchemyError):
                logger.error(f"Order transaction rolled back after storage error: {e}")
                raise StorageFault("Order transaction failed") from e
            raise

    def _write_order(
        self,
        user_id: int,
        mode: OrderMode,
        resolved: list[ResolvedLine],
        shipping_address,
        payment_method,
        payment_details,
        declared_total,
    ) -> tuple[int, Decimal]:
        order = self.repo.add_order(
            OrderModel(
                user_id=user_id,
                shipping_address=shipping_address or {},
                payment_method=payment_method or "",
                payment_details=payment_details or {},
                total_amount=declared_total if declared_total is not None else 0,
                status=OrderStatus.PENDING.value,
            )
        )

        computed_total = Decimal("0.00")

        #kolejnosc linii = kolejnosc z zadania
        for line in resolved:
            # cena zawsze z katalogu, nigdy od klienta
            price = self.product_repo.get_price(line.product_id)
            if price is None:
                raise NotFound(line.product_id, f"Product not found: {line.product_id}")

            self.repo.add_item(
                OrderItemModel(
                    order_id=order.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=price,
                )
            )

            rowcount = self.product_repo.decrement_if_available(line.product_id, line.quantity)
            if rowcount == 0:
                raise InsufficientStockRace(line.product_id)

            computed_total += Decimal(str(price)) * line.quantity

        #bez zadeklarowanej kwoty zapisujemy sume z katalogu
        if declared_total is None:
            order.total_amount = computed_total
            self.db.flush()

        if mode == OrderMode.CART:
            row_ids = {line.source_cart_row_id for line in resolved if line.source_cart_row_id is not None}
            deleted = self.cart_repo.delete_rows(row_ids, user_id)
            if deleted != len(row_ids):
                logger.warning(
                    f"Order {order.id}: expected to delete {len(row_ids)} cart row(s), deleted {deleted}"
                )

        return order.id, computed_total

    def _notify(self, user_id: int, order_id: int, item_count: int | None = None, total: Decimal | None = None) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.send_order_notification(user_id, order_id, item_count=item_count, total=total)
        except Exception as e:
            #zamowienie jest juz zacommitowane, blad kolejki nie cofa wyniku
            logger.error(f"Failed to dispatch notification for order {order_id}: {e}")
