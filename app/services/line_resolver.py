# app/services/line_resolver.py
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel
from app.domain.enums import OrderMode, RefKind
from app.domain.errors import NotFound, ValidationError
from app.domain.lines import LineRequest, ResolvedLine
from app.repos.cart_repo import CartRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_QUANTITY = 1


class LineResolver:
    """
    Zamienia linie zadania (direct / cart) na ResolvedLine.
    Tylko odczyt. Kazda linia wejsciowa daje dokladnie jedna linie wyjsciowa,
    duplikaty nie sa scalane.
    """

    def __init__(self, db: Session):
        self.cart_repo = CartRepo(db)

    def resolve(self, user_id: int, mode: OrderMode, lines: list[LineRequest]) -> list[ResolvedLine]:
        if mode == OrderMode.DIRECT:
            return [self._resolve_direct(line) for line in lines]
        return [self._resolve_cart(user_id, line) for line in lines]

    def _resolve_direct(self, line: LineRequest) -> ResolvedLine:
        if line.ref is None or line.ref.kind != RefKind.PRODUCT:
            raise ValidationError("Direct mode lines must reference a product", ref=line.ref.id if line.ref else None)

        quantity = line.quantity if line.quantity is not None else DEFAULT_QUANTITY
        return ResolvedLine(product_id=line.ref.id, quantity=quantity)

    def _resolve_cart(self, user_id: int, line: LineRequest) -> ResolvedLine:
        ref = line.ref
        if ref is None:
            raise ValidationError("Cart line must include a cart row id or a product id")

        if ref.kind == RefKind.CART_ROW:
            row = self.cart_repo.get_row(ref.id, user_id)
        elif ref.kind == RefKind.PRODUCT:
            row = self.cart_repo.get_row_for_product(ref.id, user_id)
        else:
            row = self._lookup_ambiguous(ref.id, user_id)

        if row is None:
            raise NotFound(ref.id, f"Cart item not found or not owned by user: {ref.id}")

        return ResolvedLine(
            product_id=row.product_id,
            quantity=self._quantity(line, row),
            source_cart_row_id=row.id,
        )

    def _lookup_ambiguous(self, token: int, user_id: int) -> CartItemModel | None:
        #stary format: najpierw id wiersza koszyka, potem id produktu
        row = self.cart_repo.get_row(token, user_id)
        if row is None:
            row = self.cart_repo.get_row_for_product(token, user_id)
            if row is not None:
                logger.info(f"Token {token} resolved as product id to cart row {row.id} (user {user_id})")
        return row

    @staticmethod
    def _quantity(line: LineRequest, row: CartItemModel) -> int:
        #ilosc z zadania nadpisuje ilosc z koszyka
        if line.quantity is not None:
            return line.quantity
        if row.quantity is not None:
            return row.quantity
        return DEFAULT_QUANTITY
