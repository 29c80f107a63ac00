# app/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel


class CartRepo:
    """Odczyt i usuwanie wierszy koszyka, zawsze w zakresie usera."""

    def __init__(self, db: Session):
        self.db = db

    def get_row(self, row_id: int, user_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == row_id,
                CartItemModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def get_row_for_product(self, product_id: int, user_id: int) -> CartItemModel | None:
        #user moze miec kilka wariantow tego samego produktu, bierzemy najstarszy wiersz
        return self.db.execute(
            select(CartItemModel)
            .where(
                CartItemModel.product_id == product_id,
                CartItemModel.user_id == user_id,
            )
            .order_by(CartItemModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def delete_rows(self, row_ids, user_id: int) -> int:
        ids = set(row_ids)
        if not ids:
            return 0
        result = self.db.execute(
            delete(CartItemModel)
            .where(
                CartItemModel.id.in_(ids),
                CartItemModel.user_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
