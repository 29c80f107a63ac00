# app/repos/product_repo.py
from decimal import Decimal

from sqlalchemy import select, update, or_, func
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_products(self, product_ids) -> dict[int, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def get_price(self, product_id: int) -> Decimal | None:
        return self.db.execute(
            select(ProductModel.price).where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def decrement_if_available(self, product_id: int, quantity: int) -> int:
        """
        Warunkowy update stanu:
        UPDATE products SET stock = stock - q, sold = sold + q
        WHERE id = :id AND (stock IS NULL OR stock >= q)

        Zwraca rowcount, 0 oznacza ze stan sie nie zgadza (przegrany wyscig).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                or_(ProductModel.stock.is_(None), ProductModel.stock >= quantity),
            )
            .values(
                stock=ProductModel.stock - quantity,
                sold=func.coalesce(ProductModel.sold, 0) + quantity,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
