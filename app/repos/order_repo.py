# app/repos/order_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.data.models.product import ProductModel
from app.domain.enums import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    #zapis - commit robi koordynator, tu tylko flush zeby dostac id
    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    #odczyt
    def get_order(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(
                OrderModel.id == order_id,
                OrderModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def list_orders(
        self,
        user_id: int,
        status: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id)
        if status:
            stmt = stmt.where(OrderModel.status == status.strip().lower())
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def get_items_with_products(self, order_ids) -> list:
        """Pozycje zamowien + nazwa i zdjecia produktu (LEFT JOIN, produkt mogl zniknac)."""
        ids = list(order_ids)
        if not ids:
            return []
        stmt = (
            select(
                OrderItemModel,
                ProductModel.name.label("product_name"),
                ProductModel.images.label("product_images"),
            )
            .outerjoin(ProductModel, OrderItemModel.product_id == ProductModel.id)
            .where(OrderItemModel.order_id.in_(ids))
            .order_by(OrderItemModel.id)
        )
        return list(self.db.execute(stmt).all())

    def get_statuses(self, order_ids, user_id: int) -> list:
        return list(
            self.db.execute(
                select(OrderModel.id, OrderModel.status)
                .where(
                    OrderModel.id.in_(list(order_ids)),
                    OrderModel.user_id == user_id,
                )
                .order_by(OrderModel.id)
            ).all()
        )

    def get_items(self, order_id: int) -> list[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars().all()
        )

    def cancel_if_cancellable(self, order_id: int, user_id: int, cancellable_statuses) -> int:
        """
        Warunkowa zmiana statusu:
        UPDATE orders SET status = 'cancelled'
        WHERE id = :id AND user_id = :user AND status IN (...)

        Zwraca rowcount, 0 = brak zamowienia albo status nie pozwala anulowac.
        """
        result = self.db.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.user_id == user_id,
                OrderModel.status.in_(list(cancellable_statuses)),
            )
            .values(status=OrderStatus.CANCELLED.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
