# app/services/order_query_service.py
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.domain.errors import NotFound, ValidationError
from app.repos.order_repo import OrderRepo


class OrderQueryService:
    """
    Odczyt zamowien (Query). Bez koordynacji transakcji,
    zwykla spojnosc odczytu bazy.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def get_order(self, order_id: int, user_id: int):
        order = self.repo.get_order(order_id, user_id)

        #brak albo cudze zamowienie - z zewnatrz wyglada tak samo
        if not order:
            raise NotFound(order_id, "Order not found")

        items = self.repo.get_items_with_products([order.id])
        return {
            "order": self._order_dict(order),
            "items": [self._item_dict(row) for row in items],
        }

    def list_orders(self, user_id: int, status: str | None = None, limit: int | None = None, offset: int = 0):
        orders = self.repo.list_orders(user_id, status=status, limit=limit, offset=offset)
        if not orders:
            return []

        #jedno zapytanie po pozycje wszystkich zamowien
        by_order: dict[int, list] = {o.id: [] for o in orders}
        for row in self.repo.get_items_with_products(by_order.keys()):
            by_order[row.OrderItemModel.order_id].append(self._item_dict(row))

        return [
            {**self._order_dict(o), "items": by_order[o.id]}
            for o in orders
        ]

    def get_statuses(self, user_id: int, order_ids: list[int]):
        ids = [i for i in order_ids if i]
        if not ids:
            raise ValidationError("No order IDs provided")

        return [
            {"id": row.id, "status": row.status}
            for row in self.repo.get_statuses(ids, user_id)
        ]

    @staticmethod
    def _order_dict(order: OrderModel) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "shipping_address": order.shipping_address,
            "payment_method": order.payment_method,
            "payment_details": order.payment_details,
            "total_amount": order.total_amount,
            "status": order.status,
            "created_at": order.created_at,
        }

    @staticmethod
    def _item_dict(row) -> dict:
        item = row.OrderItemModel
        return {
            "id": item.id,
            "order_id": item.order_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "price": item.price,
            "product_name": row.product_name,
            "product_images": row.product_images,
        }
