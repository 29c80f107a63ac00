# app/services/notification_service.py
from decimal import Decimal

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


def build_order_notification(user_id: int, order_id: int, item_count: int | None, total: str | None) -> dict:
    """Tresc powiadomienia "zamowienie zlozone" (JSON-owalna, idzie przez broker)."""
    return {
        "user_id": user_id,
        "order_id": order_id,
        "item_count": item_count,
        "total": total,
        "subject": f"Order #{order_id} placed",
    }


class NotificationService:
    """
    Powiadomienie o zlozonym zamowieniu.
    Wysylane przez Celery dopiero po commicie transakcji, z liczba pozycji i kwota z katalogu.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, item_count: int | None = None, total: Decimal | None = None):
        #Decimal nie przechodzi przez serializer json celery
        send_order_notification_task.delay(user_id, order_id, item_count, str(total) if total is not None else None)


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, item_count: int | None = None, total: str | None = None):
    payload = build_order_notification(user_id, order_id, item_count, total)

    logger.info(
        f"[NOTIFICATION] User {user_id}: Order {order_id} has been placed "
        f"({item_count} item(s), total {total})"
    )

    return {**payload, "status": "sent"}
