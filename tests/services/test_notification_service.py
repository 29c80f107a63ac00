# tests/services/test_notification_service.py
from decimal import Decimal

from app.services import notification_service
from app.services.notification_service import NotificationService, send_order_notification_task


def test_notification_is_queued_with_order_summary(monkeypatch):
    queued = []
    monkeypatch.setattr(send_order_notification_task, "delay", lambda *args: queued.append(args))

    NotificationService.send_order_notification(1, 42, item_count=3, total=Decimal("59.97"))

    # kwota jako string, Decimal nie przejdzie przez json
    assert queued == [(1, 42, 3, "59.97")]


def test_notification_task_payload():
    result = send_order_notification_task.run(1, 42, 3, "59.97")

    assert result == {
        "user_id": 1,
        "order_id": 42,
        "item_count": 3,
        "total": "59.97",
        "subject": "Order #42 placed",
        "status": "sent",
    }


def test_build_order_notification_without_summary():
    payload = notification_service.build_order_notification(7, 8, None, None)

    assert payload["order_id"] == 8
    assert payload["item_count"] is None
    assert payload["total"] is None
