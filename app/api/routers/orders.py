# app/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.enums import OrderStatus
from app.domain.errors import (
    OrderError,
    ValidationError,
    NotFound,
    InsufficientStock,
    InsufficientStockRace,
    OrderNotCancellable,
    StorageFault,
)
from app.domain.schemas import (
    PlaceOrderIn,
    PlaceOrderOut,
    CancelOrderOut,
    OrderDetailOut,
    OrderListOut,
    OrderStatusOut,
)
from app.services.notification_service import NotificationService
from app.services.order_query_service import OrderQueryService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

# kolejnosc ma znaczenie, InsufficientStockRace dziedziczy po InsufficientStock
_STATUS_CODES = [
    (ValidationError, 400),
    (NotFound, 404),
    (OrderNotCancellable, 400),
    (InsufficientStockRace, 409),
    (InsufficientStock, 400),
    (StorageFault, 500),
]


def to_http_error(e: OrderError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=e.to_dict())
    return HTTPException(status_code=500, detail=e.to_dict())


def get_notifier():
    return NotificationService()


@router.post("/place-order", response_model=PlaceOrderOut, status_code=201)
def place_order(
    payload: PlaceOrderIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
):
    """
    Sklada zamowienie w trybie direct (kup teraz) albo cart (z koszyka).
    """
    svc = OrderService(db, notifier=notifier)
    try:
        order_id = svc.place_order(
            user_id=user_id,
            mode=payload.mode,
            lines=[line.to_domain() for line in payload.lines],
            shipping_address=payload.shipping_address,
            payment_method=payload.payment_method,
            payment_details=payload.payment_details,
            declared_total=payload.declared_total,
        )
    except OrderError as e:
        raise to_http_error(e)
    return PlaceOrderOut(order_id=order_id)


@router.get("/", response_model=OrderListOut)
def list_orders(
    user_id: int = Query(...),
    status: str | None = Query(None),
    limit: int | None = Query(None, gt=0),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    Zamowienia uzytkownika, najnowsze pierwsze, razem z pozycjami.
    """
    svc = OrderQueryService(db)
    orders = svc.list_orders(user_id, status=status, limit=limit, offset=offset)
    return {"success": True, "orders": orders}


@router.get("/status", response_model=list[OrderStatusOut])
def get_statuses(
    user_id: int = Query(...),
    ids: str = Query(""),
    db: Session = Depends(get_db),
):
    svc = OrderQueryService(db)
    try:
        order_ids = [int(i) for i in ids.split(",") if i.strip()]
    except ValueError:
        raise to_http_error(ValidationError(f"Invalid order ids: {ids}"))
    try:
        return svc.get_statuses(user_id, order_ids)
    except OrderError as e:
        raise to_http_error(e)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegoly zamowienia.
    """
    svc = OrderQueryService(db)
    try:
        return {"success": True, **svc.get_order(order_id, user_id)}
    except OrderError as e:
        raise to_http_error(e)


@router.put("/{order_id}/cancel", response_model=CancelOrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    Anuluje zamowienie w statusie pending albo confirmed.
    """
    svc = OrderService(db)
    try:
        svc.cancel_order(order_id, user_id)
    except OrderError as e:
        raise to_http_error(e)
    return CancelOrderOut(order_id=order_id, status=OrderStatus.CANCELLED.value)


@router.post("/{order_id}/reorder", response_model=PlaceOrderOut, status_code=201)
def reorder(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
):
    """
    Sklada nowe zamowienie z pozycji starego (ceny i stan z aktualnego katalogu).
    """
    svc = OrderService(db, notifier=notifier)
    try:
        new_order_id = svc.reorder(order_id, user_id)
    except OrderError as e:
        raise to_http_error(e)
    return PlaceOrderOut(order_id=new_order_id)
