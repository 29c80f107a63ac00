# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, AliasChoices
from typing import Any, List, Literal
from decimal import Decimal
from datetime import datetime

from app.domain.enums import RefKind
from app.domain.lines import LineRef, LineRequest


class LineRefIn(BaseModel):
    """Jawna referencja linii: wiersz koszyka albo produkt."""

    kind: Literal["cartRow", "product"]
    id: int


class LineIn(BaseModel):
    """
    Linia zamowienia. Preferowany format to `ref`.
    `productId` / `cartRowId` to skroty, `id` to stary niejednoznaczny token.
    `price` od klienta jest tylko informacyjne.
    """

    ref: LineRefIn | None = None
    id: int | None = None
    product_id: int | None = Field(None, alias="productId")
    cart_row_id: int | None = Field(None, alias="cartRowId")
    quantity: int | None = None
    price: Decimal | None = None

    model_config = ConfigDict(populate_by_name=True)

    def to_domain(self) -> LineRequest:
        if self.ref is not None:
            ref = LineRef(kind=RefKind(self.ref.kind), id=self.ref.id)
        elif self.cart_row_id is not None:
            ref = LineRef(kind=RefKind.CART_ROW, id=self.cart_row_id)
        elif self.product_id is not None:
            ref = LineRef(kind=RefKind.PRODUCT, id=self.product_id)
        elif self.id is not None:
            ref = LineRef(kind=RefKind.AMBIGUOUS, id=self.id)
        else:
            ref = None
        return LineRequest(ref=ref, quantity=self.quantity)


class PlaceOrderIn(BaseModel):
    """Schema dla skladania zamowienia."""

    mode: Literal["direct", "cart"]
    lines: List[LineIn] = Field(default_factory=list)
    shipping_address: dict[str, Any] = Field(default_factory=dict, alias="shippingAddress")
    payment_method: str = Field("", alias="paymentMethod")
    payment_details: dict[str, Any] = Field(default_factory=dict, alias="paymentDetails")
    declared_total: Decimal | None = Field(
        None,
        ge=0,
        max_digits=10,
        decimal_places=2,
        validation_alias=AliasChoices("declaredTotal", "totalAmount", "declared_total"),
    )

    model_config = ConfigDict(populate_by_name=True)


class PlaceOrderOut(BaseModel):
    success: bool = True
    order_id: int = Field(..., serialization_alias="orderId")


class CancelOrderOut(BaseModel):
    success: bool = True
    order_id: int = Field(..., serialization_alias="orderId")
    status: str


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    product_name: str | None = None
    product_images: Any = None


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: int
    user_id: int
    shipping_address: dict[str, Any]
    payment_method: str
    payment_details: dict[str, Any]
    total_amount: Decimal
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderWithItemsOut(OrderOut):
    items: List[OrderItemOut] = []


class OrderDetailOut(BaseModel):
    success: bool = True
    order: OrderOut
    items: List[OrderItemOut]


class OrderListOut(BaseModel):
    success: bool = True
    orders: List[OrderWithItemsOut]


class OrderStatusOut(BaseModel):
    id: int
    status: str
