# app/data/models/order.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.domain.enums import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    #snapshoty zapisywane bez walidacji
    shipping_address = Column(JSON, nullable=False, default=dict)
    payment_method = Column(String, nullable=False, default="")
    payment_details = Column(JSON, nullable=False, default=dict)

    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
    )
