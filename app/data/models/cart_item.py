# app/data/models/cart_item.py
from sqlalchemy import Column, Integer, String

from app.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=1)

    #wariant produktu
    size = Column(String, nullable=True)
    color = Column(String, nullable=True)
