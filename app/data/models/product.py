# app/data/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, JSON

from app.data.database import Base


class ProductModel(Base):
    """
    Produkt z katalogu. Katalog jest wlascicielem tabeli,
    serwis zamowien zmienia tylko stock/sold (warunkowym updatem).
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    images = Column(JSON, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=True)  # NULL = bez limitu
    sold = Column(Integer, nullable=False, default=0)
