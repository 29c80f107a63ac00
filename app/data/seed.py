# app/data/seed.py
from decimal import Decimal

from app.data.database import SessionLocal
from app.data.models import ProductModel

PRODUCTS = [
    {"id": 1, "name": "Keyboard", "price": Decimal("199.99"), "stock": 10},
    {"id": 2, "name": "Mouse", "price": Decimal("49.50"), "stock": 1},
    {"id": 3, "name": "Monitor", "price": Decimal("899.00"), "stock": None},
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        for data in PRODUCTS:
            db.add(ProductModel(sold=0, images=[], **data))
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
