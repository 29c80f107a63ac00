# tests/conftest.py
import os
import tempfile
from decimal import Decimal

# baza testowa musi byc ustawiona przed importem app.*
_DB_DIR = tempfile.mkdtemp(prefix="order-service-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'orders.db')}"

import pytest  # noqa: E402
from sqlalchemy import select  # noqa: E402

from app.data.database import Base, SessionLocal, engine  # noqa: E402
from app.data.models import CartItemModel, OrderItemModel, OrderModel, ProductModel  # noqa: E402


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_session():
    """Dodatkowe, niezalezne sesje (symulacja rownoleglych requestow)."""
    opened = []

    def _make():
        db = SessionLocal()
        opened.append(db)
        return db

    yield _make
    for db in opened:
        db.close()


@pytest.fixture
def product_factory():
    def _create(price="10.00", stock=5, name="Product", images=None, sold=0) -> int:
        db = SessionLocal()
        try:
            product = ProductModel(
                name=name,
                price=Decimal(price),
                stock=stock,
                sold=sold,
                images=images or [],
            )
            db.add(product)
            db.commit()
            return product.id
        finally:
            db.close()

    return _create


@pytest.fixture
def cart_row_factory():
    def _create(user_id: int, product_id: int, quantity=1, size=None, color=None) -> int:
        db = SessionLocal()
        try:
            row = CartItemModel(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                size=size,
                color=color,
            )
            db.add(row)
            db.commit()
            return row.id
        finally:
            db.close()

    return _create


class DbState:
    """Odczyt stanu bazy swieza sesja, niezaleznie od sesji testowanego serwisu."""

    def _query(self, fn):
        db = SessionLocal()
        try:
            return fn(db)
        finally:
            db.close()

    def product(self, product_id: int):
        return self._query(
            lambda db: db.execute(
                select(ProductModel.stock, ProductModel.sold).where(ProductModel.id == product_id)
            ).one()
        )

    def orders(self) -> list:
        return self._query(lambda db: list(db.execute(select(OrderModel)).scalars().all()))

    def items(self, order_id: int | None = None) -> list:
        def _items(db):
            stmt = select(OrderItemModel).order_by(OrderItemModel.id)
            if order_id is not None:
                stmt = stmt.where(OrderItemModel.order_id == order_id)
            return list(db.execute(stmt).scalars().all())

        return self._query(_items)

    def set_order_status(self, order_id: int, status: str) -> None:
        def _set(db):
            db.get(OrderModel, order_id).status = status
            db.commit()

        self._query(_set)

    def order(self, order_id: int):
        return self._query(lambda db: db.get(OrderModel, order_id))

    def cart_row_ids(self, user_id: int) -> list[int]:
        return self._query(
            lambda db: list(
                db.execute(
                    select(CartItemModel.id).where(CartItemModel.user_id == user_id).order_by(CartItemModel.id)
                ).scalars().all()
            )
        )


@pytest.fixture
def db_state() -> DbState:
    return DbState()


class FakeNotifier:
    def __init__(self):
        self.sent = []
        self.details = []

    def send_order_notification(self, user_id: int, order_id: int, item_count=None, total=None):
        self.sent.append((user_id, order_id))
        self.details.append({"order_id": order_id, "item_count": item_count, "total": total})


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
