# app/domain/enums.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderMode(str, Enum):
    """direct = "kup teraz", cart = checkout z zapisanego koszyka"""

    DIRECT = "direct"
    CART = "cart"


class RefKind(str, Enum):
    CART_ROW = "cartRow"
    PRODUCT = "product"
    # stary format {id: N} - moze byc id wiersza koszyka albo id produktu
    AMBIGUOUS = "ambiguous"
