# app/domain/lines.py
from dataclasses import dataclass

from app.domain.enums import RefKind


@dataclass(frozen=True)
class LineRef:
    kind: RefKind
    id: int


@dataclass(frozen=True)
class LineRequest:
    """Pojedyncza linia zamowienia tak jak przyszla od klienta."""

    ref: LineRef | None = None
    quantity: int | None = None


@dataclass(frozen=True)
class ResolvedLine:
    """Kanoniczna linia po rozwiazaniu referencji."""

    product_id: int
    quantity: int
    source_cart_row_id: int | None = None
