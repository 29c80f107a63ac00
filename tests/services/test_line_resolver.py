# tests/services/test_line_resolver.py
import pytest

from app.domain.enums import OrderMode, RefKind
from app.domain.errors import NotFound, ValidationError
from app.domain.lines import LineRef, LineRequest, ResolvedLine
from app.services.line_resolver import LineResolver
from tests._helpers import cart_row_line, product_line, token_line

USER = 1
OTHER_USER = 2


def test_direct_mode_defaults_quantity_to_one(session, product_factory):
    pid = product_factory()

    resolved = LineResolver(session).resolve(USER, OrderMode.DIRECT, [product_line(pid)])

    assert resolved == [ResolvedLine(product_id=pid, quantity=1, source_cart_row_id=None)]


def test_direct_mode_rejects_cart_row_reference(session):
    with pytest.raises(ValidationError):
        LineResolver(session).resolve(USER, OrderMode.DIRECT, [cart_row_line(5)])


def test_direct_mode_rejects_legacy_token(session):
    with pytest.raises(ValidationError):
        LineResolver(session).resolve(USER, OrderMode.DIRECT, [token_line(5)])


def test_cart_row_reference_uses_stored_quantity(session, product_factory, cart_row_factory):
    pid = product_factory()
    row_id = cart_row_factory(USER, pid, quantity=4)

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, [cart_row_line(row_id)])

    assert resolved == [ResolvedLine(product_id=pid, quantity=4, source_cart_row_id=row_id)]


def test_request_quantity_overrides_cart_row(session, product_factory, cart_row_factory):
    pid = product_factory()
    row_id = cart_row_factory(USER, pid, quantity=1)

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, [cart_row_line(row_id, quantity=3)])

    assert resolved[0].quantity == 3


def test_product_reference_finds_callers_cart_row(session, product_factory, cart_row_factory):
    pid = product_factory()
    cart_row_factory(OTHER_USER, pid, quantity=7)
    mine = cart_row_factory(USER, pid, quantity=2)

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, [product_line(pid)])

    assert resolved == [ResolvedLine(product_id=pid, quantity=2, source_cart_row_id=mine)]


def test_product_reference_with_several_variants_takes_oldest_row(session, product_factory, cart_row_factory):
    pid = product_factory()
    first = cart_row_factory(USER, pid, size="M")
    cart_row_factory(USER, pid, size="L")

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, [product_line(pid)])

    assert resolved[0].source_cart_row_id == first


def test_product_reference_without_cart_row_is_not_found(session, product_factory):
    pid = product_factory()

    with pytest.raises(NotFound) as exc:
        LineResolver(session).resolve(USER, OrderMode.CART, [product_line(pid)])

    assert exc.value.ref == pid


def test_cart_row_of_another_user_is_not_found(session, product_factory, cart_row_factory):
    pid = product_factory()
    foreign = cart_row_factory(OTHER_USER, pid)

    with pytest.raises(NotFound):
        LineResolver(session).resolve(USER, OrderMode.CART, [cart_row_line(foreign)])


def test_legacy_token_prefers_cart_row_id(session, product_factory, cart_row_factory):
    p1 = product_factory(name="first")
    p2 = product_factory(name="second")
    # wiersz koszyka o id == p1 wskazuje na p2, wiersz dla p1 tez istnieje
    row_a = cart_row_factory(USER, p2)
    cart_row_factory(USER, p1)
    assert row_a == p1

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, [token_line(p1)])

    assert resolved[0] == ResolvedLine(product_id=p2, quantity=1, source_cart_row_id=row_a)


def test_legacy_token_falls_back_to_product_id(session, product_factory, cart_row_factory):
    product_factory()
    product_factory()
    pid = product_factory()
    row_id = cart_row_factory(USER, pid, quantity=2)
    assert row_id != pid

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, [token_line(pid)])

    assert resolved == [ResolvedLine(product_id=pid, quantity=2, source_cart_row_id=row_id)]


def test_legacy_token_not_matching_anything_is_not_found(session):
    with pytest.raises(NotFound) as exc:
        LineResolver(session).resolve(USER, OrderMode.CART, [token_line(999)])

    assert exc.value.ref == 999


def test_cart_line_without_reference_is_rejected(session):
    with pytest.raises(ValidationError):
        LineResolver(session).resolve(USER, OrderMode.CART, [LineRequest(quantity=1)])


def test_duplicate_references_are_not_merged(session, product_factory, cart_row_factory):
    pid = product_factory()
    row_id = cart_row_factory(USER, pid, quantity=1)
    lines = [
        LineRequest(ref=LineRef(RefKind.CART_ROW, row_id)),
        LineRequest(ref=LineRef(RefKind.PRODUCT, pid), quantity=2),
    ]

    resolved = LineResolver(session).resolve(USER, OrderMode.CART, lines)

    assert [(r.product_id, r.quantity, r.source_cart_row_id) for r in resolved] == [
        (pid, 1, row_id),
        (pid, 2, row_id),
    ]
