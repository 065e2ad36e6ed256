"""
Cart rules: one line per (user, product), positive quantities, stock cap,
non-positive updates remove, compare-and-swap updates, totals and quote.
"""

import uuid
from decimal import Decimal

import pytest

from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services.cart_service import (
    CartService,
    build_quote,
    cart_total_amount,
    cart_total_items,
)


@pytest.fixture
def service():
    return CartService(CartRepository(), ProductRepository())


def test_repeated_add_bumps_single_line(session, service, catalog, user_id):
    headphones = catalog["headphones"]

    service.add_to_cart(session, user_id, headphones.id, 2)
    summary = service.add_to_cart(session, user_id, headphones.id, 3)

    assert len(summary.items) == 1
    assert summary.items[0].quantity == 5
    assert len(service.cart_repo.list_for_user(session, user_id)) == 1


def test_add_defaults_to_one(session, service, catalog, user_id):
    summary = service.add_to_cart(session, user_id, catalog["tshirt"].id)
    assert summary.total_items == 1


@pytest.mark.parametrize("quantity", [0, -2])
def test_add_rejects_non_positive_quantity(session, service, catalog, user_id, quantity):
    with pytest.raises(ValidationError):
        service.add_to_cart(session, user_id, catalog["tshirt"].id, quantity)
    assert service.cart_repo.list_for_user(session, user_id) == []


def test_add_inactive_or_unknown_product_is_not_found(session, service, catalog, user_id):
    with pytest.raises(NotFoundError):
        service.add_to_cart(session, user_id, catalog["retired"].id, 1)
    with pytest.raises(NotFoundError):
        service.add_to_cart(session, user_id, uuid.uuid4(), 1)


def test_add_over_stock_is_rejected(session, service, catalog, user_id):
    watch = catalog["watch"]  # stock 3
    service.add_to_cart(session, user_id, watch.id, 2)

    with pytest.raises(ValidationError):
        service.add_to_cart(session, user_id, watch.id, 2)

    line = service.cart_repo.get_item(session, user_id, watch.id)
    assert line.quantity == 2


def test_insert_race_surfaces_as_conflict(session, service, catalog, user_id, monkeypatch):
    tshirt = catalog["tshirt"]
    service.add_to_cart(session, user_id, tshirt.id, 1)

    # Pretend the existing row was not visible when we checked.
    monkeypatch.setattr(service.cart_repo, "get_item", lambda *args, **kwargs: None)

    with pytest.raises(ConflictError):
        service.add_to_cart(session, user_id, tshirt.id, 1)

    monkeypatch.undo()
    assert service.cart_repo.get_item(session, user_id, tshirt.id).quantity == 1


@pytest.mark.parametrize("quantity", [0, -1])
def test_non_positive_update_removes_line(session, service, catalog, user_id, quantity):
    summary = service.add_to_cart(session, user_id, catalog["tshirt"].id, 2)
    line_id = summary.items[0].id

    summary = service.update_quantity(session, user_id, line_id, quantity)

    assert summary.items == []
    assert service.cart_repo.list_for_user(session, user_id) == []


def test_update_sets_quantity(session, service, catalog, user_id):
    summary = service.add_to_cart(session, user_id, catalog["tshirt"].id, 2)
    summary = service.update_quantity(session, user_id, summary.items[0].id, 7)
    assert summary.items[0].quantity == 7
    assert summary.total_amount == Decimal("174.93")


def test_update_over_stock_is_rejected(session, service, catalog, user_id):
    summary = service.add_to_cart(session, user_id, catalog["watch"].id, 1)
    with pytest.raises(ValidationError):
        service.update_quantity(session, user_id, summary.items[0].id, 4)


def test_update_with_expected_quantity(session, service, catalog, user_id):
    summary = service.add_to_cart(session, user_id, catalog["tshirt"].id, 2)
    line_id = summary.items[0].id

    with pytest.raises(ConflictError):
        service.update_quantity(session, user_id, line_id, 5, expected_quantity=3)

    summary = service.update_quantity(session, user_id, line_id, 5, expected_quantity=2)
    assert summary.items[0].quantity == 5


def test_other_users_line_is_not_found(session, service, catalog, user_id, other_user_id):
    summary = service.add_to_cart(session, user_id, catalog["tshirt"].id, 1)
    line_id = summary.items[0].id

    with pytest.raises(NotFoundError):
        service.update_quantity(session, other_user_id, line_id, 3)
    with pytest.raises(NotFoundError):
        service.remove_item(session, other_user_id, line_id)

    assert len(service.cart_repo.list_for_user(session, user_id)) == 1


def test_clear_only_touches_own_cart(session, service, catalog, user_id, other_user_id):
    service.add_to_cart(session, user_id, catalog["tshirt"].id, 1)
    service.add_to_cart(session, user_id, catalog["headphones"].id, 1)
    service.add_to_cart(session, other_user_id, catalog["tshirt"].id, 1)

    summary = service.clear_cart(session, user_id)

    assert summary.items == []
    assert summary.total_amount == Decimal("0.00")
    assert service.cart_repo.list_for_user(session, user_id) == []
    assert len(service.cart_repo.list_for_user(session, other_user_id)) == 1


def test_summary_uses_live_price(session, service, catalog, user_id):
    tshirt = catalog["tshirt"]
    service.add_to_cart(session, user_id, tshirt.id, 2)

    tshirt.price = Decimal("19.99")
    session.add(tshirt)
    session.commit()

    summary = service.get_cart_summary(session, user_id)
    assert summary.total_amount == Decimal("39.98")
    assert summary.items[0].line_total == Decimal("39.98")


def test_totals_are_pure_sums():
    headphones = Product(name="Headphones", price=Decimal("199.99"), stock_quantity=5)
    tshirt = Product(name="T-Shirt", price=Decimal("24.99"), stock_quantity=5)
    lines = [
        (CartItem(user_id=uuid.uuid4(), product_id=uuid.uuid4(), quantity=1), headphones),
        (CartItem(user_id=uuid.uuid4(), product_id=uuid.uuid4(), quantity=2), tshirt),
    ]

    assert cart_total_amount(lines) == Decimal("249.97")
    assert cart_total_items(lines) == 3
    assert cart_total_amount([]) == Decimal("0.00")


def test_quote_below_free_shipping_threshold():
    quote = build_quote(Decimal("40.00"))
    assert quote.shipping_cost == Decimal("9.99")
    assert quote.tax_amount == Decimal("3.20")
    assert quote.estimated_total == Decimal("53.19")


def test_quote_above_free_shipping_threshold():
    quote = build_quote(Decimal("249.97"))
    assert quote.shipping_cost == Decimal("0.00")
    assert quote.tax_amount == Decimal("20.00")
    assert quote.estimated_total == Decimal("269.97")


def test_quote_for_empty_cart_is_zero():
    quote = build_quote(Decimal("0"))
    assert quote.shipping_cost == Decimal("0.00")
    assert quote.estimated_total == Decimal("0.00")
