"""
Checkout workflow: totals, price snapshots, cart clearing, stock, and what
is left behind when a step fails.
"""

import logging
import uuid
from decimal import Decimal
from typing import get_args

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from storefront.core.errors import EmptyCartError, NotFoundError, StoreError, ValidationError
from storefront.models.order import ORDER_STATUSES, Order, OrderItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import OrderCreate, OrderStatus
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService


@pytest.fixture
def cart_service():
    return CartService(CartRepository(), ProductRepository())


@pytest.fixture
def service():
    return OrderService(OrderRepository(), CartRepository(), ProductRepository())


@pytest.fixture
def payload(shipping_address):
    return OrderCreate.model_validate({"shipping_address": shipping_address})


@pytest.fixture
def filled_cart(session, cart_service, catalog, user_id):
    cart_service.add_to_cart(session, user_id, catalog["headphones"].id, 1)
    cart_service.add_to_cart(session, user_id, catalog["tshirt"].id, 2)


def _store_failure(*args, **kwargs):
    raise OperationalError("INSERT", {}, Exception("connection reset"))


def _count(session, model):
    return len(session.exec(select(model)).all())


def test_checkout_scenario(session, service, catalog, user_id, payload, filled_cart):
    order = service.create_order_from_cart(session, user_id, payload)

    assert order.total_amount == Decimal("249.97")
    assert order.status == "pending"
    assert order.user_id == user_id
    assert sorted(item.price for item in order.items) == [Decimal("24.99"), Decimal("199.99")]
    quantities = {item.product_id: item.quantity for item in order.items}
    assert quantities == {catalog["headphones"].id: 1, catalog["tshirt"].id: 2}
    assert service.cart_repo.list_for_user(session, user_id) == []


def test_checkout_snapshots_shipping_address(session, service, user_id, payload, filled_cart, shipping_address):
    order = service.create_order_from_cart(session, user_id, payload)

    assert order.shipping_address.model_dump() == shipping_address
    stored = session.get(Order, order.id)
    assert stored.shipping_address["city"] == "London"


def test_checkout_decrements_stock(session, service, catalog, user_id, payload, filled_cart):
    service.create_order_from_cart(session, user_id, payload)

    session.refresh(catalog["headphones"])
    session.refresh(catalog["tshirt"])
    assert catalog["headphones"].stock_quantity == 49
    assert catalog["tshirt"].stock_quantity == 98


def test_price_change_does_not_touch_past_orders(session, service, catalog, user_id, payload, filled_cart):
    order = service.create_order_from_cart(session, user_id, payload)

    headphones = catalog["headphones"]
    headphones.price = Decimal("149.99")
    session.add(headphones)
    session.commit()

    again = service.get_user_order(session, user_id, order.id)
    prices = {item.product_id: item.price for item in again.items}
    assert prices[headphones.id] == Decimal("199.99")
    assert again.total_amount == Decimal("249.97")


def test_empty_cart_creates_nothing(session, service, user_id, payload):
    with pytest.raises(EmptyCartError):
        service.create_order_from_cart(session, user_id, payload)

    assert _count(session, Order) == 0
    assert _count(session, OrderItem) == 0


def test_incomplete_address_is_rejected_before_writing(session, service, user_id, shipping_address, filled_cart):
    shipping_address["city"] = "   "
    del shipping_address["postal_code"]
    payload = OrderCreate.model_validate({"shipping_address": shipping_address})

    with pytest.raises(ValidationError) as exc_info:
        service.create_order_from_cart(session, user_id, payload)

    assert exc_info.value.detail["fields"] == ["city", "postal_code"]
    assert _count(session, Order) == 0
    assert len(service.cart_repo.list_for_user(session, user_id)) == 2


def test_stock_shortfall_is_rejected(session, service, cart_service, catalog, user_id, payload):
    watch = catalog["watch"]
    cart_service.add_to_cart(session, user_id, watch.id, 3)

    watch.stock_quantity = 2
    session.add(watch)
    session.commit()

    with pytest.raises(ValidationError):
        service.create_order_from_cart(session, user_id, payload)

    assert _count(session, Order) == 0
    session.refresh(watch)
    assert watch.stock_quantity == 2


def test_deactivated_product_in_cart_is_not_found(session, service, catalog, user_id, payload, filled_cart):
    tshirt = catalog["tshirt"]
    tshirt.is_active = False
    session.add(tshirt)
    session.commit()

    with pytest.raises(NotFoundError):
        service.create_order_from_cart(session, user_id, payload)
    assert _count(session, Order) == 0


def test_line_item_failure_leaves_no_order(session, service, user_id, payload, filled_cart, monkeypatch):
    monkeypatch.setattr(service.order_repo, "create_items", _store_failure)

    with pytest.raises(StoreError) as exc_info:
        service.create_order_from_cart(session, user_id, payload)

    assert exc_info.value.step == "order_items"
    assert exc_info.value.detail["step"] == "order_items"
    assert _count(session, Order) == 0
    assert _count(session, OrderItem) == 0
    assert len(service.cart_repo.list_for_user(session, user_id)) == 2


def test_lost_stock_race_rolls_back_order(session, service, catalog, user_id, payload, filled_cart, monkeypatch):
    monkeypatch.setattr(service.product_repo, "decrement_stock", lambda *args, **kwargs: False)

    with pytest.raises(ValidationError):
        service.create_order_from_cart(session, user_id, payload)

    assert _count(session, Order) == 0
    assert _count(session, OrderItem) == 0


def test_cart_clear_failure_keeps_order(session, service, user_id, payload, filled_cart, monkeypatch, caplog):
    monkeypatch.setattr(service.cart_repo, "clear_user_cart", _store_failure)

    with caplog.at_level(logging.WARNING, logger="storefront.services.order_service"):
        order = service.create_order_from_cart(session, user_id, payload)

    assert order.total_amount == Decimal("249.97")
    assert len(order.items) == 2
    assert _count(session, Order) == 1
    assert "could not be cleared" in caplog.text
    # the stale cart is still there for the shopper to clear
    assert len(service.cart_repo.list_for_user(session, user_id)) == 2


def test_orders_are_private(session, service, user_id, other_user_id, payload, filled_cart):
    order = service.create_order_from_cart(session, user_id, payload)

    with pytest.raises(NotFoundError):
        service.get_user_order(session, other_user_id, order.id)
    with pytest.raises(NotFoundError):
        service.get_user_order(session, user_id, uuid.uuid4())

    assert service.list_user_orders(session, other_user_id) == []


def test_list_orders_newest_first(session, service, cart_service, catalog, user_id, payload):
    cart_service.add_to_cart(session, user_id, catalog["tshirt"].id, 1)
    first = service.create_order_from_cart(session, user_id, payload)
    cart_service.add_to_cart(session, user_id, catalog["headphones"].id, 1)
    second = service.create_order_from_cart(session, user_id, payload)

    orders = service.list_user_orders(session, user_id)

    assert [o.id for o in orders] == [second.id, first.id]
    assert orders[0].items[0].product_name == "Wireless Bluetooth Headphones"
    assert orders[1].items[0].line_total == Decimal("24.99")


@pytest.mark.parametrize(
    "target, method, step",
    [
        ("order_repo", "create_order", "order"),
        ("order_repo", "create_items", "order_items"),
        ("product_repo", "decrement_stock", "stock"),
    ],
)
def test_failed_step_is_named_and_rolled_back(
    session, service, catalog, user_id, payload, filled_cart, monkeypatch, target, method, step
):
    monkeypatch.setattr(getattr(service, target), method, _store_failure)

    with pytest.raises(StoreError) as exc_info:
        service.create_order_from_cart(session, user_id, payload)

    assert exc_info.value.step == step
    assert exc_info.value.status_code == 503
    assert _count(session, Order) == 0
    assert _count(session, OrderItem) == 0
    session.refresh(catalog["headphones"])
    assert catalog["headphones"].stock_quantity == 50


def test_failed_commit_leaves_nothing_behind(session, service, catalog, user_id, payload, filled_cart, monkeypatch):
    monkeypatch.setattr(session, "commit", _store_failure)

    with pytest.raises(StoreError) as exc_info:
        service.create_order_from_cart(session, user_id, payload)

    assert exc_info.value.step == "commit"
    monkeypatch.undo()
    assert _count(session, Order) == 0
    assert _count(session, OrderItem) == 0
    session.refresh(catalog["tshirt"])
    assert catalog["tshirt"].stock_quantity == 100
    assert len(service.cart_repo.list_for_user(session, user_id)) == 2


def test_placed_order_is_returned_without_rereading_store(
    session, service, catalog, user_id, payload, filled_cart, monkeypatch
):
    monkeypatch.setattr(service.order_repo, "list_items_with_products", _store_failure)

    order = service.create_order_from_cart(session, user_id, payload)

    assert order.total_amount == Decimal("249.97")
    names = sorted(item.product_name for item in order.items)
    assert names == ["Casual Cotton T-Shirt", "Wireless Bluetooth Headphones"]
    assert _count(session, Order) == 1
    assert service.cart_repo.list_for_user(session, user_id) == []


def test_order_status_taxonomy():
    assert get_args(OrderStatus) == ORDER_STATUSES
    assert ORDER_STATUSES == ("pending", "processing", "shipped", "delivered", "cancelled")
