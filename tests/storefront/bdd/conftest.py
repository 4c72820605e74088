"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.order.events import (
    CancellationRequested,
    OrderCancelled,
    OrderPlaced,
    OrderRefunded,
    OrderStatusOverridden,
    TrackingCodeAssigned,
)
from storefront.order.order import Order

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "CancellationRequested": CancellationRequested,
    "OrderCancelled": OrderCancelled,
    "OrderRefunded": OrderRefunded,
    "TrackingCodeAssigned": TrackingCodeAssigned,
    "OrderStatusOverridden": OrderStatusOverridden,
}

SHIPPING = {
    "recipient_name": "Ines Duval",
    "line1": "12 Rue des Lilas",
    "city": "Lyon",
    "postal_code": "69003",
    "country": "France",
}


@pytest.fixture()
def error():
    """Container for a captured validation error."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an order for "{email}" totalling {total:f} {currency}'),
    target_fixture="order",
)
def placed_order(email, total, currency):
    order = Order.place(
        order_number="AMP-20260101-00000A",
        customer_email=email,
        shipping_address=SHIPPING,
        items_data=[{"product_id": "prod-001", "product_name": "Rose Noir", "quantity": 1, "price": total}],
        currency=currency,
    )
    order._events.clear()
    return order


@given(parsers.cfparse('the order is "{status}"'))
def order_in_status(order, status):
    order.status = status


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the order offers no transitions")
def no_transitions(order):
    assert order.allowed_transitions() == set()


@then(parsers.cfparse('the action fails with "{message}"'))
def action_fails(error, message):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
    assert message in error["exc"].messages["status"]


@then(parsers.cfparse("a {event_type} event is raised"))
def event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"
