"""Order actions for the admin console.

Every action requires an admin session. Unlike customer actions, a missing
order is reported as "Order not found": admins may see every order.
"""

import json

from protean.utils.globals import current_domain

from storefront.order.access import admin_order, admin_session, dispatch
from storefront.order.address import validate_address
from storefront.order.administration import AssignTrackingCode, CorrectShippingAddress, OverrideOrderStatus
from storefront.order.cancellation import AcceptCancellation, AcceptRefund
from storefront.order.order import Order, OrderStatus, is_valid_tracking_code
from storefront.order.results import ActionResult, FailureKind
from storefront.order.views import newest_first, order_view, summary_view
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

RECENT_ORDERS_LIMIT = 10


def read_recent_orders(limit: int = RECENT_ORDERS_LIMIT) -> ActionResult:
    if admin_session() is None:
        return ActionResult.unauthorized()
    try:
        orders = current_domain.repository_for(Order)._dao.query.all().items
    except Exception:
        logger.exception("read_recent_orders_failed")
        return ActionResult.fail("Failed to read recent orders", FailureKind.INFRASTRUCTURE)
    return ActionResult.ok([summary_view(order) for order in newest_first(orders)[: max(limit, 0)]])


def read_order(order_id) -> ActionResult:
    failure, order = admin_order(order_id)
    if failure is not None:
        return failure
    return ActionResult.ok(order_view(order))


def accept_cancel_request(order_id) -> ActionResult:
    failure, order = admin_order(order_id)
    if failure is not None:
        return failure
    if order.current_status != OrderStatus.CANCELLING:
        return ActionResult.fail("Order is not in CANCELLING status", FailureKind.CONFLICT)

    result = dispatch(AcceptCancellation(order_id=str(order.id)), "Failed to accept cancel request")
    if result.success:
        logger.info("cancellation_accepted", order_id=str(order.id))
    return result


def accept_refund_request(order_id) -> ActionResult:
    failure, order = admin_order(order_id)
    if failure is not None:
        return failure
    if order.current_status != OrderStatus.REQUESTED:
        return ActionResult.fail("Order is not in REQUESTED status", FailureKind.CONFLICT)

    result = dispatch(AcceptRefund(order_id=str(order.id)), "Failed to accept refund request")
    if result.success:
        logger.info("refund_accepted", order_id=str(order.id), amount=order.total)
    return result


def update_tracking_code(order_id, tracking_code) -> ActionResult:
    """Set the carrier tracking code. A PENDING order moves to SHIPPED."""
    failure, order = admin_order(order_id)
    if failure is not None:
        return failure

    code = (tracking_code or "").strip()
    if not is_valid_tracking_code(code):
        return ActionResult.invalid({"trackingCode": "invalidTrackingCode"})

    result = dispatch(
        AssignTrackingCode(order_id=str(order.id), tracking_code=code),
        "Failed to update tracking code",
    )
    if result.success:
        logger.info("tracking_code_assigned", order_id=str(order.id), previous_status=order.status)
    return result


def update_order_status(order_id, status) -> ActionResult:
    """Set any enumerated status, bypassing the lifecycle guards."""
    failure, order = admin_order(order_id)
    if failure is not None:
        return failure

    allowed = {s.value for s in OrderStatus}
    value = str(status or "").strip().upper()
    if value not in allowed:
        return ActionResult.invalid({"status": "invalidStatus"})

    result = dispatch(
        OverrideOrderStatus(order_id=str(order.id), status=value),
        "Failed to update order status",
    )
    if result.success:
        logger.info("order_status_overridden", order_id=str(order.id), previous_status=order.status, new_status=value)
    return result


def update_order_address(order_id, data) -> ActionResult:
    failure, order = admin_order(order_id)
    if failure is not None:
        return failure

    validation = validate_address(data)
    if not validation.ok:
        return ActionResult.invalid(validation.field_errors, error="Validation failed")

    return dispatch(
        CorrectShippingAddress(order_id=str(order.id), shipping_address=json.dumps(validation.value)),
        "Failed to update address",
    )
