"""Order actions available to the signed-in customer."""

from protean.utils.globals import current_domain

from storefront.identity.auth import current_session
from storefront.order.access import dispatch, owned_order
from storefront.order.cancellation import RequestCancellation
from storefront.order.order import Order, OrderStatus
from storefront.order.results import UNAUTHORIZED, ActionResult, FailureKind
from storefront.order.views import newest_first, order_view, summary_view
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CANCELLATION_FAILED = "Failed to request cancellation"


def _hidden(session) -> ActionResult:
    # Signed out, not found and not yours all look the same to the caller
    kind = FailureKind.UNAUTHORIZED if session is None else FailureKind.FORBIDDEN
    return ActionResult.fail(UNAUTHORIZED, kind)


def request_cancel_order(order_id) -> ActionResult:
    """Ask for a PENDING order to be cancelled. An admin must accept it."""
    session, order = owned_order(order_id)
    if order is None:
        return _hidden(session)

    if order.current_status != OrderStatus.PENDING:
        return ActionResult.fail("Only pending orders can be cancelled", FailureKind.CONFLICT)

    result = dispatch(RequestCancellation(order_id=str(order.id)), CANCELLATION_FAILED)
    if result.success:
        logger.info("cancellation_requested", order_id=str(order.id), customer_email=session.email)
    return result


def list_my_orders() -> ActionResult:
    session = current_session()
    if session is None:
        return _hidden(None)

    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.filter(customer_email=session.email).all().items
    return ActionResult.ok([summary_view(order) for order in newest_first(orders)])


def get_my_order(order_id) -> ActionResult:
    session, order = owned_order(order_id)
    if order is None:
        return _hidden(session)
    return ActionResult.ok(order_view(order))
