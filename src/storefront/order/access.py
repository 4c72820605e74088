"""Shared plumbing for order actions: session checks, loading, dispatch.

Customer actions treat a missing order exactly like someone else's order so
that ids belonging to other users cannot be probed.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.identity.auth import current_session
from storefront.order.order import Order
from storefront.order.results import ORDER_NOT_FOUND, ActionResult, FailureKind
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def admin_session():
    session = current_session()
    if session is None or not session.is_admin:
        return None
    return session


def find_order(order_id) -> Order | None:
    if not order_id:
        return None
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        return None


def owned_order(order_id):
    """Return ``(session, order)`` for the signed-in owner, else ``(session, None)``."""
    session = current_session()
    if session is None:
        return None, None
    order = find_order(order_id)
    if order is None or not order.belongs_to(session.email):
        return session, None
    return session, order


def admin_order(order_id) -> tuple[ActionResult | None, Order | None]:
    """Admin check plus lookup. Returns a failure result or the order."""
    if admin_session() is None:
        return ActionResult.unauthorized(), None
    order = find_order(order_id)
    if order is None:
        return ActionResult.fail(ORDER_NOT_FOUND, FailureKind.NOT_FOUND), None
    return None, order


def dispatch(command, failure_message: str) -> ActionResult:
    """Process ``command`` synchronously and fold domain errors into a result.

    A ``ValidationError`` from a status guard becomes a conflict carrying the
    guard's message. Anything else is logged and reported as ``failure_message``.
    """
    try:
        current_domain.process(command, asynchronous=False)
    except ValidationError as exc:
        return ActionResult.fail(_first_message(exc, failure_message), FailureKind.CONFLICT)
    except Exception:
        logger.exception("order_command_failed", command=command.__class__.__name__)
        return ActionResult.fail(failure_message, FailureKind.INFRASTRUCTURE)
    return ActionResult.ok()


def _first_message(exc, default) -> str:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, (list, tuple)) and value:
                return str(value[0])
            if value:
                return str(value)
    return default
