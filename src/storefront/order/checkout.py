"""Checkout — turns a client-held bag into a priced, persisted order.

Nothing the client sends is trusted beyond ids and quantities: names,
images, categories, volume labels and prices are all read from the catalogue
for the request locale. Lines that no longer resolve are skipped silently.
"""

import json

from protean.utils.globals import current_domain

from storefront.bag.bag import as_line
from storefront.catalogue import reads
from storefront.identity.auth import current_session
from storefront.identity.user import find_user_by_email
from storefront.locale import currency_for
from storefront.order.address import validate_address
from storefront.order.numbers import generate_order_number
from storefront.order.placement import PlaceOrder
from storefront.order.results import ActionResult, FailureKind
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SIGN_IN_REQUIRED = "You must be signed in to place an order"
EMPTY_BAG = "Your shopping bag is empty"
USER_NOT_FOUND = "User not found"
NOTHING_AVAILABLE = "None of the items in your bag are available"
ORDER_FAILED = "Failed to create order. Please try again."


def get_user_address() -> dict | None:
    """Profile address of the signed-in user in checkout-form shape, or ``None``."""
    session = current_session()
    if session is None:
        return None

    user = find_user_by_email(session.email)
    if user is None or user.address is None:
        return None

    address = user.address
    return {
        "recipientName": user.name or "",
        "recipientPhone": user.phone or "",
        "addressLine1": address.address_line1,
        "addressLine2": address.address_line2 or "",
        "city": address.city,
        "region": address.region or "",
        "postalCode": address.postal_code,
        "country": address.country,
    }


def _order_item(resolved, quantity, is_free_sample=False) -> dict:
    return {
        "product_id": resolved.product_id,
        "product_name": resolved.product_name,
        "product_image": resolved.product_image,
        "product_slug": resolved.product_slug,
        "product_category": resolved.category_name,
        "product_volume": resolved.volume_display,
        "quantity": quantity,
        "price": resolved.price,
        "is_free_sample": is_free_sample,
    }


def price_lines(items, selected_sample, locale) -> list[dict]:
    """Re-resolve bag lines (and the optional sample) into order item dicts."""
    lines = [line for line in (as_line(item) for item in items) if line is not None]
    products = {str(p.id): p for p in reads.find_products_by_ids(line.product_id for line in lines)}
    sample = reads.find_product_by_slug(selected_sample) if selected_sample else None

    context_products = list(products.values()) + ([sample] if sample is not None else [])
    context = reads.load_context(context_products)

    order_items = []
    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            logger.info("checkout_line_skipped", product_id=line.product_id, reason="product_unavailable")
            continue
        resolved = reads.resolve_line(product, line.volume_id, locale, context)
        if resolved is None:
            logger.info(
                "checkout_line_skipped",
                product_id=line.product_id,
                volume_id=line.volume_id,
                reason="volume_not_offered",
            )
            continue
        order_items.append(_order_item(resolved, line.quantity))

    if sample is not None:
        resolved = reads.resolve_sample(sample, locale, context)
        if resolved is not None:
            order_items.append(_order_item(resolved, 1, is_free_sample=True))
    elif selected_sample:
        logger.info("checkout_sample_skipped", product_slug=selected_sample)

    return order_items


def create_order(items, selected_sample, address, locale) -> ActionResult:
    """Place an order for the signed-in user.

    Checks run in a fixed order: session, address fields, empty bag. On
    success ``data`` holds ``order_id`` and ``order_number``.
    """
    session = current_session()
    if session is None:
        return ActionResult.fail(SIGN_IN_REQUIRED, FailureKind.UNAUTHORIZED)

    validation = validate_address(address)
    if not validation.ok:
        return ActionResult.invalid(validation.field_errors)

    items = list(items or [])
    if not items:
        return ActionResult.fail(EMPTY_BAG, FailureKind.VALIDATION)

    try:
        user = find_user_by_email(session.email)
        if user is None:
            return ActionResult.fail(USER_NOT_FOUND, FailureKind.FORBIDDEN)

        order_items = price_lines(items, selected_sample, locale)
        if not any(not item["is_free_sample"] for item in order_items):
            return ActionResult.fail(NOTHING_AVAILABLE, FailureKind.UNAVAILABLE)

        order_number = generate_order_number()
        order_id = current_domain.process(
            PlaceOrder(
                order_number=order_number,
                user_id=str(user.id),
                customer_email=session.email,
                customer_name=user.name,
                shipping_address=json.dumps(validation.value),
                items=json.dumps(order_items),
                currency=currency_for(locale),
            ),
            asynchronous=False,
        )
    except Exception:
        logger.exception("order_creation_failed", customer_email=session.email)
        return ActionResult.fail(ORDER_FAILED, FailureKind.INFRASTRUCTURE)

    logger.info("order_created", order_id=order_id, order_number=order_number, item_count=len(order_items))
    return ActionResult.ok({"order_id": order_id, "order_number": order_number})
