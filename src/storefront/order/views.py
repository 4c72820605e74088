"""Plain-dict renderings of orders for actions and the HTTP layer."""

from storefront.order.address import format_shipping_address


def _iso(value):
    return value.isoformat() if value is not None else None


def item_view(item) -> dict:
    return {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "product_image": item.product_image,
        "product_slug": item.product_slug,
        "product_category": item.product_category,
        "product_volume": item.product_volume,
        "quantity": item.quantity,
        "price": item.price,
        "line_total": item.line_total,
        "is_free_sample": bool(item.is_free_sample),
    }


def summary_view(order) -> dict:
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "created_at": _iso(order.created_at),
        "customer_name": order.customer_name or "Unknown",
        "status": order.status,
        "total": order.total,
        "currency": order.currency,
    }


def order_view(order) -> dict:
    address = order.shipping_address
    return {
        **summary_view(order),
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "updated_at": _iso(order.updated_at),
        "tracking_code": order.tracking_code,
        "payment_method": order.payment_method,
        "last_four": order.last_four,
        "shipping_address": address.to_dict() if address is not None else None,
        "shipping_lines": format_shipping_address(address, order.currency) if address is not None else [],
        "allowed_transitions": sorted(status.value for status in order.allowed_transitions()),
        "items": [item_view(item) for item in order.items],
    }


def newest_first(orders) -> list:
    return sorted(orders, key=lambda o: (o.created_at is not None, o.created_at), reverse=True)
