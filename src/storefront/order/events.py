"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A bag was converted into a priced order at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_email = String(required=True)
    item_count = Integer(required=True)
    has_free_sample = Boolean(default=False)
    total = Float(required=True)
    currency = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class CancellationRequested:
    """The customer asked to cancel a pending order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String(required=True)
    requested_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """An admin accepted the customer's cancellation request."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderRefunded:
    """An admin accepted the customer's refund request."""

    __version__ = 1

    order_id = Identifier(required=True)
    refund_amount = Float(required=True)
    refunded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class TrackingCodeAssigned:
    """A carrier tracking code was set or corrected."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_code = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    assigned_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusOverridden:
    """An admin set the status directly, bypassing the guarded transitions."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    overridden_at = DateTime(required=True)


@storefront.event(part_of="Order")
class ShippingAddressCorrected:
    """An admin corrected the address snapshot of an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict
    corrected_at = DateTime(required=True)
