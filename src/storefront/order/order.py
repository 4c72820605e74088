"""Order aggregate — a priced snapshot of a bag plus its fulfilment lifecycle.

Every line copies the product name, image, slug, category and volume label at
checkout time, so later catalogue edits never rewrite an order.

Guarded transitions:
    PENDING → CANCELLING → CANCELLED      (customer request, admin accepts)
    PENDING → SHIPPED → DELIVERED         (tracking code assignment ships the order)
    PENDING → REQUESTED → REFUNDED        (refund request, admin accepts)

Orders are placed in PROCESSING. Admins may also set any status directly
with ``override_status``; that path skips the guards above.
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import (
    CancellationRequested,
    OrderCancelled,
    OrderPlaced,
    OrderRefunded,
    OrderStatusOverridden,
    ShippingAddressCorrected,
    TrackingCodeAssigned,
)


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLING = "CANCELLING"
    CANCELLED = "CANCELLED"
    REQUESTED = "REQUESTED"
    REFUNDED = "REFUNDED"


# Transitions available through guarded operations. Admin overrides ignore this map.
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CANCELLING, OrderStatus.SHIPPED, OrderStatus.REQUESTED},
    OrderStatus.PROCESSING: set(),
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLING: {OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.REQUESTED: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),
}

TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}

TRACKING_CODE_PATTERN = re.compile(r"^[A-Za-z0-9-]{1,50}$")

DEFAULT_PAYMENT_METHOD = "demo"


def is_valid_tracking_code(code) -> bool:
    return isinstance(code, str) and bool(TRACKING_CODE_PATTERN.match(code))


def parse_status(value) -> OrderStatus:
    """Map a status string onto ``OrderStatus``; raises ``ValidationError`` for unknown values."""
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError({"status": ["invalidStatus"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, frozen at checkout. Admins may correct it later."""

    recipient_name = String(required=True, max_length=100)
    recipient_phone = String(max_length=20)
    line1 = String(required=True, max_length=200)
    line2 = String(max_length=200)
    city = String(required=True, max_length=100)
    region = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_image = String(max_length=500)
    product_slug = String(max_length=200)
    product_category = String(max_length=100)
    product_volume = String(max_length=50)  # None for the free sample
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    is_free_sample = Boolean(default=False)

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier()
    customer_email = String(required=True, max_length=254)
    customer_name = String(max_length=100)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderItem)
    total = Float(default=0.0, min_value=0.0)
    currency = String(max_length=3, default="USD")
    status = String(choices=OrderStatus, default=OrderStatus.PROCESSING.value)
    tracking_code = String(max_length=50)
    payment_method = String(max_length=50, default=DEFAULT_PAYMENT_METHOD)
    last_four = String(max_length=4)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def at_most_one_free_sample(self):
        if sum(1 for item in self.items if item.is_free_sample) > 1:
            raise ValidationError({"items": ["An order may contain at most one free sample"]})

    @invariant.post
    def free_sample_is_complimentary(self):
        for item in self.items:
            if item.is_free_sample and (item.price != 0 or item.quantity != 1):
                raise ValidationError({"items": ["A free sample must have quantity 1 and price 0"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_email,
        shipping_address,
        items_data,
        currency,
        user_id=None,
        customer_name=None,
    ):
        """Create a PROCESSING order from already-priced line dicts.

        Args:
            order_number: Human-readable number, see ``storefront.order.numbers``.
            shipping_address: Dict matching ``ShippingAddress`` fields.
            items_data: List of dicts matching ``OrderItem`` fields.
            currency: ISO code of the market the prices were read from.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            user_id=user_id,
            customer_email=customer_email,
            customer_name=customer_name,
            shipping_address=ShippingAddress(**shipping_address),
            currency=currency,
            status=OrderStatus.PROCESSING.value,
            payment_method=DEFAULT_PAYMENT_METHOD,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(OrderItem(**item_data))
        order.total = order.compute_total()

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_email=customer_email,
                item_count=len(order.items),
                has_free_sample=order.free_sample is not None,
                total=order.total,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def compute_total(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items if not item.is_free_sample), 2)

    @property
    def free_sample(self):
        return next((item for item in self.items if item.is_free_sample), None)

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def allowed_transitions(self) -> set[OrderStatus]:
        return set(_VALID_TRANSITIONS.get(self.current_status, set()))

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATES

    def belongs_to(self, email) -> bool:
        return bool(email) and self.customer_email == email

    # -------------------------------------------------------------------
    # Guarded transitions
    # -------------------------------------------------------------------
    def _touch(self) -> datetime:
        now = datetime.now(UTC)
        self.updated_at = now
        return now

    def request_cancellation(self):
        """Customer asks to cancel. Only PENDING orders qualify."""
        if self.current_status != OrderStatus.PENDING:
            raise ValidationError({"status": ["Only pending orders can be cancelled"]})

        self.status = OrderStatus.CANCELLING.value
        now = self._touch()
        self.raise_(
            CancellationRequested(
                order_id=str(self.id),
                customer_email=self.customer_email,
                requested_at=now,
            )
        )

    def accept_cancellation(self):
        if self.current_status != OrderStatus.CANCELLING:
            raise ValidationError({"status": ["Order is not in CANCELLING status"]})

        self.status = OrderStatus.CANCELLED.value
        now = self._touch()
        self.raise_(OrderCancelled(order_id=str(self.id), cancelled_at=now))

    def accept_refund(self):
        if self.current_status != OrderStatus.REQUESTED:
            raise ValidationError({"status": ["Order is not in REQUESTED status"]})

        self.status = OrderStatus.REFUNDED.value
        now = self._touch()
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                refund_amount=self.total,
                refunded_at=now,
            )
        )

    def assign_tracking_code(self, tracking_code):
        """Set the carrier code. A PENDING order becomes SHIPPED; other statuses stay."""
        code = (tracking_code or "").strip()
        if not is_valid_tracking_code(code):
            raise ValidationError({"tracking_code": ["invalidTrackingCode"]})

        previous = self.current_status
        self.tracking_code = code
        if previous == OrderStatus.PENDING:
            self.status = OrderStatus.SHIPPED.value
        now = self._touch()

        self.raise_(
            TrackingCodeAssigned(
                order_id=str(self.id),
                tracking_code=code,
                previous_status=previous.value,
                new_status=self.status,
                assigned_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Admin corrections
    # -------------------------------------------------------------------
    def override_status(self, status):
        target = parse_status(status)
        previous = self.current_status

        self.status = target.value
        now = self._touch()
        self.raise_(
            OrderStatusOverridden(
                order_id=str(self.id),
                previous_status=previous.value,
                new_status=target.value,
                overridden_at=now,
            )
        )

    def correct_shipping_address(self, address: dict):
        self.shipping_address = ShippingAddress(**address)
        now = self._touch()
        self.raise_(
            ShippingAddressCorrected(
                order_id=str(self.id),
                shipping_address=json.dumps(self.shipping_address.to_dict()),
                corrected_at=now,
            )
        )
