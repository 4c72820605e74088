"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    order_number = String(required=True, max_length=30)
    user_id = Identifier()
    customer_email = String(required=True, max_length=254)
    customer_name = String(max_length=100)
    shipping_address = Text(required=True)  # JSON: ShippingAddress dict
    items = Text(required=True)  # JSON: list of priced OrderItem dicts
    currency = String(required=True, max_length=3)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.place(
            order_number=command.order_number,
            user_id=command.user_id,
            customer_email=command.customer_email,
            customer_name=command.customer_name,
            shipping_address=shipping_address,
            items_data=items_data,
            currency=command.currency,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
