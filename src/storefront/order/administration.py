"""Admin order corrections — tracking code, status override, address fix."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class AssignTrackingCode:
    order_id = Identifier(required=True)
    tracking_code = String(required=True, max_length=50)


@storefront.command(part_of="Order")
class OverrideOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command(part_of="Order")
class CorrectShippingAddress:
    order_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: ShippingAddress dict


@storefront.command_handler(part_of=Order)
class AdministrationHandler:
    @handle(AssignTrackingCode)
    def assign_tracking_code(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assign_tracking_code(command.tracking_code)
        repo.add(order)

    @handle(OverrideOrderStatus)
    def override_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.override_status(command.status)
        repo.add(order)

    @handle(CorrectShippingAddress)
    def correct_shipping_address(self, command):
        address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.correct_shipping_address(address)
        repo.add(order)
