"""Order cancellation and refund — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class RequestCancellation:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class AcceptCancellation:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class AcceptRefund:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancellationHandler:
    @handle(RequestCancellation)
    def request_cancellation(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.request_cancellation()
        repo.add(order)

    @handle(AcceptCancellation)
    def accept_cancellation(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.accept_cancellation()
        repo.add(order)

    @handle(AcceptRefund)
    def accept_refund(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.accept_refund()
        repo.add(order)
