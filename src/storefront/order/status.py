"""Order status management — commands and handler.

Orders are owned by the order service, so the handler delegates the
transition to it and returns the updated order.
"""

from protean import handle
from protean.fields import Identifier, String

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus
from storefront.order.service import get_order_service


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        return get_order_service().update_order_status(command.order_id, command.status)

    @handle(CancelOrder)
    def cancel_order(self, command):
        return get_order_service().cancel_order(command.order_id)
