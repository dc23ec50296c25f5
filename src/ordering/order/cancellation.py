"""Order cancellation by the shopper: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Actor, Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_for_owner(command.order_id, command.owner_id)
        previous_status = order.status
        order.cancel(cancelled_by=Actor.CUSTOMER.value)
        repo.add(order)

        logger.info(
            "order.cancelled",
            actor="customer",
            order_id=str(command.order_id),
            owner_id=str(command.owner_id),
            previous_status=previous_status,
        )
