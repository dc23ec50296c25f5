"""Order address correction by the shopper: command and handler.

Only the fields present on the command change; the rest of the address
snapshot is kept. Allowed while the order has not shipped.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import ADDRESS_FIELDS, Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderAddress:
    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    full_name = String(max_length=255)
    phone = String(max_length=20)
    pincode = String(max_length=10)
    line1 = String(max_length=255)
    line2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    landmark = String(max_length=255)


@ordering.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(UpdateOrderAddress)
    def update_order_address(self, command):
        changes = {field: getattr(command, field) for field in ADDRESS_FIELDS}

        repo = current_domain.repository_for(Order)
        order = repo.get_for_owner(command.order_id, command.owner_id)
        order.update_address(**changes)
        repo.add(order)

        logger.info(
            "order.address_updated",
            actor="customer",
            order_id=str(command.order_id),
            owner_id=str(command.owner_id),
            fields=sorted(field for field, value in changes.items() if value is not None),
        )
