"""Administrative status overrides: commands and handler.

Overrides bypass the lifecycle guards. Every one of them is written to the
audit log with the administrator's id and the before/after values,
separately from shopper-initiated changes.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class OverrideOrderStatus:
    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command(part_of="Order")
class OverridePaymentStatus:
    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class AdministerOrderHandler:
    @handle(OverrideOrderStatus)
    def override_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_existing(command.order_id)
        previous = order.override_status(command.status, admin_id=command.admin_id)
        repo.add(order)

        logger.warning(
            "order.status_overridden",
            audit=True,
            actor="admin",
            admin_id=str(command.admin_id),
            order_id=str(command.order_id),
            previous_status=previous,
            new_status=order.status,
        )

    @handle(OverridePaymentStatus)
    def override_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_existing(command.order_id)
        previous = order.override_payment_status(command.payment_status, admin_id=command.admin_id)
        repo.add(order)

        logger.warning(
            "order.payment_status_overridden",
            audit=True,
            actor="admin",
            admin_id=str(command.admin_id),
            order_id=str(command.order_id),
            previous_payment_status=previous,
            new_payment_status=order.payment_status,
        )
