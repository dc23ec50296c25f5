"""Repository for the Order aggregate."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.order.order import Order
from shared.errors import OrderNotFound

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class OrderPage:
    orders: list
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.total else 0


@ordering.repository(part_of=Order)
class OrderRepository:
    def get_existing(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFound(f"Order {order_id} not found", order_id=str(order_id)) from None

    def get_for_owner(self, order_id, owner_id) -> Order:
        """Load an order on behalf of a shopper. Other shoppers' orders do not exist for them."""
        order = self.get_existing(order_id)
        if str(order.owner_id) != str(owner_id):
            raise OrderNotFound(f"Order {order_id} not found", order_id=str(order_id))
        return order

    def for_owner(self, owner_id) -> list[Order]:
        """The owner's orders, newest first."""
        return self._dao.query.filter(owner_id=str(owner_id)).order_by("-created_at").all().items

    def paid_with(self, remote_order_ref, remote_payment_ref) -> Order | None:
        """The order a provider order or payment was already used for, if any."""
        for criteria in (
            {"payment_remote_payment_ref": remote_payment_ref},
            {"payment_remote_order_ref": remote_order_ref},
        ):
            orders = self._dao.query.filter(**criteria).limit(1).all().items
            if orders:
                return orders[0]
        return None

    def search(self, status=None, payment_status=None, page=1, limit=20) -> OrderPage:
        page = max(int(page), 1)
        limit = min(max(int(limit), 1), MAX_PAGE_SIZE)

        criteria = {}
        if status:
            criteria["status"] = status
        if payment_status:
            criteria["payment_status"] = payment_status

        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)
        result = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

        return OrderPage(orders=result.items, total=result.total, page=page, limit=limit)
