"""SavedAddress aggregate: a shopper's reusable delivery address.

Two addresses are the same place when phone, pincode, first line, city and
state match. The recipient name, second line and landmark are details that
may be refreshed when the same place is used again.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String

from ordering.address_book.events import AddressRefreshed, AddressSaved
from ordering.domain import ordering
from ordering.order.order import OrderAddress

IDENTITY_FIELDS = ("phone", "pincode", "line1", "city", "state")


def _normalized(value) -> str:
    return " ".join(str(value or "").split()).lower()


@ordering.aggregate
class SavedAddress:
    owner_id = Identifier(required=True)
    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=20)
    pincode = String(required=True, max_length=10)
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    landmark = String(max_length=255)
    is_default = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def record(cls, owner_id, snapshot: OrderAddress, is_default=False):
        now = datetime.now(UTC)
        address = cls(
            owner_id=owner_id,
            full_name=snapshot.full_name,
            phone=snapshot.phone,
            pincode=snapshot.pincode,
            line1=snapshot.line1,
            line2=snapshot.line2,
            city=snapshot.city,
            state=snapshot.state,
            landmark=snapshot.landmark,
            is_default=is_default,
            created_at=now,
            updated_at=now,
        )
        address.raise_(
            AddressSaved(
                address_id=str(address.id),
                owner_id=str(owner_id),
                is_default=is_default,
            )
        )
        return address

    def same_place_as(self, snapshot: OrderAddress) -> bool:
        return all(_normalized(getattr(self, f)) == _normalized(getattr(snapshot, f)) for f in IDENTITY_FIELDS)

    def refresh_details(self, snapshot: OrderAddress):
        """Take over name, second line and landmark from a newer snapshot of the same place."""
        self.full_name = snapshot.full_name
        if snapshot.line2 is not None:
            self.line2 = snapshot.line2
        if snapshot.landmark is not None:
            self.landmark = snapshot.landmark
        self.updated_at = datetime.now(UTC)

        self.raise_(AddressRefreshed(address_id=str(self.id), owner_id=str(self.owner_id)))

    def to_snapshot(self) -> OrderAddress:
        return OrderAddress(
            full_name=self.full_name,
            phone=self.phone,
            pincode=self.pincode,
            line1=self.line1,
            line2=self.line2,
            city=self.city,
            state=self.state,
            landmark=self.landmark,
        )
