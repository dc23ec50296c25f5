"""Repository for the SavedAddress aggregate."""

from ordering.address_book.address import SavedAddress
from ordering.domain import ordering


@ordering.repository(part_of=SavedAddress)
class SavedAddressRepository:
    def for_owner(self, owner_id) -> list[SavedAddress]:
        """The owner's saved addresses, default first, then oldest first."""
        addresses = self._dao.query.filter(owner_id=str(owner_id)).order_by("created_at").all().items
        return sorted(addresses, key=lambda address: not address.is_default)
