"""Domain events for the SavedAddress aggregate."""

from protean.fields import Boolean, Identifier

from ordering.domain import ordering


@ordering.event(part_of="SavedAddress")
class AddressSaved:
    """A new delivery address was added to the shopper's address book."""

    __version__ = 1

    address_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    is_default = Boolean(default=False)


@ordering.event(part_of="SavedAddress")
class AddressRefreshed:
    """A known address was reused at checkout with updated contact details."""

    __version__ = 1

    address_id = Identifier(required=True)
    owner_id = Identifier(required=True)
