"""Address book operations used by checkout.

Checkout hands over whatever the shopper typed. The address book normalizes
it, validates it by building the order's address snapshot, and makes sure
the place is saved for next time without creating duplicates.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.address_book.address import SavedAddress
from ordering.order.order import ADDRESS_FIELDS, OrderAddress

logger = structlog.get_logger(__name__)


def normalize_address_input(data: dict | None) -> dict:
    """Map client field names onto address fields and strip whitespace.

    ``name`` is accepted as an alias of ``full_name``. Empty strings count
    as missing.
    """
    data = dict(data or {})
    if not data.get("full_name") and data.get("name"):
        data["full_name"] = data["name"]

    normalized = {}
    for field in ADDRESS_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            value = value.strip() or None
        elif value is not None:
            value = str(value)
        normalized[field] = value
    return normalized


def upsert_from_checkout(owner_id, data: dict | None) -> OrderAddress:
    """Save the checkout address for the owner and return its snapshot.

    Must run inside the caller's unit of work so the address is only kept
    when the order is.
    """
    snapshot = OrderAddress(**normalize_address_input(data))

    repo = current_domain.repository_for(SavedAddress)
    existing = repo.for_owner(owner_id)
    match = next((address for address in existing if address.same_place_as(snapshot)), None)

    if match is not None:
        match.refresh_details(snapshot)
        repo.add(match)
        logger.debug("address_book.reused", owner_id=str(owner_id), address_id=str(match.id))
        return match.to_snapshot()

    saved = SavedAddress.record(owner_id, snapshot, is_default=not existing)
    repo.add(saved)
    logger.debug("address_book.saved", owner_id=str(owner_id), address_id=str(saved.id), is_default=saved.is_default)
    return snapshot
