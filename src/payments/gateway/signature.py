"""HMAC-SHA256 callback signatures.

The provider signs ``"<order ref>|<payment ref>"`` with the merchant secret
and sends the hex digest back with the payment callback. Without a secret
anyone could produce a matching digest, so an empty secret is refused.
"""

import hashlib
import hmac

from shared.errors import GatewayUnavailable, InvalidPaymentDetails


def _require(**values: str) -> None:
    missing = [name for name, value in values.items() if not isinstance(value, str) or not value]
    if missing:
        raise InvalidPaymentDetails(
            "Payment callback is missing required fields",
            missing=sorted(missing),
        )


def compute_signature(secret: str, remote_order_ref: str, remote_payment_ref: str) -> str:
    if not secret:
        raise GatewayUnavailable("Payment signing secret is not configured")
    _require(remote_order_ref=remote_order_ref, remote_payment_ref=remote_payment_ref)
    payload = f"{remote_order_ref}|{remote_payment_ref}"
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def signature_matches(
    secret: str,
    remote_order_ref: str,
    remote_payment_ref: str,
    remote_signature: str,
) -> bool:
    _require(
        remote_order_ref=remote_order_ref,
        remote_payment_ref=remote_payment_ref,
        remote_signature=remote_signature,
    )
    expected = compute_signature(secret, remote_order_ref, remote_payment_ref)
    # Compare bytes so that non-ASCII input is a mismatch rather than a TypeError
    return hmac.compare_digest(expected.encode("utf-8"), remote_signature.encode("utf-8"))
