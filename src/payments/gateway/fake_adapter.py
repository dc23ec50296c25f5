"""Configurable fake payment gateway for development and testing.

This adapter simulates the payment provider without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Manual API testing via /checkout/gateway/configure
- Automated tests with predictable outcomes
- Development without real gateway credentials

Callback signatures use the same HMAC scheme as the real provider, so tests
can produce valid (and deliberately invalid) callbacks with ``sign()``.
"""

from uuid import uuid4

from payments.gateway.port import PaymentGateway, RemoteIntent
from payments.gateway.signature import compute_signature, signature_matches
from shared.errors import GatewayUnavailable


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    provider = "RAZORPAY"

    def __init__(self, key_id: str = "rzp_test_fake", key_secret: str = "fake-secret") -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment provider unavailable"
        self.calls: list[dict] = []

    @property
    def public_key(self) -> str:
        return self.key_id

    def configure(self, should_succeed: bool, failure_reason: str = "Payment provider unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def sign(self, remote_order_ref: str, remote_payment_ref: str) -> str:
        return compute_signature(self.key_secret, remote_order_ref, remote_payment_ref)

    def create_intent(
        self,
        amount_minor_units: int,
        currency: str,
        receipt_ref: str,
    ) -> RemoteIntent:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": amount_minor_units,
                "currency": currency,
                "receipt": receipt_ref,
            }
        )

        if not self.should_succeed:
            raise GatewayUnavailable(self.failure_reason)

        return RemoteIntent(
            id=f"order_fake_{uuid4().hex[:14]}",
            amount=amount_minor_units,
            currency=currency,
            receipt=receipt_ref,
        )

    def verify_signature(
        self,
        remote_order_ref: str,
        remote_payment_ref: str,
        remote_signature: str,
    ) -> bool:
        self.calls.append(
            {
                "method": "verify_signature",
                "remote_order_ref": remote_order_ref,
                "remote_payment_ref": remote_payment_ref,
            }
        )
        return signature_matches(self.key_secret, remote_order_ref, remote_payment_ref, remote_signature)
