"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and RazorpayGateway
(production) without changing checkout code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class RemoteIntent:
    """Provider-side record of an amount awaiting payment."""

    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount (rupees) to minor units (paise), rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    provider: str = ""

    @property
    @abstractmethod
    def public_key(self) -> str:
        """Key the client needs to open the provider's payment widget."""
        ...

    @abstractmethod
    def create_intent(
        self,
        amount_minor_units: int,
        currency: str,
        receipt_ref: str,
    ) -> RemoteIntent:
        """Register an amount awaiting payment with the provider.

        Raises GatewayUnavailable for authentication, configuration and
        connectivity failures, GatewayError for any other rejection.
        """
        ...

    @abstractmethod
    def verify_signature(
        self,
        remote_order_ref: str,
        remote_payment_ref: str,
        remote_signature: str,
    ) -> bool:
        """Check that a payment callback was signed with our secret.

        Returns False on mismatch. Raises InvalidPaymentDetails only when an
        input is missing or not a string.
        """
        ...
