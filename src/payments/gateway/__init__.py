"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (PAYMENT_GATEWAY=fake, the default;
  refused when PROTEAN_ENV=production)
- RazorpayGateway for production (PAYMENT_GATEWAY=razorpay)
"""

from payments.config import GatewaySettings
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.razorpay_adapter import RazorpayGateway
from shared.errors import GatewayUnavailable

_current_gateway: PaymentGateway | None = None


def build_gateway(settings: GatewaySettings) -> PaymentGateway:
    if settings.provider == "razorpay":
        return RazorpayGateway(settings)
    if settings.provider == "fake":
        if settings.is_production:
            raise GatewayUnavailable("FakeGateway cannot be used in production; set PAYMENT_GATEWAY=razorpay")
        if settings.key_secret:
            return FakeGateway(key_id=settings.key_id or "rzp_test_fake", key_secret=settings.key_secret)
        return FakeGateway()
    raise ValueError(f"Unknown payment gateway: {settings.provider!r}")


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway(GatewaySettings.from_env())
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
