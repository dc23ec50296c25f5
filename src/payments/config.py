"""Payment provider settings read from the environment."""

import os
from dataclasses import dataclass

DEFAULT_RAZORPAY_BASE_URL = "https://api.razorpay.com/v1"


@dataclass(frozen=True)
class GatewaySettings:
    provider: str = "fake"
    key_id: str = ""
    key_secret: str = ""
    base_url: str = DEFAULT_RAZORPAY_BASE_URL
    timeout: float = 10.0
    environment: str = "development"

    @property
    def has_credentials(self) -> bool:
        return bool(self.key_id and self.key_secret)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        return cls(
            provider=os.getenv("PAYMENT_GATEWAY", "fake").lower(),
            key_id=os.getenv("RAZORPAY_KEY_ID", ""),
            key_secret=os.getenv("RAZORPAY_KEY_SECRET", ""),
            base_url=os.getenv("RAZORPAY_BASE_URL", DEFAULT_RAZORPAY_BASE_URL),
            timeout=float(os.getenv("RAZORPAY_TIMEOUT", "10")),
            environment=(os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower(),
        )
