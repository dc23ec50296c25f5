"""Razorpay payment gateway adapter.

Talks to the Razorpay Orders API over HTTPS with basic auth
(``key_id:key_secret``). Only two operations are needed for checkout:
registering an order (the payment intent) and verifying the signature the
Razorpay widget returns after the shopper pays.

Failure classification:
- missing credentials, 401/403, timeouts and network errors raise
  GatewayUnavailable (the integration itself is broken or unreachable)
- callbacks are never verified without the key secret: GatewayUnavailable
- any other non-2xx response raises GatewayError
"""

import httpx
import structlog

from payments.config import GatewaySettings
from payments.gateway.port import PaymentGateway, RemoteIntent
from payments.gateway.signature import signature_matches
from shared.errors import GatewayError, GatewayUnavailable

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    """Production Razorpay gateway adapter."""

    provider = "RAZORPAY"

    def __init__(self, settings: GatewaySettings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self._client = httpx.Client(
            base_url=settings.base_url,
            auth=(settings.key_id, settings.key_secret),
            timeout=httpx.Timeout(settings.timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def public_key(self) -> str:
        return self.settings.key_id

    def close(self) -> None:
        self._client.close()

    def create_intent(
        self,
        amount_minor_units: int,
        currency: str,
        receipt_ref: str,
    ) -> RemoteIntent:
        if not self.settings.has_credentials:
            raise GatewayUnavailable("Razorpay credentials are not configured")

        payload = {
            "amount": amount_minor_units,
            "currency": currency,
            "receipt": receipt_ref,
        }

        try:
            response = self._client.post("/orders", json=payload)
        except httpx.TimeoutException as exc:
            logger.error("razorpay.timeout", receipt=receipt_ref, error=str(exc))
            raise GatewayUnavailable("Razorpay did not respond in time") from exc
        except httpx.HTTPError as exc:
            logger.error("razorpay.unreachable", receipt=receipt_ref, error=str(exc))
            raise GatewayUnavailable("Razorpay could not be reached") from exc

        if response.status_code in (401, 403):
            logger.error("razorpay.auth_failed", status=response.status_code)
            raise GatewayUnavailable("Razorpay authentication failed. Check RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET")

        if response.is_error:
            description = _error_description(response)
            logger.error(
                "razorpay.order_rejected",
                status=response.status_code,
                receipt=receipt_ref,
                error=description,
            )
            raise GatewayError(f"Razorpay rejected the order: {description}", status=response.status_code)

        body = response.json()
        logger.info("razorpay.order_created", remote_order_ref=body["id"], receipt=receipt_ref)

        return RemoteIntent(
            id=body["id"],
            amount=int(body.get("amount", amount_minor_units)),
            currency=body.get("currency", currency),
            receipt=body.get("receipt", receipt_ref),
            status=body.get("status", "created"),
        )

    def verify_signature(
        self,
        remote_order_ref: str,
        remote_payment_ref: str,
        remote_signature: str,
    ) -> bool:
        if not self.settings.key_secret:
            logger.error("razorpay.secret_missing", remote_order_ref=remote_order_ref)
            raise GatewayUnavailable("Razorpay key secret is not configured")
        return signature_matches(
            self.settings.key_secret,
            remote_order_ref,
            remote_payment_ref,
            remote_signature,
        )


def _error_description(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["description"]
    except (ValueError, KeyError, TypeError):
        return response.text or response.reason_phrase
