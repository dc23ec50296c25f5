"""Storefront error taxonomy shared by every context.

Each error carries a stable ``kind`` that callers and HTTP clients can rely
on, and the HTTP status it maps to. Client errors are 4xx, failures of an
upstream collaborator (payment provider, remote catalogue) are 5xx.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class StorefrontError(Exception):
    kind = "StorefrontError"
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------
class ClientError(StorefrontError):
    kind = "ClientError"
    status_code = 400


class NotFound(ClientError):
    kind = "NotFound"
    status_code = 404


class ProductNotFound(NotFound):
    pass


class OrderNotFound(NotFound):
    pass


class InsufficientStock(ClientError):
    kind = "InsufficientStock"


class EmptyCart(ClientError):
    kind = "EmptyCart"


class InvalidPaymentDetails(ClientError):
    kind = "InvalidPaymentDetails"


class SignatureMismatch(ClientError):
    kind = "SignatureMismatch"


class InvalidTransition(ClientError):
    kind = "InvalidTransition"
    status_code = 409


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------
class UpstreamError(StorefrontError):
    kind = "UpstreamError"
    status_code = 502


class GatewayError(UpstreamError):
    kind = "GatewayError"


class GatewayUnavailable(GatewayError):
    """Provider unreachable, timed out or rejected our credentials."""

    kind = "GatewayUnavailable"
    status_code = 503


class CatalogUnavailable(UpstreamError):
    kind = "CatalogUnavailable"
    status_code = 503


# ---------------------------------------------------------------------------
# FastAPI integration
# ---------------------------------------------------------------------------
async def _handle_storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error(
            "upstream_failure",
            kind=exc.kind,
            error=exc.message,
            path=request.url.path,
        )
    else:
        logger.info(
            "request_rejected",
            kind=exc.kind,
            error=exc.message,
            path=request.url.path,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Translate storefront errors into JSON responses with their status code."""
    app.add_exception_handler(StorefrontError, _handle_storefront_error)
