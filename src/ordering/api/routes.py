"""FastAPI routes for the Ordering domain: cart, checkout, orders and addresses.

The shopper is identified by the ``X-Customer-Id`` header and administrators
by ``X-Admin-Id``; authenticating those identities happens upstream.

State-changing commands go through ``dispatch`` so each one commits under its
owner's lock. Routes are plain functions because the catalog and payment
provider adapters make blocking HTTP calls; FastAPI runs them in its
threadpool.
"""

import json
import os

from fastapi import APIRouter, Header, HTTPException, Query
from protean.utils.globals import current_domain

from catalogue.reader import get_catalog
from ordering.address_book.address import SavedAddress
from ordering.api.schemas import (
    AddressResponse,
    CartCountResponse,
    CartResponse,
    CashOnDeliveryRequest,
    CheckoutIntentResponse,
    CompleteCheckoutRequest,
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    OrderListResponse,
    OrderPageResponse,
    OrderResponse,
    OverridePaymentStatusRequest,
    OverrideStatusRequest,
    SavedAddressListResponse,
    SavedAddressResponse,
    SetCartItemRequest,
    UpdateOrderAddressRequest,
)
from ordering.cart.cart import Cart
from ordering.cart.items import OpenCart, RemoveCartItem, SetCartItem
from ordering.cart.product_ref import resolve_cart_refs
from ordering.checkout.checkout import CompleteCheckout, InitiateCheckout, PlaceCashOnDeliveryOrder
from ordering.order.administration import OverrideOrderStatus, OverridePaymentStatus
from ordering.order.cancellation import CancelOrder
from ordering.order.modification import UpdateOrderAddress
from ordering.order.order import Order
from ordering.shared.atomic import dispatch
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway


def _load_cart(cart_id) -> Cart:
    return current_domain.repository_for(Cart).get(cart_id)


def _order_owner(order_id):
    return current_domain.repository_for(Order).get_existing(order_id).owner_id


def _order_response(order_id) -> OrderResponse:
    return OrderResponse.from_order(current_domain.repository_for(Order).get_existing(order_id))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(x_customer_id: str = Header()) -> CartResponse:
    """Return the shopper's cart with a live reference to each product."""
    cart_id = dispatch(OpenCart(owner_id=x_customer_id))
    cart = _load_cart(cart_id)
    return CartResponse.from_cart(cart, refs=resolve_cart_refs(get_catalog(), cart))


@cart_router.get("/count", response_model=CartCountResponse)
def get_cart_count(x_customer_id: str = Header()) -> CartCountResponse:
    cart = current_domain.repository_for(Cart).for_owner(x_customer_id)
    return CartCountResponse(count=cart.total_item_count if cart else 0)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
def set_cart_item(product_id: str, body: SetCartItemRequest, x_customer_id: str = Header()) -> CartResponse:
    """Set the quantity of a product. Quantities below one remove it."""
    command = SetCartItem(
        owner_id=x_customer_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    cart_id = dispatch(command)
    return CartResponse.from_cart(_load_cart(cart_id))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
def remove_cart_item(product_id: str, x_customer_id: str = Header()) -> CartResponse:
    command = RemoveCartItem(owner_id=x_customer_id, product_id=product_id)
    cart_id = dispatch(command)
    return CartResponse.from_cart(_load_cart(cart_id))


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/intents", status_code=201, response_model=CheckoutIntentResponse)
def initiate_checkout(x_customer_id: str = Header()) -> CheckoutIntentResponse:
    """Register the cart total with the payment provider.

    Only reads the cart, so no owner lock is held across the provider call.
    """
    intent = current_domain.process(InitiateCheckout(owner_id=x_customer_id), asynchronous=False)
    return CheckoutIntentResponse(
        remote_order_ref=intent.id,
        amount=intent.amount,
        currency=intent.currency,
        receipt=intent.receipt,
        key_id=get_gateway().public_key,
    )


@checkout_router.post("/complete", status_code=201, response_model=OrderResponse)
def complete_checkout(body: CompleteCheckoutRequest, x_customer_id: str = Header()) -> OrderResponse:
    """Verify the payment callback and turn the cart into a paid order."""
    command = CompleteCheckout(
        owner_id=x_customer_id,
        remote_order_ref=body.remote_order_ref,
        remote_payment_ref=body.remote_payment_ref,
        remote_signature=body.remote_signature,
        address=json.dumps(body.address.model_dump()),
    )
    order_id = dispatch(command)
    return _order_response(order_id)


@checkout_router.post("/cod", status_code=201, response_model=OrderResponse)
def place_cash_on_delivery_order(body: CashOnDeliveryRequest, x_customer_id: str = Header()) -> OrderResponse:
    command = PlaceCashOnDeliveryOrder(
        owner_id=x_customer_id,
        address=json.dumps(body.address.model_dump()),
    )
    order_id = dispatch(command)
    return _order_response(order_id)


@checkout_router.post("/gateway/configure", response_model=GatewayConfigResponse)
def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    Lets operators simulate a payment provider outage during manual testing.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )


# ---------------------------------------------------------------------------
# Order Router (shopper)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
def list_my_orders(x_customer_id: str = Header()) -> OrderListResponse:
    orders = current_domain.repository_for(Order).for_owner(x_customer_id)
    return OrderListResponse(orders=[OrderResponse.from_order(order) for order in orders])


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_my_order(order_id: str, x_customer_id: str = Header()) -> OrderResponse:
    order = current_domain.repository_for(Order).get_for_owner(order_id, x_customer_id)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(order_id: str, x_customer_id: str = Header()) -> OrderResponse:
    dispatch(CancelOrder(order_id=order_id, owner_id=x_customer_id))
    return _order_response(order_id)


@order_router.put("/{order_id}/address", response_model=OrderResponse)
def update_order_address(
    order_id: str,
    body: UpdateOrderAddressRequest,
    x_customer_id: str = Header(),
) -> OrderResponse:
    """Correct the delivery address. Fields left out keep their current value."""
    command = UpdateOrderAddress(
        order_id=order_id,
        owner_id=x_customer_id,
        **body.model_dump(exclude_none=True),
    )
    dispatch(command)
    return _order_response(order_id)


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_order_router.get("", response_model=OrderPageResponse)
def search_orders(
    status: str | None = None,
    payment_status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    x_admin_id: str = Header(),
) -> OrderPageResponse:
    result = current_domain.repository_for(Order).search(
        status=status.upper() if status else None,
        payment_status=payment_status.upper() if payment_status else None,
        page=page,
        limit=limit,
    )
    return OrderPageResponse(
        orders=[OrderResponse.from_order(order) for order in result.orders],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@admin_order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, x_admin_id: str = Header()) -> OrderResponse:
    return _order_response(order_id)


@admin_order_router.patch("/{order_id}/status", response_model=OrderResponse)
def override_order_status(
    order_id: str,
    body: OverrideStatusRequest,
    x_admin_id: str = Header(),
) -> OrderResponse:
    command = OverrideOrderStatus(order_id=order_id, admin_id=x_admin_id, status=body.status)
    dispatch(command, owner_id=_order_owner(order_id))
    return _order_response(order_id)


@admin_order_router.patch("/{order_id}/payment-status", response_model=OrderResponse)
def override_payment_status(
    order_id: str,
    body: OverridePaymentStatusRequest,
    x_admin_id: str = Header(),
) -> OrderResponse:
    command = OverridePaymentStatus(order_id=order_id, admin_id=x_admin_id, payment_status=body.payment_status)
    dispatch(command, owner_id=_order_owner(order_id))
    return _order_response(order_id)


# ---------------------------------------------------------------------------
# Address Book Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/addresses", tags=["addresses"])


@address_router.get("", response_model=SavedAddressListResponse)
def list_saved_addresses(x_customer_id: str = Header()) -> SavedAddressListResponse:
    addresses = current_domain.repository_for(SavedAddress).for_owner(x_customer_id)
    return SavedAddressListResponse(
        addresses=[
            SavedAddressResponse(
                address_id=str(address.id),
                is_default=address.is_default,
                **AddressResponse.from_address(address).model_dump(),
            )
            for address in addresses
        ]
    )
