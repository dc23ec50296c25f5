"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from dataclasses import asdict
from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    full_name: str | None = None
    name: str | None = None  # Accepted as an alias of full_name
    phone: str | None = None
    pincode: str | None = None
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    landmark: str | None = None


class AddressResponse(BaseModel):
    full_name: str
    phone: str
    pincode: str
    line1: str
    line2: str | None = None
    city: str
    state: str
    landmark: str | None = None

    @classmethod
    def from_address(cls, address) -> "AddressResponse":
        return cls(
            full_name=address.full_name,
            phone=address.phone,
            pincode=address.pincode,
            line1=address.line1,
            line2=address.line2,
            city=address.city,
            state=address.state,
            landmark=address.landmark,
        )


class ProductRefSchema(BaseModel):
    kind: str
    product_id: str
    name: str | None = None
    price: float | None = None
    image: str | None = None
    is_active: bool | None = None


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class SetCartItemRequest(BaseModel):
    quantity: int

    model_config = {"json_schema_extra": {"examples": [{"quantity": 2}]}}


class CartItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    unit_price: float
    quantity: int
    line_total: float
    product: ProductRefSchema | None = None


class CartResponse(BaseModel):
    cart_id: str
    owner_id: str
    items: list[CartItemResponse]
    total_item_count: int
    total_amount: float

    @classmethod
    def from_cart(cls, cart, refs=None) -> "CartResponse":
        refs = refs or {}
        items = []
        for item in cart.items:
            ref = refs.get(str(item.product_id))
            items.append(
                CartItemResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.line_total,
                    product=ProductRefSchema(**asdict(ref)) if ref is not None else None,
                )
            )
        return cls(
            cart_id=str(cart.id),
            owner_id=str(cart.owner_id),
            items=items,
            total_item_count=cart.total_item_count,
            total_amount=cart.total_amount,
        )


class CartCountResponse(BaseModel):
    count: int


# ---------------------------------------------------------------------------
# Checkout Schemas
# ---------------------------------------------------------------------------
class CheckoutIntentResponse(BaseModel):
    remote_order_ref: str
    amount: int
    currency: str
    receipt: str
    key_id: str


class CompleteCheckoutRequest(BaseModel):
    remote_order_ref: str | None = None
    remote_payment_ref: str | None = None
    remote_signature: str | None = None
    address: AddressSchema = Field(default_factory=AddressSchema)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "remote_order_ref": "order_P1a2b3c4d5e6f7",
                    "remote_payment_ref": "pay_P1a2b3c4d5e6f8",
                    "remote_signature": "6f1c0e4b2d...",
                    "address": {
                        "full_name": "Asha Rao",
                        "phone": "9876543210",
                        "pincode": "560001",
                        "line1": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                    },
                }
            ]
        }
    }


class CashOnDeliveryRequest(BaseModel):
    address: AddressSchema = Field(default_factory=AddressSchema)


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Payment provider unavailable"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    image: str | None = None
    unit_price: float
    quantity: int


class PaymentReferenceResponse(BaseModel):
    provider: str
    remote_order_ref: str
    remote_payment_ref: str


class OrderResponse(BaseModel):
    order_id: str
    owner_id: str
    items: list[OrderItemResponse]
    amount: float
    currency: str
    status: str
    payment_status: str
    payment_method: str
    address: AddressResponse | None = None
    payment: PaymentReferenceResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            order_id=str(order.id),
            owner_id=str(order.owner_id),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
                for item in order.items
            ],
            amount=order.amount,
            currency=order.currency,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            address=AddressResponse.from_address(order.address) if order.address else None,
            payment=(
                PaymentReferenceResponse(
                    provider=order.payment.provider,
                    remote_order_ref=order.payment.remote_order_ref,
                    remote_payment_ref=order.payment.remote_payment_ref,
                )
                if order.payment
                else None
            ),
            created_at=order.created_at,
            updated_at=order.updated_at,
            cancelled_at=order.cancelled_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class OrderPageResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    limit: int
    pages: int


class UpdateOrderAddressRequest(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    pincode: str | None = None
    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    landmark: str | None = None


class OverrideStatusRequest(BaseModel):
    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "SHIPPED"}]}}


class OverridePaymentStatusRequest(BaseModel):
    payment_status: str

    model_config = {"json_schema_extra": {"examples": [{"payment_status": "REFUNDED"}]}}


# ---------------------------------------------------------------------------
# Address Book Schemas
# ---------------------------------------------------------------------------
class SavedAddressResponse(AddressResponse):
    address_id: str
    is_default: bool


class SavedAddressListResponse(BaseModel):
    addresses: list[SavedAddressResponse]
