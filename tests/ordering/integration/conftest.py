import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import address_router, admin_order_router, cart_router, checkout_router, order_router
from protean.integrations.fastapi import register_exception_handlers
from shared.errors import register_error_handlers

CUSTOMER = {"X-Customer-Id": "cust-001"}


@pytest.fixture()
def client(catalog, gateway):
    app = FastAPI()
    register_exception_handlers(app)
    register_error_handlers(app)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(admin_order_router)
    app.include_router(address_router)
    return TestClient(app)


@pytest.fixture()
def checkout(client, gateway, address):
    """Fill the cart over HTTP and complete a paid checkout. Returns the order payload."""

    def _checkout(headers=CUSTOMER, product_id="P1", quantity=2, payment_ref="pay_001", shipping=None):
        response = client.put(f"/cart/items/{product_id}", json={"quantity": quantity}, headers=headers)
        assert response.status_code == 200

        intent = client.post("/checkout/intents", headers=headers).json()
        response = client.post(
            "/checkout/complete",
            json={
                "remote_order_ref": intent["remote_order_ref"],
                "remote_payment_ref": payment_ref,
                "remote_signature": gateway.sign(intent["remote_order_ref"], payment_ref),
                "address": shipping or address,
            },
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()

    return _checkout
