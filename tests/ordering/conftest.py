import json
from uuid import uuid4

import pytest
from catalogue.reader import set_catalog
from catalogue.reader.memory_adapter import InMemoryCatalog
from catalogue.reader.port import CatalogProduct
from ordering.cart.items import SetCartItem
from ordering.checkout.checkout import CompleteCheckout, InitiateCheckout, PlaceCashOnDeliveryOrder
from ordering.shared.atomic import dispatch
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from protean import current_domain

SHIPPING_ADDRESS = {
    "full_name": "Asha Rao",
    "phone": "9876543210",
    "pincode": "560001",
    "line1": "12 MG Road",
    "line2": "Flat 4B",
    "city": "Bengaluru",
    "state": "Karnataka",
    "landmark": "Opposite the metro station",
}


@pytest.fixture
def catalog():
    catalog = InMemoryCatalog(
        [
            CatalogProduct(
                product_id="P1",
                name="Brass Diya",
                price=500.0,
                stock=10,
                primary_image_url="https://cdn.example.com/p1.jpg",
            ),
            CatalogProduct(product_id="P2", name="Silk Scarf", price=1200.0, sale_price=999.0, stock=3),
            CatalogProduct(product_id="P3", name="Retired Mug", price=250.0, stock=5, is_active=False),
        ]
    )
    set_catalog(catalog)
    return catalog


@pytest.fixture
def gateway():
    gateway = FakeGateway(key_id="rzp_test_key", key_secret="test-secret")
    set_gateway(gateway)
    return gateway


@pytest.fixture
def address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture
def add_to_cart(catalog):
    def _add(owner_id, product_id="P1", quantity=1):
        return dispatch(SetCartItem(owner_id=owner_id, product_id=product_id, quantity=quantity))

    return _add


@pytest.fixture
def complete_checkout(gateway, address):
    """Run a checkout round trip for the owner's current cart and return the order id."""

    def _complete(owner_id, payment_ref=None, shipping=None):
        payment_ref = payment_ref or f"pay_{uuid4().hex[:14]}"
        intent = current_domain.process(InitiateCheckout(owner_id=owner_id), asynchronous=False)
        return dispatch(
            CompleteCheckout(
                owner_id=owner_id,
                remote_order_ref=intent.id,
                remote_payment_ref=payment_ref,
                remote_signature=gateway.sign(intent.id, payment_ref),
                address=json.dumps(shipping or address),
            )
        )

    return _complete


@pytest.fixture
def paid_order(add_to_cart, complete_checkout):
    def _order(owner_id="cust-001", product_id="P1", quantity=2):
        add_to_cart(owner_id, product_id, quantity)
        return complete_checkout(owner_id)

    return _order


@pytest.fixture
def cod_order(add_to_cart, address):
    def _order(owner_id="cust-001", product_id="P1", quantity=1):
        add_to_cart(owner_id, product_id, quantity)
        return dispatch(PlaceCashOnDeliveryOrder(owner_id=owner_id, address=json.dumps(address)))

    return _order
