"""Integration tests for shopper and admin Order API endpoints via TestClient."""

CUSTOMER = {"X-Customer-Id": "cust-001"}
OTHER_CUSTOMER = {"X-Customer-Id": "cust-002"}
ADMIN = {"X-Admin-Id": "admin-1"}


def _set_status(client, order_id, status):
    return client.patch(f"/admin/orders/{order_id}/status", json={"status": status}, headers=ADMIN)


class TestShopperOrderEndpoints:
    def test_list_my_orders_newest_first(self, client, checkout):
        first = checkout(payment_ref="pay_001")
        second = checkout(payment_ref="pay_002")

        response = client.get("/orders", headers=CUSTOMER)

        assert response.status_code == 200
        ids = [order["order_id"] for order in response.json()["orders"]]
        assert ids == [second["order_id"], first["order_id"]]

    def test_list_excludes_other_owners(self, client, checkout):
        checkout()
        assert client.get("/orders", headers=OTHER_CUSTOMER).json() == {"orders": []}

    def test_get_my_order(self, client, checkout):
        order = checkout()

        response = client.get(f"/orders/{order['order_id']}", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["amount"] == 1000.0

    def test_other_owners_order_is_404(self, client, checkout):
        order = checkout()

        response = client.get(f"/orders/{order['order_id']}", headers=OTHER_CUSTOMER)

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_unknown_order_is_404(self, client):
        assert client.get("/orders/nope", headers=CUSTOMER).status_code == 404


class TestCancelOrderEndpoint:
    def test_cancel(self, client, checkout):
        order = checkout()

        response = client.post(f"/orders/{order['order_id']}/cancel", headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "CANCELLED"
        assert body["payment_status"] == "PAID"
        assert body["cancelled_at"] is not None

    def test_cancel_shipped_is_409(self, client, checkout):
        order = checkout()
        _set_status(client, order["order_id"], "SHIPPED")

        response = client.post(f"/orders/{order['order_id']}/cancel", headers=CUSTOMER)

        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_cancel_other_owners_order_is_404(self, client, checkout):
        order = checkout()
        response = client.post(f"/orders/{order['order_id']}/cancel", headers=OTHER_CUSTOMER)
        assert response.status_code == 404


class TestUpdateOrderAddressEndpoint:
    def test_partial_update(self, client, checkout):
        order = checkout()

        response = client.put(
            f"/orders/{order['order_id']}/address",
            json={"phone": "9000000000"},
            headers=CUSTOMER,
        )

        assert response.status_code == 200
        address = response.json()["address"]
        assert address["phone"] == "9000000000"
        assert address["city"] == "Bengaluru"
        assert address["line2"] == "Flat 4B"

    def test_update_delivered_order_is_409(self, client, checkout):
        order = checkout()
        _set_status(client, order["order_id"], "DELIVERED")

        response = client.put(f"/orders/{order['order_id']}/address", json={"city": "Mysuru"}, headers=CUSTOMER)

        assert response.status_code == 409


class TestAdminOrderEndpoints:
    def test_search_all(self, client, checkout):
        checkout(headers=CUSTOMER)
        checkout(headers=OTHER_CUSTOMER, payment_ref="pay_002")

        body = client.get("/admin/orders", headers=ADMIN).json()

        assert body["total"] == 2
        assert body["page"] == 1
        assert body["pages"] == 1
        assert len(body["orders"]) == 2

    def test_search_by_status(self, client, checkout):
        first = checkout(payment_ref="pay_001")
        checkout(payment_ref="pay_002")
        _set_status(client, first["order_id"], "SHIPPED")

        body = client.get("/admin/orders", params={"status": "shipped"}, headers=ADMIN).json()

        assert body["total"] == 1
        assert body["orders"][0]["order_id"] == first["order_id"]

    def test_search_by_payment_status(self, client, checkout, address):
        checkout()
        client.put("/cart/items/P1", json={"quantity": 1}, headers=CUSTOMER)
        client.post("/checkout/cod", json={"address": address}, headers=CUSTOMER)

        body = client.get("/admin/orders", params={"payment_status": "PENDING"}, headers=ADMIN).json()

        assert body["total"] == 1
        assert body["orders"][0]["payment_method"] == "COD"

    def test_pagination(self, client, checkout):
        for index in range(3):
            checkout(payment_ref=f"pay_{index}", quantity=1)

        body = client.get("/admin/orders", params={"page": 2, "limit": 2}, headers=ADMIN).json()

        assert body["total"] == 3
        assert body["pages"] == 2
        assert len(body["orders"]) == 1

    def test_limit_is_bounded(self, client):
        response = client.get("/admin/orders", params={"limit": 500}, headers=ADMIN)
        assert response.status_code == 422

    def test_admin_header_required(self, client):
        assert client.get("/admin/orders").status_code == 422

    def test_get_any_order(self, client, checkout):
        order = checkout()

        response = client.get(f"/admin/orders/{order['order_id']}", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["owner_id"] == "cust-001"

    def test_override_status(self, client, checkout):
        order = checkout()

        response = _set_status(client, order["order_id"], "delivered")

        assert response.status_code == 200
        assert response.json()["status"] == "DELIVERED"

    def test_override_to_unknown_status_is_400(self, client, checkout):
        order = checkout()
        assert _set_status(client, order["order_id"], "LOST").status_code == 400

    def test_override_payment_status(self, client, checkout):
        order = checkout()

        response = client.patch(
            f"/admin/orders/{order['order_id']}/payment-status",
            json={"payment_status": "REFUNDED"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        assert response.json()["payment_status"] == "REFUNDED"

    def test_override_unknown_order_is_404(self, client):
        assert _set_status(client, "nope", "SHIPPED").status_code == 404
