"""
Order API tests
"""


class TestCustomerOrdersAPI:

    def test_my_orders(self, client, customer_headers, other_customer_headers, placed_order):
        response = client.get("/api/v1/orders", headers=customer_headers)
        orders = response.json()["data"]
        assert [o["id"] for o in orders] == [placed_order.id]
        assert orders[0]["status_color"] == "#FFA500"

        assert client.get("/api/v1/orders", headers=other_customer_headers).json()["data"] == []
        response = client.get(f"/api/v1/orders/{placed_order.id}", headers=other_customer_headers)
        assert response.status_code == 404

    def test_invoice_inbox(self, client, customer_headers, other_customer_headers, placed_order):
        response = client.get("/api/v1/orders/invoices", headers=customer_headers)
        assert response.status_code == 200
        invoices = response.json()["data"]
        assert [i["order"]["id"] for i in invoices] == [placed_order.id]
        assert invoices[0]["payment"]["payment_status"] == "Paid"

        assert client.get("/api/v1/orders/invoices", headers=other_customer_headers).json()["data"] == []

    def test_leave_feedback_after_completion(self, client, customer_headers, completed_order, menu_items):
        payload = {"order_id": completed_order.id, "item_id": menu_items["beef"].id,
                   "rating": 5, "comment": "Perfect"}
        assert client.post("/api/v1/feedback", headers=customer_headers, json=payload).status_code == 200

        response = client.post("/api/v1/feedback", headers=customer_headers, json=payload)
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_FEEDBACK"

        public = client.get(f"/api/v1/menu/{menu_items['beef'].id}/feedback").json()["data"]
        assert [f["comment"] for f in public] == ["Perfect"]


class TestStaffOrdersAPI:

    def test_customer_cannot_advance(self, client, customer_headers, placed_order):
        response = client.post(f"/api/v1/staff/orders/{placed_order.id}/status",
                               headers=customer_headers, json={"status": "preparing"})
        assert response.status_code == 403

    def test_advance_one_step(self, client, staff_headers, placed_order):
        response = client.post(f"/api/v1/staff/orders/{placed_order.id}/status",
                               headers=staff_headers, json={"status": "preparing"})
        assert response.status_code == 200
        assert response.json()["data"]["order_status"] == "preparing"

    def test_skip_conflicts(self, client, staff_headers, placed_order):
        response = client.post(f"/api/v1/staff/orders/{placed_order.id}/status",
                               headers=staff_headers, json={"status": "completed"})
        assert response.status_code == 409

    def test_unknown_status_is_rejected(self, client, staff_headers, placed_order):
        response = client.post(f"/api/v1/staff/orders/{placed_order.id}/status",
                               headers=staff_headers, json={"status": "shipped"})
        assert response.status_code == 422

    def test_list_filter_and_search(self, client, staff_headers, placed_order):
        response = client.get("/api/v1/staff/orders", headers=staff_headers, params={"status": "pending"})
        assert [o["id"] for o in response.json()["data"]] == [placed_order.id]

        response = client.get("/api/v1/staff/orders", headers=staff_headers, params={"status": "completed"})
        assert response.json()["data"] == []

        response = client.get("/api/v1/staff/orders/search", headers=staff_headers,
                              params={"q": placed_order.id[:6]})
        assert [o["id"] for o in response.json()["data"]] == [placed_order.id]

    def test_detail_includes_payment(self, client, staff_headers, placed_order):
        data = client.get(f"/api/v1/staff/orders/{placed_order.id}", headers=staff_headers).json()["data"]
        assert data["payment"]["order_id"] == placed_order.id
