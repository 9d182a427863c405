"""
WebSocket feed tests
"""

import pytest
from starlette.websockets import WebSocketDisconnect


class TestJobVacancyFeed:

    def test_every_session_sees_the_toggle(self, client, admin_headers):
        with client.websocket_connect("/ws/settings/job-vacancy") as first, \
                client.websocket_connect("/ws/settings/job-vacancy") as second:
            assert first.receive_json()["show_banner"] is True
            assert second.receive_json()["show_tab"] is True

            client.put("/api/v1/admin/settings/job-vacancy", headers=admin_headers,
                       json={"job_vacancy_open": False})

            closed = {"job_vacancy_open": False, "show_tab": False, "show_banner": False}
            assert first.receive_json() == closed
            assert second.receive_json() == closed


class TestCartFeed:

    def test_needs_token(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/ws/cart") as ws:
                ws.receive_json()

    def test_cart_changes_pushed(self, client, context, customer_headers, menu_items):
        token = customer_headers["Authorization"].split(" ", 1)[1]
        with client.websocket_connect(f"/ws/cart?token={token}") as ws:
            assert ws.receive_json()["cart_items"] == []

            client.post("/api/v1/cart/items", headers=customer_headers,
                        json={"menu_item_id": menu_items["chicken"].id, "quantity": 3})

            update = ws.receive_json()
            assert update["payable_amount_cents"] == 1200


class TestOrderFeeds:

    def test_staff_list_feed(self, client, staff_headers, placed_order):
        token = staff_headers["Authorization"].split(" ", 1)[1]
        with client.websocket_connect(f"/ws/orders?status=pending&token={token}") as ws:
            assert [o["id"] for o in ws.receive_json()] == [placed_order.id]

            client.post(f"/api/v1/staff/orders/{placed_order.id}/status", headers=staff_headers,
                        json={"status": "preparing"})

            assert ws.receive_json() == []

    def test_customer_cannot_watch_staff_list(self, client, customer_headers):
        token = customer_headers["Authorization"].split(" ", 1)[1]
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect(f"/ws/orders?token={token}") as ws:
                ws.receive_json()

    def test_customer_watches_own_order(self, client, customer_headers, staff_headers, placed_order):
        token = customer_headers["Authorization"].split(" ", 1)[1]
        with client.websocket_connect(f"/ws/orders/{placed_order.id}?token={token}") as ws:
            assert ws.receive_json()["order_status"] == "pending"

            client.post(f"/api/v1/staff/orders/{placed_order.id}/status", headers=staff_headers,
                        json={"status": "preparing"})

            update = ws.receive_json()
            assert update["order_status"] == "preparing"
            assert update["status_color"] == "#1E90FF"

    def test_other_customer_refused(self, client, other_customer_headers, placed_order):
        token = other_customer_headers["Authorization"].split(" ", 1)[1]
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect(f"/ws/orders/{placed_order.id}?token={token}") as ws:
                ws.receive_json()
