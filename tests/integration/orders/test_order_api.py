"""Integration tests for the Order API.

Covers:
- Create 201 / 400 / 409.
- List with filters and pagination envelope.
- Retrieve 200 / 404.
- Patch of non-status fields; status is rejected with 400.
- Status endpoint 200 / 400 (no-op, bad value) / 404 / 409.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from django.contrib.auth import get_user_model

from modules.audit.models import AuditEvent
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"

User = get_user_model()


def detail_url(order_id):
    return f"{URL}{order_id}/"


def status_url(order_id):
    return f"{URL}{order_id}/status/"


@pytest.fixture()
def created(api_client, order_payload, tee):
    response = api_client.post(URL, order_payload((tee, 2), status="PLACED"), format="json")
    assert response.status_code == 201, response.json()
    return response.json()


class TestCreate:
    def test_create_returns_201(self, api_client, order_payload, tee):
        response = api_client.post(URL, order_payload((tee, 2)), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["order_number"] == "ORD-000001"
        assert body["status"] == "DRAFT"
        assert body["total"] == "39.80"
        assert body["items_count"] == 1
        assert body["items"][0]["line_total"] == "39.80"
        assert body["customer"]["email"] == "ana@example.com"

    def test_create_in_trigger_status_decrements(self, api_client, order_payload, tee):
        response = api_client.post(URL, order_payload((tee, 2), status="PAID"), format="json")

        assert response.status_code == 201
        assert Product.objects.get(id=tee.id).stock == 3

    def test_create_with_shortage_returns_409(self, api_client, order_payload, tee):
        response = api_client.post(URL, order_payload((tee, 9), status="PAID"), format="json")

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "INSUFFICIENT_STOCK"
        assert body["problems"][0]["needed"] == 9
        assert body["problems"][0]["available"] == 5

    def test_empty_items_returns_400(self, api_client, order_payload):
        response = api_client.post(URL, order_payload(), format="json")
        assert response.status_code == 400

    def test_zero_quantity_returns_400(self, api_client, order_payload, tee):
        response = api_client.post(URL, order_payload((tee, 0)), format="json")
        assert response.status_code == 400

    def test_authenticated_user_is_audit_actor(self, api_client, order_payload, tee):
        user = User.objects.create_superuser(username="staff", password="secret-pass")
        api_client.force_authenticate(user=user)

        api_client.post(URL, order_payload((tee, 1)), format="json")

        event = AuditEvent.objects.get(action="ORDER_CREATED")
        assert (event.actor_id, event.actor_name, event.actor_role) == (
            str(user.pk),
            "staff",
            "ADMIN",
        )

    def test_anonymous_request_audits_as_system(self, api_client, order_payload, tee):
        api_client.post(URL, order_payload((tee, 1)), format="json")

        assert AuditEvent.objects.get(action="ORDER_CREATED").actor_id == "system"


class TestRead:
    def test_list_is_paginated(self, api_client, created):
        response = api_client.get(URL)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["results"][0]["order_number"] == created["order_number"]
        assert body["results"][0]["customer_name"] == "Ana Souza"
        assert "items" not in body["results"][0]

    def test_list_filters(self, api_client, created):
        assert api_client.get(URL, {"status": "PLACED"}).json()["count"] == 1
        assert api_client.get(URL, {"status": "PAID"}).json()["count"] == 0
        assert api_client.get(URL, {"search": "ana@"}).json()["count"] == 1
        assert api_client.get(URL, {"channel": "WHATSAPP"}).json()["count"] == 0

    def test_list_rejects_unknown_status(self, api_client):
        assert api_client.get(URL, {"status": "SHIPPED"}).status_code == 400

    def test_retrieve(self, api_client, created):
        response = api_client.get(detail_url(created["id"]))

        assert response.status_code == 200
        assert response.json()["items"][0]["qty"] == 2

    @pytest.mark.parametrize("order_id", [uuid4(), "not-a-uuid"])
    def test_retrieve_missing_returns_404(self, api_client, order_id):
        response = api_client.get(detail_url(order_id))

        assert response.status_code == 404
        assert response.json()["detail"] == "Order not found."


class TestPatch:
    def test_patch_notes(self, api_client, created):
        response = api_client.patch(
            detail_url(created["id"]), {"notes": "Ring twice"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "Ring twice"
        assert response.json()["status"] == "PLACED"

    def test_patch_status_is_rejected(self, api_client, created):
        response = api_client.patch(
            detail_url(created["id"]), {"status": "PAID"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["fields"] == ["status"]
        assert api_client.get(detail_url(created["id"])).json()["status"] == "PLACED"

    def test_patch_invalid_value(self, api_client, created):
        response = api_client.patch(
            detail_url(created["id"]), {"channel": "FAX"}, format="json"
        )
        assert response.status_code == 400

    def test_patch_missing_order(self, api_client):
        response = api_client.patch(detail_url(uuid4()), {"notes": "x"}, format="json")
        assert response.status_code == 404


class TestChangeStatus:
    def test_pay_decrements_stock(self, api_client, created, tee):
        response = api_client.post(status_url(created["id"]), {"status": "PAID"}, format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "PAID"
        assert Product.objects.get(id=tee.id).stock == 3

    def test_same_status_returns_400(self, api_client, created):
        response = api_client.post(
            status_url(created["id"]), {"status": "PLACED"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "NO_OP"
        assert response.json()["detail"] == "The order already has that status."

    def test_unknown_status_value_returns_400(self, api_client, created):
        response = api_client.post(
            status_url(created["id"]), {"status": "SHIPPED"}, format="json"
        )
        assert response.status_code == 400

    def test_missing_order_returns_404(self, api_client):
        response = api_client.post(status_url(uuid4()), {"status": "PAID"}, format="json")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_shortage_returns_409(self, api_client, order_payload, tee):
        order = api_client.post(
            URL, order_payload((tee, 6), status="PLACED"), format="json"
        ).json()

        response = api_client.post(status_url(order["id"]), {"status": "PAID"}, format="json")

        assert response.status_code == 409
        assert response.json()["code"] == "INSUFFICIENT_STOCK"
        assert "need 6, available 5" in response.json()["detail"]
        assert Product.objects.get(id=tee.id).stock == 5
