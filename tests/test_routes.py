"""
FoodHub Backend - API Endpoint Tests
=====================================

What:  HTTP-level tests through the full app (middleware, dependencies,
       exception handlers) with the session dependency bound to the test DB.

What we test:
    ✅ Principal resolution: missing/unknown id → 401, suspended → 403,
       wrong role → 403
    ✅ Order placement (201) and the error envelope for domain refusals
    ✅ Schema validation failures → 400 validation_error
    ✅ Provider status updates, customer cancellation, admin listing
    ✅ Review endpoint status codes (201, 403, 409)
    ✅ Public meal browse and detail, provider meal management (201, 403,
       409, 204), admin suspension taking effect on the next request
    ✅ Health check and request ID header
"""

import uuid

import pytest

from tests.conftest import auth_headers

ADDRESS = "12 Harbour Street, Springfield"


def order_body(*lines):
    return {
        "delivery_address": ADDRESS,
        "items": [{"meal_id": str(meal.id), "quantity": qty} for meal, qty in lines],
    }


async def place_order(client, seed, *lines):
    response = await client.post(
        "/api/orders", json=order_body(*lines), headers=auth_headers(seed.customer)
    )
    assert response.status_code == 201
    return response.json()


async def deliver(client, seed, order_id):
    for status in ("preparing", "ready", "delivered"):
        response = await client.patch(
            f"/api/provider/orders/{order_id}/status",
            json={"status": status},
            headers=auth_headers(seed.provider),
        )
        assert response.status_code == 200


class TestPrincipalGate:

    @pytest.mark.asyncio
    async def test_missing_header_is_401(self, test_client, seed):
        response = await test_client.get("/api/orders")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_unknown_user_is_401(self, test_client, seed):
        response = await test_client.get(
            "/api/orders", headers={"X-User-Id": str(uuid.uuid4())}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_user_id_is_401(self, test_client, seed):
        response = await test_client.get("/api/orders", headers={"X-User-Id": "not-a-uuid"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_suspended_account_is_403(self, test_client, seed):
        response = await test_client.post(
            "/api/orders",
            json=order_body((seed.burger, 1)),
            headers=auth_headers(seed.suspended_customer),
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Account suspended"

    @pytest.mark.asyncio
    async def test_provider_cannot_place_orders(self, test_client, seed):
        response = await test_client.post(
            "/api/orders", json=order_body((seed.burger, 1)), headers=auth_headers(seed.provider)
        )
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_customer_cannot_list_all_orders(self, test_client, seed):
        response = await test_client.get("/api/admin/orders", headers=auth_headers(seed.customer))
        assert response.status_code == 403


class TestOrderEndpoints:

    @pytest.mark.asyncio
    async def test_place_order(self, test_client, seed):
        body = await place_order(test_client, seed, (seed.burger, 2), (seed.fries, 1))

        assert body["status"] == "placed"
        assert body["total_amount"] == "24.00"
        assert len(body["items"]) == 2
        assert body["items"][0]["price_at_time"] == "9.50"

    @pytest.mark.asyncio
    async def test_mixed_providers_error_envelope(self, test_client, seed):
        response = await test_client.post(
            "/api/orders",
            json=order_body((seed.burger, 1), (seed.sushi, 1)),
            headers=auth_headers(seed.customer),
        )

        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "mixed_provider"
        assert body["message"] == "All items in an order must be from the same provider"
        assert "request_id" in body

        listing = await test_client.get("/api/orders", headers=auth_headers(seed.customer))
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_unavailable_meal_is_400(self, test_client, seed):
        response = await test_client.post(
            "/api/orders",
            json=order_body((seed.soup, 1)),
            headers=auth_headers(seed.customer),
        )
        assert response.status_code == 400
        assert response.json()["details"]["meal_ids"] == [str(seed.soup.id)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"delivery_address": "short", "items": []},
            {"delivery_address": ADDRESS, "items": []},
            {"delivery_address": ADDRESS, "items": [{"meal_id": "x", "quantity": 1}]},
        ],
    )
    async def test_schema_violations_are_400(self, test_client, seed, body):
        response = await test_client.post(
            "/api/orders", json=body, headers=auth_headers(seed.customer)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_quantity_above_limit_is_400(self, test_client, seed):
        response = await test_client.post(
            "/api/orders",
            json=order_body((seed.burger, 21)),
            headers=auth_headers(seed.customer),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_order_of_other_customer_is_404(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.burger, 1))

        mine = await test_client.get(
            f"/api/orders/{order['id']}", headers=auth_headers(seed.customer)
        )
        theirs = await test_client.get(
            f"/api/orders/{order['id']}", headers=auth_headers(seed.other_customer)
        )

        assert mine.status_code == 200
        assert mine.json()["provider"]["name"] == "Pat Provider"
        assert theirs.status_code == 404

    @pytest.mark.asyncio
    async def test_provider_fulfils_and_customer_cannot_cancel(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.burger, 1))
        url = f"/api/provider/orders/{order['id']}/status"

        response = await test_client.patch(
            url, json={"status": "preparing"}, headers=auth_headers(seed.provider)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "preparing"

        cancel = await test_client.patch(
            f"/api/orders/{order['id']}/cancel", headers=auth_headers(seed.customer)
        )
        assert cancel.status_code == 400
        assert cancel.json()["error"] == "invalid_cancellation"

    @pytest.mark.asyncio
    async def test_skipped_transition_is_400(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.burger, 1))

        response = await test_client.patch(
            f"/api/provider/orders/{order['id']}/status",
            json={"status": "ready"},
            headers=auth_headers(seed.provider),
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"current": "placed", "requested": "ready"}

    @pytest.mark.asyncio
    async def test_provider_status_body_rejects_cancelled(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.burger, 1))

        response = await test_client.patch(
            f"/api/provider/orders/{order['id']}/status",
            json={"status": "cancelled"},
            headers=auth_headers(seed.provider),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_customer_cancels_placed_order(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.fries, 2))

        response = await test_client.patch(
            f"/api/orders/{order['id']}/cancel", headers=auth_headers(seed.customer)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_admin_filters_by_status(self, test_client, seed):
        first = await place_order(test_client, seed, (seed.burger, 1))
        second = await place_order(test_client, seed, (seed.fries, 1))
        await test_client.patch(
            f"/api/orders/{second['id']}/cancel", headers=auth_headers(seed.customer)
        )

        everything = await test_client.get("/api/admin/orders", headers=auth_headers(seed.admin))
        placed = await test_client.get(
            "/api/admin/orders", params={"status": "placed"}, headers=auth_headers(seed.admin)
        )

        assert {o["id"] for o in everything.json()} == {first["id"], second["id"]}
        assert [o["id"] for o in placed.json()] == [first["id"]]

    @pytest.mark.asyncio
    async def test_admin_unknown_status_filter_is_400(self, test_client, seed):
        response = await test_client.get(
            "/api/admin/orders", params={"status": "lost"}, headers=auth_headers(seed.admin)
        )

        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["loc"] == ["query", "status"]


class TestReviewEndpoint:

    @pytest.mark.asyncio
    async def test_review_lifecycle(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.burger, 1))
        review = {"meal_id": str(seed.burger.id), "rating": 5, "comment": "Juicy"}

        early = await test_client.post(
            "/api/reviews", json=review, headers=auth_headers(seed.customer)
        )
        assert early.status_code == 403
        assert early.json()["error"] == "review_not_eligible"

        await deliver(test_client, seed, order["id"])

        created = await test_client.post(
            "/api/reviews", json=review, headers=auth_headers(seed.customer)
        )
        assert created.status_code == 201
        assert created.json()["rating"] == 5

        again = await test_client.post(
            "/api/reviews", json=review, headers=auth_headers(seed.customer)
        )
        assert again.status_code == 409
        assert again.json()["message"] == "You already reviewed this meal"

    @pytest.mark.asyncio
    async def test_rating_out_of_range_is_400(self, test_client, seed):
        response = await test_client.post(
            "/api/reviews",
            json={"meal_id": str(seed.burger.id), "rating": 6},
            headers=auth_headers(seed.customer),
        )
        assert response.status_code == 400


class TestHealthAndHeaders:

    @pytest.mark.asyncio
    async def test_health_check(self, test_client):
        response = await test_client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header_round_trip(self, test_client, seed):
        response = await test_client.get(
            "/api/orders",
            headers={**auth_headers(seed.customer), "X-Request-ID": "trace-123"},
        )
        assert response.headers["X-Request-ID"] == "trace-123"


class TestMealEndpoints:

    @pytest.mark.asyncio
    async def test_browse_is_public(self, test_client, seed):
        response = await test_client.get("/api/meals")

        assert response.status_code == 200
        names = {m["name"] for m in response.json()}
        assert names == {"Burger", "Fries", "Soup", "Sushi"}

    @pytest.mark.asyncio
    async def test_browse_query_filters(self, test_client, seed):
        response = await test_client.get(
            "/api/meals", params={"is_available": "false", "search": "so"}
        )

        assert response.status_code == 200
        assert [m["name"] for m in response.json()] == ["Soup"]

    @pytest.mark.asyncio
    async def test_bad_price_filter_is_400(self, test_client, seed):
        response = await test_client.get("/api/meals", params={"min_price": "cheap"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_detail_shows_reviews(self, test_client, seed):
        order = await place_order(test_client, seed, (seed.burger, 1))
        await deliver(test_client, seed, order["id"])
        await test_client.post(
            "/api/reviews",
            json={"meal_id": str(seed.burger.id), "rating": 5, "comment": "Juicy"},
            headers=auth_headers(seed.customer),
        )

        response = await test_client.get(f"/api/meals/{seed.burger.id}")

        body = response.json()
        assert response.status_code == 200
        assert body["provider"]["provider_profile"]["business_name"] == "Pat's Grill"
        assert [(r["rating"], r["customer"]["name"]) for r in body["reviews"]] == [
            (5, "Carla Customer")
        ]

    @pytest.mark.asyncio
    async def test_meal_of_suspended_provider_is_404(self, test_client, seed):
        response = await test_client.get(f"/api/meals/{seed.pasta.id}")

        assert response.status_code == 404
        assert response.json()["message"] == "Meal not found"


class TestProviderMealEndpoints:

    @pytest.mark.asyncio
    async def test_create_update_delete(self, test_client, seed):
        headers = auth_headers(seed.provider)

        created = await test_client.post(
            "/api/provider/meals",
            json={"category_id": str(seed.category.id), "name": "Salad", "price": 7.25},
            headers=headers,
        )
        assert created.status_code == 201
        meal_id = created.json()["id"]
        assert created.json()["price"] == "7.25"

        updated = await test_client.put(
            f"/api/provider/meals/{meal_id}", json={"is_available": False}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["is_available"] is False

        deleted = await test_client.delete(f"/api/provider/meals/{meal_id}", headers=headers)
        assert deleted.status_code == 204
        assert (await test_client.get(f"/api/meals/{meal_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_non_positive_price_is_400(self, test_client, seed):
        response = await test_client.post(
            "/api/provider/meals",
            json={"category_id": str(seed.category.id), "name": "Free", "price": 0},
            headers=auth_headers(seed.provider),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_customer_cannot_manage_meals(self, test_client, seed):
        response = await test_client.post(
            "/api/provider/meals",
            json={"category_id": str(seed.category.id), "name": "Salad", "price": 7},
            headers=auth_headers(seed.customer),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_other_providers_meal_is_403(self, test_client, seed):
        response = await test_client.put(
            f"/api/provider/meals/{seed.burger.id}",
            json={"price": 1},
            headers=auth_headers(seed.other_provider),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_ordered_meal_is_409(self, test_client, seed):
        await place_order(test_client, seed, (seed.fries, 1))

        response = await test_client.delete(
            f"/api/provider/meals/{seed.fries.id}", headers=auth_headers(seed.provider)
        )

        assert response.status_code == 409
        assert response.json()["error"] == "meal_in_use"


class TestAdminUserEndpoints:

    @pytest.mark.asyncio
    async def test_list_users(self, test_client, seed):
        response = await test_client.get("/api/admin/users", headers=auth_headers(seed.admin))

        assert response.status_code == 200
        assert len(response.json()) == 7

    @pytest.mark.asyncio
    async def test_suspension_applies_on_next_request(self, test_client, seed):
        response = await test_client.patch(
            f"/api/admin/users/{seed.provider.id}",
            json={"status": "suspended"},
            headers=auth_headers(seed.admin),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "suspended"

        locked_out = await test_client.get(
            "/api/provider/orders", headers=auth_headers(seed.provider)
        )
        menu = await test_client.get("/api/meals")

        assert locked_out.status_code == 403
        assert {m["name"] for m in menu.json()} == {"Sushi"}

    @pytest.mark.asyncio
    async def test_own_status_is_400(self, test_client, seed):
        response = await test_client.patch(
            f"/api/admin/users/{seed.admin.id}",
            json={"status": "suspended"},
            headers=auth_headers(seed.admin),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "You cannot change your own status"

    @pytest.mark.asyncio
    async def test_unknown_status_value_is_400(self, test_client, seed):
        response = await test_client.patch(
            f"/api/admin/users/{seed.customer.id}",
            json={"status": "banned"},
            headers=auth_headers(seed.admin),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_customer_cannot_moderate(self, test_client, seed):
        response = await test_client.patch(
            f"/api/admin/users/{seed.provider.id}",
            json={"status": "suspended"},
            headers=auth_headers(seed.customer),
        )
        assert response.status_code == 403
