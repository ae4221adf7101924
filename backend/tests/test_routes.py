"""
Chartwise Backend — API Endpoint Tests
========================================

Drives the FastAPI app through HTTPX against an in-memory SQLite database.

What we test:
    ✅ Saved charts: create → list → get → update → delete, error bodies
    ✅ Profiles: get-or-create, nickname rules, generators
    ✅ Login: profile creation plus welcome notification
    ✅ Profile update triggers a confirmation notification
    ✅ 400 for empty chart titles and overlong nicknames, 422 for schema limits
    ✅ Notifications: read / read-all / delete
    ✅ Health check and request id header
"""

import pytest

USER = "auth0|route-user"

CHART = {
    "title": "Quarterly revenue",
    "chartType": "bar",
    "chartConfig": {"labels": ["Q1", "Q2"], "datasets": [{"data": [10, 20]}]},
    "chartImageData": "data:image/png;base64,AAAA",
    "fileName": "revenue.xlsx",
    "user": USER,
    "tags": ["finance"],
}


class TestSavedChartRoutes:

    @pytest.mark.asyncio
    async def test_chart_lifecycle(self, test_client):
        created = await test_client.post("/api/saved-charts", json=CHART)
        assert created.status_code == 201
        body = created.json()
        chart_id = body["id"]
        assert body["chartType"] == "bar"
        assert body["isPublic"] is False
        assert "chartImageData" not in body

        listed = await test_client.get(f"/api/saved-charts/{USER}")
        assert listed.status_code == 200
        page = listed.json()
        assert [c["id"] for c in page["charts"]] == [chart_id]
        assert "chartImageData" not in page["charts"][0]
        assert page["pagination"] == {
            "current": 1, "pages": 1, "total": 1, "hasNext": False, "hasPrev": False,
        }

        fetched = await test_client.get(f"/api/saved-charts/chart/{chart_id}")
        assert fetched.status_code == 200
        assert fetched.json()["chartImageData"] == "data:image/png;base64,AAAA"

        updated = await test_client.put(
            f"/api/saved-charts/{chart_id}", json={"title": "Renamed", "isPublic": True}
        )
        assert updated.status_code == 200
        assert updated.json()["title"] == "Renamed"
        assert updated.json()["isPublic"] is True
        assert updated.json()["fileName"] == "revenue.xlsx"

        deleted = await test_client.delete(f"/api/saved-charts/{chart_id}")
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Chart deleted successfully"}

        missing = await test_client.get(f"/api/saved-charts/chart/{chart_id}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"
        assert missing.json()["message"] == "Chart not found"

    @pytest.mark.asyncio
    async def test_create_with_missing_fields_is_400(self, test_client):
        response = await test_client.post("/api/saved-charts", json={"title": "Only a title"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == (
            "Missing required fields: title, chartType, chartConfig, fileName, user"
        )
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_update_with_empty_title_is_400(self, test_client):
        chart_id = (await test_client.post("/api/saved-charts", json=CHART)).json()["id"]

        response = await test_client.put(f"/api/saved-charts/{chart_id}", json={"title": ""})
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "title"}

        stored = await test_client.get(f"/api/saved-charts/chart/{chart_id}")
        assert stored.json()["title"] == CHART["title"]

    @pytest.mark.asyncio
    async def test_malformed_chart_id_is_404(self, test_client):
        assert (await test_client.get("/api/saved-charts/chart/xyz")).status_code == 404
        assert (await test_client.put("/api/saved-charts/xyz", json={"title": "t"})).status_code == 404
        assert (await test_client.delete("/api/saved-charts/xyz")).status_code == 404

    @pytest.mark.asyncio
    async def test_list_query_parameters(self, test_client):
        for chart_type in ("bar", "line", "bar"):
            payload = dict(CHART, chartType=chart_type)
            assert (await test_client.post("/api/saved-charts", json=payload)).status_code == 201

        response = await test_client.get(
            f"/api/saved-charts/{USER}",
            params={"chartType": "bar", "limit": 1, "page": 2},
        )
        assert response.status_code == 200
        body = response.json()
        assert len(body["charts"]) == 1
        assert body["pagination"]["total"] == 2
        assert body["pagination"]["hasPrev"] is True
        assert body["pagination"]["hasNext"] is False

        bad_sort = await test_client.get(f"/api/saved-charts/{USER}", params={"sortBy": "nope"})
        assert bad_sort.status_code == 400

        bad_limit = await test_client.get(f"/api/saved-charts/{USER}", params={"limit": 0})
        assert bad_limit.status_code == 422

    @pytest.mark.asyncio
    async def test_stats(self, test_client):
        for chart_type in ("pie", "bar", "bar"):
            await test_client.post("/api/saved-charts", json=dict(CHART, chartType=chart_type))

        response = await test_client.get(f"/api/saved-charts/stats/{USER}")
        assert response.status_code == 200
        body = response.json()
        assert body["totalCharts"] == 3
        assert body["chartTypeStats"] == [
            {"chartType": "bar", "count": 2},
            {"chartType": "pie", "count": 1},
        ]
        assert len(body["recentCharts"]) == 3
        assert set(body["recentCharts"][0]) == {"id", "title", "chartType", "createdAt"}


class TestProfileRoutes:

    @pytest.mark.asyncio
    async def test_get_creates_profile_once(self, test_client):
        first = await test_client.get(f"/api/user-profile/{USER}", params={"email": "ada@example.com"})
        assert first.status_code == 200
        profile = first.json()
        assert profile["userId"] == USER
        assert profile["email"] == "ada@example.com"
        assert profile["profileCompleteness"] == 30
        assert profile["preferences"]["dateFormat"] == "DD/MM/YYYY"

        second = await test_client.get(f"/api/user-profile/{USER}")
        assert second.json()["id"] == profile["id"]
        assert second.json()["nickname"] == profile["nickname"]

    @pytest.mark.asyncio
    async def test_update_unknown_profile_is_404(self, test_client):
        response = await test_client.put("/api/user-profile/auth0|ghost", json={"bio": "hi"})
        assert response.status_code == 404
        assert response.json()["message"] == "User profile not found"

    @pytest.mark.asyncio
    async def test_nickname_rules(self, test_client):
        taken = (await test_client.get("/api/user-profile/auth0|other")).json()["nickname"]
        await test_client.get(f"/api/user-profile/{USER}")

        blank = await test_client.put(f"/api/user-profile/{USER}", json={"nickname": "  "})
        assert blank.status_code == 400
        assert blank.json()["message"] == "Nickname cannot be empty"

        clash = await test_client.put(f"/api/user-profile/{USER}", json={"nickname": taken})
        assert clash.status_code == 400
        assert clash.json()["message"] == "Nickname is already taken"
        assert clash.json()["details"] == {"field": "nickname"}

        check = await test_client.post(
            "/api/user-profile/check-nickname", json={"nickname": taken, "userId": USER}
        )
        assert check.json()["available"] is False

        own = await test_client.post(
            "/api/user-profile/check-nickname", json={"nickname": taken, "userId": "auth0|other"}
        )
        assert own.json()["available"] is True

        missing = await test_client.post("/api/user-profile/check-nickname", json={})
        assert missing.status_code == 400

    @pytest.mark.asyncio
    async def test_update_length_limits(self, test_client):
        await test_client.get(f"/api/user-profile/{USER}")

        nickname = await test_client.put(f"/api/user-profile/{USER}", json={"nickname": "N" * 101})
        assert nickname.status_code == 400
        assert nickname.json()["message"] == "Nickname must be at most 100 characters"

        company = await test_client.put(f"/api/user-profile/{USER}", json={"company": "C" * 256})
        assert company.status_code == 422

    @pytest.mark.asyncio
    async def test_update_notification_skips_null_fields(self, test_client):
        await test_client.get(f"/api/user-profile/{USER}")

        response = await test_client.put(
            f"/api/user-profile/{USER}",
            json={"bio": None, "phone": None, "company": "Chartwise"},
        )
        assert response.status_code == 200

        sent = (await test_client.get(f"/api/notifications/{USER}")).json()["notifications"][0]
        assert sent["metadata"]["updatedFields"] == ["company"]

    @pytest.mark.asyncio
    async def test_update_sends_confirmation_notification(self, test_client):
        await test_client.get(f"/api/user-profile/{USER}")

        response = await test_client.put(
            f"/api/user-profile/{USER}",
            json={"nickname": "  BrandNewName1 ", "company": "Chartwise"},
        )
        assert response.status_code == 200
        assert response.json()["nickname"] == "BrandNewName1"
        assert response.json()["company"] == "Chartwise"

        notifications = (await test_client.get(f"/api/notifications/{USER}")).json()
        assert notifications["unreadCount"] == 1
        sent = notifications["notifications"][0]
        assert sent["type"] == "profile_update"
        assert sent["metadata"]["updatedFields"] == ["company", "nickname"]

    @pytest.mark.asyncio
    async def test_delete_profile(self, test_client):
        await test_client.get(f"/api/user-profile/{USER}")

        deleted = await test_client.delete(f"/api/user-profile/{USER}")
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "User profile deleted successfully"}

        again = await test_client.delete(f"/api/user-profile/{USER}")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_generators(self, test_client):
        avatar = await test_client.get("/api/user-profile/avatar/random")
        assert avatar.status_code == 200
        assert "|" in avatar.json()["avatar"]

        nickname = await test_client.get("/api/user-profile/nickname/random")
        assert nickname.status_code == 200
        assert nickname.json()["nickname"]

        avatars = await test_client.get("/api/user-profile/avatars/all")
        assert avatars.status_code == 200
        assert len(avatars.json()["avatars"]) == 800


class TestLoginRoute:

    @pytest.mark.asyncio
    async def test_login_creates_profile_and_welcome(self, test_client):
        response = await test_client.post(
            "/api/auth/login",
            json={"sub": USER, "email": "ada@example.com", "name": "Ada"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["notificationSent"] is True
        assert body["profile"]["userId"] == USER
        assert body["profile"]["email"] == "ada@example.com"

        notifications = (await test_client.get(f"/api/notifications/{USER}")).json()
        assert notifications["pagination"]["total"] == 1
        welcome = notifications["notifications"][0]
        assert welcome["type"] == "welcome"
        assert welcome["title"] == "Welcome back, Ada! 👋"
        assert welcome["actionUrl"] == "/dashboard"

    @pytest.mark.asyncio
    async def test_login_without_sub_is_400(self, test_client):
        response = await test_client.post("/api/auth/login", json={"email": "x@example.com"})
        assert response.status_code == 400


class TestNotificationRoutes:

    @pytest.mark.asyncio
    async def test_read_flow(self, test_client):
        ids = []
        for title in ("One", "Two"):
            created = await test_client.post(
                "/api/notifications",
                json={"userId": USER, "title": title, "message": "m", "type": "chart"},
            )
            assert created.status_code == 201
            ids.append(created.json()["id"])

        read = await test_client.put(f"/api/notifications/{ids[0]}/read")
        assert read.status_code == 200
        assert read.json()["isRead"] is True

        unread = (await test_client.get(
            f"/api/notifications/{USER}", params={"unreadOnly": "true"}
        )).json()
        assert [n["id"] for n in unread["notifications"]] == [ids[1]]
        assert unread["unreadCount"] == 1

        all_read = await test_client.put(f"/api/notifications/user/{USER}/read-all")
        assert all_read.json() == {"updated": 1}

        deleted = await test_client.delete(f"/api/notifications/{ids[0]}")
        assert deleted.status_code == 200

        missing = await test_client.put(f"/api/notifications/{ids[0]}/read")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_create_with_missing_fields_is_400(self, test_client):
        response = await test_client.post("/api/notifications", json={"userId": USER})
        assert response.status_code == 400


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

        generated = await test_client.get("/api/user-profile/avatar/random")
        assert len(generated.headers["X-Request-ID"]) == 8
