"""
FitTrack Backend — API Route Tests
====================================

What:  End-to-end HTTP tests through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport; the app runs on the SQLite
       test engine, so requests hit real transactions.

What we test:
    ✅ Status mapping: 201 / 200 / 204 / 400 / 404 / 409
    ✅ Flat JSON measurement fields survive the round trip
    ✅ One bad entry, a non-finite weight or an oversized integer stores nothing
    ✅ Error responses never leak password hashes or SQL
    ✅ Request ID header echoed back
"""

import pytest

from fittrack.models.workout import WorkoutEntryRow, WorkoutRow


def workout_payload(**overrides) -> dict:
    payload = {
        "title": "Pull day",
        "duration_minutes": 50,
        "calories_burned": 400,
        "entries": [
            {"exercise_name": "Pull-up", "sets": 4, "reps": 8, "order_index": 0},
            {"exercise_name": "Dead hang", "sets": 2, "duration_seconds": 45, "order_index": 1},
        ],
    }
    payload.update(overrides)
    return payload


class TestWorkoutRoutes:
    """Tests for /workouts."""

    @pytest.mark.asyncio
    async def test_create_returns_201_with_aggregate(self, test_client):
        response = await test_client.post("/workouts", json=workout_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["id"] > 0
        assert [e["exercise_name"] for e in body["entries"]] == ["Pull-up", "Dead hang"]
        assert body["entries"][0]["reps"] == 8
        assert body["entries"][0]["duration_seconds"] is None
        assert body["entries"][1]["duration_seconds"] == 45
        assert body["entries"][1]["reps"] is None

    @pytest.mark.asyncio
    async def test_get_returns_stored_workout(self, test_client):
        created = (await test_client.post("/workouts", json=workout_payload())).json()

        response = await test_client.get(f"/workouts/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_returns_404(self, test_client):
        response = await test_client.get("/workouts/987654")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_mixed_measurement_returns_400_and_stores_nothing(self, test_client):
        """reps and duration_seconds on one entry is rejected before any write."""
        payload = workout_payload(
            entries=[
                {
                    "exercise_name": "Burpee",
                    "sets": 3,
                    "reps": 10,
                    "duration_seconds": 30,
                    "order_index": 0,
                }
            ]
        )

        response = await test_client.post("/workouts", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["order_index"] == 0
        assert (await test_client.get("/workouts/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_mixed_entry_after_valid_entry_stores_nothing(self, test_client, count_rows):
        """A valid Plank followed by a squats entry carrying reps and a duration fails whole."""
        payload = workout_payload(
            title="leg day",
            entries=[
                {"exercise_name": "Plank", "sets": 3, "duration_seconds": 60, "order_index": 1},
                {
                    "exercise_name": "squats",
                    "sets": 4,
                    "reps": 12,
                    "duration_seconds": 60,
                    "weight": 185.0,
                    "order_index": 2,
                },
            ],
        )

        response = await test_client.post("/workouts", json=payload)

        assert response.status_code == 400
        assert response.json()["details"]["order_index"] == 2
        assert await count_rows(WorkoutRow) == 0
        assert await count_rows(WorkoutEntryRow) == 0
        assert (await test_client.get("/workouts/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_infinite_weight_rejected(self, test_client, count_rows):
        """JSON Infinity is refused at the schema; nothing reaches the store."""
        body = (
            '{"title": "a", "duration_minutes": 10, "entries": '
            '[{"exercise_name": "a", "sets": 1, "weight": Infinity, "order_index": 0}]}'
        )

        response = await test_client.post(
            "/workouts", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422
        assert await count_rows(WorkoutRow) == 0

    @pytest.mark.asyncio
    async def test_value_beyond_integer_column_returns_400(self, test_client, count_rows):
        payload = workout_payload(
            entries=[{"exercise_name": "Row", "sets": 2**31, "reps": 10, "order_index": 0}]
        )

        response = await test_client.post("/workouts", json=payload)

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "sets"
        assert await count_rows(WorkoutRow) == 0

    @pytest.mark.asyncio
    async def test_zero_sets_returns_400(self, test_client):
        payload = workout_payload(
            entries=[{"exercise_name": "Row", "sets": 0, "reps": 10, "order_index": 0}]
        )

        response = await test_client.post("/workouts", json=payload)

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "sets"

    @pytest.mark.asyncio
    async def test_update_replaces_entries(self, test_client):
        created = (await test_client.post("/workouts", json=workout_payload())).json()

        response = await test_client.put(
            f"/workouts/{created['id']}",
            json=workout_payload(
                title="Pull day v2",
                entries=[{"exercise_name": "Chin-up", "sets": 3, "reps": 6, "order_index": 0}],
            ),
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Pull day v2"
        assert [e["exercise_name"] for e in response.json()["entries"]] == ["Chin-up"]

    @pytest.mark.asyncio
    async def test_update_missing_returns_404(self, test_client):
        response = await test_client.put("/workouts/555", json=workout_payload())

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_then_get_404(self, test_client):
        created = (await test_client.post("/workouts", json=workout_payload())).json()

        response = await test_client.delete(f"/workouts/{created['id']}")

        assert response.status_code == 204
        assert (await test_client.get(f"/workouts/{created['id']}")).status_code == 404
        assert (await test_client.delete(f"/workouts/{created['id']}")).status_code == 404


class TestUserRoutes:
    """Tests for /users."""

    @pytest.mark.asyncio
    async def test_register_and_lookup(self, test_client):
        response = await test_client.post(
            "/users",
            json={"username": "carol", "email": "carol@example.com", "password": "hunter22"},
        )

        assert response.status_code == 201
        body = response.json()
        assert "password" not in body
        assert "password_hash" not in body

        lookup = await test_client.get("/users/carol")
        assert lookup.status_code == 200
        assert lookup.json()["id"] == body["id"]

    @pytest.mark.asyncio
    async def test_lookup_unknown_returns_404(self, test_client):
        assert (await test_client.get("/users/nobody")).status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_username_returns_409(self, test_client):
        user = {"username": "dave", "email": "dave@example.com", "password": "pw123456"}
        await test_client.post("/users", json=user)

        response = await test_client.post("/users", json={**user, "email": "dave2@example.com"})

        assert response.status_code == 409
        assert "INSERT" not in response.text

    @pytest.mark.asyncio
    async def test_overlong_password_returns_400(self, test_client):
        response = await test_client.post(
            "/users",
            json={"username": "erin", "email": "erin@example.com", "password": "p" * 80},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "password"

    @pytest.mark.asyncio
    async def test_update_profile(self, test_client):
        created = (
            await test_client.post(
                "/users",
                json={"username": "frank", "email": "frank@example.com", "password": "pw123456"},
            )
        ).json()

        response = await test_client.put(
            f"/users/{created['id']}",
            json={"username": "frank", "email": "frank@example.org", "bio": "Cyclist"},
        )

        assert response.status_code == 200
        assert response.json()["email"] == "frank@example.org"
        assert response.json()["bio"] == "Cyclist"

    @pytest.mark.asyncio
    async def test_update_unknown_user_returns_404(self, test_client):
        response = await test_client.put(
            "/users/4040",
            json={"username": "ghost", "email": "ghost@example.com"},
        )

        assert response.status_code == 404


class TestHealthAndRequestId:
    """Tests for /health and the request ID middleware."""

    @pytest.mark.asyncio
    async def test_health_reports_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, test_client):
        response = await test_client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8
