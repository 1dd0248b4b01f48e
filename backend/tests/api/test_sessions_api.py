"""Tests for session routes: end-anchored durations and no-op semantics."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from weekline.db.models import WorkSession
from weekline.domain.weeks import get_today_range

pytestmark = pytest.mark.integration


async def _all_sessions(db_session):
    db_session.expire_all()
    return (await db_session.execute(select(WorkSession).order_by(WorkSession.id))).scalars().all()


class TestCreateSession:
    async def test_end_is_now_and_start_is_end_minus_duration(self, client, sign_in, alice, seed, db_session):
        project = await seed.project(alice.user_id)
        sign_in(alice)

        before = datetime.now(UTC)
        response = await client.post(
            "/api/sessions",
            json={"project_id": project.id, "intention": " Write docs ", "duration_minutes": 25, "notes": "  "},
        )
        after = datetime.now(UTC)

        assert response.status_code == 201
        assert response.json()["duration_label"] == "25m"
        [stored] = await _all_sessions(db_session)
        assert stored.intention == "Write docs"
        assert stored.notes is None
        assert stored.duration_ms == 25 * 60_000
        assert before <= stored.end_time <= after
        assert stored.end_time - stored.start_time == timedelta(minutes=25)

    async def test_project_id_may_arrive_as_string(self, client, sign_in, alice, seed, db_session):
        project = await seed.project(alice.user_id)
        sign_in(alice)

        response = await client.post(
            "/api/sessions", json={"project_id": str(project.id), "intention": "x", "duration_minutes": "10"}
        )

        assert response.status_code == 201
        assert (await _all_sessions(db_session))[0].duration_ms == 10 * 60_000

    @pytest.mark.parametrize("raw", [-15, "abc", None])
    async def test_bad_duration_is_stored_as_zero(self, client, sign_in, alice, seed, db_session, raw):
        project = await seed.project(alice.user_id)
        sign_in(alice)

        response = await client.post(
            "/api/sessions", json={"project_id": project.id, "intention": "Quick fix", "duration_minutes": raw}
        )

        assert response.status_code == 201
        [stored] = await _all_sessions(db_session)
        assert stored.duration_ms == 0
        assert stored.start_time == stored.end_time

    async def test_foreign_project_is_noop(self, client, sign_in, alice, bob, seed, db_session):
        project = await seed.project(alice.user_id)
        sign_in(bob)

        response = await client.post(
            "/api/sessions", json={"project_id": project.id, "intention": "Sneaky", "duration_minutes": 5}
        )

        assert response.status_code == 204
        assert await _all_sessions(db_session) == []

    async def test_blank_intention_is_noop(self, client, sign_in, alice, seed, db_session):
        project = await seed.project(alice.user_id)
        sign_in(alice)

        response = await client.post("/api/sessions", json={"project_id": project.id, "intention": "  "})

        assert response.status_code == 204
        assert await _all_sessions(db_session) == []

    async def test_anonymous_is_noop(self, client, seed, db_session):
        project = await seed.project("user_alice")

        response = await client.post(
            "/api/sessions", json={"project_id": project.id, "intention": "x", "duration_minutes": 5}
        )

        assert response.status_code == 204
        assert await _all_sessions(db_session) == []


class TestUpdateSession:
    async def test_end_time_preserved_and_start_recomputed(self, client, sign_in, alice, seed, db_session):
        project = await seed.project(alice.user_id)
        start = datetime(2025, 11, 18, 9, 0, tzinfo=UTC)
        work_session = await seed.work_session(project, start, 30)
        sign_in(alice)

        response = await client.put(
            f"/api/sessions/{work_session.id}",
            json={"intention": "Refactor", "duration_minutes": 50, "notes": "Done"},
        )

        assert response.status_code == 204
        [stored] = await _all_sessions(db_session)
        assert stored.end_time == start + timedelta(minutes=30)
        assert stored.start_time == stored.end_time - timedelta(minutes=50)
        assert stored.duration_ms == 50 * 60_000
        assert stored.intention == "Refactor"
        assert stored.notes == "Done"

    @pytest.mark.parametrize("raw", [0, -5, "nope"])
    async def test_duration_clamped_to_one_minute(self, client, sign_in, alice, seed, db_session, raw):
        project = await seed.project(alice.user_id)
        work_session = await seed.work_session(project, datetime(2025, 11, 18, 9, 0, tzinfo=UTC), 30)
        sign_in(alice)

        await client.put(f"/api/sessions/{work_session.id}", json={"intention": "x", "duration_minutes": raw})

        [stored] = await _all_sessions(db_session)
        assert stored.duration_ms == 60_000

    async def test_foreign_session_untouched(self, client, sign_in, alice, bob, seed, db_session):
        project = await seed.project(alice.user_id)
        work_session = await seed.work_session(project, datetime(2025, 11, 18, 9, 0, tzinfo=UTC), 30, "Mine")
        sign_in(bob)

        response = await client.put(
            f"/api/sessions/{work_session.id}", json={"intention": "Theirs", "duration_minutes": 5}
        )

        assert response.status_code == 204
        [stored] = await _all_sessions(db_session)
        assert stored.intention == "Mine"
        assert stored.duration_ms == 30 * 60_000


class TestDeleteSession:
    async def test_owner_can_delete(self, client, sign_in, alice, seed, db_session):
        project = await seed.project(alice.user_id)
        work_session = await seed.work_session(project, datetime(2025, 11, 18, 9, 0, tzinfo=UTC), 30)
        sign_in(alice)

        response = await client.delete(f"/api/sessions/{work_session.id}")

        assert response.status_code == 204
        assert await _all_sessions(db_session) == []

    async def test_foreign_delete_is_noop(self, client, sign_in, alice, bob, seed, db_session):
        project = await seed.project(alice.user_id)
        work_session = await seed.work_session(project, datetime(2025, 11, 18, 9, 0, tzinfo=UTC), 30)
        sign_in(bob)

        response = await client.delete(f"/api/sessions/{work_session.id}")

        assert response.status_code == 204
        assert len(await _all_sessions(db_session)) == 1


class TestToday:
    async def test_today_lists_only_todays_sessions(self, client, sign_in, alice, seed):
        today = get_today_range()
        alpha = await seed.project(alice.user_id, "Alpha")
        beta = await seed.project(alice.user_id, "Beta")
        await seed.project(alice.user_id, "Archived", archived=True)
        await seed.work_session(alpha, today.start + timedelta(minutes=1), 10)
        await seed.work_session(beta, today.start + timedelta(minutes=20), 40)
        await seed.work_session(alpha, today.start - timedelta(hours=3), 90)
        sign_in(alice)

        response = await client.get("/api/sessions/today")

        assert response.status_code == 200
        body = response.json()
        assert body["sessions_count"] == 2
        assert body["total_ms"] == 50 * 60_000
        assert body["primary_project_name"] == "Beta"
        assert [p["name"] for p in body["projects"]] == ["Alpha", "Beta"]
