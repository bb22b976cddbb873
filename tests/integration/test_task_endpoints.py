"""Integration tests for task endpoints."""
from datetime import timedelta

import pytest


async def _objective_id(app_client) -> str:
    response = await app_client.post("/objectives", json={"name": "Run a marathon"})
    return response.json()["id"]


async def _create_task(app_client, objective_id, scheduled_at, title="Tempo run"):
    return await app_client.post(
        "/tasks",
        json={
            "objectiveId": objective_id,
            "title": title,
            "scheduledAt": scheduled_at.isoformat(),
            "durationMinutes": 30,
        },
    )


@pytest.mark.asyncio
class TestTaskCreate:
    """Tests for creating tasks."""

    async def test_create_task_success(self, app_client, now):
        objective_id = await _objective_id(app_client)

        response = await _create_task(app_client, objective_id, now)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["objectiveId"] == objective_id
        assert data["completedAt"] is None

    async def test_create_task_unknown_objective(self, app_client, now):
        response = await _create_task(app_client, "ghost", now)

        assert response.status_code == 404

    async def test_create_task_invalid_duration(self, app_client, now):
        objective_id = await _objective_id(app_client)

        response = await app_client.post(
            "/tasks",
            json={
                "objectiveId": objective_id,
                "title": "x",
                "scheduledAt": now.isoformat(),
                "durationMinutes": 0,
            },
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestTaskList:
    """Tests for listing tasks."""

    async def test_list_tasks_by_date(self, app_client, now):
        objective_id = await _objective_id(app_client)
        await _create_task(app_client, objective_id, now + timedelta(hours=2), "Later")
        await _create_task(app_client, objective_id, now, "Earlier")
        await _create_task(app_client, objective_id, now + timedelta(days=1), "Tomorrow")

        response = await app_client.get("/tasks", params={"date": now.date().isoformat()})

        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["Earlier", "Later"]

    async def test_list_tasks_by_objective(self, app_client, now):
        first = await _objective_id(app_client)
        second = await _objective_id(app_client)
        await _create_task(app_client, first, now, "Mine")
        await _create_task(app_client, second, now, "Other")

        response = await app_client.get("/tasks", params={"objectiveId": first})

        assert [t["title"] for t in response.json()] == ["Mine"]


@pytest.mark.asyncio
class TestTaskTransitions:
    """Tests for start, complete and skip."""

    async def test_complete_task(self, app_client, now):
        objective_id = await _objective_id(app_client)
        task = (await _create_task(app_client, objective_id, now)).json()

        response = await app_client.post(f"/tasks/{task['id']}/start")
        assert response.json()["status"] == "in_progress"

        response = await app_client.post(f"/tasks/{task['id']}/complete")

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["completedAt"] is not None

    async def test_skip_task_with_reason(self, app_client, now):
        objective_id = await _objective_id(app_client)
        task = (await _create_task(app_client, objective_id, now)).json()

        response = await app_client.post(f"/tasks/{task['id']}/skip", json={"reason": "Sick"})

        assert response.status_code == 200
        assert response.json()["status"] == "skipped"
        assert response.json()["skippedReason"] == "Sick"

    async def test_skip_task_without_body(self, app_client, now):
        objective_id = await _objective_id(app_client)
        task = (await _create_task(app_client, objective_id, now)).json()

        response = await app_client.post(f"/tasks/{task['id']}/skip")

        assert response.status_code == 200
        assert response.json()["skippedReason"] is None

    async def test_transition_unknown_task(self, app_client):
        response = await app_client.post("/tasks/ghost/complete")

        assert response.status_code == 404
        assert response.json()["detail"] == "Task not found"

    async def test_check_overdue(self, app_client, now):
        """Test that past tasks become overdue and raise a deviation."""
        objective_id = await _objective_id(app_client)
        task = (await _create_task(app_client, objective_id, now - timedelta(hours=3))).json()

        response = await app_client.post("/tasks/check-overdue")

        assert response.status_code == 200
        assert [d["taskId"] for d in response.json()] == [task["id"]]
        assert (await app_client.get(f"/tasks/{task['id']}")).json()["status"] == "overdue"
        assert (await app_client.get("/status")).json()["status"] == "deviation_detected"
