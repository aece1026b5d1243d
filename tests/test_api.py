import pytest
from fastapi.testclient import TestClient

from lawnledger.main import app
from lawnledger.services.workspace import get_workspace


@pytest.fixture
def client(workspace, data):
    app.dependency_overrides[get_workspace] = lambda: workspace
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


class TestScheduleApi:
    def test_calendar(self, client, data):
        response = client.get("/schedule/calendar")
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "October 2026"
        assert len(body["days"]) == 42
        day = next(d for d in body["days"] if d["date"] == "2026-10-21")
        assert day["jobs"][0]["job"]["customerId"] == data.alice.id
        assert day["due_customers"][0]["nextServiceDate"] == "2026-10-21"

    def test_week_view(self, client):
        body = client.get("/schedule/calendar", params={"view": "week"}).json()
        assert len(body["days"]) == 7

    def test_navigate(self, client):
        body = client.post("/schedule/navigate", json={"action": "next"}).json()
        assert body["title"] == "November 2026"

    def test_drag_flow(self, client, workspace, data):
        assert client.post("/schedule/drag/start", json={"jobId": data.anchor.id}).json()["phase"] == "dragging"
        state = client.post("/schedule/drag/over", json={"date": "2026-10-23"}).json()
        assert state == {"phase": "hovering", "jobId": data.anchor.id, "targetDate": "2026-10-23"}

        response = client.post("/schedule/drag/drop")
        assert response.status_code == 200
        assert response.json()["message"] == "Moved Alice Green to Fri, Oct 23"
        assert client.get("/schedule/drag").json()["phase"] == "idle"
        assert workspace.customers.get(data.alice.id).next_service_date.isoformat() == "2026-10-23"

    def test_dragging_completed_job_conflicts(self, client, data):
        response = client.post("/schedule/drag/start", json={"jobId": data.done_alice.id})
        assert response.status_code == 409

    def test_drop_without_drag_conflicts(self, client):
        assert client.post("/schedule/drag/drop", json={"date": "2026-10-23"}).status_code == 409

    def test_reschedule_failure_maps_to_bad_gateway(self, client, gateway, data):
        gateway.fail_on["update_job"] = 0
        response = client.post(
            f"/schedule/jobs/{data.anchor.id}/reschedule", json={"date": "2026-10-25"}
        )
        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to move job. Please try again."

    def test_quick_edit_unknown_job(self, client):
        assert client.patch("/schedule/jobs/9999", json={"notes": "x"}).status_code == 404


class TestGroupsApi:
    def test_overview(self, client):
        body = client.get("/groups").json()
        assert [g["group"]["name"] for g in body["groups"]] == ["North Side", "South Side"]
        assert body["groups"][0]["effective_work_minutes"] == 60

    def test_create_requires_name(self, client):
        response = client.post("/groups", json={"name": " "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Group name is required"

    def test_create(self, client):
        response = client.post("/groups", json={"name": "East", "workTimeMinutes": "30"})
        assert response.status_code == 201
        assert response.json()["status"] == "succeeded"

    def test_delete_needs_confirm(self, client, data):
        assert client.delete(f"/groups/{data.north.id}").status_code == 409
        assert client.delete(f"/groups/{data.north.id}", params={"confirm": "true"}).status_code == 200

    def test_membership(self, client, workspace, data):
        response = client.post(f"/groups/{data.south.id}/members", json={"customerId": data.alice.id})
        assert response.status_code == 200
        assert workspace.customers.get(data.alice.id).group_id == data.south.id

        assert client.delete(f"/groups/members/{data.alice.id}").status_code == 200
        assert client.delete(f"/groups/members/{data.alice.id}").status_code == 400

    def test_drag_to_group(self, client, workspace, data):
        client.post("/groups/drag/start", json={"customerId": data.carol.id})
        client.post("/groups/drag/over", json={"groupId": data.north.id})
        assert client.post("/groups/drag/drop").status_code == 200
        assert workspace.customers.get(data.carol.id).group_id == data.north.id


class TestJobsApi:
    def test_search(self, client, data):
        body = client.get("/jobs", params={"q": "carol"}).json()
        assert [entry["job"]["id"] for entry in body] == [data.done_carol.id]

    def test_all_statuses(self, client):
        assert len(client.get("/jobs", params={"status": "all"}).json()) == 5

    def test_unknown_status(self, client):
        assert client.get("/jobs", params={"status": "lost"}).status_code == 400

    def test_create_rejected(self, client):
        response = client.post("/jobs", json={"date": "2026-10-19"})
        assert response.status_code == 400

    def test_create_and_delete(self, client, data):
        response = client.post(
            "/jobs", json={"customerId": data.bob.id, "date": "2026-10-19", "totalTime": "55"}
        )
        assert response.status_code == 201
        job_id = response.json()["entity_id"]

        assert client.delete(f"/jobs/{job_id}").status_code == 409
        assert client.delete(f"/jobs/{job_id}", params={"confirm": "true"}).status_code == 200

    def test_patch_notes_only_keeps_schedule(self, client, workspace, data):
        response = client.patch(f"/jobs/{data.anchor.id}", json={"notes": "dog in yard"})

        assert response.status_code == 200
        job = workspace.jobs.get(data.anchor.id)
        assert job.status.value == "scheduled"
        assert job.scheduled_time == "09:00"
        assert job.notes == "dog in yard"

    def test_create_negative_duration_rejected(self, client, data):
        response = client.post(
            "/jobs", json={"customerId": data.bob.id, "date": "2026-10-19", "totalTime": "-30"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Durations cannot be negative"

    def test_breakdown(self, client, data):
        body = client.get(f"/jobs/{data.done_alice.id}/breakdown").json()
        assert body["unaccounted_minutes"] == 10


class TestInsightsApi:
    def test_report(self, client):
        body = client.get("/insights", params={"as_of": "2026-10-19"}).json()
        assert body["has_data"] is True
        assert body["kpis"]["total_revenue"] == 160
        assert [i["type"] for i in body["insights"]] == ["maintenance"]
        assert len(body["weekly_trend"]) == 4


class TestCustomersApi:
    def test_list(self, client):
        names = [c["name"] for c in client.get("/customers").json()]
        assert names == ["Alice Green", "Bob Stone", "Carol Park"]

    def test_create_normalizes_phone_and_next_date(self, client):
        response = client.post(
            "/customers",
            json={
                "name": "Dan Reed",
                "phone": "(217) 555-0123",
                "price": 50,
                "frequency": "biweekly",
                "lastServiceDate": "2026-10-12",
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["phone"] == "+12175550123"
        assert body["nextServiceDate"] == "2026-10-26"

    def test_create_refreshes_from_database(self, client, workspace, gateway):
        client.post("/customers", json={"name": "Fay Moss", "price": 45})
        client.post("/equipment", json={"name": "Leaf blower", "nextMaintenanceDate": "2026-12-01"})

        assert gateway.mutations() == ["create_customer", "create_equipment"]
        assert "list_customers" in gateway.calls
        assert "list_equipment" in gateway.calls
        assert len(workspace.customers) == 4
        assert len(workspace.equipment) == 3

    def test_invalid_phone(self, client):
        response = client.post("/customers", json={"name": "Eve", "phone": "123"})
        assert response.status_code == 422

    def test_equipment(self, client):
        assert len(client.get("/equipment").json()) == 2

    def test_refresh(self, client):
        assert client.post("/customers/refresh").json() == {
            "customers": 3,
            "jobs": 5,
            "groups": 2,
            "equipment": 2,
        }


def test_notifications_feed(client, data):
    client.post("/groups", json={"name": "East"})
    client.post("/groups", json={"name": ""})
    body = client.get("/notifications").json()
    assert body["count"] == 2
    assert [n["message"] for n in body["notifications"]] == [
        "Group name is required",
        "Group created successfully",
    ]
