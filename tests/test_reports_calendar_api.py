from __future__ import annotations

from fastapi.testclient import TestClient


def _create_member(client: TestClient, name: str, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "name": name,
        "role": "Developer",
        "compensation_type": "hourly",
        "hourly_rate": "20",
        "available_hours": "160",
    }
    payload.update(overrides)
    response = client.post("/api/v1/members", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _create_project(client: TestClient, title: str, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "title": title,
        "start_date": "2026-03-02",
        "end_date": "2026-03-31",
        "estimated_hours": "100",
        "budget": "10000",
    }
    payload.update(overrides)
    response = client.post("/api/v1/projects", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _seed_website(client: TestClient) -> tuple[dict[str, object], dict[str, object], dict[str, object]]:
    """Alice works Fri 6 + Mon 9 March (weekend disabled), Bob holds 40 fixed hours Mar 2-6."""

    alice = _create_member(client, "Alice", hourly_rate="20")
    bob = _create_member(client, "Bob", hourly_rate="10")
    project = _create_project(client, "Website")

    response = client.post(
        f"/api/v1/projects/{project['id']}/assignments",
        json={
            "member_id": alice["id"],
            "assignment_type": "daily",
            "start_date": "2026-03-06",
            "end_date": "2026-03-09",
            "hours_per_day": "6",
        },
    )
    assert response.status_code == 201
    response = client.post(
        f"/api/v1/projects/{project['id']}/assignments",
        json={
            "member_id": bob["id"],
            "assignment_type": "fixed",
            "start_date": "2026-03-02",
            "end_date": "2026-03-06",
            "total_hours": "40",
        },
    )
    assert response.status_code == 201
    return alice, bob, project


def test_project_stats_cost_and_profitability(client: TestClient) -> None:
    _, bob, project = _seed_website(client)

    # Fixed assignments start with zero recorded hours, so only Alice costs money.
    initial = client.get(f"/api/v1/projects/{project['id']}/stats")
    assert initial.status_code == 200
    assert initial.json()["cost"] == "240.00"
    assert initial.json()["profitability"] == "97.60"

    recorded = client.patch(
        f"/api/v1/projects/{project['id']}/assignments/{bob['id']}/fixed-hours",
        json={"total_hours": "40", "actual_hours": "76"},
    )
    assert recorded.status_code == 200

    stats = client.get(f"/api/v1/projects/{project['id']}/stats").json()
    assert stats["project_title"] == "Website"
    assert stats["budget"] == "10000.00"
    assert stats["cost"] == "1000.00"
    assert stats["profitability"] == "90.00"

    missing = client.get("/api/v1/projects/00000000-0000-0000-0000-000000000001/stats")
    assert missing.status_code == 404


def test_member_stats_and_reports(client: TestClient) -> None:
    alice, bob, _ = _seed_website(client)

    stats = client.get(f"/api/v1/members/{alice['id']}/stats")
    assert stats.status_code == 200
    assert stats.json() == {
        "member_id": alice["id"],
        "member_name": "Alice",
        "total_hours": "12.00",
        "available_hours": "160.00",
        "utilization_rate": "7.50",
        "stress_level": "0.00",
    }

    members_report = client.get("/api/v1/reports/member-stats").json()["items"]
    by_name = {row["member_name"]: row for row in members_report}
    assert by_name["Bob"]["member_id"] == bob["id"]
    assert by_name["Bob"]["total_hours"] == "40.00"
    assert by_name["Bob"]["utilization_rate"] == "25.00"

    projects_report = client.get("/api/v1/reports/project-stats").json()["items"]
    assert [row["project_title"] for row in projects_report] == ["Website"]

    assert client.get("/api/v1/members/00000000-0000-0000-0000-000000000001/stats").status_code == 404


def test_calendar_day_without_member_filter_sums_all_assignments(client: TestClient) -> None:
    _, _, project = _seed_website(client)

    friday = client.get("/api/v1/calendar/days/2026-03-06")
    assert friday.status_code == 200
    assert friday.json() == {
        "date": "2026-03-06",
        "projects": [{"project_id": project["id"], "project_title": "Website", "hours": "16.0"}],
        "total_hours": "16.0",
    }

    # Project still runs on the weekend even though nobody works.
    saturday = client.get("/api/v1/calendar/days/2026-03-07").json()
    assert saturday["projects"] == [{"project_id": project["id"], "project_title": "Website", "hours": "0.0"}]
    assert saturday["total_hours"] == "0.0"

    before_start = client.get("/api/v1/calendar/days/2026-03-01").json()
    assert before_start["projects"] == []
    assert before_start["total_hours"] == "0.0"


def test_calendar_day_member_filter_respects_disabled_work_days(client: TestClient) -> None:
    alice, bob, project = _seed_website(client)

    saturday = client.get("/api/v1/calendar/days/2026-03-07", params={"member_id": alice["id"]})
    assert saturday.status_code == 200
    assert saturday.json()["projects"] == []
    assert saturday.json()["total_hours"] == "0.0"

    monday = client.get("/api/v1/calendar/days/2026-03-09", params={"member_id": alice["id"]}).json()
    assert monday["projects"] == [{"project_id": project["id"], "project_title": "Website", "hours": "6.0"}]
    assert monday["total_hours"] == "6.0"

    bob_tuesday = client.get("/api/v1/calendar/days/2026-03-03", params={"member_id": bob["id"]}).json()
    assert bob_tuesday["projects"][0]["hours"] == "10.0"

    unknown = client.get(
        "/api/v1/calendar/days/2026-03-09",
        params={"member_id": "00000000-0000-0000-0000-000000000001"},
    )
    assert unknown.status_code == 404


def test_member_hours_on_date_across_projects(client: TestClient) -> None:
    alice, _, _ = _seed_website(client)
    side = _create_project(client, "Side project", start_date="2026-03-01", end_date="2026-03-31")
    response = client.post(
        f"/api/v1/projects/{side['id']}/assignments",
        json={
            "member_id": alice["id"],
            "assignment_type": "fixed",
            "start_date": "2026-03-06",
            "end_date": "2026-03-09",
            "total_hours": "10",
        },
    )
    assert response.status_code == 201

    # 6 daily hours plus 10 hours spread over a 3-day span.
    hours = client.get(f"/api/v1/calendar/members/{alice['id']}/hours/2026-03-06")
    assert hours.status_code == 200
    assert hours.json() == {"member_id": alice["id"], "date": "2026-03-06", "hours": "9.3"}

    weekend = client.get(f"/api/v1/calendar/members/{alice['id']}/hours/2026-03-07").json()
    assert weekend["hours"] == "3.3"


def test_calendar_month(client: TestClient) -> None:
    alice, _, _ = _seed_website(client)

    response = client.get("/api/v1/calendar/months/2026/3", params={"member_id": alice["id"]})
    assert response.status_code == 200
    body = response.json()
    assert body["year"] == 2026
    assert body["month"] == 3
    assert body["member_id"] == alice["id"]
    assert len(body["days"]) == 31
    assert [day["total_hours"] for day in body["days"][5:9]] == ["6.0", "0.0", "0.0", "6.0"]

    assert client.get("/api/v1/calendar/months/2026/13").status_code == 422


def test_dashboard_summary_flags_high_stress_members(client: TestClient) -> None:
    _seed_website(client)
    carol = _create_member(client, "Carol", available_hours="40")
    old = _create_project(client, "Archive", start_date="2025-01-06", end_date="2025-02-28", budget="0")
    response = client.post(
        f"/api/v1/projects/{old['id']}/assignments",
        json={
            "member_id": carol["id"],
            "assignment_type": "fixed",
            "start_date": "2025-01-06",
            "end_date": "2025-02-28",
            "total_hours": "38",
        },
    )
    assert response.status_code == 201

    summary = client.get("/api/v1/dashboards/summary", params={"as_of": "2026-03-10"})
    assert summary.status_code == 200
    body = summary.json()
    assert body["total_members"] == 3
    assert body["total_projects"] == 2
    assert body["active_projects"] == 1
    assert body["total_budget"] == "10000.00"
    assert body["total_cost"] == "240.00"
    assert body["total_profit"] == "9760.00"
    assert body["overall_profitability"] == "97.60"
    # Carol: 38 of 40 hours is 95% utilization, stress 75.
    assert [row["member_id"] for row in body["high_stress_members"]] == [carol["id"]]
    assert body["high_stress_members"][0]["stress_level"] == "75.00"

    after_end = client.get("/api/v1/dashboards/summary", params={"as_of": "2026-04-01"}).json()
    assert after_end["active_projects"] == 0
