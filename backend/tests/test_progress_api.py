"""Tests for progress entries and the statistics endpoint."""

from datetime import date, timedelta


def entry_body(entry_date, weight=None, body_fat=None, records=(), **measurements):
    metrics = {"measurements": measurements}
    if weight is not None:
        metrics["weight"] = {"value": weight, "unit": "kg"}
    if body_fat is not None:
        metrics["bodyFat"] = body_fat
    return {
        "date": entry_date,
        "metrics": metrics,
        "personalRecords": [
            {"exercise": exercise_id, "value": value, "unit": "kg"} for exercise_id, value in records
        ],
    }


class TestEntries:
    def test_create_and_read(self, client, user, auth_headers, bench_press):
        response = client.post(
            "/api/progress",
            headers=auth_headers,
            json=entry_body("2024-01-05", weight=80.5, body_fat=17.0, records=[(bench_press.id, 100)], waist=84),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["userId"] == user.id
        assert data["date"] == "2024-01-05"
        assert data["metrics"]["weight"] == {"value": 80.5, "unit": "kg"}
        assert data["metrics"]["bodyFat"] == 17.0
        assert data["metrics"]["measurements"]["waist"] == 84
        assert data["metrics"]["measurements"]["chest"] is None
        record = data["personalRecords"][0]
        assert record["exercise"] == {"id": bench_press.id, "name": "Bench Press", "category": "strength"}
        assert record["value"] == 100

        fetched = client.get(f"/api/progress/{data['id']}", headers=auth_headers)
        assert fetched.json()["data"] == data

    def test_date_defaults_to_today(self, client, auth_headers):
        response = client.post("/api/progress", headers=auth_headers, json={"notes": "Felt strong"})

        assert response.status_code == 201
        assert response.json()["data"]["date"] == date.today().isoformat()
        assert response.json()["data"]["metrics"]["weight"] is None

    def test_duplicate_date_rejected(self, client, auth_headers):
        client.post("/api/progress", headers=auth_headers, json=entry_body("2024-01-05", weight=80))

        response = client.post("/api/progress", headers=auth_headers, json=entry_body("2024-01-05", weight=79))

        assert response.status_code == 400
        assert response.json()["error"] == "A progress entry already exists for this date"

    def test_same_date_allowed_for_different_users(self, client, auth_headers, other_headers):
        first = client.post("/api/progress", headers=auth_headers, json=entry_body("2024-01-05"))
        second = client.post("/api/progress", headers=other_headers, json=entry_body("2024-01-05"))

        assert first.status_code == 201
        assert second.status_code == 201

    def test_record_for_inaccessible_exercise(self, client, auth_headers, foreign_exercise):
        response = client.post(
            "/api/progress",
            headers=auth_headers,
            json=entry_body("2024-01-05", records=[(foreign_exercise.id, 50)]),
        )

        assert response.status_code == 404

    def test_update_replaces_records(self, client, auth_headers, bench_press, running):
        entry_id = client.post(
            "/api/progress",
            headers=auth_headers,
            json=entry_body("2024-01-05", records=[(bench_press.id, 100)]),
        ).json()["data"]["id"]

        response = client.put(
            f"/api/progress/{entry_id}",
            headers=auth_headers,
            json=entry_body("2024-01-06", weight=81, records=[(running.id, 1500)]),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["date"] == "2024-01-06"
        assert [r["exercise"]["name"] for r in data["personalRecords"]] == ["Running"]

    def test_update_into_taken_date_rejected(self, client, auth_headers):
        client.post("/api/progress", headers=auth_headers, json=entry_body("2024-01-05"))
        second_id = client.post(
            "/api/progress", headers=auth_headers, json=entry_body("2024-01-06")
        ).json()["data"]["id"]

        response = client.put(f"/api/progress/{second_id}", headers=auth_headers, json=entry_body("2024-01-05"))

        assert response.status_code == 400

    def test_ownership(self, client, auth_headers, other_headers):
        entry_id = client.post(
            "/api/progress", headers=auth_headers, json=entry_body("2024-01-05")
        ).json()["data"]["id"]

        read = client.get(f"/api/progress/{entry_id}", headers=other_headers)
        delete = client.delete(f"/api/progress/{entry_id}", headers=other_headers)

        assert read.status_code == 403
        assert read.json()["error"] == "User not authorized to access this progress entry"
        assert delete.status_code == 403

    def test_delete(self, client, auth_headers):
        entry_id = client.post(
            "/api/progress", headers=auth_headers, json=entry_body("2024-01-05")
        ).json()["data"]["id"]

        response = client.delete(f"/api/progress/{entry_id}", headers=auth_headers)

        assert response.json() == {"success": True, "data": {}}
        missing = client.get(f"/api/progress/{entry_id}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["error"] == f"Progress entry not found with id of {entry_id}"

    def test_list_newest_first_with_weight_filter(self, client, auth_headers):
        for day, weight in (("2024-01-01", 82), ("2024-01-08", 81), ("2024-01-15", 79)):
            client.post("/api/progress", headers=auth_headers, json=entry_body(day, weight=weight))

        response = client.get("/api/progress", headers=auth_headers, params={"weight[gte]": "80"})

        assert [item["date"] for item in response.json()["data"]] == ["2024-01-08", "2024-01-01"]


class TestStats:
    def test_series_and_best_records(self, client, auth_headers, bench_press):
        client.post(
            "/api/progress",
            headers=auth_headers,
            json=entry_body("2024-01-01", weight=80, body_fat=18, records=[(bench_press.id, 100)]),
        )
        client.post(
            "/api/progress",
            headers=auth_headers,
            json=entry_body("2024-01-20", weight=79, records=[(bench_press.id, 120)], waist=83),
        )
        # Outside the window
        client.post("/api/progress", headers=auth_headers, json=entry_body("2024-03-01", weight=75))

        response = client.get(
            "/api/progress/stats",
            headers=auth_headers,
            params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        )

        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["startDate"] == "2024-01-01"
        assert stats["endDate"] == "2024-01-31"
        assert stats["weightProgress"] == [
            {"date": "2024-01-01", "weight": 80, "unit": "kg"},
            {"date": "2024-01-20", "weight": 79, "unit": "kg"},
        ]
        assert stats["bodyFatProgress"] == [{"date": "2024-01-01", "bodyFat": 18}]
        assert stats["measurementsProgress"]["waist"] == [{"date": "2024-01-20", "value": 83}]
        assert stats["personalRecords"] == [
            {
                "exercise": bench_press.id,
                "exerciseName": "Bench Press",
                "value": 120,
                "unit": "kg",
                "date": "2024-01-20",
            }
        ]

    def test_default_window_is_last_thirty_days(self, client, auth_headers):
        today = date.today()
        client.post("/api/progress", headers=auth_headers, json=entry_body(today.isoformat(), weight=70))
        old = (today - timedelta(days=45)).isoformat()
        client.post("/api/progress", headers=auth_headers, json=entry_body(old, weight=72))

        stats = client.get("/api/progress/stats", headers=auth_headers).json()["data"]

        assert stats["endDate"] == today.isoformat()
        assert stats["startDate"] == (today - timedelta(days=30)).isoformat()
        assert [point["weight"] for point in stats["weightProgress"]] == [70]

    def test_inverted_range_rejected(self, client, auth_headers):
        response = client.get(
            "/api/progress/stats",
            headers=auth_headers,
            params={"startDate": "2024-02-01", "endDate": "2024-01-01"},
        )

        assert response.status_code == 400

    def test_stats_only_use_own_entries(self, client, auth_headers, other_headers):
        client.post("/api/progress", headers=other_headers, json=entry_body("2024-01-02", weight=90))

        response = client.get(
            "/api/progress/stats",
            headers=auth_headers,
            params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        )

        assert response.json()["data"]["weightProgress"] == []

    def test_window_near_earliest_date(self, client, auth_headers):
        response = client.get("/api/progress/stats", headers=auth_headers, params={"endDate": "0001-01-05"})

        assert response.status_code == 200
        assert response.json()["data"]["startDate"] == "0001-01-01"
