"""Tests for exercise CRUD, visibility and list queries."""

from app.models.workout import Workout, WorkoutExercise, WorkoutSet

NEW_EXERCISE = {
    "name": "  Bulgarian Split Squat ",
    "category": "strength",
    "muscleGroups": ["quadriceps", "glutes", "quadriceps"],
    "equipmentNeeded": "dumbbell",
    "difficultyLevel": "intermediate",
}


class TestCreate:
    def test_create_is_custom_and_owned(self, client, user, auth_headers):
        response = client.post(
            "/api/exercises",
            headers=auth_headers,
            json={**NEW_EXERCISE, "isCustom": False, "userId": 999},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Bulgarian Split Squat"
        assert data["isCustom"] is True
        assert data["userId"] == user.id
        assert data["muscleGroups"] == ["quadriceps", "glutes"]

    def test_create_requires_auth(self, client):
        response = client.post("/api/exercises", json=NEW_EXERCISE)
        assert response.status_code == 401

    def test_create_rejects_unknown_category(self, client, auth_headers):
        response = client.post(
            "/api/exercises", headers=auth_headers, json={**NEW_EXERCISE, "category": "yoga"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "category"


class TestRead:
    def test_public_exercise_readable(self, client, bench_press, other_headers):
        response = client.get(f"/api/exercises/{bench_press.id}", headers=other_headers)

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Bench Press"

    def test_foreign_custom_exercise_forbidden(self, client, foreign_exercise, auth_headers):
        response = client.get(f"/api/exercises/{foreign_exercise.id}", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized to access this exercise"

    def test_missing_exercise(self, client, auth_headers):
        response = client.get("/api/exercises/4242", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Exercise not found with id of 4242"}


class TestMutations:
    def test_update_own_custom(self, client, custom_exercise, auth_headers):
        response = client.put(
            f"/api/exercises/{custom_exercise.id}",
            headers=auth_headers,
            json={**NEW_EXERCISE, "name": "Landmine Press (Kneeling)"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Landmine Press (Kneeling)"
        assert data["isCustom"] is True

    def test_public_exercise_is_immutable(self, client, bench_press, auth_headers):
        update = client.put(f"/api/exercises/{bench_press.id}", headers=auth_headers, json=NEW_EXERCISE)
        delete = client.delete(f"/api/exercises/{bench_press.id}", headers=auth_headers)

        assert update.status_code == 403
        assert update.json()["error"] == "Cannot update public exercises"
        assert delete.status_code == 403
        assert delete.json()["error"] == "Cannot delete public exercises"

    def test_foreign_custom_exercise_immutable(self, client, foreign_exercise, auth_headers):
        response = client.delete(f"/api/exercises/{foreign_exercise.id}", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized to delete this exercise"

    def test_delete_own_custom(self, client, custom_exercise, auth_headers):
        response = client.delete(f"/api/exercises/{custom_exercise.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {}}
        follow_up = client.get(f"/api/exercises/{custom_exercise.id}", headers=auth_headers)
        assert follow_up.status_code == 404

    def test_delete_nulls_workout_references(self, client, db_session, user, custom_exercise, auth_headers):
        workout = Workout(
            user_id=user.id,
            name="Shoulders",
            exercises=[
                WorkoutExercise(
                    exercise_id=custom_exercise.id,
                    position=0,
                    sets=[WorkoutSet(set_number=1, reps=8, weight=30, completed=True)],
                )
            ],
        )
        db_session.add(workout)
        db_session.commit()
        workout_id = workout.id

        client.delete(f"/api/exercises/{custom_exercise.id}", headers=auth_headers)

        response = client.get(f"/api/workouts/{workout_id}", headers=auth_headers)
        slot = response.json()["data"]["exercises"][0]
        assert slot["exercise"] is None
        assert slot["sets"][0]["reps"] == 8


class TestList:
    def test_scope_is_public_plus_own(self, client, bench_press, running, custom_exercise,
                                      foreign_exercise, auth_headers):
        response = client.get("/api/exercises", headers=auth_headers, params={"sort": "name"})

        body = response.json()
        assert body["success"] is True
        assert body["count"] == 3
        assert [item["name"] for item in body["data"]] == ["Bench Press", "Landmine Press", "Running"]

    def test_filter_by_category(self, client, bench_press, running, auth_headers):
        response = client.get("/api/exercises", headers=auth_headers, params={"category": "cardio"})

        assert [item["name"] for item in response.json()["data"]] == ["Running"]

    def test_filter_by_muscle_group_membership(self, client, bench_press, running, custom_exercise,
                                               auth_headers):
        response = client.get(
            "/api/exercises", headers=auth_headers, params={"muscleGroups[in]": "triceps,shoulders", "sort": "name"}
        )

        assert [item["name"] for item in response.json()["data"]] == ["Bench Press", "Landmine Press"]

    def test_filter_custom_only(self, client, bench_press, custom_exercise, auth_headers):
        response = client.get("/api/exercises", headers=auth_headers, params={"isCustom": "true"})

        assert [item["id"] for item in response.json()["data"]] == [custom_exercise.id]

    def test_select_projects_fields(self, client, bench_press, auth_headers):
        response = client.get(
            "/api/exercises", headers=auth_headers, params={"select": "name,category"}
        )

        assert response.json()["data"] == [
            {"id": bench_press.id, "name": "Bench Press", "category": "strength"}
        ]

    def test_unknown_filter_rejected(self, client, auth_headers):
        response = client.get("/api/exercises", headers=auth_headers, params={"userId": "2"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["field"] == "userId"
