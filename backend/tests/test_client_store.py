"""Tests for the API client and the client-side store."""

import pytest

from app.client import ApiError, FitnessApiClient, FitnessStore, ResourceStore, SyncedStore


@pytest.fixture
def synced(client):
    return SyncedStore(FitnessApiClient(client=client))


@pytest.fixture
def signed_in(synced):
    synced.register("Casey Client", "casey@example.com", "password1")
    return synced


class TestResourceStoreReducers:
    def test_set_page(self):
        store = ResourceStore()
        store.loading = True

        store.set_page({
            "success": True,
            "count": 2,
            "pagination": {"next": {"page": 2, "limit": 2}},
            "data": [{"id": 1}, {"id": 2}],
        })

        assert store.items == [{"id": 1}, {"id": 2}]
        assert store.count == 2
        assert store.pagination == {"next": {"page": 2, "limit": 2}}
        assert store.loading is False

    def test_add_prepends_and_selects(self):
        store = ResourceStore(items=[{"id": 1}], count=1)

        store.add({"id": 2})

        assert [item["id"] for item in store.items] == [2, 1]
        assert store.current == {"id": 2}
        assert store.count == 2

    def test_replace_swaps_matching_item(self):
        store = ResourceStore(items=[{"id": 1, "name": "Old"}, {"id": 2, "name": "Other"}])

        store.replace({"id": 1, "name": "New"})

        assert store.items == [{"id": 1, "name": "New"}, {"id": 2, "name": "Other"}]
        assert store.current == {"id": 1, "name": "New"}

    def test_remove_clears_current(self):
        store = ResourceStore(items=[{"id": 1}, {"id": 2}], current={"id": 2}, count=2)

        store.remove(2)

        assert store.items == [{"id": 1}]
        assert store.current is None
        assert store.count == 1

    def test_remove_keeps_unrelated_current(self):
        store = ResourceStore(items=[{"id": 1}, {"id": 2}], current={"id": 1}, count=2)

        store.remove(2)

        assert store.current == {"id": 1}

    def test_filters_merge_and_reset(self):
        store = FitnessStore().workouts

        store.set_filters(isTemplate="true")
        store.set_filters(isCompleted="false")
        assert store.filters == {"isTemplate": "true", "isCompleted": "false"}

        store.clear_filters()
        assert store.filters == {"isTemplate": "", "isCompleted": ""}
        assert store.query_params() == {}

    def test_error_lifecycle(self):
        store = ResourceStore(loading=True)

        store.set_error("Boom")
        assert store.error == "Boom"
        assert store.loading is False

        store.clear_error()
        assert store.error is None


class TestAuthFlow:
    def test_register_sets_token_and_claims(self, signed_in):
        auth = signed_in.store.auth

        assert auth.is_authenticated
        assert auth.user["type"] == "access"

    def test_load_user_merges_profile(self, signed_in):
        user = signed_in.load_user()

        assert user["name"] == "Casey Client"
        assert user["email"] == "casey@example.com"
        assert "sub" in user

    def test_update_details(self, signed_in):
        user = signed_in.update_details(bio="Likes kettlebells")
        assert user["bio"] == "Likes kettlebells"

    def test_bad_login_records_error(self, synced):
        with pytest.raises(ApiError) as exc_info:
            synced.login("nobody@example.com", "password1")

        assert exc_info.value.status_code == 401
        assert synced.store.auth.error == "Invalid credentials"
        assert not synced.store.auth.is_authenticated

    def test_unauthorized_response_signs_out(self, signed_in):
        signed_in.client.token = "garbage"

        with pytest.raises(ApiError):
            signed_in.load_user()

        assert signed_in.client.token is None
        assert signed_in.store.auth.token is None

    def test_logout(self, signed_in):
        signed_in.logout()

        assert signed_in.client.token is None
        assert not signed_in.store.auth.is_authenticated


class TestResourceFlows:
    def test_exercise_create_and_filtered_fetch(self, signed_in, bench_press, running):
        created = signed_in.create_exercise({"name": "Sled Push", "category": "cardio"})
        assert signed_in.store.exercises.items[0] == created

        signed_in.store.exercises.set_filters(category="cardio")
        items = signed_in.fetch_exercises({"sort": "name"})

        assert [item["name"] for item in items] == ["Running", "Sled Push"]
        assert signed_in.store.exercises.count == 2

    def test_workout_lifecycle(self, signed_in, bench_press):
        workout = signed_in.create_workout({
            "name": "Quick Bench",
            "exercises": [
                {"exercise": bench_press.id, "sets": [{"setNumber": 1, "reps": 5, "weight": 100}]}
            ],
        })
        store = signed_in.store.workouts
        assert store.items == [workout]

        toggled = signed_in.toggle_workout_complete(workout["id"])
        assert toggled["isCompleted"] is True
        assert store.items[0]["isCompleted"] is True

        signed_in.delete_workout(workout["id"])
        assert store.items == []
        assert store.current is None

    def test_validation_errors_are_exposed(self, signed_in, bench_press):
        with pytest.raises(ApiError) as exc_info:
            signed_in.create_workout({
                "name": "Broken",
                "exercises": [{"exercise": bench_press.id, "sets": [{"setNumber": 1, "reps": 5}]}],
            })

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors[0]["field"] == "exercises.0.sets.0.weight"
        assert signed_in.store.workouts.error

    def test_missing_record_error(self, signed_in):
        with pytest.raises(ApiError):
            signed_in.fetch_workout(999)

        assert signed_in.store.workouts.error == "Workout not found with id of 999"
        assert signed_in.store.workouts.loading is False

    def test_progress_and_stats(self, signed_in, bench_press):
        signed_in.create_progress_entry({
            "date": "2024-01-10",
            "metrics": {"weight": {"value": 78, "unit": "kg"}},
            "personalRecords": [{"exercise": bench_press.id, "value": 110, "unit": "kg"}],
        })

        stats = signed_in.fetch_stats("2024-01-01", "2024-01-31")

        assert signed_in.store.stats == stats
        assert stats["weightProgress"][0]["weight"] == 78
        assert stats["personalRecords"][0]["value"] == 110
