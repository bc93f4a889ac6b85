"""
HTTP client for the Workout Tracker API.

Wraps an ``httpx.Client`` so scripts, other services and tests can call the
API with the same envelopes the server returns. Any ``httpx.Client`` can be
injected, including FastAPI's ``TestClient``.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import httpx

logger = logging.getLogger(__name__)

QueryParams = Union[Dict[str, Any], Sequence[Tuple[str, Any]], None]


class ApiError(Exception):
    """Exception raised when the API answers with an error envelope."""

    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, str]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class FitnessApiClient:
    """
    Client for the auth, exercise, workout and progress endpoints.

    Attributes:
        client: Underlying httpx client
        base_path: Path prefix of the API routes
        token: Bearer token sent with every request once set
    """

    DEFAULT_BASE_URL = "http://localhost:5001"

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        base_path: str = "/api",
        timeout: float = 15.0,
    ):
        self.client = client or httpx.Client(base_url=base_url or self.DEFAULT_BASE_URL, timeout=timeout)
        self.base_path = base_path.rstrip("/")
        self.token = token

    def close(self) -> None:
        self.client.close()

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: QueryParams = None,
    ) -> dict:
        """
        Send a request and unwrap the JSON body.

        Raises:
            ApiError: On any 4xx/5xx response. A 401 also forgets the token.
        """
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self.client.request(
            method,
            f"{self.base_path}{path}",
            json=json,
            params=params,
            headers=headers,
        )

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") or f"HTTP {response.status_code}"
            logger.warning(f"{method} {path} failed: {response.status_code} - {message}")
            if response.status_code == 401:
                self.token = None
            raise ApiError(response.status_code, message, body.get("errors"))

        return response.json()

    # ============== Auth ==============

    def register(self, name: str, email: str, password: str) -> str:
        body = self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})
        self.token = body["token"]
        return self.token

    def login(self, email: str, password: str) -> str:
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = body["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    def me(self) -> dict:
        return self._request("GET", "/auth/me")

    def update_details(self, **fields) -> dict:
        """Update profile fields, e.g. ``name="Sam"`` or ``preferences={"darkMode": True}``."""
        return self._request("PUT", "/auth/updatedetails", json=fields)

    def update_password(self, current_password: str, new_password: str) -> str:
        body = self._request(
            "PUT",
            "/auth/updatepassword",
            json={"currentPassword": current_password, "newPassword": new_password},
        )
        self.token = body["token"]
        return self.token

    # ============== Generic resource calls ==============

    def _list(self, resource: str, params: QueryParams = None) -> dict:
        return self._request("GET", f"/{resource}", params=params)

    def _get(self, resource: str, item_id: int) -> dict:
        return self._request("GET", f"/{resource}/{item_id}")

    def _create(self, resource: str, data: dict) -> dict:
        return self._request("POST", f"/{resource}", json=data)

    def _update(self, resource: str, item_id: int, data: dict) -> dict:
        return self._request("PUT", f"/{resource}/{item_id}", json=data)

    def _delete(self, resource: str, item_id: int) -> dict:
        return self._request("DELETE", f"/{resource}/{item_id}")

    # ============== Exercises ==============

    def list_exercises(self, params: QueryParams = None) -> dict:
        return self._list("exercises", params)

    def get_exercise(self, exercise_id: int) -> dict:
        return self._get("exercises", exercise_id)

    def create_exercise(self, data: dict) -> dict:
        return self._create("exercises", data)

    def update_exercise(self, exercise_id: int, data: dict) -> dict:
        return self._update("exercises", exercise_id, data)

    def delete_exercise(self, exercise_id: int) -> dict:
        return self._delete("exercises", exercise_id)

    # ============== Workouts ==============

    def list_workouts(self, params: QueryParams = None) -> dict:
        return self._list("workouts", params)

    def get_workout(self, workout_id: int) -> dict:
        return self._get("workouts", workout_id)

    def create_workout(self, data: dict) -> dict:
        return self._create("workouts", data)

    def update_workout(self, workout_id: int, data: dict) -> dict:
        return self._update("workouts", workout_id, data)

    def toggle_workout_complete(self, workout_id: int) -> dict:
        return self._request("PUT", f"/workouts/{workout_id}/complete")

    def delete_workout(self, workout_id: int) -> dict:
        return self._delete("workouts", workout_id)

    # ============== Progress ==============

    def list_progress(self, params: QueryParams = None) -> dict:
        return self._list("progress", params)

    def get_progress_entry(self, entry_id: int) -> dict:
        return self._get("progress", entry_id)

    def create_progress_entry(self, data: dict) -> dict:
        return self._create("progress", data)

    def update_progress_entry(self, entry_id: int, data: dict) -> dict:
        return self._update("progress", entry_id, data)

    def delete_progress_entry(self, entry_id: int) -> dict:
        return self._delete("progress", entry_id)

    def get_progress_stats(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> dict:
        params = {}
        if start_date:
            params["startDate"] = str(start_date)
        if end_date:
            params["endDate"] = str(end_date)
        return self._request("GET", "/progress/stats", params=params)
