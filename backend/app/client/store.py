"""Client-side state for the Workout Tracker API.

``ResourceStore`` holds one resource's list page, the record being viewed,
filters and error state. Every change goes through a small reducer method so
state transitions are explicit and testable without a server.
``SyncedStore`` calls the API and feeds the responses into those reducers.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from jose import JWTError, jwt

from app.client.api_client import ApiError, FitnessApiClient

logger = logging.getLogger(__name__)

Item = Dict[str, Any]


@dataclass
class ResourceStore:
    """State of one resource collection."""

    items: List[Item] = field(default_factory=list)
    current: Optional[Item] = None
    pagination: Dict[str, Dict[str, int]] = field(default_factory=dict)
    count: int = 0
    filters: Dict[str, Any] = field(default_factory=dict)
    default_filters: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    loading: bool = False

    def __post_init__(self):
        if not self.filters:
            self.filters = dict(self.default_filters)

    # Reducers

    def set_page(self, envelope: dict) -> None:
        """Store a list response envelope."""
        self.items = list(envelope.get("data", []))
        self.count = envelope.get("count", len(self.items))
        self.pagination = dict(envelope.get("pagination") or {})
        self.loading = False

    def set_current(self, item: Optional[Item]) -> None:
        self.current = item
        self.loading = False

    def add(self, item: Item) -> None:
        """Prepend a newly created item and make it current."""
        self.items.insert(0, item)
        self.count += 1
        self.current = item
        self.loading = False

    def replace(self, item: Item) -> None:
        """Swap in an updated item wherever its id appears and make it current."""
        self.items = [item if existing.get("id") == item.get("id") else existing for existing in self.items]
        self.current = item
        self.loading = False

    def remove(self, item_id: int) -> None:
        before = len(self.items)
        self.items = [existing for existing in self.items if existing.get("id") != item_id]
        self.count = max(0, self.count - (before - len(self.items)))
        if self.current is not None and self.current.get("id") == item_id:
            self.current = None
        self.loading = False

    def set_filters(self, **filters) -> None:
        """Merge filter values into the current filters."""
        self.filters = {**self.filters, **filters}

    def clear_filters(self) -> None:
        self.filters = dict(self.default_filters)

    def set_error(self, message: str) -> None:
        self.error = message
        self.loading = False

    def clear_error(self) -> None:
        self.error = None

    def query_params(self) -> Dict[str, Any]:
        """Filters that are set, ready to send as query parameters."""
        return {key: value for key, value in self.filters.items() if value not in ("", None)}


@dataclass
class AuthState:
    token: Optional[str] = None
    user: Optional[Item] = None
    error: Optional[str] = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def set_token(self, token: str) -> None:
        """Store a fresh token; the user starts as the token's claims."""
        self.token = token
        try:
            self.user = jwt.get_unverified_claims(token)
        except JWTError:
            self.user = None
        self.error = None
        self.loading = False

    def merge_user(self, data: Item) -> None:
        self.user = {**(self.user or {}), **data}
        self.loading = False

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.loading = False


@dataclass
class FitnessStore:
    """All client state of the app."""

    auth: AuthState = field(default_factory=AuthState)
    exercises: ResourceStore = field(
        default_factory=lambda: ResourceStore(default_filters={"category": "", "muscleGroups": ""})
    )
    workouts: ResourceStore = field(
        default_factory=lambda: ResourceStore(default_filters={"isTemplate": "", "isCompleted": ""})
    )
    progress: ResourceStore = field(default_factory=ResourceStore)
    stats: Optional[Item] = None


class SyncedStore:
    """
    Keeps a FitnessStore in step with the API.

    Each method marks the slice as loading, calls the client and applies the
    matching reducer. Failures are recorded on the slice and re-raised as
    ``ApiError``; a 401 also signs the user out.
    """

    def __init__(self, client: FitnessApiClient, store: Optional[FitnessStore] = None):
        self.client = client
        self.store = store or FitnessStore()

    def _run(self, state, call: Callable[[], Any]) -> Any:
        state.loading = True
        state.error = None
        try:
            return call()
        except ApiError as e:
            state.error = e.message
            state.loading = False
            if e.status_code == 401:
                self.store.auth.clear()
            raise

    # ============== Auth ==============

    def register(self, name: str, email: str, password: str) -> None:
        token = self._run(self.store.auth, lambda: self.client.register(name, email, password))
        self.store.auth.set_token(token)

    def login(self, email: str, password: str) -> None:
        token = self._run(self.store.auth, lambda: self.client.login(email, password))
        self.store.auth.set_token(token)

    def logout(self) -> None:
        self.client.logout()
        self.store.auth.clear()

    def load_user(self) -> Item:
        body = self._run(self.store.auth, self.client.me)
        self.store.auth.merge_user(body["data"])
        return self.store.auth.user

    def update_details(self, **fields) -> Item:
        body = self._run(self.store.auth, lambda: self.client.update_details(**fields))
        self.store.auth.merge_user(body["data"])
        return self.store.auth.user

    def update_password(self, current_password: str, new_password: str) -> None:
        token = self._run(self.store.auth, lambda: self.client.update_password(current_password, new_password))
        self.store.auth.set_token(token)

    # ============== Shared resource flows ==============

    def _fetch_page(self, state: ResourceStore, list_call, params: Optional[Dict[str, Any]]) -> List[Item]:
        query = {**state.query_params(), **(params or {})}
        envelope = self._run(state, lambda: list_call(query))
        state.set_page(envelope)
        return state.items

    def _fetch_one(self, state: ResourceStore, get_call, item_id: int) -> Item:
        body = self._run(state, lambda: get_call(item_id))
        state.set_current(body["data"])
        return state.current

    def _create(self, state: ResourceStore, create_call, data: dict) -> Item:
        body = self._run(state, lambda: create_call(data))
        state.add(body["data"])
        return body["data"]

    def _update(self, state: ResourceStore, update_call, item_id: int, data: Optional[dict] = None) -> Item:
        if data is None:
            body = self._run(state, lambda: update_call(item_id))
        else:
            body = self._run(state, lambda: update_call(item_id, data))
        state.replace(body["data"])
        return body["data"]

    def _delete(self, state: ResourceStore, delete_call, item_id: int) -> None:
        self._run(state, lambda: delete_call(item_id))
        state.remove(item_id)
        logger.debug(f"Removed item {item_id} from store")

    # ============== Exercises ==============

    def fetch_exercises(self, params: Optional[Dict[str, Any]] = None) -> List[Item]:
        return self._fetch_page(self.store.exercises, self.client.list_exercises, params)

    def fetch_exercise(self, exercise_id: int) -> Item:
        return self._fetch_one(self.store.exercises, self.client.get_exercise, exercise_id)

    def create_exercise(self, data: dict) -> Item:
        return self._create(self.store.exercises, self.client.create_exercise, data)

    def update_exercise(self, exercise_id: int, data: dict) -> Item:
        return self._update(self.store.exercises, self.client.update_exercise, exercise_id, data)

    def delete_exercise(self, exercise_id: int) -> None:
        self._delete(self.store.exercises, self.client.delete_exercise, exercise_id)

    # ============== Workouts ==============

    def fetch_workouts(self, params: Optional[Dict[str, Any]] = None) -> List[Item]:
        return self._fetch_page(self.store.workouts, self.client.list_workouts, params)

    def fetch_workout(self, workout_id: int) -> Item:
        return self._fetch_one(self.store.workouts, self.client.get_workout, workout_id)

    def create_workout(self, data: dict) -> Item:
        return self._create(self.store.workouts, self.client.create_workout, data)

    def update_workout(self, workout_id: int, data: dict) -> Item:
        return self._update(self.store.workouts, self.client.update_workout, workout_id, data)

    def toggle_workout_complete(self, workout_id: int) -> Item:
        return self._update(self.store.workouts, self.client.toggle_workout_complete, workout_id)

    def delete_workout(self, workout_id: int) -> None:
        self._delete(self.store.workouts, self.client.delete_workout, workout_id)

    # ============== Progress ==============

    def fetch_progress(self, params: Optional[Dict[str, Any]] = None) -> List[Item]:
        return self._fetch_page(self.store.progress, self.client.list_progress, params)

    def fetch_progress_entry(self, entry_id: int) -> Item:
        return self._fetch_one(self.store.progress, self.client.get_progress_entry, entry_id)

    def create_progress_entry(self, data: dict) -> Item:
        return self._create(self.store.progress, self.client.create_progress_entry, data)

    def update_progress_entry(self, entry_id: int, data: dict) -> Item:
        return self._update(self.store.progress, self.client.update_progress_entry, entry_id, data)

    def delete_progress_entry(self, entry_id: int) -> None:
        self._delete(self.store.progress, self.client.delete_progress_entry, entry_id)

    def fetch_stats(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Item:
        body = self._run(self.store.progress, lambda: self.client.get_progress_stats(start_date, end_date))
        self.store.stats = body["data"]
        self.store.progress.loading = False
        return self.store.stats
