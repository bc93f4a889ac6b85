"""Python client and client-side state for the Workout Tracker API."""

from app.client.api_client import ApiError, FitnessApiClient
from app.client.store import AuthState, FitnessStore, ResourceStore, SyncedStore

__all__ = [
    "ApiError",
    "FitnessApiClient",
    "AuthState",
    "FitnessStore",
    "ResourceStore",
    "SyncedStore",
]
