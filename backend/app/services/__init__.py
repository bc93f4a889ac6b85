"""Services package for business logic."""

from app.services.google_service import GoogleOAuthService, google_service
from app.services.stats_service import ProgressStatsService, progress_stats_service
from app.services.seed_service import seed_public_exercises

__all__ = [
    "GoogleOAuthService",
    "google_service",
    "ProgressStatsService",
    "progress_stats_service",
    "seed_public_exercises",
]
