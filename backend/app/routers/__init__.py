"""API routers package."""

from app.routers import auth, exercises, progress, workouts

__all__ = ["auth", "exercises", "progress", "workouts"]
