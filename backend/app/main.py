"""FastAPI application entry point for the Workout Tracker API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import SessionLocal, create_tables
from app.errors import register_exception_handlers
from app.routers import auth, exercises, progress, workouts
from app.services.seed_service import seed_public_exercises

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create database tables and the public exercise catalog
    create_tables()
    if settings.SEED_PUBLIC_EXERCISES:
        db = SessionLocal()
        try:
            seed_public_exercises(db)
        finally:
            db.close()
    logger.info("Workout Tracker API started")
    yield


app = FastAPI(
    title="Workout Tracker API",
    description="Backend API for the Workout Tracker App - exercises, workouts, body progress and statistics",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
cors_origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(exercises.router, prefix="/api/exercises", tags=["Exercises"])
app.include_router(workouts.router, prefix="/api/workouts", tags=["Workouts"])
app.include_router(progress.router, prefix="/api/progress", tags=["Progress"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Workout Tracker API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health", tags=["Health"])
@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
