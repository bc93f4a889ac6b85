"""Shared fixtures: in-memory database, API client and seeded users."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables, enable_sqlite_foreign_keys, get_db
from app.main import app
from app.models import (
    Base,
    DifficultyLevel,
    Equipment,
    Exercise,
    ExerciseCategory,
    MuscleGroup,
    User,
)
from app.services.auth_service import create_access_token, hash_password

TEST_PASSWORD = "secret123"


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    create_tables(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """Test client bound to the in-memory database."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()


def _make_user(db_session, name: str, email: str) -> User:
    user = User(name=name, email=email, password_hash=hash_password(TEST_PASSWORD))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    return _make_user(db_session, "Alex Lifter", "alex@example.com")


@pytest.fixture
def other_user(db_session):
    return _make_user(db_session, "Sam Runner", "sam@example.com")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user_id=user.id)}"}


@pytest.fixture
def other_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(user_id=other_user.id)}"}


def _make_exercise(db_session, name, category, muscle_groups, owner=None, **fields) -> Exercise:
    exercise = Exercise(
        name=name,
        category=category,
        is_custom=owner is not None,
        user_id=owner.id if owner is not None else None,
        **fields,
    )
    exercise.muscle_groups = muscle_groups
    db_session.add(exercise)
    db_session.commit()
    db_session.refresh(exercise)
    return exercise


@pytest.fixture
def bench_press(db_session):
    """Public strength exercise."""
    return _make_exercise(
        db_session,
        "Bench Press",
        ExerciseCategory.STRENGTH,
        [MuscleGroup.CHEST, MuscleGroup.TRICEPS],
        equipment_needed=Equipment.BARBELL,
    )


@pytest.fixture
def running(db_session):
    """Public cardio exercise."""
    return _make_exercise(
        db_session,
        "Running",
        ExerciseCategory.CARDIO,
        [MuscleGroup.FULL_BODY],
        difficulty_level=DifficultyLevel.BEGINNER,
    )


@pytest.fixture
def custom_exercise(db_session, user):
    """Custom exercise owned by ``user``."""
    return _make_exercise(
        db_session,
        "Landmine Press",
        ExerciseCategory.STRENGTH,
        [MuscleGroup.SHOULDERS],
        owner=user,
    )


@pytest.fixture
def foreign_exercise(db_session, other_user):
    """Custom exercise owned by ``other_user``."""
    return _make_exercise(
        db_session,
        "Secret Curl",
        ExerciseCategory.STRENGTH,
        [MuscleGroup.BICEPS],
        owner=other_user,
    )


@pytest.fixture
def password():
    """Plain-text password of every seeded user."""
    return TEST_PASSWORD
