"""Public exercise catalogue loaded into an empty database."""

import logging

from sqlalchemy.orm import Session

from app.models.exercise import DifficultyLevel, Equipment, Exercise, ExerciseCategory, MuscleGroup

logger = logging.getLogger(__name__)


PUBLIC_EXERCISES = [
    {
        "name": "Bench Press",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": [MuscleGroup.CHEST, MuscleGroup.TRICEPS, MuscleGroup.SHOULDERS],
        "equipment_needed": Equipment.BARBELL,
        "difficulty_level": DifficultyLevel.INTERMEDIATE,
        "description": "Press a barbell from the chest while lying on a flat bench.",
    },
    {
        "name": "Back Squat",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": [MuscleGroup.QUADRICEPS, MuscleGroup.GLUTES, MuscleGroup.HAMSTRINGS],
        "equipment_needed": Equipment.BARBELL,
        "difficulty_level": DifficultyLevel.INTERMEDIATE,
        "description": "Squat with a barbell across the upper back.",
    },
    {
        "name": "Deadlift",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": [MuscleGroup.BACK, MuscleGroup.GLUTES, MuscleGroup.HAMSTRINGS],
        "equipment_needed": Equipment.BARBELL,
        "difficulty_level": DifficultyLevel.ADVANCED,
        "description": "Lift a loaded barbell from the floor to hip height.",
    },
    {
        "name": "Pull-Up",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": [MuscleGroup.BACK, MuscleGroup.BICEPS],
        "equipment_needed": Equipment.BODYWEIGHT,
        "difficulty_level": DifficultyLevel.INTERMEDIATE,
        "description": "Pull the body up until the chin clears the bar.",
    },
    {
        "name": "Dumbbell Curl",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": [MuscleGroup.BICEPS, MuscleGroup.FOREARMS],
        "equipment_needed": Equipment.DUMBBELL,
        "difficulty_level": DifficultyLevel.BEGINNER,
        "description": "Curl a pair of dumbbells from the hips to the shoulders.",
    },
    {
        "name": "Plank",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": [MuscleGroup.CORE],
        "equipment_needed": Equipment.NONE,
        "difficulty_level": DifficultyLevel.BEGINNER,
        "description": "Hold a straight-body position on the forearms.",
    },
    {
        "name": "Running",
        "category": ExerciseCategory.CARDIO,
        "muscle_groups": [MuscleGroup.FULL_BODY],
        "equipment_needed": Equipment.NONE,
        "difficulty_level": DifficultyLevel.BEGINNER,
        "description": "Steady-state running outdoors or on a treadmill.",
    },
    {
        "name": "Rowing Machine",
        "category": ExerciseCategory.CARDIO,
        "muscle_groups": [MuscleGroup.BACK, MuscleGroup.FULL_BODY],
        "equipment_needed": Equipment.MACHINE,
        "difficulty_level": DifficultyLevel.BEGINNER,
        "description": "Indoor rowing on an ergometer.",
    },
    {
        "name": "Hamstring Stretch",
        "category": ExerciseCategory.FLEXIBILITY,
        "muscle_groups": [MuscleGroup.HAMSTRINGS],
        "equipment_needed": Equipment.NONE,
        "difficulty_level": DifficultyLevel.BEGINNER,
        "description": "Seated forward fold reaching for the toes.",
    },
    {
        "name": "Single-Leg Stand",
        "category": ExerciseCategory.BALANCE,
        "muscle_groups": [MuscleGroup.CALVES, MuscleGroup.CORE],
        "equipment_needed": Equipment.NONE,
        "difficulty_level": DifficultyLevel.BEGINNER,
        "description": "Stand on one leg with the other knee raised.",
    },
]


def seed_public_exercises(db: Session) -> int:
    """
    Insert the public exercise catalogue unless public exercises already exist.

    Returns:
        int: Number of exercises inserted
    """
    existing = db.query(Exercise).filter(Exercise.is_custom == False).count()  # noqa: E712
    if existing:
        logger.debug(f"Skipping exercise seed, {existing} public exercises present")
        return 0

    for data in PUBLIC_EXERCISES:
        data = dict(data)
        muscle_groups = data.pop("muscle_groups")
        exercise = Exercise(is_custom=False, user_id=None, **data)
        exercise.muscle_groups = muscle_groups
        db.add(exercise)

    db.commit()
    logger.info(f"Seeded {len(PUBLIC_EXERCISES)} public exercises")
    return len(PUBLIC_EXERCISES)
