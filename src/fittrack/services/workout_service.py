"""Workout service — create and fetch workouts with their exercises."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fittrack.db.models import Exercise, Workout
from fittrack.schemas.workout import WorkoutCreate

logger = structlog.get_logger()


class WorkoutNotFoundError(Exception):
    """Raised when a workout id doesn't exist."""


class WorkoutService:
    """Business logic for workouts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_workout(self, data: WorkoutCreate) -> Workout:
        workout = Workout(
            title=data.title,
            exercises=[Exercise(**ex.model_dump()) for ex in data.exercises],
        )
        self.db.add(workout)
        await self.db.commit()
        logger.info(
            "workout.created",
            workout_id=workout.id,
            exercises=len(data.exercises),
        )
        # Reload so server-side defaults (created_at) are populated
        return await self.get_workout(workout.id)

    async def get_workout(self, workout_id: int) -> Workout:
        q = (
            select(Workout)
            .where(Workout.id == workout_id)
            .options(selectinload(Workout.exercises))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(q)
        workout = result.scalars().first()
        if workout is None:
            raise WorkoutNotFoundError(f"Workout {workout_id} not found")
        return workout
