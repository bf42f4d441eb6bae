"""Workouts API — log a workout, fetch it back.

Learn: This router is mounted with the get_current_identity dependency
in api/__init__.py, so every route here answers 401 to callers the
authentication gate left anonymous.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.db.engine import get_db
from fittrack.schemas.workout import WorkoutCreate, WorkoutRead
from fittrack.services.workout_service import WorkoutNotFoundError, WorkoutService

router = APIRouter(prefix="/workouts")


@router.post("", response_model=WorkoutRead)
async def create_workout(body: WorkoutCreate, db: AsyncSession = Depends(get_db)):
    """Create a workout with its exercises."""
    svc = WorkoutService(db)
    return await svc.create_workout(body)


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(workout_id: int, db: AsyncSession = Depends(get_db)):
    svc = WorkoutService(db)
    try:
        return await svc.get_workout(workout_id)
    except WorkoutNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
