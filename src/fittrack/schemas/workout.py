"""Pydantic schemas for workouts and exercises.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
Read schemas use from_attributes so ORM rows convert directly.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sets: int = Field(..., ge=1)
    reps: Optional[int] = Field(None, ge=1)
    duration: Optional[int] = Field(None, ge=1, description="Seconds")
    type: str = Field(..., min_length=1, max_length=50)


class ExerciseRead(BaseModel):
    id: int
    name: str
    sets: int
    reps: Optional[int] = None
    duration: Optional[int] = None
    type: str

    model_config = {"from_attributes": True}


class WorkoutCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    exercises: list[ExerciseCreate] = []


class WorkoutRead(BaseModel):
    id: int
    title: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    exercises: list[ExerciseRead] = []

    model_config = {"from_attributes": True, "populate_by_name": True}
