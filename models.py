from __future__ import annotations
import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

WeightUnit = Literal["kg", "lb"]


class SuggestionType(str, Enum):
    """Kinds of next-session recommendation."""

    INCREASE_WEIGHT = "increase_weight"
    INCREASE_REPS = "increase_reps"
    HOLD = "hold"
    DELOAD = "deload"


class ExerciseSet(BaseModel):
    """One performed set."""

    model_config = ConfigDict(frozen=True)

    set_number: int
    weight: float
    reps: int
    rpe: int | None = None
    unit: WeightUnit = "kg"


class ExerciseSession(BaseModel):
    """One training session's work on a single exercise.

    Sequences of sessions handed to the progression engine must already be
    sorted newest-first.
    """

    model_config = ConfigDict(frozen=True)

    workout_id: str
    date: datetime.date
    sets: tuple[ExerciseSet, ...]

    @property
    def best_set(self) -> ExerciseSet:
        """Heaviest set of the session, first encountered on ties."""
        return max(self.sets, key=lambda s: s.weight)

    @property
    def unit(self) -> str:
        return self.best_set.unit


class RepRange(BaseModel):
    """Inclusive repetition target."""

    model_config = ConfigDict(frozen=True)

    min_reps: int
    max_reps: int


class ProgressionSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: SuggestionType
    target_weight: float | None = None
    target_reps: int | None = None
    rationale: str | None = None


class LastPerformance(BaseModel):
    """Snapshot of the most recent session's best set."""

    model_config = ConfigDict(frozen=True)

    weight: float
    reps: int
    rpe: int | None
    date: datetime.date
    unit: WeightUnit


class ProgressionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    exercise_name: str | None = None
    last_session: LastPerformance
    suggestion: ProgressionSuggestion
