import datetime
from fastapi import FastAPI, HTTPException

from db import (
    WorkoutRepository,
    ExerciseRepository,
    SetRepository,
    SettingsRepository,
    ProgressionLogRepository,
)
from progression_service import ProgressionService
from algorithms import RepRangeParser


class OverloadAPI:
    """Provides REST endpoints for set logging and progression suggestions."""

    def __init__(
        self,
        db_path: str = "workout.db",
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.workouts = WorkoutRepository(db_path)
        self.exercises = ExerciseRepository(db_path)
        self.sets = SetRepository(db_path)
        self.progression_logs = ProgressionLogRepository(db_path)
        self.progression = ProgressionService(
            self.sets,
            self.exercises,
            self.settings,
            log_repo=self.progression_logs,
        )
        self.app = FastAPI(
            title="Overload API",
            description="REST API for set logging and progressive-overload suggestions",
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            try:
                self.workouts.fetch_all_workouts()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.post(
            "/workouts",
            summary="Create workout",
            description="Create a new workout session.",
        )
        def create_workout(date: str = None, name: str | None = None):
            try:
                workout_date = (
                    datetime.date.today()
                    if date is None
                    else datetime.date.fromisoformat(date)
                )
            except ValueError:
                raise HTTPException(
                    status_code=400,
                    detail="date must be in YYYY-MM-DD format",
                )
            workout_id = self.workouts.create(workout_date.isoformat(), name)
            return {"id": workout_id}

        @self.app.get("/workouts", summary="List workouts")
        def list_workouts():
            return [
                {"id": wid, "date": date, "name": name}
                for wid, date, name in self.workouts.fetch_all_workouts()
            ]

        @self.app.post("/workouts/{workout_id}/exercises")
        def add_exercise(
            workout_id: int,
            name: str,
            target_reps: str | None = None,
        ):
            try:
                self.workouts.fetch_detail(workout_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            ex_id = self.exercises.add(workout_id, name, target_reps)
            return {"id": ex_id}

        @self.app.post(
            "/exercises/{exercise_id}/sets",
            summary="Add set",
            description="Record a new set for the specified exercise.",
        )
        def add_set(
            exercise_id: int,
            reps: int,
            weight: float,
            rpe: int | None = None,
            unit: str | None = None,
        ):
            try:
                self.exercises.fetch_detail(exercise_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            if unit is None:
                unit = self.settings.get_text("weight_unit", "kg")
            try:
                set_id = self.sets.add(exercise_id, reps, weight, rpe, unit)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": set_id}

        @self.app.get("/exercises/history")
        def exercise_history(exercise: str, limit: int | None = None):
            sessions = self.progression.history(exercise, limit)
            return [
                {
                    "workout_id": s.workout_id,
                    "date": s.date.isoformat(),
                    "sets": [st.model_dump() for st in s.sets],
                    "best_set": s.best_set.model_dump(),
                }
                for s in sessions
            ]

        @self.app.get(
            "/progression",
            summary="Progression suggestion",
            description="Suggest the next session's weight and reps for an exercise.",
        )
        def progression(exercise: str, target_reps: str | None = None):
            result = self.progression.suggest(exercise, target_reps)
            if result is None:
                raise HTTPException(status_code=404, detail="no history for exercise")
            return result.model_dump(mode="json")

        @self.app.get("/rep_range")
        def rep_range(text: str | None = None):
            parsed = RepRangeParser.parse(text)
            return parsed.model_dump() if parsed is not None else None


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(OverloadAPI().app)
