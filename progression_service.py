from __future__ import annotations
import logging

from db import (
    SetRepository,
    ExerciseRepository,
    SettingsRepository,
    ProgressionLogRepository,
)
from algorithms.progression_engine import ProgressionEngine
from models import ExerciseSession, ProgressionResult

logger = logging.getLogger(__name__)


class ProgressionService:
    """Generate progressive-overload suggestions from logged history."""

    def __init__(
        self,
        set_repo: SetRepository,
        exercise_repo: ExerciseRepository,
        settings_repo: SettingsRepository,
        log_repo: ProgressionLogRepository | None = None,
    ) -> None:
        self.sets = set_repo
        self.exercises = exercise_repo
        self.settings = settings_repo
        self.logs = log_repo

    def history(self, exercise_name: str, limit: int | None = None) -> list[ExerciseSession]:
        """Return recent sessions for the exercise, newest first."""
        if limit is None:
            limit = self.settings.get_int("history_sessions", 5)
        return self.sets.fetch_sessions(exercise_name, max(limit, 1))

    def has_history(self, exercise_name: str) -> bool:
        return len(self.sets.fetch_sessions(exercise_name, 1)) > 0

    def resolve_target(self, exercise_name: str, target_reps: str | None = None) -> str | None:
        """Pick the rep target: explicit value, last stored target, then default."""
        if target_reps is not None:
            return target_reps or None
        stored = self.exercises.latest_target(exercise_name)
        if stored:
            return stored
        return self.settings.get_text("default_rep_range", "") or None

    def suggest(
        self, exercise_name: str, target_reps: str | None = None
    ) -> ProgressionResult | None:
        """Return the next-session suggestion or ``None`` without history."""
        sessions = self.history(exercise_name)
        if not sessions:
            logger.info("No history for %s", exercise_name)
            return None
        target = self.resolve_target(exercise_name, target_reps)
        try:
            result = ProgressionEngine.suggest(sessions, target)
        except Exception as e:
            logger.error("Progression failed for %s: %s", exercise_name, e)
            if self.logs is not None:
                self.logs.log_error(exercise_name, str(e))
            raise
        if self.logs is not None:
            self.logs.log_success(exercise_name)
        logger.info(
            "Suggested %s for %s", result.suggestion.type.value, exercise_name
        )
        return result.model_copy(update={"exercise_name": exercise_name})
