import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import (
    WorkoutRepository,
    ExerciseRepository,
    SetRepository,
    SettingsRepository,
    ProgressionLogRepository,
)
from progression_service import ProgressionService
from models import SuggestionType


class ProgressionServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_progression.db"
        self.yaml_path = "test_progression.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.settings = SettingsRepository(self.db_path, self.yaml_path)
        self.workouts = WorkoutRepository(self.db_path)
        self.exercises = ExerciseRepository(self.db_path)
        self.sets = SetRepository(self.db_path)
        self.logs = ProgressionLogRepository(self.db_path)
        self.service = ProgressionService(
            self.sets, self.exercises, self.settings, self.logs
        )

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def _log(self, date, sets, name="Bench Press", target=None) -> None:
        wid = self.workouts.create(date)
        ex_id = self.exercises.add(wid, name, target)
        for reps, weight, rpe in sets:
            self.sets.add(ex_id, reps, weight, rpe, "lb")

    def test_fetch_sessions_newest_first(self) -> None:
        self._log("2024-01-01", [(8, 95.0, 7)])
        self._log("2024-01-08", [(8, 100.0, 7), (6, 100.0, 8)])
        self._log("2024-01-04", [(8, 97.5, None)])
        sessions = self.sets.fetch_sessions("Bench Press", 5)
        self.assertEqual(
            [s.date.isoformat() for s in sessions],
            ["2024-01-08", "2024-01-04", "2024-01-01"],
        )
        self.assertEqual([st.set_number for st in sessions[0].sets], [1, 2])
        self.assertEqual(sessions[0].best_set.reps, 8)
        self.assertIsNone(sessions[1].best_set.rpe)
        self.assertEqual(len(self.sets.fetch_sessions("Bench Press", 2)), 2)
        self.assertEqual(self.sets.fetch_sessions("Squat", 5), [])

    def test_set_validation(self) -> None:
        wid = self.workouts.create("2024-01-01")
        ex_id = self.exercises.add(wid, "Bench Press")
        with self.assertRaises(ValueError):
            self.sets.add(ex_id, -1, 100.0)
        with self.assertRaises(ValueError):
            self.sets.add(ex_id, 5, -10.0)
        with self.assertRaises(ValueError):
            self.sets.add(ex_id, 5, 100.0, 11)
        with self.assertRaises(ValueError):
            self.sets.add(ex_id, 5, 100.0, 8, "stone")
        self.sets.add(ex_id, 0, 100.0)
        self.assertEqual(len(self.sets.fetch_for_exercise(ex_id)), 1)

    def test_rpe_range_fixed_at_ten(self) -> None:
        self.settings.set_int("rpe_scale", 20)
        wid = self.workouts.create("2024-01-01")
        ex_id = self.exercises.add(wid, "Bench Press")
        with self.assertRaises(ValueError):
            self.sets.add(ex_id, 5, 100.0, 20)
        with self.assertRaises(ValueError):
            self.sets.add(ex_id, 5, 100.0, 0)
        self.assertEqual(self.sets.fetch_for_exercise(ex_id), [])

        for day in ("2024-01-02", "2024-01-03", "2024-01-04"):
            self._log(day, [(5, 100.0, 10)])
        result = self.service.suggest("Bench Press")
        self.assertEqual(result.suggestion.type, SuggestionType.DELOAD)
        self.assertEqual(result.suggestion.target_weight, 90.0)

    def test_no_history(self) -> None:
        self.assertFalse(self.service.has_history("Bench Press"))
        self.assertIsNone(self.service.suggest("Bench Press"))
        self.assertIsNone(self.logs.last_success())

    def test_suggest_uses_stored_target(self) -> None:
        self._log("2024-01-01", [(12, 100.0, None), (12, 100.0, None)], target="8-12")
        self._log("2024-01-08", [(12, 100.0, None), (12, 100.0, None)], target="8-12")
        self.assertTrue(self.service.has_history("Bench Press"))
        result = self.service.suggest("Bench Press")
        self.assertEqual(result.exercise_name, "Bench Press")
        self.assertEqual(result.suggestion.type, SuggestionType.INCREASE_WEIGHT)
        self.assertEqual(result.suggestion.target_weight, 105.0)
        self.assertEqual(result.suggestion.target_reps, 8)
        self.assertIsNotNone(self.logs.last_success())

    def test_explicit_empty_target_overrides_stored(self) -> None:
        self._log("2024-01-01", [(9, 100.0, 7)], target="8-12")
        self.assertEqual(self.service.resolve_target("Bench Press"), "8-12")
        self.assertIsNone(self.service.resolve_target("Bench Press", ""))
        result = self.service.suggest("Bench Press", "")
        self.assertEqual(result.suggestion.type, SuggestionType.HOLD)

    def test_default_rep_range_setting(self) -> None:
        self._log("2024-01-01", [(9, 100.0, 7)])
        self.assertIsNone(self.service.resolve_target("Bench Press"))
        self.settings.set_text("default_rep_range", "8-12")
        self.assertEqual(self.service.resolve_target("Bench Press"), "8-12")
        result = self.service.suggest("Bench Press")
        self.assertEqual(result.suggestion.type, SuggestionType.INCREASE_REPS)
        self.assertEqual(result.suggestion.target_reps, 10)

    def test_history_limit_setting(self) -> None:
        for day in range(1, 6):
            self._log(f"2024-01-0{day}", [(8, 100.0, 7)])
        self.settings.set_int("history_sessions", 2)
        self.assertEqual(len(self.service.history("Bench Press")), 2)
        self.assertEqual(len(self.service.history("Bench Press", 4)), 4)

    def test_error_logged_and_raised(self) -> None:
        self._log("2024-01-01", [(8, 100.0, 7)])

        def broken(name, limit=None):
            return [object()]

        self.service.history = broken
        with self.assertRaises(AttributeError):
            self.service.suggest("Bench Press")
        errors = self.logs.last_errors()
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0][1], "Bench Press")


if __name__ == "__main__":
    unittest.main()
