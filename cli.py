import argparse
import datetime
import logging

from db import (
    WorkoutRepository,
    ExerciseRepository,
    SetRepository,
    SettingsRepository,
    ProgressionLogRepository,
)
from progression_service import ProgressionService
from algorithms import RepRangeParser


def log_set(
    db_path: str,
    yaml_path: str,
    date: str,
    exercise: str,
    weight: float,
    reps: int,
    rpe: int | None = None,
    unit: str = "kg",
    target: str | None = None,
) -> int:
    """Record one set in a new workout on ``date``."""
    datetime.date.fromisoformat(date)
    settings = SettingsRepository(db_path, yaml_path)
    workouts = WorkoutRepository(db_path)
    exercises = ExerciseRepository(db_path)
    sets = SetRepository(db_path)
    wid = workouts.create(date)
    ex_id = exercises.add(wid, exercise, target)
    return sets.add(ex_id, reps, weight, rpe, unit)


def suggest(db_path: str, yaml_path: str, exercise: str, target: str | None = None) -> str:
    """Return a printable progression summary for ``exercise``."""
    settings = SettingsRepository(db_path, yaml_path)
    service = ProgressionService(
        SetRepository(db_path),
        ExerciseRepository(db_path),
        settings,
        ProgressionLogRepository(db_path),
    )
    result = service.suggest(exercise, target)
    if result is None:
        return f"No history for {exercise}"
    last = result.last_session
    s = result.suggestion
    rpe = f" @ RPE {last.rpe}" if last.rpe is not None else ""
    lines = [
        f"Last session ({last.date.isoformat()}): {last.weight:g} {last.unit} x {last.reps}{rpe}",
        f"Suggestion: {s.type.value} -> {s.target_weight:g} {last.unit} x {s.target_reps}",
    ]
    if s.rationale:
        lines.append(s.rationale)
    return "\n".join(lines)


def parse_range(text: str) -> str:
    parsed = RepRangeParser.parse(text)
    if parsed is None:
        return "no target"
    return f"{parsed.min_reps}-{parsed.max_reps}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Progressive overload tools")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)

    log = sub.add_parser("log")
    log.add_argument("--db", default="workout.db")
    log.add_argument("--yaml", default="settings.yaml")
    log.add_argument("--date", default=datetime.date.today().isoformat())
    log.add_argument("--exercise", required=True)
    log.add_argument("--weight", type=float, required=True)
    log.add_argument("--reps", type=int, required=True)
    log.add_argument("--rpe", type=int)
    log.add_argument("--unit", choices=["kg", "lb"], default="kg")
    log.add_argument("--target")

    sug = sub.add_parser("suggest")
    sug.add_argument("--db", default="workout.db")
    sug.add_argument("--yaml", default="settings.yaml")
    sug.add_argument("--exercise", required=True)
    sug.add_argument("--target")

    rng = sub.add_parser("parse-range")
    rng.add_argument("text")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.cmd == "log":
        set_id = log_set(
            args.db,
            args.yaml,
            args.date,
            args.exercise,
            args.weight,
            args.reps,
            args.rpe,
            args.unit,
            args.target,
        )
        print(f"Logged set {set_id}")
    elif args.cmd == "suggest":
        print(suggest(args.db, args.yaml, args.exercise, args.target))
    elif args.cmd == "parse-range":
        print(parse_range(args.text))


if __name__ == "__main__":
    main()
