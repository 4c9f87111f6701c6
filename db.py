import sqlite3
import datetime
from contextlib import contextmanager
from typing import List, Tuple, Optional

from config import YamlConfig
from algorithms.effort import EffortAggregator
from models import ExerciseSession, ExerciseSet
from settings_schema import validate_settings


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "workouts": (
            """CREATE TABLE workouts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    name TEXT
                );""",
            ["id", "date", "name"],
        ),
        "exercises": (
            """CREATE TABLE exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    workout_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    target_reps TEXT,
                    FOREIGN KEY(workout_id) REFERENCES workouts(id) ON DELETE CASCADE
                );""",
            ["id", "workout_id", "name", "target_reps"],
        ),
        "sets": (
            """CREATE TABLE sets (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    exercise_id INTEGER NOT NULL,
                    reps INTEGER NOT NULL,
                    weight REAL NOT NULL,
                    rpe INTEGER,
                    unit TEXT NOT NULL DEFAULT 'kg',
                    position INTEGER NOT NULL,
                    FOREIGN KEY(exercise_id) REFERENCES exercises(id) ON DELETE CASCADE
                );""",
            ["id", "exercise_id", "reps", "weight", "rpe", "unit", "position"],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
        "progression_logs": (
            """CREATE TABLE progression_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    exercise TEXT NOT NULL,
                    status TEXT NOT NULL,
                    message TEXT
                );""",
            ["id", "timestamp", "exercise", "status", "message"],
        ),
    }

    _DEFAULT_SETTINGS = {
        "weight_unit": "kg",
        "history_sessions": "5",
        "default_rep_range": "",
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys=off;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            cursor.execute("PRAGMA foreign_keys=on;")

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                def default_val(col: str) -> str:
                    if col == "unit":
                        return "'kg'"
                    if col == "position":
                        return "0"
                    return "NULL"

                defaults = ", ".join(default_val(c) for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _init_settings(self) -> None:
        with self._connection() as conn:
            for key, value in self._DEFAULT_SETTINGS.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class WorkoutRepository(BaseRepository):
    """Repository for workout table operations."""

    def create(self, date: str, name: str | None = None) -> int:
        return self.execute(
            "INSERT INTO workouts (date, name) VALUES (?, ?);",
            (date, name),
        )

    def fetch_all_workouts(self) -> List[Tuple[int, str, Optional[str]]]:
        return self.fetch_all(
            "SELECT id, date, name FROM workouts ORDER BY date DESC, id DESC;"
        )

    def fetch_detail(self, workout_id: int) -> Tuple[str, Optional[str]]:
        rows = self.fetch_all(
            "SELECT date, name FROM workouts WHERE id = ?;", (workout_id,)
        )
        if not rows:
            raise ValueError("workout not found")
        return rows[0]


class ExerciseRepository(BaseRepository):
    """Repository for exercise table operations."""

    def add(
        self,
        workout_id: int,
        name: str,
        target_reps: Optional[str] = None,
    ) -> int:
        return self.execute(
            "INSERT INTO exercises (workout_id, name, target_reps) VALUES (?, ?, ?);",
            (workout_id, name, target_reps),
        )

    def fetch_detail(self, exercise_id: int) -> Tuple[int, str, Optional[str]]:
        rows = self.fetch_all(
            "SELECT workout_id, name, target_reps FROM exercises WHERE id = ?;",
            (exercise_id,),
        )
        if not rows:
            raise ValueError("exercise not found")
        return rows[0]

    def latest_target(self, name: str) -> Optional[str]:
        """Return the most recently stored rep target for ``name``."""
        rows = self.fetch_all(
            "SELECT e.target_reps FROM exercises e "
            "JOIN workouts w ON e.workout_id = w.id "
            "WHERE e.name = ? AND e.target_reps IS NOT NULL "
            "ORDER BY w.date DESC, w.id DESC, e.id DESC LIMIT 1;",
            (name,),
        )
        return rows[0][0] if rows else None


class SetRepository(BaseRepository):
    """Repository for sets table operations."""

    MAX_RPE = EffortAggregator.MAX_RPE

    def add(
        self,
        exercise_id: int,
        reps: int,
        weight: float,
        rpe: Optional[int] = None,
        unit: str = "kg",
    ) -> int:
        if reps < 0:
            raise ValueError("reps must be non-negative")
        if weight < 0:
            raise ValueError("weight must be non-negative")
        if unit not in ("kg", "lb"):
            raise ValueError("unit must be kg or lb")
        if rpe is not None and (rpe < 1 or rpe > self.MAX_RPE):
            raise ValueError(f"rpe must be between 1 and {self.MAX_RPE}")
        rows = self.fetch_all(
            "SELECT COALESCE(MAX(position), 0) + 1 FROM sets WHERE exercise_id = ?;",
            (exercise_id,),
        )
        position = int(rows[0][0]) if rows else 1
        return self.execute(
            "INSERT INTO sets (exercise_id, reps, weight, rpe, unit, position) "
            "VALUES (?, ?, ?, ?, ?, ?);",
            (exercise_id, reps, weight, rpe, unit, position),
        )

    def fetch_for_exercise(
        self, exercise_id: int
    ) -> List[Tuple[int, int, float, Optional[int], str]]:
        return self.fetch_all(
            "SELECT id, reps, weight, rpe, unit FROM sets WHERE exercise_id = ? ORDER BY position;",
            (exercise_id,),
        )

    def fetch_sessions(self, exercise_name: str, limit: int = 5) -> List[ExerciseSession]:
        """Return up to ``limit`` sessions for ``exercise_name``, newest first."""
        rows = self.fetch_all(
            "SELECT w.id, w.date, s.weight, s.reps, s.rpe, s.unit FROM sets s "
            "JOIN exercises e ON s.exercise_id = e.id "
            "JOIN workouts w ON e.workout_id = w.id "
            "WHERE e.name = ? "
            "ORDER BY w.date DESC, w.id DESC, e.id, s.position;",
            (exercise_name,),
        )
        grouped: dict[int, tuple[str, list[ExerciseSet]]] = {}
        for wid, date, weight, reps, rpe, unit in rows:
            if wid not in grouped:
                if len(grouped) >= limit:
                    break
                grouped[wid] = (date, [])
            sets = grouped[wid][1]
            sets.append(
                ExerciseSet(
                    set_number=len(sets) + 1,
                    weight=float(weight),
                    reps=int(reps),
                    rpe=int(rpe) if rpe is not None else None,
                    unit=unit,
                )
            )
        return [
            ExerciseSession(workout_id=str(wid), date=date, sets=tuple(sets))
            for wid, (date, sets) in grouped.items()
        ]


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    TEXT_KEYS = {"weight_unit", "default_rep_range"}

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, float | str] = {}
        for k, v in rows:
            if k in self.TEXT_KEYS:
                result[k] = v
                continue
            try:
                result[k] = float(v)
            except ValueError:
                result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        model = validate_settings(data)
        known = set(data) & set(type(model).model_fields)
        values = {**data, **model.model_dump(include=known)}
        with self._connection() as conn:
            for key, value in values.items():
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, str(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()


class ProgressionLogRepository(BaseRepository):
    """Repository for progression suggestion run logs."""

    def log_success(self, exercise: str) -> int:
        return self.execute(
            "INSERT INTO progression_logs (timestamp, exercise, status, message) VALUES (?, ?, 'success', NULL);",
            (datetime.datetime.now().isoformat(), exercise),
        )

    def log_error(self, exercise: str, message: str) -> int:
        return self.execute(
            "INSERT INTO progression_logs (timestamp, exercise, status, message) VALUES (?, ?, 'error', ?);",
            (datetime.datetime.now().isoformat(), exercise, message),
        )

    def last_success(self) -> Optional[str]:
        rows = self.fetch_all(
            "SELECT timestamp FROM progression_logs WHERE status='success' ORDER BY id DESC LIMIT 1;"
        )
        return rows[0][0] if rows else None

    def last_errors(self, limit: int = 5) -> list[tuple[str, str, str]]:
        rows = self.fetch_all(
            "SELECT timestamp, exercise, message FROM progression_logs WHERE status='error' ORDER BY id DESC LIMIT ?;",
            (limit,),
        )
        return [(r[0], r[1], r[2]) for r in rows]
