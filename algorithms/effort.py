from typing import Sequence

import numpy as np

from models import ExerciseSession


class EffortAggregator:
    """Summarise perceived effort (RPE) over recent sessions.

    A session's rating is the RPE logged on its best set. Missing ratings
    are skipped, never replaced by a default.
    """

    WINDOW: int = 3
    MAX_RPE: int = 10
    HIGH_RPE: int = 9

    @staticmethod
    def ratings(sessions: Sequence[ExerciseSession]) -> list[int]:
        return [s.best_set.rpe for s in sessions if s.best_set.rpe is not None]

    @classmethod
    def average_effort(cls, same_weight_run: Sequence[ExerciseSession]) -> float | None:
        """Mean RPE over the newest sessions of the same-weight run."""
        values = cls.ratings(same_weight_run[: cls.WINDOW])
        if not values:
            return None
        return float(np.mean(values))

    @classmethod
    def has_effort_data(cls, sessions: Sequence[ExerciseSession]) -> bool:
        return bool(cls.ratings(sessions))

    @classmethod
    def sustained_maximal(cls, sessions: Sequence[ExerciseSession]) -> bool:
        """At least two of the last sessions were rated at the top of the scale."""
        values = cls.ratings(sessions[: cls.WINDOW])
        return sum(1 for v in values if v == cls.MAX_RPE) >= 2

    @classmethod
    def high_effort(cls, sessions: Sequence[ExerciseSession]) -> bool:
        values = cls.ratings(sessions[: cls.WINDOW])
        return any(v >= cls.HIGH_RPE for v in values)
