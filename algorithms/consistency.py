from typing import Callable, Sequence

from models import ExerciseSession, RepRange


class ConsistencyAnalyzer:
    """Find unbroken runs of sessions at the head of a newest-first history.

    Every run stops at the first session that fails its condition; later
    matches are not counted.
    """

    @staticmethod
    def _prefix_run(
        sessions: Sequence[ExerciseSession],
        predicate: Callable[[ExerciseSession], bool],
    ) -> list[ExerciseSession]:
        run: list[ExerciseSession] = []
        for session in sessions:
            if not predicate(session):
                break
            run.append(session)
        return run

    @classmethod
    def same_weight_run(
        cls, sessions: Sequence[ExerciseSession]
    ) -> list[ExerciseSession]:
        """Sessions whose best weight equals the latest best weight."""
        if not sessions:
            return []
        weight = sessions[0].best_set.weight
        return cls._prefix_run(sessions, lambda s: s.best_set.weight == weight)

    @classmethod
    def same_weight_reps_run(
        cls, sessions: Sequence[ExerciseSession]
    ) -> list[ExerciseSession]:
        """Sessions at the latest best weight with at least the latest reps."""
        if not sessions:
            return []
        latest = sessions[0].best_set
        return cls._prefix_run(
            sessions,
            lambda s: s.best_set.weight == latest.weight
            and s.best_set.reps >= latest.reps,
        )

    @staticmethod
    def hit_target(session: ExerciseSession, rep_range: RepRange) -> bool:
        """True when every set with reps reached the top of the range."""
        working = [s for s in session.sets if s.reps > 0]
        if not working:
            return False
        return all(s.reps >= rep_range.max_reps for s in working)

    @classmethod
    def target_hit_run(
        cls,
        sessions: Sequence[ExerciseSession],
        rep_range: RepRange | None,
    ) -> list[ExerciseSession]:
        """Same-weight sessions that topped out the rep range."""
        if rep_range is None:
            return []
        return cls._prefix_run(
            cls.same_weight_run(sessions),
            lambda s: cls.hit_target(s, rep_range),
        )
