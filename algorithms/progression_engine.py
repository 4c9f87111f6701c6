from __future__ import annotations
import logging
from typing import Sequence

from models import (
    ExerciseSession,
    LastPerformance,
    ProgressionResult,
    ProgressionSuggestion,
    RepRange,
    SuggestionType,
)
from .consistency import ConsistencyAnalyzer
from .effort import EffortAggregator
from .rep_range import RepRangeParser
from .weight_rounder import WeightRounder

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """Decide what to attempt next on an exercise from its recent history.

    ``sessions`` must be sorted newest-first; the order is not checked.
    Inputs are never validated or modified, so malformed history produces
    an odd but well-defined suggestion.
    """

    MIN_RUN: int = 2
    DELOAD_FACTOR: float = 0.9
    LOW_EFFORT: float = 6.0
    TARGET_HIT_MAX_EFFORT: float = 8.0

    @classmethod
    def suggest(
        cls,
        sessions: Sequence[ExerciseSession],
        target_reps: str | None = None,
    ) -> ProgressionResult | None:
        """Return the last performance and next-session suggestion.

        Returns ``None`` when ``sessions`` is empty.
        """
        if not sessions:
            return None
        latest = sessions[0]
        best = latest.best_set
        suggestion = cls._decide(sessions, RepRangeParser.parse(target_reps))
        logger.debug(
            "Suggestion for %s%s x %s: %s",
            best.weight,
            best.unit,
            best.reps,
            suggestion.type.value,
        )
        return ProgressionResult(
            last_session=LastPerformance(
                weight=best.weight,
                reps=best.reps,
                rpe=best.rpe,
                date=latest.date,
                unit=best.unit,
            ),
            suggestion=suggestion,
        )

    @classmethod
    def _decide(
        cls, sessions: Sequence[ExerciseSession], rep_range: RepRange | None
    ) -> ProgressionSuggestion:
        best = sessions[0].best_set
        weight, reps, unit = best.weight, best.reps, best.unit

        same_weight = ConsistencyAnalyzer.same_weight_run(sessions)
        same_reps = ConsistencyAnalyzer.same_weight_reps_run(sessions)
        target_hit = ConsistencyAnalyzer.target_hit_run(sessions, rep_range)
        avg_rpe = EffortAggregator.average_effort(same_weight)
        reset_reps = rep_range.min_reps if rep_range is not None else reps

        if EffortAggregator.sustained_maximal(sessions):
            return ProgressionSuggestion(
                type=SuggestionType.DELOAD,
                target_weight=WeightRounder.deload_weight(
                    weight, unit, cls.DELOAD_FACTOR
                ),
                target_reps=reset_reps,
                rationale="RPE 10 in repeated recent sessions. Reduce weight by 10% to recover.",
            )

        if len(target_hit) >= cls.MIN_RUN and (
            avg_rpe is None or avg_rpe <= cls.TARGET_HIT_MAX_EFFORT
        ):
            return ProgressionSuggestion(
                type=SuggestionType.INCREASE_WEIGHT,
                target_weight=WeightRounder.increased_weight(weight, unit),
                target_reps=reset_reps,
                rationale=(
                    f"Hit {rep_range.max_reps} reps for {len(target_hit)} sessions "
                    "in a row. Time to add weight."
                ),
            )

        if (
            len(same_weight) >= cls.MIN_RUN
            and avg_rpe is not None
            and avg_rpe <= cls.LOW_EFFORT
        ):
            return ProgressionSuggestion(
                type=SuggestionType.INCREASE_WEIGHT,
                target_weight=WeightRounder.increased_weight(weight, unit),
                target_reps=reset_reps,
                rationale=f"Average RPE {avg_rpe:.1f} at this weight. The load is too easy, add weight.",
            )

        if (
            not EffortAggregator.has_effort_data(same_weight)
            and len(same_reps) >= cls.MIN_RUN
        ):
            return ProgressionSuggestion(
                type=SuggestionType.INCREASE_WEIGHT,
                target_weight=WeightRounder.increased_weight(weight, unit),
                target_reps=reps,
                rationale=f"Matched {reps} reps at this weight for {len(same_reps)} sessions. Ready to add weight.",
            )

        if EffortAggregator.high_effort(sessions):
            return ProgressionSuggestion(
                type=SuggestionType.HOLD,
                target_weight=weight,
                target_reps=reps,
                rationale="High RPE detected. Hold weight and reps, focus on form and recovery.",
            )

        if rep_range is not None and reps < rep_range.max_reps:
            return ProgressionSuggestion(
                type=SuggestionType.INCREASE_REPS,
                target_weight=weight,
                target_reps=min(reps + 1, rep_range.max_reps),
                rationale=f"Work toward {rep_range.max_reps} reps before adding weight.",
            )

        if len(same_weight) >= cls.MIN_RUN:
            detail = f" (average RPE {avg_rpe:.1f})" if avg_rpe is not None else ""
            return ProgressionSuggestion(
                type=SuggestionType.INCREASE_REPS,
                target_weight=weight,
                target_reps=reps + 1,
                rationale=f"{len(same_weight)} sessions at this weight{detail}. Try adding a rep.",
            )

        if best.rpe is not None:
            rationale = f"Last session RPE {best.rpe}. Continue building consistency."
        else:
            rationale = "Continue building consistency at this weight."
        return ProgressionSuggestion(
            type=SuggestionType.HOLD,
            target_weight=weight,
            target_reps=reps,
            rationale=rationale,
        )
