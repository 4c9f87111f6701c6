from .rep_range import RepRangeParser
from .consistency import ConsistencyAnalyzer
from .effort import EffortAggregator
from .weight_rounder import WeightRounder
from .progression_engine import ProgressionEngine

__all__ = [
    "RepRangeParser",
    "ConsistencyAnalyzer",
    "EffortAggregator",
    "WeightRounder",
    "ProgressionEngine",
]
