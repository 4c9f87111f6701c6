import math


class WeightRounder:
    """Round suggested loads to plates that actually exist."""

    ROUNDING_INCREMENT = {"kg": 1.0, "lb": 2.5}
    STANDARD_INCREMENT = {"kg": 2.5, "lb": 5.0}

    @staticmethod
    def round_weight(weight: float, unit: str) -> float:
        """Round ``weight`` to the nearest practical increment, halves up."""
        increment = WeightRounder.ROUNDING_INCREMENT[unit]
        return float(math.floor(weight / increment + 0.5) * increment)

    @staticmethod
    def increased_weight(weight: float, unit: str) -> float:
        """Return ``weight`` plus one standard jump, rounded."""
        return WeightRounder.round_weight(
            weight + WeightRounder.STANDARD_INCREMENT[unit], unit
        )

    @staticmethod
    def deload_weight(weight: float, unit: str, factor: float = 0.9) -> float:
        return WeightRounder.round_weight(weight * factor, unit)
