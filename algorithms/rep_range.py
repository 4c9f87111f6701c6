import re

from models import RepRange


class RepRangeParser:
    """Parse free-form rep targets such as ``"8-12"`` or ``"10"``."""

    RANGE_PATTERN = re.compile(r"(\d+)\s*-\s*(\d+)")
    INT_PATTERN = re.compile(r"\d+")

    @classmethod
    def parse(cls, text: str | None) -> RepRange | None:
        """Return the parsed range or ``None`` when no target can be read.

        A hyphenated pair is taken as ``min-max`` without checking the order,
        so ``"12-8"`` yields an inverted range.
        """
        if not text:
            return None
        match = cls.RANGE_PATTERN.search(text)
        if match:
            return RepRange(min_reps=int(match.group(1)), max_reps=int(match.group(2)))
        numbers = cls.INT_PATTERN.findall(text)
        if len(numbers) == 1:
            value = int(numbers[0])
            return RepRange(min_reps=value, max_reps=value)
        return None
