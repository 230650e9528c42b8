"""Roll number ranges.

A roll number is a fixed prefix followed by a zero-padded numeric suffix,
e.g. ``A2021B0007``. A range is given by its first and last roll number; the
prefix is taken from the first one and the bounds from the trailing digits
of both.
"""

from dataclasses import dataclass
from typing import Iterator

from rollfetch.core.exceptions import ValidationError

DEFAULT_WIDTH = 4


def compose(prefix: str, number: int, width: int = DEFAULT_WIDTH) -> str:
    """Return ``prefix`` followed by ``number`` zero-padded to ``width``."""
    if number < 0 or number >= 10**width:
        raise ValueError(
            f"{number} does not fit in a {width}-digit roll number suffix"
        )
    return f"{prefix}{number:0{width}d}"


@dataclass(frozen=True)
class IdentifierRange:
    """Inclusive range of roll numbers sharing one prefix."""

    prefix: str
    start_num: int
    end_num: int
    width: int = DEFAULT_WIDTH

    @classmethod
    def from_rolls(
        cls, start_roll: str, end_roll: str, width: int = DEFAULT_WIDTH
    ) -> "IdentifierRange":
        """
        Build a range from the first and last roll number.

        Raises:
            ValidationError: If either roll number is too short, its trailing
                ``width`` characters are not digits, the two roll numbers
                differ in length, or the start lies after the end.
        """
        start_roll = start_roll.strip()
        end_roll = end_roll.strip()

        for label, roll in (("startRoll", start_roll), ("endRoll", end_roll)):
            suffix = roll[-width:]
            if len(roll) < width or not (suffix.isascii() and suffix.isdigit()):
                raise ValidationError(
                    f"{label} must end with {width} digits, got {roll!r}"
                )

        if len(start_roll) != len(end_roll):
            raise ValidationError(
                "startRoll and endRoll must have the same length"
            )

        start_num = int(start_roll[-width:])
        end_num = int(end_roll[-width:])
        if start_num > end_num:
            raise ValidationError(
                f"startRoll {start_roll} comes after endRoll {end_roll}"
            )

        return cls(
            prefix=start_roll[:-width],
            start_num=start_num,
            end_num=end_num,
            width=width,
        )

    def __len__(self) -> int:
        return self.end_num - self.start_num + 1

    def __iter__(self) -> Iterator[str]:
        for number in range(self.start_num, self.end_num + 1):
            yield compose(self.prefix, number, self.width)

    @property
    def first(self) -> str:
        return compose(self.prefix, self.start_num, self.width)

    @property
    def last(self) -> str:
        return compose(self.prefix, self.end_num, self.width)
