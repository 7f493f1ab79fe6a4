"""StringNumber — validated 1-based guitar string identifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .errors import InvalidStringNumberError


@dataclass(frozen=True, order=True)
class StringNumber:
    """A guitar string number, 1 (highest) up to :attr:`MAX_NUM_STRINGS`.

    Raises:
        InvalidStringNumberError: For 0 or values above the maximum.
    """

    value: int

    MAX_NUM_STRINGS: ClassVar[int] = 12

    def __post_init__(self) -> None:
        if self.value == 0:
            raise InvalidStringNumberError(
                "A guitar cannot have a string number of zero (0). "
                "Guitar string numbering commences at one (1)."
            )
        if self.value < 0:
            raise InvalidStringNumberError(
                f"The string number ({self.value}) must be positive."
            )
        if self.value > self.MAX_NUM_STRINGS:
            raise InvalidStringNumberError(
                f"The string number ({self.value}) is too high. "
                f"The maximum is {self.MAX_NUM_STRINGS}."
            )

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"StringNumber({self.value})"
