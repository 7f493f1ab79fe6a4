"""Beat — one discrete position of the input sequence.

A beat is a rest, a measure break, or one-or-more simultaneous pitches.
Beats are produced by :mod:`text_parser` (or built directly by callers) and
never mutated; each carries the 1-based input line it came from.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .pitch import Pitch


class LineKind(str, Enum):
    REST = "REST"
    MEASURE_BREAK = "MEASURE_BREAK"
    PLAYABLE = "PLAYABLE"


@dataclass(frozen=True)
class Beat:
    """A rest, a measure break, or a playable note/chord.

    Attributes:
        kind:        Which of the three variants this beat is.
        pitches:     Simultaneous pitches; empty unless ``kind`` is PLAYABLE.
        line_number: 1-based source line, used in error messages.
    """

    kind: LineKind
    pitches: tuple[Pitch, ...] = ()
    line_number: int = 0

    def __post_init__(self) -> None:
        if self.kind is LineKind.PLAYABLE and not self.pitches:
            raise ValueError("A playable beat needs at least one pitch.")
        if self.kind is not LineKind.PLAYABLE and self.pitches:
            raise ValueError(f"A {self.kind.value} beat cannot carry pitches.")

    @classmethod
    def rest(cls, line_number: int = 0) -> Beat:
        return cls(LineKind.REST, (), line_number)

    @classmethod
    def measure_break(cls, line_number: int = 0) -> Beat:
        return cls(LineKind.MEASURE_BREAK, (), line_number)

    @classmethod
    def playable(cls, pitches: Iterable[Pitch], line_number: int = 0) -> Beat:
        return cls(LineKind.PLAYABLE, tuple(pitches), line_number)

    @property
    def is_playable(self) -> bool:
        return self.kind is LineKind.PLAYABLE

    @property
    def is_chord(self) -> bool:
        return len(self.pitches) > 1

    def plain_text(self) -> list[str]:
        """Per-beat names as shown to users (``REST`` / ``MEASURE_BREAK``)."""
        if self.is_playable:
            return [p.plain_text() for p in self.pitches]
        return [self.kind.value]
