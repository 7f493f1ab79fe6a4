"""Pitch space: the 120 semitones from C0 to B9.

A :class:`Pitch` is a thin, immutable wrapper around a zero-based index
(C0 = 0, B9 = 119).  Ordering, hashing and subtraction all work on that
index, so the rest of the engine never dispatches on note names.

Spelling is a display concern: names are parsed from either sharp or flat
spellings and always printed with sharps.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Iterator

from .errors import PitchOutOfRangeError

SEMITONES_PER_OCTAVE: int = 12
NUM_OCTAVES: int = 10

# ── Spelling tables ───────────────────────────────────────────
_SHARP_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
_FLAT_NAMES: list[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

_NAME_TO_CLASS: dict[str, int] = {}
for _pc, (_sharp, _flat) in enumerate(zip(_SHARP_NAMES, _FLAT_NAMES)):
    _NAME_TO_CLASS[_sharp.upper()] = _pc
    _NAME_TO_CLASS[_flat.upper()] = _pc

_PITCH_RE = re.compile(
    r"^(?P<letter>[A-G])(?P<accidental>[#♯b♭]?)(?P<octave>[0-9])$", re.IGNORECASE
)


@dataclass(frozen=True, order=True)
class Pitch:
    """A semitone-indexed pitch.

    Args:
        index: Zero-based semitone index (0 = C0, 119 = B9).

    Raises:
        PitchOutOfRangeError: If *index* is outside ``0..=MAX_INDEX``.
    """

    index: int

    MAX_INDEX: ClassVar[int] = SEMITONES_PER_OCTAVE * NUM_OCTAVES - 1

    def __post_init__(self) -> None:
        if not 0 <= self.index <= self.MAX_INDEX:
            raise PitchOutOfRangeError(
                f"Pitch index {self.index} is outside the range 0..={self.MAX_INDEX}."
            )

    # ── Construction ──────────────────────────────────────────

    @classmethod
    def from_name(cls, name: str) -> Pitch:
        """Parse a name such as ``"E2"``, ``"c#4"`` or ``"Bb3"``.

        Raises:
            PitchOutOfRangeError: If the name is not a valid spelling.
        """
        match = _PITCH_RE.match(name.strip())
        if match is None:
            raise PitchOutOfRangeError(f"'{name}' is not a valid pitch name.")

        accidental = match["accidental"].lower().replace("♯", "#").replace("♭", "b")
        spelling = (match["letter"] + accidental).upper()
        pitch_class = _NAME_TO_CLASS.get(spelling)
        if pitch_class is None:
            # e.g. Fb, E#, Cb, B#
            raise PitchOutOfRangeError(f"'{name}' is not a valid pitch name.")

        return cls(int(match["octave"]) * SEMITONES_PER_OCTAVE + pitch_class)

    @classmethod
    def all(cls) -> Iterator[Pitch]:
        """Enumerate every pitch from C0 to B9 in ascending order."""
        for index in range(cls.MAX_INDEX + 1):
            yield cls(index)

    @classmethod
    def highest(cls) -> Pitch:
        return cls(cls.MAX_INDEX)

    # ── Properties ────────────────────────────────────────────

    @property
    def octave(self) -> int:
        return self.index // SEMITONES_PER_OCTAVE

    @property
    def pitch_class(self) -> int:
        return self.index % SEMITONES_PER_OCTAVE

    @property
    def midi_number(self) -> int:
        """MIDI note number (C4 = 60)."""
        return self.index + SEMITONES_PER_OCTAVE

    def plain_text(self) -> str:
        return f"{_SHARP_NAMES[self.pitch_class]}{self.octave}"

    # ── Arithmetic ────────────────────────────────────────────

    def __sub__(self, other: Pitch) -> int:
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.index - other.index

    def __add__(self, semitones: int) -> Pitch:
        if not isinstance(semitones, int):
            return NotImplemented
        return Pitch(self.index + semitones)

    def __str__(self) -> str:
        return self.plain_text()

    def __repr__(self) -> str:
        return f"Pitch({self.plain_text()})"
