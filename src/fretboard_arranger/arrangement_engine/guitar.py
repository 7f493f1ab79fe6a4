"""Guitar — the instrument model every downstream component consumes.

A :class:`Guitar` owns a tuning (string → open pitch), a fret count and an
optional capo, and derives at construction time:

    string_ranges – per string, the pitches at fret 0..=playable frets
    range         – the union of every string range

The object is immutable once built.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .errors import InvalidCapoError, TooManyFretsError, UnknownTuningError
from .pitch import Pitch
from .string_number import StringNumber

Tuning = Mapping[StringNumber, Pitch]

MAX_NUM_FRETS: int = 30


def create_string_tuning(open_pitches: Iterable[Pitch]) -> dict[StringNumber, Pitch]:
    """Number open pitches from string 1 (highest) upwards.

    Args:
        open_pitches: Open-string pitches, highest string first.

    Returns:
        An ordered ``StringNumber → Pitch`` mapping.
    """
    return {StringNumber(i): pitch for i, pitch in enumerate(open_pitches, start=1)}


def _tuning(*names: str) -> dict[StringNumber, Pitch]:
    return create_string_tuning(Pitch.from_name(name) for name in names)


# ── Named tunings (highest string first) ──────────────────────
TUNINGS: dict[str, dict[StringNumber, Pitch]] = {
    "standard": _tuning("E4", "B3", "G3", "D3", "A2", "E2"),
    "drop_d": _tuning("E4", "B3", "G3", "D3", "A2", "D2"),
    "half_step_down": _tuning("D#4", "A#3", "F#3", "C#3", "G#2", "D#2"),
    "open_g": _tuning("D4", "B3", "G3", "D3", "G2", "D2"),
    "open_d": _tuning("D4", "A3", "F#3", "D3", "A2", "D2"),
    "dadgad": _tuning("D4", "A3", "G3", "D3", "A2", "D2"),
}


def parse_tuning(name: str) -> dict[StringNumber, Pitch]:
    """Look up a named tuning (case-insensitive, ``-`` and spaces allowed).

    Raises:
        UnknownTuningError: If the name is not in :data:`TUNINGS`.
    """
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    if key not in TUNINGS:
        raise UnknownTuningError(
            f"Unknown tuning '{name}'. Known tunings: {', '.join(sorted(TUNINGS))}."
        )
    return dict(TUNINGS[key])


class Guitar:
    """Fretted-string instrument with a fixed tuning, fret count and capo.

    Args:
        tuning: ``StringNumber → Pitch`` mapping of open strings.
        num_frets: Frets on the neck (0..=30).
        capo: Fret the capo sits on (0 = no capo).  Open pitches are raised by
            ``capo`` semitones and only ``num_frets - capo`` frets remain
            playable; fret numbers are reported relative to the capo.

    Raises:
        TooManyFretsError: If ``num_frets`` exceeds 30, or a string's range
            would run past the top of the pitch space.
        InvalidCapoError: If the capo is negative or beyond the last fret.
    """

    def __init__(self, tuning: Tuning, num_frets: int, capo: int = 0) -> None:
        self._check_fret_number(num_frets)
        if not 0 <= capo <= num_frets:
            raise InvalidCapoError(
                f"Capo position ({capo}) must be between 0 and the number of frets ({num_frets})."
            )

        self.num_frets: int = num_frets
        self.capo: int = capo
        self.playable_frets: int = num_frets - capo

        ordered = dict(sorted(tuning.items()))
        self.tuning: Mapping[StringNumber, Pitch] = MappingProxyType(ordered)

        string_ranges: dict[StringNumber, tuple[Pitch, ...]] = {}
        for string_number, open_pitch in ordered.items():
            string_ranges[string_number] = self._create_string_range(
                open_pitch, capo, self.playable_frets
            )
        self.string_ranges: Mapping[StringNumber, tuple[Pitch, ...]] = MappingProxyType(
            string_ranges
        )
        self.range: frozenset[Pitch] = frozenset(
            pitch for string_range in string_ranges.values() for pitch in string_range
        )

    @classmethod
    def standard(cls, num_frets: int = 18, capo: int = 0) -> Guitar:
        return cls(TUNINGS["standard"], num_frets, capo)

    @staticmethod
    def _check_fret_number(num_frets: int) -> None:
        if num_frets < 0:
            raise TooManyFretsError(f"The number of frets ({num_frets}) cannot be negative.")
        if num_frets > MAX_NUM_FRETS:
            raise TooManyFretsError(
                f"Too many frets ({num_frets}). The maximum is {MAX_NUM_FRETS}."
            )

    @staticmethod
    def _create_string_range(open_pitch: Pitch, capo: int, num_frets: int) -> tuple[Pitch, ...]:
        """Pitches at fret 0..=num_frets above the (capoed) open pitch."""
        highest = Pitch.highest()
        lowest_index = open_pitch.index + capo
        if lowest_index + num_frets > highest.index:
            # Capo included in the fret count the user asked for.
            requested = num_frets + capo
            highest_fret = highest - open_pitch
            raise TooManyFretsError(
                f"Too many frets ({requested}) for string starting at pitch {open_pitch}. "
                f"The highest pitch is {highest}, which would only exist at fret number "
                f"{highest_fret}."
            )
        return tuple(Pitch(i) for i in range(lowest_index, lowest_index + num_frets + 1))

    def fret_for(self, string_number: StringNumber, pitch: Pitch) -> int | None:
        """Fret producing *pitch* on *string_number*, or ``None`` if out of range."""
        string_range = self.string_ranges[string_number]
        fret = pitch - string_range[0]
        if 0 <= fret < len(string_range):
            return fret
        return None

    @property
    def num_strings(self) -> int:
        return len(self.tuning)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Guitar):
            return NotImplemented
        return (
            dict(self.tuning) == dict(other.tuning)
            and self.num_frets == other.num_frets
            and self.capo == other.capo
        )

    def __hash__(self) -> int:
        return hash((tuple(self.tuning.items()), self.num_frets, self.capo))

    def __repr__(self) -> str:
        strings = ", ".join(f"{int(s)}={p}" for s, p in self.tuning.items())
        return f"Guitar({strings}; frets={self.num_frets}, capo={self.capo})"
