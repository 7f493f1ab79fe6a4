"""Candidate Generator — every physically valid way to play a beat.

Two deterministic steps:
    fingerings_for – all (string, fret) pairs that sound one pitch
    combos_for     – all distinct-string assignments for a beat's pitches

No costs live here; see :mod:`cost_model`.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from .guitar import Guitar
from .pitch import Pitch
from .string_number import StringNumber


@dataclass(frozen=True, order=True)
class Fingering:
    """One pitch played on one string at one fret (0 = open)."""

    pitch: Pitch
    string_number: StringNumber
    fret: int

    @property
    def is_open(self) -> bool:
        return self.fret == 0


@dataclass(frozen=True)
class BeatCombo:
    """One assignment of a fingering to every pitch of a beat.

    No two fingerings share a string.  The reach statistics are derived once
    at construction:

        non_zero_fret_span – highest minus lowest fretted (nonzero) fret
        avg_non_zero_fret  – mean fretted fret, ``None`` when all open
        open_string_count  – number of open-string fingerings
    """

    fingerings: tuple[Fingering, ...]
    non_zero_fret_span: int = field(init=False, compare=False)
    avg_non_zero_fret: float | None = field(init=False, compare=False)
    open_string_count: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        fretted = [f.fret for f in self.fingerings if f.fret != 0]
        span = max(fretted) - min(fretted) if fretted else 0
        avg = float(np.mean(fretted)) if fretted else None
        object.__setattr__(self, "non_zero_fret_span", span)
        object.__setattr__(self, "avg_non_zero_fret", avg)
        object.__setattr__(self, "open_string_count", len(self.fingerings) - len(fretted))

    @property
    def is_chord(self) -> bool:
        return len(self.fingerings) > 1

    @property
    def strings(self) -> tuple[StringNumber, ...]:
        return tuple(f.string_number for f in self.fingerings)

    def __len__(self) -> int:
        return len(self.fingerings)


def fingerings_for(guitar: Guitar, pitch: Pitch) -> list[Fingering]:
    """List every fingering that sounds *pitch* on *guitar*.

    Args:
        guitar: The configured instrument.
        pitch: Pitch to locate.

    Returns:
        One :class:`Fingering` per string whose range contains *pitch*, in
        ascending string order.  Empty when the pitch is unplayable; that is
        not an error at this layer.
    """
    fingerings: list[Fingering] = []
    for string_number in guitar.string_ranges:
        fret = guitar.fret_for(string_number, pitch)
        if fret is not None:
            fingerings.append(Fingering(pitch=pitch, string_number=string_number, fret=fret))
    return fingerings


def unique_pitches(pitches: Sequence[Pitch]) -> list[Pitch]:
    """Drop repeated pitches, keeping the first occurrence order."""
    return list(dict.fromkeys(pitches))


def combos_for(guitar: Guitar, pitches: Sequence[Pitch]) -> list[BeatCombo]:
    """Enumerate every distinct-string combo for a beat's simultaneous pitches.

    The per-pitch fingering lists are crossed in input order and tuples that
    reuse a string are discarded, so the result order is stable for identical
    input.

    Args:
        guitar: The configured instrument.
        pitches: Simultaneous pitches of one playable beat.  Repeats are
            collapsed first.

    Returns:
        Candidate combos; empty if any pitch is unplayable or every
        combination collides on a string.
    """
    options = [fingerings_for(guitar, pitch) for pitch in unique_pitches(pitches)]
    if not options:
        return []

    combos: list[BeatCombo] = []
    for candidate in itertools.product(*options):
        strings = {f.string_number for f in candidate}
        if len(strings) == len(candidate):
            combos.append(BeatCombo(tuple(candidate)))
    return combos
