"""Arrangement — validate beats, search, and package the chosen fingerings.

Responsibilities:
    1. Check every playable beat against the guitar, collecting *all*
       unplayable pitches (then all unplayable chords) before failing.
    2. Build one candidate layer per playable beat.
    3. Run the solver for the N cheapest routes.
    4. Re-insert rests and measure breaks so each :class:`Arrangement`
       mirrors the input beat sequence.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from ..logging import log
from .beats import Beat, LineKind
from .candidates import BeatCombo, combos_for, fingerings_for, unique_pitches
from .cost_model import ArrangementCostModel
from .errors import InvalidInput, NoPathFoundError, UnplayableChordError, UnplayablePitchError
from .guitar import Guitar
from .solver import solve

# A resolved line: the chosen combo, or the REST / MEASURE_BREAK marker.
ArrangedLine = Union[BeatCombo, LineKind]


@dataclass(frozen=True)
class Arrangement:
    """One fully fingered version of the input.

    Attributes:
        lines: One entry per input beat; a :class:`BeatCombo` for playable
            beats, ``LineKind.REST`` / ``LineKind.MEASURE_BREAK`` otherwise.
        cost:  Total ergonomic cost of the route.
    """

    lines: tuple[ArrangedLine, ...]
    cost: int

    @property
    def combos(self) -> list[BeatCombo]:
        return [line for line in self.lines if isinstance(line, BeatCombo)]

    def max_fret_span(self) -> int:
        """Widest fretted span of any chosen combo (0 if none)."""
        return max((combo.non_zero_fret_span for combo in self.combos), default=0)


def validate_fingerings(
    guitar: Guitar, beats: Sequence[Beat]
) -> list[list[BeatCombo]]:
    """Build the candidate layers, failing with every problem at once.

    Args:
        guitar: The configured instrument.
        beats: The full beat sequence (rests and breaks are skipped).

    Returns:
        One non-empty list of candidate combos per playable beat.

    Raises:
        UnplayablePitchError: Some pitch has no fingering anywhere; lists
            every such pitch with its line, in beat order.
        UnplayableChordError: All pitches are playable but some chords
            cannot avoid putting two pitches on one string.
    """
    impossible_pitches: list[InvalidInput] = []
    for beat in beats:
        if not beat.is_playable:
            continue
        for pitch in beat.pitches:
            if not fingerings_for(guitar, pitch):
                impossible_pitches.append(InvalidInput(pitch.plain_text(), beat.line_number))

    if impossible_pitches:
        log.info("validation_failed", reason="unplayable_pitch", count=len(impossible_pitches))
        raise UnplayablePitchError(impossible_pitches)

    layers: list[list[BeatCombo]] = []
    impossible_chords: list[InvalidInput] = []
    for beat in beats:
        if not beat.is_playable:
            continue
        combos = combos_for(guitar, beat.pitches)
        if not combos:
            names = "".join(p.plain_text() for p in unique_pitches(beat.pitches))
            impossible_chords.append(InvalidInput(names, beat.line_number))
        layers.append(combos)

    if impossible_chords:
        log.info("validation_failed", reason="unplayable_chord", count=len(impossible_chords))
        raise UnplayableChordError(impossible_chords)

    return layers


def create_arrangements(
    guitar: Guitar,
    beats: Sequence[Beat],
    num_arrangements: int,
    cost_model: ArrangementCostModel | None = None,
    require_result: bool = False,
    max_workers: int | None = None,
) -> list[Arrangement]:
    """Produce the *num_arrangements* cheapest arrangements of *beats*.

    Args:
        guitar: The configured instrument.
        beats: Input beats in order.
        num_arrangements: Maximum number of arrangements to return.
        cost_model: Cost weights; the packaged defaults when ``None``.
        require_result: Raise :class:`NoPathFoundError` instead of returning
            an empty list.
        max_workers: Thread-pool size for the search (``1`` = sequential).

    Returns:
        Arrangements ordered by ascending cost.  Beats with no playable
        content yield a single arrangement of cost 0.
    """
    if cost_model is None:
        cost_model = ArrangementCostModel()

    layers = validate_fingerings(guitar, beats)
    paths = solve(layers, cost_model, num_arrangements, max_workers=max_workers)

    if not paths and require_result and num_arrangements > 0:
        raise NoPathFoundError(
            "No arrangement exists: some adjacent beats cannot be played one after the other."
        )

    arrangements: list[Arrangement] = []
    for path in paths:
        chosen = iter(layer[i] for layer, i in zip(layers, path.indices))
        lines: list[ArrangedLine] = [
            next(chosen) if beat.is_playable else beat.kind for beat in beats
        ]
        arrangements.append(Arrangement(tuple(lines), path.cost))

    log.info(
        "arrangements_created",
        beats=len(beats),
        playable=len(layers),
        requested=num_arrangements,
        found=len(arrangements),
    )
    return arrangements
