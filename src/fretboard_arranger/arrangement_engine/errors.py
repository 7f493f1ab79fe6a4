"""Errors raised by the arrangement engine.

Every error is a ``ValueError`` subclass so callers that only care about
"bad input" can catch one type.  Aggregating errors (unplayable pitches,
unplayable chords, parse failures) carry the individual entries in
``invalid_inputs`` alongside the joined, human-readable message.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InvalidInput:
    """One offending value and the 1-based input line it came from."""

    value: str
    line_number: int


class ArrangementError(ValueError):
    """Base class for all arrangement-engine errors."""


class InvalidStringNumberError(ArrangementError):
    """String number outside 1..=12."""


class TooManyFretsError(ArrangementError):
    """Fret count above the maximum, or beyond the pitch space for a string."""


class InvalidCapoError(ArrangementError):
    """Capo placed beyond the last fret."""


class PitchOutOfRangeError(ArrangementError):
    """Pitch index or name outside C0..B9."""


class UnknownTuningError(ArrangementError):
    """Tuning name not in the named-tuning table."""


class NoPathFoundError(ArrangementError):
    """No end-to-end arrangement exists for the given beats."""


class _AggregatedError(ArrangementError):
    template: str = "{value} on line {line_number}"

    def __init__(self, invalid_inputs: list[InvalidInput]) -> None:
        self.invalid_inputs = list(invalid_inputs)
        super().__init__(
            "\n".join(
                self.template.format(value=i.value, line_number=i.line_number)
                for i in self.invalid_inputs
            )
        )


class UnplayablePitchError(_AggregatedError):
    """One or more pitches have no fingering on the configured guitar."""

    template = (
        "Pitch {value} on line {line_number} cannot be played on any strings "
        "of the configured guitar."
    )


class UnplayableChordError(_AggregatedError):
    """One or more chords cannot be fingered without sharing a string."""

    template = (
        "Chord {value} on line {line_number} cannot be played without "
        "two pitches sharing a string."
    )


class ParseError(_AggregatedError):
    """One or more input fragments could not be parsed into pitches."""

    template = "Input '{value}' on line {line_number} could not be parsed into a pitch."
