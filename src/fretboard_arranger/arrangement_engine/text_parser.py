"""Text Parser — turn plain-text pitch input into structured beats.

Input format, one beat per line:
    - ``//`` starts a comment; whitespace is ignored
    - an empty line is a rest
    - a line of only ``-`` (or only ``–``, or only ``—``) is a measure break
    - anything else is a run of pitches (``G#2A4 E3``) sounded together

Every unparsable fragment on every line is collected before failing, so
one :class:`ParseError` reports them all.

No fingering logic lives here.
"""

from __future__ import annotations

import re
from pathlib import Path

from .beats import Beat
from .errors import InvalidInput, ParseError, PitchOutOfRangeError
from .pitch import Pitch

_PITCH_TOKEN_RE = re.compile(r"[A-G][#♯b♭][0-9]|[A-G][0-9]", re.IGNORECASE)
_MEASURE_BREAK_CHARS: list[set[str]] = [{"-"}, {"–"}, {"—"}]


def remove_comments(input_line: str) -> str:
    return input_line.split("//", 1)[0]


def remove_whitespace(input_line: str) -> str:
    return "".join(input_line.split())


def _is_measure_break(content: str) -> bool:
    return set(content) in _MEASURE_BREAK_CHARS


def _consecutive_runs(indices: list[int]) -> list[list[int]]:
    """Group sorted indices into runs of consecutive integers."""
    runs: list[list[int]] = []
    for idx in indices:
        if runs and runs[-1][-1] + 1 == idx:
            runs[-1].append(idx)
        else:
            runs.append([idx])
    return runs


def _parse_pitches(content: str, line_number: int) -> tuple[list[Pitch], list[InvalidInput]]:
    pitches: list[Pitch] = []
    matched: set[int] = set()
    for match in _PITCH_TOKEN_RE.finditer(content):
        try:
            pitches.append(Pitch.from_name(match.group()))
        except PitchOutOfRangeError:
            # e.g. "Fb3": looks like a pitch but has no such spelling
            continue
        matched.update(range(match.start(), match.end()))

    unmatched = [i for i in range(len(content)) if i not in matched]
    errors = [
        InvalidInput(content[run[0] : run[-1] + 1], line_number)
        for run in _consecutive_runs(unmatched)
    ]
    return pitches, errors


def parse_line(line_index: int, input_line: str) -> tuple[Beat | None, list[InvalidInput]]:
    """Parse one line (``line_index`` is 0-based).

    Returns:
        The beat (``None`` if the line had errors) and any invalid fragments.
    """
    line_number = line_index + 1
    content = remove_whitespace(remove_comments(input_line))

    if not content:
        return Beat.rest(line_number), []
    if _is_measure_break(content):
        return Beat.measure_break(line_number), []

    pitches, errors = _parse_pitches(content, line_number)
    if errors:
        return None, errors
    return Beat.playable(pitches, line_number), []


def parse_lines(text: str) -> list[Beat]:
    """Parse a whole input text into beats.

    Args:
        text: Multi-line pitch input.

    Returns:
        One :class:`Beat` per input line.

    Raises:
        ParseError: If any fragment on any line is not a pitch.
    """
    beats: list[Beat] = []
    errors: list[InvalidInput] = []
    for line_index, input_line in enumerate(text.splitlines()):
        beat, line_errors = parse_line(line_index, input_line)
        errors.extend(line_errors)
        if beat is not None:
            beats.append(beat)

    if errors:
        raise ParseError(errors)
    return beats


def parse_file(path: str | Path) -> list[Beat]:
    """Read and parse a UTF-8 pitch file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ParseError: If the contents cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pitch file not found: {path}")
    return parse_lines(path.read_text(encoding="utf-8"))


def trim_leading_silence(beats: list[Beat]) -> list[Beat]:
    """Drop rests and measure breaks before the first playable beat.

    All-silent input is returned unchanged.
    """
    for i, beat in enumerate(beats):
        if beat.is_playable:
            return beats[i:]
    return beats
