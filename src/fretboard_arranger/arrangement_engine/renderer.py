"""Renderer — ASCII tablature for a resolved arrangement.

Example (standard tuning, padding 2, width 30, playback index 3)::

               ▼
    --------------------|--0------
    -----------------0--|---------
    --------------0-----|---------
    --------0-----------|---------
    -----0--------------|---------
    --0-----------------|---------
               ▲

String 1 is the top line.  Each beat is one column; columns are packed into
rows no wider than ``width`` and rows are separated by a blank line.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .arrangement import ArrangedLine
from .beats import LineKind
from .candidates import BeatCombo
from .guitar import Guitar

PLAYBACK_TOP: str = "▼"
PLAYBACK_BOTTOM: str = "▲"


@dataclass(frozen=True)
class _Column:
    cells: list[str]  # one per string, top string first
    marker_offset: int

    @property
    def width(self) -> int:
        return len(self.cells[0])


def _render_column(line: ArrangedLine, guitar: Guitar, padding: int) -> _Column:
    pad = "-" * padding
    num_strings = guitar.num_strings

    if line is LineKind.MEASURE_BREAK:
        return _Column([pad + "|"] * num_strings, padding)
    if line is LineKind.REST or not isinstance(line, BeatCombo):
        return _Column([pad + "-"] * num_strings, padding)

    frets = {f.string_number: str(f.fret) for f in line.fingerings}
    fret_width = max(len(text) for text in frets.values())
    cells = [
        pad + frets.get(string_number, "").rjust(fret_width, "-")
        for string_number in guitar.tuning
    ]
    return _Column(cells, padding + fret_width - 1)


def _pack_rows(columns: list[_Column], width: int) -> list[list[int]]:
    rows: list[list[int]] = []
    row_width = 0
    for idx, column in enumerate(columns):
        if rows and row_width + column.width <= width:
            rows[-1].append(idx)
            row_width += column.width
        else:
            rows.append([idx])
            row_width = column.width
    return rows


def render_tab(
    lines: Sequence[ArrangedLine],
    guitar: Guitar,
    width: int,
    padding: int,
    playback_index: int | None = None,
) -> str:
    """Render arranged lines as ASCII tab.

    Args:
        lines: Resolved beats (combos, rests, measure breaks).
        guitar: Supplies the string count and order.
        width: Maximum characters per row; rows are dash-filled to it.
        padding: Dashes placed before every column.
        playback_index: Optional beat index to mark with ``▼`` / ``▲``.

    Returns:
        The tab text, ``""`` when there is nothing playable.
    """
    if not any(isinstance(line, BeatCombo) for line in lines):
        return ""

    columns = [_render_column(line, guitar, padding) for line in lines]
    rendered_rows: list[str] = []

    for row in _pack_rows(columns, width):
        marker: int | None = None
        offset = 0
        for idx in row:
            if idx == playback_index:
                marker = offset + columns[idx].marker_offset
            offset += columns[idx].width
        fill = "-" * max(width - offset, 0)

        text = ""
        if marker is not None:
            text += " " * marker + PLAYBACK_TOP + "\n"
        for string_idx in range(guitar.num_strings):
            text += "".join(columns[idx].cells[string_idx] for idx in row) + fill + "\n"
        if marker is not None:
            text += " " * marker + PLAYBACK_BOTTOM + "\n"
        rendered_rows.append(text)

    return "\n".join(rendered_rows)
