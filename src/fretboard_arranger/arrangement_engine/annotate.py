"""Annotator — orchestrate the full arrangement pipeline and export results.

Responsibilities:
    1. Call the text parser to turn pitch input into beats.
    2. Build the guitar from the configured tuning, frets and capo.
    3. Call the arrangement engine for the N cheapest fingerings.
    4. Render each arrangement as ASCII tab.
    5. Save ``<stem>_arrangements.json`` (default: ``data/arrangements/``).
    6. Return the compositions for programmatic use.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from ..config import ArrangerConfig
from ..logging import log
from .arrangement import Arrangement, create_arrangements
from .beats import Beat
from .candidates import BeatCombo
from .cost_model import ArrangementCostModel
from .guitar import Guitar, parse_tuning
from .renderer import render_tab
from .text_parser import parse_file, parse_lines, trim_leading_silence


@dataclass(frozen=True)
class Composition:
    """A rendered arrangement ready for display or serialisation."""

    tab: str
    pitches: list[list[str]]
    fingerings: list[list[dict[str, Any]]]
    max_fret_span: int
    cost: int


def _fingering_rows(arrangement: Arrangement) -> list[list[dict[str, Any]]]:
    rows: list[list[dict[str, Any]]] = []
    for line in arrangement.lines:
        if isinstance(line, BeatCombo):
            rows.append(
                [
                    {
                        "pitch": f.pitch.plain_text(),
                        "string": int(f.string_number),
                        "fret": f.fret,
                    }
                    for f in line.fingerings
                ]
            )
        else:
            rows.append([])
    return rows


def build_guitar(config: ArrangerConfig) -> Guitar:
    return Guitar(parse_tuning(config.tuning_name), config.num_frets, config.capo)


def create_compositions(
    beats: list[Beat], config: ArrangerConfig | None = None
) -> list[Composition]:
    """Arrange and render parsed beats according to *config*.

    Leading rests and measure breaks are dropped first.  Input with no
    playable beats yields one composition with an empty tab.

    Args:
        beats: Parsed input beats.
        config: Request settings; defaults when ``None``.

    Returns:
        Compositions ordered by ascending cost.
    """
    config = config or ArrangerConfig()
    beats = trim_leading_silence(beats)
    guitar = build_guitar(config)
    cost_model = ArrangementCostModel(config.cost_config, config.open_string_cost)

    arrangements = create_arrangements(
        guitar,
        beats,
        config.num_arrangements,
        cost_model=cost_model,
        max_workers=config.max_workers,
    )

    pitches = [beat.plain_text() for beat in beats]
    return [
        Composition(
            tab=render_tab(
                arrangement.lines,
                guitar,
                config.width,
                config.padding,
                config.playback_index,
            ),
            pitches=pitches,
            fingerings=_fingering_rows(arrangement),
            max_fret_span=arrangement.max_fret_span(),
            cost=arrangement.cost,
        )
        for arrangement in arrangements
    ]


def create_compositions_from_text(
    text: str, config: ArrangerConfig | None = None
) -> list[Composition]:
    """Convenience wrapper: parse text → arrange → render."""
    return create_compositions(parse_lines(text), config)


def annotate(
    input_path: str | Path,
    output_dir: str | Path | None = None,
    config: ArrangerConfig | None = None,
) -> list[Composition]:
    """Run the full arrangement pipeline on a pitch text file.

    Args:
        input_path: Path to the UTF-8 pitch file.
        output_dir: Directory for the JSON export.
            Defaults to ``data/arrangements/`` under the current directory.
        config: Request settings; defaults when ``None``.

    Returns:
        The compositions, also written to ``<stem>_arrangements.json``.
    """
    input_path = Path(input_path)
    output_dir = Path("data/arrangements") if output_dir is None else Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    compositions = create_compositions(parse_file(input_path), config)

    json_path = output_dir / f"{input_path.stem}_arrangements.json"
    json_path.write_bytes(compositions_to_json_bytes(compositions))
    log.info("arrangements_saved", path=str(json_path), count=len(compositions))

    return compositions


def compositions_to_json_bytes(compositions: list[Composition]) -> bytes:
    """Serialise compositions to UTF-8 JSON bytes (for download buttons)."""
    payload = [asdict(c) for c in compositions]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
