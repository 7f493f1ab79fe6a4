"""Fretboard Arranger — command-line entry point.

    fretboard-arranger arrange song.txt --frets 20 -n 3
    fretboard-arranger tunings

The Streamlit app lives in ``app/streamlit_app.py``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from fretboard_arranger.arrangement_engine.annotate import annotate, create_compositions
from fretboard_arranger.arrangement_engine.guitar import TUNINGS
from fretboard_arranger.arrangement_engine.text_parser import parse_file
from fretboard_arranger.config import ArrangerConfig, load_config
from fretboard_arranger.logging import log, setup_logging

app = typer.Typer(help="Arrange pitch sequences into ranked guitar tablature.")

ARG_INPUT = typer.Argument(..., help="Pitch text file, one beat per line.")
OPT_CONFIG = typer.Option(None, "--config", help="YAML request config (overridden by flags).")
OPT_TUNING = typer.Option(None, "--tuning", help="Named tuning, e.g. standard, drop_d.")
OPT_FRETS = typer.Option(None, "--frets", help="Number of frets (0-30).")
OPT_CAPO = typer.Option(None, "--capo", help="Capo fret.")
OPT_NUM = typer.Option(None, "--num", "-n", help="How many arrangements to print.")
OPT_WIDTH = typer.Option(None, "--width", help="Tab row width in characters.")
OPT_PADDING = typer.Option(None, "--padding", help="Dashes before each column.")
OPT_OPEN_COST = typer.Option(None, "--open-string-cost", help="Cost per open string.")
OPT_JSON_OUT = typer.Option(None, "--json-out", help="Also write JSON to this folder.")
OPT_VERBOSE = typer.Option(False, "--verbose", "-v", help="Verbose JSON logs.")


@app.command()
def arrange(
    input_path: Path = ARG_INPUT,
    config_path: Path | None = OPT_CONFIG,
    tuning: str | None = OPT_TUNING,
    frets: int | None = OPT_FRETS,
    capo: int | None = OPT_CAPO,
    num: int | None = OPT_NUM,
    width: int | None = OPT_WIDTH,
    padding: int | None = OPT_PADDING,
    open_string_cost: int | None = OPT_OPEN_COST,
    json_out: Path | None = OPT_JSON_OUT,
    verbose: bool = OPT_VERBOSE,
) -> None:
    """Print the cheapest arrangements of INPUT_PATH as tab."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    overrides = {
        "tuning_name": tuning,
        "num_frets": frets,
        "capo": capo,
        "num_arrangements": num,
        "width": width,
        "padding": padding,
        "open_string_cost": open_string_cost,
    }

    # ArrangementError and pydantic's ValidationError are both ValueErrors
    try:
        base = load_config(config_path) if config_path else ArrangerConfig()
        config = ArrangerConfig(
            **{**base.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        )
        if json_out is not None:
            compositions = annotate(input_path, json_out, config)
        else:
            compositions = create_compositions(parse_file(input_path), config)
    except (ValueError, FileNotFoundError) as exc:
        log.error("arrange_failed", error=str(exc))
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if not compositions:
        typer.echo("No playable arrangement found.", err=True)
        raise typer.Exit(code=2)

    for rank, composition in enumerate(compositions, start=1):
        typer.echo(
            f"#{rank}  score: {composition.cost}  max fret span: {composition.max_fret_span}"
        )
        typer.echo(composition.tab)


@app.command()
def tunings() -> None:
    """List the named tunings."""
    for name, tuning in TUNINGS.items():
        typer.echo(f"{name:16s} {' '.join(str(p) for p in tuning.values())}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
