"""Request configuration for Fretboard Arranger.

One :class:`ArrangerConfig` carries everything a caller chooses: the
instrument (tuning, frets, capo), the search (arrangement count, open-string
cost, cost-weight file, worker count) and the rendering (width, padding,
playback marker).  It can be built in code or loaded from YAML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class ArrangerConfig(BaseModel):
    tuning_name: str = "standard"
    num_frets: int = Field(18, ge=0, le=30)
    capo: int = Field(0, ge=0)
    num_arrangements: int = Field(1, ge=1)
    open_string_cost: int | None = Field(None, ge=0)
    cost_config: Path | None = None
    max_workers: int | None = Field(None, ge=1)

    # rendering only; the engine never reads these
    width: int = Field(60, ge=1)
    padding: int = Field(2, ge=0)
    playback_index: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _capo_on_neck(self) -> ArrangerConfig:
        if self.capo > self.num_frets:
            raise ValueError(
                f"capo ({self.capo}) cannot sit above the last fret ({self.num_frets})"
            )
        return self


def load_config(path: str | Path) -> ArrangerConfig:
    p = Path(path)
    data: dict[str, Any] = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    return ArrangerConfig(**data)
