"""Arrangement Engine — rule-based k-shortest-path fingering search for guitar.

Sub-package containing:
    pitch          – semitone pitch space (C0..B9)
    string_number  – validated string identifiers
    guitar         – instrument model, named tunings
    beats          – rest / measure break / playable input beats
    candidates     – fingering and combo enumeration
    cost_model     – configurable intrinsic and transition costs
    solver         – layered best-first multi-path search
    arrangement    – validation and arrangement assembly
    text_parser    – plain-text pitch input
    renderer       – ASCII tablature
    annotate       – orchestrates pipeline and exports results
"""

from .arrangement import Arrangement, create_arrangements, validate_fingerings
from .beats import Beat, LineKind
from .candidates import BeatCombo, Fingering, combos_for, fingerings_for
from .cost_model import UNPLAYABLE, ArrangementCostModel
from .guitar import TUNINGS, Guitar, create_string_tuning, parse_tuning
from .pitch import Pitch
from .string_number import StringNumber

__all__ = [
    "Arrangement",
    "ArrangementCostModel",
    "Beat",
    "BeatCombo",
    "Fingering",
    "Guitar",
    "LineKind",
    "Pitch",
    "StringNumber",
    "TUNINGS",
    "UNPLAYABLE",
    "combos_for",
    "create_arrangements",
    "create_string_tuning",
    "fingerings_for",
    "parse_tuning",
    "validate_fingerings",
]
