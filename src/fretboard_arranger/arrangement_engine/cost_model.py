"""Cost Model — configurable ergonomic costs for guitar fingerings.

All weights are loaded from ``configs/arrangement_costs.yaml``.
No hardcoded constants: if a required key is missing from the YAML,
a ``ValueError`` is raised with a clear message.

Methods:
    intrinsic_cost        – reach difficulty of holding one combo
    note_transition_cost  – hand movement between two single-note shapes
    chord_playability     – whether a chord fits in one box
    hand_states           – the hand shapes the search tells apart per combo
    transition_cost       – cost of moving between two held combos

Fingers are indexed 0..5: ``0`` index shift, ``1`` index, ``2`` middle,
``3`` ring, ``4`` pinky, ``5`` pinky shift.  A fretted note at fret *f*
played with finger *k* puts the hand at position ``f - k + 1``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .candidates import BeatCombo
from .string_number import StringNumber

# Compares above every finite cost; any sum that includes it stays unplayable.
UNPLAYABLE: float = math.inf

FINGERS: tuple[int, ...] = (0, 1, 2, 3, 4, 5)
EDGE_FINGERS: frozenset[int] = frozenset({0, 5})

DEFAULT_CONFIG_PATH: Path = (
    Path(__file__).resolve().parents[1] / "configs" / "arrangement_costs.yaml"
)

_REQUIRED_KEYS: list[str] = [
    "fret_span_weight",
    "fret_height_weight",
    "open_string_cost",
    "hand_movement_weight",
    "edge_finger_weight",
    "same_finger_weight",
    "chord_transition_cost",
]


@dataclass(frozen=True)
class HandShape:
    """One way of holding a combo with the fretting hand.

    Attributes:
        position: Fret under the index finger, ``None`` when every note is open.
        fingers:  Finger per fingering (combo order); ``None`` for open strings.
        strings:  String per fingering (combo order).
    """

    position: int | None
    fingers: tuple[int | None, ...]
    strings: tuple[StringNumber, ...]


def _positions_for_fret(fret: int) -> dict[int, int]:
    """Map each legal hand position to the finger that reaches *fret* from it."""
    return {fret - finger + 1: finger for finger in FINGERS if finger <= fret}


def hand_shapes(combo: BeatCombo) -> tuple[HandShape, ...]:
    """Enumerate the hand shapes that can hold *combo*.

    Single fretted notes get one shape per legal finger.  Chords get one
    shape per position shared by all their fretted notes (a "box"); a chord
    whose fretted notes share no position has no shapes at all.  Open
    strings never constrain the position.
    """
    strings = combo.strings
    fretted = [f.fret for f in combo.fingerings if f.fret != 0]
    if not fretted:
        return (HandShape(None, tuple(None for _ in strings), strings),)

    candidate_maps = [_positions_for_fret(fret) for fret in fretted]
    common = set(candidate_maps[0])
    for positions in candidate_maps[1:]:
        common &= set(positions)

    shapes: list[HandShape] = []
    for position in sorted(common):
        fingers = tuple(
            None if f.fret == 0 else f.fret - position + 1 for f in combo.fingerings
        )
        shapes.append(HandShape(position, fingers, strings))
    return tuple(shapes)


class ArrangementCostModel:
    """Rule-based cost model for guitar fingering combos.

    Args:
        config_path: Path to the YAML configuration file.  Defaults to the
            packaged ``configs/arrangement_costs.yaml``.
        open_string_cost: Optional override of the YAML ``open_string_cost``.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        open_string_cost: int | None = None,
    ) -> None:
        config_path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Cost config not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as fh:
            self._cfg: dict[str, Any] = yaml.safe_load(fh) or {}

        for key in _REQUIRED_KEYS:
            if key not in self._cfg:
                raise ValueError(
                    f"Missing required key '{key}' in cost config: {config_path}"
                )
        if open_string_cost is not None:
            self._cfg["open_string_cost"] = open_string_cost
        for key in _REQUIRED_KEYS:
            value = self._cfg[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(
                    f"Cost weight '{key}' must be a non-negative integer, got {value!r}"
                )

        self.fret_span_weight: int = self._cfg["fret_span_weight"]
        self.fret_height_weight: int = self._cfg["fret_height_weight"]
        self.open_string_cost: int = self._cfg["open_string_cost"]
        self.hand_movement_weight: int = self._cfg["hand_movement_weight"]
        self.edge_finger_weight: int = self._cfg["edge_finger_weight"]
        self.same_finger_weight: int = self._cfg["same_finger_weight"]
        self.chord_transition_cost: int = self._cfg["chord_transition_cost"]

        # scoped to this instance; dropped with it
        self._state_cache: dict[BeatCombo, tuple[HandShape, ...]] = {}

    # ── Single beat ───────────────────────────────────────────

    def intrinsic_cost(self, combo: BeatCombo) -> int:
        """Reach difficulty of holding *combo* on its own.

        Fully open combos have no span and no mean height; they only pay the
        open-string term.
        """
        cost = self.open_string_cost * combo.open_string_count
        cost += self.fret_span_weight * combo.non_zero_fret_span
        if combo.avg_non_zero_fret is not None:
            cost += self.fret_height_weight * int(round(combo.avg_non_zero_fret))
        return cost

    def chord_playability(self, combo: BeatCombo) -> float:
        """``0`` if all fretted notes fit in one box, else :data:`UNPLAYABLE`."""
        if self.hand_states(combo):
            return 0
        return UNPLAYABLE

    def hand_states(self, combo: BeatCombo) -> tuple[HandShape, ...]:
        """Hand shapes the search must tell apart for *combo*.

        Every shape of a single note is kept, because the finger chosen for
        it is charged on both of its transitions.  A chord is priced by the
        flat chord cost whichever box holds it, so its first box stands for
        all of them; a chord with no box has no states at all.
        """
        states = self._state_cache.get(combo)
        if states is None:
            states = hand_shapes(combo)
            if combo.is_chord:
                states = states[:1]
            self._state_cache[combo] = states
        return states

    # ── Transitions ───────────────────────────────────────────

    def note_transition_cost(self, curr: HandShape, nxt: HandShape) -> int:
        """Cost of moving between two single-note hand shapes.

        Sum of the hand movement, one unit per edge finger (index shift or
        pinky shift) on either note, and one unit when the same finger jumps
        to a different string.  Open notes move nothing and use no finger.
        """
        curr_finger, next_finger = curr.fingers[0], nxt.fingers[0]

        hand_movement = 0
        if curr.position is not None and nxt.position is not None:
            hand_movement = abs(nxt.position - curr.position)

        edge_fingers = int(next_finger in EDGE_FINGERS) + int(curr_finger in EDGE_FINGERS)

        same_finger_skip = int(
            curr_finger is not None
            and curr_finger == next_finger
            and curr.strings[0] != nxt.strings[0]
        )

        return (
            self.hand_movement_weight * hand_movement
            + self.edge_finger_weight * edge_fingers
            + self.same_finger_weight * same_finger_skip
        )

    def transition_cost(
        self,
        curr: BeatCombo,
        nxt: BeatCombo,
        curr_shape: HandShape | None = None,
        next_shape: HandShape | None = None,
    ) -> float:
        """Cost of moving the hand from combo *curr* to combo *nxt*.

        Case split on combo sizes:
            note → note   : :meth:`note_transition_cost` of the two shapes held
            note → chord  : flat chord cost if *nxt* fits in a box
            chord → chord : flat chord cost if both fit in a box
            chord → note  : flat chord cost if *curr* fits in a box

        Args:
            curr: Combo the hand is leaving.
            nxt: Combo the hand moves to.
            curr_shape: Shape holding *curr*; required when both are notes.
            next_shape: Shape holding *nxt*; required when both are notes.

        Returns:
            A non-negative integer, or :data:`UNPLAYABLE`.
        """
        if not curr.is_chord and not nxt.is_chord:
            if curr_shape is None or next_shape is None:
                raise ValueError("A note-to-note transition needs the shape of both notes.")
            return self.note_transition_cost(curr_shape, next_shape)

        playability = 0.0
        if nxt.is_chord:
            playability += self.chord_playability(nxt)
        if curr.is_chord:
            playability += self.chord_playability(curr)
        return UNPLAYABLE if playability else self.chord_transition_cost
