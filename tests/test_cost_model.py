"""Tests for the configurable cost model."""

import math
from pathlib import Path

import pytest
import yaml

from fretboard_arranger.arrangement_engine.candidates import BeatCombo, Fingering
from fretboard_arranger.arrangement_engine.cost_model import (
    DEFAULT_CONFIG_PATH,
    UNPLAYABLE,
    ArrangementCostModel,
    HandShape,
    hand_shapes,
)
from fretboard_arranger.arrangement_engine.string_number import StringNumber

from conftest import p

S1, S2, S3, S4, S5 = (StringNumber(i) for i in range(1, 6))


def _note(name: str, string: StringNumber, fret: int) -> BeatCombo:
    return BeatCombo((Fingering(p(name), string, fret),))


def _chord(*parts: tuple[str, StringNumber, int]) -> BeatCombo:
    return BeatCombo(tuple(Fingering(p(name), s, fret) for name, s, fret in parts))


def _write_config(tmp_path: Path, **overrides: object) -> Path:
    with open(DEFAULT_CONFIG_PATH, "r", encoding="utf-8") as fh:
        cfg = yaml.safe_load(fh)
    cfg.update(overrides)
    path = tmp_path / "costs.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


# ── Config loading ────────────────────────────────────────────


def test_default_weights(cost_model: ArrangementCostModel) -> None:
    assert cost_model.fret_span_weight == 1
    assert cost_model.fret_height_weight == 0
    assert cost_model.open_string_cost == 0
    assert cost_model.chord_transition_cost == 12


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ArrangementCostModel(tmp_path / "nope.yaml")


def test_missing_key(tmp_path: Path) -> None:
    path = _write_config(tmp_path)
    cfg = yaml.safe_load(path.read_text(encoding="utf-8"))
    del cfg["chord_transition_cost"]
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    with pytest.raises(ValueError, match="chord_transition_cost"):
        ArrangementCostModel(path)


def test_negative_weight_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="hand_movement_weight"):
        ArrangementCostModel(_write_config(tmp_path, hand_movement_weight=-1))


def test_open_string_cost_override() -> None:
    assert ArrangementCostModel(open_string_cost=3).open_string_cost == 3


# ── Intrinsic cost ────────────────────────────────────────────


def test_intrinsic_cost_is_fret_span(cost_model: ArrangementCostModel) -> None:
    combo = _chord(("F#4", S1, 2), ("E4", S2, 5), ("G3", S3, 0), ("D#3", S4, 1))
    assert cost_model.intrinsic_cost(combo) == 4
    assert ArrangementCostModel(open_string_cost=3).intrinsic_cost(combo) == 7


def test_intrinsic_cost_fret_height(tmp_path: Path) -> None:
    model = ArrangementCostModel(_write_config(tmp_path, fret_height_weight=2))
    # mean of 2 and 5 is 3.5, rounded to 4
    combo = _chord(("F#4", S1, 2), ("E4", S2, 5))
    assert model.intrinsic_cost(combo) == 3 + 2 * 4


def test_open_combo_only_pays_open_strings() -> None:
    model = ArrangementCostModel(open_string_cost=2)
    combo = _chord(("E4", S1, 0), ("B3", S2, 0))
    assert model.intrinsic_cost(combo) == 4


# ── Hand shapes ───────────────────────────────────────────────


def test_hand_shapes_single_note() -> None:
    assert [s.position for s in hand_shapes(_note("F4", S1, 1))] == [1, 2]
    shapes = hand_shapes(_note("A4", S1, 5))
    assert [s.position for s in shapes] == [1, 2, 3, 4, 5, 6]
    assert [s.fingers for s in shapes] == [(5,), (4,), (3,), (2,), (1,), (0,)]


def test_hand_shapes_open_note() -> None:
    assert hand_shapes(_note("E4", S1, 0)) == (HandShape(None, (None,), (S1,)),)


def test_hand_shapes_chord_box() -> None:
    playable = _chord(("C3", S5, 3), ("E3", S4, 2))
    assert [s.position for s in hand_shapes(playable)] == [1, 2, 3]
    assert hand_shapes(_chord(("F4", S1, 1), ("A4", S2, 10))) == ()


# ── Transitions ───────────────────────────────────────────────


def test_same_finger_string_skip(cost_model: ArrangementCostModel) -> None:
    curr = HandShape(1, (1,), (S1,))
    assert cost_model.note_transition_cost(curr, HandShape(1, (1,), (S2,))) == 1
    assert cost_model.note_transition_cost(curr, HandShape(1, (3,), (S1,))) == 0


def test_edge_finger_penalty(cost_model: ArrangementCostModel) -> None:
    curr = HandShape(3, (0,), (S1,))
    assert cost_model.note_transition_cost(curr, HandShape(3, (2,), (S1,))) == 1
    assert cost_model.note_transition_cost(curr, HandShape(3, (5,), (S1,))) == 2


def test_hand_movement(cost_model: ArrangementCostModel) -> None:
    curr = HandShape(2, (1,), (S1,))
    assert cost_model.note_transition_cost(curr, HandShape(7, (2,), (S1,))) == 5


def test_note_transition_uses_held_shapes(cost_model: ArrangementCostModel) -> None:
    open_g = _note("G3", S3, 0)
    a3 = _note("A3", S3, 2)
    [open_shape] = cost_model.hand_states(open_g)
    assert cost_model.transition_cost(open_g, a3, open_shape, HandShape(1, (2,), (S3,))) == 0
    assert cost_model.transition_cost(open_g, a3, open_shape, HandShape(3, (0,), (S3,))) == 1


def test_note_transition_needs_shapes(cost_model: ArrangementCostModel) -> None:
    with pytest.raises(ValueError):
        cost_model.transition_cost(_note("G3", S3, 0), _note("A3", S3, 2))


def test_same_finger_string_skip_between_combos(cost_model: ArrangementCostModel) -> None:
    c4, f4 = _note("C4", S2, 1), _note("F4", S1, 1)
    index_on_c4 = HandShape(1, (1,), (S2,))
    index_on_f4 = HandShape(1, (1,), (S1,))
    assert cost_model.transition_cost(c4, f4, index_on_c4, index_on_f4) == 1


def test_hand_states(cost_model: ArrangementCostModel) -> None:
    note = _note("A4", S1, 5)
    assert cost_model.hand_states(note) == hand_shapes(note)
    assert cost_model.hand_states(note) is cost_model.hand_states(note)
    # a chord is charged the same whichever box holds it
    assert len(cost_model.hand_states(_chord(("C3", S5, 3), ("E3", S4, 2)))) == 1
    assert cost_model.hand_states(_chord(("F4", S1, 1), ("A4", S2, 10))) == ()


def test_state_cache_is_per_model() -> None:
    first, second = ArrangementCostModel(), ArrangementCostModel()
    note = _note("A4", S1, 5)
    first.hand_states(note)
    assert note in first._state_cache
    assert note not in second._state_cache


def test_chord_transitions(cost_model: ArrangementCostModel) -> None:
    note = _note("G3", S3, 0)
    playable = _chord(("C3", S5, 3), ("E3", S4, 2))
    unplayable = _chord(("F4", S1, 1), ("A4", S2, 10))

    assert cost_model.transition_cost(note, playable) == 12
    assert cost_model.transition_cost(playable, note) == 12
    assert cost_model.transition_cost(playable, playable) == 12
    assert cost_model.transition_cost(note, unplayable) == UNPLAYABLE
    assert cost_model.transition_cost(unplayable, note) == UNPLAYABLE
    assert math.isinf(cost_model.transition_cost(playable, unplayable))
    assert math.isinf(cost_model.transition_cost(unplayable, playable))


def test_chord_playability(cost_model: ArrangementCostModel) -> None:
    assert cost_model.chord_playability(_chord(("E4", S1, 0), ("B3", S2, 0))) == 0
    assert cost_model.chord_playability(_chord(("F4", S1, 1), ("A4", S2, 10))) == UNPLAYABLE
