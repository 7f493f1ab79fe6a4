"""Tests for the k-shortest-path solver."""

import itertools
import math

import pytest

from fretboard_arranger.arrangement_engine.candidates import BeatCombo, combos_for
from fretboard_arranger.arrangement_engine.cost_model import ArrangementCostModel, hand_shapes
from fretboard_arranger.arrangement_engine.guitar import Guitar, create_string_tuning
from fretboard_arranger.arrangement_engine.solver import SolvedPath, solve

from conftest import p


def _layers(guitar: Guitar, *beats: str) -> list[list[BeatCombo]]:
    return [combos_for(guitar, [p(name) for name in beat.split()]) for beat in beats]


def _brute_force(
    layers: list[list[BeatCombo]], cost_model: ArrangementCostModel
) -> list[SolvedPath]:
    """Price every combo sequence by its cheapest consistent shape assignment."""
    paths: list[SolvedPath] = []
    for indices in itertools.product(*(range(len(layer)) for layer in layers)):
        combos = [layer[i] for layer, i in zip(layers, indices)]
        best = math.inf
        for shapes in itertools.product(*(hand_shapes(combo) for combo in combos)):
            cost: float = cost_model.intrinsic_cost(combos[0])
            for k in range(1, len(combos)):
                cost += cost_model.transition_cost(
                    combos[k - 1], combos[k], shapes[k - 1], shapes[k]
                )
                cost += cost_model.intrinsic_cost(combos[k])
            best = min(best, cost)
        if not math.isinf(best):
            paths.append(SolvedPath(int(best), indices))
    return sorted(paths, key=lambda path: (path.cost, path.indices))


def _path_cost(
    layers: list[list[BeatCombo]], path: SolvedPath, cost_model: ArrangementCostModel
) -> float:
    combos = [layer[i] for layer, i in zip(layers, path.indices)]
    cost: float = cost_model.intrinsic_cost(combos[0])
    for k in range(1, len(combos)):
        cost += cost_model.transition_cost(
            combos[k - 1], combos[k], path.shapes[k - 1], path.shapes[k]
        )
        cost += cost_model.intrinsic_cost(combos[k])
    return cost


def test_no_layers_gives_one_empty_path(cost_model: ArrangementCostModel) -> None:
    assert solve([], cost_model, 3) == [SolvedPath(0, ())]


def test_zero_paths_requested(twelve_fret_guitar: Guitar, cost_model: ArrangementCostModel) -> None:
    assert solve(_layers(twelve_fret_guitar, "G3"), cost_model, 0) == []


def test_empty_layer_rejected(cost_model: ArrangementCostModel) -> None:
    with pytest.raises(ValueError):
        solve([[]], cost_model, 1)


def test_ties_break_on_candidate_index(
    twelve_fret_guitar: Guitar, cost_model: ArrangementCostModel
) -> None:
    layers = _layers(twelve_fret_guitar, "G3")
    assert solve(layers, cost_model, 5) == [
        SolvedPath(0, (0,)),
        SolvedPath(0, (1,)),
        SolvedPath(0, (2,)),
    ]


def test_matches_exhaustive_enumeration(
    twelve_fret_guitar: Guitar, cost_model: ArrangementCostModel
) -> None:
    layers = _layers(twelve_fret_guitar, "G3", "G3 B3", "A3", "D4")
    expected = _brute_force(layers, cost_model)
    assert expected

    assert solve(layers, cost_model, len(expected) + 10, max_workers=1) == expected
    assert solve(layers, cost_model, 5) == expected[:5]


def test_more_paths_only_appends(
    standard_guitar: Guitar, cost_model: ArrangementCostModel
) -> None:
    layers = _layers(standard_guitar, "E4", "D#4", "E4", "D#4", "E4", "B3", "D4", "C4", "A3")
    longest = solve(layers, cost_model, 8)
    assert len(longest) == 8
    for n in range(1, 8):
        assert solve(layers, cost_model, n) == longest[:n]


def test_sequential_and_pooled_agree(
    standard_guitar: Guitar, cost_model: ArrangementCostModel
) -> None:
    layers = _layers(standard_guitar, "C3", "E3 G3", "C4", "A2 E3", "B3")
    sequential = solve(layers, cost_model, 6, max_workers=1)
    assert solve(layers, cost_model, 6, max_workers=4) == sequential
    assert solve(layers, cost_model, 6) == sequential


def test_unplayable_chord_excluded(cost_model: ArrangementCostModel) -> None:
    guitar = Guitar(create_string_tuning([p("E4"), p("E2")]), num_frets=12)
    # F4 only on string 1 at fret 1, D3 only on string 2 at fret 10: no shared box.
    layers = _layers(guitar, "E4", "F4 D3")
    assert len(layers[1]) == 1
    assert solve(layers, cost_model, 3) == []
    assert solve(layers[1:], cost_model, 3) == []


def test_note_keeps_one_finger_for_both_transitions(cost_model: ArrangementCostModel) -> None:
    guitar = Guitar(create_string_tuning([p("E4")]), num_frets=12)
    # frets 1, 5 and 9 on one string; the middle note cannot switch fingers mid-path
    layers = _layers(guitar, "F4", "A4", "C#5")
    assert [len(layer) for layer in layers] == [1, 1, 1]

    [best] = solve(layers, cost_model, 1)
    assert best.cost == 5
    assert best == _brute_force(layers, cost_model)[0]
    assert len(best.shapes) == 3
    assert _path_cost(layers, best, cost_model) == best.cost


def test_reported_shapes_reproduce_cost(
    standard_guitar: Guitar, cost_model: ArrangementCostModel
) -> None:
    layers = _layers(standard_guitar, "G4", "D5", "A4", "E5", "C5", "G3 B3", "F4")
    for path in solve(layers, cost_model, 6):
        assert _path_cost(layers, path, cost_model) == path.cost
