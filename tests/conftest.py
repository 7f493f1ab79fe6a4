"""Shared fixtures for the arrangement-engine tests."""

from __future__ import annotations

import pytest

from fretboard_arranger.arrangement_engine.cost_model import ArrangementCostModel
from fretboard_arranger.arrangement_engine.guitar import Guitar
from fretboard_arranger.arrangement_engine.pitch import Pitch


def p(name: str) -> Pitch:
    return Pitch.from_name(name)


@pytest.fixture
def standard_guitar() -> Guitar:
    return Guitar.standard(num_frets=18)


@pytest.fixture
def twelve_fret_guitar() -> Guitar:
    return Guitar.standard(num_frets=12)


@pytest.fixture
def cost_model() -> ArrangementCostModel:
    return ArrangementCostModel()
