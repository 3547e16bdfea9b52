"""Tests du validateur de destination (occupation uniquement)."""

from __future__ import annotations

from asude.engine.validator import is_valid_destination
from tests.helpers import coin, registry_of


def test_forbidden_cell_always_rejected():
    assert not is_valid_destination((7, 7), 1, registry_of())


def test_out_of_board_rejected():
    assert not is_valid_destination((0, 7), 1, registry_of())
    assert not is_valid_destination((14, 7), 2, registry_of())


def test_target_accepts_same_owner_stack_only():
    registry = registry_of(coin(1, 1, (13, 7), origin_side=2))
    assert is_valid_destination((13, 7), 1, registry)
    assert not is_valid_destination((13, 7), 2, registry)


def test_observer_accepts_same_owner_stack_only():
    registry = registry_of(coin(9, 2, (2, 7)))
    assert is_valid_destination((2, 7), 2, registry)
    assert not is_valid_destination((2, 7), 1, registry)


def test_home_cell_requires_empty():
    registry = registry_of(coin(1, 1, (1, 1)))
    assert not is_valid_destination((1, 1), 1, registry)
    assert is_valid_destination((1, 3), 1, registry)


def test_regular_cell_no_stacking_for_anyone():
    registry = registry_of(coin(1, 1, (5, 5)))
    assert not is_valid_destination((5, 5), 1, registry)
    assert not is_valid_destination((5, 5), 2, registry)
    assert is_valid_destination((5, 3), 2, registry)
