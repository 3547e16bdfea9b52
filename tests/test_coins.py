"""Tests du registre immuable des jetons."""

from __future__ import annotations

import pytest

from asude.engine.coins import Coin, CoinRegistry


def test_reserve_ids_are_sequential_per_player():
    registry = CoinRegistry.with_reserve(8)
    assert [coin.coin_id for coin in registry.unplaced(1)] == list(range(1, 9))
    assert [coin.coin_id for coin in registry.unplaced(2)] == list(range(9, 17))
    assert registry.on_board() == []


def test_place_fixes_origin_side_without_mutating_original():
    registry = CoinRegistry.with_reserve(2)
    placed = registry.place(1, (13, 7), origin_side=2)

    assert registry.get(1).position is None
    coin = placed.get(1)
    assert coin.position == (13, 7)
    assert coin.origin_side == 2
    assert coin.is_target_coin
    assert placed.unplaced(1) == [registry.get(2)]


def test_cell_requires_placed_coin():
    registry = CoinRegistry.with_reserve(2)
    with pytest.raises(RuntimeError):
        _ = registry.get(1).cell
    assert registry.place(1, (1, 1), origin_side=1).get(1).cell == (1, 1)


def test_place_twice_is_rejected():
    registry = CoinRegistry.with_reserve(2).place(1, (1, 1), origin_side=1)
    with pytest.raises(ValueError):
        registry.place(1, (1, 3), origin_side=1)


def test_remove_deletes_coin_entirely():
    registry = CoinRegistry.with_reserve(2).place(1, (1, 1), origin_side=1)
    removed = registry.remove(1)
    assert 1 not in removed
    assert len(removed) == len(registry) - 1
    with pytest.raises(KeyError):
        removed.get(1)


def test_coins_at_and_owners_at():
    registry = CoinRegistry.from_coins(
        [
            Coin(1, 1, (13, 7), origin_side=2),
            Coin(2, 1, (13, 7), origin_side=2),
            Coin(9, 2, (12, 1), origin_side=2),
        ]
    )
    assert [coin.coin_id for coin in registry.coins_at((13, 7))] == [1, 2]
    assert registry.owners_at((13, 7)) == {1}
    assert registry.count_on_board(2) == 1
    assert set(registry.occupancy()) == {(13, 7), (12, 1)}


def test_grant_observer_power_is_idempotent():
    registry = CoinRegistry.from_coins([Coin(1, 1, (2, 7), origin_side=1)])
    granted = registry.grant_observer_power(1)
    assert granted.get(1).observer_power is True
    assert granted.grant_observer_power(1) is granted


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        CoinRegistry.from_coins([Coin(1, 1, (1, 1)), Coin(1, 2, (13, 1))])
