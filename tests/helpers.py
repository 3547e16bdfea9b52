"""Constructeurs d'états pour les tests du moteur.

Les états de jeu sont construits directement (registre choisi à la main)
afin de tester chaque règle sur une position contrôlée.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from asude.engine.actions import MoveTo, StartGame
from asude.engine.coins import Coin, CoinRegistry
from asude.engine.safety import rebuild_safety_lines
from asude.engine.state import GameConfig, GameState, Phase
from asude.engine.zones import Cell

# Poses complètes: 4 sur la cible adverse puis 4 dans la maison, pour chaque joueur
SETUP_CLICKS: Tuple[Cell, ...] = (
    (13, 7), (13, 7), (13, 7), (13, 7),
    (1, 1), (1, 3), (1, 5), (1, 9),
    (1, 7), (1, 7), (1, 7), (1, 7),
    (13, 1), (13, 3), (13, 5), (13, 9),
)


def coin(
    coin_id: int,
    owner: int,
    cell: Cell,
    *,
    origin_side: Optional[int] = None,
    observer_power: bool = False,
) -> Coin:
    """Jeton posé; camp d'origine = propriétaire par défaut."""

    return Coin(
        coin_id=coin_id,
        owner=owner,
        position=cell,
        origin_side=owner if origin_side is None else origin_side,
        observer_power=observer_power,
    )


def registry_of(*coins: Coin) -> CoinRegistry:
    return CoinRegistry.from_coins(coins)


def playing_state(
    *coins: Coin,
    turn: int = 1,
    scores: Tuple[int, int] = (0, 0),
    coins_per_player: int = 8,
) -> GameState:
    """État PLAYING avec le registre donné et les lignes de sécurité à jour."""

    registry = registry_of(*coins)
    base = GameState.new_game(GameConfig(coins_per_player=coins_per_player))
    players = (
        replace(base.players[0], score=scores[0]),
        replace(base.players[1], score=scores[1]),
    )
    return replace(
        base,
        phase=Phase.PLAYING,
        turn=turn,
        registry=registry,
        safety_lines=rebuild_safety_lines(registry),
        players=players,
        total_placed=2 * coins_per_player,
    )


def setup_state() -> GameState:
    return GameState.new_game().apply_action(StartGame())


def complete_setup(state: GameState | None = None) -> GameState:
    """Termine la phase de setup avec `SETUP_CLICKS`."""

    state = state or setup_state()
    for row, col in SETUP_CLICKS:
        state = state.apply_action(MoveTo(row=row, col=col))
    assert state.phase == Phase.PLAYING
    return state
