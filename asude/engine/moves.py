"""Génération des destinations d'un jeton sélectionné.

Les règles de déplacement sont décrites par une table déclarative
(`MOVE_RULES`): chaque règle associe une condition sur la position du jeton
à un générateur de destinations brutes. Le générateur évalue toutes les
règles indépendamment, filtre les candidats hors plateau puis les soumet au
validateur de destination; un dernier filtre dépend du type de jeton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from asude.engine.coins import Coin, CoinRegistry
from asude.engine.rules import opponent
from asude.engine.validator import is_valid_destination
from asude.engine.zones import (
    DIRECT_ACCESS_CELLS,
    DIRECTIONAL_HINTS,
    OBSERVER_CELLS,
    TARGET_CELLS,
    Cell,
    in_bounds,
    is_corner,
    is_home,
    is_special_gateway,
    target_owner,
)

logger = logging.getLogger(__name__)

_DIAGONALS: Tuple[Tuple[int, int], ...] = ((1, -1), (1, 1), (-1, -1), (-1, 1))
# Sens de progression: le joueur 1 descend (lignes croissantes), le joueur 2 monte.
FORWARD: dict[int, int] = {1: 1, 2: -1}


@dataclass(frozen=True)
class MoveContext:
    """Entrées d'une règle: le jeton, sa case et l'occupation du plateau."""

    coin: Coin
    cell: Cell
    registry: CoinRegistry

    @property
    def player(self) -> int:
        return self.coin.owner


@dataclass(frozen=True)
class MoveRule:
    """Règle de déplacement: condition d'application + destinations brutes."""

    name: str
    applies: Callable[[MoveContext], bool]
    destinations: Callable[[MoveContext], Iterable[Cell]]


def diagonal_distance(origin: Cell, destination: Cell) -> int:
    """Distance diagonale (0 si les deux cases ne sont pas sur une diagonale)."""

    row_diff = abs(origin[0] - destination[0])
    col_diff = abs(origin[1] - destination[1])
    if row_diff != col_diff:
        return 0
    return row_diff


def _within_two_diagonal_steps(origin: Cell, destination: Cell) -> bool:
    return diagonal_distance(origin, destination) in (1, 2)


def _diagonal_steps(ctx: MoveContext) -> Iterable[Cell]:
    row, col = ctx.cell
    for steps in (1, 2):
        for d_row, d_col in _DIAGONALS:
            yield (row + steps * d_row, col + steps * d_col)


def _own_observer_in_reach(ctx: MoveContext) -> Iterable[Cell]:
    observer = OBSERVER_CELLS[ctx.player]
    if _within_two_diagonal_steps(ctx.cell, observer):
        yield observer


def _observer_exits(ctx: MoveContext) -> Iterable[Cell]:
    yield TARGET_CELLS[ctx.player]
    row, col = ctx.cell
    # Recul d'une case, à l'opposé du centre du plateau
    yield (row - FORWARD[ctx.player], col)


def _hint_target(ctx: MoveContext) -> Iterable[Cell]:
    yield DIRECTIONAL_HINTS[ctx.cell]


def opponent_coin_between(origin: Cell, destination: Cell, player: int, registry: CoinRegistry) -> bool:
    """Vrai si un jeton adverse occupe le segment orthogonal strict origin → destination."""

    row_diff = destination[0] - origin[0]
    col_diff = destination[1] - origin[1]
    if row_diff != 0 and col_diff != 0:
        return False
    steps = max(abs(row_diff), abs(col_diff))
    if steps < 2:
        return False
    row_step = row_diff // steps
    col_step = col_diff // steps
    opponent_cells = {coin.position for coin in registry.on_board(opponent(player))}
    return any(
        (origin[0] + row_step * i, origin[1] + col_step * i) in opponent_cells
        for i in range(1, steps)
    )


def _crossing_capture(ctx: MoveContext) -> bool:
    return opponent_coin_between(
        ctx.cell, TARGET_CELLS[ctx.player], ctx.player, ctx.registry
    )


def _own_target(ctx: MoveContext) -> Iterable[Cell]:
    yield TARGET_CELLS[ctx.player]


def _all_observers_and_targets(ctx: MoveContext) -> Iterable[Cell]:
    yield OBSERVER_CELLS[1]
    yield OBSERVER_CELLS[2]
    yield TARGET_CELLS[1]
    yield TARGET_CELLS[2]


def _targets_in_reach(ctx: MoveContext) -> Iterable[Cell]:
    for target in (TARGET_CELLS[1], TARGET_CELLS[2]):
        if _within_two_diagonal_steps(ctx.cell, target):
            yield target


MOVE_RULES: Tuple[MoveRule, ...] = (
    MoveRule("diagonal", lambda ctx: True, _diagonal_steps),
    MoveRule("observer_reach", lambda ctx: not is_corner(ctx.cell), _own_observer_in_reach),
    MoveRule(
        "observer_exit",
        lambda ctx: ctx.cell == OBSERVER_CELLS[ctx.player],
        _observer_exits,
    ),
    MoveRule(
        "directional_hint",
        lambda ctx: ctx.cell in DIRECTIONAL_HINTS and not is_corner(ctx.cell),
        _hint_target,
    ),
    MoveRule("crossing_capture", _crossing_capture, _own_target),
    MoveRule(
        "direct_access",
        lambda ctx: ctx.cell in DIRECT_ACCESS_CELLS[ctx.player],
        _own_target,
    ),
    MoveRule(
        "special_gateway",
        lambda ctx: is_special_gateway(ctx.cell),
        _all_observers_and_targets,
    ),
    MoveRule("target_reach", lambda ctx: True, _targets_in_reach),
)


def raw_candidates(coin: Coin, registry: CoinRegistry) -> List[Tuple[str, Cell]]:
    """Liste (règle, case) de toutes les destinations brutes, hors plateau exclu."""

    if coin.position is None:
        return []
    ctx = MoveContext(coin=coin, cell=coin.position, registry=registry)
    candidates: List[Tuple[str, Cell]] = []
    for rule in MOVE_RULES:
        if not rule.applies(ctx):
            continue
        for cell in rule.destinations(ctx):
            if in_bounds(cell):
                candidates.append((rule.name, cell))
    return candidates


def candidate_destinations(coin: Coin, registry: CoinRegistry) -> List[Cell]:
    """Destinations brutes acceptées par le validateur (doublons conservés)."""

    return [
        cell
        for _rule, cell in raw_candidates(coin, registry)
        if is_valid_destination(cell, coin.owner, registry)
    ]


def elimination_allowed(coin: Coin, target_cell: Cell) -> bool:
    """Un jeton s'élimine sur la cible du camp opposé, ou partout avec le pouvoir observateur."""

    if coin.observer_power:
        return True
    return coin.origin_side != target_owner(target_cell)


def passes_coin_filter(coin: Coin, destination: Cell) -> bool:
    """Filtre dépendant du type de jeton.

    - un jeton posé sur la cible adverse ne rentre jamais dans sa propre maison
    - la cible de son camp d'origine reste fermée sans pouvoir observateur
    """

    if coin.is_target_coin and is_home(destination, coin.owner):
        return False
    if target_owner(destination) is not None:
        return elimination_allowed(coin, destination)
    return True


def legal_destinations(coin: Coin, registry: CoinRegistry) -> Tuple[Cell, ...]:
    """Ensemble des destinations légales (ordre de découverte, sans doublon)."""

    legal: List[Cell] = []
    for cell in candidate_destinations(coin, registry):
        if cell in legal:
            continue
        if passes_coin_filter(coin, cell):
            legal.append(cell)
    logger.debug("Jeton %s en %s: %d destinations légales", coin.coin_id, coin.position, len(legal))
    return tuple(legal)


__all__ = [
    "FORWARD",
    "MOVE_RULES",
    "MoveContext",
    "MoveRule",
    "candidate_destinations",
    "diagonal_distance",
    "elimination_allowed",
    "legal_destinations",
    "opponent_coin_between",
    "passes_coin_filter",
    "raw_candidates",
]
