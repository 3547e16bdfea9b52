"""Géométrie statique du plateau ASUDE 13×13.

Cette implémentation expose uniquement des prédicats purs sur les cases:
- zones maison / cible / observateur de chaque joueur
- zone interdite centrale (3×3)
- cases passerelles, cases d'indication directionnelle, coins du plateau
- « zone frontière » où les lignes de sécurité ne s'appliquent jamais

Les cases sont des couples `(row, col)` indexés à partir de 1.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Dict, FrozenSet, Iterator, Optional, Tuple

import numpy as np

from asude.engine.rules import BOARD_SIZE

Cell = Tuple[int, int]

_HOME_COLUMNS: Tuple[int, ...] = (1, 3, 5, 9, 11, 13)
_EDGE_COLUMNS: Tuple[int, ...] = (2, 4, 6, 8, 10, 12)
_EDGE_ROWS: Tuple[int, ...] = (1, 2, 12, 13)

HOME_ZONES: Dict[int, FrozenSet[Cell]] = {
    1: frozenset((row, col) for row in (1, 2) for col in _HOME_COLUMNS),
    2: frozenset((row, col) for row in (12, 13) for col in _HOME_COLUMNS),
}
TARGET_CELLS: Dict[int, Cell] = {1: (1, 7), 2: (13, 7)}
OBSERVER_CELLS: Dict[int, Cell] = {1: (2, 7), 2: (12, 7)}
FORBIDDEN_CELLS: FrozenSet[Cell] = frozenset(
    (row, col) for row in range(6, 9) for col in range(6, 9)
)
SPECIAL_GATEWAY_CELLS: FrozenSet[Cell] = frozenset({(3, 7), (11, 7)})
CORNER_CELLS: FrozenSet[Cell] = frozenset(
    {(1, 1), (2, 1), (1, 13), (2, 13), (12, 1), (13, 1), (12, 13), (13, 13)}
)
# Case d'indication -> cible adjacente (diagonale en ligne 2/12, droite en ligne 1/13)
DIRECTIONAL_HINTS: Dict[Cell, Cell] = {
    (2, 6): TARGET_CELLS[1],
    (2, 8): TARGET_CELLS[1],
    (1, 6): TARGET_CELLS[1],
    (1, 8): TARGET_CELLS[1],
    (12, 6): TARGET_CELLS[2],
    (12, 8): TARGET_CELLS[2],
    (13, 6): TARGET_CELLS[2],
    (13, 8): TARGET_CELLS[2],
}
# Cases donnant un accès direct à la propre cible du joueur
DIRECT_ACCESS_CELLS: Dict[int, FrozenSet[Cell]] = {
    1: frozenset({(3, 5), (3, 9)}),
    2: frozenset({(11, 5), (11, 9)}),
}
# Cases colorées des lignes de bord (sans effet sur les règles)
EDGE_CELLS: FrozenSet[Cell] = frozenset(
    (row, col) for row in _EDGE_ROWS for col in _EDGE_COLUMNS
)

_ALL_TARGETS: FrozenSet[Cell] = frozenset(TARGET_CELLS.values())
_ALL_OBSERVERS: FrozenSet[Cell] = frozenset(OBSERVER_CELLS.values())
_ALL_HOMES: FrozenSet[Cell] = HOME_ZONES[1] | HOME_ZONES[2]


class Zone(Enum):
    """Zones nommées du plateau."""

    OPEN = "OPEN"
    HOME_1 = "HOME_1"
    HOME_2 = "HOME_2"
    TARGET_1 = "TARGET_1"
    TARGET_2 = "TARGET_2"
    OBSERVER_1 = "OBSERVER_1"
    OBSERVER_2 = "OBSERVER_2"
    FORBIDDEN = "FORBIDDEN"
    SPECIAL_GATEWAY = "SPECIAL_GATEWAY"
    DIRECTIONAL_HINT = "DIRECTIONAL_HINT"
    EDGE = "EDGE"

    @property
    def owner(self) -> Optional[int]:
        """Joueur propriétaire de la zone (None pour les zones neutres)."""

        if self.value.endswith("_1"):
            return 1
        if self.value.endswith("_2"):
            return 2
        return None


ZONE_CODES: Dict[Zone, int] = {zone: index for index, zone in enumerate(Zone)}


def in_bounds(cell: Cell) -> bool:
    row, col = cell
    return 1 <= row <= BOARD_SIZE and 1 <= col <= BOARD_SIZE


def all_cells() -> Iterator[Cell]:
    """Itère sur les 169 cases, ligne par ligne."""

    for row in range(1, BOARD_SIZE + 1):
        for col in range(1, BOARD_SIZE + 1):
            yield (row, col)


def zone_of(cell: Cell) -> Zone:
    """Retourne la zone nommée d'une case.

    Les zones se recouvrent rarement; l'ordre de priorité est celui des règles:
    maison, cible, observateur, interdite, passerelle, indication, bord.
    """

    for player, home in HOME_ZONES.items():
        if cell in home:
            return Zone.HOME_1 if player == 1 else Zone.HOME_2
    if cell == TARGET_CELLS[1]:
        return Zone.TARGET_1
    if cell == TARGET_CELLS[2]:
        return Zone.TARGET_2
    if cell == OBSERVER_CELLS[1]:
        return Zone.OBSERVER_1
    if cell == OBSERVER_CELLS[2]:
        return Zone.OBSERVER_2
    if cell in FORBIDDEN_CELLS:
        return Zone.FORBIDDEN
    if cell in SPECIAL_GATEWAY_CELLS:
        return Zone.SPECIAL_GATEWAY
    if cell in DIRECTIONAL_HINTS:
        return Zone.DIRECTIONAL_HINT
    if cell in EDGE_CELLS:
        return Zone.EDGE
    return Zone.OPEN


def is_forbidden(cell: Cell) -> bool:
    return cell in FORBIDDEN_CELLS


def is_home(cell: Cell, player: int) -> bool:
    return cell in HOME_ZONES[player]


def is_any_home(cell: Cell) -> bool:
    return cell in _ALL_HOMES


def is_target(cell: Cell, player: Optional[int] = None) -> bool:
    """Vrai si la case est une cible (celle de `player` si précisé)."""

    if player is None:
        return cell in _ALL_TARGETS
    return cell == TARGET_CELLS[player]


def is_observer(cell: Cell, player: Optional[int] = None) -> bool:
    """Vrai si la case est un observateur (celui de `player` si précisé)."""

    if player is None:
        return cell in _ALL_OBSERVERS
    return cell == OBSERVER_CELLS[player]


def target_owner(cell: Cell) -> Optional[int]:
    for player, target in TARGET_CELLS.items():
        if target == cell:
            return player
    return None


def is_special_gateway(cell: Cell) -> bool:
    return cell in SPECIAL_GATEWAY_CELLS


def is_directional_hint(cell: Cell) -> bool:
    return cell in DIRECTIONAL_HINTS


def is_corner(cell: Cell) -> bool:
    return cell in CORNER_CELLS


def is_boundary_area(cell: Cell) -> bool:
    """Lignes 1/2/12/13 et toutes les zones nommées: aucune ligne de sécurité ici."""

    if cell[0] in _EDGE_ROWS:
        return True
    return (
        cell in _ALL_HOMES
        or cell in _ALL_TARGETS
        or cell in _ALL_OBSERVERS
        or cell in FORBIDDEN_CELLS
    )


def has_crossed_boundary(cell: Cell, player: int) -> bool:
    """Un jeton a franchi la frontière s'il a quitté sa maison et la zone frontière."""

    return not is_home(cell, player) and not is_boundary_area(cell)


@lru_cache(maxsize=1)
def _zone_grid() -> np.ndarray:
    grid = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for row, col in all_cells():
        grid[row - 1, col - 1] = ZONE_CODES[zone_of((row, col))]
    grid.setflags(write=False)
    return grid


def zone_grid() -> np.ndarray:
    """Grille 13×13 (lecture seule) des codes de zone, index `[row - 1, col - 1]`."""

    return _zone_grid()


__all__ = [
    "Cell",
    "Zone",
    "ZONE_CODES",
    "HOME_ZONES",
    "TARGET_CELLS",
    "OBSERVER_CELLS",
    "FORBIDDEN_CELLS",
    "SPECIAL_GATEWAY_CELLS",
    "CORNER_CELLS",
    "DIRECTIONAL_HINTS",
    "DIRECT_ACCESS_CELLS",
    "EDGE_CELLS",
    "in_bounds",
    "all_cells",
    "zone_of",
    "is_forbidden",
    "is_home",
    "is_any_home",
    "is_target",
    "is_observer",
    "target_owner",
    "is_special_gateway",
    "is_directional_hint",
    "is_corner",
    "is_boundary_area",
    "has_crossed_boundary",
    "zone_grid",
]
