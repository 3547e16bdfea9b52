"""Calcul des lignes de sécurité (pièges invisibles) de chaque joueur.

Reconstruction complète après chaque mutation du registre: pour chaque jeton
ayant franchi la frontière, motif de 5 cases orienté vers l'avant du joueur
(avant, gauche, droite, diagonale avant-gauche, diagonale avant-droite),
hors plateau et hors zone frontière exclus.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List

from asude.engine.coins import CoinRegistry
from asude.engine.moves import FORWARD
from asude.engine.rules import PLAYERS
from asude.engine.zones import Cell, has_crossed_boundary, in_bounds, is_boundary_area

SafetyLines = Dict[int, FrozenSet[Cell]]


def safety_pattern(cell: Cell, player: int) -> List[Cell]:
    """Motif brut autour d'un jeton, limité au plateau."""

    row, col = cell
    front = row + FORWARD[player]
    pattern = [
        (front, col),
        (row, col - 1),
        (row, col + 1),
        (front, col - 1),
        (front, col + 1),
    ]
    return [position for position in pattern if in_bounds(position)]


def player_safety_line(registry: CoinRegistry, player: int) -> FrozenSet[Cell]:
    cells: set[Cell] = set()
    for coin in registry.on_board(player):
        if not has_crossed_boundary(coin.cell, player):
            continue
        cells.update(
            position
            for position in safety_pattern(coin.cell, player)
            if not is_boundary_area(position)
        )
    return frozenset(cells)


def rebuild_safety_lines(registry: CoinRegistry) -> SafetyLines:
    """Recalcule les lignes de sécurité des deux joueurs."""

    return {player: player_safety_line(registry, player) for player in PLAYERS}


__all__ = ["SafetyLines", "safety_pattern", "player_safety_line", "rebuild_safety_lines"]
