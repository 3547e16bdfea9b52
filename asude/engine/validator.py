"""Validation d'une destination candidate face à l'occupation courante.

Fonction pure de (destination, joueur, registre). La légalité « côté
d'élimination » des cibles est évaluée par l'appelant, pas ici.
"""

from __future__ import annotations

from asude.engine.coins import CoinRegistry
from asude.engine.zones import Cell, in_bounds, is_forbidden, is_observer, is_target


def is_valid_destination(destination: Cell, player: int, registry: CoinRegistry) -> bool:
    """Retourne True si `player` peut amener un jeton sur `destination`.

    - zone interdite: refus
    - observateur / cible: refus seulement si un jeton adverse l'occupe
    - toute autre case (maison comprise): la case doit être vide
    """

    if not in_bounds(destination):
        return False
    if is_forbidden(destination):
        return False

    owners = registry.owners_at(destination)
    if is_observer(destination) or is_target(destination):
        return all(owner == player for owner in owners)

    return not owners


__all__ = ["is_valid_destination"]
