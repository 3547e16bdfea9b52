"""Intentions reçues de la couche UI.

Chaque intention est une dataclass immuable appliquée par
`GameState.apply_action`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Action:
    """Action de base."""

    pass


@dataclass(frozen=True)
class Configure(Action):
    """Configure la partie (phase CONFIG).

    Args:
        player_names: noms des joueurs 1 et 2
        coins_per_player: nombre de jetons par joueur (pair)
        player1_variant: apparence des jetons du joueur 1 ("human" ou "animal")
    """

    player_names: Tuple[str, str] = ("Player 1", "Player 2")
    coins_per_player: int = 8
    player1_variant: str = "human"


@dataclass(frozen=True)
class StartGame(Action):
    """Crée les jetons non posés et passe en phase SETUP."""

    pass


@dataclass(frozen=True)
class SelectCoin(Action):
    """Sélectionne un jeton et expose ses destinations légales."""

    player: int
    coin_id: int


@dataclass(frozen=True)
class MoveTo(Action):
    """Clic sur une case: pose (SETUP) ou déplacement du jeton sélectionné (PLAYING)."""

    row: int
    col: int

    @property
    def cell(self) -> Tuple[int, int]:
        return (self.row, self.col)


@dataclass(frozen=True)
class ConfirmSafetyLine(Action):
    """Exécute l'annulation du coup tombé sur une ligne de sécurité."""

    pass


@dataclass(frozen=True)
class DismissWrongZone(Action):
    """Ferme l'avis « mauvaise cible »; le même joueur rejoue."""

    pass


__all__ = [
    "Action",
    "Configure",
    "StartGame",
    "SelectCoin",
    "MoveTo",
    "ConfirmSafetyLine",
    "DismissWrongZone",
]
