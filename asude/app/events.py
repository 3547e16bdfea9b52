"""Évènements publiés par la couche application (`asude.app`)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from asude.engine.actions import Action
from asude.engine.errors import RuleViolation
from asude.engine.state import GameState
from asude.engine.zones import Cell


@dataclass(frozen=True)
class StateChangedEvent:
    """Émis après chaque remplacement de l'état courant."""

    state: GameState
    action: Optional[Action] = None


@dataclass(frozen=True)
class MoveRejectedEvent:
    """Émis quand une intention est refusée avec un message pour le joueur."""

    reason: str
    error: RuleViolation
    action: Optional[Action] = None


@dataclass(frozen=True)
class EliminationOccurredEvent:
    player: int
    coin_id: int
    new_score: int


@dataclass(frozen=True)
class SafetyLineTriggeredEvent:
    """Émis dès que le coup provisoire tombe sur une ligne de sécurité."""

    hit_player: int
    owner_player: int
    origin: Cell
    destination: Cell


@dataclass(frozen=True)
class GameWonEvent:
    """Émis quand la partie passe en phase TERMINAL."""

    player: int
    final_scores: Dict[int, int]
