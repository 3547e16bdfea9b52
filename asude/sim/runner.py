"""Boucle headless pour le moteur ASUDE.

Ce module expose un environnement minimaliste pour piloter le moteur via une
API `reset()` / `step()` et énumérer les intentions acceptables. Les parties
aléatoires servent à vérifier les invariants sur de nombreux états atteints.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, List

from asude.engine.actions import (
    Action,
    ConfirmSafetyLine,
    DismissWrongZone,
    MoveTo,
    SelectCoin,
    StartGame,
)
from asude.engine.state import GameConfig, GameState, PendingAction, Phase


@dataclass(frozen=True)
class StepResult:
    """Résultat d'un appel à HeadlessEnv.step()."""

    state: GameState
    done: bool
    info: Dict[str, Any]


class HeadlessEnv:
    """Environnement headless léger pour le moteur ASUDE."""

    def __init__(self, *, seed: int | None = None, config: GameConfig | None = None) -> None:
        self._base_seed = seed
        self._config = config
        self._rng = random.Random(seed)
        self._state: GameState | None = None

    @property
    def state(self) -> GameState:
        """Retourne l'état courant (reset doit avoir été appelé)."""

        if self._state is None:
            raise RuntimeError("reset() doit être appelé avant d'accéder à l'état")
        return self._state

    def reset(self, *, seed: int | None = None, state: GameState | None = None) -> GameState:
        """Réinitialise l'environnement en phase SETUP (ou sur l'état fourni)."""

        effective_seed = seed if seed is not None else self._base_seed
        self._rng = random.Random(effective_seed)
        if state is not None:
            self._state = state
        else:
            self._state = GameState.new_game(self._config).apply_action(StartGame())
        return self._state

    def legal_intents(self) -> List[Action]:
        """Intentions acceptées par l'état courant."""

        state = self.state
        if state.phase == Phase.SETUP:
            return [MoveTo(row=row, col=col) for row, col in state.placement_cells()]
        if state.phase != Phase.PLAYING:
            return []
        if state.pending_action == PendingAction.AWAITING_SAFETY_LINE_CONFIRM:
            return [ConfirmSafetyLine()]
        if state.pending_action == PendingAction.AWAITING_WRONG_ZONE_DISMISS:
            return [DismissWrongZone()]
        if state.selected_coin_id is not None and state.legal_destinations:
            return [MoveTo(row=row, col=col) for row, col in state.legal_destinations]
        return [
            SelectCoin(player=state.turn, coin_id=coin_id)
            for coin_id, destinations in state.legal_moves().items()
            if destinations
        ]

    def step(self, action: Action) -> StepResult:
        """Applique une intention et renvoie le résultat."""

        new_state = self.state.apply_action(action)
        self._state = new_state
        return StepResult(
            state=new_state,
            done=new_state.is_game_over,
            info={"last_action": action, "resolution": new_state.last_resolution},
        )

    def play_random_match(self, max_steps: int = 2000) -> List[GameState]:
        """Joue des intentions tirées au hasard; retourne la trajectoire des états.

        La partie s'arrête à la victoire, au blocage (aucune intention) ou
        après `max_steps` intentions.
        """

        trajectory = [self.state]
        for _ in range(max_steps):
            intents = self.legal_intents()
            if not intents:
                break
            result = self.step(self._rng.choice(intents))
            trajectory.append(result.state)
            if result.done:
                break
        return trajectory
