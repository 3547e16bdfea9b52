"""Encodage d'un GameState en plans numpy 13×13."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from asude.engine.rules import BOARD_SIZE, opponent
from asude.engine.state import GameState, Phase
from asude.engine.zones import (
    OBSERVER_CELLS,
    TARGET_CELLS,
    ZONE_CODES,
    Cell,
    Zone,
    zone_grid,
)

PLANE_NAMES: Tuple[str, ...] = (
    "own_coins",
    "opponent_coins",
    "own_observer_power",
    "own_safety_line",
    "own_home",
    "opponent_home",
    "own_target",
    "opponent_target",
    "own_observer",
    "opponent_observer",
    "forbidden",
)
_PHASES: Tuple[Phase, ...] = tuple(Phase)
_HOME_ZONE = {1: Zone.HOME_1, 2: Zone.HOME_2}


@dataclass(frozen=True)
class ObservationTensor:
    """Plans du plateau et vecteur de métadonnées."""

    planes: np.ndarray
    metadata: np.ndarray


def build_observation(state: GameState) -> ObservationTensor:
    """Construit une observation centrée sur le joueur dont c'est le tour.

    La ligne de sécurité adverse reste cachée: seul le plan du joueur courant
    est encodé.

    Args:
        state: état du jeu à encoder.

    Returns:
        ObservationTensor avec `planes` de forme (len(PLANE_NAMES), 13, 13).
    """

    me = state.turn
    other = opponent(me)
    planes = np.zeros((len(PLANE_NAMES), BOARD_SIZE, BOARD_SIZE), dtype=np.float32)

    def mark(plane: str, cell: Cell, value: float = 1.0) -> None:
        planes[PLANE_NAMES.index(plane), cell[0] - 1, cell[1] - 1] += value

    for coin in state.registry.on_board():
        mark("own_coins" if coin.owner == me else "opponent_coins", coin.cell)
        if coin.owner == me and coin.observer_power:
            mark("own_observer_power", coin.cell)

    for cell in state.safety_line(me):
        mark("own_safety_line", cell)
    zones = zone_grid()
    planes[PLANE_NAMES.index("own_home")] = zones == ZONE_CODES[_HOME_ZONE[me]]
    planes[PLANE_NAMES.index("opponent_home")] = zones == ZONE_CODES[_HOME_ZONE[other]]
    planes[PLANE_NAMES.index("forbidden")] = zones == ZONE_CODES[Zone.FORBIDDEN]
    mark("own_target", TARGET_CELLS[me])
    mark("opponent_target", TARGET_CELLS[other])
    mark("own_observer", OBSERVER_CELLS[me])
    mark("opponent_observer", OBSERVER_CELLS[other])

    return ObservationTensor(planes=planes, metadata=_encode_metadata(state, me))


def _encode_metadata(state: GameState, me: int) -> np.ndarray:
    phase = np.zeros(len(_PHASES), dtype=np.float32)
    phase[_PHASES.index(state.phase)] = 1.0
    total = float(state.coins_per_player)
    extra = np.array(
        [
            1.0 if me == 1 else 0.0,
            state.player(me).score / total,
            state.player(opponent(me)).score / total,
            1.0 if state.is_locked else 0.0,
        ],
        dtype=np.float32,
    )
    return np.concatenate([phase, extra])


__all__ = ["PLANE_NAMES", "ObservationTensor", "build_observation"]
