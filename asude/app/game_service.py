"""Service d'orchestration pour une partie ASUDE."""

from __future__ import annotations

import logging
import threading
from typing import Sequence

from asude.app.event_bus import EventBus
from asude.app.events import (
    EliminationOccurredEvent,
    GameWonEvent,
    MoveRejectedEvent,
    SafetyLineTriggeredEvent,
    StateChangedEvent,
)
from asude.app.scheduler import ManualScheduler, ScheduledCall, Scheduler
from asude.engine.actions import (
    Action,
    ConfirmSafetyLine,
    Configure,
    DismissWrongZone,
    MoveTo,
    SelectCoin,
    StartGame,
)
from asude.engine.errors import InvalidElimination, RuleViolation
from asude.engine.rules import COIN_VARIANTS, COINS_PER_PLAYER, ROLLBACK_DELAY_SECONDS
from asude.engine.state import GameConfig, GameState, PendingRollback, ResolutionKind

logger = logging.getLogger(__name__)


class GameService:
    """Wrappe `GameState` et publie les évènements nécessaires au rendu.

    Chaque intention lit l'état courant et le remplace en une seule fois.
    Un verrou unique sérialise les intentions et le rappel d'annulation.

    Sans planificateur injecté, le service utilise un `ManualScheduler`:
    l'annulation d'une ligne de sécurité ne se produit alors que lorsque
    l'hôte appelle `scheduler.advance()` ou `confirm_safety_line()`. Une UI
    interactive injecte `ThreadingScheduler()`.
    """

    def __init__(
        self,
        *,
        event_bus: EventBus | None = None,
        scheduler: Scheduler | None = None,
        rollback_delay: float = ROLLBACK_DELAY_SECONDS,
    ) -> None:
        self._event_bus = event_bus or EventBus()
        self._scheduler: Scheduler = scheduler or ManualScheduler()
        self._rollback_delay = rollback_delay
        self._lock = threading.RLock()
        self._state: GameState | None = None
        self._rollback_call: ScheduledCall | None = None

    @property
    def event_bus(self) -> EventBus:
        """Retourne le bus d'évènements utilisé par le service."""

        return self._event_bus

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def state(self) -> GameState:
        """État courant de la partie (erreur si aucune partie lancée)."""

        if self._state is None:
            raise RuntimeError("Aucune partie initialisée. Utiliser start_new_game().")
        return self._state

    @property
    def rollback_call(self) -> ScheduledCall | None:
        """Rappel d'annulation planifié pour le dernier coup piégé."""

        return self._rollback_call

    def start_new_game(self, config: GameConfig | None = None) -> GameState:
        """Crée une partie en phase CONFIG et publie l'état initial."""

        with self._lock:
            state = GameState.new_game(config)
            self._state = state
            self._rollback_call = None
            self._event_bus.publish(StateChangedEvent(state=state))
            return state

    def resume(self, state: GameState) -> GameState:
        """Reprend une partie à partir d'un état existant."""

        with self._lock:
            self._state = state
            self._rollback_call = None
            self._event_bus.publish(StateChangedEvent(state=state))
            return state

    # -- Intentions entrantes --
    def configure(
        self,
        player_names: Sequence[str] = ("Player 1", "Player 2"),
        coins_per_player: int = COINS_PER_PLAYER,
        player1_variant: str = COIN_VARIANTS[0],
    ) -> GameState:
        names = tuple(player_names)
        return self.dispatch(
            Configure(
                player_names=names,  # type: ignore[arg-type]
                coins_per_player=coins_per_player,
                player1_variant=player1_variant,
            )
        )

    def start_game(self) -> GameState:
        return self.dispatch(StartGame())

    def select(self, player: int, coin_id: int) -> GameState:
        return self.dispatch(SelectCoin(player=player, coin_id=coin_id))

    def move(self, row: int, col: int) -> GameState:
        return self.dispatch(MoveTo(row=row, col=col))

    def confirm_safety_line(self) -> GameState:
        return self.dispatch(ConfirmSafetyLine())

    def dismiss_wrong_zone(self) -> GameState:
        return self.dispatch(DismissWrongZone())

    def dispatch(self, action: Action) -> GameState:
        """Applique une intention; un refus est publié puis l'état reste inchangé."""

        with self._lock:
            current_state = self.state
            try:
                new_state = current_state.apply_action(action)
            except RuleViolation as error:
                if error.silent:
                    logger.debug("Intention ignorée %s: %s", action, error)
                else:
                    logger.debug("Intention refusée %s: %s", action, error)
                    self._event_bus.publish(
                        MoveRejectedEvent(reason=str(error), error=error, action=action)
                    )
                return current_state

            self._state = new_state
            self._publish_transition(action, current_state, new_state)
            return new_state

    # -- Publication --
    def _publish_transition(
        self, action: Action, previous_state: GameState, new_state: GameState
    ) -> None:
        self._event_bus.publish(StateChangedEvent(state=new_state, action=action))

        resolution = new_state.last_resolution
        kind = resolution.kind if resolution is not None else None
        rollback = new_state.pending_rollback
        notice = new_state.wrong_zone_notice

        if kind == ResolutionKind.COIN_ELIMINATED:
            self._publish_elimination(new_state)
        elif kind == ResolutionKind.SAFETY_LINE_HIT and rollback is not None:
            self._event_bus.publish(
                SafetyLineTriggeredEvent(
                    hit_player=rollback.hit_player,
                    owner_player=rollback.owner_player,
                    origin=rollback.origin,
                    destination=rollback.destination,
                )
            )
            self._schedule_rollback(rollback)
        elif kind == ResolutionKind.WRONG_TARGET_ZONE and notice is not None:
            self._event_bus.publish(
                MoveRejectedEvent(
                    reason=notice.reason,
                    error=InvalidElimination(notice.reason),
                    action=action,
                )
            )

        winner = new_state.winner_id
        if winner is not None and not previous_state.is_game_over:
            self._event_bus.publish(
                GameWonEvent(player=winner, final_scores=new_state.scores)
            )

    def _publish_elimination(self, state: GameState) -> None:
        resolution = state.last_resolution
        if resolution is None or resolution.player is None or resolution.coin_id is None:
            raise RuntimeError("Élimination enregistrée sans joueur ni jeton")
        self._event_bus.publish(
            EliminationOccurredEvent(
                player=resolution.player,
                coin_id=resolution.coin_id,
                new_score=state.player(resolution.player).score,
            )
        )

    # -- Annulation différée --
    def _schedule_rollback(self, rollback: PendingRollback) -> None:
        def fire() -> None:
            self._fire_rollback(rollback)

        self._rollback_call = self._scheduler.call_later(self._rollback_delay, fire)

    def _fire_rollback(self, rollback: PendingRollback) -> None:
        with self._lock:
            state = self._state
            if state is None or state.pending_rollback is not rollback:
                logger.debug("Annulation périmée ignorée pour le jeton %d", rollback.coin_id)
                return
            self.dispatch(ConfirmSafetyLine())
