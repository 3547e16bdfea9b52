"""État du jeu et logique de transition.

Ce module définit l'état immuable d'une partie ASUDE et les transitions
CONFIG → SETUP → PLAYING → TERMINAL. Chaque action acceptée lit un état et
retourne un nouvel état complet; un refus lève une `RuleViolation` et laisse
l'état courant intact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from asude.engine.actions import (
    Action,
    ConfirmSafetyLine,
    Configure,
    DismissWrongZone,
    MoveTo,
    SelectCoin,
    StartGame,
)
from asude.engine.coins import Coin, CoinRegistry
from asude.engine.errors import (
    ConfigurationError,
    GameOver,
    InputLocked,
    InvalidMove,
    InvalidPlacement,
    NoPendingAction,
    NoSelection,
    WrongPhase,
    WrongTurn,
)
from asude.engine.moves import (
    candidate_destinations,
    elimination_allowed,
    legal_destinations,
    passes_coin_filter,
)
from asude.engine.rules import (
    COIN_VARIANTS,
    COINS_PER_PLAYER,
    DEFAULT_PLAYER_NAMES,
    PLAYERS,
    opponent,
)
from asude.engine.safety import SafetyLines, rebuild_safety_lines
from asude.engine.zones import (
    HOME_ZONES,
    OBSERVER_CELLS,
    TARGET_CELLS,
    Cell,
    in_bounds,
    is_boundary_area,
    is_home,
    is_observer,
    is_special_gateway,
    target_owner,
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Phases d'une partie."""

    CONFIG = "CONFIG"
    SETUP = "SETUP"
    PLAYING = "PLAYING"
    TERMINAL = "TERMINAL"


class PlacementMode(Enum):
    """Mode de pose pendant SETUP."""

    TARGET = "TARGET"
    HOME = "HOME"


class PendingAction(Enum):
    """Sous-états de PLAYING.

    L'élimination étant résolue immédiatement, AWAITING_ELIMINATION_CONFIRM
    ne bloque jamais les entrées; les deux autres les bloquent.
    """

    NONE = "NONE"
    AWAITING_ELIMINATION_CONFIRM = "AWAITING_ELIMINATION_CONFIRM"
    AWAITING_SAFETY_LINE_CONFIRM = "AWAITING_SAFETY_LINE_CONFIRM"
    AWAITING_WRONG_ZONE_DISMISS = "AWAITING_WRONG_ZONE_DISMISS"


_LOCKING_ACTIONS = (
    PendingAction.AWAITING_SAFETY_LINE_CONFIRM,
    PendingAction.AWAITING_WRONG_ZONE_DISMISS,
)


class ResolutionKind(Enum):
    """Nature de la dernière action acceptée (pour les messages UI)."""

    CONFIGURED = "CONFIGURED"
    SETUP_STARTED = "SETUP_STARTED"
    COIN_PLACED = "COIN_PLACED"
    PLACEMENT_MODE_SWITCHED = "PLACEMENT_MODE_SWITCHED"
    SETUP_COMPLETED = "SETUP_COMPLETED"
    COIN_SELECTED = "COIN_SELECTED"
    COIN_MOVED = "COIN_MOVED"
    OBSERVER_POWER_GAINED = "OBSERVER_POWER_GAINED"
    COIN_ELIMINATED = "COIN_ELIMINATED"
    SAFETY_LINE_HIT = "SAFETY_LINE_HIT"
    SAFETY_LINE_ROLLBACK = "SAFETY_LINE_ROLLBACK"
    WRONG_TARGET_ZONE = "WRONG_TARGET_ZONE"
    WRONG_ZONE_DISMISSED = "WRONG_ZONE_DISMISSED"


@dataclass(frozen=True)
class GameConfig:
    """Paramètres d'une partie."""

    player_names: Tuple[str, str] = DEFAULT_PLAYER_NAMES
    coins_per_player: int = COINS_PER_PLAYER
    player1_variant: str = COIN_VARIANTS[0]

    def validated(self) -> "GameConfig":
        """Retourne une configuration normalisée ou lève ConfigurationError."""

        if len(self.player_names) != 2:
            raise ConfigurationError("Exactement deux joueurs sont attendus")
        names = tuple(
            name.strip() if name and name.strip() else default
            for name, default in zip(self.player_names, DEFAULT_PLAYER_NAMES)
        )
        count = self.coins_per_player
        if count <= 0 or count % 2 != 0:
            raise ConfigurationError(
                f"Le nombre de jetons doit être pair et positif: {count}"
            )
        if count // 2 > len(HOME_ZONES[1]):
            raise ConfigurationError(
                f"La zone maison ne peut accueillir que {len(HOME_ZONES[1])} jetons"
            )
        if self.player1_variant not in COIN_VARIANTS:
            raise ConfigurationError(f"Variante inconnue: {self.player1_variant!r}")
        return GameConfig(
            player_names=(names[0], names[1]),
            coins_per_player=count,
            player1_variant=self.player1_variant,
        )

    def variant_for(self, player: int) -> str:
        if player == 1:
            return self.player1_variant
        return next(variant for variant in COIN_VARIANTS if variant != self.player1_variant)


@dataclass(frozen=True)
class PlayerState:
    """Représentation d'un joueur."""

    player_id: int
    name: str
    coin_variant: str
    score: int = 0


@dataclass(frozen=True)
class PendingRollback:
    """Annulation pré-calculée d'un coup tombé sur une ligne de sécurité."""

    hit_player: int
    owner_player: int
    coin_id: int
    origin: Cell
    destination: Cell
    resulting_scores: Tuple[int, int]


@dataclass(frozen=True)
class WrongZoneNotice:
    """Avis affiché quand un jeton vise une cible interdite pour son camp."""

    player: int
    coin_id: int
    target_cell: Cell
    target_owner: int
    origin_side: int
    reason: str


@dataclass(frozen=True)
class Resolution:
    """Trace de la dernière action acceptée."""

    kind: ResolutionKind
    player: Optional[int] = None
    coin_id: Optional[int] = None
    origin: Optional[Cell] = None
    destination: Optional[Cell] = None


@dataclass(frozen=True)
class SelectionInfo:
    """Résumé du jeton sélectionné pour la ligne de statut."""

    coin_id: int
    destinations: Tuple[Cell, ...]
    has_observer_power: bool
    on_special_gateway: bool
    in_observer_zone: bool


def _players_from_config(config: GameConfig) -> Tuple[PlayerState, PlayerState]:
    return (
        PlayerState(player_id=1, name=config.player_names[0], coin_variant=config.variant_for(1)),
        PlayerState(player_id=2, name=config.player_names[1], coin_variant=config.variant_for(2)),
    )


@dataclass(frozen=True)
class GameState:
    """État immuable du jeu.

    Toutes les modifications retournent un nouvel état.
    """

    config: GameConfig
    players: Tuple[PlayerState, PlayerState]
    phase: Phase
    turn: int = 1
    registry: CoinRegistry = field(default_factory=CoinRegistry)
    safety_lines: SafetyLines = field(
        default_factory=lambda: {player: frozenset() for player in PLAYERS}
    )
    total_placed: int = 0
    pending_action: PendingAction = PendingAction.NONE
    pending_rollback: Optional[PendingRollback] = None
    wrong_zone_notice: Optional[WrongZoneNotice] = None
    selected_coin_id: Optional[int] = None
    legal_destinations: Tuple[Cell, ...] = ()
    winner_id: Optional[int] = None
    last_resolution: Optional[Resolution] = None

    @classmethod
    def new_game(cls, config: GameConfig | None = None) -> "GameState":
        """Crée une partie en phase CONFIG.

        Args:
            config: configuration initiale (par défaut 2 joueurs, 8 jetons)

        Returns:
            État initial en phase CONFIG
        """

        config = (config or GameConfig()).validated()
        return cls(config=config, players=_players_from_config(config), phase=Phase.CONFIG)

    # -- Lecture --
    @property
    def coins_per_player(self) -> int:
        return self.config.coins_per_player

    @property
    def is_game_over(self) -> bool:
        return self.phase == Phase.TERMINAL

    @property
    def is_locked(self) -> bool:
        """Vrai si une action en attente bloque sélection et déplacements."""

        return self.pending_action in _LOCKING_ACTIONS

    @property
    def scores(self) -> Dict[int, int]:
        return {player.player_id: player.score for player in self.players}

    def player(self, player_id: int) -> PlayerState:
        return self.players[player_id - 1]

    def safety_line(self, player_id: int) -> FrozenSet[Cell]:
        return self.safety_lines.get(player_id, frozenset())

    @property
    def placement_player(self) -> Optional[int]:
        """Joueur qui doit poser le prochain jeton (None hors SETUP)."""

        if self.phase != Phase.SETUP:
            return None
        return 1 if self.total_placed < self.coins_per_player else 2

    @property
    def placement_mode(self) -> Optional[PlacementMode]:
        if self.phase != Phase.SETUP:
            return None
        index = self.total_placed % self.coins_per_player
        if index < self.coins_per_player // 2:
            return PlacementMode.TARGET
        return PlacementMode.HOME

    def placement_cells(self) -> List[Cell]:
        """Cases où un clic serait accepté pour la pose courante."""

        player = self.placement_player
        if player is None:
            return []
        if self.placement_mode == PlacementMode.TARGET:
            return [TARGET_CELLS[opponent(player)]]
        return sorted(
            cell for cell in HOME_ZONES[player] if not self.registry.coins_at(cell)
        )

    def legal_moves(self) -> Dict[int, Tuple[Cell, ...]]:
        """Destinations légales de chaque jeton du joueur dont c'est le tour."""

        if self.phase != Phase.PLAYING or self.is_locked:
            return {}
        moves: Dict[int, Tuple[Cell, ...]] = {}
        for coin in self.registry.on_board(self.turn):
            moves[coin.coin_id] = legal_destinations(coin, self.registry)
        return moves

    def selection_info(self) -> Optional[SelectionInfo]:
        if self.selected_coin_id is None:
            return None
        coin = self.registry.get(self.selected_coin_id)
        return SelectionInfo(
            coin_id=coin.coin_id,
            destinations=self.legal_destinations,
            has_observer_power=coin.observer_power,
            on_special_gateway=is_special_gateway(coin.cell),
            in_observer_zone=is_observer(coin.cell),
        )

    # -- Transitions --
    def is_action_legal(self, action: Action) -> bool:
        """Vérifie si une action serait acceptée dans l'état actuel."""

        try:
            self.apply_action(action)
        except ValueError:
            return False
        return True

    def apply_action(self, action: Action) -> "GameState":
        """Applique une action et retourne le nouvel état.

        Raises:
            RuleViolation: si l'action est refusée (l'état courant est inchangé)
        """

        if self.is_game_over:
            raise GameOver("La partie est terminée")

        if isinstance(action, Configure):
            return self._configure(action)
        if isinstance(action, StartGame):
            return self._start_game()
        if isinstance(action, SelectCoin):
            return self._select(action)
        if isinstance(action, MoveTo):
            if self.phase == Phase.SETUP:
                return self._place(action.cell)
            if self.phase == Phase.PLAYING:
                return self._move(action.cell)
            raise WrongPhase(f"Aucun déplacement possible en phase {self.phase.value}")
        if isinstance(action, ConfirmSafetyLine):
            return self._confirm_safety_line()
        if isinstance(action, DismissWrongZone):
            return self._dismiss_wrong_zone()

        raise WrongPhase(f"Action inconnue: {action}")

    def _configure(self, action: Configure) -> "GameState":
        if self.phase != Phase.CONFIG:
            raise WrongPhase("La configuration n'est possible qu'en phase CONFIG")
        config = GameConfig(
            player_names=tuple(action.player_names),  # type: ignore[arg-type]
            coins_per_player=action.coins_per_player,
            player1_variant=action.player1_variant,
        ).validated()
        return replace(
            self,
            config=config,
            players=_players_from_config(config),
            last_resolution=Resolution(kind=ResolutionKind.CONFIGURED),
        )

    def _start_game(self) -> "GameState":
        if self.phase != Phase.CONFIG:
            raise WrongPhase("La partie est déjà lancée")
        logger.info(
            "Phase SETUP: %d jetons par joueur (%s vs %s)",
            self.coins_per_player,
            self.players[0].name,
            self.players[1].name,
        )
        return replace(
            self,
            phase=Phase.SETUP,
            registry=CoinRegistry.with_reserve(self.coins_per_player),
            total_placed=0,
            last_resolution=Resolution(kind=ResolutionKind.SETUP_STARTED),
        )

    def _place(self, cell: Cell) -> "GameState":
        player = self.placement_player
        mode = self.placement_mode
        if player is None or mode is None:
            raise RuntimeError("Aucune pose attendue hors phase SETUP")

        if mode == PlacementMode.TARGET:
            expected = TARGET_CELLS[opponent(player)]
            if cell != expected:
                raise InvalidPlacement(
                    f"Joueur {player}: poser sur la cible du joueur {opponent(player)} "
                    f"en {expected} (empilement autorisé)"
                )
            origin_side = opponent(player)
        else:
            if not is_home(cell, player):
                raise InvalidPlacement(
                    f"Joueur {player}: poser dans sa propre zone maison uniquement"
                )
            if self.registry.coins_at(cell):
                raise InvalidPlacement(
                    f"Joueur {player}: la case {cell} est déjà occupée (pas d'empilement)"
                )
            origin_side = player

        coin = self.registry.unplaced(player)[0]
        registry = self.registry.place(coin.coin_id, cell, origin_side)
        total_placed = self.total_placed + 1
        resolution = Resolution(
            kind=ResolutionKind.COIN_PLACED,
            player=player,
            coin_id=coin.coin_id,
            destination=cell,
        )

        new_state = replace(
            self,
            registry=registry,
            safety_lines=rebuild_safety_lines(registry),
            total_placed=total_placed,
            last_resolution=resolution,
        )
        if total_placed == 2 * self.coins_per_player:
            logger.info("Fin du SETUP: %d jetons posés, au joueur 1", total_placed)
            new_state = replace(
                new_state,
                phase=Phase.PLAYING,
                turn=1,
                last_resolution=replace(resolution, kind=ResolutionKind.SETUP_COMPLETED),
            )
        elif new_state.placement_mode != mode:
            new_state = replace(
                new_state,
                last_resolution=replace(
                    resolution, kind=ResolutionKind.PLACEMENT_MODE_SWITCHED
                ),
            )
        return new_state

    def _ensure_input_allowed(self) -> None:
        if self.phase != Phase.PLAYING:
            raise WrongPhase(f"Sélection impossible en phase {self.phase.value}")
        if self.is_locked:
            raise InputLocked(f"Action en attente: {self.pending_action.value}")

    def _select(self, action: SelectCoin) -> "GameState":
        self._ensure_input_allowed()
        if action.player != self.turn:
            raise WrongTurn(f"Ce n'est pas le tour du joueur {action.player}")
        coin = self.registry.find(action.coin_id)
        if coin is None or coin.owner != action.player or not coin.is_placed:
            raise NoSelection(f"Jeton {action.coin_id} indisponible")

        destinations = legal_destinations(coin, self.registry)
        return replace(
            self,
            selected_coin_id=coin.coin_id,
            legal_destinations=destinations,
            last_resolution=Resolution(
                kind=ResolutionKind.COIN_SELECTED,
                player=coin.owner,
                coin_id=coin.coin_id,
                origin=coin.position,
            ),
        )

    def _move(self, destination: Cell) -> "GameState":
        self._ensure_input_allowed()
        if self.selected_coin_id is None:
            raise NoSelection("Aucun jeton sélectionné")
        coin = self.registry.get(self.selected_coin_id)

        if not in_bounds(destination) or destination not in candidate_destinations(
            coin, self.registry
        ):
            raise InvalidMove(f"Destination {destination} invalide pour le jeton {coin.coin_id}")

        target_side = target_owner(destination)
        if target_side is not None:
            if elimination_allowed(coin, destination):
                return self._eliminate(coin, destination)
            return self._reject_wrong_zone(coin, destination, target_side)

        if not passes_coin_filter(coin, destination):
            raise InvalidMove(
                f"Le jeton {coin.coin_id} ne peut pas rentrer dans sa zone maison"
            )

        owner = opponent(coin.owner)
        if destination in self.safety_line(owner) and not is_boundary_area(destination):
            return self._hit_safety_line(coin, destination, owner)

        return self._relocate(coin, destination)

    def _cleared(self, **changes: object) -> "GameState":
        """Nouvel état sans sélection en cours."""

        return replace(self, selected_coin_id=None, legal_destinations=(), **changes)

    def _with_scores(self, scores: Tuple[int, int]) -> Tuple[PlayerState, PlayerState]:
        return (
            replace(self.players[0], score=scores[0]),
            replace(self.players[1], score=scores[1]),
        )

    def _eliminate(self, coin: Coin, destination: Cell) -> "GameState":
        mover = coin.owner
        registry = self.registry.remove(coin.coin_id)
        scores = [player.score for player in self.players]
        scores[mover - 1] += 1
        logger.info(
            "Joueur %d élimine le jeton %d en %s (score %d/%d)",
            mover,
            coin.coin_id,
            destination,
            scores[mover - 1],
            self.coins_per_player,
        )
        new_state = self._cleared(
            registry=registry,
            safety_lines=rebuild_safety_lines(registry),
            players=self._with_scores((scores[0], scores[1])),
            last_resolution=Resolution(
                kind=ResolutionKind.COIN_ELIMINATED,
                player=mover,
                coin_id=coin.coin_id,
                origin=coin.position,
                destination=destination,
            ),
        )
        return new_state._after_score_change(next_turn=opponent(mover))

    def _reject_wrong_zone(self, coin: Coin, destination: Cell, owner: int) -> "GameState":
        # Sans pouvoir observateur, le camp du jeton est celui de la cible visée
        allowed_owner = opponent(owner)
        notice = WrongZoneNotice(
            player=coin.owner,
            coin_id=coin.coin_id,
            target_cell=destination,
            target_owner=owner,
            origin_side=owner,
            reason=(
                f"Les jetons du camp du joueur {owner} ne marquent que "
                f"sur la cible du joueur {allowed_owner}."
            ),
        )
        return self._cleared(
            pending_action=PendingAction.AWAITING_WRONG_ZONE_DISMISS,
            wrong_zone_notice=notice,
            last_resolution=Resolution(
                kind=ResolutionKind.WRONG_TARGET_ZONE,
                player=coin.owner,
                coin_id=coin.coin_id,
                origin=coin.position,
                destination=destination,
            ),
        )

    def _hit_safety_line(self, coin: Coin, destination: Cell, owner: int) -> "GameState":
        scores = [player.score for player in self.players]
        scores[owner - 1] += 1
        rollback = PendingRollback(
            hit_player=coin.owner,
            owner_player=owner,
            coin_id=coin.coin_id,
            origin=coin.cell,
            destination=destination,
            resulting_scores=(scores[0], scores[1]),
        )
        registry = self.registry.relocate(coin.coin_id, destination)
        logger.info(
            "Joueur %d tombe sur la ligne de sécurité du joueur %d en %s",
            coin.owner,
            owner,
            destination,
        )
        return self._cleared(
            registry=registry,
            safety_lines=rebuild_safety_lines(registry),
            pending_action=PendingAction.AWAITING_SAFETY_LINE_CONFIRM,
            pending_rollback=rollback,
            last_resolution=Resolution(
                kind=ResolutionKind.SAFETY_LINE_HIT,
                player=coin.owner,
                coin_id=coin.coin_id,
                origin=coin.position,
                destination=destination,
            ),
        )

    def _relocate(self, coin: Coin, destination: Cell) -> "GameState":
        registry = self.registry.relocate(coin.coin_id, destination)
        kind = ResolutionKind.COIN_MOVED
        if destination == OBSERVER_CELLS[coin.owner]:
            if not coin.observer_power:
                kind = ResolutionKind.OBSERVER_POWER_GAINED
            registry = registry.grant_observer_power(coin.coin_id)
        return self._cleared(
            registry=registry,
            safety_lines=rebuild_safety_lines(registry),
            turn=opponent(coin.owner),
            last_resolution=Resolution(
                kind=kind,
                player=coin.owner,
                coin_id=coin.coin_id,
                origin=coin.position,
                destination=destination,
            ),
        )

    def _confirm_safety_line(self) -> "GameState":
        rollback = self.pending_rollback
        if self.pending_action != PendingAction.AWAITING_SAFETY_LINE_CONFIRM or rollback is None:
            raise NoPendingAction("Aucune ligne de sécurité en attente")

        registry = self.registry.relocate(rollback.coin_id, rollback.origin)
        logger.info(
            "Jeton %d renvoyé en %s, +1 pour le joueur %d",
            rollback.coin_id,
            rollback.origin,
            rollback.owner_player,
        )
        new_state = replace(
            self,
            registry=registry,
            safety_lines=rebuild_safety_lines(registry),
            players=self._with_scores(rollback.resulting_scores),
            pending_action=PendingAction.NONE,
            pending_rollback=None,
            last_resolution=Resolution(
                kind=ResolutionKind.SAFETY_LINE_ROLLBACK,
                player=rollback.hit_player,
                coin_id=rollback.coin_id,
                origin=rollback.destination,
                destination=rollback.origin,
            ),
        )
        return new_state._after_score_change(next_turn=opponent(rollback.hit_player))

    def _dismiss_wrong_zone(self) -> "GameState":
        if self.pending_action != PendingAction.AWAITING_WRONG_ZONE_DISMISS:
            raise NoPendingAction("Aucun avis de mauvaise cible affiché")
        notice = self.wrong_zone_notice
        return replace(
            self,
            pending_action=PendingAction.NONE,
            wrong_zone_notice=None,
            last_resolution=Resolution(
                kind=ResolutionKind.WRONG_ZONE_DISMISSED,
                player=notice.player if notice else self.turn,
            ),
        )

    # -- Victoire --
    def _winner(self) -> Optional[int]:
        """Score atteignant N, ou joueur n'ayant plus aucun jeton sur le plateau."""

        for player in self.players:
            if player.score >= self.coins_per_player:
                return player.player_id
        for player_id in PLAYERS:
            if self.registry.count_on_board(player_id) == 0:
                return player_id
        return None

    def _after_score_change(self, *, next_turn: int) -> "GameState":
        winner = self._winner()
        if winner is None:
            return replace(self, turn=next_turn)
        logger.info("Victoire du joueur %d, scores %s", winner, self.scores)
        return replace(
            self,
            phase=Phase.TERMINAL,
            winner_id=winner,
            pending_action=PendingAction.NONE,
            pending_rollback=None,
        )


__all__ = [
    "Phase",
    "PlacementMode",
    "PendingAction",
    "ResolutionKind",
    "GameConfig",
    "PlayerState",
    "PendingRollback",
    "WrongZoneNotice",
    "Resolution",
    "SelectionInfo",
    "GameState",
]
