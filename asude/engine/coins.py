"""Registre des jetons (coins) d'une partie.

Le registre est immuable: chaque mutation retourne un nouveau registre.
Un jeton éliminé est retiré du registre (pas simplement marqué).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from asude.engine.zones import Cell


@dataclass(frozen=True)
class Coin:
    """Jeton d'un joueur.

    Args:
        coin_id: identifiant unique sur toute la partie
        owner: joueur propriétaire (1 ou 2)
        position: case occupée, None tant que le jeton n'est pas posé
        origin_side: camp que le jeton représente depuis sa pose
        observer_power: pouvoir acquis en entrant dans son observateur (définitif)
    """

    coin_id: int
    owner: int
    position: Optional[Cell] = None
    origin_side: Optional[int] = None
    observer_power: bool = False

    @property
    def is_placed(self) -> bool:
        return self.position is not None

    @property
    def cell(self) -> Cell:
        """Case occupée; erreur si le jeton est encore dans la réserve."""

        if self.position is None:
            raise RuntimeError(f"Jeton {self.coin_id} non posé")
        return self.position

    @property
    def is_target_coin(self) -> bool:
        """Jeton posé à l'origine sur la cible adverse (camp ≠ propriétaire)."""

        return self.origin_side is not None and self.origin_side != self.owner


@dataclass(frozen=True)
class CoinRegistry:
    """Collection ordonnée des jetons des deux joueurs."""

    coins: Tuple[Coin, ...] = ()

    @classmethod
    def with_reserve(cls, coins_per_player: int) -> "CoinRegistry":
        """Crée les jetons non posés: 1..N pour le joueur 1, N+1..2N pour le joueur 2."""

        coins: List[Coin] = []
        for player in (1, 2):
            start_id = 1 if player == 1 else coins_per_player + 1
            coins.extend(
                Coin(coin_id=start_id + offset, owner=player)
                for offset in range(coins_per_player)
            )
        return cls(coins=tuple(coins))

    def __iter__(self) -> Iterator[Coin]:
        return iter(self.coins)

    def __len__(self) -> int:
        return len(self.coins)

    def __contains__(self, coin_id: object) -> bool:
        return any(coin.coin_id == coin_id for coin in self.coins)

    # -- Lecture --
    def get(self, coin_id: int) -> Coin:
        for coin in self.coins:
            if coin.coin_id == coin_id:
                return coin
        raise KeyError(coin_id)

    def find(self, coin_id: int) -> Optional[Coin]:
        for coin in self.coins:
            if coin.coin_id == coin_id:
                return coin
        return None

    def on_board(self, player: Optional[int] = None) -> List[Coin]:
        """Jetons posés (d'un joueur si précisé), dans l'ordre du registre."""

        return [
            coin
            for coin in self.coins
            if coin.is_placed and (player is None or coin.owner == player)
        ]

    def unplaced(self, player: int) -> List[Coin]:
        return [
            coin for coin in self.coins if coin.owner == player and not coin.is_placed
        ]

    def coins_at(self, cell: Cell) -> List[Coin]:
        return [coin for coin in self.coins if coin.position == cell]

    def owners_at(self, cell: Cell) -> set[int]:
        return {coin.owner for coin in self.coins if coin.position == cell}

    def count_on_board(self, player: int) -> int:
        return len(self.on_board(player))

    def occupancy(self) -> Dict[Cell, List[Coin]]:
        """Regroupe les jetons posés par case."""

        cells: Dict[Cell, List[Coin]] = {}
        for coin in self.coins:
            if coin.position is not None:
                cells.setdefault(coin.position, []).append(coin)
        return cells

    # -- Mutations (retournent un nouveau registre) --
    def _replace_coin(self, updated: Coin) -> "CoinRegistry":
        if updated.coin_id not in self:
            raise KeyError(updated.coin_id)
        return CoinRegistry(
            coins=tuple(
                updated if coin.coin_id == updated.coin_id else coin
                for coin in self.coins
            )
        )

    def place(self, coin_id: int, cell: Cell, origin_side: int) -> "CoinRegistry":
        """Pose un jeton de la réserve et fixe son camp d'origine."""

        coin = self.get(coin_id)
        if coin.is_placed:
            raise ValueError(f"Jeton {coin_id} déjà posé en {coin.position}")
        return self._replace_coin(replace(coin, position=cell, origin_side=origin_side))

    def relocate(self, coin_id: int, cell: Cell) -> "CoinRegistry":
        coin = self.get(coin_id)
        return self._replace_coin(replace(coin, position=cell))

    def grant_observer_power(self, coin_id: int) -> "CoinRegistry":
        coin = self.get(coin_id)
        if coin.observer_power:
            return self
        return self._replace_coin(replace(coin, observer_power=True))

    def remove(self, coin_id: int) -> "CoinRegistry":
        if coin_id not in self:
            raise KeyError(coin_id)
        return CoinRegistry(
            coins=tuple(coin for coin in self.coins if coin.coin_id != coin_id)
        )

    @classmethod
    def from_coins(cls, coins: Iterable[Coin]) -> "CoinRegistry":
        """Construit un registre en vérifiant l'unicité des identifiants."""

        ordered = tuple(coins)
        ids = [coin.coin_id for coin in ordered]
        if len(ids) != len(set(ids)):
            raise ValueError("Identifiants de jetons dupliqués")
        return cls(coins=ordered)


__all__ = ["Coin", "CoinRegistry"]
