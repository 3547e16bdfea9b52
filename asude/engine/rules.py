"""Règles et constantes de la variante standard ASUDE.

Ce module expose le contrat minimal attendu par le moteur et les tests:
- dimensions du plateau (`BOARD_SIZE`)
- nombre de jetons par joueur (`COINS_PER_PLAYER`)
- délai de la pénalité « ligne de sécurité » (`ROLLBACK_DELAY_SECONDS`)
"""

BOARD_SIZE: int = 13

PLAYERS: tuple[int, int] = (1, 2)

# Chaque joueur pose la moitié de ses jetons sur la cible adverse,
# l'autre moitié dans sa propre zone maison.
COINS_PER_PLAYER: int = 8

# Délai entre l'application provisoire du coup et son annulation.
ROLLBACK_DELAY_SECONDS: float = 5.0

COIN_VARIANTS: tuple[str, str] = ("human", "animal")

DEFAULT_PLAYER_NAMES: tuple[str, str] = ("Player 1", "Player 2")


def opponent(player: int) -> int:
    """Retourne l'identifiant de l'adversaire (1 ↔ 2)."""

    return 2 if player == 1 else 1


__all__ = [
    "BOARD_SIZE",
    "PLAYERS",
    "COINS_PER_PLAYER",
    "ROLLBACK_DELAY_SECONDS",
    "COIN_VARIANTS",
    "DEFAULT_PLAYER_NAMES",
    "opponent",
]
