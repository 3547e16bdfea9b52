"""Taxonomie des refus du moteur.

Aucun refus n'est fatal: l'état précédent reste intact. Les refus `silent`
correspondent aux entrées simplement ignorées (pas de message à l'UI).
"""

from __future__ import annotations


class RuleViolation(ValueError):
    """Action refusée par les règles."""

    silent: bool = False


class ConfigurationError(RuleViolation):
    """Configuration de partie invalide (phase CONFIG)."""


class WrongPhase(RuleViolation):
    """Action non prévue dans la phase courante."""


class InvalidPlacement(RuleViolation):
    """Pose hors zone, hors mode ou sur une case maison occupée (SETUP)."""


class InvalidMove(RuleViolation):
    """Destination absente de l'ensemble légal du jeton sélectionné."""


class InvalidElimination(RuleViolation):
    """Entrée dans une cible interdite par la règle de camp / pouvoir observateur."""


class InputLocked(RuleViolation):
    """Une action en attente bloque la sélection et les déplacements."""


class NoPendingAction(RuleViolation):
    """Confirmation reçue alors que rien n'est en attente."""

    silent = True


class NoSelection(RuleViolation):
    silent = True


class WrongTurn(RuleViolation):
    silent = True


class GameOver(RuleViolation):
    silent = True


__all__ = [
    "RuleViolation",
    "ConfigurationError",
    "WrongPhase",
    "InvalidPlacement",
    "InvalidMove",
    "InvalidElimination",
    "InputLocked",
    "NoPendingAction",
    "NoSelection",
    "WrongTurn",
    "GameOver",
]
