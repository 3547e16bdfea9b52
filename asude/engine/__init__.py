"""Engine package exposing rules, zones and state modules."""

from . import rules, zones  # re-export for convenience
from .state import GameState, Phase

__all__ = ["rules", "zones", "GameState", "Phase"]
