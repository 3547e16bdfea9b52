"""Outils de simulation headless et d'encodage d'observations."""

from .features import ObservationTensor, build_observation
from .runner import HeadlessEnv, StepResult

__all__ = ["HeadlessEnv", "StepResult", "ObservationTensor", "build_observation"]
