"""Planificateurs de rappels différés.

Le moteur n'a qu'un élément asynchrone: l'annulation différée d'un coup
tombé sur une ligne de sécurité. Le service reçoit un planificateur injecté:
- `ManualScheduler`: horloge virtuelle avancée explicitement (tests, sim)
- `ThreadingScheduler`: `threading.Timer` pour un usage interactif
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Protocol, Tuple

Callback = Callable[[], None]


class ScheduledCall:
    """Poignée d'un rappel planifié.

    `due` est l'échéance absolue sur l'horloge du planificateur émetteur.
    """

    __slots__ = ("due", "callback", "cancelled", "fired", "_timer")

    def __init__(self, due: float, callback: Callback) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self._timer: Optional[threading.Timer] = None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def run(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self.callback()


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        ...


class ManualScheduler:
    """Horloge virtuelle: les rappels ne s'exécutent que via `advance()`."""

    def __init__(self) -> None:
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._sequence = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (call.due, next(self._sequence), call))
        return call

    @property
    def pending_calls(self) -> List[ScheduledCall]:
        return [call for _due, _seq, call in sorted(self._queue) if call.pending]

    def advance(self, seconds: float) -> int:
        """Avance l'horloge et exécute les rappels échus, dans l'ordre d'échéance.

        Returns:
            Nombre de rappels exécutés
        """

        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _seq, call = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if call.pending:
                call.run()
                fired += 1
        self.now = target
        return fired


class ThreadingScheduler:
    """Planificateur temps réel basé sur `threading.Timer`.

    L'échéance `due` des poignées est exprimée sur l'horloge `time.monotonic()`.
    """

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(time.monotonic() + delay, callback)
        timer = threading.Timer(delay, call.run)
        timer.daemon = True
        call._timer = timer
        timer.start()
        return call


__all__ = ["Callback", "ScheduledCall", "Scheduler", "ManualScheduler", "ThreadingScheduler"]
