"""Bus d'évènements synchrone pour la couche application."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

Subscriber = Callable[[object], None]


class EventBus:
    """Diffuse les évènements du service aux renderers abonnés.

    Un abonné peut ne recevoir qu'un type d'évènement (`event_type`).
    Les abonnés sont appelés dans l'ordre d'enregistrement; une exception
    levée par l'un d'eux interrompt la diffusion.
    """

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: List[Tuple[Optional[type], Subscriber]] = []

    def subscribe(
        self, callback: Subscriber, event_type: Optional[type] = None
    ) -> Callable[[], None]:
        """Enregistre un abonné et retourne la fonction qui le désinscrit."""

        entry = (event_type, callback)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, event: object) -> None:
        # Copie: un abonné peut se désinscrire pendant la diffusion
        for event_type, callback in list(self._subscribers):
            if event_type is None or isinstance(event, event_type):
                callback(event)
