import time

import pytest

from asude.app import (
    EliminationOccurredEvent,
    EventBus,
    GameService,
    GameWonEvent,
    ManualScheduler,
    MoveRejectedEvent,
    SafetyLineTriggeredEvent,
    StateChangedEvent,
    ThreadingScheduler,
)
from asude.engine.actions import MoveTo, SelectCoin
from asude.engine.errors import InvalidElimination, InvalidMove, InvalidPlacement
from asude.engine.state import PendingAction, Phase
from tests.helpers import SETUP_CLICKS, coin, playing_state


@pytest.fixture
def recorded_service():
    bus = EventBus()
    events = []
    bus.subscribe(events.append)
    scheduler = ManualScheduler()
    service = GameService(event_bus=bus, scheduler=scheduler)
    return service, scheduler, events


def _of_type(events, event_type):
    return [event for event in events if isinstance(event, event_type)]


def _safety_line_state(scores=(0, 0)):
    return playing_state(
        coin(1, 1, (5, 4)),
        coin(2, 1, (1, 1)),
        coin(9, 2, (7, 3)),
        turn=2,
        scores=scores,
    )


def test_state_requires_a_game():
    with pytest.raises(RuntimeError):
        _ = GameService().state


def test_event_bus_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(received.append)
    bus.publish("a")
    unsubscribe()
    bus.publish("b")
    assert received == ["a"]


def test_event_bus_filters_by_type():
    bus = EventBus()
    won = []
    bus.subscribe(won.append, GameWonEvent)
    event = GameWonEvent(player=1, final_scores={1: 8, 2: 0})
    bus.publish(StateChangedEvent(state=None))
    bus.publish(event)
    assert won == [event]


def test_start_new_game_publishes_initial_state(recorded_service):
    service, _scheduler, events = recorded_service
    state = service.start_new_game()
    assert state.phase == Phase.CONFIG
    assert events == [StateChangedEvent(state=state)]


def test_full_setup_through_service(recorded_service):
    service, _scheduler, events = recorded_service
    service.start_new_game()
    service.configure(player_names=("Alice", "Bob"), player1_variant="animal")
    service.start_game()
    for row, col in SETUP_CLICKS:
        service.move(row, col)

    assert service.state.phase == Phase.PLAYING
    assert service.state.player(1).name == "Alice"
    assert len(_of_type(events, StateChangedEvent)) == 3 + len(SETUP_CLICKS)
    assert not _of_type(events, MoveRejectedEvent)


def test_rejected_placement_is_published(recorded_service):
    service, _scheduler, events = recorded_service
    service.start_new_game()
    before = service.start_game()
    events.clear()

    after = service.move(5, 5)

    assert after is before
    rejected = _of_type(events, MoveRejectedEvent)
    assert len(rejected) == 1
    assert isinstance(rejected[0].error, InvalidPlacement)
    assert rejected[0].action == MoveTo(row=5, col=5)
    assert not _of_type(events, StateChangedEvent)


def test_silent_rejections_publish_nothing(recorded_service):
    service, _scheduler, events = recorded_service
    service.resume(playing_state(coin(1, 1, (5, 5)), coin(9, 2, (13, 1))))
    events.clear()

    service.select(2, 9)  # pas son tour
    service.move(4, 4)  # aucune sélection
    service.confirm_safety_line()  # rien en attente

    assert events == []


def test_invalid_move_is_published(recorded_service):
    service, _scheduler, events = recorded_service
    service.resume(playing_state(coin(1, 1, (5, 5)), coin(9, 2, (13, 1))))
    service.select(1, 1)
    events.clear()

    service.move(5, 6)

    rejected = _of_type(events, MoveRejectedEvent)
    assert len(rejected) == 1
    assert isinstance(rejected[0].error, InvalidMove)


def test_elimination_event(recorded_service):
    service, _scheduler, events = recorded_service
    service.resume(
        playing_state(coin(1, 1, (11, 5)), coin(2, 1, (1, 1)), coin(9, 2, (13, 1)))
    )
    service.select(1, 1)
    events.clear()

    service.move(13, 7)

    assert isinstance(events[0], StateChangedEvent)
    assert events[1] == EliminationOccurredEvent(player=1, coin_id=1, new_score=1)
    assert not _of_type(events, GameWonEvent)


def test_wrong_zone_publishes_rejection_with_reason(recorded_service):
    service, _scheduler, events = recorded_service
    service.resume(
        playing_state(coin(1, 1, (2, 6)), coin(2, 1, (1, 1)), coin(9, 2, (13, 1)))
    )
    service.select(1, 1)
    events.clear()

    state = service.move(1, 7)

    assert state.pending_action == PendingAction.AWAITING_WRONG_ZONE_DISMISS
    rejected = _of_type(events, MoveRejectedEvent)
    assert len(rejected) == 1
    assert isinstance(rejected[0].error, InvalidElimination)
    assert rejected[0].reason == state.wrong_zone_notice.reason

    assert service.dismiss_wrong_zone().pending_action == PendingAction.NONE


def test_game_won_event(recorded_service):
    service, _scheduler, events = recorded_service
    service.resume(
        playing_state(
            coin(1, 1, (11, 5)),
            coin(2, 1, (1, 1)),
            coin(9, 2, (13, 1)),
            scores=(7, 0),
        )
    )
    service.select(1, 1)
    service.move(13, 7)

    won = _of_type(events, GameWonEvent)
    assert won == [GameWonEvent(player=1, final_scores={1: 8, 2: 0})]
    events.clear()
    service.select(2, 9)
    assert events == []


class TestSafetyLineRollback:
    """Annulation automatique après le délai de 5 secondes."""

    def _hit(self, service):
        service.resume(_safety_line_state())
        service.select(2, 9)
        return service.move(6, 4)

    def test_trigger_event_and_scheduled_rollback(self, recorded_service):
        service, scheduler, events = recorded_service
        state = self._hit(service)

        assert state.pending_action == PendingAction.AWAITING_SAFETY_LINE_CONFIRM
        assert _of_type(events, SafetyLineTriggeredEvent) == [
            SafetyLineTriggeredEvent(
                hit_player=2, owner_player=1, origin=(7, 3), destination=(6, 4)
            )
        ]
        assert len(scheduler.pending_calls) == 1
        assert service.rollback_call is scheduler.pending_calls[0]

    def test_rollback_fires_after_delay(self, recorded_service):
        service, scheduler, _events = recorded_service
        self._hit(service)

        assert scheduler.advance(4.9) == 0
        assert service.state.registry.get(9).position == (6, 4)

        assert scheduler.advance(0.1) == 1
        state = service.state
        assert state.registry.get(9).position == (7, 3)
        assert state.scores == {1: 1, 2: 0}
        assert state.turn == 1
        assert state.pending_action == PendingAction.NONE

    def test_input_locked_until_rollback(self, recorded_service):
        service, scheduler, events = recorded_service
        locked = self._hit(service)
        events.clear()

        assert service.select(2, 9) is locked
        assert len(_of_type(events, MoveRejectedEvent)) == 1

    def test_manual_confirm_makes_timer_stale(self, recorded_service):
        service, scheduler, _events = recorded_service
        self._hit(service)
        confirmed = service.confirm_safety_line()
        assert confirmed.scores == {1: 1, 2: 0}

        scheduler.advance(5.0)

        assert service.state is confirmed
        assert service.state.scores == {1: 1, 2: 0}

    def test_stale_timer_ignores_a_newer_hit(self, recorded_service):
        service, scheduler, _events = recorded_service
        self._hit(service)
        service.confirm_safety_line()
        scheduler.advance(3.0)

        # Le joueur 1 joue, puis le joueur 2 retombe sur la ligne
        service.select(1, 2)
        service.move(2, 2)
        service.select(2, 9)
        service.move(6, 4)
        assert service.state.pending_action == PendingAction.AWAITING_SAFETY_LINE_CONFIRM

        # Premier délai écoulé: le rappel est déjà consommé
        scheduler.advance(2.0)
        assert service.state.pending_action == PendingAction.AWAITING_SAFETY_LINE_CONFIRM

        scheduler.advance(3.0)
        assert service.state.pending_action == PendingAction.NONE
        assert service.state.scores == {1: 2, 2: 0}

    def test_timer_ignored_after_new_game(self, recorded_service):
        service, scheduler, events = recorded_service
        self._hit(service)
        fresh = service.start_new_game()
        assert service.rollback_call is None
        events.clear()

        assert scheduler.advance(5.0) == 1

        assert service.state is fresh
        assert service.state.phase == Phase.CONFIG
        assert events == []

    def test_timer_ignored_after_resume(self, recorded_service):
        service, scheduler, events = recorded_service
        self._hit(service)
        other = service.resume(playing_state(coin(1, 1, (5, 5)), coin(9, 2, (13, 1))))
        events.clear()

        scheduler.advance(5.0)

        assert service.state is other
        assert service.state.registry.get(1).position == (5, 5)
        assert events == []

    def test_default_scheduler_waits_for_host(self):
        service = GameService()
        assert isinstance(service.scheduler, ManualScheduler)
        self._hit(service)

        assert service.state.pending_action == PendingAction.AWAITING_SAFETY_LINE_CONFIRM
        service.scheduler.advance(5.0)
        assert service.state.pending_action == PendingAction.NONE
        assert service.state.registry.get(9).position == (7, 3)

    def test_rollback_can_end_the_game(self, recorded_service):
        service, scheduler, events = recorded_service
        service.resume(_safety_line_state(scores=(7, 0)))
        service.select(2, 9)
        service.move(6, 4)

        scheduler.advance(5.0)

        assert service.state.phase == Phase.TERMINAL
        assert _of_type(events, GameWonEvent) == [
            GameWonEvent(player=1, final_scores={1: 8, 2: 0})
        ]


def test_threading_scheduler_rollback():
    service = GameService(scheduler=ThreadingScheduler(), rollback_delay=0.05)
    service.resume(_safety_line_state())
    service.dispatch(SelectCoin(player=2, coin_id=9))
    service.dispatch(MoveTo(row=6, col=4))

    deadline = time.monotonic() + 2.0
    while service.state.is_locked and time.monotonic() < deadline:
        time.sleep(0.01)

    assert service.state.pending_action == PendingAction.NONE
    assert service.state.registry.get(9).position == (7, 3)
