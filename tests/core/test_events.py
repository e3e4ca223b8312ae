"""Tests for the event emitter and round phases."""

from charlie.game import EventEmitter, EventType, GameEvent, GamePhase


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_typed_and_catch_all_handlers(self):
        """Test that handlers receive only the events they asked for."""
        emitter = EventEmitter()
        typed, everything = [], []
        emitter.subscribe(typed.append, EventType.BET_PLACED)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.BET_PLACED, amount=10)
        emitter.emit_new(EventType.CARD_DEALT, card="A♠")

        assert [e.event_type for e in typed] == [EventType.BET_PLACED]
        assert len(everything) == 2
        assert typed[0].data == {"amount": 10}

    def test_unsubscribe(self):
        """Test removing a handler."""
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append)
        emitter.unsubscribe(seen.append)
        emitter.unsubscribe(seen.append, EventType.ROUND_ENDED)  # unknown, ignored

        emitter.emit_new(EventType.ROUND_STARTED)
        assert seen == []

    def test_history_is_bounded(self):
        """Test that only the most recent events are kept."""
        emitter = EventEmitter(history_size=3)
        for amount in range(5):
            emitter.emit_new(EventType.WAGER_CHANGED, amount=amount)

        assert [e.data["amount"] for e in emitter.history] == [2, 3, 4]
        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        """Test event string form."""
        event = GameEvent(EventType.PLAYER_HIT, {"hand_value": 15})
        assert str(event) == "PLAYER_HIT: {'hand_value': 15}"


class TestGamePhase:
    """Tests for GamePhase."""

    def test_only_player_turn_hides_hole_card(self):
        """Test hole card visibility per phase."""
        assert [p for p in GamePhase if p.hides_hole_card] == [GamePhase.PLAYER_TURN]

    def test_str(self):
        """Test phase display names."""
        assert str(GamePhase.PLAYER_TURN) == "Player Turn"
