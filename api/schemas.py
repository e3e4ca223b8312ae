"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any

from charlie.game import GameEvent, GameSnapshot


class WagerRequest(BaseModel):
    """Request to change the wager."""

    amount: int = Field(..., ge=1, description="Wager amount, one of the table denominations")


class AutoPlayRunRequest(BaseModel):
    """Request to let auto-play drive a number of hands."""

    hands: int | None = Field(default=None, ge=1, le=10_000, description="Hand cap for this run")


class NewGameResponse(BaseModel):
    """A new table session."""

    session_id: str


class CardResponse(BaseModel):
    """Card representation; hidden cards have no rank or suit."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None
    suit: str | None
    hidden: bool = False


class GameStateResponse(BaseModel):
    """Current table state."""

    accepted: bool = True
    phase: str
    bankroll: int
    wager: int
    throughput: int
    points: int
    auto_play: bool
    player_cards: list[CardResponse]
    dealer_cards: list[CardResponse]
    player_total: int
    player_is_soft: bool
    dealer_total: int
    dealer_hole_card_hidden: bool
    last_outcome: str
    last_player_total: int
    last_dealer_total: int
    message: str
    cards_remaining: int
    hands_played: int
    can_deal: bool
    can_hit: bool
    can_stand: bool
    can_set_wager: bool
    can_reset: bool

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot, accepted: bool = True) -> "GameStateResponse":
        """Build a response from an engine snapshot."""
        return cls(
            accepted=accepted,
            phase=snapshot.phase.name,
            bankroll=snapshot.bankroll,
            wager=snapshot.wager,
            throughput=snapshot.throughput,
            points=snapshot.points,
            auto_play=snapshot.auto_play,
            player_cards=[CardResponse.model_validate(c) for c in snapshot.player_cards],
            dealer_cards=[CardResponse.model_validate(c) for c in snapshot.dealer_cards],
            player_total=snapshot.player_total,
            player_is_soft=snapshot.player_is_soft,
            dealer_total=snapshot.dealer_total,
            dealer_hole_card_hidden=snapshot.dealer_hole_card_hidden,
            last_outcome=snapshot.last_outcome.value,
            last_player_total=snapshot.last_player_total,
            last_dealer_total=snapshot.last_dealer_total,
            message=snapshot.message,
            cards_remaining=snapshot.cards_remaining,
            hands_played=snapshot.hands_played,
            can_deal=snapshot.can_deal,
            can_hit=snapshot.can_hit,
            can_stand=snapshot.can_stand,
            can_set_wager=snapshot.can_set_wager,
            can_reset=snapshot.can_reset,
        )


class AutoPlayRunResponse(GameStateResponse):
    """Table state after an auto-play run."""

    hands_run: int = 0


class EventResponse(BaseModel):
    """A recorded game event."""

    event_type: str
    data: dict[str, Any]
    timestamp: str

    @classmethod
    def from_event(cls, event: GameEvent) -> "EventResponse":
        """Build a response from an engine event."""
        return cls(
            event_type=event.event_type.name,
            data=event.data,
            timestamp=event.timestamp.isoformat(),
        )
