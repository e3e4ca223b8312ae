"""Read-only view of the engine for rendering."""

from dataclasses import dataclass

from charlie.cards import Card
from charlie.game.state import GamePhase
from charlie.settlement import Outcome


@dataclass(frozen=True)
class CardView:
    """A card as the table shows it; hidden cards carry no rank or suit."""

    rank: str | None
    suit: str | None
    hidden: bool = False

    @classmethod
    def from_card(cls, card: Card, hidden: bool = False) -> "CardView":
        """Create a view of a card, masking it when hidden."""
        if hidden:
            return cls(rank=None, suit=None, hidden=True)
        return cls(rank=card.rank.value, suit=card.suit.value)

    def __str__(self) -> str:
        return "??" if self.hidden else f"{self.rank} of {self.suit}"


@dataclass(frozen=True)
class GameSnapshot:
    """Snapshot of the round for a UI to render between commands."""

    phase: GamePhase
    bankroll: int
    wager: int
    throughput: int
    points: int
    auto_play: bool
    player_cards: tuple[CardView, ...]
    dealer_cards: tuple[CardView, ...]
    player_total: int
    player_is_soft: bool
    dealer_total: int
    dealer_hole_card_hidden: bool
    last_outcome: Outcome
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
