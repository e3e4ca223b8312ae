"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from charlie.cards import Card
from charlie.rules import BLACKJACK, CHARLIE_CARDS


@dataclass(frozen=True, slots=True)
class HandValue:
    """Derived total of a hand and whether an ace is still counted as 11."""

    total: int
    is_soft: bool

    def __str__(self) -> str:
        return f"soft {self.total}" if self.is_soft else str(self.total)


def evaluate(cards: Iterable[Card]) -> HandValue:
    """
    Compute the best total for a sequence of cards.

    Every ace starts at 11; while the total is over 21, one ace at a time is
    demoted to 1. The hand is soft if any ace survives at 11. The cards are
    never mutated.
    """
    total = 0
    aces_as_eleven = 0

    for card in cards:
        total += card.base_value
        if card.is_ace:
            aces_as_eleven += 1

    while total > BLACKJACK and aces_as_eleven > 0:
        total -= 10
        aces_as_eleven -= 1

    return HandValue(total=total, is_soft=aces_as_eleven > 0)


@dataclass
class Hand:
    """An append-only sequence of cards for one round."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    def evaluate(self) -> HandValue:
        """Return the current total and softness."""
        return evaluate(self.cards)

    @property
    def value(self) -> int:
        """Return the best total."""
        return self.evaluate().total

    @property
    def is_soft(self) -> bool:
        """Check if an ace is currently counted as 11."""
        return self.evaluate().is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural (21 on the first two cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    @property
    def is_charlie(self) -> bool:
        """Check if the hand reached six cards without busting."""
        return len(self.cards) == CHARLIE_CARDS and not self.is_busted

    @property
    def num_cards(self) -> int:
        """Return the number of cards in the hand."""
        return len(self.cards)

    @property
    def up_card(self) -> Card | None:
        """Return the first (face-up) card, if any."""
        return self.cards[0] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        elif self.is_busted:
            value_str = "(BUST)"
        else:
            value_str = f"({self.evaluate()})"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
