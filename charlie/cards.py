"""Card and Deck classes - immutable cards, a single 52-card deck."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterator

from charlie.errors import DeckExhausted


class Suit(Enum):
    """Card suits, in canonical deck order."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        """Check if this is a red suit."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks, keyed by their face label."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    def __str__(self) -> str:
        return self.value

    @property
    def base_value(self) -> int:
        """Return the point value before any ace adjustment (Ace = 11, faces = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def base_value(self) -> int:
        """Return the card's point value with an Ace counted as 11."""
        return self.rank.base_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '10♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = "10" if s[:-1] == "T" else s[:-1]
        suit_str = s[-1]

        suit_map = {
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        try:
            rank = Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, suit_map[suit_str])


def build_deck() -> list[Card]:
    """Return all 52 cards in canonical order: suit by suit, 2 through Ace."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle_cards(cards: list[Card], rng: Random | None = None) -> list[Card]:
    """
    Shuffle cards in place with Fisher-Yates and return the same list.

    Walks from the last index down to 1, swapping each position with a
    uniformly chosen position at or below it, so every permutation is equally
    likely.
    """
    rng = rng or Random()
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


class Deck:
    """
    A single 52-card deck used as a stack.

    Drawing pops from the end of the sequence. A deck is built fresh for
    every round and never reshuffled mid-round.
    """

    def __init__(self, rng: Random | None = None, cards: list[Card] | None = None) -> None:
        """
        Initialize a deck.

        Args:
            rng: Random number generator for shuffling
            cards: Explicit card order (bottom first); a full canonical deck if omitted
        """
        self._rng = rng or Random()
        self._cards: list[Card] = list(cards) if cards is not None else build_deck()

    @classmethod
    def shuffled(cls, rng: Random | None = None) -> "Deck":
        """Build a fresh 52-card deck and shuffle it."""
        deck = cls(rng=rng)
        deck.shuffle()
        return deck

    def shuffle(self) -> None:
        """Randomly permute the remaining cards."""
        shuffle_cards(self._cards, self._rng)

    def draw(self) -> Card:
        """Remove and return the top card."""
        if not self._cards:
            raise DeckExhausted("Cannot draw from an empty deck")
        return self._cards.pop()

    def clear(self) -> None:
        """Discard every remaining card."""
        self._cards.clear()

    @property
    def cards(self) -> list[Card]:
        """Return a copy of the remaining cards, bottom first."""
        return self._cards.copy()

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        """Check if the deck has run out."""
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __contains__(self, card: object) -> bool:
        return card in self._cards
