"""Pytest fixtures for blackjack engine tests."""

import pytest
from random import Random

from charlie.cards import Card, Deck, Rank, Suit
from charlie.hand import Hand
from charlie.strategy import AutoPlayStrategy
from charlie.game import BlackjackGame


def cards(*labels: str) -> list[Card]:
    """Build cards from labels like 'AS', '10H', 'Kc'."""
    return [Card.from_string(label) for label in labels]


def hand(*labels: str) -> Hand:
    """Build a hand from card labels."""
    return Hand(cards=cards(*labels))


def stacked_deck(player: list[str], dealer: list[str], draws: list[str] = ()) -> Deck:
    """
    Build a deck that deals the given cards in order.

    The engine deals player, dealer, player, dealer; ``draws`` are the cards
    taken afterwards, first one first. The deck holds exactly these cards.
    """
    order = [player[0], dealer[0], player[1], dealer[1], *draws]
    # Drawing pops from the end, so the first card dealt sits last.
    return Deck(cards=cards(*reversed(order)))


class DeckQueue:
    """Deck factory that hands out prepared decks, one per deal."""

    def __init__(self, *decks: Deck) -> None:
        self._decks = list(decks)

    def __call__(self) -> Deck:
        return self._decks.pop(0)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    return Deck.shuffled(rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return hand("10S", "6H", "KC")


@pytest.fixture
def strategy():
    """Auto-play strategy table."""
    return AutoPlayStrategy()


@pytest.fixture
def game(rng):
    """A new game instance with the default table."""
    return BlackjackGame(initial_bankroll=1000, wager=10, rng=rng)


def rigged_game(*decks: Deck, **kwargs) -> BlackjackGame:
    """A game whose deals use the given decks in order."""
    kwargs.setdefault("initial_bankroll", 1000)
    kwargs.setdefault("wager", 10)
    return BlackjackGame(deck_factory=DeckQueue(*decks), **kwargs)


# Hypothesis strategies for property-based testing
try:
    from hypothesis import strategies as st

    @st.composite
    def card_strategy(draw):
        """Generate a random card."""
        rank = draw(st.sampled_from(list(Rank)))
        suit = draw(st.sampled_from(list(Suit)))
        return Card(rank, suit)

    @st.composite
    def hand_strategy(draw, min_cards=1, max_cards=6):
        """Generate a random hand of distinct cards."""
        drawn = draw(
            st.lists(card_strategy(), min_size=min_cards, max_size=max_cards, unique=True)
        )
        return Hand(cards=drawn)

except ImportError:
    pass  # hypothesis not installed
