"""Six-card Charlie blackjack engine - 100% UI-agnostic."""

from charlie.cards import Card, Deck, Rank, Suit, build_deck, shuffle_cards
from charlie.errors import BlackjackError, DeckExhausted, InsufficientFunds, InvalidTransition
from charlie.hand import Hand, HandValue, evaluate
from charlie.settlement import Outcome, Settlement, settle

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "build_deck",
    "shuffle_cards",
    "BlackjackError",
    "DeckExhausted",
    "InsufficientFunds",
    "InvalidTransition",
    "Hand",
    "HandValue",
    "evaluate",
    "Outcome",
    "Settlement",
    "settle",
]
