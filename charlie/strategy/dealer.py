"""Dealer drawing rules: stand on all 17s, stop at six cards."""

from typing import Iterable

from charlie.cards import Card
from charlie.hand import evaluate
from charlie.rules import CHARLIE_CARDS, DEALER_STAND_TOTAL


def dealer_should_draw(cards: Iterable[Card]) -> bool:
    """
    Decide whether the dealer takes another card.

    The dealer draws below 17 while holding fewer than six cards. Soft 17
    stands. Only the dealer's own cards are consulted.
    """
    cards = list(cards)
    return evaluate(cards).total < DEALER_STAND_TOTAL and len(cards) < CHARLIE_CARDS


def is_dealer_charlie(cards: Iterable[Card]) -> bool:
    """Check if the dealer reached six cards still short of 17 (a dealer loss)."""
    cards = list(cards)
    return len(cards) == CHARLIE_CARDS and evaluate(cards).total < DEALER_STAND_TOTAL
