"""Round settlement: compare finished hands and compute the bankroll credit."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable

from charlie.cards import Card
from charlie.hand import evaluate
from charlie.rules import (
    BLACKJACK,
    CHARLIE_CARDS,
    DEALER_STAND_TOTAL,
    PUSH_MULTIPLIER,
    WIN_MULTIPLIER,
)


class Outcome(Enum):
    """Result of a round from the player's point of view."""

    NONE = "None"
    WIN = "Win"
    LOSS = "Loss"
    PUSH = "Push"

    def __str__(self) -> str:
        return self.value


class Reason(Enum):
    """Which settlement rule decided the round."""

    PLAYER_BUST = auto()
    DEALER_BUST = auto()
    PLAYER_CHARLIE = auto()
    DEALER_CHARLIE = auto()
    PLAYER_HIGHER = auto()
    DEALER_HIGHER = auto()
    EQUAL_TOTALS = auto()
    PLAYER_NATURAL = auto()
    DEALER_NATURAL = auto()
    BOTH_NATURAL = auto()


MESSAGES: dict[Reason, str] = {
    Reason.PLAYER_BUST: "You busted! Dealer wins.",
    Reason.DEALER_BUST: "Dealer busted! You win!",
    Reason.PLAYER_CHARLIE: "6 Card Charlie! You win automatically!",
    Reason.DEALER_CHARLIE: "Dealer 6 Card Charlie! Dealer loses!",
    Reason.PLAYER_HIGHER: "You win!",
    Reason.DEALER_HIGHER: "Dealer wins.",
    Reason.EQUAL_TOTALS: "It's a push!",
    Reason.PLAYER_NATURAL: "Blackjack! You win!",
    Reason.DEALER_NATURAL: "Dealer has Blackjack! You lose.",
    Reason.BOTH_NATURAL: "Both have Blackjack! Push.",
}


@dataclass(frozen=True)
class Settlement:
    """
    Settled round.

    ``delta`` is the amount credited back to the bankroll. The wager was
    already debited at deal time, so a loss credits 0, a push returns the
    stake and a win returns twice the stake.
    """

    outcome: Outcome
    delta: int
    reason: Reason
    player_total: int
    dealer_total: int

    @property
    def message(self) -> str:
        """Return the human-readable result line."""
        return MESSAGES[self.reason]


def _credit(outcome: Outcome, wager: int) -> int:
    if outcome is Outcome.WIN:
        return WIN_MULTIPLIER * wager
    if outcome is Outcome.PUSH:
        return PUSH_MULTIPLIER * wager
    return 0


def _check_wager(wager: int) -> None:
    if wager <= 0:
        raise ValueError(f"Wager must be positive, got {wager}")


def settle(
    player_cards: Iterable[Card],
    dealer_cards: Iterable[Card],
    wager: int,
) -> Settlement:
    """
    Settle two finished hands.

    Rules are checked in order and the first match wins: player bust,
    dealer bust, player six-card Charlie, dealer six-card Charlie, then a
    plain comparison of totals.
    """
    _check_wager(wager)
    player_cards = list(player_cards)
    dealer_cards = list(dealer_cards)
    player_total = evaluate(player_cards).total
    dealer_total = evaluate(dealer_cards).total

    if player_total > BLACKJACK:
        outcome, reason = Outcome.LOSS, Reason.PLAYER_BUST
    elif dealer_total > BLACKJACK:
        outcome, reason = Outcome.WIN, Reason.DEALER_BUST
    elif len(player_cards) == CHARLIE_CARDS:
        outcome, reason = Outcome.WIN, Reason.PLAYER_CHARLIE
    elif len(dealer_cards) == CHARLIE_CARDS and dealer_total < DEALER_STAND_TOTAL:
        outcome, reason = Outcome.WIN, Reason.DEALER_CHARLIE
    elif player_total > dealer_total:
        outcome, reason = Outcome.WIN, Reason.PLAYER_HIGHER
    elif dealer_total > player_total:
        outcome, reason = Outcome.LOSS, Reason.DEALER_HIGHER
    else:
        outcome, reason = Outcome.PUSH, Reason.EQUAL_TOTALS

    return Settlement(
        outcome=outcome,
        delta=_credit(outcome, wager),
        reason=reason,
        player_total=player_total,
        dealer_total=dealer_total,
    )


def settle_dealer_charlie(
    player_cards: Iterable[Card],
    dealer_cards: Iterable[Card],
    wager: int,
) -> Settlement:
    """Settle a round the dealer lost by reaching six cards short of 17."""
    _check_wager(wager)
    return Settlement(
        outcome=Outcome.WIN,
        delta=_credit(Outcome.WIN, wager),
        reason=Reason.DEALER_CHARLIE,
        player_total=evaluate(player_cards).total,
        dealer_total=evaluate(dealer_cards).total,
    )


def settle_naturals(
    player_cards: Iterable[Card],
    dealer_cards: Iterable[Card],
    wager: int,
) -> Settlement | None:
    """
    Resolve naturals right after the deal.

    Returns None when neither side holds a two-card 21. A player natural
    pays 1:1, a dealer natural loses, and two naturals push.
    """
    _check_wager(wager)
    player_cards = list(player_cards)
    dealer_cards = list(dealer_cards)
    player_total = evaluate(player_cards).total
    dealer_total = evaluate(dealer_cards).total
    player_natural = len(player_cards) == 2 and player_total == BLACKJACK
    dealer_natural = len(dealer_cards) == 2 and dealer_total == BLACKJACK

    if player_natural and dealer_natural:
        outcome, reason = Outcome.PUSH, Reason.BOTH_NATURAL
    elif player_natural:
        outcome, reason = Outcome.WIN, Reason.PLAYER_NATURAL
    elif dealer_natural:
        outcome, reason = Outcome.LOSS, Reason.DEALER_NATURAL
    else:
        return None

    return Settlement(
        outcome=outcome,
        delta=_credit(outcome, wager),
        reason=reason,
        player_total=player_total,
        dealer_total=dealer_total,
    )
