"""Hit/stand strategy table used by auto-play."""

from enum import Enum, auto
from typing import Iterable, Mapping

from charlie.cards import Card
from charlie.hand import evaluate
from charlie.rules import BLACKJACK, CHARLIE_CARDS


class Action(Enum):
    """Possible auto-play decisions."""

    HIT = auto()
    STAND = auto()

    def __str__(self) -> str:
        return self.name.title()


# Type aliases for clarity
DealerUpcard = int  # 2-11 (11 = Ace)
PlayerTotal = int

DEALER_UPCARDS = range(2, 12)


def up_card_value(card: Card) -> DealerUpcard:
    """Return the dealer up-card value used by the table (Ace = 11, faces = 10)."""
    return card.base_value


class AutoPlayStrategy:
    """
    Hit/stand lookup tables for auto-play.

    Basic strategy restricted to hitting and standing, with one override:
    a five-card hand that cannot bust always hits to chase the six-card
    Charlie.
    """

    def __init__(self) -> None:
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()

    def get_action(
        self,
        player_total: PlayerTotal,
        dealer_upcard: DealerUpcard,
        is_soft: bool = False,
        num_cards: int = 2,
    ) -> Action:
        """
        Get the auto-play action.

        Args:
            player_total: Player's hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether an ace is counted as 11
            num_cards: Number of cards in the player's hand

        Returns:
            HIT or STAND
        """
        # A hit cannot bust a total of 11 or less, so the sixth card is free.
        if num_cards == CHARLIE_CARDS - 1 and BLACKJACK - player_total >= 10:
            return Action.HIT

        if player_total >= BLACKJACK:
            return Action.STAND

        table = self._soft_table if is_soft else self._hard_table
        action = table.get((player_total, dealer_upcard))
        if action:
            return action

        # Totals outside the table
        if player_total >= 17:
            return Action.STAND
        return Action.HIT

    def decide(self, cards: Iterable[Card], dealer_up_card: Card) -> Action:
        """Get the action for a concrete hand against the dealer's up-card."""
        cards = list(cards)
        value = evaluate(cards)
        return self.get_action(
            player_total=value.total,
            dealer_upcard=up_card_value(dealer_up_card),
            is_soft=value.is_soft,
            num_cards=len(cards),
        )

    def _build_hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Build hard totals strategy table."""
        H = Action.HIT
        S = Action.STAND

        table: dict[tuple[int, int], Action] = {}

        # Hard 11 or less: a single card cannot bust
        for total in range(4, 12):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = H

        # Hard 12: stand only against 4-6
        for dealer in DEALER_UPCARDS:
            table[(12, dealer)] = S if dealer in (4, 5, 6) else H

        # Hard 13-16: stand against 2-6
        for total in range(13, 17):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S if dealer <= 6 else H

        # Hard 17+
        for total in range(17, 21):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Build soft totals strategy table."""
        H = Action.HIT
        S = Action.STAND

        table: dict[tuple[int, int], Action] = {}

        # Soft 12 (A,A) through soft 17 (A,6)
        for total in range(12, 18):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = H

        # Soft 18 (A,7): hit against 9, 10, Ace
        for dealer in DEALER_UPCARDS:
            table[(18, dealer)] = H if dealer >= 9 else S

        # Soft 19-20
        for total in (19, 20):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    @property
    def hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the hard totals strategy table."""
        return self._hard_table

    @property
    def soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the soft totals strategy table."""
        return self._soft_table


_default_strategy = AutoPlayStrategy()


def should_hit(cards: Iterable[Card], dealer_up_card: Card) -> bool:
    """Return True if auto-play should hit this hand against the up-card."""
    return _default_strategy.decide(cards, dealer_up_card) is Action.HIT
