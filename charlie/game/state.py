"""Round phase enumeration."""

from enum import Enum


class GamePhase(Enum):
    """
    Round state machine phases.

    Flow: BETTING → PLAYER_TURN → DEALER_TURN → RESULT → BETTING ...
    A natural at deal time, a player bust or a player Charlie skips straight
    to RESULT. A manual hand passes through RESULT back to BETTING at once;
    under auto-play the table rests in RESULT until the next step.
    """

    BETTING = "betting"
    PLAYER_TURN = "player_turn"
    DEALER_TURN = "dealer_turn"
    RESULT = "result"

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def hides_hole_card(self) -> bool:
        """Check if the dealer's second card is face down in this phase."""
        return self == GamePhase.PLAYER_TURN
