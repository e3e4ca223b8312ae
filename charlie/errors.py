"""Engine error taxonomy.

None of these cross the engine's command boundary: commands catch them,
report through the status message and event stream, and leave the round in
a resumable state.
"""


class BlackjackError(Exception):
    """Base class for engine errors."""


class InsufficientFunds(BlackjackError):
    """The wager exceeds the bankroll at deal time."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"Wager of {required} exceeds bankroll of {available}")
        self.required = required
        self.available = available


class DeckExhausted(BlackjackError):
    """A draw was requested from an empty deck."""


class InvalidTransition(BlackjackError):
    """An action was requested in a phase that does not allow it."""

    def __init__(self, action: str, phase: str) -> None:
        super().__init__(f"Cannot {action} during {phase}")
        self.action = action
        self.phase = phase
