"""Blackjack round engine with state machine."""

import functools
import logging
import threading
import time
from random import Random
from typing import Any, Callable, TypeVar

from transitions import Machine

from charlie.cards import Card, Deck
from charlie.errors import DeckExhausted, InsufficientFunds, InvalidTransition
from charlie.game.events import EventEmitter, EventType, GameEvent
from charlie.game.snapshot import CardView, GameSnapshot
from charlie.game.state import GamePhase
from charlie.hand import Hand
from charlie.rules import (
    BLACKJACK,
    DEFAULT_WAGER,
    INITIAL_BANKROLL,
    WAGER_DENOMINATIONS,
    loyalty_points,
)
from charlie.settlement import (
    Outcome,
    Settlement,
    settle,
    settle_dealer_charlie,
    settle_naturals,
)
from charlie.strategy.autoplay import AutoPlayStrategy, Action
from charlie.strategy.dealer import dealer_should_draw, is_dealer_charlie

logger = logging.getLogger(__name__)

AUTO_PREFIX = "Auto-play: "

F = TypeVar("F", bound=Callable[..., Any])


def _locked(method: F) -> F:
    """Run an engine command while holding the engine's lock."""

    @functools.wraps(method)
    def wrapper(self: "BlackjackGame", *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class BlackjackGame:
    """
    Six-card Charlie blackjack engine using a state machine.

    Owns the bankroll, wager, deck and both hands for a single player
    session. UI-agnostic: shells call the command methods and read
    ``snapshot()`` or subscribe to events. Commands never raise; a rejected
    command returns False and leaves the round unchanged.

    Commands and snapshots hold a re-entrant lock, so a shell may run them
    from worker threads; event handlers may issue commands of their own.
    """

    # State machine states
    STATES = [p.value for p in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_turn", "source": ["betting", "result"], "dest": "player_turn"},
        {"trigger": "natural_dealt", "source": ["betting", "result"], "dest": "result"},
        {"trigger": "player_finished", "source": "player_turn", "dest": "result"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "result"},
        {"trigger": "new_round", "source": "result", "dest": "betting"},
        {"trigger": "reset_table", "source": "*", "dest": "betting"},
    ]

    def __init__(
        self,
        initial_bankroll: int = INITIAL_BANKROLL,
        wager: int = DEFAULT_WAGER,
        denominations: tuple[int, ...] = WAGER_DENOMINATIONS,
        rng: Random | None = None,
        dealer_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> None:
        """
        Initialize a new game.

        Args:
            initial_bankroll: Starting bankroll, restored by reset()
            wager: Starting wager, one of the denominations
            denominations: Wager amounts the table accepts
            rng: Random number generator for reproducible games
            dealer_delay: Pause in seconds before each dealer draw
            sleep: Function used to pause between dealer draws
            deck_factory: Builds the deck for each deal (a freshly shuffled
                52-card deck by default)
        """
        if initial_bankroll < 0:
            raise ValueError("initial_bankroll must not be negative")
        if wager not in denominations:
            raise ValueError(f"wager must be one of {denominations}")

        self.initial_bankroll = initial_bankroll
        self.denominations = tuple(denominations)
        self.dealer_delay = dealer_delay
        self._rng = rng or Random()
        self._sleep = sleep
        self._deck_factory = deck_factory or (lambda: Deck.shuffled(self._rng))
        self._strategy = AutoPlayStrategy()

        self.bankroll = initial_bankroll
        self.wager = wager
        self.throughput = 0
        self.hands_played = 0
        self.deck = Deck(rng=self._rng, cards=[])
        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.last_settlement: Settlement | None = None
        self.message = "Place your bet and click Deal!"
        self._auto_play = False
        self._autoplay_token = 0
        self._lock = threading.RLock()

        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=GamePhase.BETTING.value,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> GamePhase:
        """Get current phase as enum."""
        return GamePhase(self._machine_state)  # type: ignore[attr-defined]

    @property
    def auto_play(self) -> bool:
        """Check if auto-play is engaged."""
        return self._auto_play

    @property
    def autoplay_token(self) -> int:
        """
        Return the current auto-play generation.

        Changes every time auto-play is engaged, disengaged or reset, so a
        scheduled step can tell that it has been cancelled.
        """
        return self._autoplay_token

    @property
    def points(self) -> int:
        """Return loyalty points earned from throughput."""
        return loyalty_points(self.throughput)

    @property
    def last_outcome(self) -> Outcome:
        """Return the outcome of the most recent round."""
        return self.last_settlement.outcome if self.last_settlement else Outcome.NONE

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # -- Commands ---------------------------------------------------------

    @_locked
    def set_wager(self, amount: int) -> bool:
        """
        Change the wager for the next deal.

        Accepted only while betting and only for a table denomination.
        """
        if self.phase != GamePhase.BETTING:
            return self._reject("change the wager")
        if amount not in self.denominations:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message=f"Wager must be one of {list(self.denominations)}",
                amount=amount,
            )
            return False

        self.wager = amount
        self.events.emit_new(EventType.WAGER_CHANGED, amount=amount)
        return True

    @_locked
    def deal(self) -> bool:
        """Debit the wager and deal a new round."""
        if self._auto_play:
            return self._reject("deal manually while auto-play is running")
        return self._deal()

    @_locked
    def hit(self) -> bool:
        """Player takes another card."""
        if self._auto_play:
            return self._reject("hit manually while auto-play is running")
        return self._hit()

    @_locked
    def stand(self) -> bool:
        """Player keeps the hand; the dealer plays out and the round settles."""
        if self._auto_play:
            return self._reject("stand manually while auto-play is running")
        return self._stand()

    @_locked
    def toggle_auto_play(self) -> bool:
        """
        Engage or disengage auto-play.

        Returns:
            True if auto-play is now engaged
        """
        if self._auto_play:
            self._disengage_auto_play("Auto-play stopped.")
            return False

        self._auto_play = True
        self._autoplay_token += 1
        self.message = "Auto-play started..."
        self.events.emit_new(EventType.AUTOPLAY_ENGAGED, phase=self.phase.name)
        logger.info("Auto-play engaged at bankroll %d", self.bankroll)
        return True

    @_locked
    def reset(self) -> None:
        """Restore the starting bankroll and clear everything else."""
        self._auto_play = False
        self._autoplay_token += 1
        self.bankroll = self.initial_bankroll
        self.throughput = 0
        self.hands_played = 0
        self.deck.clear()
        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.last_settlement = None
        self.reset_table()
        self.message = "Game reset! Place your bet and click Deal!"
        self.events.emit_new(EventType.GAME_RESET, bankroll=self.bankroll)
        logger.info("Game reset to bankroll %d", self.bankroll)

    @_locked
    def auto_step(self) -> bool:
        """
        Perform one self-driven action if auto-play is engaged.

        A finished hand first returns to betting, then the next step deals;
        during the player's turn the strategy table picks hit or stand.
        Returns True if an action was taken.
        """
        if not self._auto_play:
            return False

        phase = self.phase
        if phase == GamePhase.RESULT:
            self.message = (
                f"{AUTO_PREFIX}Hand ended. {self.last_outcome.value}. Starting next hand..."
            )
            self._open_betting()
            return True
        if phase == GamePhase.BETTING:
            self.message = AUTO_PREFIX + "Dealing new hand..."
            return self._deal()
        if phase == GamePhase.PLAYER_TURN:
            up_card = self.dealer_hand.up_card
            if up_card is None:
                return False
            action = self._strategy.decide(self.player_hand.cards, up_card)
            logger.debug("Auto-play %s on %s vs %s", action, self.player_hand, up_card)
            if action is Action.HIT:
                self.message = AUTO_PREFIX + "Hitting..."
                return self._hit()
            self.message = AUTO_PREFIX + "Standing..."
            return self._stand()
        return False

    # -- Round flow -------------------------------------------------------

    def _deal(self) -> bool:
        if self.phase not in (GamePhase.BETTING, GamePhase.RESULT):
            return self._reject("deal")

        try:
            self._place_wager()
        except InsufficientFunds as exc:
            logger.warning("Deal refused: %s", exc)
            self.message = "Not enough money to place this bet!"
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=exc.required,
                available=exc.available,
            )
            if self._auto_play:
                self._disengage_auto_play()
            return False

        self.deck = self._deck_factory()
        self.events.emit_new(EventType.DECK_SHUFFLED, cards=len(self.deck))
        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.last_settlement = None

        # Deal: player, dealer, player, dealer (face down)
        for hand, face_up in (
            (self.player_hand, True),
            (self.dealer_hand, True),
            (self.player_hand, True),
            (self.dealer_hand, False),
        ):
            if self._draw_to(hand, face_up=face_up) is None:
                # Unreachable with a full deck; leave the round voided.
                self.bankroll += self.wager
                self.throughput -= self.wager
                self.hands_played -= 1
                return False

        self.events.emit_new(
            EventType.ROUND_STARTED,
            wager=self.wager,
            bankroll=self.bankroll,
            hand_number=self.hands_played,
        )

        natural = settle_naturals(self.player_hand.cards, self.dealer_hand.cards, self.wager)
        if natural is not None:
            if self.player_hand.is_blackjack:
                self.events.emit_new(EventType.PLAYER_BLACKJACK)
            if self.dealer_hand.is_blackjack:
                self.events.emit_new(EventType.DEALER_BLACKJACK)
            self.natural_dealt()
            self._apply_settlement(natural)
            return True

        self.start_turn()
        self.message = (
            AUTO_PREFIX + "Player's turn..." if self._auto_play else "Your turn: Hit or Stand?"
        )
        return True

    def _place_wager(self) -> None:
        """Debit the wager, raising InsufficientFunds if it cannot be covered."""
        if self.bankroll < self.wager:
            raise InsufficientFunds(required=self.wager, available=self.bankroll)
        self.bankroll -= self.wager
        self.throughput += self.wager
        self.hands_played += 1
        self.events.emit_new(EventType.BET_PLACED, amount=self.wager, bankroll=self.bankroll)

    def _hit(self) -> bool:
        if self.phase != GamePhase.PLAYER_TURN:
            return self._reject("hit")

        if self._draw_to(self.player_hand) is None:
            return False

        value = self.player_hand.evaluate()
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=value.total, cards=len(self.player_hand))

        if self.player_hand.is_charlie:
            self.events.emit_new(EventType.PLAYER_CHARLIE, hand_value=value.total)
            self.player_finished()
            self._apply_settlement(settle(self.player_hand.cards, self.dealer_hand.cards, self.wager))
            return True

        if value.total > BLACKJACK:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=value.total)
            self.player_finished()
            self._apply_settlement(settle(self.player_hand.cards, self.dealer_hand.cards, self.wager))
            return True

        if not self._auto_play:
            self.message = "Your turn: Hit or Stand?"
        return True

    def _stand(self) -> bool:
        if self.phase != GamePhase.PLAYER_TURN:
            return self._reject("stand")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self.player_done()
        self.message = (AUTO_PREFIX if self._auto_play else "") + "Dealer is playing..."
        self._play_dealer()
        return True

    def _play_dealer(self) -> None:
        """Dealer draws to 17 or six cards, then the round settles."""
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.dealer_hand.cards[1]),
            hand_value=self.dealer_hand.value,
        )

        exhausted = False
        while dealer_should_draw(self.dealer_hand.cards):
            if self.dealer_delay > 0:
                self._sleep(self.dealer_delay)
            if self._draw_to(self.dealer_hand) is None:
                exhausted = True
                break
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

        if is_dealer_charlie(self.dealer_hand.cards):
            self.events.emit_new(EventType.DEALER_CHARLIE, hand_value=self.dealer_hand.value)
            result = settle_dealer_charlie(
                self.player_hand.cards, self.dealer_hand.cards, self.wager
            )
        else:
            if self.dealer_hand.is_busted:
                self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
            else:
                self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)
            result = settle(self.player_hand.cards, self.dealer_hand.cards, self.wager)

        self.dealer_done()
        self._apply_settlement(result)
        if exhausted:
            self.message = f"Deck is empty! Dealer cannot draw more. {result.message}"

    def _draw_to(self, hand: Hand, face_up: bool = True) -> Card | None:
        """Deal a card to a hand, or report an empty deck and return None."""
        try:
            card = self.deck.draw()
        except DeckExhausted:
            logger.warning("Deck exhausted during %s", self.phase.name)
            self.message = "Deck is empty! Please Reset the game."
            self.events.emit_new(EventType.DECK_EXHAUSTED, phase=self.phase.name)
            if self._auto_play:
                self._disengage_auto_play()
            return None

        hand.add_card(card)
        is_dealer = hand is self.dealer_hand
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if is_dealer else "player",
            hand_value=hand.value if face_up or not is_dealer else None,
        )
        logger.debug("Dealt %s to %s", card if face_up else "hole card", "dealer" if is_dealer else "player")
        return card

    def _apply_settlement(self, result: Settlement) -> None:
        """Credit the bankroll and record the result of the round."""
        self.bankroll += result.delta
        self.last_settlement = result
        self.message = result.message
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=result.outcome.value,
            reason=result.reason.name,
            delta=result.delta,
            bankroll=self.bankroll,
            player_total=result.player_total,
            dealer_total=result.dealer_total,
        )
        logger.info(
            "Round %d: %s (%s) player %d dealer %d, bankroll %d",
            self.hands_played,
            result.outcome,
            result.reason.name,
            result.player_total,
            result.dealer_total,
            self.bankroll,
        )
        if not self._auto_play:
            self._open_betting()

    def _open_betting(self) -> None:
        """Leave a settled hand for betting; the result stays on the table."""
        if self.phase != GamePhase.RESULT:
            return
        self.new_round()
        self.events.emit_new(EventType.NEW_ROUND, bankroll=self.bankroll)

    def _disengage_auto_play(self, message: str | None = None) -> None:
        self._auto_play = False
        self._autoplay_token += 1
        if message is not None:
            self.message = message
        self._open_betting()
        self.events.emit_new(EventType.AUTOPLAY_DISENGAGED, bankroll=self.bankroll)
        logger.info("Auto-play disengaged at bankroll %d", self.bankroll)

    def _reject(self, action: str) -> bool:
        """Ignore an action the current phase does not allow."""
        error = InvalidTransition(action, str(self.phase))
        logger.debug("Ignored: %s", error)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=str(error),
            state=self.phase.name,
        )
        return False

    # -- Observable state -------------------------------------------------

    @property
    def can_deal(self) -> bool:
        """Check if a manual deal is allowed."""
        return self.phase in (GamePhase.BETTING, GamePhase.RESULT) and not self._auto_play

    @property
    def can_hit(self) -> bool:
        """Check if a manual hit is allowed."""
        return self.phase == GamePhase.PLAYER_TURN and not self._auto_play

    @property
    def can_stand(self) -> bool:
        """Check if a manual stand is allowed."""
        return self.phase == GamePhase.PLAYER_TURN and not self._auto_play

    @property
    def can_set_wager(self) -> bool:
        """Check if the wager can be changed."""
        return self.phase == GamePhase.BETTING

    @_locked
    def snapshot(self) -> GameSnapshot:
        """Return a consistent, read-only view of the round."""
        hidden = self.phase.hides_hole_card
        dealer_cards = tuple(
            CardView.from_card(card, hidden=hidden and i == 1)
            for i, card in enumerate(self.dealer_hand.cards)
        )
        if hidden and self.dealer_hand.up_card is not None:
            dealer_total = self.dealer_hand.up_card.base_value
        else:
            dealer_total = self.dealer_hand.value
        player_value = self.player_hand.evaluate()
        settlement = self.last_settlement

        return GameSnapshot(
            phase=self.phase,
            bankroll=self.bankroll,
            wager=self.wager,
            throughput=self.throughput,
            points=self.points,
            auto_play=self._auto_play,
            player_cards=tuple(CardView.from_card(c) for c in self.player_hand.cards),
            dealer_cards=dealer_cards,
            player_total=player_value.total,
            player_is_soft=player_value.is_soft,
            dealer_total=dealer_total,
            dealer_hole_card_hidden=hidden and len(self.dealer_hand) > 1,
            last_outcome=self.last_outcome,
            last_player_total=settlement.player_total if settlement else 0,
            last_dealer_total=settlement.dealer_total if settlement else 0,
            message=self.message,
            cards_remaining=self.deck.cards_remaining,
            hands_played=self.hands_played,
            can_deal=self.can_deal,
            can_hit=self.can_hit,
            can_stand=self.can_stand,
            can_set_wager=self.can_set_wager,
            can_reset=not self._auto_play,
        )
