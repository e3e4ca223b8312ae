"""Self-driving loop for auto-play."""

import asyncio
import logging
import time
from typing import Callable

from charlie.game.engine import BlackjackGame
from charlie.game.state import GamePhase

logger = logging.getLogger(__name__)


class AutoPlayDriver:
    """
    Runs auto-play as an explicit loop of single engine steps.

    Cancellation is checked before every step and again after every pause:
    once auto-play is disengaged (or disengaged and engaged again, which
    starts a new generation) this driver never acts again.
    """

    def __init__(
        self,
        game: BlackjackGame,
        delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize a driver.

        Args:
            game: Engine to drive
            delay: Pause in seconds between actions (visual pacing only)
            sleep: Function used to pause in run()
        """
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.game = game
        self.delay = delay
        self._sleep = sleep

    def _active(self, token: int) -> bool:
        return self.game.auto_play and self.game.autoplay_token == token

    def step(self) -> bool:
        """Perform one self-driven action; False once there is nothing to do."""
        return self.game.auto_step()

    def _should_stop(self, token: int, hands_started: int, max_hands: int | None) -> bool:
        if not self._active(token):
            return True
        if max_hands is None:
            return False
        # Stop before dealing a hand beyond the cap.
        return hands_started >= max_hands and self.game.phase in (
            GamePhase.BETTING,
            GamePhase.RESULT,
        )

    def run(self, max_hands: int | None = None) -> int:
        """
        Drive the game until auto-play stops or ``max_hands`` hands are played.

        Returns:
            Number of hands dealt by this run
        """
        token = self.game.autoplay_token
        start = self.game.hands_played
        steps = 0

        while not self._should_stop(token, self.game.hands_played - start, max_hands):
            if steps and self.delay > 0:
                self._sleep(self.delay)
                if not self._active(token):
                    break
            if not self.step():
                break
            steps += 1

        played = self.game.hands_played - start
        logger.info("Auto-play run finished after %d hands (%d steps)", played, steps)
        return played

    async def run_async(self, max_hands: int | None = None) -> int:
        """
        Drive the game from an asyncio task, pacing with ``asyncio.sleep``.

        Each step runs in a worker thread, since the engine's dealer pacing
        sleeps synchronously. Cancelling the task stops the loop between
        steps.
        """
        token = self.game.autoplay_token
        start = self.game.hands_played
        steps = 0

        while not self._should_stop(token, self.game.hands_played - start, max_hands):
            if steps:
                await asyncio.sleep(self.delay)
                if not self._active(token):
                    break
            if not await asyncio.to_thread(self.step):
                break
            steps += 1

        played = self.game.hands_played - start
        logger.info("Auto-play run finished after %d hands (%d steps)", played, steps)
        return played
