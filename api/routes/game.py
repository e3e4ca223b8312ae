"""Game API endpoints.

Every command returns the table state. A command the engine refuses is not
an HTTP error: the response carries ``accepted: false`` and the engine's
status message.

Commands that reach the engine are plain ``def`` routes, served from the
threadpool: the dealer's pacing sleeps and the engine lock must never hold
up the event loop. Auto-play runs as an awaited task between steps.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Header
from fastapi.concurrency import run_in_threadpool

from api.schemas import (
    AutoPlayRunRequest,
    AutoPlayRunResponse,
    EventResponse,
    GameStateResponse,
    NewGameResponse,
    WagerRequest,
)
from api.session import get_session_store
from charlie.game import AutoPlayDriver, BlackjackGame
from config import config

logger = logging.getLogger(__name__)

router = APIRouter()

SessionHeader = Annotated[str, Header(alias="X-Session-ID")]


def _get_game(session_id: str) -> BlackjackGame:
    """Look up the session's game or fail with 404."""
    game = get_session_store().get(session_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")
    return game


def _state(game: BlackjackGame, accepted: bool = True) -> GameStateResponse:
    return GameStateResponse.from_snapshot(game.snapshot(), accepted=accepted)


async def _auto_play_response(
    game: BlackjackGame,
    hands_run: int,
    accepted: bool = True,
) -> AutoPlayRunResponse:
    snapshot = await run_in_threadpool(game.snapshot)
    response = AutoPlayRunResponse.from_snapshot(snapshot, accepted=accepted)
    return response.model_copy(update={"hands_run": hands_run})


async def _run_auto_play(game: BlackjackGame, hands: int | None) -> int:
    cap = hands or config.game.autoplay_max_hands
    logger.debug("Auto-play run for up to %d hands", cap)
    driver = AutoPlayDriver(game, delay=config.game.autoplay_delay)
    return await driver.run_async(max_hands=cap)


@router.post("/new")
async def new_game() -> NewGameResponse:
    """Create a new table session."""
    return NewGameResponse(session_id=get_session_store().create())


@router.get("/state")
def get_state(session_id: SessionHeader) -> GameStateResponse:
    """Get current table state."""
    return _state(_get_game(session_id))


@router.post("/wager")
def set_wager(request: WagerRequest, session_id: SessionHeader) -> GameStateResponse:
    """Change the wager for the next deal."""
    game = _get_game(session_id)
    return _state(game, game.set_wager(request.amount))


@router.post("/deal")
def deal(session_id: SessionHeader) -> GameStateResponse:
    """Debit the wager and deal a new hand."""
    game = _get_game(session_id)
    return _state(game, game.deal())


@router.post("/hit")
def hit(session_id: SessionHeader) -> GameStateResponse:
    """Player takes a card."""
    game = _get_game(session_id)
    return _state(game, game.hit())


@router.post("/stand")
def stand(session_id: SessionHeader) -> GameStateResponse:
    """Player stands; the dealer plays and the hand settles."""
    game = _get_game(session_id)
    return _state(game, game.stand())


@router.post("/reset")
def reset(session_id: SessionHeader) -> GameStateResponse:
    """Restore the starting bankroll and clear the table."""
    game = _get_game(session_id)
    game.reset()
    return _state(game)


@router.post("/autoplay")
async def toggle_auto_play(session_id: SessionHeader) -> AutoPlayRunResponse:
    """
    Engage or disengage auto-play.

    Engaging drives hands straight away, up to the configured cap; call
    ``/autoplay/run`` to continue. A stop request from another client takes
    effect before the running loop's next step.
    """
    game = _get_game(session_id)
    hands_run = 0
    if await run_in_threadpool(game.toggle_auto_play):
        hands_run = await _run_auto_play(game, None)
    return await _auto_play_response(game, hands_run)


@router.post("/autoplay/run")
async def run_auto_play(
    request: AutoPlayRunRequest,
    session_id: SessionHeader,
) -> AutoPlayRunResponse:
    """Let an engaged auto-play drive up to ``hands`` more hands."""
    game = _get_game(session_id)
    if not game.auto_play:
        return await _auto_play_response(game, 0, accepted=False)
    hands_run = await _run_auto_play(game, request.hands)
    return await _auto_play_response(game, hands_run)


@router.get("/events")
def get_events(session_id: SessionHeader, limit: int = 50) -> list[EventResponse]:
    """Return the most recent game events, oldest first."""
    game = _get_game(session_id)
    history = game.events.history
    return [EventResponse.from_event(e) for e in history[-limit:]] if limit > 0 else []
