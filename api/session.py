"""In-memory table sessions with signed session IDs."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from charlie.game import BlackjackGame
from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds, or None to check the signature only

        Returns:
            The session ID if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def new_game() -> BlackjackGame:
    """Create an engine with the configured table settings."""
    game_config = config.game
    return BlackjackGame(
        initial_bankroll=game_config.initial_bankroll,
        wager=game_config.default_wager,
        denominations=game_config.denominations,
        dealer_delay=game_config.dealer_delay,
    )


class SessionStore:
    """
    Holds one engine per session in process memory.

    Nothing is persisted: a restart forgets every table.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, tuple[BlackjackGame, datetime]] = {}

    def create(self, game: BlackjackGame | None = None) -> str:
        """Store a game under a new signed session token."""
        removed = self.cleanup_expired()
        if removed:
            logger.info("Dropped %d expired sessions", removed)
        token = get_session_signer().sign(str(uuid4()))
        self.set(token, game or new_game())
        logger.info("Created session, %d active", len(self._sessions))
        return token

    def get(self, token: str) -> BlackjackGame | None:
        """
        Return the session's game and refresh its expiry.

        The stored expiry, pushed out on every access, decides whether the
        session is alive; the token only has to carry a valid signature.
        """
        if get_session_signer().unsign(token) is None:
            return None
        entry = self._sessions.get(token)
        if entry is None:
            return None

        game, expiry = entry
        if expiry < datetime.now():
            self.delete(token)
            return None

        self.set(token, game)
        return game

    def set(self, token: str, game: BlackjackGame) -> None:
        """Store a game and push its expiry out by the TTL."""
        self._sessions[token] = (game, datetime.now() + timedelta(seconds=self._ttl))

    def delete(self, token: str) -> None:
        """Delete session."""
        self._sessions.pop(token, None)

    def exists(self, token: str) -> bool:
        """Check if session exists."""
        return self.get(token) is not None

    def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in list(self._sessions.items()) if expiry < now]
        for sid in expired:
            self._sessions.pop(sid, None)
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


# Global session store instance
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store

