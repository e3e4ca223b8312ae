"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field

from charlie.rules import DEFAULT_WAGER, INITIAL_BANKROLL, WAGER_DENOMINATIONS


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _parse_denominations() -> tuple[int, ...]:
    """Parse WAGER_DENOMINATIONS environment variable (comma-separated)."""
    raw = os.getenv("WAGER_DENOMINATIONS")
    if not raw:
        return WAGER_DENOMINATIONS
    return tuple(sorted({int(v) for v in raw.split(",") if v.strip()}))


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class GameConfig:
    """Default game configuration."""

    initial_bankroll: int = field(
        default_factory=lambda: int(os.getenv("INITIAL_BANKROLL", str(INITIAL_BANKROLL)))
    )
    default_wager: int = field(
        default_factory=lambda: int(os.getenv("DEFAULT_WAGER", str(DEFAULT_WAGER)))
    )
    denominations: tuple[int, ...] = field(default_factory=_parse_denominations)
    dealer_delay: float = field(
        default_factory=lambda: float(os.getenv("DEALER_DELAY", "0"))
    )
    autoplay_delay: float = field(
        default_factory=lambda: float(os.getenv("AUTOPLAY_DELAY", "0"))
    )
    autoplay_max_hands: int = field(
        default_factory=lambda: int(os.getenv("AUTOPLAY_MAX_HANDS", "100"))
    )

    def __post_init__(self) -> None:
        """Validate game settings."""
        if self.initial_bankroll < 0:
            raise ValueError("initial_bankroll must not be negative")
        if self.default_wager not in self.denominations:
            raise ValueError("default_wager must be one of the denominations")
        if self.dealer_delay < 0 or self.autoplay_delay < 0:
            raise ValueError("delays must not be negative")
        if self.autoplay_max_hands < 1:
            raise ValueError("autoplay_max_hands must be at least 1")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()
