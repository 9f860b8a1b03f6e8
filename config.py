"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

from engine.strategy.rules import GameRules


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


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

    enabled: bool = field(default_factory=lambda: _env_bool("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )

    @property
    def limit(self) -> str:
        """Limit string in slowapi notation."""
        return f"{self.requests_per_minute}/minute"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class GameConfig:
    """Default table rules for new sessions."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("NUM_DECKS", "6")))
    penetration: float = field(default_factory=lambda: float(os.getenv("PENETRATION", "0.75")))
    initial_bankroll: int = field(
        default_factory=lambda: int(os.getenv("INITIAL_BANKROLL", "1000"))
    )
    min_bet: int = 10
    max_bet: int = 1000
    blackjack_payout: float = 1.5
    dealer_hits_soft_17: bool = True
    dealer_peeks: bool = True
    double_after_split: bool = True
    resplit_aces: bool = False
    hit_split_aces: bool = False
    surrender_allowed: bool = True
    insurance_allowed: bool = True
    max_splits: int = 4

    def to_rules(self) -> GameRules:
        """Build the rule set new sessions start with."""
        return GameRules(
            num_decks=self.num_decks,
            dealer_hits_soft_17=self.dealer_hits_soft_17,
            dealer_peeks=self.dealer_peeks,
            blackjack_payout=self.blackjack_payout,
            double_after_split=self.double_after_split,
            max_splits=self.max_splits,
            resplit_aces=self.resplit_aces,
            hit_split_aces=self.hit_split_aces,
            surrender_allowed=self.surrender_allowed,
            insurance_allowed=self.insurance_allowed,
            min_bet=self.min_bet,
            max_bet=self.max_bet,
        )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    session_ttl: int = field(
        default_factory=lambda: int(os.getenv("SESSION_TTL", "3600"))
    )  # Session timeout in seconds
    session_sweep_interval: int = field(
        default_factory=lambda: int(os.getenv("SESSION_SWEEP_INTERVAL", "300"))
    )

    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()
