"""Blackjack rule variations."""

from dataclasses import dataclass

BLACKJACK_PAYOUTS = (1.5, 1.2, 1.0)


@dataclass(frozen=True)
class GameRules:
    """
    Blackjack table rules configuration.

    All rules that affect strategy decisions and house edge. A rule set is
    fixed for the life of a shoe; anything derived from it (strategy charts,
    probability state) must be rebuilt when it changes.
    """

    # Deck configuration
    num_decks: int = 6

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17
    dealer_peeks: bool = True  # Dealer checks for blackjack under A/10

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2, even money = 1.0)
    blackjack_payout: float = 1.5

    # Double / split rules
    double_after_split: bool = True  # DAS
    max_splits: int = 4  # Maximum number of hands from splitting
    resplit_aces: bool = False  # RSA
    hit_split_aces: bool = False  # Usually only one card to split aces

    # Surrender / insurance
    surrender_allowed: bool = False  # Late surrender
    insurance_allowed: bool = True

    # Betting limits
    min_bet: int = 5
    max_bet: int = 1000

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if self.blackjack_payout not in BLACKJACK_PAYOUTS:
            raise ValueError(
                f"blackjack_payout must be one of {BLACKJACK_PAYOUTS}, "
                f"got {self.blackjack_payout}"
            )
        if self.max_splits < 1:
            raise ValueError("max_splits must be at least 1")
        if self.min_bet < 1 or self.max_bet < self.min_bet:
            raise ValueError("bet limits must satisfy 1 <= min_bet <= max_bet")

    @classmethod
    def classic(cls) -> "GameRules":
        """Single deck, dealer stands on soft 17."""
        return cls(
            num_decks=1,
            dealer_hits_soft_17=False,
            double_after_split=True,
            surrender_allowed=False,
            max_splits=3,
        )

    @classmethod
    def european(cls) -> "GameRules":
        """Two decks, no hole-card peek, no insurance, no doubling after split."""
        return cls(
            num_decks=2,
            dealer_hits_soft_17=False,
            dealer_peeks=False,
            double_after_split=False,
            surrender_allowed=False,
            insurance_allowed=False,
            max_splits=3,
        )

    @classmethod
    def atlantic_city(cls) -> "GameRules":
        """Atlantic City rules."""
        return cls(
            num_decks=8,
            dealer_hits_soft_17=True,
            double_after_split=True,
            surrender_allowed=True,
            max_splits=3,
        )

    @classmethod
    def vegas_strip(cls) -> "GameRules":
        """Standard Vegas Strip rules (six decks, H17)."""
        return cls(
            num_decks=6,
            dealer_hits_soft_17=True,
            double_after_split=True,
            surrender_allowed=False,
            max_splits=3,
        )

    @classmethod
    def preset(cls, name: str) -> "GameRules":
        """Look up a named preset ("classic", "european", "atlantic_city", "vegas_strip")."""
        presets = {
            "classic": cls.classic,
            "european": cls.european,
            "atlantic_city": cls.atlantic_city,
            "vegas_strip": cls.vegas_strip,
        }
        if name not in presets:
            raise ValueError(f"Unknown rule preset: {name}")
        return presets[name]()
