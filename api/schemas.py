"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, Field

from engine.strategy.rules import GameRules


# Game schemas
class BetRequest(BaseModel):
    """Request to place a bet."""

    amount: int = Field(..., ge=1, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal[
        "hit",
        "stand",
        "double",
        "split",
        "surrender",
        "insurance",
        "decline_insurance",
        "even_money",
    ]


class RulesRequest(BaseModel):
    """Table rules for a new game or a rule change."""

    preset: Literal["classic", "european", "atlantic_city", "vegas_strip"] | None = None
    num_decks: int = Field(default=6, ge=1, le=8)
    dealer_hits_soft_17: bool = True
    dealer_peeks: bool = True
    blackjack_payout: Literal[1.5, 1.2, 1.0] = 1.5
    double_after_split: bool = True
    max_splits: int = Field(default=4, ge=1)
    resplit_aces: bool = False
    hit_split_aces: bool = False
    surrender_allowed: bool = False
    insurance_allowed: bool = True
    min_bet: int = Field(default=5, ge=1)
    max_bet: int = Field(default=1000, ge=1)

    def to_rules(self) -> GameRules:
        """Build the rule set; a preset wins over the individual fields."""
        if self.preset is not None:
            return GameRules.preset(self.preset)
        return GameRules(**self.model_dump(exclude={"preset"}))


class RulesResponse(BaseModel):
    """Rules in effect for a session."""

    num_decks: int
    dealer_hits_soft_17: bool
    dealer_peeks: bool
    blackjack_payout: float
    double_after_split: bool
    max_splits: int
    resplit_aces: bool
    hit_split_aces: bool
    surrender_allowed: bool
    insurance_allowed: bool
    min_bet: int
    max_bet: int


class CardResponse(BaseModel):
    """Card representation. Face-down cards hide rank and suit."""

    rank: str | None
    suit: str | None
    value: int | None
    face_up: bool = True


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    values: list[int]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool
    bet: int
    is_doubled: bool = False
    is_split_hand: bool = False
    is_surrendered: bool = False


class GameStateResponse(BaseModel):
    """Current game state."""

    phase: str
    player_hands: list[HandResponse]
    active_hand_index: int | None
    dealer_hand: HandResponse | None
    dealer_showing: CardResponse | None
    bankroll: float
    insurance_bet: float = 0.0
    even_money_offered: bool = False
    results: list[str] | None = None
    payouts: list[float] | None = None
    net_result: float | None = None


# Advisor schemas
class RecommendationResponse(BaseModel):
    """Basic strategy advice for the active hand."""

    action: str | None
    hand_type: str
    player_total: int
    dealer_upcard: int
    explanation: str
    deviation: str | None = None


class CountResponse(BaseModel):
    """Shoe composition and count."""

    running_count: float
    true_count: float
    decks_remaining: float
    total_cards: int
    remaining_cards: dict[str, int]
    card_percentages: dict[str, float]
    count_description: str
    betting_recommendation: str
    insurance_worthwhile: bool


class DealerOutcomeResponse(BaseModel):
    """Dealer final-hand distribution."""

    upcard: int | None
    bust_probability: float
    blackjack_probability: float
    expected_value: float
    final_total_probabilities: dict[int, float]


class BustProbabilityResponse(BaseModel):
    after_hit: float
    after_double_down: float


class DecisionResponse(BaseModel):
    """Expected value per decision."""

    stand_ev: float
    hit_ev: float
    double_down_ev: float
    split_ev: float | None
    insurance_ev: float | None
    surrender_ev: float
    optimal_decision: str | None
    bust_probabilities: BustProbabilityResponse


class EdgeFactorsResponse(BaseModel):
    blackjack_payout_contribution: float
    dealer_hits_soft_17_contribution: float
    deck_count_contribution: float
    other_rules_contribution: float


class HouseEdgeResponse(BaseModel):
    """House edge in percent, for the rules and after the count."""

    current_house_edge: float
    base_house_edge: float
    deck_favors_player: bool
    edge_factors: EdgeFactorsResponse


class ProbabilitiesResponse(BaseModel):
    """Full probability snapshot for the active hand."""

    dealer: DealerOutcomeResponse
    decisions: DecisionResponse
    house_edge: HouseEdgeResponse
