"""Strategy and probability advisor endpoints."""

from fastapi import APIRouter

from api.routes.game import SessionHeader
from api.schemas import (
    BustProbabilityResponse,
    CountResponse,
    DealerOutcomeResponse,
    DecisionResponse,
    EdgeFactorsResponse,
    HouseEdgeResponse,
    ProbabilitiesResponse,
    RecommendationResponse,
)
from api.session import require_game
from engine.counting import betting_recommendation, describe_true_count, insurance_worthwhile
from engine.statistics import (
    DealerOutcomeProbabilities,
    HouseEdgeInfo,
    PlayerDecisionProbabilities,
)

router = APIRouter()


def _house_edge_response(info: HouseEdgeInfo) -> HouseEdgeResponse:
    factors = info.edge_factors
    return HouseEdgeResponse(
        current_house_edge=float(info.current_house_edge),
        base_house_edge=float(info.base_house_edge),
        deck_favors_player=info.deck_favors_player,
        edge_factors=EdgeFactorsResponse(
            blackjack_payout_contribution=float(factors.blackjack_payout_contribution),
            dealer_hits_soft_17_contribution=float(factors.dealer_hits_soft_17_contribution),
            deck_count_contribution=float(factors.deck_count_contribution),
            other_rules_contribution=float(factors.other_rules_contribution),
        ),
    )


def _dealer_response(dealer: DealerOutcomeProbabilities) -> DealerOutcomeResponse:
    return DealerOutcomeResponse(
        upcard=dealer.upcard,
        bust_probability=dealer.bust_probability,
        blackjack_probability=dealer.blackjack_probability,
        expected_value=dealer.expected_value,
        final_total_probabilities=dict(dealer.final_total_probabilities),
    )


def _decision_response(decisions: PlayerDecisionProbabilities) -> DecisionResponse:
    optimal = decisions.optimal_decision
    return DecisionResponse(
        stand_ev=decisions.stand_ev,
        hit_ev=decisions.hit_ev,
        double_down_ev=decisions.double_down_ev,
        split_ev=decisions.split_ev,
        insurance_ev=decisions.insurance_ev,
        surrender_ev=decisions.surrender_ev,
        optimal_decision=optimal.label if optimal else None,
        bust_probabilities=BustProbabilityResponse(
            after_hit=decisions.bust_probabilities.after_hit,
            after_double_down=decisions.bust_probabilities.after_double_down,
        ),
    )


@router.get("/recommendation")
async def get_recommendation(
    session_id: SessionHeader = None,
    count_adjusted: bool = False,
) -> RecommendationResponse:
    """Basic strategy advice for the active hand, optionally with count index plays."""
    game = await require_game(session_id)
    advice = game.recommendation(count_adjusted=count_adjusted)
    return RecommendationResponse(
        action=advice.action.label if advice.action else None,
        hand_type=advice.hand_type,
        player_total=advice.player_total,
        dealer_upcard=advice.dealer_upcard,
        explanation=advice.explanation,
        deviation=advice.deviation,
    )


@router.get("/probabilities")
async def get_probabilities(session_id: SessionHeader = None) -> ProbabilitiesResponse:
    """Dealer outcomes, decision EVs and house edge for the active hand."""
    game = await require_game(session_id)
    snapshot = game.probability_snapshot()
    return ProbabilitiesResponse(
        dealer=_dealer_response(snapshot.dealer),
        decisions=_decision_response(snapshot.decisions),
        house_edge=_house_edge_response(snapshot.house_edge),
    )


@router.get("/house-edge")
async def get_house_edge(session_id: SessionHeader = None) -> HouseEdgeResponse:
    game = await require_game(session_id)
    return _house_edge_response(game.probability.calculate_house_edge())


@router.get("/count")
async def get_count(session_id: SessionHeader = None) -> CountResponse:
    """Running count, true count and remaining shoe composition."""
    game = await require_game(session_id)
    composition = game.probability.composition
    true_count = composition.true_count
    return CountResponse(
        running_count=composition.running_count,
        true_count=true_count,
        decks_remaining=composition.decks_remaining,
        total_cards=composition.total_cards,
        remaining_cards={str(rank): n for rank, n in composition.remaining_cards.items()},
        card_percentages={str(rank): p for rank, p in composition.card_percentages.items()},
        count_description=describe_true_count(true_count),
        betting_recommendation=betting_recommendation(true_count),
        insurance_worthwhile=insurance_worthwhile(true_count),
    )
