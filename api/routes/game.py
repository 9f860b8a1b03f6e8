"""Game API endpoints."""

import logging
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Body, Header, HTTPException

from api.schemas import (
    ActionRequest,
    BetRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
    RulesRequest,
    RulesResponse,
)
from api.session import get_registry, require_game
from config import config
from engine.cards import Card
from engine.game import (
    ActionResult,
    EventType,
    GameEvent,
    GameSession,
    InsuranceOffer,
    PlayerTurn,
    RoundOver,
)
from engine.hand import Hand
from engine.strategy.rules import GameRules

logger = logging.getLogger(__name__)

router = APIRouter()

SessionHeader = Annotated[str | None, Header(alias="X-Session-ID")]


def _card_to_response(card: Card) -> CardResponse:
    if not card.face_up:
        return CardResponse(rank=None, suit=None, value=None, face_up=False)
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse, totalling only the visible cards."""
    visible = Hand(cards=[c for c in hand.cards if c.face_up])
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        values=visible.values,
        value=visible.value,
        is_soft=visible.is_soft,
        is_blackjack=hand.is_blackjack and len(visible.cards) == len(hand.cards),
        is_busted=visible.is_busted,
        bet=hand.bet,
        is_doubled=hand.is_doubled,
        is_split_hand=hand.is_split_hand,
        is_surrendered=hand.is_surrendered,
    )


def _rules_to_response(rules: GameRules) -> RulesResponse:
    return RulesResponse(
        num_decks=rules.num_decks,
        dealer_hits_soft_17=rules.dealer_hits_soft_17,
        dealer_peeks=rules.dealer_peeks,
        blackjack_payout=rules.blackjack_payout,
        double_after_split=rules.double_after_split,
        max_splits=rules.max_splits,
        resplit_aces=rules.resplit_aces,
        hit_split_aces=rules.hit_split_aces,
        surrender_allowed=rules.surrender_allowed,
        insurance_allowed=rules.insurance_allowed,
        min_bet=rules.min_bet,
        max_bet=rules.max_bet,
    )


def _game_state_response(game: GameSession) -> GameStateResponse:
    """Convert game state to response."""
    phase = game.phase
    dealer = game.dealer_hand

    active_index = None
    insurance_bet = Decimal("0")
    if isinstance(phase, PlayerTurn):
        active_index = phase.active_index
        insurance_bet = phase.insurance_bet
    elif game.active_hand is not None:
        active_index = 0

    response = GameStateResponse(
        phase=phase.tag.name,
        player_hands=[_hand_to_response(h) for h in game.player_hands],
        active_hand_index=active_index,
        dealer_hand=_hand_to_response(dealer) if dealer is not None else None,
        dealer_showing=_card_to_response(dealer.cards[0]) if dealer and dealer.cards else None,
        bankroll=float(game.bankroll),
        insurance_bet=float(insurance_bet),
    )
    if isinstance(phase, InsuranceOffer):
        response.even_money_offered = phase.even_money
    if isinstance(phase, RoundOver):
        response.insurance_bet = float(phase.insurance_bet)
        response.results = [r.value for r in phase.results]
        response.payouts = [float(p) for p in phase.payouts]
        response.net_result = float(phase.net_result)
    return response


def _check(result: ActionResult) -> None:
    if not result.ok:
        logger.debug("Rejected request: %s", result.reason.name)
        raise HTTPException(status_code=400, detail=result.message)


def _build_rules(request: RulesRequest | None) -> GameRules:
    if request is None:
        return config.game.to_rules()
    try:
        return request.to_rules()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _log_round(event: GameEvent) -> None:
    data = event.data
    logger.info(
        "Round settled: %s, net %+.2f, bankroll %.2f",
        data["results"],
        data["net"],
        data["bankroll"],
    )


@router.post("/new")
async def new_game(
    session_id: SessionHeader = None,
    rules: Annotated[RulesRequest | None, Body()] = None,
) -> dict[str, str]:
    """Create a new game session, or restart the one named in the header."""
    game = GameSession(
        rules=_build_rules(rules),
        penetration=config.game.penetration,
        initial_bankroll=config.game.initial_bankroll,
    )
    game.subscribe(_log_round, EventType.ROUND_ENDED)
    registry = get_registry()
    if session_id is not None and await registry.get(session_id) is not None:
        await registry.replace(session_id, game)
    else:
        session_id = await registry.create(game)
    return {"session_id": session_id}


@router.get("/state")
async def get_state(session_id: SessionHeader = None) -> GameStateResponse:
    """Get current game state."""
    game = await require_game(session_id)
    return _game_state_response(game)


@router.post("/bet")
async def place_bet(request: BetRequest, session_id: SessionHeader = None) -> GameStateResponse:
    """Place a bet and deal cards."""
    game = await require_game(session_id)
    _check(game.place_bet(request.amount))
    return _game_state_response(game)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: SessionHeader = None,
) -> GameStateResponse:
    """Execute a player action."""
    game = await require_game(session_id)
    _check(game.perform(request.action))
    return _game_state_response(game)


@router.get("/rules")
async def get_rules(session_id: SessionHeader = None) -> RulesResponse:
    game = await require_game(session_id)
    return _rules_to_response(game.rules)


@router.put("/rules")
async def update_rules(request: RulesRequest, session_id: SessionHeader = None) -> RulesResponse:
    """Change the table rules between rounds."""
    game = await require_game(session_id)
    _check(game.update_rules(_build_rules(request)))
    return _rules_to_response(game.rules)
