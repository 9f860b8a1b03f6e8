"""A single blackjack game: one shoe, one player, one dealer."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from random import Random
from typing import Callable

from engine.cards import Card, Shoe
from engine.errors import ShoeExhaustedError
from engine.game.events import EventEmitter, EventType, GameEvent
from engine.game.outcome import ActionResult, Reason
from engine.game.state import (
    Betting,
    InsuranceOffer,
    Phase,
    PlayerTurn,
    RoundOver,
    accepts_bets,
    start_player_turn,
)
from engine.hand import Hand
from engine.resolver import (
    RoundResult,
    calculate_payout,
    determine_round_result,
    settle_insurance,
)
from engine.statistics.composition import DeckComposition
from engine.statistics.house_edge import HouseEdgeInfo
from engine.statistics.probability import (
    DealerOutcomeProbabilities,
    PlayerDecisionProbabilities,
    ProbabilityEngine,
)
from engine.strategy.basic import Action, BasicStrategy, Recommendation
from engine.strategy.deviations import apply_index_play
from engine.strategy.rules import GameRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbabilitySnapshot:
    """Everything the analytics view needs at one point in a round."""

    composition: DeckComposition
    dealer: DealerOutcomeProbabilities
    decisions: PlayerDecisionProbabilities
    house_edge: HouseEdgeInfo


class GameSession:
    """
    Blackjack game logic for one player against the dealer.

    The session owns the shoe, the strategy advisor, the probability
    engine and the bankroll. Commands never raise for invalid requests;
    they return an ``ActionResult`` whose reason says why nothing happened.
    Bets are not taken from the bankroll up front: the net result of the
    round is applied when it is settled.
    """

    def __init__(
        self,
        rules: GameRules | None = None,
        penetration: float = 0.75,
        initial_bankroll: Decimal | int = Decimal("1000"),
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new game session.

        Args:
            rules: Game rules (uses defaults if not provided)
            penetration: Fraction of the shoe dealt before reshuffling
            initial_bankroll: Starting chips
            rng: Random number generator for reproducible games
        """
        self._rules = rules or GameRules()
        self._penetration = penetration
        self._rng = rng or Random()

        self.shoe = Shoe(self._rules.num_decks, penetration, self._rng)
        self.shoe.shuffle()
        self.strategy = BasicStrategy(self._rules)
        self.probability = ProbabilityEngine(self._rules)
        self.bankroll = Decimal(str(initial_bankroll))
        self.events = EventEmitter()
        self.phase: Phase = Betting()
        self.rounds_played = 0

    @property
    def rules(self) -> GameRules:
        return self._rules

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    @property
    def active_hand(self) -> Hand | None:
        """The hand the player is currently acting on, if any."""
        phase = self.phase
        if isinstance(phase, PlayerTurn):
            return phase.active_hand
        if isinstance(phase, InsuranceOffer):
            return phase.player_hand
        return None

    @property
    def dealer_hand(self) -> Hand | None:
        phase = self.phase
        if isinstance(phase, (InsuranceOffer, PlayerTurn, RoundOver)):
            return phase.dealer_hand
        return None

    @property
    def player_hands(self) -> tuple[Hand, ...]:
        phase = self.phase
        if isinstance(phase, InsuranceOffer):
            return (phase.player_hand,)
        if isinstance(phase, (PlayerTurn, RoundOver)):
            return phase.hands
        return ()

    @property
    def available_chips(self) -> Decimal:
        """Bankroll not yet committed to bets in the current round."""
        phase = self.phase
        committed = Decimal("0")
        if isinstance(phase, InsuranceOffer):
            committed = Decimal(phase.player_hand.bet)
        elif isinstance(phase, PlayerTurn):
            committed = sum((Decimal(h.bet) for h in phase.hands), Decimal("0"))
            committed += phase.insurance_bet
        return self.bankroll - committed

    # -- Commands ---------------------------------------------------------

    def place_bet(self, amount: int) -> ActionResult:
        """
        Place a bet and deal a new round.

        Args:
            amount: Bet amount

        Returns:
            The outcome; on success the round is dealt and may already be
            settled (naturals)
        """
        if not accepts_bets(self.phase):
            return self._reject(Reason.ROUND_IN_PROGRESS)
        if amount < self._rules.min_bet or amount > self._rules.max_bet:
            return self._reject(Reason.BET_OUT_OF_RANGE)
        if Decimal(amount) > self.bankroll:
            return self._reject(Reason.INSUFFICIENT_CHIPS)

        if self.shoe.needs_shuffle:
            self._reshuffle()

        self.events.emit(EventType.BET_PLACED, amount=amount)
        player = Hand(bet=amount)
        dealer = Hand()
        try:
            # Player, dealer up, player, dealer hole
            self._deal_to(player)
            self._deal_to(dealer, owner="dealer")
            self._deal_to(player)
            self._deal_to(dealer, owner="dealer", face_up=False)
        except ShoeExhaustedError:
            return self._reject(Reason.SHOE_EXHAUSTED)

        self.rounds_played += 1
        self.events.emit(EventType.ROUND_STARTED, round=self.rounds_played)

        upcard = dealer.cards[0]
        if upcard.is_ace and self._rules.insurance_allowed:
            offer = InsuranceOffer(player_hand=player, dealer_hand=dealer)
            self.phase = offer
            self.events.emit(
                EventType.INSURANCE_OFFERED,
                cost=float(offer.insurance_cost),
                even_money=offer.even_money,
            )
            return ActionResult.success()

        self._check_naturals(start_player_turn(player, dealer))
        return ActionResult.success()

    def take_insurance(self) -> ActionResult:
        """Insure the hand for half the original bet."""
        phase = self.phase
        if not isinstance(phase, InsuranceOffer):
            return self._reject(Reason.INSURANCE_NOT_OFFERED)
        cost = phase.insurance_cost
        if cost > self.available_chips:
            return self._reject(Reason.INSUFFICIENT_CHIPS)

        self.events.emit(EventType.INSURANCE_TAKEN, amount=float(cost))
        self._check_naturals(start_player_turn(phase.player_hand, phase.dealer_hand, cost))
        return ActionResult.success()

    def take_even_money(self) -> ActionResult:
        """Settle a natural against a dealer ace at 1:1, whatever the hole card."""
        phase = self.phase
        if not isinstance(phase, InsuranceOffer) or not phase.even_money:
            return self._reject(Reason.EVEN_MONEY_NOT_OFFERED)

        self.events.emit(EventType.EVEN_MONEY_TAKEN, amount=phase.player_hand.bet)
        self._settle(start_player_turn(phase.player_hand, phase.dealer_hand), even_money=True)
        return ActionResult.success()

    def decline_insurance(self) -> ActionResult:
        phase = self.phase
        if not isinstance(phase, InsuranceOffer):
            return self._reject(Reason.INSURANCE_NOT_OFFERED)

        self.events.emit(EventType.INSURANCE_DECLINED)
        self._check_naturals(start_player_turn(phase.player_hand, phase.dealer_hand))
        return ActionResult.success()

    def hit(self) -> ActionResult:
        """Take another card on the active hand."""
        turn = self._player_turn()
        if turn is None:
            return self._reject(Reason.NO_ACTIVE_HAND)
        hand = turn.active_hand
        if hand.restricted_to_one_card:
            return self._reject(Reason.SPLIT_ACES_ONE_CARD)

        try:
            self._deal_to(hand)
        except ShoeExhaustedError:
            return self._reject(Reason.SHOE_EXHAUSTED)
        self.events.emit(EventType.PLAYER_HIT, hand_index=turn.active_index, hand_value=hand.value)

        if hand.is_busted:
            self._advance(turn)
        return ActionResult.success()

    def stand(self) -> ActionResult:
        turn = self._player_turn()
        if turn is None:
            return self._reject(Reason.NO_ACTIVE_HAND)

        self.events.emit(
            EventType.PLAYER_STAND,
            hand_index=turn.active_index,
            hand_value=turn.active_hand.value,
        )
        self._advance(turn)
        return ActionResult.success()

    def double_down(self) -> ActionResult:
        """Double the bet, take exactly one card and stand."""
        turn = self._player_turn()
        if turn is None:
            return self._reject(Reason.NO_ACTIVE_HAND)
        hand = turn.active_hand

        if hand.restricted_to_one_card:
            return self._reject(Reason.SPLIT_ACES_ONE_CARD)
        if not hand.can_double:
            return self._reject(Reason.CANNOT_DOUBLE)
        if hand.is_split_hand and not self._rules.double_after_split:
            return self._reject(Reason.NO_DOUBLE_AFTER_SPLIT)
        if Decimal(hand.bet) > self.available_chips:
            return self._reject(Reason.INSUFFICIENT_CHIPS)

        try:
            card = self._draw()
        except ShoeExhaustedError:
            return self._reject(Reason.SHOE_EXHAUSTED)
        hand.bet *= 2
        hand.is_doubled = True
        self._place(card, hand, owner="player")
        self.events.emit(
            EventType.PLAYER_DOUBLE,
            hand_index=turn.active_index,
            hand_value=hand.value,
            new_bet=hand.bet,
        )
        self._advance(turn)
        return ActionResult.success()

    def split(self) -> ActionResult:
        """Split a pair into two hands, each with its own bet."""
        turn = self._player_turn()
        if turn is None:
            return self._reject(Reason.NO_ACTIVE_HAND)
        hand = turn.active_hand
        rules = self._rules

        if not hand.can_split:
            return self._reject(Reason.NOT_A_PAIR)
        if len(turn.hands) >= rules.max_splits:
            return self._reject(Reason.MAX_SPLITS_REACHED)
        aces = hand.cards[0].is_ace
        if aces and hand.is_split_hand and not rules.resplit_aces:
            return self._reject(Reason.NO_RESPLIT_ACES)
        if Decimal(hand.bet) > self.available_chips:
            return self._reject(Reason.INSUFFICIENT_CHIPS)

        try:
            first, second = self._draw(), self._draw()
        except ShoeExhaustedError:
            return self._reject(Reason.SHOE_EXHAUSTED)

        one_card = aces and not rules.hit_split_aces
        new_hand = Hand(
            cards=[hand.cards.pop()],
            bet=hand.bet,
            is_split_hand=True,
            restricted_to_one_card=one_card,
        )
        hand.is_split_hand = True
        hand.restricted_to_one_card = one_card
        self._place(first, hand, owner="player")
        self._place(second, new_hand, owner="player")

        turn = turn.with_split(new_hand)
        self.events.emit(
            EventType.PLAYER_SPLIT,
            hand_index=turn.active_index,
            hand_count=len(turn.hands),
        )
        if self._hand_complete(hand, turn):
            self._advance(turn)
        else:
            self.phase = turn
        return ActionResult.success()

    def surrender(self) -> ActionResult:
        """Give up half the bet and end the hand."""
        turn = self._player_turn()
        if turn is None:
            return self._reject(Reason.NO_ACTIVE_HAND)
        if not self._rules.surrender_allowed:
            return self._reject(Reason.SURRENDER_NOT_ALLOWED)
        hand = turn.active_hand
        if len(hand.cards) != 2 or hand.is_split_hand:
            return self._reject(Reason.CANNOT_SURRENDER)

        hand.is_surrendered = True
        self.events.emit(EventType.PLAYER_SURRENDER, hand_index=turn.active_index)
        self._advance(turn)
        return ActionResult.success()

    def perform(self, action: str | Action) -> ActionResult:
        """
        Run a command by name.

        Accepts ``hit``, ``stand``, ``double``, ``split``, ``surrender``,
        ``insurance``, ``decline_insurance`` and ``even_money`` (or the
        matching ``Action``).
        """
        commands: dict[str, Callable[[], ActionResult]] = {
            "hit": self.hit,
            "stand": self.stand,
            "double": self.double_down,
            "double_down": self.double_down,
            "split": self.split,
            "surrender": self.surrender,
            "insurance": self.take_insurance,
            "decline_insurance": self.decline_insurance,
            "even_money": self.take_even_money,
        }
        name = action.label if isinstance(action, Action) else action.strip().lower()
        command = commands.get(name)
        if command is None:
            return self._reject(Reason.UNKNOWN_ACTION)
        return command()

    def update_rules(self, rules: GameRules) -> ActionResult:
        """
        Switch to a new rule set between rounds.

        The strategy chart, the probability engine and the shoe are all
        rebuilt for the new rules.
        """
        if not accepts_bets(self.phase):
            return self._reject(Reason.ROUND_IN_PROGRESS)

        self._rules = rules
        self.strategy.update_rules(rules)
        self.probability = ProbabilityEngine(rules)
        self.shoe = Shoe(rules.num_decks, self._penetration, self._rng)
        self.shoe.shuffle()
        self.phase = Betting()
        self.events.emit(EventType.RULES_CHANGED, num_decks=rules.num_decks)
        logger.info("Rules changed: %s", rules)
        return ActionResult.success()

    # -- Advisor queries --------------------------------------------------

    def recommendation(self, count_adjusted: bool = False) -> Recommendation:
        """
        Basic strategy advice for the active hand (STAND when there is none).

        With ``count_adjusted`` the advice follows the Hi-Lo index plays at
        the current true count.
        """
        turn = self._player_turn()
        if turn is None:
            return self.strategy.advise([], None)

        hand = turn.active_hand
        can_double = (
            hand.can_double
            and not hand.restricted_to_one_card
            and (self._rules.double_after_split or not hand.is_split_hand)
            and Decimal(hand.bet) <= self.available_chips
        )
        can_split = (
            hand.can_split
            and len(turn.hands) < self._rules.max_splits
            and Decimal(hand.bet) <= self.available_chips
        )
        advice = self.strategy.advise(
            hand.cards,
            turn.dealer_hand.cards[0],
            can_surrender=self._rules.surrender_allowed and not hand.is_split_hand,
            can_double=can_double,
            can_split=can_split,
        )
        if count_adjusted:
            advice = apply_index_play(advice, self.probability.composition.true_count)
        return advice

    def probability_snapshot(self) -> ProbabilitySnapshot:
        """Composition, dealer outcomes, decision EVs and house edge right now."""
        engine = self.probability
        hand = self.active_hand
        dealer = self.dealer_hand
        upcard = dealer.cards[0] if dealer is not None and dealer.cards else None

        if hand is None:
            decisions = PlayerDecisionProbabilities.empty()
            dealer_odds = DealerOutcomeProbabilities.empty()
        else:
            decisions = engine.calculate_player_decision_probabilities(hand.cards, upcard)
            dealer_odds = engine.calculate_dealer_probabilities(upcard)

        return ProbabilitySnapshot(
            composition=engine.composition,
            dealer=dealer_odds,
            decisions=decisions,
            house_edge=engine.calculate_house_edge(),
        )

    # -- Internals --------------------------------------------------------

    def _reject(self, reason: Reason) -> ActionResult:
        self.events.emit(EventType.ACTION_REJECTED, reason=reason.name, message=reason.message)
        return ActionResult.reject(reason)

    def _player_turn(self) -> PlayerTurn | None:
        phase = self.phase
        return phase if isinstance(phase, PlayerTurn) else None

    def _reshuffle(self) -> None:
        self.shoe.shuffle()
        self.probability.reset_shoe()
        self.events.emit(EventType.SHOE_SHUFFLED, num_decks=self.shoe.num_decks)

    def _draw(self, face_up: bool = True) -> Card:
        """Draw a card, reshuffling once if the shoe runs dry mid-round."""
        try:
            return self.shoe.draw(face_up)
        except ShoeExhaustedError:
            logger.warning("Shoe exhausted mid-round, reshuffling")
            self._reshuffle()
            return self.shoe.draw(face_up)

    def _deal_to(self, hand: Hand, owner: str = "player", face_up: bool = True) -> Card:
        card = self._draw(face_up)
        self._place(card, hand, owner)
        return card

    def _place(self, card: Card, hand: Hand, owner: str) -> None:
        hand.add_card(card)
        if card.face_up:
            self.probability.update_dealt_cards([card])
        self.events.emit(
            EventType.CARD_DEALT,
            card=str(card) if card.face_up else "??",
            hand=owner,
        )

    def _reveal_hole_card(self, dealer: Hand) -> None:
        if len(dealer.cards) < 2 or dealer.cards[1].face_up:
            return
        dealer.cards[1] = dealer.cards[1].flipped()
        self.probability.update_dealt_cards([dealer.cards[1]])
        self.events.emit(
            EventType.DEALER_REVEALS,
            card=str(dealer.cards[1]),
            hand_value=dealer.value,
        )

    def _check_naturals(self, turn: PlayerTurn) -> None:
        """Settle at once on a dealer peek blackjack or a player natural."""
        dealer = turn.dealer_hand
        player = turn.hands[0]
        upcard = dealer.cards[0]

        if self._rules.dealer_peeks and (upcard.is_ace or upcard.is_ten_value):
            if dealer.is_blackjack:
                self.events.emit(EventType.DEALER_BLACKJACK)
                self._settle(turn)
                return

        if player.is_blackjack:
            self._settle(turn)
            return

        self.phase = turn

    def _hand_complete(self, hand: Hand, turn: PlayerTurn) -> bool:
        """A split ace hand is done after one card unless it can be resplit."""
        if not hand.restricted_to_one_card:
            return False
        can_resplit = (
            self._rules.resplit_aces
            and hand.can_split
            and len(turn.hands) < self._rules.max_splits
        )
        return not can_resplit

    def _advance(self, turn: PlayerTurn) -> None:
        """Move to the next hand that still needs a decision, or finish."""
        turn = turn.next_hand()
        while not turn.is_finished and self._hand_complete(turn.active_hand, turn):
            turn = turn.next_hand()

        if turn.is_finished:
            self._play_dealer(turn)
        else:
            self.phase = turn

    def _dealer_should_hit(self, dealer: Hand) -> bool:
        value = dealer.value
        if value < 17:
            return True
        return value == 17 and dealer.is_soft and self._rules.dealer_hits_soft_17

    def _play_dealer(self, turn: PlayerTurn) -> None:
        dealer = turn.dealer_hand
        self._reveal_hole_card(dealer)

        live = [h for h in turn.hands if not (h.is_busted or h.is_surrendered)]
        if live and not dealer.is_blackjack:
            while self._dealer_should_hit(dealer):
                self._deal_to(dealer, owner="dealer")
                self.events.emit(EventType.DEALER_HITS, hand_value=dealer.value)
            self.events.emit(EventType.DEALER_STANDS, hand_value=dealer.value)

        self._settle(turn)

    def _settle(self, turn: PlayerTurn, even_money: bool = False) -> None:
        """Resolve every hand, pay out and move to RoundOver."""
        dealer = turn.dealer_hand
        self._reveal_hole_card(dealer)

        results: list[RoundResult] = []
        payouts = []
        for index, hand in enumerate(turn.hands):
            result = RoundResult.WIN if even_money else determine_round_result(hand, dealer)
            payout = calculate_payout(result, hand.bet, self._rules)
            results.append(result)
            payouts.append(payout)
            self.events.emit(
                EventType.HAND_SETTLED,
                hand_index=index,
                result=result.value,
                amount=float(payout),
            )

        insurance_payout = Decimal("0")
        if turn.insurance_bet:
            insurance_payout = settle_insurance(turn.insurance_bet, dealer)

        over = RoundOver(
            hands=turn.hands,
            dealer_hand=dealer,
            results=tuple(results),
            payouts=tuple(payouts),
            insurance_bet=turn.insurance_bet,
            insurance_payout=insurance_payout,
        )
        self.bankroll += over.net_result
        self.phase = over

        logger.debug(
            "Round %d settled: %s, net %s",
            self.rounds_played,
            ", ".join(r.value for r in results),
            over.net_result,
        )
        self.events.emit(
            EventType.ROUND_ENDED,
            results=[r.value for r in results],
            net=float(over.net_result),
            bankroll=float(self.bankroll),
        )
