"""Hi-Lo index plays: hard totals played differently at a high true count."""

from dataclasses import dataclass, replace

from engine.strategy.basic import Action, Recommendation


@dataclass(frozen=True)
class IndexPlay:
    """
    A strategy deviation keyed on the true count.

    Once the true count reaches ``index`` the hand is played with
    ``action`` instead of the basic strategy chart's choice.
    """

    player_total: int
    dealer_upcard: int  # 2-11 (11 = Ace)
    index: float
    action: Action = Action.STAND

    def applies(self, true_count: float) -> bool:
        return true_count >= self.index

    @property
    def description(self) -> str:
        upcard = "A" if self.dealer_upcard == 11 else str(self.dealer_upcard)
        verb = self.action.name.title()
        return f"{verb} on {self.player_total} vs {upcard} at a true count of {self.index:+g} or higher"


COUNT_INDEX_PLAYS: tuple[IndexPlay, ...] = (
    IndexPlay(player_total=16, dealer_upcard=10, index=0.0),
    IndexPlay(player_total=15, dealer_upcard=10, index=4.0),
    IndexPlay(player_total=12, dealer_upcard=3, index=2.0),
    IndexPlay(player_total=12, dealer_upcard=2, index=3.0),
)


def find_index_play(player_total: int, dealer_upcard: int, true_count: float) -> IndexPlay | None:
    """Return the index play for a hard total if the count has reached it."""
    for play in COUNT_INDEX_PLAYS:
        if (
            play.player_total == player_total
            and play.dealer_upcard == dealer_upcard
            and play.applies(true_count)
        ):
            return play
    return None


def apply_index_play(advice: Recommendation, true_count: float) -> Recommendation:
    """
    Adjust basic strategy advice for the true count.

    Only hard hands are affected. A recommended surrender is kept, since it
    already gives up less than standing on these totals.
    """
    if advice.action in (None, Action.SURRENDER) or advice.hand_type != "hard":
        return advice

    play = find_index_play(advice.player_total, advice.dealer_upcard, true_count)
    if play is None:
        return advice
    return replace(
        advice,
        action=play.action,
        explanation=f"{play.description}.",
        deviation=play.description,
    )
