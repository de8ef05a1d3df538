"""
Exact expected values of standing and of hitting to a hard 17.

Two player decisions are evaluated against a known dealer up-card:
    stand: keep the two starting cards.
    hit:   draw while the hard total is below 17, then stand.

``Blackjack`` draws from a finite shoe with exact card removal;
``BlackjackInfinite`` draws i.i.d. from an infinite deck. Both share the
aggregation below and differ only in where card probabilities and dealer
distributions come from.

EV is in units of the original bet. A player bust loses even if the dealer
later busts; equal totals push.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

from blackjack_ev.engine.cards import RANKS, validate_num_decks, validate_rank
from blackjack_ev.engine.hand import Hand, dealer_start, is_bust
from blackjack_ev.engine.rules import (
    FINITE_RULES,
    INFINITE_RULES,
    PLAYER_STAND_TOTAL,
    Rules,
    settle_ev,
)
from blackjack_ev.engine.shoe import Shoe
from blackjack_ev.solvers.dealer_distribution import (
    DealerOutcome,
    finite_dealer_distribution,
    infinite_dealer_distribution,
)
from blackjack_ev.solvers.draw_probability import draw_probability, infinite_draw_probability


def ev_vs_dealer(player_total: int, dealer_outcome: DealerOutcome) -> float:
    """Compute the EV of standing on ``player_total`` against a dealer distribution.

    EV = P(dealer bust) + P(dealer stands below player) − P(dealer stands above player).

    Examples:
        >>> outcome = DealerOutcome.from_distribution({17: 0.25, 20: 0.5, 22: 0.25})
        >>> ev_vs_dealer(18, outcome)
        0.0
        >>> ev_vs_dealer(23, outcome)
        -1.0
    """
    if is_bust(player_total):
        return -1.0

    ev = dealer_outcome.bust_prob
    for dealer_total, prob in dealer_outcome.final_dist.items():
        ev += prob * settle_ev(player_total, dealer_total)
    return ev


class _ExpectedValueGame:
    """Shared stand / hit-to-17 aggregation over a dealer distribution.

    Subclasses supply the dealer distribution, the draw probabilities of the
    player's next card, and how a drawn card is held out while its branch is
    explored.
    """

    def __init__(self, up: int, card1: int, card2: int, rules: Rules) -> None:
        self.up = validate_rank(up)
        self.hand = Hand([card1, card2])
        self.rules = rules
        self._stand_memo: dict = {}
        self._hit_memo: dict = {}

    # ─── Hooks ────────────────────────────────────────────────────────────

    def _dealer_distribution(self, total: int, soft: bool, hole: bool) -> dict[int, float]:
        raise NotImplementedError

    def _draws(self) -> Iterator[tuple[int, float]]:
        """Yield ``(rank, probability)`` for every rank the player can draw next."""
        raise NotImplementedError

    def _holding(self, rank: int) -> contextlib.AbstractContextManager:
        return self.hand.holding(rank)

    def _state_key(self) -> object:
        """Key identifying the player/deck state for EV memoisation."""
        raise NotImplementedError

    # ─── Dealer ───────────────────────────────────────────────────────────

    def dealer_start(self) -> tuple[int, bool]:
        """Return the dealer ``(total, soft)`` state holding only the up-card."""
        return dealer_start(self.up, self.rules.dealer_soft_aces)

    def dealer_distribution(
        self,
        dealer_value: int | None = None,
        soft: bool | None = None,
    ) -> dict[int, float]:
        """Return the dealer's final-total distribution from a given state.

        Defaults to the up-card alone. The up-card's face value, or a state
        equal to the bare up-card, is treated as the up-card alone, so the next
        draw is the hole card.

        Args:
            dealer_value: Current dealer total (a soft Ace counted as 11).
            soft:         True if ``dealer_value`` includes a soft Ace.

        Returns:
            Dict mapping final total (17–26) to probability.
        """
        start = self.dealer_start()
        if dealer_value is None:
            dealer_value, soft = start
        elif soft is None:
            if dealer_value in (self.up, start[0]):
                dealer_value, soft = start
            else:
                soft = False
        hole = (dealer_value, soft) == start
        return self._dealer_distribution(dealer_value, soft, hole)

    def probability_dealer(
        self,
        target_points: int,
        dealer_value: int | None = None,
        soft: bool | None = None,
    ) -> float:
        """Return P(dealer final total == ``target_points``) from a dealer state.

        Targets outside 17–26 are unreachable and return 0.0.
        """
        return self.dealer_distribution(dealer_value, soft).get(target_points, 0.0)

    def dealer_outcome(self) -> DealerOutcome:
        """Return the dealer distribution from the up-card, split into stand/bust."""
        return DealerOutcome.from_distribution(self.dealer_distribution())

    # ─── Player ───────────────────────────────────────────────────────────

    def expected_value_stand(self) -> float:
        """Return the EV of standing on the current hand."""
        total = self.hand.total
        if is_bust(total):
            return -1.0

        key = self._state_key()
        if key not in self._stand_memo:
            self._stand_memo[key] = ev_vs_dealer(total, self.dealer_outcome())
        return self._stand_memo[key]

    def expected_value_hit(self) -> float:
        """Return the EV of drawing a card, then hitting again below 17.

        Each branch is weighted by the probability of its rank before that
        card leaves the deck, and the hand (and shoe) are restored afterwards.
        """
        key = self._state_key()
        if key in self._hit_memo:
            return self._hit_memo[key]

        ev = 0.0
        for rank, prob in self._draws():
            with self._holding(rank):
                if self.hand.total < PLAYER_STAND_TOTAL:
                    ev += prob * self.expected_value_hit()
                else:
                    ev += prob * self.expected_value_stand()

        self._hit_memo[key] = ev
        return ev

    def expected_values(self) -> tuple[float, float]:
        """Return ``(hit_ev, stand_ev)`` for the starting hand."""
        return self.expected_value_hit(), self.expected_value_stand()


# ─── Finite shoe ──────────────────────────────────────────────────────────────


class Blackjack(_ExpectedValueGame):
    """Stand and hit-to-17 EVs against a finite shoe of ``num_decks`` decks.

    The up-card and both player cards are removed from the shoe at
    construction. Evaluation mutates the shoe and hand in place but restores
    both before returning, so an instance must not be shared across threads.

    Examples:
        >>> game = Blackjack(10, 10, 10, 1)
        >>> game.expected_value_stand() > 0
        True
    """

    def __init__(
        self,
        up: int,
        card1: int,
        card2: int,
        num_decks: int,
        rules: Rules = FINITE_RULES,
    ) -> None:
        super().__init__(up, card1, card2, rules)
        self.num_decks = validate_num_decks(num_decks)
        self.shoe = Shoe.after_deal(num_decks, up, card1, card2)

    def _dealer_distribution(self, total: int, soft: bool, hole: bool) -> dict[int, float]:
        return finite_dealer_distribution(self.shoe, self.up, total, soft, hole, self.rules)

    def _draws(self) -> Iterator[tuple[int, float]]:
        for rank in RANKS:
            if self.shoe.count(rank) == 0:
                continue
            yield rank, draw_probability(self.shoe, self.up, rank, self.rules.dealer_peeks)

    @contextlib.contextmanager
    def _holding(self, rank: int) -> Iterator[None]:
        with self.shoe.drawn(rank), self.hand.holding(rank):
            yield

    def _state_key(self) -> object:
        # Up-card fixed per instance; the hand can be changed without the shoe.
        return self.shoe.key(), self.hand.total

    def __repr__(self) -> str:
        return f"Blackjack(up={self.up}, hand={list(self.hand.ranks)}, num_decks={self.num_decks})"


# ─── Infinite deck ────────────────────────────────────────────────────────────


class BlackjackInfinite(_ExpectedValueGame):
    """Stand and hit-to-17 EVs against an infinite deck.

    Examples:
        >>> game = BlackjackInfinite(6, 10, 10)
        >>> game.expected_value_stand() > 0
        True
    """

    def __init__(self, up: int, card1: int, card2: int, rules: Rules = INFINITE_RULES) -> None:
        super().__init__(up, card1, card2, rules)

    def _dealer_distribution(self, total: int, soft: bool, hole: bool) -> dict[int, float]:
        return infinite_dealer_distribution(self.up, total, soft, hole, self.rules)

    def _draws(self) -> Iterator[tuple[int, float]]:
        for rank in RANKS:
            yield rank, infinite_draw_probability(rank)

    def _state_key(self) -> object:
        return self.hand.total

    def __repr__(self) -> str:
        return f"BlackjackInfinite(up={self.up}, hand={list(self.hand.ranks)})"
