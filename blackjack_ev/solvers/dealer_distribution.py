"""
Exact dealer final-total distributions for the finite shoe and the infinite deck.

Fixed dealer strategy: draw below 17, stand on 17+ (soft 17 included).
Dealer state is (total, soft) with a soft Ace counted as 11; see
``engine.hand.dealer_draw`` for the transition.

Outcome keys are final totals: 17–21 for standing hands and 22–26 for busts
(a hard total of at most 16 plus one card). Probabilities sum to 1.0.

The first draw from the bare up-card is the hole card. Behind an Ace or
ten-valued up-card a peeking dealer has already ruled out a natural, so the
hole card is drawn from the complement-free shoe; every later draw is a
plain draw from whatever the shoe then holds.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from blackjack_ev.engine.cards import RANKS
from blackjack_ev.engine.hand import dealer_draw, is_bust
from blackjack_ev.engine.rules import DEALER_STAND_TOTAL, FINITE_RULES, INFINITE_RULES, Rules
from blackjack_ev.engine.shoe import Shoe
from blackjack_ev.solvers.draw_probability import (
    RANK_PROBABILITIES,
    hole_card_probability,
    infinite_hole_card_probability,
    plain_draw_probability,
)

# ─── DealerOutcome ────────────────────────────────────────────────────────────


@dataclass
class DealerOutcome:
    """Dealer final-total distribution split into standing totals and bust.

    Attributes:
        final_dist:  {total: prob} for standing totals 17–21.
        bust_prob:   Probability the dealer busts.
        bust_dist:   {total: prob} for bust totals 22–26.
    """

    final_dist: dict[int, float]
    bust_prob: float
    bust_dist: dict[int, float]

    @classmethod
    def from_distribution(cls, dist: dict[int, float]) -> DealerOutcome:
        final_dist = {t: p for t, p in sorted(dist.items()) if not is_bust(t)}
        bust_dist = {t: p for t, p in sorted(dist.items()) if is_bust(t)}
        return cls(final_dist=final_dist, bust_prob=sum(bust_dist.values()), bust_dist=bust_dist)

    def probability(self, total: int) -> float:
        """Return P(dealer final total == ``total``)."""
        if is_bust(total):
            return self.bust_dist.get(total, 0.0)
        return self.final_dist.get(total, 0.0)

    @property
    def total_probability(self) -> float:
        return sum(self.final_dist.values()) + self.bust_prob


def _accumulate(result: dict[int, float], sub_dist: dict[int, float], weight: float) -> None:
    for outcome, prob in sub_dist.items():
        result[outcome] = result.get(outcome, 0.0) + weight * prob


# ─── Finite shoe ──────────────────────────────────────────────────────────────


def _finite_recursive(
    shoe: Shoe,
    up: int,
    total: int,
    soft: bool,
    hole: bool,
    rules: Rules,
    memo: dict,
) -> dict[int, float]:
    """Recursively compute the dealer's final-total distribution from a shoe.

    Every rank explored is held out of ``shoe`` only while its subtree is
    evaluated, so the shoe is back at its entry composition on return.

    Args:
        shoe:   Cards still available to the dealer (mutated and restored).
        up:     Dealer up-card rank.
        total:  Current dealer total.
        soft:   True if ``total`` counts an Ace as 11.
        hole:   True if the next card drawn is the hole card.
        rules:  Peek and soft-Ace rules.
        memo:   Cache keyed by shoe composition and dealer state.

    Returns:
        Dict mapping final total to probability.
    """
    if total >= DEALER_STAND_TOTAL:
        return {total: 1.0}

    key = (shoe.key(), up, total, soft, hole, rules)
    if key in memo:
        return memo[key]

    result: dict[int, float] = {}
    for rank in RANKS:
        if shoe.count(rank) == 0:
            continue

        if hole:
            prob = hole_card_probability(shoe, up, rank, rules.dealer_peeks)
        else:
            prob = plain_draw_probability(shoe, rank)
        if prob == 0.0:
            continue

        new_total, new_soft = dealer_draw(total, soft, rank, rules.dealer_soft_aces)
        if new_total >= DEALER_STAND_TOTAL:
            result[new_total] = result.get(new_total, 0.0) + prob
            continue

        with shoe.drawn(rank):
            sub_dist = _finite_recursive(shoe, up, new_total, new_soft, False, rules, memo)
        _accumulate(result, sub_dist, prob)

    memo[key] = result
    return result


def finite_dealer_distribution(
    shoe: Shoe,
    up: int,
    total: int,
    soft: bool,
    hole: bool = False,
    rules: Rules = FINITE_RULES,
    memo: dict | None = None,
) -> dict[int, float]:
    """Compute the dealer's final-total distribution against a finite shoe.

    Args:
        shoe:   Shoe with every card already seen removed.
        up:     Dealer up-card rank.
        total:  Dealer total to start from.
        soft:   True if ``total`` counts an Ace as 11.
        hole:   True if the dealer holds only the up-card, so the next card is
                the hole card.
        rules:  Peek and soft-Ace rules.
        memo:   Optional cache to share between calls on the same shoe.

    Returns:
        Dict mapping final total (17–26) to probability.

    Examples:
        >>> shoe = Shoe.after_deal(1, 10, 9, 8)
        >>> dist = finite_dealer_distribution(shoe, 10, 20, False)
        >>> dist
        {20: 1.0}
    """
    if memo is None:
        memo = {}
    return dict(_finite_recursive(shoe, up, total, soft, hole, rules, memo))


# ─── Infinite deck ────────────────────────────────────────────────────────────


@functools.cache
def _infinite_recursive(
    up: int,
    total: int,
    soft: bool,
    hole: bool,
    rules: Rules,
) -> tuple[tuple[int, float], ...]:
    """Infinite-deck counterpart of ``_finite_recursive``.

    Draws are independent of earlier cards, so the result depends only on the
    dealer state and is cached for the process lifetime. Returned as a tuple
    of ``(total, prob)`` pairs so cached values cannot be mutated.
    """
    if total >= DEALER_STAND_TOTAL:
        return ((total, 1.0),)

    result: dict[int, float] = {}
    for rank in RANKS:
        if hole:
            prob = infinite_hole_card_probability(up, rank, rules.dealer_peeks)
        else:
            prob = RANK_PROBABILITIES[rank]
        if prob == 0.0:
            continue

        new_total, new_soft = dealer_draw(total, soft, rank, rules.dealer_soft_aces)
        if new_total >= DEALER_STAND_TOTAL:
            result[new_total] = result.get(new_total, 0.0) + prob
            continue

        sub_dist = dict(_infinite_recursive(up, new_total, new_soft, False, rules))
        _accumulate(result, sub_dist, prob)

    return tuple(sorted(result.items()))


def infinite_dealer_distribution(
    up: int,
    total: int,
    soft: bool,
    hole: bool = False,
    rules: Rules = INFINITE_RULES,
) -> dict[int, float]:
    """Compute the dealer's final-total distribution for an infinite deck.

    Args:
        up:     Dealer up-card rank.
        total:  Dealer total to start from.
        soft:   True if ``total`` counts an Ace as 11.
        hole:   True if the dealer holds only the up-card.
        rules:  Peek and soft-Ace rules.

    Returns:
        Dict mapping final total (17–26) to probability.

    Examples:
        >>> dist = infinite_dealer_distribution(6, 16, False)
        >>> round(dist[26], 6) == round(4 / 13, 6)
        True
    """
    return dict(_infinite_recursive(up, total, soft, hole, rules))
