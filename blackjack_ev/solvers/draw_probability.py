"""
Probability of the next card's rank, for the finite shoe and the infinite deck.

Behind an Ace or ten-valued up-card a peeking dealer has already confirmed
there is no natural, so the unseen hole card is known not to be the
complement (the rank that would have made 21). Two draws are affected:

    Hole card:    P(r) = c(r) / (N - c(comp))   for r != comp, 0 for comp
    Player card:  P(comp) = c(comp) / (N - 1)
                  P(r)    = c(r) / (N - 1) * (N - c(comp) - 1) / (N - c(comp))

where N is the shoe size and c(r) the remaining count of rank r. The player
formula marginalises over the unseen hole card. Once the hole card is turned
over, later dealer draws are plain c(r) / N.
"""

from __future__ import annotations

from blackjack_ev.engine.cards import RANKS, TEN, can_have_natural, complement
from blackjack_ev.engine.shoe import Shoe

RANK_PROBABILITIES: dict[int, float] = {rank: (4.0 if rank == TEN else 1.0) / 13 for rank in RANKS}
"""Infinite-deck draw probability of each rank: 1/13, or 4/13 for ten-valued cards."""


def _peeked(up: int, peek: bool) -> bool:
    return peek and can_have_natural(up)


def plain_draw_probability(shoe: Shoe, rank: int) -> float:
    """Return c(rank) / N for the current shoe.

    Examples:
        >>> plain_draw_probability(Shoe(1), 10) == 16 / 52
        True
    """
    return shoe.count(rank) / shoe.size()


def draw_probability(shoe: Shoe, up: int, rank: int, peek: bool = True) -> float:
    """Return the probability that the player's next card is ``rank``.

    Args:
        shoe:  Shoe with the up-card and every player card already removed.
        up:    Dealer up-card rank.
        rank:  Rank being drawn.
        peek:  If True, condition on the dealer not holding a natural.

    Examples:
        >>> shoe = Shoe.after_deal(1, 5, 10, 6)
        >>> draw_probability(shoe, 5, 10) == 15 / 49
        True
        >>> shoe = Shoe.after_deal(1, 10, 10, 6)
        >>> draw_probability(shoe, 10, 1) == 4 / 48
        True
    """
    if not _peeked(up, peek):
        return plain_draw_probability(shoe, rank)

    comp = complement(up)
    count = shoe.count(rank)
    size = shoe.size()

    if rank == comp:
        return count / (size - 1)

    count_comp = shoe.count(comp)
    return (count / (size - 1)) * ((size - count_comp - 1) / (size - count_comp))


def hole_card_probability(shoe: Shoe, up: int, rank: int, peek: bool = True) -> float:
    """Return the probability that the dealer's hole card is ``rank``.

    Examples:
        >>> shoe = Shoe.after_deal(1, 10, 9, 8)
        >>> hole_card_probability(shoe, 10, 1)
        0.0
        >>> hole_card_probability(shoe, 10, 9) == 3 / 45
        True
    """
    if not _peeked(up, peek):
        return plain_draw_probability(shoe, rank)

    comp = complement(up)
    if rank == comp:
        return 0.0
    return shoe.count(rank) / (shoe.size() - shoe.count(comp))


def infinite_draw_probability(rank: int) -> float:
    """Return the infinite-deck probability of drawing ``rank``.

    Examples:
        >>> infinite_draw_probability(1) == 1 / 13
        True
        >>> infinite_draw_probability(10) == 4 / 13
        True
    """
    return RANK_PROBABILITIES[rank]


def infinite_hole_card_probability(up: int, rank: int, peek: bool = False) -> float:
    """Return the infinite-deck probability that the dealer's hole card is ``rank``.

    Examples:
        >>> infinite_hole_card_probability(10, 1, peek=True)
        0.0
        >>> abs(infinite_hole_card_probability(10, 2, peek=True) - 1 / 12) < 1e-12
        True
    """
    if not _peeked(up, peek):
        return RANK_PROBABILITIES[rank]

    comp = complement(up)
    if rank == comp:
        return 0.0
    return RANK_PROBABILITIES[rank] / (1.0 - RANK_PROBABILITIES[comp])
