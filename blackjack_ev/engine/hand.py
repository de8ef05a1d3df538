"""
Hand evaluation: player hard totals and dealer soft-ace transitions.

Ace valuation is asymmetric in this model:
    Player: Ace always counts 1 (hard total only).
    Dealer: Ace counts 11 while that does not bust (soft), else 1.

A dealer state is the pair (total, soft), where total already counts a soft
Ace as 11. Transitions are pure functions returning a fresh pair, so a
recursive caller never has to undo a soft flag.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

from .cards import ACE, InvalidInputError, validate_rank

BUST_LIMIT: int = 21
SOFT_BONUS: int = 10
"""Extra value of an Ace counted as 11 rather than 1."""


class Hand:
    """A player's hand as an ordered sequence of ranks.

    Examples:
        >>> h = Hand([9, 8])
        >>> h.total
        17
        >>> with h.holding(3):
        ...     h.total
        20
        >>> h.ranks
        (9, 8)
    """

    def __init__(self, ranks: list[int] | tuple[int, ...]) -> None:
        if len(ranks) < 2:
            raise InvalidInputError(f"A hand needs at least two cards, got {len(ranks)}.")
        self._ranks = [validate_rank(r) for r in ranks]

    @property
    def ranks(self) -> tuple[int, ...]:
        return tuple(self._ranks)

    @property
    def total(self) -> int:
        """Hard total: every Ace counts 1."""
        return sum(self._ranks)

    def is_bust(self) -> bool:
        return is_bust(self.total)

    def hit(self, rank: int) -> None:
        self._ranks.append(validate_rank(rank))

    def unhit(self) -> int:
        """Remove and return the most recent card; the two starting cards stay."""
        if len(self._ranks) <= 2:
            raise ValueError("Cannot remove one of the two starting cards.")
        return self._ranks.pop()

    @contextlib.contextmanager
    def holding(self, rank: int) -> Iterator[Hand]:
        """Add ``rank`` for the duration of the block, then take it back off."""
        self.hit(rank)
        try:
            yield self
        finally:
            self.unhit()

    def __len__(self) -> int:
        return len(self._ranks)

    def __repr__(self) -> str:
        return f"Hand({self._ranks})"


def is_bust(total: int) -> bool:
    """Return True if a total exceeds 21 (bust).

    Examples:
        >>> is_bust(21)
        False
        >>> is_bust(22)
        True
    """
    return total > BUST_LIMIT


def dealer_start(up: int, soft_aces: bool = True) -> tuple[int, bool]:
    """Return the dealer state holding only the up-card.

    Examples:
        >>> dealer_start(1)
        (11, True)
        >>> dealer_start(1, soft_aces=False)
        (1, False)
        >>> dealer_start(10)
        (10, False)
    """
    if up == ACE and soft_aces:
        return up + SOFT_BONUS, True
    return up, False


def dealer_draw(total: int, soft: bool, rank: int, soft_aces: bool = True) -> tuple[int, bool]:
    """Apply one drawn rank to a dealer state.

    An Ace drawn into a hard total of 10 or less counts as 11. If a soft
    total would pass 21 the soft Ace is demoted back to 1.

    Args:
        total:      Current dealer total (a soft Ace counted as 11).
        soft:       True if ``total`` includes an Ace counted as 11.
        rank:       Rank of the drawn card (1–10).
        soft_aces:  If False, Aces always count 1.

    Returns:
        The new ``(total, soft)`` pair. Totals above 21 are busts.

    Examples:
        >>> dealer_draw(6, False, 1)     # 6 + A = soft 17
        (17, True)
        >>> dealer_draw(16, True, 10)    # soft 16 + T = hard 16
        (16, False)
        >>> dealer_draw(12, False, 1)    # hard 12 + A = hard 13
        (13, False)
        >>> dealer_draw(16, False, 10)   # hard 16 + T busts
        (26, False)
    """
    new_total = total + rank
    new_soft = soft
    if soft_aces and rank == ACE and not soft and total + ACE + SOFT_BONUS <= BUST_LIMIT:
        new_total += SOFT_BONUS
        new_soft = True
    if new_soft and new_total > BUST_LIMIT:
        new_total -= SOFT_BONUS
        new_soft = False
    return new_total, new_soft
