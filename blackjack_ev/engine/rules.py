"""
Table rules, stand thresholds, and settlement.

Fixed rules shared by both deck models:
    Dealer stands on every total of 17 or more (soft 17 included).
    Player strategy under evaluation: stand, or hit until a hard 17.
    Bust totals land in 22–26: a hard total of at most 16 plus one card.

Payout convention (from player's perspective):
    +1  = player wins one unit
    -1  = player loses one unit
     0  = push (bet returned)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .hand import BUST_LIMIT, is_bust

DEALER_STAND_TOTAL: int = 17
"""Dealer draws below this total and stands at or above it."""

PLAYER_STAND_TOTAL: int = 17
"""The hitting strategy keeps drawing while the player's hard total is below this."""

STAND_TOTALS: range = range(DEALER_STAND_TOTAL, BUST_LIMIT + 1)
"""Non-bust dealer final totals: 17–21."""

BUST_TOTALS: range = range(BUST_LIMIT + 1, DEALER_STAND_TOTAL - 1 + 10 + 1)
"""Dealer bust totals: 22–26."""

DEALER_TOTALS: tuple[int, ...] = (*STAND_TOTALS, *BUST_TOTALS)


@dataclass(frozen=True)
class Rules:
    """Configurable table rules.

    Attributes:
        dealer_peeks:      If True, the dealer checks for a natural behind an
                           Ace or ten-valued up-card and play only continues
                           when there is none. Every probability is then
                           conditioned on the hole card not completing a natural.
        dealer_soft_aces:  If True, the dealer counts an Ace as 11 while that
                           does not bust. If False, dealer Aces always count 1.
    """

    dealer_peeks: bool = True
    dealer_soft_aces: bool = True


FINITE_RULES: Rules = Rules()
"""Default rules for the finite shoe: peek for naturals, soft dealer Aces."""

INFINITE_RULES: Rules = Rules(dealer_peeks=False)
"""Default rules for the infinite deck: no natural peek, soft dealer Aces."""


class Outcome(Enum):
    WIN = auto()
    LOSS = auto()
    PUSH = auto()


PAYOUTS: dict[Outcome, float] = {
    Outcome.WIN: 1.0,
    Outcome.LOSS: -1.0,
    Outcome.PUSH: 0.0,
}


def settle(player_total: int, dealer_total: int) -> Outcome:
    """Settle a standing player total against a dealer final total.

    Settlement rules applied in order:
        1. Player bust  → LOSS (even if the dealer also busts)
        2. Dealer bust  → WIN
        3. Higher total wins; equal totals push

    Examples:
        >>> settle(22, 25)
        <Outcome.LOSS: 2>
        >>> settle(16, 23)
        <Outcome.WIN: 1>
        >>> settle(17, 17)
        <Outcome.PUSH: 3>
        >>> settle(16, 17)
        <Outcome.LOSS: 2>
    """
    if is_bust(player_total):
        return Outcome.LOSS
    if is_bust(dealer_total):
        return Outcome.WIN
    if player_total > dealer_total:
        return Outcome.WIN
    if dealer_total > player_total:
        return Outcome.LOSS
    return Outcome.PUSH


def settle_ev(player_total: int, dealer_total: int) -> float:
    """Return the payout of :func:`settle` in units of the bet.

    Examples:
        >>> settle_ev(20, 18)
        1.0
        >>> settle_ev(18, 20)
        -1.0
    """
    return PAYOUTS[settle(player_total, dealer_total)]
