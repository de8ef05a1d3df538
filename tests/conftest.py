"""
Shared pytest fixtures and brute-force reference calculators.

The brute-force helpers enumerate every card sequence directly, evaluate
whole hands from scratch (an Ace is 11 if that does not bust), and handle a
dealer natural by rejection: natural sequences are dropped and the rest
renormalised. They share no code with the solvers under test.
"""

from __future__ import annotations

import pytest

from blackjack_ev.engine.shoe import Shoe

INFINITE_PROBS: dict[int, float] = {rank: (4 if rank == 10 else 1) / 13 for rank in range(1, 11)}


def shoe_counts(num_decks: int | None, *seen: int) -> dict[int, int] | None:
    """Return rank counts of a shoe with ``seen`` removed, or None for an infinite deck."""
    if num_decks is None:
        return None
    counts = {rank: 4 * num_decks for rank in range(1, 10)}
    counts[10] = 16 * num_decks
    for rank in seen:
        counts[rank] -= 1
    return counts


def _draws(counts: dict[int, int] | None) -> list[tuple[int, float]]:
    if counts is None:
        return list(INFINITE_PROBS.items())
    n = sum(counts.values())
    return [(rank, c / n) for rank, c in counts.items() if c > 0]


def _take(counts: dict[int, int] | None, rank: int, delta: int) -> None:
    if counts is not None:
        counts[rank] += delta


def whole_hand_dealer_total(cards: tuple[int, ...], soft_aces: bool = True) -> int:
    """Best dealer total of a complete hand, computed from scratch."""
    total = sum(cards)
    if soft_aces and 1 in cards and total + 10 <= 21:
        total += 10
    return total


def _is_natural(up: int, hole: int) -> bool:
    return {up, hole} == {1, 10}


def _enumerate_dealer(
    cards: tuple[int, ...],
    counts: dict[int, int] | None,
    prob: float,
    out: dict[int, float],
    soft_aces: bool,
) -> None:
    total = whole_hand_dealer_total(cards, soft_aces)
    if total >= 17:
        out[total] = out.get(total, 0.0) + prob
        return
    for rank, p in _draws(counts):
        _take(counts, rank, -1)
        _enumerate_dealer(cards + (rank,), counts, prob * p, out, soft_aces)
        _take(counts, rank, +1)


def brute_force_dealer_distribution(
    up: int,
    *seen: int,
    num_decks: int | None = None,
    peek: bool = True,
    soft_aces: bool = True,
) -> dict[int, float]:
    """Dealer final-total distribution by full enumeration.

    Args:
        up:         Dealer up-card.
        *seen:      Other cards already out of the shoe (the player's cards).
        num_decks:  Deck count, or None for an infinite deck.
        peek:       If True, reject dealer naturals and renormalise.
        soft_aces:  If False, dealer Aces always count 1.
    """
    counts = shoe_counts(num_decks, up, *seen)
    out: dict[int, float] = {}
    rejected = 0.0
    for hole, p in _draws(counts):
        if peek and _is_natural(up, hole):
            rejected += p
            continue
        _take(counts, hole, -1)
        _enumerate_dealer((up, hole), counts, p, out, soft_aces)
        _take(counts, hole, +1)
    return {total: p / (1.0 - rejected) for total, p in out.items()}


def _settle(player_total: int, dealer_total: int) -> float:
    if player_total > 21:
        return -1.0
    if dealer_total > 21 or player_total > dealer_total:
        return 1.0
    if dealer_total > player_total:
        return -1.0
    return 0.0


def brute_force_stand_ev(
    up: int,
    card1: int,
    card2: int,
    num_decks: int | None = None,
    peek: bool = True,
    soft_aces: bool = True,
) -> float:
    """EV of standing, settled against the brute-force dealer distribution."""
    if card1 + card2 > 21:
        return -1.0
    dist = brute_force_dealer_distribution(
        up, card1, card2, num_decks=num_decks, peek=peek, soft_aces=soft_aces
    )
    return sum(p * _settle(card1 + card2, total) for total, p in dist.items())


def _player_hits(
    player_total: int,
    up: int,
    hole: int,
    counts: dict[int, int] | None,
    soft_aces: bool,
) -> float:
    ev = 0.0
    for rank, p in _draws(counts):
        new_total = player_total + rank
        _take(counts, rank, -1)
        if new_total < 17:
            ev += p * _player_hits(new_total, up, hole, counts, soft_aces)
        elif new_total > 21:
            ev -= p
        else:
            dist: dict[int, float] = {}
            _enumerate_dealer((up, hole), counts, 1.0, dist, soft_aces)
            ev += p * sum(q * _settle(new_total, total) for total, q in dist.items())
        _take(counts, rank, +1)
    return ev


def brute_force_hit_ev(
    up: int,
    card1: int,
    card2: int,
    num_decks: int | None = None,
    peek: bool = True,
    soft_aces: bool = True,
) -> float:
    """EV of hitting to a hard 17 by joint enumeration.

    The hole card is dealt first (before the player draws), so the player's
    cards come from a shoe that is already missing it.
    """
    counts = shoe_counts(num_decks, up, card1, card2)
    ev = 0.0
    rejected = 0.0
    for hole, p in _draws(counts):
        if peek and _is_natural(up, hole):
            rejected += p
            continue
        _take(counts, hole, -1)
        ev += p * _player_hits(card1 + card2, up, hole, counts, soft_aces)
        _take(counts, hole, +1)
    return ev / (1.0 - rejected)


@pytest.fixture
def single_deck_shoe() -> Shoe:
    """Return a full single-deck shoe."""
    return Shoe(1)


@pytest.fixture
def six_deck_shoe() -> Shoe:
    """Return a full six-deck shoe."""
    return Shoe(6)
