"""Tests for blackjack_ev/engine/rules.py — thresholds, rule configuration, settlement."""

from __future__ import annotations

import dataclasses

import pytest

from blackjack_ev.engine.rules import (
    BUST_TOTALS,
    DEALER_STAND_TOTAL,
    DEALER_TOTALS,
    FINITE_RULES,
    INFINITE_RULES,
    PLAYER_STAND_TOTAL,
    STAND_TOTALS,
    Outcome,
    Rules,
    settle,
    settle_ev,
)


class TestConstants:
    def test_stand_thresholds(self):
        assert DEALER_STAND_TOTAL == 17
        assert PLAYER_STAND_TOTAL == 17

    def test_stand_totals(self):
        assert list(STAND_TOTALS) == [17, 18, 19, 20, 21]

    def test_bust_totals(self):
        assert list(BUST_TOTALS) == [22, 23, 24, 25, 26]

    def test_dealer_totals_cover_both(self):
        assert DEALER_TOTALS == tuple(range(17, 27))


class TestRules:
    def test_defaults(self):
        rules = Rules()
        assert rules.dealer_peeks is True
        assert rules.dealer_soft_aces is True

    def test_finite_default_peeks(self):
        assert FINITE_RULES.dealer_peeks

    def test_infinite_default_does_not_peek(self):
        assert not INFINITE_RULES.dealer_peeks
        assert INFINITE_RULES.dealer_soft_aces

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            FINITE_RULES.dealer_peeks = False

    def test_hashable(self):
        assert hash(Rules()) == hash(Rules())


class TestSettle:
    def test_player_bust_loses_even_on_dealer_bust(self):
        assert settle(22, 26) == Outcome.LOSS

    def test_dealer_bust_wins(self):
        assert settle(12, 22) == Outcome.WIN

    def test_higher_total_wins(self):
        assert settle(20, 19) == Outcome.WIN

    def test_lower_total_loses(self):
        assert settle(18, 19) == Outcome.LOSS

    def test_tie_pushes(self):
        assert settle(19, 19) == Outcome.PUSH

    def test_low_stand_loses_to_any_dealer_stand(self):
        for dealer_total in STAND_TOTALS:
            assert settle(16, dealer_total) == Outcome.LOSS


class TestSettleEv:
    def test_payouts(self):
        assert settle_ev(20, 18) == 1.0
        assert settle_ev(18, 20) == -1.0
        assert settle_ev(18, 18) == 0.0
        assert settle_ev(25, 18) == -1.0
