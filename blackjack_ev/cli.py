"""Command-line driver: print the hit and stand EVs for one scenario.

Run:
    blackjack-ev --up 10 --hand 9 8 --decks 6
    blackjack-ev --up T --hand K 6 --infinite
    python -m blackjack_ev.cli --up A --hand 9 7 --decks 1 --no-peek
"""

from __future__ import annotations

import argparse
import sys
import time

from blackjack_ev.engine.cards import InvalidInputError, parse_rank, rank_to_str
from blackjack_ev.engine.rules import FINITE_RULES, INFINITE_RULES, Rules
from blackjack_ev.solvers.expected_value import Blackjack, BlackjackInfinite

DEFAULT_DECKS: int = 6


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="blackjack-ev",
        description="Exact EV of standing vs hitting to 17 against a dealer up-card.",
    )
    ap.add_argument("--up", required=True, help="Dealer up-card rank (A, 2-9, T/J/Q/K)")
    ap.add_argument("--hand", nargs=2, required=True, metavar="RANK", help="Player's two starting cards")
    deck = ap.add_mutually_exclusive_group()
    deck.add_argument("--decks", type=int, default=DEFAULT_DECKS, help="Number of decks in the shoe")
    deck.add_argument("--infinite", action="store_true", help="Use the infinite-deck model")
    peek = ap.add_mutually_exclusive_group()
    peek.add_argument("--peek", dest="peek", action="store_true", default=None,
                      help="Dealer checks for a natural behind A/T (finite default)")
    peek.add_argument("--no-peek", dest="peek", action="store_false",
                      help="Dealer does not check for a natural (infinite default)")
    ap.add_argument("--hard-dealer-aces", action="store_true",
                    help="Dealer counts every Ace as 1")
    ap.add_argument("--timing", action="store_true", help="Print elapsed time")
    return ap


def _rules_from_args(args: argparse.Namespace) -> Rules:
    base = INFINITE_RULES if args.infinite else FINITE_RULES
    peek = base.dealer_peeks if args.peek is None else args.peek
    return Rules(dealer_peeks=peek, dealer_soft_aces=not args.hard_dealer_aces)


def build_game(args: argparse.Namespace) -> Blackjack | BlackjackInfinite:
    """Construct the game for the parsed scenario."""
    up = parse_rank(args.up)
    card1, card2 = (parse_rank(s) for s in args.hand)
    rules = _rules_from_args(args)
    if args.infinite:
        return BlackjackInfinite(up, card1, card2, rules=rules)
    return Blackjack(up, card1, card2, args.decks, rules=rules)


def format_report(game: Blackjack | BlackjackInfinite, hit_ev: float, stand_ev: float) -> str:
    card1, card2 = game.hand.ranks
    return "\n".join(
        [
            f"Up Card:\t{rank_to_str(game.up)}",
            f"Hand:\t\t{rank_to_str(card1)}, {rank_to_str(card2)}",
            f"Hit:\t\t{hit_ev:+.6f}",
            f"Stand:\t\t{stand_ev:+.6f}",
        ]
    )


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        game = build_game(args)
    except InvalidInputError as exc:
        ap.error(str(exc))

    t0 = time.time()
    hit_ev, stand_ev = game.expected_values()
    elapsed = time.time() - t0

    print(format_report(game, hit_ev, stand_ev))
    if args.timing:
        print(f"Solved in {elapsed:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
