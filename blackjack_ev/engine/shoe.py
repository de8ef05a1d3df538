"""
Finite shoe of one or more 52-card decks, tracked as counts by rank.

The shoe is a numpy int32 array of length 10:
    counts[rank - 1] = number of cards of that rank still in the shoe

Ranks 1–9 start at 4 per deck; rank 10 (ten-valued) starts at 16 per deck.
Every removal made while exploring a hypothetical draw is paired with an
addition on the way back out, so a shoe returns to its baseline whenever a
recursive evaluation returns.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

import numpy as np

from .cards import RANKS, SUITS_PER_DECK, TEN, TEN_VALUE_FACES, validate_num_decks, validate_rank


class InvalidDeckStateError(ValueError):
    """The shoe was driven outside its valid state.

    Raised when removing a rank that has no cards left, or adding a rank
    beyond its cap. Either case means a remove/add pairing is broken.
    """


def rank_caps(num_decks: int) -> np.ndarray:
    """Return the full-shoe count of every rank for ``num_decks`` decks.

    Examples:
        >>> rank_caps(1).tolist()
        [4, 4, 4, 4, 4, 4, 4, 4, 4, 16]
    """
    caps = np.full(len(RANKS), SUITS_PER_DECK * num_decks, dtype=np.int32)
    caps[TEN - 1] = SUITS_PER_DECK * TEN_VALUE_FACES * num_decks
    return caps


class Shoe:
    """Remaining cards of a finite shoe, by rank.

    Examples:
        >>> shoe = Shoe(1)
        >>> shoe.size()
        52
        >>> shoe.remove(10)
        >>> shoe.count(10), shoe.size()
        (15, 51)
    """

    def __init__(self, num_decks: int = 1) -> None:
        self.num_decks = validate_num_decks(num_decks)
        self._caps = rank_caps(num_decks)
        self._counts = self._caps.copy()

    @classmethod
    def after_deal(cls, num_decks: int, *ranks: int) -> Shoe:
        """Create a full shoe with the given ranks already dealt out of it.

        Examples:
            >>> shoe = Shoe.after_deal(6, 10, 9, 8)
            >>> shoe.size()
            309
        """
        shoe = cls(num_decks)
        for rank in ranks:
            shoe.remove(rank)
        return shoe

    def count(self, rank: int) -> int:
        """Return how many cards of ``rank`` remain."""
        return int(self._counts[rank - 1])

    def cap(self, rank: int) -> int:
        """Return how many cards of ``rank`` a full shoe holds."""
        return int(self._caps[rank - 1])

    def size(self) -> int:
        """Return the number of cards remaining in the shoe."""
        return int(self._counts.sum())

    def counts(self) -> dict[int, int]:
        """Return a copy of the remaining counts keyed by rank."""
        return {rank: int(n) for rank, n in zip(RANKS, self._counts)}

    def key(self) -> bytes:
        """Return a hashable snapshot of the current composition."""
        return self._counts.tobytes()

    def remove(self, rank: int) -> None:
        """Take one card of ``rank`` out of the shoe.

        Raises:
            InvalidDeckStateError: If no card of that rank remains.
        """
        validate_rank(rank)
        if self._counts[rank - 1] <= 0:
            raise InvalidDeckStateError(f"Cannot remove {rank} from the shoe: none left.")
        self._counts[rank - 1] -= 1

    def add(self, rank: int) -> None:
        """Put one card of ``rank`` back into the shoe.

        Raises:
            InvalidDeckStateError: If the shoe already holds every card of that rank.
        """
        validate_rank(rank)
        if self._counts[rank - 1] >= self._caps[rank - 1]:
            raise InvalidDeckStateError(
                f"Cannot add {rank} to the shoe: already at {self.cap(rank)}."
            )
        self._counts[rank - 1] += 1

    @contextlib.contextmanager
    def drawn(self, rank: int) -> Iterator[Shoe]:
        """Hold one card of ``rank`` out of the shoe for the duration of the block.

        The card goes back on every exit path, including exceptions.

        Examples:
            >>> shoe = Shoe(1)
            >>> with shoe.drawn(1):
            ...     shoe.count(1)
            3
            >>> shoe.count(1)
            4
        """
        self.remove(rank)
        try:
            yield self
        finally:
            self.add(rank)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"Shoe(num_decks={self.num_decks}, counts={self.counts()})"
