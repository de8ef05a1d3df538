"""
Rank constants, rank parsing, and input validation.

Rank encoding (integer 1–10):
    1       = Ace (hard value 1; the dealer may count it as 11)
    2 … 9   = pip cards
    10      = any ten-valued card (10, J, Q, K)

Suits never matter for the expected-value calculations, so a card is just its
rank. String representations are used exclusively at I/O boundaries.
"""

from __future__ import annotations

ACE: int = 1
TEN: int = 10

RANKS: tuple[int, ...] = tuple(range(ACE, TEN + 1))
"""All ranks in increasing order: 1 (Ace) … 10 (ten-valued)."""

SUITS_PER_DECK: int = 4
TEN_VALUE_FACES: int = 4  # 10, J, Q, K

RANK_NAMES: dict[int, str] = {ACE: 'A', TEN: 'T', **{r: str(r) for r in range(2, 10)}}

# Text aliases accepted by parse_rank(); face cards collapse onto rank 10.
_RANK_ALIASES: dict[str, int] = {
    'A': ACE,
    'T': TEN,
    'J': TEN,
    'Q': TEN,
    'K': TEN,
    **{str(r): r for r in RANKS},
}


class InvalidInputError(ValueError):
    """A caller-supplied rank or deck count is outside its valid range."""


def validate_rank(rank: int) -> int:
    """Return ``rank`` unchanged if it is a valid rank, else raise.

    Examples:
        >>> validate_rank(1)
        1
        >>> validate_rank(10)
        10
    """
    if isinstance(rank, bool) or not isinstance(rank, int):
        raise InvalidInputError(f"Rank must be an integer, got {rank!r}.")
    if not ACE <= rank <= TEN:
        raise InvalidInputError(f"Rank {rank} is outside [{ACE}, {TEN}].")
    return rank


def validate_num_decks(num_decks: int) -> int:
    """Return ``num_decks`` unchanged if it is a positive integer, else raise.

    Examples:
        >>> validate_num_decks(6)
        6
    """
    if isinstance(num_decks, bool) or not isinstance(num_decks, int):
        raise InvalidInputError(f"Deck count must be an integer, got {num_decks!r}.")
    if num_decks <= 0:
        raise InvalidInputError(f"Deck count must be positive, got {num_decks}.")
    return num_decks


def parse_rank(s: str) -> int:
    """Parse a human-readable rank to its integer encoding.

    Accepts 'A', '2'–'10', 'T', 'J', 'Q', 'K' (case-insensitive); '1' is
    read as an Ace.

    Examples:
        >>> parse_rank('A')
        1
        >>> parse_rank('k')
        10
        >>> parse_rank('7')
        7
    """
    key = s.strip().upper()
    if key not in _RANK_ALIASES:
        raise InvalidInputError(f"Cannot parse rank {s!r}.")
    return _RANK_ALIASES[key]


def rank_to_str(rank: int) -> str:
    """Convert a rank integer to its one-character name.

    Examples:
        >>> rank_to_str(1)
        'A'
        >>> rank_to_str(10)
        'T'
        >>> rank_to_str(7)
        '7'
    """
    return RANK_NAMES[rank]


def complement(up: int) -> int:
    """Return the rank that completes a natural with the up-card ``up``.

    Only meaningful for an Ace or ten-valued up-card.

    Examples:
        >>> complement(1)
        10
        >>> complement(10)
        1
    """
    return 11 - up


def can_have_natural(up: int) -> bool:
    """Return True if the dealer could hold a natural behind this up-card.

    Examples:
        >>> can_have_natural(10)
        True
        >>> can_have_natural(6)
        False
    """
    return up in (ACE, TEN)
