from __future__ import annotations

from typing import Optional


FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"

# Named squares used by castling and promotion logic
A1, B1, C1, D1, E1, F1, G1, H1 = range(8)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)


def square(file: int, rank: int) -> int:
    return rank * 8 + file


def file_of(sq: int) -> int:
    return sq % 8


def rank_of(sq: int) -> int:
    return sq // 8


def offset(sq: int, df: int, dr: int) -> Optional[int]:
    """Return the square ``df`` files and ``dr`` ranks away, or ``None`` off-board."""
    f = file_of(sq) + df
    r = rank_of(sq) + dr
    if not (0 <= f < 8 and 0 <= r < 8):
        return None
    return square(f, r)


def parse_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] not in FILE_NAMES or s[1] not in RANK_NAMES:
        raise ValueError(f"invalid square: {s!r}")
    return square(FILE_NAMES.index(s[0]), RANK_NAMES.index(s[1]))


def square_name(sq: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``sq`` is outside the valid square range.
    """
    if sq < 0 or sq > 63:
        raise ValueError(f"invalid square index: {sq}")
    return FILE_NAMES[file_of(sq)] + RANK_NAMES[rank_of(sq)]
