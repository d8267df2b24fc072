"""Low-level bitboard primitives.

A bitboard is a plain ``int`` where bit ``i`` marks square ``i``. Values are
kept inside 64 bits; use :func:`complement` instead of a bare ``~``.
"""

from __future__ import annotations

from typing import Iterator


MASK64 = 0xFFFFFFFFFFFFFFFF


def bit(sq: int) -> int:
    return 1 << sq


def set_square(bb: int, sq: int) -> int:
    return bb | (1 << sq)


def unset_square(bb: int, sq: int) -> int:
    return bb & ~(1 << sq) & MASK64


def occupied(bb: int, sq: int) -> bool:
    return (bb >> sq) & 1 == 1


def complement(bb: int) -> int:
    return ~bb & MASK64


def popcount(bb: int) -> int:
    return bb.bit_count()


def find_first(bb: int) -> int:
    """Index of the lowest set bit.

    Raises:
        ValueError: If ``bb`` is empty.
    """
    if not bb:
        raise ValueError("find_first on an empty bitboard")
    return (bb & -bb).bit_length() - 1


def find_last(bb: int) -> int:
    """Index of the highest set bit, 0 for an empty bitboard."""
    if not bb:
        return 0
    return bb.bit_length() - 1


class BitboardIterator:
    """Destructive iterator over the set squares of a bitboard.

    Squares come out in ascending order. Each step clears the returned square
    from the iterator's working copy, so the iterator is exhausted after one
    pass; build a new one from the original bitboard to iterate again.
    """

    __slots__ = ("_bb",)

    def __init__(self, bb: int) -> None:
        self._bb = bb & MASK64

    def has_data(self) -> bool:
        return self._bb != 0

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        bb = self._bb
        if not bb:
            raise StopIteration
        lsb = bb & -bb
        self._bb = bb ^ lsb
        return lsb.bit_length() - 1
