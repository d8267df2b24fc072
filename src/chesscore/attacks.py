"""Precomputed attack tables and sliding-piece attack lookups.

Tables are built once by :func:`init_attack_tables` and are read-only for the
rest of the process. Every lookup below expects the tables to exist; the
package ``__init__`` performs the initialization on import.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .bitboard import BitboardIterator, find_first, find_last
from .square import file_of, rank_of, square


logger = logging.getLogger(__name__)

WHITE, BLACK = 0, 1

# Ray directions as (file step, rank step)
NORTH, SOUTH, EAST, WEST, NORTH_EAST, NORTH_WEST, SOUTH_EAST, SOUTH_WEST = range(8)
DIRECTION_STEPS = (
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (-1, 1),
    (1, -1),
    (-1, -1),
)

# Rays whose squares grow in index resolve their nearest blocker with the
# lowest set bit; the edge sentinel for them is h8. The others use the
# highest set bit and the a1 sentinel.
INCREASING_SENTINEL = 1 << 63
DECREASING_SENTINEL = 1
DIAGONAL_DIRECTIONS = ((NORTH_EAST, True), (NORTH_WEST, True), (SOUTH_EAST, False), (SOUTH_WEST, False))
ORTHOGONAL_DIRECTIONS = ((NORTH, True), (EAST, True), (SOUTH, False), (WEST, False))

KNIGHT_STEPS = ((-2, 1), (-1, 2), (1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1))
KING_STEPS = ((-1, -1), (-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0), (1, -1), (0, -1))

Table = Tuple[int, ...]


def _step_table(steps: Tuple[Tuple[int, int], ...]) -> Table:
    table = []
    for sq in range(64):
        bb = 0
        for df, dr in steps:
            f = file_of(sq) + df
            r = rank_of(sq) + dr
            if 0 <= f < 8 and 0 <= r < 8:
                bb |= 1 << square(f, r)
        table.append(bb)
    return tuple(table)


def _ray_table(df: int, dr: int) -> Table:
    table = []
    for sq in range(64):
        bb = 0
        f = file_of(sq) + df
        r = rank_of(sq) + dr
        while 0 <= f < 8 and 0 <= r < 8:
            bb |= 1 << square(f, r)
            f += df
            r += dr
        table.append(bb)
    return tuple(table)


def _pawn_push_table(side: int) -> Table:
    direction = 1 if side == WHITE else -1
    table = []
    for sq in range(64):
        r = rank_of(sq) + direction
        table.append(1 << square(file_of(sq), r) if 0 <= r < 8 else 0)
    return tuple(table)


def _pawn_double_push_table(side: int) -> Table:
    start_rank = 1 if side == WHITE else 6
    target_rank = 3 if side == WHITE else 4
    return tuple(
        (1 << square(file_of(sq), target_rank)) if rank_of(sq) == start_rank else 0
        for sq in range(64)
    )


def _pawn_capture_table(side: int) -> Table:
    direction = 1 if side == WHITE else -1
    return _step_table(((-1, direction), (1, direction)))


@dataclass(frozen=True)
class AttackTables:
    """Per-square attack patterns, indexed ``[side][square]`` or ``[square]``.

    Attributes:
        pawn_pushes: Single-step pawn destinations per side.
        pawn_double_pushes: Two-step destinations, only set on each side's
            starting rank.
        pawn_captures: Diagonal capture squares per side.
        knight: Knight jumps per square.
        king: King steps per square.
        rays: Eight ray tables, indexed by direction constant, each holding the
            full ray from a square to the board edge ignoring blockers.
    """

    pawn_pushes: Tuple[Table, Table]
    pawn_double_pushes: Tuple[Table, Table]
    pawn_captures: Tuple[Table, Table]
    knight: Table
    king: Table
    rays: Tuple[Table, ...]

    @classmethod
    def build(cls) -> "AttackTables":
        return cls(
            pawn_pushes=(_pawn_push_table(WHITE), _pawn_push_table(BLACK)),
            pawn_double_pushes=(_pawn_double_push_table(WHITE), _pawn_double_push_table(BLACK)),
            pawn_captures=(_pawn_capture_table(WHITE), _pawn_capture_table(BLACK)),
            knight=_step_table(KNIGHT_STEPS),
            king=_step_table(KING_STEPS),
            rays=tuple(_ray_table(df, dr) for df, dr in DIRECTION_STEPS),
        )


_TABLES: Optional[AttackTables] = None


def init_attack_tables() -> AttackTables:
    """Build the shared attack tables if needed and return them."""
    global _TABLES
    if _TABLES is None:
        _TABLES = AttackTables.build()
        logger.debug("attack tables built")
    return _TABLES


def attack_tables() -> AttackTables:
    if _TABLES is None:
        raise RuntimeError("attack tables are not initialized; call init_attack_tables()")
    return _TABLES


def pawn_push_board(side: int, sq: int) -> int:
    return _TABLES.pawn_pushes[side][sq]  # type: ignore[union-attr]


def pawn_double_push_board(side: int, sq: int) -> int:
    return _TABLES.pawn_double_pushes[side][sq]  # type: ignore[union-attr]


def pawn_attacks(side: int, sq: int) -> int:
    return _TABLES.pawn_captures[side][sq]  # type: ignore[union-attr]


def knight_attacks(sq: int) -> int:
    return _TABLES.knight[sq]  # type: ignore[union-attr]


def king_attacks(sq: int) -> int:
    return _TABLES.king[sq]  # type: ignore[union-attr]


def _ray_attacks(occupied: int, sq: int, directions: Tuple[Tuple[int, bool], ...]) -> int:
    rays = _TABLES.rays  # type: ignore[union-attr]
    attacked = 0
    for direction, increasing in directions:
        table = rays[direction]
        ray = table[sq]
        if increasing:
            blocker = find_first((ray & occupied) | INCREASING_SENTINEL)
        else:
            blocker = find_last((ray & occupied) | DECREASING_SENTINEL)
        attacked |= ray ^ table[blocker]
    return attacked


def bishop_attacks(occupied: int, sq: int) -> int:
    return _ray_attacks(occupied, sq, DIAGONAL_DIRECTIONS)


def rook_attacks(occupied: int, sq: int) -> int:
    return _ray_attacks(occupied, sq, ORTHOGONAL_DIRECTIONS)


def queen_attacks(occupied: int, sq: int) -> int:
    return _ray_attacks(occupied, sq, DIAGONAL_DIRECTIONS) | _ray_attacks(
        occupied, sq, ORTHOGONAL_DIRECTIONS
    )


# --- Set-valued helpers: union of attacks over every origin in a bitboard ---
def pawn_attacks_set(side: int, origins: int) -> int:
    table = _TABLES.pawn_captures[side]  # type: ignore[union-attr]
    attacked = 0
    for sq in BitboardIterator(origins):
        attacked |= table[sq]
    return attacked


def knight_attacks_set(origins: int) -> int:
    table = _TABLES.knight  # type: ignore[union-attr]
    attacked = 0
    for sq in BitboardIterator(origins):
        attacked |= table[sq]
    return attacked


def king_attacks_set(origins: int) -> int:
    table = _TABLES.king  # type: ignore[union-attr]
    attacked = 0
    for sq in BitboardIterator(origins):
        attacked |= table[sq]
    return attacked


def slider_attacks_set(occupied: int, diagonal: int, orthogonal: int) -> int:
    """Union of attacks from diagonal movers and orthogonal movers.

    Queens belong in both ``diagonal`` and ``orthogonal``.
    """
    attacked = 0
    for sq in BitboardIterator(diagonal):
        attacked |= _ray_attacks(occupied, sq, DIAGONAL_DIRECTIONS)
    for sq in BitboardIterator(orthogonal):
        attacked |= _ray_attacks(occupied, sq, ORTHOGONAL_DIRECTIONS)
    return attacked
