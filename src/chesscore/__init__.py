"""Chess rules core: bitboards, attack tables, move generation and game state."""

from .attacks import BLACK, WHITE, init_attack_tables

# Build the shared attack tables before any board is used
init_attack_tables()

from .board import EMPTY_BOARD, STARTPOS_FEN, Board  # noqa: E402
from .game import Game  # noqa: E402
from .move import NULL_MOVE, Move, is_castling, parse_uci  # noqa: E402
from .movegen import MAX_MOVES, MoveGenerator, MoveList  # noqa: E402

__all__ = [
    "BLACK",
    "EMPTY_BOARD",
    "MAX_MOVES",
    "NULL_MOVE",
    "STARTPOS_FEN",
    "WHITE",
    "Board",
    "Game",
    "Move",
    "MoveGenerator",
    "MoveList",
    "init_attack_tables",
    "is_castling",
    "parse_uci",
]
