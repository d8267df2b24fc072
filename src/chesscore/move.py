from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .square import file_of, parse_square, rank_of, square_name

if TYPE_CHECKING:  # pragma: no cover
    from .board import Board


# 2-bit promotion selector
PROMOTE_QUEEN, PROMOTE_ROOK, PROMOTE_BISHOP, PROMOTE_KNIGHT = range(4)
# Order in which generated promotions are emitted
PROMOTION_ORDER = (PROMOTE_KNIGHT, PROMOTE_BISHOP, PROMOTE_ROOK, PROMOTE_QUEEN)
PROMOTION_TO_CHAR = {
    PROMOTE_QUEEN: "q",
    PROMOTE_ROOK: "r",
    PROMOTE_BISHOP: "b",
    PROMOTE_KNIGHT: "n",
}
CHAR_TO_PROMOTION = {v: k for k, v in PROMOTION_TO_CHAR.items()}
# Piece type for each selector (Board piece order: P, N, B, R, Q, K)
_PROMOTION_PIECE_TYPES = (4, 3, 2, 1)


@dataclass(frozen=True)
class Move:
    """A single ply.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
        capture (bool): Whether an enemy piece is taken.
        en_passant (bool): Whether the capture is en passant.
        promotion (int): Promotion selector, meaningful only for a pawn
            reaching its last rank. Defaults to queen.

    The all-zero value is the null move.
    """

    from_sq: int
    to_sq: int
    capture: bool = False
    en_passant: bool = False
    promotion: int = PROMOTE_QUEEN

    def is_null(self) -> bool:
        return self.from_sq == 0 and self.to_sq == 0

    def promotion_piece_type(self) -> int:
        return _PROMOTION_PIECE_TYPES[self.promotion]

    def is_promotion(self, board: "Board") -> bool:
        """Return True if this move takes a pawn of the side to move to its last rank."""
        if not (board.pawns() >> self.from_sq) & 1:
            return False
        return rank_of(self.to_sq) == (7 if board.side_to_move == 0 else 0)

    def to_uci(self, board: Optional["Board"] = None) -> str:
        """Serialize the move into long algebraic UCI form.

        Args:
            board (Optional[Board]): Position the move is played from. Needed
                to tell whether the promotion letter belongs in the output.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        text = square_name(self.from_sq) + square_name(self.to_sq)
        if board is not None and self.is_promotion(board):
            text += PROMOTION_TO_CHAR[self.promotion]
        return text


NULL_MOVE = Move(0, 0)


def is_castling(move: Move, board: "Board") -> bool:
    """Return True if ``move`` is a castling move on ``board``.

    A castling move is a king of the side to move travelling more than one
    file along its rank. The rook's relocation is derived from this at apply
    time rather than stored on the move.
    """
    if not (board.kings() >> move.from_sq) & 1:
        return False
    if rank_of(move.from_sq) != rank_of(move.to_sq):
        return False
    return abs(file_of(move.from_sq) - file_of(move.to_sq)) > 1


def parse_uci(uci: str, board: "Board") -> Move:
    """Parse a UCI move string into a fully flagged move for ``board``.

    Capture and en-passant flags are derived from the position; the move is
    not checked for legality.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = parse_square(uci[0:2])
    to_sq = parse_square(uci[2:4])
    promotion = PROMOTE_QUEEN
    if len(uci) == 5:
        promo = uci[4].lower()
        if promo not in CHAR_TO_PROMOTION:
            raise ValueError(f"invalid promotion piece: {promo!r}")
        promotion = CHAR_TO_PROMOTION[promo]
    side = board.side_to_move
    pawn_move = (board.pawns() >> from_sq) & 1 == 1
    en_passant = pawn_move and board.ep_square is not None and to_sq == board.ep_square
    capture = en_passant or board.square_occupied(to_sq, side ^ 1)
    return Move(from_sq, to_sq, capture, en_passant, promotion)
