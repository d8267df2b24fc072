from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .attacks import (
    BLACK,
    WHITE,
    king_attacks_set,
    knight_attacks_set,
    pawn_attacks_set,
    slider_attacks_set,
)
from .bitboard import MASK64, popcount
from .move import Move, is_castling
from .square import (
    A1,
    A8,
    H1,
    H8,
    file_of,
    parse_square,
    rank_of,
    square,
    square_name,
)


logger = logging.getLogger(__name__)

STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

SIDES = (WHITE, BLACK)
SIDE_TO_CHAR = {WHITE: "w", BLACK: "b"}
CHAR_TO_SIDE = {v: k for k, v in SIDE_TO_CHAR.items()}

# Piece types
PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING = range(6)
PIECE_TYPES = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING)

# Piece indices for bitboards: side * 6 + piece type
WP, WN, WB, WR, WQ, WK, BP, BN, BB, BR, BQ, BK = range(12)
PIECE_ORDER = [WP, WN, WB, WR, WQ, WK, BP, BN, BB, BR, BQ, BK]
PIECE_TO_CHAR = {
    WP: "P",
    WN: "N",
    WB: "B",
    WR: "R",
    WQ: "Q",
    WK: "K",
    BP: "p",
    BN: "n",
    BB: "b",
    BR: "r",
    BQ: "q",
    BK: "k",
}
CHAR_TO_PIECE = {v: k for k, v in PIECE_TO_CHAR.items()}

# Castling rights, always kept in this order
CASTLING_ORDER = "KQkq"
CASTLE_WHITE_KINGSIDE, CASTLE_WHITE_QUEENSIDE, CASTLE_BLACK_KINGSIDE, CASTLE_BLACK_QUEENSIDE = (
    CASTLING_ORDER
)
SIDE_CASTLING = {WHITE: "KQ", BLACK: "kq"}
# Rook corner squares and the right each one guards
ROOK_CORNERS = {
    WHITE: {A1: CASTLE_WHITE_QUEENSIDE, H1: CASTLE_WHITE_KINGSIDE},
    BLACK: {A8: CASTLE_BLACK_QUEENSIDE, H8: CASTLE_BLACK_KINGSIDE},
}

PROMOTION_RANK = {WHITE: 7, BLACK: 0}
PAWN_FORWARD = {WHITE: 8, BLACK: -8}


def piece_index(side: int, piece: int) -> int:
    return side * 6 + piece


@dataclass
class Board:
    """Position snapshot: 12 piece bitboards plus side, castling, en passant and clocks.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - ``occupancy`` is derived from ``bb`` and must be refreshed with
      :meth:`update_occupancy` after any direct bitboard edit.
    - Equality compares every field, clocks included.
    """

    # 12 piece bitboards, indexed by constants above
    bb: List[int]
    side_to_move: int = WHITE
    castling: str = ""  # subset of 'KQkq' or ''
    ep_square: Optional[int] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    occupancy: List[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.update_occupancy()

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board initialized to the standard chess starting position."""
        return cls.from_fen(STARTPOS_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> "Board":
        """Create a board from a Forsyth–Edwards Notation (FEN) string.

        Args:
            fen (str): FEN string describing the position to load.

        Returns:
            Board: Board initialized from ``fen``, or a fresh copy of
                :data:`EMPTY_BOARD` when ``fen`` is malformed. Callers detect
                failure by comparing the result against :data:`EMPTY_BOARD`.
        """
        try:
            return cls._parse_fen(fen)
        except ValueError as e:
            logger.debug("rejected FEN %r: %s", fen, e)
            return EMPTY_BOARD.copy()

    @classmethod
    def _parse_fen(cls, fen: str) -> "Board":
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.split()
        if len(parts) != 6:
            raise ValueError("FEN must have 6 fields")
        placement, stm, castling, ep, halfmove, fullmove = parts

        # Parse piece placement
        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        bb = [0] * 12
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                else:
                    if ch not in CHAR_TO_PIECE:
                        raise ValueError(f"invalid piece in FEN: {ch!r}")
                    if file_idx >= 8:
                        raise ValueError("too many squares in FEN rank")
                    bb[CHAR_TO_PIECE[ch]] |= 1 << square(file_idx, rank_idx)
                    file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")

        if stm not in CHAR_TO_SIDE:
            raise ValueError("side to move must be 'w' or 'b'")

        if castling == "-":
            castling = ""
        else:
            if any(ch not in CASTLING_ORDER for ch in castling):
                raise ValueError("invalid castling rights")
            castling = "".join(c for c in CASTLING_ORDER if c in castling)

        ep_square: Optional[int]
        if ep == "-":
            ep_square = None
        else:
            ep_square = parse_square(ep)

        try:
            halfmove_clock = int(halfmove)
            fullmove_number = int(fullmove)
        except ValueError as e:
            raise ValueError("invalid move counters in FEN") from e
        if halfmove_clock < 0 or fullmove_number <= 0:
            raise ValueError("invalid move counters in FEN")

        return cls(
            bb=bb,
            side_to_move=CHAR_TO_SIDE[stm],
            castling=castling,
            ep_square=ep_square,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )

    def to_fen(self) -> str:
        """Serialize the position into FEN; the exact inverse of :meth:`from_fen`."""
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            row = []
            for file_idx in range(8):
                ch = self._piece_char_at(square(file_idx, rank_idx))
                if ch is None:
                    run += 1
                else:
                    if run > 0:
                        row.append(str(run))
                        run = 0
                    row.append(ch)
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        placement = "/".join(ranks_str)

        stm = SIDE_TO_CHAR[self.side_to_move]
        castling = self.castling if self.castling else "-"
        ep = square_name(self.ep_square) if self.ep_square is not None else "-"
        return f"{placement} {stm} {castling} {ep} {self.halfmove_clock} {self.fullmove_number}"

    def _piece_char_at(self, sq: int) -> Optional[str]:
        # White pieces first (uppercase), then black
        for idx in PIECE_ORDER:
            if (self.bb[idx] >> sq) & 1:
                return PIECE_TO_CHAR[idx]
        return None

    def __str__(self) -> str:
        rows = []
        for rank_idx in range(7, -1, -1):
            rows.append(
                "".join(self._piece_char_at(square(f, rank_idx)) or "." for f in range(8))
            )
        return "\n".join(rows)

    def copy(self) -> "Board":
        return Board(
            bb=list(self.bb),
            side_to_move=self.side_to_move,
            castling=self.castling,
            ep_square=self.ep_square,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    # --- Accessors ---
    def update_occupancy(self) -> None:
        bb = self.bb
        self.occupancy = [
            bb[WP] | bb[WN] | bb[WB] | bb[WR] | bb[WQ] | bb[WK],
            bb[BP] | bb[BN] | bb[BB] | bb[BR] | bb[BQ] | bb[BK],
        ]

    @property
    def occupied(self) -> int:
        return self.occupancy[WHITE] | self.occupancy[BLACK]

    def piece_board(self, side: int, piece: int) -> int:
        return self.bb[side * 6 + piece]

    def set_piece_board(self, side: int, piece: int, bb: int) -> None:
        """Replace one piece bitboard; the caller refreshes occupancy afterwards."""
        self.bb[side * 6 + piece] = bb & MASK64

    def _side(self, side: Optional[int]) -> int:
        return self.side_to_move if side is None else side

    def pawns(self, side: Optional[int] = None) -> int:
        return self.bb[self._side(side) * 6 + PAWN]

    def knights(self, side: Optional[int] = None) -> int:
        return self.bb[self._side(side) * 6 + KNIGHT]

    def bishops(self, side: Optional[int] = None) -> int:
        return self.bb[self._side(side) * 6 + BISHOP]

    def rooks(self, side: Optional[int] = None) -> int:
        return self.bb[self._side(side) * 6 + ROOK]

    def queens(self, side: Optional[int] = None) -> int:
        return self.bb[self._side(side) * 6 + QUEEN]

    def kings(self, side: Optional[int] = None) -> int:
        return self.bb[self._side(side) * 6 + KING]

    def can_castle(self, right: str) -> bool:
        return right in self.castling

    def square_occupied(self, sq: int, side: Optional[int] = None) -> bool:
        occ = self.occupied if side is None else self.occupancy[side]
        return (occ >> sq) & 1 == 1

    def piece_type_at(self, sq: int, side: Optional[int] = None) -> Optional[int]:
        """Return the piece type on ``sq``, or ``None`` when empty.

        With no ``side`` the square is looked up for White, then Black.
        """
        if side is None:
            piece = self.piece_type_at(sq, WHITE)
            if piece is None:
                piece = self.piece_type_at(sq, BLACK)
            return piece
        if not (self.occupancy[side] >> sq) & 1:
            return None
        base = side * 6
        for piece in PIECE_TYPES:
            if (self.bb[base + piece] >> sq) & 1:
                return piece
        return None

    def king_square(self, side: Optional[int] = None) -> Optional[int]:
        kings = self.kings(side)
        if not kings:
            return None
        return (kings & -kings).bit_length() - 1

    # --- Attack detection ---
    def attacked_squares(self, side: int) -> int:
        """Return every square attacked by ``side`` on this board."""
        base = side * 6
        bb = self.bb
        occ = self.occupied
        queens = bb[base + QUEEN]
        return (
            pawn_attacks_set(side, bb[base + PAWN])
            | knight_attacks_set(bb[base + KNIGHT])
            | slider_attacks_set(occ, bb[base + BISHOP] | queens, bb[base + ROOK] | queens)
            | king_attacks_set(bb[base + KING])
        )

    def attacks_to_square(self, side: int, sq: int) -> bool:
        """Return True if ``side`` attacks ``sq``."""
        return (self.attacked_squares(side) >> sq) & 1 == 1

    def check(self, side: Optional[int] = None) -> bool:
        """Return True if ``side`` (default: side to move) is in check.

        A side without a king is never in check.
        """
        s = self._side(side)
        ksq = self.king_square(s)
        if ksq is None:
            return False
        return self.attacks_to_square(s ^ 1, ksq)

    # --- Transitions ---
    def apply(self, move: Move) -> "Board":
        """Return the board that results from playing ``move``.

        The move must be legal for this board; it is not re-validated. This
        board is left unchanged.
        """
        side = self.side_to_move
        enemy = side ^ 1
        from_sq, to_sq = move.from_sq, move.to_sq
        piece = self.piece_type_at(from_sq, side)
        if piece is None:
            raise ValueError(f"no piece to move on {square_name(from_sq)}")

        new = self.copy()
        bb = new.bb
        base = side * 6
        forward = PAWN_FORWARD[side]
        castling = self.castling

        if is_castling(move, self):
            # Relocate king and rook as a pair
            rank = rank_of(to_sq)
            kingside = file_of(to_sq) > file_of(from_sq)
            rook_from = square(7 if kingside else 0, rank)
            rook_to = square(5 if kingside else 3, rank)
            bb[base + KING] ^= (1 << from_sq) | (1 << to_sq)
            bb[base + ROOK] ^= (1 << rook_from) | (1 << rook_to)
        else:
            bb[base + piece] &= ~(1 << from_sq)
            if piece == PAWN and rank_of(to_sq) == PROMOTION_RANK[side]:
                bb[base + move.promotion_piece_type()] |= 1 << to_sq
            else:
                bb[base + piece] |= 1 << to_sq

        # Remove the captured piece; en passant takes the pawn behind the target
        en_passant = move.en_passant or (piece == PAWN and to_sq == self.ep_square)
        capture_sq = to_sq - forward if en_passant else to_sq
        captured = self.piece_type_at(capture_sq, enemy)
        if captured is not None:
            bb[enemy * 6 + captured] &= ~(1 << capture_sq)
            if captured == ROOK and capture_sq in ROOK_CORNERS[enemy]:
                castling = castling.replace(ROOK_CORNERS[enemy][capture_sq], "")

        if piece == KING:
            for right in SIDE_CASTLING[side]:
                castling = castling.replace(right, "")
        elif piece == ROOK and from_sq in ROOK_CORNERS[side]:
            castling = castling.replace(ROOK_CORNERS[side][from_sq], "")
        new.castling = castling

        if piece == PAWN and to_sq - from_sq == 2 * forward:
            new.ep_square = from_sq + forward
        else:
            new.ep_square = None

        if captured is not None or piece == PAWN:
            new.halfmove_clock = 0
        else:
            new.halfmove_clock = self.halfmove_clock + 1
        new.fullmove_number = self.fullmove_number + side
        new.side_to_move = enemy
        new.update_occupancy()
        return new

    def null_move(self) -> "Board":
        """Return this board with the turn passed and the halfmove clock reset."""
        new = self.copy()
        new.side_to_move ^= 1
        new.halfmove_clock = 0
        return new

    def piece_count(self) -> int:
        return popcount(self.occupied)


# Returned by Board.from_fen for malformed input
EMPTY_BOARD = Board(
    bb=[0] * 12,
    side_to_move=WHITE,
    castling="",
    ep_square=None,
    halfmove_clock=0,
    fullmove_number=0,
)
