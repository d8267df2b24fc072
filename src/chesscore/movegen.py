from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Iterator, List

from .attacks import (
    BLACK,
    WHITE,
    bishop_attacks,
    king_attacks,
    knight_attacks,
    pawn_attacks,
    pawn_attacks_set,
    pawn_double_push_board,
    pawn_push_board,
    queen_attacks,
    rook_attacks,
)
from .bitboard import BitboardIterator, complement
from .board import (
    CASTLE_BLACK_KINGSIDE,
    CASTLE_BLACK_QUEENSIDE,
    CASTLE_WHITE_KINGSIDE,
    CASTLE_WHITE_QUEENSIDE,
    PROMOTION_RANK,
    Board,
)
from .move import PROMOTION_ORDER, Move
from .square import A1, A8, B1, B8, C1, C8, D1, D8, E1, E8, F1, F8, G1, G8, H1, H8, rank_of

if TYPE_CHECKING:  # pragma: no cover
    from .game import Game


# No legal chess position has more than 218 moves
MAX_MOVES = 256

# right -> (king home, king target, rook corner, squares that must be empty,
#           squares that must not be attacked)
CASTLING_PATHS = {
    CASTLE_WHITE_KINGSIDE: (E1, G1, H1, (F1, G1), (F1, G1)),
    CASTLE_WHITE_QUEENSIDE: (E1, C1, A1, (B1, C1, D1), (D1, C1)),
    CASTLE_BLACK_KINGSIDE: (E8, G8, H8, (F8, G8), (F8, G8)),
    CASTLE_BLACK_QUEENSIDE: (E8, C8, A8, (B8, C8, D8), (D8, C8)),
}
SIDE_RIGHTS = {
    WHITE: (CASTLE_WHITE_KINGSIDE, CASTLE_WHITE_QUEENSIDE),
    BLACK: (CASTLE_BLACK_KINGSIDE, CASTLE_BLACK_QUEENSIDE),
}


class MoveList(Sequence):
    """Insertion-ordered move buffer with a hard capacity.

    Exceeding :data:`MAX_MOVES` means the generator is broken and raises
    ``OverflowError``.
    """

    __slots__ = ("_moves",)

    def __init__(self) -> None:
        self._moves: List[Move] = []

    def add(self, move: Move) -> None:
        if len(self._moves) >= MAX_MOVES:
            raise OverflowError(f"move list capacity of {MAX_MOVES} exceeded")
        self._moves.append(move)

    def __getitem__(self, index):
        return self._moves[index]

    def __len__(self) -> int:
        return len(self._moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self._moves)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MoveList):
            return self._moves == other._moves
        if isinstance(other, list):
            return self._moves == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"MoveList({self._moves!r})"


class MoveGenerator:
    """Pseudo-legal and legal move generation.

    The generator holds no state; everything it reads comes from the board
    or game passed to each call.
    """

    def generate_pseudolegal_moves(self, board: Board) -> MoveList:
        """Return moves obeying piece movement rules, ignoring king safety.

        Order: pawns, knights, bishops, rooks, queens, king. Castling is not
        included.
        """
        moves = MoveList()
        self._generate_pawn_moves(board, moves)
        self._generate_knight_moves(board, moves)
        self._generate_slider_moves(board, board.bishops(), bishop_attacks, moves)
        self._generate_slider_moves(board, board.rooks(), rook_attacks, moves)
        self._generate_slider_moves(board, board.queens(), queen_attacks, moves)
        self._generate_king_moves(board, moves)
        return moves

    def generate_legal_moves(self, game: "Game") -> MoveList:
        """Return the legal moves for the side to move in ``game``.

        Each pseudo-legal candidate is played on a throwaway board copy and
        dropped if it leaves the mover's king attacked. Castling moves are
        appended last, and only when the side to move is not in check.
        """
        board = game.board
        side = board.side_to_move
        legal = MoveList()
        for move in self.generate_pseudolegal_moves(board):
            if not board.apply(move).check(side):
                legal.add(move)

        if not board.check(side):
            self.generate_castling_moves(game, legal)
        return legal

    def opponent_destinations(self, game: "Game") -> int:
        """Return the squares the opponent of the side to move could reach or attack.

        Computed by passing the turn with a null move, collecting the
        opponent's pseudo-legal destinations plus its pawn capture coverage,
        then undoing the null move.
        """
        game.make_null_move()
        try:
            board = game.board
            attacked = pawn_attacks_set(board.side_to_move, board.pawns())
            for move in self.generate_pseudolegal_moves(board):
                attacked |= 1 << move.to_sq
        finally:
            game.undo()
        return attacked

    def generate_castling_moves(self, game: "Game", moves: MoveList) -> None:
        """Append the castling moves available to the side to move.

        Nothing is added while the side to move is in check.
        """
        board = game.board
        side = board.side_to_move
        rights = [r for r in SIDE_RIGHTS[side] if board.can_castle(r)]
        if not rights or board.check(side):
            return

        attacked = None
        occupied = board.occupied
        for right in rights:
            king_from, king_to, rook_sq, empty_squares, safe_squares = CASTLING_PATHS[right]
            if not (board.kings() >> king_from) & 1:
                continue
            if not (board.rooks() >> rook_sq) & 1:
                continue
            if any((occupied >> sq) & 1 for sq in empty_squares):
                continue
            if attacked is None:
                attacked = self.opponent_destinations(game)
            if any((attacked >> sq) & 1 for sq in safe_squares):
                continue
            moves.add(Move(king_from, king_to))

    # --- Per-piece generators ---
    def _generate_pawn_moves(self, board: Board, moves: MoveList) -> None:
        side = board.side_to_move
        empty = complement(board.occupied)
        enemy_occupied = board.occupancy[side ^ 1]
        promotion_rank = PROMOTION_RANK[side]
        ep_square = board.ep_square

        for from_sq in BitboardIterator(board.pawns()):
            push_board = pawn_push_board(side, from_sq) & empty
            if push_board:
                push_board |= pawn_double_push_board(side, from_sq) & empty

            targets = pawn_attacks(side, from_sq)
            capture_board = targets & enemy_occupied

            for to_sq in BitboardIterator(push_board):
                self._add_pawn_move(moves, from_sq, to_sq, False, promotion_rank)
            for to_sq in BitboardIterator(capture_board):
                self._add_pawn_move(moves, from_sq, to_sq, True, promotion_rank)
            if ep_square is not None and (targets >> ep_square) & 1:
                moves.add(Move(from_sq, ep_square, capture=True, en_passant=True))

    @staticmethod
    def _add_pawn_move(
        moves: MoveList, from_sq: int, to_sq: int, capture: bool, promotion_rank: int
    ) -> None:
        if rank_of(to_sq) == promotion_rank:
            for promotion in PROMOTION_ORDER:
                moves.add(Move(from_sq, to_sq, capture=capture, promotion=promotion))
        else:
            moves.add(Move(from_sq, to_sq, capture=capture))

    def _generate_knight_moves(self, board: Board, moves: MoveList) -> None:
        for from_sq in BitboardIterator(board.knights()):
            self._add_destinations(board, from_sq, knight_attacks(from_sq), moves)

    def _generate_king_moves(self, board: Board, moves: MoveList) -> None:
        for from_sq in BitboardIterator(board.kings()):
            self._add_destinations(board, from_sq, king_attacks(from_sq), moves)

    def _generate_slider_moves(self, board: Board, pieces: int, attacks, moves: MoveList) -> None:
        occupied = board.occupied
        for from_sq in BitboardIterator(pieces):
            self._add_destinations(board, from_sq, attacks(occupied, from_sq), moves)

    @staticmethod
    def _add_destinations(board: Board, from_sq: int, attacked: int, moves: MoveList) -> None:
        side = board.side_to_move
        enemy_occupied = board.occupancy[side ^ 1]
        # Filter out captures on our own pieces
        for to_sq in BitboardIterator(attacked & ~board.occupancy[side]):
            moves.add(Move(from_sq, to_sq, capture=(enemy_occupied >> to_sq) & 1 == 1))
