from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .board import STARTPOS_FEN, Board
from .move import Move
from .movegen import MoveGenerator, MoveList


FIFTY_MOVE_LIMIT = 50
# Prior occurrences of the current board needed for a repetition draw
REPETITION_COUNT = 2

_GENERATOR = MoveGenerator()


@dataclass
class Game:
    """Current board plus the stack of boards that preceded it.

    Responsibility: apply and undo moves, detect draws. Every transition
    pushes the previous board, so undo is a plain pop.
    """

    board: Board = field(default_factory=Board.startpos)
    history: List[Board] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.from_fen(STARTPOS_FEN))

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(board=Board.from_fen(fen))

    def to_fen(self) -> str:
        return self.board.to_fen()

    def copy(self) -> "Game":
        """Return an independent game, e.g. for exploring lines in parallel."""
        return Game(board=self.board.copy(), history=[b.copy() for b in self.history])

    def apply(self, move: Move) -> None:
        """Play ``move`` on the current board.

        The move must come from the legal move list of the current board; it
        is not re-validated.

        Raises:
            ValueError: If ``move`` is the null move.
        """
        if move.is_null():
            raise ValueError("cannot apply the null move")
        self.history.append(self.board)
        self.board = self.board.apply(move)

    def make_null_move(self) -> None:
        """Pass the turn without moving a piece; undo with :meth:`undo`."""
        self.history.append(self.board)
        self.board = self.board.null_move()

    def undo(self) -> None:
        """Restore the board from before the last apply or null move.

        Raises:
            ValueError: If there is nothing to undo.
        """
        if not self.history:
            raise ValueError("no moves to undo")
        self.board = self.history.pop()

    unmake = undo

    def legal_moves(self) -> MoveList:
        return _GENERATOR.generate_legal_moves(self)

    # --- Draw detection ---
    def is_bare_kings(self) -> bool:
        # Only the two kings are left
        return self.board.piece_count() == 2

    def is_fifty_move(self) -> bool:
        return self.board.halfmove_clock >= FIFTY_MOVE_LIMIT

    def is_repetition(self) -> bool:
        """Return True if the current board occurred at least twice before.

        Boards are compared in full, clocks and en-passant target included.
        """
        current = self.board
        return sum(1 for b in self.history if b == current) >= REPETITION_COUNT

    def drawn(self) -> bool:
        return self.is_bare_kings() or self.is_fifty_move() or self.is_repetition()

    # --- Terminal states ---
    def in_check(self) -> bool:
        return self.board.check()

    def is_checkmate(self) -> bool:
        return self.board.check() and not self.legal_moves()

    def is_stalemate(self) -> bool:
        return not self.board.check() and not self.legal_moves()
