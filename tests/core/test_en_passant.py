from __future__ import annotations

from chesscore.board import BLACK, PAWN, WHITE
from chesscore.game import Game
from chesscore.move import Move, parse_uci
from chesscore.square import parse_square


def moves_set(game: Game) -> set[str]:
    return {m.to_uci(game.board) for m in game.legal_moves()}


def test_white_en_passant_capture_removes_pawn() -> None:
    game = Game.from_fen("rnbqkbnr/pppp1ppp/8/3Pp3/8/8/PPP1PPPP/RNBQKBNR w KQkq e6 0 2")
    move = next(m for m in game.legal_moves() if m.to_uci() == "d5e6")
    assert move.en_passant and move.capture
    game.apply(move)
    assert game.board.piece_type_at(parse_square("e5"), BLACK) is None
    assert game.board.piece_type_at(parse_square("e6"), WHITE) == PAWN
    assert game.to_fen() == "rnbqkbnr/pppp1ppp/4P3/8/8/8/PPP1PPPP/RNBQKBNR b KQkq - 0 2"


def test_black_en_passant_after_double_push() -> None:
    game = Game.from_fen("4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1")
    game.apply(parse_uci("e2e4", game.board))
    assert game.board.ep_square == parse_square("e3")
    assert "d4e3" in moves_set(game)
    game.apply(parse_uci("d4e3", game.board))
    assert game.board.piece_type_at(parse_square("e4"), WHITE) is None
    assert game.board.piece_type_at(parse_square("e3"), BLACK) == PAWN


def test_en_passant_only_available_immediately() -> None:
    game = Game.from_fen("4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1")
    game.apply(parse_uci("e2e4", game.board))
    game.apply(parse_uci("e8d8", game.board))
    game.apply(parse_uci("e1d1", game.board))
    assert game.board.ep_square is None
    assert "d4e3" not in moves_set(game)


def test_en_passant_that_exposes_king_is_illegal() -> None:
    # Both pawns leave the fifth rank, opening the h5 rook onto a5
    game = Game.from_fen("8/8/8/KPp4r/8/8/8/7k w - c6 0 1")
    ms = moves_set(game)
    assert "b5c6" not in ms
    assert "b5b6" in ms


def test_apply_infers_en_passant_from_target_square() -> None:
    # A move built without the flag still removes the passed pawn
    game = Game.from_fen("rnbqkbnr/pppp1ppp/8/3Pp3/8/8/PPP1PPPP/RNBQKBNR w KQkq e6 0 2")
    game.apply(Move(parse_square("d5"), parse_square("e6")))
    assert game.board.piece_type_at(parse_square("e5"), BLACK) is None
