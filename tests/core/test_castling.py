from __future__ import annotations

from chesscore.game import Game
from chesscore.move import Move, is_castling
from chesscore.movegen import MoveGenerator
from chesscore.square import parse_square


def moves_set(game: Game) -> set[str]:
    return {m.to_uci(game.board) for m in game.legal_moves()}


def castling_moves(fen: str) -> set[str]:
    game = Game.from_fen(fen)
    return {m.to_uci() for m in game.legal_moves() if is_castling(m, game.board)}


def _play(game: Game, uci: str) -> None:
    game.apply(next(m for m in game.legal_moves() if m.to_uci(game.board) == uci))


def test_white_castling_available_when_clear_and_not_in_check() -> None:
    ms = moves_set(Game.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"))
    assert "e1g1" in ms
    assert "e1c1" in ms


def test_white_castling_blocked_when_in_check() -> None:
    # Black rook on e8 gives check on e1
    assert castling_moves("4r2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1") == set()


def test_castling_without_opponent_king() -> None:
    assert castling_moves("8/8/8/8/8/8/8/4K2R w K - 0 1") == {"e1g1"}


def test_castling_blocked_by_piece_in_between() -> None:
    assert castling_moves("8/8/8/8/8/8/8/4KN1R w K - 0 1") == set()


def test_castling_through_attacked_square_is_illegal() -> None:
    # Queen on c1 covers c8
    assert castling_moves("r3k2r/8/8/8/8/8/8/2Q5 b KQkq - 0 1") == {"e8g8"}
    # Rook on f8 covers f1
    assert castling_moves("r3kr2/8/8/8/8/8/8/R3K2R w KQkq - 0 1") == {"e1c1"}


def test_attacked_b_file_square_does_not_block_queenside() -> None:
    # The king never crosses b8
    assert castling_moves("r3k2r/8/8/8/8/8/8/1Q6 b KQkq - 0 1") == {"e8g8", "e8c8"}


def test_pawn_coverage_blocks_castling() -> None:
    # The e2 pawn has no moves but still covers f1
    assert castling_moves("4k3/8/8/8/8/8/4p3/4K2R w K - 0 1") == set()


def test_castling_requires_rook_on_corner() -> None:
    # Right still recorded but a knight stands on h1
    assert castling_moves("4k3/8/8/8/8/8/8/4K2N w K - 0 1") == set()


def test_opponent_destinations_leaves_game_untouched() -> None:
    game = Game.from_fen("r3k2r/8/8/8/8/8/8/2Q5 b KQkq - 0 1")
    before = game.board.copy()
    covered = MoveGenerator().opponent_destinations(game)
    assert (covered >> parse_square("c8")) & 1
    assert game.board == before
    assert game.history == []


def test_white_kingside_castle_moves_rook() -> None:
    game = Game.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1")
    _play(game, "e1g1")
    assert game.to_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/R4RK1 b kq - 1 1"


def test_white_queenside_castle_moves_rook() -> None:
    game = Game.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/R3K2R w KQkq - 0 1")
    _play(game, "e1c1")
    assert game.to_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/2KR3R b kq - 1 1"


def test_black_kingside_castle_moves_rook() -> None:
    game = Game.from_fen("r3k2r/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b KQkq - 0 1")
    _play(game, "e8g8")
    assert game.to_fen() == "r4rk1/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQ - 1 2"


def test_black_queenside_castle_moves_rook() -> None:
    game = Game.from_fen("r3k2r/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b KQkq - 0 1")
    _play(game, "e8c8")
    assert game.to_fen() == "2kr3r/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQ - 1 2"


def test_is_castling_predicate() -> None:
    game = Game.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    e1 = parse_square("e1")
    assert is_castling(Move(e1, parse_square("g1")), game.board)
    assert is_castling(Move(e1, parse_square("c1")), game.board)
    assert not is_castling(Move(e1, parse_square("f1")), game.board)
    # Rook moves two files but is not a king
    assert not is_castling(Move(parse_square("h1"), parse_square("f1")), game.board)
