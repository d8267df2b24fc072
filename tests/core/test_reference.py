"""Cross-check move generation and state updates against python-chess."""

from __future__ import annotations

import random

import chess
import pytest

from chesscore.board import STARTPOS_FEN
from chesscore.game import Game

POSITIONS = [
    STARTPOS_FEN,
    "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
    "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
    "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1",
    "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8",
    "r4rk1/1pp1qppp/p1np1n2/2b1p1B1/2B1P1b1/P1NP1N2/1PP1QPPP/R4RK1 w - - 0 10",
]


def our_moves(game: Game) -> set[str]:
    return {m.to_uci(game.board) for m in game.legal_moves()}


def ref_moves(ref: chess.Board) -> set[str]:
    return {m.uci() for m in ref.legal_moves}


@pytest.mark.parametrize("fen", POSITIONS)
def test_legal_moves_match_reference(fen: str) -> None:
    assert our_moves(Game.from_fen(fen)) == ref_moves(chess.Board(fen))


@pytest.mark.parametrize("fen,seed", [(POSITIONS[0], 1), (POSITIONS[0], 7), (POSITIONS[1], 3)])
def test_random_playout_matches_reference(fen: str, seed: int) -> None:
    rng = random.Random(seed)
    game = Game.from_fen(fen)
    ref = chess.Board(fen)
    for _ in range(60):
        ours = our_moves(game)
        assert ours == ref_moves(ref), game.to_fen()
        if not ours:
            assert game.is_checkmate() == ref.is_checkmate()
            assert game.is_stalemate() == ref.is_stalemate()
            break
        uci = rng.choice(sorted(ours))
        game.apply(next(m for m in game.legal_moves() if m.to_uci(game.board) == uci))
        ref.push_uci(uci)
        # "fen" mode prints the target after every double push, as we do
        assert game.to_fen() == ref.fen(en_passant="fen")
        assert game.in_check() == ref.is_check()
