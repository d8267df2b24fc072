from __future__ import annotations

from typing import Dict

from .game import Game
from .movegen import MoveGenerator


def perft(game: Game, depth: int) -> int:
    """Compute perft node count for ``game`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    The game is walked with apply/undo and left as it was found.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    return _perft(game, depth, MoveGenerator())


def _perft(game: Game, depth: int, generator: MoveGenerator) -> int:
    if depth == 0:
        return 1
    moves = generator.generate_legal_moves(game)
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        game.apply(move)
        nodes += _perft(game, depth - 1, generator)
        game.undo()
    return nodes


def divide(game: Game, depth: int) -> Dict[str, int]:
    """Return perft counts per root move, keyed by UCI string.

    Useful for locating the first move whose subtree disagrees with a
    reference engine.
    """
    if depth < 1:
        raise ValueError("depth must be >= 1")
    generator = MoveGenerator()
    counts: Dict[str, int] = {}
    for move in generator.generate_legal_moves(game):
        uci = move.to_uci(game.board)
        game.apply(move)
        counts[uci] = _perft(game, depth - 1, generator)
        game.undo()
    return counts
