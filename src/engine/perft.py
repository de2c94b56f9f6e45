from __future__ import annotations

from typing import Dict, Optional

from .board import Board, Color, Square
from .move import square_to_str
from .movegen import generate_successors
from .position import Position


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes of the successor tree of ``position`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all child positions' perft(depth-1).

    Note: counts follow the generator's legality, which does not filter
    moves that leave the mover's king attacked. Counts match standard perft
    tables only up to the depth where that first matters.

    Children are generated into throwaway lists, so ``position`` is not
    expanded by this call.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    return _perft(position.board, position.en_passant, position.to_move, depth)


def _perft(board: Board, ep: Optional[Square], color: Color, depth: int) -> int:
    if depth == 0:
        return 1
    successors = generate_successors(board, ep, color)
    if depth == 1:
        return len(successors)
    nodes = 0
    for s in successors:
        nodes += _perft(s.board, s.en_passant, color.opponent, depth - 1)
    return nodes


def divide(position: Position, depth: int) -> Dict[str, int]:
    """Per-root-move perft counts keyed by ``"e2e4"``-style strings."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    for child in position.expand():
        from_sq, to_sq = position.move_of(child)
        key = square_to_str(from_sq) + square_to_str(to_sq)
        out[key] = out.get(key, 0) + perft(child, depth - 1)
    return out
