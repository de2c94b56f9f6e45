"""Static material evaluation.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Dict, Final

from src.engine.board import Board, Color, Kind


PAWN_VAL: Final = 1
KNIGHT_VAL: Final = 3
BISHOP_VAL: Final = 3
ROOK_VAL: Final = 5
QUEEN_VAL: Final = 9
# Large enough that losing the king outweighs any material
KING_VAL: Final = 10000

PIECE_VALUES: Final[Dict[Kind, int]] = {
    Kind.PAWN: PAWN_VAL,
    Kind.KNIGHT: KNIGHT_VAL,
    Kind.BISHOP: BISHOP_VAL,
    Kind.ROOK: ROOK_VAL,
    Kind.QUEEN: QUEEN_VAL,
    Kind.KING: KING_VAL,
    Kind.EMPTY: 0,
}


def evaluate(board: Board) -> int:
    """Return material balance from White's perspective.

    Args:
        board (Board): Position to score.

    Returns:
        int: Sum of White piece values minus sum of Black piece values.
    """
    score = 0
    for _, piece in board.occupied():
        value = PIECE_VALUES[piece.kind]
        score += value if piece.color is Color.WHITE else -value
    return score
