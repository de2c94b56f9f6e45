from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from .board import Color, Kind, Piece, Square, in_bounds


class MoveKind(Enum):
    """How a candidate offset is allowed to be used."""

    STANDARD = "standard"
    CAPTURE_ONLY = "capture_only"
    NO_CAPTURE = "no_capture"
    PAWN_FIRST = "pawn_first"
    PROMOTION = "promotion"
    PROMOTION_CAPTURE = "promotion_capture"
    REPEAT = "repeat"
    EN_PASSANT = "en_passant"
    CASTLE = "castle"


# Kinds that may only land on an empty square / only on an opponent piece
EMPTY_TARGET_ONLY = (
    MoveKind.NO_CAPTURE,
    MoveKind.PAWN_FIRST,
    MoveKind.PROMOTION,
    MoveKind.EN_PASSANT,
)
CAPTURE_TARGET_ONLY = (MoveKind.CAPTURE_ONLY, MoveKind.PROMOTION_CAPTURE)


@dataclass(frozen=True)
class Direction:
    """Offset in ``(file, rank)`` steps; ``direction * n`` scales it."""

    df: int
    dr: int

    def __mul__(self, n: int) -> "Direction":
        return Direction(self.df * n, self.dr * n)

    def apply(self, square: Square) -> Square:
        return (square[0] + self.df, square[1] + self.dr)


@dataclass(frozen=True)
class CandidateMove:
    kind: MoveKind
    direction: Direction


ORTHOGONAL = (Direction(1, 0), Direction(-1, 0), Direction(0, 1), Direction(0, -1))
DIAGONAL = (Direction(1, 1), Direction(-1, 1), Direction(1, -1), Direction(-1, -1))
KNIGHT_JUMPS = (
    Direction(-1, 2),
    Direction(1, 2),
    Direction(-1, -2),
    Direction(1, -2),
    Direction(2, -1),
    Direction(2, 1),
    Direction(-2, -1),
    Direction(-2, 1),
)
KINGSIDE = Direction(2, 0)
QUEENSIDE = Direction(-2, 0)

# Promotion choices in emission order; a promoted rook counts as moved
PROMOTION_PIECES: Tuple[Tuple[Kind, bool], ...] = (
    (Kind.KNIGHT, False),
    (Kind.BISHOP, False),
    (Kind.ROOK, True),
    (Kind.QUEEN, False),
)


def _pawn_moves(color: Color) -> List[CandidateMove]:
    f = color.forward
    return [
        CandidateMove(MoveKind.NO_CAPTURE, Direction(0, f)),
        CandidateMove(MoveKind.PAWN_FIRST, Direction(0, 2 * f)),
        CandidateMove(MoveKind.CAPTURE_ONLY, Direction(1, f)),
        CandidateMove(MoveKind.CAPTURE_ONLY, Direction(-1, f)),
        CandidateMove(MoveKind.EN_PASSANT, Direction(1, f)),
        CandidateMove(MoveKind.EN_PASSANT, Direction(-1, f)),
        CandidateMove(MoveKind.PROMOTION, Direction(0, f)),
        CandidateMove(MoveKind.PROMOTION_CAPTURE, Direction(1, f)),
        CandidateMove(MoveKind.PROMOTION_CAPTURE, Direction(-1, f)),
    ]


def _build_catalogue() -> Dict[Tuple[Color, Kind], List[CandidateMove]]:
    table: Dict[Tuple[Color, Kind], List[CandidateMove]] = {}
    for color in Color:
        table[(color, Kind.PAWN)] = _pawn_moves(color)
        table[(color, Kind.KNIGHT)] = [CandidateMove(MoveKind.STANDARD, d) for d in KNIGHT_JUMPS]
        table[(color, Kind.BISHOP)] = [CandidateMove(MoveKind.REPEAT, d) for d in DIAGONAL]
        table[(color, Kind.ROOK)] = [CandidateMove(MoveKind.REPEAT, d) for d in ORTHOGONAL]
        table[(color, Kind.QUEEN)] = [
            CandidateMove(MoveKind.REPEAT, d) for d in ORTHOGONAL + DIAGONAL
        ]
        table[(color, Kind.KING)] = [
            CandidateMove(MoveKind.STANDARD, d) for d in ORTHOGONAL + DIAGONAL
        ] + [
            CandidateMove(MoveKind.CASTLE, KINGSIDE),
            CandidateMove(MoveKind.CASTLE, QUEENSIDE),
        ]
        table[(color, Kind.EMPTY)] = []
    return table


CATALOGUE = _build_catalogue()


def candidate_moves(piece: Piece) -> List[CandidateMove]:
    """Return the fixed ``(kind, direction)`` catalogue for ``piece``.

    Pawn directions already point along the piece's own forward axis.
    """
    return CATALOGUE[(piece.color, piece.kind)]


def str_to_square(s: str) -> Square:
    """Convert algebraic notation into a ``(file, rank)`` pair.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        Square: Zero-based ``(file, rank)``.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return ord(s[0]) - ord("a"), int(s[1]) - 1


def square_to_str(square: Square) -> str:
    """Convert a ``(file, rank)`` pair into algebraic notation.

    Raises:
        ValueError: If ``square`` is off the board.
    """
    if not in_bounds(square):
        raise ValueError(f"invalid square: {square}")
    f, r = square
    return chr(ord("a") + f) + str(r + 1)
