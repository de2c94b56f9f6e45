from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple


# (file, rank); a1 == (0, 0), h8 == (7, 7)
Square = Tuple[int, int]

BOARD_SIZE = 8


class Color(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Rank step of a pawn of this color."""
        return 1 if self is Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        return 1 if self is Color.WHITE else 6

    @property
    def last_rank(self) -> int:
        return 7 if self is Color.WHITE else 0


class Kind(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"
    EMPTY = "."


# Only rooks and kings remember whether they have moved (castling rights)
TRACKS_MOVED = (Kind.ROOK, Kind.KING)


@dataclass(frozen=True)
class Piece:
    """A square's content.

    Attributes:
        color (Color): Owner. Meaningless for the empty sentinel.
        kind (Kind): Piece kind, ``Kind.EMPTY`` for an unused square.
        moved (bool): Whether a rook or king has been relocated. Always
            ``False`` for other kinds.
    """

    color: Color
    kind: Kind
    moved: bool = False

    @property
    def is_empty(self) -> bool:
        return self.kind is Kind.EMPTY

    def relocated(self) -> "Piece":
        """Return the piece as it looks after being moved once."""
        if self.kind in TRACKS_MOVED and not self.moved:
            return Piece(self.color, self.kind, True)
        return self

    def symbol(self) -> str:
        """FEN letter: uppercase for White, lowercase for Black, ``.`` for empty."""
        if self.is_empty:
            return "."
        ch = self.kind.value
        return ch.upper() if self.color is Color.WHITE else ch


EMPTY = Piece(Color.WHITE, Kind.EMPTY)

CHAR_TO_KIND = {k.value: k for k in Kind if k is not Kind.EMPTY}

BACK_RANK = (
    Kind.ROOK,
    Kind.KNIGHT,
    Kind.BISHOP,
    Kind.QUEEN,
    Kind.KING,
    Kind.BISHOP,
    Kind.KNIGHT,
    Kind.ROOK,
)


def in_bounds(square: Square) -> bool:
    f, r = square
    return 0 <= f < BOARD_SIZE and 0 <= r < BOARD_SIZE


@dataclass
class Board:
    """8x8 grid of pieces, indexed ``squares[rank][file]``.

    Notes:
    - Every square holds a ``Piece``; empty squares hold ``EMPTY``.
    - Out-of-bounds access is a bug in the caller and is asserted.
    - Equality is by value, which is what the worker uses to match a proposed
      board against the legal children of its root.
    """

    squares: List[List[Piece]] = field(
        default_factory=lambda: [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    )

    @classmethod
    def initial(cls) -> "Board":
        """Create a board with the standard starting setup."""
        board = cls()
        for f, kind in enumerate(BACK_RANK):
            board.set((f, 0), Piece(Color.WHITE, kind))
            board.set((f, 1), Piece(Color.WHITE, Kind.PAWN))
            board.set((f, 6), Piece(Color.BLACK, Kind.PAWN))
            board.set((f, 7), Piece(Color.BLACK, kind))
        return board

    @classmethod
    def from_placement(cls, placement: str) -> "Board":
        """Create a board from the piece-placement field of a FEN string.

        Rooks and kings are created unmoved; callers that know the castling
        rights adjust the flags afterwards.

        Raises:
            ValueError: If the placement does not describe 8 ranks of 8 squares
                or contains an unknown piece letter.
        """
        ranks = placement.split("/")
        if len(ranks) != BOARD_SIZE:
            raise ValueError("FEN board must have 8 ranks")
        board = cls()
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                    continue
                kind = CHAR_TO_KIND.get(ch.lower())
                if kind is None:
                    raise ValueError(f"invalid piece in FEN: {ch!r}")
                if file_idx >= BOARD_SIZE:
                    raise ValueError("too many squares in FEN rank")
                color = Color.WHITE if ch.isupper() else Color.BLACK
                board.set((file_idx, rank_idx), Piece(color, kind))
                file_idx += 1
            if file_idx != BOARD_SIZE:
                raise ValueError("rank does not sum to 8 squares in FEN")
        return board

    def get(self, square: Square) -> Piece:
        assert in_bounds(square), f"get out of bounds: {square}"
        f, r = square
        return self.squares[r][f]

    def set(self, square: Square, piece: Piece) -> None:
        assert in_bounds(square), f"set out of bounds: {square}"
        f, r = square
        self.squares[r][f] = piece

    def clear(self, square: Square) -> None:
        self.set(square, EMPTY)

    def copy(self) -> "Board":
        return Board([list(row) for row in self.squares])

    def occupied(self) -> Iterator[Tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every non-empty square, a1 first."""
        for r in range(BOARD_SIZE):
            for f in range(BOARD_SIZE):
                piece = self.squares[r][f]
                if not piece.is_empty:
                    yield (f, r), piece

    def placement(self) -> str:
        """Serialize the grid into the piece-placement field of a FEN string."""
        ranks_str: List[str] = []
        for r in range(BOARD_SIZE - 1, -1, -1):  # 7..0 maps to ranks 8..1
            run = 0
            row = []
            for f in range(BOARD_SIZE):
                piece = self.squares[r][f]
                if piece.is_empty:
                    run += 1
                    continue
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(piece.symbol())
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        return "/".join(ranks_str)

    def render(self) -> str:
        """Plain-text diagram with rank 8 on top, for logs and the CLI."""
        lines = []
        for r in range(BOARD_SIZE - 1, -1, -1):
            cells = " ".join(self.squares[r][f].symbol() for f in range(BOARD_SIZE))
            lines.append(f"{r + 1} {cells}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
