from __future__ import annotations

from typing import List, Optional, Tuple

from src.eval import evaluate

from .board import Board, Color, Kind, Piece, Square
from .move import square_to_str, str_to_square
from .movegen import generate_successors


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


class IllegalMoveError(ValueError):
    """A proposed move or board is not reachable from the current position."""


class Position:
    """A node of the game tree.

    Responsibility: hold a board, the en-passant target and side to move,
    lazily generate legal successors, and score the subtree with minimax.

    Notes:
    - ``static_eval`` is material from White's perspective, fixed at creation.
    - ``value`` is the last minimax value computed by ``tree_eval``.
    - A position owns its ``children``; they are attached once, as a whole.
    """

    __slots__ = ("board", "en_passant", "to_move", "children", "expanded", "static_eval", "value")

    def __init__(
        self,
        board: Board,
        to_move: Color = Color.WHITE,
        en_passant: Optional[Square] = None,
    ) -> None:
        self.board = board
        self.to_move = to_move
        self.en_passant = en_passant
        self.children: List[Position] = []
        self.expanded = False
        self.static_eval = evaluate(board)
        self.value: Optional[int] = None

    @classmethod
    def initial(cls) -> "Position":
        return cls(Board.initial())

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """Create a position from a FEN string.

        Castling rights are mapped onto the ``moved`` flags: a king or rook is
        unmoved only when a matching right is present. Move counters are
        accepted but not tracked.

        Raises:
            ValueError: If ``fen`` is malformed.
        """
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) not in (4, 6):
            raise ValueError("FEN must have 4 or 6 fields")
        placement, stm, castling, ep = parts[:4]
        board = Board.from_placement(placement)

        if stm not in ("w", "b"):
            raise ValueError("side to move must be 'w' or 'b'")
        if castling != "-" and any(ch not in "KQkq" for ch in castling):
            raise ValueError("invalid castling rights")
        _apply_castling_rights(board, "" if castling == "-" else castling)

        en_passant: Optional[Square] = None
        if ep != "-":
            try:
                en_passant = str_to_square(ep)
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            if en_passant[1] not in (2, 5):
                raise ValueError("invalid en passant square rank")
        return cls(board, Color(stm), en_passant)

    def to_fen(self) -> str:
        """Serialize placement, side, castling rights and en passant (counters fixed)."""
        rights = ""
        for color, letters in ((Color.WHITE, "KQ"), (Color.BLACK, "kq")):
            rank = color.home_rank
            if self.board.get((4, rank)) != Piece(color, Kind.KING):
                continue
            if self.board.get((7, rank)) == Piece(color, Kind.ROOK):
                rights += letters[0]
            if self.board.get((0, rank)) == Piece(color, Kind.ROOK):
                rights += letters[1]
        ep = square_to_str(self.en_passant) if self.en_passant is not None else "-"
        return f"{self.board.placement()} {self.to_move.value} {rights or '-'} {ep} 0 1"

    def expand(self) -> List["Position"]:
        """Generate and attach legal successors for ``to_move`` (once)."""
        if not self.expanded:
            successors = generate_successors(self.board, self.en_passant, self.to_move)
            self.children = [
                Position(s.board, self.to_move.opponent, s.en_passant) for s in successors
            ]
            self.expanded = True
        return self.children

    def tree_eval(self, color: Color) -> int:
        """Minimax value of this subtree for ``color``.

        Leaves return the static evaluation. Inner nodes take the minimum over
        children scored for the opponent of the side to move and negate it,
        i.e. the mover picks the reply that is worst for the other side. Depth
        is whatever has been expanded so far.
        """
        if not self.children:
            best = self.static_eval if self.to_move is Color.WHITE else -self.static_eval
        else:
            best = -min(child.tree_eval(self.to_move.opponent) for child in self.children)
        self.value = best if color is self.to_move else -best
        return self.value

    def find_child(self, board: Board) -> Optional["Position"]:
        """Return the child whose board equals ``board``, expanding if needed."""
        for child in self.expand():
            if child.board == board:
                return child
        return None

    def move_piece(self, from_sq: Square, to_sq: Square) -> "Position":
        """Apply the legal move of the piece on ``from_sq`` to ``to_sq``.

        Promotions resolve to the first matching child (a knight); castling is
        addressed by the king's move.

        Raises:
            IllegalMoveError: If no legal child relocates that piece there.
        """
        for child in self.expand():
            if self.move_of(child) == (from_sq, to_sq):
                return child
        raise IllegalMoveError(
            f"illegal move: {square_to_str(from_sq)}{square_to_str(to_sq)}"
        )

    def legal_moves(self) -> List[Tuple[Square, Square]]:
        """Distinct ``(from, to)`` pairs accepted by ``move_piece``, in child order."""
        out: List[Tuple[Square, Square]] = []
        for child in self.expand():
            move = self.move_of(child)
            if move not in out:
                out.append(move)
        return out

    def move_of(self, child: "Position") -> Tuple[Square, Square]:
        """Recover the ``(from, to)`` squares of the move that produced ``child``."""
        origins: List[Square] = []
        targets: List[Square] = []
        for r in range(8):
            for f in range(8):
                before = self.board.squares[r][f]
                after = child.board.squares[r][f]
                if before == after:
                    continue
                if after.is_empty and not before.is_empty and before.color is self.to_move:
                    origins.append((f, r))
                elif not after.is_empty and after.color is self.to_move:
                    targets.append((f, r))
        assert origins and targets, "child does not differ from its parent by a move"
        if len(origins) == 1:
            return origins[0], targets[0]
        # castling moves two pieces; the king's move names it
        king_from = next(sq for sq in origins if self.board.get(sq).kind is Kind.KING)
        king_to = next(sq for sq in targets if child.board.get(sq).kind is Kind.KING)
        return king_from, king_to

    def __repr__(self) -> str:
        return f"Position({self.to_fen()!r}, children={len(self.children)})"


def _apply_castling_rights(board: Board, rights: str) -> None:
    for color, king_letter, queen_letter in ((Color.WHITE, "K", "Q"), (Color.BLACK, "k", "q")):
        for sq, piece in list(board.occupied()):
            if piece.color is not color or piece.kind not in (Kind.KING, Kind.ROOK):
                continue
            unmoved = False
            if sq[1] == color.home_rank:
                if piece.kind is Kind.KING:
                    unmoved = sq[0] == 4 and (king_letter in rights or queen_letter in rights)
                elif sq[0] == 7:
                    unmoved = king_letter in rights
                elif sq[0] == 0:
                    unmoved = queen_letter in rights
            board.set(sq, Piece(color, piece.kind, not unmoved))
