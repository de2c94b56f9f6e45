from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .board import Board, Color, Kind, Piece, Square, in_bounds
from .move import (
    CAPTURE_TARGET_ONLY,
    EMPTY_TARGET_ONLY,
    KINGSIDE,
    PROMOTION_PIECES,
    QUEENSIDE,
    CandidateMove,
    Direction,
    MoveKind,
    candidate_moves,
)


@dataclass
class Successor:
    """One generated child: the new board and its en-passant target."""

    board: Board
    en_passant: Optional[Square] = None


def generate_successors(
    board: Board,
    en_passant: Optional[Square],
    color: Color,
    *,
    include_castles: bool = True,
) -> List[Successor]:
    """Return every one-ply successor of ``board`` for ``color``.

    Args:
        board (Board): Board to move on. Never mutated.
        en_passant (Optional[Square]): Square a pawn may capture onto en
            passant, or ``None``.
        color (Color): Side to move.
        include_castles (bool): Evaluate castle candidates. The castling
            safety probe turns this off for the opponent replies it
            generates, since castling never captures.

    Returns:
        List[Successor]: Children in generation order (a1..h8 by origin, then
            catalogue order).

    Notes:
        Moves that leave the mover's own king attacked are not filtered out.
    """
    out: List[Successor] = []
    for origin, piece in board.occupied():
        if piece.color is not color:
            continue
        for candidate in candidate_moves(piece):
            if candidate.kind is MoveKind.CASTLE and not include_castles:
                continue
            _eval_candidate(board, en_passant, origin, piece, candidate, out)
    return out


def _relocate(board: Board, origin: Square, destination: Square) -> Board:
    """Copy ``board`` with the piece on ``origin`` moved to ``destination``."""
    new_board = board.copy()
    new_board.set(destination, board.get(origin).relocated())
    new_board.clear(origin)
    return new_board


def _eval_candidate(
    board: Board,
    en_passant: Optional[Square],
    origin: Square,
    piece: Piece,
    candidate: CandidateMove,
    out: List[Successor],
) -> None:
    kind = candidate.kind
    if kind is MoveKind.REPEAT:
        _slide(board, origin, piece, candidate.direction, out)
        return

    destination = candidate.direction.apply(origin)
    if not in_bounds(destination):
        return
    target = board.get(destination)
    if target.is_empty:
        if kind in CAPTURE_TARGET_ONLY:
            return
    else:
        if kind in EMPTY_TARGET_ONLY:
            return
        if target.color is piece.color:
            return

    # destination is on the board and capture rules hold from here on
    if kind in (MoveKind.STANDARD, MoveKind.CAPTURE_ONLY, MoveKind.NO_CAPTURE):
        if piece.kind is Kind.PAWN and destination[1] == piece.color.last_rank:
            return  # promotion kinds cover this
        out.append(Successor(_relocate(board, origin, destination)))
    elif kind is MoveKind.PAWN_FIRST:
        if origin[1] != piece.color.pawn_rank:
            return
        passed = Direction(0, piece.color.forward).apply(origin)
        if not board.get(passed).is_empty:
            return
        out.append(Successor(_relocate(board, origin, destination), en_passant=passed))
    elif kind is MoveKind.EN_PASSANT:
        if en_passant is None or en_passant != destination:
            return
        victim = (destination[0], destination[1] - piece.color.forward)
        assert board.get(victim) == Piece(
            piece.color.opponent, Kind.PAWN
        ), f"en passant target {destination} is not behind an opposing pawn"
        new_board = _relocate(board, origin, destination)
        new_board.clear(victim)
        out.append(Successor(new_board))
    elif kind in (MoveKind.PROMOTION, MoveKind.PROMOTION_CAPTURE):
        if origin[1] + piece.color.forward != piece.color.last_rank:
            return
        for promo_kind, moved in PROMOTION_PIECES:
            new_board = board.copy()
            new_board.set(destination, Piece(piece.color, promo_kind, moved))
            new_board.clear(origin)
            out.append(Successor(new_board))
    elif kind is MoveKind.CASTLE:
        _castle(board, origin, piece, candidate.direction, out)
    else:  # pragma: no cover
        raise AssertionError(f"unhandled move kind {kind}")


def _slide(
    board: Board, origin: Square, piece: Piece, direction: Direction, out: List[Successor]
) -> None:
    repeat = 1
    while True:
        destination = (direction * repeat).apply(origin)
        if not in_bounds(destination):
            return
        target = board.get(destination)
        if not target.is_empty and target.color is piece.color:
            return
        out.append(Successor(_relocate(board, origin, destination)))
        if not target.is_empty:
            return  # captured; the slide ends here
        repeat += 1


def _castle(
    board: Board, origin: Square, piece: Piece, direction: Direction, out: List[Successor]
) -> None:
    assert piece.kind is Kind.KING, "castling attempted with a non-king piece"
    if piece.moved:
        return
    if direction == KINGSIDE:
        rook_square = (origin[0] + 3, origin[1])
    elif direction == QUEENSIDE:
        rook_square = (origin[0] - 4, origin[1])
    else:  # pragma: no cover
        raise AssertionError(f"bad castling direction {direction}")
    if not in_bounds(rook_square):
        return
    rook = board.get(rook_square)
    if rook != Piece(piece.color, Kind.ROOK, False):
        return

    step = 1 if direction.df > 0 else -1
    f = origin[0] + step
    while f != rook_square[0]:
        if not board.get((f, origin[1])).is_empty:
            return
        f += step

    transit = (origin[0] + step, origin[1])
    final = direction.apply(origin)
    if _attacked_after_step(board, origin, transit, piece.color):
        return

    new_board = board.copy()
    new_board.set(final, piece.relocated())
    new_board.set(transit, rook.relocated())
    new_board.clear(origin)
    new_board.clear(rook_square)
    out.append(Successor(new_board))


def _attacked_after_step(board: Board, origin: Square, square: Square, color: Color) -> bool:
    """Whether the king on ``origin`` could be captured after stepping to ``square``.

    The opponent's full reply set is generated on a speculative board; any
    reply that removes our king from ``square`` is a capture of it.
    """
    probe = _relocate(board, origin, square)
    king = probe.get(square)
    for reply in generate_successors(probe, None, color.opponent, include_castles=False):
        if reply.board.get(square) != king:
            return True
    return False
