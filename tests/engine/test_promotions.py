from __future__ import annotations

from src.engine.board import Color, Kind, Piece
from src.engine.move import str_to_square as sq
from src.engine.position import Position


def _children_for(p: Position, frm: str, to: str):
    return [c for c in p.expand() if p.move_of(c) == (sq(frm), sq(to))]


def test_white_push_promotion_yields_four_children() -> None:
    p = Position.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    children = _children_for(p, "e7", "e8")
    assert len(children) == 4
    promoted = [c.board.get(sq("e8")) for c in children]
    assert promoted == [
        Piece(Color.WHITE, Kind.KNIGHT),
        Piece(Color.WHITE, Kind.BISHOP),
        Piece(Color.WHITE, Kind.ROOK, True),
        Piece(Color.WHITE, Kind.QUEEN),
    ]
    for c in children:
        assert c.board.get(sq("e7")).is_empty
        # boards differ only in the promoted piece
        other = c.board.copy()
        other.set(sq("e8"), children[0].board.get(sq("e8")))
        assert other == children[0].board


def test_capture_promotion() -> None:
    # e8 is blocked by the king, d8 holds a rook to capture
    p = Position.from_fen("3rk3/4P3/8/8/8/8/8/4K3 w - - 0 1")
    assert len(_children_for(p, "e7", "d8")) == 4
    assert _children_for(p, "e7", "e8") == []
    assert _children_for(p, "e7", "f8") == []


def test_black_push_promotion() -> None:
    p = Position.from_fen("4k3/8/8/8/8/8/3p4/4K3 b - - 0 1")
    children = _children_for(p, "d2", "d1")
    assert {c.board.get(sq("d1")).kind for c in children} == {
        Kind.KNIGHT,
        Kind.BISHOP,
        Kind.ROOK,
        Kind.QUEEN,
    }
    assert all(c.board.get(sq("d1")).color is Color.BLACK for c in children)


def test_no_pawn_ever_lands_on_last_rank() -> None:
    p = Position.from_fen("3rk3/4P3/8/8/8/8/8/4K3 w - - 0 1")
    for c in p.expand():
        for f in range(8):
            assert c.board.get((f, 7)).kind is not Kind.PAWN


def test_no_promotion_before_seventh_rank() -> None:
    p = Position.from_fen("k7/8/4P3/8/8/8/8/4K3 w - - 0 1")
    children = _children_for(p, "e6", "e7")
    assert len(children) == 1
    assert children[0].board.get(sq("e7")) == Piece(Color.WHITE, Kind.PAWN)


def test_move_piece_resolves_to_first_promotion() -> None:
    p = Position.from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    child = p.move_piece(sq("e7"), sq("e8"))
    assert child.board.get(sq("e8")) == Piece(Color.WHITE, Kind.KNIGHT)
