from __future__ import annotations

from src.engine.board import Color, Kind, Piece
from src.engine.move import square_to_str, str_to_square
from src.engine.position import Position


def moves_set(p: Position) -> set[str]:
    return {square_to_str(a) + square_to_str(b) for a, b in p.legal_moves()}


def test_rook_slide_stops_on_capture() -> None:
    # Black pawn on a5 blocks the open a-file
    p = Position.from_fen("4k3/8/8/p7/8/8/8/R3K3 w - - 0 1")
    ms = moves_set(p)
    assert {"a1a2", "a1a3", "a1a4", "a1a5"}.issubset(ms)
    assert not {"a1a6", "a1a7", "a1a8"} & ms
    captures = [c for c in p.expand() if p.move_of(c) == (str_to_square("a1"), str_to_square("a5"))]
    assert len(captures) == 1
    assert captures[0].board.get(str_to_square("a5")) == Piece(Color.WHITE, Kind.ROOK, True)


def test_rook_slide_stops_before_own_piece() -> None:
    p = Position.from_fen("4k3/8/8/P7/8/8/8/R3K3 w - - 0 1")
    ms = moves_set(p)
    assert {"a1a2", "a1a3", "a1a4"}.issubset(ms)
    assert not {"a1a5", "a1a6", "a1a7", "a1a8"} & ms
    # along the rank the king on e1 blocks too
    assert {"a1b1", "a1c1", "a1d1"}.issubset(ms)
    assert "a1e1" not in ms


def test_bishop_basic_moves() -> None:
    p = Position.from_fen("4k3/8/8/8/8/8/8/2B1K3 w - - 0 1")
    ms = moves_set(p)
    assert {"c1b2", "c1a3", "c1d2", "c1h6"}.issubset(ms)
    assert "c1c2" not in ms


def test_queen_counts_on_open_board() -> None:
    # Lone queen on d4 reaches 27 squares
    p = Position.from_fen("8/8/8/8/3Q4/8/8/8 w - - 0 1")
    assert len(p.expand()) == 27


def test_knight_jumps_over_pieces() -> None:
    p = Position.initial()
    ms = moves_set(p)
    assert {"b1a3", "b1c3", "g1f3", "g1h3"}.issubset(ms)
    assert "b1d2" not in ms
