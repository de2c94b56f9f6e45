from __future__ import annotations

import pytest

from src.engine.board import EMPTY, Board, Color, Kind, Piece
from src.engine.move import square_to_str, str_to_square


def test_initial_board_placement() -> None:
    b = Board.initial()
    assert b.placement() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    assert b.get((4, 0)) == Piece(Color.WHITE, Kind.KING)
    assert b.get((3, 7)) == Piece(Color.BLACK, Kind.QUEEN)
    assert b.get((4, 4)) is EMPTY


def test_set_and_clear_square() -> None:
    b = Board()
    knight = Piece(Color.BLACK, Kind.KNIGHT)
    b.set((2, 5), knight)
    assert b.get((2, 5)) == knight
    b.clear((2, 5))
    assert b.get((2, 5)).is_empty
    assert list(b.occupied()) == []


@pytest.mark.parametrize("square", [(-1, 0), (0, -1), (8, 0), (0, 8)])
def test_out_of_bounds_access_is_asserted(square) -> None:
    b = Board()
    with pytest.raises(AssertionError):
        b.get(square)
    with pytest.raises(AssertionError):
        b.set(square, Piece(Color.WHITE, Kind.PAWN))
    with pytest.raises(AssertionError):
        b.clear(square)


def test_copy_is_independent_and_equal() -> None:
    b = Board.initial()
    c = b.copy()
    assert c == b
    c.clear((4, 1))
    assert c != b
    assert not b.get((4, 1)).is_empty


def test_moved_flag_only_tracked_for_rook_and_king() -> None:
    rook = Piece(Color.WHITE, Kind.ROOK)
    assert rook.relocated().moved
    assert Piece(Color.WHITE, Kind.KING).relocated().moved
    assert not Piece(Color.WHITE, Kind.QUEEN).relocated().moved
    # relocating a moved rook keeps it moved
    assert rook.relocated().relocated() == Piece(Color.WHITE, Kind.ROOK, True)


def test_placement_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        Board.from_placement("8/8/8")
    with pytest.raises(ValueError):
        Board.from_placement("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX")
    with pytest.raises(ValueError):
        Board.from_placement("rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR")


def test_render_has_rank_eight_on_top() -> None:
    lines = Board.initial().render().splitlines()
    assert lines[0] == "8 r n b q k b n r"
    assert lines[-2] == "1 R N B Q K B N R"
    assert lines[-1] == "  a b c d e f g h"


def test_square_names() -> None:
    assert square_to_str((0, 0)) == "a1"
    assert square_to_str((7, 7)) == "h8"
    assert str_to_square("e4") == (4, 3)


@pytest.mark.parametrize("square", [(-1, 0), (8, 3), (2, 8)])
def test_square_to_str_rejects_off_board(square) -> None:
    with pytest.raises(ValueError, match="invalid square"):
        square_to_str(square)
