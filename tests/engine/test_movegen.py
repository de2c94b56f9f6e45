from __future__ import annotations

from src.engine.board import Color, Kind, in_bounds
from src.engine.movegen import generate_successors
from src.engine.perft import divide, perft
from src.engine.position import Position


KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


def test_initial_position_has_twenty_children() -> None:
    p = Position.initial()
    assert len(p.expand()) == 20
    # 16 pawn moves plus 4 knight moves
    movers = [p.board.get(p.move_of(c)[0]).kind for c in p.children]
    assert movers.count(Kind.PAWN) == 16
    assert movers.count(Kind.KNIGHT) == 4


def test_children_are_for_the_side_to_move() -> None:
    p = Position.initial()
    for child in p.expand():
        assert child.to_move is Color.BLACK
        from_sq, _ = p.move_of(child)
        assert p.board.get(from_sq).color is Color.WHITE


def test_all_destinations_in_bounds_two_plies() -> None:
    root = Position.from_fen(KIWIPETE)
    for child in root.expand():
        for sq in root.move_of(child):
            assert in_bounds(sq)
        for grandchild in child.expand():
            for sq in child.move_of(grandchild):
                assert in_bounds(sq)


def test_generation_does_not_mutate_board() -> None:
    p = Position.initial()
    before = p.board.copy()
    generate_successors(p.board, None, Color.WHITE)
    assert p.board == before


def test_perft_initial_depths_1_3() -> None:
    p = Position.initial()
    assert perft(p, 0) == 1
    assert perft(p, 1) == 20
    assert perft(p, 2) == 400
    assert perft(p, 3) == 8902
    # perft works on throwaway lists
    assert not p.expanded


def test_perft_kiwipete_depth_1() -> None:
    assert perft(Position.from_fen(KIWIPETE), 1) == 48


def test_divide_sums_to_perft() -> None:
    p = Position.initial()
    counts = divide(p, 2)
    assert len(counts) == 20
    assert counts["e2e4"] == 20
    assert sum(counts.values()) == 400
