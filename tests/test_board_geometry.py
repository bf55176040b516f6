# tests/test_board_geometry.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from helpers import board_of, empty_board, empty_rows
from tetris_bot.game.core.board import Board, clear_full_lines
from tetris_bot.game.core.constants import SPAWN_ROWS_ABOVE
from tetris_bot.game.core.metrics import board_snapshot_metrics_from_grid
from tetris_bot.game.core.pieceset import PieceSet, default_pieceset
from tetris_bot.game.core.placement_cache import StaticPlacementCache
from tetris_bot.game.core.rotation import collides
from tetris_bot.game.core.simulate import DropSimulator
from tetris_bot.game.core.types import ActivePiece, CellState, PieceKind


def test_wire_rows_are_bottom_up() -> None:
    rows = empty_rows(w=4, h=3)
    rows[0][1] = "garbage"
    rows[2][3] = "piece"
    b = board_of(rows)
    assert (b.h, b.w) == (3, 4)
    assert b.grid[2, 1] == 2
    assert b.grid[0, 3] == 1
    assert int(b.grid.sum()) == 3


def test_ragged_rows_are_rejected() -> None:
    with pytest.raises(ValueError, match="rectangular"):
        Board.from_rows([[CellState.EMPTY] * 3, [CellState.EMPTY] * 2])


def test_clear_full_lines_shifts_rows_down() -> None:
    g = np.array([[0, 1], [1, 1], [1, 0]], dtype=np.uint8)
    out, cleared = clear_full_lines(g)
    assert cleared == 1
    assert out.tolist() == [[0, 0], [0, 1], [1, 0]]
    assert g.tolist() == [[0, 1], [1, 1], [1, 0]]


def test_metrics_count_holes_and_heights() -> None:
    g = np.zeros((4, 3), dtype=np.uint8)
    g[1, 0] = 1  # column 0 height 3 with two holes under it
    g[3, 2] = 2
    m = board_snapshot_metrics_from_grid(g)
    assert m.holes == 2
    assert m.max_height == 3
    assert m.agg_height == 4
    assert m.bumpiness == 3 + 1


def test_default_pieceset_has_all_seven_kinds() -> None:
    ps = default_pieceset()
    assert set(ps.kinds()) == set(PieceKind)
    assert ps.num_rotations(PieceKind.O) == 1
    assert all(ps.num_rotations(k) == 4 for k in PieceKind if k != PieceKind.O)
    assert all(int(ps.mask(k, r).sum()) == 4 for k in PieceKind for r in range(ps.num_rotations(k)))


def test_pieceset_yaml_must_cover_every_kind(tmp_path: Path) -> None:
    p = tmp_path / "pieces.yaml"
    p.write_text('pieces:\n  O:\n    rotations:\n      - ["##", "##"]\n', encoding="utf-8")
    with pytest.raises(ValueError, match="missing kinds"):
        PieceSet.from_yaml(p)


def test_placement_cache_spawn_and_columns() -> None:
    cache = StaticPlacementCache.build(pieces=default_pieceset(), board_w=10)
    assert cache.spawn_pose(PieceKind.T) == ActivePiece(kind=PieceKind.T, rot=0, x=3, y=-SPAWN_ROWS_ABOVE)
    assert cache.spawn_pose(PieceKind.I).x == 3
    assert cache.spawn_pose(PieceKind.O).x == 4

    # I horizontal: 7 columns; I vertical: 10 columns
    i_places = cache.placements(PieceKind.I)
    assert sum(1 for r, _c in i_places if r == 0) == 7
    assert sum(1 for r, _c in i_places if r == 1) == 10
    assert len(cache.placements(PieceKind.O)) == 9

    assert cache.bbox_left_to_engine_x(PieceKind.I, 1, 9) == 7


def test_rows_above_the_field_are_open_but_walls_are_not() -> None:
    rows = empty_rows(w=4, h=4)
    rows[3] = ["garbage"] * 4
    board = board_of(rows)
    ps = default_pieceset()

    # T rot 0 at y=-2 fills rows -2 and -1 only
    assert not collides(board=board, pieces=ps, kind=PieceKind.T, rot=0, px=0, py=-2)
    assert collides(board=board, pieces=ps, kind=PieceKind.T, rot=0, px=0, py=-1)
    assert collides(board=board, pieces=ps, kind=PieceKind.T, rot=0, px=2, py=-2)


def test_drop_simulator_locks_and_clears() -> None:
    rows = empty_rows(w=4, h=4)
    rows[0] = ["garbage", "garbage", "garbage", "empty"]
    board = board_of(rows)
    sim = DropSimulator(pieces=default_pieceset())

    pose = ActivePiece(kind=PieceKind.I, rot=1, x=1, y=-2)
    res = sim.hard_drop(board, pose)
    assert res.landed.y == 0
    assert not res.locked_out
    assert res.cleared_lines == 1
    assert res.garbage_cleared == 1
    assert not res.perfect_clear
    assert res.metrics_after.max_height == 3
    assert board.grid[3, 3] == 0


def test_drop_onto_a_full_stack_locks_out() -> None:
    rows = empty_rows(w=4, h=4)
    for y in range(4):
        rows[y] = ["garbage", "garbage", "empty", "empty"]
    sim = DropSimulator(pieces=default_pieceset())

    res = sim.hard_drop(board_of(rows), ActivePiece(kind=PieceKind.O, rot=0, x=0, y=-2))
    assert res.landed.y == -2
    assert res.locked_out
    assert int(np.count_nonzero(res.grid_after)) == 8


def test_drop_rejects_colliding_pose() -> None:
    sim = DropSimulator(pieces=default_pieceset())
    with pytest.raises(ValueError, match="does not fit"):
        sim.drop(empty_board(w=4, h=4), ActivePiece(kind=PieceKind.T, rot=0, x=3, y=0))
