# tests/test_heuristic_chooser.py
from __future__ import annotations

from typing import Optional, Sequence

from helpers import board_of, empty_board, empty_rows
from tetris_bot.agents.chooser import Placement, PlacementRequest
from tetris_bot.agents.heuristic_agent import HeuristicChooser
from tetris_bot.agents.keys import KeyPlanner
from tetris_bot.config.rules import build_rule_configuration
from tetris_bot.game.core.board import Board
from tetris_bot.game.core.types import InputAction, PieceKind


def _well_board(depth: int = 4, well_col: int = 9) -> Board:
    rows = empty_rows()
    for y in range(depth):
        rows[y] = ["garbage"] * 10
        rows[y][well_col] = "empty"
    return board_of(rows)


def _request(
        *,
        board: Board,
        current: PieceKind,
        hold: Optional[PieceKind] = None,
        queue: Sequence[PieceKind] = (),
        garbage: Sequence[int] = (),
) -> PlacementRequest:
    return PlacementRequest(
        board=board,
        current=current,
        hold=hold,
        queue=tuple(queue),
        garbage=tuple(garbage),
        combo=-1,
        b2b=0,
        rules=build_rule_configuration(board_width=board.w, board_height=board.h),
        garbage_multiplier=1.0,
        garbage_cap=8,
    )


def test_takes_the_tetris_when_the_well_is_open() -> None:
    req = _request(board=_well_board(), current=PieceKind.I)
    choice = HeuristicChooser()(req)
    assert choice == Placement(kind=PieceKind.I, rot=1, col=9, use_hold=False)

    keys = KeyPlanner().plan(req, choice)
    assert keys == (InputAction.ROTATE_CW, InputAction.DAS_RIGHT, InputAction.HARD_DROP)


def test_holds_when_the_held_piece_is_better() -> None:
    req = _request(board=_well_board(), current=PieceKind.S, hold=PieceKind.I)
    choice = HeuristicChooser()(req)
    assert choice is not None
    assert choice.use_hold
    assert (choice.kind, choice.rot, choice.col) == (PieceKind.I, 1, 9)


def test_empty_hold_slot_considers_queue_front() -> None:
    req = _request(board=_well_board(), current=PieceKind.Z, queue=[PieceKind.I, PieceKind.O])
    choice = HeuristicChooser()(req)
    assert choice is not None
    assert choice.use_hold and choice.kind == PieceKind.I


def test_hold_of_same_kind_is_not_enumerated_twice() -> None:
    chooser = HeuristicChooser()
    board = empty_board()
    alone = chooser.candidates(_request(board=board, current=PieceKind.T))
    same = chooser.candidates(_request(board=board, current=PieceKind.T, hold=PieceKind.T))
    assert len(alone) == len(same)
    assert not any(c.placement.use_hold for c in same)


def test_every_candidate_is_reachable() -> None:
    chooser = HeuristicChooser()
    req = _request(board=_well_board(), current=PieceKind.J, hold=PieceKind.L)
    planner = KeyPlanner()
    cands = chooser.candidates(req)
    assert cands
    for c in cands:
        keys = planner.plan(req, c.placement)
        assert keys[-1] == InputAction.HARD_DROP


def test_prefers_flat_placement_on_empty_board() -> None:
    req = _request(board=empty_board(), current=PieceKind.O)
    choice = HeuristicChooser()(req)
    assert choice is not None
    best = max(HeuristicChooser().candidates(req), key=lambda c: c.score)
    assert best.result.metrics_after.holes == 0
    assert best.result.metrics_after.max_height == 2


def test_choice_is_deterministic() -> None:
    req = _request(board=_well_board(depth=3, well_col=4), current=PieceKind.T, queue=[PieceKind.S])
    assert HeuristicChooser()(req) == HeuristicChooser()(req)


def test_no_placement_when_every_drop_locks_out() -> None:
    rows = empty_rows()
    rows[18] = ["garbage"] * 10
    rows[19] = ["garbage"] * 10
    req = _request(board=board_of(rows), current=PieceKind.T, queue=[PieceKind.I])
    assert HeuristicChooser()(req) is None


def test_attack_counts_toward_the_score() -> None:
    chooser = HeuristicChooser()
    req = _request(board=_well_board(), current=PieceKind.I)
    by_place = {(c.placement.rot, c.placement.col): c for c in chooser.candidates(req)}
    tetris = by_place[(1, 9)]
    assert tetris.result.cleared_lines == 4
    assert tetris.result.perfect_clear
    assert tetris.outcome.total > 0


def test_tall_stack_under_spawn_picks_an_open_side() -> None:
    rows = empty_rows()
    for y in range(19):
        for x in (3, 4, 5, 6):
            rows[y][x] = "garbage"
    req = _request(board=board_of(rows), current=PieceKind.T)
    choice = HeuristicChooser()(req)
    assert choice is not None
    assert choice.col + 2 <= 3 or choice.col >= 7

    keys = KeyPlanner().plan(req, choice)
    assert len(keys) > 1
    assert keys[-1] == InputAction.HARD_DROP
