# src/tetris_bot/game/core/simulate.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from tetris_bot.game.core.board import Board, clear_full_lines
from tetris_bot.game.core.constants import EMPTY_CELL
from tetris_bot.game.core.metrics import BoardSnapshotMetrics, board_snapshot_metrics_from_grid
from tetris_bot.game.core.pieceset import PieceSet
from tetris_bot.game.core.rotation import collides
from tetris_bot.game.core.types import CELL_CODES, ActivePiece, CellState


@dataclass(frozen=True)
class SimPlacementResult:
    """
    Result of hard-dropping a pose onto a LOCKED grid.

    Notes:
      - grid_after is a NEW array containing the post-lock, post-clear board.
      - landed is the pose after the drop (same x/rot, final y).
      - perfect_clear is True iff the board is empty after the clear.
      - garbage_cleared counts cleared rows that contained garbage cells.
      - locked_out is True if any cell locked above the visible field; those
        cells are not written to grid_after.
    """
    grid_after: np.ndarray
    landed: ActivePiece
    locked_out: bool
    cleared_lines: int
    garbage_cleared: int
    perfect_clear: bool
    metrics_after: BoardSnapshotMetrics


class DropSimulator:
    """
    Pure, side-effect-free hard-drop simulator over a Board.
    """

    def __init__(self, *, pieces: PieceSet) -> None:
        self.pieces = pieces

    def fits(self, board: Board, pose: ActivePiece) -> bool:
        return not collides(
            board=board, pieces=self.pieces, kind=pose.kind, rot=pose.rot, px=int(pose.x), py=int(pose.y)
        )

    def drop(self, board: Board, pose: ActivePiece) -> ActivePiece:
        """
        Move `pose` down until the next row would collide. `pose` must fit.
        """
        if not self.fits(board, pose):
            raise ValueError(f"pose does not fit the board: {pose}")
        y = int(pose.y)
        while not collides(board=board, pieces=self.pieces, kind=pose.kind, rot=pose.rot, px=pose.x, py=y + 1):
            y += 1
        return ActivePiece(kind=pose.kind, rot=pose.rot, x=pose.x, y=y)

    def hard_drop(self, board: Board, pose: ActivePiece) -> SimPlacementResult:
        landed = self.drop(board, pose)

        g1 = np.array(board.grid, copy=True)
        placed = self._lock_into_grid(g1, landed)

        garbage_code = CELL_CODES[CellState.GARBAGE]
        full = np.all(g1 != EMPTY_CELL, axis=1)
        garbage_cleared = int(np.sum(full & np.any(g1 == garbage_code, axis=1)))

        g2, cleared = clear_full_lines(g1)
        return SimPlacementResult(
            grid_after=g2,
            landed=landed,
            locked_out=len(placed) < int(self.pieces.mask(landed.kind, landed.rot).sum()),
            cleared_lines=int(cleared),
            garbage_cleared=garbage_cleared,
            perfect_clear=bool(cleared > 0 and not np.any(g2 != EMPTY_CELL)),
            metrics_after=board_snapshot_metrics_from_grid(g2),
        )

    def _lock_into_grid(self, grid: np.ndarray, pose: ActivePiece) -> Sequence[Tuple[int, int]]:
        """
        Lock the pose into `grid` (in-place). Returns placed cell coordinates [(x,y), ...].
        Cells above the visible field (y < 0) are dropped.
        """
        m = self.pieces.mask(pose.kind, pose.rot)
        code = CELL_CODES[CellState.PIECE]

        placed: list[tuple[int, int]] = []
        ys, xs = np.nonzero(m)
        for yy, xx in zip(ys.tolist(), xs.tolist()):
            x = int(pose.x + xx)
            y = int(pose.y + yy)
            if y < 0:
                continue
            grid[y, x] = code
            placed.append((x, y))
        return placed


__all__ = ["DropSimulator", "SimPlacementResult"]
